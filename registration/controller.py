# registration/controller.py
"""
Owns the live form state and the entry store, and turns view events into
transitions. The view layer reads `view()` and subscribes for changes.
"""
from __future__ import annotations
import asyncio
import logging
from typing import Callable, List, Optional

from common.files import read_as_data_url
from common.models import FieldChange, FormState, FormView, ProfilePic, SubmitResult
from registration import state as transitions
from registration.entries import EntryStore

log = logging.getLogger(__name__)

Listener = Callable[[FormView], None]


class RegistrationController:

    def __init__(self, store: EntryStore, form: Optional[FormState] = None):
        self.store = store
        self.form = form or transitions.INITIAL_STATE
        self._preview_task: Optional[asyncio.Task] = None
        self._listeners: List[Listener] = []

    # ---------- rendering surface ----------
    def view(self) -> FormView:
        return FormView(
            draft=self.form.draft,
            errors=self.form.errors,
            preview=self.form.preview,
            entries=self.store.entries,
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call `listener` with a fresh view after every change; returns an unsubscribe function."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)
        return _unsubscribe

    def _notify(self) -> None:
        if not self._listeners:
            return
        snapshot = self.view()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                # a broken view must not break the form
                log.exception("view listener failed")

    def _set_form(self, form: FormState) -> None:
        self.form = form
        self._notify()

    # ---------- field events ----------
    def change(self, event: FieldChange) -> FormState:
        """Apply a text, radio or checkbox change. Raises ValueError for a malformed event."""
        self._set_form(transitions.apply_change(self.form, event))
        return self.form

    def set_text(self, name: str, value: str) -> FormState:
        return self.change(FieldChange(name=name, value=value, kind="text"))

    def set_gender(self, value: Optional[str]) -> FormState:
        return self.change(FieldChange(name="gender", value=value, kind="radio"))

    def toggle_skill(self, value: str) -> FormState:
        return self.change(FieldChange(name="skills", value=value, kind="checkbox"))

    def select_file(self, pic: Optional[ProfilePic]) -> Optional[asyncio.Task]:
        """
        Store the picture now and start reading its preview in the background.
        Any read still running for an earlier file is cancelled. Passing None
        (input cleared) empties the field and starts nothing.
        Must be called from inside a running event loop when a file is given.
        """
        self._cancel_preview()
        self._set_form(transitions.set_profile_pic(self.form, pic))
        if pic is None:
            return None
        task = asyncio.get_running_loop().create_task(self._read_preview(pic))
        self._preview_task = task
        return task

    async def _read_preview(self, pic: ProfilePic) -> None:
        try:
            preview = await asyncio.to_thread(read_as_data_url, pic)
        except (OSError, ValueError) as e:
            log.warning("no preview for %s: %s", pic.filename, e)
            preview = None
        self._set_form(transitions.apply_preview(self.form, pic.ref, preview))

    def _cancel_preview(self) -> None:
        task, self._preview_task = self._preview_task, None
        if task is not None and not task.done():
            task.cancel()

    async def wait_preview(self) -> None:
        """Wait for the current preview read, if any, to finish."""
        task = self._preview_task
        if task is None:
            return
        try:
            await task
        except asyncio.CancelledError:
            if not task.cancelled():
                raise

    # ---------- lifecycle ----------
    def submit(self) -> SubmitResult:
        form, result = self.store.submit(self.form)
        if result.ok:
            self._cancel_preview()
        self._set_form(form)
        return result

    def reset(self) -> FormState:
        self._cancel_preview()
        self._set_form(transitions.reset())
        return self.form

    def delete(self, entry_id: int) -> bool:
        removed = self.store.delete(entry_id)
        self._notify()
        return removed
