# registration/entries.py
from __future__ import annotations
import logging
import time
from typing import Callable, List, Optional, Tuple

from common.models import Entry, FormState, SubmitResult
from common.storage import EntryStorage
from registration import state as transitions

log = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


class EntryStore:
    """
    Submitted entries, newest first, written through to storage after every change.
    Storage is loaded once here; from then on the in-memory list is authoritative
    and a failed write only gets logged.
    """

    def __init__(self, storage: EntryStorage, clock: Callable[[], int] = _now_ms):
        self.storage = storage
        self.clock = clock
        self._entries: List[Entry] = list(storage.load())
        self._last_id = max((e.id for e in self._entries), default=0)
        log.info("loaded %d entries", len(self._entries))

    @property
    def entries(self) -> List[Entry]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, entry_id: int) -> Optional[Entry]:
        return next((e for e in self._entries if e.id == entry_id), None)

    def submit(self, form: FormState) -> Tuple[FormState, SubmitResult]:
        """
        Run the submit transition against the current entries.
        Returns the form state to keep (reset on success, errors set on failure)
        and the outcome for the caller.
        """
        new_form, entries, entry = transitions.submit(form, self._entries, self.clock(), self._last_id)
        if entry is None:
            log.info("submit rejected: %s", ", ".join(sorted(new_form.errors)))
            return new_form, SubmitResult(ok=False, errors=new_form.errors)

        self._set(entries)
        self._last_id = entry.id
        log.info("entry %s added (%d total)", entry.id, len(self._entries))
        return new_form, SubmitResult(ok=True, entry=entry)

    def delete(self, entry_id: int) -> bool:
        """Remove the entry with this id. Unknown ids are a no-op; returns whether one was removed."""
        before = len(self._entries)
        self._set(transitions.delete(self._entries, entry_id))
        removed = len(self._entries) < before
        if removed:
            log.info("entry %s deleted (%d left)", entry_id, len(self._entries))
        return removed

    def _set(self, entries: List[Entry]) -> None:
        self._entries = entries
        self._persist()

    def _persist(self) -> None:
        try:
            self.storage.save(list(self._entries))
        except Exception as e:
            # best effort; the next successful save writes the full list again
            log.error("saving %d entries failed: %s", len(self._entries), e)
