# registration/state.py
"""
Pure form transitions: (FormState, event) -> FormState.
Nothing here touches storage, tasks or clocks, so every rule can be tested
on plain values.
"""
from __future__ import annotations
from typing import List, Optional, Tuple

from common.models import (
    EMPTY_DRAFT, GENDER_OPTIONS, SKILL_OPTIONS,
    Entry, FieldChange, FormState, ProfilePic,
)
from common.validators import validate_draft

# form field name -> FormDraft attribute
TEXT_FIELDS = {"fullName": "full_name", "email": "email", "phone": "phone"}

INITIAL_STATE = FormState()


def _with_draft(state: FormState, **changes) -> FormState:
    return state.model_copy(update={"draft": state.draft.model_copy(update=changes)})


def set_text(state: FormState, name: str, value: str) -> FormState:
    """Replace a text field verbatim; trimming only happens inside validation."""
    attr = TEXT_FIELDS.get(name)
    if attr is None:
        raise ValueError(f"not a text field: {name}")
    return _with_draft(state, **{attr: value or ""})


def set_gender(state: FormState, value: Optional[str]) -> FormState:
    if value and value not in GENDER_OPTIONS:
        raise ValueError(f"unknown gender: {value}")
    return _with_draft(state, gender=value or None)


def toggle_skill(state: FormState, value: str) -> FormState:
    if value not in SKILL_OPTIONS:
        raise ValueError(f"unknown skill: {value}")
    skills = state.draft.skills
    if value in skills:
        skills = tuple(s for s in skills if s != value)
    else:
        skills = skills + (value,)
    return _with_draft(state, skills=skills)


def set_profile_pic(state: FormState, pic: Optional[ProfilePic]) -> FormState:
    """
    Store the selected file (or clear it). The preview is produced later by
    apply_preview once the file has been read; clearing the input drops it at once.
    """
    if pic is None:
        return state.model_copy(update={
            "draft": state.draft.model_copy(update={"profile_pic": None}),
            "preview": None,
            "preview_ref": None,
        })
    return _with_draft(state, profile_pic=pic)


def apply_preview(state: FormState, ref: str, preview: Optional[str]) -> FormState:
    """Accept a finished read only if it belongs to the file selected right now."""
    current = state.draft.profile_pic
    if current is None or current.ref != ref:
        return state
    return state.model_copy(update={"preview": preview, "preview_ref": ref})


def apply_change(state: FormState, change: FieldChange) -> FormState:
    """Route a non-file field change event to its update rule."""
    if change.kind == "text":
        return set_text(state, change.name, change.value or "")
    if change.kind == "radio" and change.name == "gender":
        return set_gender(state, change.value)
    if change.kind == "checkbox" and change.name == "skills":
        return toggle_skill(state, change.value or "")
    if change.kind == "file":
        raise ValueError("file changes carry a file, use set_profile_pic")
    raise ValueError(f"field {change.name!r} does not take {change.kind} input")


def reset() -> FormState:
    return FormState(draft=EMPTY_DRAFT, preview=None, errors={})


def current_preview(state: FormState) -> Optional[str]:
    """The preview, if it was read from the picture selected now; None while that read is pending."""
    pic = state.draft.profile_pic
    if pic is None or state.preview_ref != pic.ref:
        return None
    return state.preview


def next_entry_id(entries: List[Entry], now_ms: int, last_id: int = 0) -> int:
    """Creation time in ms, moved past the last issued id and any id already taken."""
    taken = {e.id for e in entries}
    candidate = max(now_ms, last_id + 1)
    while candidate in taken:
        candidate += 1
    return candidate


def submit(
    state: FormState, entries: List[Entry], now_ms: int, last_id: int = 0
) -> Tuple[FormState, List[Entry], Optional[Entry]]:
    """
    Validate the draft. Invalid: same draft, preview and entries, fresh errors.
    Valid: new entry at the head of the list and an empty form. A preview left over
    from a previously selected file is not carried into the entry.
    """
    errors = validate_draft(state.draft)
    if errors:
        return state.model_copy(update={"errors": errors}), entries, None

    entry = Entry.from_draft(next_entry_id(entries, now_ms, last_id), state.draft, current_preview(state))
    return reset(), [entry, *entries], entry


def delete(entries: List[Entry], entry_id: int) -> List[Entry]:
    return [e for e in entries if e.id != entry_id]
