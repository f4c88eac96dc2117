# common/storage.py
from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Dict, List, Protocol, Any

from pydantic import TypeAdapter, ValidationError

from common.models import Entry

log = logging.getLogger(__name__)

_ENTRIES = TypeAdapter(List[Entry])


class EntryStorage(Protocol):
    """Load/save pair over one key-value slot holding the ordered entries."""

    def load(self) -> List[Entry]: ...

    def save(self, entries: List[Entry]) -> None: ...


def dump_entries(entries: List[Entry]) -> str:
    return _ENTRIES.dump_json(entries, by_alias=True).decode("utf-8")

def parse_entries(raw: Any) -> List[Entry]:
    if not raw:
        return []
    if isinstance(raw, (str, bytes)):
        return _ENTRIES.validate_json(raw)
    return _ENTRIES.validate_python(raw)


class JsonFileStorage:
    """
    Entries kept as a JSON string under one named slot of a JSON document on disk,
    the way a browser keeps them under one localStorage key.
    Other slots in the same document are left as they are.
    """

    def __init__(self, path: str | Path, key: str = "entries"):
        self.path = Path(path)
        self.key = key

    def _read_doc(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            log.warning("storage %s unreadable: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def load(self) -> List[Entry]:
        raw = self._read_doc().get(self.key)
        try:
            return parse_entries(raw)
        except ValidationError as e:
            log.warning("slot %r in %s does not hold entries: %s", self.key, self.path, e)
            return []

    def save(self, entries: List[Entry]) -> None:
        doc = self._read_doc()
        doc[self.key] = dump_entries(entries)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as f:
            json.dump(doc, f, ensure_ascii=False, indent=2)


class MemoryStorage:
    """Same slot layout, kept in a dict. Used by tests and throwaway sessions."""

    def __init__(self, slots: Dict[str, str] | None = None, key: str = "entries"):
        self.slots: Dict[str, str] = slots if slots is not None else {}
        self.key = key
        self.saves = 0

    def load(self) -> List[Entry]:
        try:
            return parse_entries(self.slots.get(self.key))
        except ValidationError as e:
            log.warning("slot %r does not hold entries: %s", self.key, e)
            return []

    def save(self, entries: List[Entry]) -> None:
        self.slots[self.key] = dump_entries(entries)
        self.saves += 1
