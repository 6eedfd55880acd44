"""Data model shared by the extraction pipeline."""
from collections.abc import MutableMapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, Optional, Tuple


@dataclass(frozen=True)
class SourceOrigin:
    """Best-effort provenance of a record source."""
    # Package / assembly the source object comes from; None when unknown.
    package: Optional[str] = None
    # Namespace of the source type, e.g. "Anarchy.Settings".
    namespace: Optional[str] = None
    # Short type name of the source, e.g. "MemorySource".
    kind: Optional[str] = None


class OwnerGroups(MutableMapping):
    """
    Mapping of owner id -> (key -> value).

    Owner ids compare case-insensitively and keep the casing they were first
    stored with. Iteration follows insertion order.
    """

    def __init__(self, initial=None):
        self._groups: Dict[str, Tuple[str, Dict[str, str]]] = {}
        if initial:
            for owner_id, entries in dict(initial).items():
                self[owner_id] = entries

    def __getitem__(self, owner_id: str) -> Dict[str, str]:
        return self._groups[owner_id.lower()][1]

    def __setitem__(self, owner_id: str, entries: Dict[str, str]) -> None:
        folded = owner_id.lower()
        display = self._groups[folded][0] if folded in self._groups else owner_id
        self._groups[folded] = (display, entries)

    def __delitem__(self, owner_id: str) -> None:
        del self._groups[owner_id.lower()]

    def __iter__(self) -> Iterator[str]:
        return (display for display, _ in list(self._groups.values()))

    def __len__(self) -> int:
        return len(self._groups)

    def __contains__(self, owner_id: object) -> bool:
        return isinstance(owner_id, str) and owner_id.lower() in self._groups

    def display_name(self, owner_id: str) -> str:
        return self._groups[owner_id.lower()][0]

    def total_entries(self) -> int:
        return sum(len(entries) for _, entries in self._groups.values())

    def all_keys(self) -> set:
        keys = set()
        for _, entries in self._groups.values():
            keys.update(entries)
        return keys

    def to_dict(self) -> Dict[str, Dict[str, str]]:
        return {display: dict(entries) for display, entries in self._groups.values()}

    def __repr__(self) -> str:
        return f"OwnerGroups({self.to_dict()!r})"


class SourceStatus(Enum):
    """Outcome of processing one record source."""
    ACCEPTED = "accepted"
    VANILLA = "vanilla"
    EMPTY = "empty"
    SELF = "self"
    READ_ERROR = "read_error"


@dataclass
class SourceOutcome:
    status: SourceStatus
    locale: str
    label: str
    owner_id: Optional[str] = None
    entries: Dict[str, str] = field(default_factory=dict)
    error: Optional[str] = None


@dataclass
class TranslationEntry:
    """One key of a persisted translation file. An empty translation means untranslated."""
    original: str
    translation: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {"original": self.original, "translation": self.translation}


@dataclass
class TranslationFile:
    """
    On-disk translation record for one owner.

    Serialized as::

        {
          "modId": "Anarchy",
          "modName": "Anarchy",
          "version": "2026-02-19",
          "entries": {
            "Options.SECTION[Anarchy.Anarchy.AnarchyMod]": {
              "original": "Anarchy",
              "translation": ""
            }
          }
        }
    """
    mod_id: str
    mod_name: str
    version: str
    entries: Dict[str, TranslationEntry] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "modId": self.mod_id,
            "modName": self.mod_name,
            "version": self.version,
            "entries": {key: entry.to_dict() for key, entry in self.entries.items()},
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "TranslationFile":
        entries = {}
        for key, raw in (payload.get("entries") or {}).items():
            entries[key] = TranslationEntry(
                original=raw.get("original") or "",
                translation=raw.get("translation") or "",
            )
        return cls(
            mod_id=payload.get("modId") or "",
            mod_name=payload.get("modName") or "",
            version=payload.get("version") or "",
            entries=entries,
        )

    def translated_count(self) -> int:
        return sum(1 for entry in self.entries.values() if entry.translation)


@dataclass(frozen=True)
class ExtractionResult:
    """Summary of one extraction run."""
    total_owners: int = 0
    total_entries: int = 0
    written_files: Tuple[str, ...] = ()
    failed_owners: Tuple[str, ...] = ()
    error_message: Optional[str] = None

    @property
    def success(self) -> bool:
        return not self.error_message and len(self.written_files) > 0
