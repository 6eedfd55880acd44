"""Access to the host's record sources."""
import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from translation_extractor.models import SourceOrigin

logger = logging.getLogger(__name__)


class RecordSourceProvider(ABC):
    """
    Capability interface over the host's localization subsystem.

    Implementations hide however the host exposes its sources (introspection,
    an API, a dump on disk); the extractor only sees these four operations.
    """

    @abstractmethod
    def iter_sources(self) -> Iterable[Tuple[str, Any]]:
        """Yield (locale tag, opaque source handle) pairs."""

    @abstractmethod
    def read_entries(self, handle: Any) -> Iterable[Tuple[str, str]]:
        """Return the (key, value) records a source declares. May raise."""

    @abstractmethod
    def describe_origin(self, handle: Any) -> Optional[SourceOrigin]:
        """Return the provenance of a source, or None when it cannot be determined."""

    @abstractmethod
    def active_view(self) -> Mapping[str, str]:
        """Return the host's merged key -> value view of every registered record."""


class SnapshotRecordSourceProvider(RecordSourceProvider):
    """
    Provider backed by a JSON snapshot of the host's localization state.

    Snapshot layout::

        {
          "sources": [
            {"locale": "en-US",
             "origin": {"package": "Anarchy", "namespace": "Anarchy.Settings", "kind": "LocaleEN"},
             "entries": {"Options.SECTION[Anarchy.Anarchy.AnarchyMod]": "Anarchy"}}
          ],
          "active": {"Options.SECTION[Anarchy.Anarchy.AnarchyMod]": "Anarchy"}
        }

    A source may carry "error" instead of "entries" to stand for a source the
    host could not read.
    """

    def __init__(self, sources: List[Dict[str, Any]], active: Optional[Mapping[str, str]] = None):
        self._sources = list(sources)
        self._active = dict(active or {})

    @classmethod
    def from_file(cls, snapshot_path: str) -> "SnapshotRecordSourceProvider":
        with open(snapshot_path, 'r', encoding='utf-8') as f:
            payload = json.load(f)
        if not isinstance(payload, dict):
            raise ValueError(f"Snapshot '{snapshot_path}' must contain a JSON object.")
        sources = payload.get('sources') or []
        logger.info("Loaded snapshot '%s' with %d source(s).", snapshot_path, len(sources))
        return cls(sources, payload.get('active'))

    def iter_sources(self) -> Iterable[Tuple[str, Any]]:
        for index, source in enumerate(self._sources):
            yield source.get('locale') or '', index

    def read_entries(self, handle: Any) -> Iterable[Tuple[str, str]]:
        source = self._sources[handle]
        if source.get('error'):
            raise IOError(source['error'])
        return list((source.get('entries') or {}).items())

    def describe_origin(self, handle: Any) -> Optional[SourceOrigin]:
        origin = self._sources[handle].get('origin')
        if not origin:
            return None
        return SourceOrigin(
            package=origin.get('package'),
            namespace=origin.get('namespace'),
            kind=origin.get('kind'),
        )

    def active_view(self) -> Mapping[str, str]:
        return dict(self._active)
