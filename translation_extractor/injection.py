"""Injecting saved translations back into the host's localization subsystem."""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from translation_extractor.loader import build_dictionary, compute_fingerprint, load_all
from translation_extractor.persistence import TranslationStore

logger = logging.getLogger(__name__)

MANUAL_TRIGGER = "manual_request"
TRANSLATIONS_SLOT = "translations"


class LocalizationHost(ABC):
    """The part of the host that accepts replacement dictionaries."""

    @abstractmethod
    def add_source(self, locale_id: str, entries: Mapping[str, str]) -> Any:
        """Register a dictionary for a locale and return a handle to it."""

    def retire_source(self, handle: Any) -> None:
        """Stop honouring a previously registered dictionary. Hosts without removal support ignore this."""


@dataclass(frozen=True)
class Registration:
    slot: str
    locale_id: str
    handle: Any
    entry_count: int


class InjectedSourceLedger:
    """
    Tracks the dictionaries this plugin has injected, one per slot.

    Activating a new dictionary for a slot supersedes the previous one.
    """

    def __init__(self):
        self._registrations: Dict[str, Registration] = {}

    def activate(
            self,
            host: LocalizationHost,
            slot: str,
            locale_id: str,
            entries: Mapping[str, str]
    ) -> Registration:
        handle = host.add_source(locale_id, dict(entries))
        previous = self._registrations.get(slot)
        registration = Registration(slot=slot, locale_id=locale_id, handle=handle, entry_count=len(entries))
        self._registrations[slot] = registration
        if previous is not None:
            host.retire_source(previous.handle)
            logger.debug("Slot '%s': superseded previous registration (%d entries).", slot, previous.entry_count)
        return registration

    def active(self, slot: str) -> Optional[Registration]:
        return self._registrations.get(slot)

    def __len__(self) -> int:
        return len(self._registrations)

    def reset(self) -> None:
        self._registrations.clear()


class ReloadOutcome(Enum):
    DISABLED = "disabled"
    NO_FILES = "no_files"
    NO_ENTRIES = "no_entries"
    UNCHANGED = "unchanged"
    INJECTED = "injected"
    FAILED = "failed"


class TranslationReloader:
    """
    Loads the saved translation files and injects their translations for the
    target locale, skipping the injection when nothing changed since the last one.
    """

    def __init__(
            self,
            host: LocalizationHost,
            translations_dir: str,
            target_locale_id: str,
            ledger: Optional[InjectedSourceLedger] = None,
            enabled: bool = True,
            store: Optional[TranslationStore] = None
    ):
        self.host = host
        self.translations_dir = translations_dir
        self.target_locale_id = target_locale_id
        self.ledger = ledger if ledger is not None else InjectedSourceLedger()
        self.enabled = enabled
        self.store = store or TranslationStore()
        self.last_fingerprint: Optional[str] = None

    def reload(self, trigger: str) -> ReloadOutcome:
        """
        Run one load-and-inject pass.

        Args:
            trigger: Why the reload runs; MANUAL_TRIGGER always injects.

        Returns:
            What the pass did.
        """
        if not self.enabled:
            logger.info("Translation loading is disabled (trigger=%s).", trigger)
            return ReloadOutcome.DISABLED

        logger.info("--- Loading translations (trigger=%s) ---", trigger)
        translation_files = load_all(self.translations_dir, self.store)
        if not translation_files:
            logger.info("No translation files found. Place JSON files in: %s", self.translations_dir)
            return ReloadOutcome.NO_FILES

        dictionary = build_dictionary(translation_files)
        if not dictionary:
            logger.info("No translated entries found in loaded files.")
            return ReloadOutcome.NO_ENTRIES

        fingerprint = compute_fingerprint(dictionary)
        if trigger != MANUAL_TRIGGER and fingerprint == self.last_fingerprint:
            logger.info("Dictionary unchanged (fingerprint=%s, trigger=%s), skipping injection.", fingerprint, trigger)
            return ReloadOutcome.UNCHANGED

        try:
            self.ledger.activate(self.host, TRANSLATIONS_SLOT, self.target_locale_id, dictionary)
        except Exception:
            logger.exception("Failed to inject translations for locale '%s'.", self.target_locale_id)
            return ReloadOutcome.FAILED

        self.last_fingerprint = fingerprint
        logger.info(
            "--- Translation loading complete (trigger=%s): %d file(s), %d entries ---",
            trigger, len(translation_files), len(dictionary)
        )
        return ReloadOutcome.INJECTED
