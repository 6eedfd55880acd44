"""Loading saved translation files into a single key -> translation dictionary."""
import hashlib
import logging
import os
from typing import Dict, List, Mapping, Optional

from translation_extractor.models import TranslationFile
from translation_extractor.persistence import TranslationFileError, TranslationStore

logger = logging.getLogger(__name__)


def load_file(file_path: str, store: Optional[TranslationStore] = None) -> Optional[TranslationFile]:
    """
    Load a single translation file.

    Args:
        file_path: Path to the JSON file.
        store: Filesystem access; a default TranslationStore when omitted.

    Returns:
        The parsed file, or None if it does not exist or has no entries.

    Raises:
        TranslationFileError: If the file cannot be parsed.
    """
    store = store or TranslationStore()
    if not os.path.isfile(file_path):
        logger.warning("Translation file not found: %s", file_path)
        return None

    translation_file = store.read(file_path)
    if not translation_file.entries:
        logger.warning("No entries found in: %s", file_path)
        return None
    return translation_file


def load_all(translations_dir: str, store: Optional[TranslationStore] = None) -> List[TranslationFile]:
    """
    Load every translation file below a directory, recursively.

    Files that fail to parse are logged and skipped. Top-level files (legacy
    layouts) come first and per-mod subdirectory files last, each in sorted path
    order, so a canonical file overrides a stale legacy copy.
    """
    results: List[TranslationFile] = []
    if not os.path.isdir(translations_dir):
        logger.warning("Translations directory not found: %s", translations_dir)
        return results

    root = os.path.normpath(translations_dir)
    found = []
    for dirpath, _, filenames in os.walk(translations_dir):
        nested = os.path.normpath(dirpath) != root
        for filename in filenames:
            if filename.endswith('.json'):
                found.append((nested, os.path.join(dirpath, filename)))
    json_files = [path for _, path in sorted(found)]

    logger.info("Found %d translation file(s) in: %s", len(json_files), translations_dir)

    for file_path in json_files:
        try:
            translation_file = load_file(file_path, store)
        except (TranslationFileError, OSError) as load_exc:
            logger.error("Failed to load translation file %s: %s", file_path, load_exc)
            continue
        if translation_file is None:
            continue
        results.append(translation_file)
        logger.debug(
            "Loaded: %s (modId=%s, entries=%d, translated=%d)",
            os.path.basename(file_path), translation_file.mod_id,
            len(translation_file.entries), translation_file.translated_count()
        )

    return results


def build_dictionary(translation_files: List[TranslationFile]) -> Dict[str, str]:
    """
    Build the key -> translation dictionary to inject into the game.

    Untranslated entries are skipped; when two files translate the same key the
    later file wins.
    """
    dictionary: Dict[str, str] = {}
    overwrite_count = 0

    for translation_file in translation_files:
        for key, entry in translation_file.entries.items():
            if not entry.translation:
                continue
            if key in dictionary:
                overwrite_count += 1
                logger.debug("Overwriting key: %s (from %s)", key, translation_file.mod_id)
            dictionary[key] = entry.translation

    logger.info("Built translation dictionary: %d entries (%d overwrites)", len(dictionary), overwrite_count)
    return dictionary


def compute_fingerprint(dictionary: Mapping[str, str]) -> str:
    """Order-independent summary of a dictionary, used to detect no-op reloads."""
    accumulator = 0
    for key, value in dictionary.items():
        digest = hashlib.sha256(f"{key}\0{value}".encode('utf-8')).digest()
        accumulator ^= int.from_bytes(digest[:8], 'big')
    return f"{len(dictionary)}:{accumulator:016X}"
