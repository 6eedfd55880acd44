"""Reading, merging and writing the per-mod translation JSON files."""
import json
import logging
import os
import shutil
from datetime import datetime, timezone
from typing import Dict, List, Mapping, Optional

import jsonschema

from translation_extractor.models import TranslationEntry, TranslationFile

logger = logging.getLogger(__name__)

# Shape every persisted translation file must have to be trusted as prior state.
TRANSLATION_FILE_SCHEMA = {
    "type": "object",
    "properties": {
        "modId": {"type": ["string", "null"]},
        "modName": {"type": ["string", "null"]},
        "version": {"type": ["string", "null"]},
        "entries": {
            "type": "object",
            "additionalProperties": {
                "type": "object",
                "properties": {
                    "original": {"type": ["string", "null"]},
                    "translation": {"type": ["string", "null"]}
                }
            }
        }
    },
    "required": ["entries"]
}

BACKUP_SUFFIX = ".bak"


class TranslationFileError(ValueError):
    """A persisted translation file could not be decoded or has the wrong shape."""


class UnsafeOutputPathError(ValueError):
    """An output path would land outside the configured output root."""


class TranslationStore:
    """Filesystem access for persisted translation files."""

    def read(self, path: str) -> TranslationFile:
        """
        Load and validate a translation file.

        Raises:
            TranslationFileError: If the file is not valid JSON or fails the schema.
        """
        try:
            with open(path, 'r', encoding='utf-8-sig') as f:
                payload = json.load(f)
            jsonschema.validate(instance=payload, schema=TRANSLATION_FILE_SCHEMA)
        except (json.JSONDecodeError, UnicodeDecodeError) as decode_exc:
            raise TranslationFileError(f"Could not decode '{path}': {decode_exc}") from decode_exc
        except jsonschema.ValidationError as schema_exc:
            raise TranslationFileError(f"Unexpected structure in '{path}': {schema_exc.message}") from schema_exc
        return TranslationFile.from_dict(payload)

    def write(self, path: str, translation_file: TranslationFile) -> None:
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(translation_file.to_dict(), f, ensure_ascii=False, indent=2)

    def copy_as_backup(self, path: str) -> str:
        backup_path = path + BACKUP_SUFFIX
        shutil.copyfile(path, backup_path)
        return backup_path


def canonical_path(output_root: str, owner_id: str) -> str:
    return os.path.join(output_root, owner_id, f"{owner_id}.json")


def legacy_paths(output_root: str, owner_id: str) -> List[str]:
    """Older layouts whose translations are migrated into the canonical file."""
    return [
        os.path.join(output_root, f"_extracted_mod_{owner_id}.json"),
        os.path.join(output_root, f"{owner_id}.json"),
    ]


def ensure_within_root(path: str, output_root: str) -> str:
    """
    Resolve a path and verify it stays inside the output root.

    Returns:
        The resolved path.

    Raises:
        UnsafeOutputPathError: If the resolved path escapes the root.
    """
    resolved_root = os.path.realpath(output_root)
    resolved_path = os.path.realpath(path)
    try:
        inside = os.path.commonpath([resolved_root, resolved_path]) == resolved_root
    except ValueError:
        # Different drives on Windows
        inside = False
    if not inside or resolved_path == resolved_root:
        raise UnsafeOutputPathError(
            f"Resolved path '{resolved_path}' is outside output directory '{resolved_root}'."
        )
    return resolved_path


def collect_prior_translations(
        paths: List[str],
        store: TranslationStore
) -> Dict[str, str]:
    """
    Gather nonempty translations from the existing files among the given paths.

    Earlier paths take precedence. A file that fails to load is copied to a
    backup next to itself and contributes nothing.
    """
    prior: Dict[str, str] = {}
    for path in paths:
        if not os.path.isfile(path):
            continue
        try:
            existing = store.read(path)
        except TranslationFileError as read_exc:
            logger.error("Existing translation file is corrupted, creating backup: %s", read_exc)
            try:
                backup_path = store.copy_as_backup(path)
                logger.info("Backed up '%s' to '%s'.", path, backup_path)
            except OSError as backup_exc:
                logger.warning("Failed to create backup of '%s': %s", path, backup_exc)
            continue

        for key, entry in existing.entries.items():
            if entry.translation and key not in prior:
                prior[key] = entry.translation
        logger.debug("Merging with existing: %s (%d translations so far)", path, len(prior))
    return prior


def reconcile_entries(
        extracted: Mapping[str, str],
        prior_translations: Mapping[str, str]
) -> Dict[str, TranslationEntry]:
    """
    Build the entries of a new translation file.

    Every extracted key is kept, sorted; its original is the freshly extracted
    value and its translation is carried over from prior state when there is one.
    """
    return {
        key: TranslationEntry(original=extracted[key], translation=prior_translations.get(key, ""))
        for key in sorted(extracted)
    }


def write_owner_file(
        output_root: str,
        owner_id: str,
        entries: Mapping[str, str],
        store: Optional[TranslationStore] = None,
        version: Optional[str] = None
) -> str:
    """
    Merge one owner's extracted entries with its saved translations and write the result.

    Args:
        output_root: The directory that holds all translation files.
        owner_id: The owner the entries belong to.
        entries: The freshly extracted key -> value mapping.
        store: Filesystem access; a default TranslationStore when omitted.
        version: Version string for the file; today's UTC date when omitted.

    Returns:
        The path of the written file.

    Raises:
        UnsafeOutputPathError: If the owner id would place the file outside output_root.
    """
    store = store or TranslationStore()
    if not owner_id:
        raise UnsafeOutputPathError("Empty owner id cannot be written.")

    file_path = canonical_path(output_root, owner_id)
    ensure_within_root(file_path, output_root)
    candidates = [file_path]
    for legacy in legacy_paths(output_root, owner_id):
        try:
            ensure_within_root(legacy, output_root)
        except UnsafeOutputPathError:
            continue
        candidates.append(legacy)

    prior = collect_prior_translations(candidates, store)

    translation_file = TranslationFile(
        mod_id=owner_id,
        mod_name=owner_id,
        version=version or datetime.now(timezone.utc).strftime('%Y-%m-%d'),
        entries=reconcile_entries(entries, prior),
    )
    store.write(file_path, translation_file)
    return file_path
