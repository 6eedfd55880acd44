"""
Extraction pipeline: attribute the host's localization records to mods and
write one translation file per mod.

Passes:
  1. Source pass: read every record source, classify it by provenance and key
     shape, merge locales per owner and consolidate duplicate owners.
  2. Supplement: add mod keys of the active view that the source pass missed.
  3. Fallback: when nothing was found, classify the whole active view by key shape.
  4. Persist: merge each owner with its saved translations and write it out.
"""
import logging
import os
from collections import Counter
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from tqdm import tqdm

from translation_extractor.consolidation import DEFAULT_OVERLAP_THRESHOLD, consolidate_groups
from translation_extractor.key_patterns import is_vanilla_key
from translation_extractor.locale_merge import DEFAULT_SOURCE_LOCALE, merge_owner_locales
from translation_extractor.models import (
    ExtractionResult,
    OwnerGroups,
    SourceOrigin,
    SourceOutcome,
    SourceStatus
)
from translation_extractor.persistence import TranslationStore, UnsafeOutputPathError, write_owner_file
from translation_extractor.provenance import classify_source, is_self_owner
from translation_extractor.providers import RecordSourceProvider
from translation_extractor.reconciliation import group_by_owner, supplement_from_active_view

logger = logging.getLogger(__name__)

DEFAULT_SELF_OWNER_ID = "CS2_Translate_Mod"


@dataclass
class ExtractionOptions:
    source_locale_id: str = DEFAULT_SOURCE_LOCALE
    self_owner_id: Optional[str] = DEFAULT_SELF_OWNER_ID
    merge_overlapping_groups: bool = True
    overlap_threshold: float = DEFAULT_OVERLAP_THRESHOLD


def _describe(origin: Optional[SourceOrigin], locale: str) -> str:
    if origin is None:
        return f"<unknown origin> (locale={locale})"
    return f"{origin.kind or '<source>'} (package={origin.package}, locale={locale})"


def process_source(
        provider: RecordSourceProvider,
        locale: str,
        handle: Any,
        options: ExtractionOptions
) -> SourceOutcome:
    """
    Read and classify one record source.

    Never raises for a source the host cannot read; that becomes a READ_ERROR
    outcome so the caller can keep going.
    """
    try:
        origin = provider.describe_origin(handle)
        records = provider.read_entries(handle) or []
        entries = {key: value for key, value in records if key and value}
    except Exception as read_exc:
        return SourceOutcome(SourceStatus.READ_ERROR, locale, f"<source #{handle}> (locale={locale})",
                             error=str(read_exc))

    label = _describe(origin, locale)
    if not entries:
        return SourceOutcome(SourceStatus.EMPTY, locale, label)

    owner_id = classify_source(origin, entries.keys())
    if not owner_id:
        return SourceOutcome(SourceStatus.VANILLA, locale, label, entries=entries)
    if is_self_owner(owner_id, options.self_owner_id):
        return SourceOutcome(SourceStatus.SELF, locale, label, owner_id=owner_id)

    admitted = {key: value for key, value in entries.items() if not is_vanilla_key(key)}
    if not admitted:
        return SourceOutcome(SourceStatus.VANILLA, locale, label, entries=entries)
    return SourceOutcome(SourceStatus.ACCEPTED, locale, label, owner_id=owner_id, entries=admitted)


def _locale_bucket(locales: Dict[str, Dict[str, str]], locale: str) -> Dict[str, str]:
    for existing in locales:
        if existing.lower() == locale.lower():
            return locales[existing]
    return locales.setdefault(locale, {})


def extract_from_sources(provider: RecordSourceProvider, options: ExtractionOptions) -> OwnerGroups:
    """
    Source pass: classify every record source and build consolidated owner groups.

    Raises whatever the provider raises when the source list itself cannot be read.
    """
    owner_locales = OwnerGroups()
    stats: Counter = Counter()

    for locale, handle in provider.iter_sources():
        locale = locale or ''
        outcome = process_source(provider, locale, handle, options)
        stats[outcome.status] += 1

        if outcome.status is SourceStatus.READ_ERROR:
            logger.warning("Failed to read source %s: %s", outcome.label, outcome.error)
            continue
        if outcome.status is SourceStatus.VANILLA:
            logger.debug(
                "Source %s: VANILLA (%d entries, sample=[%s])",
                outcome.label, len(outcome.entries), ", ".join(list(outcome.entries)[:3])
            )
            continue
        if outcome.status is not SourceStatus.ACCEPTED:
            logger.debug("Source %s: %s", outcome.label, outcome.status.value.upper())
            continue

        locales = owner_locales.setdefault(outcome.owner_id, {})
        # Several sources of one owner in the same locale: later ones overwrite
        _locale_bucket(locales, locale).update(outcome.entries)
        logger.debug("Source %s -> mod '%s' (%d entries)", outcome.label, outcome.owner_id, len(outcome.entries))

    logger.info(
        "Source pass: %d sources, %d mods found. (Skipped: %d vanilla, %d empty, %d self, %d read errors)",
        sum(stats.values()), len(owner_locales),
        stats[SourceStatus.VANILLA], stats[SourceStatus.EMPTY],
        stats[SourceStatus.SELF], stats[SourceStatus.READ_ERROR]
    )

    groups = merge_owner_locales(owner_locales, options.source_locale_id)
    logger.info("Source pass (locale-merged): %d mods, %d entries.", len(groups), groups.total_entries())

    groups = consolidate_groups(groups, options.merge_overlapping_groups, options.overlap_threshold)
    logger.info("Source pass final: %d mods (after merge).", len(groups))
    return groups


def _write_groups(
        groups: OwnerGroups,
        output_root: str,
        store: TranslationStore
) -> ExtractionResult:
    written: List[str] = []
    failed: List[str] = []
    total_entries = 0

    os.makedirs(output_root, exist_ok=True)

    for owner_id in tqdm(list(groups), desc="Writing translation files", unit="mod", disable=None):
        entries = groups[owner_id]
        try:
            file_path = write_owner_file(output_root, owner_id, entries, store)
        except UnsafeOutputPathError as path_exc:
            logger.error("Path traversal detected for mod '%s': %s Skipping.", owner_id, path_exc)
            failed.append(owner_id)
            continue
        except Exception:
            logger.exception("Failed to write extraction file for mod: %s", owner_id)
            failed.append(owner_id)
            continue
        written.append(file_path)
        total_entries += len(entries)
        logger.debug("Extracted: %s (%d entries)", owner_id, len(entries))

    result = ExtractionResult(
        total_owners=len(groups),
        total_entries=total_entries,
        written_files=tuple(written),
        failed_owners=tuple(failed),
    )
    logger.info(
        "Extraction complete: %d mods, %d entries, %d files written.",
        result.total_owners, result.total_entries, len(result.written_files)
    )
    if failed:
        logger.warning("%d mod(s) could not be written. First failed mod: %s", len(failed), failed[0])
    return result


def extract_all(
        provider: RecordSourceProvider,
        output_root: str,
        options: Optional[ExtractionOptions] = None,
        store: Optional[TranslationStore] = None
) -> ExtractionResult:
    """
    Run the full extraction and write one translation file per mod.

    Args:
        provider: Access to the host's record sources and active view.
        output_root: Directory the translation files are written under.
        options: Pipeline settings; defaults when omitted.
        store: Filesystem access for translation files; defaults when omitted.

    Returns:
        The run summary. A run that finds nothing, or whose fallback also fails,
        carries an error message and no files.
    """
    options = options or ExtractionOptions()
    store = store or TranslationStore()

    groups: Optional[OwnerGroups] = None
    try:
        groups = extract_from_sources(provider, options)
    except Exception as source_exc:
        logger.warning("Source-based extraction failed: %s", source_exc)

    if groups:
        try:
            supplemented = supplement_from_active_view(groups, provider.active_view(), options.self_owner_id)
            if supplemented:
                logger.info("Supplemented %d additional entries from the active view.", supplemented)
        except Exception as supplement_exc:
            logger.warning("Supplementary extraction failed: %s", supplement_exc)

    if not groups:
        logger.info("Source-based extraction yielded 0 mods. Falling back to the active view.")
        try:
            all_entries = provider.active_view()
            if all_entries:
                logger.info("Active view: %d entries retrieved.", len(all_entries))
                groups = group_by_owner(all_entries, options.self_owner_id)
        except Exception as fallback_exc:
            logger.exception("Active-view extraction also failed.")
            return ExtractionResult(error_message=f"Failed to read localization entries: {fallback_exc}")

    if not groups:
        logger.error("No mod entries found.")
        return ExtractionResult(error_message="No mod localization entries were found.")

    return _write_groups(groups, output_root, store)
