import logging
import re
from typing import Dict, Mapping

from translation_extractor.models import OwnerGroups

logger = logging.getLogger(__name__)

DEFAULT_SOURCE_LOCALE = "en-US"


def locale_priority(locale: str, reference_locale: str = DEFAULT_SOURCE_LOCALE) -> int:
    """
    Rank a locale tag for merging; lower ranks win.

    Args:
        locale: The locale tag of a record source (may be empty).
        reference_locale: The canonical source locale, e.g. "en-US".

    Returns:
        0 for the reference locale, 1 for another locale of the same language,
        50 for any other locale and 100 for an empty tag.
    """
    if not locale:
        return 100
    if locale.lower() == reference_locale.lower():
        return 0
    language = re.split(r'[-_]', reference_locale, maxsplit=1)[0].lower()
    if language and locale.lower().startswith(language):
        return 1
    return 50


def merge_locales(
        locale_entries: Mapping[str, Mapping[str, str]],
        reference_locale: str = DEFAULT_SOURCE_LOCALE
) -> Dict[str, str]:
    """
    Merge one owner's per-locale records into a single key -> value mapping.

    Locales are visited by ascending priority (stable for equal ranks); the first
    value seen for a key is kept, so lower-priority locales only fill gaps.
    """
    merged: Dict[str, str] = {}
    ordered = sorted(locale_entries, key=lambda loc: locale_priority(loc, reference_locale))
    for locale in ordered:
        for key, value in locale_entries[locale].items():
            if key not in merged:
                merged[key] = value
    return merged


def merge_owner_locales(
        owner_locales: Mapping[str, Mapping[str, Mapping[str, str]]],
        reference_locale: str = DEFAULT_SOURCE_LOCALE
) -> OwnerGroups:
    """Apply merge_locales to every owner, dropping owners that end up empty."""
    groups = OwnerGroups()
    for owner_id, locale_entries in owner_locales.items():
        merged = merge_locales(locale_entries, reference_locale)
        logger.debug(
            "Owner '%s': locales=[%s]",
            owner_id,
            ", ".join(f"{loc or '<none>'}({len(entries)})" for loc, entries in locale_entries.items())
        )
        if merged:
            groups[owner_id] = merged
    return groups
