"""Passes over the active view: supplementing found groups and the full-scan fallback."""
import logging
from typing import Dict, Mapping, Optional

from translation_extractor.key_patterns import is_vanilla_key, match_owner, normalize_owner_name
from translation_extractor.models import OwnerGroups
from translation_extractor.provenance import is_self_owner

logger = logging.getLogger(__name__)

UNGROUPED_OWNER_ID = "_ungrouped"


def _find_group_by_normalized_name(groups: OwnerGroups, owner_id: str) -> Optional[str]:
    normalized = normalize_owner_name(owner_id)
    for existing in groups:
        if normalize_owner_name(existing) == normalized:
            return existing
    return None


def supplement_from_active_view(
        groups: OwnerGroups,
        active_entries: Mapping[str, str],
        self_owner_id: Optional[str] = None
) -> int:
    """
    Add keys of the active view that no group owns yet.

    Only non-vanilla keys whose shape names an owner are considered. They are
    added to the group with the same normalized name, or form a new group.
    Keys already owned by any group are never touched.

    Args:
        groups: The groups found so far; updated in place.
        active_entries: The host's merged view of all registered keys.
        self_owner_id: This plugin's own id; its keys are skipped.

    Returns:
        The number of entries added.
    """
    if not active_entries:
        logger.debug("Supplement: active view is empty or inaccessible.")
        return 0

    existing_keys = {key.lower() for key in groups.all_keys()}
    uncollected = {
        key: value for key, value in active_entries.items()
        if key and value and key.lower() not in existing_keys and not is_vanilla_key(key)
    }
    if not uncollected:
        logger.debug("Supplement: no uncollected mod keys found.")
        return 0

    logger.info("Supplement: %d uncollected non-vanilla keys in the active view.", len(uncollected))

    supplements = OwnerGroups()
    for key, value in uncollected.items():
        owner_id = match_owner(key)
        if not owner_id or is_self_owner(owner_id, self_owner_id):
            continue
        supplements.setdefault(owner_id, {})[key] = value

    total_added = 0
    for owner_id in supplements:
        new_entries = supplements[owner_id]
        existing = _find_group_by_normalized_name(groups, owner_id)
        if existing is None:
            groups[owner_id] = dict(new_entries)
            total_added += len(new_entries)
            logger.info("Supplement: new mod '%s' with %d entries", owner_id, len(new_entries))
            continue

        target = groups[existing]
        added = 0
        for key, value in new_entries.items():
            if key not in target:
                target[key] = value
                added += 1
        if added:
            total_added += added
            logger.info("Supplement: +%d entries to existing mod '%s'", added, existing)

    return total_added


def group_by_owner(all_entries: Mapping[str, str], self_owner_id: Optional[str] = None) -> OwnerGroups:
    """
    Classify every non-vanilla key of the active view by shape alone.

    Used only when source-based extraction found nothing. Keys with no owner
    hint are collected in the '_ungrouped' bucket instead of being dropped.
    """
    groups = OwnerGroups()
    ungrouped: Dict[str, str] = {}

    for key, value in all_entries.items():
        if not key or is_vanilla_key(key):
            continue
        owner_id = match_owner(key)
        if not owner_id:
            ungrouped[key] = value
            continue
        if is_self_owner(owner_id, self_owner_id):
            continue
        groups.setdefault(owner_id, {})[key] = value

    if ungrouped:
        bucket = groups.setdefault(UNGROUPED_OWNER_ID, {})
        for key, value in ungrouped.items():
            bucket.setdefault(key, value)

    return groups
