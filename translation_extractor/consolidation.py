"""Merge owner groups that turn out to be the same mod."""
import logging
from typing import Dict, List

from translation_extractor.key_patterns import normalize_owner_name
from translation_extractor.models import OwnerGroups

logger = logging.getLogger(__name__)

DEFAULT_OVERLAP_THRESHOLD = 0.5


def _absorb(target: Dict[str, str], source: Dict[str, str]) -> int:
    """Copy keys from source that target lacks; existing values are never overwritten."""
    added = 0
    for key, value in source.items():
        if key not in target:
            target[key] = value
            added += 1
    return added


def merge_similar_groups(groups: OwnerGroups) -> OwnerGroups:
    """
    Merge groups whose owner ids only differ by case, underscores or hyphens.

    The group with the most entries keeps its name (first-seen wins a tie) and
    absorbs the others.
    """
    by_normalized: Dict[str, List[str]] = {}
    for owner_id in groups:
        by_normalized.setdefault(normalize_owner_name(owner_id), []).append(owner_id)

    result = OwnerGroups()
    for names in by_normalized.values():
        if len(names) == 1:
            result[names[0]] = groups[names[0]]
            continue

        ranked = sorted(names, key=lambda name: -len(groups[name]))
        main_name = ranked[0]
        merged = dict(groups[main_name])
        for other in ranked[1:]:
            _absorb(merged, groups[other])
            logger.info("Merged '%s' (%d entries) into '%s'", other, len(groups[other]), main_name)
        result[main_name] = merged

    return result


def merge_overlapping_groups(groups: OwnerGroups, threshold: float = DEFAULT_OVERLAP_THRESHOLD) -> OwnerGroups:
    """
    Merge pairs of groups whose key sets overlap heavily.

    For each pair the overlap is measured against the smaller group; at or above
    the threshold the smaller group is absorbed into the larger one (the earlier
    group survives a tie). An absorbed group takes no part in later comparisons.
    """
    names = list(groups)
    entries = {name: dict(groups[name]) for name in names}
    absorbed = set()

    for i, first in enumerate(names):
        if first in absorbed:
            continue
        for second in names[i + 1:]:
            if second in absorbed:
                continue
            first_keys = entries[first].keys()
            second_keys = entries[second].keys()
            smaller = min(len(first_keys), len(second_keys))
            if smaller == 0:
                continue
            overlap = len(first_keys & second_keys)
            if overlap / smaller < threshold:
                continue

            if len(second_keys) > len(first_keys):
                survivor, victim = second, first
            else:
                survivor, victim = first, second
            _absorb(entries[survivor], entries[victim])
            absorbed.add(victim)
            logger.info(
                "Merged '%s' into '%s' (%d of %d keys shared)",
                victim, survivor, overlap, smaller
            )
            if victim == first:
                break

    result = OwnerGroups()
    for name in names:
        if name not in absorbed:
            result[name] = entries[name]
    return result


def consolidate_groups(
        groups: OwnerGroups,
        merge_overlapping: bool = True,
        threshold: float = DEFAULT_OVERLAP_THRESHOLD
) -> OwnerGroups:
    """Run name consolidation, then optionally key-overlap consolidation followed by a second name pass."""
    result = merge_similar_groups(groups)
    if merge_overlapping:
        result = merge_overlapping_groups(result, threshold)
        result = merge_similar_groups(result)
    return result
