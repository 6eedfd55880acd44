"""Key-shape heuristics used to infer which mod a localization key belongs to."""
import re
from typing import Dict, Iterable, List, Optional

# Ordered owner patterns; the first pattern that matches a key wins.
# 1) "Options.SECTION[Anarchy.Anarchy.AnarchyMod]" -> "Anarchy"
# 2) "YY_TREE_CONTROLLER[radius]" -> "YY" (collapsed later by consolidation)
BRACKETED_NAMESPACE_PATTERN = re.compile(r'\[([A-Za-z0-9_]+)[.\[]')
UNDERSCORE_PREFIX_PATTERN = re.compile(r'^([A-Z0-9]+)(?:_[A-Z0-9]+)+\[')

OWNER_PATTERNS = (BRACKETED_NAMESPACE_PATTERN, UNDERSCORE_PREFIX_PATTERN)

# Keys registered by the game itself. Only used where no source provenance is
# available to tell vanilla content apart (filtered sources, active view).
VANILLA_PREFIXES = (
    "Assets.", "Camera.", "Chirper.", "Cinema.", "Climate.",
    "Common.", "Editor.", "Economy.", "Education.", "Electricity.",
    "Fire.", "Garbage.", "Healthcare.", "Infoviews.", "Input.",
    "Loading.", "MainMenu.", "Map.", "Media.", "Menu.",
    "Notification.", "Options.SECTION[General]", "Options.SECTION[Gameplay]",
    "Options.SECTION[Interface]", "Options.SECTION[Audio]",
    "Options.SECTION[Graphics]", "Options.SECTION[Keybinding]",
    "Panel.", "PhotoMode.", "Policies.", "Properties.",
    "SelectedInfoPanel.", "Services.", "Simulation.", "SubServices.",
    "ToolOptions.", "Tools.", "Tooltip.", "Transport.", "Tutorial.",
    "UI.", "Water.", "Zone.",
    "About.", "Achievements.", "AnimationCurve.", "AudioSettings.",
    "BadInput.", "BadUserInput.", "Budget.", "Content.", "DefaultTool.",
    "DuplicateEntry.", "EditorSettings.", "EditorTutorials.",
    "EconomyPanel.", "GameListScreen.", "Gamepad.", "GameplaySettings.",
    "General.", "GeneralSettings.", "Paradox.", "Toolbar.",
)
_VANILLA_PREFIXES_LOWER = tuple(prefix.lower() for prefix in VANILLA_PREFIXES)

# Top-level namespaces defined by the host; never an owner on their own.
STANDARD_CATEGORIES = frozenset(name.lower() for name in (
    "Options", "Tooltip", "Description", "SubServices", "Services",
    "Menu", "Assets", "Properties", "Notification", "Chirper",
    "Editor", "Panel", "SelectedInfoPanel", "ToolOptions", "Tools",
    "Transport", "Tutorial", "UI", "Zone", "Common", "Loading",
    "MainMenu", "Camera", "Cinema", "Climate", "Economy",
    "Education", "Electricity", "Fire", "Garbage", "Healthcare",
    "Infoviews", "Input", "Map", "Media", "PhotoMode", "Policies",
    "Simulation", "Water", "About", "Achievements", "Content",
    "General", "Paradox", "AnimationCurve", "AudioSettings",
    "BadInput", "BadUserInput", "Budget", "DefaultTool",
    "DuplicateEntry", "GameListScreen", "Gamepad", "Toolbar",
))

# Characters that cannot appear in a file name on any supported platform.
_INVALID_FILENAME_CHARS = frozenset('<>:"/\\|?*') | frozenset(chr(i) for i in range(32))


def is_vanilla_key(key: str) -> bool:
    """Return True if the key starts with one of the game's own prefixes (case-insensitive)."""
    return key.lower().startswith(_VANILLA_PREFIXES_LOWER)


def is_standard_category(segment: str) -> bool:
    return segment.lower() in STANDARD_CATEGORIES


def sanitize_owner_id(owner_id: Optional[str]) -> Optional[str]:
    """
    Turn a candidate owner id into something safe to use as a file and folder name.

    Args:
        owner_id: The raw candidate, possibly None.

    Returns:
        The sanitized id, or None when nothing usable remains ('', '.', '..').
    """
    if not owner_id:
        return None
    sanitized = ''.join(ch for ch in owner_id if ch not in _INVALID_FILENAME_CHARS).strip('.')
    if not sanitized or sanitized in ('.', '..'):
        return None
    return sanitized


def normalize_owner_name(owner_id: Optional[str]) -> str:
    """Comparison form of an owner id: underscores and hyphens removed, lowercased."""
    if not owner_id:
        return ''
    return ''.join(ch for ch in owner_id if ch not in '_-').lower()


def _raw_candidate(key: str) -> Optional[str]:
    for pattern in OWNER_PATTERNS:
        match = pattern.search(key)
        if match:
            return match.group(1)

    parts = key.split('.')
    if len(parts) >= 2 and not is_standard_category(parts[0]):
        return parts[0]
    return None


def match_owner(key: str) -> Optional[str]:
    """
    Infer the owner of a single key from its shape.

    Args:
        key: The localization key.

    Returns:
        The sanitized owner id, or None if the key carries no owner hint.
    """
    if not key:
        return None
    return sanitize_owner_id(_raw_candidate(key))


def best_owner_from_keys(keys: Iterable[str], filter_vanilla: bool) -> Optional[str]:
    """
    Majority vote over the owner candidates of a set of keys.

    Candidates are counted case-insensitively; the first-seen spelling is kept
    and ties go to the candidate seen first.

    Args:
        keys: The keys of one record source.
        filter_vanilla: Skip keys with a vanilla prefix before voting.

    Returns:
        The winning sanitized owner id, or None when no key produced a candidate.
    """
    counts: Dict[str, int] = {}
    spelling: Dict[str, str] = {}
    order: List[str] = []

    for key in keys:
        if filter_vanilla and is_vanilla_key(key):
            continue
        candidate = _raw_candidate(key)
        if not candidate:
            continue
        folded = candidate.lower()
        if folded not in counts:
            counts[folded] = 0
            spelling[folded] = candidate
            order.append(folded)
        counts[folded] += 1

    best = None
    best_count = 0
    for folded in order:
        if counts[folded] > best_count:
            best = folded
            best_count = counts[folded]

    if best is None:
        return None
    return sanitize_owner_id(spelling[best])
