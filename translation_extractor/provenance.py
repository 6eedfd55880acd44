"""Decide which mod, if any, a record source belongs to."""
import logging
from typing import Iterable, Optional

from translation_extractor.key_patterns import best_owner_from_keys, sanitize_owner_id
from translation_extractor.models import SourceOrigin

logger = logging.getLogger(__name__)

# Packages that ship with the game, its engine, or the runtime.
PLATFORM_PACKAGE_PREFIXES = (
    "Game", "Colossal.", "Unity.", "UnityEngine",
    "System.", "mscorlib", "netstandard",
    "Newtonsoft.", "Burst.", "Unity,",
)
PLATFORM_PACKAGE_NAMES = frozenset(("game", "unityengine"))

# Platform source types that mods reuse to register their own strings.
GENERIC_SOURCE_KINDS = frozenset(("memorysource", "localmemorysource", "filesource"))


def is_platform_origin(package: Optional[str]) -> bool:
    """
    Return True if a package name belongs to the game platform.

    An unknown package is treated as platform-owned.
    """
    if not package:
        return True
    folded = package.lower()
    if folded in PLATFORM_PACKAGE_NAMES:
        return True
    return any(folded.startswith(prefix.lower()) for prefix in PLATFORM_PACKAGE_PREFIXES)


def is_generic_source_kind(kind: Optional[str]) -> bool:
    return bool(kind) and kind.lower() in GENERIC_SOURCE_KINDS


def _owner_from_descriptor(origin: SourceOrigin) -> Optional[str]:
    if origin.namespace:
        owner_id = sanitize_owner_id(origin.namespace.split('.')[0])
        if owner_id:
            return owner_id
    return sanitize_owner_id(origin.package)


def classify_source(origin: Optional[SourceOrigin], keys: Iterable[str]) -> Optional[str]:
    """
    Attribute a record source to an owner.

    Third-party packages always yield an owner: the key-majority candidate when
    the keys carry one, otherwise a name derived from the namespace or package.
    Platform packages are vanilla unless their non-vanilla keys vote for an owner;
    generic platform source kinds are the usual carrier of such mod strings.

    Args:
        origin: The provenance of the source, or None when unavailable.
        keys: The keys the source declares.

    Returns:
        The owner id, or None when the source is vanilla.
    """
    origin = origin or SourceOrigin()
    keys = list(keys)

    if not is_platform_origin(origin.package):
        owner_id = best_owner_from_keys(keys, filter_vanilla=False)
        if owner_id:
            return owner_id
        return _owner_from_descriptor(origin)

    if is_generic_source_kind(origin.kind):
        logger.debug("Generic platform source '%s': classifying by keys.", origin.kind)

    # Ordinary platform types can still carry mod keys
    return best_owner_from_keys(keys, filter_vanilla=True)


def is_self_owner(owner_id: Optional[str], self_owner_id: Optional[str]) -> bool:
    """True if the owner id is this plugin's own id."""
    if not owner_id or not self_owner_id:
        return False
    return owner_id.lower() == self_owner_id.lower()
