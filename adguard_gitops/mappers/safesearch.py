"""
Safe-search services: declared name set <-> AdGuard Home flag object.

The appliance models each search engine as an independent boolean next to
a global "enabled" switch. Known engines are listed in a static table;
engines the live appliance reports on top of it are handled the same way.
"""

from typing import Any, Dict, Iterable, Set, Tuple

from adguard_gitops.constants import SAFE_SEARCH_SERVICES
from adguard_gitops.errors import MappingFailed
from adguard_gitops.utils import string_list

ENABLED_FLAG = "enabled"


def known_flags(extra: Iterable[str] = ()) -> Tuple[str, ...]:
    """Static engine names extended by identifiers not already in them (lowercased)."""
    flags = list(SAFE_SEARCH_SERVICES)
    for name in sorted({n.lower() for n in extra}):
        if name not in flags and name != ENABLED_FLAG:
            flags.append(name)
    return tuple(flags)


def services_to_flags(enabled: bool, services: Iterable[Any], known: Iterable[str] = ()) -> Dict[str, bool]:
    """
    Build the remote flag object from a declared service set.

    Every known flag is written: true when declared, false otherwise, so the
    result never depends on what the appliance had before.

    Args:
        enabled: Global safe-search switch
        services: Declared service identifiers (case-insensitive)
        known: Additional identifiers reported by the live appliance

    Returns:
        Flag object, e.g. {"enabled": True, "bing": False, ..., "pixabay": True}

    Raises:
        MappingFailed: If a declared service is not a string

    Examples:
        >>> services_to_flags(True, {"pixabay"})["pixabay"]
        True
    """
    try:
        declared = {name.lower() for name in string_list(services, "safesearch.services")}
    except TypeError as e:
        raise MappingFailed(f"cannot convert safesearch.services to remote form: {e}") from e

    flags: Dict[str, bool] = {ENABLED_FLAG: bool(enabled)}
    for name in known_flags(list(known) + sorted(declared)):
        flags[name] = name in declared
    return flags


def flags_to_services(remote: Any, subsystem: str = "safesearch") -> Tuple[bool, Set[str]]:
    """
    Read the enabled switch and the set of enabled services from a flag object.

    Args:
        remote: Flag object returned by AdGuard Home
        subsystem: Name used in error messages

    Returns:
        Tuple of (enabled, set of lowercased service identifiers)

    Raises:
        MappingFailed: If the object or its "enabled" switch cannot be decoded
    """
    if not isinstance(remote, dict):
        raise MappingFailed(f"{subsystem}: cannot decode safe search settings (got {type(remote).__name__})")

    enabled = remote.get(ENABLED_FLAG)
    if not isinstance(enabled, bool):
        raise MappingFailed(f"{subsystem}.enabled: expected boolean, got {enabled!r}")

    services = {
        key.lower()
        for key, value in remote.items()
        if key.lower() != ENABLED_FLAG and isinstance(value, bool) and value
    }
    return enabled, services


def service_names(remote: Any) -> Set[str]:
    """All service identifiers present as flags in a remote flag object."""
    if not isinstance(remote, dict):
        return set()
    return {
        key.lower()
        for key, value in remote.items()
        if key.lower() != ENABLED_FLAG and isinstance(value, bool)
    }
