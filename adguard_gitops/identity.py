"""Identifiers of reconciled AdGuard Home objects."""

from typing import Any, Optional, Tuple

from adguard_gitops.constants import (
    SINGLETON_ID,
    SINGLETON_KINDS,
    REWRITE_ID_SEPARATOR,
    KIND_CLIENT,
    KIND_LIST_FILTER,
    KIND_REWRITE,
)
from adguard_gitops.errors import MappingFailed
from adguard_gitops.utils import safe_getattr


def is_singleton(kind: str) -> bool:
    return kind in SINGLETON_KINDS


def rewrite_id(domain: str, answer: str) -> str:
    """
    Composite identity of a rewrite rule.

    Examples:
        >>> rewrite_id("example.com", "4.3.2.1")
        'example.com||4.3.2.1'
    """
    return f"{domain}{REWRITE_ID_SEPARATOR}{answer}"


def parse_rewrite_id(identity: str, fallback: Any = None) -> Tuple[str, str]:
    """
    Split a rewrite identity into (domain, answer).

    Identities written without the separator are rebuilt from the domain
    and answer of `fallback` (a rewrite model or dict).

    Raises:
        MappingFailed: If neither the identity nor the fallback yields both parts
    """
    if identity and REWRITE_ID_SEPARATOR in identity:
        domain, answer = identity.split(REWRITE_ID_SEPARATOR, 1)
        return domain, answer

    domain = safe_getattr(fallback, "domain")
    answer = safe_getattr(fallback, "answer")
    if not domain or not answer:
        raise MappingFailed(f"rewrite identity '{identity}' has no '{REWRITE_ID_SEPARATOR}' separator")
    return domain, answer


def assign_identity(kind: str, remote: Any) -> str:
    """
    Derive the identity of a remote object.

    Singletons are always "1"; keyed objects use their natural key
    (client name, filter id as string, rewrite domain||answer).

    Args:
        kind: Subsystem kind (see constants.KIND_*)
        remote: Remote object or observed model

    Returns:
        Identity string
    """
    if is_singleton(kind):
        return SINGLETON_ID

    if kind == KIND_CLIENT:
        key: Optional[Any] = safe_getattr(remote, "name")
    elif kind == KIND_LIST_FILTER:
        key = safe_getattr(remote, "id")
    elif kind == KIND_REWRITE:
        domain = safe_getattr(remote, "domain")
        answer = safe_getattr(remote, "answer")
        key = rewrite_id(domain, answer) if domain and answer else None
    else:
        raise ValueError(f"Unknown resource kind: {kind}")

    if key is None or key == "":
        raise MappingFailed(f"{kind}: remote object has no natural key")
    return str(key)
