"""
Live enumerations of the AdGuard Home instance and validation against them.

Valid blocked-service and safe-search identifiers are only known to the
running appliance. They are fetched once per kind and kept for the lifetime
of the cache instance.
"""

import threading
from typing import Callable, Dict, FrozenSet, Iterable, Optional

from adguard_gitops.constants import ENUM_BLOCKED_SERVICES, ENUM_SAFESEARCH
from adguard_gitops.errors import AdGuardError, ValidationFailed
from adguard_gitops.utils import log_debug, log_error

Fetcher = Callable[[], Iterable[str]]


class EnumerationCache:
    """
    Fetch-once cache of valid identifier sets, keyed by enumeration kind.

    Every kind has its own lock, so concurrent first accesses for the same
    kind issue a single remote fetch while different kinds load in parallel.
    Readers only ever see a complete frozenset.

    Failed or empty fetches are not cached; the next access fetches again.
    """

    def __init__(self, fetchers: Dict[str, Fetcher]):
        """
        Initialize the cache.

        Args:
            fetchers: Callable per enumeration kind returning the valid values
        """
        self._fetchers = dict(fetchers)
        self._values: Dict[str, FrozenSet[str]] = {}
        self._errors: Dict[str, AdGuardError] = {}
        self._locks: Dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    @classmethod
    def for_client(cls, client) -> "EnumerationCache":
        """Cache backed by the enumeration endpoints of an AdGuardClient."""
        return cls({
            ENUM_BLOCKED_SERVICES: client.list_blocked_service_ids,
            ENUM_SAFESEARCH: client.list_safe_search_services,
        })

    def _lock_for(self, kind: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(kind)
            if lock is None:
                lock = self._locks[kind] = threading.Lock()
            return lock

    def get(self, kind: str) -> FrozenSet[str]:
        """
        Return the valid values for an enumeration kind.

        Args:
            kind: Enumeration kind (constants.ENUM_*)

        Returns:
            Frozenset of valid identifiers; empty if the fetch failed
            or the appliance reported nothing

        Raises:
            KeyError: If no fetcher is registered for the kind
        """
        cached = self._values.get(kind)
        if cached is not None:
            return cached

        if kind not in self._fetchers:
            raise KeyError(f"No enumeration fetcher registered for '{kind}'")

        with self._lock_for(kind):
            # Another thread may have filled it while we waited
            cached = self._values.get(kind)
            if cached is not None:
                return cached

            try:
                values = frozenset(self._fetchers[kind]() or ())
            except AdGuardError as e:
                log_error(f"Enumeration Error {kind}", e)
                self._errors[kind] = e
                return frozenset()

            if not values:
                log_error(f"Enumeration {kind}: AdGuard Home reported no values")
                return values

            self._errors.pop(kind, None)
            self._values[kind] = values
            log_debug(f"Loaded {len(values)} {kind} identifiers from AdGuard Home")
            return values

    def last_error(self, kind: str) -> Optional[AdGuardError]:
        """Error of the most recent failed fetch for a kind, if any."""
        return self._errors.get(kind)

    def is_loaded(self, kind: str) -> bool:
        return kind in self._values


class EnumerationValidator:
    """Reject declared values the live appliance does not know."""

    def __init__(self, cache: EnumerationCache):
        self.cache = cache

    def validate(self, kind: str, attribute: str, values: Optional[Iterable[str]],
                 case_insensitive: bool = False) -> None:
        """
        Check every declared value against the live enumeration.

        Args:
            kind: Enumeration kind (constants.ENUM_*)
            attribute: Declared attribute name, used in the error
            values: Declared values (nothing to check if empty)
            case_insensitive: Compare lowercased values

        Raises:
            ValidationFailed: On the first unknown value, or if the
                enumeration could not be retrieved
        """
        declared = sorted(values or [])
        if not declared:
            return

        valid = self.cache.get(kind)
        if not valid:
            raise ValidationFailed(
                f"{attribute}: unable to retrieve valid values for '{kind}' from AdGuard Home",
                attribute=attribute,
            ) from self.cache.last_error(kind)

        lookup = {v.lower() for v in valid} if case_insensitive else valid
        for value in declared:
            candidate = value.lower() if case_insensitive else value
            if candidate not in lookup:
                raise ValidationFailed(
                    f"{attribute}: '{value}' is not a valid value, must be one of: {', '.join(sorted(valid))}",
                    attribute=attribute,
                    value=value,
                    valid_values=valid,
                )
