from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel

from adguard_gitops.client import AdGuardClient
from adguard_gitops.constants import ENUM_SAFESEARCH
from adguard_gitops.enumerations import EnumerationCache, EnumerationValidator
from adguard_gitops.errors import AdGuardError, ValidationFailed
from adguard_gitops.identity import assign_identity
from adguard_gitops.models import SafeSearchModel
from adguard_gitops.utils import log_debug, log_dry_run, log_info


@dataclass
class Reconciled:
    """Outcome of one reconciliation cycle: identity plus observed declared state."""
    identity: str
    state: Any


class BaseSyncer:
    """
    Base class of the per-subsystem orchestrators.

    A cycle runs normalize -> validate -> map to remote -> call the API ->
    map back. Any failure aborts the cycle with one AdGuardError carrying
    the subsystem name; remote calls already made are not undone.

    DRY RUN:
    ========
    Reads and validation still happen. Mutating calls are only logged,
    and the normalized declared state is returned as observed state.
    """

    kind: str = ""
    log_prefix: str = ""

    def __init__(self, client: AdGuardClient, enumerations: EnumerationCache, dry_run: bool = False):
        """
        Initialize base syncer.

        Args:
            client: AdGuard Home API client
            enumerations: Shared enumeration cache (one per process)
            dry_run: Dry-run mode flag
        """
        self.client = client
        self.enumerations = enumerations
        self.validator = EnumerationValidator(enumerations)
        self.dry_run = dry_run

    @contextmanager
    def _context(self, label: Optional[str] = None):
        """Re-raise AdGuardError with subsystem context, keeping its kind."""
        try:
            yield
        except AdGuardError as e:
            raise e.with_context(label or self.kind) from e

    def _mutate(self, action: str, details: str, call: Callable, *args, **kwargs) -> Any:
        """Run a mutating API call, or only log it in dry-run mode."""
        if self.dry_run:
            log_dry_run(action, f"{self.log_prefix} {details}")
            return None
        log_info(f"{self.log_prefix} {action} {details}")
        return call(*args, **kwargs)

    def _identity(self, remote: Any) -> str:
        return assign_identity(self.kind, remote)

    def _resolve_safesearch(self, safesearch: SafeSearchModel, attribute: str) -> SafeSearchModel:
        """Fill undeclared safe-search services with every engine the appliance knows."""
        if safesearch.services is not None:
            return safesearch
        known = self.enumerations.get(ENUM_SAFESEARCH)
        if not known:
            raise ValidationFailed(
                f"{attribute}: unable to retrieve valid values for '{ENUM_SAFESEARCH}' from AdGuard Home",
                attribute=attribute,
            ) from self.enumerations.last_error(ENUM_SAFESEARCH)
        return safesearch.model_copy(update={"services": {s.lower() for s in known}})

    def _known_safesearch(self) -> frozenset:
        return self.enumerations.get(ENUM_SAFESEARCH)

    @staticmethod
    def changed_fields(current: BaseModel, desired: BaseModel, ignore: tuple = ()) -> List[str]:
        """
        Compare two declared models field by field.

        Args:
            current: Observed state
            desired: Declared state
            ignore: Field names excluded from the comparison

        Returns:
            Names of top-level fields that differ
        """
        current_data: Dict[str, Any] = current.model_dump()
        desired_data: Dict[str, Any] = desired.model_dump()
        changes = []
        for key, desired_value in desired_data.items():
            if key in ignore:
                continue
            if current_data.get(key) != desired_value:
                changes.append(key)
        return changes

    def _log_unchanged(self, name: str):
        log_debug(f"{self.log_prefix} {name} unchanged")
