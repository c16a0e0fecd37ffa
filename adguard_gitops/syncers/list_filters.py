from typing import Dict, List, Optional, Tuple

from adguard_gitops.constants import KIND_LIST_FILTER, LOG_PREFIX_FILTER
from adguard_gitops.errors import NotFound
from adguard_gitops.mappers.rules import list_filter_data, list_filter_to_declared
from adguard_gitops.models import ListFilterModel
from adguard_gitops.syncers.base import BaseSyncer, Reconciled
from adguard_gitops.utils import log_info

# Fields AdGuard Home owns; never compared against declarations
OBSERVED_ONLY = ("id", "rules_count", "last_updated")


class ListFilterSyncer(BaseSyncer):
    """
    Blocklists and allowlists, identified by the numeric id AdGuard Home
    assigns (reported as string).

    Moving a filter between block- and allowlist is a replace.
    """

    kind = KIND_LIST_FILTER
    log_prefix = LOG_PREFIX_FILTER

    def _find(self, identity: str) -> Tuple[Dict, bool]:
        try:
            filter_id = int(identity)
        except (TypeError, ValueError) as e:
            raise NotFound(f"invalid list filter id '{identity}'", kind=self.kind, key=str(identity)) from e
        remote, whitelist = self.client.get_list_filter_by_id(filter_id)
        if remote is None:
            raise NotFound(f"no list filter with id {identity} exists", kind=self.kind, key=identity)
        return remote, whitelist

    def create(self, declared: ListFilterModel) -> Reconciled:
        """
        Add a filter list, then disable it if declared disabled.

        The identity is only known after AdGuard Home has stored the list,
        so it is looked up by name afterwards.
        """
        with self._context(f"list filter {declared.name}"):
            self._mutate("CREATE", f"{declared.name} ({declared.url})", self.client.add_list_filter,
                         declared.name, declared.url, declared.whitelist)
            if not declared.enabled:
                self._mutate("DISABLE", declared.name, self.client.set_list_filter,
                             declared.url, declared.whitelist, list_filter_data(declared))
            if self.dry_run:
                return Reconciled("0", declared)

            remote, whitelist = self.client.get_list_filter_by_name(declared.name)
            if remote is None:
                raise NotFound(f"list filter '{declared.name}' missing after create",
                               kind=self.kind, key=declared.name)
            observed = list_filter_to_declared(remote, whitelist)
            if not declared.enabled:
                # A disabled list is never downloaded
                observed = observed.model_copy(update={"rules_count": 0})
            return Reconciled(self._identity(observed), observed)

    def update(self, identity: str, declared: ListFilterModel) -> Reconciled:
        with self._context(f"list filter {identity}"):
            current, whitelist = self._find(identity)
        if whitelist != declared.whitelist:
            log_info(f"{self.log_prefix} {declared.name} moves between block- and allowlist (replace)")
            self.delete(identity)
            return self.create(declared)

        with self._context(f"list filter {identity}"):
            self._mutate("UPDATE", declared.name, self.client.set_list_filter,
                         current.get("url"), whitelist, list_filter_data(declared))
            if self.dry_run:
                return Reconciled(identity, declared.model_copy(update={"id": identity}))
        return self.read(identity)

    def apply(self, declared: ListFilterModel, identity: Optional[str] = None) -> Reconciled:
        """Create without identity, otherwise update the filter with that id."""
        if identity is None:
            return self.create(declared)
        return self.update(identity, declared)

    def read(self, identity: str) -> Reconciled:
        """
        Read one filter by id.

        Raises:
            NotFound: If no filter with this id exists
        """
        with self._context(f"list filter {identity}"):
            remote, whitelist = self._find(identity)
            return Reconciled(identity, list_filter_to_declared(remote, whitelist))

    def delete(self, identity: str) -> None:
        with self._context(f"list filter {identity}"):
            remote, whitelist = self._find(identity)
            self._mutate("DELETE", remote.get("name", identity), self.client.remove_list_filter,
                         remote.get("url"), whitelist)

    def sync(self, filters: List[ListFilterModel]) -> List[Reconciled]:
        """Match declared filters by name; create missing ones and update changed ones."""
        results = []
        for declared in filters:
            with self._context(f"list filter {declared.name}"):
                remote, whitelist = self.client.get_list_filter_by_name(declared.name)
            if remote is None:
                results.append(self.create(declared))
                continue

            with self._context(f"list filter {declared.name}"):
                current = list_filter_to_declared(remote, whitelist)
            changes = self.changed_fields(current, declared, ignore=OBSERVED_ONLY)
            if not changes:
                self._log_unchanged(declared.name)
                results.append(Reconciled(current.id, current))
                continue
            log_info(f"{self.log_prefix} {declared.name} changed: {', '.join(changes)}")
            results.append(self.update(current.id, declared))
        return results
