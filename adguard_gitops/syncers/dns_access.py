from adguard_gitops.constants import KIND_DNS_ACCESS, SINGLETON_ID, LOG_PREFIX_ACCESS
from adguard_gitops.mappers.rules import access_to_remote, access_to_declared
from adguard_gitops.models import DnsAccessModel
from adguard_gitops.syncers.base import BaseSyncer, Reconciled
from adguard_gitops.utils import log_success, log_info


class DnsAccessSyncer(BaseSyncer):
    """DNS access list: allowed/disallowed clients and blocked hosts (singleton)."""

    kind = KIND_DNS_ACCESS
    log_prefix = LOG_PREFIX_ACCESS

    def apply(self, declared: DnsAccessModel) -> Reconciled:
        with self._context():
            self._mutate("SET", "access list", self.client.set_access_list, access_to_remote(declared))
            if self.dry_run:
                return Reconciled(SINGLETON_ID, declared)
            observed = access_to_declared(self.client.access_list())
            return Reconciled(self._identity(observed), observed)

    def read(self) -> Reconciled:
        with self._context():
            return Reconciled(SINGLETON_ID, access_to_declared(self.client.access_list()))

    def delete(self) -> None:
        """Reset the access list to its defaults."""
        with self._context():
            self._mutate("RESET", "access list", self.client.set_access_list, access_to_remote(DnsAccessModel()))
            log_success(f"{self.log_prefix} Reset to defaults")

    def sync(self, declared: DnsAccessModel) -> Reconciled:
        current = self.read()
        changes = self.changed_fields(current.state, declared)
        if not changes:
            self._log_unchanged("access list")
            return current
        log_info(f"{self.log_prefix} Changed: {', '.join(changes)}")
        return self.apply(declared)
