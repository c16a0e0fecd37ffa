from typing import Optional

from adguard_gitops.constants import KIND_DHCP, SINGLETON_ID, LOG_PREFIX_DHCP
from adguard_gitops.mappers.dhcp import dhcp_to_remote, dhcp_to_declared, lease_to_remote
from adguard_gitops.models import DhcpConfigModel
from adguard_gitops.syncers.base import BaseSyncer, Reconciled
from adguard_gitops.utils import log_success, log_info

# Fields AdGuard Home owns; never compared against declarations
OBSERVED_ONLY = ("leases",)


class DhcpConfigSyncer(BaseSyncer):
    """
    Built-in DHCP server (singleton, identity "1").

    The scope settings go out in one call. Static leases are reconciled
    one by one against what the server reports: stale ones are removed
    before missing ones are added, so a lease can move to another address.
    Clearing the interface resets the server.
    """

    kind = KIND_DHCP
    log_prefix = LOG_PREFIX_DHCP

    def apply(self, declared: DhcpConfigModel, current: Optional[DhcpConfigModel] = None) -> Reconciled:
        """
        Args:
            declared: Desired DHCP configuration
            current: Observed configuration, read from AdGuard Home if not given
        """
        with self._context():
            if current is None:
                current = dhcp_to_declared(self.client.dhcp_status())

            self._mutate("SET", f"dhcp config ({declared.interface or 'no interface'})",
                         self.client.set_dhcp_config, dhcp_to_remote(declared))
            if not declared.interface and current.interface:
                self._mutate("RESET", "dhcp server", self.client.reset_dhcp)
            elif declared.static_leases is not None:
                self._reconcile_leases(declared, current)

            if self.dry_run:
                return Reconciled(SINGLETON_ID, declared)
            observed = dhcp_to_declared(self.client.dhcp_status())
            return Reconciled(self._identity(observed), observed)

    def _reconcile_leases(self, declared: DhcpConfigModel, current: DhcpConfigModel) -> None:
        existing = {lease.key: lease for lease in current.static_leases or []}
        wanted = {lease.key: lease for lease in declared.static_leases or []}

        for key, lease in existing.items():
            if key not in wanted:
                self._mutate("REMOVE", f"static lease {lease.hostname} ({lease.mac} -> {lease.ip})",
                             self.client.remove_static_lease, lease_to_remote(lease))
        for key, lease in wanted.items():
            if key not in existing:
                self._mutate("ADD", f"static lease {lease.hostname} ({lease.mac} -> {lease.ip})",
                             self.client.add_static_lease, lease_to_remote(lease))

    def read(self) -> Reconciled:
        with self._context():
            return Reconciled(SINGLETON_ID, dhcp_to_declared(self.client.dhcp_status()))

    def delete(self) -> None:
        """Reset the DHCP server to its defaults."""
        with self._context():
            self._mutate("RESET", "dhcp server", self.client.reset_dhcp)
            log_success(f"{self.log_prefix} Reset to defaults")

    def sync(self, declared: DhcpConfigModel) -> Reconciled:
        current = self.read()
        ignore = OBSERVED_ONLY
        if declared.static_leases is None:
            ignore += ("static_leases",)
        changes = self.changed_fields(current.state, declared, ignore=ignore)
        if not changes:
            self._log_unchanged("dhcp config")
            return current
        log_info(f"{self.log_prefix} Changed: {', '.join(changes)}")
        return self.apply(declared, current.state)
