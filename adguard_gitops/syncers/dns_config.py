from typing import Optional

from adguard_gitops.constants import KIND_DNS_CONFIG, SINGLETON_ID, LOG_PREFIX_DNS
from adguard_gitops.mappers.dns import dns_to_remote, dns_to_declared
from adguard_gitops.models import DnsSettingsModel
from adguard_gitops.syncers.base import BaseSyncer, Reconciled
from adguard_gitops.utils import log_success, log_info


class DnsConfigSyncer(BaseSyncer):
    """DNS resolver configuration (singleton, identity "1")."""

    kind = KIND_DNS_CONFIG
    log_prefix = LOG_PREFIX_DNS

    def apply(self, declared: DnsSettingsModel) -> Reconciled:
        with self._context():
            self._mutate("SET", "dns config", self.client.set_dns_config, dns_to_remote(declared))
            if self.dry_run:
                return Reconciled(SINGLETON_ID, declared)
            observed = dns_to_declared(self.client.dns_info(), prior=declared, persisted=True)
            return Reconciled(self._identity(observed), observed)

    def read(self, prior: Optional[DnsSettingsModel] = None) -> Reconciled:
        with self._context():
            observed = dns_to_declared(self.client.dns_info(), prior=prior, persisted=True)
            return Reconciled(SINGLETON_ID, observed)

    def observe(self) -> Reconciled:
        with self._context():
            return Reconciled(SINGLETON_ID, dns_to_declared(self.client.dns_info()))

    def delete(self) -> None:
        """Reset the resolver configuration to its defaults."""
        with self._context():
            self._mutate("RESET", "dns config", self.client.set_dns_config, dns_to_remote(DnsSettingsModel()))
            log_success(f"{self.log_prefix} Reset to defaults")

    def sync(self, declared: DnsSettingsModel) -> Reconciled:
        current = self.read(prior=declared)
        changes = self.changed_fields(current.state, declared)
        if not changes:
            self._log_unchanged("dns config")
            return current
        log_info(f"{self.log_prefix} Changed: {', '.join(changes)}")
        return self.apply(declared)
