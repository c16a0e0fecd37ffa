from typing import Optional

from adguard_gitops.constants import KIND_TLS, SINGLETON_ID, LOG_PREFIX_TLS
from adguard_gitops.mappers.tls import tls_to_remote, tls_to_declared
from adguard_gitops.models import TlsConfigModel
from adguard_gitops.syncers.base import BaseSyncer, Reconciled
from adguard_gitops.utils import log_success, log_info, log_warning

# Computed by AdGuard Home; never compared against declarations
OBSERVED_ONLY = (
    "private_key_saved",
    "valid_cert",
    "valid_chain",
    "valid_key",
    "valid_pair",
    "key_type",
    "subject",
    "issuer",
    "not_before",
    "not_after",
    "dns_names",
    "warning_validation",
)


class TlsConfigSyncer(BaseSyncer):
    """Encryption settings: HTTPS, DNS-over-TLS/QUIC and the certificate (singleton)."""

    kind = KIND_TLS
    log_prefix = LOG_PREFIX_TLS

    def apply(self, declared: TlsConfigModel) -> Reconciled:
        with self._context():
            status = self._mutate("SET", f"encryption ({declared.server_name or 'no server name'})",
                                  self.client.set_tls_config, tls_to_remote(declared))
            if self.dry_run:
                return Reconciled(SINGLETON_ID, declared)
            observed = tls_to_declared(status, prior=declared, persisted=True)
            if observed.warning_validation:
                log_warning(f"{self.log_prefix} {observed.warning_validation}")
            return Reconciled(self._identity(observed), observed)

    def read(self, prior: Optional[TlsConfigModel] = None) -> Reconciled:
        with self._context():
            observed = tls_to_declared(self.client.tls_status(), prior=prior, persisted=True)
            return Reconciled(SINGLETON_ID, observed)

    def observe(self) -> Reconciled:
        with self._context():
            return Reconciled(SINGLETON_ID, tls_to_declared(self.client.tls_status()))

    def delete(self) -> None:
        """Reset the encryption settings to their defaults."""
        with self._context():
            self._mutate("RESET", "encryption", self.client.set_tls_config, tls_to_remote(TlsConfigModel()))
            log_success(f"{self.log_prefix} Reset to defaults")

    def sync(self, declared: TlsConfigModel) -> Reconciled:
        current = self.read(prior=declared)
        changes = self.changed_fields(current.state, declared, ignore=OBSERVED_ONLY)
        if not changes:
            self._log_unchanged("encryption")
            return current
        log_info(f"{self.log_prefix} Changed: {', '.join(changes)}")
        return self.apply(declared)
