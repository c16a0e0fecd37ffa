from typing import Any, Dict, Optional

from adguard_gitops.constants import (
    KIND_CONFIG,
    SINGLETON_ID,
    ENUM_BLOCKED_SERVICES,
    ENUM_SAFESEARCH,
    LOG_PREFIX_CONFIG,
)
from adguard_gitops.mappers.config import config_to_remote, config_to_declared
from adguard_gitops.models import ConfigModel
from adguard_gitops.syncers.base import BaseSyncer, Reconciled
from adguard_gitops.utils import log_success, log_info


class ConfigSyncer(BaseSyncer):
    """
    Global AdGuard Home configuration (singleton, identity "1").

    An apply is eight independent API calls. If one fails the cycle stops
    there and the calls before it stay applied.
    """

    kind = KIND_CONFIG
    log_prefix = LOG_PREFIX_CONFIG

    def normalize(self, declared: ConfigModel) -> ConfigModel:
        safesearch = self._resolve_safesearch(declared.safesearch, "safesearch.services")
        return declared.model_copy(update={"safesearch": safesearch})

    def validate(self, config: ConfigModel) -> None:
        self.validator.validate(ENUM_BLOCKED_SERVICES, "blocked_services", config.blocked_services)
        self.validator.validate(ENUM_SAFESEARCH, "safesearch.services", config.safesearch.services,
                                case_insensitive=True)

    def _push(self, remote: Dict[str, Any]) -> None:
        """Send every section, in a fixed order, without rollback."""
        self._mutate("SET", "filtering", self.client.set_filtering_config, remote["filtering"])
        self._mutate("SET", f"safebrowsing={remote['safebrowsing']}", self.client.set_safebrowsing,
                     remote["safebrowsing"])
        self._mutate("SET", f"parental={remote['parental']}", self.client.set_parental, remote["parental"])
        self._mutate("SET", "safesearch", self.client.set_safesearch, remote["safesearch"])
        self._mutate("SET", "querylog", self.client.set_querylog_config, remote["querylog"])
        self._mutate("SET", "stats", self.client.set_stats_config, remote["stats"])
        self._mutate("SET", "blocked services", self.client.set_blocked_services, remote["blocked_services"])
        self._mutate("SET", "dns", self.client.set_dns_config, remote["dns"])

    def _fetch(self) -> Dict[str, Any]:
        filtering = self.client.filtering_status()
        return {
            "filtering": {"enabled": filtering.get("enabled"), "interval": filtering.get("interval")},
            "safebrowsing": self.client.safebrowsing_status(),
            "parental": self.client.parental_status(),
            "safesearch": self.client.safesearch_status(),
            "querylog": self.client.querylog_config(),
            "stats": self.client.stats_config(),
            "blocked_services": self.client.blocked_services(),
            "dns": self.client.dns_info(),
        }

    def apply(self, declared: ConfigModel) -> Reconciled:
        """
        Reconcile the global configuration.

        Args:
            declared: Desired configuration

        Returns:
            Identity "1" and the configuration as read back from AdGuard Home
        """
        with self._context():
            desired = self.normalize(declared)
            self.validate(desired)
            remote = config_to_remote(desired, self._known_safesearch())
            self._push(remote)
            if self.dry_run:
                return Reconciled(SINGLETON_ID, desired)
            observed = config_to_declared(self._fetch(), prior=declared, persisted=True)
            return Reconciled(self._identity(observed), observed)

    def read(self, prior: Optional[ConfigModel] = None) -> Reconciled:
        """Persisted read; `prior` is the last declared state (None when adopting)."""
        with self._context():
            observed = config_to_declared(self._fetch(), prior=prior, persisted=True)
            return Reconciled(SINGLETON_ID, observed)

    def observe(self) -> Reconciled:
        """Read-only view, remote values taken verbatim."""
        with self._context():
            return Reconciled(SINGLETON_ID, config_to_declared(self._fetch()))

    def delete(self) -> None:
        """Reset every global setting to its default."""
        with self._context():
            defaults = self.normalize(ConfigModel())
            self._push(config_to_remote(defaults, self._known_safesearch()))
            log_success(f"{self.log_prefix} Reset to defaults")

    def sync(self, declared: ConfigModel) -> Reconciled:
        """Apply only when the live configuration differs from the declared one."""
        current = self.read(prior=declared)
        with self._context():
            changes = self.changed_fields(current.state, self.normalize(declared))
        if not changes:
            self._log_unchanged("global configuration")
            return current
        log_info(f"{self.log_prefix} Changed: {', '.join(changes)}")
        return self.apply(declared)
