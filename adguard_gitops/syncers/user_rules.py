from adguard_gitops.constants import KIND_USER_RULES, SINGLETON_ID, LOG_PREFIX_RULES
from adguard_gitops.mappers.rules import user_rules_to_remote, user_rules_to_declared
from adguard_gitops.models import UserRulesModel
from adguard_gitops.syncers.base import BaseSyncer, Reconciled
from adguard_gitops.utils import log_success, log_info


class UserRulesSyncer(BaseSyncer):
    """Custom filtering rules (singleton). Deleting clears all rules."""

    kind = KIND_USER_RULES
    log_prefix = LOG_PREFIX_RULES

    def apply(self, declared: UserRulesModel) -> Reconciled:
        with self._context():
            self._mutate("SET", f"{len(declared.rules)} user rules", self.client.set_user_rules,
                         user_rules_to_remote(declared))
            if self.dry_run:
                return Reconciled(SINGLETON_ID, declared)
            observed = user_rules_to_declared(self.client.filtering_status())
            return Reconciled(self._identity(observed), observed)

    def read(self) -> Reconciled:
        with self._context():
            return Reconciled(SINGLETON_ID, user_rules_to_declared(self.client.filtering_status()))

    def delete(self) -> None:
        with self._context():
            self._mutate("RESET", "user rules", self.client.set_user_rules, user_rules_to_remote(UserRulesModel()))
            log_success(f"{self.log_prefix} Cleared user rules")

    def sync(self, declared: UserRulesModel) -> Reconciled:
        current = self.read()
        if not self.changed_fields(current.state, declared):
            self._log_unchanged("user rules")
            return current
        log_info(f"{self.log_prefix} Rules changed")
        return self.apply(declared)
