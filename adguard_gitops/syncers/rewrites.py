from typing import Any, List, Optional

from adguard_gitops.constants import KIND_REWRITE, LOG_PREFIX_REWRITE
from adguard_gitops.errors import NotFound
from adguard_gitops.identity import parse_rewrite_id, rewrite_id
from adguard_gitops.mappers.rules import rewrite_to_remote, rewrite_to_declared
from adguard_gitops.models import RewriteModel
from adguard_gitops.syncers.base import BaseSyncer, Reconciled
from adguard_gitops.utils import log_info


class RewriteSyncer(BaseSyncer):
    """
    DNS rewrites, identified by "domain||answer".

    Both parts form the natural key, so any change is a replace.
    """

    kind = KIND_REWRITE
    log_prefix = LOG_PREFIX_REWRITE

    def create(self, declared: RewriteModel) -> Reconciled:
        identity = rewrite_id(declared.domain, declared.answer)
        with self._context(f"rewrite {identity}"):
            self._mutate("CREATE", identity, self.client.add_rewrite, rewrite_to_remote(declared))
            if self.dry_run:
                return Reconciled(identity, declared)
        return self.read(identity)

    def update(self, identity: str, declared: RewriteModel, prior: Optional[Any] = None) -> Reconciled:
        """
        Replace an existing rewrite by the declared one.

        Args:
            identity: Current identity; rebuilt from `prior` if it lacks the separator
            declared: New desired rewrite
            prior: Previously declared rewrite
        """
        new_identity = rewrite_id(declared.domain, declared.answer)
        with self._context(f"rewrite {identity}"):
            domain, answer = parse_rewrite_id(identity, prior)
        if rewrite_id(domain, answer) == new_identity:
            return self.read(new_identity)

        log_info(f"{self.log_prefix} {rewrite_id(domain, answer)} -> {new_identity} (replace)")
        self.delete(identity, prior)
        return self.create(declared)

    def apply(self, declared: RewriteModel, identity: Optional[str] = None,
              prior: Optional[RewriteModel] = None) -> Reconciled:
        if identity is None and prior is None:
            return self.create(declared)
        return self.update(identity or "", declared, prior)

    def read(self, identity: str, prior: Optional[RewriteModel] = None) -> Reconciled:
        """
        Read one rewrite.

        Raises:
            NotFound: If the domain/answer pair does not exist
        """
        with self._context(f"rewrite {identity}"):
            domain, answer = parse_rewrite_id(identity, prior)
            remote = self.client.get_rewrite(domain, answer)
            if remote is None:
                raise NotFound(f"no rewrite for {domain} -> {answer} exists", kind=self.kind,
                               key=rewrite_id(domain, answer))
            observed = rewrite_to_declared(remote)
            return Reconciled(self._identity(observed), observed)

    def delete(self, identity: str, prior: Optional[RewriteModel] = None) -> None:
        with self._context(f"rewrite {identity}"):
            domain, answer = parse_rewrite_id(identity, prior)
            self._mutate("DELETE", rewrite_id(domain, answer), self.client.delete_rewrite,
                         {"domain": domain, "answer": answer})

    def sync(self, rewrites: List[RewriteModel]) -> List[Reconciled]:
        """Create every declared rewrite that does not exist yet."""
        results = []
        for declared in rewrites:
            identity = rewrite_id(declared.domain, declared.answer)
            try:
                current = self.read(identity)
            except NotFound:
                results.append(self.create(declared))
                continue
            self._log_unchanged(identity)
            results.append(current)
        return results
