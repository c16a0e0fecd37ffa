from typing import List, Optional

from adguard_gitops.constants import (
    KIND_CLIENT,
    ENUM_BLOCKED_SERVICES,
    ENUM_SAFESEARCH,
    LOG_PREFIX_CLIENT,
)
from adguard_gitops.errors import NotFound
from adguard_gitops.mappers.clients import client_to_remote, client_to_declared
from adguard_gitops.models import ClientModel
from adguard_gitops.syncers.base import BaseSyncer, Reconciled
from adguard_gitops.utils import log_info, log_warning


class ClientSyncer(BaseSyncer):
    """
    Persistent clients, identified by name.

    A name change is a replace: the old client is deleted and a new one
    is added, since the name is what AdGuard Home addresses it by.
    """

    kind = KIND_CLIENT
    log_prefix = LOG_PREFIX_CLIENT

    def normalize(self, declared: ClientModel) -> ClientModel:
        safesearch = self._resolve_safesearch(declared.safesearch, f"{declared.name}.safesearch.services")
        return declared.model_copy(update={"safesearch": safesearch})

    def validate(self, client: ClientModel) -> None:
        self.validator.validate(ENUM_BLOCKED_SERVICES, "blocked_services", client.blocked_services)
        self.validator.validate(ENUM_SAFESEARCH, "safesearch.services", client.safesearch.services,
                                case_insensitive=True)

    def _prepare(self, declared: ClientModel) -> dict:
        desired = self.normalize(declared)
        self.validate(desired)
        return client_to_remote(desired, self._known_safesearch())

    def _read_back(self, declared: ClientModel) -> Reconciled:
        if self.dry_run:
            return Reconciled(declared.name, self.normalize(declared))
        remote = self.client.get_client(declared.name)
        if remote is None:
            raise NotFound(f"client '{declared.name}' missing after write", kind=self.kind, key=declared.name)
        observed = client_to_declared(remote, prior=declared, persisted=True)
        return Reconciled(self._identity(remote), observed)

    def create(self, declared: ClientModel) -> Reconciled:
        with self._context(f"client {declared.name}"):
            payload = self._prepare(declared)
            self._mutate("CREATE", declared.name, self.client.add_client, payload)
            return self._read_back(declared)

    def update(self, declared: ClientModel, prior: ClientModel) -> Reconciled:
        """
        Update a client in place, or replace it when its name changed.

        Args:
            declared: New desired state
            prior: Previously declared state (its name addresses the client)
        """
        with self._context(f"client {declared.name}"):
            payload = self._prepare(declared)
            if prior.name != declared.name:
                log_warning(f"{self.log_prefix} Renaming {prior.name} -> {declared.name} (replace)")
                self._mutate("DELETE", prior.name, self.client.delete_client, prior.name)
                self._mutate("CREATE", declared.name, self.client.add_client, payload)
            else:
                self._mutate("UPDATE", declared.name, self.client.update_client, prior.name, payload)
            return self._read_back(declared)

    def apply(self, declared: ClientModel, prior: Optional[ClientModel] = None) -> Reconciled:
        """Create without prior state, otherwise update (or replace)."""
        if prior is None:
            return self.create(declared)
        return self.update(declared, prior)

    def read(self, identity: str, prior: Optional[ClientModel] = None) -> Reconciled:
        """
        Persisted read of one client.

        Raises:
            NotFound: If no client with this name exists
        """
        with self._context(f"client {identity}"):
            remote = self.client.get_client(identity)
            if remote is None:
                raise NotFound(f"no client with name '{identity}' exists", kind=self.kind, key=identity)
            return Reconciled(identity, client_to_declared(remote, prior=prior, persisted=True))

    def observe(self, identity: str) -> Reconciled:
        with self._context(f"client {identity}"):
            remote = self.client.get_client(identity)
            if remote is None:
                raise NotFound(f"no client with name '{identity}' exists", kind=self.kind, key=identity)
            return Reconciled(identity, client_to_declared(remote))

    def delete(self, identity: str) -> None:
        with self._context(f"client {identity}"):
            self._mutate("DELETE", identity, self.client.delete_client, identity)

    def sync(self, clients: List[ClientModel]) -> List[Reconciled]:
        """Create missing clients and update changed ones. Undeclared clients are left alone."""
        results = []
        for declared in clients:
            try:
                current = self.read(declared.name, prior=declared)
            except NotFound:
                results.append(self.create(declared))
                continue

            with self._context(f"client {declared.name}"):
                changes = self.changed_fields(current.state, self.normalize(declared))
            if not changes:
                self._log_unchanged(declared.name)
                results.append(current)
                continue
            log_info(f"{self.log_prefix} {declared.name} changed: {', '.join(changes)}")
            results.append(self.update(declared, declared))
        return results
