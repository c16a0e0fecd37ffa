"""Persistent clients <-> entries of /control/clients."""

from typing import Any, Dict, Iterable, Optional

from adguard_gitops.constants import KIND_CLIENT
from adguard_gitops.mappers.fields import (
    bool_field,
    int_field,
    str_field,
    list_field,
    set_field,
    fields_to_remote,
    fields_to_declared,
    build_model,
)
from adguard_gitops.mappers.safesearch import services_to_flags, flags_to_services
from adguard_gitops.mappers.schedule import schedule_to_remote, schedule_to_declared
from adguard_gitops.models import ClientModel
from adguard_gitops.quirks import apply_quirks

CLIENT_FIELDS = (
    str_field("name"),
    set_field("ids"),
    bool_field("use_global_settings"),
    bool_field("filtering_enabled"),
    bool_field("parental_enabled"),
    bool_field("safebrowsing_enabled"),
    bool_field("use_global_blocked_services"),
    set_field("blocked_services", default=set()),
    list_field("upstreams", default=[]),
    set_field("tags", default=set()),
    bool_field("ignore_querylog", default=False),
    bool_field("ignore_statistics", default=False),
    bool_field("upstreams_cache_enabled", default=False),
    int_field("upstreams_cache_size", default=0),
)


def client_to_remote(client: ClientModel, known_services: Iterable[str] = ()) -> Dict[str, Any]:
    """
    Build the client object used by /control/clients/add and /update.

    Args:
        client: Normalized declared client (safe-search services resolved)
        known_services: Safe-search identifiers reported by the live appliance
    """
    payload = fields_to_remote(client, CLIENT_FIELDS, KIND_CLIENT)
    payload["safe_search"] = services_to_flags(
        client.safesearch.enabled,
        client.safesearch.services or (),
        known_services,
    )
    payload["blocked_services_schedule"] = schedule_to_remote(client.blocked_services_pause_schedule)
    return payload


def client_to_declared(remote: Any, prior: Optional[ClientModel] = None,
                       persisted: bool = False) -> ClientModel:
    """Map one client entry back to a declared ClientModel."""
    observed = fields_to_declared(remote, CLIENT_FIELDS, KIND_CLIENT)

    enabled, services = flags_to_services(remote.get("safe_search"), "client.safe_search")
    observed["safesearch"] = {"enabled": enabled, "services": services}
    observed["blocked_services_pause_schedule"] = schedule_to_declared(
        remote.get("blocked_services_schedule"), "client.blocked_services_schedule"
    )

    prior_dict = prior.model_dump() if prior is not None else None
    apply_quirks(KIND_CLIENT, observed, prior_dict, persisted)
    return build_model(ClientModel, observed, KIND_CLIENT)
