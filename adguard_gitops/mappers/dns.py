"""DNS resolver settings <-> /control/dns_info and /control/dns_config."""

from typing import Any, Dict, Optional

from adguard_gitops.constants import KIND_DNS_CONFIG, DNS_UPSTREAM_MODE
from adguard_gitops.mappers.fields import (
    bool_field,
    int_field,
    str_field,
    list_field,
    set_field,
    optional_list_field,
    mapped_field,
    fields_to_remote,
    fields_to_declared,
    build_model,
)
from adguard_gitops.models import DnsSettingsModel
from adguard_gitops.quirks import apply_quirks


def _upstream_mode_to_remote(value: str) -> str:
    # AdGuard Home encodes load balancing as the empty mode
    return "" if value == DNS_UPSTREAM_MODE else value


def _upstream_mode_to_declared(value: Any) -> str:
    if value is None or value == "":
        return DNS_UPSTREAM_MODE
    if not isinstance(value, str):
        raise TypeError(f"expected string, got {value!r}")
    return value


DNS_FIELDS = (
    list_field("bootstrap_dns"),
    list_field("upstream_dns"),
    str_field("upstream_dns_file", default=""),
    optional_list_field("fallback_dns", default=None),
    bool_field("protection_enabled"),
    int_field("rate_limit", "ratelimit"),
    int_field("rate_limit_subnet_len_ipv4", "ratelimit_subnet_len_ipv4"),
    int_field("rate_limit_subnet_len_ipv6", "ratelimit_subnet_len_ipv6"),
    optional_list_field("rate_limit_whitelist", "ratelimit_whitelist", default=None),
    str_field("blocking_mode"),
    str_field("blocking_ipv4"),
    str_field("blocking_ipv6"),
    int_field("blocked_response_ttl"),
    bool_field("edns_cs_enabled"),
    bool_field("edns_cs_use_custom"),
    str_field("edns_cs_custom_ip"),
    bool_field("disable_ipv6"),
    bool_field("dnssec_enabled"),
    int_field("cache_size"),
    int_field("cache_ttl_min"),
    int_field("cache_ttl_max"),
    bool_field("cache_optimistic"),
    mapped_field("upstream_mode", _upstream_mode_to_remote, _upstream_mode_to_declared),
    bool_field("use_private_ptr_resolvers"),
    bool_field("resolve_clients"),
    set_field("local_ptr_upstreams"),
)


def dns_to_remote(settings: DnsSettingsModel, subsystem: str = KIND_DNS_CONFIG) -> Dict[str, Any]:
    """Build the /control/dns_config payload."""
    return fields_to_remote(settings, DNS_FIELDS, subsystem)


def dns_to_dict(remote: Any, subsystem: str = KIND_DNS_CONFIG) -> Dict[str, Any]:
    """Map /control/dns_info to declared attribute names (no quirks applied)."""
    return fields_to_declared(remote, DNS_FIELDS, subsystem)


def dns_to_declared(remote: Any, prior: Optional[DnsSettingsModel] = None,
                    persisted: bool = False) -> DnsSettingsModel:
    """
    Map /control/dns_info to a declared DnsSettingsModel.

    Args:
        remote: Response of /control/dns_info
        prior: Prior declared state, if any
        persisted: Persisted read (True) or read-only view (False)

    Returns:
        Observed declared settings with remote quirks masked
    """
    observed = dns_to_dict(remote)
    prior_dict = prior.model_dump() if prior is not None else None
    apply_quirks(KIND_DNS_CONFIG, observed, prior_dict, persisted)
    return build_model(DnsSettingsModel, observed, KIND_DNS_CONFIG)
