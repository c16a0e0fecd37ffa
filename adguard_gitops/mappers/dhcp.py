"""
DHCP server <-> /control/dhcp/status and /control/dhcp/set_config.

Static leases are not part of the config payload; they are added and
removed one by one (see syncers.dhcp).
"""

from typing import Any, Dict, List

from adguard_gitops.constants import KIND_DHCP, DHCP_LEASE_DURATION
from adguard_gitops.errors import MappingFailed
from adguard_gitops.mappers.fields import (
    bool_field,
    int_field,
    str_field,
    fields_to_remote,
    fields_to_declared,
    build_model,
)
from adguard_gitops.models import DhcpConfigModel, StaticLeaseModel
from adguard_gitops.utils import safe_getattr

DHCP_FIELDS = (
    bool_field("enabled"),
    str_field("interface", "interface_name", default=""),
)

# An unconfigured scope is reported as {}
IPV4_FIELDS = (
    str_field("gateway_ip", default=""),
    str_field("subnet_mask", default=""),
    str_field("range_start", default=""),
    str_field("range_end", default=""),
    int_field("lease_duration", default=DHCP_LEASE_DURATION),
)

IPV6_FIELDS = (
    str_field("range_start", default=""),
    int_field("lease_duration", default=DHCP_LEASE_DURATION),
)

STATIC_LEASE_FIELDS = (
    str_field("mac"),
    str_field("ip"),
    str_field("hostname"),
)

LEASE_FIELDS = STATIC_LEASE_FIELDS + (
    str_field("expires", default=""),
)


def dhcp_to_remote(dhcp: DhcpConfigModel) -> Dict[str, Any]:
    """Build the /control/dhcp/set_config payload."""
    payload = fields_to_remote(dhcp, DHCP_FIELDS, KIND_DHCP)
    payload["v4"] = fields_to_remote(dhcp.ipv4_settings, IPV4_FIELDS, "dhcp.ipv4_settings")
    payload["v6"] = fields_to_remote(dhcp.ipv6_settings, IPV6_FIELDS, "dhcp.ipv6_settings")
    return payload


def lease_to_remote(lease: StaticLeaseModel) -> Dict[str, Any]:
    """Payload of /control/dhcp/add_static_lease and remove_static_lease."""
    return fields_to_remote(lease, STATIC_LEASE_FIELDS, "dhcp.static_leases")


def _entries(remote: Dict[str, Any], key: str, specs, subsystem: str) -> List[Dict[str, Any]]:
    entries = remote.get(key) or []
    if not isinstance(entries, list):
        raise MappingFailed(f"{subsystem}: expected list, got {type(entries).__name__}")
    return [fields_to_declared(entry, specs, subsystem) for entry in entries]


def dhcp_to_declared(remote: Any) -> DhcpConfigModel:
    """
    Map /control/dhcp/status to a declared DhcpConfigModel.

    Static leases are always reported (an empty list when there are none),
    dynamic leases fill the observed-only `leases` field.
    """
    observed = fields_to_declared(remote, DHCP_FIELDS, KIND_DHCP)
    observed["ipv4_settings"] = fields_to_declared(
        safe_getattr(remote, "v4") or {}, IPV4_FIELDS, "dhcp.ipv4_settings"
    )
    observed["ipv6_settings"] = fields_to_declared(
        safe_getattr(remote, "v6") or {}, IPV6_FIELDS, "dhcp.ipv6_settings"
    )
    observed["static_leases"] = _entries(remote, "static_leases", STATIC_LEASE_FIELDS, "dhcp.static_leases")
    observed["leases"] = _entries(remote, "leases", LEASE_FIELDS, "dhcp.leases")
    return build_model(DhcpConfigModel, observed, KIND_DHCP)
