"""Small subsystems: DNS access list, user rules, list filters and rewrites."""

from typing import Any, Dict

from adguard_gitops.constants import (
    KIND_DNS_ACCESS,
    KIND_USER_RULES,
    KIND_LIST_FILTER,
    KIND_REWRITE,
)
from adguard_gitops.errors import MappingFailed
from adguard_gitops.mappers.fields import (
    bool_field,
    int_field,
    str_field,
    list_field,
    fields_to_remote,
    fields_to_declared,
    build_model,
)
from adguard_gitops.models import DnsAccessModel, UserRulesModel, ListFilterModel, RewriteModel

ACCESS_FIELDS = (
    list_field("allowed_clients", default=[]),
    list_field("disallowed_clients", default=[]),
    list_field("blocked_hosts", default=[]),
)

USER_RULES_FIELDS = (
    list_field("rules", "user_rules", default=[]),
)

# Payload of "data" in /control/filtering/set_url
LIST_FILTER_DATA_FIELDS = (
    str_field("name"),
    str_field("url"),
    bool_field("enabled"),
)

LIST_FILTER_OBSERVED_FIELDS = LIST_FILTER_DATA_FIELDS + (
    int_field("rules_count", default=0),
    str_field("last_updated", default=""),
)

REWRITE_FIELDS = (
    str_field("domain"),
    str_field("answer"),
)


# ============================================================================
# DNS ACCESS
# ============================================================================

def access_to_remote(access: DnsAccessModel) -> Dict[str, Any]:
    return fields_to_remote(access, ACCESS_FIELDS, KIND_DNS_ACCESS)


def access_to_declared(remote: Any) -> DnsAccessModel:
    return build_model(DnsAccessModel, fields_to_declared(remote, ACCESS_FIELDS, KIND_DNS_ACCESS), KIND_DNS_ACCESS)


# ============================================================================
# USER RULES
# ============================================================================

def user_rules_to_remote(rules: UserRulesModel) -> Dict[str, Any]:
    """Payload of /control/filtering/set_rules."""
    return {"rules": fields_to_remote(rules, USER_RULES_FIELDS, KIND_USER_RULES)["user_rules"]}


def user_rules_to_declared(filtering_status: Any) -> UserRulesModel:
    """Extract user rules from /control/filtering/status."""
    observed = fields_to_declared(filtering_status, USER_RULES_FIELDS, KIND_USER_RULES)
    return build_model(UserRulesModel, observed, KIND_USER_RULES)


# ============================================================================
# LIST FILTERS
# ============================================================================

def list_filter_data(list_filter: ListFilterModel) -> Dict[str, Any]:
    """The "data" object of /control/filtering/set_url."""
    return fields_to_remote(list_filter, LIST_FILTER_DATA_FIELDS, KIND_LIST_FILTER)


def list_filter_to_declared(remote: Any, whitelist: bool) -> ListFilterModel:
    """
    Map a filter entry of /control/filtering/status.

    Args:
        remote: Entry of "filters" or "whitelist_filters"
        whitelist: Which of the two lists the entry came from
    """
    observed = fields_to_declared(remote, LIST_FILTER_OBSERVED_FIELDS, KIND_LIST_FILTER)
    filter_id = remote.get("id")
    if isinstance(filter_id, bool) or not isinstance(filter_id, int):
        raise MappingFailed(f"{KIND_LIST_FILTER}.id: expected integer, got {filter_id!r}")
    observed["id"] = str(filter_id)
    observed["whitelist"] = whitelist
    return build_model(ListFilterModel, observed, KIND_LIST_FILTER)


# ============================================================================
# REWRITES
# ============================================================================

def rewrite_to_remote(rewrite: RewriteModel) -> Dict[str, Any]:
    return fields_to_remote(rewrite, REWRITE_FIELDS, KIND_REWRITE)


def rewrite_to_declared(remote: Any) -> RewriteModel:
    return build_model(RewriteModel, fields_to_declared(remote, REWRITE_FIELDS, KIND_REWRITE), KIND_REWRITE)
