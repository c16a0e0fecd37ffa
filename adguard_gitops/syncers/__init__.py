"""Orchestrators reconciling each AdGuard Home subsystem."""

from adguard_gitops.syncers.base import BaseSyncer, Reconciled
from adguard_gitops.syncers.config import ConfigSyncer
from adguard_gitops.syncers.clients import ClientSyncer
from adguard_gitops.syncers.dns_config import DnsConfigSyncer
from adguard_gitops.syncers.dns_access import DnsAccessSyncer
from adguard_gitops.syncers.list_filters import ListFilterSyncer
from adguard_gitops.syncers.rewrites import RewriteSyncer
from adguard_gitops.syncers.user_rules import UserRulesSyncer
from adguard_gitops.syncers.dhcp import DhcpConfigSyncer
from adguard_gitops.syncers.tls import TlsConfigSyncer

__all__ = [
    'BaseSyncer',
    'Reconciled',
    'ConfigSyncer',
    'ClientSyncer',
    'DnsConfigSyncer',
    'DnsAccessSyncer',
    'ListFilterSyncer',
    'RewriteSyncer',
    'UserRulesSyncer',
    'DhcpConfigSyncer',
    'TlsConfigSyncer',
]
