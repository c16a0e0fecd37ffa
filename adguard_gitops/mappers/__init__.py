"""Bidirectional mappers between declared models and AdGuard Home wire shapes."""

from adguard_gitops.mappers.config import config_to_remote, config_to_declared
from adguard_gitops.mappers.clients import client_to_remote, client_to_declared
from adguard_gitops.mappers.dns import dns_to_remote, dns_to_declared
from adguard_gitops.mappers.safesearch import services_to_flags, flags_to_services
from adguard_gitops.mappers.schedule import schedule_to_remote, schedule_to_declared
from adguard_gitops.mappers.dhcp import dhcp_to_remote, dhcp_to_declared
from adguard_gitops.mappers.tls import tls_to_remote, tls_to_declared

__all__ = [
    'config_to_remote',
    'config_to_declared',
    'client_to_remote',
    'client_to_declared',
    'dns_to_remote',
    'dns_to_declared',
    'services_to_flags',
    'flags_to_services',
    'schedule_to_remote',
    'schedule_to_declared',
    'dhcp_to_remote',
    'dhcp_to_declared',
    'tls_to_remote',
    'tls_to_declared',
]
