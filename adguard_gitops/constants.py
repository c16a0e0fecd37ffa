"""
Central configuration and constants for AdGuard GitOps Controller.
This module contains all magic strings, default values, and configuration
that should be easily accessible and modifiable.
"""

from typing import Final

# ============================================================================
# IDENTITY
# ============================================================================
# Singleton subsystems have exactly one remote instance
SINGLETON_ID: Final[str] = "1"
REWRITE_ID_SEPARATOR: Final[str] = "||"

KIND_CONFIG: Final[str] = "config"
KIND_DNS_CONFIG: Final[str] = "dns_config"
KIND_DNS_ACCESS: Final[str] = "dns_access"
KIND_USER_RULES: Final[str] = "user_rules"
KIND_CLIENT: Final[str] = "client"
KIND_LIST_FILTER: Final[str] = "list_filter"
KIND_REWRITE: Final[str] = "rewrite"
KIND_DHCP: Final[str] = "dhcp"
KIND_TLS: Final[str] = "tls"

SINGLETON_KINDS: Final[frozenset] = frozenset([
    KIND_CONFIG,
    KIND_DNS_CONFIG,
    KIND_DNS_ACCESS,
    KIND_USER_RULES,
    KIND_DHCP,
    KIND_TLS,
])

# ============================================================================
# ENUMERATION KINDS
# ============================================================================
ENUM_BLOCKED_SERVICES: Final[str] = "blocked_services"
ENUM_SAFESEARCH: Final[str] = "safesearch"

# ============================================================================
# ADGUARD API ENDPOINTS
# ============================================================================
API_PREFIX: Final[str] = "/control"

EP_FILTERING_STATUS: Final[str] = "filtering/status"
EP_FILTERING_CONFIG: Final[str] = "filtering/config"
EP_FILTERING_ADD_URL: Final[str] = "filtering/add_url"
EP_FILTERING_SET_URL: Final[str] = "filtering/set_url"
EP_FILTERING_REMOVE_URL: Final[str] = "filtering/remove_url"
EP_FILTERING_SET_RULES: Final[str] = "filtering/set_rules"
EP_SAFEBROWSING: Final[str] = "safebrowsing"
EP_PARENTAL: Final[str] = "parental"
EP_SAFESEARCH_STATUS: Final[str] = "safesearch/status"
EP_SAFESEARCH_SETTINGS: Final[str] = "safesearch/settings"
EP_QUERYLOG_CONFIG: Final[str] = "querylog/config"
EP_QUERYLOG_CONFIG_UPDATE: Final[str] = "querylog/config/update"
EP_STATS_CONFIG: Final[str] = "stats/config"
EP_STATS_CONFIG_UPDATE: Final[str] = "stats/config/update"
EP_BLOCKED_SERVICES_GET: Final[str] = "blocked_services/get"
EP_BLOCKED_SERVICES_UPDATE: Final[str] = "blocked_services/update"
EP_BLOCKED_SERVICES_ALL: Final[str] = "blocked_services/all"
EP_DNS_INFO: Final[str] = "dns_info"
EP_DNS_CONFIG: Final[str] = "dns_config"
EP_ACCESS_LIST: Final[str] = "access/list"
EP_ACCESS_SET: Final[str] = "access/set"
EP_CLIENTS: Final[str] = "clients"
EP_CLIENTS_ADD: Final[str] = "clients/add"
EP_CLIENTS_UPDATE: Final[str] = "clients/update"
EP_CLIENTS_DELETE: Final[str] = "clients/delete"
EP_REWRITE_LIST: Final[str] = "rewrite/list"
EP_REWRITE_ADD: Final[str] = "rewrite/add"
EP_REWRITE_DELETE: Final[str] = "rewrite/delete"
EP_DHCP_STATUS: Final[str] = "dhcp/status"
EP_DHCP_SET_CONFIG: Final[str] = "dhcp/set_config"
EP_DHCP_RESET: Final[str] = "dhcp/reset"
EP_DHCP_ADD_STATIC_LEASE: Final[str] = "dhcp/add_static_lease"
EP_DHCP_REMOVE_STATIC_LEASE: Final[str] = "dhcp/remove_static_lease"
EP_TLS_STATUS: Final[str] = "tls/status"
EP_TLS_CONFIGURE: Final[str] = "tls/configure"

# ============================================================================
# CONNECTION DEFAULTS
# ============================================================================
DEFAULT_SCHEME: Final[str] = "https"
DEFAULT_TIMEOUT: Final[int] = 10  # seconds
MIN_TIMEOUT: Final[int] = 1
MAX_TIMEOUT: Final[int] = 60

# ============================================================================
# UNIT CONVERSION
# ============================================================================
MS_PER_HOUR: Final[int] = 3600 * 1000
MS_PER_MINUTE: Final[int] = 60 * 1000
MINUTES_PER_DAY: Final[int] = 1440

# ============================================================================
# GLOBAL CONFIG DEFAULTS
# ============================================================================
CONFIG_FILTERING_ENABLED: Final[bool] = True
CONFIG_FILTERING_UPDATE_INTERVAL: Final[int] = 24  # hours
CONFIG_SAFEBROWSING_ENABLED: Final[bool] = False
CONFIG_PARENTAL_CONTROL_ENABLED: Final[bool] = False
CONFIG_SAFE_SEARCH_ENABLED: Final[bool] = False
CONFIG_QUERYLOG_ENABLED: Final[bool] = True
CONFIG_QUERYLOG_INTERVAL: Final[int] = 2160  # hours
CONFIG_QUERYLOG_ANONYMIZE_CLIENT_IP: Final[bool] = False
CONFIG_STATS_ENABLED: Final[bool] = True
CONFIG_STATS_INTERVAL: Final[int] = 24  # hours

# Static vocabulary of safe-search engines known to AdGuard Home
SAFE_SEARCH_SERVICES: Final[tuple] = (
    "bing",
    "duckduckgo",
    "google",
    "pixabay",
    "yandex",
    "youtube",
)

# ============================================================================
# SCHEDULE
# ============================================================================
WEEKDAYS: Final[tuple] = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")
SCHEDULE_START_MAX: Final[int] = 1439  # minutes
SCHEDULE_END_MAX: Final[int] = 1440  # minutes

# ============================================================================
# DNS CONFIG DEFAULTS
# ============================================================================
DNS_BOOTSTRAP: Final[tuple] = ("9.9.9.10", "149.112.112.10", "2620:fe::10", "2620:fe::fe:10")
DNS_UPSTREAM: Final[tuple] = ("https://dns10.quad9.net/dns-query",)
DNS_PROTECTION_ENABLED: Final[bool] = True
DNS_RATE_LIMIT: Final[int] = 20
DNS_RATE_LIMIT_SUBNET_LEN_IPV4: Final[int] = 24
DNS_RATE_LIMIT_SUBNET_LEN_IPV6: Final[int] = 56
DNS_BLOCKING_MODE: Final[str] = "default"
DNS_BLOCKING_MODE_CUSTOM_IP: Final[str] = "custom_ip"
DNS_BLOCKING_MODES: Final[tuple] = ("default", "refused", "nxdomain", "null_ip", "custom_ip")
DNS_BLOCKED_RESPONSE_TTL: Final[int] = 10
DNS_EDNS_CS_ENABLED: Final[bool] = False
DNS_EDNS_CS_USE_CUSTOM: Final[bool] = False
DNS_DISABLE_IPV6: Final[bool] = False
DNS_DNSSEC_ENABLED: Final[bool] = False
DNS_CACHE_SIZE: Final[int] = 4194304
DNS_CACHE_TTL_MIN: Final[int] = 0
DNS_CACHE_TTL_MAX: Final[int] = 0
DNS_CACHE_OPTIMISTIC: Final[bool] = False
DNS_UPSTREAM_MODE: Final[str] = "load_balance"
DNS_UPSTREAM_MODES: Final[tuple] = ("load_balance", "parallel", "fastest_addr")
DNS_USE_PRIVATE_PTR_RESOLVERS: Final[bool] = True
DNS_RESOLVE_CLIENTS: Final[bool] = True

# ============================================================================
# DNS ACCESS DEFAULTS
# ============================================================================
DNS_ACCESS_BLOCKED_HOSTS: Final[tuple] = ("version.bind", "id.server", "hostname.bind")

# ============================================================================
# CLIENT DEFAULTS
# ============================================================================
CLIENT_USE_GLOBAL_SETTINGS: Final[bool] = True
CLIENT_FILTERING_ENABLED: Final[bool] = False
CLIENT_PARENTAL_ENABLED: Final[bool] = False
CLIENT_SAFEBROWSING_ENABLED: Final[bool] = False
CLIENT_USE_GLOBAL_BLOCKED_SERVICES: Final[bool] = True
CLIENT_IGNORE_QUERYLOG: Final[bool] = False
CLIENT_IGNORE_STATISTICS: Final[bool] = False
CLIENT_UPSTREAMS_CACHE_ENABLED: Final[bool] = False
CLIENT_UPSTREAMS_CACHE_SIZE: Final[int] = 0
CLIENT_UPSTREAMS_CACHE_SIZE_MAX: Final[int] = 4294967295
CLIENT_ID_PATTERN: Final[str] = r"^[a-z0-9/.:-]+$"

# ============================================================================
# LIST FILTER DEFAULTS
# ============================================================================
LIST_FILTER_ENABLED: Final[bool] = True
LIST_FILTER_WHITELIST: Final[bool] = False

# ============================================================================
# REWRITE DEFAULTS
# ============================================================================
REWRITE_ANSWER_PATTERN: Final[str] = r"^[A-Za-z0-9/.:-]+$"

# ============================================================================
# DHCP DEFAULTS
# ============================================================================
DHCP_ENABLED: Final[bool] = False
DHCP_LEASE_DURATION: Final[int] = 86400  # seconds
DHCP_MAC_PATTERN: Final[str] = r"^[a-f0-9:]+$"
DHCP_HOSTNAME_PATTERN: Final[str] = r"^[a-z0-9-]+$"

# ============================================================================
# TLS DEFAULTS
# ============================================================================
TLS_ENABLED: Final[bool] = False
TLS_FORCE_HTTPS: Final[bool] = False
TLS_PORT_HTTPS: Final[int] = 443
TLS_PORT_DNS_OVER_TLS: Final[int] = 853
TLS_PORT_DNS_OVER_QUIC: Final[int] = 853
TLS_SERVE_PLAIN_DNS: Final[bool] = True
PORT_MAX: Final[int] = 65535
# Matched against the first two characters: "/etc/..." or "C:\\..."
TLS_FILE_PATH_PATTERN: Final[str] = r"^/\w|\w:"
# Reported by AdGuard Home for certificates without validity dates
TLS_UNSET_TIMESTAMP: Final[str] = "0001-01-01T00:00:00Z"

# ============================================================================
# DECLARATION LAYOUT
# ============================================================================
DEFINITIONS_ROOT: Final[str] = "adguard"
FILE_CONFIG: Final[str] = "adguard/config.yaml"
FILE_DNS_CONFIG: Final[str] = "adguard/dns_config.yaml"
FILE_DNS_ACCESS: Final[str] = "adguard/dns_access.yaml"
FILE_USER_RULES: Final[str] = "adguard/user_rules.yaml"
FILE_DHCP: Final[str] = "adguard/dhcp.yaml"
FILE_TLS: Final[str] = "adguard/tls.yaml"
FOLDER_CLIENTS: Final[str] = "adguard/clients"
FOLDER_LIST_FILTERS: Final[str] = "adguard/list_filters"
FOLDER_REWRITES: Final[str] = "adguard/rewrites"

# ============================================================================
# LOGGING
# ============================================================================
LOG_PREFIX_CONFIG: Final[str] = "[Config]"
LOG_PREFIX_DNS: Final[str] = "[DNS]"
LOG_PREFIX_ACCESS: Final[str] = "[Access]"
LOG_PREFIX_CLIENT: Final[str] = "[Client]"
LOG_PREFIX_FILTER: Final[str] = "[Filter]"
LOG_PREFIX_REWRITE: Final[str] = "[Rewrite]"
LOG_PREFIX_RULES: Final[str] = "[Rules]"
LOG_PREFIX_DHCP: Final[str] = "[DHCP]"
LOG_PREFIX_TLS: Final[str] = "[TLS]"
