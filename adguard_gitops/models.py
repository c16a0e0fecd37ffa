import ipaddress
import re
from typing import Optional, Literal, List, Set
from pydantic import BaseModel, Field, field_validator, model_validator

from adguard_gitops.constants import (
    SCHEDULE_START_MAX,
    SCHEDULE_END_MAX,
    WEEKDAYS,
    CONFIG_FILTERING_ENABLED,
    CONFIG_FILTERING_UPDATE_INTERVAL,
    CONFIG_SAFEBROWSING_ENABLED,
    CONFIG_PARENTAL_CONTROL_ENABLED,
    CONFIG_SAFE_SEARCH_ENABLED,
    CONFIG_QUERYLOG_ENABLED,
    CONFIG_QUERYLOG_INTERVAL,
    CONFIG_QUERYLOG_ANONYMIZE_CLIENT_IP,
    CONFIG_STATS_ENABLED,
    CONFIG_STATS_INTERVAL,
    DNS_BOOTSTRAP,
    DNS_UPSTREAM,
    DNS_PROTECTION_ENABLED,
    DNS_RATE_LIMIT,
    DNS_RATE_LIMIT_SUBNET_LEN_IPV4,
    DNS_RATE_LIMIT_SUBNET_LEN_IPV6,
    DNS_BLOCKING_MODE,
    DNS_BLOCKING_MODE_CUSTOM_IP,
    DNS_BLOCKED_RESPONSE_TTL,
    DNS_EDNS_CS_ENABLED,
    DNS_EDNS_CS_USE_CUSTOM,
    DNS_DISABLE_IPV6,
    DNS_DNSSEC_ENABLED,
    DNS_CACHE_SIZE,
    DNS_CACHE_TTL_MIN,
    DNS_CACHE_TTL_MAX,
    DNS_CACHE_OPTIMISTIC,
    DNS_UPSTREAM_MODE,
    DNS_USE_PRIVATE_PTR_RESOLVERS,
    DNS_RESOLVE_CLIENTS,
    DNS_ACCESS_BLOCKED_HOSTS,
    CLIENT_USE_GLOBAL_SETTINGS,
    CLIENT_FILTERING_ENABLED,
    CLIENT_PARENTAL_ENABLED,
    CLIENT_SAFEBROWSING_ENABLED,
    CLIENT_USE_GLOBAL_BLOCKED_SERVICES,
    CLIENT_IGNORE_QUERYLOG,
    CLIENT_IGNORE_STATISTICS,
    CLIENT_UPSTREAMS_CACHE_ENABLED,
    CLIENT_UPSTREAMS_CACHE_SIZE,
    CLIENT_UPSTREAMS_CACHE_SIZE_MAX,
    CLIENT_ID_PATTERN,
    LIST_FILTER_ENABLED,
    LIST_FILTER_WHITELIST,
    REWRITE_ANSWER_PATTERN,
    DHCP_ENABLED,
    DHCP_LEASE_DURATION,
    DHCP_MAC_PATTERN,
    DHCP_HOSTNAME_PATTERN,
    TLS_ENABLED,
    TLS_FORCE_HTTPS,
    TLS_PORT_HTTPS,
    TLS_PORT_DNS_OVER_TLS,
    TLS_PORT_DNS_OVER_QUIC,
    TLS_SERVE_PLAIN_DNS,
    PORT_MAX,
)
from adguard_gitops.utils import clock_to_minutes


# =========================================================
# SCHEDULE MODELS
# =========================================================

class DayRange(BaseModel):
    """Pause window for one weekday, in minutes from midnight."""
    start: int = Field(0, ge=0, le=SCHEDULE_START_MAX)
    end: int = Field(0, ge=0, le=SCHEDULE_END_MAX)

    @field_validator('start', mode='before')
    @classmethod
    def parse_start(cls, value):
        return clock_to_minutes(value)

    @field_validator('end', mode='before')
    @classmethod
    def parse_end(cls, value):
        return clock_to_minutes(value, allow_end_of_day=True)


class ScheduleModel(BaseModel):
    time_zone: Optional[str] = None
    mon: Optional[DayRange] = None
    tue: Optional[DayRange] = None
    wed: Optional[DayRange] = None
    thu: Optional[DayRange] = None
    fri: Optional[DayRange] = None
    sat: Optional[DayRange] = None
    sun: Optional[DayRange] = None

    @field_validator(*WEEKDAYS)
    @classmethod
    def drop_empty_days(cls, value):
        # A day ending at midnight is no restriction; AdGuard Home drops it
        if value is not None and value.end == 0:
            return None
        return value


# =========================================================
# GLOBAL CONFIG MODELS
# =========================================================

class SafeSearchModel(BaseModel):
    enabled: bool = CONFIG_SAFE_SEARCH_ENABLED
    # None means "every engine the appliance knows"
    services: Optional[Set[str]] = None

    @field_validator('services')
    @classmethod
    def lowercase_services(cls, value):
        if value is None:
            return value
        return {s.lower() for s in value}


class FilteringModel(BaseModel):
    enabled: bool = CONFIG_FILTERING_ENABLED
    update_interval: int = Field(CONFIG_FILTERING_UPDATE_INTERVAL, ge=0)  # hours


class QueryLogModel(BaseModel):
    enabled: bool = CONFIG_QUERYLOG_ENABLED
    interval: int = Field(CONFIG_QUERYLOG_INTERVAL, ge=0)  # hours
    anonymize_client_ip: bool = CONFIG_QUERYLOG_ANONYMIZE_CLIENT_IP
    ignored: Set[str] = set()


class StatsModel(BaseModel):
    enabled: bool = CONFIG_STATS_ENABLED
    interval: int = Field(CONFIG_STATS_INTERVAL, ge=0)  # hours
    ignored: Set[str] = set()


class DnsSettingsModel(BaseModel):
    """DNS resolver behaviour, shared by the global config and the standalone DNS config."""
    bootstrap_dns: List[str] = Field(default_factory=lambda: list(DNS_BOOTSTRAP))
    upstream_dns: List[str] = Field(default_factory=lambda: list(DNS_UPSTREAM))
    upstream_dns_file: str = ""
    fallback_dns: Optional[List[str]] = None
    protection_enabled: bool = DNS_PROTECTION_ENABLED
    rate_limit: int = Field(DNS_RATE_LIMIT, ge=0)
    rate_limit_subnet_len_ipv4: int = Field(DNS_RATE_LIMIT_SUBNET_LEN_IPV4, ge=0, le=32)
    rate_limit_subnet_len_ipv6: int = Field(DNS_RATE_LIMIT_SUBNET_LEN_IPV6, ge=0, le=128)
    rate_limit_whitelist: Optional[List[str]] = None
    blocking_mode: Literal['default', 'refused', 'nxdomain', 'null_ip', 'custom_ip'] = DNS_BLOCKING_MODE
    blocking_ipv4: str = ""
    blocking_ipv6: str = ""
    blocked_response_ttl: int = Field(DNS_BLOCKED_RESPONSE_TTL, ge=0)
    edns_cs_enabled: bool = DNS_EDNS_CS_ENABLED
    edns_cs_use_custom: bool = DNS_EDNS_CS_USE_CUSTOM
    edns_cs_custom_ip: str = ""
    disable_ipv6: bool = DNS_DISABLE_IPV6
    dnssec_enabled: bool = DNS_DNSSEC_ENABLED
    cache_size: int = Field(DNS_CACHE_SIZE, ge=0)
    cache_ttl_min: int = Field(DNS_CACHE_TTL_MIN, ge=0)
    cache_ttl_max: int = Field(DNS_CACHE_TTL_MAX, ge=0)
    cache_optimistic: bool = DNS_CACHE_OPTIMISTIC
    upstream_mode: Literal['load_balance', 'parallel', 'fastest_addr'] = DNS_UPSTREAM_MODE
    use_private_ptr_resolvers: bool = DNS_USE_PRIVATE_PTR_RESOLVERS
    resolve_clients: bool = DNS_RESOLVE_CLIENTS
    local_ptr_upstreams: Set[str] = set()

    @model_validator(mode='after')
    def check_dependent_fields(self):
        if (self.blocking_ipv4 or self.blocking_ipv6) and self.blocking_mode != DNS_BLOCKING_MODE_CUSTOM_IP:
            raise ValueError(
                f"blocking_ipv4/blocking_ipv6 require blocking_mode '{DNS_BLOCKING_MODE_CUSTOM_IP}', "
                f"got '{self.blocking_mode}'"
            )
        if self.edns_cs_custom_ip and not self.edns_cs_use_custom:
            raise ValueError("edns_cs_custom_ip requires edns_cs_use_custom to be true")
        explicit = self.model_fields_set
        if ('use_private_ptr_resolvers' in explicit and self.use_private_ptr_resolvers
                and 'local_ptr_upstreams' not in explicit):
            raise ValueError("use_private_ptr_resolvers requires local_ptr_upstreams to be set")
        return self


class ConfigModel(BaseModel):
    filtering: FilteringModel = Field(default_factory=FilteringModel)
    safebrowsing: bool = CONFIG_SAFEBROWSING_ENABLED
    parental_control: bool = CONFIG_PARENTAL_CONTROL_ENABLED
    safesearch: SafeSearchModel = Field(default_factory=SafeSearchModel)
    querylog: QueryLogModel = Field(default_factory=QueryLogModel)
    stats: StatsModel = Field(default_factory=StatsModel)
    blocked_services: Set[str] = set()
    blocked_services_pause_schedule: ScheduleModel = Field(default_factory=ScheduleModel)
    dns: DnsSettingsModel = Field(default_factory=DnsSettingsModel)


# =========================================================
# DNS ACCESS / USER RULES
# =========================================================

class DnsAccessModel(BaseModel):
    allowed_clients: List[str] = []
    disallowed_clients: List[str] = []
    blocked_hosts: List[str] = Field(default_factory=lambda: list(DNS_ACCESS_BLOCKED_HOSTS))


class UserRulesModel(BaseModel):
    rules: List[str] = []


# =========================================================
# KEYED RESOURCES (Clients, List Filters, Rewrites)
# =========================================================

class ClientModel(BaseModel):
    name: str = Field(min_length=1)
    ids: Set[str] = Field(min_length=1)
    use_global_settings: bool = CLIENT_USE_GLOBAL_SETTINGS
    filtering_enabled: bool = CLIENT_FILTERING_ENABLED
    parental_enabled: bool = CLIENT_PARENTAL_ENABLED
    safebrowsing_enabled: bool = CLIENT_SAFEBROWSING_ENABLED
    safesearch: SafeSearchModel = Field(default_factory=SafeSearchModel)
    use_global_blocked_services: bool = CLIENT_USE_GLOBAL_BLOCKED_SERVICES
    blocked_services: Set[str] = set()
    blocked_services_pause_schedule: ScheduleModel = Field(default_factory=ScheduleModel)
    upstreams: List[str] = []
    tags: Set[str] = set()
    ignore_querylog: bool = CLIENT_IGNORE_QUERYLOG
    ignore_statistics: bool = CLIENT_IGNORE_STATISTICS
    upstreams_cache_enabled: bool = CLIENT_UPSTREAMS_CACHE_ENABLED
    upstreams_cache_size: int = Field(CLIENT_UPSTREAMS_CACHE_SIZE, ge=0, le=CLIENT_UPSTREAMS_CACHE_SIZE_MAX)

    @field_validator('ids')
    @classmethod
    def check_ids(cls, value):
        pattern = re.compile(CLIENT_ID_PATTERN)
        for client_id in value:
            if not pattern.match(client_id):
                raise ValueError(
                    f"client id '{client_id}' must be an IP address/CIDR, MAC address, "
                    f"or only contain numbers, lowercase letters, and hyphens"
                )
        return value


class ListFilterModel(BaseModel):
    name: str = Field(min_length=1)
    url: str = Field(min_length=1)
    enabled: bool = LIST_FILTER_ENABLED
    whitelist: bool = LIST_FILTER_WHITELIST

    # Observed only (filled from AdGuard Home)
    id: Optional[str] = None
    rules_count: Optional[int] = None
    last_updated: Optional[str] = None


class RewriteModel(BaseModel):
    domain: str = Field(min_length=1)
    answer: str = Field(min_length=1, pattern=REWRITE_ANSWER_PATTERN)




# =========================================================
# DHCP SERVER
# =========================================================

def _check_address(value: str, version: int) -> str:
    if not value:
        return value
    try:
        address = ipaddress.ip_address(value)
    except ValueError:
        raise ValueError(f"'{value}' must be a valid IPv{version} address")
    if address.version != version:
        raise ValueError(f"'{value}' must be a valid IPv{version} address")
    return value


class DhcpIpv4Model(BaseModel):
    gateway_ip: str = ""
    subnet_mask: str = ""
    range_start: str = ""
    range_end: str = ""
    lease_duration: int = Field(DHCP_LEASE_DURATION, ge=0)  # seconds

    @field_validator('gateway_ip', 'subnet_mask', 'range_start', 'range_end')
    @classmethod
    def check_ipv4(cls, value):
        return _check_address(value, 4)


class DhcpIpv6Model(BaseModel):
    range_start: str = ""
    lease_duration: int = Field(DHCP_LEASE_DURATION, ge=0)  # seconds

    @field_validator('range_start')
    @classmethod
    def check_ipv6(cls, value):
        return _check_address(value, 6)


class StaticLeaseModel(BaseModel):
    mac: str = Field(pattern=DHCP_MAC_PATTERN)
    ip: str
    hostname: str = Field(pattern=DHCP_HOSTNAME_PATTERN)

    @field_validator('ip')
    @classmethod
    def check_ip(cls, value):
        if not value:
            raise ValueError("static lease ip must not be empty")
        return _check_address(value, 4)

    @property
    def key(self) -> str:
        return f"{self.hostname}_{self.mac}_{self.ip}"


class DhcpLeaseModel(BaseModel):
    """Dynamic lease handed out by the server (observed only)."""
    mac: str
    ip: str
    hostname: str = ""
    expires: str = ""


class DhcpConfigModel(BaseModel):
    enabled: bool = DHCP_ENABLED
    interface: str = ""
    ipv4_settings: DhcpIpv4Model = Field(default_factory=DhcpIpv4Model)
    ipv6_settings: DhcpIpv6Model = Field(default_factory=DhcpIpv6Model)
    # None leaves the static leases on the server alone
    static_leases: Optional[List[StaticLeaseModel]] = None

    # Observed only
    leases: Optional[List[DhcpLeaseModel]] = None

    @field_validator('static_leases')
    @classmethod
    def order_static_leases(cls, value):
        if value is None:
            return value
        unique = {lease.key: lease for lease in value}
        return [unique[key] for key in sorted(unique)]

    @model_validator(mode='after')
    def check_dependent_fields(self):
        if self.enabled and not self.interface:
            raise ValueError("an enabled DHCP server requires an interface")
        if self.enabled and not (self.ipv4_settings.range_start or self.ipv6_settings.range_start):
            raise ValueError("an enabled DHCP server requires ipv4_settings or ipv6_settings")
        if self.static_leases and not self.interface:
            raise ValueError("static_leases require an interface")
        return self


# =========================================================
# ENCRYPTION (TLS)
# =========================================================

class TlsConfigModel(BaseModel):
    enabled: bool = TLS_ENABLED
    server_name: str = ""
    force_https: bool = TLS_FORCE_HTTPS
    port_https: int = Field(TLS_PORT_HTTPS, ge=0, le=PORT_MAX)
    port_dns_over_tls: int = Field(TLS_PORT_DNS_OVER_TLS, ge=0, le=PORT_MAX)
    port_dns_over_quic: int = Field(TLS_PORT_DNS_OVER_QUIC, ge=0, le=PORT_MAX)
    # Base64 PEM data, or a path on the AdGuard Home host
    certificate_chain: str = ""
    private_key: str = ""
    serve_plain_dns: bool = TLS_SERVE_PLAIN_DNS

    # Observed only (computed by AdGuard Home)
    private_key_saved: Optional[bool] = None
    valid_cert: Optional[bool] = None
    valid_chain: Optional[bool] = None
    valid_key: Optional[bool] = None
    valid_pair: Optional[bool] = None
    key_type: Optional[str] = None
    subject: Optional[str] = None
    issuer: Optional[str] = None
    not_before: Optional[str] = None
    not_after: Optional[str] = None
    dns_names: Optional[List[str]] = None
    warning_validation: Optional[str] = None

    @model_validator(mode='after')
    def check_plain_dns(self):
        if not self.enabled and not self.serve_plain_dns:
            raise ValueError("serve_plain_dns must be true when encryption is disabled")
        return self
