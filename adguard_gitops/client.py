from typing import Any, Dict, List, Optional, Tuple

import requests
import urllib3

from adguard_gitops.constants import (
    API_PREFIX,
    DEFAULT_SCHEME,
    DEFAULT_TIMEOUT,
    EP_FILTERING_STATUS,
    EP_FILTERING_CONFIG,
    EP_FILTERING_ADD_URL,
    EP_FILTERING_SET_URL,
    EP_FILTERING_REMOVE_URL,
    EP_FILTERING_SET_RULES,
    EP_SAFEBROWSING,
    EP_PARENTAL,
    EP_SAFESEARCH_STATUS,
    EP_SAFESEARCH_SETTINGS,
    EP_QUERYLOG_CONFIG,
    EP_QUERYLOG_CONFIG_UPDATE,
    EP_STATS_CONFIG,
    EP_STATS_CONFIG_UPDATE,
    EP_BLOCKED_SERVICES_GET,
    EP_BLOCKED_SERVICES_UPDATE,
    EP_BLOCKED_SERVICES_ALL,
    EP_DNS_INFO,
    EP_DNS_CONFIG,
    EP_ACCESS_LIST,
    EP_ACCESS_SET,
    EP_CLIENTS,
    EP_CLIENTS_ADD,
    EP_CLIENTS_UPDATE,
    EP_CLIENTS_DELETE,
    EP_REWRITE_LIST,
    EP_REWRITE_ADD,
    EP_REWRITE_DELETE,
    EP_DHCP_STATUS,
    EP_DHCP_SET_CONFIG,
    EP_DHCP_RESET,
    EP_DHCP_ADD_STATIC_LEASE,
    EP_DHCP_REMOVE_STATIC_LEASE,
    EP_TLS_STATUS,
    EP_TLS_CONFIGURE,
)
from adguard_gitops.errors import RemoteUnreachable, RemoteRejected, MappingFailed
from adguard_gitops.mappers.safesearch import service_names


class AdGuardClient:
    """
    Thin client for the AdGuard Home REST API (/control/...).

    Every method issues exactly one request. Transport failures raise
    RemoteUnreachable, error statuses raise RemoteRejected with the body
    of the response. Nothing is retried.
    """

    def __init__(self, host: str, username: str, password: str,
                 scheme: str = DEFAULT_SCHEME, timeout: int = DEFAULT_TIMEOUT,
                 verify: bool = True, session: Optional[requests.Session] = None):
        self.base_url = f"{scheme}://{host}{API_PREFIX}"
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.auth = (username, password)
        self.session.verify = verify
        if not verify:
            urllib3.disable_warnings()

    @classmethod
    def from_settings(cls, settings) -> "AdGuardClient":
        return cls(
            host=settings.host,
            username=settings.username,
            password=settings.password,
            scheme=settings.scheme,
            timeout=settings.timeout,
            verify=not settings.insecure,
        )

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    def _request(self, method: str, endpoint: str, payload: Any = None) -> Any:
        url = f"{self.base_url}/{endpoint}"
        try:
            response = self.session.request(method, url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise RemoteUnreachable(f"{method} {url} failed: {e}") from e

        if response.status_code >= 400:
            body = (response.text or "").strip()
            raise RemoteRejected(
                f"{method} /{endpoint} returned {response.status_code}: {body}",
                status_code=response.status_code,
                body=body,
            )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            # Some endpoints answer "OK" as plain text
            return response.text

    def _get(self, endpoint: str) -> Any:
        return self._request("GET", endpoint)

    def _post(self, endpoint: str, payload: Any = None) -> Any:
        return self._request("POST", endpoint, payload)

    def _put(self, endpoint: str, payload: Any = None) -> Any:
        return self._request("PUT", endpoint, payload)

    @staticmethod
    def _expect(value: Any, expected: type, endpoint: str) -> Any:
        if not isinstance(value, expected):
            raise MappingFailed(f"/{endpoint}: unexpected response {value!r}")
        return value

    # -------------------------------------------------------------------------
    # Filtering, list filters and user rules
    # -------------------------------------------------------------------------

    def filtering_status(self) -> Dict[str, Any]:
        return self._expect(self._get(EP_FILTERING_STATUS), dict, EP_FILTERING_STATUS)

    def set_filtering_config(self, config: Dict[str, Any]) -> None:
        self._post(EP_FILTERING_CONFIG, config)

    def list_filters(self) -> List[Tuple[Dict[str, Any], bool]]:
        """All list filters as (filter, whitelist) pairs."""
        status = self.filtering_status()
        pairs = [(f, False) for f in status.get("filters") or []]
        pairs += [(f, True) for f in status.get("whitelist_filters") or []]
        return pairs

    def get_list_filter_by_id(self, filter_id: int) -> Tuple[Optional[Dict[str, Any]], bool]:
        for entry, whitelist in self.list_filters():
            if entry.get("id") == filter_id:
                return entry, whitelist
        return None, False

    def get_list_filter_by_name(self, name: str) -> Tuple[Optional[Dict[str, Any]], bool]:
        for entry, whitelist in self.list_filters():
            if entry.get("name") == name:
                return entry, whitelist
        return None, False

    def add_list_filter(self, name: str, url: str, whitelist: bool) -> None:
        self._post(EP_FILTERING_ADD_URL, {"name": name, "url": url, "whitelist": whitelist})

    def set_list_filter(self, url: str, whitelist: bool, data: Dict[str, Any]) -> None:
        self._post(EP_FILTERING_SET_URL, {"url": url, "whitelist": whitelist, "data": data})

    def remove_list_filter(self, url: str, whitelist: bool) -> None:
        self._post(EP_FILTERING_REMOVE_URL, {"url": url, "whitelist": whitelist})

    def set_user_rules(self, payload: Dict[str, Any]) -> None:
        self._post(EP_FILTERING_SET_RULES, payload)

    # -------------------------------------------------------------------------
    # Protection toggles
    # -------------------------------------------------------------------------

    def _status_enabled(self, endpoint: str) -> bool:
        status = self._expect(self._get(f"{endpoint}/status"), dict, f"{endpoint}/status")
        return self._expect(status.get("enabled"), bool, f"{endpoint}/status")

    def safebrowsing_status(self) -> bool:
        return self._status_enabled(EP_SAFEBROWSING)

    def set_safebrowsing(self, enabled: bool) -> None:
        self._post(f"{EP_SAFEBROWSING}/{'enable' if enabled else 'disable'}")

    def parental_status(self) -> bool:
        return self._status_enabled(EP_PARENTAL)

    def set_parental(self, enabled: bool) -> None:
        self._post(f"{EP_PARENTAL}/{'enable' if enabled else 'disable'}")

    def safesearch_status(self) -> Dict[str, Any]:
        return self._expect(self._get(EP_SAFESEARCH_STATUS), dict, EP_SAFESEARCH_STATUS)

    def set_safesearch(self, settings: Dict[str, Any]) -> None:
        self._put(EP_SAFESEARCH_SETTINGS, settings)

    # -------------------------------------------------------------------------
    # Query log & statistics
    # -------------------------------------------------------------------------

    def querylog_config(self) -> Dict[str, Any]:
        return self._expect(self._get(EP_QUERYLOG_CONFIG), dict, EP_QUERYLOG_CONFIG)

    def set_querylog_config(self, config: Dict[str, Any]) -> None:
        self._put(EP_QUERYLOG_CONFIG_UPDATE, config)

    def stats_config(self) -> Dict[str, Any]:
        return self._expect(self._get(EP_STATS_CONFIG), dict, EP_STATS_CONFIG)

    def set_stats_config(self, config: Dict[str, Any]) -> None:
        self._put(EP_STATS_CONFIG_UPDATE, config)

    # -------------------------------------------------------------------------
    # Blocked services
    # -------------------------------------------------------------------------

    def blocked_services(self) -> Dict[str, Any]:
        return self._expect(self._get(EP_BLOCKED_SERVICES_GET), dict, EP_BLOCKED_SERVICES_GET)

    def set_blocked_services(self, payload: Dict[str, Any]) -> None:
        self._put(EP_BLOCKED_SERVICES_UPDATE, payload)

    # -------------------------------------------------------------------------
    # DNS
    # -------------------------------------------------------------------------

    def dns_info(self) -> Dict[str, Any]:
        return self._expect(self._get(EP_DNS_INFO), dict, EP_DNS_INFO)

    def set_dns_config(self, config: Dict[str, Any]) -> None:
        self._post(EP_DNS_CONFIG, config)

    def access_list(self) -> Dict[str, Any]:
        return self._expect(self._get(EP_ACCESS_LIST), dict, EP_ACCESS_LIST)

    def set_access_list(self, payload: Dict[str, Any]) -> None:
        self._post(EP_ACCESS_SET, payload)

    # -------------------------------------------------------------------------
    # Clients
    # -------------------------------------------------------------------------

    def clients(self) -> List[Dict[str, Any]]:
        status = self._expect(self._get(EP_CLIENTS), dict, EP_CLIENTS)
        return list(status.get("clients") or [])

    def get_client(self, name: str) -> Optional[Dict[str, Any]]:
        for entry in self.clients():
            if entry.get("name") == name:
                return entry
        return None

    def add_client(self, data: Dict[str, Any]) -> None:
        self._post(EP_CLIENTS_ADD, data)

    def update_client(self, name: str, data: Dict[str, Any]) -> None:
        self._post(EP_CLIENTS_UPDATE, {"name": name, "data": data})

    def delete_client(self, name: str) -> None:
        self._post(EP_CLIENTS_DELETE, {"name": name})

    # -------------------------------------------------------------------------
    # Rewrites
    # -------------------------------------------------------------------------

    def rewrites(self) -> List[Dict[str, Any]]:
        return list(self._expect(self._get(EP_REWRITE_LIST) or [], list, EP_REWRITE_LIST))

    def get_rewrite(self, domain: str, answer: str) -> Optional[Dict[str, Any]]:
        for entry in self.rewrites():
            if entry.get("domain") == domain and entry.get("answer") == answer:
                return entry
        return None

    def add_rewrite(self, rewrite: Dict[str, Any]) -> None:
        self._post(EP_REWRITE_ADD, rewrite)

    def delete_rewrite(self, rewrite: Dict[str, Any]) -> None:
        self._post(EP_REWRITE_DELETE, rewrite)

    # -------------------------------------------------------------------------
    # DHCP server
    # -------------------------------------------------------------------------

    def dhcp_status(self) -> Dict[str, Any]:
        return self._expect(self._get(EP_DHCP_STATUS), dict, EP_DHCP_STATUS)

    def set_dhcp_config(self, config: Dict[str, Any]) -> None:
        self._post(EP_DHCP_SET_CONFIG, config)

    def reset_dhcp(self) -> None:
        """Drop the DHCP configuration and all leases."""
        self._post(EP_DHCP_RESET)

    def add_static_lease(self, lease: Dict[str, Any]) -> None:
        self._post(EP_DHCP_ADD_STATIC_LEASE, lease)

    def remove_static_lease(self, lease: Dict[str, Any]) -> None:
        self._post(EP_DHCP_REMOVE_STATIC_LEASE, lease)

    # -------------------------------------------------------------------------
    # Encryption
    # -------------------------------------------------------------------------

    def tls_status(self) -> Dict[str, Any]:
        return self._expect(self._get(EP_TLS_STATUS), dict, EP_TLS_STATUS)

    def set_tls_config(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Store the encryption settings; AdGuard Home answers with the new status."""
        return self._expect(self._post(EP_TLS_CONFIGURE, config), dict, EP_TLS_CONFIGURE)

    # -------------------------------------------------------------------------
    # Enumerations
    # -------------------------------------------------------------------------

    def list_blocked_service_ids(self) -> List[str]:
        """Identifiers of all blocked services the appliance supports."""
        catalogue = self._expect(self._get(EP_BLOCKED_SERVICES_ALL), dict, EP_BLOCKED_SERVICES_ALL)
        return [s["id"] for s in catalogue.get("blocked_services") or [] if isinstance(s, dict) and "id" in s]

    def list_safe_search_services(self) -> List[str]:
        """Identifiers of all safe-search engines the appliance supports."""
        return sorted(service_names(self.safesearch_status()))
