"""Shared fixtures: an in-memory AdGuard Home API behind the real client."""

import copy
from unittest.mock import MagicMock

import pytest

from adguard_gitops.client import AdGuardClient
from adguard_gitops.enumerations import EnumerationCache
from adguard_gitops.errors import RemoteRejected

SERVICE_CATALOGUE = ["facebook", "instagram", "tiktok", "youtube"]
SAFE_SEARCH_ENGINES = ["bing", "duckduckgo", "google", "pixabay", "yandex", "youtube"]


def default_dhcp_status():
    return {
        "enabled": False,
        "interface_name": "",
        "v4": {},
        "v6": {},
        "leases": [],
        "static_leases": [],
    }


def default_tls_status():
    return {
        "enabled": False,
        "server_name": "",
        "force_https": False,
        "port_https": 443,
        "port_dns_over_tls": 853,
        "port_dns_over_quic": 853,
        "certificate_chain": "",
        "private_key": "",
        "certificate_path": "",
        "private_key_path": "",
        "private_key_saved": False,
        "valid_cert": False,
        "valid_chain": False,
        "valid_key": False,
        "valid_pair": False,
        "key_type": "",
        "subject": "",
        "issuer": "",
        "not_before": "0001-01-01T00:00:00Z",
        "not_after": "0001-01-01T00:00:00Z",
        "dns_names": None,
        "warning_validation": "",
        "serve_plain_dns": True,
    }


def default_dns_info():
    return {
        "bootstrap_dns": ["9.9.9.10", "149.112.112.10", "2620:fe::10", "2620:fe::fe:10"],
        "upstream_dns": ["https://dns10.quad9.net/dns-query"],
        "upstream_dns_file": "",
        "fallback_dns": [],
        "protection_enabled": True,
        "ratelimit": 20,
        "ratelimit_subnet_len_ipv4": 24,
        "ratelimit_subnet_len_ipv6": 56,
        "ratelimit_whitelist": [],
        "blocking_mode": "default",
        "blocking_ipv4": "",
        "blocking_ipv6": "",
        "blocked_response_ttl": 10,
        "edns_cs_enabled": False,
        "edns_cs_use_custom": False,
        "edns_cs_custom_ip": "",
        "disable_ipv6": False,
        "dnssec_enabled": False,
        "cache_size": 4194304,
        "cache_ttl_min": 0,
        "cache_ttl_max": 0,
        "cache_optimistic": False,
        "upstream_mode": "",
        "use_private_ptr_resolvers": True,
        "resolve_clients": True,
        "local_ptr_upstreams": [],
        "default_local_ptr_upstreams": ["192.168.1.1"],
    }


class FakeAdGuardApi:
    """
    Minimal stateful AdGuard Home.

    Mirrors the behaviour the reconciler has to cope with: a schedule sent
    without time zone comes back as "Local", and DNS settings are merged
    (stale values survive until overwritten).
    """

    def __init__(self):
        self.calls = []
        self.fail_on = {}
        self.filtering = {
            "enabled": True,
            "interval": 24,
            "filters": [],
            "whitelist_filters": [],
            "user_rules": [],
        }
        self.safebrowsing = False
        self.parental = False
        self.safesearch = {"enabled": False, **{name: True for name in SAFE_SEARCH_ENGINES}}
        self.querylog = {"enabled": True, "interval": 2160 * 3600 * 1000, "anonymize_client_ip": False, "ignored": []}
        self.stats = {"enabled": True, "interval": 24 * 3600 * 1000, "ignored": []}
        self.blocked = {"ids": [], "schedule": {"time_zone": "Local"}}
        self.dns = default_dns_info()
        self.access = {
            "allowed_clients": [],
            "disallowed_clients": [],
            "blocked_hosts": ["version.bind", "id.server", "hostname.bind"],
        }
        self.clients = []
        self.rewrites = []
        self.dhcp = default_dhcp_status()
        self.tls = default_tls_status()
        self.catalogue = list(SERVICE_CATALOGUE)
        self.next_filter_id = 1

    # -------------------------------------------------------------------------

    def mutations(self):
        return [(method, endpoint) for method, endpoint, _ in self.calls if method != "GET"]

    def payloads(self, endpoint):
        return [payload for method, ep, payload in self.calls if ep == endpoint and method != "GET"]

    def count(self, method, endpoint):
        return sum(1 for m, ep, _ in self.calls if m == method and ep == endpoint)

    @staticmethod
    def _schedule(schedule):
        schedule = copy.deepcopy(schedule or {})
        if not schedule.get("time_zone"):
            schedule["time_zone"] = "Local"
        # AdGuard Home drops unrestricted days
        return {k: v for k, v in schedule.items() if k == "time_zone" or v.get("end", 0) > 0}

    def _filter_list(self, whitelist):
        return self.filtering["whitelist_filters" if whitelist else "filters"]

    def handle(self, method, endpoint, payload):
        self.calls.append((method, endpoint, copy.deepcopy(payload)))
        if (method, endpoint) in self.fail_on:
            raise self.fail_on[(method, endpoint)]

        route = (method, endpoint)
        if route == ("GET", "filtering/status"):
            return copy.deepcopy(self.filtering)
        if route == ("POST", "filtering/config"):
            self.filtering["enabled"] = payload["enabled"]
            self.filtering["interval"] = payload["interval"]
            return None
        if route == ("POST", "filtering/add_url"):
            entry = {
                "id": self.next_filter_id,
                "name": payload["name"],
                "url": payload["url"],
                "enabled": True,
                "rules_count": 42,
                "last_updated": "2026-10-17T10:00:00Z",
            }
            self.next_filter_id += 1
            self._filter_list(payload["whitelist"]).append(entry)
            return "OK"
        if route == ("POST", "filtering/set_url"):
            for entry in self._filter_list(payload["whitelist"]):
                if entry["url"] == payload["url"]:
                    entry.update(payload["data"])
                    return "OK"
            raise RemoteRejected("filter not found", status_code=400, body="filter not found")
        if route == ("POST", "filtering/remove_url"):
            filters = self._filter_list(payload["whitelist"])
            filters[:] = [f for f in filters if f["url"] != payload["url"]]
            return "OK"
        if route == ("POST", "filtering/set_rules"):
            self.filtering["user_rules"] = list(payload["rules"])
            return None

        if route == ("GET", "safebrowsing/status"):
            return {"enabled": self.safebrowsing}
        if method == "POST" and endpoint.startswith("safebrowsing/"):
            self.safebrowsing = endpoint.endswith("/enable")
            return None
        if route == ("GET", "parental/status"):
            return {"enabled": self.parental, "sensitivity": 13}
        if method == "POST" and endpoint.startswith("parental/"):
            self.parental = endpoint.endswith("/enable")
            return None

        if route == ("GET", "safesearch/status"):
            return copy.deepcopy(self.safesearch)
        if route == ("PUT", "safesearch/settings"):
            self.safesearch = copy.deepcopy(payload)
            return None
        if route == ("GET", "querylog/config"):
            return copy.deepcopy(self.querylog)
        if route == ("PUT", "querylog/config/update"):
            self.querylog = copy.deepcopy(payload)
            return None
        if route == ("GET", "stats/config"):
            return copy.deepcopy(self.stats)
        if route == ("PUT", "stats/config/update"):
            self.stats = copy.deepcopy(payload)
            return None

        if route == ("GET", "blocked_services/get"):
            return copy.deepcopy(self.blocked)
        if route == ("PUT", "blocked_services/update"):
            self.blocked = {"ids": list(payload["ids"]), "schedule": self._schedule(payload["schedule"])}
            return None
        if route == ("GET", "blocked_services/all"):
            return {"blocked_services": [{"id": s, "name": s.title()} for s in self.catalogue]}

        if route == ("GET", "dns_info"):
            return copy.deepcopy(self.dns)
        if route == ("POST", "dns_config"):
            self.dns.update(copy.deepcopy(payload))
            return None
        if route == ("GET", "access/list"):
            return copy.deepcopy(self.access)
        if route == ("POST", "access/set"):
            self.access = copy.deepcopy(payload)
            return None

        if route == ("GET", "clients"):
            return {"clients": copy.deepcopy(self.clients), "auto_clients": []}
        if route == ("POST", "clients/add"):
            if any(c["name"] == payload["name"] for c in self.clients):
                raise RemoteRejected("client already exists", status_code=400, body="client already exists")
            client = copy.deepcopy(payload)
            client["blocked_services_schedule"] = self._schedule(client.get("blocked_services_schedule"))
            self.clients.append(client)
            return None
        if route == ("POST", "clients/update"):
            for index, client in enumerate(self.clients):
                if client["name"] == payload["name"]:
                    data = copy.deepcopy(payload["data"])
                    data["blocked_services_schedule"] = self._schedule(data.get("blocked_services_schedule"))
                    self.clients[index] = data
                    return None
            raise RemoteRejected("client not found", status_code=400, body="client not found")
        if route == ("POST", "clients/delete"):
            self.clients = [c for c in self.clients if c["name"] != payload["name"]]
            return None

        if route == ("GET", "rewrite/list"):
            return copy.deepcopy(self.rewrites)
        if route == ("POST", "rewrite/add"):
            self.rewrites.append({"domain": payload["domain"], "answer": payload["answer"]})
            return None
        if route == ("POST", "rewrite/delete"):
            self.rewrites = [r for r in self.rewrites if r != payload]
            return None

        if route == ("GET", "dhcp/status"):
            return copy.deepcopy(self.dhcp)
        if route == ("POST", "dhcp/set_config"):
            self.dhcp.update({
                "enabled": payload["enabled"],
                "interface_name": payload["interface_name"],
                "v4": copy.deepcopy(payload["v4"]),
                "v6": copy.deepcopy(payload["v6"]),
            })
            return None
        if route == ("POST", "dhcp/reset"):
            self.dhcp = default_dhcp_status()
            return None
        if route == ("POST", "dhcp/add_static_lease"):
            if any(lease["mac"] == payload["mac"] for lease in self.dhcp["static_leases"]):
                raise RemoteRejected("static lease already exists", status_code=400,
                                     body="static lease already exists")
            self.dhcp["static_leases"].append(copy.deepcopy(payload))
            return None
        if route == ("POST", "dhcp/remove_static_lease"):
            self.dhcp["static_leases"] = [lease for lease in self.dhcp["static_leases"] if lease != payload]
            return None

        if route == ("GET", "tls/status"):
            return copy.deepcopy(self.tls)
        if route == ("POST", "tls/configure"):
            has_cert = bool(payload["certificate_chain"] or payload["certificate_path"])
            has_key = bool(payload["private_key"] or payload["private_key_path"])
            self.tls.update(copy.deepcopy(payload))
            # The PEM private key is write-only
            self.tls.update({
                "private_key": "",
                "private_key_saved": bool(payload["private_key"]),
                "valid_cert": has_cert,
                "valid_chain": has_cert,
                "valid_key": has_key,
                "valid_pair": has_cert and has_key,
                "dns_names": [payload["server_name"]] if has_cert else None,
                "not_after": "2027-01-01T00:00:00Z" if has_cert else "0001-01-01T00:00:00Z",
            })
            return copy.deepcopy(self.tls)

        raise RemoteRejected(f"{method} /{endpoint}: not found", status_code=404, body="404 page not found")


class FakeAdGuardClient(AdGuardClient):
    """The real client with its transport replaced by FakeAdGuardApi."""

    def __init__(self, api: FakeAdGuardApi):
        super().__init__("adguard.test", "admin", "secret", session=MagicMock())
        self.api = api

    def _request(self, method, endpoint, payload=None):
        return self.api.handle(method, endpoint, payload)


@pytest.fixture
def api():
    return FakeAdGuardApi()


@pytest.fixture
def client(api):
    return FakeAdGuardClient(api)


@pytest.fixture
def enumerations(client):
    return EnumerationCache.for_client(client)
