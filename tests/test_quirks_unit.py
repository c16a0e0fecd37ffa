"""Unit tests for masking of known AdGuard Home read inconsistencies."""

import pytest

from adguard_gitops.constants import KIND_CLIENT, KIND_CONFIG, KIND_DNS_CONFIG, KIND_TLS
from adguard_gitops.quirks import apply_quirks, trust_remote_time_zone


def dns_state(**overrides):
    state = {
        "blocking_mode": "default",
        "blocking_ipv4": "",
        "blocking_ipv6": "",
        "edns_cs_use_custom": False,
        "edns_cs_custom_ip": "",
        "fallback_dns": [],
        "rate_limit_whitelist": [],
    }
    state.update(overrides)
    return state


@pytest.mark.unit
class TestTimeZoneTrust:
    """Test when a remote-reported schedule time zone is taken verbatim."""

    @pytest.mark.parametrize("has_prior,prior_tz,persisted,expected", [
        (False, None, False, True),     # view
        (True, None, False, True),      # view ignores prior
        (False, None, True, True),      # adopt
        (True, None, True, False),      # refresh, zone never declared
        (True, "UTC", True, True),      # refresh, zone declared
    ])
    def test_truth_table(self, has_prior, prior_tz, persisted, expected):
        assert trust_remote_time_zone(has_prior, prior_tz, persisted) is expected

    def test_config_schedule_zone_dropped(self):
        observed = {"blocked_services_pause_schedule": {"time_zone": "Local", "mon": None}}
        prior = {"blocked_services_pause_schedule": {"time_zone": None}}
        apply_quirks(KIND_CONFIG, observed, prior, persisted=True)
        assert observed["blocked_services_pause_schedule"]["time_zone"] is None

    def test_client_schedule_zone_kept_on_adopt(self):
        observed = {"blocked_services_pause_schedule": {"time_zone": "Local"}}
        apply_quirks(KIND_CLIENT, observed, None, persisted=True)
        assert observed["blocked_services_pause_schedule"]["time_zone"] == "Local"


@pytest.mark.unit
class TestDnsMasking:
    """Test the DNS quirk table."""

    def test_blocking_addresses_cleared_outside_custom_mode(self):
        observed = dns_state(blocking_mode="nxdomain", blocking_ipv4="1.2.3.4", blocking_ipv6="::1")
        apply_quirks(KIND_DNS_CONFIG, observed)
        assert observed["blocking_ipv4"] == ""
        assert observed["blocking_ipv6"] == ""

    def test_blocking_addresses_kept_in_custom_mode(self):
        observed = dns_state(blocking_mode="custom_ip", blocking_ipv4="1.2.3.4")
        apply_quirks(KIND_DNS_CONFIG, observed)
        assert observed["blocking_ipv4"] == "1.2.3.4"

    def test_custom_edns_ip_cleared(self):
        observed = dns_state(edns_cs_custom_ip="10.0.0.1")
        apply_quirks(KIND_DNS_CONFIG, observed)
        assert observed["edns_cs_custom_ip"] == ""

    def test_empty_as_null_only_when_persisted(self):
        observed = dns_state()
        apply_quirks(KIND_DNS_CONFIG, observed, None, persisted=False)
        assert observed["fallback_dns"] == []

        apply_quirks(KIND_DNS_CONFIG, observed, None, persisted=True)
        assert observed["fallback_dns"] is None
        assert observed["rate_limit_whitelist"] is None

    def test_empty_list_kept_when_declared(self):
        observed = dns_state()
        apply_quirks(KIND_DNS_CONFIG, observed, {"fallback_dns": [], "rate_limit_whitelist": None}, persisted=True)
        assert observed["fallback_dns"] == []
        assert observed["rate_limit_whitelist"] is None

    def test_non_empty_list_untouched(self):
        observed = dns_state(fallback_dns=["9.9.9.9"])
        apply_quirks(KIND_DNS_CONFIG, observed, None, persisted=True)
        assert observed["fallback_dns"] == ["9.9.9.9"]

    def test_nested_in_config(self):
        observed = {"dns": dns_state(blocking_ipv4="1.2.3.4")}
        apply_quirks(KIND_CONFIG, observed, {"dns": None}, persisted=True)
        assert observed["dns"]["blocking_ipv4"] == ""
        assert observed["dns"]["fallback_dns"] is None

    def test_unknown_kind_is_noop(self):
        observed = {"domain": "example.com"}
        assert apply_quirks("rewrite", observed) == {"domain": "example.com"}


@pytest.mark.unit
class TestWriteOnlyPrivateKey:
    """Test that a stored PEM key, never reported back, keeps its declared value."""

    @pytest.mark.parametrize("saved,prior,persisted,expected", [
        (True, {"private_key": "pem"}, True, "pem"),
        (True, {"private_key": "pem"}, False, ""),   # view
        (True, None, True, ""),                      # adopt
        (False, {"private_key": "pem"}, True, ""),   # key removed
    ])
    def test_masking(self, saved, prior, persisted, expected):
        observed = {"private_key": "", "private_key_saved": saved}
        apply_quirks(KIND_TLS, observed, prior, persisted=persisted)
        assert observed["private_key"] == expected

    def test_reported_value_untouched(self):
        observed = {"private_key": "/etc/ssl/key.pem", "private_key_saved": False}
        apply_quirks(KIND_TLS, observed, {"private_key": "pem"}, persisted=True)
        assert observed["private_key"] == "/etc/ssl/key.pem"
