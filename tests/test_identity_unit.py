"""Unit tests for identity assignment."""

import pytest

from adguard_gitops.constants import (
    KIND_CLIENT,
    KIND_CONFIG,
    KIND_DNS_ACCESS,
    KIND_DHCP,
    KIND_DNS_CONFIG,
    KIND_LIST_FILTER,
    KIND_REWRITE,
    KIND_TLS,
    KIND_USER_RULES,
)
from adguard_gitops.errors import MappingFailed
from adguard_gitops.identity import assign_identity, is_singleton, parse_rewrite_id, rewrite_id
from adguard_gitops.models import RewriteModel


@pytest.mark.unit
class TestAssignIdentity:
    """Test natural keys per kind."""

    @pytest.mark.parametrize("kind", [
        KIND_CONFIG, KIND_DNS_CONFIG, KIND_DNS_ACCESS, KIND_USER_RULES, KIND_DHCP, KIND_TLS,
    ])
    def test_singletons(self, kind):
        assert is_singleton(kind)
        assert assign_identity(kind, {}) == "1"

    def test_client_name(self):
        assert assign_identity(KIND_CLIENT, {"name": "laptop"}) == "laptop"

    def test_list_filter_id(self):
        assert assign_identity(KIND_LIST_FILTER, {"id": 17}) == "17"

    def test_rewrite(self):
        assert assign_identity(KIND_REWRITE, RewriteModel(domain="example.com", answer="4.3.2.1")) == \
            "example.com||4.3.2.1"

    def test_missing_key(self):
        with pytest.raises(MappingFailed):
            assign_identity(KIND_CLIENT, {"ids": ["10.0.0.1"]})
        with pytest.raises(MappingFailed):
            assign_identity(KIND_REWRITE, {"domain": "example.com"})

    def test_unknown_kind(self):
        with pytest.raises(ValueError):
            assign_identity("querylog", {})


@pytest.mark.unit
class TestRewriteIdentity:
    """Test the composite rewrite identity."""

    def test_round_trip(self):
        assert parse_rewrite_id(rewrite_id("a.example", "10.0.0.1")) == ("a.example", "10.0.0.1")

    def test_answer_may_contain_separator(self):
        assert parse_rewrite_id("a.example||b||c") == ("a.example", "b||c")

    def test_fallback_to_prior(self):
        prior = RewriteModel(domain="a.example", answer="10.0.0.1")
        assert parse_rewrite_id("legacy", prior) == ("a.example", "10.0.0.1")

    def test_no_separator_no_fallback(self):
        with pytest.raises(MappingFailed):
            parse_rewrite_id("legacy")
