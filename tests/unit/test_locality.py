"""Tests for locality matching."""

import pytest

from farmconf.domain.discovery import alias_locality_predicate, LocalityMatcher
from farmconf.domain.model import EndpointAlias, ServiceInstance


class TestLocalityMatcher:
    """Tests for LocalityMatcher.matches."""

    @pytest.mark.parametrize(
        "uri,node,expected",
        [
            ("http://srv01", "srv01", True),
            ("http://SRV01.corp.local:2000", "srv01", True),
            ("http://srv01.corp.local", "SRV01", True),
            ("http://srv02.corp.local", "srv01", False),
            ("http://srv011", "srv01", False),
            ("http://corp.srv01.local", "srv01", False),
        ],
    )
    def test_compares_leftmost_label(self, uri, node, expected):
        """Only the first host label is compared, case-insensitively."""
        assert LocalityMatcher.matches(EndpointAlias.from_uri(uri), node) is expected

    def test_none_alias_never_matches(self):
        """A missing alias is not local."""
        assert LocalityMatcher.matches(None, "srv01") is False

    def test_alias_without_host_never_matches(self):
        """An alias without a host is not local."""
        assert LocalityMatcher.matches(EndpointAlias(host=None, uri=""), "srv01") is False

    def test_empty_node_name_never_matches(self):
        """An empty node name matches nothing."""
        assert LocalityMatcher.matches(EndpointAlias.from_uri("http://srv01"), "") is False


class TestAliasLocalityPredicate:
    """Tests for the default content-directory predicate."""

    def test_any_alias_matches(self):
        """Should accept an instance when any alias is local."""
        instance = ServiceInstance(
            base_path="/a",
            endpoint_aliases=(
                EndpointAlias.from_uri("http://intranet.corp.local"),
                EndpointAlias.from_uri("http://srv01"),
            ),
        )
        assert alias_locality_predicate("srv01")(instance) is True

    def test_no_alias_matches(self):
        """Should reject an instance with only remote aliases."""
        instance = ServiceInstance(base_path="/a", endpoint_aliases=(EndpointAlias.from_uri("http://srv02"),))
        assert alias_locality_predicate("srv01")(instance) is False

    def test_unknown_aliases(self):
        """Should reject an instance whose aliases are unknown."""
        assert alias_locality_predicate("srv01")(ServiceInstance(base_path="/a", endpoint_aliases=None)) is False
