"""Tests for instance discovery."""

from unittest.mock import patch

import pytest

from farmconf.domain.discovery import alias_locality_predicate, DiscoveryResult, InstanceDiscoverer
from farmconf.domain.events import (
    DiscoveryCandidateSkipped,
    DiscoveryCompleted,
    LocalInstanceDiscovered,
    NoLocalInstancesFound,
)
from farmconf.domain.exceptions import DirectoryError, NoLocalInstancesError

NODE = "srv01"


@pytest.fixture
def discoverer(event_bus):
    return InstanceDiscoverer(event_bus)


class TestDiscoveryOrdering:
    """Result ordering and matching rules."""

    def test_management_instances_come_first(self, discoverer, directory_factory, instance_factory):
        """Management matches precede content matches, each in directory order."""
        admin = instance_factory("/admin", "Central Administration", ["http://srv01:2000"], management=True)
        intranet = instance_factory("/80", "Intranet", ["http://srv01"])
        portal = instance_factory("/443", "Portal", ["https://srv01.corp.local"])
        management = directory_factory("management", [admin])
        content = directory_factory("content", [intranet, portal])

        result = discoverer.discover(NODE, management, content, alias_locality_predicate(NODE))

        assert result.instances == (admin, intranet, portal)
        assert result.issues == ()

    def test_remote_instances_are_excluded(self, discoverer, directory_factory, instance_factory):
        """Instances without a local alias are left out."""
        local = instance_factory("/80", "Intranet", ["http://srv01"])
        remote = instance_factory("/81", "Remote", ["http://srv02"])
        remote_admin = instance_factory("/admin", "CA", ["http://srv02:2000"], management=True)

        result = discoverer.discover(
            NODE,
            directory_factory("management", [remote_admin]),
            directory_factory("content", [remote, local]),
            alias_locality_predicate(NODE),
        )

        assert result.instances == (local,)

    def test_management_instance_included_once(self, discoverer, directory_factory, instance_factory, event_bus):
        """The first local alias wins; further local aliases do not add duplicates."""
        admin = instance_factory(
            "/admin",
            "CA",
            ["http://srv02:2000", "http://srv01:2000", "http://SRV01.corp.local:2000"],
            management=True,
        )

        result = discoverer.discover(
            NODE, directory_factory("management", [admin]), directory_factory("content"), lambda _: False
        )

        assert result.instances == (admin,)
        matched = [e for e in event_bus.published if isinstance(e, LocalInstanceDiscovered)]
        assert [e.matched_alias for e in matched] == ["http://srv01:2000"]

    def test_content_uses_injected_predicate(self, discoverer, directory_factory, instance_factory):
        """Content candidates are matched by the predicate, not by their aliases."""
        a = instance_factory("/a", "A", ["http://srv02"])
        b = instance_factory("/b", "B", ["http://srv01"])

        result = discoverer.discover(
            NODE,
            directory_factory("management"),
            directory_factory("content", [a, b]),
            lambda instance: instance.base_path == "/a",
        )

        assert result.instances == (a,)

    def test_management_with_unknown_aliases_is_skipped_silently(
        self, discoverer, directory_factory, instance_factory
    ):
        """A management candidate without aliases is not local and not an issue."""
        admin = instance_factory("/admin", "CA", None, management=True)

        result = discoverer.discover(
            NODE, directory_factory("management", [admin]), directory_factory("content"), lambda _: True
        )

        assert result.instances == ()
        assert result.issues == ()


class TestDiscoveryResilience:
    """Failures are recorded and enumeration continues."""

    def test_predicate_failure_skips_only_that_candidate(self, discoverer, directory_factory, instance_factory):
        """A raising predicate skips the candidate and keeps going."""
        a = instance_factory("/a", "A")
        b = instance_factory("/b", "B")
        c = instance_factory("/c", "C")

        def predicate(instance):
            if instance.base_path == "/b":
                raise RuntimeError("access denied")
            return True

        content = directory_factory("content", [a, b, c])
        result = discoverer.discover(NODE, directory_factory("management"), content, predicate)

        assert result.instances == (a, c)
        assert len(result.issues) == 1
        issue = result.issues[0]
        assert issue.directory == "content"
        assert issue.candidate == "/b"
        assert issue.error_type == "RuntimeError"
        assert issue.message == "access denied"

    def test_alias_failure_skips_management_candidate(self, discoverer, directory_factory, instance_factory):
        """An alias lookup failure skips that management candidate only."""
        broken = instance_factory("/broken", "Broken", ["http://srv01"], management=True)
        admin = instance_factory("/admin", "CA", ["http://srv01:2000"], management=True)
        management = directory_factory("management", [broken, admin], alias_errors={"/broken": KeyError("gone")})

        result = discoverer.discover(NODE, management, directory_factory("content"), lambda _: False)

        assert result.instances == (admin,)
        assert [issue.candidate for issue in result.issues] == ["/broken"]

    def test_alias_failure_skips_content_candidate(self, discoverer, directory_factory, instance_factory):
        """A content candidate whose entry cannot be read is skipped, its siblings are kept."""
        broken = instance_factory("/broken", "Broken", ["http://srv01"])
        intranet = instance_factory("/80", "Intranet", ["http://srv01"])
        content = directory_factory(
            "content", [broken, intranet], alias_errors={"/broken": DirectoryError("content", "aliases must be a list")}
        )

        result = discoverer.discover(NODE, directory_factory("management"), content, lambda _: True)

        assert result.instances == (intranet,)
        assert len(result.issues) == 1
        assert result.issues[0].candidate == "/broken"
        assert result.issues[0].error_type == "DirectoryError"

    def test_directory_failure_is_an_issue(self, discoverer, directory_factory, instance_factory, event_bus):
        """A directory that cannot be listed contributes an issue, not an exception."""
        intranet = instance_factory("/80", "Intranet", ["http://srv01"])
        management = directory_factory("management", error=DirectoryError("management", "service unavailable"))

        result = discoverer.discover(
            NODE, management, directory_factory("content", [intranet]), alias_locality_predicate(NODE)
        )

        assert result.instances == (intranet,)
        assert len(result.issues) == 1
        assert result.issues[0].candidate is None
        assert result.issues[0].error_type == "DirectoryError"
        skipped = [e for e in event_bus.published if isinstance(e, DiscoveryCandidateSkipped)]
        assert len(skipped) == 1
        assert skipped[0].candidate is None


class TestEmptyDiscovery:
    """The no-local-instances signal."""

    def test_empty_result_is_signalled(self, discoverer, directory_factory, instance_factory, event_bus):
        """An empty result sets the flag and publishes NoLocalInstancesFound."""
        remote = instance_factory("/80", "Remote", ["http://srv02"])

        result = discoverer.discover(
            NODE,
            directory_factory("management"),
            directory_factory("content", [remote]),
            alias_locality_predicate(NODE),
        )

        assert result.no_local_instances
        assert any(isinstance(e, NoLocalInstancesFound) for e in event_bus.published)

    def test_empty_when_everything_fails(self, discoverer, directory_factory):
        """Failures on every path still produce an empty result, not an exception."""
        result = discoverer.discover(
            NODE,
            directory_factory("management", error=RuntimeError("down")),
            directory_factory("content", error=RuntimeError("down")),
            lambda _: True,
        )

        assert result.no_local_instances
        assert len(result.issues) == 2

    def test_completed_event_counts(self, discoverer, directory_factory, instance_factory, event_bus):
        """DiscoveryCompleted carries instance and issue counts."""
        discoverer.discover(
            NODE,
            directory_factory("management", error=RuntimeError("down")),
            directory_factory("content", [instance_factory("/80", "Intranet", ["http://srv01"])]),
            alias_locality_predicate(NODE),
        )

        completed = [e for e in event_bus.published if isinstance(e, DiscoveryCompleted)]
        assert len(completed) == 1
        assert completed[0].instances_count == 1
        assert completed[0].issues_count == 1
        assert not any(isinstance(e, NoLocalInstancesFound) for e in event_bus.published)

    def test_works_without_event_bus(self, directory_factory):
        """Discovery does not need an event bus."""
        result = InstanceDiscoverer().discover(NODE, directory_factory("m"), directory_factory("c"), lambda _: True)
        assert result.no_local_instances


class TestDiscoveryResult:
    """Tests for DiscoveryResult helpers."""

    def test_require_instances_raises_when_empty(self):
        """require_instances raises NoLocalInstancesError for an empty result."""
        with pytest.raises(NoLocalInstancesError, match="srv01"):
            DiscoveryResult(node_name="srv01").require_instances()

    def test_require_instances_returns_instances(self, instance_factory):
        """require_instances returns the instances when there are some."""
        instance = instance_factory("/80", "Intranet")
        assert DiscoveryResult(node_name="srv01", instances=(instance,)).require_instances() == (instance,)

    def test_find_by_name_or_path(self, instance_factory):
        """find matches the display name case-insensitively, or the exact base path."""
        intranet = instance_factory("/80", "Intranet")
        portal = instance_factory("/443", None, description="SharePoint - 443")
        result = DiscoveryResult(node_name="srv01", instances=(intranet, portal))

        assert result.find("intranet") is intranet
        assert result.find("/443") is portal
        assert result.find("sharepoint - 443") is portal
        assert result.find("missing") is None


class TestDiscoveryLogging:
    """Outcomes are reported through events, which the logging handler turns into log lines."""

    def test_skips_are_not_logged_directly(self, discoverer, directory_factory, instance_factory, event_bus):
        """A skipped candidate and an empty result publish events without direct warnings."""
        with patch("farmconf.domain.discovery.discovery_service.logger") as logger:
            discoverer.discover(
                NODE,
                directory_factory("management", error=RuntimeError("down")),
                directory_factory("content", [instance_factory("/80", "Remote", ["http://srv02"])]),
                alias_locality_predicate(NODE),
            )

        logger.warning.assert_not_called()
        logger.info.assert_not_called()
        assert any(isinstance(e, DiscoveryCandidateSkipped) for e in event_bus.published)
        assert any(isinstance(e, NoLocalInstancesFound) for e in event_bus.published)
