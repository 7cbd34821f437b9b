"""Instance discovery - which farm web applications live on this node?

Discovery is best-effort: a candidate that cannot be inspected is skipped
and recorded as a :class:`DiscoveryIssue`, and enumeration continues with
the next candidate. Only an empty overall result is signalled to callers.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional, Tuple

from ...logging_config import get_logger
from ..contracts.service_directory import LocalityPredicate, ServiceDirectory
from ..events import (
    DiscoveryCandidateSkipped,
    DiscoveryCompleted,
    DomainEvent,
    LocalInstanceDiscovered,
    NoLocalInstancesFound,
)
from ..exceptions import NoLocalInstancesError
from ..model.service_instance import EndpointAlias, ServiceInstance
from .locality import LocalityMatcher

if TYPE_CHECKING:
    from ...infrastructure.event_bus import EventBus

logger = get_logger(__name__)


@dataclass(frozen=True)
class DiscoveryIssue:
    """A candidate (or a whole directory when ``candidate`` is None) that was skipped."""

    directory: str
    candidate: Optional[str]
    error_type: str
    message: str


@dataclass
class DiscoveryResult:
    """Ordered local instances plus the issues met while finding them."""

    node_name: str
    instances: Tuple[ServiceInstance, ...] = ()
    issues: Tuple[DiscoveryIssue, ...] = ()

    @property
    def no_local_instances(self) -> bool:
        return not self.instances

    def require_instances(self) -> Tuple[ServiceInstance, ...]:
        """Return the instances, raising when there are none.

        Raises:
            NoLocalInstancesError: Discovery found nothing on this node.
        """
        if self.no_local_instances:
            raise NoLocalInstancesError(self.node_name, len(self.issues))
        return self.instances

    def find(self, key: str) -> Optional[ServiceInstance]:
        """Look an instance up by display name (case-insensitive) or base path."""
        for instance in self.instances:
            if instance.base_path == key or instance.display_name.lower() == key.lower():
                return instance
        return None


@dataclass
class _Collector:
    instances: List[ServiceInstance] = field(default_factory=list)
    issues: List[DiscoveryIssue] = field(default_factory=list)


class InstanceDiscoverer:
    """
    Finds the service instances hosted on the current node.

    Management-directory candidates are matched by their endpoint aliases
    (first matching alias wins); content-directory candidates are matched
    by an injected locality predicate. In both directories a candidate whose
    alias lookup fails is skipped. Management matches come first in the
    result, each group in directory order.
    """

    def __init__(self, event_bus: Optional["EventBus"] = None):
        self._event_bus = event_bus

    def discover(
        self,
        current_node_name: str,
        management_directory: ServiceDirectory,
        content_directory: ServiceDirectory,
        content_locality_predicate: LocalityPredicate,
    ) -> DiscoveryResult:
        collector = _Collector()

        logger.debug(
            "discovery_started",
            node=current_node_name,
            management_directory=management_directory.name,
            content_directory=content_directory.name,
        )

        for candidate in self._candidates(management_directory, collector):
            try:
                alias = self._first_local_alias(management_directory, candidate, current_node_name)
            except Exception as e:
                self._skip(collector, management_directory.name, candidate.base_path, e)
                continue
            if alias is not None:
                self._include(collector, management_directory.name, candidate, alias.uri)

        for candidate in self._candidates(content_directory, collector):
            try:
                # raises for entries the directory could not read
                content_directory.endpoint_aliases(candidate)
                is_local = bool(content_locality_predicate(candidate))
            except Exception as e:
                self._skip(collector, content_directory.name, candidate.base_path, e)
                continue
            if is_local:
                self._include(collector, content_directory.name, candidate, None)

        result = DiscoveryResult(
            node_name=current_node_name,
            instances=tuple(collector.instances),
            issues=tuple(collector.issues),
        )

        self._publish(
            DiscoveryCompleted(
                node_name=current_node_name,
                instances_count=len(result.instances),
                issues_count=len(result.issues),
            )
        )

        if result.no_local_instances:
            self._publish(NoLocalInstancesFound(node_name=current_node_name, issues_count=len(result.issues)))

        return result

    def _candidates(self, directory: ServiceDirectory, collector: _Collector) -> Tuple[ServiceInstance, ...]:
        try:
            return tuple(directory.list_instances())
        except Exception as e:
            self._skip(collector, directory.name, None, e)
            return ()

    @staticmethod
    def _first_local_alias(
        directory: ServiceDirectory,
        candidate: ServiceInstance,
        current_node_name: str,
    ) -> Optional[EndpointAlias]:
        aliases = directory.endpoint_aliases(candidate)
        if aliases is None:
            return None
        for alias in aliases:
            if LocalityMatcher.matches(alias, current_node_name):
                return alias
        return None

    def _include(
        self,
        collector: _Collector,
        directory_name: str,
        instance: ServiceInstance,
        matched_alias: Optional[str],
    ) -> None:
        collector.instances.append(instance)
        self._publish(
            LocalInstanceDiscovered(
                directory=directory_name,
                instance_name=instance.display_name,
                base_path=instance.base_path,
                matched_alias=matched_alias,
            )
        )

    def _skip(
        self,
        collector: _Collector,
        directory_name: str,
        candidate: Optional[str],
        error: Exception,
    ) -> None:
        issue = DiscoveryIssue(
            directory=directory_name,
            candidate=candidate,
            error_type=type(error).__name__,
            message=str(error),
        )
        collector.issues.append(issue)
        self._publish(
            DiscoveryCandidateSkipped(
                directory=directory_name,
                candidate=candidate,
                error_type=issue.error_type,
                error_message=issue.message,
            )
        )

    def _publish(self, event: DomainEvent) -> None:
        if self._event_bus is not None:
            self._event_bus.publish(event)
