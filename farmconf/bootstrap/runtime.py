"""Bootstrap helpers for wiring runtime dependencies.

This module centralizes object graph creation (composition root) so that
commands and tests build the same graph from a settings object, without
module-level singletons.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..application.event_handlers import LoggingEventHandler
from ..application.propagation import ConfigPropagator
from ..application.workflow_service import ConfigWorkflowService
from ..config import FarmconfSettings
from ..domain.contracts.service_directory import LocalityPredicate, ServiceDirectory
from ..domain.discovery.locality import alias_locality_predicate
from ..infrastructure.event_bus import EventBus
from ..infrastructure.yaml_directory import YamlFarmTopology


@dataclass(frozen=True)
class Runtime:
    """Container for runtime dependencies."""

    settings: FarmconfSettings
    event_bus: EventBus
    management_directory: ServiceDirectory
    content_directory: ServiceDirectory
    content_locality_predicate: LocalityPredicate
    propagator: ConfigPropagator
    workflow_service: ConfigWorkflowService


def create_runtime(
    settings: FarmconfSettings,
    *,
    event_bus: Optional[EventBus] = None,
    management_directory: Optional[ServiceDirectory] = None,
    content_directory: Optional[ServiceDirectory] = None,
    content_locality_predicate: Optional[LocalityPredicate] = None,
) -> Runtime:
    """Create runtime dependencies explicitly.

    Directories default to the two sections of the topology file named in
    *settings*; the content predicate defaults to alias matching against
    the settings' node name.

    Args:
        settings: Loaded settings.
        event_bus: Optional event bus override.
        management_directory: Optional management directory override.
        content_directory: Optional content directory override.
        content_locality_predicate: Optional predicate override.

    Returns:
        Runtime container.
    """
    eb = event_bus or EventBus()
    eb.subscribe_to_all(LoggingEventHandler())

    topology = YamlFarmTopology(settings.topology_path)
    management = management_directory or topology.management_directory()
    content = content_directory or topology.content_directory()
    predicate = content_locality_predicate or alias_locality_predicate(settings.node_name)

    propagator = ConfigPropagator(
        config_filename=settings.config_filename,
        path_separator=settings.path_separator,
        event_bus=eb,
    )

    workflow_service = ConfigWorkflowService(
        node_name=settings.node_name,
        management_directory=management,
        content_directory=content,
        content_locality_predicate=predicate,
        propagator=propagator,
        event_bus=eb,
    )

    return Runtime(
        settings=settings,
        event_bus=eb,
        management_directory=management,
        content_directory=content,
        content_locality_predicate=predicate,
        propagator=propagator,
        workflow_service=workflow_service,
    )
