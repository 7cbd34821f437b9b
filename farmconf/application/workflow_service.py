"""Workflow service - drives one configuration run end to end.

Discover -> present -> select -> (install mode) collect parameters -> propagate.
"""

from dataclasses import dataclass
from typing import Optional

from ..domain.contracts.service_directory import LocalityPredicate, ServiceDirectory
from ..domain.contracts.workflow_ui import WorkflowUI
from ..domain.discovery.discovery_service import DiscoveryResult, InstanceDiscoverer
from ..domain.exceptions import PropagationError
from ..domain.model.workflow import OperatingMode, Workflow, WorkflowOutcome
from ..infrastructure.event_bus import EventBus
from ..logging_config import get_logger
from .propagation import ConfigPropagator, PropagationReport

logger = get_logger(__name__)


@dataclass
class WorkflowRun:
    """Summary of a finished workflow."""

    mode: OperatingMode
    outcome: WorkflowOutcome
    discovery: DiscoveryResult
    selection: tuple
    report: Optional[PropagationReport] = None

    @property
    def accepted(self) -> bool:
        return self.outcome is WorkflowOutcome.ACCEPTED


class ConfigWorkflowService:
    """
    Orchestrates discovery, user interaction and propagation.

    Collaborators are injected so the whole flow runs against fake
    directories and a scripted UI in tests.
    """

    def __init__(
        self,
        node_name: str,
        management_directory: ServiceDirectory,
        content_directory: ServiceDirectory,
        content_locality_predicate: LocalityPredicate,
        propagator: ConfigPropagator,
        event_bus: Optional[EventBus] = None,
        discoverer: Optional[InstanceDiscoverer] = None,
    ):
        self._node_name = node_name
        self._management_directory = management_directory
        self._content_directory = content_directory
        self._content_locality_predicate = content_locality_predicate
        self._propagator = propagator
        self._event_bus = event_bus
        self._discoverer = discoverer or InstanceDiscoverer(event_bus)

    def discover(self) -> DiscoveryResult:
        return self._discoverer.discover(
            self._node_name,
            self._management_directory,
            self._content_directory,
            self._content_locality_predicate,
        )

    def run(self, mode: OperatingMode, ui: WorkflowUI) -> WorkflowRun:
        """Run the workflow to a CLOSED state.

        Raises:
            PropagationError: A write failed. The workflow is closed as
                FAILED before the error is re-raised.
        """
        workflow = Workflow(mode)
        logger.info("workflow_started", mode=mode.value, node=self._node_name)

        result = self.discover()
        workflow.discovery_completed(result)
        self._flush(workflow)
        ui.present(result)

        selection = ui.select(result.instances) if workflow.can_proceed else None
        # install mode needs at least one target
        if selection is None or (not selection and mode.collects_parameters):
            workflow.cancel()
            return self._finish(workflow, result)

        workflow.accept_selection(selection)
        self._flush(workflow)
        if workflow.is_closed:
            return self._finish(workflow, result)

        payload = ui.collect_parameters()
        if payload is None:
            workflow.parameters_cancelled()
            return self._finish(workflow, result)

        workflow.parameters_collected(payload)
        self._flush(workflow)

        try:
            report = self._propagator.propagate(
                workflow.selection,
                payload,
                apply_as_install=mode is OperatingMode.INSTALL,
            )
        except PropagationError as e:
            workflow.propagation_failed(e)
            self._finish(workflow, result)
            raise

        workflow.propagation_succeeded()
        ui.report(report)
        return self._finish(workflow, result, report)

    def _finish(
        self,
        workflow: Workflow,
        result: DiscoveryResult,
        report: Optional[PropagationReport] = None,
    ) -> WorkflowRun:
        self._flush(workflow)
        logger.info(
            "workflow_closed",
            mode=workflow.mode.value,
            outcome=workflow.outcome.value,
            selected=len(workflow.selection),
            written=report.count if report else 0,
        )
        return WorkflowRun(
            mode=workflow.mode,
            outcome=workflow.outcome,
            discovery=result,
            selection=workflow.selection,
            report=report,
        )

    def _flush(self, workflow: Workflow) -> None:
        events = workflow.collect_events()
        if self._event_bus is None:
            return
        for event in events:
            self._event_bus.publish(event)
