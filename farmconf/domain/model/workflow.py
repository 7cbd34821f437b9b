"""Workflow aggregate - the discover/select/configure/propagate state machine.

States::

    DISCOVERING -> AWAITING_SELECTION -> COLLECTING_PARAMETERS -> PROPAGATING -> CLOSED
                                      \\-> CLOSED (edit mode, or cancel)

COLLECTING_PARAMETERS is only reachable in install mode. CLOSED is terminal
and carries a :class:`WorkflowOutcome`.
"""

from enum import Enum
from typing import TYPE_CHECKING, Dict, FrozenSet, List, Optional, Sequence, Tuple

from ..events import DomainEvent, WorkflowStateChanged
from ..exceptions import InvalidStateTransitionError
from .service_instance import ServiceInstance

if TYPE_CHECKING:
    from ..contracts.configuration_payload import ConfigurationPayload
    from ..discovery.discovery_service import DiscoveryResult


class OperatingMode(Enum):
    """How the workflow ends once a selection is accepted."""

    INSTALL = "install"
    EDIT = "edit"

    @property
    def collects_parameters(self) -> bool:
        return self is OperatingMode.INSTALL


class WorkflowState(Enum):
    DISCOVERING = "discovering"
    AWAITING_SELECTION = "awaiting_selection"
    COLLECTING_PARAMETERS = "collecting_parameters"
    PROPAGATING = "propagating"
    CLOSED = "closed"


class WorkflowOutcome(Enum):
    ACCEPTED = "accepted"
    CANCELLED = "cancelled"
    FAILED = "failed"


VALID_TRANSITIONS: Dict[WorkflowState, FrozenSet[WorkflowState]] = {
    WorkflowState.DISCOVERING: frozenset({WorkflowState.AWAITING_SELECTION, WorkflowState.CLOSED}),
    WorkflowState.AWAITING_SELECTION: frozenset({WorkflowState.COLLECTING_PARAMETERS, WorkflowState.CLOSED}),
    WorkflowState.COLLECTING_PARAMETERS: frozenset({WorkflowState.PROPAGATING, WorkflowState.CLOSED}),
    WorkflowState.PROPAGATING: frozenset({WorkflowState.CLOSED}),
    WorkflowState.CLOSED: frozenset(),
}


class Workflow:
    """
    One run of the configuration workflow.

    The aggregate validates every transition against ``VALID_TRANSITIONS``
    and records a :class:`WorkflowStateChanged` event for each; callers
    publish them with :meth:`collect_events`.
    """

    def __init__(self, mode: OperatingMode):
        self._mode = mode
        self._state = WorkflowState.DISCOVERING
        self._outcome: Optional[WorkflowOutcome] = None
        self._discovery: Optional["DiscoveryResult"] = None
        self._selection: Tuple[ServiceInstance, ...] = ()
        self._payload: Optional["ConfigurationPayload"] = None
        self._error: Optional[Exception] = None
        self._events: List[DomainEvent] = []

    # --- Properties ---

    @property
    def mode(self) -> OperatingMode:
        return self._mode

    @property
    def state(self) -> WorkflowState:
        return self._state

    @property
    def outcome(self) -> Optional[WorkflowOutcome]:
        return self._outcome

    @property
    def is_closed(self) -> bool:
        return self._state is WorkflowState.CLOSED

    @property
    def discovery(self) -> Optional["DiscoveryResult"]:
        return self._discovery

    @property
    def selection(self) -> Tuple[ServiceInstance, ...]:
        return self._selection

    @property
    def payload(self) -> Optional["ConfigurationPayload"]:
        return self._payload

    @property
    def error(self) -> Optional[Exception]:
        return self._error

    @property
    def can_proceed(self) -> bool:
        """False while discovery found nothing; the proceed action stays disabled."""
        return self._discovery is not None and not self._discovery.no_local_instances

    # --- Transitions ---

    def discovery_completed(self, result: "DiscoveryResult") -> None:
        """Move to AWAITING_SELECTION, even for an empty result."""
        self._require_state(WorkflowState.DISCOVERING, WorkflowState.AWAITING_SELECTION)
        self._discovery = result
        self._transition(WorkflowState.AWAITING_SELECTION)

    def cancel(self) -> None:
        """User cancelled before anything was written."""
        if self._state not in (
            WorkflowState.DISCOVERING,
            WorkflowState.AWAITING_SELECTION,
            WorkflowState.COLLECTING_PARAMETERS,
        ):
            raise InvalidStateTransitionError(
                self._state.value, WorkflowState.CLOSED.value, "cannot cancel once propagation started"
            )
        self._transition(WorkflowState.CLOSED, WorkflowOutcome.CANCELLED)

    def accept_selection(self, selected: Sequence[ServiceInstance]) -> None:
        """Accept the user's selection.

        Edit mode closes the workflow here; install mode moves on to
        parameter collection.

        Raises:
            InvalidStateTransitionError: Not awaiting a selection, or
                discovery found nothing to select.
            ValueError: The selection contains instances that were not
                discovered, or is empty in install mode.
        """
        self._require_state(WorkflowState.AWAITING_SELECTION, WorkflowState.CLOSED)
        if not self.can_proceed:
            raise InvalidStateTransitionError(
                self._state.value, WorkflowState.CLOSED.value, "no local instances to select"
            )

        discovered = set(self._discovery.instances)
        unknown = [instance.base_path for instance in selected if instance not in discovered]
        if unknown:
            raise ValueError(f"Selection contains instances that were not discovered: {', '.join(unknown)}")
        if self._mode.collects_parameters and not selected:
            raise ValueError("Install mode requires at least one selected instance")

        self._selection = tuple(selected)

        if self._mode.collects_parameters:
            self._transition(WorkflowState.COLLECTING_PARAMETERS)
        else:
            self._transition(WorkflowState.CLOSED, WorkflowOutcome.ACCEPTED)

    def parameters_collected(self, payload: "ConfigurationPayload") -> None:
        self._require_state(WorkflowState.COLLECTING_PARAMETERS, WorkflowState.PROPAGATING)
        self._payload = payload
        self._transition(WorkflowState.PROPAGATING)

    def parameters_cancelled(self) -> None:
        self._require_state(WorkflowState.COLLECTING_PARAMETERS, WorkflowState.CLOSED)
        self._transition(WorkflowState.CLOSED, WorkflowOutcome.CANCELLED)

    def propagation_succeeded(self) -> None:
        self._require_state(WorkflowState.PROPAGATING, WorkflowState.CLOSED)
        self._transition(WorkflowState.CLOSED, WorkflowOutcome.ACCEPTED)

    def propagation_failed(self, error: Exception) -> None:
        self._require_state(WorkflowState.PROPAGATING, WorkflowState.CLOSED)
        self._error = error
        self._transition(WorkflowState.CLOSED, WorkflowOutcome.FAILED)

    # --- Events ---

    def collect_events(self) -> List[DomainEvent]:
        """Return and clear the events recorded since the last call."""
        events, self._events = self._events, []
        return events

    # --- Internals ---

    def _require_state(self, expected: WorkflowState, target: WorkflowState) -> None:
        if self._state is not expected:
            raise InvalidStateTransitionError(
                self._state.value, target.value, f"expected state {expected.value}"
            )

    def _transition(self, new_state: WorkflowState, outcome: Optional[WorkflowOutcome] = None) -> None:
        if new_state not in VALID_TRANSITIONS[self._state]:
            raise InvalidStateTransitionError(self._state.value, new_state.value)

        old_state = self._state
        self._state = new_state
        if new_state is WorkflowState.CLOSED:
            self._outcome = outcome

        self._events.append(
            WorkflowStateChanged(
                mode=self._mode.value,
                old_state=old_state.value,
                new_state=new_state.value,
                outcome=outcome.value if outcome else None,
            )
        )
