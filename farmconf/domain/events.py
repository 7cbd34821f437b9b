"""Domain events for discovery, propagation and the workflow.

Events capture important occurrences and allow decoupled reactions
(logging, audit, UI feedback).
"""

from abc import ABC
from dataclasses import dataclass
import time
from typing import Any, Dict
import uuid


class DomainEvent(ABC):
    """
    Base class for all domain events.

    Note: Not a dataclass to avoid inheritance issues.
    Subclasses should be dataclasses.
    """

    def __init__(self):
        self.event_id: str = str(uuid.uuid4())
        self.occurred_at: float = time.time()

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization."""
        return {"event_type": self.__class__.__name__, **self.__dict__}


# Discovery Events


@dataclass
class LocalInstanceDiscovered(DomainEvent):
    """Published when an instance is found to be hosted on this node."""

    directory: str
    instance_name: str
    base_path: str
    matched_alias: str | None = None  # None for predicate-based matches

    def __post_init__(self):
        super().__init__()


@dataclass
class DiscoveryCandidateSkipped(DomainEvent):
    """Published when inspecting a candidate (or a whole directory) failed."""

    directory: str
    candidate: str | None
    error_type: str
    error_message: str

    def __post_init__(self):
        super().__init__()


@dataclass
class DiscoveryCompleted(DomainEvent):
    """Published at the end of every discovery run."""

    node_name: str
    instances_count: int
    issues_count: int

    def __post_init__(self):
        super().__init__()


@dataclass
class NoLocalInstancesFound(DomainEvent):
    """Published when discovery produced an empty result."""

    node_name: str
    issues_count: int

    def __post_init__(self):
        super().__init__()


# Propagation Events


@dataclass
class ConfigFileWritten(DomainEvent):
    """Published after a configuration payload was written for an instance."""

    instance_name: str
    path: str
    apply_as_install: bool

    def __post_init__(self):
        super().__init__()


@dataclass
class PropagationFailed(DomainEvent):
    """Published when propagation aborts on a failed write."""

    instance_name: str
    path: str
    attempted: int
    written_count: int
    error_message: str

    def __post_init__(self):
        super().__init__()


# Workflow Events


@dataclass
class WorkflowStateChanged(DomainEvent):
    """Published on every workflow state transition."""

    mode: str
    old_state: str
    new_state: str
    outcome: str | None = None

    def __post_init__(self):
        super().__init__()
