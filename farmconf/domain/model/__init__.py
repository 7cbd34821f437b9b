"""Domain model - value objects and the workflow aggregate."""

from .service_instance import EndpointAlias, ServiceInstance
from .workflow import OperatingMode, VALID_TRANSITIONS, Workflow, WorkflowOutcome, WorkflowState

__all__ = [
    "EndpointAlias",
    "ServiceInstance",
    "OperatingMode",
    "VALID_TRANSITIONS",
    "Workflow",
    "WorkflowOutcome",
    "WorkflowState",
]
