"""farmconf - configure the web applications of a server farm node.

Discovers the web applications hosted on the current node from the farm's
management and content directories, lets the operator pick the ones to
configure, and writes search settings into each one's web.config.

Preferred imports:
- Domain model from farmconf.domain.model
- Domain exceptions from farmconf.domain.exceptions
- Runtime wiring from farmconf.bootstrap
"""

from .bootstrap import create_runtime, Runtime
from .config import FarmconfSettings, load_settings
from .domain.exceptions import (
    ConfigurationError,
    DirectoryError,
    FarmconfError,
    InvalidStateTransitionError,
    NoLocalInstancesError,
    PayloadWriteError,
    PropagationError,
)
from .domain.model import EndpointAlias, OperatingMode, ServiceInstance, Workflow, WorkflowOutcome, WorkflowState

__version__ = "0.3.0"

__all__ = [
    # Runtime
    "Runtime",
    "create_runtime",
    "FarmconfSettings",
    "load_settings",
    # Domain model
    "EndpointAlias",
    "OperatingMode",
    "ServiceInstance",
    "Workflow",
    "WorkflowOutcome",
    "WorkflowState",
    # Exceptions
    "ConfigurationError",
    "DirectoryError",
    "FarmconfError",
    "InvalidStateTransitionError",
    "NoLocalInstancesError",
    "PayloadWriteError",
    "PropagationError",
]
