"""Domain contracts - interfaces for external collaborators.

The domain depends on these abstractions; implementations live in the
infrastructure and CLI layers.
"""

from .configuration_payload import ConfigurationPayload
from .service_directory import LocalityPredicate, ServiceDirectory
from .workflow_ui import WorkflowUI

__all__ = [
    "ConfigurationPayload",
    "LocalityPredicate",
    "ServiceDirectory",
    "WorkflowUI",
]
