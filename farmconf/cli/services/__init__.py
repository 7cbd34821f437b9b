"""CLI services - extracted functionality from commands."""

from .console_ui import ConsoleWorkflowUI, NO_INSTANCES_WARNING, render_instances
from .parameter_registry import (
    build_payload,
    get_all_parameters,
    get_parameter,
    ParameterDefinition,
    parse_assignments,
    validate_values,
)

__all__ = [
    # Workflow UI
    "ConsoleWorkflowUI",
    "NO_INSTANCES_WARNING",
    "render_instances",
    # Parameter registry
    "ParameterDefinition",
    "build_payload",
    "get_all_parameters",
    "get_parameter",
    "parse_assignments",
    "validate_values",
]
