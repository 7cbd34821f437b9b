"""Application layer - propagation and workflow orchestration."""

from .propagation import config_file_path, ConfigPropagator, DEFAULT_CONFIG_FILENAME, PropagationReport
from .workflow_service import ConfigWorkflowService, WorkflowRun

__all__ = [
    "ConfigPropagator",
    "ConfigWorkflowService",
    "DEFAULT_CONFIG_FILENAME",
    "PropagationReport",
    "WorkflowRun",
    "config_file_path",
]
