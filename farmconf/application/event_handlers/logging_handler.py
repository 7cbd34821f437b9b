"""Logging event handler - logs all domain events."""

import json
import logging

from farmconf.domain.events import (
    ConfigFileWritten,
    DiscoveryCandidateSkipped,
    DiscoveryCompleted,
    DomainEvent,
    LocalInstanceDiscovered,
    NoLocalInstancesFound,
    PropagationFailed,
    WorkflowStateChanged,
)
from farmconf.logging_config import get_logger

logger = get_logger(__name__)


class LoggingEventHandler:
    """
    Event handler that writes every domain event to the audit log.

    Failures and empty discoveries are logged at WARNING, writes and
    completed runs at INFO, per-instance matches and state changes at DEBUG.
    """

    def __init__(self, log_level: int = logging.INFO):
        """
        Initialize the logging handler.

        Args:
            log_level: Logging level for events without a dedicated level
        """
        self.log_level = log_level

    def handle(self, event: DomainEvent) -> None:
        if isinstance(event, (PropagationFailed, DiscoveryCandidateSkipped, NoLocalInstancesFound)):
            level = logging.WARNING
        elif isinstance(event, (ConfigFileWritten, DiscoveryCompleted)):
            level = logging.INFO
        elif isinstance(event, (LocalInstanceDiscovered, WorkflowStateChanged)):
            level = logging.DEBUG
        else:
            level = self.log_level

        logger.log(level, self._format_event(event))

    def __call__(self, event: DomainEvent) -> None:
        self.handle(event)

    def _format_event(self, event: DomainEvent) -> str:
        """
        Format an event for logging.

        Args:
            event: The event to format

        Returns:
            Formatted log message
        """
        event_type = event.__class__.__name__

        if isinstance(event, LocalInstanceDiscovered):
            via = f"alias {event.matched_alias}" if event.matched_alias else "locality predicate"
            return f"[EVENT:{event_type}] '{event.instance_name}' at {event.base_path} is local ({via})"
        elif isinstance(event, DiscoveryCandidateSkipped):
            target = f"candidate '{event.candidate}'" if event.candidate else "directory query"
            return (
                f"[EVENT:{event_type}] {event.directory}: {target} skipped "
                f"({event.error_type}: {event.error_message})"
            )
        elif isinstance(event, DiscoveryCompleted):
            return (
                f"[EVENT:{event_type}] Node '{event.node_name}': {event.instances_count} local instances, "
                f"{event.issues_count} issues"
            )
        elif isinstance(event, NoLocalInstancesFound):
            return f"[EVENT:{event_type}] No local web applications found on node '{event.node_name}'"
        elif isinstance(event, ConfigFileWritten):
            mode = "install" if event.apply_as_install else "update"
            return f"[EVENT:{event_type}] Wrote {event.path} for '{event.instance_name}' ({mode})"
        elif isinstance(event, PropagationFailed):
            return (
                f"[EVENT:{event_type}] Writing {event.path} for '{event.instance_name}' FAILED "
                f"after {event.written_count} successful writes: {event.error_message}"
            )
        elif isinstance(event, WorkflowStateChanged):
            suffix = f" ({event.outcome})" if event.outcome else ""
            return f"[EVENT:{event_type}] {event.mode}: {event.old_state} -> {event.new_state}{suffix}"
        else:
            return f"[EVENT:{event_type}] {json.dumps(event.to_dict(), default=str)}"
