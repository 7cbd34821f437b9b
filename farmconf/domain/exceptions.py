"""Domain exceptions.

Every error raised by farmconf derives from :class:`FarmconfError`, which
carries a message plus a details mapping that serializes cleanly for logs
and the CLI.
"""

from typing import Any, Dict, List, Optional


class FarmconfError(Exception):
    """Base class for all farmconf errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert the error to a dictionary for serialization."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(FarmconfError):
    """Settings file or environment overrides are invalid."""


class DirectoryError(FarmconfError):
    """A service directory could not be queried."""

    def __init__(self, directory: str, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, {"directory": directory, **(details or {})})
        self.directory = directory


class NoLocalInstancesError(FarmconfError):
    """Discovery finished without finding a single instance on this node."""

    def __init__(self, node_name: str, issues_count: int = 0):
        super().__init__(
            f"No local web applications found on node '{node_name}'",
            {"node_name": node_name, "issues": issues_count},
        )
        self.node_name = node_name


class PayloadWriteError(FarmconfError):
    """A configuration payload could not be written to its target file."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Cannot write configuration to {path}: {reason}", {"path": path})
        self.path = path
        self.reason = reason


class PropagationError(FarmconfError):
    """Propagation stopped at the first failed write.

    Files written before the failure are listed in ``written`` and are not
    rolled back.
    """

    def __init__(
        self,
        instance_name: str,
        path: str,
        attempted: int,
        written: List[str],
        reason: str,
    ):
        super().__init__(
            f"Writing {path} for '{instance_name}' failed: {reason}",
            {
                "instance": instance_name,
                "path": path,
                "attempted": attempted,
                "written": list(written),
            },
        )
        self.instance_name = instance_name
        self.path = path
        self.attempted = attempted
        self.written = list(written)
        self.reason = reason


class InvalidStateTransitionError(FarmconfError):
    """The workflow was asked to move to a state it cannot reach."""

    def __init__(self, from_state: str, to_state: str, reason: str = ""):
        message = f"Invalid workflow transition {from_state} -> {to_state}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, {"from_state": from_state, "to_state": to_state})
        self.from_state = from_state
        self.to_state = to_state
