"""User interface contract for the configuration workflow."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List, Optional, Sequence

from ..model.service_instance import ServiceInstance
from .configuration_payload import ConfigurationPayload

if TYPE_CHECKING:
    from ...application.propagation import PropagationReport
    from ..discovery.discovery_service import DiscoveryResult


class WorkflowUI(ABC):
    """Presentation collaborator driven by the workflow service.

    The UI only reads the discovery result; it never feeds instance data back
    except through :meth:`select`.
    """

    @abstractmethod
    def present(self, result: "DiscoveryResult") -> None:
        """Render discovered instances, or the "no local instances" warning."""

    @abstractmethod
    def select(self, instances: Sequence[ServiceInstance]) -> Optional[List[ServiceInstance]]:
        """Return the accepted selection, or None when the user cancels."""

    @abstractmethod
    def collect_parameters(self) -> Optional[ConfigurationPayload]:
        """Return a populated payload, or None when the user cancels."""

    def report(self, report: "PropagationReport") -> None:
        """Show the outcome of a successful propagation."""
