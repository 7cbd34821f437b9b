"""Service directory contract.

A directory is a read-only source of candidate service instances, e.g. the
farm's administration service or its content service.
"""

from abc import ABC, abstractmethod
from typing import Callable, Optional, Sequence

from ..model.service_instance import EndpointAlias, ServiceInstance

LocalityPredicate = Callable[[ServiceInstance], bool]
"""Decides whether a content-directory instance is hosted on this node."""


class ServiceDirectory(ABC):
    """Interface for querying service instances registered in the farm."""

    name: str = "directory"

    @abstractmethod
    def list_instances(self) -> Sequence[ServiceInstance]:
        """Return all candidate instances in directory order.

        Raises:
            DirectoryError: The directory could not be queried.
        """

    def endpoint_aliases(self, instance: ServiceInstance) -> Optional[Sequence[EndpointAlias]]:
        """Return the ordered endpoint aliases of *instance*, or None if unknown.

        Implementations that resolve aliases lazily may raise here; discovery
        treats that as a skipped candidate.
        """
        return instance.endpoint_aliases
