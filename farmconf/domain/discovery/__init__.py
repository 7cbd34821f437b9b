"""Discovery domain module.

Locality matching and the instance discoverer that turns two farm
directories into the ordered list of instances hosted on this node.
"""

from .discovery_service import DiscoveryIssue, DiscoveryResult, InstanceDiscoverer
from .locality import alias_locality_predicate, LocalityMatcher

__all__ = [
    "DiscoveryIssue",
    "DiscoveryResult",
    "InstanceDiscoverer",
    "LocalityMatcher",
    "alias_locality_predicate",
]
