"""Locality checks - is an endpoint alias served by the current node?"""

from typing import Optional

from ..contracts.service_directory import LocalityPredicate
from ..model.service_instance import EndpointAlias, ServiceInstance


class LocalityMatcher:
    """Matches endpoint aliases against the current node name.

    Only the leftmost label of the alias host is compared, case-insensitively:
    ``SRV01.corp.local`` matches node ``srv01``.
    """

    @staticmethod
    def host_label(host: str) -> str:
        return host.split(".")[0]

    @classmethod
    def matches(cls, alias: Optional[EndpointAlias], current_node_name: str) -> bool:
        if alias is None or not alias.host or not current_node_name:
            return False
        return cls.host_label(alias.host).lower() == current_node_name.lower()


def alias_locality_predicate(current_node_name: str) -> LocalityPredicate:
    """Default content-directory predicate: any alias matches the node."""

    def _is_local(instance: ServiceInstance) -> bool:
        return any(LocalityMatcher.matches(alias, current_node_name) for alias in (instance.endpoint_aliases or ()))

    return _is_local
