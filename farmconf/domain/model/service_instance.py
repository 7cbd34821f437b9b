"""Service instance value objects.

A service instance is a web application hosted by the farm: a root path on
disk plus the endpoint aliases it is reachable through.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple
from urllib.parse import urlsplit


@dataclass(frozen=True)
class EndpointAlias:
    """A registered URL through which a service instance is reachable."""

    host: Optional[str]
    uri: str = ""

    @classmethod
    def from_uri(cls, raw: str) -> "EndpointAlias":
        """Build an alias from a raw URI.

        Bare host names (``srv01``, ``srv01.corp.local:8080``) are accepted
        and treated as ``http://`` URIs. The host is None when the URI has
        no host component.
        """
        raw = (raw or "").strip()
        candidate = raw if "://" in raw else f"http://{raw}"
        try:
            host = urlsplit(candidate).hostname
        except ValueError:
            host = None
        return cls(host=host or None, uri=raw)


@dataclass(frozen=True)
class ServiceInstance:
    """A web application discovered in the farm.

    Identity is ``base_path``; two instances with the same path compare
    equal regardless of the other fields.
    """

    base_path: str
    name: Optional[str] = field(default=None, compare=False)
    description: str = field(default="", compare=False)
    is_management_instance: bool = field(default=False, compare=False)
    endpoint_aliases: Optional[Tuple[EndpointAlias, ...]] = field(default=(), compare=False)

    @property
    def display_name(self) -> str:
        """Name shown to users, falling back to the description."""
        if self.name is not None and self.name.strip():
            return self.name
        return self.description

    def to_dict(self) -> dict:
        """Serialize for logs and machine-readable CLI output."""
        return {
            "name": self.display_name,
            "base_path": self.base_path,
            "management": self.is_management_instance,
            "aliases": [alias.uri for alias in (self.endpoint_aliases or ())],
        }
