"""Shared fixtures: in-memory service directories, payloads and instances."""

from typing import Dict, Iterable, List, Optional, Sequence

import pytest

from farmconf.domain.contracts import ConfigurationPayload, ServiceDirectory
from farmconf.domain.model import EndpointAlias, ServiceInstance
from farmconf.infrastructure import EventBus


class FakeDirectory(ServiceDirectory):
    """Service directory backed by a list, with optional injected failures."""

    def __init__(
        self,
        name: str,
        instances: Iterable[ServiceInstance] = (),
        error: Optional[Exception] = None,
        alias_errors: Optional[Dict[str, Exception]] = None,
    ):
        self.name = name
        self.instances = list(instances)
        self.error = error
        self.alias_errors = alias_errors or {}

    def list_instances(self) -> Sequence[ServiceInstance]:
        if self.error is not None:
            raise self.error
        return list(self.instances)

    def endpoint_aliases(self, instance: ServiceInstance):
        if instance.base_path in self.alias_errors:
            raise self.alias_errors[instance.base_path]
        return super().endpoint_aliases(instance)


class RecordingPayload(ConfigurationPayload):
    """Payload that records writes and fails for the paths in ``fail_on``."""

    def __init__(self, fail_on: Iterable[str] = ()):
        self.fail_on = set(fail_on)
        self.writes: List[tuple] = []

    def write(self, path: str, overwrite: bool, apply_as_install: bool) -> None:
        self.writes.append((path, overwrite, apply_as_install))
        if path in self.fail_on:
            raise OSError(f"disk full: {path}")


def make_instance(
    base_path: str,
    name: Optional[str] = None,
    aliases: Optional[Sequence[str]] = (),
    management: bool = False,
    description: str = "",
) -> ServiceInstance:
    return ServiceInstance(
        base_path=base_path,
        name=name,
        description=description,
        is_management_instance=management,
        endpoint_aliases=None if aliases is None else tuple(EndpointAlias.from_uri(a) for a in aliases),
    )


@pytest.fixture
def instance_factory():
    """Build ServiceInstance objects from plain alias strings."""
    return make_instance


@pytest.fixture
def directory_factory():
    """Build in-memory service directories."""
    return FakeDirectory


@pytest.fixture
def payload_factory():
    """Build recording configuration payloads."""
    return RecordingPayload


@pytest.fixture
def event_bus():
    """Event bus that records every published event in ``bus.published``."""
    bus = EventBus()
    bus.published = []
    bus.subscribe_to_all(bus.published.append)
    return bus
