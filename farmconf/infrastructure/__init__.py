"""Infrastructure - event bus, topology directories and payload writers."""

from .app_settings import AppSettingsPayload
from .event_bus import EventBus
from .yaml_directory import YamlFarmTopology, YamlServiceDirectory

__all__ = [
    "AppSettingsPayload",
    "EventBus",
    "YamlFarmTopology",
    "YamlServiceDirectory",
]
