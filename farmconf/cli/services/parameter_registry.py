"""Parameter registry - the settings collected by the install wizard.

Each parameter maps to one ``<appSettings>`` key in the instances'
web.config files.
"""

from dataclasses import dataclass
from typing import Mapping
from urllib.parse import urlsplit

from ...infrastructure.app_settings import AppSettingsPayload


@dataclass(frozen=True)
class ParameterDefinition:
    """Definition of one configuration parameter."""

    name: str  # CLI name, used with --set name=value
    key: str  # appSettings key
    prompt: str
    config_type: str = "string"  # "string", "url", "choice"
    default: str | None = None
    required: bool = True
    choices: tuple[str, ...] = ()
    install_only: bool = False  # only written when applied as install

    def validate(self, value: str | None) -> str | None:
        """Return an error message for *value*, or None if it is acceptable."""
        if value is None or not value.strip():
            return f"{self.name} is required" if self.required else None

        if self.config_type == "url":
            parts = urlsplit(value.strip())
            if parts.scheme not in ("http", "https") or not parts.netloc:
                return f"{self.name} must be an http(s) URL"
        elif self.config_type == "choice" and value not in self.choices:
            return f"{self.name} must be one of: {', '.join(self.choices)}"
        return None


_PARAMETERS: list[ParameterDefinition] = [
    ParameterDefinition(
        name="appliance_url",
        key="GSALocation",
        prompt="Search appliance URL",
        config_type="url",
    ),
    ParameterDefinition(
        name="frontend",
        key="frontEnd",
        prompt="Search front end",
        default="default_frontend",
    ),
    ParameterDefinition(
        name="collection",
        key="siteCollection",
        prompt="Search collection",
        default="default_collection",
    ),
    ParameterDefinition(
        name="access_level",
        key="accessLevel",
        prompt="Access level (a = public and secure, p = public only)",
        config_type="choice",
        default="a",
        choices=("a", "p"),
    ),
    ParameterDefinition(
        name="base_path",
        key="installPath",
        prompt="Installation base path",
        required=False,
        install_only=True,
    ),
]


def get_all_parameters() -> list[ParameterDefinition]:
    return list(_PARAMETERS)


def get_parameter(name: str) -> ParameterDefinition | None:
    for parameter in _PARAMETERS:
        if parameter.name == name:
            return parameter
    return None


def parse_assignments(assignments: list[str]) -> dict[str, str]:
    """Parse ``name=value`` pairs from repeated ``--set`` options.

    Raises:
        ValueError: On a malformed pair or an unknown parameter name.
    """
    values: dict[str, str] = {}
    for assignment in assignments:
        name, sep, value = assignment.partition("=")
        name = name.strip()
        if not sep or not name:
            raise ValueError(f"Expected name=value, got '{assignment}'")
        if get_parameter(name) is None:
            raise ValueError(f"Unknown parameter '{name}'")
        values[name] = value.strip()
    return values


def validate_values(values: Mapping[str, str | None]) -> list[str]:
    """Return validation errors for a full set of parameter values."""
    errors = []
    for parameter in _PARAMETERS:
        error = parameter.validate(values.get(parameter.name))
        if error:
            errors.append(error)
    return errors


def build_payload(values: Mapping[str, str | None]) -> AppSettingsPayload:
    """Turn collected values into an appSettings payload.

    Empty optional values are left out of the file.
    """
    settings: dict[str, str] = {}
    install_settings: dict[str, str] = {}
    for parameter in _PARAMETERS:
        value = values.get(parameter.name)
        if value is None or not value.strip():
            continue
        target = install_settings if parameter.install_only else settings
        target[parameter.key] = value.strip()
    return AppSettingsPayload(settings, install_settings)
