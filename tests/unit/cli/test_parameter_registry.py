"""Tests for the install parameter registry."""

import pytest

from farmconf.cli.services import (
    build_payload,
    get_all_parameters,
    get_parameter,
    parse_assignments,
    validate_values,
)


class TestParameterDefinitions:
    """Registry contents and per-parameter validation."""

    def test_keys(self):
        """Each parameter maps to its appSettings key."""
        assert {p.name: p.key for p in get_all_parameters()} == {
            "appliance_url": "GSALocation",
            "frontend": "frontEnd",
            "collection": "siteCollection",
            "access_level": "accessLevel",
            "base_path": "installPath",
        }

    def test_unknown_parameter(self):
        """get_parameter returns None for unknown names."""
        assert get_parameter("nope") is None

    @pytest.mark.parametrize(
        "name,value,ok",
        [
            ("appliance_url", "http://gsa.corp.local", True),
            ("appliance_url", "https://gsa:8443/search", True),
            ("appliance_url", "gsa.corp.local", False),
            ("appliance_url", "ftp://gsa", False),
            ("appliance_url", "", False),
            ("access_level", "p", True),
            ("access_level", "x", False),
            ("base_path", "", True),
            ("frontend", "   ", False),
        ],
    )
    def test_validate(self, name, value, ok):
        """Validation accepts good values and explains bad ones."""
        error = get_parameter(name).validate(value)
        assert (error is None) is ok


class TestParseAssignments:
    """Parsing --set name=value options."""

    def test_parses_pairs(self):
        """Values may contain '=' and are stripped."""
        assert parse_assignments(["collection = intranet", "appliance_url=http://gsa/?a=b"]) == {
            "collection": "intranet",
            "appliance_url": "http://gsa/?a=b",
        }

    @pytest.mark.parametrize("assignment", ["collection", "=x", "bogus=1"])
    def test_rejects_bad_pairs(self, assignment):
        """Malformed pairs and unknown names raise ValueError."""
        with pytest.raises(ValueError):
            parse_assignments([assignment])


class TestBuildPayload:
    """Building the appSettings payload."""

    def test_install_only_and_empty_values(self):
        """base_path is install-only and empty values are dropped."""
        payload = build_payload(
            {
                "appliance_url": "http://gsa",
                "frontend": "default_frontend",
                "collection": "",
                "access_level": "a",
                "base_path": "/opt/search",
            }
        )

        assert payload.settings_for(False) == {
            "GSALocation": "http://gsa",
            "frontEnd": "default_frontend",
            "accessLevel": "a",
        }
        assert payload.settings_for(True)["installPath"] == "/opt/search"

    def test_validate_values_lists_all_errors(self):
        """Every failing parameter is reported."""
        errors = validate_values({"access_level": "z"})
        assert any(e.startswith("appliance_url") for e in errors)
        assert any(e.startswith("access_level") for e in errors)
        assert any(e.startswith("frontend") for e in errors)
