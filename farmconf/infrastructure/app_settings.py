"""``<appSettings>`` configuration payload for web.config files."""

from pathlib import Path
from typing import Dict, Mapping, Optional
import xml.etree.ElementTree as ET

from ..domain.contracts.configuration_payload import ConfigurationPayload
from ..domain.exceptions import PayloadWriteError
from ..logging_config import get_logger

logger = get_logger(__name__)

ROOT_TAG = "configuration"
SECTION_TAG = "appSettings"
ENTRY_TAG = "add"


class AppSettingsPayload(ConfigurationPayload):
    """Key/value settings written to ``configuration/appSettings``.

    Existing XML is preserved: matching ``<add key=...>`` entries are
    updated in place and missing ones appended. ``install_settings`` are
    only written when the payload is applied as an install.
    """

    def __init__(self, settings: Mapping[str, str], install_settings: Optional[Mapping[str, str]] = None):
        self._settings = dict(settings)
        self._install_settings = dict(install_settings or {})

    def settings_for(self, apply_as_install: bool) -> Dict[str, str]:
        if apply_as_install:
            return {**self._settings, **self._install_settings}
        return dict(self._settings)

    def write(self, path: str, overwrite: bool, apply_as_install: bool) -> None:
        target = Path(path)
        settings = self.settings_for(apply_as_install)

        if target.exists():
            if not overwrite:
                raise PayloadWriteError(path, "file exists and overwrite is disabled")
            tree = self._parse(target)
        else:
            if not target.parent.is_dir():
                raise PayloadWriteError(path, f"directory {target.parent} does not exist")
            tree = ET.ElementTree(ET.Element(ROOT_TAG))

        root = tree.getroot()
        section = root.find(SECTION_TAG)
        if section is None:
            section = ET.SubElement(root, SECTION_TAG)

        entries = {entry.get("key"): entry for entry in section.findall(ENTRY_TAG)}
        for key, value in settings.items():
            entry = entries.get(key)
            if entry is None:
                entry = ET.SubElement(section, ENTRY_TAG, {"key": key})
            entry.set("value", str(value))

        ET.indent(tree, space="  ")
        try:
            tree.write(target, encoding="utf-8", xml_declaration=True)
        except OSError as e:
            raise PayloadWriteError(path, str(e)) from e

        logger.debug("app_settings_written", path=path, keys=sorted(settings))

    @staticmethod
    def _parse(target: Path) -> ET.ElementTree:
        try:
            # keep comments and processing instructions inside the root element
            parser = ET.XMLParser(target=ET.TreeBuilder(insert_comments=True, insert_pis=True))
            tree = ET.parse(target, parser=parser)
        except ET.ParseError as e:
            raise PayloadWriteError(str(target), f"not valid XML: {e}") from e
        except OSError as e:
            raise PayloadWriteError(str(target), str(e)) from e

        if tree.getroot().tag != ROOT_TAG:
            raise PayloadWriteError(str(target), f"root element is <{tree.getroot().tag}>, expected <{ROOT_TAG}>")
        return tree
