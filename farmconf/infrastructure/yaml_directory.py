"""Farm topology file backed service directories.

The topology file describes the farm's web applications in two sections,
mirroring the farm's administration and content services::

    management:
      - name: Central Administration
        description: SharePoint Central Administration v3
        base_path: C:\\inetpub\\wwwroot\\wss\\VirtualDirectories\\2000
        aliases: ["http://srv01.corp.local:2000"]
    content:
      - name: Intranet
        description: SharePoint - 80
        base_path: C:\\inetpub\\wwwroot\\wss\\VirtualDirectories\\80
        aliases: ["http://intranet.corp.local", "http://srv01"]

The file is re-read on every query; nothing is cached between discovery runs.
A malformed entry is reported as a failure of that entry alone.
"""

from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import yaml

from ..domain.contracts.service_directory import ServiceDirectory
from ..domain.exceptions import DirectoryError
from ..domain.model.service_instance import EndpointAlias, ServiceInstance
from ..logging_config import get_logger

logger = get_logger(__name__)

MANAGEMENT_SECTION = "management"
CONTENT_SECTION = "content"


class YamlFarmTopology:
    """Reads the topology file and hands out one directory per section."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def management_directory(self) -> "YamlServiceDirectory":
        return YamlServiceDirectory(self, MANAGEMENT_SECTION)

    def content_directory(self) -> "YamlServiceDirectory":
        return YamlServiceDirectory(self, CONTENT_SECTION)

    def load_section(self, section: str) -> List[Any]:
        """Return the raw entries of *section*.

        Raises:
            DirectoryError: The file is missing, unreadable or malformed.
        """
        if not self.path.exists():
            raise DirectoryError(section, f"Topology file not found: {self.path}", {"path": str(self.path)})

        try:
            with open(self.path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise DirectoryError(section, f"Cannot read topology file {self.path}: {e}") from e

        if not isinstance(data, Mapping):
            raise DirectoryError(section, f"Topology file {self.path} must contain a mapping")

        entries = data.get(section) or []
        if not isinstance(entries, list):
            raise DirectoryError(section, f"Section '{section}' must be a list of web applications")
        return entries


class YamlServiceDirectory(ServiceDirectory):
    """One section of a :class:`YamlFarmTopology`.

    Section-level problems (unreadable file, wrong shape) fail the whole
    query. A malformed entry only fails its own candidate: it is still
    listed, and :meth:`endpoint_aliases` raises the entry's
    :class:`DirectoryError` for it. Entries without a usable ``base_path``
    are listed under the label ``section[index]``.
    """

    def __init__(self, topology: YamlFarmTopology, section: str):
        self._topology = topology
        self._section = section
        self._rejected: Dict[str, DirectoryError] = {}
        self.name = section

    def list_instances(self) -> Sequence[ServiceInstance]:
        entries = self._topology.load_section(self._section)
        self._rejected = {}
        instances = [self._parse_entry(index, entry) for index, entry in enumerate(entries)]
        logger.debug(
            "topology_section_loaded",
            section=self._section,
            instances=len(instances),
            rejected=len(self._rejected),
        )
        return instances

    def endpoint_aliases(self, instance: ServiceInstance) -> Optional[Sequence[EndpointAlias]]:
        error = self._rejected.get(instance.base_path)
        if error is not None:
            raise error
        return instance.endpoint_aliases

    def _parse_entry(self, index: int, entry: Any) -> ServiceInstance:
        is_management = self._section == MANAGEMENT_SECTION

        if not isinstance(entry, Mapping):
            return self._reject(index, f"Entry #{index} in '{self._section}' is not a mapping")

        base_path = entry.get("base_path")
        if not base_path or not str(base_path).strip():
            return self._reject(index, f"Entry #{index} in '{self._section}' has no base_path")

        name = entry.get("name")
        instance = ServiceInstance(
            base_path=str(base_path),
            name=None if name is None else str(name),
            description=str(entry.get("description") or ""),
            is_management_instance=is_management,
            endpoint_aliases=None,
        )

        raw_aliases = entry.get("aliases")
        if raw_aliases is None:
            return instance
        if not isinstance(raw_aliases, list):
            self._rejected[instance.base_path] = DirectoryError(
                self._section,
                f"Entry #{index} in '{self._section}': aliases must be a list",
                {"base_path": instance.base_path},
            )
            return instance
        return replace(instance, endpoint_aliases=tuple(EndpointAlias.from_uri(str(uri)) for uri in raw_aliases))

    def _reject(self, index: int, message: str) -> ServiceInstance:
        label = f"{self._section}[{index}]"
        self._rejected[label] = DirectoryError(self._section, message, {"entry": index})
        return ServiceInstance(
            base_path=label,
            is_management_instance=self._section == MANAGEMENT_SECTION,
            endpoint_aliases=None,
        )
