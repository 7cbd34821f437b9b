"""Configuration propagation to the selected instances' config files.

Propagation is fail-fast: the first failed write stops the run and is
raised as :class:`PropagationError`. Files written before the failure are
left in place.
"""

from dataclasses import dataclass, field
import os
from typing import TYPE_CHECKING, List, Optional, Sequence

from ..domain.contracts.configuration_payload import ConfigurationPayload
from ..domain.events import ConfigFileWritten, PropagationFailed
from ..domain.exceptions import PropagationError
from ..domain.model.service_instance import ServiceInstance

if TYPE_CHECKING:
    from ..infrastructure.event_bus import EventBus

DEFAULT_CONFIG_FILENAME = "web.config"


def config_file_path(base_path: str, filename: str = DEFAULT_CONFIG_FILENAME, separator: str = os.sep) -> str:
    """Join *base_path* and *filename* without doubling the separator.

    Plain string joining keeps Windows paths intact when the farm is
    managed from a POSIX host (``separator="\\\\"``).
    """
    if base_path.endswith(separator):
        return f"{base_path}{filename}"
    return f"{base_path}{separator}{filename}"


@dataclass
class PropagationReport:
    """Paths written during a successful propagation, in selection order."""

    written: List[str] = field(default_factory=list)
    apply_as_install: bool = False

    @property
    def count(self) -> int:
        return len(self.written)


class ConfigPropagator:
    """Writes a configuration payload to each selected instance's config file."""

    def __init__(
        self,
        config_filename: str = DEFAULT_CONFIG_FILENAME,
        path_separator: str = os.sep,
        event_bus: Optional["EventBus"] = None,
    ):
        if not config_filename:
            raise ValueError("config_filename cannot be empty")
        if not path_separator:
            raise ValueError("path_separator cannot be empty")
        self._config_filename = config_filename
        self._path_separator = path_separator
        self._event_bus = event_bus

    def target_path(self, instance: ServiceInstance) -> str:
        return config_file_path(instance.base_path, self._config_filename, self._path_separator)

    def propagate(
        self,
        selected: Sequence[ServiceInstance],
        payload: ConfigurationPayload,
        apply_as_install: bool,
    ) -> PropagationReport:
        """Write *payload* to every selected instance, in order.

        Returns:
            PropagationReport listing the written paths.

        Raises:
            PropagationError: On the first failed write; remaining instances
                are not attempted and earlier writes are not rolled back.
        """
        report = PropagationReport(apply_as_install=apply_as_install)

        for attempted, instance in enumerate(selected, start=1):
            path = self.target_path(instance)
            try:
                payload.write(path, overwrite=True, apply_as_install=apply_as_install)
            except Exception as e:
                self._publish(
                    PropagationFailed(
                        instance_name=instance.display_name,
                        path=path,
                        attempted=attempted,
                        written_count=len(report.written),
                        error_message=str(e),
                    )
                )
                raise PropagationError(
                    instance_name=instance.display_name,
                    path=path,
                    attempted=attempted,
                    written=report.written,
                    reason=str(e),
                ) from e

            report.written.append(path)
            self._publish(
                ConfigFileWritten(
                    instance_name=instance.display_name,
                    path=path,
                    apply_as_install=apply_as_install,
                )
            )

        return report

    def _publish(self, event) -> None:
        if self._event_bus is not None:
            self._event_bus.publish(event)
