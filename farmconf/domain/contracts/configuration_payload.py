"""Configuration payload contract."""

from abc import ABC, abstractmethod


class ConfigurationPayload(ABC):
    """Opaque settings applied to an instance's config file.

    The payload owns its file format. Propagation only asks it to write
    itself to a path.
    """

    @abstractmethod
    def write(self, path: str, overwrite: bool, apply_as_install: bool) -> None:
        """Write the payload to *path*.

        Args:
            path: Target config file.
            overwrite: Replace an existing file instead of failing.
            apply_as_install: Write the install-time subset of settings in
                addition to the regular ones.
        """
