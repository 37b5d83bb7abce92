"""Exception hierarchy for orchestrator configuration.

Exception Hierarchy:
    OrchestratorConfigError (base)
    ├── ConfigurationLoadError (properties file could not be fetched or parsed)
    ├── MissingSettingError (required setting absent at point of use)
    └── InvalidDirectoryError (configured directory does not exist)

Invalid integer values are reported with the builtin ``ValueError`` raised
by ``int()``; placeholders that cannot be resolved are not errors.

Usage:
    from sonarorchestrator.errors import ConfigurationLoadError

    try:
        config = Configuration.create_env()
    except ConfigurationLoadError as e:
        logger.error(f"Cannot load {e.url}: {e.__cause__}")
        raise
"""

from pathlib import Path
from typing import Sequence


class OrchestratorConfigError(RuntimeError):
    """Base class for all configuration errors."""


class ConfigurationLoadError(OrchestratorConfigError):
    """The configuration file could not be fetched or parsed.

    The underlying exception is chained as ``__cause__``.

    Attributes:
        url: The URL (after interpolation) that failed to load.
    """

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"Fail to load configuration file: {url}")


class MissingSettingError(OrchestratorConfigError):
    """None of the keys able to provide a required setting is defined.

    Attributes:
        keys: Property keys and environment variables that were searched.
    """

    def __init__(self, keys: Sequence[str]):
        self.keys = tuple(keys)
        names = " or ".join(f"'{k}'" for k in self.keys)
        super().__init__(f"Setting {names} is missing")


class InvalidDirectoryError(OrchestratorConfigError):
    """A configured directory does not exist or is not a directory.

    Attributes:
        path: The offending path.
        keys: Property keys and environment variables that can define it.
    """

    def __init__(self, path: Path, keys: Sequence[str], message: str | None = None):
        self.path = path
        self.keys = tuple(keys)
        if message is None:
            message = (
                f"Please check the definition of {' or '.join(self.keys)} "
                f"because the directory does not exist: {path}"
            )
        super().__init__(message)
