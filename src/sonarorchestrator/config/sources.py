"""Process-level property sources.

Environment variables and system properties are captured once into a
``ProcessSources`` snapshot and handed to the configuration builder, so
nothing downstream reads ``os.environ`` behind the caller's back.
"""

import getpass
import os
import platform
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional

USER_HOME_PROPERTY = "user.home"


def _frozen(mapping: Optional[Mapping[str, str]]) -> Mapping[str, str]:
    return MappingProxyType(dict(mapping or {}))


def default_system_properties() -> dict[str, str]:
    """Build the system properties of the running process.

    These mirror the handful of JVM properties that configuration files
    for the orchestrator customarily reference (``${user.home}`` etc.).
    """
    try:
        user_name = getpass.getuser()
    except (KeyError, OSError):
        # No passwd entry (e.g. arbitrary uid in a container)
        user_name = ""
    return {
        USER_HOME_PROPERTY: str(Path.home()),
        "user.dir": os.getcwd(),
        "user.name": user_name,
        "os.name": platform.system(),
        "file.separator": os.sep,
        "path.separator": os.pathsep,
        "line.separator": os.linesep,
    }


@dataclass(frozen=True)
class ProcessSources:
    """Snapshot of environment variables and system properties.

    Attributes:
        environ: Environment variables.
        system_properties: Process properties (``user.home``, ``-D`` options).
    """
    environ: Mapping[str, str] = field(default_factory=dict)
    system_properties: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "environ", _frozen(self.environ))
        object.__setattr__(self, "system_properties", _frozen(self.system_properties))

    @classmethod
    def current(cls, extra_properties: Optional[Mapping[str, str]] = None) -> "ProcessSources":
        """Snapshot the running process.

        Args:
            extra_properties: Additional system properties, overriding the
                defaults (typically ``-Dkey=value`` command-line options).
        """
        props = default_system_properties()
        if extra_properties:
            props.update({str(k): str(v) for k, v in extra_properties.items()})
        return cls(environ=dict(os.environ), system_properties=props)

    @classmethod
    def empty(cls) -> "ProcessSources":
        """No environment variables and no system properties."""
        return cls()

    def getenv(self, name: str) -> Optional[str]:
        return self.environ.get(name)

    def get_property(self, key: str) -> Optional[str]:
        return self.system_properties.get(key)

    def user_home(self) -> Path:
        """User home from the ``user.home`` property, else the OS default."""
        home = self.get_property(USER_HOME_PROPERTY)
        if home and home.strip():
            return Path(home)
        return Path.home()
