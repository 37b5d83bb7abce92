"""Directories derived from a Configuration.

Each directory is looked up under a configuration key, then under the
name of the environment variable conventionally used for it, then falls
back to a computed default. Returned paths are canonical so they can be
compared with ``same_dir``.
"""

from __future__ import annotations

import os
import threading
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Optional

if TYPE_CHECKING:
    from .configuration import Configuration

JAVA_HOME_KEYS = ("java.home", "JAVA_HOME")
ANT_HOME_KEYS = ("ant.home", "ANT_HOME")
MAVEN_HOME_KEYS = ("maven.home", "MAVEN_HOME", "M2_HOME")
MAVEN_LOCAL_REPOSITORY_KEYS = ("maven.localRepository", "SONAR_MAVEN_REPOSITORY")
WORKSPACE_KEYS = ("orchestrator.workspaceDir",)
ORCHESTRATOR_HOME_KEYS = ("SONAR_USER_HOME",)

DEFAULT_WORKSPACE = "target"
INSTALLS_DIR_NAME = "installs"


def canonical(path: str | os.PathLike) -> Path:
    """Absolute, normalized form of ``path`` with ``~`` and symlinks resolved."""
    return Path(path).expanduser().resolve()


def same_dir(a: Optional[str | os.PathLike], b: Optional[str | os.PathLike]) -> bool:
    """Whether two paths denote the same directory once canonicalized."""
    if a is None or b is None:
        return a is None and b is None
    return canonical(a) == canonical(b)


def _is_set(value: Optional[str]) -> bool:
    return value is not None and value.strip() != ""


class FileSystem:
    """Resolves the orchestrator's well-known directories.

    Usage:
        fs = config.file_system()
        zips = fs.sonarqube_zips_dir()
        if fs.java_home() is None:
            ...

    Paths are resolved on first access and cached. The cache is guarded
    by a lock so a shared instance is safe to read from several threads.
    """

    def __init__(self, config: Configuration):
        self._config = config
        self._cache: dict[str, Optional[Path]] = {}
        self._lock = threading.RLock()

    def _cached(self, name: str, resolver: Callable[[], Optional[Path]]) -> Optional[Path]:
        with self._lock:
            if name not in self._cache:
                self._cache[name] = resolver()
            return self._cache[name]

    def _lookup(self, keys: tuple[str, ...]) -> Optional[str]:
        return self._config.get_string_by_keys(*keys, validator=_is_set)

    def _optional_dir(self, keys: tuple[str, ...]) -> Optional[Path]:
        value = self._lookup(keys)
        return canonical(value) if value is not None else None

    def _user_home(self) -> Path:
        return self._config.sources.user_home()

    def java_home(self) -> Optional[Path]:
        """JDK directory, or ``None`` when not configured."""
        return self._cached("java_home", lambda: self._optional_dir(JAVA_HOME_KEYS))

    def ant_home(self) -> Optional[Path]:
        """Ant installation, or ``None`` when not configured."""
        return self._cached("ant_home", lambda: self._optional_dir(ANT_HOME_KEYS))

    def maven_home(self) -> Optional[Path]:
        """Maven installation, or ``None`` when not configured."""
        return self._cached("maven_home", lambda: self._optional_dir(MAVEN_HOME_KEYS))

    def maven_local_repository(self) -> Path:
        """Local Maven repository, ``~/.m2/repository`` by default."""
        def resolve() -> Path:
            value = self._lookup(MAVEN_LOCAL_REPOSITORY_KEYS)
            if value is None:
                return canonical(self._user_home() / ".m2" / "repository")
            return canonical(value)
        return self._cached("maven_local_repository", resolve)

    def workspace(self) -> Path:
        """Working directory for test runs, ``./target`` by default."""
        def resolve() -> Path:
            return canonical(self._lookup(WORKSPACE_KEYS) or DEFAULT_WORKSPACE)
        return self._cached("workspace", resolve)

    def orchestrator_home(self) -> Path:
        """Home of the orchestrator (``SONAR_USER_HOME``), ``~/.sonar`` by default."""
        def resolve() -> Path:
            value = self._lookup(ORCHESTRATOR_HOME_KEYS)
            if value is None:
                return canonical(self._user_home() / ".sonar")
            return canonical(value)
        return self._cached("orchestrator_home", resolve)

    def sonarqube_zips_dir(self) -> Path:
        """Cache of downloaded distributions, always ``<orchestrator_home>/installs``."""
        return self._cached(
            "sonarqube_zips_dir",
            lambda: self.orchestrator_home() / INSTALLS_DIR_NAME,
        )

    def as_dict(self) -> dict[str, Optional[Path]]:
        """All directories by accessor name."""
        return {
            "java_home": self.java_home(),
            "ant_home": self.ant_home(),
            "maven_home": self.maven_home(),
            "maven_local_repository": self.maven_local_repository(),
            "workspace": self.workspace(),
            "orchestrator_home": self.orchestrator_home(),
            "sonarqube_zips_dir": self.sonarqube_zips_dir(),
        }
