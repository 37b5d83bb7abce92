"""Effective orchestrator configuration.

A ``Configuration`` is assembled by a ``ConfigurationBuilder`` from
several sources and is immutable once built.

Precedence (highest to lowest):
1. Explicit values (``set_property``, ``add_properties``, ``add_configuration``)
2. Environment variables and system properties (``add_env_variables``,
   ``add_system_properties``)
3. Values of the properties file named by ``orchestrator.configUrl`` or
   ``ORCHESTRATOR_CONFIG_URL``
4. Hardcoded defaults, used only when no properties file is configured

Sources of tiers 1 and 2 overwrite each other in call order. Tiers 3 and 4
only fill keys that are still missing. Placeholders such as
``${user.home}`` are then substituted in a single pass.

Usage:
    config = (
        Configuration.builder()
        .add_env_variables()
        .add_system_properties()
        .set_property("sonar.runtimeVersion", "LATEST_RELEASE")
        .build()
    )
    dialect = config.get_string("sonar.jdbc.dialect")
    zips = config.file_system().sonarqube_zips_dir()
"""

from __future__ import annotations

import logging
import os
import re
import threading
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional

import httpx

from ..errors import ConfigurationLoadError, InvalidDirectoryError, MissingSettingError
from ..version import Version
from .filesystem import FileSystem, canonical
from .interpolation import interpolate, interpolate_all
from .properties import DEFAULT_TIMEOUT_SECONDS, load_properties
from .sources import ProcessSources

logger = logging.getLogger(__name__)

SONAR_VERSION_PROPERTY = "sonar.runtimeVersion"
JDBC_DIALECT_PROPERTY = "sonar.jdbc.dialect"
CONFIG_URL_PROPERTY = "orchestrator.configUrl"
CONFIG_URL_ENV = "ORCHESTRATOR_CONFIG_URL"
UPDATE_CENTER_URL_PROPERTY = "orchestrator.updateCenterUrl"
MAVEN_LOCAL_REPOSITORY_PROPERTY = "maven.localRepository"
MAVEN_LOCAL_REPOSITORY_ENV = "SONAR_MAVEN_REPOSITORY"
SHARED_DIR_PROPERTY = "orchestrator.it_sources"
SHARED_DIR_ENV = "SONAR_IT_SOURCES"

DEFAULT_JDBC_DIALECT = "embedded"
DEFAULT_UPDATE_CENTER_URL = "http://update.sonarsource.org/update-center-dev.properties"

_INTEGER_PATTERN = re.compile(r"^[+-]?[0-9]+$")
INT_MIN = -(2 ** 31)
INT_MAX = 2 ** 31 - 1


def _is_blank(value: Optional[str]) -> bool:
    return value is None or value.strip() == ""


def _is_defined(value: Optional[str]) -> bool:
    return value is not None


class Configuration:
    """Immutable, queryable set of resolved properties.

    Instances are created with ``Configuration.builder()`` or one of the
    ``create*`` factories. Reads are safe from any thread.
    """

    def __init__(
        self,
        props: Mapping[str, str],
        sources: Optional[ProcessSources] = None,
        update_center: Any = None,
    ):
        self._props: Mapping[str, str] = MappingProxyType(dict(props))
        self._sources = sources if sources is not None else ProcessSources.empty()
        self._update_center = update_center
        self._file_system: Optional[FileSystem] = None
        self._file_system_lock = threading.Lock()

    # Factories

    @staticmethod
    def builder(
        sources: Optional[ProcessSources] = None,
        http_client: Optional[httpx.Client] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> ConfigurationBuilder:
        return ConfigurationBuilder(sources=sources, http_client=http_client, timeout=timeout)

    @classmethod
    def create(
        cls,
        properties: Optional[Mapping[Any, Any]] = None,
        sources: Optional[ProcessSources] = None,
    ) -> Configuration:
        """Build from ``properties`` only (plus file or defaults)."""
        builder = cls.builder(sources=sources)
        if properties:
            builder.add_properties(properties)
        return builder.build()

    @classmethod
    def create_env(cls, sources: Optional[ProcessSources] = None) -> Configuration:
        """Build from environment variables then system properties."""
        return cls.builder(sources=sources).add_env_variables().add_system_properties().build()

    # Collaborators

    @property
    def sources(self) -> ProcessSources:
        """Process sources this configuration was built from."""
        return self._sources

    @property
    def update_center(self) -> Any:
        return self._update_center

    def file_system(self) -> FileSystem:
        """The directory resolver bound to this configuration."""
        with self._file_system_lock:
            if self._file_system is None:
                self._file_system = FileSystem(self)
            return self._file_system

    def get_sonar_version(self) -> Version:
        return Version.create(self._props.get(SONAR_VERSION_PROPERTY))

    def get_plugin_version(self, plugin_key: str) -> Version:
        return Version.create(self._props.get(f"{plugin_key}Version"))

    def get_file_location_of_shared(self, relative_path: str | os.PathLike) -> Path:
        """File in the shared integration-test sources directory.

        The root is read from the system property ``orchestrator.it_sources``,
        then from the configuration property of the same name, then from the
        environment variable ``SONAR_IT_SOURCES``.

        Example:
            config.get_file_location_of_shared("javascript/performancing/pom.xml")

        Raises:
            MissingSettingError: No root is defined.
            InvalidDirectoryError: The root is not an existing directory.
        """
        root = self._sources.get_property(SHARED_DIR_PROPERTY)
        if root is None:
            root = self._props.get(SHARED_DIR_PROPERTY)
        if root is None:
            root = self._sources.getenv(SHARED_DIR_ENV)
        if root is None:
            raise MissingSettingError([SHARED_DIR_PROPERTY, SHARED_DIR_ENV])

        root_dir = Path(root)
        if not root_dir.is_dir():
            raise InvalidDirectoryError(
                root_dir,
                [SHARED_DIR_PROPERTY, SHARED_DIR_ENV],
                message=(
                    f"Please check the definition of it_sources ({SHARED_DIR_PROPERTY} "
                    f"or {SHARED_DIR_ENV}) because the directory does not exist: {root_dir}"
                ),
            )
        return root_dir / relative_path

    # Accessors

    def get_string(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Value of ``key``.

        The legacy dialect ``embedded`` is reported as ``h2``.

        Args:
            key: Property key.
            default: Returned when the value is absent or blank.
        """
        value = self._props.get(key)
        if key == JDBC_DIALECT_PROPERTY and value is not None and value.lower() == "embedded":
            return "h2"
        if default is not None and _is_blank(value):
            return default
        return value

    def get_string_by_keys(
        self,
        *keys: str,
        validator: Optional[Callable[[Optional[str]], bool]] = None,
    ) -> Optional[str]:
        """First value among ``keys`` accepted by ``validator``.

        Args:
            keys: Keys to try, in order.
            validator: Predicate on the value. Defaults to "is defined".

        Returns:
            The first accepted value, or None.
        """
        if validator is None:
            validator = _is_defined
        for key in keys:
            value = self.get_string(key)
            if validator(value):
                return value
        return None

    def get_int(self, key: str, default: int) -> int:
        """Integer value of ``key``, or ``default`` if absent or blank.

        Raises:
            ValueError: The value is not a base-10 integer
                in the signed 32-bit range.
        """
        value = self._props.get(key)
        if _is_blank(value):
            return default
        if not _INTEGER_PATTERN.match(value):
            raise ValueError(f"Property '{key}' is not an integer: {value!r}")
        number = int(value)
        if not INT_MIN <= number <= INT_MAX:
            raise ValueError(f"Property '{key}' is out of integer range: {value!r}")
        return number

    def as_map(self) -> Mapping[str, str]:
        """Read-only view of all properties."""
        return self._props

    def __contains__(self, key: object) -> bool:
        return key in self._props

    def __len__(self) -> int:
        return len(self._props)

    def __repr__(self) -> str:
        return f"Configuration({len(self._props)} properties)"


class ConfigurationBuilder:
    """Mutable assembly of a ``Configuration``.

    Args:
        sources: Environment and system properties to draw from.
            Defaults to a snapshot of the running process.
        http_client: Client used to download a remote properties file.
        timeout: Download timeout when no client is given.
    """

    def __init__(
        self,
        sources: Optional[ProcessSources] = None,
        http_client: Optional[httpx.Client] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        self._sources = sources if sources is not None else ProcessSources.current()
        self._http_client = http_client
        self._timeout = timeout
        # None marks a key explicitly unset
        self._props: dict[str, Optional[str]] = {}
        self._update_center: Any = None

    @property
    def sources(self) -> ProcessSources:
        return self._sources

    def add_configuration(self, other: Configuration) -> ConfigurationBuilder:
        return self.add_map(other.as_map())

    def add_env_variables(self) -> ConfigurationBuilder:
        self._props.update(self._sources.environ)
        return self

    def add_system_properties(self) -> ConfigurationBuilder:
        return self.add_map(self._sources.system_properties)

    def add_properties(self, properties: Mapping[Any, Any]) -> ConfigurationBuilder:
        """Merge ``properties``, converting keys and values to strings.

        None values leave the key explicitly undefined, as with ``set_property``.
        """
        for key, value in properties.items():
            self._props[str(key)] = None if value is None else str(value)
        return self

    def add_map(self, mapping: Mapping[Any, Any]) -> ConfigurationBuilder:
        return self.add_properties(mapping)

    def set_property(
        self, key: str, value: Optional[str | os.PathLike]
    ) -> ConfigurationBuilder:
        """Set a single property.

        Args:
            key: Property key.
            value: String value, a path (stored in canonical form), or None
                to leave the key explicitly undefined.
        """
        if value is None:
            self._props[key] = None
        elif isinstance(value, os.PathLike):
            self._props[key] = str(canonical(value))
        else:
            self._props[key] = str(value)
        return self

    def set_update_center(self, update_center: Any) -> ConfigurationBuilder:
        self._update_center = update_center
        return self

    def _config_url(self, props: Mapping[str, Optional[str]]) -> Optional[str]:
        url = props.get(CONFIG_URL_PROPERTY)
        if _is_blank(url):
            url = props.get(CONFIG_URL_ENV)
        return None if _is_blank(url) else url

    def _set_default(self, props: dict[str, Optional[str]], key: str, value: str) -> None:
        if _is_blank(props.get(key)):
            logger.warning(f"Using default value for orchestrator.properties: {key}={value}")
            props[key] = value

    def _seed_defaults(self, props: dict[str, Optional[str]]) -> None:
        self._set_default(props, JDBC_DIALECT_PROPERTY, DEFAULT_JDBC_DIALECT)
        self._set_default(props, UPDATE_CENTER_URL_PROPERTY, DEFAULT_UPDATE_CENTER_URL)
        repository = self._sources.getenv(MAVEN_LOCAL_REPOSITORY_ENV)
        if repository is None:
            repository = self._sources.get_property(MAVEN_LOCAL_REPOSITORY_PROPERTY)
            if _is_blank(repository):
                repository = f"{self._sources.user_home()}/.m2/repository"
        self._set_default(props, MAVEN_LOCAL_REPOSITORY_PROPERTY, repository)

    def _load_properties_file(self, props: dict[str, Optional[str]], url: str) -> None:
        url = interpolate(url, props)
        try:
            file_props = load_properties(url, client=self._http_client, timeout=self._timeout)
        except (httpx.HTTPError, httpx.InvalidURL, OSError, ValueError) as e:
            raise ConfigurationLoadError(url) from e

        added = 0
        for key, value in file_props.items():
            if key not in props:
                props[key] = value
                added += 1
        logger.info(f"Loaded configuration file {url} ({added} of {len(file_props)} properties used)")

    def build(self) -> Configuration:
        """Load the properties file or defaults, interpolate, and freeze.

        Raises:
            ConfigurationLoadError: The configured properties file could not
                be fetched or parsed.
        """
        props = dict(self._props)
        url = self._config_url(props)
        if url is None:
            self._seed_defaults(props)
        else:
            self._load_properties_file(props, url)

        resolved = interpolate_all(props)
        return Configuration(
            {key: value for key, value in resolved.items() if value is not None},
            sources=self._sources,
            update_center=self._update_center,
        )
