"""Orchestrator configuration core.

Resolves the effective configuration of an integration-test orchestrator
from overlapping sources and derives its working directories.

Usage:
    from sonarorchestrator import Configuration

    config = Configuration.create_env()
    version = config.get_sonar_version()
    installs = config.file_system().sonarqube_zips_dir()
"""

from .config import Configuration, ConfigurationBuilder, FileSystem, ProcessSources
from .errors import (
    ConfigurationLoadError,
    InvalidDirectoryError,
    MissingSettingError,
    OrchestratorConfigError,
)
from .version import Version

__version__ = "0.1.0"

__all__ = [
    "Configuration",
    "ConfigurationBuilder",
    "FileSystem",
    "ProcessSources",
    "Version",
    "OrchestratorConfigError",
    "ConfigurationLoadError",
    "MissingSettingError",
    "InvalidDirectoryError",
]
