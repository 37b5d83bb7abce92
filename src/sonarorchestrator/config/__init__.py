"""Configuration system for the orchestrator.

Provides an immutable ``Configuration`` resolved from:
- Explicit properties
- Environment variables and system properties
- A properties file named by ``orchestrator.configUrl``
- Built-in defaults

and a ``FileSystem`` deriving the orchestrator's directories from it.
"""

from .configuration import Configuration, ConfigurationBuilder
from .filesystem import FileSystem, canonical, same_dir
from .interpolation import interpolate, interpolate_all
from .properties import load_properties, parse_properties
from .sources import ProcessSources

__all__ = [
    "Configuration",
    "ConfigurationBuilder",
    "FileSystem",
    "ProcessSources",
    "canonical",
    "same_dir",
    "interpolate",
    "interpolate_all",
    "load_properties",
    "parse_properties",
]
