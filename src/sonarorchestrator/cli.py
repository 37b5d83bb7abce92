"""Orchestrator configuration CLI.

Usage:
    sonar-orchestrator show                      # Resolved configuration as YAML
    sonar-orchestrator show --format json        # ... as JSON
    sonar-orchestrator get sonar.jdbc.dialect    # A single value
    sonar-orchestrator paths                     # Derived directories
    sonar-orchestrator shared it/pom.xml         # File in the shared IT sources

Common options:
    -D key=value        System property (repeatable)
    --no-env            Ignore environment variables
    --config-url URL    Properties file to load (orchestrator.configUrl)
"""

import argparse
import json
import logging
import sys
from typing import Optional, Sequence

import yaml

from .config import Configuration, ProcessSources
from .config.configuration import CONFIG_URL_PROPERTY
from .errors import OrchestratorConfigError


def _parse_definitions(definitions: Optional[Sequence[str]]) -> dict[str, str]:
    """Turn ``key=value`` strings into a dict. A bare key maps to ``""``."""
    props: dict[str, str] = {}
    for definition in definitions or []:
        key, _, value = definition.partition("=")
        key = key.strip()
        if not key:
            raise ValueError(f"Invalid property definition: {definition!r}")
        props[key] = value
    return props


def build_configuration(args: argparse.Namespace) -> Configuration:
    """Build the configuration described by the common CLI options."""
    sources = ProcessSources.current(_parse_definitions(args.define))
    builder = Configuration.builder(sources=sources)
    if args.env:
        builder.add_env_variables()
    builder.add_system_properties()
    if args.config_url:
        builder.set_property(CONFIG_URL_PROPERTY, args.config_url)
    return builder.build()


def cmd_show(args: argparse.Namespace) -> int:
    """Print the resolved configuration."""
    config = build_configuration(args)
    props = config.as_map()
    keys = args.key or sorted(props)
    data = {key: config.get_string(key) for key in keys}

    if args.format == "json":
        print(json.dumps(data, indent=2))
    else:
        print(yaml.safe_dump(data, default_flow_style=False, sort_keys=False), end="")
    return 0


def cmd_get(args: argparse.Namespace) -> int:
    """Print a single property value."""
    config = build_configuration(args)
    value = config.get_string(args.name, args.default)
    if value is None:
        print(f"Property '{args.name}' is not defined", file=sys.stderr)
        return 1
    print(value)
    return 0


def cmd_paths(args: argparse.Namespace) -> int:
    """Print the directories derived from the configuration."""
    config = build_configuration(args)
    dirs = config.file_system().as_dict()
    data = {name: (str(path) if path is not None else None) for name, path in dirs.items()}
    print(yaml.safe_dump(data, default_flow_style=False, sort_keys=False), end="")
    return 0


def cmd_shared(args: argparse.Namespace) -> int:
    """Print the location of a file in the shared IT sources."""
    config = build_configuration(args)
    print(config.get_file_location_of_shared(args.relative_path))
    return 0


def create_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("-D", dest="define", action="append", metavar="KEY=VALUE",
                        help="Define a system property (repeatable)")
    common.add_argument("--env", action=argparse.BooleanOptionalAction, default=True,
                        help="Include environment variables (default: yes)")
    common.add_argument("--config-url", type=str, default=None,
                        help="Properties file to load (http(s)://, file: or path)")
    common.add_argument("--log-level", type=str, default="warning",
                        choices=["debug", "info", "warning", "error"])

    parser = argparse.ArgumentParser(
        prog="sonar-orchestrator",
        description="Resolve the orchestrator configuration",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    show_parser = subparsers.add_parser("show", parents=[common],
                                        help="Print the resolved configuration")
    show_parser.add_argument("--format", choices=["yaml", "json"], default="yaml")
    show_parser.add_argument("--key", action="append", default=None,
                             help="Only print this key (repeatable)")

    get_parser = subparsers.add_parser("get", parents=[common], help="Print one property")
    get_parser.add_argument("name", type=str)
    get_parser.add_argument("--default", type=str, default=None)

    subparsers.add_parser("paths", parents=[common], help="Print derived directories")

    shared_parser = subparsers.add_parser("shared", parents=[common],
                                          help="Locate a file in the shared IT sources")
    shared_parser.add_argument("relative_path", type=str)

    return parser


COMMANDS = {
    "show": cmd_show,
    "get": cmd_get,
    "paths": cmd_paths,
    "shared": cmd_shared,
}


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    command = COMMANDS.get(args.command)
    if command is None:
        parser.print_help()
        sys.exit(1)

    # Log to stderr so stdout stays parseable
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    try:
        sys.exit(command(args))
    except (OrchestratorConfigError, ValueError) as e:
        print(f"❌ {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
