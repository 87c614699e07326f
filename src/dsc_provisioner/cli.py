"""
Command-line interface for the DSC provisioner.

Loads a machine definition, finalizes every dsc provisioner and reports the
validation errors before a provisioning run is attempted.
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from .config import (
    get_log_path,
    get_provisioner_defaults,
    get_user_config_path,
    init_user_config,
    load_config,
)
from .constants import AppInfo
from .definition import load_definition
from .errors import DSCError
from .utils import setup_logging

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_CONFIG_ERROR = 2


def parse_args(config: dict, argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments with subcommands."""
    parser = argparse.ArgumentParser(
        prog=AppInfo.name,
        description="Check DSC provisioner settings of a machine definition",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {AppInfo.version}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    check_parser = subparsers.add_parser("check", help="Finalize and validate every dsc provisioner")
    check_parser.add_argument(
        "definition",
        nargs="?",
        default=config["DEFINITION_FILE"],
        help="Machine definition file (default: %(default)s)",
    )

    show_parser = subparsers.add_parser("show", help="Print the finalized dsc provisioner settings")
    show_parser.add_argument(
        "definition",
        nargs="?",
        default=config["DEFINITION_FILE"],
        help="Machine definition file (default: %(default)s)",
    )

    init_parser = subparsers.add_parser("init-config", help="Write the default settings file")
    init_parser.add_argument("--force", action="store_true", help="Overwrite an existing settings file")

    return parser.parse_args(argv)


def cmd_check(definition) -> int:
    """Print validation errors per provisioner, returns the exit code."""
    results = definition.validate_all()
    failed = False
    for label, errors in results.items():
        if errors:
            failed = True
            print(f"{label}: {len(errors)} error(s)")
            for error in errors:
                print(f"  - {error}")
        else:
            print(f"{label}: ok")

    if not results:
        print("No dsc provisioners found.")
    return EXIT_INVALID if failed else EXIT_OK


def cmd_show(definition) -> int:
    """Print the finalized settings as JSON, after validation computed guest paths."""
    definition.validate_all()
    data = {entry.label: entry.config.to_dict() for entry in definition.provisioners}
    print(json.dumps(data, indent=2, default=str))
    return EXIT_OK


def cmd_init_config(force: bool) -> int:
    """Write the default settings file unless one exists."""
    config_path = init_user_config(force=force)
    if config_path is None:
        print(f"Settings file already exists: {get_user_config_path()} (use --force to overwrite)")
        return EXIT_INVALID
    print(f"Wrote default settings to {config_path}")
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the dsc-provisioner command-line interface."""
    config = load_config()
    args = parse_args(config, argv)
    level = "DEBUG" if args.verbose else config.get("LOG_LEVEL", "INFO")
    setup_logging(level, get_log_path(config))

    if args.command == "init-config":
        return cmd_init_config(args.force)

    try:
        definition = load_definition(args.definition, base_defaults=get_provisioner_defaults(config))
    except DSCError as e:
        logging.error(f"{e.error_key}: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    if args.command == "show":
        return cmd_show(definition)
    return cmd_check(definition)


if __name__ == "__main__":
    sys.exit(main())
