"""Command-line interface for testgate."""

import argparse
import json
import logging
import sys

from .common import ConfigError, PRODUCER
from .config import load_config
from .errors import config_error, invalid_argument, invalid_range, print_error
from .gates.version import decide_version, is_valid_version

logger = logging.getLogger(__name__)


def cmd_check(args: argparse.Namespace) -> int:
    """Handle the check command.

    Exit codes: 0 the test would run, 1 it would be skipped, 2 error.
    """
    if args.version:
        if not is_valid_version(args.version):
            print_error(
                invalid_argument("--version", args.version, "not a semantic version"),
                json_mode=args.json,
            )
            return 2
        version = args.version
    else:
        try:
            config = load_config(default_version=args.default_version)
        except ConfigError as e:
            print_error(config_error(str(e)), json_mode=args.json)
            return 2
        version = config.subject_version

    logger.debug("Checking %s against %s", version, args.range)
    try:
        decision = decide_version(version, args.range)
    except ValueError as e:
        print_error(invalid_range(args.range, str(e)), json_mode=args.json)
        return 2

    if args.json:
        info = decision.to_dict()
        info["subject_version"] = version
        info["range"] = args.range
        print(json.dumps(info, indent=2))
    else:
        status_icon = "[RUN]" if decision.runs else "[SKIP]"
        print(f"{status_icon} {version} against {args.range}")
        if decision.reason:
            print(f"   Reason: {decision.reason}")

    return 0 if decision.runs else 1


def cmd_flags(args: argparse.Namespace) -> int:
    """Handle the flags command."""
    try:
        config = load_config(default_version=args.default_version)
    except ConfigError as e:
        print_error(config_error(str(e)), json_mode=args.json)
        return 2

    if args.json:
        print(json.dumps(config.to_dict(), indent=2))
        return 0

    print(f"Subject version: {config.subject_version}")
    if not config.flags:
        print("No flags set.")
        return 0

    print(f"{'FLAG':<40} {'VALUE':<20}")
    print("-" * 60)
    for name in sorted(config.flags):
        print(f"{name:<40} {json.dumps(config.flags[name]):<20}")
    print(f"\nTotal: {len(config.flags)} flags")
    return 0


def main(argv: list[str] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="testgate",
        description="Inspect version and flag gates for conditional tests",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {PRODUCER['version']}"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # check command
    check_parser = subparsers.add_parser(
        "check", help="Check a version range against the subject version"
    )
    check_parser.add_argument("range", help="Version range, e.g. '>=17.0.0'")
    check_parser.add_argument(
        "--version", dest="version", help="Subject version to check (overrides all)"
    )
    check_parser.add_argument(
        "--default-version", help="Subject version when no override is set"
    )
    check_parser.add_argument("--json", action="store_true", help="Output as JSON")
    check_parser.set_defaults(func=cmd_check)

    # flags command
    flags_parser = subparsers.add_parser("flags", help="Show the resolved flag set")
    flags_parser.add_argument(
        "--default-version", help="Subject version when no override is set"
    )
    flags_parser.add_argument("--json", action="store_true", help="Output as JSON")
    flags_parser.set_defaults(func=cmd_flags)

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    if not args.command:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
