#!/usr/bin/env python3
"""
layered-config command line tool

Loads a base config file plus its profile overlay and prints the merged
store.

Exit Codes:
  0      Success
  1      Load failure or unknown action

Examples:
  # Show config.yaml (+ config-$APP_ENV.yaml) as JSON
  layered-config -action show -conf config.yaml

  # Show .env (+ .env.$STAGE) as YAML
  layered-config -env STAGE -conf .env -format yaml
"""

import argparse
import logging
import sys
from typing import List, Optional

from pydantic import ValidationError

from .errors import ConfigError
from .loader import ConfigLoader
from .logging_config import LOGGER_NAME, StdlibConfigLogger, configure_logging
from .settings import ToolSettings

logger = logging.getLogger(LOGGER_NAME)

EXIT_SUCCESS = 0
EXIT_FAILURE = 1

ACTIONS = ("show",)


def create_argument_parser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        prog="layered-config",
        description="Inspect layered configuration (base file + profile overlay)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exit Codes:
  0      Success
  1      Load failure or unknown action

Environment:
  LAYERED_CONFIG_LOG_LEVEL   DEBUG|INFO|WARNING|ERROR|CRITICAL (default: WARNING)
  LAYERED_CONFIG_LOG_FORMAT  json|text (default: text)
  LAYERED_CONFIG_LOG_FILE    optional log file
"""
    )

    parser.add_argument(
        "-action", "--action",
        default="show",
        help="Action to run: show (default: show)"
    )

    parser.add_argument(
        "-env", "--env",
        default="APP_ENV",
        help="Environment variable selecting the profile (default: APP_ENV)"
    )

    parser.add_argument(
        "-conf", "--conf",
        default="config.yaml",
        help="Base config file, yaml/json/.env (default: config.yaml)"
    )

    parser.add_argument(
        "-format", "--format",
        choices=["json", "yaml"],
        default="json",
        help="Output format for show (default: json)"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output"
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    try:
        settings = ToolSettings.from_environ()
    except ValidationError as e:
        print(f"invalid LAYERED_CONFIG_* settings: {e}", file=sys.stderr)
        return EXIT_FAILURE

    configure_logging(
        level="DEBUG" if args.verbose else settings.log_level,
        format=settings.log_format,
        log_file=settings.log_file,
    )

    if args.action not in ACTIONS:
        logger.error(f"unknown action: {args.action}")
        return EXIT_FAILURE

    loader = ConfigLoader(logger=StdlibConfigLogger())
    try:
        loader.load_with_profile(args.env, args.conf)
    except (ConfigError, OSError) as e:
        logger.error(f"failed to load {args.conf}: {e}")
        return EXIT_FAILURE

    data = loader.to_yaml() if args.format == "yaml" else loader.to_json()
    sys.stdout.write(data.decode("utf-8"))
    if not data.endswith(b"\n"):
        sys.stdout.write("\n")
    return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
