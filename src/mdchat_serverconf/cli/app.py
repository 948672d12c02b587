# Copyright 2025 CrownOps Engineering
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""CLI entry point and orchestration for mdchat-serverconf commands."""

from __future__ import annotations

import argparse
import logging
import pathlib
from collections.abc import Callable, Sequence
from contextlib import suppress
from textwrap import dedent
from typing import TYPE_CHECKING, Final

from mdchat_serverconf import __version__
from mdchat_serverconf._internal.logging_utils import LOG_FORMATS, LOG_LEVELS, configure_logging, structured_extra
from mdchat_serverconf.cli.commands import check as check_command
from mdchat_serverconf.cli.commands import directives as directives_command
from mdchat_serverconf.cli.commands import query as query_command
from mdchat_serverconf.cli.helpers import echo as _echo
from mdchat_serverconf.cli.helpers import register_argument as _register_argument
from mdchat_serverconf.core.model_types import LogComponent, LogFormat

if TYPE_CHECKING:
    from mdchat_serverconf.cli.types import SubparserCollection

logger: logging.Logger = logging.getLogger("mdchat_serverconf.cli")

SERVERCONF_VERSION: Final[str] = __version__

CONFIG_TEMPLATE: Final[str] = dedent(
    """\
    # mdchat server configuration
    # Save this file as /etc/mdchat-server.conf or point MDCHAT_SERVER_CONFIG at it.
    # Directive names and arguments are separated by spaces; `#` starts a comment.

    # At least one listen address is required. IPv6 hosts go in brackets.
    listen 0.0.0.0:4000
    # listen [::]:4000

    # Refuse single addresses or inclusive ranges; `ip allow` overrides both.
    # ip ban 203.0.113.7
    # ip ban-range 192.168.1.0 192.168.1.255
    # ip allow 192.168.1.5

    # Nicknames: lengths are in UTF-8 bytes; patterns match anywhere (regex search).
    # nickname max-length 32
    # nickname min-length 3
    # nickname ban ^admin
    # nickname allow admin

    # Messages: `nolimit` lifts the maximum to the protocol ceiling.
    # message max-length nolimit
    # message min-length 1
    # message ban (?i)spam\\#1
    """,
)


def write_config_template(path: pathlib.Path, *, force: bool) -> int:
    """Write the starter configuration to a file.

    Args:
        path: Target path where the configuration file will be written.
        force: If True, overwrite the file if it already exists. If False, refuse to overwrite.

    Returns:
        int: Exit code (0 for success, 1 for failure).
    """
    if path.exists() and not force:
        _echo(f"[mdchat-serverconf] Refusing to overwrite existing file: {path}", err=True)
        _echo("Use --force if you want to replace it.", err=True)
        return 1
    path.parent.mkdir(parents=True, exist_ok=True)
    _ = path.write_text(CONFIG_TEMPLATE, encoding="utf-8")
    _echo(f"[mdchat-serverconf] Wrote starter config to {path}")
    return 0


CommandHandler = Callable[[argparse.Namespace], int]


def main(argv: Sequence[str] | None = None) -> int:
    """Main CLI entry point for the mdchat-serverconf command-line interface.

    Parses command-line arguments, configures logging, and dispatches to the appropriate
    command handler based on user input.

    Args:
        argv: Command-line arguments to parse. If None, uses sys.argv.

    Returns:
        int: Exit code from the executed command handler.
    """
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    if args.version:
        _echo(f"mdchat-serverconf {SERVERCONF_VERSION}")
        return 0
    if args.command is None:
        parser.error("No command provided.")
    _initialize_logging(args.log_format, args.log_level)
    handler = _command_handlers().get(args.command)
    if handler is None:
        parser.error(f"Unknown command {args.command}")
    logger.debug("Running `%s` command", args.command, extra=structured_extra(LogComponent.CLI))
    return handler(args)


def _build_parser() -> argparse.ArgumentParser:
    """Build the top-level parser with global options and every subcommand."""
    parser = argparse.ArgumentParser(
        prog="mdchat-serverconf",
        description="Validate and inspect mdchat server configuration files.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    _register_argument(
        parser,
        "--log-format",
        choices=LOG_FORMATS,
        default=None,
        help="Select logging output format (human-readable text or structured JSON).",
    )
    _register_argument(
        parser,
        "--log-level",
        choices=LOG_LEVELS,
        default=None,
        help="Set verbosity of logged events.",
    )
    _register_argument(
        parser,
        "--version",
        action="store_true",
        help="Print the mdchat-serverconf version and exit.",
    )
    subparsers = parser.add_subparsers(dest="command")
    check_command.register_check_command(subparsers)
    query_command.register_query_command(subparsers)
    directives_command.register_directives_command(subparsers)
    _register_init_command(subparsers)
    return parser


def _register_init_command(subparsers: SubparserCollection) -> None:
    init = subparsers.add_parser(
        "init",
        help="Generate a starter configuration file",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    _register_argument(
        init,
        "output",
        type=pathlib.Path,
        metavar="PATH",
        help="Destination for the generated configuration file.",
    )
    _register_argument(
        init,
        "--force",
        action="store_true",
        help="Overwrite the output file if it already exists.",
    )


def _initialize_logging(log_format: str | None, log_level: str | None) -> None:
    """Configure logging, falling back to environment defaults for unset options."""
    with suppress(ValueError):
        fmt = LogFormat.from_str(log_format) if log_format is not None else None
        _ = configure_logging(fmt, log_level=log_level)


def _command_handlers() -> dict[str, CommandHandler]:
    """Return a mapping of command names to their handler functions."""
    return {
        "check": check_command.execute_check,
        "directives": directives_command.execute_directives,
        "init": _execute_init,
        "query": query_command.execute_query,
    }


def _execute_init(args: argparse.Namespace) -> int:
    return write_config_template(args.output, force=args.force)


__all__ = ["CONFIG_TEMPLATE", "main", "write_config_template"]
