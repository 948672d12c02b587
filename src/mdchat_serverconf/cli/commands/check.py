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

"""`mdchat-serverconf check`: load, validate and summarise a configuration."""

from __future__ import annotations

import argparse
import logging
from typing import TYPE_CHECKING

from mdchat_serverconf._internal.exceptions import ServerconfError
from mdchat_serverconf._internal.logging_utils import structured_extra
from mdchat_serverconf.cli.helpers import echo, register_config_paths, register_format_flag, report_error
from mdchat_serverconf.config.loader import load_policy_with_metadata
from mdchat_serverconf.core.model_types import DataFormat, LogComponent
from mdchat_serverconf.policy.summary import render_summary, summarise_policy

if TYPE_CHECKING:
    from collections.abc import Sequence

    from mdchat_serverconf.cli.types import SubparserCollection

logger: logging.Logger = logging.getLogger("mdchat_serverconf.cli")


def register_check_command(
    subparsers: SubparserCollection,
    *,
    parents: Sequence[argparse.ArgumentParser] | None = None,
) -> None:
    """Attach the `mdchat-serverconf check` command to the CLI.

    Args:
        subparsers: Top-level argparse subparser collection to register commands on.
        parents: Shared parent parsers carrying global options.
    """
    check = subparsers.add_parser(
        "check",
        help="Validate configuration files and print the effective policy",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
        parents=parents or [],
    )
    register_config_paths(check)
    register_format_flag(check)


def execute_check(args: argparse.Namespace) -> int:
    """Execute the `check` command.

    Returns:
        0 when the configuration is valid, 1 otherwise.
    """
    try:
        loaded = load_policy_with_metadata(*args.paths)
    except ServerconfError as exc:
        return report_error(exc)
    summary = summarise_policy(loaded.policy)
    echo(render_summary(summary, DataFormat.from_str(args.format)))
    logger.debug(
        "Configuration is valid",
        extra=structured_extra(
            LogComponent.CLI,
            path=", ".join(str(path) for path in loaded.paths),
            exit_code=0,
        ),
    )
    return 0


__all__ = ["execute_check", "register_check_command"]
