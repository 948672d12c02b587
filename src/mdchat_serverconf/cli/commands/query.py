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

"""`mdchat-serverconf query`: evaluate the policy predicates for one value."""

from __future__ import annotations

import argparse
from typing import TYPE_CHECKING, Final

from mdchat_serverconf._internal.exceptions import ServerconfError
from mdchat_serverconf.cli.helpers import echo, register_argument, register_config_paths, report_error
from mdchat_serverconf.config.loader import load_policy

if TYPE_CHECKING:
    from collections.abc import Sequence

    from mdchat_serverconf.cli.types import SubparserCollection
    from mdchat_serverconf.policy.models import PolicyModel

ACCEPTED_EXIT_CODE: Final[int] = 0
REJECTED_EXIT_CODE: Final[int] = 2


def register_query_command(
    subparsers: SubparserCollection,
    *,
    parents: Sequence[argparse.ArgumentParser] | None = None,
) -> None:
    """Attach the `mdchat-serverconf query` command to the CLI.

    Args:
        subparsers: Top-level argparse subparser collection to register commands on.
        parents: Shared parent parsers carrying global options.
    """
    query = subparsers.add_parser(
        "query",
        help="Check whether an address, nickname or message would be refused",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
        parents=parents or [],
    )
    register_config_paths(query)
    target = query.add_mutually_exclusive_group(required=True)
    register_argument(target, "--ip", metavar="ADDR", help="Client IP address to test.")
    register_argument(target, "--nickname", metavar="NAME", help="Nickname to test.")
    register_argument(target, "--message", metavar="TEXT", help="Message body to test.")


def _evaluate(policy: PolicyModel, args: argparse.Namespace) -> tuple[str, bool]:
    if args.ip is not None:
        banned = policy.is_ip_banned(args.ip)
        return ("banned" if banned else "allowed"), banned
    if args.nickname is not None:
        rejected = policy.is_nickname_rejected(args.nickname)
    else:
        rejected = policy.is_message_rejected(args.message)
    return ("rejected" if rejected else "accepted"), rejected


def execute_query(args: argparse.Namespace) -> int:
    """Execute the `query` command.

    Returns:
        0 when the value is allowed or accepted, 2 when it is banned or
        rejected, 1 when the configuration or the queried address is invalid.
    """
    try:
        policy = load_policy(*args.paths)
        verdict, refused = _evaluate(policy, args)
    except ServerconfError as exc:
        return report_error(exc)
    echo(verdict)
    return REJECTED_EXIT_CODE if refused else ACCEPTED_EXIT_CODE


__all__ = ["ACCEPTED_EXIT_CODE", "REJECTED_EXIT_CODE", "execute_query", "register_query_command"]
