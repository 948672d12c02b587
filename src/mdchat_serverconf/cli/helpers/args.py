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

# ignore JUSTIFIED: argument helpers mirror argparse signatures and allow passthrough
# typing without constraining caller kwargs
# ruff: noqa: ANN401

"""Argument parser helpers used across CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

from mdchat_serverconf.core.model_types import DataFormat

if TYPE_CHECKING:
    import argparse


class ArgumentRegistrar(Protocol):
    """Interface shared by ``argparse.ArgumentParser`` and argument groups."""

    def add_argument(
        self,
        *args: Any,
        **kwargs: Any,
    ) -> argparse.Action:
        """Expose ``ArgumentParser.add_argument`` so helpers can operate generically."""
        ...  # pragma: no cover


def register_argument(
    registrar: ArgumentRegistrar,
    *args: Any,
    **kwargs: Any,
) -> None:
    """Register an argument on a parser/argument group, discarding the action handle.

    Args:
        registrar: Parser or argument group on which to register the option.
        *args: Positional flags and option strings forwarded to ``add_argument``.
        **kwargs: Keyword options forwarded to ``add_argument``.
    """
    _ = registrar.add_argument(*args, **kwargs)


def register_config_paths(registrar: ArgumentRegistrar) -> None:
    """Register the optional positional configuration paths shared by commands."""
    register_argument(
        registrar,
        "paths",
        nargs="*",
        metavar="PATH",
        help=(
            "Configuration files folded in order. Defaults to $MDCHAT_SERVER_CONFIG or /etc/mdchat-server.conf."
        ),
    )


def register_format_flag(registrar: ArgumentRegistrar) -> None:
    """Register ``--format {text,json}`` for commands printing structured data."""
    register_argument(
        registrar,
        "--format",
        choices=[item.value for item in DataFormat],
        default=DataFormat.TEXT.value,
        help="Output format.",
    )


__all__ = ["ArgumentRegistrar", "register_argument", "register_config_paths", "register_format_flag"]
