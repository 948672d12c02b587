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

"""`mdchat-serverconf directives`: list the configuration language."""

from __future__ import annotations

import argparse
import json
from typing import TYPE_CHECKING

from mdchat_serverconf.cli.helpers import echo, register_format_flag
from mdchat_serverconf.config.registry import iter_directive_specs
from mdchat_serverconf.core.model_types import DataFormat

if TYPE_CHECKING:
    from collections.abc import Sequence

    from mdchat_serverconf.cli.types import SubparserCollection

_HEADERS = ("directive", "arity", "arguments", "fold", "description")


def register_directives_command(
    subparsers: SubparserCollection,
    *,
    parents: Sequence[argparse.ArgumentParser] | None = None,
) -> None:
    """Attach the `mdchat-serverconf directives` command to the CLI."""
    directives = subparsers.add_parser(
        "directives",
        help="List every configuration directive",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
        parents=parents or [],
    )
    register_format_flag(directives)


def directive_rows() -> list[dict[str, str]]:
    """Return one row per registered directive, in declaration order."""
    rows: list[dict[str, str]] = []
    for spec in iter_directive_specs():
        low, high = spec.arity
        kinds = " ".join(kind.value for kind in spec.kinds)
        if spec.value_range is not None:
            kinds = f"{kinds} [{spec.value_range[0]}-{spec.value_range[1]}]"
        rows.append(
            {
                "directive": spec.name.value,
                "arity": str(low) if low == high else f"{low}-{high}",
                "arguments": kinds,
                "fold": spec.fold.value,
                "description": spec.summary,
            },
        )
    return rows


def render_table(rows: Sequence[dict[str, str]]) -> str:
    """Render ``rows`` as a left-aligned plain-text table."""
    widths = [max(len(header), *(len(row[header]) for row in rows)) for header in _HEADERS]
    lines = ["  ".join(header.ljust(width) for header, width in zip(_HEADERS, widths, strict=True)).rstrip()]
    lines.append("  ".join("-" * width for width in widths))
    lines.extend(
        "  ".join(row[header].ljust(width) for header, width in zip(_HEADERS, widths, strict=True)).rstrip()
        for row in rows
    )
    return "\n".join(lines)


def execute_directives(args: argparse.Namespace) -> int:
    """Execute the `directives` command."""
    rows = directive_rows()
    if DataFormat.from_str(args.format) is DataFormat.JSON:
        echo(json.dumps(rows, indent=2))
    else:
        echo(render_table(rows))
    return 0


__all__ = ["directive_rows", "execute_directives", "register_directives_command", "render_table"]
