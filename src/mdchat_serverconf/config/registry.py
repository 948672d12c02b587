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

"""Static directive registry.

Each directive of the configuration language is described by a
:class:`DirectiveSpec`: its canonical name, the kind of every argument, the
numeric range accepted by integer arguments and how repeated occurrences are
folded into the policy.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Final

from mdchat_serverconf.core.constants import MESSAGE_LENGTH_CEILING, MIN_LENGTH_FLOOR, NICKNAME_LENGTH_CEILING
from mdchat_serverconf.core.model_types import ArgKind, DirectiveName, FoldBehavior

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from mdchat_serverconf.core.type_aliases import Token


@dataclass(slots=True, frozen=True)
class DirectiveSpec:
    """Signature of a single directive.

    Attributes:
        name: Canonical directive name.
        kinds: Expected kind of each positional argument.
        fold: Fold behavior applied by the policy builder.
        value_range: Inclusive range accepted by integer arguments, also the
            value ``nolimit`` maps to (the upper bound).
        summary: One-line description used by ``directives`` listings.
    """

    name: DirectiveName
    kinds: tuple[ArgKind, ...]
    fold: FoldBehavior
    summary: str
    value_range: tuple[int, int] | None = None

    @property
    def arity(self) -> tuple[int, int]:
        """Minimum and maximum argument count."""
        return len(self.kinds), len(self.kinds)


def _spec(
    name: DirectiveName,
    kinds: Sequence[ArgKind],
    fold: FoldBehavior,
    summary: str,
    value_range: tuple[int, int] | None = None,
) -> tuple[str, DirectiveSpec]:
    return name.value, DirectiveSpec(
        name=name,
        kinds=tuple(kinds),
        fold=fold,
        summary=summary,
        value_range=value_range,
    )


_NICKNAME_RANGE: Final[tuple[int, int]] = (MIN_LENGTH_FLOOR, NICKNAME_LENGTH_CEILING)
_MESSAGE_RANGE: Final[tuple[int, int]] = (MIN_LENGTH_FLOOR, MESSAGE_LENGTH_CEILING)

DIRECTIVE_REGISTRY: Final[Mapping[str, DirectiveSpec]] = MappingProxyType(
    dict(
        (
            _spec(
                DirectiveName.LISTEN,
                [ArgKind.SOCKET_ADDRESS],
                FoldBehavior.ACCUMULATE,
                "accept connections on a socket address",
            ),
            _spec(
                DirectiveName.IP_BAN,
                [ArgKind.IP_ADDRESS],
                FoldBehavior.ACCUMULATE,
                "reject connections from a single address",
            ),
            _spec(
                DirectiveName.IP_ALLOW,
                [ArgKind.IP_ADDRESS],
                FoldBehavior.ACCUMULATE,
                "always accept an address, overriding bans",
            ),
            _spec(
                DirectiveName.IP_BAN_RANGE,
                [ArgKind.IP_ADDRESS, ArgKind.IP_ADDRESS],
                FoldBehavior.ACCUMULATE,
                "reject an inclusive address range",
            ),
            _spec(
                DirectiveName.NICKNAME_BAN,
                [ArgKind.REGEX],
                FoldBehavior.ACCUMULATE,
                "reject nicknames matching a pattern",
            ),
            _spec(
                DirectiveName.NICKNAME_ALLOW,
                [ArgKind.STRING],
                FoldBehavior.ACCUMULATE,
                "always accept an exact nickname",
            ),
            _spec(
                DirectiveName.NICKNAME_MAX_LENGTH,
                [ArgKind.INTEGER_OR_NOLIMIT],
                FoldBehavior.LAST_WINS,
                "longest accepted nickname in bytes",
                _NICKNAME_RANGE,
            ),
            _spec(
                DirectiveName.NICKNAME_MIN_LENGTH,
                [ArgKind.INTEGER],
                FoldBehavior.LAST_WINS,
                "shortest accepted nickname in bytes",
                _NICKNAME_RANGE,
            ),
            _spec(
                DirectiveName.MESSAGE_BAN,
                [ArgKind.REGEX],
                FoldBehavior.ACCUMULATE,
                "reject messages matching a pattern",
            ),
            _spec(
                DirectiveName.MESSAGE_MAX_LENGTH,
                [ArgKind.INTEGER_OR_NOLIMIT],
                FoldBehavior.LAST_WINS,
                "longest accepted message in bytes",
                _MESSAGE_RANGE,
            ),
            _spec(
                DirectiveName.MESSAGE_MIN_LENGTH,
                [ArgKind.INTEGER],
                FoldBehavior.LAST_WINS,
                "shortest accepted message in bytes",
                _MESSAGE_RANGE,
            ),
        ),
    ),
)

MAX_NAME_WORDS: Final[int] = max(spec.name.word_count for spec in DIRECTIVE_REGISTRY.values())


def resolve_directive(tokens: Sequence[Token]) -> tuple[DirectiveSpec, int] | None:
    """Resolve the directive named by the leading tokens of a line.

    The longest registered name wins, so ``ip ban-range`` is never mistaken
    for a shorter directive.

    Args:
        tokens: Tokens of one directive line.

    Returns:
        The matching spec and the number of tokens forming its name, or
        ``None`` when no registered name matches.
    """
    for width in range(min(MAX_NAME_WORDS, len(tokens)), 0, -1):
        spec = DIRECTIVE_REGISTRY.get(" ".join(tokens[:width]))
        if spec is not None:
            return spec, width
    return None


def iter_directive_specs() -> tuple[DirectiveSpec, ...]:
    """Return every registered directive in declaration order."""
    return tuple(DIRECTIVE_REGISTRY.values())


__all__ = [
    "DIRECTIVE_REGISTRY",
    "MAX_NAME_WORDS",
    "DirectiveSpec",
    "iter_directive_specs",
    "resolve_directive",
]
