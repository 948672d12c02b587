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

"""Policy builder: folds typed directives into a mutable accumulator.

Scalar directives (``*-length``) follow last-wins semantics and remember the
line of the value that won. Every other directive accumulates. No invariant
is checked here; the validator inspects the finished accumulator once.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, cast

from mdchat_serverconf._internal.logging_utils import structured_extra
from mdchat_serverconf.core.constants import MESSAGE_LENGTH_CEILING, MIN_LENGTH_FLOOR, NICKNAME_LENGTH_CEILING
from mdchat_serverconf.core.model_types import DirectiveName, LogComponent

if TYPE_CHECKING:
    from collections.abc import Iterable

    from mdchat_serverconf.core.type_aliases import IPAddress
    from mdchat_serverconf.policy.models import PatternRule, SocketAddress

    from .parser import Directive

logger: logging.Logger = logging.getLogger("mdchat_serverconf.config")


@dataclass(slots=True, frozen=True)
class SourcedValue:
    """Scalar setting with the location it was configured at (``None`` for defaults)."""

    value: int
    source: str | None = None
    line: int | None = None


@dataclass(slots=True, frozen=True)
class PendingRange:
    """Banned range as written in the file; family and order are checked later."""

    start: IPAddress
    end: IPAddress
    source: str
    line: int


@dataclass(slots=True)
class PolicyAccumulator:
    """Mutable state owned by the builder while directives are folded."""

    listen: set[SocketAddress] = field(default_factory=set)
    banned_ips: set[IPAddress] = field(default_factory=set)
    allowed_ips: set[IPAddress] = field(default_factory=set)
    banned_ranges: list[PendingRange] = field(default_factory=list)
    nickname_patterns: list[PatternRule] = field(default_factory=list)
    nickname_allowed: set[str] = field(default_factory=set)
    nickname_min: SourcedValue = SourcedValue(MIN_LENGTH_FLOOR)
    nickname_max: SourcedValue = SourcedValue(NICKNAME_LENGTH_CEILING)
    message_patterns: list[PatternRule] = field(default_factory=list)
    message_min: SourcedValue = SourcedValue(MIN_LENGTH_FLOOR)
    message_max: SourcedValue = SourcedValue(MESSAGE_LENGTH_CEILING)
    sources: list[str] = field(default_factory=list)
    directive_count: int = 0


def _scalar(directive: Directive) -> SourcedValue:
    return SourcedValue(value=cast("int", directive.args[0]), source=directive.source, line=directive.line)


class PolicyBuilder:
    """Left-to-right fold of directives into a :class:`PolicyAccumulator`.

    Directives from several files can be folded into the same builder one
    after another; later scalars overwrite earlier ones and collections
    merge, matching a single concatenated file.
    """

    __slots__ = ("_accumulator",)

    def __init__(self) -> None:
        self._accumulator = PolicyAccumulator()

    @property
    def accumulator(self) -> PolicyAccumulator:
        """The accumulator the builder folds into."""
        return self._accumulator

    def apply(self, directive: Directive) -> None:
        """Fold a single directive into the accumulator."""
        acc = self._accumulator
        args = directive.args
        match directive.name:
            case DirectiveName.LISTEN:
                acc.listen.add(cast("SocketAddress", args[0]))
            case DirectiveName.IP_BAN:
                acc.banned_ips.add(cast("IPAddress", args[0]))
            case DirectiveName.IP_ALLOW:
                acc.allowed_ips.add(cast("IPAddress", args[0]))
            case DirectiveName.IP_BAN_RANGE:
                acc.banned_ranges.append(
                    PendingRange(
                        start=cast("IPAddress", args[0]),
                        end=cast("IPAddress", args[1]),
                        source=directive.source,
                        line=directive.line,
                    ),
                )
            case DirectiveName.NICKNAME_BAN:
                acc.nickname_patterns.append(cast("PatternRule", args[0]))
            case DirectiveName.NICKNAME_ALLOW:
                acc.nickname_allowed.add(cast("str", args[0]))
            case DirectiveName.NICKNAME_MAX_LENGTH:
                acc.nickname_max = _scalar(directive)
            case DirectiveName.NICKNAME_MIN_LENGTH:
                acc.nickname_min = _scalar(directive)
            case DirectiveName.MESSAGE_BAN:
                acc.message_patterns.append(cast("PatternRule", args[0]))
            case DirectiveName.MESSAGE_MAX_LENGTH:
                acc.message_max = _scalar(directive)
            case DirectiveName.MESSAGE_MIN_LENGTH:
                acc.message_min = _scalar(directive)
        if directive.source not in acc.sources:
            acc.sources.append(directive.source)
        acc.directive_count += 1

    def fold(self, directives: Iterable[Directive]) -> PolicyAccumulator:
        """Fold ``directives`` in order and return the accumulator.

        Args:
            directives: Typed directives, in file order.

        Returns:
            The builder's accumulator after every directive was applied.
        """
        before = self._accumulator.directive_count
        for directive in directives:
            self.apply(directive)
        logger.debug(
            "Folded %d directive(s)",
            self._accumulator.directive_count - before,
            extra=structured_extra(
                LogComponent.CONFIG,
                counts={"directives": self._accumulator.directive_count},
            ),
        )
        return self._accumulator


def fold_directives(directives: Iterable[Directive]) -> PolicyAccumulator:
    """Fold ``directives`` into a fresh accumulator."""
    return PolicyBuilder().fold(directives)


__all__ = [
    "PendingRange",
    "PolicyAccumulator",
    "PolicyBuilder",
    "SourcedValue",
    "fold_directives",
]
