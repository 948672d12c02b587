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

"""Cross-field validation of a folded configuration.

The validator runs once, after every directive has been folded, and reports
all violations it finds in a single :class:`PolicyValidationError`. A
configuration that passes is frozen into a :class:`PolicyModel`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from mdchat_serverconf._internal.logging_utils import structured_extra
from mdchat_serverconf.core.constants import MESSAGE_LENGTH_CEILING, MIN_LENGTH_FLOOR, NICKNAME_LENGTH_CEILING
from mdchat_serverconf.core.model_types import DirectiveName, LogComponent, ViolationKind
from mdchat_serverconf.policy.models import (
    AddressRange,
    IpPolicy,
    LengthBounds,
    MessagePolicy,
    NicknamePolicy,
    PolicyModel,
)

from .errors import PolicyValidationError, PolicyViolation

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .builder import PendingRange, PolicyAccumulator, SourcedValue

logger: logging.Logger = logging.getLogger("mdchat_serverconf.config")


def _position(setting: SourcedValue, sources: Sequence[str]) -> tuple[int, int]:
    if setting.source is None or setting.line is None:
        return (-1, 0)
    rank = sources.index(setting.source) if setting.source in sources else len(sources)
    return (rank, setting.line)


def _describe(name: DirectiveName, setting: SourcedValue) -> str:
    if setting.line is None:
        return f"{name.value} ({setting.value}, default)"
    return f"{name.value} ({setting.value}, line {setting.line})"


def _bounds_violations(
    minimum: SourcedValue,
    maximum: SourcedValue,
    *,
    min_name: DirectiveName,
    max_name: DirectiveName,
    ceiling: int,
    sources: Sequence[str],
) -> list[PolicyViolation]:
    violations: list[PolicyViolation] = []
    if minimum.value < MIN_LENGTH_FLOOR:
        violations.append(
            PolicyViolation(
                kind=ViolationKind.LENGTH_BOUNDS,
                message=f"{min_name.value} must be at least {MIN_LENGTH_FLOOR}, got {minimum.value}",
                source=minimum.source,
                line=minimum.line,
            ),
        )
    if maximum.value > ceiling:
        violations.append(
            PolicyViolation(
                kind=ViolationKind.LENGTH_BOUNDS,
                message=f"{max_name.value} must be at most {ceiling}, got {maximum.value}",
                source=maximum.source,
                line=maximum.line,
            ),
        )
    if minimum.value > maximum.value:
        # Point at whichever of the two settings was loaded last.
        anchor = minimum if _position(minimum, sources) >= _position(maximum, sources) else maximum
        violations.append(
            PolicyViolation(
                kind=ViolationKind.LENGTH_BOUNDS,
                message=(
                    f"{_describe(min_name, minimum)} is greater than "
                    f"{_describe(max_name, maximum)}"
                ),
                source=anchor.source,
                line=anchor.line,
            ),
        )
    return violations


def _range_violation(pending: PendingRange) -> PolicyViolation | None:
    start, end = pending.start, pending.end
    if start.version != end.version:
        return PolicyViolation(
            kind=ViolationKind.RANGE_FAMILY,
            message=(
                f"{DirectiveName.IP_BAN_RANGE.value} bounds must share an address family: "
                f"{start} is IPv{start.version}, {end} is IPv{end.version}"
            ),
            source=pending.source,
            line=pending.line,
        )
    if int(start) > int(end):
        return PolicyViolation(
            kind=ViolationKind.RANGE_ORDER,
            message=f"{DirectiveName.IP_BAN_RANGE.value} start {start} is greater than end {end}",
            source=pending.source,
            line=pending.line,
        )
    return None


def collect_violations(accumulator: PolicyAccumulator) -> list[PolicyViolation]:
    """Return every cross-field violation of ``accumulator`` in a stable order.

    Args:
        accumulator: State produced by folding every directive.

    Returns:
        Violations ordered as listen, nickname bounds, message bounds, then
        banned ranges in file order. Empty when the configuration is valid.
    """
    violations: list[PolicyViolation] = []
    if not accumulator.listen:
        sources = ", ".join(accumulator.sources) if accumulator.sources else None
        violations.append(
            PolicyViolation(
                kind=ViolationKind.EMPTY_LISTEN,
                message="no listen address configured",
                source=sources,
            ),
        )
    violations.extend(
        _bounds_violations(
            accumulator.nickname_min,
            accumulator.nickname_max,
            min_name=DirectiveName.NICKNAME_MIN_LENGTH,
            max_name=DirectiveName.NICKNAME_MAX_LENGTH,
            ceiling=NICKNAME_LENGTH_CEILING,
            sources=accumulator.sources,
        ),
    )
    violations.extend(
        _bounds_violations(
            accumulator.message_min,
            accumulator.message_max,
            min_name=DirectiveName.MESSAGE_MIN_LENGTH,
            max_name=DirectiveName.MESSAGE_MAX_LENGTH,
            ceiling=MESSAGE_LENGTH_CEILING,
            sources=accumulator.sources,
        ),
    )
    for pending in accumulator.banned_ranges:
        violation = _range_violation(pending)
        if violation is not None:
            violations.append(violation)
    return violations


def freeze_policy(accumulator: PolicyAccumulator) -> PolicyModel:
    """Copy a validated accumulator into an immutable :class:`PolicyModel`."""
    return PolicyModel(
        ip=IpPolicy(
            banned_singles=frozenset(accumulator.banned_ips),
            banned_ranges=tuple(AddressRange(start=item.start, end=item.end) for item in accumulator.banned_ranges),
            allowed=frozenset(accumulator.allowed_ips),
        ),
        nickname=NicknamePolicy(
            banned_patterns=tuple(accumulator.nickname_patterns),
            allowed_exact=frozenset(accumulator.nickname_allowed),
            bounds=LengthBounds(accumulator.nickname_min.value, accumulator.nickname_max.value),
        ),
        message=MessagePolicy(
            banned_patterns=tuple(accumulator.message_patterns),
            bounds=LengthBounds(accumulator.message_min.value, accumulator.message_max.value),
        ),
        listen=frozenset(accumulator.listen),
    )


def validate(accumulator: PolicyAccumulator) -> PolicyModel:
    """Validate ``accumulator`` and build the immutable policy.

    Args:
        accumulator: State produced by folding every directive.

    Returns:
        The frozen policy model.

    Raises:
        PolicyValidationError: One or more cross-field invariants are violated.
            Every violation is listed on the error.
    """
    violations = collect_violations(accumulator)
    if violations:
        logger.debug(
            "Validation found %d violation(s)",
            len(violations),
            extra=structured_extra(LogComponent.CONFIG, counts={"violations": len(violations)}),
        )
        raise PolicyValidationError(violations)
    policy = freeze_policy(accumulator)
    logger.debug(
        "Policy validated",
        extra=structured_extra(
            LogComponent.POLICY,
            counts={
                "listen": len(policy.listen),
                "banned_ips": len(policy.ip.banned_singles),
                "banned_ranges": len(policy.ip.banned_ranges),
                "allowed_ips": len(policy.ip.allowed),
            },
        ),
    )
    return policy


__all__ = ["collect_violations", "freeze_policy", "validate"]
