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

"""Serialisable description of an effective policy.

The summary is a pydantic model so it can be rendered as JSON by the CLI and
compared for equality: two policies that answer every query identically
produce equal summaries.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, ClassVar

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from mdchat_serverconf.core.model_types import DataFormat

if TYPE_CHECKING:
    from mdchat_serverconf.core.type_aliases import IPAddress

    from .models import LengthBounds, PolicyModel

STRICT_MODEL_CONFIG: ConfigDict = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)


def alias_field(camel_name: str, *, default: object = ...) -> Any:  # noqa: ANN401
    """Return a Field whose validation and serialization aliases use ``camel_name``."""
    return Field(
        default=default,
        validation_alias=AliasChoices(camel_name),
        serialization_alias=camel_name,
    )


class LengthBoundsModel(BaseModel):
    """Inclusive byte-length bounds."""

    model_config: ClassVar[ConfigDict] = STRICT_MODEL_CONFIG

    minimum: int
    maximum: int


class AddressRangeModel(BaseModel):
    """Inclusive banned address range."""

    model_config: ClassVar[ConfigDict] = STRICT_MODEL_CONFIG

    start: str
    end: str


class IpSummaryModel(BaseModel):
    """Address rules, sorted by family then numeric value.

    Attributes:
        banned: Singly banned addresses.
        banned_ranges: Banned ranges in configuration order.
        allowed: Addresses exempt from every ban.
    """

    model_config: ClassVar[ConfigDict] = STRICT_MODEL_CONFIG

    banned: tuple[str, ...] = ()
    banned_ranges: tuple[AddressRangeModel, ...] = alias_field("bannedRanges", default=())
    allowed: tuple[str, ...] = ()


class NicknameSummaryModel(BaseModel):
    """Nickname rules."""

    model_config: ClassVar[ConfigDict] = STRICT_MODEL_CONFIG

    banned_patterns: tuple[str, ...] = alias_field("bannedPatterns", default=())
    allowed: tuple[str, ...] = ()
    length: LengthBoundsModel


class MessageSummaryModel(BaseModel):
    """Message rules."""

    model_config: ClassVar[ConfigDict] = STRICT_MODEL_CONFIG

    banned_patterns: tuple[str, ...] = alias_field("bannedPatterns", default=())
    length: LengthBoundsModel


class PolicySummaryModel(BaseModel):
    """Pydantic model describing a validated policy.

    Attributes:
        listen: Socket addresses, IPv4 first, then by address and port.
        ip: Address ban and allow rules.
        nickname: Nickname moderation rules.
        message: Message moderation rules.
    """

    model_config: ClassVar[ConfigDict] = STRICT_MODEL_CONFIG

    listen: tuple[str, ...]
    ip: IpSummaryModel
    nickname: NicknameSummaryModel
    message: MessageSummaryModel


def _address_key(address: IPAddress) -> tuple[int, int]:
    return address.version, int(address)


def _bounds_model(bounds: LengthBounds) -> LengthBoundsModel:
    return LengthBoundsModel(minimum=bounds.minimum, maximum=bounds.maximum)


def summarise_policy(policy: PolicyModel) -> PolicySummaryModel:
    """Describe ``policy`` as a :class:`PolicySummaryModel`.

    Args:
        policy: Validated policy.

    Returns:
        Summary with deterministic ordering for every collection.
    """
    return PolicySummaryModel(
        listen=tuple(str(item) for item in sorted(policy.listen, key=lambda item: item.sort_key())),
        ip=IpSummaryModel(
            banned=tuple(str(item) for item in sorted(policy.ip.banned_singles, key=_address_key)),
            banned_ranges=tuple(
                AddressRangeModel(start=str(item.start), end=str(item.end)) for item in policy.ip.banned_ranges
            ),
            allowed=tuple(str(item) for item in sorted(policy.ip.allowed, key=_address_key)),
        ),
        nickname=NicknameSummaryModel(
            banned_patterns=tuple(rule.source for rule in policy.nickname.banned_patterns),
            allowed=tuple(sorted(policy.nickname.allowed_exact)),
            length=_bounds_model(policy.nickname.bounds),
        ),
        message=MessageSummaryModel(
            banned_patterns=tuple(rule.source for rule in policy.message.banned_patterns),
            length=_bounds_model(policy.message.bounds),
        ),
    )


def _text_lines(summary: PolicySummaryModel) -> list[str]:
    lines = [f"listen: {', '.join(summary.listen)}"]
    lines.append(f"ip banned: {', '.join(summary.ip.banned) or '-'}")
    ranges = ", ".join(f"{item.start} - {item.end}" for item in summary.ip.banned_ranges)
    lines.append(f"ip banned ranges: {ranges or '-'}")
    lines.append(f"ip allowed: {', '.join(summary.ip.allowed) or '-'}")
    nickname = summary.nickname
    lines.append(f"nickname length: {nickname.length.minimum}..{nickname.length.maximum} bytes")
    lines.append(f"nickname banned patterns: {', '.join(nickname.banned_patterns) or '-'}")
    lines.append(f"nickname allowed: {', '.join(nickname.allowed) or '-'}")
    message = summary.message
    lines.append(f"message length: {message.length.minimum}..{message.length.maximum} bytes")
    lines.append(f"message banned patterns: {', '.join(message.banned_patterns) or '-'}")
    return lines


def render_summary(summary: PolicySummaryModel, data_format: DataFormat = DataFormat.TEXT) -> str:
    """Render ``summary`` as text lines or indented JSON (camelCase keys)."""
    if data_format is DataFormat.JSON:
        payload = summary.model_dump(mode="json", by_alias=True)
        return json.dumps(payload, indent=2, ensure_ascii=False)
    return "\n".join(_text_lines(summary))


__all__ = [
    "AddressRangeModel",
    "IpSummaryModel",
    "LengthBoundsModel",
    "MessageSummaryModel",
    "NicknameSummaryModel",
    "PolicySummaryModel",
    "render_summary",
    "summarise_policy",
]
