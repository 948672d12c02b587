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

"""Immutable policy model consumed by the chat server.

A :class:`PolicyModel` is built exactly once from a validated configuration
and is never mutated afterwards. All containers are frozensets or tuples and
all patterns are compiled up front, so any number of connection workers may
query the same instance concurrently without locking.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from ipaddress import IPv4Address, IPv6Address, ip_address
from typing import TYPE_CHECKING

from mdchat_serverconf._internal.exceptions import ServerconfTypeError, ServerconfValidationError
from mdchat_serverconf.compat import override
from mdchat_serverconf.core.constants import (
    MESSAGE_LENGTH_CEILING,
    MIN_LENGTH_FLOOR,
    NICKNAME_LENGTH_CEILING,
)

if TYPE_CHECKING:
    import re

    from mdchat_serverconf.core.type_aliases import IPAddress


def normalise_address(address: IPAddress) -> IPAddress:
    """Return the IPv4 address behind an IPv4-mapped IPv6 address, else ``address``."""
    # Dual-stack sockets report IPv4 peers as IPv4-mapped IPv6 addresses.
    if isinstance(address, IPv6Address) and address.ipv4_mapped is not None:
        return address.ipv4_mapped
    return address


def _coerce_address(value: IPAddress | str) -> IPAddress:
    if isinstance(value, IPv4Address | IPv6Address):
        address: IPAddress = value
    elif isinstance(value, str):
        try:
            address = ip_address(value.strip())
        except ValueError as exc:
            message = f"`{value}` is not a valid IP address"
            raise ServerconfValidationError(message) from exc
    else:
        message = f"expected an IP address or string, got {type(value).__name__}"
        raise ServerconfTypeError(message)
    return normalise_address(address)


def encoded_length(text: str) -> int:
    """Return the length of ``text`` in UTF-8 bytes."""
    return len(text.encode("utf-8", errors="surrogatepass"))


@dataclass(slots=True, frozen=True)
class SocketAddress:
    """IP address and port a listener binds to. Port 0 asks the OS for a port."""

    host: IPAddress
    port: int

    @property
    def version(self) -> int:
        """IP version of the host address (4 or 6)."""
        return self.host.version

    def sort_key(self) -> tuple[int, int, int]:
        """Key ordering IPv4 before IPv6, then by address and port."""
        return self.host.version, int(self.host), self.port

    @override
    def __str__(self) -> str:
        if self.host.version == 6:
            return f"[{self.host}]:{self.port}"
        return f"{self.host}:{self.port}"


@dataclass(slots=True, frozen=True)
class AddressRange:
    """Inclusive range of addresses of a single family, ``start <= end``."""

    start: IPAddress
    end: IPAddress

    def contains(self, address: IPAddress) -> bool:
        """Return True when ``address`` lies inside the range, endpoints included."""
        if address.version != self.start.version:
            return False
        return int(self.start) <= int(address) <= int(self.end)

    @override
    def __str__(self) -> str:
        return f"{self.start} - {self.end}"


@dataclass(slots=True, frozen=True)
class LengthBounds:
    """Inclusive byte-length bounds."""

    minimum: int
    maximum: int

    def contains(self, length: int) -> bool:
        """Return True when ``length`` lies within the bounds."""
        return self.minimum <= length <= self.maximum


@dataclass(slots=True, frozen=True)
class PatternRule:
    """Compiled ban pattern together with its configured source text."""

    source: str
    pattern: re.Pattern[str] = field(compare=False)

    def matches(self, text: str) -> bool:
        """Return True when the pattern matches anywhere in ``text``."""
        return self.pattern.search(text) is not None


@dataclass(slots=True, frozen=True)
class IpPolicy:
    """Banned and allowed client addresses.

    Allowed addresses take precedence over single bans and banned ranges.
    """

    banned_singles: frozenset[IPAddress] = frozenset()
    banned_ranges: tuple[AddressRange, ...] = ()
    allowed: frozenset[IPAddress] = frozenset()

    def is_banned(self, address: IPAddress | str) -> bool:
        """Return True when ``address`` is banned and not explicitly allowed."""
        candidate = _coerce_address(address)
        if candidate in self.allowed:
            return False
        if candidate in self.banned_singles:
            return True
        return any(address_range.contains(candidate) for address_range in self.banned_ranges)


@dataclass(slots=True, frozen=True)
class NicknamePolicy:
    """Nickname moderation rules; exact allowed names bypass every other rule."""

    banned_patterns: tuple[PatternRule, ...] = ()
    allowed_exact: frozenset[str] = frozenset()
    bounds: LengthBounds = LengthBounds(MIN_LENGTH_FLOOR, NICKNAME_LENGTH_CEILING)

    def is_rejected(self, nickname: str) -> bool:
        """Return True when ``nickname`` must be refused."""
        if nickname in self.allowed_exact:
            return False
        if not self.bounds.contains(encoded_length(nickname)):
            return True
        return any(rule.matches(nickname) for rule in self.banned_patterns)


@dataclass(slots=True, frozen=True)
class MessagePolicy:
    """Message moderation rules."""

    banned_patterns: tuple[PatternRule, ...] = ()
    bounds: LengthBounds = LengthBounds(MIN_LENGTH_FLOOR, MESSAGE_LENGTH_CEILING)

    def is_rejected(self, text: str) -> bool:
        """Return True when a message with body ``text`` must be refused."""
        if not self.bounds.contains(encoded_length(text)):
            return True
        return any(rule.matches(text) for rule in self.banned_patterns)


@dataclass(slots=True, frozen=True)
class PolicyModel:
    """Validated, immutable server policy.

    Attributes:
        ip: Address ban/allow rules.
        nickname: Nickname moderation rules.
        message: Message moderation rules.
        listen: Socket addresses the server must bind; never empty.
    """

    ip: IpPolicy
    nickname: NicknamePolicy
    message: MessagePolicy
    listen: frozenset[SocketAddress]

    def is_ip_banned(self, address: IPAddress | str) -> bool:
        """Return True when connections from ``address`` must be refused.

        Args:
            address: Peer address, either an ``ipaddress`` object or a literal.

        Returns:
            True iff the address is banned (singly or by range) and not allowed.
        """
        return self.ip.is_banned(address)

    def is_nickname_rejected(self, nickname: str) -> bool:
        """Return True when ``nickname`` is not allowed and is out of bounds or banned."""
        return self.nickname.is_rejected(nickname)

    def is_message_rejected(self, text: str) -> bool:
        """Return True when ``text`` is out of bounds or matches a banned pattern."""
        return self.message.is_rejected(text)

    def listen_addresses(self) -> frozenset[SocketAddress]:
        """Return the socket addresses the server must listen on."""
        return self.listen


__all__ = [
    "AddressRange",
    "IpPolicy",
    "LengthBounds",
    "MessagePolicy",
    "NicknamePolicy",
    "PatternRule",
    "PolicyModel",
    "SocketAddress",
    "encoded_length",
    "normalise_address",
]
