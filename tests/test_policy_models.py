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

"""Unit tests for the immutable policy model and its queries."""

from __future__ import annotations

import dataclasses
import re
from ipaddress import IPv4Address, IPv6Address

import pytest

from mdchat_serverconf._internal.exceptions import ServerconfTypeError, ServerconfValidationError
from mdchat_serverconf.config.loader import parse_policy
from mdchat_serverconf.policy.models import (
    AddressRange,
    IpPolicy,
    LengthBounds,
    MessagePolicy,
    NicknamePolicy,
    PatternRule,
    SocketAddress,
    encoded_length,
)

pytestmark = pytest.mark.unit


def _rule(source: str) -> PatternRule:
    return PatternRule(source=source, pattern=re.compile(source))


def test_scenario_listen_only() -> None:
    policy = parse_policy("listen 0.0.0.0:4000")
    assert policy.listen_addresses() == frozenset({SocketAddress(IPv4Address("0.0.0.0"), 4000)})
    assert not policy.is_ip_banned("203.0.113.9")
    assert not policy.is_nickname_rejected("alice")
    assert not policy.is_message_rejected("hello")


def test_allow_overrides_range_ban() -> None:
    policy = parse_policy(
        "listen 0.0.0.0:4000\nip ban-range 192.168.1.0 192.168.1.255\nip allow 192.168.1.5",
    )
    assert policy.is_ip_banned("192.168.1.10")
    assert policy.is_ip_banned("192.168.1.0")
    assert policy.is_ip_banned("192.168.1.255")
    assert not policy.is_ip_banned("192.168.1.5")
    assert not policy.is_ip_banned("192.168.2.1")


def test_allow_overrides_single_ban() -> None:
    ip = IpPolicy(
        banned_singles=frozenset({IPv4Address("10.0.0.1")}),
        allowed=frozenset({IPv4Address("10.0.0.1")}),
    )
    assert not ip.is_banned("10.0.0.1")


def test_ipv4_mapped_ipv6_peers_are_normalised() -> None:
    policy = parse_policy("listen [::]:4000\nip ban 10.0.0.1")
    assert policy.is_ip_banned("::ffff:10.0.0.1")
    assert policy.is_ip_banned(IPv6Address("::ffff:10.0.0.1"))


def test_ranges_never_match_other_family() -> None:
    address_range = AddressRange(IPv4Address("0.0.0.0"), IPv4Address("255.255.255.255"))
    assert address_range.contains(IPv4Address("1.2.3.4"))
    assert not address_range.contains(IPv6Address("::1"))


def test_ipv6_range_ban() -> None:
    policy = parse_policy("listen [::]:4000\nip ban-range 2001:db8:: 2001:db8::ff")
    assert policy.is_ip_banned("2001:db8::10")
    assert not policy.is_ip_banned("2001:db8::100")


def test_query_with_invalid_address_string() -> None:
    policy = parse_policy("listen 0.0.0.0:4000")
    with pytest.raises(ServerconfValidationError):
        _ = policy.is_ip_banned("not-an-address")


def test_query_with_wrong_type() -> None:
    policy = parse_policy("listen 0.0.0.0:4000")
    with pytest.raises(ServerconfTypeError):
        _ = policy.is_ip_banned(1234)  # type: ignore[arg-type]


def test_nickname_bounds_use_utf8_bytes() -> None:
    nickname = NicknamePolicy(bounds=LengthBounds(1, 4))
    assert encoded_length("ééé") == 6
    assert nickname.is_rejected("ééé")
    assert not nickname.is_rejected("abcd")
    assert nickname.is_rejected("abcde")
    assert nickname.is_rejected("")


def test_allowed_nickname_bypasses_patterns_and_bounds() -> None:
    nickname = NicknamePolicy(
        banned_patterns=(_rule("^admin"),),
        allowed_exact=frozenset({"admin", "a-very-long-administrator"}),
        bounds=LengthBounds(1, 8),
    )
    assert not nickname.is_rejected("admin")
    assert not nickname.is_rejected("a-very-long-administrator")
    assert nickname.is_rejected("admin2")


def test_patterns_match_anywhere() -> None:
    message = MessagePolicy(banned_patterns=(_rule("spam"),))
    assert message.is_rejected("this is spam, sorry")
    assert not message.is_rejected("ham")


def test_message_bounds_from_configuration() -> None:
    policy = parse_policy("listen 0.0.0.0:4000\nmessage max-length 5\nmessage min-length 2")
    assert policy.is_message_rejected("x")
    assert not policy.is_message_rejected("xy")
    assert policy.is_message_rejected("xxxxxx")


def test_escaped_hash_in_pattern() -> None:
    policy = parse_policy(r"listen 0.0.0.0:4000" "\n" r"message ban room\#1 # not part of the pattern")
    assert policy.is_message_rejected("join room#1 now")
    assert not policy.is_message_rejected("join room 1 now")


def test_policy_is_immutable() -> None:
    policy = parse_policy("listen 0.0.0.0:4000")
    with pytest.raises(dataclasses.FrozenInstanceError):
        policy.listen = frozenset()  # type: ignore[misc]
    assert isinstance(policy.ip.banned_singles, frozenset)
    assert isinstance(policy.nickname.banned_patterns, tuple)


def test_socket_address_rendering_and_order() -> None:
    v4 = SocketAddress(IPv4Address("10.0.0.1"), 80)
    v6 = SocketAddress(IPv6Address("::1"), 4000)
    assert str(v4) == "10.0.0.1:80"
    assert str(v6) == "[::1]:4000"
    assert sorted([v6, v4], key=SocketAddress.sort_key) == [v4, v6]
    assert v6.version == 6


def test_pattern_rules_compare_by_source() -> None:
    assert _rule("^a") == _rule("^a")
    assert str(AddressRange(IPv4Address("10.0.0.1"), IPv4Address("10.0.0.2"))) == "10.0.0.1 - 10.0.0.2"


def test_ipv4_mapped_ban_in_configuration() -> None:
    policy = parse_policy("listen 0.0.0.0:4000\nip ban ::ffff:1.2.3.4")
    assert policy.ip.banned_singles == frozenset({IPv4Address("1.2.3.4")})
    assert policy.is_ip_banned("::ffff:1.2.3.4")
    assert policy.is_ip_banned("1.2.3.4")


def test_ipv4_mapped_allow_in_configuration() -> None:
    policy = parse_policy("listen 0.0.0.0:4000\nip ban-range 10.0.0.0 10.0.0.255\nip allow ::ffff:10.0.0.7")
    assert not policy.is_ip_banned("10.0.0.7")
    assert not policy.is_ip_banned("::ffff:10.0.0.7")
    assert policy.is_ip_banned("10.0.0.8")


def test_ipv4_mapped_range_in_configuration() -> None:
    policy = parse_policy("listen 0.0.0.0:4000\nip ban-range ::ffff:0.0.0.0 ::ffff:255.255.255.255")
    assert policy.ip.banned_ranges == (AddressRange(IPv4Address("0.0.0.0"), IPv4Address("255.255.255.255")),)
    assert policy.is_ip_banned("::ffff:1.2.3.5")
    assert policy.is_ip_banned("1.2.3.5")
    assert not policy.is_ip_banned("2001:db8::1")
