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

"""Property-based tests for policy construction and queries."""

from __future__ import annotations

from ipaddress import IPv4Address

import pytest
from hypothesis import given
from hypothesis import strategies as st

from mdchat_serverconf.config.errors import DirectiveRangeError
from mdchat_serverconf.config.lexer import tokenize_line
from mdchat_serverconf.config.loader import parse_policy
from mdchat_serverconf.policy.summary import summarise_policy
from tests.property_based.strategies import address_ranges, ipv4_addresses, nickname_lengths, nicknames, ports

pytestmark = pytest.mark.property

LISTEN = "listen 0.0.0.0:4000\n"


@given(nickname_lengths())
def test_nickname_max_length_in_range_validates(length: int) -> None:
    policy = parse_policy(f"{LISTEN}nickname max-length {length}")
    assert policy.nickname.bounds.maximum == length
    assert not policy.is_nickname_rejected("a" * length)
    assert policy.is_nickname_rejected("a" * (length + 1))


@given(st.one_of(st.integers(max_value=0), st.integers(min_value=256)))
def test_nickname_max_length_out_of_range_is_fatal(length: int) -> None:
    with pytest.raises(DirectiveRangeError):
        _ = parse_policy(f"{LISTEN}nickname max-length {length}")


@given(nicknames())
def test_allowed_nickname_is_never_rejected(nickname: str) -> None:
    config = f"{LISTEN}nickname ban .\nnickname max-length 1\nnickname allow {nickname}\n"
    policy = parse_policy(config)
    assert not policy.is_nickname_rejected(nickname)


@given(nicknames())
def test_nickname_tokens_survive_lexing(nickname: str) -> None:
    assert tokenize_line(f"nickname allow {nickname}") == ("nickname", "allow", nickname)


@given(address_ranges())
def test_range_endpoints_are_banned(bounds: tuple[IPv4Address, IPv4Address]) -> None:
    start, end = bounds
    policy = parse_policy(f"{LISTEN}ip ban-range {start} {end}")
    assert policy.is_ip_banned(start)
    assert policy.is_ip_banned(end)


@given(address_ranges(), ipv4_addresses())
def test_allowed_address_beats_any_ban(bounds: tuple[IPv4Address, IPv4Address], allowed: IPv4Address) -> None:
    start, end = bounds
    policy = parse_policy(f"{LISTEN}ip ban-range {start} {end}\nip ban {allowed}\nip allow {allowed}")
    assert not policy.is_ip_banned(allowed)


@given(ipv4_addresses(), ipv4_addresses())
def test_reversed_ranges_are_rejected(first: IPv4Address, second: IPv4Address) -> None:
    low, high = min(first, second), max(first, second)
    config = f"{LISTEN}ip ban-range {high} {low}"
    if low == high:
        assert parse_policy(config).is_ip_banned(low)
    else:
        with pytest.raises(ValueError, match="is greater than end"):
            _ = parse_policy(config)


@given(
    st.lists(ports(), min_size=1, max_size=5),
    st.lists(ipv4_addresses(), max_size=5),
    st.integers(min_value=1, max_value=65535),
)
def test_parsing_is_idempotent(listen_ports: list[int], banned: list[IPv4Address], max_length: int) -> None:
    lines = [f"listen 127.0.0.1:{port}" for port in listen_ports]
    lines.extend(f"ip ban {address}" for address in banned)
    lines.append(f"message max-length {max_length}")
    text = "\n".join(lines)
    first = parse_policy(text)
    second = parse_policy(text)
    assert summarise_policy(first) == summarise_policy(second)
    assert first.listen_addresses() == second.listen_addresses()
