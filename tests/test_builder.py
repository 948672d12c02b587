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

"""Unit tests for the policy builder fold."""

from __future__ import annotations

import logging
from ipaddress import IPv4Address

import pytest

from mdchat_serverconf.config.builder import PendingRange, PolicyBuilder, SourcedValue, fold_directives
from mdchat_serverconf.config.parser import parse_directives

pytestmark = pytest.mark.unit


def test_defaults_apply_without_directives() -> None:
    accumulator = fold_directives(())
    assert accumulator.nickname_min == SourcedValue(1)
    assert accumulator.nickname_max == SourcedValue(255)
    assert accumulator.message_min == SourcedValue(1)
    assert accumulator.message_max == SourcedValue(65535)
    assert accumulator.listen == set()
    assert accumulator.directive_count == 0


def test_scalars_follow_last_wins_and_remember_their_line() -> None:
    text = "message max-length 100\nnickname max-length 20\nmessage max-length 200\n"
    accumulator = fold_directives(parse_directives(text, source="a.conf"))
    assert accumulator.message_max == SourcedValue(200, "a.conf", 3)
    assert accumulator.nickname_max == SourcedValue(20, "a.conf", 2)


def test_collections_accumulate_and_deduplicate() -> None:
    text = "\n".join(
        [
            "listen 0.0.0.0:4000",
            "listen 0.0.0.0:4000",
            "listen [::]:4000",
            "ip ban 10.0.0.1",
            "ip ban 10.0.0.1",
            "ip allow 10.0.0.2",
            "nickname allow root",
            "nickname ban ^a",
            "nickname ban ^b",
            "message ban spam",
        ],
    )
    accumulator = fold_directives(parse_directives(text))
    assert len(accumulator.listen) == 2
    assert accumulator.banned_ips == {IPv4Address("10.0.0.1")}
    assert accumulator.allowed_ips == {IPv4Address("10.0.0.2")}
    assert accumulator.nickname_allowed == {"root"}
    assert [rule.source for rule in accumulator.nickname_patterns] == ["^a", "^b"]
    assert [rule.source for rule in accumulator.message_patterns] == ["spam"]
    assert accumulator.directive_count == 10


def test_ranges_are_kept_in_file_order_with_location() -> None:
    text = "ip ban-range 10.0.0.9 10.0.0.1\nip ban-range 10.1.0.0 10.1.0.255\n"
    accumulator = fold_directives(parse_directives(text, source="ranges.conf"))
    assert accumulator.banned_ranges == [
        PendingRange(IPv4Address("10.0.0.9"), IPv4Address("10.0.0.1"), "ranges.conf", 1),
        PendingRange(IPv4Address("10.1.0.0"), IPv4Address("10.1.0.255"), "ranges.conf", 2),
    ]


def test_builder_folds_several_sources_into_one_accumulator() -> None:
    builder = PolicyBuilder()
    _ = builder.fold(parse_directives("listen 0.0.0.0:4000\nmessage max-length 100", source="base.conf"))
    accumulator = builder.fold(parse_directives("message max-length 300\nip ban 10.0.0.7", source="site.conf"))
    assert accumulator is builder.accumulator
    assert accumulator.message_max == SourcedValue(300, "site.conf", 1)
    assert len(accumulator.listen) == 1
    assert accumulator.banned_ips == {IPv4Address("10.0.0.7")}
    assert accumulator.sources == ["base.conf", "site.conf"]


def test_fold_logs_directive_count(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="mdchat_serverconf.config")
    _ = fold_directives(parse_directives("listen 0.0.0.0:4000\nip ban 10.0.0.1"))
    assert "Folded 2 directive(s)" in caplog.text
