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

"""Unit tests for the pydantic policy summary."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from mdchat_serverconf.config.loader import parse_policy
from mdchat_serverconf.core.model_types import DataFormat
from mdchat_serverconf.policy.summary import (
    LengthBoundsModel,
    PolicySummaryModel,
    render_summary,
    summarise_policy,
)

pytestmark = pytest.mark.unit

CONFIG = """\
listen [::]:4000
listen 10.0.0.1:4000
listen 0.0.0.0:6667
ip ban 10.0.0.9
ip ban 10.0.0.1
ip ban ::1
ip ban-range 172.16.0.10 172.16.0.20
ip ban-range 172.16.0.1 172.16.0.5
ip allow 172.16.0.12
nickname ban ^guest
nickname allow zed
nickname allow admin
nickname max-length 32
message ban spam
message max-length nolimit
"""


def test_summary_orders_collections() -> None:
    summary = summarise_policy(parse_policy(CONFIG))
    assert summary.listen == ("0.0.0.0:6667", "10.0.0.1:4000", "[::]:4000")
    assert summary.ip.banned == ("10.0.0.1", "10.0.0.9", "::1")
    assert [(item.start, item.end) for item in summary.ip.banned_ranges] == [
        ("172.16.0.10", "172.16.0.20"),
        ("172.16.0.1", "172.16.0.5"),
    ]
    assert summary.ip.allowed == ("172.16.0.12",)
    assert summary.nickname.allowed == ("admin", "zed")
    assert summary.nickname.banned_patterns == ("^guest",)
    assert summary.nickname.length == LengthBoundsModel(minimum=1, maximum=32)
    assert summary.message.length.maximum == 65535


def test_summaries_of_equivalent_files_are_equal() -> None:
    reordered = "\n".join(reversed(CONFIG.splitlines()[:7])) + "\n" + "\n".join(CONFIG.splitlines()[7:])
    assert summarise_policy(parse_policy(CONFIG)) != summarise_policy(parse_policy("listen 0.0.0.0:1"))
    assert summarise_policy(parse_policy(reordered)) == summarise_policy(parse_policy(CONFIG))


def test_render_json_uses_camel_case_aliases() -> None:
    rendered = render_summary(summarise_policy(parse_policy(CONFIG)), DataFormat.JSON)
    payload = json.loads(rendered)
    assert payload["ip"]["bannedRanges"][0] == {"start": "172.16.0.10", "end": "172.16.0.20"}
    assert payload["nickname"]["bannedPatterns"] == ["^guest"]
    assert payload["message"]["length"] == {"minimum": 1, "maximum": 65535}


def test_json_payload_validates_back_into_model() -> None:
    summary = summarise_policy(parse_policy(CONFIG))
    payload = json.loads(render_summary(summary, DataFormat.JSON))
    assert PolicySummaryModel.model_validate(payload) == summary


def test_render_text() -> None:
    rendered = render_summary(summarise_policy(parse_policy("listen 0.0.0.0:4000")))
    lines = rendered.splitlines()
    assert lines[0] == "listen: 0.0.0.0:4000"
    assert "ip banned: -" in lines
    assert "nickname length: 1..255 bytes" in lines
    assert "message length: 1..65535 bytes" in lines


def test_summary_models_forbid_extra_fields() -> None:
    with pytest.raises(ValidationError):
        _ = LengthBoundsModel.model_validate({"minimum": 1, "maximum": 2, "unit": "bytes"})
