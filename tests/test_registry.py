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

"""Unit tests for the directive registry."""

from __future__ import annotations

import pytest

from mdchat_serverconf.config.registry import (
    DIRECTIVE_REGISTRY,
    MAX_NAME_WORDS,
    iter_directive_specs,
    resolve_directive,
)
from mdchat_serverconf.core.model_types import ArgKind, DirectiveName, FoldBehavior

pytestmark = pytest.mark.unit


def test_registry_covers_every_directive_name() -> None:
    assert {spec.name for spec in iter_directive_specs()} == set(DirectiveName)
    assert len(DIRECTIVE_REGISTRY) == 11
    assert MAX_NAME_WORDS == 2


def test_registry_is_read_only() -> None:
    with pytest.raises(TypeError):
        DIRECTIVE_REGISTRY["listen"] = DIRECTIVE_REGISTRY["ip ban"]  # type: ignore[index]


@pytest.mark.parametrize(
    ("name", "kinds", "fold", "value_range"),
    [
        ("listen", (ArgKind.SOCKET_ADDRESS,), FoldBehavior.ACCUMULATE, None),
        ("ip ban-range", (ArgKind.IP_ADDRESS, ArgKind.IP_ADDRESS), FoldBehavior.ACCUMULATE, None),
        ("nickname allow", (ArgKind.STRING,), FoldBehavior.ACCUMULATE, None),
        ("nickname max-length", (ArgKind.INTEGER_OR_NOLIMIT,), FoldBehavior.LAST_WINS, (1, 255)),
        ("nickname min-length", (ArgKind.INTEGER,), FoldBehavior.LAST_WINS, (1, 255)),
        ("message max-length", (ArgKind.INTEGER_OR_NOLIMIT,), FoldBehavior.LAST_WINS, (1, 65535)),
        ("message ban", (ArgKind.REGEX,), FoldBehavior.ACCUMULATE, None),
    ],
)
def test_registry_signatures(
    name: str,
    kinds: tuple[ArgKind, ...],
    fold: FoldBehavior,
    value_range: tuple[int, int] | None,
) -> None:
    spec = DIRECTIVE_REGISTRY[name]
    assert spec.kinds == kinds
    assert spec.fold is fold
    assert spec.value_range == value_range
    assert spec.arity == (len(kinds), len(kinds))


def test_resolve_prefers_longest_name() -> None:
    resolved = resolve_directive(("ip", "ban-range", "10.0.0.1", "10.0.0.2"))
    assert resolved is not None
    spec, width = resolved
    assert spec.name is DirectiveName.IP_BAN_RANGE
    assert width == 2


def test_resolve_single_word_name() -> None:
    resolved = resolve_directive(("listen", "0.0.0.0:4000"))
    assert resolved is not None
    assert resolved[0].name is DirectiveName.LISTEN
    assert resolved[1] == 1


@pytest.mark.parametrize("tokens", [("ip",), ("ip", "block", "1.2.3.4"), ("bind", "0.0.0.0:1"), ("ip-ban", "1.2.3.4")])
def test_resolve_unknown_names(tokens: tuple[str, ...]) -> None:
    assert resolve_directive(tokens) is None
