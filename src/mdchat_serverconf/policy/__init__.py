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

"""Immutable policy model and its serialisable summary."""

from __future__ import annotations

from .models import (
    AddressRange,
    IpPolicy,
    LengthBounds,
    MessagePolicy,
    NicknamePolicy,
    PatternRule,
    PolicyModel,
    SocketAddress,
    encoded_length,
    normalise_address,
)
from .summary import PolicySummaryModel, render_summary, summarise_policy

__all__ = [
    "AddressRange",
    "IpPolicy",
    "LengthBounds",
    "MessagePolicy",
    "NicknamePolicy",
    "PatternRule",
    "PolicyModel",
    "PolicySummaryModel",
    "SocketAddress",
    "encoded_length",
    "normalise_address",
    "render_summary",
    "summarise_policy",
]
