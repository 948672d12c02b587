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

"""mdchat_serverconf - configuration parser and policy validator for the mdchat server.

Reads the line-oriented ``mdchat-server.conf`` format, rejects any malformed or
inconsistent configuration with a located diagnostic, and produces an
immutable policy the server queries for address bans, nickname rules,
message rules and listen addresses.
"""

from __future__ import annotations

from mdchat_serverconf.exceptions import (
    ServerconfError,
    ServerconfTypeError,
    ServerconfValidationError,
)

from .config import (
    ConfigParseError,
    ConfigReadError,
    ConfigValidationError,
    CrossFieldInvariantError,
    DirectiveArityError,
    DirectiveRangeError,
    DirectiveSyntaxError,
    DirectiveTypeError,
    LoadedPolicy,
    PolicyValidationError,
    PolicyViolation,
    UnknownDirectiveError,
    load_policy,
    load_policy_with_metadata,
    parse_policy,
)
from .policy import PolicyModel, PolicySummaryModel, SocketAddress, summarise_policy
from .startup import load_startup_policy

__all__ = [
    "ConfigParseError",
    "ConfigReadError",
    "ConfigValidationError",
    "CrossFieldInvariantError",
    "DirectiveArityError",
    "DirectiveRangeError",
    "DirectiveSyntaxError",
    "DirectiveTypeError",
    "LoadedPolicy",
    "PolicyModel",
    "PolicySummaryModel",
    "PolicyValidationError",
    "PolicyViolation",
    "ServerconfError",
    "ServerconfTypeError",
    "ServerconfValidationError",
    "SocketAddress",
    "UnknownDirectiveError",
    "__version__",
    "load_policy",
    "load_policy_with_metadata",
    "load_startup_policy",
    "parse_policy",
    "summarise_policy",
]

__version__ = "0.1.0"
