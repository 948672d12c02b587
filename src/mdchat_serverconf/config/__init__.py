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

"""Configuration management for mdchat_serverconf.

This package turns configuration text into a validated policy: the lexer
splits lines into tokens, the parser builds typed directives from the
registry, the builder folds them and the validator checks cross-field
invariants once before freezing the result.
"""

from __future__ import annotations

from .builder import PolicyAccumulator, PolicyBuilder, fold_directives
from .errors import (
    ConfigParseError,
    ConfigReadError,
    ConfigValidationError,
    CrossFieldInvariantError,
    DirectiveArityError,
    DirectiveRangeError,
    DirectiveSyntaxError,
    DirectiveTypeError,
    PolicyValidationError,
    PolicyViolation,
    UnknownDirectiveError,
)
from .lexer import Lexer, tokenize_line
from .loader import LoadedPolicy, load_policy, load_policy_with_metadata, parse_policy, resolve_config_paths
from .parser import Directive, parse_directives
from .registry import DIRECTIVE_REGISTRY, DirectiveSpec, resolve_directive
from .validator import validate

__all__ = [
    "DIRECTIVE_REGISTRY",
    "ConfigParseError",
    "ConfigReadError",
    "ConfigValidationError",
    "CrossFieldInvariantError",
    "Directive",
    "DirectiveArityError",
    "DirectiveRangeError",
    "DirectiveSpec",
    "DirectiveSyntaxError",
    "DirectiveTypeError",
    "Lexer",
    "LoadedPolicy",
    "PolicyAccumulator",
    "PolicyBuilder",
    "PolicyValidationError",
    "PolicyViolation",
    "UnknownDirectiveError",
    "fold_directives",
    "load_policy",
    "load_policy_with_metadata",
    "parse_directives",
    "parse_policy",
    "resolve_config_paths",
    "resolve_directive",
    "tokenize_line",
    "validate",
]
