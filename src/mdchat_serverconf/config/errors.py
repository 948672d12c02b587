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

"""Fatal configuration errors raised while loading a server configuration.

Every error defined here aborts server startup. Parse errors carry the source
name and line of the offending directive; validation errors carry every
cross-field violation found after the fold.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from mdchat_serverconf._internal.exceptions import ServerconfValidationError
from mdchat_serverconf.compat import override

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from mdchat_serverconf.core.model_types import ViolationKind


class ConfigValidationError(ServerconfValidationError):
    """Raised when a configuration cannot be turned into a valid policy."""


class ConfigReadError(ConfigValidationError):
    """Raised when a configuration file cannot be read from disk."""

    def __init__(self, path: Path, error: Exception) -> None:
        """Initialize the exception with file path and underlying error.

        Args:
            path: The path to the configuration file that could not be read.
            error: The underlying exception that caused the read failure.
        """
        self.path = path
        self.error = error
        super().__init__(f"Unable to read {path}: {error}")


class ConfigParseError(ConfigValidationError):
    """Raised when a configuration line cannot be parsed.

    Attributes:
        source: File path (or ``<string>``) the line was read from.
        line: 1-based physical line number.
        directive: Directive name or offending token, when known.
        description: Human-readable reason.
    """

    def __init__(self, source: str, line: int, description: str, *, directive: str | None = None) -> None:
        self.source = source
        self.line = line
        self.directive = directive
        self.description = description
        super().__init__(self._render())

    def _render(self) -> str:
        if self.directive:
            return f"{self.source}: Line {self.line}: `{self.directive}`: {self.description}"
        return f"{self.source}: Line {self.line}: {self.description}"


class DirectiveSyntaxError(ConfigParseError):
    """Raised for malformed lines, such as a tab used as a separator."""


class UnknownDirectiveError(ConfigParseError):
    """Raised when a line does not start with a registered directive name."""


class DirectiveArityError(ConfigParseError):
    """Raised when a directive receives the wrong number of arguments."""

    def __init__(
        self,
        source: str,
        line: int,
        *,
        directive: str,
        expected: tuple[int, int],
        received: int,
    ) -> None:
        self.expected = expected
        self.received = received
        low, high = expected
        wanted = str(low) if low == high else f"{low} to {high}"
        noun = "argument" if high == 1 else "arguments"
        super().__init__(
            source,
            line,
            f"expected {wanted} {noun}, got {received}",
            directive=directive,
        )


class DirectiveTypeError(ConfigParseError):
    """Raised when an argument does not parse as its declared kind."""


class DirectiveRangeError(ConfigParseError):
    """Raised when a numeric argument lies outside the directive's declared range."""


@dataclass(slots=True, frozen=True)
class PolicyViolation:
    """A single cross-field invariant violation.

    Attributes:
        kind: Category of the violation.
        message: Human-readable description citing the configured values.
        source: Source the offending directive came from, if any.
        line: Line of the offending directive, if any.
    """

    kind: ViolationKind
    message: str
    source: str | None = None
    line: int | None = None

    @override
    def __str__(self) -> str:
        if self.source is not None and self.line is not None:
            return f"{self.source}: Line {self.line}: {self.message}"
        if self.source is not None:
            return f"{self.source}: {self.message}"
        return self.message


class PolicyValidationError(ConfigValidationError):
    """Raised when the folded configuration violates cross-field invariants.

    The error collects every violation found in one validation pass so the
    operator can fix them all at once.
    """

    def __init__(self, violations: Sequence[PolicyViolation]) -> None:
        self.violations: tuple[PolicyViolation, ...] = tuple(violations)
        count = len(self.violations)
        header = f"{count} configuration error{'s' if count != 1 else ''}"
        details = "\n".join(f"  - {violation}" for violation in self.violations)
        super().__init__(f"{header}:\n{details}" if details else header)


CrossFieldInvariantError = PolicyValidationError

__all__ = [
    "ConfigParseError",
    "ConfigReadError",
    "ConfigValidationError",
    "CrossFieldInvariantError",
    "DirectiveArityError",
    "DirectiveRangeError",
    "DirectiveSyntaxError",
    "DirectiveTypeError",
    "PolicyValidationError",
    "PolicyViolation",
    "UnknownDirectiveError",
]
