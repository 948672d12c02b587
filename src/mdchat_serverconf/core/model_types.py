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

"""Model types and enumerations for mdchat_serverconf.

This module defines the closed enumerations used throughout the package:

- Directive names understood by the configuration language
- Argument kinds and fold behaviors used by the directive registry
- Violation kinds reported by the policy validator
- Format and component enumerations for logging and CLI output
"""

from __future__ import annotations

from mdchat_serverconf.compat import StrEnum


class DirectiveName(StrEnum):
    """Canonical names of every directive in the configuration language.

    Multi-word names are separated by a single space, exactly as they are
    written in a configuration file.
    """

    LISTEN = "listen"
    IP_BAN = "ip ban"
    IP_ALLOW = "ip allow"
    IP_BAN_RANGE = "ip ban-range"
    NICKNAME_BAN = "nickname ban"
    NICKNAME_ALLOW = "nickname allow"
    NICKNAME_MAX_LENGTH = "nickname max-length"
    NICKNAME_MIN_LENGTH = "nickname min-length"
    MESSAGE_BAN = "message ban"
    MESSAGE_MAX_LENGTH = "message max-length"
    MESSAGE_MIN_LENGTH = "message min-length"

    @property
    def word_count(self) -> int:
        """Number of space-separated words forming the name."""
        return len(self.value.split(" "))


class ArgKind(StrEnum):
    """Kinds of directive arguments.

    Attributes:
        IP_ADDRESS: IPv4 or IPv6 literal.
        SOCKET_ADDRESS: ``ip:port`` or ``[ipv6]:port``.
        INTEGER: Decimal integer constrained to a declared range.
        INTEGER_OR_NOLIMIT: Like ``INTEGER`` but also accepts ``nolimit``.
        REGEX: Regular expression compiled at parse time.
        STRING: Free text accepted as-is.
    """

    IP_ADDRESS = "ip-address"
    SOCKET_ADDRESS = "socket-address"
    INTEGER = "integer"
    INTEGER_OR_NOLIMIT = "integer-or-nolimit"
    REGEX = "regex"
    STRING = "string"


class FoldBehavior(StrEnum):
    """How repeated occurrences of a directive combine.

    Attributes:
        LAST_WINS: Each occurrence overwrites the previous scalar value.
        ACCUMULATE: Each occurrence contributes to a growing collection.
    """

    LAST_WINS = "last-wins"
    ACCUMULATE = "accumulate"


class ViolationKind(StrEnum):
    """Cross-field invariant violations detected after the fold."""

    EMPTY_LISTEN = "empty-listen"
    LENGTH_BOUNDS = "length-bounds"
    RANGE_FAMILY = "range-family"
    RANGE_ORDER = "range-order"


class DataFormat(StrEnum):
    """Output formats for rendered policy summaries."""

    TEXT = "text"
    JSON = "json"

    @classmethod
    def from_str(cls, raw: str) -> DataFormat:
        """Create a DataFormat enum from a string value.

        Args:
            raw: String representation of the data format.

        Returns:
            DataFormat enum value.

        Raises:
            ValueError: If the string does not match any DataFormat value.
        """
        value = raw.strip().lower()
        try:
            return cls(value)
        except ValueError as exc:
            msg = f"Unknown data format '{raw}'"
            raise ValueError(msg) from exc


class LogFormat(StrEnum):
    """Enumeration of log output formats.

    Attributes:
        TEXT: Human-readable text format.
        JSON: Machine-readable JSON format.
    """

    TEXT = "text"
    JSON = "json"

    @classmethod
    def from_str(cls, raw: str) -> LogFormat:
        """Create a LogFormat enum from a string value.

        Args:
            raw: String representation of the log format.

        Returns:
            LogFormat enum value.

        Raises:
            ValueError: If the string does not match any LogFormat value.
        """
        value = raw.strip().lower()
        try:
            return cls(value)
        except ValueError as exc:
            msg = f"Unknown log format '{raw}'"
            raise ValueError(msg) from exc


class LogComponent(StrEnum):
    """Enumeration of loggable system components.

    Attributes:
        CONFIG: Lexer, parser, builder and validator pipeline.
        POLICY: Policy model construction and queries.
        STARTUP: Server startup gate.
        CLI: Command-line interface component.
    """

    CONFIG = "config"
    POLICY = "policy"
    STARTUP = "startup"
    CLI = "cli"

    @classmethod
    def from_str(cls, raw: str) -> LogComponent:
        """Create a LogComponent enum from a string value.

        Args:
            raw: String representation of the log component.

        Returns:
            LogComponent enum value.

        Raises:
            ValueError: If the string does not match any LogComponent value.
        """
        value = raw.strip().lower()
        try:
            return cls(value)
        except ValueError as exc:
            msg = f"Unknown log component '{raw}'"
            raise ValueError(msg) from exc


__all__ = [
    "ArgKind",
    "DataFormat",
    "DirectiveName",
    "FoldBehavior",
    "LogComponent",
    "LogFormat",
    "ViolationKind",
]
