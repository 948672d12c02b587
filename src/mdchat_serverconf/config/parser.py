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

"""Directive parser: turns lexed lines into typed directives.

Every argument is converted to its declared kind as soon as the line is
read. Malformed values, out-of-range integers and invalid regular
expressions are fatal at parse time and are reported with the source name
and line number of the offending directive.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from ipaddress import IPv4Address, IPv6Address, ip_address
from typing import TYPE_CHECKING, Final, TypeAlias

from mdchat_serverconf._internal.logging_utils import structured_extra
from mdchat_serverconf.core.constants import NOLIMIT_KEYWORD, PORT_MAX
from mdchat_serverconf.core.model_types import ArgKind, DirectiveName, LogComponent
from mdchat_serverconf.policy.models import PatternRule, SocketAddress, normalise_address

from .constants import STRING_SOURCE
from .errors import (
    ConfigParseError,
    DirectiveArityError,
    DirectiveRangeError,
    DirectiveSyntaxError,
    DirectiveTypeError,
    UnknownDirectiveError,
)
from .lexer import Lexer
from .registry import DIRECTIVE_REGISTRY, MAX_NAME_WORDS, DirectiveSpec, resolve_directive

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from mdchat_serverconf.core.type_aliases import IPAddress, Token

    from .lexer import LexedLine

logger: logging.Logger = logging.getLogger("mdchat_serverconf.config")

ArgValue: TypeAlias = "IPAddress | SocketAddress | int | PatternRule | str"

_DIGITS: Final[re.Pattern[str]] = re.compile(r"[0-9]+")
_NEGATIVE: Final[re.Pattern[str]] = re.compile(r"-[0-9]+")
_BRACKETED_SOCKET: Final[re.Pattern[str]] = re.compile(r"\[(?P<host>[^\[\]]+)\]:(?P<port>[^:]*)")
_PLAIN_SOCKET: Final[re.Pattern[str]] = re.compile(r"(?P<host>[^:\[\]]+):(?P<port>[^:]*)")
_NAME_GROUPS: Final[frozenset[str]] = frozenset(
    spec.name.value.split(" ")[0] for spec in DIRECTIVE_REGISTRY.values() if spec.name.word_count > 1
)


@dataclass(slots=True, frozen=True)
class Directive:
    """One parsed configuration instruction.

    Attributes:
        name: Canonical directive name.
        args: Typed argument values in positional order.
        line: 1-based line the directive was read from.
        source: File path or ``<string>`` the line came from.
    """

    name: DirectiveName
    args: tuple[ArgValue, ...]
    line: int
    source: str = STRING_SOURCE


class _ArgumentError(Exception):
    """Conversion failure raised by argument converters, mapped to parse errors."""

    def __init__(self, message: str, *, out_of_range: bool = False) -> None:
        super().__init__(message)
        self.out_of_range = out_of_range


def parse_ip_address(token: Token) -> IPAddress:
    """Parse an IPv4 or IPv6 literal, storing IPv4-mapped IPv6 as IPv4."""
    try:
        return normalise_address(ip_address(token))
    except ValueError as exc:
        message = f"`{token}` is not a valid IP address"
        raise _ArgumentError(message) from exc


def _exceeds(digits: str, high: int) -> bool:
    """Return True when a digit string has more significant digits than ``high``."""
    return len(digits.lstrip("0")) > len(str(high))


def _parse_port(raw: str, token: Token) -> int:
    if _NEGATIVE.fullmatch(raw):
        message = f"port of `{token}` must be between 0 and {PORT_MAX}"
        raise _ArgumentError(message, out_of_range=True)
    if not _DIGITS.fullmatch(raw):
        message = f"`{token}` has an invalid port"
        raise _ArgumentError(message)
    if _exceeds(raw, PORT_MAX) or int(raw) > PORT_MAX:
        message = f"port of `{token}` must be between 0 and {PORT_MAX}"
        raise _ArgumentError(message, out_of_range=True)
    return int(raw)


def parse_socket_address(token: Token) -> SocketAddress:
    """Parse ``ipv4:port`` or ``[ipv6]:port``."""
    bracketed = _BRACKETED_SOCKET.fullmatch(token)
    plain = None if bracketed else _PLAIN_SOCKET.fullmatch(token)
    match_ = bracketed or plain
    if match_ is None:
        message = f"`{token}` is not a valid socket address (expected ip:port or [ipv6]:port)"
        raise _ArgumentError(message)
    host_text = match_.group("host")
    try:
        host = ip_address(host_text)
    except ValueError as exc:
        message = f"`{token}` is not a valid socket address: `{host_text}` is not an IP address"
        raise _ArgumentError(message) from exc
    if bracketed and not isinstance(host, IPv6Address):
        message = f"`{token}` is not a valid socket address: brackets are reserved for IPv6"
        raise _ArgumentError(message)
    if plain and not isinstance(host, IPv4Address):
        message = f"`{token}` is not a valid socket address: IPv6 hosts must be bracketed"
        raise _ArgumentError(message)
    return SocketAddress(host=host, port=_parse_port(match_.group("port"), token))


def parse_bounded_integer(token: Token, value_range: tuple[int, int], *, allow_nolimit: bool) -> int:
    """Parse a decimal integer (or ``nolimit``) constrained to ``value_range``."""
    low, high = value_range
    if token == NOLIMIT_KEYWORD:
        if allow_nolimit:
            return high
        message = f"`{NOLIMIT_KEYWORD}` is not accepted here; expected a number between {low} and {high}"
        raise _ArgumentError(message)
    if _NEGATIVE.fullmatch(token):
        message = f"a number between {low} and {high} was expected, got {token}"
        raise _ArgumentError(message, out_of_range=True)
    if not _DIGITS.fullmatch(token):
        expected = f"a number between {low} and {high}"
        if allow_nolimit:
            expected += f" or `{NOLIMIT_KEYWORD}`"
        message = f"{expected} was expected, got `{token}`"
        raise _ArgumentError(message)
    if _exceeds(token, high):
        message = f"a number between {low} and {high} was expected, got a {len(token)}-digit number"
        raise _ArgumentError(message, out_of_range=True)
    value = int(token)
    if not low <= value <= high:
        message = f"a number between {low} and {high} was expected, got {value}"
        raise _ArgumentError(message, out_of_range=True)
    return value


def parse_pattern(token: Token) -> PatternRule:
    """Compile a ban pattern once, keeping its source for diagnostics."""
    try:
        return PatternRule(source=token, pattern=re.compile(token))
    except re.error as exc:
        message = f"could not compile regular expression `{token}`: {exc}"
        raise _ArgumentError(message) from exc


def convert_argument(kind: ArgKind, token: Token, spec: DirectiveSpec) -> ArgValue:
    """Convert one raw argument to the value of its declared kind."""
    match kind:
        case ArgKind.IP_ADDRESS:
            return parse_ip_address(token)
        case ArgKind.SOCKET_ADDRESS:
            return parse_socket_address(token)
        case ArgKind.INTEGER | ArgKind.INTEGER_OR_NOLIMIT:
            if spec.value_range is None:  # pragma: no cover - registry invariant
                message = f"{spec.name} declares an integer argument without a range"
                raise _ArgumentError(message)
            return parse_bounded_integer(
                token,
                spec.value_range,
                allow_nolimit=kind is ArgKind.INTEGER_OR_NOLIMIT,
            )
        case ArgKind.REGEX:
            return parse_pattern(token)
        case ArgKind.STRING:
            return token


def _unresolved_error(tokens: tuple[Token, ...], *, source: str, line: int) -> ConfigParseError:
    head = tokens[:MAX_NAME_WORDS]
    if any(char.isspace() for token in head for char in token):
        message = "directive names and arguments must be separated by spaces, not tabs"
        return DirectiveSyntaxError(source, line, message, directive=tokens[0])
    if tokens[0] in _NAME_GROUPS:
        if len(tokens) == 1:
            message = f"a sub-command was expected after `{tokens[0]}`"
            return UnknownDirectiveError(source, line, message, directive=tokens[0])
        offending = f"{tokens[0]} {tokens[1]}"
        return UnknownDirectiveError(source, line, "unknown sub-command", directive=offending)
    return UnknownDirectiveError(source, line, "not a valid directive", directive=tokens[0])


def parse_line(lexed: LexedLine, *, source: str = STRING_SOURCE) -> Directive:
    """Parse a single lexed line into a typed directive.

    Args:
        lexed: Tokens of one directive line.
        source: Name of the file the line belongs to, used in diagnostics.

    Returns:
        The typed directive.

    Raises:
        DirectiveSyntaxError: A tab or other whitespace separates the name.
        UnknownDirectiveError: No registered directive matches the line.
        DirectiveArityError: Wrong number of arguments.
        DirectiveTypeError: An argument does not parse as its kind.
        DirectiveRangeError: A numeric argument is outside its range.
    """
    resolved = resolve_directive(lexed.tokens)
    if resolved is None:
        raise _unresolved_error(lexed.tokens, source=source, line=lexed.line)
    spec, width = resolved
    raw_args = lexed.tokens[width:]
    low, high = spec.arity
    if not low <= len(raw_args) <= high:
        raise DirectiveArityError(
            source,
            lexed.line,
            directive=spec.name.value,
            expected=spec.arity,
            received=len(raw_args),
        )
    values: list[ArgValue] = []
    for kind, token in zip(spec.kinds, raw_args, strict=True):
        try:
            values.append(convert_argument(kind, token, spec))
        except _ArgumentError as exc:
            error_type = DirectiveRangeError if exc.out_of_range else DirectiveTypeError
            raise error_type(source, lexed.line, str(exc), directive=spec.name.value) from exc
    return Directive(name=spec.name, args=tuple(values), line=lexed.line, source=source)


def iter_directives(lines: Iterable[LexedLine], *, source: str = STRING_SOURCE) -> Iterator[Directive]:
    """Yield typed directives for ``lines`` in file order."""
    for lexed in lines:
        directive = parse_line(lexed, source=source)
        logger.debug(
            "Parsed `%s` directive",
            directive.name.value,
            extra=structured_extra(
                LogComponent.CONFIG,
                path=source,
                line=directive.line,
                directive=directive.name.value,
            ),
        )
        yield directive


def parse_directives(text: str, *, source: str = STRING_SOURCE) -> tuple[Directive, ...]:
    """Lex and parse configuration ``text`` into an ordered tuple of directives.

    Args:
        text: Full configuration file content.
        source: Name used in diagnostics.

    Returns:
        Typed directives in file order.
    """
    return tuple(iter_directives(Lexer(text), source=source))


__all__ = [
    "ArgValue",
    "Directive",
    "convert_argument",
    "iter_directives",
    "parse_bounded_integer",
    "parse_directives",
    "parse_ip_address",
    "parse_line",
    "parse_pattern",
    "parse_socket_address",
]
