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

"""Configuration loading and path resolution for mdchat_serverconf.

This module runs the full pipeline (lex, parse, fold, validate) over text or
files. Several files can be layered: their directives are folded in the order
given, so later scalars overwrite earlier ones and collections merge, and the
result is validated once.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from mdchat_serverconf._internal.logging_utils import structured_extra
from mdchat_serverconf.core.model_types import LogComponent

from .builder import PolicyBuilder
from .constants import CONFIG_PATH_ENV, DEFAULT_CONFIG_PATH, STRING_SOURCE
from .errors import ConfigReadError
from .lexer import Lexer
from .parser import iter_directives
from .validator import validate

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from mdchat_serverconf.policy.models import PolicyModel

logger: logging.Logger = logging.getLogger("mdchat_serverconf.config")


@dataclass(slots=True, frozen=True)
class LoadedPolicy:
    """Container for a validated policy and the files it was loaded from.

    Attributes:
        policy: Validated, immutable policy.
        paths: Files folded into the policy, in load order.
    """

    policy: PolicyModel
    paths: tuple[Path, ...]


def resolve_config_paths(
    paths: Sequence[str | os.PathLike[str]] = (),
    *,
    environ: Mapping[str, str] | None = None,
) -> tuple[Path, ...]:
    """Return the configuration files to load.

    Explicit paths win over the ``MDCHAT_SERVER_CONFIG`` environment variable,
    which wins over the built-in default path.

    Args:
        paths: Paths given by the caller, possibly empty.
        environ: Environment mapping to consult, ``os.environ`` by default.

    Returns:
        Ordered tuple of candidate paths.
    """
    if paths:
        return tuple(Path(path) for path in paths)
    env = os.environ if environ is None else environ
    override = env.get(CONFIG_PATH_ENV, "").strip()
    if override:
        return (Path(override),)
    return (DEFAULT_CONFIG_PATH,)


def read_config_text(path: Path) -> str:
    """Read a configuration file as UTF-8.

    Raises:
        ConfigReadError: The file is missing, unreadable or not valid UTF-8.
    """
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigReadError(path, exc) from exc


def _fold_text(builder: PolicyBuilder, text: str, *, source: str) -> None:
    builder.fold(iter_directives(Lexer(text), source=source))


def parse_policy(text: str, *, source: str = STRING_SOURCE) -> PolicyModel:
    """Run the full pipeline over in-memory configuration text.

    Args:
        text: Configuration content.
        source: Name used in diagnostics.

    Returns:
        The validated policy.

    Raises:
        ConfigParseError: A line could not be parsed.
        PolicyValidationError: The folded configuration violates an invariant.
    """
    builder = PolicyBuilder()
    _fold_text(builder, text, source=source)
    return validate(builder.accumulator)


def load_policy_with_metadata(*paths: str | os.PathLike[str]) -> LoadedPolicy:
    """Load, fold and validate one or more configuration files.

    When no path is given the ``MDCHAT_SERVER_CONFIG`` environment variable
    or the default ``/etc/mdchat-server.conf`` is used.

    Args:
        *paths: Configuration files, folded in the order given.

    Returns:
        LoadedPolicy: Validated policy and the resolved source paths.

    Raises:
        ConfigReadError: A file could not be read.
        ConfigParseError: A line could not be parsed.
        PolicyValidationError: The folded configuration violates an invariant.
    """
    resolved = resolve_config_paths(paths)
    builder = PolicyBuilder()
    for path in resolved:
        logger.debug(
            "Reading configuration file %s",
            path,
            extra=structured_extra(LogComponent.CONFIG, path=path),
        )
        _fold_text(builder, read_config_text(path), source=str(path))
    policy = validate(builder.accumulator)
    return LoadedPolicy(policy=policy, paths=resolved)


def load_policy(*paths: str | os.PathLike[str]) -> PolicyModel:
    """Load and validate configuration files, returning only the policy."""
    return load_policy_with_metadata(*paths).policy


__all__ = [
    "LoadedPolicy",
    "load_policy",
    "load_policy_with_metadata",
    "parse_policy",
    "read_config_text",
    "resolve_config_paths",
]
