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

"""Render fatal configuration errors as coded CLI diagnostics."""

from __future__ import annotations

import logging
from typing import Final

from mdchat_serverconf._internal.error_codes import error_code_for
from mdchat_serverconf._internal.exceptions import ServerconfError
from mdchat_serverconf._internal.logging_utils import structured_extra
from mdchat_serverconf.config.errors import PolicyValidationError
from mdchat_serverconf.core.model_types import LogComponent

from .io import echo

logger: logging.Logger = logging.getLogger("mdchat_serverconf.cli")

CONFIG_ERROR_EXIT_CODE: Final[int] = 1


def diagnostic_lines(exc: ServerconfError) -> list[str]:
    """Return one ``<code>: <message>`` line per problem carried by ``exc``."""
    code = error_code_for(exc)
    if isinstance(exc, PolicyValidationError):
        return [f"{code}: {violation}" for violation in exc.violations]
    return [f"{code}: {exc}"]


def report_error(exc: ServerconfError) -> int:
    """Print diagnostics for ``exc`` on stderr and return the exit code to use."""
    lines = diagnostic_lines(exc)
    for line in lines:
        echo(line, err=True)
    logger.debug(
        "Reported %d diagnostic(s)",
        len(lines),
        extra=structured_extra(
            LogComponent.CLI,
            error_code=error_code_for(exc),
            exit_code=CONFIG_ERROR_EXIT_CODE,
        ),
    )
    return CONFIG_ERROR_EXIT_CODE


__all__ = ["CONFIG_ERROR_EXIT_CODE", "diagnostic_lines", "report_error"]
