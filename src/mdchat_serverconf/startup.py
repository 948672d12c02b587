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

"""Startup gate used by the chat server before it binds any socket.

Either a fully validated policy is returned or the process exits with
status 1 after logging the diagnostic; no partially configured server is
ever started.
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Final

from mdchat_serverconf._internal.error_codes import error_code_for
from mdchat_serverconf._internal.logging_utils import structured_extra
from mdchat_serverconf.config.errors import (
    ConfigParseError,
    ConfigReadError,
    ConfigValidationError,
    PolicyValidationError,
)
from mdchat_serverconf.config.loader import load_policy_with_metadata
from mdchat_serverconf.core.model_types import LogComponent

if TYPE_CHECKING:
    from mdchat_serverconf.policy.models import PolicyModel

logger: logging.Logger = logging.getLogger("mdchat_serverconf.startup")

STARTUP_FAILURE_EXIT_CODE: Final[int] = 1


def _log_fatal(exc: ConfigValidationError) -> None:
    code = error_code_for(exc)
    if isinstance(exc, PolicyValidationError):
        for violation in exc.violations:
            logger.critical(
                "%s: %s",
                code,
                violation,
                extra=structured_extra(
                    LogComponent.STARTUP,
                    path=violation.source,
                    line=violation.line,
                    error_code=code,
                    exit_code=STARTUP_FAILURE_EXIT_CODE,
                    details={"kind": violation.kind.value},
                ),
            )
        return
    if isinstance(exc, ConfigParseError):
        logger.critical(
            "%s: %s",
            code,
            exc,
            extra=structured_extra(
                LogComponent.STARTUP,
                path=exc.source,
                line=exc.line,
                directive=exc.directive,
                error_code=code,
                exit_code=STARTUP_FAILURE_EXIT_CODE,
                details={"description": exc.description},
            ),
        )
        return
    path = exc.path if isinstance(exc, ConfigReadError) else None
    logger.critical(
        "%s: %s",
        code,
        exc,
        extra=structured_extra(
            LogComponent.STARTUP,
            path=path,
            error_code=code,
            exit_code=STARTUP_FAILURE_EXIT_CODE,
        ),
    )


def load_startup_policy(*paths: str | os.PathLike[str]) -> PolicyModel:
    """Load the server policy or terminate the process.

    Args:
        *paths: Configuration files to fold, in order. Without paths the
            ``MDCHAT_SERVER_CONFIG`` environment variable or the default
            path is used.

    Returns:
        The validated policy.

    Raises:
        SystemExit: With status 1 when the configuration cannot be read,
            parsed or validated.
    """
    try:
        loaded = load_policy_with_metadata(*paths)
    except ConfigValidationError as exc:
        _log_fatal(exc)
        raise SystemExit(STARTUP_FAILURE_EXIT_CODE) from exc
    location = ", ".join(str(path) for path in loaded.paths)
    logger.info(
        "Configuration file loaded successfully",
        extra=structured_extra(
            LogComponent.STARTUP,
            path=location,
            counts={"listen": len(loaded.policy.listen)},
        ),
    )
    return loaded.policy


__all__ = ["STARTUP_FAILURE_EXIT_CODE", "load_startup_policy"]
