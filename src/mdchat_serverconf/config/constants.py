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

"""Shared defaults for locating and lexing server configuration files."""

from __future__ import annotations

from pathlib import Path
from typing import Final

DEFAULT_CONFIG_PATH: Final[Path] = Path("/etc/mdchat-server.conf")
CONFIG_PATH_ENV: Final[str] = "MDCHAT_SERVER_CONFIG"
STRING_SOURCE: Final[str] = "<string>"

COMMENT_CHAR: Final[str] = "#"
ESCAPED_COMMENT: Final[str] = "\\#"
TOKEN_SEPARATOR: Final[str] = " "
LINE_TERMINATOR: Final[str] = "\n"
CARRIAGE_RETURN: Final[str] = "\r"

__all__ = [
    "CARRIAGE_RETURN",
    "COMMENT_CHAR",
    "CONFIG_PATH_ENV",
    "DEFAULT_CONFIG_PATH",
    "ESCAPED_COMMENT",
    "LINE_TERMINATOR",
    "STRING_SOURCE",
    "TOKEN_SEPARATOR",
]
