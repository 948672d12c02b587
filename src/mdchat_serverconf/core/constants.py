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

"""Numeric limits of the server configuration language."""

from __future__ import annotations

from typing import Final

NOLIMIT_KEYWORD: Final[str] = "nolimit"

NICKNAME_LENGTH_CEILING: Final[int] = 255
MESSAGE_LENGTH_CEILING: Final[int] = 65535
MIN_LENGTH_FLOOR: Final[int] = 1
PORT_MAX: Final[int] = 65535

__all__ = [
    "MESSAGE_LENGTH_CEILING",
    "MIN_LENGTH_FLOOR",
    "NICKNAME_LENGTH_CEILING",
    "NOLIMIT_KEYWORD",
    "PORT_MAX",
]
