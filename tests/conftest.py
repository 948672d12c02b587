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

"""Pytest entry point that wires shared fixtures and markers."""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from mdchat_serverconf._internal.logging_utils import CHILD_LOGGERS, ROOT_LOGGER_NAME  # noqa: E402
from mdchat_serverconf.config.constants import CONFIG_PATH_ENV  # noqa: E402

ConfigWriter = Callable[..., Path]


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with the custom markers used by the test suite."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line(
        "markers",
        "integration: Integration tests (slower, multiple components)",
    )
    config.addinivalue_line("markers", "property: Property-based tests")
    config.addinivalue_line("markers", "cli: CLI-related tests")


@pytest.fixture(autouse=True)
def _reset_package_logging(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Undo ``configure_logging`` side effects so caplog keeps working."""
    monkeypatch.delenv(CONFIG_PATH_ENV, raising=False)
    monkeypatch.delenv("MDCHAT_SERVERCONF_LOG_FORMAT", raising=False)
    monkeypatch.delenv("MDCHAT_SERVERCONF_LOG_LEVEL", raising=False)
    yield
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.handlers.clear()
    root.setLevel(logging.NOTSET)
    root.propagate = True
    for child in CHILD_LOGGERS:
        logging.getLogger(child).setLevel(logging.NOTSET)


@pytest.fixture
def write_config(tmp_path: Path) -> ConfigWriter:
    """Return a helper writing configuration text to a file under ``tmp_path``."""

    def _write(text: str, name: str = "mdchat-server.conf") -> Path:
        path = tmp_path / name
        _ = path.write_text(text, encoding="utf-8")
        return path

    return _write
