"""Shared test fixtures for apifox_import.

Provides reusable fixtures for building configurations, recording HTTP
traffic through :class:`httpx.MockTransport`, isolating the environment and
running the CLI. These fixtures are automatically discovered by pytest and
available to all test modules without explicit imports.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import httpx
import pytest

from apifox_import.models import ImporterConfig, ImportOptions
from apifox_import.output import reset_output


SAMPLE_DOCUMENT = """\
openapi: 3.0.3
info:
  title: Petstore
  version: 1.0.0
paths:
  /pets:
    get:
      summary: "List all pets"
      responses:
        "200":
          description: A list of pets
"""


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time.  When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale
    ("I/O operation on closed file").  Resetting forces a fresh manager
    to be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def importer_config() -> ImporterConfig:
    """A configuration with default options for project 12345."""
    return ImporterConfig(project_id="12345", token="abc", options=ImportOptions())


@pytest.fixture
def spec_file(tmp_path: Path) -> Path:
    """A small OpenAPI document written to tmp_path."""
    path = tmp_path / "swagger.yaml"
    path.write_text(SAMPLE_DOCUMENT, encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# HTTP fixtures
# ---------------------------------------------------------------------------


class RecordingTransport(httpx.MockTransport):
    """MockTransport that remembers every request it receives.

    Args:
        status_code: Status of the canned response.
        body: Raw body of the canned response.
    """

    def __init__(self, status_code: int = 200, body: bytes = b'{"success": true}') -> None:
        self.requests: list[httpx.Request] = []
        self.status_code = status_code
        self.body = body
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(
            self.status_code,
            content=self.body,
            headers={"content-type": "application/json"},
        )


@pytest.fixture
def make_transport() -> Callable[..., RecordingTransport]:
    """Factory for :class:`RecordingTransport` instances."""
    return RecordingTransport


@pytest.fixture
def transport() -> RecordingTransport:
    """A RecordingTransport answering 200 with a small JSON body."""
    return RecordingTransport()


# ---------------------------------------------------------------------------
# Environment isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate the process environment to a temporary directory.

    Clears all APIFOX_* environment variables, points XDG_DATA_HOME into
    tmp_path, disables colour so that Rich never wraps diagnostics, and
    changes the working directory to tmp_path so that no stray
    ``apifox-import.json`` is picked up.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    for var in [
        "APIFOX_PROJECT_ID",
        "APIFOX_TOKEN",
        "APIFOX_API_VERSION",
        "APIFOX_IMPORT_BUILD_TIME",
    ]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setenv("NO_COLOR", "1")
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
