"""Integration tests for the apifox-import command.

The command is driven through Typer's CliRunner with the network replaced by
a recording :class:`httpx.MockTransport`, so each test can assert both the
exit status and exactly what (if anything) was sent to Apifox.
"""

from __future__ import annotations

import functools
import json
from pathlib import Path

import pytest

from apifox_import import __version__
from apifox_import import app as app_module
from apifox_import.app import COMPLETED_MESSAGE, app, main
from apifox_import.client.importer import import_file
from apifox_import.exit_codes import (
    EXIT_CONNECTION_ERROR,
    EXIT_FILE_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_RESPONSE_ERROR,
)

IMPORT_URL = "https://api.apifox.com/v1/projects/12345/import-openapi?locale=zh-CN"


@pytest.fixture
def use_transport(monkeypatch: pytest.MonkeyPatch):
    """Route the command's HTTP traffic through the given transport."""

    def _install(transport) -> None:
        monkeypatch.setattr(
            app_module, "import_file", functools.partial(import_file, transport=transport)
        )

    return _install


def _base_args(spec_file: Path) -> list[str]:
    return ["--projectID", "12345", "--token", "abc", "--file", str(spec_file)]


def _sent_json(transport) -> dict:
    return json.loads(transport.requests[0].content.decode("utf-8"))


# ---------------------------------------------------------------------------
# Successful imports
# ---------------------------------------------------------------------------


class TestImportCommand:
    def test_uploads_document(
        self, cli_runner, isolated_env, spec_file, transport, use_transport
    ) -> None:
        use_transport(transport)

        result = cli_runner.invoke(app, _base_args(spec_file))

        assert result.exit_code == 0, result.output
        assert COMPLETED_MESSAGE in result.output
        request = transport.requests[0]
        assert str(request.url) == IMPORT_URL
        assert request.headers["Authorization"] == "Bearer abc"
        assert request.headers["X-Apifox-Api-Version"] == "2024-03-28"
        assert _sent_json(transport)["input"] == spec_file.read_text(encoding="utf-8")

    def test_default_options(
        self, cli_runner, isolated_env, spec_file, transport, use_transport
    ) -> None:
        use_transport(transport)

        cli_runner.invoke(app, _base_args(spec_file))

        assert _sent_json(transport)["options"] == {
            "targetEndpointFolderId": 0,
            "targetSchemaFolderId": 0,
            "endpointOverwriteBehavior": "OVERWRITE_EXISTING",
            "schemaOverwriteBehavior": "OVERWRITE_EXISTING",
            "updateFolderOfChangedEndpoint": False,
            "prependBasePath": False,
        }

    def test_all_option_flags(
        self, cli_runner, isolated_env, spec_file, transport, use_transport
    ) -> None:
        use_transport(transport)

        result = cli_runner.invoke(
            app,
            _base_args(spec_file)
            + [
                "--apiver",
                "2025-06-01",
                "--targetEndpointFolderId",
                "11",
                "--targetSchemaFolderId",
                "22",
                "--endpointOverwriteBehavior",
                "AUTO_MERGE",
                "--schemaOverwriteBehavior",
                "KEEP_EXISTING",
                "--updateFolderOfChangedEndpoint",
                "--prependBasePath",
            ],
        )

        assert result.exit_code == 0, result.output
        assert transport.requests[0].headers["X-Apifox-Api-Version"] == "2025-06-01"
        assert _sent_json(transport)["options"] == {
            "targetEndpointFolderId": 11,
            "targetSchemaFolderId": 22,
            "endpointOverwriteBehavior": "AUTO_MERGE",
            "schemaOverwriteBehavior": "KEEP_EXISTING",
            "updateFolderOfChangedEndpoint": True,
            "prependBasePath": True,
        }

    def test_server_error_still_completes(
        self, cli_runner, isolated_env, spec_file, make_transport, use_transport
    ) -> None:
        """A 500 from Apifox is reported as a completed import, exit 0."""
        transport = make_transport(500, b'{"success": false}')
        use_transport(transport)

        result = cli_runner.invoke(app, _base_args(spec_file))

        assert result.exit_code == 0, result.output
        assert COMPLETED_MESSAGE in result.output

    def test_verbose_echoes_body(
        self, cli_runner, isolated_env, spec_file, make_transport, use_transport
    ) -> None:
        use_transport(make_transport(200, b'{"data":{"counters":{"endpointCreated":2}}}'))

        result = cli_runner.invoke(app, _base_args(spec_file) + ["--verbose"])

        assert result.exit_code == 0, result.output
        assert 'Result: {"data":{"counters":{"endpointCreated":2}}}' in result.output

    def test_body_not_echoed_without_verbose(
        self, cli_runner, isolated_env, spec_file, make_transport, use_transport
    ) -> None:
        use_transport(make_transport(200, b"secret-body"))

        result = cli_runner.invoke(app, _base_args(spec_file))

        assert "secret-body" not in result.output

    def test_quiet_hides_completion_message(
        self, cli_runner, isolated_env, spec_file, transport, use_transport
    ) -> None:
        use_transport(transport)

        result = cli_runner.invoke(app, _base_args(spec_file) + ["--quiet"])

        assert result.exit_code == 0
        assert COMPLETED_MESSAGE not in result.output

    def test_reads_stdin(self, cli_runner, isolated_env, transport, use_transport) -> None:
        use_transport(transport)

        result = cli_runner.invoke(
            app,
            ["--projectID", "12345", "--token", "abc", "--file", "-"],
            input="openapi: 3.1.0\n",
        )

        assert result.exit_code == 0, result.output
        assert _sent_json(transport)["input"] == "openapi: 3.1.0\n"

    def test_dry_run_sends_nothing(
        self, cli_runner, isolated_env, spec_file, transport, use_transport
    ) -> None:
        use_transport(transport)

        result = cli_runner.invoke(app, _base_args(spec_file) + ["--dry-run"])

        assert result.exit_code == 0, result.output
        assert transport.requests == []
        assert f"[dry-run] POST {IMPORT_URL}" in result.output
        assert "Bearer abc" not in result.output
        assert COMPLETED_MESSAGE not in result.output


# ---------------------------------------------------------------------------
# Configuration sources
# ---------------------------------------------------------------------------


class TestConfigurationSources:
    def test_env_vars(
        self, cli_runner, isolated_env, spec_file, transport, use_transport, monkeypatch
    ) -> None:
        monkeypatch.setenv("APIFOX_PROJECT_ID", "12345")
        monkeypatch.setenv("APIFOX_TOKEN", "env-token")
        use_transport(transport)

        result = cli_runner.invoke(app, ["--file", str(spec_file)])

        assert result.exit_code == 0, result.output
        assert str(transport.requests[0].url) == IMPORT_URL
        assert transport.requests[0].headers["Authorization"] == "Bearer env-token"

    def test_project_config_file(
        self, cli_runner, isolated_env, spec_file, transport, use_transport
    ) -> None:
        (isolated_env / "apifox-import.json").write_text(
            json.dumps(
                {
                    "projectID": "12345",
                    "file": spec_file.name,
                    "targetSchemaFolderId": 9,
                    "prependBasePath": True,
                }
            ),
            encoding="utf-8",
        )
        use_transport(transport)

        result = cli_runner.invoke(app, ["--token", "abc"])

        assert result.exit_code == 0, result.output
        assert str(transport.requests[0].url) == IMPORT_URL
        options = _sent_json(transport)["options"]
        assert options["targetSchemaFolderId"] == 9
        assert options["prependBasePath"] is True

    def test_flags_and_env_beat_project_config(
        self, cli_runner, isolated_env, spec_file, transport, use_transport, monkeypatch
    ) -> None:
        (isolated_env / "apifox-import.json").write_text(
            json.dumps({"projectID": "from-file", "token": "file-token", "targetSchemaFolderId": 9}),
            encoding="utf-8",
        )
        monkeypatch.setenv("APIFOX_TOKEN", "env-token")
        use_transport(transport)

        result = cli_runner.invoke(
            app,
            [
                "--projectID",
                "12345",
                "--targetSchemaFolderId",
                "0",
                "--file",
                str(spec_file),
            ],
        )

        assert result.exit_code == 0, result.output
        request = transport.requests[0]
        assert str(request.url) == IMPORT_URL
        assert request.headers["Authorization"] == "Bearer env-token"
        assert _sent_json(transport)["options"]["targetSchemaFolderId"] == 0

    def test_invalid_project_config(
        self, cli_runner, isolated_env, spec_file, transport, use_transport
    ) -> None:
        (isolated_env / "apifox-import.json").write_text("{oops", encoding="utf-8")
        use_transport(transport)

        result = cli_runner.invoke(app, _base_args(spec_file))

        assert result.exit_code == EXIT_GENERIC_FAILURE
        assert "Invalid project config" in result.output
        assert transport.requests == []


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------


class TestFailures:
    def test_missing_file_fails_before_network(
        self, cli_runner, isolated_env, transport, use_transport
    ) -> None:
        use_transport(transport)

        result = cli_runner.invoke(
            app, ["--projectID", "12345", "--token", "abc", "--file", "missing.yaml"]
        )

        assert result.exit_code == EXIT_FILE_ERROR
        assert "read swagger file (missing.yaml)" in result.output
        assert transport.requests == []
        assert COMPLETED_MESSAGE not in result.output

    def test_default_file_name(self, cli_runner, isolated_env, transport, use_transport) -> None:
        use_transport(transport)

        result = cli_runner.invoke(app, ["--projectID", "12345", "--token", "abc"])

        assert result.exit_code == EXIT_FILE_ERROR
        assert "swagger.yaml" in result.output

    def test_missing_project_id(self, cli_runner, isolated_env, spec_file) -> None:
        result = cli_runner.invoke(app, ["--token", "abc", "--file", str(spec_file)])

        assert result.exit_code == EXIT_INVALID_USAGE
        assert "--projectID" in result.output

    def test_missing_token(self, cli_runner, isolated_env, spec_file) -> None:
        result = cli_runner.invoke(app, ["--projectID", "1", "--file", str(spec_file)])

        assert result.exit_code == EXIT_INVALID_USAGE
        assert "--token" in result.output

    def test_connection_error(
        self, cli_runner, isolated_env, spec_file, use_transport
    ) -> None:
        import httpx

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Name or service not known", request=request)

        use_transport(httpx.MockTransport(handler))

        result = cli_runner.invoke(app, _base_args(spec_file))

        assert result.exit_code == EXIT_CONNECTION_ERROR
        assert "request import" in result.output
        assert COMPLETED_MESSAGE not in result.output

    def test_truncated_response(
        self, cli_runner, isolated_env, spec_file, use_transport
    ) -> None:
        import httpx

        class _Truncated(httpx.SyncByteStream):
            def __iter__(self):
                yield b"{"
                raise httpx.RemoteProtocolError("peer closed connection")

        use_transport(httpx.MockTransport(lambda request: httpx.Response(200, stream=_Truncated())))

        result = cli_runner.invoke(app, _base_args(spec_file))

        assert result.exit_code == EXIT_RESPONSE_ERROR
        assert "read response" in result.output


# ---------------------------------------------------------------------------
# Version
# ---------------------------------------------------------------------------


class TestVersion:
    @pytest.mark.parametrize("flag", ["-v", "--version"])
    def test_prints_build_metadata(self, cli_runner, isolated_env, flag: str) -> None:
        result = cli_runner.invoke(app, [flag])

        assert result.exit_code == 0
        assert f"version: {__version__}" in result.output
        assert "build_time: unknown" in result.output

    def test_build_time_injected(self, cli_runner, isolated_env, monkeypatch) -> None:
        monkeypatch.setenv("APIFOX_IMPORT_BUILD_TIME", "2024-06-01 12:00:00")

        result = cli_runner.invoke(app, ["-v"])

        assert "build_time: 2024-06-01 12:00:00" in result.output

    def test_version_skips_import(
        self, cli_runner, isolated_env, spec_file, transport, use_transport
    ) -> None:
        use_transport(transport)

        result = cli_runner.invoke(app, _base_args(spec_file) + ["-v"])

        assert result.exit_code == 0
        assert transport.requests == []


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


class TestMain:
    def test_unexpected_error_writes_crash_log(
        self, isolated_env, monkeypatch, capsys
    ) -> None:
        def _boom() -> None:
            raise RuntimeError("kaboom")

        monkeypatch.setattr(app_module, "_setup_signal_handlers", lambda: None)
        monkeypatch.setattr(app_module, "app", _boom)
        monkeypatch.setattr("apifox_import.config._is_xdg_platform", lambda: True)

        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == EXIT_GENERIC_FAILURE
        logs = list((isolated_env / "data" / "apifox-import" / "logs").glob("crash-*.log"))
        assert len(logs) == 1
        assert "kaboom" in logs[0].read_text()
        assert "Unexpected error" in capsys.readouterr().err
