"""Typer application and CLI entry point for apifox_import.

The application has a single command: read the document named by
``--file`` and upload it to the Apifox project named by ``--projectID``.
Flag names match the Apifox API field names so that the command line reads
like the request it produces.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs a signal handler and invokes the Typer app.
Unhandled exceptions are written to a crash log under the data directory.

See Also:
    :mod:`apifox_import.config`: Precedence resolution of flag values.
    :mod:`apifox_import.client`: The importer itself.
"""

from __future__ import annotations

import logging
import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer
from click.core import ParameterSource

from apifox_import.client import display_import_result, import_file
from apifox_import.config import load_build_info, resolve_config
from apifox_import.exceptions import ImporterError
from apifox_import.exit_codes import EXIT_GENERIC_FAILURE
from apifox_import.models import (
    DEFAULT_API_VERSION,
    DEFAULT_DOCUMENT_PATH,
    DEFAULT_OVERWRITE_BEHAVIOR,
    KNOWN_OVERWRITE_BEHAVIORS,
)
from apifox_import.output import OutputManager, error, info, set_output, success

COMPLETED_MESSAGE = "apifox import completed."

_API_REF = "See https://apifox-openapi.apifox.cn/api-173409873"
_OVERWRITE_HELP = (
    f"One of {', '.join(KNOWN_OVERWRITE_BEHAVIORS)} (sent verbatim). {_API_REF}"
)

app = typer.Typer(
    name="apifox-import",
    help="Upload an OpenAPI/Swagger document to an Apifox project.",
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    """Print build metadata and exit when -v/--version is passed."""
    if value:
        build = load_build_info()
        typer.echo(f"version: {build.version}")
        typer.echo(f"build_time: {build.build_time}")
        raise typer.Exit()


def _explicit_params(ctx: typer.Context, names: list[str]) -> set[str]:
    """Return the parameters whose value came from the command line or environment."""
    explicit: set[str] = set()
    for name in names:
        source = ctx.get_parameter_source(name)
        if source in (ParameterSource.COMMANDLINE, ParameterSource.ENVIRONMENT):
            explicit.add(name)
    return explicit


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s.%(msecs)03d %(name)s: %(message)s",
        datefmt="%Y/%m/%d %H:%M:%S",
    )


@app.command()
def import_command(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "-v",
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show build metadata and exit.",
    ),
    project_id: Optional[str] = typer.Option(
        None,
        "--projectID",
        "--project-id",
        envvar="APIFOX_PROJECT_ID",
        help="Apifox project id. Required.",
    ),
    api_version: str = typer.Option(
        DEFAULT_API_VERSION,
        "--apiver",
        envvar="APIFOX_API_VERSION",
        help="Value of the X-Apifox-Api-Version header.",
    ),
    token: Optional[str] = typer.Option(
        None,
        "--token",
        envvar="APIFOX_TOKEN",
        help="Apifox API access token. Required.",
    ),
    file: str = typer.Option(
        DEFAULT_DOCUMENT_PATH,
        "--file",
        help="Path of the document to upload ('-' reads stdin).",
    ),
    target_endpoint_folder_id: int = typer.Option(
        0, "--targetEndpointFolderId", help=f"Endpoint folder id, 0 for none. {_API_REF}"
    ),
    target_schema_folder_id: int = typer.Option(
        0, "--targetSchemaFolderId", help=f"Schema folder id, 0 for none. {_API_REF}"
    ),
    endpoint_overwrite_behavior: str = typer.Option(
        DEFAULT_OVERWRITE_BEHAVIOR, "--endpointOverwriteBehavior", help=_OVERWRITE_HELP
    ),
    schema_overwrite_behavior: str = typer.Option(
        DEFAULT_OVERWRITE_BEHAVIOR, "--schemaOverwriteBehavior", help=_OVERWRITE_HELP
    ),
    update_folder_of_changed_endpoint: bool = typer.Option(
        False, "--updateFolderOfChangedEndpoint", help=_API_REF
    ),
    prepend_base_path: bool = typer.Option(False, "--prependBasePath", help=_API_REF),
    verbose: bool = typer.Option(
        False, "--verbose", help="Echo the response body and show debug output."
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", min=0, help="Request timeout in seconds. Default: wait forever."
    ),
    config_file: Optional[str] = typer.Option(
        None, "--config", help="Project config file. Default: ./apifox-import.json if present."
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", "-n", help="Print the request instead of sending it."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
) -> None:
    """Upload an OpenAPI/Swagger document to an Apifox project.

    Any response Apifox sends back counts as a completed import, whatever
    its HTTP status; use --verbose to see the response body.

    Raises:
        typer.Exit: With the failing stage's exit code on any error.
    """
    set_output(OutputManager(no_color=no_color, quiet=quiet, verbose=verbose))
    _configure_logging(verbose)

    cli_values: dict[str, Any] = {
        "project_id": project_id,
        "api_version": api_version,
        "token": token,
        "file": file,
        "target_endpoint_folder_id": target_endpoint_folder_id,
        "target_schema_folder_id": target_schema_folder_id,
        "endpoint_overwrite_behavior": endpoint_overwrite_behavior,
        "schema_overwrite_behavior": schema_overwrite_behavior,
        "update_folder_of_changed_endpoint": update_folder_of_changed_endpoint,
        "prepend_base_path": prepend_base_path,
        "timeout": timeout,
        "verbose": verbose,
    }

    try:
        config, document_path = resolve_config(
            cli_values,
            explicit=_explicit_params(ctx, list(cli_values)),
            config_path=config_file,
        )
        result = import_file(document_path, config, dry_run=dry_run)
    except ImporterError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    display_import_result(result, verbose=config.verbose)

    if result.dry_run:
        info("Dry run: nothing was sent.")
    else:
        success(COMPLETED_MESSAGE)


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from apifox_import.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``apifox-import`` console script.

    :class:`~apifox_import.exceptions.ImporterError` is normally handled by
    the command itself; anything that escapes produces a clean exit with its
    ``exit_code``. All other exceptions produce a crash log and a generic
    failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        if isinstance(exc, ImporterError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log(exc)
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
