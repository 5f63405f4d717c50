"""apifox_import -- upload an OpenAPI/Swagger document to an Apifox project.

The package reads a local specification document and POSTs it, together with
a set of placement and overwrite options, to Apifox's ``import-openapi``
endpoint.

Typical usage::

    apifox-import --projectID 12345 --token "$APIFOX_TOKEN" --file swagger.yaml

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models for the payload, configuration and results.
    config: Precedence resolution of CLI flags, env vars and project config.
    document: Reading the document to upload.
    client: The importer itself, built on :mod:`httpx`.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.3.0"
