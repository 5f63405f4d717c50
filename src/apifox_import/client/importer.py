"""Synchronous Apifox import client.

This module provides :class:`ImportClient`, which uploads one document to
Apifox's OpenAPI import endpoint::

    POST https://api.apifox.com/v1/projects/{projectID}/import-openapi?locale=zh-CN
    X-Apifox-Api-Version: 2024-03-28
    Authorization: Bearer <token>
    Content-Type: application/json

    {"input": "<document text>", "options": {"targetEndpointFolderId": 0, ...}}

The upload is a single linear chain -- encode, build, send, read -- where
each step either succeeds or raises the
:class:`~apifox_import.exceptions.ImporterError` subclass naming that stage.
There is no retry.

The HTTP status code is not inspected. Any response that is received in
full, 4xx and 5xx included, is returned as an
:class:`~apifox_import.models.ImportResult`; whether that counts as a
failure is for the caller to decide.

See Also:
    https://apifox-openapi.apifox.cn/api-173409873 for the endpoint reference.
"""

from __future__ import annotations

from typing import Optional

import httpx
from pydantic_core import PydanticSerializationError

from apifox_import.document import read_document
from apifox_import.exceptions import (
    EncodingError,
    RequestConstructionError,
    ResponseReadError,
    TransportError,
)
from apifox_import.models import ImporterConfig, ImportOptions, ImportPayload, ImportResult
from apifox_import.output import get_output

IMPORT_URL_TEMPLATE = (
    "https://api.apifox.com/v1/projects/{project_id}/import-openapi?locale=zh-CN"
)
API_VERSION_HEADER = "X-Apifox-Api-Version"


def build_import_url(project_id: str) -> str:
    """Return the import endpoint URL for *project_id*, substituted verbatim."""
    return IMPORT_URL_TEMPLATE.format(project_id=project_id)


def build_headers(config: ImporterConfig) -> dict[str, str]:
    """Return the versioning, auth and content-type headers for an import."""
    return {
        API_VERSION_HEADER: config.api_version,
        "Authorization": f"Bearer {config.token}",
        "Content-Type": "application/json",
    }


def build_payload(document: str, options: ImportOptions) -> ImportPayload:
    """Wrap *document* and *options* in an :class:`ImportPayload`."""
    return ImportPayload(input=document, options=options)


def encode_payload(payload: ImportPayload) -> bytes:
    """Serialise *payload* to UTF-8 JSON using the camelCase wire names.

    Raises:
        EncodingError: If the payload cannot be serialised.
    """
    try:
        return payload.model_dump_json(by_alias=True).encode("utf-8")
    except (PydanticSerializationError, UnicodeEncodeError) as exc:
        raise EncodingError(f"encode payload: {exc}") from exc


class ImportClient:
    """Blocking client that uploads documents to Apifox.

    Wraps :class:`httpx.Client`. Must be used as a context manager so that
    the underlying connection pool is opened and closed.

    Args:
        config: The resolved, immutable import configuration.
        transport: Optional httpx transport, e.g. :class:`httpx.MockTransport`
            in tests. ``None`` uses the default network transport.
        dry_run: When ``True``, the request is printed to stderr and a
            synthetic result is returned without network I/O.

    Example::

        with ImportClient(config) as client:
            result = client.import_document(text)
    """

    def __init__(
        self,
        config: ImporterConfig,
        transport: Optional[httpx.BaseTransport] = None,
        dry_run: bool = False,
    ) -> None:
        self._config = config
        self._transport = transport
        self._dry_run = dry_run
        self._client: Optional[httpx.Client] = None

    # ------------------------------------------------------------------ #
    # Context manager
    # ------------------------------------------------------------------ #

    def __enter__(self) -> ImportClient:
        # timeout=None disables httpx's default 5 s timeout.
        self._client = httpx.Client(
            timeout=self._config.timeout,
            follow_redirects=True,
            transport=self._transport,
        )
        return self

    def __exit__(self, *args: object) -> None:
        if self._client:
            self._client.close()
            self._client = None

    # ------------------------------------------------------------------ #
    # Import
    # ------------------------------------------------------------------ #

    def import_document(self, document: str) -> ImportResult:
        """Upload *document* and return once the response is fully read.

        Args:
            document: The full text of the specification document.

        Returns:
            An :class:`ImportResult` carrying the status and raw body,
            whatever the status code.

        Raises:
            EncodingError: If the payload cannot be serialised.
            RequestConstructionError: If the URL or headers are malformed.
            TransportError: On DNS, connection, TLS or timeout failures.
            ResponseReadError: If the body cannot be read in full.
        """
        assert self._client is not None, "Client not initialised -- use as context manager"

        body = encode_payload(build_payload(document, self._config.options))
        url = build_import_url(self._config.project_id)
        headers = build_headers(self._config)

        if self._dry_run:
            return self._print_dry_run(url, headers, body)

        try:
            request = self._client.build_request("POST", url, headers=headers, content=body)
        except (httpx.InvalidURL, UnicodeEncodeError) as exc:
            raise RequestConstructionError(f"create request ({url!r}): {exc}") from exc

        output = get_output()
        output.debug(f"POST {url} ({len(body)} bytes)")

        try:
            response = self._client.send(request, stream=True)
        except httpx.RequestError as exc:
            raise TransportError(f"request import ({url}): {exc}") from exc

        try:
            content = response.read()
        except (httpx.RequestError, httpx.StreamError) as exc:
            raise ResponseReadError(f"read response ({url}): {exc}") from exc
        finally:
            response.close()

        output.debug(f"HTTP {response.status_code} {response.reason_phrase or ''}".rstrip())

        return ImportResult(
            status_code=response.status_code,
            reason_phrase=response.reason_phrase or "",
            content=content,
            content_type=response.headers.get("content-type"),
        )

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _print_dry_run(self, url: str, headers: dict[str, str], body: bytes) -> ImportResult:
        """Print request details to stderr and return a synthetic result."""
        output = get_output()
        output.info(f"[dry-run] POST {url}")
        for key, value in headers.items():
            if key == "Authorization":
                value = "Bearer ***"
            output.info(f"  Header: {key}: {value}")
        output.info(f"  Body: {len(body)} bytes of JSON")

        return ImportResult(status_code=0, dry_run=True)


def import_document(
    document: str,
    config: ImporterConfig,
    transport: Optional[httpx.BaseTransport] = None,
    dry_run: bool = False,
) -> ImportResult:
    """Upload *document* using a short-lived :class:`ImportClient`.

    See :meth:`ImportClient.import_document` for the errors raised.
    """
    with ImportClient(config, transport=transport, dry_run=dry_run) as client:
        return client.import_document(document)


def import_file(
    path: str,
    config: ImporterConfig,
    transport: Optional[httpx.BaseTransport] = None,
    dry_run: bool = False,
) -> ImportResult:
    """Read the document at *path* and upload it.

    The file is read before any client is created, so a
    :class:`~apifox_import.exceptions.FileReadError` never involves the
    network.
    """
    document = read_document(path)
    return import_document(document, config, transport=transport, dry_run=dry_run)
