"""Pydantic models shared across apifox_import.

The models fall into three groups:

**Wire models** -- serialised into the request body sent to Apifox:
    :class:`ImportOptions` and :class:`ImportPayload`. Attribute names are
    snake_case; the JSON field names are the camelCase aliases Apifox expects.

**Configuration models** -- resolved once at startup and passed by value into
the importer: :class:`ImporterConfig`, :class:`ProjectConfig` and
:class:`BuildInfo`.

**Result models** -- :class:`ImportResult`, returned once the HTTP round trip
has completed.

All models use Pydantic v2.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_API_VERSION = "2024-03-28"
DEFAULT_OVERWRITE_BEHAVIOR = "OVERWRITE_EXISTING"
DEFAULT_DOCUMENT_PATH = "swagger.yaml"

# Values Apifox documents for the overwrite behaviour fields. Only used for
# help text; anything else is passed through unchanged.
KNOWN_OVERWRITE_BEHAVIORS = (
    "OVERWRITE_EXISTING",
    "AUTO_MERGE",
    "KEEP_EXISTING",
    "CREATE_NEW",
)


# --- Wire models ---


class ImportOptions(BaseModel):
    """Placement and overwrite options for an Apifox OpenAPI import.

    A folder id of ``0`` means "no specific folder". The overwrite behaviour
    strings are sent verbatim; the remote service decides whether they are
    valid.

    Example::

        ImportOptions(target_endpoint_folder_id=42, prepend_base_path=True)
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    target_endpoint_folder_id: int = Field(default=0, alias="targetEndpointFolderId")
    target_schema_folder_id: int = Field(default=0, alias="targetSchemaFolderId")
    endpoint_overwrite_behavior: str = Field(
        default=DEFAULT_OVERWRITE_BEHAVIOR, alias="endpointOverwriteBehavior"
    )
    schema_overwrite_behavior: str = Field(
        default=DEFAULT_OVERWRITE_BEHAVIOR, alias="schemaOverwriteBehavior"
    )
    update_folder_of_changed_endpoint: bool = Field(
        default=False, alias="updateFolderOfChangedEndpoint"
    )
    prepend_base_path: bool = Field(default=False, alias="prependBasePath")


class ImportPayload(BaseModel):
    """Request body of ``POST /v1/projects/{id}/import-openapi``.

    ``input`` holds the full raw text of the document. No size limit is
    enforced locally.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    input: str
    options: ImportOptions = Field(default_factory=ImportOptions)


# --- Configuration models ---


class ImporterConfig(BaseModel):
    """Immutable configuration for a single import.

    Built once by :func:`~apifox_import.config.resolve_config` and handed to
    the importer; the importer never reads CLI flags or environment variables
    itself.

    ``token`` is required but may be empty -- Apifox, not this tool, decides
    whether it is acceptable. ``timeout`` of ``None`` means the request may
    block indefinitely.
    """

    model_config = ConfigDict(frozen=True)

    project_id: str
    token: str
    api_version: str = DEFAULT_API_VERSION
    options: ImportOptions = Field(default_factory=ImportOptions)
    verbose: bool = False
    timeout: Optional[float] = Field(
        default=None, description="Request timeout in seconds; None disables it"
    )


class ProjectConfig(BaseModel):
    """Defaults read from the project-local ``apifox-import.json`` file.

    Keys are spelled exactly like the CLI flags so that a config file reads
    like a saved command line::

        {
            "projectID": "12345",
            "file": "api/openapi.yaml",
            "targetEndpointFolderId": 7,
            "prependBasePath": true
        }

    Unknown keys are ignored.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    project_id: Optional[str] = Field(default=None, alias="projectID")
    api_version: Optional[str] = Field(default=None, alias="apiver")
    token: Optional[str] = None
    file: Optional[str] = None
    target_endpoint_folder_id: Optional[int] = Field(
        default=None, alias="targetEndpointFolderId"
    )
    target_schema_folder_id: Optional[int] = Field(
        default=None, alias="targetSchemaFolderId"
    )
    endpoint_overwrite_behavior: Optional[str] = Field(
        default=None, alias="endpointOverwriteBehavior"
    )
    schema_overwrite_behavior: Optional[str] = Field(
        default=None, alias="schemaOverwriteBehavior"
    )
    update_folder_of_changed_endpoint: Optional[bool] = Field(
        default=None, alias="updateFolderOfChangedEndpoint"
    )
    prepend_base_path: Optional[bool] = Field(default=None, alias="prependBasePath")
    timeout: Optional[float] = None


class BuildInfo(BaseModel):
    """Build metadata printed by ``--version``.

    Constructed at startup by :func:`~apifox_import.config.load_build_info`.
    """

    model_config = ConfigDict(frozen=True)

    version: str
    build_time: str = "unknown"


# --- Result models ---


class ImportResult(BaseModel):
    """Marker that the HTTP round trip completed, with the raw response.

    The status code is carried for display only. A 4xx or 5xx response is
    still a completed import attempt; callers that want to treat it as a
    failure can check :attr:`is_success` themselves.
    """

    status_code: int
    reason_phrase: str = ""
    content: bytes = b""
    content_type: Optional[str] = None
    dry_run: bool = False

    @property
    def text(self) -> str:
        """The response body decoded as UTF-8 (invalid bytes replaced)."""
        return self.content.decode("utf-8", errors="replace")

    @property
    def is_success(self) -> bool:
        """Whether the status code is 2xx. Never consulted by the importer."""
        return 200 <= self.status_code < 300
