"""Numeric process exit codes, one per failure stage.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~apifox_import.exceptions.ImporterError` subclass, so
CI scripts can tell which stage of an import failed without parsing stderr.

Example::

    $ apifox-import --projectID 12345 --token xxx --file missing.yaml
    $ echo $?
    3   # EXIT_FILE_ERROR -- the document could not be read
"""

EXIT_SUCCESS = 0
"""The import request completed (whatever HTTP status the server returned)."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required options."""

EXIT_FILE_ERROR = 3
"""The document to upload could not be read."""

EXIT_ENCODING_ERROR = 4
"""The request payload could not be serialised to JSON."""

EXIT_REQUEST_ERROR = 5
"""The HTTP request could not be constructed (malformed URL or header)."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused, TLS)."""

EXIT_RESPONSE_ERROR = 7
"""The response body could not be read in full."""
