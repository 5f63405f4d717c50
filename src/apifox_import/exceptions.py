"""Exception hierarchy for apifox_import.

All exceptions inherit from :class:`ImporterError`, which carries an
``exit_code`` attribute mapped to a constant from
:mod:`apifox_import.exit_codes`. The CLI command catches ``ImporterError``
and exits with the appropriate code, while unexpected exceptions produce a
crash log and exit with :data:`EXIT_GENERIC_FAILURE`.

Each subclass corresponds to one stage of an import, in the order the stages
run::

    ImporterError (exit 1)
    +-- InvalidUsageError         (exit 2)
    +-- ConfigError               (exit 1)
    +-- FileReadError             (exit 3)
    +-- EncodingError             (exit 4)
    +-- RequestConstructionError  (exit 5)
    +-- TransportError            (exit 6)
    +-- ResponseReadError         (exit 7)

HTTP error statuses returned by Apifox are deliberately *not* represented
here: a fully received response is a completed import attempt.
"""

from apifox_import.exit_codes import (
    EXIT_CONNECTION_ERROR,
    EXIT_ENCODING_ERROR,
    EXIT_FILE_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_REQUEST_ERROR,
    EXIT_RESPONSE_ERROR,
)


class ImporterError(Exception):
    """Base exception for all apifox_import errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(ImporterError):
    """Raised when a required option (project id, token) was not supplied."""

    exit_code = EXIT_INVALID_USAGE


class ConfigError(ImporterError):
    """Raised for an unreadable or invalid project config file."""

    exit_code = EXIT_GENERIC_FAILURE


class FileReadError(ImporterError):
    """Raised when the document to upload is missing or unreadable.

    Always raised before any network activity takes place.
    """

    exit_code = EXIT_FILE_ERROR


class EncodingError(ImporterError):
    """Raised when the import payload cannot be serialised to JSON."""

    exit_code = EXIT_ENCODING_ERROR


class RequestConstructionError(ImporterError):
    """Raised when the HTTP request cannot be built (e.g. a degenerate project id)."""

    exit_code = EXIT_REQUEST_ERROR


class TransportError(ImporterError):
    """Raised on network-level failures (DNS, connection refused, TLS, timeout).

    There is no retry; the first failure is final.
    """

    exit_code = EXIT_CONNECTION_ERROR


class ResponseReadError(ImporterError):
    """Raised when the response body cannot be read in full (mid-stream disconnect)."""

    exit_code = EXIT_RESPONSE_ERROR
