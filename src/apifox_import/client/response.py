"""Result display bridge -- maps :class:`~apifox_import.models.ImportResult` to the output system.

After an import round trip completes, :func:`display_import_result` echoes
the raw response body to stdout when verbose output was requested. The
status line only ever goes to stderr, as a debug diagnostic, because the
importer does not treat the status code as meaningful.

See Also:
    :mod:`apifox_import.output` -- the output manager that renders data.
"""

from __future__ import annotations

from apifox_import.models import ImportResult
from apifox_import.output import get_output


def display_import_result(result: ImportResult, verbose: bool = False) -> None:
    """Show *result* using the global output system.

    Args:
        result: The completed (or dry-run) import result.
        verbose: Echo the response body to stdout as ``Result: <body>``.
    """
    if result.dry_run:
        return

    output = get_output()
    if not result.is_success:
        output.debug(
            f"Apifox answered HTTP {result.status_code}; "
            "the status code is not checked, see the response body"
        )

    if verbose:
        output.print_result(result.text)
