"""HTTP client module for apifox_import.

Provides the blocking importer that wraps :mod:`httpx` and the bridge that
renders its result.

Classes and functions:
    :class:`ImportClient` -- context-managed client backed by :class:`httpx.Client`.
    :func:`import_document` -- upload document text with a short-lived client.
    :func:`import_file` -- read a document from disk (or stdin), then upload it.
    :func:`display_import_result` -- echo a result through the output system.

Example::

    from apifox_import.client import import_file

    result = import_file("swagger.yaml", config)
"""

from apifox_import.client.importer import ImportClient, import_document, import_file
from apifox_import.client.response import display_import_result

__all__ = ["ImportClient", "import_document", "import_file", "display_import_result"]
