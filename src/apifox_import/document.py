"""Read the specification document to upload.

The document is treated as opaque text: it is neither parsed nor validated,
since Apifox does that on its side. Bytes that are not valid UTF-8 are
replaced with U+FFFD so that the payload can always be encoded as JSON.

A path of ``-`` reads the document from stdin.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from apifox_import.exceptions import FileReadError

logger = logging.getLogger(__name__)

STDIN_PATH = "-"


def read_document(path: str) -> str:
    """Read the document at *path* (or stdin for ``-``) as text.

    Args:
        path: File path, or ``-`` for stdin.

    Returns:
        The full document text.

    Raises:
        FileReadError: If the file does not exist or cannot be read.
    """
    if path == STDIN_PATH:
        return _read_from_stdin()

    try:
        raw = Path(path).read_bytes()
    except OSError as exc:
        raise FileReadError(f"read swagger file ({path}): {exc}") from exc

    logger.debug("Read %d bytes from %s", len(raw), path)
    return _decode(raw)


def _read_from_stdin() -> str:
    try:
        raw = sys.stdin.buffer.read()
    except (AttributeError, OSError) as exc:
        raise FileReadError(f"read swagger file (stdin): {exc}") from exc

    logger.debug("Read %d bytes from stdin", len(raw))
    return _decode(raw)


def _decode(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace")
