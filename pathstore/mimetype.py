"""Mimetype guessing for stored files."""

from __future__ import annotations

import mimetypes

import magic

DEFAULT_MIMETYPE = "text/plain"

# Content types too generic to trust; the extension is consulted instead.
_INCONCLUSIVE = frozenset(
    {
        "application/x-empty",
        "inode/x-empty",
        "text/plain",
        "text/x-asm",
    }
)


def guess_mimetype(path: str, contents: bytes) -> str:
    """Guess the content type of a file.

    Content is sniffed first. When the result is missing or too generic
    (plain text, empty), the path's extension decides, falling back to
    "text/plain".

    Args:
        path: Store path of the file.
        contents: Full file contents.

    Returns:
        A mimetype string such as "image/png" or "text/css".
    """
    detected = magic.from_buffer(contents, mime=True) if contents else None
    if detected and detected not in _INCONCLUSIVE:
        return detected

    by_name, _ = mimetypes.guess_type(path.rpartition("/")[2], strict=False)
    return by_name or DEFAULT_MIMETYPE
