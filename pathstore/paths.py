"""Helpers for slash-separated store paths.

Store paths have no leading or trailing slash and "" is the root. Nothing
here resolves "." or ".." segments.
"""

from __future__ import annotations

from typing import Iterator

ROOT = ""


def dirname(path: str) -> str:
    """Return the parent of ``path`` ("" for top-level paths and the root)."""
    head, sep, _ = path.rpartition("/")
    return head if sep else ROOT


def ancestors(path: str) -> Iterator[str]:
    """Yield the proper ancestors of ``path``, nearest first, ending at the root."""
    while path != ROOT:
        path = dirname(path)
        yield path


def is_under(path: str, directory: str) -> bool:
    """Return True if ``path`` is strictly inside ``directory``."""
    if directory == ROOT:
        return path != ROOT
    return path.startswith(directory + "/")


def is_direct_child(path: str, directory: str) -> bool:
    """Return True if ``directory`` is the immediate parent of ``path``."""
    return is_under(path, directory) and dirname(path) == directory
