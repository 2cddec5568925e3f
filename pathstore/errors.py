"""Errors raised by PathStore.

Each error is also an instance of the builtin ``OSError`` subclass with the
same meaning, so ``except FileNotFoundError`` and friends keep working.
"""

from __future__ import annotations

import errno


class PathStoreError(OSError):
    """Base class for every error raised by pathstore."""

    code = errno.EIO

    def __init__(self, message: str, path: str | None = None):
        super().__init__(self.code, message, path)
        self.path = path

    def __str__(self) -> str:
        if self.path is None:
            return self.strerror
        return f"{self.strerror}: '{self.path}'"


class PathNotFoundError(PathStoreError, FileNotFoundError):
    """No node exists at the path."""

    code = errno.ENOENT


class WrongKindError(PathStoreError):
    """The node at the path is a directory where a file was expected, or vice versa."""


class NotAFileError(WrongKindError, IsADirectoryError):
    """Expected a file, found a directory."""

    code = errno.EISDIR


class NotADirError(WrongKindError, NotADirectoryError):
    """Expected a directory, found a file."""

    code = errno.ENOTDIR


class PathConflictError(PathStoreError, FileExistsError):
    """The operation would overwrite a node it is not allowed to replace."""

    code = errno.EEXIST


class AncestorBlockedError(PathStoreError, NotADirectoryError):
    """An ancestor of the path is a file, so the path cannot exist."""

    code = errno.ENOTDIR

    def __init__(self, path: str, blocker: str):
        super().__init__(f"Ancestor '{blocker}' is a file", path)
        self.blocker = blocker


class SourceUnavailableError(PathStoreError):
    """The seed source does not exist or cannot be read."""

    code = errno.ENOENT
