"""Seed source backed by a real directory tree.

Provides LocalTreeSource, a TreeSource that walks a directory on disk so a
PathStore can be built from it.
"""

from __future__ import annotations

import os
import stat as stat_mod
from pathlib import Path
from typing import Iterator

from loguru import logger

from .base import SourceEntry, Visibility
from .errors import PathNotFoundError, SourceUnavailableError


class LocalTreeSource:
    """TreeSource reading from a directory on disk.

    Entry paths are relative to the root and always use "/" as separator.
    Symlinks are never followed; they are left out of the listing along
    with other non-regular files.
    """

    def __init__(self, root: str | os.PathLike[str]):
        """Initialize a source rooted at ``root``.

        Args:
            root: Directory to read from.

        Raises:
            SourceUnavailableError: If root is missing, not a directory or
                not readable.
        """
        root_path = Path(root)
        if not root_path.is_dir() or not os.access(root_path, os.R_OK | os.X_OK):
            logger.warning(f"Seed source unavailable: {root_path}")
            raise SourceUnavailableError(
                "Source does not exist or is not readable", str(root_path)
            )
        self.root = root_path.resolve()

    def list_entries(self) -> Iterator[SourceEntry]:
        """Yield every file and directory below the root, parents first.

        Symlinks and special files (fifos, sockets, devices) are skipped.
        """
        for dirpath, dirnames, filenames in os.walk(self.root):
            dirnames.sort()
            base = Path(dirpath)
            for name in dirnames + sorted(filenames):
                real = base / name
                try:
                    st = real.lstat()
                except OSError as exc:
                    raise SourceUnavailableError(
                        f"Cannot stat source entry: {exc.strerror}", str(real)
                    ) from exc
                is_dir = stat_mod.S_ISDIR(st.st_mode)
                if not is_dir and not stat_mod.S_ISREG(st.st_mode):
                    logger.debug(f"Skipping non-regular source entry: {real}")
                    continue
                yield SourceEntry(
                    path=real.relative_to(self.root).as_posix(),
                    type="dir" if is_dir else "file",
                    timestamp=int(st.st_mtime),
                    visibility=self._visibility(st.st_mode),
                )

    def read(self, path: str) -> bytes:
        """Read the file at ``path`` (relative to the root).

        Raises:
            PathNotFoundError: If the path is missing or escapes the root.
            SourceUnavailableError: If the file exists but cannot be read.
        """
        real = (self.root / path).resolve()
        try:
            real.relative_to(self.root)
        except ValueError:
            raise PathNotFoundError("Path outside source root", path)
        if not real.is_file():
            raise PathNotFoundError("No such file in source", path)
        try:
            return real.read_bytes()
        except OSError as exc:
            raise SourceUnavailableError(
                f"Cannot read source file: {exc.strerror}", path
            ) from exc

    @staticmethod
    def _visibility(mode: int) -> str:
        if mode & stat_mod.S_IROTH:
            return Visibility.PUBLIC.value
        return Visibility.PRIVATE.value
