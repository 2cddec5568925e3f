"""In-memory path store.

PathStore keeps a flat dict from path to node and enforces the tree rules
on every mutation: files never have children, a file's ancestors are all
directories (created on demand), and the root "" always exists.
"""

from __future__ import annotations

import functools
import io
import os
import threading
from typing import IO, Any, Callable, TypeVar

from loguru import logger

from .base import (
    Directory,
    DirectoryMetadata,
    File,
    FileMetadata,
    Metadata,
    Node,
    TreeSource,
    Visibility,
    node_metadata,
)
from .config import StoreConfig, WriteOptions
from .errors import (
    AncestorBlockedError,
    NotADirError,
    NotAFileError,
    PathConflictError,
    PathNotFoundError,
)
from .paths import ROOT, ancestors, is_direct_child, is_under
from .source import LocalTreeSource

F = TypeVar("F", bound=Callable[..., Any])


def _locked(method: F) -> F:
    """Run a PathStore method while holding the store lock."""

    @functools.wraps(method)
    def wrapper(self: PathStore, *args: Any, **kwargs: Any) -> Any:
        with self._lock:
            return method(self, *args, **kwargs)

    return wrapper  # type: ignore[return-value]


def _label(value: str) -> str:
    if isinstance(value, Visibility):
        return value.value
    return value


class PathStore:
    """Hierarchical file store held entirely in memory.

    Nodes live in a single dict keyed by path; directory membership is
    derived from path prefixes. Every public method takes the store lock and
    checks its preconditions before touching the dict, so a call that raises
    leaves the store unchanged.

    Example:
        >>> store = PathStore()
        >>> store.write("a/b/c.txt", b"hi").size
        2
        >>> [m.path for m in store.list_contents("", recursive=True)]
        ['a', 'a/b', 'a/b/c.txt']
    """

    def __init__(self, config: StoreConfig | None = None):
        """Initialize an empty store containing only the root directory.

        Args:
            config: Store configuration. Defaults to StoreConfig().
        """
        self._config = config if config is not None else StoreConfig()
        self._lock = threading.RLock()
        self._nodes: dict[str, Node] = {}
        self._reset()

    # -------------------------------------------------------------------------
    # Construction from a source tree
    # -------------------------------------------------------------------------

    @classmethod
    def from_source(
        cls, source: TreeSource, *, config: StoreConfig | None = None
    ) -> PathStore:
        """Build a store holding a copy of every entry in ``source``.

        Entries may arrive in any order; missing parents are created as
        they are needed. Files keep the source's visibility and timestamp.

        Args:
            source: Tree to copy from.
            config: Configuration for the new store.

        Returns:
            The seeded store.

        Raises:
            TypeError: If source does not implement TreeSource.
            ValueError: If an entry has an unknown type.
        """
        if not isinstance(source, TreeSource):
            raise TypeError(f"Expected a TreeSource, got {type(source).__name__}")

        store = cls(config)
        files = dirs = 0
        for entry in source.list_entries():
            if entry.type == "file":
                store.write(
                    entry.path,
                    source.read(entry.path),
                    WriteOptions(visibility=entry.visibility, timestamp=entry.timestamp),
                )
                files += 1
            elif entry.type == "dir":
                store.create_dir(entry.path)
                dirs += 1
            else:
                raise ValueError(f"Unknown entry type {entry.type!r} for '{entry.path}'")

        logger.info(f"Seeded store with {files} files and {dirs} directories")
        return store

    @classmethod
    def from_path(
        cls, root: str | os.PathLike[str], *, config: StoreConfig | None = None
    ) -> PathStore:
        """Build a store from a directory on disk.

        Raises:
            SourceUnavailableError: If root is missing, not a directory or
                not readable.
        """
        return cls.from_source(LocalTreeSource(root), config=config)

    # -------------------------------------------------------------------------
    # Existence
    # -------------------------------------------------------------------------

    @_locked
    def has(self, path: str) -> bool:
        return path in self._nodes

    @_locked
    def has_file(self, path: str) -> bool:
        return isinstance(self._nodes.get(path), File)

    @_locked
    def has_directory(self, path: str) -> bool:
        return isinstance(self._nodes.get(path), Directory)

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and self.has(path)

    @_locked
    def __len__(self) -> int:
        return len(self._nodes) - 1

    def __repr__(self) -> str:
        return f"{type(self).__name__}(nodes={len(self)})"

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    @_locked
    def create_dir(
        self, path: str, options: WriteOptions | None = None
    ) -> DirectoryMetadata:
        """Create a directory and any missing parents.

        Calling this on an existing directory is a no-op.

        Args:
            path: Directory path.
            options: Accepted for symmetry with write(); directories carry
                no visibility or timestamp.

        Returns:
            Metadata of the directory.

        Raises:
            NotADirError: If a file exists at path.
            AncestorBlockedError: If an ancestor of path is a file.
        """
        node = self._nodes.get(path)
        if isinstance(node, File):
            logger.debug(f"create_dir refused, '{path}' is a file")
            raise NotADirError("Path is a file", path)
        if node is None:
            self._materialize(self._missing_ancestors(path))
            self._nodes[path] = Directory()
            logger.debug(f"Created directory '{path}'")
        return DirectoryMetadata(path=path)

    @_locked
    def write(
        self, path: str, contents: bytes | str, options: WriteOptions | None = None
    ) -> FileMetadata:
        """Create a new file, creating missing parent directories.

        Args:
            path: File path. Nothing may exist there yet.
            contents: File contents. str is encoded as UTF-8.
            options: Explicit visibility and/or timestamp for the new file.

        Returns:
            Metadata of the new file.

        Raises:
            TypeError: If contents is not bytes or str.
            PathConflictError: If a file or directory already exists at path.
            AncestorBlockedError: If an ancestor of path is a file.
        """
        contents = self._coerce(contents)
        if path in self._nodes:
            logger.debug(f"write refused, '{path}' already exists")
            raise PathConflictError("Path already exists", path)
        missing = self._missing_ancestors(path)

        node = File(visibility=self._config.default_visibility)
        self._fill(path, node, contents, options)

        self._materialize(missing)
        self._nodes[path] = node
        logger.debug(f"Wrote '{path}' ({node.size} bytes)")
        return node_metadata(path, node)  # type: ignore[return-value]

    @_locked
    def update(
        self, path: str, contents: bytes | str, options: WriteOptions | None = None
    ) -> FileMetadata:
        """Replace the contents of an existing file.

        Size and mimetype are recomputed. The timestamp becomes "now" unless
        options.timestamp is given.

        Raises:
            TypeError: If contents is not bytes or str.
            PathNotFoundError: If nothing exists at path.
            NotAFileError: If path is a directory.
        """
        contents = self._coerce(contents)
        node = self._file(path)
        self._fill(path, node, contents, options)
        logger.debug(f"Updated '{path}' ({node.size} bytes)")
        return node_metadata(path, node)  # type: ignore[return-value]

    @_locked
    def delete(self, path: str) -> None:
        """Delete a single file.

        Raises:
            PathNotFoundError: If nothing exists at path.
            NotAFileError: If path is a directory.
        """
        self._file(path)
        del self._nodes[path]
        logger.debug(f"Deleted '{path}'")

    @_locked
    def delete_dir(self, path: str) -> None:
        """Delete a directory and everything under it.

        Deleting the root empties the store; the root itself is recreated.

        Raises:
            PathNotFoundError: If nothing exists at path.
            NotADirError: If path is a file.
        """
        self._directory(path)
        removed = self._delete_tree(path)
        logger.debug(f"Deleted directory '{path}' ({removed} nodes)")

    @_locked
    def copy(self, path: str, newpath: str) -> None:
        """Copy the node at ``path`` to ``newpath``.

        Only the node itself is copied. Copying a directory creates an empty
        directory at newpath; its descendants are not copied. An existing
        file or empty directory at newpath is replaced.

        Raises:
            PathNotFoundError: If nothing exists at path.
            AncestorBlockedError: If an ancestor of newpath is a file.
            PathConflictError: If copying a file onto a directory that has
                children.
        """
        self._copy(path, newpath)

    @_locked
    def rename(self, path: str, newpath: str) -> None:
        """Move the node at ``path`` to ``newpath``.

        Same as copy() followed by removing the source. For a directory the
        source is removed with its descendants, which are not carried over.

        Raises:
            PathNotFoundError: If nothing exists at path.
            AncestorBlockedError: If an ancestor of newpath is a file.
            PathConflictError: If moving a file onto a directory that has
                children, or a directory into itself.
        """
        node = self._nodes.get(path)
        if node is None:
            raise PathNotFoundError("No such file or directory", path)
        if path == newpath:
            return
        if isinstance(node, Directory) and (path == ROOT or is_under(newpath, path)):
            logger.debug(f"rename refused, '{newpath}' is inside '{path}'")
            raise PathConflictError(f"Cannot move '{path}' into itself", newpath)

        self._copy(path, newpath)
        if isinstance(node, File):
            del self._nodes[path]
        else:
            self._delete_tree(path)
        logger.debug(f"Renamed '{path}' to '{newpath}'")

    @_locked
    def set_visibility(self, path: str, visibility: str) -> FileMetadata:
        """Set the visibility label of a file.

        Any string is stored as given; Visibility members are stored as
        their value.

        Raises:
            PathNotFoundError: If nothing exists at path.
            NotAFileError: If path is a directory.
        """
        node = self._file(path)
        node.visibility = _label(visibility)
        return node_metadata(path, node)  # type: ignore[return-value]

    @_locked
    def set_timestamp(self, path: str, timestamp: int | float) -> FileMetadata:
        """Set the modification time of a file (seconds since the epoch).

        Raises:
            PathNotFoundError: If nothing exists at path.
            NotAFileError: If path is a directory.
        """
        node = self._file(path)
        node.timestamp = int(timestamp)
        return node_metadata(path, node)  # type: ignore[return-value]

    # -------------------------------------------------------------------------
    # Streams
    # -------------------------------------------------------------------------

    def read_stream(self, path: str) -> io.BytesIO:
        """Return the contents of a file as a BytesIO positioned at 0."""
        return io.BytesIO(self.read(path))

    def write_stream(
        self, path: str, stream: IO[Any], options: WriteOptions | None = None
    ) -> FileMetadata:
        """Create a file from everything left in ``stream``."""
        return self.write(path, stream.read(), options)

    def update_stream(
        self, path: str, stream: IO[Any], options: WriteOptions | None = None
    ) -> FileMetadata:
        """Replace a file's contents with everything left in ``stream``."""
        return self.update(path, stream.read(), options)

    # -------------------------------------------------------------------------
    # Reading and metadata
    # -------------------------------------------------------------------------

    @_locked
    def read(self, path: str) -> bytes:
        """Return the contents of a file.

        Only the bytes are returned; the path is the one passed in. Use
        get_metadata() for the rest of the file's fields.

        Raises:
            PathNotFoundError: If nothing exists at path.
            NotAFileError: If path is a directory.
        """
        return self._file(path).contents

    @_locked
    def get_metadata(self, path: str) -> Metadata:
        """Return metadata for a file or directory.

        Raises:
            PathNotFoundError: If nothing exists at path.
        """
        node = self._nodes.get(path)
        if node is None:
            raise PathNotFoundError("No such file or directory", path)
        return node_metadata(path, node)

    @_locked
    def get_size(self, path: str) -> int:
        return self._file(path).size

    @_locked
    def get_timestamp(self, path: str) -> int:
        return self._file(path).timestamp

    @_locked
    def get_visibility(self, path: str) -> str:
        return self._file(path).visibility

    @_locked
    def get_mimetype(self, path: str) -> str:
        return self._file(path).mimetype

    @_locked
    def list_contents(self, directory: str = ROOT, recursive: bool = False) -> list[Metadata]:
        """List the contents of a directory.

        Args:
            directory: Directory to list ("" for the root).
            recursive: If True, list the whole subtree instead of only the
                direct children.

        Returns:
            Metadata for each entry, in insertion order. Empty if directory
            does not exist or is a file.
        """
        if not isinstance(self._nodes.get(directory), Directory):
            return []
        matches = is_under if recursive else is_direct_child
        return [
            node_metadata(path, node)
            for path, node in self._nodes.items()
            if matches(path, directory)
        ]

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _reset(self) -> None:
        self._nodes.clear()
        self._nodes[ROOT] = Directory()

    def _now(self) -> int:
        return int(self._config.clock())

    def _file(self, path: str) -> File:
        node = self._nodes.get(path)
        if node is None:
            raise PathNotFoundError("No such file", path)
        if not isinstance(node, File):
            raise NotAFileError("Is a directory", path)
        return node

    def _directory(self, path: str) -> Directory:
        node = self._nodes.get(path)
        if node is None:
            raise PathNotFoundError("No such directory", path)
        if not isinstance(node, Directory):
            raise NotADirError("Not a directory", path)
        return node

    def _missing_ancestors(self, path: str) -> list[str]:
        """Return the ancestors of path that do not exist yet, root first.

        Raises:
            AncestorBlockedError: If any ancestor is a file.
        """
        missing = []
        for parent in ancestors(path):
            node = self._nodes.get(parent)
            if isinstance(node, File):
                logger.debug(f"'{path}' refused, ancestor '{parent}' is a file")
                raise AncestorBlockedError(path, parent)
            if node is None:
                missing.append(parent)
        missing.reverse()
        return missing

    def _materialize(self, directories: list[str]) -> None:
        for directory in directories:
            self._nodes[directory] = Directory()
            logger.debug(f"Created directory '{directory}'")

    def _fill(
        self, path: str, node: File, contents: bytes, options: WriteOptions | None
    ) -> None:
        """Set contents and the fields derived from them on ``node``."""
        options = options if options is not None else WriteOptions()
        timestamp = (
            int(options.timestamp) if options.timestamp is not None else self._now()
        )
        visibility = (
            _label(options.visibility)
            if options.visibility is not None
            else node.visibility
        )
        mimetype = self._config.mimetype_guesser(path, contents)

        node.contents = contents
        node.mimetype = mimetype
        node.timestamp = timestamp
        node.visibility = visibility

    def _copy(self, path: str, newpath: str) -> None:
        node = self._nodes.get(path)
        if node is None:
            raise PathNotFoundError("No such file or directory", path)
        if path == newpath:
            return
        missing = self._missing_ancestors(newpath)
        if isinstance(node, File) and any(is_under(p, newpath) for p in self._nodes):
            logger.debug(f"copy refused, '{newpath}' has children")
            raise PathConflictError("Destination directory is not empty", newpath)

        self._materialize(missing)
        self._nodes[newpath] = node.copy()
        logger.debug(f"Copied '{path}' to '{newpath}'")

    def _delete_tree(self, path: str) -> int:
        """Remove path and its descendants, returning the number removed."""
        doomed = [p for p in self._nodes if is_under(p, path)]
        for p in doomed:
            del self._nodes[p]
        if path == ROOT:
            self._reset()
        else:
            del self._nodes[path]
        return len(doomed) + 1

    @staticmethod
    def _coerce(contents: bytes | str) -> bytes:
        if isinstance(contents, str):
            return contents.encode("utf-8")
        if isinstance(contents, (bytearray, memoryview)):
            return bytes(contents)
        if not isinstance(contents, bytes):
            raise TypeError(f"Expected bytes, got {type(contents).__name__}")
        return contents
