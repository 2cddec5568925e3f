"""Node types, metadata records and the seed source interface.

Defines the tagged ``Directory | File`` node variants held by PathStore and
the protocol a source tree must implement to seed a store.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Literal, Protocol, Union, runtime_checkable


class Visibility(str, Enum):
    """Two-valued visibility label attached to files.

    This is a label only; nothing in the store enforces it.
    """

    PUBLIC = "public"
    PRIVATE = "private"


@dataclass
class Directory:
    """A directory node. Carries no content."""

    type: Literal["dir"] = field(default="dir", init=False)

    def copy(self) -> Directory:
        return Directory()


@dataclass
class File:
    """A file node.

    Attributes:
        contents: Full file contents.
        timestamp: Last modification time in seconds since the epoch.
        visibility: Visibility label ("public" or "private").
        mimetype: Content type guessed when contents were last set.
    """

    contents: bytes = b""
    timestamp: int = 0
    visibility: str = Visibility.PUBLIC.value
    mimetype: str = ""
    type: Literal["file"] = field(default="file", init=False)

    @property
    def size(self) -> int:
        return len(self.contents)

    def copy(self) -> File:
        return File(
            contents=self.contents,
            timestamp=self.timestamp,
            visibility=self.visibility,
            mimetype=self.mimetype,
        )


Node = Union[Directory, File]


@dataclass(frozen=True)
class DirectoryMetadata:
    """Metadata for a directory.

    Attributes:
        path: Full path of the directory ("" for the root).
        type: Always "dir".
    """

    path: str
    type: Literal["dir"] = "dir"


@dataclass(frozen=True)
class FileMetadata:
    """Metadata for a file.

    Attributes:
        path: Full path of the file.
        size: Content length in bytes.
        timestamp: Last modification time in seconds since the epoch.
        visibility: Visibility label.
        mimetype: Guessed content type.
        type: Always "file".
    """

    path: str
    size: int
    timestamp: int
    visibility: str
    mimetype: str
    type: Literal["file"] = "file"


Metadata = Union[FileMetadata, DirectoryMetadata]


def node_metadata(path: str, node: Node) -> Metadata:
    """Build the metadata record for ``node`` stored at ``path``."""
    if isinstance(node, File):
        return FileMetadata(
            path=path,
            size=node.size,
            timestamp=node.timestamp,
            visibility=node.visibility,
            mimetype=node.mimetype,
        )
    return DirectoryMetadata(path=path)


@dataclass(frozen=True)
class SourceEntry:
    """One entry yielded by a TreeSource.

    Attributes:
        path: Slash-separated path relative to the source root.
        type: "file" or "dir".
        timestamp: Modification time in seconds since the epoch.
        visibility: Visibility label (ignored for directories).
    """

    path: str
    type: Literal["file", "dir"]
    timestamp: int = 0
    visibility: str = Visibility.PUBLIC.value


@runtime_checkable
class TreeSource(Protocol):
    """Anything a PathStore can be seeded from.

    Entries may be yielded in any order; parents do not need to come before
    their children.
    """

    def list_entries(self) -> Iterable[SourceEntry]:
        """Yield every file and directory under the source root."""
        ...

    def read(self, path: str) -> bytes:
        """Return the bytes of the file at ``path``."""
        ...
