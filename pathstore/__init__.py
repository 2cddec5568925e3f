"""pathstore: an in-memory hierarchical file store."""

from loguru import logger

from .base import (
    Directory,
    DirectoryMetadata,
    File,
    FileMetadata,
    Metadata,
    Node,
    SourceEntry,
    TreeSource,
    Visibility,
)
from .config import StoreConfig, WriteOptions, connect_store
from .errors import (
    AncestorBlockedError,
    NotADirError,
    NotAFileError,
    PathConflictError,
    PathNotFoundError,
    PathStoreError,
    SourceUnavailableError,
    WrongKindError,
)
from .mimetype import guess_mimetype
from .source import LocalTreeSource
from .store import PathStore

# Library code stays quiet unless the application opts in with
# logger.enable("pathstore").
logger.disable("pathstore")

__all__ = [
    "AncestorBlockedError",
    "connect_store",
    "Directory",
    "DirectoryMetadata",
    "File",
    "FileMetadata",
    "guess_mimetype",
    "LocalTreeSource",
    "Metadata",
    "Node",
    "NotADirError",
    "NotAFileError",
    "PathConflictError",
    "PathNotFoundError",
    "PathStore",
    "PathStoreError",
    "SourceEntry",
    "SourceUnavailableError",
    "StoreConfig",
    "TreeSource",
    "Visibility",
    "WriteOptions",
    "WrongKindError",
]
