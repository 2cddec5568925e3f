"""Tests for PathStore.copy() and PathStore.rename()."""

import pytest

from pathstore import (
    AncestorBlockedError,
    PathConflictError,
    PathNotFoundError,
    PathStore,
    WriteOptions,
    connect_store,
)


def snapshot(store: PathStore) -> dict:
    """Everything observable about a store, keyed by path."""
    result = {"": store.get_metadata("")}
    for meta in store.list_contents("", recursive=True):
        result[meta.path] = meta
        if meta.type == "file":
            result[meta.path] = (meta, store.read(meta.path))
    return result


class TestCopy:
    """Test PathStore.copy()."""

    def test_copy_file(self):
        store = PathStore()
        store.write("file.txt", b"contents")

        store.copy("file.txt", "dir/new_file.txt")

        assert store.read("dir/new_file.txt") == b"contents"
        assert store.has_directory("dir")
        assert store.read("file.txt") == b"contents"

    def test_copy_keeps_attributes(self):
        store = PathStore()
        store.write("file.txt", b"x", WriteOptions(visibility="private", timestamp=9))

        store.copy("file.txt", "other.txt")

        assert store.get_visibility("other.txt") == "private"
        assert store.get_timestamp("other.txt") == 9
        assert store.get_mimetype("other.txt") == store.get_mimetype("file.txt")

    def test_copies_are_independent(self):
        """Changing the copy never touches the source."""
        store = PathStore()
        store.write("file.txt", b"contents")
        store.copy("file.txt", "copy.txt")

        store.update("copy.txt", b"changed")
        store.set_visibility("copy.txt", "private")

        assert store.read("file.txt") == b"contents"
        assert store.get_visibility("file.txt") == "public"

    def test_copy_below_file_is_blocked(self):
        store = PathStore()
        store.write("file.txt", b"contents")
        store.copy("file.txt", "dir/new_file.txt")

        with pytest.raises(AncestorBlockedError):
            store.copy("file.txt", "dir/new_file.txt/other.txt")

        assert store.read("dir/new_file.txt") == b"contents"

    def test_copy_missing_source(self):
        store = PathStore()

        with pytest.raises(PathNotFoundError):
            store.copy("nope.txt", "other.txt")

        assert not store.has("other.txt")

    def test_copy_replaces_existing_file(self):
        store = PathStore()
        store.write("a.txt", b"a")
        store.write("b.txt", b"b")

        store.copy("a.txt", "b.txt")

        assert store.read("b.txt") == b"a"

    def test_copy_file_onto_populated_directory(self):
        """A file may never end up with children."""
        store = PathStore()
        store.write("a.txt", b"a")
        store.write("dir/child.txt", b"child")

        with pytest.raises(PathConflictError):
            store.copy("a.txt", "dir")

        assert store.has_directory("dir")
        assert store.has("dir/child.txt")

    def test_copy_directory_is_not_recursive(self):
        """Copying a directory copies only the directory node itself."""
        store = PathStore()
        store.write("src/file.txt", b"contents")
        store.write("src/sub/deep.txt", b"deep")

        store.copy("src", "dst")

        assert store.has_directory("dst")
        assert store.list_contents("dst", recursive=True) == []
        assert store.has("src/file.txt")
        assert store.has("src/sub/deep.txt")

    def test_copy_onto_itself(self):
        store = PathStore()
        store.write("file.txt", b"contents")

        store.copy("file.txt", "file.txt")

        assert store.read("file.txt") == b"contents"


class TestRename:
    """Test PathStore.rename()."""

    def test_rename_file(self):
        store = PathStore()
        store.write("file.txt", b"contents")

        store.rename("file.txt", "dir/subdir/file.txt")

        assert store.has_directory("dir")
        assert store.has_directory("dir/subdir")
        assert store.read("dir/subdir/file.txt") == b"contents"
        assert not store.has("file.txt")

    def test_rename_below_file_keeps_source(self):
        """A failed rename leaves the source in place."""
        store = PathStore()
        store.write("dir/subdir/file.txt", b"contents")

        with pytest.raises(AncestorBlockedError):
            store.rename("dir/subdir/file.txt", "dir/subdir/file.txt/new_file.txt")

        assert store.read("dir/subdir/file.txt") == b"contents"

    def test_rename_missing(self):
        store = PathStore()

        with pytest.raises(PathNotFoundError):
            store.rename("nope.txt", "other.txt")

    def test_rename_matches_copy_then_delete(self):
        """rename(a, b) ends in the same state as copy(a, b) + delete(a)."""
        def seeded() -> PathStore:
            store = PathStore(connect_store(clock=lambda: 1000))
            store.write("keep.txt", b"keep")
            store.write("a/file.txt", b"contents", WriteOptions(visibility="private"))
            store.create_dir("empty")
            return store

        renamed = seeded()
        renamed.rename("a/file.txt", "b/c/file.txt")

        copied = seeded()
        copied.copy("a/file.txt", "b/c/file.txt")
        copied.delete("a/file.txt")

        assert snapshot(renamed) == snapshot(copied)

    def test_rename_directory_drops_descendants(self):
        """Only the directory node moves; its old children go with the source."""
        store = PathStore()
        store.write("src/file.txt", b"contents")

        store.rename("src", "dst")

        assert store.has_directory("dst")
        assert store.list_contents("dst", recursive=True) == []
        assert not store.has("src")
        assert not store.has("src/file.txt")

    def test_rename_directory_into_itself(self):
        store = PathStore()
        store.write("dir/file.txt", b"contents")

        with pytest.raises(PathConflictError):
            store.rename("dir", "dir/inner")

        assert store.has("dir/file.txt")
        assert not store.has("dir/inner")

    def test_rename_root_refused(self):
        store = PathStore()
        store.write("file.txt", b"contents")

        with pytest.raises(PathConflictError):
            store.rename("", "elsewhere")

        assert store.has("file.txt")

    def test_rename_onto_itself(self):
        store = PathStore()
        store.write("file.txt", b"contents")

        store.rename("file.txt", "file.txt")

        assert store.read("file.txt") == b"contents"
