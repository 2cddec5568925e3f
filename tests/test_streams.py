"""Tests for the stream helpers (read_stream, write_stream, update_stream)."""

import io

import pytest

from pathstore import NotAFileError, PathConflictError, PathStore


def test_read_stream():
    store = PathStore()
    store.write("file.txt", b"contents")

    stream = store.read_stream("file.txt")

    assert stream.tell() == 0
    assert stream.read() == b"contents"


def test_read_stream_is_detached():
    """Writing to the returned stream does not change the stored file."""
    store = PathStore()
    store.write("file.txt", b"contents")

    stream = store.read_stream("file.txt")
    stream.write(b"XX")

    assert store.read("file.txt") == b"contents"


def test_read_stream_directory():
    store = PathStore()
    store.create_dir("dir")

    with pytest.raises(NotAFileError):
        store.read_stream("dir")


def test_write_stream():
    store = PathStore()

    meta = store.write_stream("dir/file.txt", io.BytesIO(b"streamed"))

    assert meta.size == 8
    assert store.read("dir/file.txt") == b"streamed"


def test_write_stream_reads_from_current_position():
    store = PathStore()
    stream = io.BytesIO(b"skip:keep")
    stream.seek(5)

    store.write_stream("file.txt", stream)

    assert store.read("file.txt") == b"keep"


def test_write_stream_existing():
    store = PathStore()
    store.write("file.txt", b"contents")

    with pytest.raises(PathConflictError):
        store.write_stream("file.txt", io.BytesIO(b"other"))


def test_update_stream_text():
    store = PathStore()
    store.write("file.txt", b"contents")

    store.update_stream("file.txt", io.StringIO("new text"))

    assert store.read("file.txt") == b"new text"
