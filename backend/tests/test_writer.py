"""Unit tests for the destination writer."""
import io
import os
import stat

import pytest

from filedrop.files.errors import DirectoryCreateError, WriteError
from filedrop.files.writer import DIRECTORY_MODE, ensure_directory, write_stream


class TestEnsureDirectory:
    def test_creates_missing_parents(self, tmp_path):
        target = tmp_path / "a" / "b" / "c"
        result = ensure_directory(target)

        assert result == target
        assert target.is_dir()

    def test_existing_directory_is_noop(self, tmp_path):
        target = tmp_path / "testdir"
        ensure_directory(target)
        (target / "keep.txt").write_text("x")

        ensure_directory(target)

        assert (target / "keep.txt").read_text() == "x"

    def test_mode_honours_umask(self, tmp_path):
        target = tmp_path / "perm"
        old_umask = os.umask(0o022)
        try:
            ensure_directory(target)
        finally:
            os.umask(old_umask)
        assert stat.S_IMODE(target.stat().st_mode) == DIRECTORY_MODE

    def test_path_is_a_file(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")

        with pytest.raises(DirectoryCreateError):
            ensure_directory(blocker)

    def test_parent_is_a_file(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")

        with pytest.raises(DirectoryCreateError):
            ensure_directory(blocker / "child")


class TestWriteStream:
    def test_writes_all_bytes(self, tmp_path):
        payload = os.urandom(200_000)

        written = write_stream(io.BytesIO(payload), tmp_path, "blob.bin")

        assert written == len(payload)
        assert (tmp_path / "blob.bin").read_bytes() == payload
        assert (tmp_path / "blob.bin").stat().st_size == written

    def test_writes_from_current_position(self, tmp_path):
        stream = io.BytesIO(b"headerbody")
        stream.read(6)

        assert write_stream(stream, tmp_path, "body.txt") == 4
        assert (tmp_path / "body.txt").read_bytes() == b"body"

    def test_truncates_existing_file(self, tmp_path):
        (tmp_path / "f.txt").write_bytes(b"a much longer previous content")

        write_stream(io.BytesIO(b"short"), tmp_path, "f.txt")

        assert (tmp_path / "f.txt").read_bytes() == b"short"

    def test_creates_directory(self, tmp_path):
        target = tmp_path / "new" / "dir"

        write_stream(io.BytesIO(b"data"), target, "f.txt")

        assert (target / "f.txt").read_bytes() == b"data"

    def test_empty_stream(self, tmp_path):
        assert write_stream(io.BytesIO(b""), tmp_path, "empty") == 0
        assert (tmp_path / "empty").stat().st_size == 0

    def test_unwritable_target_raises_write_error(self, tmp_path):
        # A directory occupies the target name
        (tmp_path / "taken").mkdir()

        with pytest.raises(WriteError):
            write_stream(io.BytesIO(b"data"), tmp_path, "taken")

    def test_failing_stream_raises_write_error(self, tmp_path):
        class Broken(io.RawIOBase):
            def read(self, size=-1):
                raise OSError("disk on fire")

        with pytest.raises(WriteError):
            write_stream(Broken(), tmp_path, "broken.bin")
