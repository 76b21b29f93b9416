"""Tests for the streaming multipart upload body."""

from __future__ import annotations

import io
import threading
import time
from pathlib import Path
from typing import List, Tuple

import pytest
from helpers import parse_multipart

from gofilepy import FileOpenError, GofileError, NetworkError, UploadStream
from gofilepy.utils import ProgressFileReader


def _collect(stream: UploadStream) -> bytes:
    with stream:
        return b"".join(stream)


class TestUploadStreamBody:
    """Tests for the bytes produced by UploadStream."""

    def test_content_type_known_before_streaming(self, sample_file: Path) -> None:
        """Test that the boundary is fixed before the producer starts."""
        stream = UploadStream(sample_file, "folder-1")
        try:
            assert stream.content_type.startswith("multipart/form-data; boundary=")
            assert stream.size == sample_file.stat().st_size
        finally:
            stream.close()

    def test_body_contains_folder_field_then_file(self, sample_file: Path) -> None:
        """Test that the folderId field precedes the file part."""
        stream = UploadStream(sample_file, "folder-1")
        body = _collect(stream)

        parts = parse_multipart(body, stream.content_type)

        assert [part.name for part in parts] == ["folderId", "file"]
        assert parts[0].content == b"folder-1"
        assert parts[1].filename == "sample.bin"
        assert parts[1].content == sample_file.read_bytes()

    def test_content_length_matches_body(self, sample_file: Path) -> None:
        """Test that the announced length is the exact body size."""
        stream = UploadStream(sample_file, "folder-1")
        expected = stream.content_length

        assert len(_collect(stream)) == expected

    def test_folder_field_omitted_without_folder(self, sample_file: Path) -> None:
        """Test that no folderId part is written when no folder is given."""
        stream = UploadStream(sample_file)
        parts = parse_multipart(_collect(stream), stream.content_type)

        assert [part.name for part in parts] == ["file"]

    def test_filename_is_base_name(self, tmp_path: Path) -> None:
        """Test that only the base name of the path is sent."""
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        path = nested / "notes.txt"
        path.write_text("hello world")

        stream = UploadStream(str(path), "f")
        parts = parse_multipart(_collect(stream), stream.content_type)

        assert parts[-1].filename == "notes.txt"

    def test_zero_length_file(self, empty_file: Path) -> None:
        """Test that an empty file still yields a valid, empty file part."""
        calls: List[Tuple[int, int]] = []
        stream = UploadStream(empty_file, "f", lambda done, total: calls.append((done, total)))

        parts = parse_multipart(_collect(stream), stream.content_type)

        assert parts[-1].content == b""
        assert calls == []

    def test_boundaries_differ_between_streams(self, sample_file: Path) -> None:
        """Test that each stream picks its own boundary."""
        first = UploadStream(sample_file)
        second = UploadStream(sample_file)
        try:
            assert first.content_type != second.content_type
        finally:
            first.close()
            second.close()


class TestUploadStreamProgress:
    """Tests for progress reporting during streaming."""

    def test_progress_reaches_file_size(self, sample_file: Path) -> None:
        """Test that cumulative progress ends exactly at the file size."""
        calls: List[Tuple[int, int]] = []
        stream = UploadStream(
            sample_file, "f", lambda done, total: calls.append((done, total)), chunk_size=8192
        )
        _collect(stream)
        size = sample_file.stat().st_size

        assert len(calls) > 1
        assert calls[-1] == (size, size)
        assert all(total == size for _, total in calls)

    def test_progress_is_strictly_increasing(self, sample_file: Path) -> None:
        """Test that totals never repeat or go backwards."""
        done_values: List[int] = []
        stream = UploadStream(
            sample_file, "f", lambda done, total: done_values.append(done), chunk_size=4096
        )
        _collect(stream)

        assert all(a < b for a, b in zip(done_values, done_values[1:]))

    def test_progress_deltas_sum_to_size(self, sample_file: Path) -> None:
        """Test that there is no double counting and no gap in the totals."""
        done_values: List[int] = [0]
        stream = UploadStream(sample_file, "f", lambda done, total: done_values.append(done))
        _collect(stream)

        deltas = [b - a for a, b in zip(done_values, done_values[1:])]
        assert sum(deltas) == done_values[-1] == sample_file.stat().st_size

    def test_callback_error_fails_the_stream(self, sample_file: Path) -> None:
        """Test that a producer failure surfaces as a read error on the consumer."""

        def failing(done: int, total: int) -> None:
            raise OSError("read failed")

        stream = UploadStream(sample_file, "f", failing)

        with pytest.raises(OSError, match="read failed"):
            _collect(stream)

    def test_callback_value_error_becomes_network_error(self, sample_file: Path) -> None:
        """Test that a non-I/O failure in the producer reaches the consumer as NetworkError."""

        def failing(done: int, total: int) -> None:
            raise ValueError("bad progress state")

        stream = UploadStream(sample_file, "f", failing)

        with pytest.raises(NetworkError, match="bad progress state") as excinfo:
            _collect(stream)

        assert isinstance(excinfo.value.__cause__, ValueError)
        assert excinfo.value.context["path"] == str(sample_file)

    def test_file_growing_mid_upload_is_capped_at_open_size(self, sample_file: Path) -> None:
        """Test that bytes appended during the upload are neither sent nor reported."""
        original = sample_file.read_bytes()
        size = len(original)
        done_values: List[int] = []

        def grow(done: int, total: int) -> None:
            if not done_values:
                with open(sample_file, "ab") as handle:
                    handle.write(b"x" * 100_000)
            done_values.append(done)

        stream = UploadStream(sample_file, "f", grow, chunk_size=8192)
        body = _collect(stream)
        parts = parse_multipart(body, stream.content_type)

        assert max(done_values) == size
        assert len(body) == stream.content_length
        assert parts[-1].content == original

    def test_file_shrinking_mid_upload_fails(self, sample_file: Path) -> None:
        """Test that a truncated file fails the body instead of hanging."""

        def shrink(done: int, total: int) -> None:
            with open(sample_file, "r+b") as handle:
                handle.truncate(done)

        stream = UploadStream(sample_file, "f", shrink, chunk_size=8192)

        with pytest.raises(OSError, match="shrank"):
            _collect(stream)


class TestUploadStreamLifecycle:
    """Tests for opening, single use and cancellation."""

    def test_missing_file_fails_on_construction(self, tmp_path: Path) -> None:
        """Test that a bad path fails before any byte is produced."""
        with pytest.raises(FileOpenError) as excinfo:
            UploadStream(tmp_path / "missing.bin", "f")

        assert excinfo.value.context["path"].endswith("missing.bin")

    def test_directory_fails_on_construction(self, tmp_path: Path) -> None:
        """Test that a directory cannot be uploaded."""
        with pytest.raises(FileOpenError):
            UploadStream(tmp_path, "f")

    def test_stream_is_single_use(self, sample_file: Path) -> None:
        """Test that a stream cannot produce a second body."""
        stream = UploadStream(sample_file, "f")
        _collect(stream)

        with pytest.raises(GofileError):
            stream.start()

    def test_close_before_start_releases_file(self, sample_file: Path) -> None:
        """Test that an unused stream closes its file handle."""
        stream = UploadStream(sample_file, "f")
        stream.close()

        assert stream.reader.closed
        with pytest.raises(GofileError):
            stream.start()

    def test_close_mid_stream_stops_producer(self, sample_file: Path) -> None:
        """Test that abandoning the body stops the producer and closes the file."""
        stream = UploadStream(sample_file, "f", chunk_size=1024, max_chunks=1)
        body = iter(stream)
        assert next(body)

        stream.close()
        stream.join(2)

        assert stream.reader.closed
        assert stream.reader.bytes_read < sample_file.stat().st_size

    def test_close_from_another_thread_releases_consumer(self, sample_file: Path) -> None:
        """Test that a consumer waiting on a stalled producer finishes when the stream closes."""
        release = threading.Event()
        stream = UploadStream(
            sample_file, "f", lambda done, total: release.wait(2), chunk_size=1024, max_chunks=1
        )
        errors: List[BaseException] = []

        def consume() -> None:
            try:
                for _ in stream:
                    pass
            except BrokenPipeError as exc:
                errors.append(exc)

        consumer = threading.Thread(target=consume, daemon=True)
        consumer.start()
        time.sleep(0.1)
        stream.close()
        consumer.join(2)
        release.set()
        stream.join(2)

        assert not consumer.is_alive()
        assert len(errors) == 1
        assert stream.reader.closed


class TestProgressFileReader:
    """Tests for the progress-reporting file wrapper."""

    def test_reports_cumulative_totals(self) -> None:
        """Test that each read reports the running total."""
        calls: List[Tuple[int, int]] = []
        reader = ProgressFileReader(
            io.BytesIO(b"0123456789"), lambda done, total: calls.append((done, total)), total=10
        )

        reader.read(4)
        reader.read(4)
        reader.read(4)
        reader.read(4)

        assert calls == [(4, 10), (8, 10), (10, 10)]
        assert reader.percentage_completed == 100.0

    def test_percentage_for_partial_read(self) -> None:
        """Test the completion percentage halfway through."""
        reader = ProgressFileReader(io.BytesIO(b"abcd"), total=4)
        reader.read(2)

        assert reader.bytes_read == 2
        assert reader.percentage_completed == 50.0
