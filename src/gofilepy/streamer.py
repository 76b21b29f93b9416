"""Streaming multipart/form-data upload bodies."""

from __future__ import annotations

import logging
import os
import threading
from typing import Iterator, Optional, Union

from requests_toolbelt import MultipartEncoder

from .errors import FileOpenError, GofileError, NetworkError
from .pipe import StreamPipe
from .utils import ProgressCallback, ProgressFileReader

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024
FILE_CONTENT_TYPE = "application/octet-stream"


class UploadStream:
    """Multipart body for one file upload, produced lazily by a worker thread.

    The file is opened and the multipart boundary chosen as soon as the stream
    is created, so ``content_type`` and ``content_length`` are available before
    a single byte is produced and a bad path fails before any request exists.
    Iterating the stream starts the producer, which pushes the ``folderId``
    field, the ``file`` part and the closing boundary through a bounded
    :class:`StreamPipe`. Memory use stays at ``chunk_size * max_chunks``
    regardless of the file size.

    A stream is single-use.
    """

    def __init__(
        self,
        file_path: Union[str, "os.PathLike[str]"],
        folder_id: Optional[str] = None,
        callback: Optional[ProgressCallback] = None,
        *,
        chunk_size: int = CHUNK_SIZE,
        max_chunks: int = 8,
    ):
        self.file_path = os.fspath(file_path)
        self.file_name = os.path.basename(self.file_path)
        self.folder_id = folder_id
        self.chunk_size = chunk_size

        try:
            raw = open(self.file_path, "rb", buffering=0)
        except OSError as exc:
            raise FileOpenError(
                f"Cannot open {self.file_path}: {exc.strerror or exc}",
                context={"path": self.file_path},
            ) from exc
        try:
            self.size = os.fstat(raw.fileno()).st_size
        except OSError as exc:
            raw.close()
            raise FileOpenError(
                f"Cannot stat {self.file_path}", context={"path": self.file_path}
            ) from exc

        self.reader = ProgressFileReader(raw, callback, total=self.size)
        fields = []
        if folder_id is not None:
            fields.append(("folderId", folder_id))
        fields.append(("file", (self.file_name, self.reader, FILE_CONTENT_TYPE)))
        self._encoder = MultipartEncoder(fields=fields)
        self._pipe = StreamPipe(max_chunks=max_chunks)
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()
        self._closed = False

    @property
    def content_type(self) -> str:
        return self._encoder.content_type

    @property
    def content_length(self) -> int:
        """Exact encoded body size, based on the file size at open time."""

        return self._encoder.len

    def start(self) -> None:
        """Launch the producer thread."""

        with self._lock:
            if self._closed:
                raise GofileError("Upload stream is closed", context={"path": self.file_path})
            if self._thread is not None:
                raise GofileError(
                    "Upload stream already started", context={"path": self.file_path}
                )
            self._thread = threading.Thread(
                target=self._produce,
                name=f"gofile-upload-{self.file_name}",
                daemon=True,
            )
            self._thread.start()

    def _produce(self) -> None:
        error: Optional[BaseException] = None
        try:
            with self.reader:
                while True:
                    chunk = self._encoder.read(self.chunk_size)
                    if not chunk:
                        break
                    self._pipe.write(chunk)
        except BrokenPipeError as exc:
            logger.debug("Upload of %s aborted by consumer", self.file_name)
            error = exc
        except OSError as exc:
            logger.debug("Reading %s failed: %r", self.file_name, exc)
            error = exc
        except Exception as exc:  # handed over to the consumer through the pipe
            logger.debug("Producer for %s failed: %r", self.file_name, exc)
            error = NetworkError(
                f"Upload body failed: {exc!r}", context={"path": self.file_path}
            )
            error.__cause__ = exc
        finally:
            self._pipe.close(error)

    def __iter__(self) -> Iterator[bytes]:
        self.start()
        try:
            yield from self._pipe
        finally:
            self._pipe.close_reader()

    def close(self) -> None:
        """Release the file and stop the producer if it is still running."""

        with self._lock:
            self._closed = True
            started = self._thread is not None
        self._pipe.close_reader()
        if not started:
            self.reader.close()

    def join(self, timeout: Optional[float] = None) -> None:
        """Wait for the producer thread to finish."""

        if self._thread is not None:
            self._thread.join(timeout)

    def __enter__(self) -> "UploadStream":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
