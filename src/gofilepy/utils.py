"""Utility helpers for GofilePy."""

from __future__ import annotations

import io
import os
from typing import BinaryIO, Callable, Optional

ProgressCallback = Callable[[int, int], None]


class ProgressFileReader(io.BufferedReader):
    """Buffered reader that reports cumulative read progress through a callback.

    The callback receives ``(bytes_read, total)`` where ``total`` is the size
    of the file when the reader was created. Reads stop at ``total`` even if
    the file grows afterwards, and ``len()`` reports ``total``.
    """

    def __init__(
        self,
        file_obj: BinaryIO,
        callback: Optional[ProgressCallback] = None,
        total: Optional[int] = None,
    ):
        super().__init__(file_obj)  # type: ignore[arg-type]
        self._callback = callback
        self.bytes_read = 0
        self.total = os.fstat(self.fileno()).st_size if total is None else total

    def __len__(self) -> int:
        return self.total

    def read(self, size: Optional[int] = -1) -> bytes:  # type: ignore[override]
        remaining = self.total - self.bytes_read
        if remaining <= 0:
            return b""
        if size is None or size < 0 or size > remaining:
            size = remaining
        chunk = super().read(size)
        if not chunk and size:
            raise OSError(
                f"File shrank while reading: got {self.bytes_read} of {self.total} bytes"
            )
        if chunk:
            self.bytes_read += len(chunk)
            if self._callback:
                self._callback(self.bytes_read, self.total)
        return chunk

    @property
    def percentage_completed(self) -> float:
        """Share of the file read so far, in percent."""

        if not self.total:
            return 100.0
        return self.bytes_read / self.total * 100
