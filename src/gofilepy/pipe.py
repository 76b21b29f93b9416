"""Bounded in-memory byte pipe connecting a producer thread to a consumer."""

from __future__ import annotations

import logging
import queue
import threading
from typing import Iterator, List, Optional

logger = logging.getLogger(__name__)

# How often a blocked writer re-checks whether the reader went away.
_POLL_INTERVAL = 0.05


class _Closed:
    __slots__ = ("error",)

    def __init__(self, error: Optional[BaseException]):
        self.error = error


class StreamPipe:
    """Single-producer, single-consumer pipe with backpressure.

    The writer blocks while ``max_chunks`` chunks are waiting to be consumed.
    Closing the writer with an error makes the reader raise that error once it
    has drained the chunks written before it. Closing the reader makes any
    further write fail with :class:`BrokenPipeError`.
    """

    def __init__(self, max_chunks: int = 8):
        if max_chunks < 1:
            raise ValueError("max_chunks must be at least 1")
        self._chunks: "queue.Queue[object]" = queue.Queue(maxsize=max_chunks)
        self._reader_closed = threading.Event()
        self._writer_closed = False
        self._end: Optional[_Closed] = None

    @property
    def reader_closed(self) -> bool:
        return self._reader_closed.is_set()

    def write(self, data: bytes) -> int:
        """Queue ``data`` for the reader, blocking while the pipe is full."""

        if self._writer_closed:
            raise ValueError("write to closed pipe")
        if not data:
            return 0
        if not self._put(bytes(data)):
            raise BrokenPipeError("pipe reader closed")
        return len(data)

    def close(self, error: Optional[BaseException] = None) -> None:
        """Close the writer side, optionally handing ``error`` to the reader."""

        if self._writer_closed:
            return
        self._writer_closed = True
        if not self._put(_Closed(error)):
            logger.debug("Pipe closed after reader went away (error=%r)", error)

    def _put(self, item: object) -> bool:
        while not self._reader_closed.is_set():
            try:
                self._chunks.put(item, timeout=_POLL_INTERVAL)
                # A put racing close_reader() lands in a queue nobody reads.
                return not self._reader_closed.is_set()
            except queue.Full:
                continue
        return False

    def __iter__(self) -> Iterator[bytes]:
        while self._end is None:
            item = self._chunks.get()
            if isinstance(item, _Closed):
                self._end = item
                break
            yield item  # type: ignore[misc]
        if self._end.error is not None:
            raise self._end.error

    def close_reader(self) -> None:
        """Stop consuming.

        A writer blocked on a full pipe gets a broken pipe, and a reader still
        iterating on another thread wakes up with :class:`BrokenPipeError`.
        """

        self._reader_closed.set()
        drained: List[object] = []
        while True:
            while True:
                try:
                    drained.append(self._chunks.get_nowait())
                except queue.Empty:
                    break
            if self._end is not None:
                break
            try:
                self._chunks.put_nowait(_Closed(BrokenPipeError("pipe reader closed")))
                break
            except queue.Full:
                continue
        if drained:
            logger.debug("Discarded %s unread pipe item(s)", len(drained))
