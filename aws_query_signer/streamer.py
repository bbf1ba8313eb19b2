# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Streaming response body fed by the HTTP connector."""

import httpx
import logging
import threading
from aws_query_signer.exceptions import StreamClosed
from collections import deque
from typing import Deque, Iterator, Optional


logger = logging.getLogger(__name__)


class StreamBuffer(httpx.SyncByteStream):
    """A buffer that hands response chunks from the connector to the caller.

    The connector pushes chunks with ``accept`` (or by calling the buffer) and
    signals the end with ``finish`` or ``fail``. The caller pulls chunks by
    iterating; iteration blocks while the buffer is empty and the stream has
    not ended, so the producer may run on another thread.

    Chunks come out exactly as they went in, in order. The buffer is single
    pass: once drained, further reads end immediately, or raise the recorded
    transport error if the connector reported one.
    """

    def __init__(self) -> None:
        self._chunks: Deque[bytes] = deque()
        self._finished = False
        self._closed = False
        self._error: Optional[BaseException] = None
        self._bytes_received = 0

        # Guards the chunk deque and the end of stream state.
        self._condition = threading.Condition()

    def accept(self, chunk: bytes, remaining: Optional[int] = None, total: Optional[int] = None) -> None:
        """Append a chunk delivered by the connector.

        Args:
            chunk: The raw bytes received
            remaining: Bytes still expected after this chunk, if known; ``0``
                ends the stream
            total: Total size of the body, if known

        Raises:
            StreamClosed: If the stream already ended
        """
        with self._condition:
            if self._closed:
                # The consumer abandoned the response.
                logger.debug('Dropping %d byte chunk for a closed stream', len(chunk))
                return
            if self._finished:
                raise StreamClosed('Attempted to write to a finished stream.')

            if chunk:
                self._chunks.append(bytes(chunk))
                self._bytes_received += len(chunk)
            if remaining == 0:
                self._finished = True
            self._condition.notify()

    __call__ = accept

    def finish(self) -> None:
        """Mark the end of the stream. Calling it more than once is harmless."""
        with self._condition:
            self._finished = True
            self._condition.notify_all()

    def fail(self, error: BaseException) -> None:
        """End the stream with a transport error.

        Chunks already buffered are still returned; the error is raised once
        they are drained.

        Args:
            error: The error reported by the connector
        """
        with self._condition:
            if self._error is None:
                self._error = error
            self._finished = True
            self._condition.notify_all()

    @property
    def finished(self) -> bool:
        """Returns whether the producer has ended the stream."""
        return self._finished

    @property
    def closed(self) -> bool:
        """Returns whether the consumer has closed the stream."""
        return self._closed

    @property
    def bytes_received(self) -> int:
        """Returns the number of bytes delivered so far."""
        return self._bytes_received

    def next(self) -> bytes:
        """Return the next unread chunk, blocking until one is available.

        Raises:
            StopIteration: Once the stream has ended and every chunk was read
            Exception: The transport error passed to ``fail``, once drained
        """
        with self._condition:
            self._condition.wait_for(lambda: self._chunks or self._finished or self._closed)

            if self._chunks:
                return self._chunks.popleft()
            if self._error is not None:
                raise self._error
            raise StopIteration

    __next__ = next

    def __iter__(self) -> Iterator[bytes]:
        return self

    def read(self) -> bytes:
        """Read every remaining chunk and return them joined."""
        return b''.join(self)

    def close(self) -> None:
        """Abandon the stream, discarding any buffered chunks."""
        with self._condition:
            self._closed = True
            self._chunks.clear()
            self._condition.notify_all()
