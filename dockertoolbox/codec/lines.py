"""Incremental line splitting for subprocess output.

A LineDecoder accepts output in arbitrary chunks and hands back complete
lines, never a partial one:

    decoder = LineDecoder()
    decoder.feed("ab")       # []
    decoder.feed("c\\nde")    # ["abc"]
    decoder.feed("f\\n")      # ["def"]

lines() drives the same splitting from an asyncio stream. It is pull-based:
the upstream stream is only read when the consumer asks for another line
and no complete line is buffered. A consumer that stops iterating stops the
reads, so the OS pipe pushes back on the subprocess instead of this process
buffering its output.
"""

from __future__ import annotations

import asyncio
import codecs
from collections.abc import AsyncIterable, AsyncIterator

# Bytes requested per read from an asyncio.StreamReader.
_CHUNK_SIZE = 64 * 1024


def _strip_cr(line: str) -> str:
    return line[:-1] if line.endswith("\r") else line


async def _chunks(
    source: asyncio.StreamReader | AsyncIterable[bytes | str],
) -> AsyncIterator[bytes | str]:
    if isinstance(source, asyncio.StreamReader):
        while True:
            chunk = await source.read(_CHUNK_SIZE)
            if not chunk:
                return
            yield chunk
    else:
        async for chunk in source:
            yield chunk


class LineDecoder:
    """Split a stream of text or byte chunks into lines.

    Single use: once closed (explicitly, or by lines() reaching the end of
    its source) the decoder rejects further input. Create a new decoder for
    a new stream.
    """

    def __init__(self, encoding: str = "utf-8", errors: str = "replace") -> None:
        self._decoder = codecs.getincrementaldecoder(encoding)(errors=errors)
        self._buffer = ""
        self._closed = False
        self._attached = False

    @property
    def closed(self) -> bool:
        return self._closed

    def feed(self, chunk: bytes | str) -> list[str]:
        """Add a chunk and return the lines it completes, without newlines."""
        if self._closed:
            raise RuntimeError("LineDecoder is closed; create a new decoder for a new stream")

        text = self._decoder.decode(chunk) if isinstance(chunk, bytes) else chunk
        if "\n" not in text:
            self._buffer += text
            return []

        parts = (self._buffer + text).split("\n")
        self._buffer = parts.pop()
        return [_strip_cr(part) for part in parts]

    def close(self) -> list[str]:
        """Close the decoder and return the unterminated tail, if any."""
        if self._closed:
            return []
        self._closed = True
        tail = self._buffer + self._decoder.decode(b"", final=True)
        self._buffer = ""
        return [_strip_cr(tail)] if tail else []

    async def lines(
        self, source: asyncio.StreamReader | AsyncIterable[bytes | str]
    ) -> AsyncIterator[str]:
        """Yield lines read from source until it is exhausted.

        Raises:
            RuntimeError: If this decoder has already been attached to a
                source or closed.
        """
        if self._attached or self._closed:
            raise RuntimeError("LineDecoder is single use; create a new decoder for a new stream")
        self._attached = True

        async for chunk in _chunks(source):
            for line in self.feed(chunk):
                yield line

        for line in self.close():
            yield line
