"""docker-compose event stream decoding.

`docker-compose events --json` prints one JSON object per line for as long
as it runs:

    {"time": "2018-03-14T09:12:44.560271", "type": "container",
     "action": "start", "id": "4b7f…", "service": "db",
     "attributes": {"name": "app_db_1", "image": "postgres:10"}}

EventStream turns the stdout of such a process into an async iterator of
ComposeEvent records. The iteration ends when the process exits with code 0
and raises if it exits with any other code or prints a line that is not a
valid event.
"""

from __future__ import annotations

import asyncio
import contextlib
import json
from collections.abc import AsyncIterator
from types import TracebackType

import logfire
from pydantic import BaseModel, Field, ValidationError

from dockertoolbox.codec.lines import LineDecoder
from dockertoolbox.errors import EventDecodeError, ToolboxExitError
from dockertoolbox.tools.cli import ToolboxProcess


class ComposeEvent(BaseModel):
    """One record from the compose event stream."""

    time: str
    type: str
    action: str
    id: str
    service: str
    attributes: dict[str, str] = Field(default_factory=dict)


def decode_event(line: str) -> ComposeEvent:
    """Parse a single JSON line into a ComposeEvent.

    Raises:
        EventDecodeError: If the line is not JSON, not an object, or lacks
            a required field.
    """
    try:
        raw = json.loads(line)
    except json.JSONDecodeError as e:
        raise EventDecodeError(f"Failed to parse event line as JSON: {e}: {line!r}") from e

    if not isinstance(raw, dict):
        raise EventDecodeError(f"Expected a JSON object per event, got {type(raw).__name__}")

    try:
        return ComposeEvent.model_validate(raw)
    except ValidationError as e:
        raise EventDecodeError(f"Invalid event record: {e}") from e


class EventStream:
    """Async iterator over the events printed by a running process.

    Usage:
        stream = await compose.events()
        async with stream:
            async for event in stream:
                ...

    A stream can be iterated once. Leaving the `async with` block (or
    calling aclose()) terminates the subprocess if it is still running.
    """

    def __init__(self, handle: ToolboxProcess[None]) -> None:
        self.handle = handle
        self._decoder = LineDecoder()

    @property
    def process(self) -> asyncio.subprocess.Process:
        return self.handle.process

    def __aiter__(self) -> AsyncIterator[ComposeEvent]:
        return self._events()

    async def _events(self) -> AsyncIterator[ComposeEvent]:
        stdout = self.handle.process.stdout
        if stdout is None:
            raise RuntimeError("EventStream requires the process stdout to be piped")

        async for line in self._decoder.lines(stdout):
            if not line.strip():
                continue
            yield decode_event(line)

        # End of output: the exit code decides between a clean end and an error.
        await self.handle

    async def aclose(self) -> None:
        """Stop the subprocess if it is still running and reap it."""
        if self.handle.done():
            return
        logfire.info(
            "Closing event stream for {program} (pid {pid})",
            program=self.handle.program,
            pid=self.handle.pid,
        )
        self.handle.terminate()
        # A terminated process exits non-zero; that exit was asked for.
        with contextlib.suppress(ToolboxExitError):
            await self.handle

    async def __aenter__(self) -> EventStream:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
