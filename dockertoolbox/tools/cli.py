"""Async subprocess runner for docker-toolbox.

Every docker-compose and docker-machine invocation goes through this module.
It provides:

- spawn_toolbox(): start a program and get a ToolboxProcess handle back as
  soon as the subprocess is running
- ToolboxProcess: the live asyncio subprocess plus an awaitable completion
  that succeeds on exit code 0 and raises ToolboxExitError otherwise
- capture_stdout(): read a handle's stdout to the end, for the few
  operations whose result is the program's output

Output is never read on the caller's behalf except through capture_stdout().
With the default piped stdio, a caller that neither reads nor redirects a
chatty program's output will stall it once the pipe fills; pass
SpawnOptions(stdout=None, stderr=None) to inherit the parent's streams.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import os
import subprocess
import sys
from collections.abc import Awaitable, Callable, Collection, Generator, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

import logfire

from dockertoolbox.errors import ToolboxExitError, ToolboxSpawnError

logger = logging.getLogger(__name__)

T = TypeVar("T")
U = TypeVar("U")

PIPE = asyncio.subprocess.PIPE

# Windows creation flag that keeps a console window from flashing up.
# Defined here because subprocess only exports it on Windows.
_CREATE_NO_WINDOW = getattr(subprocess, "CREATE_NO_WINDOW", 0x08000000)

# Shown in place of a credential in logged argument lists.
REDACTED = "[REDACTED]"


def redact_args(args: Sequence[str], secret_flags: Collection[str]) -> list[str]:
    """Copy args with the value after each secret flag replaced by REDACTED."""
    redacted: list[str] = []
    mask_next = False
    for arg in args:
        redacted.append(REDACTED if mask_next else arg)
        mask_next = not mask_next and arg in secret_flags
    return redacted


@dataclass
class SpawnOptions:
    """Per-spawn configuration passed through to create_subprocess_exec.

    env is overlaid on the current process environment rather than
    replacing it, so PATH and friends survive.
    """

    env: Mapping[str, str] | None = None
    cwd: str | os.PathLike[str] | None = None
    stdin: int | None = PIPE
    stdout: int | None = PIPE
    stderr: int | None = PIPE
    extra: dict[str, Any] = field(default_factory=dict)
    """Additional keyword arguments for asyncio.create_subprocess_exec."""

    def to_kwargs(self) -> dict[str, Any]:
        kwargs: dict[str, Any] = {
            **self.extra,
            "stdin": self.stdin,
            "stdout": self.stdout,
            "stderr": self.stderr,
        }
        if self.cwd is not None:
            kwargs["cwd"] = os.fspath(self.cwd)
        if self.env is not None:
            kwargs["env"] = {**os.environ, **self.env}
        _hide_console_window(kwargs)
        return kwargs


def _hide_console_window(kwargs: dict[str, Any]) -> None:
    """Force console-window suppression on Windows, whatever the caller passed."""
    if sys.platform == "win32":
        kwargs["creationflags"] = kwargs.get("creationflags", 0) | _CREATE_NO_WINDOW


class ToolboxProcess(Generic[T]):
    """A running subprocess and the eventual result of the operation.

    Await the handle (or its wait() method) for the result. The completion
    is scheduled as soon as the handle exists, so the subprocess is reaped
    and its exit logged even if nobody awaits it.

    Handles derived with then() share the same subprocess: they expose the
    same .process and only differ in what their completion resolves to.

    args holds the real tokens; display_args masks the value after every
    flag in secret_flags and is what repr and logs show.
    """

    def __init__(
        self,
        program: str,
        args: Sequence[str],
        process: asyncio.subprocess.Process,
        result: Awaitable[T],
        *,
        secret_flags: Collection[str] = (),
    ) -> None:
        self.program = program
        self.args = list(args)
        self.secret_flags = frozenset(secret_flags)
        self.process = process
        self._completion: asyncio.Future[T] = asyncio.ensure_future(result)

    def __repr__(self) -> str:
        return f"<ToolboxProcess {self.program} {' '.join(self.display_args)!r} pid={self.pid}>"

    def __await__(self) -> Generator[Any, None, T]:
        return self._completion.__await__()

    @property
    def pid(self) -> int:
        return self.process.pid

    @property
    def display_args(self) -> list[str]:
        return redact_args(self.args, self.secret_flags)

    def done(self) -> bool:
        """True once the completion has resolved or failed."""
        return self._completion.done()

    async def wait(self) -> T:
        """Wait for the operation to finish and return its result.

        Raises:
            ToolboxExitError: If the subprocess exits with a non-zero code.
        """
        return await self._completion

    def then(self, fn: Callable[[T], U | Awaitable[U]]) -> ToolboxProcess[U]:
        """Derive a handle whose result is fn applied to this handle's result.

        fn may be a plain function or return an awaitable. It only runs if
        this handle succeeds; failures propagate to the derived handle.
        """

        async def _chain() -> U:
            value = await self._completion
            mapped = fn(value)
            if inspect.isawaitable(mapped):
                return await mapped
            return mapped

        return ToolboxProcess(
            self.program, self.args, self.process, _chain(), secret_flags=self.secret_flags
        )

    def terminate(self) -> None:
        """Send SIGTERM (TerminateProcess on Windows) if still running."""
        if self.process.returncode is None:
            self.process.terminate()

    def kill(self) -> None:
        """Send SIGKILL if still running."""
        if self.process.returncode is None:
            self.process.kill()


async def _wait_for_exit(program: str, process: asyncio.subprocess.Process) -> None:
    returncode = await process.wait()
    if returncode == 0:
        logfire.info("{program} exited cleanly", program=program, pid=process.pid)
        return

    logfire.error(
        "{program} exited with code {returncode}",
        program=program,
        pid=process.pid,
        returncode=returncode,
    )
    logger.error("%s failed: pid=%s returncode=%d", program, process.pid, returncode)
    raise ToolboxExitError(program, returncode)


async def spawn_toolbox(
    program: str,
    args: Sequence[str],
    spawn_options: SpawnOptions | None = None,
    *,
    secret_flags: Collection[str] = (),
) -> ToolboxProcess[None]:
    """Start program with args and return a handle once it is running.

    Args:
        program: Executable name or path (e.g. "docker-compose").
        args: Argument tokens, not including the program itself.
        spawn_options: Environment, working directory and stdio. Defaults
            to piped stdin, stdout and stderr.
        secret_flags: Flags whose following token is a credential. That
            token is replaced by REDACTED in spans and in the handle's repr.

    Returns:
        ToolboxProcess whose completion resolves to None on exit code 0.

    Raises:
        ToolboxSpawnError: If the executable cannot be started. Raised
            straight away; there is no process to wait for.
    """
    spawn_options = spawn_options or SpawnOptions()
    logged_args = redact_args(args, secret_flags)

    with logfire.span("toolbox.spawn", program=program, args=logged_args):
        try:
            process = await asyncio.create_subprocess_exec(
                program,
                *args,
                **spawn_options.to_kwargs(),
            )
        except OSError as e:
            logfire.error("Failed to start {program}: {error}", program=program, error=str(e))
            raise ToolboxSpawnError(program, str(e)) from e

        logfire.info("Started {program} (pid {pid})", program=program, pid=process.pid)

    return ToolboxProcess(
        program, args, process, _wait_for_exit(program, process), secret_flags=secret_flags
    )


def capture_stdout(handle: ToolboxProcess[Any], encoding: str = "utf-8") -> ToolboxProcess[str]:
    """Derive a handle that resolves to everything the subprocess printed.

    stdout is read concurrently with the wait so a full pipe cannot stall
    the program. The text is only returned if the exit code is 0.
    """
    stdout = handle.process.stdout
    reader = asyncio.ensure_future(stdout.read()) if stdout is not None else None

    async def _captured() -> str:
        data = await reader if reader is not None else b""
        await handle
        return data.decode(encoding, errors="replace")

    return ToolboxProcess(
        handle.program,
        handle.args,
        handle.process,
        _captured(),
        secret_flags=handle.secret_flags,
    )
