"""Exception types raised by docker-toolbox.

Every error reaches the immediate caller: spawn and exit failures through
the awaited process handle, encoding and parse failures synchronously or
through the event stream. Nothing is retried internally.
"""

from __future__ import annotations


class ToolboxError(Exception):
    """Base class for all docker-toolbox errors."""


class ToolboxSpawnError(ToolboxError):
    """Raised when an executable cannot be started at all."""

    def __init__(self, program: str, reason: str = "") -> None:
        self.program = program
        message = f"Failed to start {program}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class ToolboxExitError(ToolboxError):
    """Raised when a subprocess exits with a non-zero code."""

    def __init__(self, program: str, returncode: int) -> None:
        self.program = program
        self.returncode = returncode
        super().__init__(f"{program} responded with non-zero code {returncode}")


class OptionsEncodingError(ToolboxError, ValueError):
    """Raised when an options mapping cannot be encoded as CLI arguments."""


class MachineEnvParseError(ToolboxError):
    """Raised when docker-machine env output lacks the expected structure."""


class EventDecodeError(ToolboxError):
    """Raised when a line of the compose event stream is not a valid event."""
