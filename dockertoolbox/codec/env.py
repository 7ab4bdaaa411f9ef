"""docker-machine env output parsing.

`docker-machine env <name>` prints the variables a shell needs to talk to
the machine's Docker daemon, in the syntax of the calling shell:

    export DOCKER_TLS_VERIFY="1"                       # bash, zsh
    set -gx DOCKER_HOST "tcp://192.168.99.100:2376";   # fish
    $Env:DOCKER_CERT_PATH = "C:\\Users\\me\\.docker"   # powershell
    SET DOCKER_MACHINE_NAME=dev                        # cmd

Rather than knowing every shell's syntax, the parser finds the line that sets
DOCKER_MACHINE_NAME to the queried machine name and treats everything around
those two anchors as a literal template. Every line matching the template
contributes one variable.
"""

from __future__ import annotations

import re
from collections.abc import Callable

from dockertoolbox.errors import MachineEnvParseError

MachineEnv = dict[str, str]
EnvParser = Callable[[str, str], MachineEnv]

# Marker variable whose value is the machine name.
SENTINEL = "DOCKER_MACHINE_NAME"

_LINE_SPLIT_RE = re.compile(r"\r\n|\n")


def env_line_pattern(line: str, name: str) -> re.Pattern[str]:
    """Derive a single-line pattern from the line that sets the sentinel.

    The text before the sentinel, between the sentinel and the machine name,
    and after the machine name is matched literally. The variable name is
    captured as letters and underscores, the value as anything.

    Raises:
        MachineEnvParseError: If the line lacks the sentinel or the name.
    """
    sentinel_start = line.find(SENTINEL)
    if sentinel_start < 0:
        raise MachineEnvParseError(f"Line does not contain {SENTINEL}: {line!r}")
    sentinel_end = sentinel_start + len(SENTINEL)

    name_start = line.find(name, sentinel_end) if name else -1
    if name_start < 0:
        raise MachineEnvParseError(
            f"Machine name {name!r} not found after {SENTINEL} in line {line!r}"
        )
    name_end = name_start + len(name)

    pattern = (
        re.escape(line[:sentinel_start])
        + "([a-z_]+)"
        + re.escape(line[sentinel_end:name_start])
        + "(.*?)"
        + re.escape(line[name_end:])
        + "$"
    )
    return re.compile(pattern, re.IGNORECASE)


def parse_machine_env(output: str, name: str) -> MachineEnv:
    """Parse `docker-machine env` output into a variable mapping.

    Args:
        output: Captured stdout of `docker-machine env <name>`.
        name: The machine name that was queried.

    Returns:
        Mapping of variable name to value. A variable set twice keeps the
        last value.

    Raises:
        MachineEnvParseError: If no line sets DOCKER_MACHINE_NAME. That
            means the query printed nothing useful, which is never an empty
            environment.
    """
    lines = _LINE_SPLIT_RE.split(output)
    anchor = next((line for line in lines if SENTINEL in line), None)
    if anchor is None:
        raise MachineEnvParseError(
            f"docker-machine env output for {name!r} has no {SENTINEL} line"
        )

    pattern = env_line_pattern(anchor, name)

    env: MachineEnv = {}
    for line in lines:
        m = pattern.search(line)
        if m:
            env[m.group(1)] = m.group(2)
    return env
