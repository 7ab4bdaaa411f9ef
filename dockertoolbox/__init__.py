"""docker-toolbox — async wrappers for docker-compose and docker-machine.

Public API:
  DockerCompose      — docker-compose façade bound to compose files and a machine
  DockerMachine      — docker-machine host handle (get, create, refresh_env)
  ToolboxProcess     — handle for a running subprocess and its eventual result
  EventStream        — async iterator over `docker-compose events --json`
  ComposeEvent       — one decoded event record
  options_to_args    — the options-to-CLI-arguments encoder
  parse_machine_env  — the `docker-machine env` output parser

Typical usage:
    from dockertoolbox import DockerCompose, DockerMachine

    machine = await (await DockerMachine.get("dev"))
    compose = DockerCompose("docker-compose.yml", machine=machine)
    await (await compose.up(options={"detach": True}))
"""

from dockertoolbox.codec.args import options_to_args
from dockertoolbox.codec.env import parse_machine_env
from dockertoolbox.codec.events import ComposeEvent, EventStream
from dockertoolbox.errors import (
    EventDecodeError,
    MachineEnvParseError,
    OptionsEncodingError,
    ToolboxError,
    ToolboxExitError,
    ToolboxSpawnError,
)
from dockertoolbox.tools.cli import SpawnOptions, ToolboxProcess, spawn_toolbox
from dockertoolbox.tools.compose import DockerCompose
from dockertoolbox.tools.machine import DockerMachine

__all__ = [
    "ComposeEvent",
    "DockerCompose",
    "DockerMachine",
    "EventDecodeError",
    "EventStream",
    "MachineEnvParseError",
    "OptionsEncodingError",
    "SpawnOptions",
    "ToolboxError",
    "ToolboxExitError",
    "ToolboxProcess",
    "ToolboxSpawnError",
    "options_to_args",
    "parse_machine_env",
    "spawn_toolbox",
]
