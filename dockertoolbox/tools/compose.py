"""DockerCompose — async façade over the docker-compose CLI.

Each method spawns one docker-compose subprocess and returns its handle as
soon as the process is running:

    compose = DockerCompose("docker-compose.yml", machine=machine)
    build = await compose.build("db", "client", options={"pull": True})
    await build                    # docker-compose -f docker-compose.yml build --pull db client

Options are passed keyword-only, either as the operation's schema model or
as a plain mapping, and services/arguments positionally. Options are
validated and encoded before anything is spawned, so a bad option never
starts a process.

When bound to a DockerMachine, the machine's environment (DOCKER_HOST,
DOCKER_CERT_PATH, ...) is overlaid on every subprocess environment. It is
read at spawn time, so a refresh_env() is picked up by later calls.
"""

from __future__ import annotations

import os
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

import logfire

from dockertoolbox.codec.args import options_to_args, repeat_flag
from dockertoolbox.codec.events import EventStream
from dockertoolbox.config import ToolboxSettings, get_settings
from dockertoolbox.options.base import ToolboxOptions, resolve_options
from dockertoolbox.options.compose import (
    BuildOptions,
    BundleOptions,
    ConfigOptions,
    DownOptions,
    EventsOptions,
    ExecOptions,
    ImagesOptions,
    KillOptions,
    LogsOptions,
    PauseOptions,
    PsOptions,
    PullOptions,
    PushOptions,
    RestartOptions,
    RmOptions,
    RunOptions,
    StartOptions,
    StopOptions,
    TopOptions,
    UnpauseOptions,
    UpOptions,
    VersionOptions,
)
from dockertoolbox.tools.cli import SpawnOptions, ToolboxProcess, capture_stdout, spawn_toolbox

if TYPE_CHECKING:
    from dockertoolbox.tools.machine import DockerMachine

Options = ToolboxOptions | Mapping[str, Any] | None
PathLike = str | os.PathLike[str]


def _pop_short_flag(resolved: dict[str, Any], key: str, flag: str) -> list[str]:
    """Remove a boolean option and render it as a bare short flag."""
    return [flag] if resolved.pop(key, None) else []


def _pop_repeated(resolved: dict[str, Any], key: str, flag: str) -> list[str]:
    """Remove a list or mapping option and render it as repeated flag/value pairs."""
    return repeat_flag(flag, resolved.pop(key, None))


class DockerCompose:
    """docker-compose bound to a set of compose files and, optionally, a machine."""

    def __init__(
        self,
        config_path: PathLike | Sequence[PathLike] | None = None,
        *,
        machine: DockerMachine | None = None,
        project_name: str | None = None,
        project_directory: PathLike | None = None,
        cwd: PathLike | None = None,
        settings: ToolboxSettings | None = None,
    ) -> None:
        if config_path is None:
            self.config_paths: list[str] = []
        elif isinstance(config_path, (str, os.PathLike)):
            self.config_paths = [os.fspath(config_path)]
        else:
            self.config_paths = [os.fspath(p) for p in config_path]

        self.machine = machine
        self.project_name = project_name
        self.project_directory = (
            os.fspath(project_directory) if project_directory is not None else None
        )
        self.cwd = cwd
        self._settings = settings

    @property
    def settings(self) -> ToolboxSettings:
        return self._settings or get_settings()

    def _global_args(self) -> list[str]:
        args: list[str] = []
        for path in self.config_paths:
            args.extend(("-f", path))
        if self.project_name:
            args.extend(("-p", self.project_name))
        if self.project_directory:
            args.extend(("--project-directory", self.project_directory))
        return args

    def _spawn_options(self) -> SpawnOptions:
        env = self.machine.env if self.machine is not None else None
        return SpawnOptions(env=env, cwd=self.cwd)

    async def _spawn(self, command: str, args: Sequence[str]) -> ToolboxProcess[None]:
        all_args = [*self._global_args(), command, *args]
        return await spawn_toolbox(
            self.settings.compose_binary, all_args, self._spawn_options()
        )

    async def _run(
        self,
        command: str,
        schema: type[ToolboxOptions],
        options: Options,
        positionals: Sequence[str],
    ) -> ToolboxProcess[None]:
        resolved = resolve_options(options, schema)
        return await self._spawn(command, [*options_to_args(resolved), *positionals])

    # ── Image and project commands ───────────────────────────────────────────

    async def build(self, *services: str, options: Options = None) -> ToolboxProcess[None]:
        """Build or rebuild services (all services when none are named)."""
        return await self._run("build", BuildOptions, options, services)

    async def bundle(self, *, options: Options = None) -> ToolboxProcess[None]:
        """Generate a Docker bundle from the compose file."""
        return await self._run("bundle", BundleOptions, options, ())

    async def config(self, *, options: Options = None) -> ToolboxProcess[None]:
        """Validate and view the compose file. The output is left on stdout."""
        return await self._run("config", ConfigOptions, options, ())

    async def images(
        self,
        *services: str,
        ids_only: bool = False,
        options: Options = None,
    ) -> ToolboxProcess[list[str]]:
        """List image ids used by the created containers.

        Only the id listing (`images -q`) is supported; its output is
        captured and split into one id per line.

        Raises:
            NotImplementedError: If ids_only is False. Nothing is spawned.
        """
        if not ids_only:
            raise NotImplementedError("Only image id listing (ids_only=True) is supported")

        resolved = resolve_options(options, ImagesOptions)
        handle = await self._spawn("images", [*options_to_args(resolved), "-q", *services])

        def _split(output: str) -> list[str]:
            ids = [line.strip() for line in output.splitlines() if line.strip()]
            logfire.info("docker-compose images listed {count} ids", count=len(ids))
            return ids

        return capture_stdout(handle).then(_split)

    async def pull(self, *services: str, options: Options = None) -> ToolboxProcess[None]:
        """Pull service images."""
        return await self._run("pull", PullOptions, options, services)

    async def push(self, *services: str, options: Options = None) -> ToolboxProcess[None]:
        """Push service images."""
        return await self._run("push", PushOptions, options, services)

    async def version(self, *, options: Options = None) -> ToolboxProcess[str]:
        """Query the docker-compose version; resolves to the trimmed output."""
        handle = await self._run("version", VersionOptions, options, ())
        return capture_stdout(handle).then(str.strip)

    # ── Lifecycle ────────────────────────────────────────────────────────────

    async def up(self, *services: str, options: Options = None) -> ToolboxProcess[None]:
        """Create and start containers."""
        return await self._run("up", UpOptions, options, services)

    async def down(self, *, options: Options = None) -> ToolboxProcess[None]:
        """Stop and remove containers, networks, and optionally images and volumes."""
        return await self._run("down", DownOptions, options, ())

    async def start(self, *services: str, options: Options = None) -> ToolboxProcess[None]:
        return await self._run("start", StartOptions, options, services)

    async def stop(self, *services: str, options: Options = None) -> ToolboxProcess[None]:
        return await self._run("stop", StopOptions, options, services)

    async def restart(
        self, *services: str, options: Options = None
    ) -> ToolboxProcess[None]:
        return await self._run("restart", RestartOptions, options, services)

    async def pause(self, *services: str, options: Options = None) -> ToolboxProcess[None]:
        return await self._run("pause", PauseOptions, options, services)

    async def unpause(self, *services: str, options: Options = None) -> ToolboxProcess[None]:
        return await self._run("unpause", UnpauseOptions, options, services)

    async def kill(self, *services: str, options: Options = None) -> ToolboxProcess[None]:
        """Force stop service containers. options.signal is sent as `-s SIGNAL`."""
        resolved = resolve_options(options, KillOptions)
        signal = resolved.pop("signal", None)
        special = ["-s", signal] if signal else []
        return await self._spawn("kill", [*options_to_args(resolved), *special, *services])

    async def rm(self, *services: str, options: Options = None) -> ToolboxProcess[None]:
        """Remove stopped service containers."""
        resolved = resolve_options(options, RmOptions)
        special = _pop_short_flag(resolved, "volumes", "-v")
        return await self._spawn("rm", [*options_to_args(resolved), *special, *services])

    # ── Inspection ───────────────────────────────────────────────────────────

    async def events(self, *services: str, options: Options = None) -> EventStream:
        """Stream container events as ComposeEvent records.

        `--json` is always passed. The returned stream ends when
        docker-compose exits cleanly and raises otherwise.
        """
        resolved = resolve_options(options, EventsOptions)
        handle = await self._spawn("events", [*options_to_args(resolved), "--json", *services])
        logfire.info("Streaming docker-compose events (pid {pid})", pid=handle.pid)
        return EventStream(handle)

    async def logs(self, *services: str, options: Options = None) -> ToolboxProcess[None]:
        """View output from containers. The log text is left on stdout."""
        return await self._run("logs", LogsOptions, options, services)

    async def ps(self, *services: str, options: Options = None) -> ToolboxProcess[None]:
        return await self._run("ps", PsOptions, options, services)

    async def top(self, *services: str, options: Options = None) -> ToolboxProcess[None]:
        return await self._run("top", TopOptions, options, services)

    # ── Running commands ─────────────────────────────────────────────────────

    async def exec(
        self, service: str, *command: str, options: Options = None
    ) -> ToolboxProcess[None]:
        """Execute a command in a running service container.

        options.env becomes repeated `-e KEY=VALUE`; options.no_tty becomes `-T`.
        """
        resolved = resolve_options(options, ExecOptions)
        special = [
            *_pop_repeated(resolved, "env", "-e"),
            *_pop_short_flag(resolved, "noTty", "-T"),
        ]
        return await self._spawn(
            "exec", [*options_to_args(resolved), *special, service, *command]
        )

    async def run(
        self, service: str, *command: str, options: Options = None
    ) -> ToolboxProcess[None]:
        """Run a one-off command against a service.

        options.env, options.publish and options.volume become repeated
        `-e`, `-p` and `-v` pairs; options.no_tty becomes `-T`.
        """
        resolved = resolve_options(options, RunOptions)
        special = [
            *_pop_repeated(resolved, "env", "-e"),
            *_pop_repeated(resolved, "publish", "-p"),
            *_pop_repeated(resolved, "volume", "-v"),
            *_pop_short_flag(resolved, "noTty", "-T"),
        ]
        return await self._spawn(
            "run", [*options_to_args(resolved), *special, service, *command]
        )
