"""DockerMachine — host handle and async façade over the docker-machine CLI.

A DockerMachine names a docker-machine host and holds the environment
variables a Docker client needs to reach it (DOCKER_HOST, DOCKER_CERT_PATH,
DOCKER_TLS_VERIFY, DOCKER_MACHINE_NAME). Handles come from a successful
query, never from direct construction:

    machine = await (await DockerMachine.get("dev"))
    machine.env                                    # {"DOCKER_HOST": "tcp://…", …}
    await (await machine.refresh_env())

    machine = await (await DockerMachine.create(
        "dev", "virtualbox", {"memory": 2048, "noShare": True}
    ))

Query failures surface to the caller and leave an existing handle's
environment as it was.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import logfire

from dockertoolbox.codec.args import options_to_args, repeat_flag, secret_flags
from dockertoolbox.codec.env import EnvParser, MachineEnv, parse_machine_env
from dockertoolbox.config import ToolboxSettings, get_settings
from dockertoolbox.options.base import ToolboxOptions, resolve_options
from dockertoolbox.options.machine import DRIVER_OPTIONS, EnvOptions, MachineOptions
from dockertoolbox.tools.cli import ToolboxProcess, capture_stdout, spawn_toolbox

logger = logging.getLogger(__name__)

Options = ToolboxOptions | Mapping[str, Any] | None


async def _spawn_machine(
    args: list[str],
    options: Options,
    settings: ToolboxSettings | None,
    secrets: frozenset[str] = frozenset(),
) -> ToolboxProcess[None]:
    """Spawn docker-machine with the global options placed before the command.

    secrets are the credential flags in args; credential flags among the
    global options are added here.
    """
    settings = settings or get_settings()
    resolved = resolve_options(options, MachineOptions)
    global_args = options_to_args(resolved)
    return await spawn_toolbox(
        settings.machine_binary,
        [*global_args, *args],
        secret_flags=secrets | secret_flags(resolved),
    )


class DockerMachine:
    """A docker-machine host and its current client environment.

    Obtain instances through DockerMachine.get() or DockerMachine.create().
    The constructor is internal to this module and to tests: a handle built
    by hand holds an environment no docker-machine query produced.
    """

    def __init__(
        self,
        name: str,
        env: MachineEnv,
        *,
        options: Options = None,
        parser: EnvParser = parse_machine_env,
        settings: ToolboxSettings | None = None,
    ) -> None:
        self._name = name
        self._env = dict(env)
        self._options = options
        self._parser = parser
        self._settings = settings

    def __repr__(self) -> str:
        return f"<DockerMachine {self._name!r} ({len(self._env)} env vars)>"

    @property
    def name(self) -> str:
        return self._name

    @property
    def env(self) -> MachineEnv:
        """Parsed output of `docker-machine env`. Call refresh_env() to update."""
        return dict(self._env)

    # ── Queries ──────────────────────────────────────────────────────────────

    @classmethod
    async def query_env(
        cls,
        name: str,
        options: Options = None,
        *,
        machine_options: Options = None,
        parser: EnvParser = parse_machine_env,
        settings: ToolboxSettings | None = None,
    ) -> ToolboxProcess[MachineEnv]:
        """Run `docker-machine env <name>` and resolve to the parsed variables.

        Args:
            name: Machine name.
            options: EnvOptions (swarm, shell, no_proxy).
            machine_options: MachineOptions placed before the command.
            parser: Turns the captured output into a mapping. The default
                adapts to whatever shell syntax docker-machine printed.
            settings: Defaults to get_settings().

        Raises:
            ToolboxExitError: From the handle, if docker-machine fails.
            MachineEnvParseError: From the handle, if the output has no
                DOCKER_MACHINE_NAME line.
        """
        env_args = options_to_args(resolve_options(options, EnvOptions))
        handle = await _spawn_machine(["env", *env_args, name], machine_options, settings)

        def _parse(output: str) -> MachineEnv:
            with logfire.span("machine.parse_env", machine_name=name):
                env = parser(output, name)
                logfire.info(
                    "Parsed {count} variables for machine '{machine_name}'",
                    count=len(env),
                    machine_name=name,
                )
                return env

        return capture_stdout(handle).then(_parse)

    @classmethod
    async def get(
        cls,
        name: str,
        options: Options = None,
        env_options: Options = None,
        *,
        parser: EnvParser = parse_machine_env,
        settings: ToolboxSettings | None = None,
    ) -> ToolboxProcess[DockerMachine]:
        """Query an existing machine and resolve to a populated handle.

        options are global MachineOptions; they are kept on the handle and
        reused by refresh_env().
        """
        handle = await cls.query_env(
            name,
            env_options,
            machine_options=options,
            parser=parser,
            settings=settings,
        )
        return handle.then(
            lambda env: cls(name, env, options=options, parser=parser, settings=settings)
        )

    @classmethod
    async def create(
        cls,
        name: str,
        driver: str,
        driver_options: Options = None,
        *,
        options: Options = None,
        settings: ToolboxSettings | None = None,
    ) -> ToolboxProcess[DockerMachine]:
        """Create a machine with the given driver and resolve to its handle.

        Runs `docker-machine create --driver <driver> [--<driver>-*] <name>`,
        then queries the new machine's environment.

        Args:
            name: Machine name.
            driver: One of DRIVER_OPTIONS, e.g. "virtualbox" or "amazonec2".
            driver_options: Options for that driver's schema. Flags are
                prefixed with the driver name.
            options: Global MachineOptions, also kept on the returned handle.
            settings: Defaults to get_settings().

        Raises:
            ValueError: If the driver is unknown. Nothing is spawned.
        """
        schema = DRIVER_OPTIONS.get(driver)
        if schema is None:
            msg = f"Unknown docker-machine driver '{driver}'. Known: {', '.join(DRIVER_OPTIONS)}"
            raise ValueError(msg)

        resolved = resolve_options(driver_options, schema)

        special: list[str] = []
        if driver == "azure":
            # docker-machine takes one --azure-open-port per port.
            special = repeat_flag("--azure-open-port", resolved.pop("openPort", None))

        driver_args = options_to_args(resolved, prefix=f"{driver}-")
        driver_secrets = secret_flags(resolved, prefix=f"{driver}-")
        create_args = ["create", "--driver", driver, *driver_args, *special, name]

        with logfire.span("machine.create", machine_name=name, driver=driver):
            handle = await _spawn_machine(create_args, options, settings, driver_secrets)

        async def _fetch(_: None) -> DockerMachine:
            logfire.info(
                "Machine '{machine_name}' created with {driver}",
                machine_name=name,
                driver=driver,
            )
            machine_handle = await cls.get(name, options, settings=settings)
            return await machine_handle

        return handle.then(_fetch)

    async def refresh_env(self, options: Options = None) -> ToolboxProcess[MachineEnv]:
        """Re-run `docker-machine env` and replace this handle's environment.

        The environment is only replaced once the query has succeeded and
        parsed; a failed refresh leaves the previous one in place.
        """
        handle = await type(self).query_env(
            self._name,
            options,
            machine_options=self._options,
            parser=self._parser,
            settings=self._settings,
        )

        def _assign(env: MachineEnv) -> MachineEnv:
            self._env = dict(env)
            logger.info("Refreshed environment for machine %s", self._name)
            return dict(env)

        return handle.then(_assign)
