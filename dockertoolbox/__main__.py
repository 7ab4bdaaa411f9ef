"""Command-line entry point for docker-toolbox.

    python -m dockertoolbox env dev
    python -m dockertoolbox events -f docker-compose.yml --machine dev db
    python -m dockertoolbox version -f docker-compose.yml

or, once installed, `docker-toolbox ...`.

Configuration is read from DOCKER_TOOLBOX_* environment variables (or a
.env file). Logfire is configured here, once per process.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from dockertoolbox.config import configure_observability, get_settings
from dockertoolbox.errors import ToolboxError
from dockertoolbox.tools.compose import DockerCompose
from dockertoolbox.tools.machine import DockerMachine

# ── Logging ───────────────────────────────────────────────────────────────────

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docker-toolbox",
        description="Drive docker-compose and docker-machine.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    env = sub.add_parser("env", help="print a machine's client environment")
    env.add_argument("machine")
    env.add_argument("--shell", help="force the docker-machine env output syntax")

    events = sub.add_parser("events", help="stream compose events as JSON lines")
    events.add_argument("-f", "--file", action="append", default=[], dest="files")
    events.add_argument("--machine", help="run against this docker-machine host")
    events.add_argument("services", nargs="*")

    version = sub.add_parser("version", help="print the docker-compose version")
    version.add_argument("-f", "--file", action="append", default=[], dest="files")

    return parser


async def _print_env(machine_name: str, shell: str | None) -> None:
    options = {"shell": shell} if shell else None
    env = await (await DockerMachine.query_env(machine_name, options))
    for key, value in env.items():
        print(f"{key}={value}")


async def _stream_events(files: list[str], machine_name: str | None, services: list[str]) -> None:
    machine = await (await DockerMachine.get(machine_name)) if machine_name else None
    compose = DockerCompose(files, machine=machine)
    stream = await compose.events(*services)
    async with stream:
        async for event in stream:
            print(event.model_dump_json(), flush=True)


async def _print_version(files: list[str]) -> None:
    compose = DockerCompose(files)
    print(await (await compose.version(options={"short": True})))


def main(argv: list[str] | None = None) -> int:
    """Run one docker-toolbox command and return the process exit status."""
    logging.basicConfig(
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        level=logging.INFO,
    )
    args = build_parser().parse_args(argv)
    configure_observability(get_settings())

    if args.command == "env":
        coro = _print_env(args.machine, args.shell)
    elif args.command == "events":
        coro = _stream_events(args.files, args.machine, args.services)
    else:
        coro = _print_version(args.files)

    try:
        asyncio.run(coro)
    except ToolboxError as e:
        logger.error("docker-toolbox %s failed: %s", args.command, e)
        return 1
    except KeyboardInterrupt:
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
