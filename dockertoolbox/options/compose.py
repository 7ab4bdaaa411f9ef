"""Option schemas for docker-compose subcommands.

One model per subcommand. Field names follow the docker-compose flag names
(`--force-rm` → force_rm). Fields that the façade renders specially rather
than through the generic encoder are noted on the field.
"""

from __future__ import annotations

from dockertoolbox.options.base import FlatMap, NoOptions, ToolboxOptions


class BuildOptions(ToolboxOptions):
    compress: bool = False
    """Compress the build context using gzip."""

    force_rm: bool = False
    """Always remove intermediate containers."""

    no_cache: bool = False
    """Do not use cache when building the image."""

    pull: bool = False
    """Always attempt to pull a newer version of the image."""

    memory: str | None = None
    """Memory limit for the build container, e.g. "512m"."""

    build_arg: FlatMap | None = None
    """Build-time variables, one --build-arg KEY=VALUE per entry."""

    parallel: bool = False
    quiet: bool = False


class BundleOptions(ToolboxOptions):
    push_images: bool = False
    output: str | None = None


class ConfigOptions(ToolboxOptions):
    resolve_image_digests: bool = False
    quiet: bool = False
    services: bool = False
    volumes: bool = False
    hash: str | None = None


class DownOptions(ToolboxOptions):
    rmi: str | None = None
    """Remove images: "all" or "local"."""

    volumes: bool = False
    remove_orphans: bool = False
    timeout: int | None = None


class ExecOptions(ToolboxOptions):
    detach: bool = False
    privileged: bool = False
    user: str | None = None
    index: int | None = None
    workdir: str | None = None

    env: FlatMap | None = None
    """Rendered as repeated -e KEY=VALUE."""

    no_tty: bool = False
    """Rendered as the bare short flag -T."""


class KillOptions(ToolboxOptions):
    signal: str | None = None
    """Rendered as -s SIGNAL, e.g. "SIGINT"."""


class LogsOptions(ToolboxOptions):
    no_color: bool = False
    follow: bool = False
    timestamps: bool = False
    tail: int | str | None = None
    """Number of lines per container, or "all"."""


class PsOptions(ToolboxOptions):
    quiet: bool = False
    services: bool = False
    filter: FlatMap | None = None
    all: bool = False


class PullOptions(ToolboxOptions):
    ignore_pull_failures: bool = False
    parallel: bool = False
    no_parallel: bool = False
    quiet: bool = False
    include_deps: bool = False


class PushOptions(ToolboxOptions):
    ignore_push_failures: bool = False


class RestartOptions(ToolboxOptions):
    timeout: int | None = None


class RmOptions(ToolboxOptions):
    force: bool = False
    stop: bool = False

    volumes: bool = False
    """Rendered as -v; docker-compose rm has no long form."""


class RunOptions(ToolboxOptions):
    detach: bool = False
    name: str | None = None
    entrypoint: str | None = None

    env: FlatMap | None = None
    """Rendered as repeated -e KEY=VALUE."""

    label: FlatMap | None = None
    user: str | None = None
    no_deps: bool = False
    rm: bool = False

    publish: list[str | int] | None = None
    """Rendered as repeated -p mappings, e.g. ["8080:80", "5432"]."""

    service_ports: bool = False
    use_aliases: bool = False

    volume: list[str] | None = None
    """Rendered as repeated -v bind mounts."""

    workdir: str | None = None

    no_tty: bool = False
    """Rendered as the bare short flag -T."""


class StopOptions(ToolboxOptions):
    timeout: int | None = None


class UpOptions(ToolboxOptions):
    detach: bool = False
    no_color: bool = False
    quiet_pull: bool = False
    no_deps: bool = False
    force_recreate: bool = False
    always_recreate_deps: bool = False
    no_recreate: bool = False
    no_build: bool = False
    no_start: bool = False
    build: bool = False
    abort_on_container_exit: bool = False
    timeout: int | None = None
    renew_anon_volumes: bool = False
    remove_orphans: bool = False
    exit_code_from: str | None = None

    scale: FlatMap | None = None
    """SERVICE=NUM pairs, one --scale per entry."""


class VersionOptions(ToolboxOptions):
    short: bool = False


# Subcommands without options of their own.
EventsOptions = NoOptions
ImagesOptions = NoOptions
PauseOptions = NoOptions
StartOptions = NoOptions
TopOptions = NoOptions
UnpauseOptions = NoOptions
