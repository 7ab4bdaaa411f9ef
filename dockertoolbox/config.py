"""docker-toolbox configuration — centralized environment variable management.

This module is the single place where runtime settings are declared,
validated, and typed. Library code never reads os.environ for its own
settings; it imports get_settings() from here.

Usage:
    from dockertoolbox.config import get_settings

    settings = get_settings()
    program = settings.compose_binary

Environment variables (all optional):

    DOCKER_TOOLBOX_COMPOSE_BINARY  — docker-compose executable name or path.
                                     Default: "docker-compose".
    DOCKER_TOOLBOX_MACHINE_BINARY  — docker-machine executable name or path.
                                     Default: "docker-machine".
    DOCKER_TOOLBOX_LOGFIRE_TOKEN   — Logfire project token. If unset, logfire
                                     runs in local mode (no remote export).
    DOCKER_TOOLBOX_SERVICE_NAME    — service name reported to logfire.
                                     Default: "docker-toolbox".
"""

from __future__ import annotations

import re
from functools import lru_cache

import logfire
from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_WHITESPACE_RE = re.compile(r"\s")


class ToolboxSettings(BaseSettings):
    """Settings for docker-toolbox.

    Field names map to env vars by uppercasing and prefixing:
    compose_binary → DOCKER_TOOLBOX_COMPOSE_BINARY.

    Instantiate via get_settings() to benefit from caching.
    """

    model_config = SettingsConfigDict(
        env_prefix="DOCKER_TOOLBOX_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Executables ──────────────────────────────────────────────────────────

    compose_binary: str = "docker-compose"
    """Executable spawned by DockerCompose. A bare name is resolved on PATH."""

    machine_binary: str = "docker-machine"
    """Executable spawned by DockerMachine. A bare name is resolved on PATH."""

    # ── Observability ────────────────────────────────────────────────────────

    logfire_token: SecretStr | None = None
    """Logfire project token. Optional — if unset, logfire runs in local mode."""

    service_name: str = "docker-toolbox"

    @field_validator("compose_binary", "machine_binary")
    @classmethod
    def validate_binary(cls, v: str) -> str:
        if not v:
            msg = "Executable name must not be empty"
            raise ValueError(msg)
        if _WHITESPACE_RE.search(v):
            msg = (
                f"Executable '{v}' contains whitespace. "
                "Pass a single program name or path, not a command line."
            )
            raise ValueError(msg)
        return v


@lru_cache(maxsize=1)
def get_settings() -> ToolboxSettings:
    """Return the cached ToolboxSettings instance.

    Reads from environment on first call, then caches for the process lifetime.
    Call clear_settings_cache() in tests to reset between test cases.
    """
    return ToolboxSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache.

    Use in tests that need to vary environment variables between cases:

        def test_something(monkeypatch):
            monkeypatch.setenv("DOCKER_TOOLBOX_COMPOSE_BINARY", "/opt/bin/docker-compose")
            clear_settings_cache()
            settings = get_settings()
            ...
    """
    get_settings.cache_clear()


def configure_observability(settings: ToolboxSettings | None = None) -> None:
    """Configure logfire for a process that uses docker-toolbox.

    Only the command-line entry point calls this. Library code emits spans
    and logs but never configures logfire itself; applications embedding
    the library configure it once at startup.
    """
    settings = settings or get_settings()
    token = settings.logfire_token
    logfire.configure(
        token=token.get_secret_value() if token else None,
        service_name=settings.service_name,
    )
