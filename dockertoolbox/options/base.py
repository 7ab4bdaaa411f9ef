"""Shared base for per-operation option schemas.

Every façade operation declares a pydantic model listing the options it
accepts. Fields are snake_case in Python; the alias of each field is the
camelCase option name the argument encoder turns into a flag:

    class StopOptions(ToolboxOptions):
        timeout: int | None = None        # alias "timeout" → --timeout

Callers may pass either a model instance or a plain mapping keyed by field
name or alias. resolve_options() validates either form against the schema
and returns the camelCase mapping for options_to_args().
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict

from dockertoolbox.codec.args import snake_to_camel

Scalar = str | int | float | bool
FlatMap = dict[str, Scalar | list[Scalar]]
"""KEY=VALUE style options, e.g. build args, labels, environment."""


class ToolboxOptions(BaseModel):
    """Base model for option schemas. Unknown options are rejected."""

    model_config = ConfigDict(
        alias_generator=snake_to_camel,
        populate_by_name=True,
        extra="forbid",
    )


class NoOptions(ToolboxOptions):
    """Schema for operations that take no options."""


def resolve_options(
    options: ToolboxOptions | Mapping[str, Any] | None,
    schema: type[ToolboxOptions],
) -> dict[str, Any]:
    """Validate options against schema and return an ordered camelCase mapping.

    A model instance is emitted in field declaration order. A mapping is
    emitted in the order its keys were supplied. Unset and None-valued
    options are left out.

    Raises:
        pydantic.ValidationError: If a mapping has unknown keys or values of
            the wrong type.
        TypeError: If a model instance of another schema is passed.
    """
    if options is None:
        return {}

    if isinstance(options, BaseModel):
        if not isinstance(options, schema):
            msg = f"Expected {schema.__name__} options, got {type(options).__name__}"
            raise TypeError(msg)
        return options.model_dump(by_alias=True, exclude_none=True)

    model = schema.model_validate(dict(options))
    dumped = model.model_dump(by_alias=True, exclude_none=True)

    aliases: dict[str, str] = {}
    for name, info in schema.model_fields.items():
        alias = info.alias or name
        aliases[name] = alias
        aliases[alias] = alias

    ordered: dict[str, Any] = {}
    for key in options:
        alias = aliases[key]
        if alias in dumped:
            ordered[alias] = dumped[alias]
    return ordered
