"""Options-to-arguments encoder — turns option mappings into CLI tokens.

docker-compose and docker-machine both take GNU-style long flags. Options are
supplied as a mapping from camelCase names to values; each entry becomes zero
or more argv tokens:

    {"noCache": True}                 → ["--no-cache"]
    {"memory": "512m"}                → ["--memory", "512m"]
    {"timeout": 10}                   → ["--timeout", "10"]
    {"scopes": ["a", "b"]}            → ["--scopes", "a,b"]
    {"buildArg": {"A": 1, "B": "x"}}  → ["--build-arg", "A=1", "--build-arg", "B=x"]

Each value is classified once into an OptionKind and encoded by the rule for
that kind. Encoding is pure: the same mapping (including key order) always
produces the same tokens, and a mapping that cannot be encoded raises
OptionsEncodingError without producing any tokens.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping, Sequence
from enum import Enum

from pydantic import SecretStr

from dockertoolbox.errors import OptionsEncodingError

Scalar = str | int | float | bool
FlatValue = Scalar | Sequence[str | int | float | bool]
OptionValue = (
    Scalar | SecretStr | Sequence[str | int | float] | Mapping[str, FlatValue] | None
)
OptionsMapping = Mapping[str, OptionValue]

_UPPER_RE = re.compile(r"([A-Z])")
_WHITESPACE_RE = re.compile(r"\s")


class OptionKind(Enum):
    """The closed set of value shapes an option may take."""

    ABSENT = "absent"
    FLAG = "flag"
    NUMBER = "number"
    TEXT = "text"
    SECRET = "secret"
    SEQUENCE = "sequence"
    MAPPING = "mapping"


def option_kind(value: object) -> OptionKind:
    """Classify an option value. bool is checked before int."""
    if value is None:
        return OptionKind.ABSENT
    if isinstance(value, bool):
        return OptionKind.FLAG
    if isinstance(value, (int, float)):
        return OptionKind.NUMBER
    if isinstance(value, str):
        return OptionKind.TEXT
    if isinstance(value, SecretStr):
        return OptionKind.SECRET
    if isinstance(value, Mapping):
        return OptionKind.MAPPING
    if isinstance(value, (list, tuple)):
        return OptionKind.SEQUENCE
    raise OptionsEncodingError(
        f"Option value may only be a bool, number, string, sequence or flat mapping; "
        f"got {type(value).__name__}"
    )


def camel_to_flag(key: str, prefix: str = "") -> str:
    """Convert a camelCase option name to a long flag: testOption → --test-option."""
    return "--" + prefix + _UPPER_RE.sub(r"-\1", key).lower()


def snake_to_camel(name: str) -> str:
    """Convert a snake_case field name to the camelCase option name.

    Only the first letter of each later segment is raised, so digits inside a
    segment stay put: boot2docker_url → boot2dockerUrl.
    """
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def _format_number(value: int | float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _render_element(value: object) -> str:
    """Render one element of a sequence value."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return _format_number(value)
    if isinstance(value, str):
        return value
    raise OptionsEncodingError(
        "Sequence elements may only be strings, numbers or booleans; "
        f"got {type(value).__name__}"
    )


def _join(values: Sequence[object]) -> str:
    # Elements are neither quoted nor escaped: ["a b", "c,d"] → "a b,c,d".
    return ",".join(_render_element(v) for v in values)


def _render_pair(key: str, value: object) -> str:
    """Validate and render one flat-mapping entry as KEY=VALUE."""
    if _WHITESPACE_RE.search(key):
        raise OptionsEncodingError(
            f"Options mapping key {key!r} may not contain whitespace characters"
        )

    if isinstance(value, str):
        if _WHITESPACE_RE.search(value):
            raise OptionsEncodingError(
                f"Options mapping value for {key!r} may not contain whitespace characters"
            )
        rendered = value
    elif isinstance(value, (list, tuple)):
        for element in value:
            if isinstance(element, str) and _WHITESPACE_RE.search(element):
                raise OptionsEncodingError(
                    f"Options mapping value element for {key!r} "
                    "may not contain whitespace characters"
                )
            if isinstance(element, (Mapping, list, tuple)):
                raise OptionsEncodingError(
                    f"Options mapping value element for {key!r} "
                    "may only be a string, number or boolean"
                )
        rendered = _join(value)
    elif isinstance(value, (bool, int, float)):
        rendered = _render_element(value)
    else:
        raise OptionsEncodingError(
            f"Options mapping value for {key!r} may only be a string, number, boolean "
            f"or a sequence of those; got {type(value).__name__}"
        )

    return f"{key}={rendered}"


# ── Encoding rules, one per OptionKind ───────────────────────────────────────


def _encode_absent(flag: str, value: None) -> list[str]:
    return []


def _encode_flag(flag: str, value: bool) -> list[str]:
    return [flag] if value else []


def _encode_number(flag: str, value: int | float) -> list[str]:
    return [flag, _format_number(value)]


def _encode_text(flag: str, value: str) -> list[str]:
    if not value:
        return []
    if _WHITESPACE_RE.search(value):
        return [flag, f'"{value}"']
    return [flag, value]


def _encode_secret(flag: str, value: SecretStr) -> list[str]:
    # Unwrapped here and nowhere else; see secret_flags() for log masking.
    return _encode_text(flag, value.get_secret_value())


def _encode_sequence(flag: str, value: Sequence[object]) -> list[str]:
    if not value:
        return []
    return [flag, _join(value)]


def _encode_mapping(flag: str, value: Mapping[str, object]) -> list[str]:
    pairs = [_render_pair(k, v) for k, v in value.items()]
    tokens: list[str] = []
    for pair in pairs:
        tokens.extend((flag, pair))
    return tokens


_ENCODERS: dict[OptionKind, Callable[[str, object], list[str]]] = {
    OptionKind.ABSENT: _encode_absent,
    OptionKind.FLAG: _encode_flag,
    OptionKind.NUMBER: _encode_number,
    OptionKind.TEXT: _encode_text,
    OptionKind.SECRET: _encode_secret,
    OptionKind.SEQUENCE: _encode_sequence,
    OptionKind.MAPPING: _encode_mapping,
}


def options_to_args(options: OptionsMapping | None, *, prefix: str = "") -> list[str]:
    """Encode an options mapping as an ordered list of CLI tokens.

    Args:
        options: Mapping from camelCase option name to value. Iteration order
            is preserved in the output.
        prefix: Inserted between "--" and the hyphenated name. docker-machine
            driver flags use the driver name, e.g. prefix="azure-".

    Returns:
        The argv tokens, possibly empty.

    Raises:
        OptionsEncodingError: If a value has an unsupported shape, or a flat
            mapping key or value contains whitespace.
    """
    if not options:
        return []

    args: list[str] = []
    for key, value in options.items():
        flag = camel_to_flag(key, prefix)
        args.extend(_ENCODERS[option_kind(value)](flag, value))
    return args


def secret_flags(options: OptionsMapping | None, *, prefix: str = "") -> frozenset[str]:
    """Return the flags whose value options_to_args() will take from a SecretStr.

    Pass the result to spawn_toolbox() so the token after each of these flags
    is masked in spans and reprs.
    """
    if not options:
        return frozenset()
    return frozenset(
        camel_to_flag(key, prefix)
        for key, value in options.items()
        if isinstance(value, SecretStr)
    )


def repeat_flag(flag: str, value: OptionValue) -> list[str]:
    """Expand a value into repeated flag/value pairs.

    Used for options the CLI accepts several times with a short flag, such as
    `-e KEY=VAL` or `-p 8080:80`. Sequence elements each get their own flag;
    mapping entries are validated and rendered as KEY=VALUE; a scalar yields a
    single pair.
    """
    kind = option_kind(value)
    if kind is OptionKind.ABSENT:
        return []
    if kind is OptionKind.MAPPING:
        return _encode_mapping(flag, value)  # type: ignore[arg-type]
    if kind is OptionKind.SEQUENCE:
        rendered = [_render_element(v) for v in value]  # type: ignore[union-attr]
    else:
        rendered = [_render_element(value)]

    tokens: list[str] = []
    for item in rendered:
        tokens.extend((flag, item))
    return tokens
