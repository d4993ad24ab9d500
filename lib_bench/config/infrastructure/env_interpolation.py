"""${ENV_VAR} and ${ENV_VAR:-default} interpolation over raw YAML data."""

import os
import re
from collections.abc import Callable

_ENV_VAR_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::-([^}]*))?\}")

type RawValue = (
    str | int | float | bool | None | list["RawValue"] | dict[str, "RawValue"]
)


def _map_strings(data: RawValue, fn: Callable[[str], str]) -> RawValue:
    """Rebuild data with fn applied to every string leaf. Keys are left alone."""
    if isinstance(data, str):
        return fn(data)
    if isinstance(data, list):
        return [_map_strings(item, fn) for item in data]
    if isinstance(data, dict):
        return {key: _map_strings(value, fn) for key, value in data.items()}
    return data


def collect_missing_vars(data: RawValue) -> list[str]:
    """
    Return every referenced variable that is unset and has no default.

    Names are reported once each, in the order they are first seen.
    """
    missing: list[str] = []

    def _check(value: str) -> str:
        for match in _ENV_VAR_PATTERN.finditer(value):
            name, default = match.group(1), match.group(2)
            if default is None and name not in os.environ and name not in missing:
                missing.append(name)
        return value

    _map_strings(data, _check)
    return missing


def _substitute(match: re.Match[str]) -> str:
    name, default = match.group(1), match.group(2)
    if default is None:
        return os.environ[name]
    return os.environ.get(name, default)


def interpolate(data: RawValue) -> RawValue:
    """
    Substitute every variable reference with its runtime value.

    Run `collect_missing_vars` first; an unset variable without a default
    raises KeyError here.
    """
    return _map_strings(data, lambda value: _ENV_VAR_PATTERN.sub(_substitute, value))
