"""Server parameters read from an INI-style configuration file."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from pathlib import Path
from typing import Union

_SECTION_PREFIX = "server."
_UINT_MAX = 0xFFFFFFFF
_USHORT_MAX = 0xFFFF
_SIZE_MAX = 0xFFFFFFFFFFFFFFFF


class ConfigFileNotFound(FileNotFoundError):
    """The configuration file could not be opened."""


@dataclass
class AppParam:
    """Parameters of the server application."""

    ip: str = ""
    port: int = 2012
    accept_queue_size: int = 250

    io_thread_size: int = 4
    work_thread_init: int = 4
    work_thread_high: int = 32
    work_thread_load: int = 100

    handler_pool_init: int = 1000
    handler_pool_low: int = 0
    handler_pool_high: int = 5000
    handler_pool_inc: int = 50
    handler_pool_max: int = 9999

    read_buffer_size: int = 256
    write_buffer_size: int = 0
    session_timeout: int = 30
    io_timeout: int = 0


_LIMITS = {
    "port": _USHORT_MAX,
    "session_timeout": _UINT_MAX,
    "io_timeout": _UINT_MAX,
}


def _convert(name: str, raw: str) -> Union[str, int]:
    if name == "ip":
        return raw
    if not raw.isdigit():
        raise ValueError(f"invalid value {raw!r} for option '{_SECTION_PREFIX}{name}'")
    value = int(raw)
    if value > _LIMITS.get(name, _SIZE_MAX):
        raise ValueError(f"value {raw!r} out of range for option '{_SECTION_PREFIX}{name}'")
    return value


def _parse(text: str) -> dict[str, str]:
    """Return the ``name -> value`` pairs of the file, names carrying their section prefix."""
    prefix = ""
    values: dict[str, str] = {}
    for number, line in enumerate(text.splitlines(), start=1):
        line = line.split("#", 1)[0].strip()
        if not line:
            continue
        if line.startswith("[") and line.endswith("]"):
            prefix = line[1:-1].strip() + "."
            continue
        name, sep, value = line.partition("=")
        name = name.strip()
        if not sep or not name:
            raise ValueError(f"invalid syntax on line {number}: {line!r}")
        full_name = prefix + name
        if full_name in values:
            raise ValueError(f"option '{full_name}' given more than once")
        values[full_name] = value.strip()
    return values


def load_params(config_file: Union[str, Path]) -> AppParam:
    """Read server parameters from ``config_file``; unknown options are ignored."""
    try:
        text = Path(config_file).read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigFileNotFound(f"cannot open config file: {config_file}") from exc

    values = _parse(text)
    overrides = {}
    for field in dataclasses.fields(AppParam):
        key = _SECTION_PREFIX + field.name
        if key in values:
            overrides[field.name] = _convert(field.name, values[key])
    return AppParam(**overrides)