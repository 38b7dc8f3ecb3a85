"""Reading compose files into service descriptions."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

DEFAULT_COMPOSE_FILE = Path(".") / "docker-compose.yaml"


class ComposeError(Exception):
    """Raised when a compose file cannot be read or is not a valid description."""


@dataclass
class Service:
    """One service entry of a compose file."""

    image: str
    ports: list[str]
    environment: dict[str, str]
    volumes: dict[str, str]
    command: list[str] | None = None
    name: str | None = None


@dataclass
class Compose:
    """A whole compose file: its version and its services by key."""

    version: str
    services: dict[str, Service]


def _text(value: Any, what: str) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    raise ComposeError(f"invalid type for {what}: expected a string")


def _required(data: dict, key: str) -> Any:
    if key not in data:
        raise ComposeError(f"missing field `{key}`")
    return data[key]


def parse_environment(value: Any) -> dict[str, str]:
    """Accept a mapping or a list of ``KEY=value`` strings."""
    if isinstance(value, dict):
        return {
            _text(key, "environment variable name"): _text(item, "environment variable value")
            for key, item in value.items()
        }
    if isinstance(value, list):
        environment = {}
        for entry in value:
            entry = _text(entry, "environment variable")
            key, sep, item = entry.partition("=")
            if not sep:
                raise ComposeError(f"Invalid environment variable: {entry}")
            environment[key] = item
        return environment
    raise ComposeError(
        "invalid type for environment: expected a map or a list of key=value strings"
    )


def parse_volumes(value: Any) -> dict[str, str]:
    """Accept a list of ``source:target`` strings."""
    if not isinstance(value, list):
        raise ComposeError(
            "invalid type for volumes: expected a list of strings which follows "
            "this format: key:value"
        )
    volumes = {}
    for entry in value:
        entry = _text(entry, "volume")
        source, sep, target = entry.partition(":")
        if not sep:
            raise ComposeError(f"Invalid volume: {entry}")
        volumes[source] = target
    return volumes


def parse_command(value: Any) -> list[str]:
    """Accept a string (split once at the first space) or a list of strings."""
    if isinstance(value, str):
        head, sep, rest = value.partition(" ")
        return [head, rest] if sep else [value]
    if isinstance(value, list):
        return [_text(entry, "command") for entry in value]
    raise ComposeError("invalid type for command: expected a string or a list of strings")


def parse_service(data: Any) -> Service:
    """Build a :class:`Service` from one decoded service mapping."""
    if not isinstance(data, dict):
        raise ComposeError("invalid type for service: expected a mapping")
    ports = _required(data, "ports")
    if not isinstance(ports, list):
        raise ComposeError("invalid type for ports: expected a list of strings")
    name = data.get("name")
    return Service(
        image=_text(_required(data, "image"), "image"),
        ports=[_text(port, "port") for port in ports],
        environment=parse_environment(_required(data, "environment")),
        volumes=parse_volumes(_required(data, "volumes")),
        command=parse_command(data["command"]) if "command" in data else None,
        name=None if name is None else _text(name, "name"),
    )


def parse_compose(text: str) -> Compose:
    """Parse the YAML text of a compose file."""
    try:
        # Every scalar is kept as written, so "1.10" or "true" stay text.
        data = yaml.load(text, Loader=yaml.BaseLoader)
    except yaml.YAMLError as exc:
        raise ComposeError(str(exc)) from exc
    if not isinstance(data, dict):
        raise ComposeError("invalid compose file: expected a mapping")
    services = _required(data, "services")
    if not isinstance(services, dict):
        raise ComposeError("invalid type for services: expected a mapping")
    return Compose(
        version=_text(_required(data, "version"), "version"),
        services={_text(key, "service name"): parse_service(value) for key, value in services.items()},
    )


def load_compose_file(path: str | Path | None = None) -> Compose:
    """Read and parse a compose file, by default ``./docker-compose.yaml``."""
    file_path = Path(DEFAULT_COMPOSE_FILE if path is None else path)
    try:
        text = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ComposeError("No docker-compose.yaml file found") from exc
    return parse_compose(text)