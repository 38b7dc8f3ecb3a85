"""Descriptions of running containers and the ``container`` commands that manage them."""

from __future__ import annotations

import json
import subprocess
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

CONTAINER_TOOL = "container"


class ContainerError(Exception):
    """Raised when the container tool fails or reports something unreadable."""


@dataclass(frozen=True)
class Network:
    address: str
    gateway: str
    network: str
    hostname: str


@dataclass(frozen=True)
class Resources:
    cpus: int


@dataclass(frozen=True)
class UserId:
    uid: int
    gid: int


@dataclass(frozen=True)
class User:
    id: UserId


@dataclass(frozen=True)
class InitProcess:
    environment: list[str]
    arguments: list[str]
    executable: str
    terminal: bool
    user: User
    rlimits: list[str]


@dataclass(frozen=True)
class Platform:
    os: str
    architecture: str


@dataclass(frozen=True)
class Mount:
    """A mount of a container; no details are read from it."""


@dataclass(frozen=True)
class Descriptor:
    size: int
    digest: str


@dataclass(frozen=True)
class Image:
    reference: str
    descriptor: Descriptor


@dataclass(frozen=True)
class Dns:
    nameservers: list[str]
    options: list[str]


@dataclass(frozen=True)
class Configuration:
    resources: Resources
    labels: dict[str, str]
    hostname: str
    sysctls: dict[str, str]
    networks: list[str]
    id: str
    rosetta: bool
    platform: Platform
    mounts: list[Mount]
    image: Image
    dns: Dns


@dataclass(frozen=True)
class Container:
    networks: list[Network]
    status: str
    configuration: Configuration


def _object(value: Any, what: str) -> dict:
    if not isinstance(value, dict):
        raise ContainerError(f"invalid type for {what}: expected an object")
    return value


def _field(data: dict, key: str, kind: type) -> Any:
    if key not in data:
        raise ContainerError(f"missing field `{key}`")
    value = data[key]
    if kind is int:
        valid = isinstance(value, int) and not isinstance(value, bool) and value >= 0
    elif kind is str:
        valid = isinstance(value, str)
    else:
        valid = isinstance(value, kind)
    if not valid:
        raise ContainerError(f"invalid type for field `{key}`")
    return value


def _strings(data: dict, key: str) -> list[str]:
    values = _field(data, key, list)
    if not all(isinstance(value, str) for value in values):
        raise ContainerError(f"invalid type for field `{key}`: expected strings")
    return list(values)


def _string_map(data: dict, key: str) -> dict[str, str]:
    values = _field(data, key, dict)
    if not all(isinstance(value, str) for value in values.values()):
        raise ContainerError(f"invalid type for field `{key}`: expected string values")
    return dict(values)


def _parse_network(data: Any) -> Network:
    data = _object(data, "network")
    return Network(
        address=_field(data, "address", str),
        gateway=_field(data, "gateway", str),
        network=_field(data, "network", str),
        hostname=_field(data, "hostname", str),
    )


def _parse_configuration(data: Any) -> Configuration:
    data = _object(data, "configuration")
    resources = _object(_field(data, "resources", dict), "resources")
    platform = _object(_field(data, "platform", dict), "platform")
    image = _object(_field(data, "image", dict), "image")
    descriptor = _object(_field(image, "descriptor", dict), "descriptor")
    dns = _object(_field(data, "dns", dict), "dns")
    return Configuration(
        resources=Resources(cpus=_field(resources, "cpus", int)),
        labels=_string_map(data, "labels"),
        hostname=_field(data, "hostname", str),
        sysctls=_string_map(data, "sysctls"),
        networks=_strings(data, "networks"),
        id=_field(data, "id", str),
        rosetta=_field(data, "rosetta", bool),
        platform=Platform(
            os=_field(platform, "os", str),
            architecture=_field(platform, "architecture", str),
        ),
        mounts=[Mount() for mount in _field(data, "mounts", list) if _object(mount, "mount") is not None],
        image=Image(
            reference=_field(image, "reference", str),
            descriptor=Descriptor(
                size=_field(descriptor, "size", int),
                digest=_field(descriptor, "digest", str),
            ),
        ),
        dns=Dns(nameservers=_strings(dns, "nameservers"), options=_strings(dns, "options")),
    )


def parse_container(data: Any) -> Container:
    """Build a :class:`Container` from one decoded JSON object."""
    data = _object(data, "container")
    return Container(
        networks=[_parse_network(item) for item in _field(data, "networks", list)],
        status=_field(data, "status", str),
        configuration=_parse_configuration(_field(data, "configuration", dict)),
    )


def parse_containers(text: str | bytes) -> list[Container]:
    """Parse a JSON array of containers as printed by the container tool."""
    try:
        data = json.loads(text)
    except ValueError as exc:
        raise ContainerError(f"invalid JSON: {exc}") from exc
    if not isinstance(data, list):
        raise ContainerError("invalid container list: expected an array")
    return [parse_container(item) for item in data]


def get_containers_list() -> list[Container]:
    """List the running containers."""
    try:
        result = subprocess.run(
            [CONTAINER_TOOL, "ls", "--format", "json"], capture_output=True, check=False
        )
    except OSError as exc:
        raise ContainerError("Failed to get containers list") from exc
    try:
        return parse_containers(result.stdout)
    except ContainerError as exc:
        raise ContainerError("Failed to parse containers list") from exc


def _run_on_containers(action: str, container_ids: Iterable[str], failure: str) -> None:
    try:
        subprocess.run(
            [CONTAINER_TOOL, action, *container_ids], capture_output=True, check=False
        )
    except OSError as exc:
        raise ContainerError(failure) from exc


def stop_containers(container_ids: Iterable[str]) -> None:
    """Stop the given containers."""
    _run_on_containers("stop", container_ids, "Failed to stop containers")


def remove_containers(container_ids: Iterable[str]) -> None:
    """Remove the given containers."""
    _run_on_containers("rm", container_ids, "Failed to remove containers")