"""Starting and tearing down the services of a compose file."""

from __future__ import annotations

import re
import subprocess
import sys
from dataclasses import dataclass, field
from pathlib import Path

from containercompose.compose import Service, load_compose_file
from containercompose.containers import (
    CONTAINER_TOOL,
    ContainerError,
    get_containers_list,
    parse_containers,
    remove_containers,
    stop_containers,
)

_PORT_NUMBER = re.compile(r"\+?[0-9]+")


def _parse_port_number(text: str) -> int:
    if not _PORT_NUMBER.fullmatch(text) or int(text) > 65535:
        raise ValueError(f"invalid port number: {text!r}")
    return int(text)


def split_port(port: str) -> tuple[int, int | None]:
    """Split ``host:container`` into its port numbers; the container side may be absent."""
    parts = port.split(":")
    host_port = _parse_port_number(parts[0])
    container_port = _parse_port_number(parts[1]) if len(parts) > 1 else None
    return host_port, container_port


@dataclass
class ServiceContainer:
    """A service ready to be run as a named container."""

    name: str
    image: str
    ports: list[str] = field(default_factory=list)
    environment: dict[str, str] = field(default_factory=dict)
    volumes: dict[str, str] = field(default_factory=dict)
    command: list[str] | None = None

    @classmethod
    def from_service(cls, name: str, service: Service) -> ServiceContainer:
        return cls(
            name=name,
            image=service.image,
            ports=list(service.ports),
            environment=dict(service.environment),
            volumes=dict(service.volumes),
            command=None if service.command is None else list(service.command),
        )

    def build_run_args(self) -> list[str]:
        """Arguments of the run command; missing volume sources are created."""
        args = [CONTAINER_TOOL, "run", "--name", self.name]
        for key, value in self.environment.items():
            args += ["-e", f"{key}={value}"]
        for source, target in self.volumes.items():
            source_path = Path(source)
            if not source_path.exists():
                source_path.mkdir(parents=True)
            absolute = source_path.resolve(strict=True)
            args += ["--mount", f"type=bind,source={absolute},target={target}"]
        args += ["-d", self.image]
        if self.command is not None:
            if self.command == [""]:
                args += ["echo", "No command provided"]
            else:
                args += self.command
        return args

    def run(self) -> None:
        """Start the container detached, then forward its ports."""
        args = self.build_run_args()
        try:
            result = subprocess.run(args, capture_output=True, check=False)
        except OSError as exc:
            raise ContainerError("Failed to run container") from exc
        if result.returncode != 0:
            raise ContainerError(f"Failed to run container: exit status: {result.returncode}")
        self.expose_service_ports()

    def expose_service_ports(self) -> None:
        """Forward each host port to the container with a background socat."""
        if not self.ports:
            return
        print(
            "Found ports in service, container does not support mapping port yet. "
            "Running socat fallback."
        )
        result = subprocess.run(
            [CONTAINER_TOOL, "inspect", self.name], capture_output=True, check=False
        )
        containers = parse_containers(result.stdout)
        if not containers:
            raise ContainerError(f"No container found named {self.name}")
        networks = containers[0].configuration.networks
        for port in self.ports:
            host_port, container_port = split_port(port)
            if container_port is None:
                raise ValueError(f"invalid port mapping: {port!r}")
            if not networks:
                raise ContainerError(f"Container {self.name} has no network")
            address = f"{networks[0]}:{container_port}"
            try:
                process = subprocess.Popen(
                    ["socat", f"TCP-LISTEN:{host_port},fork", f"TCP:{address}"]
                )
            except OSError as exc:
                print(f"Failed to run socat: {exc}", file=sys.stderr)
            else:
                print(f"socat running on pid {process.pid}")


def run_services(path: str | Path | None = None) -> None:
    """Run every service of the compose file."""
    compose = load_compose_file(path)
    for key, service in compose.services.items():
        name = service.name if service.name is not None else key
        ServiceContainer.from_service(name, service).run()


def stop_and_remove_services(path: str | Path | None = None) -> None:
    """Stop and remove all containers, then kill whatever holds the service host ports."""
    container_ids = [container.configuration.id for container in get_containers_list()]
    stop_containers(container_ids)
    remove_containers(container_ids)

    compose = load_compose_file(path)
    ports = [port for service in compose.services.values() for port in service.ports]
    for port in ports:
        host_port, _ = split_port(port)
        result = subprocess.run(
            ["lsof", "-ti", f":{host_port}"], capture_output=True, check=False
        )
        if result.returncode == 0:
            pid = result.stdout.decode("utf-8").strip()
            subprocess.run(["kill", pid], capture_output=True, check=False)