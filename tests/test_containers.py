import json
import subprocess

import pytest

from containercompose.containers import (
    Container,
    ContainerError,
    Mount,
    Network,
    get_containers_list,
    parse_container,
    parse_containers,
    remove_containers,
    stop_containers,
)


def sample_container(container_id="web"):
    return {
        "networks": [
            {
                "address": "192.168.64.3/24",
                "gateway": "192.168.64.1",
                "network": "default",
                "hostname": container_id,
            }
        ],
        "status": "running",
        "configuration": {
            "resources": {"cpus": 4, "memoryInBytes": 1024},
            "labels": {"app": "demo"},
            "hostname": container_id,
            "sysctls": {},
            "networks": ["default"],
            "id": container_id,
            "rosetta": False,
            "platform": {"os": "linux", "architecture": "arm64"},
            "mounts": [{"type": "bind"}],
            "image": {
                "reference": "docker.io/library/nginx:latest",
                "descriptor": {"size": 1609, "digest": "sha256:placeholder"},
            },
            "dns": {"nameservers": ["192.168.64.1"], "options": []},
        },
    }


class FakeRun:
    def __init__(self, stdout=b"", returncode=0, error=None):
        self.calls = []
        self.stdout = stdout
        self.returncode = returncode
        self.error = error

    def __call__(self, args, **kwargs):
        self.calls.append(list(args))
        if self.error is not None:
            raise self.error
        return subprocess.CompletedProcess(args, self.returncode, self.stdout, b"")


def test_parse_container_reads_fields():
    container = parse_container(sample_container())
    assert container.status == "running"
    assert container.networks == [
        Network(address="192.168.64.3/24", gateway="192.168.64.1", network="default", hostname="web")
    ]
    assert container.configuration.id == "web"
    assert container.configuration.resources.cpus == 4
    assert container.configuration.platform.architecture == "arm64"
    assert container.configuration.image.descriptor.size == 1609
    assert container.configuration.mounts == [Mount()]
    assert container.configuration.dns.nameservers == ["192.168.64.1"]


def test_parse_containers_round_trip_through_json():
    text = json.dumps([sample_container("a"), sample_container("b")])
    containers = parse_containers(text)
    assert [c.configuration.id for c in containers] == ["a", "b"]
    assert all(isinstance(c, Container) for c in containers)


def test_missing_field_is_rejected():
    data = sample_container()
    del data["configuration"]["id"]
    with pytest.raises(ContainerError, match="id"):
        parse_container(data)


def test_wrong_type_is_rejected():
    data = sample_container()
    data["configuration"]["resources"]["cpus"] = "two"
    with pytest.raises(ContainerError, match="cpus"):
        parse_container(data)


def test_negative_size_is_rejected():
    data = sample_container()
    data["configuration"]["image"]["descriptor"]["size"] = -1
    with pytest.raises(ContainerError):
        parse_container(data)


def test_invalid_json_is_rejected():
    with pytest.raises(ContainerError):
        parse_containers("not json")


def test_non_array_is_rejected():
    with pytest.raises(ContainerError):
        parse_containers(json.dumps(sample_container()))


def test_get_containers_list(monkeypatch):
    fake = FakeRun(stdout=json.dumps([sample_container()]).encode())
    monkeypatch.setattr(subprocess, "run", fake)
    containers = get_containers_list()
    assert fake.calls == [["container", "ls", "--format", "json"]]
    assert [c.configuration.id for c in containers] == ["web"]


def test_get_containers_list_unparsable(monkeypatch):
    monkeypatch.setattr(subprocess, "run", FakeRun(stdout=b"garbage"))
    with pytest.raises(ContainerError, match="Failed to parse containers list"):
        get_containers_list()


def test_get_containers_list_tool_missing(monkeypatch):
    monkeypatch.setattr(subprocess, "run", FakeRun(error=FileNotFoundError("container")))
    with pytest.raises(ContainerError, match="Failed to get containers list"):
        get_containers_list()


def test_stop_containers_passes_ids(monkeypatch):
    fake = FakeRun()
    monkeypatch.setattr(subprocess, "run", fake)
    result = stop_containers(["a", "b"])
    assert result is None
    assert fake.calls == [["container", "stop", "a", "b"]]


def test_remove_containers_passes_ids(monkeypatch):
    fake = FakeRun()
    monkeypatch.setattr(subprocess, "run", fake)
    result = remove_containers(["a"])
    assert result is None
    assert fake.calls == [["container", "rm", "a"]]


def test_remove_containers_failure(monkeypatch):
    monkeypatch.setattr(subprocess, "run", FakeRun(error=OSError("boom")))
    with pytest.raises(ContainerError, match="Failed to remove containers"):
        remove_containers(["a"])