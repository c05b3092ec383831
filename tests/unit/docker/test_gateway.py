from typing import Dict, List, Optional
from unittest.mock import MagicMock

import pytest
from docker import APIClient
from docker.errors import APIError, ContainerError, DockerException, NotFound

import dockvault.docker.gateway
from dockvault.data_structures import CreateRequest, InspectRecord
from dockvault.docker.gateway import ContainerGateway
from dockvault.errors import EngineError
from pytest import MonkeyPatch


@pytest.fixture
def docker_client() -> MagicMock:
    """Returns a mocked docker client.

    Returns:
        MagicMock: Mock with the interface of docker.DockerClient.
    """
    client = MagicMock()
    client.api.create_host_config.side_effect = lambda **kwargs: {"host_config": kwargs}
    client.api.create_networking_config.side_effect = lambda endpoints: {}
    client.api.create_container.return_value = {"Id": "orange-id", "Warnings": []}
    return client


def test_gateway_connects_to_docker_engine_from_environment(monkeypatch: MonkeyPatch) -> None:
    client = MagicMock()
    monkeypatch.setattr(dockvault.docker.gateway, "from_env", lambda: client)

    assert ContainerGateway().client is client


def test_gateway_raises_engine_error_if_engine_is_unreachable(monkeypatch: MonkeyPatch) -> None:
    def raise_error() -> None:
        raise DockerException("Error while fetching server API version")

    monkeypatch.setattr(dockvault.docker.gateway, "from_env", raise_error)

    with pytest.raises(EngineError):
        ContainerGateway()


def test_gateway_list_returns_ids_of_all_containers(docker_client: MagicMock) -> None:
    docker_client.containers.list.return_value = [MagicMock(id="1"), MagicMock(id="2"), MagicMock(id="3")]

    assert ContainerGateway(docker_client).list() == ["1", "2", "3"]
    docker_client.containers.list.assert_called_once_with(all=True)


def test_gateway_inspect(docker_client: MagicMock) -> None:
    docker_client.api.inspect_container.return_value = {
        "Name": "/banana",
        "Config": {"Image": "mock/image"},
        "HostConfig": {"NetworkMode": "mockMode"},
        "State": {"Running": True},
        "Mounts": [{"Source": "vol1", "Destination": "dest1"}],
    }

    record = ContainerGateway(docker_client).inspect("3")

    assert isinstance(record, InspectRecord)
    assert record.name == "banana"
    docker_client.api.inspect_container.assert_called_once_with("3")


def test_gateway_inspect_raises_engine_error_for_unknown_container(docker_client: MagicMock) -> None:
    docker_client.api.inspect_container.side_effect = NotFound("No such container: 4")

    with pytest.raises(EngineError):
        ContainerGateway(docker_client).inspect("4")


def test_gateway_create(docker_client: MagicMock) -> None:
    request = CreateRequest(
        name="orange",
        image="mock/image",
        binds=["mount1:dest1", "mount2:dest2"],
        network_mode="mockMode",
        volumes={"dest1": {}, "dest2": {}},
    )

    assert ContainerGateway(docker_client).create(request) == "orange-id"

    docker_client.api.create_host_config.assert_called_once_with(
        binds=["mount1:dest1", "mount2:dest2"], network_mode="mockMode"
    )
    docker_client.api.create_container.assert_called_once_with(
        image="mock/image",
        name="orange",
        volumes=["dest1", "dest2"],
        host_config={"host_config": {"binds": ["mount1:dest1", "mount2:dest2"], "network_mode": "mockMode"}},
        networking_config={},
    )


def test_gateway_create_raises_engine_error_on_conflict(docker_client: MagicMock) -> None:
    docker_client.api.create_container.side_effect = APIError("Conflict. The container name is already in use")

    with pytest.raises(EngineError):
        ContainerGateway(docker_client).create(
            CreateRequest(name="orange", image="mock/image", binds=[], network_mode="bridge")
        )


def test_gateway_stop_uses_configured_timeout(docker_client: MagicMock) -> None:
    ContainerGateway(docker_client, stop_timeout=3).stop("banana")

    docker_client.api.stop.assert_called_once_with("banana", timeout=3)


def test_gateway_start_raises_engine_error(docker_client: MagicMock) -> None:
    docker_client.api.start.side_effect = APIError("driver failed programming external connectivity")

    with pytest.raises(EngineError):
        ContainerGateway(docker_client).start("banana")


def test_gateway_run_blocks_and_removes_helper_container(docker_client: MagicMock) -> None:
    exit_status = ContainerGateway(docker_client).run(
        "ubuntu", ["tar", "cvf", "/backup/mount1.tar", "dest1"], volumes_from=["banana"], binds=["/host:/backup"]
    )

    assert exit_status == 0
    docker_client.containers.run.assert_called_once_with(
        image="ubuntu",
        command=["tar", "cvf", "/backup/mount1.tar", "dest1"],
        remove=True,
        volumes=["/host:/backup"],
        volumes_from=["banana"],
    )


def test_gateway_run_returns_exit_status_of_failed_helper_container(docker_client: MagicMock) -> None:
    docker_client.containers.run.side_effect = ContainerError(
        MagicMock(), 2, ["tar", "xvf", "missing.tar"], "ubuntu", b"tar: missing.tar: Cannot open"
    )

    assert ContainerGateway(docker_client).run("ubuntu", ["tar"], volumes_from=["banana"], binds=[]) == 2


def test_gateway_run_raises_engine_error_if_helper_container_cannot_be_started(docker_client: MagicMock) -> None:
    docker_client.containers.run.side_effect = APIError("No such container: banana")

    with pytest.raises(EngineError):
        ContainerGateway(docker_client).run("ubuntu", ["tar"], volumes_from=["banana"], binds=[])


def test_gateway_create_sends_binds_network_mode_and_volumes_to_engine(orange_record: InspectRecord) -> None:
    api = APIClient(base_url="unix://var/run/docker.sock", version="1.41")
    sent_configs: List[Dict] = []

    def create_container_from_config(config: Dict, name: str, platform: Optional[str] = None) -> Dict:
        sent_configs.append({"name": name, **config})
        return {"Id": "orange-id", "Warnings": []}

    api.create_container_from_config = create_container_from_config
    client = MagicMock()
    client.api = api

    assert ContainerGateway(client).create(CreateRequest.from_record("orange", orange_record)) == "orange-id"

    config = sent_configs[0]
    assert config["name"] == "orange"
    assert config["Image"] == "mock/image"
    assert config["HostConfig"]["Binds"] == ["mount1:dest1", "mount2:dest2"]
    assert config["HostConfig"]["NetworkMode"] == "mockMode"
    assert config["Volumes"] == {"dest1": {}, "dest2": {}}
