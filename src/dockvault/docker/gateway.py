#!/usr/bin/env python3

"""Thin wrapper around the docker SDK exposing the engine operations dockvault relies on."""

from typing import List, Optional

from docker import DockerClient, from_env
from docker.errors import ContainerError, DockerException

from dockvault.config import DEFAULT_STOP_TIMEOUT
from dockvault.data_structures import CreateRequest, InspectRecord
from dockvault.errors import EngineError
from dockvault.logger import logger


class ContainerGateway:
    """Blocking access to the docker engine.

    Every docker SDK error is re-raised as EngineError, except for non-zero exits of helper containers which are
    reported through the return value of 'run'.
    """

    def __init__(self, client: Optional[DockerClient] = None, stop_timeout: int = DEFAULT_STOP_TIMEOUT) -> None:
        if client is None:
            try:
                client = from_env()
            except DockerException as error:
                raise EngineError(f"Unable to connect to the docker engine: {error}") from error

        self.client = client
        self.stop_timeout = stop_timeout

    def list(self) -> List[str]:
        """Returns the ids of all containers, including stopped ones."""
        try:
            return [container.id for container in self.client.containers.list(all=True)]
        except DockerException as error:
            raise EngineError(f"Failed to list containers: {error}") from error

    def inspect(self, container_id: str) -> InspectRecord:
        try:
            attrs = self.client.api.inspect_container(container_id)
        except DockerException as error:
            raise EngineError(f"Failed to inspect container '{container_id}': {error}") from error

        return InspectRecord.from_docker(attrs)

    def create(self, request: CreateRequest) -> str:
        """Creates (but does not start) a container.

        Args:
            request (CreateRequest): Creation request.

        Raises:
            EngineError: If the engine refuses to create the container.

        Returns:
            str: Id of the created container.
        """
        api = self.client.api
        try:
            host_config = api.create_host_config(binds=request.binds, network_mode=request.network_mode)
            response = api.create_container(
                image=request.image,
                name=request.name,
                volumes=list(request.volumes),
                host_config=host_config,
                networking_config=api.create_networking_config({}),
            )
        except DockerException as error:
            raise EngineError(f"Failed to create container '{request.name}': {error}") from error

        for warning in response.get("Warnings") or []:
            logger.warning(f"Engine warning while creating '{request.name}': {warning}")

        return response["Id"]

    def stop(self, container: str) -> None:
        try:
            self.client.api.stop(container, timeout=self.stop_timeout)
        except DockerException as error:
            raise EngineError(f"Failed to stop container '{container}': {error}") from error

    def start(self, container: str) -> None:
        try:
            self.client.api.start(container)
        except DockerException as error:
            raise EngineError(f"Failed to start container '{container}': {error}") from error

    def run(self, image: str, command: List[str], volumes_from: List[str], binds: List[str]) -> int:
        """Runs a helper container to completion. The container is removed after it exited.

        Args:
            image (str): Image to run.
            command (List[str]): Command to execute.
            volumes_from (List[str]): Containers whose volumes are mounted into the helper container.
            binds (List[str]): Bind mounts ('host_path:container_path').

        Raises:
            EngineError: If the helper container cannot be created or started.

        Returns:
            int: Exit status of the helper container.
        """
        try:
            self.client.containers.run(
                image=image,
                command=command,
                remove=True,
                volumes=binds,
                volumes_from=volumes_from,
            )
        except ContainerError as error:
            logger.debug(f"Helper container '{image}' exited with status {error.exit_status}: {error.stderr}")
            return error.exit_status
        except DockerException as error:
            raise EngineError(f"Failed to run helper container '{image}' {command}: {error}") from error

        return 0
