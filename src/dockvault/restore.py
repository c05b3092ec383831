#!/usr/bin/env python3

"""Restore of a single container from its metadata file and volume archives."""

from typing import List, Optional, Tuple

from dockvault.config import DEFAULT_HELPER_IMAGE
from dockvault.data_structures import CreateRequest, InspectRecord, MountEntry, ScopePolicy
from dockvault.docker.archiver import VolumeArchiver, parse_archive_index
from dockvault.docker.container_utils import stopped_container
from dockvault.docker.gateway import ContainerGateway
from dockvault.errors import ArchiveMismatchError
from dockvault.logger import logger
from dockvault.store import ArchiveStore


class RestoreOrchestrator:
    def __init__(
        self, gateway: ContainerGateway, store: ArchiveStore, helper_image: str = DEFAULT_HELPER_IMAGE
    ) -> None:
        self.gateway = gateway
        self.store = store
        self.helper_image = helper_image

    def restore_container(self, container_name: str, scope: ScopePolicy = ScopePolicy()) -> Optional[str]:
        """Recreates a container and/or repopulates its volumes, then starts it.

        Steps:
        1) Read the container's metadata file.
        2) Configuration step: create a container named 'container_name' from the recorded image, network mode and
            mounts.
        3) Volume step: match the archive files against the recorded mounts and extract each of them into the
            container. The container is stopped beforehand if it was running at backup time and there is at least
            one archive to restore.
        4) Start the container. This always happens, even if no volume was restored.

        Nothing is rolled back on error: a created container is kept, a stopped container stays stopped.

        Args:
            container_name (str): Name of the backed up container.
            scope (ScopePolicy, optional): Steps to perform. Defaults to configuration and volumes.

        Raises:
            PreconditionError: If there is no (valid) metadata file for the container.
            EngineError: If the engine fails to create, stop or start the container.
            ArchiveOperationError: If an archive cannot be extracted.

        Returns:
            Optional[str]: Id of the created container, None if the configuration step was skipped.
        """
        record = self.store.read_metadata(container_name)
        logger.info(f"Restoring container '{container_name}' from image '{record.image}'...")

        container_id: Optional[str] = None

        if scope.config_step:
            request = CreateRequest.from_record(container_name, record)
            container_id = self.gateway.create(request)
            logger.info(f"Created container '{container_name}' ({container_id}).")

        restore_plan: List[Tuple[int, MountEntry]] = []
        if scope.volume_step:
            restore_plan = self.match_archives(container_name, record)

        archiver = VolumeArchiver(self.gateway, self.store.volume_dir(container_name), image=self.helper_image)

        with stopped_container(self.gateway, container_name, stop=record.running and len(restore_plan) > 0):
            for index, mount in restore_plan:
                archiver.restore(container_name, index, mount)
                logger.info(f"Restored '{mount.destination}' of '{container_name}'.")

        return container_id

    def match_archives(self, container_name: str, record: InspectRecord) -> List[Tuple[int, MountEntry]]:
        """Associates the archive files of a container with its recorded mounts.

        Archives are matched by position: 'mount<i>.tar' belongs to the i-th mount. Files that do not match any mount
        are ignored.

        Args:
            container_name (str): Container name.
            record (InspectRecord): Inspect record of the container.

        Returns:
            List[Tuple[int, MountEntry]]: (index, mount) pairs, ordered by index.
        """
        manifest = self.store.read_manifest(container_name)
        matches: List[Tuple[int, MountEntry]] = []

        for file_name in self.store.list_archives(container_name):
            try:
                index = self._mount_index(file_name, record)
            except ArchiveMismatchError as error:
                logger.debug(f"Ignoring '{file_name}' of '{container_name}': {error}")
                continue

            mount = record.mounts[index - 1]

            if manifest is not None:
                archived_from = manifest.archives.get(index)
                if archived_from is not None and archived_from != mount.destination:
                    logger.warning(
                        f"Archive '{file_name}' of '{container_name}' was taken from '{archived_from}' but is restored"
                        f" to '{mount.destination}'. The mount order changed since the backup."
                    )

            matches.append((index, mount))

        return sorted(matches, key=lambda match: match[0])

    def _mount_index(self, file_name: str, record: InspectRecord) -> int:
        index = parse_archive_index(file_name)
        if index > len(record.mounts):
            raise ArchiveMismatchError(f"Container has only {len(record.mounts)} mount(s), no mount #{index}.")

        return index
