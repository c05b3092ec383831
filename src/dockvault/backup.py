#!/usr/bin/env python3

"""Backup of a single container: configuration and volumes."""

from pathlib import Path
from typing import List

from dockvault.config import DEFAULT_HELPER_IMAGE
from dockvault.data_structures import ArchiveManifest, ScopePolicy
from dockvault.docker.archiver import VolumeArchiver
from dockvault.docker.container_utils import stopped_container
from dockvault.docker.gateway import ContainerGateway
from dockvault.logger import logger
from dockvault.store import ArchiveStore


class BackupOrchestrator:
    def __init__(
        self, gateway: ContainerGateway, store: ArchiveStore, helper_image: str = DEFAULT_HELPER_IMAGE
    ) -> None:
        self.gateway = gateway
        self.store = store
        self.helper_image = helper_image

    def backup_container(self, container_id: str, scope: ScopePolicy = ScopePolicy()) -> List[Path]:
        """Backs up the configuration and/or the volumes of a container.

        Steps:
        1) Inspect the container.
        2) Configuration step: write the inspect record to the container's metadata file.
        3) Volume step (only if the container has mounts): stop the container, archive every mount into
            'mount<index>.tar', start the container and write the archive manifest.

        Any error aborts the backup. If archiving fails the container stays stopped.

        Args:
            container_id (str): Container id or name.
            scope (ScopePolicy, optional): Steps to perform. Defaults to configuration and volumes.

        Raises:
            EngineError: If the engine fails to inspect, stop or start the container.
            MetadataIOError: If the metadata file or the archive directory cannot be written.
            ArchiveOperationError: If a mount cannot be archived.

        Returns:
            List[Path]: Created files.
        """
        record = self.gateway.inspect(container_id)
        logger.info(f"Backing up container '{record.name}' ({len(record.mounts)} mount(s))...")

        created_files: List[Path] = []

        if scope.config_step:
            metadata_file = self.store.write_metadata(record)
            logger.info(f"Wrote metadata of '{record.name}' to '{metadata_file}'.")
            created_files.append(metadata_file)

        if not scope.volume_step:
            return created_files

        if len(record.mounts) == 0:
            logger.info(f"Container '{record.name}' has no mounts, skipping volume backup.")
            return created_files

        archiver = VolumeArchiver(self.gateway, self.store.prepare_volume_dir(record.name), image=self.helper_image)
        manifest = ArchiveManifest(container=record.name)

        with stopped_container(self.gateway, record.name):
            for index, mount in enumerate(record.mounts, start=1):
                archive = archiver.archive(record.name, index, mount)
                logger.info(f"Archived '{mount.destination}' of '{record.name}' to '{archive}'.")
                manifest.archives[index] = mount.destination
                created_files.append(archive)

        self.store.write_manifest(manifest)

        return created_files
