#!/usr/bin/env python3

"""Creates and extracts volume archives using short-lived helper containers."""

import re
from pathlib import Path
from typing import List

from dockvault.config import DEFAULT_HELPER_IMAGE
from dockvault.data_structures import MountEntry
from dockvault.docker.gateway import ContainerGateway
from dockvault.errors import ArchiveMismatchError, ArchiveOperationError, EngineError
from dockvault.logger import logger

HELPER_MOUNT_POINT = Path("/__volume_backup_mount__")  # must be absolute!
ARCHIVE_NAME_PATTERN = re.compile(r"^mount([1-9]\d*)\.tar$")


def archive_name(index: int) -> str:
    return f"mount{index}.tar"


def parse_archive_index(file_name: str) -> int:
    """Returns the (1-based) mount index encoded in an archive file name.

    Args:
        file_name (str): Archive file name, e.g. 'mount2.tar'.

    Raises:
        ArchiveMismatchError: If the name does not follow the 'mount<index>.tar' pattern.

    Returns:
        int: Mount index.
    """
    match = ARCHIVE_NAME_PATTERN.match(file_name)
    if match is None:
        raise ArchiveMismatchError(f"'{file_name}' is not a volume archive.")

    return int(match.group(1))


class VolumeArchiver:
    """Archives the volumes of a container into 'archive_dir' and restores them from there.

    The helper container mounts all volumes of the target container ('volumes_from') plus 'archive_dir' under
    HELPER_MOUNT_POINT.
    """

    def __init__(self, gateway: ContainerGateway, archive_dir: Path, image: str = DEFAULT_HELPER_IMAGE) -> None:
        self.gateway = gateway
        self.archive_dir = archive_dir
        self.image = image

    def archive(self, container: str, index: int, mount: MountEntry) -> Path:
        """Creates 'mount<index>.tar' from the mount's destination path inside the container.

        Raises:
            ArchiveOperationError: If the helper container failed.

        Returns:
            Path: Archive path on the host.
        """
        command = ["tar", "cvf", str(HELPER_MOUNT_POINT.joinpath(archive_name(index))), mount.destination]
        self._run(container, command)

        return self.archive_dir.joinpath(archive_name(index))

    def restore(self, container: str, index: int, mount: MountEntry) -> None:
        """Extracts 'mount<index>.tar' into the mount's destination path inside the container.

        The archive stores paths relative to the container root, the first component is stripped.

        Raises:
            ArchiveOperationError: If the helper container failed.
        """
        command = [
            "tar",
            "xvf",
            str(HELPER_MOUNT_POINT.joinpath(archive_name(index))),
            "--strip",
            "1",
            "--directory",
            mount.destination,
        ]
        self._run(container, command)

    def _run(self, container: str, command: List[str]) -> None:
        binds = [f"{self.archive_dir.absolute()}:{HELPER_MOUNT_POINT}"]
        logger.debug(f"Running {command} for container '{container}'.")

        try:
            exit_status = self.gateway.run(self.image, command, volumes_from=[container], binds=binds)
        except EngineError as error:
            raise ArchiveOperationError(f"Archive command {command} failed on '{container}': {error}") from error

        if exit_status != 0:
            raise ArchiveOperationError(
                f"Archive command {command} failed on '{container}': Helper container exited with {exit_status}."
            )
