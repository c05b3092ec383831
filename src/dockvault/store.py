#!/usr/bin/env python3

"""Filesystem layout of a dockvault backup root.

    root
      |-containers
      |   |-<name>.json          (inspect record)
      |-volumes
          |-<name>
              |-mount1.tar
              |-mount2.tar
              |-manifest.json    (archive index -> mount destination)
"""

from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from dockvault.data_structures import ArchiveManifest, InspectRecord
from dockvault.errors import MetadataIOError, PreconditionError
from dockvault.logger import logger
from dockvault.utils import write_text_atomic

CONTAINERS_DIR_NAME = "containers"
VOLUMES_DIR_NAME = "volumes"
MANIFEST_FILE_NAME = "manifest.json"


class ArchiveStore:
    def __init__(self, root: Path) -> None:
        self.root = root

    def metadata_path(self, container_name: str) -> Path:
        return self.root.joinpath(CONTAINERS_DIR_NAME, f"{container_name}.json")

    def volume_dir(self, container_name: str) -> Path:
        return self.root.joinpath(VOLUMES_DIR_NAME, container_name)

    def manifest_path(self, container_name: str) -> Path:
        return self.volume_dir(container_name).joinpath(MANIFEST_FILE_NAME)

    def prepare_volume_dir(self, container_name: str) -> Path:
        """Creates the archive directory of the container if necessary.

        Raises:
            MetadataIOError: If the directory cannot be created.

        Returns:
            Path: Archive directory.
        """
        directory = self.volume_dir(container_name)
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as error:
            raise MetadataIOError(f"Unable to create archive directory '{directory}': {error}") from error

        return directory

    def write_metadata(self, record: InspectRecord) -> Path:
        """Writes the inspect record to the container's metadata file, replacing any previous one.

        Args:
            record (InspectRecord): Inspect record.

        Raises:
            MetadataIOError: If the file cannot be written.

        Returns:
            Path: Metadata file.
        """
        path = self.metadata_path(record.name)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            write_text_atomic(path, record.model_dump_json(indent=2))
        except OSError as error:
            raise MetadataIOError(f"Unable to write metadata file '{path}': {error}") from error

        return path

    def read_metadata(self, container_name: str) -> InspectRecord:
        """Reads the inspect record of the specified container.

        Args:
            container_name (str): Container name.

        Raises:
            PreconditionError: If the metadata file does not exist or cannot be parsed.
            MetadataIOError: If the metadata file exists but cannot be read.

        Returns:
            InspectRecord: Inspect record as written during backup.
        """
        path = self.metadata_path(container_name)
        if not path.is_file():
            raise PreconditionError(f"No metadata file found for container '{container_name}': '{path}'.")

        try:
            content = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as error:
            raise PreconditionError(f"Unable to parse metadata file '{path}': {error}") from error
        except OSError as error:
            raise MetadataIOError(f"Unable to read metadata file '{path}': {error}") from error

        try:
            return InspectRecord.model_validate_json(content)
        except ValidationError as error:
            raise PreconditionError(f"Unable to parse metadata file '{path}': {error}") from error

    def list_backed_up_containers(self) -> List[str]:
        directory = self.root.joinpath(CONTAINERS_DIR_NAME)
        if not directory.is_dir():
            return []

        return sorted(file.stem for file in directory.iterdir() if file.is_file() and file.suffix == ".json")

    def list_archives(self, container_name: str) -> List[str]:
        """Returns the names of all files in the container's archive directory except for the manifest."""
        directory = self.volume_dir(container_name)
        if not directory.is_dir():
            return []

        return sorted(
            file.name for file in directory.iterdir() if file.is_file() and file.name != MANIFEST_FILE_NAME
        )

    def write_manifest(self, manifest: ArchiveManifest) -> Path:
        path = self.manifest_path(manifest.container)
        try:
            write_text_atomic(path, manifest.model_dump_json(indent=2))
        except OSError as error:
            raise MetadataIOError(f"Unable to write archive manifest '{path}': {error}") from error

        return path

    def read_manifest(self, container_name: str) -> Optional[ArchiveManifest]:
        """Returns the archive manifest of the container or None if there is none (or it is unreadable)."""
        path = self.manifest_path(container_name)
        if not path.is_file():
            return None

        try:
            return ArchiveManifest.model_validate_json(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, ValidationError) as error:
            logger.warning(f"Ignoring unreadable archive manifest '{path}': {error}")
            return None
