#!/usr/bin/env python3

"""Module that provides data structures needed throughout the project."""

from dataclasses import dataclass
from typing import Any, Dict, List

from pydantic import BaseModel, Field


class MountEntry(BaseModel):
    source: str  # path (or volume data directory) on host
    destination: str  # mount point inside the container

    def bind(self) -> str:
        return f"{self.source}:{self.destination}"


class InspectRecord(BaseModel):
    """Configuration snapshot of a container, taken at backup time.

    The order of 'mounts' defines the archive numbering: the i-th mount (1-based) is archived as 'mount{i}.tar'.
    """

    name: str
    image: str
    network_mode: str
    running: bool
    mounts: List[MountEntry] = Field(default_factory=list)

    @classmethod
    def from_docker(cls, attrs: Dict[str, Any]) -> "InspectRecord":
        """Creates an inspect record from the output of 'docker inspect'.

        Args:
            attrs (Dict[str, Any]): Container attributes as returned by the docker engine API.

        Returns:
            InspectRecord: Inspect record.
        """
        mounts = [
            MountEntry(source=mount["Source"], destination=mount["Destination"]) for mount in attrs.get("Mounts") or []
        ]

        return cls(
            name=attrs["Name"].lstrip("/"),
            image=attrs["Config"]["Image"],
            network_mode=attrs["HostConfig"]["NetworkMode"],
            running=attrs["State"]["Running"],
            mounts=mounts,
        )


class CreateRequest(BaseModel):
    """Everything the engine needs to recreate a container from an inspect record."""

    name: str
    image: str
    binds: List[str]
    network_mode: str
    volumes: Dict[str, Dict] = Field(default_factory=dict)

    @classmethod
    def from_record(cls, name: str, record: InspectRecord) -> "CreateRequest":
        return cls(
            name=name,
            image=record.image,
            binds=[mount.bind() for mount in record.mounts],
            network_mode=record.network_mode,
            volumes={mount.destination: {} for mount in record.mounts},
        )


class ArchiveManifest(BaseModel):
    container: str
    archives: Dict[int, str] = Field(default_factory=dict)  # archive index -> mount destination


@dataclass(frozen=True)
class ScopePolicy:
    """Selects which steps a backup or restore covers.

    Only one of the flags is meant to be set at a time. If both are False, configuration and volumes are handled.
    """

    restrict_to_config: bool = False
    restrict_to_volumes: bool = False

    @property
    def config_step(self) -> bool:
        return not self.restrict_to_volumes

    @property
    def volume_step(self) -> bool:
        return not self.restrict_to_config
