#!/usr/bin/env python3

"""Testing fixtures."""

from pathlib import Path
from typing import Callable

import pytest

from dockvault.data_structures import InspectRecord, MountEntry
from dockvault.store import ArchiveStore
from tests.utils.dummies import FakeGateway


@pytest.fixture
def banana_record() -> InspectRecord:
    """Returns the inspect record of a running container with two mounts.

    Returns:
        InspectRecord: Inspect record.
    """
    return InspectRecord(
        name="banana",
        image="mock/image",
        network_mode="mockMode",
        running=True,
        mounts=[MountEntry(source="vol1", destination="dest1"), MountEntry(source="vol2", destination="dest2")],
    )


@pytest.fixture
def orange_record() -> InspectRecord:
    return InspectRecord(
        name="orange",
        image="mock/image",
        network_mode="mockMode",
        running=True,
        mounts=[MountEntry(source="mount1", destination="dest1"), MountEntry(source="mount2", destination="dest2")],
    )


@pytest.fixture
def fake_gateway(banana_record: InspectRecord) -> FakeGateway:
    """Returns an engine gateway which knows the 'banana' container and records all calls.

    Returns:
        FakeGateway: Fake gateway.
    """
    return FakeGateway(records={"banana": banana_record})


@pytest.fixture
def archive_store(tmp_path: Path) -> ArchiveStore:
    return ArchiveStore(tmp_path.joinpath("backup_root"))


@pytest.fixture
def backed_up_container(archive_store: ArchiveStore) -> Callable:
    """Returns a callable which writes the metadata file and (empty) archive files of a container.

    Returns:
        Callable: Callable function.
    """

    def func(record: InspectRecord, *archive_names: str) -> None:
        archive_store.write_metadata(record)
        volume_dir = archive_store.prepare_volume_dir(record.name)
        for name in archive_names:
            volume_dir.joinpath(name).touch()

    return func
