#!/usr/bin/env python3

"""Utility functions to pause containers around volume operations."""

from contextlib import contextmanager
from typing import Generator

from dockvault.docker.gateway import ContainerGateway
from dockvault.logger import logger


@contextmanager
def stopped_container(gateway: ContainerGateway, container: str, stop: bool = True) -> Generator:
    """Stops the container (if 'stop' is set) and starts it once the block finished.

    The container is started whether or not it was stopped. If the block raises, the container is NOT started again:
    it is left in whatever state the failure put it in.

    Args:
        gateway (ContainerGateway): Engine gateway.
        container (str): Container name or id.
        stop (bool, optional): Whether to stop the container before entering the block. Defaults to True.

    Yields:
        Generator: Yields None.
    """
    if stop:
        logger.info(f"Stopping container '{container}'...")
        gateway.stop(container)

    yield None

    logger.info(f"Starting container '{container}'...")
    gateway.start(container)
