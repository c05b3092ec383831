#!/usr/bin/env python3

"""Main DockVault class."""

from typing import Callable, Dict, List, Optional

from dockvault.backup import BackupOrchestrator
from dockvault.config import Settings
from dockvault.data_structures import ScopePolicy
from dockvault.docker.gateway import ContainerGateway
from dockvault.errors import DockVaultError
from dockvault.logger import logger
from dockvault.restore import RestoreOrchestrator
from dockvault.store import ArchiveStore


class DockVault:
    """Class which backs up or restores several containers one after another."""

    def __init__(self, settings: Settings, gateway: Optional[ContainerGateway] = None) -> None:
        """Constructor.

        Args:
            settings (Settings): Settings, in particular the backup root directory.
            gateway (Optional[ContainerGateway]): Engine gateway. Defaults to a gateway connected to the docker engine
                configured in the environment.
        """
        self.settings = settings
        self.gateway = gateway if gateway is not None else ContainerGateway(stop_timeout=settings.stop_timeout)
        self.store = ArchiveStore(settings.root)

        self.backup_orchestrator = BackupOrchestrator(self.gateway, self.store, helper_image=settings.helper_image)
        self.restore_orchestrator = RestoreOrchestrator(self.gateway, self.store, helper_image=settings.helper_image)

    def backup(self, containers: Optional[List[str]] = None, scope: ScopePolicy = ScopePolicy()) -> Dict[str, int]:
        """Backs up the specified containers, or all containers known to the engine.

        A failing container does not stop the backup of the remaining ones.

        Args:
            containers (Optional[List[str]]): Container ids or names. Defaults to all containers.
            scope (ScopePolicy, optional): Steps to perform for every container.

        Raises:
            EngineError: If the containers cannot be listed.

        Returns:
            Dict[str, int]: Number of successful and failed containers ('success', 'error').
        """
        if containers is None:
            containers = self.gateway.list()
            logger.info(f"Found {len(containers)} container(s).")

        return self._run(
            "backup", containers, lambda container: self.backup_orchestrator.backup_container(container, scope)
        )

    def restore(self, containers: Optional[List[str]] = None, scope: ScopePolicy = ScopePolicy()) -> Dict[str, int]:
        """Restores the specified containers, or all containers that have a metadata file."""
        if containers is None:
            containers = self.store.list_backed_up_containers()
            logger.info(f"Found {len(containers)} backed up container(s) in '{self.store.root}'.")

        return self._run(
            "restore", containers, lambda container: self.restore_orchestrator.restore_container(container, scope)
        )

    def _run(self, action: str, containers: List[str], func: Callable[[str], object]) -> Dict[str, int]:
        stats: Dict[str, int] = {"success": 0, "error": 0}

        for container in containers:
            try:
                func(container)
                logger.info(f"Finished {action} of '{container}'.")
                stats["success"] += 1
            except DockVaultError as error:
                logger.error(f"Failed to {action} '{container}': '{error}'.")
                stats["error"] += 1

        stat_message = f"{action}: {stats['success']} successful, {stats['error']} errors"
        if stats["error"] == 0:
            logger.info(stat_message)
        else:
            logger.warning(stat_message)

        return stats
