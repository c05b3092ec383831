"""Errors raised by dockvault."""

from typing import Optional


class DockVaultError(Exception):
    def __init__(self, msg: Optional[str] = None):
        super().__init__(msg)


class PreconditionError(DockVaultError):
    """Raised when a restore cannot start, e.g. because no metadata file exists for the container."""


class EngineError(DockVaultError):
    """Raised when the container engine rejects an inspect, create, stop, start or run request."""


class MetadataIOError(DockVaultError, OSError):
    """Raised when a metadata file cannot be written or read."""


class ArchiveOperationError(DockVaultError):
    """Raised when a helper container fails to create or extract a volume archive."""


class ArchiveMismatchError(DockVaultError):
    """Raised when an archive file name does not correspond to any mount of the container."""
