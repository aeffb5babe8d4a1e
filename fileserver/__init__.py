"""
Restartable static-content HTTP server for embedding in a host application.

The host constructs one FileServerManager, configures it, and starts/stops it
at runtime. Requests for folders get a generated directory listing.
"""

from fileserver.config import ServerConfig
from fileserver.errors import (
    AlreadyRunningError,
    BindFailedError,
    FileServerError,
    FolderNotFoundError,
    InvalidPortError,
    MissingFolderError,
    NotRunningError,
)
from fileserver.manager import FileServerManager, ServerStatus

__all__ = [
    "AlreadyRunningError",
    "BindFailedError",
    "FileServerError",
    "FileServerManager",
    "FolderNotFoundError",
    "InvalidPortError",
    "MissingFolderError",
    "NotRunningError",
    "ServerConfig",
    "ServerStatus",
]
