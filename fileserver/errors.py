"""
Error taxonomy for the file server.

Every error a host can receive from FileServerManager is a FileServerError
subclass with a stable ``kind`` string, so hosts that bridge errors to a UI
can switch on the kind without parsing messages.
"""

from typing import Dict


class FileServerError(Exception):
    """Base class for all file server errors."""
    kind = "FileServerError"

    def to_dict(self) -> Dict[str, str]:
        """Return {"kind", "message"} for hosts that serialize errors."""
        return {"kind": self.kind, "message": str(self)}


class AlreadyRunningError(FileServerError):
    """start() called while an instance is active."""
    kind = "AlreadyRunning"


class NotRunningError(FileServerError):
    """stop() called with no active instance."""
    kind = "NotRunning"


class MissingFolderError(FileServerError):
    """start() called before a folder path was configured."""
    kind = "MissingFolder"


class FolderNotFoundError(FileServerError):
    """Configured folder does not exist or is not a directory."""
    kind = "FolderNotFound"


class InvalidPortError(FileServerError, ValueError):
    """Port outside the accepted range."""
    kind = "InvalidPort"


class BindFailedError(FileServerError):
    """Listener could not bind its socket (port in use, permission denied)."""
    kind = "BindFailed"
