"""
Configuration management for the file server.

ServerConfig is the desired configuration held by FileServerManager. The
initial values can be read from a .env file and environment variables with
load_config(); after that the host changes them through
FileServerManager.configure().
"""

import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from fileserver.errors import InvalidPortError


# Default .env file location (relative to the working directory)
DEFAULT_ENV_FILE = Path(".env")

DEFAULT_PORT = 8080

# Ports below 1024 need elevated privileges on most systems
MIN_PORT = 1024
MAX_PORT = 65535

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

logger = logging.getLogger(__name__)


def _load_env_file(env_file: Optional[str] = None) -> None:
    """Load environment variables from .env file if it exists."""
    if env_file is None:
        env_file = os.getenv("FILESERVER_ENV_FILE", str(DEFAULT_ENV_FILE))
    env_path = Path(env_file)

    if env_path.exists():
        load_dotenv(env_path, override=False)  # Don't override existing env vars
        logger.debug(f"Loaded environment from {env_path}")


def validate_port(port: Any) -> int:
    """
    Validate a port number for configure().

    Args:
        port: Candidate port

    Returns:
        The port, unchanged

    Raises:
        InvalidPortError: If port is not an integer in [1024, 65535]
    """
    # bool is an int subclass; True is not a port
    if isinstance(port, bool) or not isinstance(port, int):
        raise InvalidPortError(f"Port must be an integer, got {port!r}")
    if port < MIN_PORT or port > MAX_PORT:
        raise InvalidPortError(
            f"Port must be between {MIN_PORT} and {MAX_PORT}, got {port}"
        )
    return port


@dataclass
class ServerConfig:
    """Desired server configuration, independent of whether a server is running."""

    folder_path: str = ""
    port: int = DEFAULT_PORT

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class RuntimeSettings:
    """Everything the host needs at startup: initial server config plus logging."""

    server: ServerConfig = field(default_factory=ServerConfig)
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @classmethod
    def load(cls, env_file: Optional[str] = None) -> "RuntimeSettings":
        """
        Load settings from environment variables.

        Args:
            env_file: Path of a .env file to load first (default: FILESERVER_ENV_FILE or .env)

        Returns:
            RuntimeSettings instance with loaded values

        Raises:
            InvalidPortError: If FILESERVER_PORT is not a valid port
            ValueError: If FILESERVER_LOG_LEVEL is invalid
        """
        # Load .env file first (if it exists)
        _load_env_file(env_file)

        folder_path = os.getenv("FILESERVER_FOLDER", "")

        port_str = os.getenv("FILESERVER_PORT", str(DEFAULT_PORT))
        try:
            port = int(port_str)
        except ValueError:
            raise InvalidPortError(f"Invalid FILESERVER_PORT: {port_str} (must be an integer)")
        try:
            validate_port(port)
        except InvalidPortError as e:
            raise InvalidPortError(f"Invalid FILESERVER_PORT: {e}")

        log_level = os.getenv("FILESERVER_LOG_LEVEL", "INFO")

        log_file = os.getenv("FILESERVER_LOG_FILE")
        if log_file == "":
            log_file = None

        settings = cls(
            server=ServerConfig(folder_path=folder_path, port=port),
            log_level=log_level,
            log_file=log_file,
        )
        settings.validate()
        return settings

    def validate(self) -> None:
        """
        Validate logging settings.

        The folder path is deliberately not checked here; FileServerManager.start()
        validates it when the server is actually started.

        Raises:
            ValueError: If configuration is invalid
        """
        if self.log_level.upper() not in VALID_LOG_LEVELS:
            raise ValueError(
                f"Invalid log level: {self.log_level} "
                f"(must be one of: {', '.join(VALID_LOG_LEVELS)})"
            )


def load_config(env_file: Optional[str] = None) -> RuntimeSettings:
    """
    Load and validate runtime settings from environment variables.

    Args:
        env_file: Optional .env path overriding FILESERVER_ENV_FILE

    Returns:
        RuntimeSettings instance with loaded and validated values

    Raises:
        ValueError: If configuration is invalid (InvalidPortError included)
    """
    try:
        return RuntimeSettings.load(env_file)
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        raise
