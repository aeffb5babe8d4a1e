"""
File server lifecycle management.

FileServerManager owns the server configuration and at most one running
instance. The host constructs a single manager and calls configure(),
start(), stop() and get_status() from its own thread; the listener runs on a
background worker thread and handles requests one at a time.
"""

import logging
import os
import threading
from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, Optional

from fileserver.config import ServerConfig, validate_port
from fileserver.errors import (
    AlreadyRunningError,
    BindFailedError,
    FolderNotFoundError,
    MissingFolderError,
    NotRunningError,
)
from fileserver.http.server import FileHTTPServer
from fileserver.oneshot import OneShotSignal

logger = logging.getLogger(__name__)

DEFAULT_HOST = "127.0.0.1"

# How often serve_forever() checks for a shutdown request (seconds)
DEFAULT_POLL_INTERVAL = 0.5


@dataclass
class ServerStatus:
    """Snapshot of running flag plus current config. Always recomputed, never stored."""

    running: bool
    folder_path: str
    port: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class _RunningInstance:
    """
    A live listener and its cancellation handle.

    Created by start(); the shutdown signal is fired exactly once, by stop().
    """

    def __init__(self, folder_path: str, host: str, port: int, poll_interval: float):
        self.folder_path = folder_path
        self.host = host
        self.port = port
        self.poll_interval = poll_interval
        self.shutdown_signal = OneShotSignal()
        self.server: Optional[FileHTTPServer] = None
        self.bind_error: Optional[Exception] = None
        self.bound = threading.Event()
        self.worker: Optional[threading.Thread] = None
        self.watcher: Optional[threading.Thread] = None


class FileServerManager:
    """
    Starts, stops and reconfigures a static file server.

    All shared state (config, running flag, current instance) is guarded by a
    single lock that is never held across network I/O or thread startup.
    """

    def __init__(
        self,
        config: Optional[ServerConfig] = None,
        host: str = DEFAULT_HOST,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ):
        """
        Initialize manager.

        Args:
            config: Initial configuration (default: empty folder, port 8080)
            host: Address the listener binds to
            poll_interval: Accept-loop shutdown polling interval in seconds

        Raises:
            InvalidPortError: If config.port is out of range
        """
        if config is not None:
            validate_port(config.port)
        self._config = replace(config) if config is not None else ServerConfig()
        self._host = host
        self._poll_interval = poll_interval
        self._running = False
        self._instance: Optional[_RunningInstance] = None
        # Most recently stopped instance, for wait_stopped()
        self._last_instance: Optional[_RunningInstance] = None
        self._lock = threading.Lock()

    def configure(self, folder_path: Optional[str] = None, port: Optional[int] = None) -> ServerConfig:
        """
        Update configuration. Fields not supplied are left unchanged.

        The folder is not checked here (start() does that) and a running
        instance keeps its old settings until restarted.

        Args:
            folder_path: New served root
            port: New port, must be in [1024, 65535]

        Returns:
            Copy of the updated configuration

        Raises:
            InvalidPortError: If port is out of range (config left unchanged)
        """
        if port is not None:
            validate_port(port)

        with self._lock:
            if folder_path is not None:
                self._config.folder_path = folder_path
            if port is not None:
                self._config.port = port
            updated = replace(self._config)

        logger.info(f"File server configured: folder={updated.folder_path!r} port={updated.port}")
        return updated

    def start(self) -> ServerStatus:
        """
        Start serving the configured folder on 127.0.0.1:<port>.

        Returns once the listener is bound and accepting; from then on
        get_status() reports running until stop().

        Returns:
            ServerStatus with running=True

        Raises:
            AlreadyRunningError: If an instance is already active
            MissingFolderError: If no folder is configured
            FolderNotFoundError: If the folder does not exist or is not a directory
            BindFailedError: If the listening socket could not be bound
        """
        with self._lock:
            running = self._running
            config = replace(self._config)
        if running:
            logger.warning("Start rejected: file server is already running")
            raise AlreadyRunningError("File server is already running")

        # Filesystem checks run outside the lock
        if not config.folder_path:
            raise MissingFolderError("Folder path is not set")
        if not os.path.isdir(config.folder_path):
            raise FolderNotFoundError(f"Folder does not exist: {config.folder_path}")

        with self._lock:
            if self._running:
                logger.warning("Start rejected: file server is already running")
                raise AlreadyRunningError("File server is already running")

            # Reserve the running slot; rolled back if binding fails
            instance = _RunningInstance(config.folder_path, self._host, config.port, self._poll_interval)
            self._running = True
            self._instance = instance

        instance.worker = threading.Thread(
            target=self._run_worker,
            args=(instance,),
            daemon=True,
            name=f"FileServerWorker-{config.port}",
        )
        instance.worker.start()

        # Wait for the bind outcome only; request handling never blocks the caller
        instance.bound.wait()

        if instance.bind_error is not None:
            with self._lock:
                if self._instance is instance:
                    self._running = False
                    self._instance = None
            logger.error(f"Failed to start file server on {self._host}:{config.port}: {instance.bind_error}")
            raise BindFailedError(
                f"Could not bind {self._host}:{config.port}: {instance.bind_error}"
            ) from instance.bind_error

        instance.watcher = threading.Thread(
            target=self._watch_shutdown,
            args=(instance,),
            daemon=True,
            name=f"FileServerShutdown-{config.port}",
        )
        instance.watcher.start()

        logger.info(f"File server started at {instance.server.url} serving {config.folder_path}")
        return ServerStatus(running=True, folder_path=config.folder_path, port=config.port)

    def stop(self) -> ServerStatus:
        """
        Stop the running instance.

        Signals the accept loop to exit and returns without waiting for it;
        the listening socket is released shortly afterwards.

        Returns:
            ServerStatus with running=False

        Raises:
            NotRunningError: If no instance is active
        """
        with self._lock:
            instance = self._instance
            if not self._running or instance is None:
                logger.warning("Stop rejected: file server is not running")
                raise NotRunningError("File server is not running")
            self._running = False
            self._instance = None
            self._last_instance = instance
            status = self._snapshot()

        instance.shutdown_signal.fire()
        logger.info(f"File server on port {instance.port} stopping")
        return status

    def get_status(self) -> ServerStatus:
        """Return the current running flag and configuration."""
        with self._lock:
            return self._snapshot()

    def wait_stopped(self, timeout: Optional[float] = None) -> bool:
        """
        Block until the most recently stopped instance has released its socket.

        stop() never waits; hosts that want to restart on the same port
        immediately can call this in between.

        Args:
            timeout: Seconds to wait, or None to wait forever

        Returns:
            True if no stopped worker is still alive
        """
        with self._lock:
            instance = self._last_instance
        if instance is None or instance.worker is None:
            return True
        instance.worker.join(timeout)
        return not instance.worker.is_alive()

    def _snapshot(self) -> ServerStatus:
        # Caller holds self._lock
        return ServerStatus(
            running=self._running,
            folder_path=self._config.folder_path,
            port=self._config.port,
        )

    def _run_worker(self, instance: _RunningInstance) -> None:
        """Bind, report the outcome, then serve until shut down (worker thread)."""
        try:
            instance.server = FileHTTPServer(instance.host, instance.port, instance.folder_path)
        except Exception as e:
            instance.bind_error = e
            instance.bound.set()
            return

        instance.bound.set()
        try:
            instance.server.serve_forever(poll_interval=instance.poll_interval)
        except Exception as e:
            logger.error(f"File server on port {instance.port} failed: {e}", exc_info=True)
        finally:
            instance.server.server_close()
            with self._lock:
                # A newer instance may already own the state
                if self._instance is instance:
                    self._running = False
                    self._instance = None
            logger.info(f"File server on port {instance.port} stopped")

    def _watch_shutdown(self, instance: _RunningInstance) -> None:
        """Unblock the accept loop once the shutdown signal fires (watcher thread)."""
        while not instance.shutdown_signal.wait(instance.poll_interval):
            if not instance.worker.is_alive():
                return
        instance.server.shutdown()
