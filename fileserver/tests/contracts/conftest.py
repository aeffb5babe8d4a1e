"""
Shared pytest fixtures for file server contract tests.
"""
import pytest
import httpx

from fileserver.config import ServerConfig
from fileserver.errors import NotRunningError
from fileserver.manager import FileServerManager

from _harness import build_served_root, find_free_port


@pytest.fixture
def served_root(tmp_path):
    """A populated served-root folder."""
    return build_served_root(tmp_path / "site")


@pytest.fixture
def manager():
    """A manager with a short poll interval, always stopped on teardown."""
    mgr = FileServerManager(poll_interval=0.05)
    yield mgr
    try:
        mgr.stop()
    except NotRunningError:
        pass
    mgr.wait_stopped(timeout=5.0)


@pytest.fixture
def running_server(served_root):
    """
    A started manager serving served_root on a free port.

    Yields:
        (manager, base_url) tuple
    """
    port = find_free_port()
    mgr = FileServerManager(ServerConfig(folder_path=str(served_root), port=port), poll_interval=0.05)
    mgr.start()
    try:
        yield mgr, f"http://127.0.0.1:{port}"
    finally:
        try:
            mgr.stop()
        except NotRunningError:
            pass
        mgr.wait_stopped(timeout=5.0)


@pytest.fixture
def http_client():
    """httpx client that ignores proxy settings from the environment."""
    with httpx.Client(timeout=5.0, trust_env=False) as client:
        yield client


FILESERVER_ENV_VARS = [
    "FILESERVER_ENV_FILE",
    "FILESERVER_FOLDER",
    "FILESERVER_PORT",
    "FILESERVER_LOG_LEVEL",
    "FILESERVER_LOG_FILE",
]


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """
    Clear FILESERVER_* variables and point the env file at nothing.

    Each variable is set before being deleted so monkeypatch records it and
    values written later by load_dotenv() are undone on teardown.
    """
    for name in FILESERVER_ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.setenv("FILESERVER_ENV_FILE", str(tmp_path / "missing.env"))
    return monkeypatch
