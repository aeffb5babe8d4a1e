#!/usr/bin/env python3
"""
File server main entry point.

Allows the server to be run standalone: python3 -m fileserver --folder ./site
A desktop host embeds FileServerManager directly instead.
"""

import argparse
import logging
import logging.handlers
import sys
import time
from typing import List, Optional

from fileserver.config import load_config
from fileserver.errors import FileServerError
from fileserver.manager import FileServerManager

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logger = logging.getLogger("fileserver")


def configure_logging(log_level: str, log_file: Optional[str] = None) -> None:
    """Console logging, plus a rotation-tolerant file handler if log_file is set."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )
    if not log_file:
        return
    try:
        # WatchedFileHandler reopens the file after external rotation
        handler = logging.handlers.WatchedFileHandler(log_file, mode="a")
    except OSError as e:
        logger.warning(f"Cannot open log file {log_file}, logging to console only: {e}")
        return
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.getLogger().addHandler(handler)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fileserver",
        description="Serve a local folder over HTTP on 127.0.0.1.",
    )
    parser.add_argument("--folder", help="Folder to serve (default: FILESERVER_FOLDER)")
    parser.add_argument("--port", type=int, help="Port to listen on (default: FILESERVER_PORT or 8080)")
    parser.add_argument("--env-file", help="Path of a .env file to load (default: FILESERVER_ENV_FILE or .env)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = load_config(args.env_file)
    except ValueError as e:
        logging.basicConfig(format=LOG_FORMAT)
        logger.error(f"Invalid configuration: {e}")
        return 1

    configure_logging(settings.log_level, settings.log_file)

    manager = FileServerManager(config=settings.server)
    try:
        manager.configure(folder_path=args.folder, port=args.port)
        manager.start()
    except FileServerError as e:
        logger.error(f"File server failed to start [{e.kind}]: {e}")
        return 1

    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        logger.info("File server shutdown requested")
        manager.stop()
        manager.wait_stopped(timeout=2.0)
    return 0


if __name__ == "__main__":
    sys.exit(main())
