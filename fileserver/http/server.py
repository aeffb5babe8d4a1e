"""
HTTP listener and request dispatch for the file server.

Every request, whatever its method, is a path lookup under the served root:
files are returned with a MIME type from a small extension table, folders get
a generated listing, anything else is a 404.
"""

import logging
import os
from http.server import BaseHTTPRequestHandler, HTTPServer
from typing import Union
from urllib.parse import unquote

from fileserver.http.listing import render_directory_listing

logger = logging.getLogger(__name__)

# Anything not listed is served as octet-stream
MIME_TYPES = {
    "html": "text/html",
    "css": "text/css",
    "js": "application/javascript",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "svg": "image/svg+xml",
    "json": "application/json",
}
DEFAULT_MIME_TYPE = "application/octet-stream"

LISTING_CONTENT_TYPE = "text/html; charset=utf-8"
TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"
NOT_FOUND_BODY = "File not found"


def guess_mime_type(path: Union[str, os.PathLike]) -> str:
    """Map a file path to a Content-Type by its extension."""
    ext = os.path.splitext(os.fspath(path))[1].lstrip(".").lower()
    return MIME_TYPES.get(ext, DEFAULT_MIME_TYPE)


def url_to_path(request_target: str) -> str:
    """Strip query string and fragment from a request target and percent-decode it."""
    path = request_target.split("?", 1)[0].split("#", 1)[0]
    return unquote(path)


def resolve_path(root: Union[str, os.PathLike], url_path: str) -> str:
    """
    Join a URL path onto the served root.

    No traversal normalization is done beyond what os.path.join does.
    """
    return os.path.join(os.fspath(root), url_path.lstrip("/"))


def make_file_handler(root: str):
    """Create a FileRequestHandler class bound to a served root."""

    class FileRequestHandler(BaseHTTPRequestHandler):
        """Serves files and directory listings from the served root."""

        served_root = root

        def _dispatch(self):
            url_path = url_to_path(self.path)
            file_path = resolve_path(self.served_root, url_path)

            if os.path.isfile(file_path):
                try:
                    with open(file_path, "rb") as f:
                        content = f.read()
                except OSError as e:
                    logger.error(f"Error reading {file_path}: {e}")
                    self._send_text(500, f"Error reading file: {e}")
                    return
                self._send(200, guess_mime_type(file_path), content)
            elif os.path.isdir(file_path):
                try:
                    listing = render_directory_listing(file_path, url_path)
                except OSError as e:
                    logger.error(f"Error listing {file_path}: {e}")
                    self._send_text(500, f"Error listing directory: {e}")
                    return
                self._send(200, LISTING_CONTENT_TYPE, listing.encode("utf-8"))
            else:
                self._send_text(404, NOT_FOUND_BODY)

        # No method-specific behavior: everything is a path lookup
        do_GET = _dispatch
        do_HEAD = _dispatch
        do_POST = _dispatch
        do_PUT = _dispatch
        do_DELETE = _dispatch
        do_PATCH = _dispatch
        do_OPTIONS = _dispatch

        def _send_text(self, status_code: int, message: str):
            self._send(status_code, TEXT_CONTENT_TYPE, message.encode("utf-8"))

        def _send(self, status_code: int, content_type: str, body: bytes):
            """Write a complete response. Write failures only affect this request."""
            try:
                self.send_response(status_code)
                self.send_header("Content-Type", content_type)
                self.send_header("Content-Length", str(len(body)))
                self.end_headers()
                if self.command != "HEAD":
                    self.wfile.write(body)
            except OSError as e:
                logger.warning(f"Error sending response to {self.address_string()}: {e}")

        def log_message(self, format, *args):
            """Override to use our logger."""
            logger.debug(f"{self.address_string()} - {format % args}")

    return FileRequestHandler


class FileHTTPServer(HTTPServer):
    """
    Single-threaded HTTP listener.

    Requests are handled one at a time on the thread running serve_forever().
    """

    allow_reuse_address = True

    def __init__(self, host: str, port: int, root: str, bind_and_activate: bool = True):
        """
        Initialize listener.

        Args:
            host: Address to bind to
            port: Port to bind to
            root: Served root folder
            bind_and_activate: Bind and listen immediately (raises OSError on failure)
        """
        super().__init__((host, port), make_file_handler(root), bind_and_activate)

    def handle_error(self, request, client_address):
        """Log unexpected handler errors instead of printing to stderr."""
        logger.error(f"Error handling request from {client_address}", exc_info=True)

    @property
    def url(self) -> str:
        host, port = self.server_address[:2]
        return f"http://{host}:{port}"
