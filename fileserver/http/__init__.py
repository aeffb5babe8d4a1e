"""HTTP layer: listener, request dispatch and directory listings."""

from fileserver.http.listing import render_directory_listing
from fileserver.http.server import FileHTTPServer, guess_mime_type, make_file_handler

__all__ = ["FileHTTPServer", "guess_mime_type", "make_file_handler", "render_directory_listing"]
