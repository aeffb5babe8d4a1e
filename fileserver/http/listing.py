"""
Directory listing renderer.

Builds the HTML page served when a request resolves to a folder. Entries are
listed in the order the filesystem returns them; no sorting is applied.
"""

import html
import logging
import os
from typing import List, Union
from urllib.parse import quote

logger = logging.getLogger(__name__)

LISTING_STYLE = (
    "body{font-family:Arial,sans-serif;margin:20px;}"
    "h1{color:#333;}"
    "ul{list-style-type:none;padding:0;}"
    "li{margin:5px 0;}"
    "a{text-decoration:none;color:#0077cc;}"
    "a:hover{text-decoration:underline;}"
)


def parent_url(url_path: str) -> str:
    """
    Return the parent of a URL path.

    "/a/b" -> "/a", "/a" -> "/", "/a/b/" -> "/a". The root is its own parent.

    A trailing slash is dropped before splitting on the last separator, so
    "/docs/" has parent "/" rather than linking back to "/docs" itself.
    """
    trimmed = url_path.rstrip("/")
    head, sep, _ = trimmed.rpartition("/")
    if not sep or not head:
        return "/"
    return head


def _entry_url(url_path: str, name: str) -> str:
    return f"{url_path.rstrip('/')}/{name}"


def _is_text(name: str) -> bool:
    # Undecodable bytes come back from scandir as lone surrogates
    try:
        name.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def render_directory_listing(directory_path: Union[str, os.PathLike], url_path: str) -> str:
    """
    Render an HTML listing of a directory's immediate entries.

    Args:
        directory_path: Folder on disk to enumerate
        url_path: Request path the folder was reached by (used for title and links)

    Returns:
        HTML document as a string

    Raises:
        OSError: If the directory itself cannot be read. Errors on individual
            entries are skipped.
    """
    title = html.escape(url_path)
    lines: List[str] = [
        "<!DOCTYPE html>",
        "<html>",
        "<head>",
        '<meta charset="utf-8">',
        f"<title>Index of {title}</title>",
        f"<style>{LISTING_STYLE}</style>",
        "</head>",
        "<body>",
        f"<h1>Index of {title}</h1>",
        "<ul>",
    ]

    if url_path != "/":
        parent = parent_url(url_path)
        lines.append(
            f'<li><a href="{html.escape(quote(parent), quote=True)}">..</a> (parent directory)</li>'
        )

    with os.scandir(directory_path) as entries:
        for entry in entries:
            name = entry.name
            if not _is_text(name):
                logger.debug(f"Skipping entry with undecodable name in {directory_path}")
                continue
            try:
                kind = "directory" if entry.is_dir() else "file"
            except OSError as e:
                logger.debug(f"Skipping entry {name!r}: {e}")
                continue

            href = html.escape(quote(_entry_url(url_path, name)), quote=True)
            lines.append(f'<li><a href="{href}">{html.escape(name)}</a> ({kind})</li>')

    lines.extend(["</ul>", "</body>", "</html>"])
    return "\n".join(lines)
