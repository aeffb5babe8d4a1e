"""
Test harness for file server contract tests.

Responsibilities:
- Choose a free TCP port
- Build a small served-root tree on disk
- Parse anchors out of generated listings
"""

import socket
from html.parser import HTMLParser
from pathlib import Path
from typing import List, Tuple


def find_free_port() -> int:
    """Find a free TCP port on localhost."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(('127.0.0.1', 0))
        s.listen(1)
        port = s.getsockname()[1]
    return port


INDEX_HTML = b"<!DOCTYPE html>\n<html><body><h1>Hello</h1></body></html>\n"


def build_served_root(root: Path) -> Path:
    """
    Populate root with:

        index.html
        style.css
        app.js
        data.json
        notes.txt
        docs/
            readme.html
            images/
                logo.png
        empty/
    """
    root.mkdir(parents=True, exist_ok=True)
    (root / "index.html").write_bytes(INDEX_HTML)
    (root / "style.css").write_text("body { color: #333; }\n")
    (root / "app.js").write_text("console.log('hi');\n")
    (root / "data.json").write_text('{"ok": true}\n')
    (root / "notes.txt").write_text("plain notes\n")
    docs = root / "docs"
    docs.mkdir()
    (docs / "readme.html").write_text("<p>readme</p>\n")
    images = docs / "images"
    images.mkdir()
    (images / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\n" + b"\x00" * 32)
    (root / "empty").mkdir()
    return root


class AnchorCollector(HTMLParser):
    """Collects (href, text) for every <a> element."""

    def __init__(self):
        super().__init__()
        self.anchors: List[Tuple[str, str]] = []
        self._href = None
        self._text: List[str] = []

    def handle_starttag(self, tag, attrs):
        if tag == "a":
            self._href = dict(attrs).get("href")
            self._text = []

    def handle_data(self, data):
        if self._href is not None:
            self._text.append(data)

    def handle_endtag(self, tag):
        if tag == "a" and self._href is not None:
            self.anchors.append((self._href, "".join(self._text)))
            self._href = None


def parse_anchors(html_text: str) -> List[Tuple[str, str]]:
    parser = AnchorCollector()
    parser.feed(html_text)
    parser.close()
    return parser.anchors
