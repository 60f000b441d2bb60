"""HTML Parser — decode a fetched page and locate its title."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import chardet
import structlog
from bs4 import BeautifulSoup, Tag

logger = structlog.get_logger(__name__)


@dataclass
class ParsedPage:
    """Result of parsing a fetched HTML document."""
    soup: BeautifulSoup
    encoding: str

    @property
    def title(self) -> Optional[str]:
        return find_title(self.soup)


def find_title(root: Tag) -> Optional[str]:
    """Return the text of the first ``<title>`` element under *root*.

    The tree is walked depth-first, parents before children, so a title in
    ``<head>`` wins over one nested later in the body (an inline ``<svg>``
    title, for instance). Returns ``None`` when the document has no title at
    all and ``""`` for an empty ``<title></title>``.
    """
    stack: list[Tag] = [root]
    while stack:
        node = stack.pop()
        if node.name == "title" and node is not root:
            return node.get_text().strip()
        # reversed so the first child is visited next
        stack.extend(reversed([c for c in node.children if isinstance(c, Tag)]))
    return None


class HtmlParser:
    """Turns raw response bytes into a BeautifulSoup tree.

    * Uses the charset declared by the server when there is one.
    * Falls back to *chardet* detection on the raw bytes.
    """

    def parse(self, body: bytes, declared_encoding: Optional[str] = None) -> ParsedPage:
        """Parse *body* and return the tree with the encoding used.

        Raises:
            ValueError: if the body cannot be decoded or parsed as HTML.
        """
        encoding = declared_encoding or self._detect_encoding(body)
        try:
            soup = BeautifulSoup(body, "lxml", from_encoding=encoding)
        except Exception as exc:
            raise ValueError(f"unparseable HTML body: {exc}") from exc
        return ParsedPage(soup=soup, encoding=encoding)

    @staticmethod
    def _detect_encoding(body: bytes) -> str:
        """Detect encoding of the raw bytes (best-effort)."""
        if not body:
            return "utf-8"
        result = chardet.detect(body[:64 * 1024])
        return result.get("encoding") or "utf-8"
