"""Visible-text extraction from HTML."""

from __future__ import annotations

from bs4 import BeautifulSoup

from page_ingest.utils.text import normalize, truncate

_INVISIBLE_TAGS = ("script", "style", "noscript", "template")


def extract_text(html: str) -> str:
    """Return the whitespace-collapsed text of the document body."""
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(_INVISIBLE_TAGS):
        tag.decompose()
    root = soup.body or soup
    return normalize(root.get_text())


def extract_content(html: str, max_chars: int) -> str:
    return truncate(extract_text(html), max_chars)


__all__ = ["extract_content", "extract_text"]
