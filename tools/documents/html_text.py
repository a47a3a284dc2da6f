"""Render HTML into readable plain text with BeautifulSoup."""

import re
from collections.abc import Iterable

from bs4 import BeautifulSoup

_DROP_TAGS = ["script", "style", "noscript", "template", "head"]
_BLOCK_TAGS = [
    "address", "article", "aside", "blockquote", "dd", "div", "dl", "dt",
    "fieldset", "figcaption", "figure", "form", "h1", "h2", "h3", "h4", "h5",
    "h6", "header", "hr", "li", "main", "ol", "p", "pre", "section", "table",
    "tbody", "thead", "tfoot", "tr", "ul",
]
_CELL_TAGS = ["td", "th"]

_INLINE_WS = re.compile(r"[ \t\r\f\v\u00a0]+")
_EXCESS_BLANK_LINES = re.compile(r"\n{3,}")


def html_to_text(html: str, *, skip_selectors: Iterable[str] = ()) -> str:
    """
    Convert an HTML document to text, keeping line structure.

    Anchors pointing at absolute http(s) URLs are rendered as ``label [href]``
    so downstream link harvesting still sees them. Elements matching any CSS
    selector in ``skip_selectors`` are removed with their content.
    """
    soup = BeautifulSoup(html, "html.parser")

    for element in soup(_DROP_TAGS):
        element.decompose()

    for selector in skip_selectors:
        for element in soup.select(selector):
            # A matched ancestor may already have taken this element with it.
            if not element.decomposed:
                element.decompose()

    for anchor in soup.find_all("a", href=True):
        href = anchor["href"].strip()
        if not href.startswith(("http://", "https://")):
            continue
        label = anchor.get_text(" ", strip=True)
        anchor.replace_with(f"{label} [{href}]" if label and label != href else href)

    for br in soup.find_all("br"):
        br.replace_with("\n")
    for block in soup.find_all(_BLOCK_TAGS):
        block.insert_before("\n")
        block.insert_after("\n")
    for cell in soup.find_all(_CELL_TAGS):
        cell.insert_after(" ")

    return normalize_whitespace(soup.get_text())


def normalize_whitespace(text: str) -> str:
    lines = [_INLINE_WS.sub(" ", line).strip() for line in text.splitlines()]
    return _EXCESS_BLANK_LINES.sub("\n\n", "\n".join(lines)).strip()
