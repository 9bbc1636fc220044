"""Read-only DOM query interface used by the extraction engine."""
import re
from typing import Any, List, Optional, Protocol

from bs4 import BeautifulSoup, NavigableString, Tag
from bs4.element import PreformattedString

# Elements rendered on their own line(s)
BLOCK_TAGS = frozenset([
    'address', 'article', 'aside', 'blockquote', 'dd', 'details', 'dialog',
    'div', 'dl', 'dt', 'fieldset', 'figcaption', 'figure', 'footer', 'form',
    'h1', 'h2', 'h3', 'h4', 'h5', 'h6', 'header', 'hgroup', 'hr', 'li',
    'main', 'nav', 'ol', 'p', 'pre', 'section', 'summary', 'table', 'tr', 'ul',
])

# Elements whose content is never rendered as text
HIDDEN_TAGS = frozenset(['script', 'style', 'template', 'noscript'])

WHITESPACE = re.compile(r'\s+')


def _collect_text(tag: Tag, chunks: List[str]) -> None:
    for child in tag.children:
        if isinstance(child, PreformattedString):
            # comments, CDATA, doctypes
            continue
        if isinstance(child, NavigableString):
            chunks.append(WHITESPACE.sub(' ', str(child)))
            continue
        if child.name in HIDDEN_TAGS:
            continue
        if child.name == 'br':
            chunks.append('\n')
            continue

        block = child.name in BLOCK_TAGS
        if block:
            chunks.append('\n')
        _collect_text(child, chunks)
        if block:
            chunks.append('\n')


def inner_text(element: Tag) -> str:
    """
    Approximate the browser's innerText of an element.

    Inline content is joined as written, whitespace runs collapse to one
    space, and lines break only at <br> and block elements.
    """
    chunks: List[str] = []
    _collect_text(element, chunks)
    lines = (' '.join(line.split()) for line in ''.join(chunks).split('\n'))
    return '\n'.join(line for line in lines if line)


class PageFault(Exception):
    """The page itself became unusable (crash, timeout, closed session)."""


class PageHandle(Protocol):
    """
    Minimal query capability over one rendered document.

    Element handles are opaque to callers; they are only ever passed back
    into text_of/attribute_of of the handle that produced them.
    """

    async def query_one(self, selector: str) -> Optional[Any]:
        ...

    async def query_all(self, selector: str) -> List[Any]:
        ...

    async def text_of(self, element: Any) -> str:
        ...

    async def attribute_of(self, element: Any, name: str) -> Optional[str]:
        ...


class SoupPageHandle:
    """PageHandle over a rendered HTML snapshot, queried with CSS selectors."""

    def __init__(self, html: str):
        """
        Parse the snapshot once.

        Args:
            html: Rendered page HTML (e.g. page.content() of a browser)
        """
        self.soup = BeautifulSoup(html, 'html.parser')

    async def query_one(self, selector: str) -> Optional[Tag]:
        return self.soup.select_one(selector)

    async def query_all(self, selector: str) -> List[Tag]:
        return self.soup.select(selector)

    async def text_of(self, element: Tag) -> str:
        return inner_text(element)

    async def attribute_of(self, element: Tag, name: str) -> Optional[str]:
        value = element.get(name)
        if isinstance(value, list):
            return ' '.join(value)
        return value
