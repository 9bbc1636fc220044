"""Per-field extraction strategies evaluated against a PageHandle."""
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Tuple

from scraper.page import PageHandle

logger = logging.getLogger(__name__)

Reader = Callable[[PageHandle, Any], Awaitable[Any]]


@dataclass(frozen=True)
class ImageSource:
    """Raw src/alt pair read from one <img> element."""
    src: str
    alt: str


async def read_text(page: PageHandle, element: Any) -> str:
    return await page.text_of(element)


def read_attribute(name: str) -> Reader:
    """Build a reader returning one attribute of the matched element."""
    async def reader(page: PageHandle, element: Any) -> Optional[str]:
        return await page.attribute_of(element, name)
    return reader


async def read_image(page: PageHandle, element: Any) -> Optional[ImageSource]:
    """
    Read src and alt of an <img> together.

    Returns:
        ImageSource, or None when the element carries no src
    """
    src = await page.attribute_of(element, 'src')
    if not src:
        return None
    alt = await page.attribute_of(element, 'alt')
    return ImageSource(src=src, alt=alt or '')


@dataclass(frozen=True)
class Strategy:
    """One selector plus the reader applied to the element it finds."""
    selector: str
    read: Reader = read_text


@dataclass(frozen=True)
class FieldExtractor:
    """Ordered fallback chain of strategies for one output field."""
    name: str
    strategies: Tuple[Strategy, ...]
    required: bool = False

    async def extract(self, page: PageHandle) -> Optional[Any]:
        """
        Evaluate strategies in priority order.

        The first strategy whose selector resolves wins, even when its
        reader yields an empty string. Later strategies are not consulted.

        Args:
            page: Page to query

        Returns:
            Raw value of the winning strategy, or None if no selector resolved
        """
        for index, strategy in enumerate(self.strategies):
            element = await page.query_one(strategy.selector)
            if element is None:
                continue
            logger.debug(
                f"Field '{self.name}' matched strategy {index}: {strategy.selector}"
            )
            return await strategy.read(page, element)

        logger.debug(f"Field '{self.name}' absent after {len(self.strategies)} strategies")
        return None


def field(name: str, *selectors: str, required: bool = False,
          read: Reader = read_text) -> FieldExtractor:
    """Shorthand for an extractor whose strategies share one reader."""
    return FieldExtractor(
        name=name,
        strategies=tuple(Strategy(selector, read) for selector in selectors),
        required=required
    )
