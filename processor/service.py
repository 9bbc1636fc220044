"""Entry points from an event URL to an EventRecord or failure."""
import logging
from typing import Optional, Union

from processor.engine import ExtractionEngine
from processor.models import EventRecord, ExtractionFailure, FailureKind
from profiles.resolver import ProfileResolver, default_resolver
from scraper.browser import BrowserSession
from scraper.page import PageFault, SoupPageHandle

logger = logging.getLogger(__name__)

Outcome = Union[EventRecord, ExtractionFailure]


async def extract_from_url(raw_url: str,
                           session: Optional[BrowserSession] = None,
                           engine: Optional[ExtractionEngine] = None,
                           resolver: ProfileResolver = default_resolver) -> Outcome:
    """
    Resolve, load and extract an event page.

    Args:
        raw_url: Event URL as submitted by the caller
        session: Browser session used to load the page
        engine: Extraction engine
        resolver: Profile resolver

    Returns:
        EventRecord on success, otherwise an ExtractionFailure
    """
    resolution = resolver.resolve(raw_url)
    if isinstance(resolution, ExtractionFailure):
        return resolution

    session = session or BrowserSession()
    engine = engine or ExtractionEngine()

    try:
        async with session.open(resolution.url) as page:
            return await engine.run(page, resolution.profile, resolution.url)
    except PageFault as e:
        logger.error(
            f"Could not load {resolution.url}: {e}",
            extra={'profile': resolution.profile.name},
            exc_info=True
        )
        return ExtractionFailure(kind=FailureKind.PAGE_FAULT, detail=str(e))


async def extract_from_snapshot(raw_url: str, html: str,
                                engine: Optional[ExtractionEngine] = None,
                                resolver: ProfileResolver = default_resolver) -> Outcome:
    """
    Extract an event from HTML already rendered by the caller.

    Args:
        raw_url: URL the snapshot was taken from
        html: Rendered page HTML

    Returns:
        EventRecord on success, otherwise an ExtractionFailure
    """
    resolution = resolver.resolve(raw_url)
    if isinstance(resolution, ExtractionFailure):
        return resolution

    engine = engine or ExtractionEngine()
    return await engine.run(SoupPageHandle(html), resolution.profile, resolution.url)
