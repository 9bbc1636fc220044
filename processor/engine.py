"""Extraction engine assembling an EventRecord from one rendered page."""
import logging
from datetime import date, datetime
from typing import Any, Callable, Optional, Union
from zoneinfo import ZoneInfo

from processor.models import (
    AvailabilityState,
    EventRecord,
    ExtractionFailure,
    FailureKind,
    VenueInfo,
)
from processor.normalizers import (
    clean_text,
    classify_fee,
    match_indicator,
    parse_event_date,
    resolve_banner,
    resolve_venue,
    split_date_time,
)
from profiles.base import SiteProfile
from scraper.extractors import FieldExtractor
from scraper.page import PageFault, PageHandle

logger = logging.getLogger(__name__)


class _MissingField(Exception):
    """Internal signal: a required field has no value."""

    def __init__(self, failure: ExtractionFailure):
        super().__init__(failure.detail)
        self.failure = failure


def _today_in(timezone: str) -> date:
    return datetime.now(ZoneInfo(timezone)).date()


class ExtractionEngine:
    """Runs a site profile against a page in a single pass."""

    def __init__(self, today: Optional[Callable[[str], date]] = None):
        """
        Initialize the engine.

        Args:
            today: Returns the current date for a timezone name; used for
                dates rendered without a year (default: system clock)
        """
        self.today = today or _today_in

    async def run(self, page: PageHandle, profile: SiteProfile,
                  source_url: str) -> Union[EventRecord, ExtractionFailure]:
        """
        Extract an EventRecord from a page.

        Args:
            page: Ready page, owned exclusively by this call
            profile: Site profile matching the page
            source_url: Canonical URL the page was loaded from

        Returns:
            EventRecord, or ExtractionFailure when a required field is
            missing or malformed, or the page itself fails
        """
        try:
            return await self._run(page, profile, source_url)
        except _MissingField as e:
            logger.warning(
                f"Extraction failed for {source_url}: {e}",
                extra={'profile': profile.name, 'field': e.failure.field}
            )
            return e.failure
        except PageFault as e:
            logger.error(
                f"Page failed during extraction of {source_url}: {e}",
                extra={'profile': profile.name, 'error_type': type(e).__name__},
                exc_info=True
            )
            return ExtractionFailure(kind=FailureKind.PAGE_FAULT, detail=str(e))

    async def _run(self, page: PageHandle, profile: SiteProfile,
                   source_url: str) -> EventRecord:
        # Raw extraction; required fields abort as soon as they are absent
        title_raw = await self._extract(page, profile.title)
        host_raw = await self._extract(page, profile.host)
        date_raw = await self._extract(page, profile.date)
        time_raw = await self._extract(page, profile.time)
        fee_raw = await self._extract(page, profile.fee)
        banner_raw = await self._extract(page, profile.banner)

        venue = await self._resolve_venue(page, profile)
        availability = await self._classify_availability(page, profile)

        title = self._require(profile.title, clean_text(title_raw))
        host = self._require(profile.host, profile.host_normalizer(host_raw))

        date_line, time_line = split_date_time(date_raw, time_raw)
        event_date = self._require(
            profile.date,
            parse_event_date(date_line, self.today(profile.source_timezone))
        )

        record = EventRecord(
            title=title,
            host=host,
            date=event_date,
            time=time_line,
            venue=venue,
            fee=classify_fee(fee_raw, profile.fee_rule),
            availability=availability,
            source_url=source_url,
            banner=resolve_banner(banner_raw, source_url, profile.banner_drop_query),
        )
        logger.info(
            f"Extracted event '{record.title}' from {source_url}",
            extra={
                'profile': profile.name,
                'availability': record.availability.value,
                'fee': record.fee.value,
                'venue_type': record.venue.kind.value,
            }
        )
        return record

    async def _extract(self, page: PageHandle,
                       extractor: Optional[FieldExtractor]) -> Optional[Any]:
        if extractor is None:
            return None

        raw = await extractor.extract(page)
        if raw is None and extractor.required:
            raise _MissingField(ExtractionFailure(
                kind=FailureKind.MISSING_REQUIRED_FIELD,
                detail=f"Required field '{extractor.name}' not found on page",
                field=extractor.name
            ))
        return raw

    def _require(self, extractor: FieldExtractor, value: Optional[Any]) -> Any:
        if value is None:
            raise _MissingField(ExtractionFailure(
                kind=FailureKind.MALFORMED_FIELD,
                detail=f"Required field '{extractor.name}' could not be normalized",
                field=extractor.name
            ))
        return value

    async def _resolve_venue(self, page: PageHandle, profile: SiteProfile) -> VenueInfo:
        rule = profile.venue
        venue = resolve_venue(
            physical=await self._extract(page, rule.physical),
            online=await self._extract(page, rule.online),
            hidden=await self._extract(page, rule.hidden),
            fallback=rule.fallback
        )
        logger.debug(f"Venue resolved as {venue.kind.value}: {venue.name}")
        return venue

    async def _classify_availability(self, page: PageHandle,
                                     profile: SiteProfile) -> AvailabilityState:
        """First matching indicator wins; no match means unknown."""
        for indicator in profile.availability:
            element = await page.query_one(indicator.selector)
            if element is None:
                continue

            text = await page.text_of(element) if indicator.needs_text else None
            state = match_indicator(indicator, text)
            if state is not None:
                logger.info(
                    f"Availability '{state.value}' from indicator {indicator.selector}"
                )
                return state

            logger.debug(f"Indicator {indicator.selector} present but unmatched: {text}")

        return AvailabilityState.UNKNOWN
