"""Pure normalizers turning raw page text into typed event fields."""
import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional, Tuple
from urllib.parse import urljoin, urlsplit, urlunsplit

from processor.models import (
    AvailabilityState,
    BannerInfo,
    FeeClass,
    TIME_UNAVAILABLE,
    VENUE_HIDDEN,
    VenueInfo,
    VenueKind,
)
from scraper.extractors import ImageSource

logger = logging.getLogger(__name__)

# Formats carrying their own year
DATE_FORMATS = [
    '%A, %B %d, %Y',     # Saturday, March 15, 2025
    '%a, %b %d, %Y',     # Sat, Mar 15, 2025
    '%A, %d %B %Y',      # Saturday, 15 March 2025
    '%a, %d %b %Y',      # Sat, 15 Mar 2025
    '%B %d, %Y',         # March 15, 2025
    '%b %d, %Y',         # Mar 15, 2025
    '%d %B %Y',          # 15 March 2025
    '%Y-%m-%d',          # ISO 8601
]

# Formats without a year; the year is appended before parsing so that
# Feb 29 is checked against the right year instead of 1900
YEARLESS_FORMATS = [
    '%A, %B %d',         # Saturday, March 15
    '%A %B %d',
    '%A, %d %B',         # Saturday, 15 March
    '%A %d %B',
    '%a, %b %d',         # Sat, Mar 15
    '%a %b %d',
    '%a, %d %b',         # Sat, 15 Mar
    '%a %d %b',
    '%B %d',
    '%b %d',             # Mar 15
    '%d %B',
    '%d %b',             # 15 Mar
]

RELATIVE_DAYS = {
    'today': 0,
    'tomorrow': 1,
}


def clean_text(raw: Optional[str]) -> Optional[str]:
    """
    Collapse surrounding whitespace of a raw text value.

    Returns:
        Stripped text, or None for absent/blank input
    """
    if raw is None:
        return None
    text = raw.strip()
    return text or None


def first_line(raw: Optional[str]) -> Optional[str]:
    """Keep only the first non-blank line of a multi-line text block."""
    text = clean_text(raw)
    if text is None:
        return None
    return text.split('\n')[0].strip() or None


def split_date_time(date_raw: Optional[str],
                    time_raw: Optional[str]) -> Tuple[Optional[str], str]:
    """
    Split raw date/time input into a date line and a time line.

    When the site renders both in one block the first line is the date and
    the second line is the time. A separately extracted time wins.

    Args:
        date_raw: Raw date text or combined two-line date/time block
        time_raw: Raw time text when the site exposes it separately

    Returns:
        Tuple of (date_line, time_line)
    """
    lines = [line.strip() for line in (date_raw or '').split('\n') if line.strip()]
    date_line = lines[0] if lines else None

    time_line = clean_text(time_raw)
    if time_line is None and len(lines) > 1:
        time_line = lines[1]

    return date_line, time_line or TIME_UNAVAILABLE


def parse_event_date(date_line: Optional[str], today: date) -> Optional[date]:
    """
    Parse a site date line into a calendar date.

    Args:
        date_line: Date text as rendered by the site
        today: Current date in the site's source timezone, used for
            relative words and for dates rendered without a year

    Returns:
        Calendar date, or None if no known format matches
    """
    if not date_line:
        return None

    text = ' '.join(date_line.split())

    offset = RELATIVE_DAYS.get(text.lower())
    if offset is not None:
        return today + timedelta(days=offset)

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    for fmt in YEARLESS_FORMATS:
        try:
            return datetime.strptime(f"{text} {today.year}", f"{fmt} %Y").date()
        except ValueError:
            continue

    logger.warning(f"Unrecognized date format: {date_line}")
    return None


def resolve_venue(physical: Optional[str], online: Optional[str],
                  hidden: Optional[str], fallback: VenueInfo) -> VenueInfo:
    """
    Resolve the venue from the venue signals a page exposes.

    Priority: physical venue text, online indicator text, hidden-venue
    indicator, then the profile's fallback sentinel.
    """
    if physical is not None:
        return VenueInfo(kind=VenueKind.PHYSICAL, name=physical.strip())
    if online is not None:
        return VenueInfo(kind=VenueKind.ONLINE, name=online.strip())
    if hidden is not None:
        return VENUE_HIDDEN
    return fallback


@dataclass(frozen=True)
class FeeRule:
    """
    Fee markers of one site.

    default applies when neither a free nor a paid marker is found,
    including when the fee element is missing altogether.
    """
    free_markers: Tuple[str, ...] = ()
    paid_markers: Tuple[str, ...] = ()
    default: FeeClass = FeeClass.FREE
    exact: bool = False


def _has_marker(text: str, markers: Tuple[str, ...], exact: bool) -> bool:
    if exact:
        return text in markers
    return any(marker in text for marker in markers)


def classify_fee(raw: Optional[str], rule: FeeRule) -> FeeClass:
    """
    Classify fee text as FREE or PAID.

    Args:
        raw: Text of the fee container or ticket-action label
        rule: Site fee markers and default

    Returns:
        FeeClass
    """
    text = clean_text(raw)
    if text is None:
        return rule.default
    if _has_marker(text, rule.free_markers, rule.exact):
        return FeeClass.FREE
    if _has_marker(text, rule.paid_markers, rule.exact):
        return FeeClass.PAID
    return rule.default


@dataclass(frozen=True)
class Indicator:
    """
    Presence check for one availability signal.

    With no labels, presence of the selector alone yields state. With
    labels, the element text must match one of them (substring match, or
    equality when exact is set) and the matched label decides the state.
    """
    selector: str
    state: Optional[AvailabilityState] = None
    labels: Tuple[Tuple[str, AvailabilityState], ...] = ()
    exact: bool = False

    @property
    def needs_text(self) -> bool:
        return bool(self.labels)


def match_indicator(indicator: Indicator,
                    text: Optional[str] = None) -> Optional[AvailabilityState]:
    """
    Decide the state signalled by a present indicator element.

    Args:
        indicator: Indicator whose selector resolved on the page
        text: Element text, required for labelled indicators

    Returns:
        AvailabilityState, or None if the indicator does not match
    """
    if not indicator.needs_text:
        return indicator.state

    label_text = clean_text(text)
    if label_text is None:
        return None

    for label, state in indicator.labels:
        if indicator.exact and label_text == label:
            return state
        if not indicator.exact and label in label_text:
            return state
    return None


def strip_query(url: str) -> str:
    """Drop query string and fragment from a URL."""
    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, '', ''))


def resolve_banner(raw: Optional[ImageSource], base_url: str,
                   drop_query: bool) -> Optional[BannerInfo]:
    """
    Build the banner from the raw <img> reading.

    Args:
        raw: src/alt pair of the banner image, or None
        base_url: Canonical page URL for resolving relative sources
        drop_query: Whether the site appends cache-busting parameters

    Returns:
        BannerInfo, or None when there is no banner image
    """
    if raw is None:
        return None

    url = urljoin(base_url, raw.src.strip())
    if drop_query:
        url = strip_query(url)
    return BannerInfo(url=url, alt=raw.alt.strip())
