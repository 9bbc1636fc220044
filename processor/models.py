"""Data models for event extraction."""
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Dict, Optional


class FeeClass(str, Enum):
    """Whether attending the event costs money."""
    FREE = 'FREE'
    PAID = 'PAID'


class AvailabilityState(str, Enum):
    """Registration state shown on the event page."""
    AVAILABLE = 'available'
    AVAILABLE_ONLINE = 'available_online'
    WAITLIST = 'waitlist'
    NOT_AVAILABLE = 'not_available'
    EVENT_EXPIRED = 'event_expired'
    UNKNOWN = 'unknown'


class VenueKind(str, Enum):
    """Which venue resolution rule produced a VenueInfo."""
    PHYSICAL = 'physical'
    ONLINE = 'online'
    HIDDEN = 'hidden'
    UNKNOWN = 'unknown'


@dataclass(frozen=True)
class VenueInfo:
    """Resolved venue, or one of the venue sentinels."""
    kind: VenueKind
    name: str


VENUE_UNKNOWN = VenueInfo(kind=VenueKind.UNKNOWN, name='Unable to find venue')
VENUE_HIDDEN = VenueInfo(kind=VenueKind.HIDDEN, name='Register to See Venue')

TIME_UNAVAILABLE = 'Unable to find time'


@dataclass(frozen=True)
class BannerInfo:
    """Banner image of an event. Both parts come from the same <img>."""
    url: str
    alt: str


@dataclass(frozen=True)
class EventRecord:
    """Normalized event extracted from one page."""
    title: str
    host: str
    date: date
    time: str
    venue: VenueInfo
    fee: FeeClass
    availability: AvailabilityState
    source_url: str
    banner: Optional[BannerInfo] = None

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize the record into the JSON response shape.

        Returns:
            Dict with ISO date and flattened venue/banner fields
        """
        return {
            'title': self.title,
            'host': self.host,
            'date': self.date.isoformat(),
            'time': self.time,
            'venue': self.venue.name,
            'venue_type': self.venue.kind.value,
            'fee': self.fee.value,
            'availability': self.availability.value,
            'url': self.source_url,
            'banner_url': self.banner.url if self.banner else None,
            'banner_alt': self.banner.alt if self.banner else None,
        }


class FailureKind(str, Enum):
    """Why an extraction produced no EventRecord."""
    UNSUPPORTED = 'Unsupported'
    INVALID_FORMAT = 'InvalidFormat'
    MISSING_REQUIRED_FIELD = 'MissingRequiredField'
    MALFORMED_FIELD = 'MalformedField'
    PAGE_FAULT = 'PageFault'

    @property
    def is_user_error(self) -> bool:
        return self in (FailureKind.UNSUPPORTED, FailureKind.INVALID_FORMAT)


@dataclass(frozen=True)
class ExtractionFailure:
    """Terminal outcome of a failed resolve or extraction."""
    kind: FailureKind
    detail: str
    field: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'kind': self.kind.value,
            'detail': self.detail,
            'field': self.field,
        }
