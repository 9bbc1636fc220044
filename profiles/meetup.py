"""Meetup event page profile."""
from processor.models import AvailabilityState, FeeClass, VENUE_UNKNOWN
from processor.normalizers import FeeRule, Indicator
from profiles.base import SiteProfile, VenueRule, path_pattern
from scraper.extractors import field, read_image

# Checked in this order; the first button present decides
AVAILABILITY_BUTTONS = [
    ('waitlist-btn', AvailabilityState.WAITLIST),
    ('attend-irl-btn', AvailabilityState.AVAILABLE),
    ('pass-event-btn', AvailabilityState.EVENT_EXPIRED),
    ('rsvp-not-open-btn', AvailabilityState.NOT_AVAILABLE),
    ('attend-online-btn', AvailabilityState.AVAILABLE_ONLINE),
]

MEETUP = SiteProfile(
    name='meetup',
    domains=('meetup.com',),
    path_pattern=path_pattern(r'/[^/]+/events/\d+'),
    expected_format='https://www.meetup.com/{hostName}/events/{eventId}',
    source_timezone='Asia/Kuala_Lumpur',
    title=field('title', 'h1', required=True),
    host=field(
        'host',
        '#event-group-link > div > div.ml-4 > div.text-sm.font-medium.leading-5',
        # older page layout
        '#events > div:nth-of-type(2) > div:nth-of-type(1) > div:nth-of-type(1)',
        required=True
    ),
    # Two lines: date, then time
    date=field('date', 'time.block', 'time', required=True),
    venue=VenueRule(
        physical=field('venue', 'a[data-testid="venue-name-link"]'),
        online=field('online_venue', 'div[data-testid="venue-name-value"]'),
        fallback=VENUE_UNKNOWN
    ),
    fee=field('fee', 'div[data-event-label="action-bar"]'),
    # Meetup only labels free events; anything else is paid
    fee_rule=FeeRule(free_markers=('FREE',), default=FeeClass.PAID),
    availability=tuple(
        Indicator(selector=f'[data-testid="{test_id}"]', state=state)
        for test_id, state in AVAILABILITY_BUTTONS
    ),
    banner=field(
        'banner',
        'picture[data-testid="event-description-image"] img',
        read=read_image
    ),
    banner_drop_query=True,
)
