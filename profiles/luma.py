"""Luma event page profile."""
from processor.models import AvailabilityState, FeeClass, VENUE_HIDDEN
from processor.normalizers import FeeRule, Indicator, first_line
from profiles.base import SiteProfile, VenueRule, path_pattern
from scraper.extractors import field, read_image

LUMA = SiteProfile(
    name='luma',
    domains=('lu.ma',),
    path_pattern=path_pattern(r'/[a-zA-Z0-9]{8}'),
    expected_format='https://lu.ma/{eventCode}',
    source_timezone='Asia/Kuala_Lumpur',
    title=field('title', 'h1', required=True),
    host=field('host', '.jsx-3733653009', required=True),
    host_normalizer=first_line,
    date=field('date', '.jsx-2370077516.title', required=True),
    time=field('time', '.jsx-2370077516.desc'),
    # The address is only shown after registering
    venue=VenueRule(
        physical=field('venue', '.jsx-3850535622'),
        fallback=VENUE_HIDDEN
    ),
    fee=field('fee', '.jsx-2770533236'),
    fee_rule=FeeRule(paid_markers=('Get Tickets',), default=FeeClass.FREE, exact=True),
    availability=(
        Indicator(
            selector='.jsx-236388194',
            state=AvailabilityState.NOT_AVAILABLE
        ),
        Indicator(
            selector='.jsx-825713363.title',
            labels=(
                ('Past Event', AvailabilityState.EVENT_EXPIRED),
                ('Event Full', AvailabilityState.WAITLIST),
                ('Approval Required', AvailabilityState.AVAILABLE),
            )
        ),
        Indicator(
            selector='.jsx-681273248 button div.label',
            labels=(
                ('Register', AvailabilityState.AVAILABLE),
                ('Get Ticket', AvailabilityState.AVAILABLE),
            ),
            exact=True
        ),
    ),
    banner=field('banner', '.jsx-4068354093 img', read=read_image),
)
