"""Shared fixtures: HTML builders for Meetup and Luma event pages."""
from datetime import date

import pytest

from processor.engine import ExtractionEngine


def _build_meetup_html(
    title='Evening Social',
    host='Downtown Socials',
    date_line='Saturday, March 15, 2025',
    time_line='7:00 PM to 9:00 PM SGT',
    venue=None,
    online=None,
    action_bar='FREE',
    buttons=(),
    banner=None,
):
    parts = ['<html><body><main>']
    if title is not None:
        parts.append(f'<h1>{title}</h1>')
    if host is not None:
        parts.append(
            '<a id="event-group-link" href="/downtown-socials/"><div>'
            '<div class="ml-4">'
            f'<div class="text-sm font-medium leading-5">{host}</div>'
            '</div></div></a>'
        )
    if date_line is not None:
        time_div = f'<div>{time_line}</div>' if time_line is not None else ''
        parts.append(f'<time class="block"><div>{date_line}</div>{time_div}</time>')
    if venue is not None:
        parts.append(
            '<a data-testid="venue-name-link" '
            f'class="hover:text-viridian hover:no-underline">{venue}</a>'
        )
    if online is not None:
        parts.append(f'<div data-testid="venue-name-value">{online}</div>')
    if action_bar is not None:
        button_html = ''.join(
            f'<button data-testid="{test_id}">Action</button>' for test_id in buttons
        )
        parts.append(
            f'<div data-event-label="action-bar"><span>{action_bar}</span>'
            f'{button_html}</div>'
        )
    if banner is not None:
        src, alt = banner
        alt_attr = f' alt="{alt}"' if alt is not None else ''
        parts.append(
            '<picture data-testid="event-description-image">'
            f'<img src="{src}"{alt_attr}></picture>'
        )
    parts.append('</main></body></html>')
    return ''.join(parts)


def _build_luma_html(
    title='Founders Breakfast',
    host='KL Startups\nand 2 others',
    date_line='Saturday, March 15',
    time_line='9:00 AM - 11:00 AM GMT+8',
    venue=None,
    ticket_label='Register',
    registration_closed=False,
    status=None,
    register_label=None,
    banner=None,
):
    parts = ['<html><body>']
    if title is not None:
        parts.append(f'<h1 class="title">{title}</h1>')
    if host is not None:
        lines = ''.join(f'<div>{line}</div>' for line in host.split('\n'))
        parts.append(f'<div class="jsx-3733653009">{lines}</div>')
    if date_line is not None:
        parts.append(f'<div class="jsx-2370077516 title">{date_line}</div>')
    if time_line is not None:
        parts.append(f'<div class="jsx-2370077516 desc">{time_line}</div>')
    if venue is not None:
        parts.append(f'<div class="jsx-3850535622">{venue}</div>')
    if ticket_label is not None:
        parts.append(f'<div class="jsx-2770533236">{ticket_label}</div>')
    if registration_closed:
        parts.append('<div class="jsx-236388194">Registration Closed</div>')
    if status is not None:
        parts.append(f'<div class="jsx-825713363 title">{status}</div>')
    if register_label is not None:
        parts.append(
            '<div class="jsx-681273248"><button>'
            f'<div class="label">{register_label}</div></button></div>'
        )
    if banner is not None:
        src, alt = banner
        parts.append(f'<div class="jsx-4068354093"><img src="{src}" alt="{alt}"></div>')
    parts.append('</body></html>')
    return ''.join(parts)


@pytest.fixture
def meetup_html():
    """Builder for Meetup event page HTML."""
    return _build_meetup_html


@pytest.fixture
def luma_html():
    """Builder for Luma event page HTML."""
    return _build_luma_html


@pytest.fixture
def engine():
    """Engine with a fixed clock in every timezone."""
    return ExtractionEngine(today=lambda timezone: date(2025, 1, 10))


MEETUP_URL = 'https://www.meetup.com/downtown-socials/events/305123456'
LUMA_URL = 'https://lu.ma/ab12CD34'


@pytest.fixture
def meetup_url():
    return MEETUP_URL


@pytest.fixture
def luma_url():
    return LUMA_URL
