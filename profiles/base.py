"""Declarative per-site extraction profiles."""
import re
from dataclasses import dataclass
from typing import Callable, Optional, Pattern, Tuple

from processor.models import VENUE_UNKNOWN, VenueInfo
from processor.normalizers import FeeRule, Indicator, clean_text
from scraper.extractors import FieldExtractor


@dataclass(frozen=True)
class VenueRule:
    """Venue signals of a site, checked physical, online, hidden, fallback."""
    physical: Optional[FieldExtractor] = None
    online: Optional[FieldExtractor] = None
    hidden: Optional[FieldExtractor] = None
    fallback: VenueInfo = VENUE_UNKNOWN


@dataclass(frozen=True)
class SiteProfile:
    """
    Everything needed to extract an EventRecord from one site.

    Profiles are module-level constants shared by every extraction; they
    hold no per-call state.
    """
    name: str
    domains: Tuple[str, ...]
    path_pattern: Pattern
    expected_format: str
    source_timezone: str

    title: FieldExtractor
    host: FieldExtractor
    date: FieldExtractor
    venue: VenueRule
    fee: FieldExtractor
    fee_rule: FeeRule
    availability: Tuple[Indicator, ...]
    banner: FieldExtractor

    time: Optional[FieldExtractor] = None
    host_normalizer: Callable[[Optional[str]], Optional[str]] = clean_text
    banner_drop_query: bool = False

    def owns_domain(self, hostname: str) -> bool:
        """Check whether a URL hostname belongs to this site."""
        hostname = hostname.lower()
        return any(hostname == domain or hostname.endswith('.' + domain)
                   for domain in self.domains)

    def matches_path(self, path: str) -> bool:
        return self.path_pattern.fullmatch(path) is not None


def path_pattern(expression: str) -> Pattern:
    return re.compile(expression)
