"""Select the site profile for an event URL."""
import logging
from dataclasses import dataclass
from typing import Sequence, Union
from urllib.parse import urlsplit, urlunsplit

from processor.models import ExtractionFailure, FailureKind
from profiles.base import SiteProfile
from profiles.luma import LUMA
from profiles.meetup import MEETUP

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Resolution:
    """A supported URL in canonical form and the profile that handles it."""
    profile: SiteProfile
    url: str


def canonicalize_url(raw_url: str) -> str:
    """
    Strip query string, fragment and trailing slashes from a URL.

    Args:
        raw_url: URL as submitted by the caller

    Returns:
        Canonical URL string
    """
    parts = urlsplit(raw_url.strip())
    path = parts.path.rstrip('/')
    return urlunsplit((parts.scheme, parts.netloc, path, '', ''))


class ProfileResolver:
    """Matches URLs against an ordered set of site profiles."""

    def __init__(self, profiles: Sequence[SiteProfile]):
        self.profiles = tuple(profiles)

    def supported_formats(self) -> str:
        """Human-readable list of accepted URL formats per site."""
        return '; '.join(
            f"{profile.name}: {profile.expected_format}" for profile in self.profiles
        )

    def resolve(self, raw_url: str) -> Union[Resolution, ExtractionFailure]:
        """
        Resolve a URL to its site profile.

        Args:
            raw_url: URL as submitted by the caller

        Returns:
            Resolution for a supported URL, or an ExtractionFailure of kind
            Unsupported (unknown site) or InvalidFormat (known site, wrong path)
        """
        try:
            url = canonicalize_url(raw_url or '')
            parts = urlsplit(url)
        except ValueError:
            # e.g. unbalanced '[' in the host
            return self._unsupported(raw_url)

        if parts.scheme not in ('http', 'https') or not parts.hostname:
            return self._unsupported(raw_url)

        owners = [profile for profile in self.profiles
                  if profile.owns_domain(parts.hostname)]
        if not owners:
            return self._unsupported(raw_url)

        for profile in owners:
            if profile.matches_path(parts.path):
                logger.info(f"Resolved {url} to profile '{profile.name}'")
                return Resolution(profile=profile, url=url)

        profile = owners[0]
        logger.info(
            f"URL format error for {profile.name}: {url}",
            extra={'profile': profile.name}
        )
        return ExtractionFailure(
            kind=FailureKind.INVALID_FORMAT,
            detail=f"Format: {profile.expected_format}"
        )

    def _unsupported(self, raw_url: str) -> ExtractionFailure:
        logger.info(f"Unsupported event source: {raw_url}")
        return ExtractionFailure(
            kind=FailureKind.UNSUPPORTED,
            detail=(
                "Only the following event links are supported. "
                f"{self.supported_formats()}"
            )
        )


default_resolver = ProfileResolver([MEETUP, LUMA])


def resolve(raw_url: str) -> Union[Resolution, ExtractionFailure]:
    return default_resolver.resolve(raw_url)
