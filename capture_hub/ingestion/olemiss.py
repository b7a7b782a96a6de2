"""
Ole Miss Enricher Module
========================

Site-specific field extraction for list captures from olemisssports.com.

Each captured game card carries its raw markup in a ``DetailSrc`` field.
The patterns below are tuned to that site's game-card markup; every
extraction step is independent and best-effort, so a missing or odd
fragment only means the corresponding field is left out.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any

from capture_hub.ingestion.dates import parse_event_date

logger = logging.getLogger(__name__)

# DetailSrc must contain this marker to be treated as a game card
GAME_CARD_MARKER = "s-game-card-standard__header"

GOLF_SPORTS = frozenset({"WGOLF", "MGOLF"})

LOGO_SIZE = 200

_MONTH_ALT = r"(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)"

SCORE_PATTERN = re.compile(
    r'data-test-id="s-game-card-standard__header-game-team-score">([^<]+)</span>'
)
GOLF_SCORE_TITLE_PATTERN = re.compile(
    r'title="([^"]+)"[^>]*class="s-game-card__postscore-info"[^>]*>([^<]+)</span>'
)
GOLF_SCORE_TEXT_PATTERN = re.compile(r'class="s-game-card__postscore-info"[^>]*>([^<]+)</span>')
DATE_RANGE_PATTERN = re.compile(
    r'data-test-id="s-game-card-standard__header-game-date"[^>]*>'
    r"([^<]*?" + _MONTH_ALT + r"[^-]*?-[^<]*?" + _MONTH_ALT + r"[^<]*?)</p>"
)
HEADER_DATE_PATTERN = re.compile(
    r'data-test-id="s-game-card-standard__header-game-date"[^>]*>([\s\S]*?)</p>'
)
DATE_DETAILS_PATTERN = re.compile(
    r'data-test-id="s-game-card-standard__header-game-date-details"[^>]*><span[^>]*>([^<]+)</span>'
)
DAY_OF_WEEK_PATTERN = re.compile(
    r'<span[^>]*class="s-text-paragraph text-theme-muted ml-1"[^>]*>\(([^)]+)\)</span>'
)
BARE_DAY_OF_WEEK_PATTERN = re.compile(r"\((Mon|Tue|Wed|Thu|Fri|Sat|Sun)\)")
TIME_PATTERN = re.compile(
    r'aria-label="Event Time"[^>]*>[\s\S]*?'
    r"(?:(\d{1,2}(?::\d{2})?\s*(?:[ap]\.m\.|[AP]M))|All Day)</span>"
)
TAG_PATTERN = re.compile(r"<[^>]*>")
LOGO_WIDTH_PATTERN = re.compile(r"width=\d+")
LOGO_HEIGHT_PATTERN = re.compile(r"height=\d+")


@dataclass
class GameDetails:
    """Fields recovered from one game card."""

    date: str | None = None
    day_of_week: str | None = None
    time: str | None = None

    @property
    def event_date(self) -> str | None:
        """Composite display string: date, then day-of-week and time when known."""
        if not self.date:
            return None
        if self.day_of_week and self.time:
            return f"{self.date} ({self.day_of_week}) / {self.time}"
        if self.day_of_week:
            return f"{self.date} ({self.day_of_week})"
        if self.time:
            return f"{self.date} / {self.time}"
        return self.date


def clean_html(fragment: str) -> str:
    """Strip tags and collapse whitespace."""
    return re.sub(r"\s+", " ", TAG_PATTERN.sub(" ", fragment)).strip()


def extract_header_date(html: str | None) -> str | None:
    """Text of the header date element, e.g. "Jun 11 (Wed) - Jun 13 (Fri)"."""
    if not html:
        return None
    match = HEADER_DATE_PATTERN.search(html)
    if not match:
        return None
    return clean_html(match.group(1)) or None


def extract_game_details(html: str | None) -> GameDetails:
    """
    Pull date, day-of-week and time out of a game card.

    The date-details element wins over a date range found in the header.
    """
    details = GameDetails()
    if not html:
        return details

    range_match = DATE_RANGE_PATTERN.search(html)
    if range_match:
        details.date = clean_html(range_match.group(1)) or None

    details_match = DATE_DETAILS_PATTERN.search(html)
    if details_match:
        details.date = details_match.group(1).strip() or details.date

    dow_match = DAY_OF_WEEK_PATTERN.search(html) or BARE_DAY_OF_WEEK_PATTERN.search(html)
    if dow_match:
        details.day_of_week = dow_match.group(1).strip()

    time_match = TIME_PATTERN.search(html)
    if time_match:
        details.time = time_match.group(1).strip() if time_match.group(1) else "All Day"

    return details


def extract_score(html: str | None, sport: str | None = None) -> str | None:
    """
    Extract the result shown on a game card.

    Golf cards show a post-score (title attribute first, element text
    second); every other sport uses the team-score element.
    """
    if not html:
        return None

    if sport in GOLF_SPORTS:
        match = GOLF_SCORE_TITLE_PATTERN.search(html)
        if match and match.group(1).strip():
            return match.group(1).strip()
        match = GOLF_SCORE_TEXT_PATTERN.search(html)
        if match and match.group(1).strip():
            return match.group(1).strip()
        return None

    match = SCORE_PATTERN.search(html)
    if match and match.group(1).strip():
        return match.group(1).strip()
    return None


def transform_logo_url(logo_url: Any) -> Any:
    """Resize image-cropping service URLs to 200x200."""
    if not isinstance(logo_url, str) or "sidearmdev.com/crop" not in logo_url:
        return logo_url
    if "width=" not in logo_url and "height=" not in logo_url:
        return logo_url
    resized = LOGO_WIDTH_PATTERN.sub(f"width={LOGO_SIZE}", logo_url)
    return LOGO_HEIGHT_PATTERN.sub(f"height={LOGO_SIZE}", resized)


def date_fields(raw_date: str) -> dict[str, str]:
    """
    Resolve a raw date string to ``Date`` and, for ranges, ``EventEndDate``.

    Unparseable strings are kept verbatim in ``Date``.
    """
    parsed = parse_event_date(raw_date)
    if parsed is None:
        logger.warning(f"[OleMiss] Could not parse event date: {raw_date!r}")
        return {"Date": raw_date}

    fields = {"Date": parsed.start_date}
    if parsed.is_range:
        fields["EventEndDate"] = parsed.end_date
    return fields


def has_game_card(item: dict[str, Any]) -> bool:
    """Check whether an item carries game-card markup in ``DetailSrc``."""
    detail_src = item.get("DetailSrc")
    return isinstance(detail_src, str) and GAME_CARD_MARKER in detail_src


def enrich_item(item: dict[str, Any]) -> dict[str, Any]:
    """
    Compute site-specific fields for one scraped item.

    Args:
        item: Cleaned raw item (must carry ``DetailSrc`` markup)

    Returns:
        Fields to overlay on the normalized item; empty if the item has no
        game card.
    """
    if not has_game_card(item):
        return {}

    html = item["DetailSrc"]
    enriched: dict[str, Any] = {}

    details = extract_game_details(html)
    date_source = extract_header_date(html) or details.date
    if date_source:
        enriched.update(date_fields(date_source))
    if details.event_date:
        enriched["EventDate"] = details.event_date
    if details.time:
        enriched["Time"] = details.time

    score = extract_score(html, item.get("Sports"))
    if score:
        enriched["Score"] = score

    if item.get("Logo"):
        enriched["Logo"] = transform_logo_url(item["Logo"])

    return enriched
