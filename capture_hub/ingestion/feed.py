"""
Sports Feed Parser Module
=========================

Extracts game records from a sports-calendar RSS feed. The feed uses a
small set of namespaced tags (``ev:``, ``s:``); targeted tag patterns are
enough, no XML tree is built.
"""

from __future__ import annotations

import html
import logging
import re

from capture_hub.core.errors import MalformedPayloadError
from capture_hub.core.schema import GameLinks, GameRecord

logger = logging.getLogger(__name__)

ITEM_PATTERN = re.compile(r"<item\b[^>]*>([\s\S]*?)</item>", re.IGNORECASE)
CDATA_PATTERN = re.compile(r"<!\[CDATA\[([\s\S]*?)\]\]>")
SELF_CLOSING_VALUE_PATTERN = re.compile(r"""value=['"](.*?)['"]""")

# Result line in the description, e.g. "L 1-10 (F/5)"
SCORE_PATTERN = re.compile(r"\n([LW]\s+\d+-\d+(?:\s+\([^)]+\))?)")


def extract_tag(xml: str, tag: str) -> str:
    """
    Content of the first ``tag`` element in ``xml``.

    Self-closing elements yield their ``value`` attribute. Missing tags
    yield an empty string.
    """
    if not xml:
        return ""

    name = re.escape(tag)
    pattern = re.compile(rf"<{name}\b[^>]*?/>|<{name}\b[^>]*>([\s\S]*?)</{name}>", re.IGNORECASE)
    match = pattern.search(xml)
    if not match:
        return ""

    if match.group(1) is None:
        value = SELF_CLOSING_VALUE_PATTERN.search(match.group(0))
        return html.unescape(value.group(1)) if value else ""

    content = CDATA_PATTERN.sub(lambda m: m.group(1), match.group(1))
    return html.unescape(content).strip()


def extract_score(description: str) -> str:
    """Result line from an item description, or ""."""
    match = SCORE_PATTERN.search(description.replace("\r\n", "\n"))
    return match.group(1).strip() if match else ""


def parse_item(item_xml: str) -> GameRecord:
    """Parse one ``<item>`` block."""
    description = extract_tag(item_xml, "description")
    links_xml = extract_tag(item_xml, "s:links")

    return GameRecord(
        title=extract_tag(item_xml, "title"),
        description=description,
        link=extract_tag(item_xml, "link"),
        guid=extract_tag(item_xml, "guid"),
        score=extract_score(description),
        startDate=extract_tag(item_xml, "ev:startdate"),
        endDate=extract_tag(item_xml, "ev:enddate"),
        localStartDateTime=extract_tag(item_xml, "s:localstartdate"),
        localEndDateTime=extract_tag(item_xml, "s:localenddate"),
        teamLogo=extract_tag(item_xml, "s:teamlogo"),
        opponentLogo=extract_tag(item_xml, "s:opponentlogo"),
        location=extract_tag(item_xml, "ev:location"),
        opponent=extract_tag(item_xml, "s:opponent"),
        gameId=extract_tag(item_xml, "s:gameid"),
        gamePromoName=extract_tag(item_xml, "s:gamepromoname"),
        links=GameLinks(
            liveStats=extract_tag(links_xml, "s:livestats"),
            boxScore=extract_tag(links_xml, "s:boxscore"),
            recap=extract_tag(links_xml, "s:recap"),
        ),
    )


def parse_sports_feed(xml: str) -> list[GameRecord]:
    """
    Parse every game in a sports calendar feed.

    Args:
        xml: Raw feed document

    Returns:
        Game records in feed order; empty if the feed has no items

    Raises:
        MalformedPayloadError: If the body is not markup at all
    """
    if not isinstance(xml, str) or "<" not in xml:
        raise MalformedPayloadError("Request body is not an XML feed", reason="invalid_feed")

    blocks = ITEM_PATTERN.findall(xml)
    if not blocks:
        logger.warning("[Feed] No items found in feed")
        return []

    games = [parse_item(block) for block in blocks]
    logger.info(f"[Feed] Parsed {len(games)} game(s)")
    return games
