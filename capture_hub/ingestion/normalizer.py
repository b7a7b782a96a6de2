"""
Item Normalizer Module
======================

Converts one raw captured object into the canonical item schema used by
every stored list.
"""

from __future__ import annotations

import re
import time
from collections.abc import Callable
from typing import Any

from capture_hub.ingestion import olemiss
from capture_hub.ingestion.dates import is_iso_date, normalize_date
from capture_hub.ingestion.domain import is_recognized_site


def _now_millis() -> int:
    return time.time_ns() // 1_000_000


class ItemNormalizer:
    """
    Normalizes scraped list items.

    Every item gets:
    - a ``uid`` derived from its list name, creation time and index
    - ``Title`` (the owning list name) and ``originUrl``
    - only the allowed content fields, extended for the recognized site
    - site-specific enrichment for game cards from the recognized site
    - a ``Date`` in ``YYYY-MM-DD`` form where it can be parsed
    - an ``ImageUrl`` list (possibly empty)
    """

    BASE_FIELDS: tuple[str, ...] = (
        "Date",
        "ImageUrl",
        "Location",
        "Logo",
        "Time",
        "Description",
        "Title",
        "uid",
    )

    SITE_FIELDS: tuple[str, ...] = (
        "Score",
        "EventDate",
        "EventEndDate",
        "Sports",
        "DetailSrc",
    )

    def __init__(self, clock: Callable[[], int] | None = None) -> None:
        """
        Initialize the normalizer.

        Args:
            clock: Returns the current time in milliseconds (for uids)
        """
        self._clock = clock or _now_millis

    def allowed_fields(self, domain_id: str, origin_url: str) -> tuple[str, ...]:
        """Fields copied from the raw object for a given source."""
        if is_recognized_site(domain_id, origin_url):
            return self.BASE_FIELDS + self.SITE_FIELDS
        return self.BASE_FIELDS

    def make_uid(self, list_name: str, index: int) -> str:
        """Build ``<list-name>-<millis>-<index>``."""
        slug = re.sub(r"\s+", "-", list_name.lower())
        return f"{slug}-{self._clock()}-{index}"

    def normalize_item(
        self,
        item: Any,
        list_name: str,
        index: int,
        origin_url: str,
        domain_id: str,
    ) -> dict[str, Any]:
        """
        Normalize one cleaned raw object.

        Args:
            item: Raw object with nested fields already cleaned
            list_name: Name of the list the object was captured under
            index: Position of the object within its list
            origin_url: URL the capture came from
            domain_id: Domain identifier of the origin URL

        Returns:
            Canonical item dictionary
        """
        raw = item if isinstance(item, dict) else {}

        normalized: dict[str, Any] = {
            "uid": self.make_uid(list_name, index),
            "Title": list_name,
            "originUrl": origin_url,
        }

        allowed = self.allowed_fields(domain_id, origin_url)
        for key, value in raw.items():
            if key not in allowed:
                continue
            if key == "uid" and not (isinstance(value, str) and value):
                continue
            normalized[key] = value

        if is_recognized_site(domain_id, origin_url):
            normalized.update(olemiss.enrich_item(raw))

        date_value = normalized.get("Date")
        if isinstance(date_value, str) and date_value and not is_iso_date(date_value):
            normalized["Date"] = normalize_date(date_value)

        normalized["ImageUrl"] = self.coerce_image_urls(normalized.get("ImageUrl"))
        return normalized

    @staticmethod
    def coerce_image_urls(value: Any) -> list[str]:
        """Always return a list of non-empty URL strings."""
        if isinstance(value, list):
            return [url for url in value if isinstance(url, str) and url]
        if isinstance(value, str) and value.strip():
            return [value.strip()]
        return []
