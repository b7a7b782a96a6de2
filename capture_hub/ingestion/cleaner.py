"""
Capture Cleaner Module
======================

Walks a captured JSON section, drops scraper bookkeeping fields at every
level, and routes each named list through normalization and
deduplication against the stored document.

List output contract: every array, named item list or plain values, comes
back as the elements to *append* to the stored list at the same path
(possibly empty), never as the full stored list. ``merge.merge_document``
relies on this.
"""

from __future__ import annotations

import logging
from typing import Any

from capture_hub.ingestion.dedup import are_equivalent, deduplicate_items, new_items_only
from capture_hub.ingestion.domain import extract_domain_identifier
from capture_hub.ingestion.normalizer import ItemNormalizer

logger = logging.getLogger(__name__)


def is_dropped_key(key: str) -> bool:
    """Scraper artifacts that are never domain data."""
    return key.lower() == "position" or key == "_STATUS"


def is_named_list(value: Any) -> bool:
    """A list of objects (or an empty list) is treated as a named item list."""
    return isinstance(value, list) and all(isinstance(element, dict) for element in value)


class CaptureCleaner:
    """Cleans one capture section for one origin."""

    def __init__(
        self,
        origin_url: str = "unknown",
        domain_id: str | None = None,
        normalizer: ItemNormalizer | None = None,
    ) -> None:
        """
        Initialize the cleaner.

        Args:
            origin_url: URL the capture came from
            domain_id: Domain identifier (derived from origin_url if omitted)
            normalizer: Item normalizer (a default one if omitted)
        """
        self.origin_url = origin_url
        self.domain_id = domain_id if domain_id is not None else extract_domain_identifier(origin_url)
        self.normalizer = normalizer or ItemNormalizer()

    def clean(self, value: Any, existing: Any = None) -> Any:
        """
        Recursively clean any JSON value.

        Args:
            value: Value to clean
            existing: Stored value at the same path, if any

        Returns:
            Cleaned value
        """
        if isinstance(value, dict):
            return self.clean_object(value, existing if isinstance(existing, dict) else None)
        if isinstance(value, list):
            return [self.clean(element) for element in value]
        return value

    def clean_object(self, data: dict[str, Any], existing: dict[str, Any] | None = None) -> dict[str, Any]:
        """Clean every field of an object, routing named lists to ``process_list``."""
        cleaned: dict[str, Any] = {}

        for key, value in data.items():
            if is_dropped_key(key):
                continue

            existing_value = existing.get(key) if existing else None

            stored = existing_value if isinstance(existing_value, list) else None
            if is_named_list(value):
                cleaned[key] = self.process_list(key, value, stored)
            elif isinstance(value, list):
                cleaned[key] = self.process_values(key, value, stored)
            else:
                cleaned[key] = self.clean(value, existing_value)

        return cleaned

    def process_list(
        self,
        list_name: str,
        raw_items: list[dict[str, Any]],
        existing_items: list[Any] | None = None,
    ) -> list[dict[str, Any]]:
        """
        Normalize and deduplicate one named list.

        Args:
            list_name: Key the list was captured under
            raw_items: Raw captured objects
            existing_items: Stored list under the same key, if any

        Returns:
            The whole deduplicated list when nothing is stored yet,
            otherwise only the items not already stored
        """
        items = [
            self.normalizer.normalize_item(
                self.clean(raw),
                list_name,
                index,
                self.origin_url,
                self.domain_id,
            )
            for index, raw in enumerate(raw_items)
        ]

        titled = [item for item in items if item.get("Title") is not None]
        if len(titled) < len(items):
            logger.info(f"[Cleaner] Skipped {len(items) - len(titled)} item(s) without a Title in '{list_name}'")

        unique = deduplicate_items(titled)

        if existing_items is None:
            return unique

        if not unique or are_equivalent(unique, existing_items):
            logger.debug(f"[Cleaner] '{list_name}' unchanged ({len(existing_items)} stored)")
            return []

        delta = new_items_only(unique, existing_items)
        logger.info(f"[Cleaner] '{list_name}': {len(delta)} new of {len(unique)} captured")
        return delta

    def process_values(self, key: str, values: list[Any], existing_values: list[Any] | None = None) -> list[Any]:
        """
        Clean a plain array (scalars or mixed values).

        Returns the cleaned array when nothing is stored under ``key``,
        otherwise only the elements not already stored there.
        """
        cleaned = [self.clean(element) for element in values]
        if existing_values is None:
            return cleaned

        delta = [element for element in cleaned if element not in existing_values]
        if delta:
            logger.info(f"[Cleaner] '{key}': {len(delta)} new value(s) of {len(cleaned)} captured")
        return delta
