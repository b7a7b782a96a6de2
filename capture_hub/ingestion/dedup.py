"""
Deduplication Module
====================

Content-derived identity for normalized items. Two items with the same
dedup key are the same logical event and only the first one is kept.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from capture_hub.ingestion.domain import OLEMISS_DOMAIN

OLEMISS_KEY_FIELDS = ("Title", "EventDate", "Location", "Sports")
GENERIC_KEY_FIELDS = ("Title", "Location", "Date", "Time")


def dedup_key(item: Any) -> str:
    """
    Build the dedup key for an item.

    Uses Title plus EventDate/Location/Sports for the recognized sports
    site and Title plus Location/Date/Time otherwise; only fields with a
    value take part. Falls back to every scalar field except ``uid``.
    """
    if not isinstance(item, dict):
        return str(item)

    origin_url = item.get("originUrl")
    if isinstance(origin_url, str) and OLEMISS_DOMAIN in origin_url:
        candidates = OLEMISS_KEY_FIELDS
    else:
        candidates = GENERIC_KEY_FIELDS

    fields = [name for name in candidates if item.get(name)]
    if not fields:
        fields = [
            name
            for name, value in item.items()
            if name != "uid" and value is not None and not isinstance(value, (dict, list))
        ]

    return "|".join(f"{name}:{item[name]}" for name in fields)


def key_set(items: Iterable[Any]) -> set[str]:
    """Dedup keys of all items."""
    return {dedup_key(item) for item in items}


def deduplicate_items(items: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Drop later duplicates within one list; first occurrence wins."""
    seen: set[str] = set()
    unique = []
    for item in items:
        key = dedup_key(item)
        if key not in seen:
            seen.add(key)
            unique.append(item)
    return unique


def are_equivalent(new_items: list[Any], existing_items: list[Any]) -> bool:
    """Same cardinality and every new key already present in the existing set."""
    if len(new_items) != len(existing_items):
        return False
    existing_keys = key_set(existing_items)
    return all(dedup_key(item) in existing_keys for item in new_items)


def new_items_only(new_items: list[dict[str, Any]], existing_items: list[Any]) -> list[dict[str, Any]]:
    """Items whose dedup key is not present in the existing list."""
    if not existing_items:
        return list(new_items)
    existing_keys = key_set(existing_items)
    return [item for item in new_items if dedup_key(item) not in existing_keys]
