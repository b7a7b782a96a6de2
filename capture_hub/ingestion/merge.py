"""
Document Merge Module
=====================

Folds a cleaned capture into the stored document for the same origin.
"""

from __future__ import annotations

import copy
import logging
from typing import Any

logger = logging.getLogger(__name__)


def merge_document(existing: dict[str, Any] | None, cleaned: dict[str, Any]) -> dict[str, Any]:
    """
    Produce the new document body.

    Lists in ``cleaned`` are append-only deltas (see ``cleaner``) and are
    concatenated onto the stored lists; nested objects are merged key by
    key; every other value replaces the stored one.

    Args:
        existing: Stored document, or None if there is none yet
        cleaned: Output of ``CaptureCleaner.clean`` for the whole capture

    Returns:
        Document of the form ``{"data": {...}}`` plus any other stored
        top-level fields
    """
    if existing is None:
        return {"data": copy.deepcopy(cleaned)}

    merged = copy.deepcopy(existing)
    if not isinstance(merged.get("data"), dict):
        merged["data"] = {}

    merge_fields(merged["data"], cleaned)
    return merged


def merge_fields(target: dict[str, Any], updates: dict[str, Any]) -> None:
    """Merge ``updates`` into ``target`` in place."""
    for key, new_value in updates.items():
        current = target.get(key)

        if isinstance(current, list) and isinstance(new_value, list):
            target[key] = current + copy.deepcopy(new_value)
            if new_value:
                logger.info(f"[Merge] Appended {len(new_value)} item(s) to '{key}' (now {len(target[key])})")
        elif isinstance(current, dict) and isinstance(new_value, dict):
            merge_fields(current, new_value)
        else:
            target[key] = copy.deepcopy(new_value)
