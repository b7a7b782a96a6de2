"""Webhook routes.

Each webhook id maps to one handler:
- ``browseai``: scraping-service deliveries, run through the ingestion pipeline
- ``xmlparser``: sports calendar feeds, parsed into game records
"""

import json
import logging
from typing import Any

from fastapi import APIRouter, Request

from capture_hub.core.errors import MalformedPayloadError, NotFoundError
from capture_hub.ingestion.feed import parse_sports_feed
from capture_hub.web.dependencies import IngestionServiceDep

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/webhooks", tags=["webhooks"])


async def _read_json(request: Request) -> Any:
    body = await request.body()
    try:
        return json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise MalformedPayloadError("Request body is not valid JSON", reason="invalid_payload") from e


async def _read_feed(request: Request) -> str:
    """Raw XML body, or the ``xml`` field of a JSON body."""
    content_type = request.headers.get("content-type", "")
    if "json" in content_type:
        body = await _read_json(request)
        xml = body.get("xml") if isinstance(body, dict) else None
        if not isinstance(xml, str):
            raise MalformedPayloadError("JSON body must carry the feed in 'xml'", reason="invalid_feed")
        return xml

    raw = await request.body()
    return raw.decode("utf-8", errors="replace")


@router.post("/{webhook_id}")
async def receive_webhook(webhook_id: str, request: Request, ingestion: IngestionServiceDep) -> dict:
    """
    Dispatch a webhook delivery by id.

    Args:
        webhook_id: Webhook id from the URL (case-insensitive)

    Returns:
        The handler's JSON result
    """
    handler = webhook_id.lower()
    logger.info(f"[Webhook:{webhook_id}] Processing request")

    if handler == "browseai":
        payload = await _read_json(request)
        result = await ingestion.process_webhook(payload)
        return result.model_dump()

    if handler == "xmlparser":
        games = parse_sports_feed(await _read_feed(request))
        return {
            "success": True,
            "count": len(games),
            "data": [game.model_dump() for game in games],
        }

    raise NotFoundError(f"Unknown webhook ID: {webhook_id}", reason="unknown_webhook")
