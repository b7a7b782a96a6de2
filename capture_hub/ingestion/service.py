"""
Ingestion Service Module
========================

Entry point for one webhook delivery: validates the payload, cleans each
capture kind against the stored document for the same origin, merges,
and commits every write as one atomic batch.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from pydantic import ValidationError

from capture_hub.core.enums import CaptureKind
from capture_hub.core.errors import (
    CaptureHubError,
    IngestionError,
    MalformedPayloadError,
)
from capture_hub.core.schema import IngestionMeta, IngestionResult, WebhookPayload
from capture_hub.ingestion.cleaner import CaptureCleaner
from capture_hub.ingestion.domain import extract_domain_identifier
from capture_hub.ingestion.merge import merge_document
from capture_hub.ingestion.normalizer import ItemNormalizer
from capture_hub.ingestion.storage import DocumentStore, DocumentWrite

logger = logging.getLogger(__name__)


def _utc_timestamp() -> str:
    """ISO 8601 UTC timestamp with millisecond precision."""
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_payload(payload: Any) -> WebhookPayload:
    """
    Validate a raw webhook body.

    Raises:
        MalformedPayloadError: With reason ``missing_task``,
            ``missing_input_parameters`` or ``invalid_payload``
    """
    if not isinstance(payload, dict) or payload.get("task") is None:
        raise MalformedPayloadError("Invalid webhook data structure", reason="missing_task")

    task = payload["task"]
    if not isinstance(task, dict):
        raise MalformedPayloadError("Invalid webhook data structure", reason="missing_task")
    if not isinstance(task.get("inputParameters"), dict):
        raise MalformedPayloadError(
            "Webhook task has no input parameters",
            reason="missing_input_parameters",
        )

    try:
        return WebhookPayload.model_validate(payload)
    except ValidationError as e:
        fields = sorted({".".join(str(part) for part in error["loc"]) for error in e.errors()})
        raise MalformedPayloadError(
            "Webhook payload has invalid capture sections",
            reason="invalid_payload",
            extra={"fields": fields},
        ) from e


class IngestionService:
    """
    Processes webhook deliveries into the document store.

    Holds no per-request state; one instance can serve concurrent
    deliveries.
    """

    def __init__(self, store: DocumentStore, normalizer: ItemNormalizer | None = None):
        """
        Initialize the service.

        Args:
            store: Document store to read from and commit to
            normalizer: Item normalizer (a default one if omitted)
        """
        self.store = store
        self.normalizer = normalizer or ItemNormalizer()

    async def process_webhook(self, payload: Any) -> IngestionResult:
        """
        Ingest one webhook delivery.

        Args:
            payload: Decoded JSON body ``{"task": {...}}``

        Returns:
            Success envelope naming the collections written

        Raises:
            MalformedPayloadError: Before any store access, for a bad payload
            StoreError: If reading or committing failed (nothing committed)
            IngestionError: If processing a capture failed (nothing committed)
        """
        webhook = parse_payload(payload)
        task = webhook.task

        origin_url = task.origin_url
        domain_id = extract_domain_identifier(origin_url)
        logger.info(f"[Ingestion] Delivery {task.id or '-'} from {origin_url} (document '{domain_id}')")

        cleaner = CaptureCleaner(origin_url, domain_id, self.normalizer)
        writes: list[DocumentWrite] = []

        for kind in CaptureKind:
            capture = getattr(task, kind.payload_field)
            if not capture:
                continue

            try:
                existing = await self.store.get_document(kind.value, domain_id)
                existing_data = existing.get("data") if existing else None
                cleaned = cleaner.clean_object(capture, existing_data if isinstance(existing_data, dict) else None)
                body = merge_document(existing, cleaned)
            except CaptureHubError:
                raise
            except Exception as e:
                logger.exception(f"[Ingestion] Failed to process {kind.value} for '{domain_id}'")
                raise IngestionError(f"Failed to process {kind.value}") from e

            writes.append(DocumentWrite(kind.value, domain_id, body))

        await self.store.batch_write(writes)

        collections = [write.collection for write in writes]
        logger.info(f"[Ingestion] Committed {len(writes)} document(s) for '{domain_id}': {collections}")

        return IngestionResult(
            meta=IngestionMeta(processedAt=_utc_timestamp(), collections=collections),
        )
