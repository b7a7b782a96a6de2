"""Error types raised by Capture Hub.

Every error carries an HTTP-style status code, a machine-readable reason
and a human-readable message. The web layer renders them as a JSON
envelope; nothing else about the failure is exposed to clients.
"""

from typing import Any


class CaptureHubError(Exception):
    """Base class for all Capture Hub errors."""

    status_code: int = 500
    reason: str = "internal_error"

    def __init__(
        self,
        message: str,
        reason: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if reason is not None:
            self.reason = reason
        self.extra = extra or {}

    @property
    def is_client_error(self) -> bool:
        """True for 4xx-class errors."""
        return 400 <= self.status_code < 500

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON error envelope."""
        return {
            "success": False,
            "error": self.reason,
            "message": self.message,
            **self.extra,
        }


class MalformedPayloadError(CaptureHubError):
    """The webhook payload is missing its task envelope or input parameters."""

    status_code = 400
    reason = "invalid_payload"


class InvalidQueryError(CaptureHubError):
    """A query parameter or request body could not be interpreted."""

    status_code = 400
    reason = "invalid_query"


class NotFoundError(CaptureHubError):
    """A collection, document, category or item does not exist."""

    status_code = 404
    reason = "not_found"


class StoreError(CaptureHubError):
    """The document store failed to read or write."""

    status_code = 500
    reason = "store_failure"


class IngestionError(CaptureHubError):
    """Processing a capture failed; the batch was not committed."""

    status_code = 500
    reason = "ingestion_failure"
