"""Pydantic v2 models for webhook payloads and API bodies."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# ============================================================================
# Webhook Payloads
# ============================================================================


class TaskData(BaseModel):
    """The task envelope of a scraping-service webhook delivery."""

    model_config = ConfigDict(extra="allow")

    id: str | None = None
    inputParameters: dict[str, Any]
    capturedTexts: dict[str, Any] | None = None
    capturedScreenshots: dict[str, Any] | None = None
    capturedLists: dict[str, Any] | None = None

    @property
    def origin_url(self) -> str:
        """The first input parameter value, or "unknown"."""
        for value in self.inputParameters.values():
            if isinstance(value, str) and value:
                return value
            break
        return "unknown"


class WebhookPayload(BaseModel):
    """Top-level webhook body: ``{"task": {...}}``."""

    model_config = ConfigDict(extra="allow")

    task: TaskData


class IngestionMeta(BaseModel):
    """Metadata returned after a successful ingestion."""

    processedAt: str
    collections: list[str] = Field(default_factory=list)


class IngestionResult(BaseModel):
    """Success envelope returned to the webhook sender."""

    success: bool = True
    meta: IngestionMeta


# ============================================================================
# Sports Feed
# ============================================================================


class GameLinks(BaseModel):
    """Related links attached to a game in the sports feed."""

    liveStats: str = ""
    boxScore: str = ""
    recap: str = ""


class GameRecord(BaseModel):
    """One game parsed from the sports calendar feed."""

    title: str = ""
    description: str = ""
    link: str = ""
    guid: str = ""
    score: str = ""
    startDate: str = ""
    endDate: str = ""
    localStartDateTime: str = ""
    localEndDateTime: str = ""
    teamLogo: str = ""
    opponentLogo: str = ""
    location: str = ""
    opponent: str = ""
    gameId: str = ""
    gamePromoName: str = ""
    links: GameLinks = Field(default_factory=GameLinks)


# ============================================================================
# Query API
# ============================================================================


class ImageUpdateRequest(BaseModel):
    """Body for attaching an image URL to a stored item."""

    uid: str = Field(min_length=1)
    imageURL: str = Field(min_length=1)


class ImageClearRequest(BaseModel):
    """Body for removing one or all image URLs from a stored item."""

    uid: str = Field(min_length=1)
    imageURL: str | None = None


class CategoryPage(BaseModel):
    """A filtered, paginated slice of one category."""

    data: list[dict[str, Any]]
    count: int
    totalAvailable: int
    page: int
    totalPages: int


class ItemLocation(BaseModel):
    """Where an item was found inside a collection."""

    documentId: str
    category: str
    item: dict[str, Any]
