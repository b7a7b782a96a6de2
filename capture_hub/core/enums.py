"""Enums for capture kinds and stored collections."""

from enum import Enum


class CaptureKind(str, Enum):
    """Kind of captured content; each kind is stored in its own collection."""

    TEXTS = "captured_texts"
    SCREENSHOTS = "captured_screenshots"
    LISTS = "captured_lists"

    @property
    def payload_field(self) -> str:
        """Name of the task field carrying this capture in a webhook payload."""
        return _PAYLOAD_FIELDS[self]

    @classmethod
    def from_collection(cls, collection: str) -> "CaptureKind | None":
        """Look up a capture kind by its collection name."""
        for kind in cls:
            if kind.value == collection:
                return kind
        return None


_PAYLOAD_FIELDS: dict[CaptureKind, str] = {
    CaptureKind.TEXTS: "capturedTexts",
    CaptureKind.SCREENSHOTS: "capturedScreenshots",
    CaptureKind.LISTS: "capturedLists",
}


class SortOrder(str, Enum):
    """Sort direction for category listings."""

    ASC = "asc"
    DESC = "desc"
