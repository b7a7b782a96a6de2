"""Document service for browsing and annotating stored captures.

This service provides business logic for:
- Listing and reading stored documents per collection
- Listing categories (named item lists) in a document
- Filtered, ordered and paginated category listings
- Attaching and removing image URLs on stored items
- Deleting documents
"""

import logging
import math
from datetime import UTC, date, datetime
from typing import Any

from sqlalchemy.orm import Session

from capture_hub.core.enums import CaptureKind, SortOrder
from capture_hub.core.errors import InvalidQueryError, NotFoundError
from capture_hub.core.schema import CategoryPage, ItemLocation
from capture_hub.db.repositories import DocumentRepository
from capture_hub.ingestion.dates import is_iso_date
from capture_hub.ingestion.normalizer import ItemNormalizer

logger = logging.getLogger(__name__)


def parse_query_date(value: str | None, name: str) -> date | None:
    """Parse a ``YYYY-MM-DD`` query parameter."""
    if value is None or value == "":
        return None
    if not is_iso_date(value):
        raise InvalidQueryError(f"'{name}' must be a date in YYYY-MM-DD format")
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise InvalidQueryError(f"'{name}' is not a valid date: {value}") from e


def item_date_span(item: Any) -> tuple[date, date] | None:
    """(start, end) of an item, or None if it has no ISO ``Date``."""
    if not isinstance(item, dict):
        return None
    start_value = item.get("Date")
    if not isinstance(start_value, str) or not is_iso_date(start_value):
        return None
    try:
        start = date.fromisoformat(start_value)
    except ValueError:
        return None

    end = start
    end_value = item.get("EventEndDate")
    if isinstance(end_value, str) and is_iso_date(end_value):
        try:
            end = max(start, date.fromisoformat(end_value))
        except ValueError:
            pass
    return start, end


def filter_by_dates(items: list[Any], start: date | None, end: date | None) -> list[Any]:
    """Keep items whose date span overlaps [start, end]; undated items only without a filter."""
    if start is None and end is None:
        return list(items)

    matched = []
    for item in items:
        span = item_date_span(item)
        if span is None:
            continue
        item_start, item_end = span
        if start is not None and item_end < start:
            continue
        if end is not None and item_start > end:
            continue
        matched.append(item)
    return matched


def sort_by_date(items: list[Any], order: SortOrder) -> list[Any]:
    """Order by ``Date``; undated items always come last in original order."""
    dated = [item for item in items if item_date_span(item) is not None]
    undated = [item for item in items if item_date_span(item) is None]
    dated.sort(key=lambda item: item["Date"], reverse=order == SortOrder.DESC)
    return dated + undated


class DocumentService:
    """Service for reading and annotating stored capture documents."""

    def __init__(self, session: Session):
        """
        Initialize the document service.

        Args:
            session: SQLAlchemy session
        """
        self.session = session
        self.repo = DocumentRepository(session)

    @staticmethod
    def _check_collection(collection: str) -> CaptureKind:
        kind = CaptureKind.from_collection(collection)
        if kind is None:
            raise NotFoundError(
                f"Unknown collection '{collection}'",
                extra={"availableCollections": [k.value for k in CaptureKind]},
            )
        return kind

    # =========================================================================
    # Documents
    # =========================================================================

    def list_documents(self, collection: str) -> list[str]:
        """List document ids in a collection."""
        self._check_collection(collection)
        return self.repo.list_ids(collection)

    def get_document(self, collection: str, document_id: str) -> dict[str, Any]:
        """Get a stored document or raise NotFoundError."""
        self._check_collection(collection)
        document = self.repo.get(collection, document_id)
        if document is None:
            raise NotFoundError(f"Document '{document_id}' not found in '{collection}'")
        return document

    def delete_document(self, collection: str, document_id: str) -> dict[str, Any]:
        """Delete a stored document."""
        self._check_collection(collection)
        if not self.repo.delete(collection, document_id):
            raise NotFoundError(f"Document '{document_id}' not found in '{collection}'")
        self.session.commit()
        logger.info(f"[Store] Deleted {collection}/{document_id}")
        return {"success": True, "deletedAt": datetime.now(UTC).isoformat()}

    # =========================================================================
    # Categories
    # =========================================================================

    def list_categories(self, collection: str, document_id: str) -> dict[str, Any]:
        """Names of the item lists in a document."""
        document = self.get_document(collection, document_id)
        data = document.get("data")
        if not isinstance(data, dict):
            data = {}
        categories = [key for key, value in data.items() if isinstance(value, list)]
        return {"documentId": document_id, "categories": categories}

    def resolve_category(self, collection: str, document_id: str, category: str) -> tuple[str, list[Any]]:
        """
        Find a category by name, case-insensitively.

        Returns:
            (stored category name, its items)
        """
        document = self.get_document(collection, document_id)
        data = document.get("data") if isinstance(document.get("data"), dict) else {}
        categories = [key for key, value in data.items() if isinstance(value, list)]

        wanted = category.lower()
        for name in categories:
            if name.lower() == wanted:
                return name, data[name]

        raise NotFoundError(
            f"Category '{category}' not found",
            extra={"availableCategories": categories},
        )

    def get_category_page(
        self,
        collection: str,
        document_id: str,
        category: str,
        start_date: str | None = None,
        end_date: str | None = None,
        page: int = 1,
        per_page: int | None = None,
        count: int | None = None,
        order: SortOrder = SortOrder.DESC,
    ) -> CategoryPage:
        """
        Filtered, ordered and paginated items of one category.

        Args:
            collection: Collection name
            document_id: Document id
            category: Category name (case-insensitive)
            start_date: Inclusive lower bound, ``YYYY-MM-DD``
            end_date: Inclusive upper bound, ``YYYY-MM-DD``
            page: 1-based page number
            per_page: Page size; all items on one page when omitted
            count: Hard cap on the number of items considered
            order: Sort direction by ``Date``

        Returns:
            CategoryPage
        """
        start = parse_query_date(start_date, "start_date")
        end = parse_query_date(end_date, "end_date")
        if start and end and start > end:
            raise InvalidQueryError("'start_date' must not be after 'end_date'")
        if page < 1:
            raise InvalidQueryError("'page' must be a positive number")
        if per_page is not None and per_page < 1:
            raise InvalidQueryError("'per_page' must be a positive number")
        if count is not None and count < 1:
            raise InvalidQueryError("Count parameter must be a positive number")

        _, items = self.resolve_category(collection, document_id, category)

        matched = sort_by_date(filter_by_dates(items, start, end), SortOrder(order))
        total_available = len(matched)
        if count is not None:
            matched = matched[:count]

        if per_page is None:
            total_pages = 1 if matched else 0
            data = matched if page == 1 else []
        else:
            total_pages = math.ceil(len(matched) / per_page)
            offset = (page - 1) * per_page
            data = matched[offset : offset + per_page]

        return CategoryPage(
            data=data,
            count=len(data),
            totalAvailable=total_available,
            page=page,
            totalPages=total_pages,
        )

    # =========================================================================
    # Image Annotation
    # =========================================================================

    def find_item(self, collection: str, uid: str) -> tuple[str, dict[str, Any], ItemLocation]:
        """
        Locate a stored item by uid across a collection.

        Returns:
            (document id, full document, location of the item)
        """
        self._check_collection(collection)
        for document_id, document in self.repo.list_all(collection):
            data = document.get("data")
            if not isinstance(data, dict):
                continue
            for category, items in data.items():
                if not isinstance(items, list):
                    continue
                for item in items:
                    if isinstance(item, dict) and item.get("uid") == uid:
                        return document_id, document, ItemLocation(documentId=document_id, category=category, item=item)

        raise NotFoundError(f"No item with uid '{uid}' in '{collection}'")

    def update_image(self, collection: str, uid: str, image_url: str) -> ItemLocation:
        """Attach an image URL to a stored item (no duplicates)."""
        document_id, document, location = self.find_item(collection, uid)

        images = ItemNormalizer.coerce_image_urls(location.item.get("ImageUrl"))
        if image_url not in images:
            images.append(image_url)
        self._save_images(collection, document_id, document, location, images)

        logger.info(f"[Store] Added image to {collection}/{document_id} item {uid}")
        return location

    def clear_image(self, collection: str, uid: str, image_url: str | None = None) -> ItemLocation:
        """Remove one image URL from a stored item, or all of them."""
        document_id, document, location = self.find_item(collection, uid)

        images = ItemNormalizer.coerce_image_urls(location.item.get("ImageUrl"))
        if image_url is None:
            images = []
        elif image_url in images:
            images.remove(image_url)
        else:
            raise NotFoundError(f"Item '{uid}' has no image '{image_url}'")
        self._save_images(collection, document_id, document, location, images)

        logger.info(f"[Store] Cleared image(s) on {collection}/{document_id} item {uid}")
        return location

    def _save_images(
        self,
        collection: str,
        document_id: str,
        document: dict[str, Any],
        location: ItemLocation,
        images: list[str],
    ) -> None:
        for item in document["data"][location.category]:
            if isinstance(item, dict) and item.get("uid") == location.item.get("uid"):
                item["ImageUrl"] = images
        location.item["ImageUrl"] = images

        self.repo.put(collection, document_id, document)
        self.session.commit()
