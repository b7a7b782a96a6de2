"""Routes for browsing and annotating stored capture documents."""

from fastapi import APIRouter

from capture_hub.core.enums import SortOrder
from capture_hub.core.schema import CategoryPage, ImageClearRequest, ImageUpdateRequest
from capture_hub.web.dependencies import DocumentServiceDep

router = APIRouter(prefix="/api/documents", tags=["documents"])


@router.put("/{collection}/update-image")
async def update_image(collection: str, body: ImageUpdateRequest, service: DocumentServiceDep) -> dict:
    """Attach an image URL to the item with the given uid."""
    location = service.update_image(collection, body.uid, body.imageURL)
    return {"success": True, **location.model_dump()}


@router.put("/{collection}/clear-image")
async def clear_image(collection: str, body: ImageClearRequest, service: DocumentServiceDep) -> dict:
    """Remove one image URL (or all of them) from the item with the given uid."""
    location = service.clear_image(collection, body.uid, body.imageURL)
    return {"success": True, **location.model_dump()}


@router.get("/{collection}")
async def list_documents(collection: str, service: DocumentServiceDep) -> list[str]:
    """List document ids in a collection."""
    return service.list_documents(collection)


@router.get("/{collection}/{document_id}")
async def get_document(collection: str, document_id: str, service: DocumentServiceDep) -> dict:
    """Get a stored document."""
    return service.get_document(collection, document_id)


@router.delete("/{collection}/{document_id}")
async def delete_document(collection: str, document_id: str, service: DocumentServiceDep) -> dict:
    """Delete a stored document."""
    return service.delete_document(collection, document_id)


@router.get("/{collection}/{document_id}/categories")
async def list_categories(collection: str, document_id: str, service: DocumentServiceDep) -> dict:
    """List the item categories in a document."""
    return service.list_categories(collection, document_id)


@router.get("/{collection}/{document_id}/categories/{category}", response_model=CategoryPage)
async def get_category(
    collection: str,
    document_id: str,
    category: str,
    service: DocumentServiceDep,
    start_date: str | None = None,
    end_date: str | None = None,
    page: int = 1,
    per_page: int | None = None,
    count: int | None = None,
    order: SortOrder = SortOrder.DESC,
) -> CategoryPage:
    """
    Items of one category, filtered by date and paginated.

    Args:
        category: Category name (case-insensitive)
        start_date: Inclusive lower bound, YYYY-MM-DD
        end_date: Inclusive upper bound, YYYY-MM-DD
        page: 1-based page number
        per_page: Page size (all items when omitted)
        count: Hard cap on the number of items considered
        order: "asc" or "desc" by Date
    """
    return service.get_category_page(
        collection,
        document_id,
        category,
        start_date=start_date,
        end_date=end_date,
        page=page,
        per_page=per_page,
        count=count,
        order=order,
    )
