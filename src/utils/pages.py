"""
Page records.

CRUD over the pages table. A page's author is fixed at creation; this
module trusts the caller to have checked that the author exists.
"""

import uuid
from typing import Any, Dict, List, Optional

try:  # pragma: no cover
    from utils.dynamodb import RecordStore, tables  # type: ignore[import-not-found]
    from utils.errors import NotFoundError, ValidationError  # type: ignore[import-not-found]
    from utils.logging import get_logger  # type: ignore[import-not-found]
    from utils.updates import RecordSchema, build_update, utc_now  # type: ignore[import-not-found]
except ModuleNotFoundError:  # pragma: no cover
    from .dynamodb import RecordStore, tables
    from .errors import NotFoundError, ValidationError
    from .logging import get_logger
    from .updates import RecordSchema, build_update, utc_now

logger = get_logger(__name__)

PAGE_SIZE = 50

AUTHOR_ID_INDEX = "AuthorIdIndex"

PAGE_SCHEMA = RecordSchema(name="Page", mutable_fields=frozenset({"title", "content"}))


def _store() -> RecordStore:
    return RecordStore(tables.pages)


def get(limit: int = PAGE_SIZE) -> List[Dict[str, Any]]:
    """List up to ``limit`` pages."""
    return _store().scan(limit)


def get_by_id(page_id: str) -> Dict[str, Any]:
    """
    Get page by id.

    Raises:
        ValidationError: If page_id is blank
        NotFoundError: If no page has this id
    """
    if not page_id:
        raise ValidationError("id is required")

    page = _store().get(page_id)
    if page is None:
        raise NotFoundError(f"Page not found with id {page_id}", {"id": page_id})
    return page


def get_by_author_id(author_id: str) -> List[Dict[str, Any]]:
    """Pages owned by an author, via the AuthorIdIndex GSI."""
    if not author_id:
        raise ValidationError("authorId is required")

    return _store().query_by_index(AUTHOR_ID_INDEX, "authorId", author_id)


def create(
    author_id: Optional[str],
    title: str = "",
    content: str = "",
    page_id: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Create a page.

    Args:
        author_id: Owning author id (required)
        title: Page title
        content: Page body
        page_id: Explicit id (generated when omitted)

    Returns:
        The stored page, with createdAt == updatedAt

    Raises:
        ValidationError: If author_id is absent
        AlreadyExistsError: If page_id is taken
    """
    if not author_id:
        raise ValidationError("authorId is required")

    now = utc_now()
    page = {
        "id": page_id or str(uuid.uuid4()),
        "createdAt": now,
        "updatedAt": now,
        "authorId": author_id,
        "title": title or "",
        "content": content or "",
    }
    _store().put(page, if_absent=True)

    logger.info("Page created", extra={"pageId": page["id"], "authorId": author_id})
    return page


def update_by_id(page_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
    """
    Partially update a page; only ``title`` and ``content`` may change.

    Raises:
        ImmutableFieldError: If fields touches id, authorId or unknown fields
        NotFoundError: If the page does not exist
    """
    if not page_id:
        raise ValidationError("id is required")

    instruction = build_update(PAGE_SCHEMA, page_id, fields)
    page = _store().update(instruction)

    logger.info(
        "Page updated",
        extra={"pageId": page_id, "fields": sorted(instruction.assigned_fields)},
    )
    return page


def remove_by_id(page_id: str) -> None:
    """Delete a page."""
    if not page_id:
        raise ValidationError("id is required")

    _store().delete(page_id)
    logger.info("Page removed", extra={"pageId": page_id})
