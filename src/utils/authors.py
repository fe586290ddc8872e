"""
Author records.

CRUD over the authors table. Removing an author leaves its pages in place.
"""

import uuid
from typing import Any, Dict, List, Optional

try:  # pragma: no cover
    from utils.dynamodb import RecordStore, tables  # type: ignore[import-not-found]
    from utils.errors import AlreadyExistsError, NotFoundError, ValidationError  # type: ignore[import-not-found]
    from utils.logging import get_logger  # type: ignore[import-not-found]
    from utils.updates import RecordSchema, build_update, utc_now  # type: ignore[import-not-found]
except ModuleNotFoundError:  # pragma: no cover
    from .dynamodb import RecordStore, tables
    from .errors import AlreadyExistsError, NotFoundError, ValidationError
    from .logging import get_logger
    from .updates import RecordSchema, build_update, utc_now

logger = get_logger(__name__)

# Bounded scan size for listings
PAGE_SIZE = 50

GITHUB_ID_INDEX = "GithubIdIndex"

AUTHOR_SCHEMA = RecordSchema(name="Author", mutable_fields=frozenset({"fullName"}))


def _store() -> RecordStore:
    return RecordStore(tables.authors)


def get(limit: int = PAGE_SIZE) -> List[Dict[str, Any]]:
    """List up to ``limit`` authors."""
    return _store().scan(limit)


def get_by_id(author_id: str) -> Dict[str, Any]:
    """
    Get author by id.

    Raises:
        ValidationError: If author_id is blank
        NotFoundError: If no author has this id
    """
    if not author_id:
        raise ValidationError("id is required")

    author = _store().get(author_id)
    if author is None:
        raise NotFoundError(f"Author not found with id {author_id}", {"id": author_id})
    return author


def find_by_github_id(github_id: str) -> Optional[Dict[str, Any]]:
    """Author linked to a GitHub account, or None."""
    if not github_id:
        raise ValidationError("githubId is required")

    items = _store().query_by_index(GITHUB_ID_INDEX, "githubId", github_id)
    return items[0] if items else None


def create(
    full_name: str,
    github_id: str,
    author_id: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Create an author.

    Args:
        full_name: Display name
        github_id: GitHub account id, stored as a string
        author_id: Explicit id (generated when omitted)

    Returns:
        The stored author

    Raises:
        ValidationError: If github_id is absent
        AlreadyExistsError: If the id is taken or the GitHub account is
            already linked to an author
    """
    if not github_id:
        raise ValidationError("githubId is required")

    github_id = str(github_id)
    if find_by_github_id(github_id) is not None:
        raise AlreadyExistsError(
            f"GitHub account {github_id} is already linked to an author", {"githubId": github_id}
        )

    now = utc_now()
    author = {
        "id": author_id or str(uuid.uuid4()),
        "fullName": full_name or "",
        "githubId": github_id,
        "createdAt": now,
        "updatedAt": now,
    }
    _store().put(author, if_absent=True)

    logger.info("Author created", extra={"authorId": author["id"]})
    return author


def update_by_id(author_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
    """
    Partially update an author; only ``fullName`` may change.

    Raises:
        ImmutableFieldError: If fields touches id, githubId or unknown fields
        NotFoundError: If the author does not exist
    """
    if not author_id:
        raise ValidationError("id is required")

    instruction = build_update(AUTHOR_SCHEMA, author_id, fields)
    author = _store().update(instruction)

    logger.info(
        "Author updated",
        extra={"authorId": author_id, "fields": sorted(instruction.assigned_fields)},
    )
    return author


def remove_by_id(author_id: str) -> None:
    """Delete an author. Pages owned by it are not touched."""
    if not author_id:
        raise ValidationError("id is required")

    _store().delete(author_id)
    logger.info("Author removed", extra={"authorId": author_id})
