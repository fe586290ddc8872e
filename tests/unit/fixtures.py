"""
Test data builders for resolver tests.

Factory functions for records with sensible defaults, so tests only spell
out the fields they care about.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional
from uuid import uuid4

SESSION_SECRET = "test-session-secret"
GITHUB_ORG = "pages-cms"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def make_author(
    author_id: Optional[str] = None,
    full_name: str = "Jane",
    github_id: Optional[str] = None,
    **overrides: Any,
) -> Dict[str, Any]:
    """Build an Author record."""
    now = _now()
    author = {
        "id": author_id or uuid4().hex,
        "fullName": full_name,
        "githubId": github_id or str(uuid4().int % 10**8),
        "createdAt": now,
        "updatedAt": now,
    }
    author.update(overrides)
    return author


def make_page(
    author_id: str,
    page_id: Optional[str] = None,
    title: str = "My Article",
    content: str = "My Content",
    **overrides: Any,
) -> Dict[str, Any]:
    """Build a Page record owned by author_id."""
    now = _now()
    page = {
        "id": page_id or uuid4().hex,
        "title": title,
        "content": content,
        "authorId": author_id,
        "createdAt": now,
        "updatedAt": now,
    }
    page.update(overrides)
    return page
