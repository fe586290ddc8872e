"""
GraphQL response builders for Lambda resolvers.

Map stored records to the shapes the GraphQL schema exposes. Nested
relations (Page.author, Author.pages) are resolved by their own field
resolvers, not here.
"""

from typing import Any, Dict, List, Optional, TypedDict


class AuthorResponse(TypedDict, total=False):
    """GraphQL Author response type."""

    id: str
    fullName: str
    githubId: str
    createdAt: Optional[str]
    updatedAt: Optional[str]


class PageResponse(TypedDict, total=False):
    """GraphQL Page response type."""

    id: str
    title: str
    content: str
    authorId: str
    createdAt: str
    updatedAt: str


class LoginResponse(TypedDict):
    """Result of a completed GitHub login."""

    token: str
    author: AuthorResponse


def build_author_response(item: Dict[str, Any]) -> AuthorResponse:
    """Build Author from a stored record."""
    return {
        "id": item["id"],
        "fullName": item.get("fullName", ""),
        "githubId": item.get("githubId", ""),
        "createdAt": item.get("createdAt"),
        "updatedAt": item.get("updatedAt"),
    }


def build_page_response(item: Dict[str, Any]) -> PageResponse:
    """Build Page from a stored record."""
    return {
        "id": item["id"],
        "title": item.get("title", ""),
        "content": item.get("content", ""),
        "authorId": item["authorId"],
        "createdAt": item["createdAt"],
        "updatedAt": item["updatedAt"],
    }


def build_author_list(items: List[Dict[str, Any]]) -> List[AuthorResponse]:
    return [build_author_response(item) for item in items]


def build_page_list(items: List[Dict[str, Any]]) -> List[PageResponse]:
    return [build_page_response(item) for item in items]
