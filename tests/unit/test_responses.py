"""Tests for the responses module - GraphQL response builders."""

from typing import Any, Dict

from src.utils.responses import (
    build_author_list,
    build_author_response,
    build_page_list,
    build_page_response,
)
from tests.unit.fixtures import make_author, make_page


class TestBuildAuthorResponse:
    """Tests for build_author_response function."""

    def test_builds_complete_author_response(self) -> None:
        """Test every stored field is exposed."""
        item = make_author("a1", github_id="1001")

        assert build_author_response(item) == item

    def test_defaults_for_sparse_record(self) -> None:
        """Test records missing optional fields."""
        result = build_author_response({"id": "a1"})

        assert result == {"id": "a1", "fullName": "", "githubId": "", "createdAt": None, "updatedAt": None}

    def test_drops_unknown_fields(self) -> None:
        item: Dict[str, Any] = make_author("a1", internal="secret")

        assert "internal" not in build_author_response(item)


class TestBuildPageResponse:
    """Tests for build_page_response function."""

    def test_builds_complete_page_response(self) -> None:
        item = make_page("a1", page_id="p1")

        assert build_page_response(item) == item

    def test_empty_title_and_content(self) -> None:
        """Test pages created without title or content."""
        item = make_page("a1", page_id="p1")
        del item["title"]
        del item["content"]

        result = build_page_response(item)

        assert result["title"] == ""
        assert result["content"] == ""


class TestListBuilders:
    """Tests for the list builders."""

    def test_lists_preserve_order(self) -> None:
        pages = [make_page("a1", page_id="p2"), make_page("a1", page_id="p1")]
        authors = [make_author("a2"), make_author("a1")]

        assert [page["id"] for page in build_page_list(pages)] == ["p2", "p1"]
        assert [author["id"] for author in build_author_list(authors)] == ["a2", "a1"]
        assert build_page_list([]) == []
