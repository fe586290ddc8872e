"""Lambda resolvers for Page queries and mutations."""

from typing import Any, Dict, List, Optional

# Handle both Lambda (absolute) and unit test (relative) imports
try:  # pragma: no cover
    from utils import authors, pages  # type: ignore[import-not-found]
    from utils.appsync_types import get_argument_required, get_source, get_update_fields  # type: ignore[import-not-found]
    from utils.auth import ResolverRequest, run_mutation  # type: ignore[import-not-found]
    from utils.config import get_config  # type: ignore[import-not-found]
    from utils.errors import NotFoundError  # type: ignore[import-not-found]
    from utils.logging import get_logger  # type: ignore[import-not-found]
    from utils.responses import (  # type: ignore[import-not-found]
        AuthorResponse,
        PageResponse,
        build_author_response,
        build_page_list,
        build_page_response,
    )
except ModuleNotFoundError:  # pragma: no cover
    from ..utils import authors, pages
    from ..utils.appsync_types import get_argument_required, get_source, get_update_fields
    from ..utils.auth import ResolverRequest, run_mutation
    from ..utils.config import get_config
    from ..utils.errors import NotFoundError
    from ..utils.logging import get_logger
    from ..utils.responses import (
        AuthorResponse,
        PageResponse,
        build_author_response,
        build_page_list,
        build_page_response,
    )

logger = get_logger(__name__)


def list_pages(event: Dict[str, Any], context: Any) -> List[PageResponse]:
    """Query.pages - first PAGE_SIZE pages, unordered."""
    get_config()
    return build_page_list(pages.get())


def get_page(event: Dict[str, Any], context: Any) -> PageResponse:
    """
    Query.page(id) - single page.

    Raises:
        NotFoundError: If the page does not exist
    """
    get_config()
    page_id = get_argument_required(event, "id")
    return build_page_response(pages.get_by_id(page_id))


def list_pages_by_author(event: Dict[str, Any], context: Any) -> List[PageResponse]:
    """Query.pagesByAuthor(authorId)."""
    get_config()
    author_id = get_argument_required(event, "authorId")
    return build_page_list(pages.get_by_author_id(author_id))


def resolve_page_author(event: Dict[str, Any], context: Any) -> Optional[AuthorResponse]:
    """
    Page.author field resolver.

    Pages outlive their authors, so a missing author resolves to None
    rather than failing the whole query.
    """
    get_config()
    page = get_source(event)
    author_id = page.get("authorId")
    if not author_id:
        return None
    try:
        return build_author_response(authors.get_by_id(author_id))
    except NotFoundError:
        logger.info("Page author no longer exists", extra={"pageId": page.get("id"), "authorId": author_id})
        return None


def _create_page(request: ResolverRequest) -> PageResponse:
    args = request.arguments
    page = pages.create(
        author_id=request.session.author_id,
        title=args.get("title", ""),
        content=args.get("content", ""),
    )
    return build_page_response(page)


def _update_page(request: ResolverRequest) -> PageResponse:
    page_id = request.arguments.get("id")
    pages.get_by_id(page_id)
    fields = get_update_fields(request.arguments)
    return build_page_response(pages.update_by_id(page_id, fields))


def _remove_page(request: ResolverRequest) -> PageResponse:
    page_id = request.arguments.get("id")
    page = pages.get_by_id(page_id)
    pages.remove_by_id(page_id)
    return build_page_response(page)


def create_page(event: Dict[str, Any], context: Any) -> PageResponse:
    """
    Mutation.createPage(title, content).

    The page is owned by the session's author; authorId is never taken
    from the arguments.
    """
    return run_mutation("createPage", event, _create_page)


def update_page(event: Dict[str, Any], context: Any) -> PageResponse:
    """
    Mutation.updatePage(id, title?, content?).

    Raises:
        UnauthorizedError: Without a valid session
        NotFoundError: If the page does not exist
        ImmutableFieldError: If authorId or another fixed field is supplied
    """
    return run_mutation("updatePage", event, _update_page)


def remove_page(event: Dict[str, Any], context: Any) -> PageResponse:
    """Mutation.removePage(id) - returns the removed page."""
    return run_mutation("removePage", event, _remove_page)
