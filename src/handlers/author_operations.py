"""Lambda resolvers for Author queries and mutations."""

from typing import Any, Dict, List

# Handle both Lambda (absolute) and unit test (relative) imports
try:  # pragma: no cover
    from utils import authors, pages  # type: ignore[import-not-found]
    from utils.appsync_types import get_argument_required, get_source, get_update_fields  # type: ignore[import-not-found]
    from utils.auth import ResolverRequest, run_mutation  # type: ignore[import-not-found]
    from utils.config import get_config  # type: ignore[import-not-found]
    from utils.errors import ValidationError  # type: ignore[import-not-found]
    from utils.logging import get_logger  # type: ignore[import-not-found]
    from utils.responses import (  # type: ignore[import-not-found]
        AuthorResponse,
        PageResponse,
        build_author_list,
        build_author_response,
        build_page_list,
    )
except ModuleNotFoundError:  # pragma: no cover
    from ..utils import authors, pages
    from ..utils.appsync_types import get_argument_required, get_source, get_update_fields
    from ..utils.auth import ResolverRequest, run_mutation
    from ..utils.config import get_config
    from ..utils.errors import ValidationError
    from ..utils.logging import get_logger
    from ..utils.responses import (
        AuthorResponse,
        PageResponse,
        build_author_list,
        build_author_response,
        build_page_list,
    )

logger = get_logger(__name__)


def list_authors(event: Dict[str, Any], context: Any) -> List[AuthorResponse]:
    """Query.authors - first PAGE_SIZE authors."""
    get_config()
    return build_author_list(authors.get())


def get_author(event: Dict[str, Any], context: Any) -> AuthorResponse:
    """
    Query.author(id).

    Raises:
        NotFoundError: If the author does not exist
    """
    get_config()
    author_id = get_argument_required(event, "id")
    return build_author_response(authors.get_by_id(author_id))


def resolve_author_pages(event: Dict[str, Any], context: Any) -> List[PageResponse]:
    """Author.pages field resolver."""
    get_config()
    author_id = get_source(event).get("id")
    if not author_id:
        raise ValidationError("Author.pages requires a source author id")
    return build_page_list(pages.get_by_author_id(author_id))


def _create_author(request: ResolverRequest) -> AuthorResponse:
    args = request.arguments
    author = authors.create(
        full_name=args.get("fullName", ""),
        github_id=args.get("githubId"),
        author_id=args.get("id"),
    )
    return build_author_response(author)


def _update_author(request: ResolverRequest) -> AuthorResponse:
    author_id = request.arguments.get("id")
    authors.get_by_id(author_id)
    fields = get_update_fields(request.arguments)
    return build_author_response(authors.update_by_id(author_id, fields))


def _remove_author(request: ResolverRequest) -> AuthorResponse:
    author_id = request.arguments.get("id")
    author = authors.get_by_id(author_id)
    # Pages keep their authorId and become orphans
    authors.remove_by_id(author_id)
    return build_author_response(author)


def create_author(event: Dict[str, Any], context: Any) -> AuthorResponse:
    """Mutation.createAuthor(fullName, githubId, id?)."""
    return run_mutation("createAuthor", event, _create_author)


def update_author(event: Dict[str, Any], context: Any) -> AuthorResponse:
    """
    Mutation.updateAuthor(id, fullName?).

    Raises:
        UnauthorizedError: Without a valid session
        NotFoundError: If the author does not exist
        ImmutableFieldError: If githubId or another fixed field is supplied
    """
    return run_mutation("updateAuthor", event, _update_author)


def remove_author(event: Dict[str, Any], context: Any) -> AuthorResponse:
    """Mutation.removeAuthor(id) - returns the removed author."""
    return run_mutation("removeAuthor", event, _remove_author)
