"""
Lambda resolvers for GitHub login.

Login is two calls: ``get_authorize_url`` sends the browser to GitHub, and
``complete_login`` takes the code GitHub redirects back with, checks
organization membership and issues a signed session token for the matching
Author (created on first login).
"""

from typing import Any, Dict, Optional

# Handle both Lambda (absolute) and unit test (relative) imports
try:  # pragma: no cover
    from utils import authors  # type: ignore[import-not-found]
    from utils.appsync_types import get_argument  # type: ignore[import-not-found]
    from utils.config import AppConfig, get_config  # type: ignore[import-not-found]
    from utils.errors import ProviderError, UnauthorizedError, ValidationError  # type: ignore[import-not-found]
    from utils.github import (  # type: ignore[import-not-found]
        AUTHORIZE_STATE,
        AuthenticationAttempt,
        AuthState,
        GitHubOAuthClient,
    )
    from utils.logging import get_correlation_id, get_logger  # type: ignore[import-not-found]
    from utils.responses import LoginResponse, build_author_response  # type: ignore[import-not-found]
    from utils.session import Session, encode_session  # type: ignore[import-not-found]
except ModuleNotFoundError:  # pragma: no cover
    from ..utils import authors
    from ..utils.appsync_types import get_argument
    from ..utils.config import AppConfig, get_config
    from ..utils.errors import ProviderError, UnauthorizedError, ValidationError
    from ..utils.github import AUTHORIZE_STATE, AuthenticationAttempt, AuthState, GitHubOAuthClient
    from ..utils.logging import get_correlation_id, get_logger
    from ..utils.responses import LoginResponse, build_author_response
    from ..utils.session import Session, encode_session

logger = get_logger(__name__)

# Module-level override for tests
oauth_client: Optional[GitHubOAuthClient] = None


def _get_oauth_client(config: AppConfig) -> GitHubOAuthClient:
    if oauth_client is not None:
        return oauth_client
    return GitHubOAuthClient(
        client_id=config.github_client_id,
        client_secret=config.github_client_secret,
        redirect_uri=config.github_oauth_redirect_uri,
    )


def get_authorize_url(event: Dict[str, Any], context: Any) -> Dict[str, str]:
    """
    Query.authorizeUrl(query?) - where to send the browser to start a login.

    Entries of the optional ``query`` argument are added to the redirect URI
    so they come back on the callback.
    """
    config = get_config()
    query = get_argument(event, "query")
    if query is not None and not isinstance(query, dict):
        raise ValidationError("query must be an object")

    attempt = AuthenticationAttempt(_get_oauth_client(config))
    return {"url": attempt.begin(query)}


def complete_login(event: Dict[str, Any], context: Any) -> LoginResponse:
    """
    Mutation.login(code, state?) - finish the GitHub OAuth flow.

    Returns:
        Signed session token and the logged-in Author

    Raises:
        MissingCodeError: If no code was supplied
        ValidationError: If state is present and not ours
        ProviderError: If GitHub rejects the code or a follow-up call
        TransportError: If GitHub cannot be reached
        UnauthorizedError: If the user is not in the configured organization
    """
    config = get_config()
    correlation_id = get_correlation_id(event)

    state = get_argument(event, "state")
    if state is not None and state != AUTHORIZE_STATE:
        raise ValidationError("Unexpected OAuth state")

    client = _get_oauth_client(config)
    # The callback runs in a fresh invocation; begin() happened in get_authorize_url
    attempt = AuthenticationAttempt(client, state=AuthState.AWAITING_CODE)
    tokens = attempt.complete(get_argument(event, "code"))

    if not attempt.is_member_of(config.github_org):
        logger.warning("Login rejected: not an organization member", extra={"correlationId": correlation_id})
        raise UnauthorizedError()

    user = client.get_user(tokens["accessToken"])
    if user.get("id") is None:
        raise ProviderError("GitHub user has no id")
    github_id = str(user["id"])

    author = authors.find_by_github_id(github_id)
    if author is None:
        author = authors.create(
            full_name=user.get("name") or user.get("login", ""),
            github_id=github_id,
        )
        logger.info("Created author on first login", extra={"authorId": author["id"], "correlationId": correlation_id})

    token = encode_session(
        Session(logged_in=True, author_id=author["id"]),
        config.session_secret,
        config.session_ttl_seconds,
    )
    logger.info("Login completed", extra={"authorId": author["id"], "correlationId": correlation_id})
    return {"token": token, "author": build_author_response(author)}
