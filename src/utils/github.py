"""
GitHub OAuth client.

Completes the authorization-code grant against GitHub and answers whether
the caller belongs to the configured organization.

Flow for one login attempt:
    START --begin()--> AWAITING_CODE --complete(code)--> AUTHENTICATED
                                                    \\--> FAILED
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import httpx

try:  # pragma: no cover
    from utils.errors import MissingCodeError, ProviderError, TransportError  # type: ignore[import-not-found]
    from utils.logging import get_logger  # type: ignore[import-not-found]
except ModuleNotFoundError:  # pragma: no cover
    from .errors import MissingCodeError, ProviderError, TransportError
    from .logging import get_logger

logger = get_logger(__name__)

AUTHORIZE_STATE = "authenticate"
DEFAULT_TIMEOUT = 10.0


@dataclass(frozen=True)
class ProviderEndpoints:
    """Where GitHub lives. Immutable; override per client for GitHub Enterprise or tests."""

    host: str = "https://github.com"
    authorize_path: str = "/login/oauth/authorize"
    access_token_path: str = "/login/oauth/access_token"
    api_url: str = "https://api.github.com"

    @property
    def authorize_url(self) -> str:
        return self.host + self.authorize_path

    @property
    def access_token_url(self) -> str:
        return self.host + self.access_token_path


GITHUB_ENDPOINTS = ProviderEndpoints()


def camel_case(name: str) -> str:
    """``access_token`` -> ``accessToken``."""
    parts = [part for part in re.split(r"[_\-\s]+", name) if part]
    if not parts:
        return name
    head, *rest = parts
    return head[0].lower() + head[1:] + "".join(part[0].upper() + part[1:] for part in rest)


def _parse_scope(raw: Any) -> List[str]:
    scopes: List[str] = []
    for scope in str(raw or "").split(","):
        scope = scope.strip()
        if scope and scope not in scopes:
            scopes.append(scope)
    return scopes


def normalize_token_response(results: Mapping[str, Any]) -> Dict[str, Any]:
    """
    camelCase provider fields and merge in the token fields.

    Returns:
        Dict with accessToken, refreshToken (None if absent), scope (list)
        and every other provider field camelCased
    """
    response = {camel_case(key): value for key, value in results.items()}
    response.update(
        accessToken=results.get("access_token"),
        refreshToken=results.get("refresh_token"),
        scope=_parse_scope(results.get("scope")),
    )
    return response


def is_org_member(orgs: Iterable[Mapping[str, Any]], organization: str) -> bool:
    """True iff any organization's login matches. Pure, no I/O."""
    return any(org.get("login") == organization for org in orgs)


class GitHubOAuthClient:
    """
    OAuth app client for one GitHub OAuth application.

    Args:
        client_id: OAuth app client id
        client_secret: OAuth app client secret
        redirect_uri: Callback URL registered with the app
        endpoints: GitHub endpoints (defaults to github.com)
        http_client: httpx.Client to use (one is created when omitted)
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        endpoints: ProviderEndpoints = GITHUB_ENDPOINTS,
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.endpoints = endpoints
        self.http = http_client or httpx.Client(timeout=DEFAULT_TIMEOUT)

    def authorize_url(self, query: Optional[Mapping[str, str]] = None) -> str:
        """
        URL to send the browser to.

        Extra ``query`` parameters are merged into the redirect URI so they
        come back on the callback.
        """
        parts = urlsplit(self.redirect_uri)
        redirect_query = dict(parse_qsl(parts.query))
        redirect_query.update(query or {})
        redirect_uri = urlunsplit(parts._replace(query=urlencode(redirect_query)))

        params = {
            "response_type": "code",
            "client_id": self.client_id,
            "redirect_uri": redirect_uri,
            "scope": "",
            "state": AUTHORIZE_STATE,
        }
        return f"{self.endpoints.authorize_url}?{urlencode(params)}"

    def exchange_code(self, code: Optional[str]) -> Dict[str, Any]:
        """
        Exchange an authorization code for tokens.

        Raises:
            MissingCodeError: If code is None or empty (no request is made)
            ProviderError: If GitHub answers with an error
            TransportError: If the request cannot be completed
        """
        if not code:
            raise MissingCodeError()

        logger.info("Exchanging authorization code for access token")
        results = self._request(
            "POST",
            self.endpoints.access_token_url,
            data={
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "code": code,
                "redirect_uri": self.redirect_uri,
            },
        )
        if not isinstance(results, Mapping):
            raise ProviderError("unexpected token response")

        if results.get("error"):
            description = results.get("error_description") or results["error"]
            logger.warning("GitHub token exchange rejected", extra={"error": results["error"]})
            raise ProviderError(str(description))

        return normalize_token_response(results)

    def list_organizations(self, access_token: str) -> List[Dict[str, Any]]:
        """Organizations the token's user belongs to."""
        orgs = self._request("GET", f"{self.endpoints.api_url}/user/orgs", token=access_token)
        if not isinstance(orgs, list):
            raise ProviderError("unexpected organizations response")
        return orgs

    def get_user(self, access_token: str) -> Dict[str, Any]:
        """The token's GitHub user (id, login, name, ...)."""
        user = self._request("GET", f"{self.endpoints.api_url}/user", token=access_token)
        if not isinstance(user, dict):
            raise ProviderError("unexpected user response")
        return user

    def _request(
        self,
        method: str,
        url: str,
        data: Optional[Dict[str, str]] = None,
        token: Optional[str] = None,
    ) -> Any:
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            response = self.http.request(method, url, data=data, headers=headers)
        except httpx.RequestError as e:
            logger.error("GitHub request failed", extra={"url": url, "error": str(e)})
            raise TransportError(f"GitHub request failed: {e}") from e

        body = _parse_body(response)
        if response.is_error:
            description = body.get("message") if isinstance(body, dict) else None
            raise ProviderError(description or f"HTTP {response.status_code}")
        return body


def _parse_body(response: httpx.Response) -> Any:
    """JSON when GitHub sends JSON, form-encoded otherwise."""
    content_type = response.headers.get("content-type", "")
    if "json" in content_type:
        try:
            return response.json()
        except ValueError:
            raise ProviderError("malformed JSON response") from None
    return dict(parse_qsl(response.text))


class AuthState(str, Enum):
    START = "START"
    AWAITING_CODE = "AWAITING_CODE"
    AUTHENTICATED = "AUTHENTICATED"
    FAILED = "FAILED"


@dataclass
class AuthenticationAttempt:
    """State of one login attempt."""

    client: GitHubOAuthClient
    state: AuthState = AuthState.START
    tokens: Optional[Dict[str, Any]] = None
    error: Optional[Exception] = field(default=None, repr=False)

    def begin(self, query: Optional[Mapping[str, str]] = None) -> str:
        """Return the authorize URL and wait for the callback."""
        url = self.client.authorize_url(query)
        self.state = AuthState.AWAITING_CODE
        return url

    def complete(self, code: Optional[str]) -> Dict[str, Any]:
        """
        Exchange the callback code.

        The failure is recorded and re-raised; a failed attempt stays failed.
        """
        if self.state is not AuthState.AWAITING_CODE:
            raise RuntimeError(f"Cannot complete login from state {self.state.value}")
        try:
            self.tokens = self.client.exchange_code(code)
        except Exception as e:
            self.state = AuthState.FAILED
            self.error = e
            raise
        self.state = AuthState.AUTHENTICATED
        return self.tokens

    def is_member_of(self, organization: str) -> bool:
        """Fetch the user's organizations and check membership."""
        if self.state is not AuthState.AUTHENTICATED or self.tokens is None:
            raise RuntimeError("Login is not authenticated")
        orgs = self.client.list_organizations(self.tokens["accessToken"])
        return is_org_member(orgs, organization)
