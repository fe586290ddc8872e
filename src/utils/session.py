"""
Signed session tokens.

A session is never stored. After a successful GitHub login the caller gets
an HS256 JWT carrying ``loggedIn`` and the author id; every request carries
it back in the ``authorization`` header and it is decoded per invocation.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt

ALGORITHM = "HS256"


@dataclass(frozen=True)
class Session:
    """Decoded per-request authentication state."""

    logged_in: bool = False
    author_id: Optional[str] = None


ANONYMOUS = Session()


def is_authorized(session: Optional[Session]) -> bool:
    """True iff the session is logged in and names an author."""
    if session is None:
        return False
    return session.logged_in is True and bool(session.author_id)


def encode_session(session: Session, secret: str, ttl_seconds: int) -> str:
    """
    Sign a session into a bearer token.

    Args:
        session: Session to encode
        secret: HMAC signing secret
        ttl_seconds: Token lifetime

    Returns:
        JWT string
    """
    now = datetime.now(timezone.utc)
    claims: Dict[str, Any] = {
        "loggedIn": session.logged_in,
        "iat": now,
        "exp": now + timedelta(seconds=ttl_seconds),
    }
    if session.author_id:
        claims["sub"] = session.author_id
    return jwt.encode(claims, secret, algorithm=ALGORITHM)


def decode_session(token: Optional[str], secret: str) -> Session:
    """
    Decode a bearer token into a Session.

    Missing, expired, tampered or malformed tokens all decode to ANONYMOUS;
    the authorization gate rejects those without saying why.
    """
    if not token:
        return ANONYMOUS
    try:
        claims = jwt.decode(token, secret, algorithms=[ALGORITHM])
    except JWTError:
        return ANONYMOUS

    logged_in = claims.get("loggedIn")
    author_id = claims.get("sub")
    if not isinstance(logged_in, bool) or not isinstance(author_id, (str, type(None))):
        return ANONYMOUS
    return Session(logged_in=logged_in, author_id=author_id)


def get_bearer_token(event: Dict[str, Any]) -> Optional[str]:
    """Pull the token out of the AppSync request's authorization header."""
    headers = (event.get("request") or {}).get("headers") or {}
    value = headers.get("authorization") or headers.get("Authorization")
    if not value:
        return None
    scheme, _, token = value.partition(" ")
    if token and scheme.lower() == "bearer":
        return token.strip()
    return value.strip()


def session_from_event(event: Dict[str, Any], secret: str) -> Session:
    """Reconstruct the caller's Session from an AppSync event."""
    return decode_session(get_bearer_token(event), secret)
