"""
Authorization utilities for gating mutations.

A Gate is an ordered list of checks run against an explicit
ResolverRequest before the domain operation. Every check raises the same
UnauthorizedError, so callers cannot tell why they were turned away.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Tuple, TypeVar

try:  # pragma: no cover
    from utils import authors  # type: ignore[import-not-found]
    from utils.config import get_config  # type: ignore[import-not-found]
    from utils.errors import AppError, NotFoundError, UnauthorizedError  # type: ignore[import-not-found]
    from utils.logging import get_correlation_id, get_logger  # type: ignore[import-not-found]
    from utils.session import (  # type: ignore[import-not-found]
        ANONYMOUS,
        Session,
        is_authorized,
        session_from_event,
    )
except ModuleNotFoundError:  # pragma: no cover
    from . import authors
    from .config import get_config
    from .errors import AppError, NotFoundError, UnauthorizedError
    from .logging import get_correlation_id, get_logger
    from .session import ANONYMOUS, Session, is_authorized, session_from_event

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class ResolverRequest:
    """Everything an operation may look at, passed by value."""

    arguments: Dict[str, Any] = field(default_factory=dict)
    session: Session = ANONYMOUS
    source: Optional[Dict[str, Any]] = None
    correlation_id: Optional[str] = None


def build_request(event: Dict[str, Any], session_secret: str) -> ResolverRequest:
    """Decode an AppSync event into a ResolverRequest."""
    return ResolverRequest(
        arguments=dict(event.get("arguments") or {}),
        session=session_from_event(event, session_secret),
        source=event.get("source"),
        correlation_id=get_correlation_id(event),
    )


Check = Callable[[ResolverRequest], None]


def require_session(request: ResolverRequest) -> None:
    """Reject unless the session is logged in and names an author. No I/O."""
    if not is_authorized(request.session):
        raise UnauthorizedError()


def require_known_author(request: ResolverRequest) -> None:
    """Reject unless the session's author still exists."""
    author_id = request.session.author_id
    if not author_id:
        raise UnauthorizedError()
    try:
        authors.get_by_id(author_id)
    except NotFoundError:
        logger.warning(
            "Session refers to unknown author",
            extra={"correlationId": request.correlation_id},
        )
        raise UnauthorizedError() from None


class Gate:
    """
    Ordered chain of request checks.

    Example:
        gate = Gate(require_session, require_known_author)
        page = gate.run(request, _update_page)
    """

    def __init__(self, *checks: Check) -> None:
        self.checks: Tuple[Check, ...] = checks

    def check(self, request: ResolverRequest) -> None:
        """Run every check in order; the first failure propagates."""
        for check in self.checks:
            check(request)

    def run(self, request: ResolverRequest, operation: Callable[[ResolverRequest], T]) -> T:
        """Run the checks, then the operation with the unchanged request."""
        self.check(request)
        return operation(request)


mutation_gate = Gate(require_session, require_known_author)


def run_mutation(
    name: str,
    event: Dict[str, Any],
    operation: Callable[[ResolverRequest], T],
    gate: Optional[Gate] = None,
) -> T:
    """
    Decode the event, gate it and run the operation.

    Failures are logged and re-raised unchanged for AppSync to report.
    """
    config = get_config()
    request = build_request(event, config.session_secret)
    try:
        result = (gate or mutation_gate).run(request, operation)
    except AppError as e:
        logger.warning(
            f"{name} rejected",
            extra={"errorCode": e.error_code, "error": e.message, "correlationId": request.correlation_id},
        )
        raise
    except Exception as e:
        logger.error(
            f"{name} failed",
            extra={"error": str(e), "correlationId": request.correlation_id},
            exc_info=True,
        )
        raise
    logger.info(f"{name} succeeded", extra={"correlationId": request.correlation_id})
    return result
