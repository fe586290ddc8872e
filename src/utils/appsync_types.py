"""
Type definitions for AppSync Lambda events.

Provides TypedDict definitions for AppSync direct Lambda resolver events and
helpers for safe extraction.
"""

from typing import Any, Dict, Optional, TypedDict

try:  # pragma: no cover
    from utils.errors import ValidationError  # type: ignore[import-not-found]
except ModuleNotFoundError:  # pragma: no cover
    from .errors import ValidationError


class AppSyncRequest(TypedDict, total=False):
    """Original HTTP request as forwarded by AppSync."""

    headers: Dict[str, str]
    domainName: Optional[str]


class AppSyncInfo(TypedDict, total=False):
    fieldName: str
    parentTypeName: str
    variables: Dict[str, Any]


class AppSyncEvent(TypedDict, total=False):
    """Base AppSync resolver event structure."""

    arguments: Dict[str, Any]
    source: Optional[Dict[str, Any]]
    request: AppSyncRequest
    info: AppSyncInfo
    requestContext: Dict[str, Any]


def get_argument(event: Dict[str, Any], name: str, default: Any = None) -> Any:
    """
    Extract an argument from the event.

    Args:
        event: AppSync event
        name: Argument name
        default: Default value if not present

    Returns:
        Argument value or default
    """
    return (event.get("arguments") or {}).get(name, default)


def get_argument_required(event: Dict[str, Any], name: str) -> Any:
    """
    Extract a required argument from the event.

    Raises:
        ValidationError: If argument is missing or empty
    """
    value = get_argument(event, name)
    if value is None or value == "":
        raise ValidationError(f"{name} is required", {"argument": name})
    return value


def get_source(event: Dict[str, Any]) -> Dict[str, Any]:
    """Parent object for field resolvers (empty if not present)."""
    source: Optional[Dict[str, Any]] = event.get("source")
    return source or {}


def get_update_fields(event_arguments: Dict[str, Any], key: str = "id") -> Dict[str, Any]:
    """
    Fields for a partial update: every argument except the key.

    Arguments sent as null are dropped; a null never overwrites a stored value.
    """
    return {name: value for name, value in event_arguments.items() if name != key and value is not None}
