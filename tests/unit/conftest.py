"""
Test fixtures for Lambda resolver tests.

Provides environment configuration, mocked DynamoDB tables and sessions.
"""

from typing import Any, Callable, Dict, Generator, Optional

import boto3
import pytest
from moto import mock_aws

from src.utils.config import reset_config
from src.utils.dynamodb import clear_all_overrides, reset_singleton
from src.utils.session import Session, encode_session
from tests.unit.fixtures import GITHUB_ORG, SESSION_SECRET
from tests.unit.table_schemas import (
    AUTHORS_TABLE_NAME,
    PAGES_TABLE_NAME,
    create_authors_table_schema,
    create_pages_table_schema,
)


@pytest.fixture(autouse=True)
def app_env(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Set every required environment variable and reset cached state."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
    monkeypatch.delenv("DYNAMODB_ENDPOINT", raising=False)

    monkeypatch.setenv("GITHUB_ORG", GITHUB_ORG)
    monkeypatch.setenv("GITHUB_CLIENT_ID", "client-id")
    monkeypatch.setenv("GITHUB_CLIENT_SECRET", "client-secret")
    monkeypatch.setenv("GITHUB_OAUTH_REDIRECT_URI", "https://cms.example.com/auth/callback")
    monkeypatch.setenv("AUTHORS_TABLE_NAME", AUTHORS_TABLE_NAME)
    monkeypatch.setenv("PAGES_TABLE_NAME", PAGES_TABLE_NAME)
    monkeypatch.setenv("SESSION_SECRET", SESSION_SECRET)
    monkeypatch.delenv("SESSION_TTL_SECONDS", raising=False)

    reset_config()
    clear_all_overrides()
    reset_singleton()
    yield
    reset_config()
    clear_all_overrides()
    reset_singleton()


@pytest.fixture
def dynamodb_tables() -> Generator[Dict[str, Any], None, None]:
    """Create mock authors and pages tables."""
    with mock_aws():
        dynamodb = boto3.resource("dynamodb", region_name="us-east-1")
        authors_table = dynamodb.create_table(**create_authors_table_schema())
        pages_table = dynamodb.create_table(**create_pages_table_schema())
        yield {"authors": authors_table, "pages": pages_table}


@pytest.fixture
def authors_table(dynamodb_tables: Dict[str, Any]) -> Any:
    return dynamodb_tables["authors"]


@pytest.fixture
def pages_table(dynamodb_tables: Dict[str, Any]) -> Any:
    return dynamodb_tables["pages"]


@pytest.fixture
def lambda_context() -> Any:
    """Mock Lambda context."""

    class Context:
        function_name = "test-function"
        memory_limit_in_mb = 128
        invoked_function_arn = "arn:aws:lambda:us-east-1:123456789012:function:test-function"
        aws_request_id = "test-request-id"

    return Context()


@pytest.fixture
def sample_author(authors_table: Any) -> Dict[str, Any]:
    """Author a1 (Jane) stored in DynamoDB."""
    author = {
        "id": "a1",
        "fullName": "Jane",
        "githubId": "1001",
        "createdAt": "2024-01-01T00:00:00+00:00",
        "updatedAt": "2024-01-01T00:00:00+00:00",
    }
    authors_table.put_item(Item=author)
    return author


@pytest.fixture
def sample_page(pages_table: Any, sample_author: Dict[str, Any]) -> Dict[str, Any]:
    """Page p1 owned by a1 stored in DynamoDB."""
    page = {
        "id": "p1",
        "title": "My Article",
        "content": "My Content",
        "authorId": sample_author["id"],
        "createdAt": "2024-01-02T00:00:00+00:00",
        "updatedAt": "2024-01-02T00:00:00+00:00",
    }
    pages_table.put_item(Item=page)
    return page


@pytest.fixture
def session_token() -> Callable[..., str]:
    """Factory for signed session tokens."""

    def _make(author_id: Optional[str] = "a1", logged_in: bool = True) -> str:
        return encode_session(Session(logged_in=logged_in, author_id=author_id), SESSION_SECRET, 3600)

    return _make


@pytest.fixture
def appsync_event() -> Callable[..., Dict[str, Any]]:
    """Factory for AppSync direct Lambda resolver events."""

    def _make(
        arguments: Optional[Dict[str, Any]] = None,
        token: Optional[str] = None,
        source: Optional[Dict[str, Any]] = None,
        field_name: str = "testField",
    ) -> Dict[str, Any]:
        headers = {"x-correlation-id": "test-correlation-id"}
        if token:
            headers["authorization"] = f"Bearer {token}"
        return {
            "arguments": arguments or {},
            "source": source,
            "request": {"headers": headers},
            "info": {"fieldName": field_name, "parentTypeName": "Mutation"},
        }

    return _make
