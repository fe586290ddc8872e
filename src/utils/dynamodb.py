"""
Centralized DynamoDB table access utilities.

Provides singleton-pattern table accessors with lazy initialization and test
monkeypatch support, plus RecordStore, the key-addressed adapter the domain
services talk to.
"""

import os
from typing import TYPE_CHECKING, Any, Dict, List, Optional

import boto3
from boto3.dynamodb.conditions import Key
from botocore.exceptions import BotoCoreError, ClientError

if TYPE_CHECKING:
    from mypy_boto3_dynamodb import DynamoDBServiceResource
    from mypy_boto3_dynamodb.service_resource import Table

try:  # pragma: no cover
    from utils.config import get_config  # type: ignore[import-not-found]
    from utils.errors import AlreadyExistsError, NotFoundError, TransportError  # type: ignore[import-not-found]
    from utils.logging import get_logger  # type: ignore[import-not-found]
    from utils.updates import UpdateInstruction  # type: ignore[import-not-found]
except ModuleNotFoundError:  # pragma: no cover
    from .config import get_config
    from .errors import AlreadyExistsError, NotFoundError, TransportError
    from .logging import get_logger
    from .updates import UpdateInstruction

logger = get_logger(__name__)

# Module-level cache for test overrides
_table_overrides: dict[str, Optional["Table"]] = {}


def _get_dynamodb() -> "DynamoDBServiceResource":
    """Get DynamoDB resource with optional endpoint override for LocalStack."""
    return boto3.resource("dynamodb", endpoint_url=os.getenv("DYNAMODB_ENDPOINT"))


class TableAccessor:
    """Centralized access to DynamoDB tables with environment-based naming."""

    _instance: Optional["TableAccessor"] = None

    def __new__(cls) -> "TableAccessor":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @property
    def authors(self) -> "Table":
        """Get authors table instance."""
        if override := _table_overrides.get("authors"):
            return override
        table_name = get_config().authors_table_name
        return _get_dynamodb().Table(table_name)

    @property
    def pages(self) -> "Table":
        """Get pages table instance."""
        if override := _table_overrides.get("pages"):
            return override
        table_name = get_config().pages_table_name
        return _get_dynamodb().Table(table_name)


# Singleton instance for import
tables = TableAccessor()


def _transport_error(operation: str, error: Exception) -> TransportError:
    logger.error(f"DynamoDB {operation} failed", extra={"error": str(error)})
    return TransportError(f"DynamoDB {operation} failed: {error}")


class RecordStore:
    """
    Key-addressed access to one table keyed by ``id``.

    botocore failures are re-raised as TransportError with the original
    exception chained; there is no retry here beyond what botocore does.
    """

    def __init__(self, table: "Table", key_field: str = "id") -> None:
        self.table = table
        self.key_field = key_field

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        """Return the record or None when absent."""
        try:
            response = self.table.get_item(Key={self.key_field: key})
        except (BotoCoreError, ClientError) as e:
            raise _transport_error("get_item", e) from e
        return response.get("Item")

    def scan(self, limit: int) -> List[Dict[str, Any]]:
        """Return at most ``limit`` records; no pagination."""
        try:
            response = self.table.scan(Limit=limit)
        except (BotoCoreError, ClientError) as e:
            raise _transport_error("scan", e) from e
        return list(response.get("Items", []))

    def query_by_index(self, index_name: str, attribute: str, value: str) -> List[Dict[str, Any]]:
        """Return records whose ``attribute`` equals ``value`` via a secondary index."""
        try:
            response = self.table.query(
                IndexName=index_name,
                KeyConditionExpression=Key(attribute).eq(value),
            )
        except (BotoCoreError, ClientError) as e:
            raise _transport_error("query", e) from e
        return list(response.get("Items", []))

    def put(self, item: Dict[str, Any], if_absent: bool = False) -> None:
        """
        Write a whole record.

        Args:
            item: Record including its key
            if_absent: Refuse to replace an existing record with the same key

        Raises:
            AlreadyExistsError: If if_absent and the key is taken
            TransportError: On any other DynamoDB failure
        """
        kwargs: Dict[str, Any] = {"Item": item}
        if if_absent:
            kwargs["ConditionExpression"] = "attribute_not_exists(#key)"
            kwargs["ExpressionAttributeNames"] = {"#key": self.key_field}
        try:
            self.table.put_item(**kwargs)
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException":
                key = item[self.key_field]
                raise AlreadyExistsError(f"Record already exists with id {key}", {"id": key}) from e
            raise _transport_error("put_item", e) from e
        except BotoCoreError as e:
            raise _transport_error("put_item", e) from e

    def update(self, instruction: UpdateInstruction) -> Dict[str, Any]:
        """
        Apply a partial update and return the full record as stored.

        Raises:
            NotFoundError: If the record does not exist
            TransportError: On any other DynamoDB failure
        """
        try:
            response = self.table.update_item(**instruction.to_request())
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException":
                key = instruction.key[self.key_field]
                raise NotFoundError(f"Record not found with id {key}") from e
            raise _transport_error("update_item", e) from e
        except BotoCoreError as e:
            raise _transport_error("update_item", e) from e
        return response["Attributes"]

    def delete(self, key: str) -> None:
        try:
            self.table.delete_item(Key={self.key_field: key})
        except (BotoCoreError, ClientError) as e:
            raise _transport_error("delete_item", e) from e


# Test utilities
def override_table(table_name: str, table: Optional["Table"]) -> None:
    """Override a table for testing. Set to None to clear override."""
    _table_overrides[table_name] = table


def clear_all_overrides() -> None:
    """Clear all table overrides (call in test teardown)."""
    _table_overrides.clear()


def reset_singleton() -> None:
    """Reset the singleton instance (for testing isolation)."""
    TableAccessor._instance = None
