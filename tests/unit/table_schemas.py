"""
DynamoDB table schema definitions for testing.

Centralizes table creation logic used across all tests via conftest.py fixtures.
"""

from typing import Any

AUTHORS_TABLE_NAME = "pages-cms-authors-test"
PAGES_TABLE_NAME = "pages-cms-pages-test"


def create_authors_table_schema() -> dict[str, Any]:
    """
    Schema for authors table.

    Key structure: PK=id
    GSI: GithubIdIndex (author lookup at login)
    """
    return {
        "TableName": AUTHORS_TABLE_NAME,
        "KeySchema": [
            {"AttributeName": "id", "KeyType": "HASH"},
        ],
        "AttributeDefinitions": [
            {"AttributeName": "id", "AttributeType": "S"},
            {"AttributeName": "githubId", "AttributeType": "S"},
        ],
        "GlobalSecondaryIndexes": [
            {
                "IndexName": "GithubIdIndex",
                "KeySchema": [
                    {"AttributeName": "githubId", "KeyType": "HASH"},
                ],
                "Projection": {"ProjectionType": "ALL"},
            },
        ],
        "BillingMode": "PAY_PER_REQUEST",
    }


def create_pages_table_schema() -> dict[str, Any]:
    """
    Schema for pages table.

    Key structure: PK=id
    GSI: AuthorIdIndex (pages by owning author)
    """
    return {
        "TableName": PAGES_TABLE_NAME,
        "KeySchema": [
            {"AttributeName": "id", "KeyType": "HASH"},
        ],
        "AttributeDefinitions": [
            {"AttributeName": "id", "AttributeType": "S"},
            {"AttributeName": "authorId", "AttributeType": "S"},
        ],
        "GlobalSecondaryIndexes": [
            {
                "IndexName": "AuthorIdIndex",
                "KeySchema": [
                    {"AttributeName": "authorId", "KeyType": "HASH"},
                ],
                "Projection": {"ProjectionType": "ALL"},
            },
        ],
        "BillingMode": "PAY_PER_REQUEST",
    }
