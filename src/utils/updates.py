"""
Partial-update builder for DynamoDB records.

Turns a sparse ``{field: value}`` map into a single SET update that touches
only those fields and always stamps ``updatedAt``. The fields a caller may
change are declared per record type; anything else is rejected before the
store is contacted.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, FrozenSet, Mapping, Optional

try:  # pragma: no cover
    from utils.errors import ImmutableFieldError  # type: ignore[import-not-found]
except ModuleNotFoundError:  # pragma: no cover
    from .errors import ImmutableFieldError

UPDATED_AT = "updatedAt"


def utc_now() -> str:
    """Current UTC time as an ISO-8601 string (sorts lexicographically)."""
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class RecordSchema:
    """Update rules for one record type."""

    name: str
    mutable_fields: FrozenSet[str]
    key_field: str = "id"

    def check_fields(self, fields: Mapping[str, Any]) -> None:
        """
        Reject any field the caller may not assign.

        Raises:
            ImmutableFieldError: On the primary key or any undeclared field
        """
        # Sorted so the reported field does not depend on dict order
        for name in sorted(fields):
            if name == self.key_field or name not in self.mutable_fields:
                raise ImmutableFieldError(self.name, name)


@dataclass(frozen=True)
class UpdateInstruction:
    """A ready-to-send ``update_item`` request, minus the table."""

    key: Dict[str, Any]
    update_expression: str
    attribute_names: Dict[str, str]
    attribute_values: Dict[str, Any]
    condition_expression: str
    assigned_fields: FrozenSet[str] = field(default_factory=frozenset)

    def to_request(self) -> Dict[str, Any]:
        """Keyword arguments for ``Table.update_item``."""
        return {
            "Key": self.key,
            "UpdateExpression": self.update_expression,
            "ExpressionAttributeNames": self.attribute_names,
            "ExpressionAttributeValues": self.attribute_values,
            "ConditionExpression": self.condition_expression,
            "ReturnValues": "ALL_NEW",
        }


def build_update(
    schema: RecordSchema,
    key: str,
    fields: Mapping[str, Any],
    now: Optional[str] = None,
) -> UpdateInstruction:
    """
    Build a partial update for one record.

    An empty ``fields`` map is valid and only refreshes ``updatedAt``.

    Args:
        schema: Update rules for the record type
        key: Primary key value
        fields: Fields to assign
        now: Timestamp to stamp (defaults to current UTC time)

    Returns:
        UpdateInstruction for the store adapter

    Raises:
        ImmutableFieldError: If fields contains a non-mutable field
    """
    schema.check_fields(fields)

    assignments = dict(fields)
    assignments[UPDATED_AT] = now or utc_now()

    update_expressions = []
    attribute_names: Dict[str, str] = {}
    attribute_values: Dict[str, Any] = {}

    for name in sorted(assignments):
        update_expressions.append(f"#{name} = :{name}")
        attribute_names[f"#{name}"] = name
        attribute_values[f":{name}"] = assignments[name]

    # Key placeholder is distinct from any assigned field since the key is never assignable
    attribute_names["#key"] = schema.key_field

    return UpdateInstruction(
        key={schema.key_field: key},
        update_expression="SET " + ", ".join(update_expressions),
        attribute_names=attribute_names,
        attribute_values=attribute_values,
        condition_expression="attribute_exists(#key)",
        assigned_fields=frozenset(assignments),
    )
