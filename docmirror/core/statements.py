"""Statement builders.

Pure functions that shape records into the request dicts handed to a
StatementExecutor. Keeping them free of executor calls lets the persistence
layer stay a thin dispatcher.
"""

from collections.abc import Mapping
from typing import Any

from docmirror.ports.executor import Statement
from docmirror.ports.records import SearchableRecord


def resolve_index(record: SearchableRecord, default_index: str) -> str:
    """Return the record's own index, falling back to the default."""
    return record.document_index or default_index


def document_statement(
    record: SearchableRecord, index: str, extra: Mapping[str, Any] | None = None
) -> Statement:
    """Build the addressing part of a single-document statement.

    Args:
        record: Record whose document is targeted.
        index: Resolved index name.
        extra: Keys merged last (payload and caller options); they win on
            collision.

    Returns:
        {id, type, index, **extra}
    """
    return {
        "id": record.document_key,
        "type": record.document_type,
        "index": index,
        **(extra or {}),
    }


def action_descriptor(action: str, record: SearchableRecord, index: str) -> dict[str, Any]:
    """Build one bulk action line, e.g. {"index": {_id, _type, _index}}."""
    return {
        action: {
            "_id": record.document_key,
            "_type": record.document_type,
            "_index": index,
        }
    }
