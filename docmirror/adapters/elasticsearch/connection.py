"""Elasticsearch statement executor.

Turns docmirror statements into calls on the official Elasticsearch client.

Translation rules:
    - "fresh" is sent as the client's "refresh" parameter.
    - "type" and "_type" are dropped; Elasticsearch 8 has no mapping types.
    - Options an API does not accept are dropped for that API
      (retry_on_conflict outside updates, write options on exists checks).
    - Every other key is passed through as a keyword argument, so the client
      validates it.

Client errors (ApiError, ConnectionError, ...) propagate unchanged.
"""

import logging
from typing import Any

from elasticsearch import Elasticsearch

from docmirror.ports.executor import Statement

logger = logging.getLogger(__name__)

_TYPE_KEYS = ("type", "_type")
_WRITE_ONLY_KEYS = ("fresh", "refresh", "retry_on_conflict")


class ElasticsearchConnection:
    """StatementExecutor backed by an Elasticsearch client.

    Args:
        client: Configured Elasticsearch client.
        default_index: Index used for records that do not name their own.
    """

    def __init__(self, client: Elasticsearch, default_index: str) -> None:
        self._client = client
        self._default_index = default_index

    @property
    def client(self) -> Elasticsearch:
        """The underlying Elasticsearch client."""
        return self._client

    def get_default_index(self) -> str:
        return self._default_index

    def index_statement(self, statement: Statement) -> Any:
        params = self._params(statement, drop=("retry_on_conflict",))
        body = params.pop("body", None)
        return self._client.index(document=body, **params)

    def update_statement(self, statement: Statement) -> Any:
        params = self._params(statement)
        body = dict(params.pop("body", None) or {})
        # Remaining body keys (doc_as_upsert, upsert, script...) are update fields
        return self._client.update(**body, **params)

    def exists_statement(self, statement: Statement) -> bool:
        params = self._params(statement, drop=_WRITE_ONLY_KEYS)
        return bool(self._client.exists(**params))

    def delete_statement(self, statement: Statement) -> Any:
        params = self._params(statement, drop=("retry_on_conflict",))
        return self._client.delete(**params)

    def bulk_statement(self, statement: Statement) -> Any:
        params = self._params(statement, drop=("retry_on_conflict",))
        operations = _strip_types(params.pop("body", []))
        if not operations:
            # The bulk API rejects an empty body
            logger.debug("Skipping empty bulk request")
            return {"took": 0, "errors": False, "items": []}
        response = self._client.bulk(operations=operations, **params)
        if response.get("errors"):
            failed = [
                item
                for item in response.get("items", [])
                if next(iter(item.values()), {}).get("error")
            ]
            logger.warning("Bulk request reported %d failed items", len(failed))
        return response

    def _params(self, statement: Statement, drop: tuple[str, ...] = ()) -> dict[str, Any]:
        params = {
            key: value
            for key, value in statement.items()
            if key not in _TYPE_KEYS and key not in drop
        }
        if "fresh" in params:
            params["refresh"] = params.pop("fresh")
        return params


def _strip_types(body: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Remove _type from bulk action lines, leaving payload lines untouched.

    Every action except delete is followed by exactly one payload line.
    """
    operations: list[dict[str, Any]] = []
    expect_payload = False
    for line in body:
        if expect_payload:
            operations.append(line)
            expect_payload = False
            continue
        action, meta = next(iter(line.items()))
        operations.append({action: {k: v for k, v in meta.items() if k != "_type"}})
        expect_payload = action != "delete"
    return operations
