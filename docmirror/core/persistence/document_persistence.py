"""Document persistence: mirror record lifecycle events into the search engine.

DocumentPersistence translates save/update/delete intents for a record into
StatementExecutor calls, and whole collections into single bulk requests.
It keeps no state besides the executor, so one instance can serve every
caller.
"""

import logging
from collections.abc import Iterable
from typing import Any

from docmirror.core.statements import action_descriptor, document_statement, resolve_index
from docmirror.domain.exceptions import InvalidStateError
from docmirror.ports.executor import Statement, StatementExecutor
from docmirror.ports.records import SearchableRecord

logger = logging.getLogger(__name__)


class DocumentPersistence:
    """Synchronizes searchable records with their search documents.

    Single-record operations require the record to exist in the primary
    store. Executor errors are never caught here.

    Example:
        persistence = DocumentPersistence(connection)
        persistence.save(article, fresh="wait_for")
        persistence.reindex(session.scalars(select(Article)))
    """

    def __init__(self, executor: StatementExecutor) -> None:
        """Initialize with the executor that performs network calls.

        Args:
            executor: Statement executor (e.g., ElasticsearchConnection).
        """
        self._executor = executor

    @property
    def executor(self) -> StatementExecutor:
        """The executor statements are sent to."""
        return self._executor

    def bind(self, record: SearchableRecord) -> "BoundDocument":
        """Associate a record for subsequent single-record calls.

        Args:
            record: The record to operate on.

        Returns:
            BoundDocument proxying save/update/delete for that record.
        """
        return BoundDocument(self, record)

    def save(self, record: SearchableRecord, /, **options: Any) -> Any:
        """Index the record's full document, replacing any previous version.

        Args:
            record: Record to index.
            **options: Statement options (fresh, pass-through keys).

        Returns:
            The executor's response.

        Raises:
            InvalidStateError: If the record does not exist.
        """
        self._ensure_exists(record, "save")
        statement = self._statement(record, options, body=record.build_document())
        logger.debug("Indexing document %s/%s", statement["index"], statement["id"])
        return self._executor.index_statement(statement)

    def update(self, record: SearchableRecord, /, **options: Any) -> Any:
        """Partially update the record's document.

        Args:
            record: Record to update.
            **options: Statement options (fresh, retry_on_conflict, ...).

        Returns:
            The executor's response.

        Raises:
            InvalidStateError: If the record does not exist.
        """
        self._ensure_exists(record, "update")
        statement = self._statement(
            record, options, body={"doc": record.build_document()}
        )
        logger.debug("Updating document %s/%s", statement["index"], statement["id"])
        return self._executor.update_statement(statement)

    def delete(self, record: SearchableRecord, /, **options: Any) -> Any:
        """Remove the record's document if the engine has one.

        Records can exist without ever having been indexed, so the engine is
        asked first and a missing document is not an error.

        Args:
            record: Record whose document should be removed.
            **options: Statement options (fresh, pass-through keys).

        Returns:
            The executor's delete response, or None if no document existed.

        Raises:
            InvalidStateError: If the record does not exist.
        """
        self._ensure_exists(record, "delete")
        statement = self._statement(record, options)
        if not self._executor.exists_statement(statement):
            logger.debug(
                "No document %s/%s to delete", statement["index"], statement["id"]
            )
            return None
        logger.debug("Deleting document %s/%s", statement["index"], statement["id"])
        return self._executor.delete_statement(statement)

    def bulk_save(self, records: Iterable[SearchableRecord]) -> Any:
        """Index many records in a single bulk request.

        Args:
            records: Records to index, in the order they should be sent.

        Returns:
            The executor's bulk response.
        """
        default_index = self._executor.get_default_index()
        body: list[dict[str, Any]] = []
        for record in records:
            index = resolve_index(record, default_index)
            body.append(action_descriptor("index", record, index))
            body.append(record.build_document())
        logger.debug("Bulk indexing %d documents", len(body) // 2)
        return self._executor.bulk_statement({"body": body})

    def bulk_delete(self, records: Iterable[SearchableRecord]) -> Any:
        """Remove many documents in a single bulk request.

        Args:
            records: Records whose documents should be removed.

        Returns:
            The executor's bulk response.
        """
        default_index = self._executor.get_default_index()
        body = [
            action_descriptor("delete", record, resolve_index(record, default_index))
            for record in records
        ]
        logger.debug("Bulk deleting %d documents", len(body))
        return self._executor.bulk_statement({"body": body})

    def reindex(self, records: Iterable[SearchableRecord]) -> Any:
        """Rebuild documents by deleting then re-indexing them.

        Nothing is rolled back if the second request fails; the documents
        stay deleted until the next successful reindex.

        Args:
            records: Records to rebuild.

        Returns:
            The bulk_save response.
        """
        records = list(records)
        self.bulk_delete(records)
        return self.bulk_save(records)

    def _ensure_exists(self, record: SearchableRecord, action: str) -> None:
        if not record.exists:
            raise InvalidStateError(
                f"cannot {action} a document for a record that does not exist",
                hint="Persist the record before syncing its document",
            )

    def _statement(
        self, record: SearchableRecord, options: dict[str, Any], **payload: Any
    ) -> Statement:
        index = record.document_index or self._executor.get_default_index()
        return document_statement(record, index, {**payload, **options})


class BoundDocument:
    """A record paired with the persistence that syncs it.

    Returned by DocumentPersistence.bind(); each call delegates with the bound
    record, so the persistence itself stays stateless.
    """

    def __init__(self, persistence: DocumentPersistence, record: SearchableRecord) -> None:
        self._persistence = persistence
        self.record = record

    def save(self, **options: Any) -> Any:
        return self._persistence.save(self.record, **options)

    def update(self, **options: Any) -> Any:
        return self._persistence.update(self.record, **options)

    def delete(self, **options: Any) -> Any:
        return self._persistence.delete(self.record, **options)
