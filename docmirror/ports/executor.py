"""Statement executor port interface.

A statement is a plain dict describing one request to the search engine.
Executors turn statements into network calls; the document synchronizer only
builds them. Implementations should be in adapters/ layer.
"""

from typing import Any, Protocol

Statement = dict[str, Any]


class StatementExecutor(Protocol):
    """Executes document statements against a search engine."""

    def index_statement(self, statement: Statement) -> Any:
        """Create or replace a document.

        Args:
            statement: {id, type, index, body, **options}.

        Returns:
            The engine response, unmodified.
        """
        ...

    def update_statement(self, statement: Statement) -> Any:
        """Partially update a document.

        Args:
            statement: {id, type, index, body: {"doc": {...}}, **options}.

        Returns:
            The engine response, unmodified.
        """
        ...

    def exists_statement(self, statement: Statement) -> bool:
        """Check whether a document exists.

        Args:
            statement: {id, type, index, **options}.

        Returns:
            True if the document is present in the index.
        """
        ...

    def delete_statement(self, statement: Statement) -> Any:
        """Remove a document.

        Args:
            statement: {id, type, index, **options}.

        Returns:
            The engine response, unmodified.
        """
        ...

    def bulk_statement(self, statement: Statement) -> Any:
        """Execute many actions in one request.

        Args:
            statement: {"body": [...]} where each action descriptor is
                followed by its payload (index) or stands alone (delete).

        Returns:
            The engine response, unmodified.
        """
        ...

    def get_default_index(self) -> str:
        """Return the index used for records that do not name their own."""
        ...
