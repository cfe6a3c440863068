"""Record port interface.

Any domain object that should be mirrored as a search document implements
this protocol. The SQLAlchemy adapter provides a mixin with sensible defaults;
other object mappers only need to expose the same attributes.
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class SearchableRecord(Protocol):
    """A record that can be turned into a search document.

    Attributes:
        exists: True once the record has been persisted at least once.
        document_index: Target index name, or None for the connection default.
        document_type: Document type name within the index.
        document_key: Document identifier, or None to let the engine assign one.
    """

    exists: bool
    document_index: str | None
    document_type: str
    document_key: Any

    def build_document(self) -> dict[str, Any]:
        """Build the document body for this record.

        Returns:
            Mapping from field name to value.
        """
        ...
