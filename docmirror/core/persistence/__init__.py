"""Document persistence: the synchronizer between records and search documents."""

from docmirror.core.persistence.document_persistence import BoundDocument, DocumentPersistence

__all__ = ["DocumentPersistence", "BoundDocument"]
