"""docmirror: mirror SQLAlchemy records into Elasticsearch documents."""

from docmirror.adapters.sqlalchemy import SearchableMixin, SearchableObserver
from docmirror.core.persistence import BoundDocument, DocumentPersistence
from docmirror.domain.exceptions import DocMirrorDomainError, InvalidStateError
from docmirror.ports.executor import Statement, StatementExecutor
from docmirror.ports.records import SearchableRecord
from docmirror.version import __version__

__all__ = [
    "DocumentPersistence",
    "BoundDocument",
    "SearchableMixin",
    "SearchableObserver",
    "SearchableRecord",
    "Statement",
    "StatementExecutor",
    "DocMirrorDomainError",
    "InvalidStateError",
    "__version__",
]
