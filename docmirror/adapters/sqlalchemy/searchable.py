"""SearchableRecord defaults for SQLAlchemy declarative models.

Mix SearchableMixin into a mapped class to make its rows mirrorable:

    class Article(SearchableMixin, Base):
        __tablename__ = "articles"
        __document_index__ = "blog"
        __searchable__ = ["title", "body"]

        id: Mapped[int] = mapped_column(primary_key=True)
        title: Mapped[str]
        body: Mapped[str]

Class-level knobs:
    __document_index__: Target index (None uses the connection default).
    __document_type__: Document type (defaults to __tablename__).
    __searchable__: Attribute names to put in the document (defaults to
        every column attribute).
    sync_document: Set to False to keep SearchableObserver away from the model.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar

from sqlalchemy import inspect

if TYPE_CHECKING:
    from docmirror.core.persistence import BoundDocument, DocumentPersistence


class SearchableMixin:
    """Implements SearchableRecord on top of SQLAlchemy instance state."""

    __document_index__: ClassVar[str | None] = None
    __document_type__: ClassVar[str | None] = None
    __searchable__: ClassVar[list[str] | None] = None

    sync_document: ClassVar[bool] = True

    @property
    def exists(self) -> bool:
        """True once the row has a database identity.

        Deleted instances keep their identity, so their documents can still
        be removed after the flush.
        """
        return inspect(self).has_identity

    @property
    def document_index(self) -> str | None:
        return type(self).__document_index__

    @property
    def document_type(self) -> str:
        cls = type(self)
        return cls.__document_type__ or inspect(cls).local_table.name

    @property
    def document_key(self) -> Any:
        """Primary key of the row; composite keys are joined with '-'."""
        identity = inspect(self).identity
        if identity is None:
            return None
        if len(identity) == 1:
            return identity[0]
        return "-".join(str(part) for part in identity)

    def build_document(self) -> dict[str, Any]:
        """Build the document from column attributes.

        Override for computed fields or related data.
        """
        names = type(self).__searchable__
        if names is None:
            names = [attr.key for attr in inspect(type(self)).column_attrs]
        return {name: getattr(self, name) for name in names}

    def document(self, persistence: DocumentPersistence) -> BoundDocument:
        """Bind this record to a DocumentPersistence."""
        return persistence.bind(self)
