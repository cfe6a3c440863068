"""Automatic document sync driven by SQLAlchemy session events.

SearchableObserver listens to flushes: rows inserted or modified are indexed,
rows deleted have their documents removed. Documents are sent once the flush
has assigned identities, inside the same transaction, so a later rollback does
not undo them; run reindex to repair the index in that case.
"""

import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy import event
from sqlalchemy.orm import Session, UOWTransaction

from docmirror.core.persistence import DocumentPersistence
from docmirror.ports.records import SearchableRecord

logger = logging.getLogger(__name__)


class SearchableObserver:
    """Mirrors flushed SearchableRecord instances into the search engine.

    Args:
        persistence: DocumentPersistence used to send documents.
        options: Statement options added to every save and delete
            (e.g. {"fresh": "wait_for"}).

    Example:
        observer = SearchableObserver(persistence)
        observer.register(SessionLocal)  # sessionmaker, Session class or instance
    """

    def __init__(
        self,
        persistence: DocumentPersistence,
        options: Mapping[str, Any] | None = None,
    ) -> None:
        self._persistence = persistence
        self._options = dict(options or {})
        self._targets: list[Any] = []
        self._pending_key = ("docmirror.pending", id(self))

    @property
    def persistence(self) -> DocumentPersistence:
        return self._persistence

    @property
    def options(self) -> dict[str, Any]:
        """Copy of the options sent with every save and delete."""
        return dict(self._options)

    def register(self, target: Any) -> None:
        """Start listening to flushes on a session target."""
        event.listen(target, "after_flush", self._collect)
        event.listen(target, "after_flush_postexec", self._dispatch)
        self._targets.append(target)

    def unregister(self) -> None:
        """Remove every listener added by register()."""
        for target in self._targets:
            event.remove(target, "after_flush", self._collect)
            event.remove(target, "after_flush_postexec", self._dispatch)
        self._targets.clear()

    def _tracks(self, obj: Any) -> bool:
        return isinstance(obj, SearchableRecord) and getattr(obj, "sync_document", True)

    def _collect(self, session: Session, flush_context: UOWTransaction) -> None:
        pending = flush_context.attributes.setdefault(self._pending_key, [])
        for obj in session.new:
            if self._tracks(obj):
                pending.append(("save", obj))
        for obj in session.dirty:
            if self._tracks(obj) and session.is_modified(obj, include_collections=False):
                pending.append(("save", obj))
        for obj in session.deleted:
            if self._tracks(obj):
                pending.append(("delete", obj))

    def _dispatch(self, session: Session, flush_context: UOWTransaction) -> None:
        pending = flush_context.attributes.pop(self._pending_key, [])
        for action, record in pending:
            logger.debug("Syncing %s after flush: %s", action, type(record).__name__)
            if action == "save":
                self._persistence.save(record, **self._options)
            else:
                self._persistence.delete(record, **self._options)
