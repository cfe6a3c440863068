"""SQLAlchemy adapters.

Components:
- SearchableMixin: SearchableRecord defaults for declarative models
- SearchableObserver: session hooks that sync records on flush
"""

from docmirror.adapters.sqlalchemy.observer import SearchableObserver
from docmirror.adapters.sqlalchemy.searchable import SearchableMixin

__all__ = ["SearchableMixin", "SearchableObserver"]
