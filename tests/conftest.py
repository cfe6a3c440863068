"""Pytest configuration and shared fixtures."""

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session

from docmirror.core.persistence import DocumentPersistence
from docmirror.ports.executor import StatementExecutor
from tests.fixtures.models import Base

# ============================================================================
# Config Isolation
# ============================================================================
# The TOML provider reads ~/.config/docmirror/config.toml and DOCMIRROR_*
# variables. Tests must not see the developer's own settings.


@pytest.fixture(autouse=True)
def isolate_user_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Point the global config path at a nonexistent file and clear env overrides."""
    for name in (
        "DOCMIRROR_HOSTS",
        "DOCMIRROR_DEFAULT_INDEX",
        "DOCMIRROR_USERNAME",
        "DOCMIRROR_PASSWORD",
        "DOCMIRROR_API_KEY",
    ):
        monkeypatch.delenv(name, raising=False)

    nonexistent_global = tmp_path / "nonexistent_global" / "config.toml"
    with patch(
        "docmirror.adapters.config.toml_config_provider.get_global_config_path",
        return_value=nonexistent_global,
    ):
        yield nonexistent_global


@pytest.fixture(autouse=True)
def reset_root_logging() -> Iterator[None]:
    """Undo logging.basicConfig calls made by CLI invocations."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


# ============================================================================
# Records and Executors
# ============================================================================


@dataclass
class FakeRecord:
    """Plain SearchableRecord implementation for unit tests."""

    exists: bool = True
    document_index: str | None = "bar"
    document_type: str = "foo"
    document_key: Any = None
    document: dict[str, Any] = field(default_factory=lambda: {"foo": "bar"})

    def build_document(self) -> dict[str, Any]:
        return dict(self.document)


@pytest.fixture
def record() -> FakeRecord:
    """An existing record indexed into 'bar' with type 'foo'."""
    return FakeRecord()


@pytest.fixture
def executor() -> MagicMock:
    """Mock StatementExecutor whose default index is 'docmirror'."""
    mock = MagicMock(spec=StatementExecutor)
    mock.get_default_index.return_value = "docmirror"
    mock.exists_statement.return_value = True
    return mock


@pytest.fixture
def persistence(executor: MagicMock) -> DocumentPersistence:
    """DocumentPersistence over the mock executor."""
    return DocumentPersistence(executor)


# ============================================================================
# Database
# ============================================================================


@pytest.fixture
def engine() -> Iterator[Engine]:
    """In-memory SQLite engine with the test models' tables."""
    engine = create_engine("sqlite://")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine: Engine) -> Iterator[Session]:
    """Session bound to the in-memory engine."""
    with Session(engine) as session:
        yield session


@pytest.fixture
def database_file(tmp_path: Path) -> Iterator[Path]:
    """File-backed SQLite database with the test models' tables.

    Use when a second engine (e.g. the CLI) must see the same data.
    """
    path = tmp_path / "app.db"
    engine = create_engine(f"sqlite:///{path}")
    Base.metadata.create_all(engine)
    engine.dispose()
    yield path
