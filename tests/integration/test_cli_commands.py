"""Integration tests for CLI commands using click.testing.CliRunner.

Tests the complete CLI flow end-to-end to verify:
- Command execution and exit codes
- Output formatting and messages
- Error handling and user feedback

The Elasticsearch client is never contacted: connection checks and the
persistence used by reindex are patched.
"""

import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from docmirror.core.persistence import DocumentPersistence
from docmirror.entrypoints.cli import cli
from tests.fixtures.models import Article
from tests.helpers import (
    assert_command_failed,
    assert_command_success,
    assert_error_message,
    assert_files_created,
    assert_output_contains,
    assert_success_indicator,
)


@pytest.fixture
def runner() -> CliRunner:
    """Create a Click test runner."""
    return CliRunner()


@pytest.fixture
def project_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Empty project directory used as the working directory."""
    project = tmp_path / "project"
    project.mkdir()
    monkeypatch.chdir(project)
    # reindex puts the working directory on sys.path
    monkeypatch.setattr(sys, "path", list(sys.path))
    monkeypatch.delenv("DATABASE_URL", raising=False)
    return project


class TestInitCommand:
    """Tests for 'docmirror init' command."""

    def test_init_creates_config(self, runner: CliRunner, project_dir: Path) -> None:
        result = runner.invoke(cli, ["init"], catch_exceptions=False)

        assert_command_success(result, context="docmirror init")
        assert_files_created(project_dir, "docmirror.toml")
        assert_success_indicator(result)

    def test_init_sets_default_index(self, runner: CliRunner, project_dir: Path) -> None:
        result = runner.invoke(cli, ["init", "--index", "blog"])

        assert_command_success(result)
        assert 'default_index = "blog"' in (project_dir / "docmirror.toml").read_text()

    def test_init_index_with_backslash(self, runner: CliRunner, project_dir: Path) -> None:
        """The written file parses and keeps the given index name."""
        runner.invoke(cli, ["init", "--index", "logs\\2024"])

        result = runner.invoke(cli, ["config", "show"])

        assert_command_success(result)
        assert_output_contains(result, "logs\\\\2024")

    def test_init_twice_fails_with_hint(self, runner: CliRunner, project_dir: Path) -> None:
        runner.invoke(cli, ["init"])
        result = runner.invoke(cli, ["init"])

        assert_command_failed(result, context="init twice")
        assert_error_message(result, hint="docmirror init --force")

    def test_init_force_overwrites(self, runner: CliRunner, project_dir: Path) -> None:
        config_file = project_dir / "docmirror.toml"
        config_file.write_text("# hand edited\n")

        result = runner.invoke(cli, ["init", "--force"])

        assert_command_success(result)
        assert "[connection]" in config_file.read_text()

    def test_init_quiet(self, runner: CliRunner, project_dir: Path) -> None:
        result = runner.invoke(cli, ["--quiet", "init"])

        assert_command_success(result)
        assert result.output == ""


class TestStatusCommand:
    """Tests for 'docmirror status' command."""

    @patch("docmirror.adapters.factory.ConnectionFactory.create_client")
    @patch("docmirror.adapters.elasticsearch.check_connection", return_value=True)
    def test_status_connected(
        self,
        mock_check: MagicMock,
        mock_create_client: MagicMock,
        runner: CliRunner,
        project_dir: Path,
    ) -> None:
        result = runner.invoke(cli, ["status"])

        assert_command_success(result, context="docmirror status")
        assert_success_indicator(result)
        assert_output_contains(result, "http://localhost:9200", "docmirror")
        mock_check.assert_called_once_with(mock_create_client.return_value)

    @patch("docmirror.adapters.factory.ConnectionFactory.create_client")
    @patch("docmirror.adapters.elasticsearch.check_connection", return_value=False)
    def test_status_unreachable(
        self,
        mock_check: MagicMock,
        mock_create_client: MagicMock,
        runner: CliRunner,
        project_dir: Path,
    ) -> None:
        result = runner.invoke(cli, ["status"])

        assert_command_failed(result, context="status unreachable")
        assert_error_message(result, hint="DOCMIRROR_HOSTS")

    @patch("docmirror.adapters.factory.ConnectionFactory.create_client")
    @patch("docmirror.adapters.elasticsearch.check_connection", return_value=True)
    def test_status_reads_project_config(
        self,
        mock_check: MagicMock,
        mock_create_client: MagicMock,
        runner: CliRunner,
        project_dir: Path,
    ) -> None:
        (project_dir / "docmirror.toml").write_text(
            '[connection]\nhosts = ["http://search:9200"]\ndefault_index = "shop"\n'
        )

        result = runner.invoke(cli, ["status"])

        assert_command_success(result)
        assert_output_contains(result, "http://search:9200", "shop")


class TestReindexCommand:
    """Tests for 'docmirror reindex' command."""

    @pytest.fixture
    def executor(self) -> MagicMock:
        executor = MagicMock()
        executor.get_default_index.return_value = "docmirror"
        return executor

    @pytest.fixture
    def patched_persistence(self, executor: MagicMock):
        with patch(
            "docmirror.adapters.factory.ConnectionFactory.create_persistence",
            return_value=DocumentPersistence(executor),
        ) as mock_create:
            yield mock_create

    @pytest.fixture
    def populated_database(self, database_file: Path) -> Path:
        engine = create_engine(f"sqlite:///{database_file}")
        with Session(engine) as session:
            session.add_all(
                [Article(title=f"Post {i}", body=f"Body {i}") for i in range(3)]
            )
            session.commit()
        engine.dispose()
        return database_file

    @pytest.mark.usefixtures("project_dir", "patched_persistence")
    def test_reindex_in_chunks(
        self, runner: CliRunner, populated_database: Path, executor: MagicMock
    ) -> None:
        """Each chunk is deleted and then saved in one bulk request apiece."""
        result = runner.invoke(
            cli,
            [
                "reindex",
                "tests.fixtures.models:Article",
                "--database-url",
                f"sqlite:///{populated_database}",
                "--chunk-size",
                "2",
            ],
        )

        assert_command_success(result, context="docmirror reindex")
        assert_output_contains(result, "Reindexed 3 Article records")

        bodies = [c.args[0]["body"] for c in executor.bulk_statement.call_args_list]
        assert len(bodies) == 4
        assert [next(iter(line)) for line in bodies[0]] == ["delete", "delete"]
        assert bodies[1][1] == {"title": "Post 0", "body": "Body 0"}
        assert len(bodies[2]) == 1
        assert bodies[3][0] == {"index": {"_id": 3, "_type": "articles", "_index": "blog"}}

    @pytest.mark.usefixtures("project_dir", "patched_persistence")
    def test_reindex_uses_database_url_env(
        self,
        runner: CliRunner,
        populated_database: Path,
        executor: MagicMock,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setenv("DATABASE_URL", f"sqlite:///{populated_database}")

        result = runner.invoke(cli, ["--quiet", "reindex", "tests.fixtures.models:Article"])

        assert_command_success(result)
        # one chunk with the default chunk size
        assert executor.bulk_statement.call_count == 2
        assert "…" not in result.output

    @pytest.mark.usefixtures("project_dir", "patched_persistence")
    def test_reindex_empty_table(
        self, runner: CliRunner, database_file: Path, executor: MagicMock
    ) -> None:
        result = runner.invoke(
            cli,
            ["reindex", "tests.fixtures.models:Article", "-d", f"sqlite:///{database_file}"],
        )

        assert_command_success(result)
        assert_output_contains(result, "Reindexed 0 Article records")
        executor.bulk_statement.assert_not_called()

    @pytest.mark.usefixtures("project_dir", "patched_persistence")
    @pytest.mark.parametrize(
        "model_path",
        ["Article", "tests.fixtures.models:Missing", "tests.no_such_module:Article"],
    )
    def test_reindex_rejects_invalid_model(
        self, runner: CliRunner, database_file: Path, model_path: str
    ) -> None:
        result = runner.invoke(
            cli, ["reindex", model_path, "-d", f"sqlite:///{database_file}"]
        )

        assert_command_failed(result, context=f"reindex {model_path}")
        assert_error_message(result, hint="package.module:ClassName")
        assert_output_contains(result, "Cannot reindex")

    @pytest.mark.usefixtures("project_dir", "patched_persistence")
    def test_reindex_rejects_mapped_class_without_record_contract(
        self, runner: CliRunner, database_file: Path, executor: MagicMock
    ) -> None:
        """A mapped class with build_document() alone is not enough."""
        result = runner.invoke(
            cli,
            ["reindex", "tests.fixtures.models:AuditEntry", "-d", f"sqlite:///{database_file}"],
        )

        assert_command_failed(result)
        assert_error_message(result, hint="package.module:ClassName")
        assert_output_contains(result, "not a searchable record", "exists", "document_type")
        executor.bulk_statement.assert_not_called()

    @pytest.mark.usefixtures("project_dir")
    def test_reindex_requires_database_url(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["reindex", "tests.fixtures.models:Article"])

        assert_command_failed(result, expected_code=2)
        assert_output_contains(result, "--database-url")

    @pytest.mark.usefixtures("project_dir", "patched_persistence")
    def test_reindex_missing_table(self, runner: CliRunner, tmp_path: Path) -> None:
        """Database errors are reported with a hint instead of a traceback."""
        empty_db = tmp_path / "empty.db"

        result = runner.invoke(
            cli, ["reindex", "tests.fixtures.models:Article", "-d", f"sqlite:///{empty_db}"]
        )

        assert_command_failed(result)
        assert_error_message(result, hint="--database-url")


class TestConfigShowCommand:
    """Tests for 'docmirror config show' command."""

    def test_show_defaults(self, runner: CliRunner, project_dir: Path) -> None:
        result = runner.invoke(cli, ["config", "show"])

        assert_command_success(result)
        assert_output_contains(result, "[connection]", "[sync]", 'default_index = "docmirror"')

    def test_show_masks_secrets(
        self, runner: CliRunner, project_dir: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (project_dir / "docmirror.toml").write_text(
            '[connection]\nusername = "elastic"\npassword = "hunter2"\n'
        )
        monkeypatch.setenv("DOCMIRROR_API_KEY", "very-secret-key")

        result = runner.invoke(cli, ["config", "show"])

        assert_command_success(result)
        assert_output_contains(result, 'username = "elastic"', "********")
        assert "hunter2" not in result.output
        assert "very-secret-key" not in result.output

    def test_show_uses_explicit_config(
        self, runner: CliRunner, project_dir: Path, tmp_path: Path
    ) -> None:
        explicit = tmp_path / "ci.toml"
        explicit.write_text("[sync]\nchunk_size = 42\n")

        result = runner.invoke(cli, ["--config", str(explicit), "config", "show"])

        assert_command_success(result)
        assert_output_contains(result, "chunk_size = 42")


class TestVersionOption:
    """Tests for the --version flag."""

    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--version"])

        assert_command_success(result)
        assert_output_contains(result, "docmirror")
