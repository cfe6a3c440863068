"""CLI error handling with actionable hints.

Provides consistent error formatting and common error factory functions
for all docmirror CLI commands.
"""

from typing import NoReturn

import click


class DocMirrorCliError(click.ClickException):
    """CLI error with actionable hint for users.

    Attributes:
        message: The primary error message.
        hint: Optional actionable suggestion for the user.

    Example:
        raise DocMirrorCliError(
            "Cannot reach Elasticsearch",
            hint="Check [connection] hosts in docmirror.toml",
        )
    """

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint

    def format_message(self) -> str:
        """Format the error message with hint if present."""
        msg = self.message
        if self.hint:
            msg += f"\nHint: {self.hint}"
        return msg


def connection_failed_error(hosts: list[str]) -> NoReturn:
    """Raise error when the cluster cannot be reached.

    Args:
        hosts: The configured node URLs.

    Raises:
        DocMirrorCliError: Always raises with a connection hint.
    """
    raise DocMirrorCliError(
        f"Cannot reach Elasticsearch at {', '.join(hosts)}",
        hint="Check [connection] hosts and credentials, or set DOCMIRROR_HOSTS",
    )


def invalid_model_error(model_path: str, reason: str) -> NoReturn:
    """Raise error when a model path cannot be used for reindexing.

    Args:
        model_path: The 'module:Class' path given on the command line.
        reason: Why the model was rejected.

    Raises:
        DocMirrorCliError: Always raises with a format hint.
    """
    raise DocMirrorCliError(
        f"Cannot reindex '{model_path}': {reason}",
        hint="Pass a mapped SearchableMixin class as 'package.module:ClassName'",
    )


def config_exists_error(path: str) -> NoReturn:
    """Raise error when init would overwrite an existing config.

    Args:
        path: Path of the existing config file.

    Raises:
        DocMirrorCliError: Always raises with a --force hint.
    """
    raise DocMirrorCliError(
        f"{path} already exists",
        hint="Use 'docmirror init --force' to overwrite it",
    )
