"""Domain exceptions for docmirror.

These exceptions represent contract violations by callers of the document
synchronizer. They are raised before any call reaches the search engine and
should be caught at the application boundary (CLI, web handler) if at all.

Errors raised by the search engine client are never wrapped here; they
propagate to the caller unchanged.
"""


class DocMirrorDomainError(Exception):
    """Base exception for all domain errors.

    Attributes:
        message: User-facing error message.
        hint: Optional actionable suggestion.
    """

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint


class InvalidStateError(DocMirrorDomainError):
    """Raised when a document operation targets a record that does not exist.

    A record that has never been persisted has no stable key, so there is
    nothing meaningful to index, update or remove for it.
    """

    pass
