"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NoIdentity(DomainError):
    """No authenticated user is available.

    This is a quiescent state rather than a failure: nothing is fetched and
    the dashboard keeps its zero-valued summary.
    """

    def __init__(self, message: str = "No authenticated user"):
        super().__init__(message)


class FetchFailed(DomainError):
    """The remote gateway returned an error for one of the dashboard queries."""

    def __init__(self, message: str, collection: str | None = None):
        super().__init__(message)
        self.message = message
        self.collection = collection


class MalformedRecord(DomainError):
    """A returned row has a field that could not be parsed.

    Raised by the field parsers and collected as a diagnostic by the record
    coercion step; it never aborts an aggregation.
    """

    def __init__(
        self,
        collection: str,
        record_id: object,
        field: str,
        value: object,
        reason: str,
    ):
        self.collection = collection
        self.record_id = record_id
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(
            f"{collection} #{record_id}: field '{field}' ({value!r}) {reason}"
        )


def invalid_month(value: str) -> str:
    """Return message for an unparsable YYYY-MM month string."""
    return f"Invalid month '{value}': expected YYYY-MM"


def invalid_limit(name: str, value: object) -> str:
    """Return message for a display limit that is not a positive integer."""
    return f"{name} must be a positive integer, got {value!r}"
