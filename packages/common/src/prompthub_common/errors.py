"""Custom error types for prompthub.

All errors follow the "fail fast" principle with explicit messages.
An empty search result is not an error.
"""


class PromptHubError(Exception):
    """Base exception for all prompthub errors."""

    pass


class ValidationError(PromptHubError, ValueError):
    """Malformed search request or filter input."""

    pass


class RetrievalError(PromptHubError):
    """Backend unreachable or query rejected while retrieving prompts.

    Never retried inside the retrieval layer; the caller decides whether
    to retry or fall back.
    """

    pass


class StorageError(PromptHubError):
    """Error managing the database connection pool."""

    pass
