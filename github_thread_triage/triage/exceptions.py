"""Custom exceptions for the triage module."""


class ThreadListingError(Exception):
    """Raised when the unread notification threads cannot be listed at all."""

    def __init__(self, cause: Exception) -> None:
        """Initializes the exception with the underlying transport error."""
        super().__init__(f"Failed to list unread threads: {cause}")
        self.cause = cause
