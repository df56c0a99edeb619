"""Exceptions raised by the newsletter digest."""


class DigestError(Exception):
    """Base class for all digest errors."""


class UnsupportedAuthMode(DigestError):
    """Raised when an auth flow other than application-only is requested."""


class AuthError(DigestError):
    """Raised when the credential exchange is rejected or fails."""


class NotAuthenticated(DigestError):
    """Raised when a search is attempted without an authenticated session."""


class SearchError(DigestError):
    """Raised when a search page cannot be fetched or decoded.

    Args:
        message: Human-readable description.
        max_id: Cursor of the page that failed, or None for the first page.
    """

    def __init__(self, message: str, *, max_id: int | None = None) -> None:
        super().__init__(message)
        self.max_id = max_id


class CacheError(DigestError):
    """Raised when cached tweet files cannot be read."""
