"""Crowdin app error definitions."""

from typing import Optional


class CrowdinAppError(Exception):
    """Base exception for Crowdin integration errors."""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause


class AuthenticationMissingError(CrowdinAppError):
    """No JWT was presented with the request."""


class InvalidTokenError(CrowdinAppError):
    """The presented JWT failed verification."""


class TokenRefreshError(CrowdinAppError):
    """Crowdin refused to issue an access token."""


class StringNotFoundError(CrowdinAppError):
    """The requested source string does not exist."""


class CrowdinApiError(CrowdinAppError):
    """Unexpected response from the Crowdin API."""

    def __init__(self, message: str, status_code: Optional[int] = None, cause: Optional[Exception] = None):
        super().__init__(message, cause)
        self.status_code = status_code
