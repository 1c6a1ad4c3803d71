"""Typed exception hierarchy for SharePoint-related errors.

This module defines all custom exceptions used by the SharePoint client.
All exceptions inherit from CanvasPagesError base class for easy catching and
include descriptive messages with context to help with debugging.
"""

from typing import Optional


class CanvasPagesError(Exception):
    """Base exception for all sp-canvas-pages errors.

    Use this to catch any application-level error from the library.
    """
    pass


class SharePointError(CanvasPagesError):
    """Base exception for all SharePoint-related errors."""
    pass


class InvalidCredentialsError(SharePointError):
    """Raised when API credentials are invalid or authentication fails."""

    def __init__(self, user: str, endpoint: str):
        super().__init__(
            f"Access token is invalid (user: {user}, endpoint: {endpoint})"
        )
        self.user = user
        self.endpoint = endpoint


class PageNotFoundError(SharePointError):
    """Raised when a requested page does not exist."""

    def __init__(self, page_ref: str):
        super().__init__(f"Page {page_ref} not found")
        self.page_ref = page_ref


class PageAlreadyExistsError(SharePointError):
    """Raised when creating a page whose file name is already taken."""

    def __init__(self, page_name: str, library: Optional[str] = None):
        if library:
            message = f"A file with the name '{page_name}' already exists in the library '{library}'"
        else:
            message = f"A file with the name '{page_name}' already exists"
        super().__init__(message)
        self.page_name = page_name
        self.library = library


class APIUnreachableError(SharePointError):
    """Raised when the SharePoint API is not available or unreachable."""

    def __init__(self, endpoint: str):
        super().__init__(f"API is not available at {endpoint}")
        self.endpoint = endpoint


class APIAccessError(SharePointError):
    """Raised when API access fails after retries or due to access restrictions."""

    def __init__(self, message: str = "SharePoint API failure (after 3 retries)"):
        super().__init__(message)
