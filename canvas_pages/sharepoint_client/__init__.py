"""SharePoint client library for client side pages.

This package provides Python abstractions over the SharePoint REST API
needed to read and write the canvas content of modern pages.
"""

from .errors import (
    CanvasPagesError,
    SharePointError,
    InvalidCredentialsError,
    PageNotFoundError,
    PageAlreadyExistsError,
    APIUnreachableError,
    APIAccessError,
)

__all__ = [
    "CanvasPagesError",
    "SharePointError",
    "InvalidCredentialsError",
    "PageNotFoundError",
    "PageAlreadyExistsError",
    "APIUnreachableError",
    "APIAccessError",
]
