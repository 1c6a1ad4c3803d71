"""Page store operations for client side pages.

Key classes:
    PageStore: Interface a page document loads from and saves to
    SharePointPageStore: PageStore over the SharePoint REST API
    PageContent: Stored canvas markup and comments flag
    UpdateResult: Result of a field update
    CreateResult: Result of creating a page
"""

from .models import CreateResult, PageContent, UpdateResult
from .page_store import PageStore, SharePointPageStore

__all__ = [
    "PageStore",
    "SharePointPageStore",
    "PageContent",
    "UpdateResult",
    "CreateResult",
]
