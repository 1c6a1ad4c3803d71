"""Data models for page store operations."""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class PageContent:
    """Canvas markup and comments flag as stored on a page item.

    Attributes:
        markup: Value of the CanvasContent1 field
        comments_disabled: Value of the CommentsDisabled field
    """

    markup: str
    comments_disabled: bool = False


@dataclass
class UpdateResult:
    """Result of writing to a page item.

    Attributes:
        success: Whether the write succeeded
        page_ref: Server-relative URL of the page file
        fields: Names of the fields that were written
        etag: ETag returned by the server, if any
    """

    success: bool
    page_ref: str
    fields: List[str] = field(default_factory=list)
    etag: Optional[str] = None


@dataclass
class CreateResult:
    """Result of creating a new client side page.

    Attributes:
        page_ref: Server-relative URL of the new page file
        library: Title of the library the page was added to
        title: Display title of the page
        comments_disabled: Comments flag of the new item
    """

    page_ref: str
    library: str
    title: str
    comments_disabled: bool = False
