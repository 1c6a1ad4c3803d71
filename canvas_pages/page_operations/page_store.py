"""Backing stores for client side page content.

A page store reads and writes the two list item fields a page document
needs (the canvas markup and the comments flag) and creates new pages.
SharePointPageStore implements it over the SharePoint REST API.
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from ..canvas.models import ComponentDefinition, PageLayoutType, PromotedState
from ..sharepoint_client.api_wrapper import APIWrapper
from ..sharepoint_client.auth import Authenticator
from ..sharepoint_client.errors import PageAlreadyExistsError
from .models import CreateResult, PageContent, UpdateResult

logger = logging.getLogger(__name__)

CANVAS_FIELD = "CanvasContent1"
COMMENTS_FIELD = "CommentsDisabled"

CLIENT_SIDE_APPLICATION_ID = "b6917cb1-93a0-4b97-a84d-7cf49975d4ec"
CLIENT_SIDE_PAGE_CONTENT_TYPE_ID = "0x0101009D1CB255DA76424F860D91F20E6C4118"
DEFAULT_BANNER_IMAGE_URL = "/_layouts/15/images/sitepagethumbnail.png"


def combine_paths(*paths: str) -> str:
    """Join URL path segments with single slashes."""
    parts = [p.strip("/") for p in paths if p and p.strip("/")]
    prefix = "/" if paths and paths[0].startswith("/") else ""
    return prefix + "/".join(parts)


class PageStore(ABC):
    """Where a page document's markup and comments flag live."""

    @abstractmethod
    def fetch_page_content(self, page_ref: str) -> PageContent:
        """Read the stored canvas markup and comments flag."""

    @abstractmethod
    def write_page_content(self, page_ref: str, markup: str) -> UpdateResult:
        """Replace the stored canvas markup."""

    @abstractmethod
    def set_comments_disabled(self, page_ref: str, disabled: bool) -> UpdateResult:
        """Turn comments off (True) or on (False)."""

    @abstractmethod
    def create_page(
        self,
        library: str,
        page_name: str,
        title: str,
        layout_type: PageLayoutType = PageLayoutType.ARTICLE,
    ) -> CreateResult:
        """Create an empty client side page file."""


class SharePointPageStore(PageStore):
    """Page store backed by a SharePoint site.

    Usage:
        store = SharePointPageStore()
        content = store.fetch_page_content("/sites/dev/SitePages/home.aspx")
    """

    def __init__(self, api: Optional[APIWrapper] = None):
        """Initialize the store with an optional API wrapper.

        Args:
            api: APIWrapper instance. If None, creates one with
                 default authentication.
        """
        if api is None:
            api = APIWrapper(Authenticator())
        self.api = api

    def fetch_page_content(self, page_ref: str) -> PageContent:
        """Read CanvasContent1 and CommentsDisabled of a page.

        Raises:
            PageNotFoundError: If the page doesn't exist
            APIAccessError: If the API call fails
        """
        logger.debug(f"Fetching canvas content: {page_ref}")
        item = self.api.get_list_item_fields(page_ref, [CANVAS_FIELD, COMMENTS_FIELD])
        return PageContent(
            markup=item.get(CANVAS_FIELD) or "",
            comments_disabled=bool(item.get(COMMENTS_FIELD)),
        )

    def write_page_content(self, page_ref: str, markup: str) -> UpdateResult:
        etag = self.api.update_list_item(page_ref, {CANVAS_FIELD: markup})
        return UpdateResult(success=True, page_ref=page_ref, fields=[CANVAS_FIELD], etag=etag)

    def set_comments_disabled(self, page_ref: str, disabled: bool) -> UpdateResult:
        self.api.set_comments_disabled(page_ref, disabled)
        return UpdateResult(success=True, page_ref=page_ref, fields=[COMMENTS_FIELD])

    def create_page(
        self,
        library: str,
        page_name: str,
        title: str,
        layout_type: PageLayoutType = PageLayoutType.ARTICLE,
    ) -> CreateResult:
        """Create a blank client side page in a library.

        Args:
            library: Title of the library, e.g. "Site Pages"
            page_name: File name of the page, such as "page.aspx"
            title: Display title of the page
            layout_type: Page layout

        Returns:
            CreateResult with the new page's server-relative URL

        Raises:
            PageAlreadyExistsError: If a file named page_name already exists
        """
        if not page_name or not page_name.strip():
            raise ValueError("page_name cannot be empty")

        if self.api.file_exists_in_library(library, page_name):
            raise PageAlreadyExistsError(page_name, library)

        root = self.api.get_library_root_path(library)
        page_ref = combine_paths("/", root, page_name)

        self.api.add_template_file(library, page_ref)
        self.api.update_list_item(page_ref, {
            "BannerImageUrl": {"Url": DEFAULT_BANNER_IMAGE_URL},
            CANVAS_FIELD: "",
            "ClientSideApplicationId": CLIENT_SIDE_APPLICATION_ID,
            "ContentTypeId": CLIENT_SIDE_PAGE_CONTENT_TYPE_ID,
            "PageLayoutType": PageLayoutType(layout_type).value,
            "PromotedState": int(PromotedState.NOT_PROMOTED),
            "Title": title,
        })

        item = self.api.get_list_item_fields(page_ref, [COMMENTS_FIELD])
        logger.info(f"Created page {page_ref} in library '{library}'")
        return CreateResult(
            page_ref=page_ref,
            library=library,
            title=title,
            comments_disabled=bool(item.get(COMMENTS_FIELD)),
        )

    def get_client_side_webparts(self) -> List[ComponentDefinition]:
        """Components that can be added to pages on this site."""
        return [ComponentDefinition.from_api(c) for c in self.api.get_client_side_webparts()]
