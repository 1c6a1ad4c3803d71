"""API wrapper for the SharePoint Online REST API.

This module wraps the generic REST client from atlassian-python-api
(AtlassianRestAPI, configured with a bearer token) and provides error
translation from HTTP exceptions to our typed exception hierarchy.
It integrates with the retry logic for handling throttling.
"""

import logging
import re
from typing import Any, Dict, List, Optional

from atlassian.rest_client import AtlassianRestAPI
from requests.exceptions import Timeout, ConnectTimeout, ReadTimeout, ConnectionError

from .auth import Authenticator
from .errors import (
    InvalidCredentialsError,
    PageNotFoundError,
    APIUnreachableError,
    APIAccessError,
)
from .retry_logic import retry_on_rate_limit, _is_rate_limit_error

logger = logging.getLogger(__name__)

ODATA_HEADERS = {
    "Accept": "application/json;odata=nometadata",
    "Content-Type": "application/json;odata=nometadata",
}

# TemplateFileType.ClientSidePage
CLIENT_SIDE_PAGE_TEMPLATE = 3


def _odata_literal(value: str) -> str:
    """Quote a value as an OData string literal."""
    return "'" + value.replace("'", "''") + "'"


class APIWrapper:
    """Wrapper around a REST client for SharePoint list items and files.

    This class provides a thin wrapper over the REST client that:
    1. Handles authentication using the Authenticator
    2. Translates HTTP errors to typed exceptions
    3. Integrates retry logic for 429 throttling
    4. Provides a clean interface for the page item operations

    Example:
        >>> auth = Authenticator()
        >>> api = APIWrapper(auth)
        >>> fields = api.get_list_item_fields("/sites/dev/SitePages/home.aspx", ["Title"])
    """

    def __init__(self, authenticator: Authenticator):
        """Initialize the API wrapper with authentication credentials.

        Args:
            authenticator: Authenticator instance for loading credentials
        """
        self._authenticator = authenticator
        self._client: Optional[AtlassianRestAPI] = None

    def _get_client(self) -> AtlassianRestAPI:
        """Get or create the REST client.

        Returns:
            AtlassianRestAPI: Client bound to the site URL with a bearer token

        Raises:
            InvalidCredentialsError: If credentials are missing
        """
        if self._client is None:
            creds = self._authenticator.get_credentials()
            self._client = AtlassianRestAPI(
                url=creds.url,
                token=creds.access_token,
                timeout=30,
            )
        return self._client

    def _validate_page_ref(self, page_ref: str) -> None:
        """Validate that a page reference is a server-relative URL.

        Raises:
            ValueError: If page_ref is empty or not server-relative
        """
        if not page_ref or not str(page_ref).strip():
            raise ValueError("page_ref cannot be empty")

        if not str(page_ref).startswith('/'):
            raise ValueError(
                f"Invalid page_ref: '{page_ref}'. "
                f"Page references must be server-relative URLs starting with '/'."
            )

    def _sanitize_credentials(self, text: str) -> str:
        """Mask tokens and passwords in error text before it is logged.

        Example:
            >>> api._sanitize_credentials("Authorization: Bearer eyJ0eXAi...")
            "Authorization: ***REDACTED***"
        """
        if not text:
            return text

        sanitized = re.sub(
            r'://([\w.-]+):([\w.-]+)@',
            r'://***:***@',
            text
        )
        sanitized = re.sub(
            r'Authorization:\s*[^\n\r]+',
            'Authorization: ***REDACTED***',
            sanitized,
            flags=re.IGNORECASE
        )
        sanitized = re.sub(
            r'Bearer\s+[^\s\n\r]+',
            'Bearer ***REDACTED***',
            sanitized,
            flags=re.IGNORECASE
        )
        sanitized = re.sub(
            r'(access_?token|token)["\']?\s*[:=]\s*["\']?([^"\'\s&]+)',
            r'\1=***REDACTED***',
            sanitized,
            flags=re.IGNORECASE
        )
        return sanitized

    def _translate_error(self, exception: Exception, operation: str, page_ref: str = "unknown") -> Exception:
        """Translate HTTP exceptions to typed SharePoint exceptions.

        Throttling errors are returned unchanged so the retry logic
        still recognizes them.

        Args:
            exception: The original exception from the REST client
            operation: Description of the operation that failed (for logging)
            page_ref: Page the operation was about, for not-found errors

        Returns:
            Exception: Translated exception (one of our typed exceptions)
        """
        if _is_rate_limit_error(exception):
            return exception

        if isinstance(exception, (Timeout, ConnectTimeout, ReadTimeout, ConnectionError)):
            creds = self._authenticator.get_credentials()
            return APIUnreachableError(endpoint=creds.url)

        status_code = getattr(exception, 'status_code', None)
        response = getattr(exception, 'response', None)
        if status_code is None and response is not None:
            status_code = getattr(response, 'status_code', None)

        if status_code in (401, 403):
            creds = self._authenticator.get_credentials()
            return InvalidCredentialsError(user=creds.user or "unknown", endpoint=creds.url)

        if status_code == 404:
            return PageNotFoundError(page_ref=page_ref)

        safe_error_msg = self._sanitize_credentials(str(exception))
        logger.error(f"API operation failed: {operation} - {safe_error_msg}")
        return APIAccessError(f"SharePoint API failure during {operation}")

    def _item_path(self, page_ref: str) -> str:
        return (
            f"_api/web/getFileByServerRelativePath(decodedUrl={_odata_literal(page_ref)})"
            f"/ListItemAllFields"
        )

    def _root_folder_path(self, library: str) -> str:
        return f"_api/web/lists/getByTitle({_odata_literal(library)})/rootFolder"

    def _merge(self, path: str, properties: Optional[Dict[str, Any]], etag: str = "*") -> Optional[str]:
        """POST a MERGE request and return the new ETag, if any."""
        headers = dict(ODATA_HEADERS)
        headers["X-HTTP-Method"] = "MERGE"
        headers["IF-MATCH"] = etag
        response = self._get_client().post(
            path, data=properties, headers=headers, advanced_mode=True
        )
        response.raise_for_status()
        return response.headers.get("ETag")

    def get_list_item_fields(self, page_ref: str, fields: List[str]) -> Dict[str, Any]:
        """Fetch selected fields of the list item behind a page file.

        Args:
            page_ref: Server-relative URL of the page file
            fields: Internal field names to select

        Returns:
            Dict of field name to value

        Raises:
            InvalidCredentialsError: If credentials are invalid
            PageNotFoundError: If the page doesn't exist
            APIUnreachableError: If the API is unreachable
            APIAccessError: If API access fails after retries
        """
        self._validate_page_ref(page_ref)

        def _fetch():
            try:
                client = self._get_client()
                return client.get(
                    self._item_path(page_ref),
                    params={"$select": ",".join(fields)},
                    headers=ODATA_HEADERS,
                )
            except Exception as e:
                raise self._translate_error(e, f"get_list_item_fields({page_ref})", page_ref) from e

        return retry_on_rate_limit(_fetch) or {}

    def update_list_item(self, page_ref: str, properties: Dict[str, Any], etag: str = "*") -> Optional[str]:
        """Update fields of the list item behind a page file.

        Args:
            page_ref: Server-relative URL of the page file
            properties: Field name to new value
            etag: Value of the IF-MATCH header, "*" to overwrite

        Returns:
            The item's new ETag, if the server sent one

        Raises:
            PageNotFoundError: If the page doesn't exist
            APIAccessError: If the update fails
        """
        self._validate_page_ref(page_ref)

        def _update():
            try:
                return self._merge(self._item_path(page_ref), properties, etag)
            except Exception as e:
                raise self._translate_error(e, f"update_list_item({page_ref})", page_ref) from e

        etag = retry_on_rate_limit(_update)
        logger.info(f"Updated {', '.join(properties)} on {page_ref}")
        return etag

    def set_comments_disabled(self, page_ref: str, disabled: bool) -> None:
        """Turn comments on or off for the list item behind a page file."""
        self._validate_page_ref(page_ref)
        flag = "true" if disabled else "false"

        def _update():
            try:
                self._merge(f"{self._item_path(page_ref)}/SetCommentsDisabled({flag})", None)
            except Exception as e:
                raise self._translate_error(e, f"set_comments_disabled({page_ref})", page_ref) from e

        retry_on_rate_limit(_update)

    def file_exists_in_library(self, library: str, file_name: str) -> bool:
        """Check whether a library's root folder holds a file with this name."""
        def _fetch():
            try:
                client = self._get_client()
                return client.get(
                    f"{self._root_folder_path(library)}/files",
                    params={
                        "$select": "Name",
                        "$filter": f"Name eq {_odata_literal(file_name)}",
                    },
                    headers=ODATA_HEADERS,
                )
            except Exception as e:
                raise self._translate_error(e, f"file_exists_in_library({library}, {file_name})") from e

        result = retry_on_rate_limit(_fetch) or {}
        return len(result.get("value", [])) > 0

    def get_library_root_path(self, library: str) -> str:
        """Server-relative path of a library's root folder."""
        def _fetch():
            try:
                client = self._get_client()
                return client.get(
                    self._root_folder_path(library),
                    params={"$select": "ServerRelativePath"},
                    headers=ODATA_HEADERS,
                )
            except Exception as e:
                raise self._translate_error(e, f"get_library_root_path({library})") from e

        result = retry_on_rate_limit(_fetch) or {}
        return result.get("ServerRelativePath", {}).get("DecodedUrl", "")

    def add_template_file(self, library: str, page_ref: str) -> Dict[str, Any]:
        """Add a client side page template file at page_ref in a library."""
        self._validate_page_ref(page_ref)

        def _add():
            try:
                client = self._get_client()
                return client.post(
                    f"{self._root_folder_path(library)}/files/AddTemplateFile("
                    f"urlOfFile={_odata_literal(page_ref)},"
                    f"templateFileType={CLIENT_SIDE_PAGE_TEMPLATE})",
                    headers=ODATA_HEADERS,
                )
            except Exception as e:
                raise self._translate_error(e, f"add_template_file({page_ref})", page_ref) from e

        return retry_on_rate_limit(_add) or {}

    def get_client_side_webparts(self) -> List[Dict[str, Any]]:
        """List the client side components available on the site."""
        def _fetch():
            try:
                client = self._get_client()
                return client.get("_api/web/GetClientSideWebParts", headers=ODATA_HEADERS)
            except Exception as e:
                raise self._translate_error(e, "get_client_side_webparts()") from e

        result = retry_on_rate_limit(_fetch) or {}
        return result.get("value", [])
