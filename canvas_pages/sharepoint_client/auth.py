"""Authentication module for loading SharePoint credentials.

This module handles loading SharePoint Online credentials from environment
variables using python-dotenv. It validates that all required credentials
are present and raises appropriate errors if any are missing.
"""

import os
from typing import NamedTuple

from dotenv import load_dotenv

from .errors import InvalidCredentialsError


class Credentials(NamedTuple):
    """SharePoint API credentials."""
    url: str
    user: str
    access_token: str


class Authenticator:
    """Loads and validates SharePoint credentials from environment variables.

    Credentials are loaded from a .env file using python-dotenv and are never
    cached or logged.

    Environment variables:
        SHAREPOINT_SITE_URL: Site URL (e.g., https://contoso.sharepoint.com/sites/dev)
        SHAREPOINT_ACCESS_TOKEN: OAuth bearer token for the site
        SHAREPOINT_USER: Optional account name, only used in error messages

    Raises:
        InvalidCredentialsError: If a required credential is missing

    Example:
        >>> auth = Authenticator()
        >>> creds = auth.get_credentials()
        >>> print(f"Connecting to {creds.url}")
    """

    def __init__(self):
        """Initialize the authenticator by loading environment variables from .env file."""
        load_dotenv()

    def get_credentials(self) -> Credentials:
        """Get SharePoint credentials from environment variables.

        Returns:
            Credentials: A named tuple containing url, user, and access_token

        Raises:
            InvalidCredentialsError: If any required credential is missing
        """
        url = os.getenv('SHAREPOINT_SITE_URL')
        user = os.getenv('SHAREPOINT_USER', '')
        access_token = os.getenv('SHAREPOINT_ACCESS_TOKEN')

        if not url or not access_token:
            raise InvalidCredentialsError(
                user=user if user else "unknown",
                endpoint=url if url else "unknown"
            )

        return Credentials(url=url.rstrip('/'), user=user, access_token=access_token)
