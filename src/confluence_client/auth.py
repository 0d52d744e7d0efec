"""Authentication module for loading Confluence credentials.

Credentials are read from environment variables, optionally populated from a
.env file by python-dotenv. Missing credentials raise InvalidCredentialsError
before any request is made.
"""

import os
from typing import NamedTuple, Optional

from dotenv import load_dotenv

from .errors import InvalidCredentialsError


class Credentials(NamedTuple):
    """Confluence API credentials."""
    url: str
    user: str
    api_token: str


class Authenticator:
    """Loads and validates Confluence credentials from environment variables.

    Required environment variables:
        CONFLUENCE_URL: Confluence instance URL (e.g., https://yourinstance.atlassian.net/wiki)
        CONFLUENCE_USER: Confluence user email address
        CONFLUENCE_API_TOKEN: Confluence API token

    Example:
        >>> auth = Authenticator()
        >>> creds = auth.get_credentials()
        >>> print(f"Connecting to {creds.url}")
    """

    def __init__(self, env_file: Optional[str] = None):
        """Load environment variables from ``env_file`` (default: ./.env)."""
        load_dotenv(dotenv_path=env_file)

    def get_credentials(self) -> Credentials:
        """Get Confluence credentials from environment variables.

        Returns:
            Credentials: A named tuple containing url, user, and api_token

        Raises:
            InvalidCredentialsError: If any required credential is missing
        """
        url = os.getenv('CONFLUENCE_URL')
        user = os.getenv('CONFLUENCE_USER')
        api_token = os.getenv('CONFLUENCE_API_TOKEN')

        if not url or not user or not api_token:
            raise InvalidCredentialsError(
                user=user or "unknown",
                endpoint=url or "unknown"
            )

        return Credentials(url=url.rstrip('/'), user=user, api_token=api_token)
