"""Confluence credentials taken from the process environment.

A .env file in the working directory is loaded first with python-dotenv. The
user name is optional: without one, the token is sent as a personal access
token (Bearer) instead of HTTP Basic credentials.
"""

import os
from typing import NamedTuple, Optional

from dotenv import load_dotenv

from .errors import InvalidCredentialsError


class Credentials(NamedTuple):
    """Where to publish and how to authenticate."""
    url: str
    user: Optional[str]
    api_token: str


class Authenticator:
    """Reads CONFLUENCE_URL, CONFLUENCE_USER and CONFLUENCE_API_TOKEN.

    The token may be a password, an API token or a personal access token.
    Values are read on every call and never logged.

    Example:
        >>> credentials = Authenticator().get_credentials()
        >>> credentials.user is None  # PAT authentication
        True
    """

    def __init__(self):
        load_dotenv()

    def get_credentials(self) -> Credentials:
        """Return the configured credentials.

        Raises:
            InvalidCredentialsError: If the URL or the token is missing
        """
        url = os.getenv('CONFLUENCE_URL')
        user = os.getenv('CONFLUENCE_USER') or None
        token = os.getenv('CONFLUENCE_API_TOKEN')

        if not url or not token:
            raise InvalidCredentialsError(user=user or "unknown", endpoint=url or "unknown")

        return Credentials(url=url, user=user, api_token=token)
