"""Base class for async HTTP clients."""

import logging
from typing import Optional, Tuple

import httpx

from ..application.domain import Credentials
from ..application.exceptions import ConfigurationError


class BaseClient:
    """A base client that holds an async client and forwards credentials."""

    def __init__(self, client: httpx.AsyncClient, timeout: float):
        """
        Initializes the base client.

        Args:
            client: An instance of httpx.AsyncClient.
            timeout: Per-request timeout in seconds.
        """
        self.client = client
        self.timeout = timeout
        self.logger = logging.getLogger(self.__class__.__name__)

    def _auth(
        self, credentials: Optional[Credentials]
    ) -> Optional[Tuple[str, str]]:
        """
        Converts optional credentials into an httpx basic-auth tuple.

        Raises:
            ConfigurationError: If the credentials are incomplete or appear
                                to be placeholders.
        """
        if credentials is None:
            return None

        if (
            not credentials.user
            or not credentials.password
            or "YOUR_" in credentials.user.upper()
            or "YOUR_" in credentials.password.upper()
        ):
            raise ConfigurationError(
                f"Credentials for {self.__class__.__name__} are incomplete "
                f"or are placeholders. Please check your config files."
            )

        return (credentials.user, credentials.password)
