"""Google Docs REST API client with OAuth2 token refresh and retry logic."""

import logging
import os
import time
from typing import Any, Dict, Optional
from urllib.parse import quote

import requests
import truststore
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .config_loader import get_nested, has_value

logger = logging.getLogger('gdocs_markdown.client')

# Opt-in: verify TLS against the operating system certificate store
if os.getenv('USE_SYSTEM_CA') in ('1', 'true', 'True', 'TRUE'):
    truststore.inject_into_ssl()
    logger.info("Using system CA certificate store")


class AuthenticationError(Exception):
    """Raised when no usable access token can be obtained."""
    pass


class DocsClient:
    """Google Docs API client with bearer authentication, token refresh and retries."""

    def __init__(
        self,
        base_url: str = 'https://docs.googleapis.com',
        access_token: Optional[str] = None,
        refresh_token: Optional[str] = None,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        token_url: str = 'https://oauth2.googleapis.com/token',
        timeout: float = 30,
        max_retries: int = 3,
        retry_backoff_factor: float = 2.0,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize the client.

        Args:
            base_url: Docs API base URL
            access_token: OAuth2 access token, may be expired or absent
            refresh_token: OAuth2 refresh token used to obtain access tokens
            client_id: OAuth2 client ID for the refresh flow
            client_secret: OAuth2 client secret for the refresh flow
            token_url: OAuth2 token endpoint
            timeout: HTTP request timeout in seconds
            max_retries: Maximum retry attempts for transient errors
            retry_backoff_factor: Exponential backoff factor
            session: Optional preconfigured session
        """
        if not access_token and not refresh_token:
            raise ValueError("DocsClient requires an access_token or a refresh_token")

        self.base_url = base_url.rstrip('/')
        self.access_token = access_token
        self.refresh_token = refresh_token
        self.client_id = client_id
        self.client_secret = client_secret
        self.token_url = token_url
        self.timeout = timeout

        if session is None:
            session = requests.Session()
            retry_strategy = Retry(
                total=max_retries,
                backoff_factor=retry_backoff_factor,
                status_forcelist=[429, 500, 502, 503, 504],
                allowed_methods=["HEAD", "GET", "OPTIONS"]
            )
            adapter = HTTPAdapter(max_retries=retry_strategy)
            session.mount("http://", adapter)
            session.mount("https://", adapter)
        self.session = session

        logger.debug(f"Client configured for {self.base_url} with timeout={timeout}s, "
                     f"max_retries={max_retries}, backoff_factor={retry_backoff_factor}")

    @property
    def can_refresh(self) -> bool:
        return bool(self.refresh_token and self.client_id and self.client_secret)

    def refresh_access_token(self) -> str:
        """
        Exchange the refresh token for a new access token.

        Returns:
            The new access token

        Raises:
            AuthenticationError: If refresh is not configured or is rejected
        """
        if not self.can_refresh:
            raise AuthenticationError(
                "Cannot refresh access token: refresh_token, client_id and client_secret are required"
            )

        logger.debug(f"Refreshing access token via {self.token_url}")
        try:
            response = self.session.post(
                self.token_url,
                data={
                    'grant_type': 'refresh_token',
                    'client_id': self.client_id,
                    'client_secret': self.client_secret,
                    'refresh_token': self.refresh_token,
                },
                timeout=self.timeout
            )
            response.raise_for_status()
            token = response.json().get('access_token')
        except requests.exceptions.RequestException as e:
            raise AuthenticationError(f"Access token refresh failed: {str(e)}") from e
        except ValueError as e:
            raise AuthenticationError("Access token refresh returned invalid JSON") from e

        if not token:
            raise AuthenticationError("Token endpoint response did not contain an access_token")

        self.access_token = token
        logger.info("Access token refreshed")
        return token

    def _make_request(self, method: str, endpoint: str, **kwargs) -> requests.Response:
        """
        Make an authenticated request, refreshing the token once on HTTP 401.

        Raises:
            AuthenticationError: If no valid token can be obtained
            requests.exceptions.HTTPError: For HTTP errors
            requests.exceptions.RequestException: For other request errors
        """
        if not self.access_token:
            self.refresh_access_token()

        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        refreshed = False

        while True:
            headers = dict(kwargs.pop('headers', None) or {})
            headers['Authorization'] = f'Bearer {self.access_token}'

            start_time = time.time()
            logger.debug(f"API Request: {method} {url}")
            try:
                response = self.session.request(method, url, headers=headers, timeout=self.timeout, **kwargs)
            except requests.exceptions.Timeout:
                logger.error(f"Request timeout after {self.timeout}s: {method} {url}")
                raise
            except requests.exceptions.RequestException as e:
                logger.error(f"Request error: {method} {url} - {str(e)}")
                raise

            logger.debug(f"API Response: {response.status_code} {url} ({time.time() - start_time:.3f}s)")

            if response.status_code == 401 and not refreshed and self.can_refresh:
                logger.info("Access token rejected, refreshing")
                response.close()
                self.refresh_access_token()
                refreshed = True
                kwargs['headers'] = headers
                continue

            if response.status_code == 401:
                raise AuthenticationError(f"Unauthorized: {method} {url}")

            if response.status_code >= 400:
                logger.error(f"HTTP Error {response.status_code}: {method} {url}")
                try:
                    error_message = response.json().get('error', {}).get('message')
                    if error_message:
                        logger.error(f"Error details: {error_message}")
                except (ValueError, AttributeError):
                    logger.error(f"Error response: {response.text[:500]}")
                response.raise_for_status()

            return response

    def get_document(self, document_id: str) -> Dict[str, Any]:
        """
        Fetch a document resource by ID.

        Args:
            document_id: Google Docs document ID

        Returns:
            Decoded document resource
        """
        response = self._make_request('GET', f"/v1/documents/{quote(document_id, safe='')}")
        return response.json()

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> 'DocsClient':
        """
        Initialize client from configuration dictionary.

        Unsubstituted ``${VAR}`` placeholders count as unset.
        """
        def setting(path: str, default: Any = None) -> Any:
            return get_nested(config, path) if has_value(config, path) else default

        return cls(
            base_url=setting('google.base_url', 'https://docs.googleapis.com'),
            access_token=setting('google.access_token'),
            refresh_token=setting('google.refresh_token'),
            client_id=setting('google.client_id'),
            client_secret=setting('google.client_secret'),
            token_url=setting('google.token_url', 'https://oauth2.googleapis.com/token'),
            timeout=setting('advanced.request_timeout', 30),
            max_retries=setting('advanced.max_retries', 3),
            retry_backoff_factor=setting('advanced.retry_backoff_factor', 2.0)
        )


__all__ = ['AuthenticationError', 'DocsClient']
