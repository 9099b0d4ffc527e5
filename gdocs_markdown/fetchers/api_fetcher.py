"""Fetcher retrieving documents from the Google Docs REST API."""

import logging
from typing import Any, Dict, Optional

import requests

from ..docs_client import AuthenticationError, DocsClient
from .base_fetcher import BaseFetcher, DocumentNotFoundError, FetcherError


class ApiFetcher(BaseFetcher):
    """Fetches documents through an authenticated DocsClient."""

    def __init__(
        self,
        config: Dict[str, Any],
        logger: Optional[logging.Logger] = None,
        client: Optional[DocsClient] = None
    ):
        super().__init__(config, logger)
        self.client = client or DocsClient.from_config(config)

    def fetch_document_data(self, document_id: str) -> Dict[str, Any]:
        self.logger.info(f"Downloading document {document_id}")
        try:
            return self.client.get_document(document_id)
        except AuthenticationError as e:
            raise FetcherError(f"Authentication failed for document {document_id}: {str(e)}") from e
        except requests.exceptions.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else None
            if status_code == 404:
                raise DocumentNotFoundError(f"Document not found: {document_id}") from e
            raise FetcherError(f"HTTP {status_code} while fetching document {document_id}") from e
        except requests.exceptions.RequestException as e:
            raise FetcherError(f"Request failed for document {document_id}: {str(e)}") from e
        except ValueError as e:
            raise FetcherError(f"Invalid JSON returned for document {document_id}") from e


__all__ = ['ApiFetcher']
