"""Abstract base fetcher interface and fetch errors."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from ..models import Document


class FetcherError(Exception):
    """Base exception for fetcher-related errors."""
    pass


class DocumentNotFoundError(FetcherError):
    """The source has no document with the requested ID."""
    pass


class BaseFetcher(ABC):
    """Abstract base class for document sources."""

    def __init__(self, config: Dict[str, Any], logger: Optional[logging.Logger] = None):
        """
        Initialize base fetcher with configuration and logger.

        Args:
            config: Configuration dictionary
            logger: Logger instance (optional, uses module logger if not provided)
        """
        self.config = config
        self.logger = logger or logging.getLogger('gdocs_markdown.fetcher')

    @abstractmethod
    def fetch_document_data(self, document_id: str) -> Dict[str, Any]:
        """
        Fetch the raw document resource.

        Args:
            document_id: Google Docs document ID

        Returns:
            Decoded ``documents.get`` response

        Raises:
            FetcherError: If the document cannot be retrieved
        """
        pass

    def fetch_document(self, document_id: str) -> Document:
        """
        Fetch a document and parse it into a Document snapshot.

        Raises:
            FetcherError: If the document cannot be retrieved or parsed
        """
        data = self.fetch_document_data(document_id)
        if not isinstance(data, dict):
            raise FetcherError(f"Document {document_id} is not a JSON object")

        document = Document.from_dict(data)
        self.logger.debug(
            f"Fetched document {document_id} '{document.title}' ({len(document.body)} blocks)"
        )
        return document


__all__ = ['BaseFetcher', 'DocumentNotFoundError', 'FetcherError']
