"""Fetcher reading saved ``documents.get`` responses from a local directory."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from .base_fetcher import BaseFetcher, DocumentNotFoundError, FetcherError


class JsonFetcher(BaseFetcher):
    """Loads ``<document_id>.json`` files from the configured export directory."""

    def __init__(self, config: Dict[str, Any], logger: Optional[logging.Logger] = None):
        super().__init__(config, logger)
        export_path = config.get('google', {}).get('json_export_path')
        if not export_path:
            raise ValueError("google.json_export_path is required for json mode")
        self.export_path = Path(export_path)

    def fetch_document_data(self, document_id: str) -> Dict[str, Any]:
        path = self.export_path / f"{document_id}.json"
        if not path.is_file():
            raise DocumentNotFoundError(f"No JSON export for document {document_id} at {path}")

        self.logger.info(f"Loading document {document_id} from {path}")
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise FetcherError(f"Invalid JSON in {path}: {str(e)}") from e
        except OSError as e:
            raise FetcherError(f"Failed to read {path}: {str(e)}") from e


__all__ = ['JsonFetcher']
