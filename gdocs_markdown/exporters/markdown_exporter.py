"""Markdown file sink: filename derivation and UTF-8 file output."""

import hashlib
import logging
import re
from pathlib import Path
from typing import Any, Dict, Optional

from ..models import Document


class ExportError(Exception):
    """Base exception for export failures of a single document."""
    pass


class MissingTitleError(ExportError):
    """Document has no title and no filename override was given."""
    pass


class MarkdownExporter:
    """
    Writes converted documents to Markdown files.

    Files land in the configured output directory, named by the explicit
    override or by the document title with a ``.md`` suffix.
    """

    # Path separators would turn a title into a nested path
    UNSAFE_FILENAME_PATTERN = re.compile(r'[/\\]')

    def __init__(self, config: Dict[str, Any], logger: Optional[logging.Logger] = None, output_dir: Optional[str] = None):
        """
        Initialize the markdown exporter.

        Args:
            config: Configuration dictionary with export settings
            logger: Logger instance
            output_dir: Optional output directory override (takes precedence over config)
        """
        self.config = config
        self.logger = logger or logging.getLogger('gdocs_markdown.exporters.markdown_exporter')

        export_config = config.get('export', {})
        self.output_directory = Path(output_dir) if output_dir else Path(export_config.get('output_directory') or '.')
        self.overwrite = export_config.get('overwrite', True)

        self.stats = {
            'total_documents_exported': 0,
            'total_documents_unchanged': 0,
            'total_documents_skipped': 0,
            'total_bytes_written': 0
        }

    def resolve_filename(self, document: Document, filename: Optional[str] = None) -> str:
        """
        Derive the output filename for a document.

        Args:
            document: Converted document
            filename: Explicit filename override

        Returns:
            Filename relative to the output directory

        Raises:
            MissingTitleError: If there is no override and no title
        """
        if filename:
            return filename

        title = (document.title or '').strip()
        if not title:
            raise MissingTitleError(f"Title not found for document {document.document_id}")

        return f"{self.UNSAFE_FILENAME_PATTERN.sub('-', title)}.md"

    def export_document(self, document: Document, markdown: str, filename: Optional[str] = None) -> Optional[Path]:
        """
        Write a document's Markdown to disk.

        Args:
            document: Converted document, used for filename derivation
            markdown: Rendered Markdown text
            filename: Explicit filename override

        Returns:
            Path of the file, or None when an existing file was kept

        Raises:
            MissingTitleError: If no filename can be derived
            ExportError: If the file cannot be written
        """
        path = self.output_directory / self.resolve_filename(document, filename)
        data = markdown.encode('utf-8')

        if path.exists():
            if not self.overwrite:
                self.logger.info(f"Skipping existing file {path} (overwrite disabled)")
                self.stats['total_documents_skipped'] += 1
                return None

            if path.is_file() and _checksum(path.read_bytes()) == _checksum(data):
                self.logger.info(f"Document {document.document_id} unchanged: {path}")
                self.stats['total_documents_unchanged'] += 1
                return path

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            raise ExportError(f"Failed to write {path}: {str(e)}") from e

        self.stats['total_documents_exported'] += 1
        self.stats['total_bytes_written'] += len(data)
        self.logger.info(f"Wrote document {document.document_id} to {path} ({_format_bytes(len(data))})")
        return path

    def get_stats(self) -> Dict[str, Any]:
        return self.stats.copy()


def _checksum(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def _format_bytes(bytes_val: float) -> str:
    """Format bytes to human-readable string."""
    if bytes_val == 0:
        return "0 B"

    for unit in ['B', 'KB', 'MB']:
        if bytes_val < 1024.0:
            return f"{bytes_val:.1f} {unit}"
        bytes_val /= 1024.0

    return f"{bytes_val:.1f} GB"


__all__ = ['ExportError', 'MarkdownExporter', 'MissingTitleError']
