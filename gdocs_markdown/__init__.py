"""
Google Docs to Markdown Export Tool

Downloads Google Docs documents and converts them to Markdown for plain-text
storage and diffing.

Features:
- Headings, title and subtitle, with headings split across styled runs merged
- Bold, italic and linked text runs
- Ordered and unordered lists with nesting
- Tables as pipe tables, inline images, hard line breaks
- Front-matter header with title, document ID and revision ID
- Docs API fetching with OAuth2 token refresh, or saved JSON responses
- Batch export where one failing document never stops the rest

Basic Usage:
    1. Set GOOGLE_DOCS_CLIENT_ID, GOOGLE_DOCS_CLIENT_SECRET and
       GOOGLE_DOCS_REFRESH (or GOOGLE_DOCS_ACCESS), or copy
       config.yaml.example to config.yaml
    2. Run: gdocs-markdown DOCUMENT_ID[:FILENAME] ...
"""

__version__ = "1.0.0"
__description__ = "Google Docs to Markdown export tool"

from .models import (
    BlockItem,
    Document,
    ExportRequest,
    ExportStatus,
    ImageRef,
    InlineElement,
    NamedStyleType,
    Paragraph,
    Table,
    TextRun,
    TextStyle
)
from .converters import MarkdownConverter, convert_document
from .config_loader import ConfigLoader, get_nested
from .logger import setup_logging, ProgressTracker, log_section, log_config

__all__ = [
    # Version info
    '__version__',
    '__description__',

    # Core data models
    'BlockItem',
    'Document',
    'ExportRequest',
    'ExportStatus',
    'ImageRef',
    'InlineElement',
    'NamedStyleType',
    'Paragraph',
    'Table',
    'TextRun',
    'TextStyle',

    # Conversion
    'MarkdownConverter',
    'convert_document',

    # Configuration
    'ConfigLoader',
    'get_nested',

    # Logging
    'setup_logging',
    'ProgressTracker',
    'log_section',
    'log_config',
]
