"""Document-level Markdown assembly for Google Docs documents."""

import logging
from typing import Any, Dict, Optional, Union

from ..models import Document
from .block_renderer import BlockRenderer, substitute_hard_breaks
from .whitespace import collapse_list_blank_lines, normalize_blank_lines

logger = logging.getLogger('gdocs_markdown.converters.markdown_converter')


class MarkdownConverter:
    """
    Converts a Document snapshot into Markdown text.

    The output starts with a front-matter block carrying the title and
    identifiers, followed by every body block in reading order. Conversion
    never mutates the document and keeps no state between calls.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger('gdocs_markdown.converters.markdown_converter')

    def convert(self, document: Union[Document, Dict[str, Any]]) -> str:
        """
        Convert a document to Markdown.

        Args:
            document: Document snapshot or raw Docs API document resource

        Returns:
            Markdown text ending with a newline
        """
        if isinstance(document, dict):
            document = Document.from_dict(document)

        self.logger.debug(
            f"Converting document {document.document_id} ({len(document.body)} blocks)"
        )

        renderer = BlockRenderer(
            lists=document.lists,
            inline_objects=document.inline_objects,
            logger=self.logger
        )

        parts = [self.render_front_matter(document)]
        for block in document.body:
            parts.append(substitute_hard_breaks(renderer.render(block)))

        return self._post_process_markdown(''.join(parts))

    @staticmethod
    def render_front_matter(document: Document) -> str:
        """Build the YAML-style header with title and identifiers."""
        return (
            "---\n"
            f"title: {document.title or ''}\n"
            f"documentId: {document.document_id}\n"
            f"revisionId: {document.revision_id}\n"
            "---\n\n"
        )

    def _post_process_markdown(self, markdown: str) -> str:
        """Apply list gap removal and blank-line normalization."""
        # Blank-line runs are collapsed first so a triple newline between
        # list items leaves a single blank line the collapser can remove
        markdown = normalize_blank_lines(markdown)
        markdown = collapse_list_blank_lines(markdown)
        return normalize_blank_lines(markdown + '\n')


def convert_document(document: Union[Document, Dict[str, Any]], logger: Optional[logging.Logger] = None) -> str:
    """Convenience wrapper around MarkdownConverter.convert."""
    return MarkdownConverter(logger=logger).convert(document)


__all__ = ['MarkdownConverter', 'convert_document']
