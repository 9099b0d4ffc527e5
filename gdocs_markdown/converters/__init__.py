"""Converters package for Google Docs to Markdown conversion.

The conversion pipeline:
1. Inline rendering of text runs (emphasis, links) and images
2. Block rendering of paragraphs, list items, headings and tables
3. Document assembly with front matter and hard-break substitution
4. Post-processing: list gap removal and blank-line normalization
"""

from .block_renderer import BlockRenderer, substitute_hard_breaks
from .inline_renderer import format_heading, render_inline
from .markdown_converter import MarkdownConverter, convert_document
from .whitespace import collapse_list_blank_lines, normalize_blank_lines

__all__ = [
    'convert_document',
    'MarkdownConverter',
    'BlockRenderer',
    'render_inline',
    'format_heading',
    'substitute_hard_breaks',
    'collapse_list_blank_lines',
    'normalize_blank_lines'
]
