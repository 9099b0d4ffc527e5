"""Markdown export package.

Writes converted documents to local Markdown files, deriving filenames from
an explicit override or the document title.
"""

from .markdown_exporter import ExportError, MarkdownExporter, MissingTitleError

__all__ = [
    'ExportError',
    'MarkdownExporter',
    'MissingTitleError'
]
