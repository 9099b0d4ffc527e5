"""Block-level rendering of paragraphs, list items and tables."""

import logging
from typing import Dict, List, Optional

from ..models import (
    BlockItem,
    ImageRef,
    ImageReference,
    ListDefinition,
    ListMembership,
    OtherBlock,
    Paragraph,
    Table,
    TextRun
)
from .inline_renderer import render_image, render_inline

# Level-0 glyph formats of numbered lists
ORDERED_GLYPH_FORMATS = ('[%0]', '%0.')

ORDERED_MARKER = '1. '
UNORDERED_MARKER = '- '
INDENT = '  '

HARD_BREAK = '\v'
HARD_BREAK_MARKUP = '<br />'


def substitute_hard_breaks(text: str) -> str:
    """Replace vertical-tab hard returns with an explicit line-break tag."""
    return text.replace(HARD_BREAK, HARD_BREAK_MARKUP)


class BlockRenderer:
    """Renders block items of one document using its list and inline object tables."""

    def __init__(
        self,
        lists: Optional[Dict[str, ListDefinition]] = None,
        inline_objects: Optional[Dict[str, ImageReference]] = None,
        logger: Optional[logging.Logger] = None
    ):
        self.lists = lists or {}
        self.inline_objects = inline_objects or {}
        self.logger = logger or logging.getLogger('gdocs_markdown.converters.block_renderer')

    def render(self, block: BlockItem) -> str:
        """
        Render one top-level block item.

        Args:
            block: Paragraph, table or other structural element

        Returns:
            Markdown for the block, including its trailing line breaks
        """
        if isinstance(block, Paragraph):
            return self.render_paragraph(block)
        if isinstance(block, Table):
            return self.render_table(block)
        if isinstance(block, OtherBlock):
            self.logger.debug(f"Skipping {block.kind} block")
            return ''
        raise TypeError(f"Unsupported block item: {type(block).__name__}")

    def render_paragraph(self, paragraph: Paragraph) -> str:
        """
        Render a paragraph with its list marker and line termination.

        List items get one extra newline and other paragraphs two. Gaps this
        leaves between consecutive list items are removed during
        post-processing, so only the end of a list keeps its blank line.
        """
        text = ''
        if paragraph.bullet:
            text += self.list_marker(paragraph.bullet)

        text += self.render_paragraph_content(paragraph)

        text += '\n' if paragraph.bullet else '\n\n'
        return text

    def render_paragraph_content(self, paragraph: Paragraph) -> str:
        """
        Render the inline elements of a paragraph without list marker or line termination.

        Heading paragraphs are folded into a single heading line no matter
        how many runs the heading text is split across.
        """
        if paragraph.is_heading:
            return self._render_heading(paragraph)

        fragments: List[str] = []
        for element in paragraph.elements:
            if isinstance(element, TextRun) and (not element.content or element.content == '\n'):
                continue
            fragment = render_inline(element, paragraph.style_type, self.inline_objects)
            if fragment:
                fragments.append(fragment)
        return ''.join(fragments)

    def _render_heading(self, paragraph: Paragraph) -> str:
        heading_text = ''.join(
            element.content for element in paragraph.elements
            if isinstance(element, TextRun)
        )
        text = render_inline(TextRun(content=heading_text), paragraph.style_type) or ''

        for element in paragraph.elements:
            if isinstance(element, ImageRef):
                text += render_image(element, self.inline_objects)
        return text

    def list_marker(self, bullet: ListMembership) -> str:
        """
        Select the indented list marker for a list item.

        Numbered lists always use ``1.``; Markdown renderers renumber them.
        """
        definition = self.lists.get(bullet.list_id)
        if definition is None:
            self.logger.debug(f"Unknown list '{bullet.list_id}', using unordered marker")
            glyph_format = ''
        else:
            glyph_format = definition.glyph_format(0)

        padding = INDENT * bullet.nesting_level
        if glyph_format in ORDERED_GLYPH_FORMATS:
            return f"{padding}{ORDERED_MARKER}"
        return f"{padding}{UNORDERED_MARKER}"

    def render_table(self, table: Table) -> str:
        """
        Render a table as a Markdown pipe table with a blank header row.

        Every paragraph of every cell in a row becomes one column entry, so
        multi-paragraph cells spread over several entries.
        """
        if not table.rows:
            return ''

        column_count = len(table.rows[0].cells)
        text = f"|{'|'.join([''] * column_count)}|\n"
        text += f"|{'|'.join(['-'] * column_count)}|\n"

        for row in table.rows:
            entries = [
                self.render_paragraph_content(paragraph).strip()
                for cell in row.cells
                for paragraph in cell.content
            ]
            text += f"| {' | '.join(entries)} |\n"

        return text


__all__ = ['BlockRenderer', 'substitute_hard_breaks']
