"""Line-level cleanup passes applied to assembled Markdown."""

import re

LIST_ITEM_PREFIXES = ('1. ', '- ')

# First line after the front-matter block that may be removed
FIRST_COLLAPSIBLE_LINE = 3

BLANK_LINE_RUN_PATTERN = re.compile(r'\n\s*\n\s*\n')


def is_list_item(line: str) -> bool:
    """Check whether a line (ignoring indentation) starts with a list marker."""
    return line.strip().startswith(LIST_ITEM_PREFIXES)


def collapse_list_blank_lines(text: str) -> str:
    """
    Remove blank lines that sit between two list item lines.

    Markdown renderers treat a blank line inside a list as the end of the
    list, so the gap is dropped to keep consecutive items in one list.

    Args:
        text: Assembled Markdown text

    Returns:
        Text with the separating blank lines removed
    """
    lines = text.split('\n')
    lines_to_delete = set()

    for index in range(FIRST_COLLAPSIBLE_LINE, len(lines)):
        if lines[index].strip():
            continue
        previous_line = lines[index - 1]
        next_line = lines[index + 1] if index + 1 < len(lines) else ''
        if is_list_item(previous_line) and is_list_item(next_line):
            lines_to_delete.add(index)

    return '\n'.join(
        line for index, line in enumerate(lines) if index not in lines_to_delete
    )


def normalize_blank_lines(text: str) -> str:
    """Collapse every whitespace run holding three or more newlines to one blank line."""
    return BLANK_LINE_RUN_PATTERN.sub('\n\n', text)


__all__ = ['collapse_list_blank_lines', 'is_list_item', 'normalize_blank_lines']
