"""Rendering of inline paragraph elements (text runs and images) to Markdown."""

from typing import Dict, Optional

from ..models import (
    ImageRef,
    ImageReference,
    InlineElement,
    NamedStyleType,
    OtherElement,
    TextRun
)


def format_heading(content: str, style_type: NamedStyleType) -> str:
    """
    Apply the heading marker for a title, subtitle or HEADING_n style.

    HEADING_1 maps to ``##`` because TITLE already owns ``#``.
    """
    if style_type is NamedStyleType.TITLE:
        return f"# {content}"
    if style_type is NamedStyleType.SUBTITLE:
        return f"_{content.strip()}_"

    level = style_type.heading_level
    if level is None:
        return content
    return f"{'#' * (level + 1)} {content}"


def render_text_run(run: TextRun, block_style: Optional[NamedStyleType] = None) -> Optional[str]:
    """
    Render a text run, applying emphasis or link markup.

    Args:
        run: Text run to render
        block_style: Named style of the enclosing paragraph

    Returns:
        Markdown fragment, or None when the run has no content
    """
    content = run.content
    if not content:
        return None

    if block_style is not None and block_style.is_heading:
        return format_heading(content, block_style)

    style = run.style
    if style.bold or style.italic:
        # Keep emphasis markers on the same line as the text
        if content.endswith('\n'):
            content = content[:-1]
        if not content:
            return None

        if style.bold and style.italic:
            return f"**_{content}_**"
        if style.italic:
            return f"_{content}_"
        return f"**{content}**"

    if style.link_url:
        return f"[{content}]({style.link_url})"

    return content


def render_image(image: ImageRef, inline_objects: Optional[Dict[str, ImageReference]] = None) -> str:
    """Render an image tag; unresolved objects produce an empty URL."""
    reference = (inline_objects or {}).get(image.inline_object_id)
    url = reference.content_uri if reference and reference.content_uri else ''
    return f"![img]({url})"


def render_inline(
    element: InlineElement,
    block_style: Optional[NamedStyleType] = None,
    inline_objects: Optional[Dict[str, ImageReference]] = None
) -> Optional[str]:
    """
    Render one inline element to a Markdown fragment.

    Args:
        element: Text run, image reference or other element
        block_style: Named style of the enclosing paragraph
        inline_objects: Document inline object table for image lookups

    Returns:
        Markdown fragment, or None when there is nothing to emit
    """
    if isinstance(element, TextRun):
        return render_text_run(element, block_style)
    if isinstance(element, ImageRef):
        return render_image(element, inline_objects)
    if isinstance(element, OtherElement):
        return None
    raise TypeError(f"Unsupported inline element: {type(element).__name__}")


__all__ = ['format_heading', 'render_image', 'render_inline', 'render_text_run']
