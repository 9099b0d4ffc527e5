"""Data models for the Google Docs to Markdown export pipeline."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Union

logger = logging.getLogger('gdocs_markdown.models')


class NamedStyleType(Enum):
    """Paragraph named styles that affect Markdown output."""
    NORMAL_TEXT = "NORMAL_TEXT"
    TITLE = "TITLE"
    SUBTITLE = "SUBTITLE"
    HEADING_1 = "HEADING_1"
    HEADING_2 = "HEADING_2"
    HEADING_3 = "HEADING_3"
    HEADING_4 = "HEADING_4"
    HEADING_5 = "HEADING_5"
    HEADING_6 = "HEADING_6"

    @property
    def is_heading(self) -> bool:
        """True for title, subtitle and HEADING_n styles."""
        return self is not NamedStyleType.NORMAL_TEXT

    @property
    def heading_level(self) -> Optional[int]:
        """Numeric level of a HEADING_n style, None otherwise."""
        if self.value.startswith('HEADING_'):
            return int(self.value.split('_')[1])
        return None

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional['NamedStyleType']:
        """Map an API style name to a member; unknown names map to None."""
        if not value:
            return None
        try:
            return cls(value)
        except ValueError:
            logger.debug(f"Unrecognized named style type: {value}")
            return None


@dataclass(frozen=True)
class TextStyle:
    bold: bool = False
    italic: bool = False
    link_url: Optional[str] = None


@dataclass(frozen=True)
class TextRun:
    """A run of text sharing one text style."""
    content: str = ''
    style: TextStyle = field(default_factory=TextStyle)


@dataclass(frozen=True)
class ImageRef:
    """Reference to an embedded image by inline object ID."""
    inline_object_id: str


@dataclass(frozen=True)
class OtherElement:
    """Any paragraph element that is not rendered (page breaks, equations, ...)."""
    kind: str = 'unknown'


InlineElement = Union[TextRun, ImageRef, OtherElement]


@dataclass(frozen=True)
class ListMembership:
    list_id: str
    nesting_level: int = 0


@dataclass(frozen=True)
class Paragraph:
    elements: List[InlineElement] = field(default_factory=list)
    style_type: Optional[NamedStyleType] = None
    bullet: Optional[ListMembership] = None

    @property
    def is_heading(self) -> bool:
        return self.style_type is not None and self.style_type.is_heading


@dataclass(frozen=True)
class TableCell:
    content: List[Paragraph] = field(default_factory=list)


@dataclass(frozen=True)
class TableRow:
    cells: List[TableCell] = field(default_factory=list)


@dataclass(frozen=True)
class Table:
    rows: List[TableRow] = field(default_factory=list)


@dataclass(frozen=True)
class OtherBlock:
    """Structural element without Markdown output (section breaks, tables of contents)."""
    kind: str = 'unknown'


BlockItem = Union[Paragraph, Table, OtherBlock]


@dataclass(frozen=True)
class ListDefinition:
    """Glyph formats of a list keyed by nesting level."""
    glyph_formats: Dict[int, str] = field(default_factory=dict)

    def glyph_format(self, nesting_level: int = 0) -> str:
        return self.glyph_formats.get(nesting_level, '')


@dataclass(frozen=True)
class ImageReference:
    content_uri: Optional[str] = None


@dataclass(frozen=True)
class Document:
    """Read-only snapshot of a Google Docs document."""

    title: Optional[str] = None
    document_id: str = ''
    revision_id: str = ''
    body: List[BlockItem] = field(default_factory=list)
    lists: Dict[str, ListDefinition] = field(default_factory=dict)
    inline_objects: Dict[str, ImageReference] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Document':
        """
        Build a Document from a Docs API ``documents.get`` response.

        Args:
            data: Decoded JSON document resource

        Returns:
            Document snapshot; missing keys become empty defaults
        """
        body = [
            _block_from_dict(item)
            for item in (data.get('body') or {}).get('content') or []
        ]

        lists = {}
        for list_id, list_data in (data.get('lists') or {}).items():
            levels = (list_data.get('listProperties') or {}).get('nestingLevels') or []
            lists[list_id] = ListDefinition(glyph_formats={
                index: level.get('glyphFormat') or ''
                for index, level in enumerate(levels)
            })

        inline_objects = {}
        for object_id, object_data in (data.get('inlineObjects') or {}).items():
            image_properties = _dig(
                object_data,
                'inlineObjectProperties', 'embeddedObject', 'imageProperties'
            ) or {}
            inline_objects[object_id] = ImageReference(
                content_uri=image_properties.get('contentUri')
            )

        return cls(
            title=data.get('title'),
            document_id=data.get('documentId') or '',
            revision_id=data.get('revisionId') or '',
            body=body,
            lists=lists,
            inline_objects=inline_objects
        )


def _dig(data: Any, *keys: str) -> Any:
    """Follow nested dictionary keys, returning None on the first miss."""
    for key in keys:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data


def _block_from_dict(item: Dict[str, Any]) -> BlockItem:
    if 'paragraph' in item:
        return _paragraph_from_dict(item['paragraph'] or {})
    if 'table' in item:
        rows = []
        for row in (item['table'] or {}).get('tableRows') or []:
            cells = []
            for cell in row.get('tableCells') or []:
                cells.append(TableCell(content=[
                    _paragraph_from_dict(content['paragraph'] or {})
                    for content in cell.get('content') or []
                    if 'paragraph' in content
                ]))
            rows.append(TableRow(cells=cells))
        return Table(rows=rows)

    kind = next((key for key in item if key not in ('startIndex', 'endIndex')), 'unknown')
    return OtherBlock(kind=kind)


def _paragraph_from_dict(data: Dict[str, Any]) -> Paragraph:
    style_type = NamedStyleType.parse(
        (data.get('paragraphStyle') or {}).get('namedStyleType')
    )

    bullet = None
    bullet_data = data.get('bullet')
    if bullet_data and bullet_data.get('listId'):
        bullet = ListMembership(
            list_id=bullet_data['listId'],
            nesting_level=bullet_data.get('nestingLevel') or 0
        )

    return Paragraph(
        elements=[_element_from_dict(element) for element in data.get('elements') or []],
        style_type=style_type,
        bullet=bullet
    )


def _element_from_dict(element: Dict[str, Any]) -> InlineElement:
    if 'textRun' in element:
        text_run = element['textRun'] or {}
        text_style = text_run.get('textStyle') or {}
        return TextRun(
            content=text_run.get('content') or '',
            style=TextStyle(
                bold=bool(text_style.get('bold')),
                italic=bool(text_style.get('italic')),
                link_url=_dig(text_style, 'link', 'url')
            )
        )

    inline_object_id = _dig(element, 'inlineObjectElement', 'inlineObjectId')
    if inline_object_id:
        return ImageRef(inline_object_id=inline_object_id)

    kind = next((key for key in element if key not in ('startIndex', 'endIndex')), 'unknown')
    return OtherElement(kind=kind)


@dataclass(frozen=True)
class ExportRequest:
    """A document to export, with an optional output filename override."""

    document_id: str
    filename: Optional[str] = None

    @classmethod
    def parse(cls, value: str) -> 'ExportRequest':
        """
        Parse ``DOCUMENT_ID`` or ``DOCUMENT_ID:FILENAME``.

        Raises:
            ValueError: If the document ID part is empty
        """
        document_id, _, filename = value.strip().partition(':')
        document_id = document_id.strip()
        if not document_id:
            raise ValueError(f"Missing document ID in '{value}'")
        return cls(document_id=document_id, filename=filename.strip() or None)


@dataclass
class ExportStatus:
    """Tracks the outcome of one document export for reporting."""

    document_id: str
    status: str  # "pending", "fetched", "converted", "exported", "skipped", "failed"
    title: Optional[str] = None
    output_path: Optional[str] = None
    error_message: Optional[str] = None
    timestamp: Optional[str] = None

    def __post_init__(self) -> None:
        """Set timestamp if not provided."""
        if self.timestamp is None:
            self.timestamp = datetime.now(timezone.utc).isoformat()

    def to_dict(self) -> Dict[str, Any]:
        """Serialize status to dictionary."""
        return {
            'document_id': self.document_id,
            'status': self.status,
            'title': self.title,
            'output_path': self.output_path,
            'error_message': self.error_message,
            'timestamp': self.timestamp
        }


__all__ = [
    'BlockItem',
    'Document',
    'ExportRequest',
    'ExportStatus',
    'ImageRef',
    'ImageReference',
    'InlineElement',
    'ListDefinition',
    'ListMembership',
    'NamedStyleType',
    'OtherBlock',
    'OtherElement',
    'Paragraph',
    'Table',
    'TableCell',
    'TableRow',
    'TextRun',
    'TextStyle'
]
