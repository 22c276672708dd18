"""Document models produced by the plain-text transcoder.

A finished plain-text draft is classified line by line (ParsedLine), each
line is mapped to a StyledParagraph, and the ordered paragraphs plus page
geometry form the ExportedDocument that gets serialized to .docx.
"""

from dataclasses import dataclass, field
from enum import Enum


class ParagraphKind(str, Enum):
    """Classification of one line of plain text."""
    TITLE = "title"
    HEADING_1 = "h1"
    HEADING_2 = "h2"
    SALUTATION = "salutation"
    SIGNATURE = "signature"
    BODY = "body"
    BLANK = "blank"
    META_DISCARD = "meta"

    @property
    def renders(self) -> bool:
        """Whether lines of this kind become paragraphs."""
        return self not in (ParagraphKind.BLANK, ParagraphKind.META_DISCARD)


class Alignment(str, Enum):
    """Paragraph alignment."""
    CENTER = "center"
    JUSTIFY = "justify"
    RIGHT = "right"


@dataclass(frozen=True)
class ParsedLine:
    """Classification result for one source line.

    ``text`` is what the paragraph will show (tag labels stripped);
    ``tag`` is the bracket label when the line was tagged.
    """
    index: int
    kind: ParagraphKind
    text: str
    tag: str | None = None


@dataclass(frozen=True)
class StyledParagraph:
    """A paragraph with its full, explicit formatting."""
    kind: ParagraphKind
    alignment: Alignment
    font: str
    size_pt: float
    bold: bool
    first_line_indent_mm: float | None
    line_spacing_pt: float
    space_before_pt: float
    space_after_pt: float
    runs: tuple[str, ...]

    @property
    def text(self) -> str:
        return "".join(self.runs)


@dataclass(frozen=True)
class PageGeometry:
    """Page margins in millimetres and the footer page number switch."""
    top_mm: float = 37.0
    bottom_mm: float = 35.0
    left_mm: float = 28.0
    right_mm: float = 26.0
    page_number_footer: bool = True


@dataclass(frozen=True)
class ExportedDocument:
    """Everything needed to serialize one export."""
    paragraphs: tuple[StyledParagraph, ...]
    geometry: PageGeometry = field(default_factory=PageGeometry)
    title: str | None = None
