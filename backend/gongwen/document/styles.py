"""Fixed paragraph styling for exported official documents.

Values follow the layout downstream consumers expect (GB/T 9704 style):
二号方正小标宋 title, 三号仿宋 body, 28pt exact line spacing, two-character
first-line indent, 37/35/28/26mm margins. Do not tune them.
"""

from dataclasses import dataclass

from ..models import Alignment, PageGeometry, ParagraphKind, ParsedLine, StyledParagraph

TITLE_FONT = "方正小标宋简体"
HEADING_1_FONT = "黑体"
HEADING_2_FONT = "楷体"
BODY_FONT = "仿宋_GB2312"

TITLE_SIZE_PT = 22.0  # 二号
BODY_SIZE_PT = 16.0  # 三号

LINE_SPACING_PT = 28.0
PARAGRAPH_SPACING_PT = 6.0  # about half a line before and after
FIRST_LINE_INDENT_MM = 11.0  # about two CJK characters at 16pt

PAGE_GEOMETRY = PageGeometry(top_mm=37.0, bottom_mm=35.0, left_mm=28.0, right_mm=26.0)


@dataclass(frozen=True)
class ParagraphStyle:
    alignment: Alignment
    font: str
    size_pt: float
    bold: bool = False
    first_line_indent_mm: float | None = None


STYLE_TABLE: dict[ParagraphKind, ParagraphStyle] = {
    ParagraphKind.TITLE: ParagraphStyle(Alignment.CENTER, TITLE_FONT, TITLE_SIZE_PT),
    ParagraphKind.HEADING_1: ParagraphStyle(
        Alignment.JUSTIFY, HEADING_1_FONT, BODY_SIZE_PT, bold=True
    ),
    ParagraphKind.HEADING_2: ParagraphStyle(
        Alignment.JUSTIFY, HEADING_2_FONT, BODY_SIZE_PT, first_line_indent_mm=FIRST_LINE_INDENT_MM
    ),
    ParagraphKind.SALUTATION: ParagraphStyle(Alignment.JUSTIFY, BODY_FONT, BODY_SIZE_PT),
    ParagraphKind.BODY: ParagraphStyle(
        Alignment.JUSTIFY, BODY_FONT, BODY_SIZE_PT, first_line_indent_mm=FIRST_LINE_INDENT_MM
    ),
    ParagraphKind.SIGNATURE: ParagraphStyle(Alignment.RIGHT, BODY_FONT, BODY_SIZE_PT),
}


def style_paragraph(line: ParsedLine) -> StyledParagraph:
    """Apply the style table to a classified line.

    Raises:
        ValueError: for kinds that never render (blank, metadata)
    """
    style = STYLE_TABLE.get(line.kind)
    if style is None:
        raise ValueError(f"Lines of kind {line.kind.value!r} do not produce paragraphs")

    return StyledParagraph(
        kind=line.kind,
        alignment=style.alignment,
        font=style.font,
        size_pt=style.size_pt,
        bold=style.bold,
        first_line_indent_mm=style.first_line_indent_mm,
        line_spacing_pt=LINE_SPACING_PT,
        space_before_pt=PARAGRAPH_SPACING_PT,
        space_after_pt=PARAGRAPH_SPACING_PT,
        runs=(line.text,),
    )
