"""Plain text to .docx.

``build_document`` is pure: identical text always yields an identical
paragraph sequence. ``render_docx`` serializes that model with python-docx.
"""

import io

from docx import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH, WD_LINE_SPACING
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Mm, Pt

from ..models import Alignment, ExportedDocument, ParagraphKind, StyledParagraph
from .classifier import classify_text
from .styles import BODY_FONT, BODY_SIZE_PT, PAGE_GEOMETRY, style_paragraph

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

_ALIGNMENTS = {
    Alignment.CENTER: WD_ALIGN_PARAGRAPH.CENTER,
    Alignment.JUSTIFY: WD_ALIGN_PARAGRAPH.JUSTIFY,
    Alignment.RIGHT: WD_ALIGN_PARAGRAPH.RIGHT,
}


def build_document(text: str) -> ExportedDocument:
    """Classify ``text`` and style every line that renders."""
    parsed = classify_text(text)
    paragraphs = tuple(style_paragraph(line) for line in parsed if line.kind.renders)
    title = next((line.text for line in parsed if line.kind == ParagraphKind.TITLE), None)
    return ExportedDocument(paragraphs=paragraphs, geometry=PAGE_GEOMETRY, title=title)


def _set_east_asian_font(run, font: str) -> None:
    """Word picks CJK glyphs from w:eastAsia, which ``font.name`` leaves unset."""
    run.font.name = font
    run._element.get_or_add_rPr().get_or_add_rFonts().set(qn("w:eastAsia"), font)


def _add_page_number_field(paragraph) -> None:
    """Append a PAGE field: begin / instrText / separate / result / end."""
    run = paragraph.add_run()
    _set_east_asian_font(run, BODY_FONT)

    begin = OxmlElement("w:fldChar")
    begin.set(qn("w:fldCharType"), "begin")
    instruction = OxmlElement("w:instrText")
    instruction.set(qn("xml:space"), "preserve")
    instruction.text = " PAGE "
    separate = OxmlElement("w:fldChar")
    separate.set(qn("w:fldCharType"), "separate")
    placeholder = OxmlElement("w:t")
    placeholder.text = "1"
    end = OxmlElement("w:fldChar")
    end.set(qn("w:fldCharType"), "end")

    for element in (begin, instruction, separate, placeholder, end):
        run._element.append(element)


def _add_paragraph(doc, styled: StyledParagraph) -> None:
    paragraph = doc.add_paragraph()
    paragraph.alignment = _ALIGNMENTS[styled.alignment]

    fmt = paragraph.paragraph_format
    fmt.line_spacing = Pt(styled.line_spacing_pt)
    fmt.line_spacing_rule = WD_LINE_SPACING.EXACTLY
    fmt.space_before = Pt(styled.space_before_pt)
    fmt.space_after = Pt(styled.space_after_pt)
    if styled.first_line_indent_mm is not None:
        fmt.first_line_indent = Mm(styled.first_line_indent_mm)

    for text in styled.runs:
        run = paragraph.add_run(text)
        _set_east_asian_font(run, styled.font)
        run.font.size = Pt(styled.size_pt)
        run.font.bold = styled.bold


def render_docx(document: ExportedDocument) -> bytes:
    """Serialize an ExportedDocument to .docx bytes."""
    doc = Document()

    normal = doc.styles["Normal"]
    normal.font.name = BODY_FONT
    normal.font.size = Pt(BODY_SIZE_PT)
    normal.element.get_or_add_rPr().get_or_add_rFonts().set(qn("w:eastAsia"), BODY_FONT)

    geometry = document.geometry
    section = doc.sections[0]
    section.top_margin = Mm(geometry.top_mm)
    section.bottom_margin = Mm(geometry.bottom_mm)
    section.left_margin = Mm(geometry.left_mm)
    section.right_margin = Mm(geometry.right_mm)

    if geometry.page_number_footer:
        footer = section.footer
        footer.is_linked_to_previous = False
        footer_paragraph = footer.paragraphs[0]
        footer_paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER
        _add_page_number_field(footer_paragraph)

    for styled in document.paragraphs:
        _add_paragraph(doc, styled)

    if document.title:
        doc.core_properties.title = document.title

    buf = io.BytesIO()
    doc.save(buf)
    return buf.getvalue()


def transcode_to_docx(text: str) -> tuple[ExportedDocument, bytes]:
    """Build and serialize in one pass."""
    document = build_document(text)
    return document, render_docx(document)
