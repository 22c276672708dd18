"""Line classification for plain-text official documents.

Rules are evaluated top to bottom per non-blank line, first match wins:

1. ``【标签】text`` / ``[标签]text`` tagged lines (文种 dropped, 标题 title,
   主送机关/对象/单位 salutation, anything else body)
2. ``一、`` first-level headings
3. ``（一）`` second-level headings
4. the signature block (issuer + date) found by scanning up from the end
5. everything else is body text

Blank lines are skipped; they never produce paragraphs.

The signature scan is a heuristic over free text. A body sentence that
mentions a full date near the end of a document without a real date line
will be taken for the date line.
"""

import re

from ..models import ParagraphKind, ParsedLine

TAG_PATTERN = re.compile(r"^[【\[]([^】\]]+)[】\]](.*)$")
HEADING_1_PATTERN = re.compile(r"^[一二三四五六七八九十]+、")
HEADING_2_PATTERN = re.compile(r"^（[一二三四五六七八九十]+）")
ATTACHMENT_PATTERN = re.compile(r"^附件[:：]")
SENTENCE_PUNCTUATION = re.compile(r"[。！？?：:；;，,]")
LINE_BREAK = re.compile(r"\r?\n")

DATE_MARKERS = ("年", "月", "日")

META_TAGS = frozenset({"文种"})
TITLE_TAGS = frozenset({"标题"})
ADDRESSEE_TAGS = frozenset({"主送机关", "主送对象", "主送单位"})


def split_lines(text: str) -> list[str]:
    return LINE_BREAK.split(text or "")


def _is_date_line(line: str) -> bool:
    return all(marker in line for marker in DATE_MARKERS)


def find_signature_indices(lines: list[str]) -> set[int]:
    """Locate the closing date line and, if present, the issuer line above it.

    Args:
        lines: Source lines (untrimmed is fine)

    Returns:
        Indices of lines to render as right-aligned signature paragraphs
    """
    trimmed = [line.strip() for line in lines]
    indices: set[int] = set()

    date_index = None
    for i in range(len(trimmed) - 1, -1, -1):
        line = trimmed[i]
        if not line or ATTACHMENT_PATTERN.match(line):
            continue
        if _is_date_line(line):
            date_index = i
            break

    if date_index is None:
        return indices
    indices.add(date_index)

    for j in range(date_index - 1, -1, -1):
        line = trimmed[j]
        if not line:
            continue
        if ATTACHMENT_PATTERN.match(line) or SENTENCE_PUNCTUATION.search(line):
            break
        indices.add(j)
        break

    return indices


def classify_line(index: int, raw: str, signature_indices: set[int]) -> ParsedLine:
    """Classify one source line; see module docstring for the rules."""
    line = raw.strip()
    if not line:
        return ParsedLine(index, ParagraphKind.BLANK, "")

    fallback_kind = ParagraphKind.SIGNATURE if index in signature_indices else ParagraphKind.BODY

    tag_match = TAG_PATTERN.match(line)
    if tag_match:
        tag = tag_match.group(1).strip()
        text = tag_match.group(2).strip() or line

        if tag in META_TAGS:
            return ParsedLine(index, ParagraphKind.META_DISCARD, text, tag)
        if tag in TITLE_TAGS:
            return ParsedLine(index, ParagraphKind.TITLE, text, tag)
        if tag in ADDRESSEE_TAGS:
            return ParsedLine(index, ParagraphKind.SALUTATION, text, tag)
        return ParsedLine(index, fallback_kind, text, tag)

    if HEADING_1_PATTERN.match(line):
        return ParsedLine(index, ParagraphKind.HEADING_1, line)
    if HEADING_2_PATTERN.match(line):
        return ParsedLine(index, ParagraphKind.HEADING_2, line)

    return ParsedLine(index, fallback_kind, line)


def classify_text(text: str) -> list[ParsedLine]:
    """Classify every line of ``text``, blank ones included."""
    lines = split_lines(text)
    signature_indices = find_signature_indices(lines)
    return [classify_line(i, raw, signature_indices) for i, raw in enumerate(lines)]
