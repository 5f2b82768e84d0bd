"""
Content Density Validation
==========================

Per-slide limits on bullets, words and table rows, plus a structural
splitter that redistributes an overcrowded slide across several slides.

Slide bodies use a small markdown subset:

- bullets: ``- item``, ``* item``, ``• item``
- numbered items: ``1. item`` / ``1) item``
- tables: ``| a | b |`` rows with an optional ``|---|---|`` separator
- anything else is prose; a ``Sources:`` line is a citation trailer

The body is parsed into blocks by a line state machine
(PROSE / BULLETS / NUMBERED / TABLE): a blank line or a change of line type
closes the current block.
"""

import math
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

import structlog

from slide_constraints.core.config import ConstraintPolicy, DensityLimits, get_policy
from slide_constraints.services.constraints.models import (
    DensityCounts,
    DensityValidationResult,
    SlideContent,
    SplitResult,
)

logger = structlog.get_logger(__name__)

BULLET_PATTERN = re.compile(r"^\s*(?:[-*]\s|•)")
NUMBERED_PATTERN = re.compile(r"^\s*\d+[.)]\s")
TABLE_SEPARATOR_PATTERN = re.compile(r"^\|(?=[^-]*-)[\s\-|:]+\|$")
SOURCES_PATTERN = re.compile(r"^Sources?:", re.IGNORECASE)
SENTENCE_BREAK = re.compile(r"(?<=[.!?])\s+")

# " (2/3)" appended to split slide titles counts as two words
SPLIT_SUFFIX_WORDS = 2


class LineKind(str, Enum):
    """Classification of a single body line."""
    BLANK = "blank"
    BULLET = "bullet"
    NUMBERED = "numbered"
    TABLE = "table"
    PROSE = "prose"


class BlockKind(str, Enum):
    """Parser state / kind of a run of consecutive lines."""
    PROSE = "prose"
    BULLETS = "bullets"
    NUMBERED = "numbered"
    TABLE = "table"


_BLOCK_FOR_LINE = {
    LineKind.BULLET: BlockKind.BULLETS,
    LineKind.NUMBERED: BlockKind.NUMBERED,
    LineKind.TABLE: BlockKind.TABLE,
    LineKind.PROSE: BlockKind.PROSE,
}


@dataclass
class ContentBlock:
    """A run of lines of one kind."""
    kind: BlockKind
    lines: List[str] = field(default_factory=list)
    blank_before: bool = False

    @property
    def table_header(self) -> Optional[str]:
        if self.kind != BlockKind.TABLE or not self.lines or is_table_separator(self.lines[0]):
            return None
        return self.lines[0]

    @property
    def table_rows(self) -> List[str]:
        """Data rows: every non-separator row after the header."""
        if self.kind != BlockKind.TABLE:
            return []
        start = 1 if self.table_header is not None else 0
        return [line for line in self.lines[start:] if not is_table_separator(line)]


# =============================================================================
# Line Parsing
# =============================================================================

def is_table_separator(line: str) -> bool:
    return bool(TABLE_SEPARATOR_PATTERN.match(line.strip()))


def classify_line(line: str) -> LineKind:
    """Classify one body line."""
    stripped = line.strip()
    if not stripped:
        return LineKind.BLANK
    if len(stripped) > 1 and stripped.startswith("|") and stripped.endswith("|"):
        return LineKind.TABLE
    if BULLET_PATTERN.match(line):
        return LineKind.BULLET
    if NUMBERED_PATTERN.match(line):
        return LineKind.NUMBERED
    return LineKind.PROSE


def parse_blocks(body: str) -> List[ContentBlock]:
    """Group body lines into blocks.

    Any change of line type, or a blank line, flushes the current block
    before the next one starts.
    """
    blocks: List[ContentBlock] = []
    state: Optional[BlockKind] = None
    buffer: List[str] = []
    saw_blank = False
    pending_blank = False

    def flush():
        nonlocal buffer
        if buffer:
            blocks.append(ContentBlock(kind=state, lines=buffer, blank_before=pending_blank))
        buffer = []

    for line in (body or "").split("\n"):
        kind = classify_line(line)
        if kind == LineKind.BLANK:
            flush()
            state = None
            saw_blank = True
            continue
        block_kind = _BLOCK_FOR_LINE[kind]
        if block_kind != state:
            flush()
            state = block_kind
            pending_blank = saw_blank and bool(blocks)
            saw_blank = False
        buffer.append(line)
    flush()

    return blocks


def list_marker(line: str) -> str:
    """Leading indent and marker of a list item, or ``""`` for other lines."""
    match = BULLET_PATTERN.match(line) or NUMBERED_PATTERN.match(line)
    return match.group(0) if match else ""


def strip_list_marker(line: str) -> str:
    """Remove a leading bullet or numbered-list marker."""
    text = BULLET_PATTERN.sub("", line, count=1)
    text = NUMBERED_PATTERN.sub("", text, count=1)
    return text.strip()


def count_words(text: str) -> int:
    """Count content words, ignoring markdown formatting.

    Strips bold/italic markers, heading and blockquote markers, list markers,
    table pipes, table separator rows and ``Sources:`` citation lines.
    """
    content_lines = []
    for line in (text or "").split("\n"):
        stripped = line.strip()
        if is_table_separator(stripped) or SOURCES_PATTERN.match(stripped):
            continue
        if classify_line(line) in (LineKind.BULLET, LineKind.NUMBERED):
            stripped = strip_list_marker(line)
        content_lines.append(stripped)

    joined = " ".join(content_lines)
    joined = re.sub(r"\*{1,2}", "", joined)
    joined = re.sub(r"#{1,6}\s", "", joined)
    joined = re.sub(r"(^|\s)>\s", r"\1", joined)
    joined = joined.replace("|", " ")
    stripped = re.sub(r"[^\w\s]", " ", joined).strip()
    if not stripped:
        return 0
    return len(stripped.split())


def _nesting_depth(line: str) -> int:
    indent = len(line) - len(line.lstrip())
    return len(line[:indent].replace("\t", "  ")) // 2


# =============================================================================
# Validation
# =============================================================================

def _fmt(value) -> str:
    return f"{value:g}" if isinstance(value, float) else str(value)


def measure_slide(slide: SlideContent) -> DensityCounts:
    """Count bullets, table rows, words and nesting for one slide."""
    blocks = parse_blocks(slide.body)
    bullets = 0
    detected_rows = 0
    detected_table = False
    depth = 0

    for block in blocks:
        if block.kind in (BlockKind.BULLETS, BlockKind.NUMBERED):
            bullets += len(block.lines)
            depth = max([depth] + [_nesting_depth(line) for line in block.lines])
        elif block.kind == BlockKind.TABLE:
            detected_table = True
            detected_rows += len(block.table_rows)

    return DensityCounts(
        bullets=bullets,
        table_rows=slide.table_rows if slide.table_rows is not None else detected_rows,
        words=count_words(slide.title) + count_words(slide.body),
        has_table=slide.has_table if slide.has_table is not None else detected_table,
        max_nesting_depth=depth,
    )


def validate_slide_content(
    slide: SlideContent,
    policy: Optional[ConstraintPolicy] = None,
) -> DensityValidationResult:
    """Validate slide content against density limits.

    A slide fails on too many bullets (bullet + numbered items), too many
    table data rows, or too many words (title + body). Every violation comes
    with an actionable suggestion. Long bullets and deep nesting are
    reported as warnings and do not fail the slide.
    """
    limits, _ = get_policy(policy).density.sanitized()
    counts = measure_slide(slide)

    violations: List[str] = []
    suggestions: List[str] = []
    warnings: List[str] = []

    if counts.bullets > limits.max_bullets:
        violations.append(f"Slide has {counts.bullets} bullets (max {_fmt(limits.max_bullets)}).")
        per_slide = max(1, int(limits.max_bullets))
        suggestions.append(
            f"Split into {math.ceil(counts.bullets / per_slide)} slides with "
            f"{per_slide} bullets each, or consolidate related points."
        )

    for line in slide.body.split("\n"):
        if classify_line(line) not in (LineKind.BULLET, LineKind.NUMBERED):
            continue
        text = strip_list_marker(line)
        words = count_words(text)
        if words > limits.max_words_per_bullet:
            warnings.append(
                f'Bullet has {words} words (max {_fmt(limits.max_words_per_bullet)}): "{text[:40]}..."'
            )

    if counts.words > limits.max_words:
        violations.append(f"Slide has {counts.words} words (max {_fmt(limits.max_words)}).")
        suggestions.append("Reduce text to key phrases. Move detailed content to speaker notes or a handout.")

    if counts.has_table and counts.table_rows > limits.max_table_rows:
        violations.append(f"Table has {counts.table_rows} rows (max {_fmt(limits.max_table_rows)}).")
        suggestions.append(
            f"Split the table across multiple slides, or show only the top "
            f'{_fmt(limits.max_table_rows)} rows with a "full data in appendix" note.'
        )

    if counts.max_nesting_depth > limits.max_nesting_depth:
        warnings.append(
            f"List nesting depth is {counts.max_nesting_depth} (max {_fmt(limits.max_nesting_depth)}). "
            "Flatten nested lists or promote sub-items to their own bullets."
        )

    return DensityValidationResult(
        valid=not violations,
        violations=violations,
        suggestions=suggestions,
        warnings=warnings,
        counts=counts,
    )


# =============================================================================
# Splitting
# =============================================================================

@dataclass
class _Unit:
    """Smallest piece of content the splitter never breaks apart."""
    lines: List[str]
    words: int
    bullets: int = 0
    table_rows: int = 0
    table_id: Optional[int] = None
    paragraph_id: Optional[int] = None  # pieces of one prose line or list item
    blank_before: bool = False


@dataclass
class _Page:
    lines: List[str] = field(default_factory=list)
    bullets: int = 0
    table_rows: int = 0
    words: int = 0
    open_table: Optional[int] = None
    last_paragraph: Optional[int] = None

    @property
    def empty(self) -> bool:
        return not self.lines


def _chunk_words(text: str, budget: int) -> List[str]:
    """Split text on whitespace into pieces of at most ``budget`` counted words."""
    pieces: List[str] = []
    current: List[str] = []
    for token in text.split():
        candidate = current + [token]
        if current and count_words(" ".join(candidate)) > budget:
            pieces.append(" ".join(current))
            current = [token]
        else:
            current = candidate
    if current:
        pieces.append(" ".join(current))
    return pieces


def _prose_pieces(line: str, budget: int) -> List[str]:
    if count_words(line) <= budget:
        return [line]
    pieces: List[str] = []
    for sentence in SENTENCE_BREAK.split(line.strip()):
        if count_words(sentence) <= budget:
            pieces.append(sentence)
        else:
            pieces.extend(_chunk_words(sentence, budget))
    return pieces


def _item_groups(lines: List[str]) -> List[List[str]]:
    """Group list lines so each top-level item carries its indented children."""
    groups: List[List[str]] = []
    for line in lines:
        if groups and _nesting_depth(line) > 0:
            groups[-1].append(line)
        else:
            groups.append([line])
    return groups


def _item_units(line: str, budget: int, paragraph_id: int) -> List[_Unit]:
    """Units for one list item, cutting an over-budget item between words.

    The first piece keeps the marker; later pieces become indented
    continuation lines.
    """
    words = count_words(line)
    if words <= budget:
        return [_Unit(lines=[line], words=words, bullets=1)]

    marker = list_marker(line)
    indent = " " * len(marker)
    units: List[_Unit] = []
    for position, piece in enumerate(_chunk_words(line[len(marker):], budget)):
        text = marker + piece if position == 0 else indent + piece
        units.append(
            _Unit(
                lines=[text],
                words=count_words(piece),
                bullets=1 if position == 0 else 0,
                paragraph_id=paragraph_id,
            )
        )
    return units


def _build_units(
    blocks: List[ContentBlock],
    limits: DensityLimits,
    budget: int,
) -> Tuple[List[_Unit], Dict[int, Tuple[List[str], int]], List[str]]:
    """Turn blocks into units, table headers by table id, and trailer lines."""
    units: List[_Unit] = []
    headers: Dict[int, Tuple[List[str], int]] = {}
    trailer: List[str] = []
    paragraph_id = 0

    for index, block in enumerate(blocks):
        first = len(units)

        if block.kind in (BlockKind.BULLETS, BlockKind.NUMBERED):
            for group in _item_groups(block.lines):
                # Indented items travel with the item above them while the group fits one slide
                words = count_words("\n".join(group))
                if len(group) > 1 and len(group) <= limits.max_bullets and words <= budget:
                    units.append(_Unit(lines=list(group), words=words, bullets=len(group)))
                    continue
                for line in group:
                    paragraph_id += 1
                    units.extend(_item_units(line, budget, paragraph_id))

        elif block.kind == BlockKind.TABLE:
            has_header = block.table_header is not None
            header_lines = [
                line for position, line in enumerate(block.lines)
                if (position == 0 and has_header) or is_table_separator(line)
            ]
            headers[index] = (header_lines, count_words("\n".join(header_lines)))
            for row in block.table_rows:
                units.append(_Unit(lines=[row], words=count_words(row), table_rows=1, table_id=index))

        else:
            for line in block.lines:
                if SOURCES_PATTERN.match(line.strip()):
                    trailer.append(line)
                    continue
                paragraph_id += 1
                for piece in _prose_pieces(line, budget):
                    units.append(_Unit(lines=[piece], words=count_words(piece), paragraph_id=paragraph_id))

        if len(units) > first:
            units[first].blank_before = block.blank_before

    return units, headers, trailer


def _paginate(
    units: List[_Unit],
    headers: Dict[int, Tuple[List[str], int]],
    limits: DensityLimits,
    budget: int,
) -> List[_Page]:
    """Fill each page up to the limits before starting the next one."""
    pages = [_Page()]

    for unit in units:
        page = pages[-1]
        needs_header = unit.table_id is not None and page.open_table != unit.table_id
        cost = unit.words + (headers[unit.table_id][1] if needs_header else 0)

        fits = (
            page.bullets + unit.bullets <= limits.max_bullets
            and page.table_rows + unit.table_rows <= limits.max_table_rows
            and page.words + cost <= budget
        )
        if not fits and not page.empty:
            page = _Page()
            pages.append(page)
            needs_header = unit.table_id is not None
            cost = unit.words + (headers[unit.table_id][1] if needs_header else 0)

        if unit.blank_before and not page.empty:
            page.lines.append("")
        if needs_header:
            page.lines.extend(headers[unit.table_id][0])
        page.open_table = unit.table_id

        if unit.paragraph_id is not None and unit.paragraph_id == page.last_paragraph:
            page.lines[-1] = f"{page.lines[-1]} {unit.lines[0].strip()}"
        else:
            page.lines.extend(unit.lines)
        page.last_paragraph = unit.paragraph_id

        page.bullets += unit.bullets
        page.table_rows += unit.table_rows
        page.words += cost

    return [page for page in pages if not page.empty]


def suggest_split(
    slide: SlideContent,
    policy: Optional[ConstraintPolicy] = None,
) -> SplitResult:
    """Redistribute an overcrowded slide across several slides.

    Content is packed in document order, filling each new slide up to (but
    not over) the bullet, table-row and word limits before starting the
    next. Table rows are never split and the table header is repeated on
    every slide that carries part of the table. Prose too long for one slide
    is broken at sentence boundaries, then between words; an over-long list
    item is cut between words with its marker on the first piece. Indented
    sub-items stay with their parent unless the group alone exceeds the
    limits. Each new slide keeps the slide type and gets an ``(i/n)`` title suffix.

    Returns:
        SplitResult; ``new_slides`` is ``[slide]`` when no split is needed or
        the content cannot be divided
    """
    density = validate_slide_content(slide, policy=policy)
    if density.valid:
        return SplitResult(should_split=False, new_slides=[slide])

    limits, _ = get_policy(policy).density.sanitized()
    budget = max(1, int(limits.max_words) - count_words(slide.title) - SPLIT_SUFFIX_WORDS)

    blocks = parse_blocks(slide.body)
    units, headers, trailer = _build_units(blocks, limits, budget)
    pages = _paginate(units, headers, limits, budget)

    if len(pages) <= 1:
        logger.debug("Slide fails density but cannot be split", title=slide.title)
        return SplitResult(should_split=False, new_slides=[slide])

    if trailer:
        pages[-1].lines.append("")
        pages[-1].lines.extend(trailer)

    total = len(pages)
    new_slides = [
        SlideContent(
            title=f"{slide.title} ({index}/{total})".strip(),
            body="\n".join(page.lines),
            slide_type=slide.slide_type,
            speaker_notes=slide.speaker_notes if index == 1 else "",
        )
        for index, page in enumerate(pages, start=1)
    ]

    logger.debug("Split overcrowded slide", title=slide.title, slides=total)
    return SplitResult(should_split=True, new_slides=new_slides)
