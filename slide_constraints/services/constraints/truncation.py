"""
Programmatic density enforcement.

Truncates slide content to fit within density limits after generation,
without another model call. Everything cut from the slide is returned as an
``overflow`` string meant for the speaker notes.
"""

from typing import List, Mapping, Optional, Tuple, Union

import structlog

from slide_constraints.core.config import ConstraintPolicy, TruncationLimits, get_policy
from slide_constraints.services.constraints.density import (
    LineKind,
    classify_line,
    count_words,
    is_table_separator,
    list_marker,
    strip_list_marker,
)
from slide_constraints.services.constraints.models import TruncationResult

logger = structlog.get_logger(__name__)

OVERFLOW_PREFIX = "Additional details: "

# Kinds of lines kept during the count pass
_HEADER = "header"
_SEPARATOR = "separator"
_ROW = "row"
_BULLET = "bullet"
_OTHER = "other"


def resolve_truncation_limits(
    limits: Optional[Union[TruncationLimits, Mapping[str, float]]] = None,
    policy: Optional[ConstraintPolicy] = None,
) -> TruncationLimits:
    """Merge partial limits over the policy defaults; bad values fall back to defaults."""
    base = get_policy(policy).truncation
    if limits is None:
        chosen = base
    elif isinstance(limits, TruncationLimits):
        chosen = limits
    else:
        known = {k: v for k, v in dict(limits).items() if k in TruncationLimits.model_fields}
        chosen = base.model_copy(update=known)
    sanitized, _ = chosen.sanitized()
    return sanitized


def _overflow_text(line: str, kind: str) -> str:
    if kind in (_ROW, _HEADER):
        cells = line.strip().strip("|").split("|")
        return " | ".join(cell.strip() for cell in cells)
    if kind == _BULLET:
        return strip_list_marker(line)
    return line.strip()


def _count_pass(
    lines: List[str],
    limits: TruncationLimits,
) -> Tuple[List[Tuple[int, str, str]], List[Tuple[int, str]]]:
    """Keep bullets and table rows up to their limits.

    Counts are cumulative over the whole body. Separator rows are always
    kept; the first row of each table is its header and is not counted.
    """
    kept: List[Tuple[int, str, str]] = []
    overflow: List[Tuple[int, str]] = []
    bullets = 0
    rows = 0
    in_table = False

    for index, line in enumerate(lines):
        kind = classify_line(line)

        if kind == LineKind.TABLE:
            if is_table_separator(line):
                kept.append((index, line, _SEPARATOR))
                in_table = True
            elif not in_table:
                kept.append((index, line, _HEADER))
                in_table = True
            else:
                rows += 1
                if rows <= limits.max_table_rows:
                    kept.append((index, line, _ROW))
                else:
                    overflow.append((index, _overflow_text(line, _ROW)))
            continue

        in_table = False

        if kind in (LineKind.BULLET, LineKind.NUMBERED):
            bullets += 1
            if bullets <= limits.max_bullets:
                kept.append((index, line, _BULLET))
            else:
                overflow.append((index, _overflow_text(line, _BULLET)))
            continue

        kept.append((index, line, _OTHER))

    return kept, overflow


def _trim_prose(line: str, target: int) -> Tuple[str, str]:
    """Split a prose line into a head of at most ``target`` words and the rest."""
    tokens = line.split()
    cut = len(tokens)
    while cut > 0 and count_words(" ".join(tokens[:cut])) > target:
        cut -= 1
    leading = line[: len(line) - len(line.lstrip())]
    return leading + " ".join(tokens[:cut]), " ".join(tokens[cut:])


def _trim_item(line: str, target: int) -> Tuple[str, str]:
    """Like _trim_prose for a list item; the marker stays on the kept head."""
    marker = list_marker(line)
    head, tail = _trim_prose(line[len(marker):], target)
    return marker + head, tail


def _word_pass(
    kept: List[Tuple[int, str, str]],
    limits: TruncationLimits,
) -> Tuple[List[Tuple[int, str, str]], List[Tuple[int, str]]]:
    """Remove trailing content until the word limit holds.

    Table rows are removed whole. The last prose line or list item is cut
    between words when that is enough, otherwise removed. Zero-word lines
    stay.
    """
    kept = list(kept)
    overflow: List[Tuple[int, str]] = []

    total = count_words("\n".join(line for _, line, _ in kept))
    while total > limits.max_words:
        position = next(
            (i for i in range(len(kept) - 1, -1, -1) if count_words(kept[i][1]) > 0),
            None,
        )
        if position is None:
            break

        index, line, kind = kept[position]
        words = count_words(line)
        excess = total - limits.max_words

        if kind in (_OTHER, _BULLET) and words > excess:
            trim = _trim_item if kind == _BULLET else _trim_prose
            head, tail = trim(line, words - excess)
            kept[position] = (index, head, kind)
            overflow.append((index, tail))
        else:
            del kept[position]
            overflow.append((index, _overflow_text(line, kind)))
            if kind == _HEADER:
                while position < len(kept) and kept[position][2] == _SEPARATOR:
                    del kept[position]

        total = count_words("\n".join(line for _, line, _ in kept))

    return kept, overflow


def truncate_to_limits(
    body: str,
    limits: Optional[Union[TruncationLimits, Mapping[str, float]]] = None,
    policy: Optional[ConstraintPolicy] = None,
) -> TruncationResult:
    """Truncate a slide body to fit within density limits.

    Args:
        body: Slide body text
        limits: Full or partial limits; missing keys use the defaults
            (4 bullets, 50 words, 4 table rows)
        policy: Constraint policy supplying the defaults

    Returns:
        TruncationResult with the kept body and an overflow string for the
        speaker notes. Truncating an already-truncated body is a no-op.
    """
    resolved = resolve_truncation_limits(limits, policy=policy)
    lines = (body or "").split("\n")

    kept, count_overflow = _count_pass(lines, resolved)
    kept, word_overflow = _word_pass(kept, resolved)

    pieces = sorted(count_overflow + word_overflow, key=lambda item: item[0])
    pieces = [text for _, text in pieces if text]
    overflow = OVERFLOW_PREFIX + "; ".join(pieces) if pieces else ""
    was_truncated = len(kept) < len(lines) or bool(word_overflow)

    if was_truncated:
        logger.debug(
            "Truncated slide body",
            removed_lines=len(lines) - len(kept),
            overflow_items=len(pieces),
        )

    return TruncationResult(
        body="\n".join(line for _, line, _ in kept),
        overflow=overflow,
        was_truncated=was_truncated,
    )


def passes_density_check(
    body: str,
    limits: Optional[Union[TruncationLimits, Mapping[str, float]]] = None,
    policy: Optional[ConstraintPolicy] = None,
) -> bool:
    """Cheap boolean version of the truncation scan.

    Returns False as soon as any limit is exceeded.
    """
    resolved = resolve_truncation_limits(limits, policy=policy)
    bullets = 0
    rows = 0
    in_table = False

    for line in (body or "").split("\n"):
        kind = classify_line(line)
        if kind == LineKind.TABLE:
            if is_table_separator(line) or not in_table:
                in_table = True
                continue
            rows += 1
            if rows > resolved.max_table_rows:
                return False
            continue

        in_table = False
        if kind in (LineKind.BULLET, LineKind.NUMBERED):
            bullets += 1
            if bullets > resolved.max_bullets:
                return False

    return count_words(body) <= resolved.max_words
