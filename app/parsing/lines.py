"""
Line reconstruction for PDF text.

PDF content streams hand out text as positioned runs in drawing order, not in
reading order. The helpers here bucket runs that share a baseline into logical
lines, order each line left to right and the lines top to bottom, and join the
result into page and document text.

Bucketing keeps the first bucket key found within ``line_threshold`` rather
than the nearest one. When several keys sit within the threshold of a run, the
run can land on a bucket that is not the closest. This is a known heuristic
limitation and is kept for output compatibility.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Any, Iterable, Sequence

from .models import DEFAULT_LINE_POLICY, GlyphRun, LinePolicy

logger = logging.getLogger(__name__)

_LETTER_SPACED_RE = re.compile(r"^(?:[A-Z]\s+)+[A-Z]$")
_WHITESPACE_RE = re.compile(r"\s+")

_WORD_SPACE = " "


def collapse_letter_spaced_text(text: str) -> str:
    """Turn letter-spaced headings like ``"R E S U M E"`` into ``"RESUME"``."""
    if not text:
        return text
    stripped = text.strip()
    if _LETTER_SPACED_RE.match(stripped):
        return _WHITESPACE_RE.sub("", stripped)
    return text


def _is_usable(run: GlyphRun) -> bool:
    if not run.text:
        return False
    for value in (run.x, run.y):
        if value is None:
            return False
        try:
            if not math.isfinite(float(value)):
                return False
        except (TypeError, ValueError):
            return False
    return True


def _find_bucket(buckets: list[tuple[float, list[GlyphRun]]], y: float, threshold: float) -> list[GlyphRun] | None:
    for key, members in buckets:
        if abs(key - y) < threshold:
            return members
    return None


def _run_end(run: GlyphRun) -> float:
    """Right edge of a run; without a width the gap is measured from its origin."""
    return float(run.x) + float(run.width or 0.0)


def _join_runs(runs: Sequence[GlyphRun], policy: LinePolicy) -> str:
    parts: list[str] = []
    previous: GlyphRun | None = None
    for run in runs:
        text = collapse_letter_spaced_text(run.text) if policy.collapse_letter_spacing else run.text
        if policy.insert_word_spaces and previous is not None and parts:
            gap = float(run.x) - _run_end(previous)
            boundary_has_space = parts[-1][-1:].isspace() or text[:1].isspace()
            if gap > policy.word_gap_threshold and not boundary_has_space:
                parts.append(_WORD_SPACE)
        parts.append(text)
        previous = run
    return "".join(parts).strip()


def group_runs_into_lines(runs: Iterable[GlyphRun], policy: LinePolicy = DEFAULT_LINE_POLICY) -> list[str]:
    """Group one page's runs into logical lines, top of page first."""
    buckets: list[tuple[float, list[GlyphRun]]] = []
    skipped = 0

    for run in runs:
        if not _is_usable(run):
            skipped += 1
            continue
        y = float(run.y)
        members = _find_bucket(buckets, y, policy.line_threshold)
        if members is None:
            buckets.append((y, [run]))
        else:
            members.append(run)

    if skipped:
        logger.debug("line_grouping_skipped_runs count=%s", skipped)

    lines: list[tuple[float, str]] = []
    for key, members in buckets:
        ordered = sorted(members, key=lambda item: float(item.x))
        lines.append((key, _join_runs(ordered, policy)))

    lines.sort(key=lambda item: item[0], reverse=True)
    if policy.keep_empty_lines:
        return [text for _key, text in lines]
    return [text for _key, text in lines if text]


def render_page(runs: Iterable[GlyphRun], policy: LinePolicy = DEFAULT_LINE_POLICY) -> str:
    return policy.line_separator.join(group_runs_into_lines(runs, policy))


def build_document_text(pages: Sequence[str], policy: LinePolicy = DEFAULT_LINE_POLICY) -> str:
    return policy.page_separator.join(pages)


def glyph_run_from_matrices(
    text: str | None,
    cm: Sequence[Any] | None,
    tm: Sequence[Any] | None,
    width: float | None = None,
) -> GlyphRun | None:
    """Build a run from a decoder callback's matrices.

    The origin is the text matrix translation mapped through the current
    transformation matrix, i.e. the same point a renderer would draw at.
    Returns ``None`` when the text is empty or a matrix is malformed.
    """
    if not text:
        return None
    normalized = _WHITESPACE_RE.sub(" ", text)
    if not normalized:
        return None
    try:
        tx, ty = float(tm[4]), float(tm[5])
        if cm is None:
            x, y = tx, ty
        else:
            a, b, c, d, e, f = (float(value) for value in cm[:6])
            x = tx * a + ty * c + e
            y = tx * b + ty * d + f
    except (TypeError, ValueError, IndexError):
        return None
    if not (math.isfinite(x) and math.isfinite(y)):
        return None
    return GlyphRun(text=normalized, x=x, y=y, width=width)
