from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, Field


@dataclass(frozen=True)
class GlyphRun:
    """One positioned text fragment as emitted by the PDF decoder.

    ``x``/``y`` are page-space coordinates with y growing upward. ``width`` is
    the run's horizontal extent. pypdf does not report it, so the adapter in
    ``parse.py`` estimates it from font metrics; a missing width counts as 0.
    """

    text: str
    x: float | None
    y: float | None
    width: float | None = None


@dataclass(frozen=True)
class LinePolicy:
    line_threshold: float = 0.5
    word_gap_threshold: float = 10.0
    insert_word_spaces: bool = True
    collapse_letter_spacing: bool = True
    keep_empty_lines: bool = False
    line_separator: str = "\n"
    page_separator: str = "\n"


DEFAULT_LINE_POLICY = LinePolicy()


class ExtractedDocument(BaseModel):
    text: str
    num_pages: int = Field(ge=0)
