from __future__ import annotations

import logging
import math
from io import BytesIO
from typing import Any

from pypdf import PdfReader

from .lines import build_document_text, glyph_run_from_matrices, render_page
from .models import DEFAULT_LINE_POLICY, ExtractedDocument, GlyphRun, LinePolicy

logger = logging.getLogger(__name__)

# Glyph-space units per em, and the advance assumed for fonts without /Widths.
_GLYPH_UNITS = 1000.0
_FALLBACK_ADVANCE = 500.0


class DocumentExtractionError(ValueError):
    pass


def _resolve(value: Any) -> Any:
    return value.get_object() if hasattr(value, "get_object") else value


def _matrix_scale(matrix: Any) -> float:
    if matrix is None:
        return 1.0
    try:
        scale = math.hypot(float(matrix[0]), float(matrix[1]))
    except (TypeError, ValueError, IndexError):
        return 1.0
    return scale if math.isfinite(scale) and scale > 0 else 1.0


def _glyph_advances(text: str, font_dict: Any) -> float:
    """Sum of advances in glyph units, from the font's ``/Widths`` when it has them."""
    font = _resolve(font_dict) if font_dict is not None else None
    widths: list[float] = []
    first_char = 0
    missing = _FALLBACK_ADVANCE
    if font is not None:
        try:
            widths = [float(_resolve(value)) for value in _resolve(font.get("/Widths")) or []]
            first_char = int(_resolve(font.get("/FirstChar", 0)))
            descriptor = _resolve(font.get("/FontDescriptor"))
            if descriptor is not None and descriptor.get("/MissingWidth") is not None:
                missing = float(_resolve(descriptor.get("/MissingWidth"))) or _FALLBACK_ADVANCE
        except (AttributeError, TypeError, ValueError):
            widths = []

    total = 0.0
    for char in text:
        index = ord(char) - first_char
        if widths and 0 <= index < len(widths) and widths[index] > 0:
            total += widths[index]
        else:
            total += missing
    return total


def estimate_run_width(text: str, cm: Any, tm: Any, font_dict: Any, font_size: Any) -> float | None:
    """Approximate horizontal extent of a run in page space.

    Single-byte fonts use their ``/Widths`` table; other fonts fall back to half
    an em per character. Returns ``None`` when the font size is unusable.
    """
    try:
        size = float(font_size)
    except (TypeError, ValueError):
        return None
    if not text or not math.isfinite(size) or size <= 0:
        return None
    advances = _glyph_advances(text, font_dict)
    return advances / _GLYPH_UNITS * size * _matrix_scale(tm) * _matrix_scale(cm)


def collect_page_runs(page: Any) -> list[GlyphRun]:
    runs: list[GlyphRun] = []

    def visitor(text: str, cm: Any, tm: Any, font_dict: Any, font_size: Any) -> None:
        # pypdf reports its own line breaks as whitespace-only text; spacing comes from geometry.
        if not text or not text.strip():
            return
        width = estimate_run_width(text, cm, tm, font_dict, font_size)
        run = glyph_run_from_matrices(text, cm, tm, width)
        if run is not None:
            runs.append(run)

    page.extract_text(visitor_text=visitor)
    return runs


def extract_document_text(content: bytes, policy: LinePolicy | None = None) -> ExtractedDocument:
    active_policy = policy or DEFAULT_LINE_POLICY
    try:
        reader = PdfReader(BytesIO(content))
        pages = [render_page(collect_page_runs(page), active_policy) for page in reader.pages]
        num_pages = len(reader.pages)
    except Exception as exc:
        raise DocumentExtractionError("Unable to extract text from this PDF file.") from exc

    text = build_document_text(pages, active_policy)
    logger.debug("resume_text_extracted pages=%s chars=%s", num_pages, len(text))
    return ExtractedDocument(text=text, num_pages=num_pages)
