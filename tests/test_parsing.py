import sys
import unittest
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import patch

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.parsing.models import GlyphRun, LinePolicy  # noqa: E402
from app.parsing.parse import (  # noqa: E402
    DocumentExtractionError,
    collect_page_runs,
    estimate_run_width,
    extract_document_text,
)

IDENTITY = [1, 0, 0, 1, 0, 0]


class FakePage:
    """Replays visitor callbacks the way pypdf's extract_text does."""

    def __init__(self, items):
        self.items = items

    def extract_text(self, visitor_text=None):
        for text, tm in self.items:
            visitor_text(text, IDENTITY, tm, None, 11.0)
        return ""


def _tm(x, y):
    return [1, 0, 0, 1, x, y]


def _single_page_pdf(stream: bytes) -> bytes:
    """Minimal one-page PDF drawing ``stream`` with Helvetica as /F1."""
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
        b"/Resources << /Font << /F1 4 0 R >> >> /Contents 5 0 R >>",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
        b"<< /Length " + str(len(stream)).encode() + b" >>\nstream\n" + stream + b"\nendstream",
    ]
    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += f"{number} 0 obj\n".encode() + body + b"\nendobj\n"
    xref_at = len(out)
    out += f"xref\n0 {len(objects) + 1}\n".encode()
    out += b"0000000000 65535 f \n"
    for offset in offsets:
        out += f"{offset:010d} 00000 n \n".encode()
    out += f"trailer\n<< /Size {len(objects) + 1} /Root 1 0 R >>\nstartxref\n{xref_at}\n%%EOF\n".encode()
    return bytes(out)


class EstimateRunWidthTests(unittest.TestCase):
    def test_uses_font_widths_table(self):
        font = {"/FirstChar": 65, "/Widths": [600, 700]}
        self.assertAlmostEqual(estimate_run_width("AB", IDENTITY, _tm(0, 0), font, 10), 13.0)

    def test_characters_outside_table_use_half_em(self):
        font = {"/FirstChar": 65, "/Widths": [600]}
        self.assertAlmostEqual(estimate_run_width("Az", None, None, font, 10), 11.0)
        self.assertAlmostEqual(estimate_run_width("abc", None, None, None, 12), 18.0)

    def test_scaled_by_text_and_page_matrices(self):
        width = estimate_run_width("ab", [2, 0, 0, 2, 0, 0], [3, 0, 0, 3, 10, 10], None, 1)
        self.assertAlmostEqual(width, 6.0)

    def test_unusable_font_size(self):
        self.assertIsNone(estimate_run_width("abc", None, None, None, None))
        self.assertIsNone(estimate_run_width("abc", None, None, None, 0))


class RealDecoderTests(unittest.TestCase):
    def test_word_split_across_text_objects_stays_whole(self):
        content = _single_page_pdf(
            b"BT /F1 12 Tf 72 700 Td (Exper) Tj ET\n"
            b"BT /F1 12 Tf 101 700 Td (ience) Tj ET\n"
            b"BT /F1 12 Tf 72 660 Td (Summary) Tj ET\n"
            b"BT /F1 12 Tf 160 660 Td (Skills) Tj ET"
        )
        document = extract_document_text(content)
        self.assertEqual(document.num_pages, 1)
        self.assertEqual(document.text.split("\n"), ["Experience", "Summary Skills"])


class CollectPageRunsTests(unittest.TestCase):
    def test_collects_positioned_runs_and_skips_malformed(self):
        page = FakePage(
            [
                ("Jane Doe", _tm(72, 760)),
                ("", _tm(72, 740)),
                ("broken", None),
                ("Summary", _tm(72, 700)),
            ]
        )
        runs = collect_page_runs(page)
        self.assertEqual(
            runs,
            [
                GlyphRun(text="Jane Doe", x=72.0, y=760.0, width=44.0),
                GlyphRun(text="Summary", x=72.0, y=700.0, width=38.5),
            ],
        )


class ExtractDocumentTextTests(unittest.TestCase):
    def test_pages_are_rebuilt_in_reading_order(self):
        first = FakePage(
            [
                ("Summary", _tm(72, 700)),
                ("Doe", _tm(110, 760.2)),
                ("Jane", _tm(72, 760)),
            ]
        )
        second = FakePage([("Education", _tm(72, 700))])
        reader = SimpleNamespace(pages=[first, second])

        with patch("app.parsing.parse.PdfReader", return_value=reader):
            document = extract_document_text(b"%PDF-1.4")

        self.assertEqual(document.num_pages, 2)
        self.assertEqual(document.text, "Jane Doe\nSummary\nEducation")

    def test_policy_controls_separators(self):
        page = FakePage([("A", _tm(72, 700)), ("B", _tm(72, 600))])
        reader = SimpleNamespace(pages=[page, page])
        policy = LinePolicy(line_separator=" ", page_separator="\n\n")

        with patch("app.parsing.parse.PdfReader", return_value=reader):
            document = extract_document_text(b"%PDF-1.4", policy)

        self.assertEqual(document.text, "A B\n\nA B")

    def test_empty_pdf_has_no_text(self):
        with patch("app.parsing.parse.PdfReader", return_value=SimpleNamespace(pages=[])):
            document = extract_document_text(b"%PDF-1.4")
        self.assertEqual(document.text, "")
        self.assertEqual(document.num_pages, 0)

    def test_decoder_failure_is_wrapped(self):
        with patch("app.parsing.parse.PdfReader", side_effect=ValueError("EOF marker not found")):
            with self.assertRaises(DocumentExtractionError) as ctx:
                extract_document_text(b"not a pdf")
        self.assertIsInstance(ctx.exception.__cause__, ValueError)

    def test_real_decoder_rejects_garbage(self):
        with self.assertRaises(DocumentExtractionError):
            extract_document_text(b"definitely not a pdf")


if __name__ == "__main__":
    unittest.main()
