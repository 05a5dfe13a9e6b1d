import sys
import unittest
from pathlib import Path
from unittest.mock import patch

from pydantic import ValidationError

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.parsing.models import ExtractedDocument  # noqa: E402
from app.parsing.parse import DocumentExtractionError  # noqa: E402
from app.schemas.resume import ValidationOptions  # noqa: E402
from app.services.resume_validation import (  # noqa: E402
    VALIDATION_FAILED_MESSAGE,
    check_resume_pdf,
    detect_contact_channels,
    detect_sections,
    validate_resume,
)

GITHUB_WARNING = "Missing recommended contact information: GitHub/GitLab profile"

VALID_RESUME = (
    "Jane Doe\n"
    "jane@example.com | linkedin.com/in/janedoe | https://janedoe.dev\n"
    "Summary\n"
    "Backend developer focused on reliable APIs.\n"
    "Skills\n"
    "Python, SQL, Docker\n"
    "Experience\n"
    "Developer, Acme Corp 2022-2024\n"
    "Education\n"
    "BS Computer Science, 2021\n"
)


class ValidateResumeTests(unittest.TestCase):
    def test_complete_resume_without_github_passes_with_warning(self):
        verdict = validate_resume(VALID_RESUME, 1)
        self.assertTrue(verdict.is_valid)
        self.assertEqual(list(verdict.errors), [])
        self.assertEqual(list(verdict.warnings), [GITHUB_WARNING])

    def test_github_link_clears_warning(self):
        verdict = validate_resume(VALID_RESUME + "github.com/janedoe\n", 1)
        self.assertTrue(verdict.is_valid)
        self.assertEqual(verdict.warnings, ())

    def test_multi_page_resume_fails_regardless_of_content(self):
        verdict = validate_resume(VALID_RESUME, 2, ValidationOptions(require_one_page=True))
        self.assertFalse(verdict.is_valid)
        self.assertEqual(verdict.errors[0], "Resume must be one page")

    def test_page_rule_can_be_disabled(self):
        verdict = validate_resume(VALID_RESUME, 3, ValidationOptions(require_one_page=False))
        self.assertTrue(verdict.is_valid)

    def test_empty_text_reports_every_requirement_in_order(self):
        verdict = validate_resume("", 1)
        self.assertFalse(verdict.is_valid)
        self.assertEqual(
            list(verdict.errors),
            [
                "Missing required section: Summary/About Me",
                "Missing required section: Highlights/Skills",
                "Missing required section: Experience",
                "Missing required section: Education",
                "Missing required contact information: Email address",
                "Missing required contact information: LinkedIn profile",
                "Missing required contact information: Portfolio link",
            ],
        )
        self.assertEqual(list(verdict.warnings), [GITHUB_WARNING])

    def test_achievements_is_a_warning_before_contact_warnings(self):
        verdict = validate_resume(VALID_RESUME, 1, ValidationOptions(require_achievements=True))
        self.assertTrue(verdict.is_valid)
        self.assertEqual(
            list(verdict.warnings),
            ["Missing recommended section: Achievements", GITHUB_WARNING],
        )

    def test_disabled_requirements_are_not_checked(self):
        options = ValidationOptions(
            require_summary=False,
            require_highlights=False,
            require_experience=False,
            require_education=False,
            require_contact=False,
        )
        verdict = validate_resume("", 1, options)
        self.assertTrue(verdict.is_valid)
        self.assertEqual(verdict.errors, ())
        self.assertEqual(verdict.warnings, ())

    def test_linkedin_without_profile_path_is_missing(self):
        text = VALID_RESUME.replace("linkedin.com/in/janedoe", "linkedin.com")
        verdict = validate_resume(text, 1)
        self.assertEqual(list(verdict.errors), ["Missing required contact information: LinkedIn profile"])

    def test_validation_is_idempotent(self):
        first = validate_resume(VALID_RESUME, 2)
        second = validate_resume(VALID_RESUME, 2)
        self.assertEqual(first, second)

    def test_verdict_is_immutable(self):
        verdict = validate_resume(VALID_RESUME, 1)
        with self.assertRaises(ValidationError):
            verdict.is_valid = False


class DetectionTests(unittest.TestCase):
    def test_line_can_match_several_sections(self):
        found = detect_sections("professional experience and education")
        self.assertEqual(found, {"experience", "education"})

    def test_header_match_is_unanchored_and_ignores_blank_lines(self):
        found = detect_sections("\n   \nmy work history at acme\n")
        self.assertEqual(found, {"experience"})

    def test_portfolio_pattern_also_matches_profile_urls(self):
        found = detect_contact_channels("github.com/janedoe")
        self.assertEqual(found, {"portfolio", "github"})


class CheckResumePdfTests(unittest.TestCase):
    def test_extraction_failure_returns_generic_failed_verdict(self):
        with patch(
            "app.services.resume_validation.extract_document_text",
            side_effect=DocumentExtractionError("broken"),
        ):
            result = check_resume_pdf(b"%PDF-1.4 broken")
        self.assertFalse(result.verdict.is_valid)
        self.assertEqual(list(result.verdict.errors), [VALIDATION_FAILED_MESSAGE])
        self.assertEqual(result.verdict.warnings, ())
        self.assertEqual(result.text, "")

    def test_extracted_text_is_validated(self):
        document = ExtractedDocument(text=VALID_RESUME, num_pages=1)
        with patch("app.services.resume_validation.extract_document_text", return_value=document):
            result = check_resume_pdf(b"%PDF-1.4")
        self.assertTrue(result.verdict.is_valid)
        self.assertEqual(result.text, VALID_RESUME)
        self.assertEqual(result.num_pages, 1)


if __name__ == "__main__":
    unittest.main()
