import sys
import unittest
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.services.file_security import (  # noqa: E402
    resume_drive_filename,
    validate_resume_upload,
    validate_upload_signature,
)

ONE_MB = 1024 * 1024


class ResumeUploadChecksTests(unittest.TestCase):
    def test_well_formed_upload_has_no_errors(self):
        errors = validate_resume_upload(
            filename="AlexCruz_FullStackDeveloper_2026.pdf",
            content_type="application/pdf",
            size=200_000,
            max_bytes=ONE_MB,
            current_year=2026,
        )
        self.assertEqual(errors, [])

    def test_reports_type_size_and_name_in_order(self):
        errors = validate_resume_upload(
            filename="resume.png",
            content_type="image/png",
            size=2 * ONE_MB,
            max_bytes=ONE_MB,
            current_year=2026,
        )
        self.assertEqual(
            errors,
            [
                "Only PDF files are allowed",
                "File size must be less than 1MB",
                "File name must be in the format: Name_Title_2026.pdf "
                "(e.g., AlexCruz_FullStackDeveloper_2026.pdf)",
            ],
        )

    def test_filename_year_must_be_current(self):
        errors = validate_resume_upload(
            filename="AlexCruz_Developer_2025.pdf",
            content_type="application/pdf",
            size=10,
            max_bytes=ONE_MB,
            current_year=2026,
        )
        self.assertEqual(len(errors), 1)
        self.assertIn("Name_Title_2026.pdf", errors[0])

    def test_filename_check_is_case_insensitive_and_optional(self):
        common = {"content_type": "application/pdf", "size": 10, "max_bytes": ONE_MB, "current_year": 2026}
        self.assertEqual(validate_resume_upload(filename="alex_dev_2026.PDF", **common), [])
        self.assertEqual(
            validate_resume_upload(filename="my resume.pdf", enforce_filename_format=False, **common),
            [],
        )


class UploadSignatureTests(unittest.TestCase):
    def test_pdf_signature_accepted(self):
        validate_upload_signature(filename="a.pdf", content=b"%PDF-1.7\n...")

    def test_mismatched_signature_rejected(self):
        with self.assertRaises(ValueError):
            validate_upload_signature(filename="a.pdf", content=b"PK\x03\x04")

    def test_non_pdf_extension_rejected(self):
        with self.assertRaises(ValueError):
            validate_upload_signature(filename="a.docx", content=b"%PDF-1.7")


class DriveFilenameTests(unittest.TestCase):
    def test_uses_email_username(self):
        self.assertEqual(resume_drive_filename("jane.doe@example.com"), "jane.doe_resume.pdf")


if __name__ == "__main__":
    unittest.main()
