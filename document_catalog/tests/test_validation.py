import unittest

from document_catalog.models.upload import FileRef, ValidationConfig
from document_catalog.services.validation_service import (
    format_file_size,
    get_file_category,
    get_file_type,
    validate_files,
)

MIB = 1024 * 1024


def pdf(name: str, size: int = MIB) -> FileRef:
    return FileRef(name=name, size=size, mime_type="application/pdf")


class TestValidateFiles(unittest.TestCase):

    def test_valid_batch_is_accepted(self):
        result = validate_files([pdf("lease.pdf"), FileRef(name="photo.png", size=2048, mime_type="image/png")])

        self.assertTrue(result.accepted)
        self.assertEqual(result.errors, [])
        self.assertEqual(result.warnings, [])

    def test_oversized_file_is_rejected_with_its_name(self):
        result = validate_files([pdf("big-scan.pdf", size=12 * MIB)])

        self.assertFalse(result.accepted)
        self.assertEqual(len(result.errors), 1)
        self.assertIn("big-scan.pdf", result.errors[0])
        self.assertEqual(
            result.errors[0],
            'File "big-scan.pdf" is 12.0MB, but maximum allowed size is 10.0MB.',
        )

    def test_unsupported_type_names_type_and_file(self):
        result = validate_files([FileRef(name="movie.mp4", size=100, mime_type="video/mp4")])

        self.assertFalse(result.accepted)
        self.assertEqual(result.errors, ['File type "video/mp4" is not supported for file "movie.mp4".'])

    def test_too_many_files_adds_single_count_error(self):
        files = [pdf(f"doc-{index}.pdf") for index in range(11)]

        result = validate_files(files, ValidationConfig(max_files=10))

        self.assertFalse(result.accepted)
        self.assertEqual(len(result.errors), 1)
        self.assertIn("10", result.errors[0])
        self.assertIn("11", result.errors[0])
        self.assertEqual(result.errors[0], "Maximum 10 files allowed. You selected 11 files.")

    def test_count_error_does_not_skip_per_file_checks(self):
        files = [pdf(f"doc-{index}.pdf") for index in range(10)]
        files.append(FileRef(name="notes.exe", size=10, mime_type="application/x-msdownload"))

        result = validate_files(files, ValidationConfig(max_files=10))

        self.assertEqual(len(result.errors), 2)
        self.assertTrue(any("notes.exe" in error for error in result.errors))

    def test_all_violations_are_reported(self):
        files = [
            pdf("huge.pdf", size=11 * MIB),
            FileRef(name="clip.mov", size=20 * MIB, mime_type="video/quicktime"),
        ]

        result = validate_files(files)

        self.assertEqual(len(result.errors), 3)

    def test_duplicate_names_warn_without_blocking(self):
        result = validate_files([pdf("a.pdf"), pdf("a.pdf"), pdf("b.pdf")])

        self.assertTrue(result.accepted)
        self.assertEqual(result.warnings, ['Duplicate file name detected: "a.pdf"'] * 2)

    def test_custom_size_limit(self):
        config = ValidationConfig(max_size_bytes=MIB // 2)

        result = validate_files([pdf("small.pdf", size=MIB)], config)

        self.assertEqual(result.errors, ['File "small.pdf" is 1.0MB, but maximum allowed size is 0.5MB.'])


class TestFileHelpers(unittest.TestCase):

    def test_category_inference(self):
        cases = [
            (FileRef(name="front.jpg", size=1, mime_type="image/jpeg"), "Marketing"),
            (FileRef(name="anything.pdf", size=1, mime_type="application/pdf"), "Legal"),
            (FileRef(name="Lease-2024.docx", size=1, mime_type="application/msword"), "Legal"),
            (FileRef(name="water_bill.txt", size=1, mime_type="text/plain"), "Utilities"),
            (FileRef(name="utility-march.doc", size=1, mime_type="application/msword"), "Utilities"),
            (FileRef(name="Roof Repair.txt", size=1, mime_type="text/plain"), "Maintenance"),
            (FileRef(name="notes.txt", size=1, mime_type="text/plain"), "Legal"),
        ]
        for file, expected in cases:
            with self.subTest(file=file.name):
                self.assertEqual(get_file_category(file), expected)

    def test_image_type_wins_over_name(self):
        file = FileRef(name="maintenance-photo.png", size=1, mime_type="image/png")
        self.assertEqual(get_file_category(file), "Marketing")

    def test_file_type_labels(self):
        self.assertEqual(get_file_type(FileRef(name="a.pdf", size=1, mime_type="application/pdf")), "pdf")
        self.assertEqual(get_file_type(FileRef(name="a.png", size=1, mime_type="image/png")), "image")
        self.assertEqual(get_file_type(FileRef(name="a.odt", size=1, mime_type="")), "odt")

    def test_format_file_size(self):
        self.assertEqual(format_file_size(0), "0 Bytes")
        self.assertEqual(format_file_size(500), "500 Bytes")
        self.assertEqual(format_file_size(1024), "1 KB")
        self.assertEqual(format_file_size(456 * 1024), "456 KB")
        self.assertEqual(format_file_size(MIB), "1 MB")
        self.assertEqual(format_file_size(2516582), "2.4 MB")
        self.assertEqual(format_file_size(5 * 1024 ** 4), "5120 GB")


if __name__ == '__main__':
    unittest.main()
