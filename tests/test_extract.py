"""Tests for format detection and dispatch in numextract.extract."""

from __future__ import annotations

import unittest

from numextract.extract import (
    EXTRACTORS,
    detect_file_type,
    extract_file_text,
    extract_numbers,
    extract_numbers_async,
    resolve_file_type,
)
from numextract.formats.csv_format import CancellationToken
from numextract.schema import FileType


class TestDetectFileType(unittest.TestCase):
    def test_known_extensions(self) -> None:
        cases = {
            "data.json": FileType.JSON,
            "conf.yaml": FileType.YAML,
            "a.YML": FileType.YAML,
            "table.CSV": FileType.CSV,
            "pyproject.toml": FileType.TOML,
            "setup.ini": FileType.INI,
            ".env": FileType.ENV,
            "prod.env": FileType.ENV,
        }
        for filename, expected in cases.items():
            with self.subTest(filename=filename):
                self.assertEqual(detect_file_type(filename), expected)

    def test_last_extension_wins(self) -> None:
        self.assertEqual(detect_file_type("data.tar.json"), FileType.JSON)
        self.assertEqual(detect_file_type("data.json.bak"), FileType.UNKNOWN)

    def test_unknown(self) -> None:
        for filename in ("noext", "Makefile", "notes.txt", "", "trailing."):
            with self.subTest(filename=filename):
                self.assertEqual(detect_file_type(filename), FileType.UNKNOWN)

    def test_directory_dots_ignored(self) -> None:
        self.assertEqual(detect_file_type("/srv/app.v2/README"), FileType.UNKNOWN)
        self.assertEqual(detect_file_type("C:\\cfg.d\\app.ini"), FileType.INI)


class TestResolveFileType(unittest.TestCase):
    def test_enum_passthrough(self) -> None:
        self.assertIs(resolve_file_type(FileType.TOML), FileType.TOML)

    def test_names_and_extensions(self) -> None:
        self.assertEqual(resolve_file_type("yml"), FileType.YAML)
        self.assertEqual(resolve_file_type(".JSON"), FileType.JSON)
        self.assertEqual(resolve_file_type(" env "), FileType.ENV)

    def test_unrecognised(self) -> None:
        self.assertEqual(resolve_file_type("xml"), FileType.UNKNOWN)
        self.assertEqual(resolve_file_type(None), FileType.UNKNOWN)


class TestDispatch(unittest.TestCase):
    def test_every_type_has_an_extractor(self) -> None:
        self.assertEqual(set(EXTRACTORS), set(FileType))

    def test_known_type(self) -> None:
        result = extract_numbers('{"a": [1, 2]}', FileType.JSON, "a.json")
        self.assertEqual(result.numbers, (1.0, 2.0))

    def test_unknown_routes_to_fallback(self) -> None:
        result = extract_numbers('{"a": [1, 2]} and 3', "unknown", "x")
        self.assertTrue(result.success)
        self.assertEqual(result.numbers, (1.0, 2.0, 3.0))

    def test_unrecognised_type_never_errors(self) -> None:
        result = extract_numbers("value 7", "xml", "x.xml")
        self.assertTrue(result.success)
        self.assertEqual(result.numbers, (7.0,))

    def test_extract_file_text_detects(self) -> None:
        result = extract_file_text("a = 1\nb = 2\n", "conf.toml")
        self.assertEqual(result.numbers, (1.0, 2.0))

    def test_parse_failure_is_returned_not_raised(self) -> None:
        result = extract_file_text("a: [1", "bad.yml")
        self.assertFalse(result.success)
        self.assertEqual(result.errors[0].filepath, "bad.yml")


class TestDispatchAsync(unittest.IsolatedAsyncioTestCase):
    async def test_csv_uses_stream(self) -> None:
        # The header row holds no numbers in the streaming parser.
        result = await extract_numbers_async("1,2\n3,4\n", "csv", "s.csv")
        self.assertEqual(result.numbers, (3.0, 4.0))

    async def test_stream_options_are_forwarded(self) -> None:
        token = CancellationToken()
        token.cancel()
        result = await extract_numbers_async("a\n1\n", FileType.CSV, "s.csv", cancel_token=token)
        self.assertEqual(result.errors[0].type, "cancelled")

    async def test_other_types_are_synchronous(self) -> None:
        result = await extract_numbers_async("[1, 2]", FileType.JSON, "a.json")
        self.assertEqual(result.numbers, (1.0, 2.0))


if __name__ == "__main__":
    unittest.main()
