"""Tests for numextract.schema models."""

from __future__ import annotations

import json
import unittest

from pydantic import ValidationError

from numextract.schema import (
    EnhancedError,
    ErrorRecoveryOptions,
    ExtractionResult,
    ExtractResponse,
    ExtractTextRequest,
    ParseError,
)


class TestExtractionResult(unittest.TestCase):
    def test_ok(self) -> None:
        result = ExtractionResult.ok([1, 2.5])
        self.assertTrue(result.success)
        self.assertEqual(result.numbers, (1.0, 2.5))
        self.assertEqual(result.errors, ())

    def test_failed(self) -> None:
        error = ParseError(type="parse-error", message="JSON parse error: x", filepath="a.json")
        result = ExtractionResult.failed(error)
        self.assertFalse(result.success)
        self.assertEqual(result.numbers, ())
        self.assertEqual(result.errors, (error,))

    def test_sequences_are_tuples(self) -> None:
        result = ExtractionResult.ok([1, 2])
        self.assertIsInstance(result.numbers, tuple)
        self.assertIsInstance(result.errors, tuple)

    def test_frozen(self) -> None:
        result = ExtractionResult.ok([1])
        with self.assertRaises(ValidationError):
            result.success = False  # type: ignore[misc]

    def test_snapshot_is_independent_of_source_list(self) -> None:
        source = [1.0, 2.0]
        result = ExtractionResult.ok(source)
        source.append(3.0)
        self.assertEqual(result.numbers, (1.0, 2.0))

    def test_non_finite_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            ExtractionResult(success=True, numbers=(float("nan"),))
        with self.assertRaises(ValidationError):
            ExtractionResult(success=True, numbers=(float("-inf"),))

    def test_success_must_match_errors(self) -> None:
        error = ParseError(type="parse-error", message="m", filepath="f")
        with self.assertRaises(ValidationError):
            ExtractionResult(success=True, errors=(error,))
        with self.assertRaises(ValidationError):
            ExtractionResult(success=False)

    def test_json_shape(self) -> None:
        data = json.loads(ExtractionResult.ok([1, 2]).model_dump_json())
        self.assertEqual(data, {"success": True, "numbers": [1.0, 2.0], "errors": []})


class TestEnhancedError(unittest.TestCase):
    def test_optional_position(self) -> None:
        error = EnhancedError(
            category="parse",
            type="parse-error",
            message="m",
            filepath="f",
            recoverable=True,
            user_message="u",
            suggestion="s",
        )
        self.assertIsNone(error.line)
        self.assertIsNone(error.column)
        self.assertEqual(error.context, {})

    def test_context_is_read_only(self) -> None:
        source = {"file_type": "json"}
        error = EnhancedError(
            category="parse",
            type="parse-error",
            message="m",
            filepath="f",
            context=source,
            recoverable=True,
            user_message="u",
            suggestion="s",
        )
        with self.assertRaises(TypeError):
            error.context["file_type"] = "yaml"
        source["file_type"] = "toml"
        self.assertEqual(error.context, {"file_type": "json"})
        dumped = error.model_dump()
        self.assertIsInstance(dumped["context"], dict)
        self.assertEqual(json.loads(error.model_dump_json())["context"], {"file_type": "json"})


class TestErrorRecoveryOptions(unittest.TestCase):
    def test_fallback_defaults_to_none(self) -> None:
        options = ErrorRecoveryOptions(retryable=False, max_retries=0, retry_delay=0)
        self.assertIsNone(options.fallback_action)


class TestApiModels(unittest.TestCase):
    def test_text_request_defaults(self) -> None:
        body = ExtractTextRequest(text="1 2")
        self.assertEqual(body.filename, "untitled")
        self.assertIsNone(body.file_type)
        self.assertEqual(body.sort, "off")
        self.assertFalse(body.dedupe)
        self.assertFalse(body.stream)

    def test_response_defaults(self) -> None:
        response = ExtractResponse(success=True, file_type="json", filename="a.json")
        self.assertEqual(response.numbers, [])
        self.assertEqual(response.extracted_count, 0)
        self.assertEqual(response.messages, [])


if __name__ == "__main__":
    unittest.main()
