"""Tests for the numextract command-line interface."""

from __future__ import annotations

import json
from pathlib import Path

from numextract.cli import build_parser, main


def _write(tmp_path: Path, name: str, text: str) -> Path:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


class TestParser:
    def test_defaults(self):
        args = build_parser().parse_args(["data.json"])
        assert args.path == "data.json"
        assert args.file_type is None
        assert args.sort == "off"
        assert not args.dedupe
        assert args.output == "json"


class TestMain:
    def test_json_output(self, tmp_path: Path, capsys):
        path = _write(tmp_path, "data.json", '{"a": [3, 1, 2]}')
        assert main([str(path)]) == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["success"] is True
        assert payload["numbers"] == [3, 1, 2]
        assert payload["errors"] == []

    def test_lines_output_with_processing(self, tmp_path: Path, capsys):
        path = _write(tmp_path, "data.yaml", "a: [5, 1, 3, 1, 9]\n")
        code = main([
            str(path), "--sort", "numeric-asc", "--dedupe",
            "--min", "2", "--max", "8", "--output", "lines",
        ])
        assert code == 0
        assert capsys.readouterr().out == "3\n5\n"

    def test_forced_type(self, tmp_path: Path, capsys):
        path = _write(tmp_path, "settings.conf", "[a]\nx = 4\n")
        assert main([str(path), "--type", "ini", "--output", "lines"]) == 0
        assert capsys.readouterr().out == "4\n"

    def test_unknown_extension_uses_fallback(self, tmp_path: Path, capsys):
        path = _write(tmp_path, "notes.txt", "took 12 minutes and 30 seconds")
        assert main([str(path), "--output", "lines"]) == 0
        assert capsys.readouterr().out == "12\n30\n"

    def test_stream_csv(self, tmp_path: Path, capsys):
        path = _write(tmp_path, "t.csv", "a,b\n1,x\n2,3\n")
        assert main([str(path), "--stream", "--output", "lines"]) == 0
        assert capsys.readouterr().out == "1\n2\n3\n"

    def test_parse_error(self, tmp_path: Path, capsys):
        path = _write(tmp_path, "bad.json", '{"a": ')
        assert main([str(path)]) == 1
        captured = capsys.readouterr()
        assert "Failed to parse file" in captured.err
        assert json.loads(captured.out)["success"] is False

    def test_missing_file(self, tmp_path: Path, capsys):
        assert main([str(tmp_path / "missing.json")]) == 1
        assert "File system error" in capsys.readouterr().err

    def test_unsupported_type(self, tmp_path: Path, capsys):
        path = _write(tmp_path, "data.json", "[1]")
        assert main([str(path), "--type", "xml"]) == 1
        assert "Configuration error" in capsys.readouterr().err

    def test_in_place(self, tmp_path: Path, capsys):
        path = _write(tmp_path, "data.toml", "a = 3\nb = [1, 2]\n")
        assert main([str(path), "--in-place", "--sort", "numeric-asc"]) == 0
        assert path.read_text(encoding="utf-8") == "1\n2\n3"
        assert "Wrote 3 numbers" in capsys.readouterr().err

    def test_in_place_parse_error(self, tmp_path: Path, capsys):
        path = _write(tmp_path, "bad.toml", "a = ")
        assert main([str(path), "--in-place"]) == 1
        assert path.read_text(encoding="utf-8") == "a = "
        assert "Error: Failed to parse file" in capsys.readouterr().err
