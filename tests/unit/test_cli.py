"""Tests for the pubchunks command line interface."""

import json

from pubchunks.cli import build_parser, main


class TestParser:
    """Test argument parsing."""

    def test_extract_defaults(self, pensoft_xml):
        args = build_parser().parse_args(["extract", str(pensoft_xml)])
        assert args.command == "extract"
        assert args.sections is None
        assert args.publisher == "auto"
        assert args.format == "table"
        assert args.workers == 4

    def test_sections_choices(self, pensoft_xml):
        args = build_parser().parse_args(["extract", str(pensoft_xml), "-s", "title", "refs"])
        assert args.sections == ["title", "refs"]


class TestCommands:
    """Test subcommands end to end."""

    def test_extract_table(self, pensoft_xml, capsys):
        code = main(["extract", str(pensoft_xml), "--sections", "title", "refs"])
        out = capsys.readouterr().out
        assert code == 0
        assert "== document (1 rows)" in out
        assert "== refs (3 rows)" in out
        assert "A new species of Agra" in out

    def test_extract_json(self, pensoft_xml, capsys):
        code = main(["extract", str(pensoft_xml), "-s", "title", "-f", "json"])
        data = json.loads(capsys.readouterr().out)
        assert code == 0
        assert data[0]["publisher"] == "pensoft"
        assert data[0]["sections"]["title"]["status"] == "found"

    def test_extract_failure_exit_code(self, pensoft_xml, malformed_xml, capsys):
        """Any failed document gives exit code 1, others still reported."""
        code = main(
            ["extract", str(pensoft_xml), str(malformed_xml), "-s", "title", "-f", "json", "--quiet-errors"]
        )
        data = json.loads(capsys.readouterr().out)
        assert code == 1
        assert len(data) == 2
        assert data[1]["error"]["kind"] == "parse_error"

    def test_extract_bad_publisher(self, pensoft_xml, capsys):
        code = main(["extract", str(pensoft_xml), "--publisher", "nature"])
        assert code == 2
        assert "Unknown publisher" in capsys.readouterr().err

    def test_detect(self, pensoft_xml, elsevier_xml, capsys):
        code = main(["detect", str(pensoft_xml), str(elsevier_xml)])
        out = capsys.readouterr().out
        assert code == 0
        assert "pensoft" in out
        assert "elsevier" in out
        assert "namespace" in out

    def test_detect_error(self, malformed_xml, capsys):
        code = main(["detect", str(malformed_xml)])
        assert code == 1
        assert "error:" in capsys.readouterr().out

    def test_sections(self, capsys):
        assert main(["sections"]) == 0
        lines = capsys.readouterr().out.split()
        assert "executive_summary" in lines
        assert len(lines) == 19

    def test_sections_for_publisher(self, capsys):
        assert main(["sections", "--publisher", "hindawi"]) == 0
        lines = capsys.readouterr().out.split()
        assert "refs_dois" not in lines
        assert "title" in lines

    def test_sections_unknown_publisher(self, capsys):
        """An unknown publisher is reported, not a traceback."""
        assert main(["sections", "--publisher", "nature"]) == 2
        assert "Unknown publisher 'nature'" in capsys.readouterr().err

    def test_publishers(self, capsys):
        assert main(["publishers"]) == 0
        assert "f1000research" in capsys.readouterr().out.split()
