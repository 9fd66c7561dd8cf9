"""
Tests for the epq-check command line tool.
"""

import io
import json

import pytest

from epq.cli import main


class TestNormalizeCommand:
    """Test the normalize subcommand."""

    def test_prints_result(self, capsys):
        """Test that the normalization result is printed as JSON."""
        assert main(["normalize", "Multiple blank_1 and blank_2 here"]) == 0
        output = json.loads(capsys.readouterr().out)
        assert output == {
            "normalized_text": "Multiple ___ and ___ here",
            "blank_positions": [1, 2],
            "original_format": "blank_n",
        }

    def test_reads_stdin(self, capsys, monkeypatch):
        """Test that - reads the text from standard input."""
        monkeypatch.setattr("sys.stdin", io.StringIO("Fill [ ] in"))
        assert main(["normalize", "-"]) == 0
        assert json.loads(capsys.readouterr().out)["normalized_text"] == "Fill ___ in"


class TestLintCommand:
    """Test the lint subcommand."""

    def test_valid_configuration(self, capsys):
        """Test exit status 0 for matching blanks."""
        assert main(["lint", "A ___", "--blanks", '[{"blank_id": 1}]']) == 0
        assert json.loads(capsys.readouterr().out)["is_valid"] is True

    def test_mismatch(self, capsys):
        """Test exit status 1 and the report message on mismatch."""
        assert main(["lint", "A ___ B ___", "--blanks", "[]"]) == 1
        output = json.loads(capsys.readouterr().out)
        assert output["message"] == "Question has 2 blanks but only 0 configured"

    def test_bad_json(self, capsys):
        """Test exit status 2 for unreadable blanks."""
        assert main(["lint", "A ___", "--blanks", "[oops"]) == 2
        assert "not valid JSON" in capsys.readouterr().err

    def test_blanks_must_be_array(self, capsys):
        """Test exit status 2 when blanks is not an array."""
        assert main(["lint", "A ___", "--blanks", '{"blank_id": 1}']) == 2


class TestValidateCommand:
    """Test the validate subcommand."""

    def test_correct_answer(self, capsys):
        """Test exit status 0 and the verdict for a correct answer."""
        assert main(["validate", "--type", "multiple_choice", "--correct", "A", "a"]) == 0
        output = json.loads(capsys.readouterr().out)
        assert output == {"correct": True, "question_type": "multiple_choice", "reason": "exact_match"}

    def test_incorrect_answer(self):
        """Test exit status 1 for an incorrect answer."""
        assert main(["-q", "validate", "--type", "numerical_entry", "--correct", "100", "101"]) == 1

    def test_options(self, capsys):
        """Test that options are applied."""
        args = ["validate", "--type", "short_answer", "--correct", "photo",
                "--options", '{"caseSensitive": true}', "Photo"]
        assert main(args) == 1

    def test_verbose_includes_diagnostics(self, capsys):
        """Test that --verbose prints the diagnostics."""
        args = ["validate", "-v", "--type", "drag_and_drop",
                "--correct", '{"zone_1":["a"]}', '{"1":["a"]}']
        assert main(args) == 0
        output = json.loads(capsys.readouterr().out)
        assert output["diagnostics"][0]["event"] == "validating_answer"

    def test_bad_options(self, capsys):
        """Test exit status 2 for a wrongly shaped option bag."""
        args = ["validate", "--type", "short_answer", "--correct", "a",
                "--options", '{"blanks": "nope"}', "a"]
        assert main(args) == 2
        assert "wrong shape" in capsys.readouterr().err

    def test_quiet(self, capsys):
        """Test that --quiet suppresses output."""
        assert main(["-q", "validate", "--type", "either_or", "--correct", "A", "A"]) == 0
        assert capsys.readouterr().out == ""


def test_missing_command():
    """Test that argparse usage errors exit with status 2."""
    with pytest.raises(SystemExit) as exc_info:
        main([])
    assert exc_info.value.code == 2
