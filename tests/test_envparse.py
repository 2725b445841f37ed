"""Tests for sprintsim.lib.envparse module."""

import pytest

from sprintsim.lib.envparse import load_env, parse_env


class TestParseEnv:
    """Tests for parse_env."""

    def test_basic(self):
        assert parse_env("A=1\nB_2=two\n") == {"A": "1", "B_2": "two"}

    def test_skips_comments_and_blank_lines(self):
        text = "# header\n\nA=1\n   # indented comment\n"
        assert parse_env(text) == {"A": "1"}

    def test_strips_quotes(self):
        assert parse_env('A="hello"\nB=\'x\'') == {"A": "hello", "B": "x"}

    def test_inline_comment(self):
        assert parse_env("A=5  # five") == {"A": "5"}

    def test_hash_inside_quotes_kept(self):
        assert parse_env('A="a # b"') == {"A": "a # b"}

    def test_inline_comment_after_quoted_value(self):
        """Comment after the closing quote is dropped and quotes stripped."""
        assert parse_env('PAYOUT_CURVE="1.5"  # steeper\n') == {"PAYOUT_CURVE": "1.5"}
        assert parse_env("A='a # b' # note") == {"A": "a # b"}

    def test_unterminated_quote_kept_verbatim(self):
        assert parse_env('A="open # x') == {"A": '"open # x'}

    def test_empty_value(self):
        assert parse_env("SEED=") == {"SEED": ""}

    def test_missing_equals_raises(self):
        with pytest.raises(ValueError, match="Line 2"):
            parse_env("A=1\nBROKEN\n")

    def test_invalid_key_raises(self):
        with pytest.raises(ValueError, match="Invalid key"):
            parse_env("lower=1")

    def test_duplicate_key_raises(self):
        with pytest.raises(ValueError, match="Duplicate key 'A'"):
            parse_env("A=1\nA=2")


class TestLoadEnv:
    """Tests for load_env."""

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_env(str(tmp_path / "nope.env"))

    def test_reads_file(self, tmp_path):
        path = tmp_path / "balance.env"
        path.write_text("TICKS_PER_DAY=8\n")
        assert load_env(str(path)) == {"TICKS_PER_DAY": "8"}
