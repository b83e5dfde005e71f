"""Tests for the match engine"""

from grrs.match import ansi_highlight, decode_line, find_matches, render_match
from grrs.models import MatchRecord


class TestFindMatches:
    """Test scanning line sequences for a literal pattern"""

    def test_finds_only_matching_lines(self):
        """Test that only lines containing the pattern are returned"""
        lines = ["hello", "how", "are you", "doing"]

        matches = list(find_matches(lines, "are "))

        assert [m.text for m in matches] == ["are you"]
        assert matches[0].line_index == 2

    def test_empty_pattern_matches_every_line(self):
        """Test that an empty pattern yields all lines in order"""
        lines = ["Should", "show all", "lines"]

        matches = list(find_matches(lines, ""))

        assert [m.text for m in matches] == lines
        assert [m.line_index for m in matches] == [0, 1, 2]

    def test_match_is_case_sensitive(self):
        """Test that matching is a case-sensitive substring test"""
        lines = ["Error here", "error here", "ERROR here"]

        matches = list(find_matches(lines, "error"))

        assert [m.line_index for m in matches] == [1]

    def test_no_regex_interpretation(self):
        """Test that regex metacharacters are matched literally"""
        lines = ["a.c", "abc", "[x]+"]

        assert [m.text for m in find_matches(lines, "a.c")] == ["a.c"]
        assert [m.text for m in find_matches(lines, "[x]+")] == ["[x]+"]

    def test_no_matches(self):
        """Test that lines without the pattern produce no records"""
        assert list(find_matches(["one", "two"], "three")) == []

    def test_matches_in_ascending_line_order(self):
        """Test that records follow source line order"""
        lines = ["x", "match 1", "y", "z", "match 4", "match 5"]

        matches = list(find_matches(lines, "match"))

        assert [m.line_index for m in matches] == [1, 4, 5]
        assert [m.line_number for m in matches] == [2, 5, 6]

    def test_scan_is_restartable(self):
        """Test that iterating the same scan twice yields the same records"""
        scan = find_matches(["match a", "nope", "match b"], "match", match_context=2)

        first = list(scan)
        second = list(scan)

        assert first == second
        assert len(first) == 2

    def test_scan_is_lazy(self):
        """Test that records are produced one at a time"""
        scan = iter(find_matches(["match a", "match b"], "match"))

        assert next(scan) == MatchRecord(line_index=0, text="match a")
        assert next(scan) == MatchRecord(line_index=1, text="match b")

    def test_undecodable_lines_are_skipped(self):
        """Test that invalid UTF-8 lines are skipped without affecting line indexes"""
        lines = [b"good match", b"\xff\xfe match", b"another match"]

        matches = list(find_matches(lines, "match"))

        assert [m.line_index for m in matches] == [0, 2]
        assert [m.text for m in matches] == ["good match", "another match"]

    def test_bytes_and_str_lines(self):
        """Test that decoded byte lines and str lines behave the same"""
        assert list(find_matches([b"caf\xc3\xa9 ok"], "ok")) == list(find_matches(["café ok"], "ok"))

    def test_line_terminators_stripped(self):
        """Test that trailing newlines are not part of the rendered text"""
        matches = list(find_matches([b"a match\r\n", "b match\n"], "match"))

        assert [m.text for m in matches] == ["a match", "b match"]

    def test_highlight_applied_to_match(self):
        """Test that the highlighter wraps the matched span"""
        matches = list(find_matches(["say hello"], "hello", highlight=lambda s: f"<{s}>"))

        assert matches[0].text == "say <hello>"


class TestRenderMatch:
    """Test context window extraction"""

    def test_context_clips_both_sides(self):
        """Test the clipped window with leading and trailing ellipsis"""
        assert render_match("abcXYZdef", "XYZ", match_context=1) == "...cXYZd..."

    def test_context_zero_renders_full_line(self):
        """Test that context=0 means unbounded"""
        assert render_match("abcXYZdef", "XYZ", match_context=0) == "abcXYZdef"

    def test_context_start_at_zero_keeps_full_prefix(self):
        """Test that a window reaching the line start is not marked as clipped"""
        assert render_match("abcXYZdef", "XYZ", match_context=3) == "abcXYZdef"

    def test_context_two(self):
        """Test a window that is clipped by one character on each side"""
        assert render_match("abcXYZdef", "XYZ", match_context=2) == "...bcXYZde..."

    def test_context_end_exactly_at_line_end(self):
        """Test that context_end == line length renders the full suffix without ellipsis"""
        # m_start=3, p_len=3, context=3 -> context_end=9 == len(line)
        assert render_match("abcXYZdef", "XYZ", match_context=3).endswith("def")
        assert not render_match("abcXYZdef", "XYZ", match_context=3).endswith("...")

    def test_context_larger_than_line(self):
        """Test that a window wider than the line renders it unchanged"""
        assert render_match("abcXYZdef", "XYZ", match_context=100) == "abcXYZdef"

    def test_match_at_line_start(self):
        """Test a match at offset 0 with only the suffix clipped"""
        assert render_match("XYZabcdef", "XYZ", match_context=2) == "XYZab..."

    def test_match_at_line_end(self):
        """Test a match ending the line with only the prefix clipped"""
        assert render_match("abcdefXYZ", "XYZ", match_context=2) == "...efXYZ"

    def test_first_occurrence_only(self):
        """Test that only the first match in a line is rendered"""
        calls = []

        def highlight(text):
            calls.append(text)
            return f"[{text}]"

        result = render_match("XYZ abc XYZ", "XYZ", match_context=2, highlight=highlight)

        assert result == "[XYZ] a..."
        assert calls == ["XYZ"]

    def test_no_match_returns_none(self):
        """Test that a line without the pattern renders to None"""
        assert render_match("abcdef", "XYZ") is None

    def test_render_is_pure(self):
        """Test that rendering twice yields identical text"""
        first = render_match("some long line with a needle inside", "needle", match_context=4)
        second = render_match("some long line with a needle inside", "needle", match_context=4)

        assert first == second == "...h a needle ins..."

    def test_highlight_with_context(self):
        """Test that the highlight wraps only the matched span inside the window"""
        result = render_match("abcXYZdef", "XYZ", match_context=1, highlight=lambda s: f"[{s}]")

        assert result == "...c[XYZ]d..."

    def test_empty_pattern_not_highlighted(self):
        """Test that an empty match span is not passed to the highlighter"""
        result = render_match("hello", "", highlight=lambda s: f"[{s}]")

        assert result == "hello"

    def test_ansi_highlight(self):
        """Test that ansi_highlight adds escape codes around the text"""
        result = render_match("abcXYZdef", "XYZ", highlight=ansi_highlight)

        assert "\x1b[" in result
        assert "XYZ" in result
        assert result.startswith("abc")


class TestDecodeLine:
    """Test raw line decoding"""

    def test_decodes_utf8(self):
        """Test valid UTF-8 bytes decode to text"""
        assert decode_line("zażółć".encode("utf-8")) == "zażółć"

    def test_invalid_utf8_returns_none(self):
        """Test invalid bytes are reported as undecodable"""
        assert decode_line(b"\xc3\x28") is None

    def test_strips_crlf(self):
        """Test CRLF and LF terminators are removed"""
        assert decode_line("line\r\n") == "line"
        assert decode_line(b"line\n") == "line"

    def test_strips_only_one_terminator(self):
        """Test that a lone carriage return inside the line survives"""
        assert decode_line("line\r\r\n") == "line\r"
        assert decode_line(b"line\n\n") == "line\n"
