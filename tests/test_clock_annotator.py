"""
Unit tests for clock interval annotations.

Tests annotation run detection, opening and closing intervals, and
parsing of existing tokens below a task line.
"""

from clock_kanban.core.clock.annotator import (
    annotation_run,
    close_interval,
    find_open_interval,
    format_token,
    is_annotation_line,
    list_intervals,
    open_interval,
)


class TestAnnotationLines:
    """Test the annotation-only line grammar."""

    def test_single_open_token(self) -> None:
        assert is_annotation_line("  [clock::2024-05-01T09:00:00]")

    def test_mixed_tokens(self) -> None:
        assert is_annotation_line("[clock::09:00--10:00] [clock::11:00]  ")

    def test_text_after_token_is_not_annotation(self) -> None:
        assert not is_annotation_line("  [clock::09:00] remember the milk")

    def test_blank_line_is_not_annotation(self) -> None:
        assert not is_annotation_line("")
        assert not is_annotation_line("   ")

    def test_run_stops_at_first_other_line(self) -> None:
        lines = [
            "- [ ] Task",
            "  [clock::a--b]",
            "  [clock::c]",
            "- [ ] Next task",
            "  [clock::d]",
        ]
        assert annotation_run(lines, 0) == range(1, 3)

    def test_empty_run_for_last_line(self) -> None:
        assert len(annotation_run(["- [ ] Task"], 0)) == 0


class TestOpenInterval:
    """Test opening intervals."""

    def test_inserts_line_with_fallback_indent(self) -> None:
        lines = ["- [ ] Buy milk", "- [ ] Other"]
        result = open_interval(lines, 0, "2024-05-01T09:00:00")

        assert result == ["- [ ] Buy milk", "  [clock::2024-05-01T09:00:00]", "- [ ] Other"]

    def test_uses_task_indentation(self) -> None:
        lines = ["    - [ ] Nested task"]
        result = open_interval(lines, 0, "t0")

        assert result[1] == "    [clock::t0]"

    def test_appends_to_existing_annotation_line(self) -> None:
        lines = ["- [ ] Task", "  [clock::t0--t1]   ", "text"]
        result = open_interval(lines, 0, "t2")

        assert result == ["- [ ] Task", "  [clock::t0--t1] [clock::t2]", "text"]

    def test_appends_to_last_line_of_run(self) -> None:
        lines = ["- [ ] Task", "  [clock::a--b]", "  [clock::c--d]"]
        result = open_interval(lines, 0, "e")

        assert result[1] == "  [clock::a--b]"
        assert result[2] == "  [clock::c--d] [clock::e]"

    def test_double_open_creates_two_open_tokens(self) -> None:
        lines = open_interval(["- [ ] Task"], 0, "t0")
        lines = open_interval(lines, 0, "t1")

        assert lines[1] == "  [clock::t0] [clock::t1]"

    def test_does_not_mutate_input(self) -> None:
        lines = ["- [ ] Task"]
        open_interval(lines, 0, "t0")
        assert lines == ["- [ ] Task"]


class TestCloseInterval:
    """Test closing intervals."""

    def test_open_then_close_round_trip(self) -> None:
        lines = ["- [ ] Task"]
        result = close_interval(open_interval(lines, 0, "t0"), 0, "t1")

        assert result == ["- [ ] Task", "  [clock::t0--t1]"]

    def test_closes_only_last_open_token(self) -> None:
        lines = ["- [ ] Task", "  [clock::a] [clock::b--c] [clock::d]"]
        result = close_interval(lines, 0, "e")

        assert result[1] == "  [clock::a] [clock::b--c] [clock::d--e]"

    def test_closes_open_token_on_earlier_run_line(self) -> None:
        lines = ["- [ ] Task", "  [clock::a]", "  [clock::b--c]"]
        result = close_interval(lines, 0, "d")

        assert result[1] == "  [clock::a--d]"
        assert result[2] == "  [clock::b--c]"

    def test_no_open_token_is_noop(self) -> None:
        lines = ["- [ ] Task", "  [clock::a--b]"]
        assert close_interval(lines, 0, "c") == lines

    def test_no_annotation_is_noop(self) -> None:
        lines = ["- [ ] Task", "Some prose [clock::a]"]
        assert close_interval(lines, 0, "c") == lines


class TestIntervalParsing:
    """Test token discovery."""

    def test_find_open_interval(self) -> None:
        lines = ["- [ ] Task", "  [clock::a--b] [clock::c]"]
        token = find_open_interval(lines, 0)

        assert token is not None
        assert token.start == "c"
        assert token.is_open
        assert token.line_index == 1
        assert lines[1][token.span[0]:token.span[1]] == "[clock::c]"

    def test_find_open_interval_none(self) -> None:
        assert find_open_interval(["- [ ] Task", "  [clock::a--b]"], 0) is None

    def test_list_intervals(self) -> None:
        lines = ["- [ ] Task", "  [clock::a--b]", "  [clock::c]", "- [ ] Other"]
        tokens = list_intervals(lines, 0)

        assert [(t.start, t.end) for t in tokens] == [("a", "b"), ("c", None)]
        assert tokens[0].text == "[clock::a--b]"

    def test_format_token(self) -> None:
        assert format_token("t0") == "[clock::t0]"
        assert format_token("t0", "t1") == "[clock::t0--t1]"


class TestCrlfLines:
    """Lines split from a CRLF document end with a carriage return."""

    def test_inserted_line_keeps_carriage_return(self) -> None:
        lines = ["- [ ] Task\r", "- [ ] Next\r", ""]
        result = open_interval(lines, 0, "t0")

        assert result == ["- [ ] Task\r", "  [clock::t0]\r", "- [ ] Next\r", ""]

    def test_appended_token_keeps_carriage_return(self) -> None:
        lines = ["- [ ] Task\r", "  [clock::a--b]  \r", ""]
        result = open_interval(lines, 0, "c")

        assert result[1] == "  [clock::a--b] [clock::c]\r"

    def test_close_keeps_carriage_return(self) -> None:
        lines = ["- [ ] Task\r", "  [clock::a]\r"]
        assert close_interval(lines, 0, "b")[1] == "  [clock::a--b]\r"

    def test_last_line_without_final_newline(self) -> None:
        lines = ["# Inbox\r", "- [ ] Task"]
        result = open_interval(lines, 1, "t0")

        assert "\n".join(result) == "# Inbox\r\n- [ ] Task\r\n  [clock::t0]"

    def test_lf_document_unchanged(self) -> None:
        assert open_interval(["- [ ] Task"], 0, "t0") == ["- [ ] Task", "  [clock::t0]"]
