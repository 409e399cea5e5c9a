"""Test word wrapping and logical-to-visual cursor mapping."""

from hypothesis import given, settings, strategies as st

from hollow.model import CursorPosition
from hollow.view import (
    INDENT,
    TerminalTextView,
    build_visual_lines,
    logical_to_visual,
    wrap_line,
)


def unwrap(rows):
    return rows[0] + "".join(row[len(INDENT):] for row in rows[1:])


def test_short_line_is_one_row():
    assert wrap_line("hello world", 20) == ["hello world"]


def test_empty_line_is_one_empty_row():
    assert wrap_line("", 20) == [""]


def test_wraps_at_word_boundaries_with_indent():
    line = "the quick brown fox jumps over the lazy dog"
    rows = wrap_line(line, 20)
    assert rows == [
        "the quick brown fox ",
        "  jumps over the ",
        "  lazy dog",
    ]
    assert all(len(row) <= 20 for row in rows)


def test_long_word_is_broken():
    rows = wrap_line("x" * 30, 14)
    assert rows == ["x" * 14, "  " + "x" * 12, "  " + "x" * 4]


def test_narrow_width_disables_wrapping():
    """With less than 10 usable columns the line is emitted verbatim."""
    line = "some text that is longer than the width"
    assert wrap_line(line, 11) == [line]
    assert len(wrap_line(line, 12)) > 1


def test_build_visual_lines_empty_document():
    layout = build_visual_lines("", 40)
    assert layout.rows == [""]
    assert layout.row_info[0].logical_line == 0
    assert not layout.row_info[0].is_continuation


def test_build_visual_lines_tracks_logical_lines():
    content = "short\n" + "word " * 10 + "\n"
    layout = build_visual_lines(content, 20)
    assert [info.logical_line for info in layout.row_info] == [0, 1, 1, 1, 2]
    assert [info.is_continuation for info in layout.row_info] == [False, False, True, True, False]


def test_logical_to_visual_on_first_row():
    assert logical_to_visual("hello", 0, 3, 20) == (0, 3)


def test_logical_to_visual_on_continuation_row_includes_indent():
    line = "the quick brown fox jumps over the lazy dog"
    # 'j' of 'jumps' starts the second row
    col = line.index("jumps")
    assert logical_to_visual(line, 0, col, 20) == (1, 2)
    assert logical_to_visual(line, 0, col + 2, 20) == (1, 4)


def test_logical_to_visual_at_line_end():
    line = "the quick brown fox jumps over the lazy dog"
    assert logical_to_visual(line, 0, len(line), 20) == (2, 10)


def test_logical_to_visual_counts_rows_of_previous_lines():
    content = "word " * 10 + "\nnext"
    assert logical_to_visual(content, 1, 2, 20) == (3, 2)


def test_logical_to_visual_uses_byte_columns():
    # 'é' is two bytes
    assert logical_to_visual("héllo", 0, 3, 20) == (0, 2)


def test_view_scrolls_to_keep_cursor_visible():
    content = "\n".join(f"line {i}" for i in range(30))
    view = TerminalTextView(num_rows=10, num_columns=40)
    view.render(content, CursorPosition(25, 0))
    assert view.top_row == 16
    assert view.visual_cursor_y == 9
    assert view.lines[0] == "line 16"
    view.render(content, CursorPosition(3, 2))
    assert view.top_row == 3
    assert view.visual_cursor_y == 0
    assert view.visual_cursor_x == 2


words = st.text(alphabet="abcdefghij", min_size=1, max_size=25)
lines = st.lists(words, max_size=15).flatmap(
    lambda ws: st.lists(st.sampled_from([" ", "  ", "\t"]), min_size=len(ws), max_size=len(ws)).map(
        lambda seps: "".join(w + s for w, s in zip(ws, seps))
    )
)


@settings(max_examples=200)
@given(line=lines, width=st.integers(min_value=12, max_value=100))
def test_rewrapping_unwrapped_rows_is_idempotent(line, width):
    rows = wrap_line(line, width)
    assert unwrap(rows) == line
    assert wrap_line(unwrap(rows), width) == rows
    assert all(len(row) <= width for row in rows)


@settings(max_examples=200)
@given(line=lines, width=st.integers(min_value=12, max_value=100), data=st.data())
def test_visual_position_stays_in_bounds(line, width, data):
    col = data.draw(st.integers(min_value=0, max_value=len(line)))
    row, vcol = logical_to_visual(line, 0, col, width)
    layout = build_visual_lines(line, width)
    assert 0 <= row < len(layout.rows)
    assert 0 <= vcol <= width
