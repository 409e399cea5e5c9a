"""Test cursor movement: characters, lines, words, paragraphs, pages."""

from hollow.model import CursorPosition, Direction, TextModel, Unit


def create_test_model(text, line=0, column=0):
    """Create a model with the cursor placed at (line, column)."""
    model = TextModel(text)
    model._cursor = CursorPosition(line, column)
    return model


def test_right_char_steps_over_multibyte_character():
    model = create_test_model("héllo")
    model.move_cursor(Direction.RIGHT, Unit.CHAR)
    assert model.cursor_position == CursorPosition(0, 1)
    model.move_cursor(Direction.RIGHT, Unit.CHAR)
    assert model.cursor_position == CursorPosition(0, 3)


def test_left_char_steps_over_multibyte_character():
    model = create_test_model("héllo", 0, 3)
    model.move_cursor(Direction.LEFT, Unit.CHAR)
    assert model.cursor_position == CursorPosition(0, 1)


def test_char_moves_wrap_across_lines():
    model = create_test_model("ab\ncd", 0, 2)
    model.move_cursor(Direction.RIGHT, Unit.CHAR)
    assert model.cursor_position == CursorPosition(1, 0)
    model.move_cursor(Direction.LEFT, Unit.CHAR)
    assert model.cursor_position == CursorPosition(0, 2)


def test_char_moves_are_noops_at_document_edges():
    model = create_test_model("ab")
    model.move_cursor(Direction.LEFT, Unit.CHAR)
    assert model.cursor_position == CursorPosition(0, 0)
    model.move_document_end()
    model.move_cursor(Direction.RIGHT, Unit.CHAR)
    assert model.cursor_position == CursorPosition(0, 2)


def test_sticky_column_across_short_line():
    """Down onto a short line clamps, up again restores the column."""
    model = create_test_model("héllo\nab", 0, 6)
    model.move_cursor(Direction.DOWN, Unit.LINE)
    assert model.cursor_position == CursorPosition(1, 2)
    assert model.sticky_column == 6
    model.move_cursor(Direction.UP, Unit.LINE)
    assert model.cursor_position == CursorPosition(0, 6)


def test_vertical_move_snaps_to_character_boundary():
    model = create_test_model("abc\naé", 0, 2)
    model.move_cursor(Direction.DOWN, Unit.LINE)
    # Byte 2 is inside 'é'
    assert model.cursor_position == CursorPosition(1, 1)


def test_horizontal_move_clears_sticky_column():
    model = create_test_model("long line\nab\nlong line", 0, 8)
    model.move_cursor(Direction.DOWN, Unit.LINE)
    model.move_cursor(Direction.LEFT, Unit.CHAR)
    assert model.sticky_column is None
    model.move_cursor(Direction.DOWN, Unit.LINE)
    assert model.cursor_position == CursorPosition(2, 1)


def test_edit_clears_sticky_column():
    model = create_test_model("long line\nab", 0, 8)
    model.move_cursor(Direction.DOWN, Unit.LINE)
    model.insert_char("x")
    assert model.sticky_column is None


def test_up_on_first_line_is_noop():
    model = create_test_model("abc\ndef", 0, 2)
    model.move_cursor(Direction.UP, Unit.LINE)
    assert model.cursor_position == CursorPosition(0, 2)


def test_line_start_and_end():
    model = create_test_model("héllo", 0, 3)
    model.move_cursor(Direction.RIGHT, Unit.LINE)
    assert model.cursor_position == CursorPosition(0, 6)
    model.move_cursor(Direction.LEFT, Unit.LINE)
    assert model.cursor_position == CursorPosition(0, 0)


def test_document_start_and_end():
    model = create_test_model("one\ntwo\nthree", 1, 1)
    model.move_cursor(Direction.DOWN, Unit.DOCUMENT)
    assert model.cursor_position == CursorPosition(2, 5)
    model.move_cursor(Direction.UP, Unit.DOCUMENT)
    assert model.cursor_position == CursorPosition(0, 0)


def test_right_word_basic():
    model = create_test_model("hello world test")
    model.move_cursor(Direction.RIGHT, Unit.WORD)
    assert model.cursor_position == CursorPosition(0, 6)
    model.move_cursor(Direction.RIGHT, Unit.WORD)
    assert model.cursor_position == CursorPosition(0, 12)
    model.move_cursor(Direction.RIGHT, Unit.WORD)
    assert model.cursor_position == CursorPosition(0, 16)


def test_right_word_stops_after_newline():
    """Forward word motion stops right after a newline, even before indentation."""
    model = create_test_model("foo  \n  bar")
    model.move_cursor(Direction.RIGHT, Unit.WORD)
    assert model.cursor_position == CursorPosition(1, 0)


def test_left_word_skips_blank_lines():
    """Backward word motion has no newline stop; it skips blank lines."""
    model = create_test_model("foo\n\n\nbar", 3, 0)
    model.move_cursor(Direction.LEFT, Unit.WORD)
    assert model.cursor_position == CursorPosition(0, 0)


def test_word_motion_asymmetry():
    """w from 'foo' stops at the blank line; b from 'bar' jumps over it."""
    model = create_test_model("foo\n\nbar")
    model.move_cursor(Direction.RIGHT, Unit.WORD)
    assert model.cursor_position == CursorPosition(1, 0)

    model = create_test_model("foo\n\nbar", 2, 0)
    model.move_cursor(Direction.LEFT, Unit.WORD)
    assert model.cursor_position == CursorPosition(0, 0)


def test_left_word_basic():
    model = create_test_model("hello world test", 0, 16)
    model.move_cursor(Direction.LEFT, Unit.WORD)
    assert model.cursor_position == CursorPosition(0, 12)
    model.move_cursor(Direction.LEFT, Unit.WORD)
    assert model.cursor_position == CursorPosition(0, 6)
    model.move_cursor(Direction.LEFT, Unit.WORD)
    assert model.cursor_position == CursorPosition(0, 0)
    model.move_cursor(Direction.LEFT, Unit.WORD)
    assert model.cursor_position == CursorPosition(0, 0)


def test_paragraph_round_trip():
    model = create_test_model("Line one.\n\nLine two.")
    model.move_cursor(Direction.DOWN, Unit.PARAGRAPH)
    assert model.cursor_position == CursorPosition(2, 0)
    model.move_cursor(Direction.UP, Unit.PARAGRAPH)
    assert model.cursor_position == CursorPosition(0, 0)


def test_paragraph_down_treats_whitespace_lines_as_blank():
    model = create_test_model("a\nb\n   \n\t\nc\nd")
    model.move_cursor(Direction.DOWN, Unit.PARAGRAPH)
    assert model.cursor_position == CursorPosition(4, 0)


def test_paragraph_down_without_next_paragraph_goes_to_end():
    model = create_test_model("first\nsecond")
    model.move_cursor(Direction.DOWN, Unit.PARAGRAPH)
    assert model.cursor_position == CursorPosition(1, 6)


def test_paragraph_up_from_middle_goes_to_paragraph_start():
    model = create_test_model("x\n\na\nb\nc", 4, 1)
    model.move_cursor(Direction.UP, Unit.PARAGRAPH)
    assert model.cursor_position == CursorPosition(2, 0)
    model.move_cursor(Direction.UP, Unit.PARAGRAPH)
    assert model.cursor_position == CursorPosition(0, 0)


def test_page_down_clamps_and_remembers_column():
    text = "\n".join(["abcdef"] * 5 + ["ab"])
    model = create_test_model(text, 0, 5)
    model.move_cursor(Direction.DOWN, Unit.PAGE, page_height=20)
    assert model.cursor_position == CursorPosition(5, 2)
    model.move_cursor(Direction.UP, Unit.PAGE, page_height=3)
    assert model.cursor_position == CursorPosition(2, 5)


def test_cursor_position_is_a_copy():
    model = create_test_model("abc")
    pos = model.cursor_position
    pos.column = 2
    assert model.cursor_position == CursorPosition(0, 0)
