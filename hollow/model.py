import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from .buffer import ByteColumn, CharOffset, TextBuffer
from .constants import EditorConstants
from .undo import DeleteItem, InsertItem, UndoManager


@dataclass
class CursorPosition:
    line: int = 0
    column: ByteColumn = ByteColumn(0)

    def __lt__(self, other):
        if self.line != other.line:
            return self.line < other.line
        return self.column < other.column

    def __ge__(self, other):
        return not self < other


class Direction(Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


class Unit(Enum):
    CHAR = "char"
    WORD = "word"
    LINE = "line"
    PARAGRAPH = "paragraph"
    PAGE = "page"
    DOCUMENT = "document"


class TextModel:
    """Document text, cursor, clipboard and undo history.

    Every operation is a silent no-op when it cannot apply (backspace at
    the document start, paste with an empty clipboard, undo with no
    history, ...). Nothing here raises for ordinary editing input.
    """

    buffer: TextBuffer
    sticky_column: Optional[ByteColumn]

    def __init__(self, text: str = "", clock: Callable[[], float] = time.monotonic):
        self.buffer = TextBuffer(text)
        self._cursor = CursorPosition()
        self.sticky_column = None
        self._clipboard: Optional[str] = None
        self._modified = False
        self.undo_manager = UndoManager(clock=clock)

    # --- Queries ---

    @property
    def cursor_position(self) -> CursorPosition:
        return CursorPosition(self._cursor.line, self._cursor.column)

    @property
    def clipboard(self) -> Optional[str]:
        return self._clipboard

    def content(self) -> str:
        return self.buffer.text()

    def line(self, index: int) -> Optional[str]:
        """Text of logical line ``index`` without its newline."""
        if 0 <= index < self.buffer.line_count():
            return self.buffer.line(index)
        return None

    def line_count(self) -> int:
        return self.buffer.line_count()

    def word_count(self) -> int:
        return len(self.content().split())

    def is_modified(self) -> bool:
        return self._modified

    def char_offset(self) -> CharOffset:
        return self.buffer.to_char_offset(self._cursor.line, self._cursor.column)

    # --- Lifecycle ---

    def load(self, text: str):
        """Replace the document with freshly read text."""
        self._replace(text)
        self._modified = False

    def set_content(self, text: str):
        """Replace the document wholesale, e.g. when restoring a version."""
        self._replace(text)
        self._modified = True

    def _replace(self, text: str):
        self.buffer.set_text(text)
        self._cursor = CursorPosition()
        self.sticky_column = None
        self.undo_manager.clear()

    def mark_saved(self):
        self._modified = False
        self.mark_undo_boundary()

    def mark_undo_boundary(self):
        self.undo_manager.mark_boundary()

    # --- Cursor helpers ---

    def _set_cursor_from_offset(self, offset: int):
        line, column = self.buffer.from_char_offset(offset)
        self._cursor = CursorPosition(line, column)

    def _clamp_cursor(self):
        line = max(0, min(self._cursor.line, self.buffer.line_count() - 1))
        column = self.buffer.snap_to_boundary(line, self._cursor.column)
        self._cursor = CursorPosition(line, column)

    def _after_edit(self):
        self.sticky_column = None
        self._modified = True
        self._clamp_cursor()

    # --- Editing ---

    def insert_char(self, ch: str):
        pos = self.char_offset()
        self.buffer.insert(pos, ch)
        after = CharOffset(pos + len(ch))
        self.undo_manager.record(DeleteItem(pos, ch, pos, after))
        self._set_cursor_from_offset(after)
        self._after_edit()

    def insert_newline(self):
        self.insert_char("\n")

    def delete_backward(self):
        """Delete the character before the cursor, joining lines at column 0."""
        pos = self.char_offset()
        if pos == 0:
            return
        removed = self.buffer.remove(pos - 1, pos)
        self.undo_manager.record(InsertItem(CharOffset(pos - 1), removed, pos, CharOffset(pos - 1)))
        self._set_cursor_from_offset(pos - 1)
        self._after_edit()

    def delete_forward(self):
        pos = self.char_offset()
        if pos >= self.buffer.len_chars():
            return
        removed = self.buffer.remove(pos, pos + 1)
        self.undo_manager.record(InsertItem(pos, removed, pos, pos))
        self._after_edit()

    def delete_line(self):
        line = self._cursor.line
        start = self.buffer.line_start(line)
        end = start + len(self.buffer.line(line))
        if line + 1 < self.buffer.line_count():
            end += 1
        if end <= start:
            return
        before = self.char_offset()
        removed = self.buffer.remove(start, end)
        self.undo_manager.record(InsertItem(start, removed, before, start))
        self._cursor = CursorPosition(line, ByteColumn(0))
        self._after_edit()

    def copy_line(self):
        line = self._cursor.line
        text = self.buffer.line(line)
        if line + 1 < self.buffer.line_count():
            text += "\n"
        self._clipboard = text

    def paste(self):
        if not self._clipboard:
            return
        text = self._clipboard
        pos = self.char_offset()
        self.buffer.insert(pos, text)
        after = CharOffset(pos + len(text))
        self.undo_manager.record(DeleteItem(pos, text, pos, after))
        self._set_cursor_from_offset(after)
        self._after_edit()

    def undo(self):
        if not self.undo_manager.can_undo():
            return
        cursor = self.undo_manager.undo(self.buffer)
        if cursor is not None:
            self._set_cursor_from_offset(cursor)
        self._after_edit()

    def redo(self):
        if not self.undo_manager.can_redo():
            return
        cursor = self.undo_manager.redo(self.buffer)
        if cursor is not None:
            self._set_cursor_from_offset(cursor)
        self._after_edit()

    # --- Movement ---

    def move_cursor(self, direction: Direction, unit: Unit,
                    page_height: int = EditorConstants.PAGE_HEIGHT):
        if unit == Unit.PAGE:
            delta = page_height if direction == Direction.DOWN else -page_height
            if direction in (Direction.UP, Direction.DOWN):
                self._move_vertical(delta)
            return
        handler = self._movements.get((direction, unit))
        if handler is not None:
            handler(self)

    def left_char(self):
        self.sticky_column = None
        line, column = self._cursor.line, self._cursor.column
        if column > 0:
            text = self.buffer.line(line)
            char_col = self.buffer.byte_to_char_col(line, column)
            column = ByteColumn(column - len(text[char_col - 1].encode("utf-8")))
            self._cursor = CursorPosition(line, column)
        elif line > 0:
            self._cursor = CursorPosition(line - 1, self.buffer.line_byte_len(line - 1))

    def right_char(self):
        self.sticky_column = None
        line, column = self._cursor.line, self._cursor.column
        if column < self.buffer.line_byte_len(line):
            text = self.buffer.line(line)
            char_col = self.buffer.byte_to_char_col(line, column)
            column = ByteColumn(column + len(text[char_col].encode("utf-8")))
            self._cursor = CursorPosition(line, column)
        elif line + 1 < self.buffer.line_count():
            self._cursor = CursorPosition(line + 1, ByteColumn(0))

    def up_line(self):
        self._move_vertical(-1)

    def down_line(self):
        self._move_vertical(1)

    def _move_vertical(self, delta: int):
        target_line = max(0, min(self._cursor.line + delta, self.buffer.line_count() - 1))
        if target_line == self._cursor.line:
            return
        target = self.sticky_column if self.sticky_column is not None else self._cursor.column
        self.sticky_column = target
        column = self.buffer.snap_to_boundary(target_line, target)
        self._cursor = CursorPosition(target_line, column)

    def right_word(self):
        """Move forward past the current word and the whitespace after it.

        Crossing a newline consumes that newline and stops right after it.
        """
        self.sticky_column = None
        text = self.content()
        pos = self.char_offset()
        end = len(text)
        # Skip current word
        while pos < end and not text[pos].isspace():
            pos += 1
        # Skip whitespace
        while pos < end and text[pos].isspace():
            if text[pos] == "\n":
                pos += 1
                break
            pos += 1
        self._set_cursor_from_offset(pos)

    def left_word(self):
        """Move back to the start of the previous word.

        Unlike right_word there is no newline stop: blank lines are skipped.
        """
        self.sticky_column = None
        text = self.content()
        pos = self.char_offset()
        if pos == 0:
            return
        pos -= 1
        # Skip whitespace
        while pos > 0 and text[pos].isspace():
            pos -= 1
        # Back to word start
        while pos > 0 and not text[pos - 1].isspace():
            pos -= 1
        self._set_cursor_from_offset(pos)

    def move_beginning_of_line(self):
        self.sticky_column = None
        self._cursor = CursorPosition(self._cursor.line, ByteColumn(0))

    def move_end_of_line(self):
        self.sticky_column = None
        line = self._cursor.line
        self._cursor = CursorPosition(line, self.buffer.line_byte_len(line))

    def down_paragraph(self):
        """Move to the first line of the next paragraph, or the document end."""
        self.sticky_column = None
        last = self.buffer.line_count() - 1
        line = self._cursor.line
        crossed_blank = False
        while line < last and not self.buffer.is_blank(line):
            line += 1
        while line < last and self.buffer.is_blank(line):
            crossed_blank = True
            line += 1
        if line == last and (not crossed_blank or self.buffer.is_blank(line)):
            self.move_document_end()
            return
        self._cursor = CursorPosition(line, ByteColumn(0))

    def up_paragraph(self):
        """Move to the first line of the previous paragraph, or the document start."""
        self.sticky_column = None
        line = self._cursor.line
        if line > 0 and not self.buffer.is_blank(line):
            line -= 1
        while line > 0 and self.buffer.is_blank(line):
            line -= 1
        while line > 0 and not self.buffer.is_blank(line - 1):
            line -= 1
        self._cursor = CursorPosition(line, ByteColumn(0))

    def move_document_start(self):
        self.sticky_column = None
        self._cursor = CursorPosition()

    def move_document_end(self):
        self.sticky_column = None
        last = self.buffer.line_count() - 1
        self._cursor = CursorPosition(last, self.buffer.line_byte_len(last))

    _movements = {
        (Direction.LEFT, Unit.CHAR): left_char,
        (Direction.RIGHT, Unit.CHAR): right_char,
        (Direction.UP, Unit.CHAR): up_line,
        (Direction.DOWN, Unit.CHAR): down_line,
        (Direction.UP, Unit.LINE): up_line,
        (Direction.DOWN, Unit.LINE): down_line,
        (Direction.LEFT, Unit.LINE): move_beginning_of_line,
        (Direction.RIGHT, Unit.LINE): move_end_of_line,
        (Direction.LEFT, Unit.WORD): left_word,
        (Direction.RIGHT, Unit.WORD): right_word,
        (Direction.UP, Unit.PARAGRAPH): up_paragraph,
        (Direction.DOWN, Unit.PARAGRAPH): down_paragraph,
        (Direction.UP, Unit.DOCUMENT): move_document_start,
        (Direction.DOWN, Unit.DOCUMENT): move_document_end,
        (Direction.LEFT, Unit.DOCUMENT): move_document_start,
        (Direction.RIGHT, Unit.DOCUMENT): move_document_end,
    }
