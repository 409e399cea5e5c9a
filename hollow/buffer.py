"""Line-oriented text storage with byte, character and line conversions.

Three index spaces meet here:

* ``ByteColumn``: a UTF-8 byte offset inside one logical line. The cursor
  column is expressed in this unit.
* line-relative character columns (plain ``int``), used by layout.
* ``CharOffset``: a character offset from the start of the document. Undo
  records and search matches use this unit.

Every conversion between them goes through :class:`TextBuffer`.
"""

from typing import NewType

ByteColumn = NewType("ByteColumn", int)
CharOffset = NewType("CharOffset", int)


def normalize_newlines(text: str) -> str:
    """Convert CRLF and lone CR line endings to LF."""
    return text.replace("\r\n", "\n").replace("\r", "\n")


def byte_len(text: str) -> int:
    return len(text.encode("utf-8"))


class TextBuffer:
    """Mutable document text stored as a list of logical lines.

    The buffer always holds at least one line. Lines never contain ``\\n``;
    the newline separating line ``i`` from line ``i + 1`` counts as one
    character at the end of line ``i``.
    """

    def __init__(self, text: str = ""):
        self.lines: list[str] = [""]
        self.set_text(text)

    def set_text(self, text: str):
        self.lines = normalize_newlines(text).split("\n")

    def text(self) -> str:
        return "\n".join(self.lines)

    def line_count(self) -> int:
        return len(self.lines)

    def line(self, index: int) -> str:
        return self.lines[index]

    def line_byte_len(self, index: int) -> ByteColumn:
        return ByteColumn(byte_len(self.lines[index]))

    def len_chars(self) -> int:
        return sum(len(line) for line in self.lines) + len(self.lines) - 1

    def is_blank(self, index: int) -> bool:
        """True for an empty or whitespace-only line."""
        return self.lines[index].strip() == ""

    # --- Conversions ---

    def line_start(self, index: int) -> CharOffset:
        """Document offset of the first character of line ``index``."""
        return CharOffset(sum(len(line) + 1 for line in self.lines[:index]))

    def byte_to_char_col(self, index: int, column: int) -> int:
        encoded = self.lines[index].encode("utf-8")
        return len(encoded[:column].decode("utf-8", errors="ignore"))

    def char_col_to_byte(self, index: int, char_col: int) -> ByteColumn:
        return ByteColumn(byte_len(self.lines[index][:char_col]))

    def snap_to_boundary(self, index: int, column: int) -> ByteColumn:
        """Clamp ``column`` to the line and round it down to a char boundary."""
        column = max(0, min(column, self.line_byte_len(index)))
        return self.char_col_to_byte(index, self.byte_to_char_col(index, column))

    def to_char_offset(self, index: int, column: int) -> CharOffset:
        return CharOffset(self.line_start(index) + self.byte_to_char_col(index, column))

    def locate(self, offset: int) -> tuple[int, int]:
        """Return ``(line, char_col)`` for a document offset, clamped to the text."""
        offset = max(0, offset)
        for index, line in enumerate(self.lines):
            if offset <= len(line):
                return index, offset
            offset -= len(line) + 1
        last = len(self.lines) - 1
        return last, len(self.lines[last])

    def from_char_offset(self, offset: int) -> tuple[int, ByteColumn]:
        index, char_col = self.locate(offset)
        return index, self.char_col_to_byte(index, char_col)

    # --- Access ---

    def slice(self, start: int, end: int) -> str:
        return self.text()[start:end]

    # --- Mutation ---

    def insert(self, offset: int, text: str):
        index, char_col = self.locate(offset)
        line = self.lines[index]
        merged = line[:char_col] + text + line[char_col:]
        self.lines[index:index + 1] = merged.split("\n")

    def remove(self, start: int, end: int) -> str:
        """Delete the characters in ``[start, end)`` and return them."""
        if end <= start:
            return ""
        removed = self.slice(start, end)
        first, first_col = self.locate(start)
        last, last_col = self.locate(end)
        merged = self.lines[first][:first_col] + self.lines[last][last_col:]
        self.lines[first:last + 1] = [merged]
        return removed
