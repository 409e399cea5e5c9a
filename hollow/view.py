import re
from dataclasses import dataclass, field

from .constants import EditorConstants
from .model import CursorPosition

INDENT = EditorConstants.CONTINUATION_INDENT

_TOKEN_RE = re.compile(r"\S+\s*|\s+")


def wrap_spans(line: str, width: int) -> list[tuple[int, int]]:
    """Split ``line`` into visual rows, returned as character spans.

    A token is a word plus the whitespace after it. Tokens are packed into
    a row while they fit; one that does not fit even in an empty row is
    broken at the row width. The first row is ``width`` wide, continuation
    rows lose the indent. This is the only place row boundaries are
    decided, so the wrapped text and the cursor mapping always agree.
    """
    usable = width - len(INDENT)
    if len(line) <= width or usable < EditorConstants.MIN_WRAP_WIDTH:
        return [(0, len(line))]

    spans: list[tuple[int, int]] = []
    row_start = 0
    row_end = 0
    available = width
    for match in _TOKEN_RE.finditer(line):
        start, end = match.span()
        if end - row_start <= available:
            row_end = end
            continue
        if row_end > row_start:
            # Commit current row
            spans.append((row_start, row_end))
            row_start = row_end
            available = usable
        # Break a token longer than a whole row
        while end - row_start > available:
            spans.append((row_start, row_start + available))
            row_start += available
            available = usable
        row_end = end
    spans.append((row_start, row_end))
    return spans


def wrap_line(line: str, width: int) -> list[str]:
    rows = []
    for i, (start, end) in enumerate(wrap_spans(line, width)):
        rows.append(line[start:end] if i == 0 else INDENT + line[start:end])
    return rows


@dataclass
class RowInfo:
    logical_line: int
    is_continuation: bool


@dataclass
class VisualLayout:
    rows: list[str] = field(default_factory=list)
    row_info: list[RowInfo] = field(default_factory=list)


def build_visual_lines(content: str, width: int) -> VisualLayout:
    layout = VisualLayout()
    for index, line in enumerate(content.split("\n")):
        for i, row in enumerate(wrap_line(line, width)):
            layout.rows.append(row)
            layout.row_info.append(RowInfo(index, i > 0))
    return layout


def logical_to_visual(content: str, line: int, col: int, width: int) -> tuple[int, int]:
    """Map a cursor at byte column ``col`` of ``line`` to ``(row, column)``.

    A cursor sitting exactly on a row boundary belongs to the later row.
    """
    lines = content.split("\n")
    line = max(0, min(line, len(lines) - 1))
    row = 0
    for text in lines[:line]:
        row += len(wrap_spans(text, width))

    text = lines[line]
    char_col = len(text.encode("utf-8")[:col].decode("utf-8", errors="ignore"))
    spans = wrap_spans(text, width)
    for i, (start, end) in enumerate(spans):
        last = i == len(spans) - 1
        if char_col < end or last:
            offset = len(INDENT) if i > 0 else 0
            return row + i, offset + char_col - start
    return row, char_col  # pragma: no cover


class TerminalTextView:
    """Scrolling window over the wrapped document.

    ``render`` recomputes the layout from scratch and moves ``top_row``
    only as far as needed to keep the cursor row on screen.
    """

    num_rows: int
    num_columns: int
    top_row: int = 0
    lines: list[str]
    visual_cursor_y: int = 0
    visual_cursor_x: int = 0

    def __init__(self, num_rows: int, num_columns: int):
        self.num_rows = num_rows
        self.num_columns = num_columns
        self.lines = []
        self.layout = VisualLayout()

    def resize(self, num_rows: int, num_columns: int):
        self.num_rows = num_rows
        self.num_columns = num_columns

    def render(self, content: str, cursor: CursorPosition):
        self.layout = build_visual_lines(content, self.num_columns)
        row, col = logical_to_visual(content, cursor.line, cursor.column, self.num_columns)
        if row < self.top_row:
            self.top_row = row
        elif row >= self.top_row + self.num_rows:
            self.top_row = row - self.num_rows + 1
        self.top_row = max(0, min(self.top_row, max(0, len(self.layout.rows) - 1)))
        self.lines = self.layout.rows[self.top_row:self.top_row + self.num_rows]
        self.visual_cursor_y = row - self.top_row
        self.visual_cursor_x = col
