"""Terminal interface using Blessed for display and Curtsies for input."""

from typing import Optional

import blessed
from curtsies import Input


class TerminalInterface:
    """Handles terminal I/O using Blessed."""

    def __init__(self, terminal: Optional[blessed.Terminal] = None):
        """Initialize with a terminal instance (or create one)."""
        self.term = terminal or blessed.Terminal()
        self.is_fullscreen = False
        self._input: Optional[Input] = None
        # Virtual screen state for minimal updates
        self._last_lines: Optional[list[str]] = None
        self._last_status: Optional[str] = None
        self._last_left_margin: Optional[int] = None
        self._last_view_width: Optional[int] = None

    def setup(self):
        """Enter fullscreen mode and start reading keys in raw mode."""
        print(self.term.enter_fullscreen, end='')
        print(self.term.clear, end='', flush=True)
        self.is_fullscreen = True
        if self._input is None:
            self._input = Input(keynames='curtsies', sigint_event=False)
            self._input.__enter__()

    def cleanup(self):
        """Exit fullscreen mode and restore terminal."""
        if self._input is not None:
            self._input.__exit__(None, None, None)
            self._input = None
        if self.is_fullscreen:
            print(self.term.exit_fullscreen, end='')
            print(self.term.normal_cursor, end='', flush=True)
            self.is_fullscreen = False

    def invalidate_frame(self) -> None:
        """Invalidate cached frame so next update does a full clear."""
        self._last_lines = None
        self._last_status = None
        self._last_left_margin = None
        self._last_view_width = None

    def update_frame(
        self,
        lines: list[str],
        cursor_y: int,
        cursor_x: int,
        left_margin: int,
        view_width: int,
        status: str = "",
        prompt: Optional[str] = None,
    ) -> None:
        """Diff against last frame and write only changes.

        Falls back to a full clear on first paint or when geometry changes.
        ``prompt`` replaces the status line and takes the cursor.
        """
        rows = self.height
        lines = (lines + [""] * rows)[:rows]
        need_full_clear = (
            self._last_lines is None
            or self._last_left_margin != left_margin
            or self._last_view_width != view_width
            or len(self._last_lines) != len(lines)
        )
        if need_full_clear:
            print(self.term.home + self.term.clear, end='')
            self._last_lines = ["" for _ in range(len(lines))]
            self._last_status = None
            self._last_left_margin = left_margin
            self._last_view_width = view_width

        for y, line in enumerate(lines):
            new_disp = line[:view_width].ljust(view_width)
            if new_disp != self._last_lines[y]:
                print(self.term.move(y, left_margin) + new_disp, end='')
                self._last_lines[y] = new_disp

        bottom = prompt if prompt is not None else status
        status_text = bottom[:self.term.width].center(self.term.width) if prompt is None \
            else bottom[:self.term.width].ljust(self.term.width)
        if status_text != self._last_status:
            print(self.term.move(self.term.height - 1, 0) + self.term.dim(status_text), end='')
            self._last_status = status_text

        if prompt is not None:
            print(self.term.move(self.term.height - 1, len(prompt)) + self.term.normal_cursor,
                  end='', flush=True)
        else:
            print(self.term.move(cursor_y, cursor_x + left_margin) + self.term.normal_cursor,
                  end='', flush=True)

    def draw_overlay(self, title: str, lines: list[str]):
        """Draw a centered box on top of the current frame."""
        inner = max([len(title) + 2] + [len(line) for line in lines]) + 2
        box_width = min(inner + 2, self.term.width)
        top = max(0, (self.term.height - len(lines) - 2) // 2)
        left = max(0, (self.term.width - box_width) // 2)
        heading = f" {title} "
        print(self.term.move(top, left) + "╔" + heading.center(box_width - 2, "═") + "╗", end='')
        for i, line in enumerate(lines):
            print(self.term.move(top + 1 + i, left) + "║ " + line[:box_width - 4].ljust(box_width - 4) + " ║",
                  end='')
        print(self.term.move(top + 1 + len(lines), left) + "╚" + "═" * (box_width - 2) + "╝",
              end='', flush=True)
        # The box covers rows the diff does not know about
        self.invalidate_frame()

    def draw_error_message(self, message1: str, message2: str = ""):
        """Draw an error message in the center of the screen."""
        print(self.term.home + self.term.clear, end='')
        self.invalidate_frame()

        center_y = self.term.height // 2
        box_width = max(len(message1), len(message2)) + 4
        left_margin = max(0, (self.term.width - box_width) // 2)

        print(self.term.move(center_y - 2, left_margin) + "╔" + "═" * (box_width - 2) + "╗", end='')
        print(self.term.move(center_y - 1, left_margin) + "║ " + message1.center(box_width - 4) + " ║", end='')
        if message2:
            print(self.term.move(center_y, left_margin) + "║ " + message2.center(box_width - 4) + " ║", end='')
            print(self.term.move(center_y + 1, left_margin) + "╚" + "═" * (box_width - 2) + "╝", end='')
        else:
            print(self.term.move(center_y, left_margin) + "╚" + "═" * (box_width - 2) + "╝", end='')

        help_text = "Ctrl-Q to quit | Resize terminal to continue"
        help_pos = max(0, (self.term.width - len(help_text)) // 2)
        print(self.term.move(self.term.height - 1, help_pos) + help_text, end='', flush=True)

    def get_key(self, timeout=None) -> Optional[str]:
        """Return the next curtsies key token, or None if ``timeout`` expires."""
        if self._input is None:
            return None
        event = self._input.send(timeout)
        if event is None:
            return None
        return str(event)

    @property
    def width(self):
        """Terminal width in columns."""
        return self.term.width

    @property
    def height(self):
        """Terminal height in rows (excluding status line)."""
        return self.term.height - 1  # Reserve one line for status
