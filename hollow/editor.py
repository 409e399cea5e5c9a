"""Main editor controller: poll keys, update the session, redraw."""

import logging
import sys
import termios
from pathlib import Path
from typing import Optional

from .commands import Mode
from .config import Config
from .constants import EditorConstants
from .keyboard import create_keyboard_handler
from .session import EditorSession, Overlay
from .terminal import TerminalInterface
from .view import TerminalTextView

logger = logging.getLogger(__name__)

HELP_LINES = [
    "NAVIGATION",
    "  Arrow keys        Move cursor",
    "  Ctrl+Left/Right   Move by word",
    "  Home/End          Line start/end",
    "  Ctrl+Home/End     Document start/end",
    "  Page Up/Down      Move by page",
    "",
    "NAVIGATE MODE (Escape to enter)",
    "  h/j/k/l           Move left/down/up/right",
    "  w/b               Move by word",
    "  {/}               Previous/next paragraph",
    "  0/$               Line start/end",
    "  gg/G              Document start/end",
    "  /                 Search",
    "  n/N               Next/prev match",
    "",
    "EDITING (Navigate mode)",
    "  dd                Delete line",
    "  yy                Copy line",
    "  p                 Paste",
    "  u                 Undo",
    "  Ctrl+r            Redo",
    "  i                 Return to writing",
    "",
    "GENERAL",
    "  Ctrl+S            Save",
    "  Ctrl+Q            Quit",
    "  Ctrl+G            Toggle status",
    "  Ctrl+Z/Ctrl+Y     Undo/redo",
    "  ?                 Show this help",
    "",
    "Press any key to close",
]

QUIT_PROMPT = "Unsaved changes. Save before quitting? (y)es / (n)o / (c)ancel"
# Fits the error box of a terminal below the minimum size
SHORT_QUIT_PROMPT = ("Unsaved changes. Save?", "(y)es / (n)o / (c)ancel")


class Editor:
    """Owns the terminal and runs the event loop around an EditorSession."""

    def __init__(self, file_path: Optional[str] = None, config: Optional[Config] = None,
                 terminal: Optional[TerminalInterface] = None):
        self.config = config or Config()
        self.terminal = terminal or TerminalInterface()
        self.keyboard = create_keyboard_handler(self.terminal)
        self.session = EditorSession(self.config)
        if file_path:
            self.session.open(Path(file_path))
        self.view = TerminalTextView(1, self.config.editor.text_width)

    def _disable_flow_control(self):
        """Let Ctrl-S, Ctrl-Q and Ctrl-Z reach the editor instead of the tty."""
        try:
            old_settings = termios.tcgetattr(sys.stdin)
        except (termios.error, OSError) as e:
            logger.warning(f"Could not read terminal settings: {e}")
            return None
        new_settings = list(old_settings)
        new_settings[0] &= ~(termios.IXON | termios.IXOFF)
        new_settings[3] &= ~(termios.IEXTEN | termios.ISIG)
        termios.tcsetattr(sys.stdin, termios.TCSANOW, new_settings)
        return old_settings

    def run(self):
        """Run the main editor loop."""
        self.terminal.setup()
        old_settings = self._disable_flow_control()
        try:
            self._draw()
            while not self.session.should_quit:
                key_event = self.keyboard.get_key_event(timeout=EditorConstants.POLL_TIMEOUT)
                if key_event is not None:
                    self._handle_key_event(key_event)
                self.session.tick()
                self._draw()
        finally:
            if old_settings is not None:
                termios.tcsetattr(sys.stdin, termios.TCSANOW, old_settings)
            self.terminal.cleanup()

    def _too_small(self) -> bool:
        return (self.terminal.width < EditorConstants.MIN_TERMINAL_WIDTH
                or self.terminal.height + 1 < EditorConstants.MIN_TERMINAL_HEIGHT)

    def _handle_key_event(self, key_event):
        if self._too_small():
            # Only quitting works until the terminal is resized
            quitting = key_event.is_ctrl and key_event.value == 'q'
            if quitting or self.session.overlay == Overlay.QUIT_CONFIRM:
                self.session.handle_key(key_event)
            return
        self.session.handle_key(key_event)

    def _text_width(self) -> int:
        return min(self.config.editor.text_width, self.terminal.width)

    def _draw(self):
        """Draw the current editor state to terminal."""
        if self._too_small():
            if self.session.overlay == Overlay.QUIT_CONFIRM:
                self.terminal.draw_error_message(*SHORT_QUIT_PROMPT)
                return
            self.terminal.draw_error_message(
                EditorConstants.TERMINAL_TOO_SMALL_MESSAGE.format(
                    EditorConstants.MIN_TERMINAL_WIDTH, EditorConstants.MIN_TERMINAL_HEIGHT),
                EditorConstants.CURRENT_SIZE_MESSAGE.format(
                    self.terminal.width, self.terminal.height + 1),
            )
            return

        text_width = self._text_width()
        self.view.resize(self.terminal.height, text_width)
        self.session.dispatcher.page_height = max(1, self.terminal.height - 1)
        self.view.render(self.session.model.content(), self.session.model.cursor_position)
        left_margin = (self.terminal.width - text_width) // 2

        prompt = None
        if self.session.mode == Mode.SEARCH:
            prompt = "/" + self.session.search_input
        elif self.session.overlay == Overlay.QUIT_CONFIRM:
            prompt = QUIT_PROMPT

        self.terminal.update_frame(
            self.view.lines,
            self.view.visual_cursor_y,
            self.view.visual_cursor_x,
            left_margin,
            text_width,
            status=self._status_line(),
            prompt=prompt,
        )
        if self.session.overlay == Overlay.HELP:
            self.terminal.draw_overlay("Help", HELP_LINES)

    def _status_line(self) -> str:
        if self.session.status_message:
            return self.session.status_message
        if self.session.saved_indicator:
            return "Saved"
        if self.session.show_status:
            return self.session.status_text()
        return ""
