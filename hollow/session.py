"""An editing session: one document plus the state around it.

``EditorSession`` turns dispatcher actions into model, search and UI state
changes. It has no terminal dependency; the editor loop feeds it key events
and reads back what to draw.
"""

from __future__ import annotations

import errno
import logging
import time
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, Union

from .buffer import CharOffset
from .commands import Action, ActionKind, InputDispatcher, InputState, Mode
from .config import Config
from .constants import EditorConstants
from .keyboard import KeyEvent, KeyType
from .model import Direction, TextModel, Unit
from .persistence import load_document, save_document, write_backup
from .search import SearchEngine

logger = logging.getLogger(__name__)

EDIT_ACTIONS = {
    ActionKind.INSERT_CHAR,
    ActionKind.INSERT_NEWLINE,
    ActionKind.DELETE_BACKWARD,
    ActionKind.DELETE_FORWARD,
    ActionKind.DELETE_LINE,
    ActionKind.PASTE,
    ActionKind.UNDO,
    ActionKind.REDO,
    ActionKind.ENTER_WRITE_MODE_WITH_CHAR,
}


class Overlay(Enum):
    NONE = "none"
    HELP = "help"
    QUIT_CONFIRM = "quit_confirm"


class SessionStats:
    def __init__(self, initial_word_count: int = 0, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self.start_time = clock()
        self.initial_word_count = initial_word_count
        self.current_word_count = initial_word_count

    def update_word_count(self, count: int):
        self.current_word_count = count

    @property
    def words_written(self) -> int:
        """Words added this session; deleting old text never goes below zero."""
        return max(0, self.current_word_count - self.initial_word_count)

    def elapsed(self) -> float:
        return self._clock() - self.start_time

    def elapsed_formatted(self) -> str:
        total = int(self.elapsed())
        hours, minutes = total // 3600, (total % 3600) // 60
        if hours > 0:
            return f"{hours}h {minutes}m"
        return f"{minutes}m"


class EditorSession:
    def __init__(self, config: Optional[Config] = None,
                 file_path: Optional[Union[str, Path]] = None,
                 clock: Callable[[], float] = time.monotonic):
        self.config = config or Config()
        self._clock = clock
        self.model = TextModel(clock=clock)
        self.search = SearchEngine()
        self.dispatcher = InputDispatcher()
        self.mode = Mode.WRITE
        self.input_state = InputState()
        self.search_input = ""
        self.overlay = Overlay.NONE
        self.show_status = self.config.display.show_status
        self.spellcheck_enabled = False
        self.should_quit = False
        self.status_message: Optional[str] = None
        self.file_path: Optional[Path] = Path(file_path) if file_path else None
        self.stats = SessionStats(0, clock)

        self._original_content: Optional[str] = None
        self._backup_done = False
        self._last_save_time = clock()
        self._saved_at: Optional[float] = None
        self._status_shown_at: Optional[float] = clock() if self.show_status else None

        self._handlers = {
            ActionKind.NONE: lambda action: None,
            ActionKind.QUIT: self._quit,
            ActionKind.SAVE: lambda action: self.save(),
            ActionKind.INSERT_CHAR: lambda action: self.model.insert_char(action.char),
            ActionKind.INSERT_NEWLINE: lambda action: self.model.insert_newline(),
            ActionKind.DELETE_BACKWARD: lambda action: self.model.delete_backward(),
            ActionKind.DELETE_FORWARD: lambda action: self.model.delete_forward(),
            ActionKind.MOVE_CURSOR: self._move,
            ActionKind.DELETE_LINE: lambda action: self.model.delete_line(),
            ActionKind.COPY_LINE: self._copy_line,
            ActionKind.PASTE: lambda action: self.model.paste(),
            ActionKind.UNDO: self._undo,
            ActionKind.REDO: self._redo,
            ActionKind.ENTER_WRITE_MODE: lambda action: self.set_mode(Mode.WRITE),
            ActionKind.ENTER_WRITE_MODE_WITH_CHAR: self._write_with_char,
            ActionKind.ENTER_NAVIGATE_MODE: lambda action: self.set_mode(Mode.NAVIGATE),
            ActionKind.TOGGLE_STATUS: self._toggle_status,
            ActionKind.TOGGLE_SPELLCHECK: self._toggle_spellcheck,
            ActionKind.SHOW_HELP: self._show_help,
            ActionKind.HIDE_OVERLAY: self._hide_overlay,
            ActionKind.START_SEARCH: self._start_search,
            ActionKind.SUBMIT_SEARCH: self._submit_search,
            ActionKind.CANCEL_SEARCH: self._cancel_search,
            ActionKind.SEARCH_NEXT: lambda action: self.search_next(),
            ActionKind.SEARCH_PREV: lambda action: self.search_prev(),
            ActionKind.SEARCH_INPUT: self._search_input,
            ActionKind.SEARCH_BACKSPACE: self._search_backspace,
        }

    # --- Document lifecycle ---

    def open(self, path: Union[str, Path]):
        """Load ``path``; a file that does not exist yet opens as an empty document."""
        self.file_path = Path(path)
        text = load_document(self.file_path)
        self._original_content = text
        self._backup_done = False
        self.model.load(text or "")
        self.stats = SessionStats(self.model.word_count(), self._clock)
        self._last_save_time = self._clock()

    def save(self) -> bool:
        if self.file_path is None:
            self.status_message = "Error: No file name"
            return False
        try:
            save_document(self.file_path, self.model.content())
        except PermissionError:
            logger.warning(f"Permission denied saving {self.file_path}")
            self.status_message = f"Error: Permission denied saving {self.file_path}"
            return False
        except OSError as e:
            logger.exception(f"Could not save {self.file_path}")
            if e.errno == errno.ENOSPC:  # No space left on device
                self.status_message = "Error: No space left on device"
            else:
                self.status_message = f"Error: Cannot save to {self.file_path}"
            return False
        self.model.mark_saved()
        now = self._clock()
        self._last_save_time = now
        self._saved_at = now
        self.status_message = None
        return True

    def _backup_before_first_edit(self):
        if self._backup_done or self.file_path is None or self._original_content is None:
            return
        self._backup_done = True
        try:
            write_backup(self.file_path, self._original_content)
        except OSError as e:
            logger.warning(f"Could not write backup of {self.file_path}: {e}")

    # --- Input ---

    def handle_key(self, key_event: KeyEvent) -> Optional[Action]:
        """Feed one key event through overlays and the dispatcher."""
        if self.overlay == Overlay.HELP:
            # Any key closes help
            self.overlay = Overlay.NONE
            return None
        if self.overlay == Overlay.QUIT_CONFIRM:
            self._handle_quit_confirm(key_event)
            return None
        action = self.dispatcher.handle_key(key_event, self.mode, self.input_state)
        self.apply(action)
        return action

    def _handle_quit_confirm(self, key_event: KeyEvent):
        value = key_event.value.lower() if key_event.key_type == KeyType.REGULAR else key_event.value
        if value == 'y':
            self.overlay = Overlay.NONE
            if self.save():
                self.should_quit = True
        elif value == 'n':
            self.overlay = Overlay.NONE
            self.should_quit = True
        elif value in ('c', 'escape'):
            self.overlay = Overlay.NONE

    def apply(self, action: Action):
        logger.debug(f"Applying {action}")
        if action.kind in EDIT_ACTIONS:
            self._backup_before_first_edit()
        self._handlers[action.kind](action)
        self.stats.update_word_count(self.model.word_count())

    def set_mode(self, mode: Mode):
        self.mode = mode
        self.input_state.clear()

    # --- Action handlers ---

    def _quit(self, action: Action):
        if self.model.is_modified():
            self.overlay = Overlay.QUIT_CONFIRM
        else:
            self.should_quit = True

    def _move(self, action: Action):
        self.model.move_cursor(action.direction, action.unit, page_height=action.amount)

    def _copy_line(self, action: Action):
        self.model.copy_line()
        self.status_message = "Line copied"

    def _undo(self, action: Action):
        if not self.model.undo_manager.can_undo():
            self.status_message = "Nothing to undo"
            return
        self.model.undo()

    def _redo(self, action: Action):
        if not self.model.undo_manager.can_redo():
            self.status_message = "Nothing to redo"
            return
        self.model.redo()

    def _write_with_char(self, action: Action):
        self.set_mode(Mode.WRITE)
        self.model.insert_char(action.char)

    def _toggle_status(self, action: Action):
        self.show_status = not self.show_status
        self._status_shown_at = self._clock() if self.show_status else None

    def _toggle_spellcheck(self, action: Action):
        self.spellcheck_enabled = not self.spellcheck_enabled
        self.status_message = "Spellcheck on" if self.spellcheck_enabled else "Spellcheck off"

    def _show_help(self, action: Action):
        self.overlay = Overlay.HELP

    def _hide_overlay(self, action: Action):
        self.overlay = Overlay.NONE
        self.status_message = None

    # --- Search ---

    def _start_search(self, action: Action):
        self.search_input = ""
        self.set_mode(Mode.SEARCH)

    def _search_input(self, action: Action):
        self.search_input += action.char

    def _search_backspace(self, action: Action):
        self.search_input = self.search_input[:-1]

    def _submit_search(self, action: Action):
        self.search.set_query(self.search_input)
        self.search_input = ""
        self.set_mode(Mode.NAVIGATE)
        if self.search.is_active():
            self._jump_to(self.search.find_next(self.model.content(), self.model.char_offset()))

    def _cancel_search(self, action: Action):
        self.search.clear()
        self.search_input = ""
        self.set_mode(Mode.NAVIGATE)

    def search_next(self):
        if not self.search.is_active():
            return
        content = self.model.content()
        start = min(self.model.char_offset() + 1, len(content))
        self._jump_to(self.search.find_next(content, start))

    def search_prev(self):
        if not self.search.is_active():
            return
        self._jump_to(self.search.find_prev(self.model.content(), self.model.char_offset()))

    def _jump_to(self, match: Optional[tuple[int, int]]):
        if match is None:
            self.status_message = f"Not found: {self.search.query}"
            return
        self.status_message = None
        self.move_to_char_offset(CharOffset(match[0]))

    def move_to_char_offset(self, offset: CharOffset):
        """Place the cursor at ``offset`` using only movement primitives."""
        line, char_col = self.model.buffer.locate(offset)
        self.model.move_cursor(Direction.UP, Unit.DOCUMENT)
        for _ in range(line):
            self.model.move_cursor(Direction.DOWN, Unit.LINE)
        self.model.move_cursor(Direction.LEFT, Unit.LINE)
        for _ in range(char_col):
            self.model.move_cursor(Direction.RIGHT, Unit.CHAR)

    def match_count(self) -> int:
        return len(self.search.all_matches(self.model.content()))

    # --- Timers ---

    def tick(self, now: Optional[float] = None):
        """Run auto-save and the indicator timeouts."""
        now = self._clock() if now is None else now
        auto_save = self.config.editor.auto_save_seconds
        if (auto_save > 0 and self.file_path is not None and self.model.is_modified()
                and now - self._last_save_time >= auto_save):
            logger.info("Auto-saving")
            if not self.save():
                # Retry after another full interval
                self._last_save_time = now

        if self._saved_at is not None and now - self._saved_at >= EditorConstants.SAVED_INDICATOR_SECONDS:
            self._saved_at = None

        timeout = self.config.display.status_timeout
        if (timeout > 0 and self.show_status and self._status_shown_at is not None
                and now - self._status_shown_at >= timeout):
            self.show_status = False
            self._status_shown_at = None

    @property
    def saved_indicator(self) -> bool:
        return self._saved_at is not None

    def status_text(self) -> str:
        mode = {Mode.WRITE: "WRITE", Mode.NAVIGATE: "NAV", Mode.SEARCH: "SEARCH"}[self.mode]
        modified = " [+]" if self.model.is_modified() else ""
        text = f"Words: {self.model.word_count()}  |  {self.stats.elapsed_formatted()}  |  {mode}{modified}"
        if self.search.is_active():
            text += f"  |  {self.match_count()} matches"
        return text
