"""Modal mapping from key events to editor actions.

The dispatcher never touches the document. It looks at a key, the current
mode and the pending-sequence flags, and returns exactly one ``Action``
describing what the session should do.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from .constants import EditorConstants
from .keyboard import KeyEvent, KeyType
from .model import Direction, Unit


class Mode(Enum):
    WRITE = "write"
    NAVIGATE = "navigate"
    SEARCH = "search"


class ActionKind(Enum):
    NONE = "none"
    QUIT = "quit"
    SAVE = "save"
    INSERT_CHAR = "insert_char"
    INSERT_NEWLINE = "insert_newline"
    DELETE_BACKWARD = "delete_backward"
    DELETE_FORWARD = "delete_forward"
    MOVE_CURSOR = "move_cursor"
    DELETE_LINE = "delete_line"
    COPY_LINE = "copy_line"
    PASTE = "paste"
    UNDO = "undo"
    REDO = "redo"
    ENTER_WRITE_MODE = "enter_write_mode"
    ENTER_WRITE_MODE_WITH_CHAR = "enter_write_mode_with_char"
    ENTER_NAVIGATE_MODE = "enter_navigate_mode"
    TOGGLE_STATUS = "toggle_status"
    TOGGLE_SPELLCHECK = "toggle_spellcheck"
    SHOW_HELP = "show_help"
    HIDE_OVERLAY = "hide_overlay"
    START_SEARCH = "start_search"
    SUBMIT_SEARCH = "submit_search"
    CANCEL_SEARCH = "cancel_search"
    SEARCH_NEXT = "search_next"
    SEARCH_PREV = "search_prev"
    SEARCH_INPUT = "search_input"
    SEARCH_BACKSPACE = "search_backspace"


@dataclass(frozen=True)
class Action:
    kind: ActionKind
    char: Optional[str] = None
    direction: Optional[Direction] = None
    unit: Optional[Unit] = None
    amount: int = 1

    @classmethod
    def move(cls, direction: Direction, unit: Unit, amount: int = 1) -> "Action":
        return cls(ActionKind.MOVE_CURSOR, direction=direction, unit=unit, amount=amount)


NO_ACTION = Action(ActionKind.NONE)


@dataclass
class InputState:
    pending_g: bool = False
    pending_d: bool = False
    pending_y: bool = False

    def clear(self):
        self.pending_g = False
        self.pending_d = False
        self.pending_y = False

    def is_pending(self) -> bool:
        return self.pending_g or self.pending_d or self.pending_y


# Binding key: (key type, base value, ctrl held)
KeyBinding = Tuple[KeyType, str, bool]


def _binding(key_event: KeyEvent) -> KeyBinding:
    return (key_event.key_type, key_event.value, key_event.is_ctrl)


def _ctrl(value: str) -> KeyBinding:
    return (KeyType.REGULAR, value, True)


def _char(value: str) -> KeyBinding:
    return (KeyType.REGULAR, value, False)


def _special(value: str, ctrl: bool = False) -> KeyBinding:
    return (KeyType.SPECIAL, value, ctrl)


class InputDispatcher:
    """Registry of key bindings for the Write and Navigate modes."""

    def __init__(self, page_height: int = EditorConstants.PAGE_HEIGHT):
        self.page_height = page_height
        self._universal: Dict[KeyBinding, Action] = {}
        self._write: Dict[KeyBinding, Action] = {}
        self._navigate: Dict[KeyBinding, Action] = {}
        self._setup_default_bindings()

    def _setup_default_bindings(self):
        # Available in Write and Navigate modes
        self.register(self._universal, _ctrl('s'), Action(ActionKind.SAVE))
        self.register(self._universal, _ctrl('q'), Action(ActionKind.QUIT))
        self.register(self._universal, _ctrl('g'), Action(ActionKind.TOGGLE_STATUS))
        self.register(self._universal, _ctrl('z'), Action(ActionKind.UNDO))
        self.register(self._universal, _ctrl('y'), Action(ActionKind.REDO))
        self.register(self._universal, _ctrl(';'), Action(ActionKind.TOGGLE_SPELLCHECK))

        # Write mode
        self.register(self._write, _special('enter'), Action(ActionKind.INSERT_NEWLINE))
        self.register(self._write, _special('backspace'), Action(ActionKind.DELETE_BACKWARD))
        self.register(self._write, _special('delete'), Action(ActionKind.DELETE_FORWARD))
        self.register(self._write, _special('escape'), Action(ActionKind.ENTER_NAVIGATE_MODE))
        self.register(self._write, _special('left', ctrl=True), Action.move(Direction.LEFT, Unit.WORD))
        self.register(self._write, _special('right', ctrl=True), Action.move(Direction.RIGHT, Unit.WORD))
        self.register(self._write, _special('home', ctrl=True), Action.move(Direction.UP, Unit.DOCUMENT))
        self.register(self._write, _special('end', ctrl=True), Action.move(Direction.DOWN, Unit.DOCUMENT))
        self._register_arrows(self._write)

        # Navigate mode
        nav = self._navigate
        self.register(nav, _char('i'), Action(ActionKind.ENTER_WRITE_MODE))
        self.register(nav, _special('escape'), Action(ActionKind.HIDE_OVERLAY))
        self.register(nav, _char('h'), Action.move(Direction.LEFT, Unit.CHAR))
        self.register(nav, _char('j'), Action.move(Direction.DOWN, Unit.LINE))
        self.register(nav, _char('k'), Action.move(Direction.UP, Unit.LINE))
        self.register(nav, _char('l'), Action.move(Direction.RIGHT, Unit.CHAR))
        self.register(nav, _char('w'), Action.move(Direction.RIGHT, Unit.WORD))
        self.register(nav, _char('b'), Action.move(Direction.LEFT, Unit.WORD))
        self.register(nav, _char('{'), Action.move(Direction.UP, Unit.PARAGRAPH))
        self.register(nav, _char('}'), Action.move(Direction.DOWN, Unit.PARAGRAPH))
        self.register(nav, _char('0'), Action.move(Direction.LEFT, Unit.LINE))
        self.register(nav, _char('$'), Action.move(Direction.RIGHT, Unit.LINE))
        self.register(nav, _char('G'), Action.move(Direction.DOWN, Unit.DOCUMENT))
        self.register(nav, _char('p'), Action(ActionKind.PASTE))
        self.register(nav, _char('u'), Action(ActionKind.UNDO))
        self.register(nav, _ctrl('r'), Action(ActionKind.REDO))
        self.register(nav, _char('/'), Action(ActionKind.START_SEARCH))
        self.register(nav, _char('n'), Action(ActionKind.SEARCH_NEXT))
        self.register(nav, _char('N'), Action(ActionKind.SEARCH_PREV))
        self.register(nav, _char('?'), Action(ActionKind.SHOW_HELP))
        # g, d and y start two-key sequences
        self.register(nav, _char('g'), NO_ACTION)
        self.register(nav, _char('d'), NO_ACTION)
        self.register(nav, _char('y'), NO_ACTION)
        self._register_arrows(nav)

    def _register_arrows(self, table: Dict[KeyBinding, Action]):
        self.register(table, _special('left'), Action.move(Direction.LEFT, Unit.CHAR))
        self.register(table, _special('right'), Action.move(Direction.RIGHT, Unit.CHAR))
        self.register(table, _special('up'), Action.move(Direction.UP, Unit.LINE))
        self.register(table, _special('down'), Action.move(Direction.DOWN, Unit.LINE))
        self.register(table, _special('home'), Action.move(Direction.LEFT, Unit.LINE))
        self.register(table, _special('end'), Action.move(Direction.RIGHT, Unit.LINE))
        # Page moves read page_height when dispatched
        self.register(table, _special('page_up'), Action.move(Direction.UP, Unit.PAGE))
        self.register(table, _special('page_down'), Action.move(Direction.DOWN, Unit.PAGE))

    def register(self, table: Dict[KeyBinding, Action], key: KeyBinding, action: Action):
        """Register an action for a key combination."""
        table[key] = action

    def _lookup(self, table: Dict[KeyBinding, Action], key_event: KeyEvent) -> Optional[Action]:
        action = table.get(_binding(key_event))
        if action is not None and action.unit == Unit.PAGE:
            return Action.move(action.direction, Unit.PAGE, self.page_height)
        return action

    def handle_key(self, key_event: KeyEvent, mode: Mode, state: InputState) -> Action:
        """Map one key event to exactly one action."""
        if key_event.is_alt:
            state.clear()
            return NO_ACTION

        if mode == Mode.SEARCH:
            state.clear()
            return self._handle_search(key_event)

        universal = self._lookup(self._universal, key_event)
        if universal is not None:
            state.clear()
            return universal

        if mode == Mode.WRITE:
            return self._handle_write(key_event)
        return self._handle_navigate(key_event, state)

    def _handle_write(self, key_event: KeyEvent) -> Action:
        if key_event.is_plain_char or key_event.value == '\t' and not key_event.is_ctrl:
            return Action(ActionKind.INSERT_CHAR, char=key_event.value)
        action = self._lookup(self._write, key_event)
        return action if action is not None else NO_ACTION

    def _handle_navigate(self, key_event: KeyEvent, state: InputState) -> Action:
        value = key_event.value if key_event.is_plain_char else None

        if state.is_pending():
            completed = self._complete_sequence(value, state)
            state.clear()
            if completed is not None:
                return completed
            # Mismatch: fall through to the key's own binding, if any
            action = self._lookup(self._navigate, key_event)
            if action is None:
                return NO_ACTION
            if value in ('g', 'd', 'y'):
                self._start_sequence(value, state)
            return action

        if value in ('g', 'd', 'y'):
            self._start_sequence(value, state)
            return NO_ACTION

        action = self._lookup(self._navigate, key_event)
        if action is not None:
            return action
        if key_event.is_plain_char:
            return Action(ActionKind.ENTER_WRITE_MODE_WITH_CHAR, char=key_event.value)
        return NO_ACTION

    @staticmethod
    def _start_sequence(value: str, state: InputState):
        state.pending_g = value == 'g'
        state.pending_d = value == 'd'
        state.pending_y = value == 'y'

    @staticmethod
    def _complete_sequence(value: Optional[str], state: InputState) -> Optional[Action]:
        if state.pending_g and value == 'g':
            return Action.move(Direction.UP, Unit.DOCUMENT)
        if state.pending_d and value == 'd':
            return Action(ActionKind.DELETE_LINE)
        if state.pending_y and value == 'y':
            return Action(ActionKind.COPY_LINE)
        return None

    @staticmethod
    def _handle_search(key_event: KeyEvent) -> Action:
        if key_event.key_type == KeyType.SPECIAL:
            if key_event.value == 'escape':
                return Action(ActionKind.CANCEL_SEARCH)
            if key_event.value == 'enter':
                return Action(ActionKind.SUBMIT_SEARCH)
            if key_event.value == 'backspace':
                return Action(ActionKind.SEARCH_BACKSPACE)
            return NO_ACTION
        if key_event.is_plain_char:
            return Action(ActionKind.SEARCH_INPUT, char=key_event.value)
        return NO_ACTION
