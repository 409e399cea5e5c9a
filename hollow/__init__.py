"""hollow - The editing engine of a distraction-free terminal writing app."""

from .buffer import ByteColumn, CharOffset, TextBuffer
from .commands import Action, ActionKind, InputDispatcher, InputState, Mode
from .model import CursorPosition, Direction, TextModel, Unit
from .search import SearchEngine
from .undo import DeleteItem, GroupItem, InsertItem, UndoManager
from .view import TerminalTextView, build_visual_lines, logical_to_visual, wrap_line

__all__ = [
    'Action',
    'ActionKind',
    'ByteColumn',
    'CharOffset',
    'CursorPosition',
    'DeleteItem',
    'Direction',
    'GroupItem',
    'InputDispatcher',
    'InputState',
    'InsertItem',
    'Mode',
    'SearchEngine',
    'TerminalTextView',
    'TextBuffer',
    'TextModel',
    'UndoManager',
    'Unit',
    'build_visual_lines',
    'logical_to_visual',
    'wrap_line',
]
