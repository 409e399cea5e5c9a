import time
from dataclasses import dataclass, field
from typing import Callable, Optional, Union

from .buffer import CharOffset, TextBuffer
from .constants import EditorConstants


@dataclass
class InsertItem:
    """Applying this re-inserts ``text`` at ``pos``; recorded for deletions."""
    pos: CharOffset
    text: str
    cursor_before: CharOffset = CharOffset(0)
    cursor_after: CharOffset = CharOffset(0)


@dataclass
class DeleteItem:
    """Applying this removes ``text`` at ``pos``; recorded for insertions."""
    pos: CharOffset
    text: str
    cursor_before: CharOffset = CharOffset(0)
    cursor_after: CharOffset = CharOffset(0)


@dataclass
class GroupItem:
    items: list["UndoItem"] = field(default_factory=list)


UndoItem = Union[InsertItem, DeleteItem, GroupItem]


def apply_item(buffer: TextBuffer, item: UndoItem) -> tuple[UndoItem, Optional[CharOffset]]:
    """Apply ``item`` to ``buffer``.

    Returns the inverse item and the cursor offset the document had before
    the recorded edit. A group applies its children newest first; its
    inverse keeps the children's inverses in that same order, so applying
    the inverse (again newest first) replays the edits in their original
    order.
    """
    if isinstance(item, InsertItem):
        buffer.insert(item.pos, item.text)
        inverse = DeleteItem(item.pos, item.text, item.cursor_after, item.cursor_before)
        return inverse, item.cursor_before
    if isinstance(item, DeleteItem):
        buffer.remove(item.pos, item.pos + len(item.text))
        inverse = InsertItem(item.pos, item.text, item.cursor_after, item.cursor_before)
        return inverse, item.cursor_before
    inverses: list[UndoItem] = []
    cursor = None
    for child in reversed(item.items):
        child_inverse, child_cursor = apply_item(buffer, child)
        inverses.append(child_inverse)
        if child_cursor is not None:
            cursor = child_cursor
    return GroupItem(inverses), cursor


class UndoManager:
    def __init__(
        self,
        window: float = EditorConstants.GROUP_WINDOW_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        max_entries: int = EditorConstants.MAX_UNDO_ENTRIES,
    ):
        self._undo_stack: list[UndoItem] = []
        self._redo_stack: list[UndoItem] = []
        self._window = window
        self._clock = clock
        self._max_entries = max_entries
        self._last_edit_time: Optional[float] = None

    def clear(self):
        self._undo_stack.clear()
        self._redo_stack.clear()
        self._last_edit_time = None

    def mark_boundary(self):
        """Make the next recorded edit start a new group."""
        self._last_edit_time = None

    def record(self, item: UndoItem):
        now = self._clock()
        within_window = (
            self._last_edit_time is not None
            and now - self._last_edit_time < self._window
        )
        if within_window and self._undo_stack:
            top = self._undo_stack[-1]
            if isinstance(top, GroupItem):
                top.items.append(item)
            else:
                self._undo_stack[-1] = GroupItem([top, item])
        else:
            self._undo_stack.append(item)
            # Cap history
            if len(self._undo_stack) > self._max_entries:
                self._undo_stack.pop(0)
        self._last_edit_time = now
        # Any new edit invalidates redo history
        self._redo_stack.clear()

    def can_undo(self) -> bool:
        return bool(self._undo_stack)

    def can_redo(self) -> bool:
        return bool(self._redo_stack)

    def undo(self, buffer: TextBuffer) -> Optional[CharOffset]:
        if not self._undo_stack:
            return None
        inverse, cursor = apply_item(buffer, self._undo_stack.pop())
        self._redo_stack.append(inverse)
        self._last_edit_time = None
        return cursor

    def redo(self, buffer: TextBuffer) -> Optional[CharOffset]:
        if not self._redo_stack:
            return None
        inverse, cursor = apply_item(buffer, self._redo_stack.pop())
        self._undo_stack.append(inverse)
        self._last_edit_time = None
        return cursor
