"""Keyboard input handling using curtsies-style tokens."""

from typing import Optional
from dataclasses import dataclass
from enum import Enum


class KeyType(Enum):
    """Types of key events."""
    REGULAR = "regular"  # A character, possibly with Ctrl/Alt
    SPECIAL = "special"  # A named key such as 'left' or 'enter'


@dataclass(frozen=True)
class KeyEvent:
    """A parsed keyboard event, independent of any terminal library."""
    key_type: KeyType
    value: str  # The base key (e.g., 'a', 'left', 'backspace')
    raw: str = ""  # The token the event was parsed from
    is_ctrl: bool = False
    is_shift: bool = False
    is_alt: bool = False

    @property
    def is_char(self) -> bool:
        return self.key_type == KeyType.REGULAR

    @property
    def is_plain_char(self) -> bool:
        """A character typed with no modifier, or with Shift only."""
        return self.is_char and not self.is_ctrl and not self.is_alt and self.value.isprintable()


_ALIASES = {
    'pageup': 'page_up',
    'pagedown': 'page_down',
    'esc': 'escape',
    'return': 'enter',
    'del': 'delete',
}


class KeyboardHandler:
    """Turns curtsies key tokens into KeyEvents."""

    def __init__(self, terminal_interface):
        """Initialize with a terminal interface."""
        self.terminal = terminal_interface

    def get_key_event(self, timeout: Optional[float] = None) -> Optional[KeyEvent]:
        """Get next key event, or None when the timeout expires."""
        key = self.terminal.get_key(timeout)
        if not key:
            return None
        return self.parse_key(key)

    def parse_key(self, key) -> KeyEvent:
        """Parse a curtsies token ('<Ctrl-s>', '<LEFT>', 'a', '\\x13') into a KeyEvent."""
        key_str = str(key)

        if len(key_str) > 2 and key_str.startswith('<') and key_str.endswith('>'):
            return self._parse_token(key_str)

        # Single-byte ASCII control chars (Ctrl-<letter>)
        if len(key_str) == 1:
            o = ord(key_str)
            if o in (8, 127):
                return KeyEvent(KeyType.SPECIAL, 'backspace', key_str)
            if o == 9:
                return KeyEvent(KeyType.REGULAR, '\t', key_str)
            if 1 <= o <= 26:
                ch = chr(ord('a') + o - 1)
                # Map Ctrl-J/Ctrl-M to enter, consistent with terminals
                if ch in ('j', 'm'):
                    return KeyEvent(KeyType.SPECIAL, 'enter', key_str)
                return KeyEvent(KeyType.REGULAR, ch, key_str, is_ctrl=True)
            if o == 27:
                return KeyEvent(KeyType.SPECIAL, 'escape', key_str)

        return KeyEvent(KeyType.REGULAR, key_str, key_str, is_shift=key_str.isupper())

    def _parse_token(self, key_str: str) -> KeyEvent:
        name = key_str[1:-1]
        # Support both '-' and '+' as modifier separators (e.g., '<Esc+u>')
        parts = name.replace('+', '-').split('-')
        base = parts[-1]
        # '<Ctrl-->' style tokens leave an empty base
        if base == '' and len(parts) > 1:
            base = '-'
            parts = parts[:-1]
        mods = {p.lower() for p in parts[:-1]}
        is_ctrl = 'ctrl' in mods
        is_shift = 'shift' in mods
        is_alt = bool(mods & {'alt', 'meta', 'esc'})

        lower = _ALIASES.get(base.lower(), base.lower())
        if lower in ('space', 'spacebar', 'spc'):
            return KeyEvent(KeyType.REGULAR, ' ', key_str, is_ctrl=is_ctrl, is_alt=is_alt)
        if lower == 'tab' and not mods:
            return KeyEvent(KeyType.REGULAR, '\t', key_str)
        if len(base) == 1:
            if is_ctrl and base.lower() in ('j', 'm'):
                return KeyEvent(KeyType.SPECIAL, 'enter', key_str)
            return KeyEvent(
                KeyType.REGULAR,
                base.lower() if is_ctrl else base,
                key_str,
                is_ctrl=is_ctrl,
                is_shift=is_shift or (not is_ctrl and base.isupper()),
                is_alt=is_alt,
            )
        # Fallback: treat unknown names as special keys too
        return KeyEvent(KeyType.SPECIAL, lower, key_str,
                        is_ctrl=is_ctrl, is_shift=is_shift, is_alt=is_alt)


def create_keyboard_handler(terminal_interface):
    """Factory function to create a keyboard handler."""
    return KeyboardHandler(terminal_interface)
