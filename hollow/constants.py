"""Constants and configuration for the hollow editor."""

class EditorConstants:
    """Central configuration constants for the editor."""

    # Document layout
    DEFAULT_TEXT_WIDTH = 80  # Target width for wrapped text
    MIN_TEXT_WIDTH = 20
    MAX_TEXT_WIDTH = 200
    CONTINUATION_INDENT = "  "  # Prefix of wrapped continuation rows
    MIN_WRAP_WIDTH = 10  # Below this usable width a line is shown unwrapped

    # Movement
    PAGE_HEIGHT = 20  # Lines moved by PageUp/PageDown when the view size is unknown

    # Undo
    GROUP_WINDOW_SECONDS = 2.0  # Edits closer together than this undo as one
    MAX_UNDO_ENTRIES = 500

    # Event loop
    POLL_TIMEOUT = 0.1  # Seconds to wait for a key before running timers
    SAVED_INDICATOR_SECONDS = 2.0

    # Terminal requirements
    MIN_TERMINAL_WIDTH = 40
    MIN_TERMINAL_HEIGHT = 10

    # Auto-save / status defaults
    DEFAULT_AUTO_SAVE_SECONDS = 30
    MIN_AUTO_SAVE_SECONDS = 10
    MAX_AUTO_SAVE_SECONDS = 3600
    DEFAULT_STATUS_TIMEOUT = 3
    MAX_STATUS_TIMEOUT = 60

    # File operations
    ATOMIC_SAVE_PREFIX = "."  # Prefix for temporary save files
    ATOMIC_SAVE_SUFFIX = ".tmp"  # Suffix for temporary save files
    BACKUP_SUFFIX = ".hollow-backup"  # Copy of the original taken on first edit

    # Status messages
    TERMINAL_TOO_SMALL_MESSAGE = "Terminal too small! Need at least {}x{}."
    CURRENT_SIZE_MESSAGE = "Current size: {}x{}."
