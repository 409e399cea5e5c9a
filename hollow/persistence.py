"""Reading and writing document files.

Saves are atomic: the text goes to a temporary file in the target's
directory, is fsynced, and then renamed over the target.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from .buffer import normalize_newlines
from .constants import EditorConstants

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def load_document(path: PathLike) -> Optional[str]:
    """Return the file's text with LF line endings, or None if it does not exist.

    Undecodable bytes are replaced rather than rejected.
    """
    try:
        with open(path, 'r', encoding='utf-8', errors='replace', newline='') as f:
            text = f.read()
    except FileNotFoundError:
        logger.info(f"{path} does not exist, starting an empty document")
        return None
    return normalize_newlines(text)


def save_document(path: PathLike, content: str) -> None:
    """Write ``content`` to ``path`` atomically.

    Raises OSError (including PermissionError) when the file cannot be
    written; the temporary file is removed first.
    """
    path = Path(path)
    dir_name = path.parent
    dir_name.mkdir(parents=True, exist_ok=True)
    temp_filename = None
    try:
        with tempfile.NamedTemporaryFile(mode='w', encoding='utf-8', newline='',
                                         dir=dir_name,
                                         prefix=EditorConstants.ATOMIC_SAVE_PREFIX + path.name,
                                         suffix=EditorConstants.ATOMIC_SAVE_SUFFIX,
                                         delete=False) as temp_file:
            temp_filename = temp_file.name
            temp_file.write(content)
            temp_file.flush()
            os.fsync(temp_file.fileno())  # Ensure data is written to disk
        os.replace(temp_filename, path)
    except OSError:
        if temp_filename is not None and os.path.exists(temp_filename):
            os.remove(temp_filename)
        raise
    logger.info(f"Saved {path} ({len(content)} characters)")


def backup_path(path: PathLike) -> Path:
    return Path(path).with_suffix(EditorConstants.BACKUP_SUFFIX)


def write_backup(path: PathLike, content: str) -> Path:
    """Save a copy of the original document next to it and return its path."""
    target = backup_path(path)
    save_document(target, content)
    logger.info(f"Wrote backup {target}")
    return target
