"""hollow CLI entry point.

Allows running via `python -m hollow` and provides the console script
defined in `pyproject.toml`.
"""

from __future__ import annotations

import argparse
import logging
import sys
from importlib.metadata import PackageNotFoundError, version
from typing import Optional

from .config import Config
from .logging_config import setup_logging

logger = logging.getLogger(__name__)


def get_version_string() -> str:
    try:
        return f"hollow {version('hollow')}"
    except PackageNotFoundError:
        return "hollow (not installed)"


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="hollow", description="A distraction-free writing app.")
    parser.add_argument("file", nargs="?", help="document to open or create")
    parser.add_argument("--width", type=int, help="text width in columns (20-200)")
    parser.add_argument("--no-autosave", action="store_true", help="disable auto-save")
    parser.add_argument("-V", "--version", action="store_true", help="print the version and exit")
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> None:
    args = parse_args(argv)
    if args.version:
        print(get_version_string())
        return

    config = Config.load().with_overrides(width=args.width, no_autosave=args.no_autosave)
    log_path = setup_logging(config.logging.level)
    logger.info(f"Starting {get_version_string()}, logging to {log_path}")

    # Lazy import to avoid importing UI deps for --version
    from .editor import Editor
    try:
        editor = Editor(args.file, config)
    except OSError as e:
        logger.error(f"Cannot open {args.file}: {e}")
        print(f"hollow: cannot open {args.file}: {e.strerror or e}", file=sys.stderr)
        sys.exit(1)
    try:
        editor.run()
    except Exception:
        logger.exception("Editor crashed")
        raise
    if editor.session.model.is_modified():
        print("Quit without saving.", file=sys.stderr)


if __name__ == "__main__":  # pragma: no cover
    main()
