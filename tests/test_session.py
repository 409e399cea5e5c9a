"""Test the editing session: actions, search jumps, overlays, timers."""

import tempfile
import shutil
from pathlib import Path

import pytest

from hollow.commands import Action, ActionKind, Mode
from hollow.config import Config
from hollow.model import CursorPosition
from hollow.persistence import backup_path
from hollow.session import EditorSession, Overlay, SessionStats

from keys import char, special


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def tmpdir_path():
    path = Path(tempfile.mkdtemp())
    yield path
    shutil.rmtree(path)


def create_session(text="", clock=None, config=None):
    session = EditorSession(config or Config(), clock=clock or FakeClock())
    session.model.load(text)
    return session


def type_keys(session, keys):
    for key in keys:
        session.handle_key(char(key))


def test_typing_then_escape_and_navigate():
    session = create_session()
    type_keys(session, "hi")
    assert session.model.content() == "hi"
    session.handle_key(special("escape"))
    assert session.mode == Mode.NAVIGATE
    session.handle_key(char("h"))
    assert session.model.cursor_position == CursorPosition(0, 1)


def test_navigate_unbound_char_enters_write_mode_and_inserts():
    session = create_session("ab")
    session.set_mode(Mode.NAVIGATE)
    session.handle_key(char("x"))
    assert session.mode == Mode.WRITE
    assert session.model.content() == "xab"


def test_dd_then_yy_p():
    session = create_session("one\ntwo\nthree")
    session.set_mode(Mode.NAVIGATE)
    type_keys(session, "dd")
    assert session.model.content() == "two\nthree"
    type_keys(session, "yyp")
    assert session.model.content() == "two\ntwo\nthree"


def test_interrupted_delete_sequence_leaves_document_unchanged():
    session = create_session("one\ntwo")
    session.set_mode(Mode.NAVIGATE)
    type_keys(session, "dx")
    assert session.model.content() == "one\ntwo"
    assert session.mode == Mode.NAVIGATE
    assert not session.input_state.is_pending()


def test_mode_change_clears_pending_state():
    session = create_session("abc")
    session.set_mode(Mode.NAVIGATE)
    session.handle_key(char("g"))
    session.set_mode(Mode.WRITE)
    assert not session.input_state.is_pending()


def test_search_submit_jumps_to_first_match():
    session = create_session("alpha beta\ngamma Beta")
    session.set_mode(Mode.NAVIGATE)
    session.handle_key(char("/"))
    assert session.mode == Mode.SEARCH
    type_keys(session, "betx")
    session.handle_key(special("backspace"))
    type_keys(session, "a")
    assert session.search_input == "beta"
    session.handle_key(special("enter"))
    assert session.mode == Mode.NAVIGATE
    assert session.search.query == "beta"
    assert session.model.cursor_position == CursorPosition(0, 6)


def test_search_next_and_prev_wrap():
    session = create_session("alpha beta\ngamma Beta")
    session.set_mode(Mode.NAVIGATE)
    session.search.set_query("beta")
    session.handle_key(char("n"))
    assert session.model.cursor_position == CursorPosition(0, 6)
    session.handle_key(char("n"))
    assert session.model.cursor_position == CursorPosition(1, 6)
    session.handle_key(char("n"))
    assert session.model.cursor_position == CursorPosition(0, 6)
    session.handle_key(char("N"))
    assert session.model.cursor_position == CursorPosition(1, 6)


def test_search_jump_lands_on_byte_column():
    session = create_session("héllo wörld")
    session.search.set_query("WÖR")
    session.set_mode(Mode.NAVIGATE)
    session.handle_key(char("n"))
    assert session.model.cursor_position == CursorPosition(0, 7)


def test_search_not_found_sets_message():
    session = create_session("abc")
    session.search.set_query("zzz")
    session.search_next()
    assert session.status_message == "Not found: zzz"
    assert session.model.cursor_position == CursorPosition(0, 0)


def test_search_cancel_clears_query():
    session = create_session("abc")
    session.set_mode(Mode.NAVIGATE)
    session.handle_key(char("/"))
    type_keys(session, "ab")
    session.handle_key(special("escape"))
    assert session.mode == Mode.NAVIGATE
    assert session.search_input == ""
    assert not session.search.is_active()


def test_help_overlay_closes_on_any_key():
    session = create_session("abc")
    session.set_mode(Mode.NAVIGATE)
    session.handle_key(char("?"))
    assert session.overlay == Overlay.HELP
    session.handle_key(char("j"))
    assert session.overlay == Overlay.NONE
    # The key that closed help did nothing else
    assert session.model.cursor_position == CursorPosition(0, 0)


def test_quit_without_changes_quits():
    session = create_session("abc")
    session.handle_key(char("q", ctrl=True))
    assert session.should_quit


def test_quit_with_changes_asks_for_confirmation():
    session = create_session("abc")
    type_keys(session, "x")
    session.handle_key(char("q", ctrl=True))
    assert not session.should_quit
    assert session.overlay == Overlay.QUIT_CONFIRM
    session.handle_key(char("c"))
    assert session.overlay == Overlay.NONE
    assert not session.should_quit
    session.handle_key(char("q", ctrl=True))
    session.handle_key(char("n"))
    assert session.should_quit


def test_quit_confirm_yes_saves(tmpdir_path):
    target = tmpdir_path / "doc.txt"
    session = create_session()
    session.file_path = target
    type_keys(session, "hi")
    session.handle_key(char("q", ctrl=True))
    session.handle_key(char("y"))
    assert session.should_quit
    assert target.read_text(encoding="utf-8") == "hi"


def test_toggle_status_and_timeout():
    clock = FakeClock()
    config = Config()
    config.display.status_timeout = 3
    session = create_session("abc", clock=clock, config=config)
    session.handle_key(char("g", ctrl=True))
    assert session.show_status
    clock.advance(2)
    session.tick()
    assert session.show_status
    clock.advance(1)
    session.tick()
    assert not session.show_status


def test_toggle_spellcheck():
    session = create_session()
    session.apply(Action(ActionKind.TOGGLE_SPELLCHECK))
    assert session.spellcheck_enabled
    session.apply(Action(ActionKind.TOGGLE_SPELLCHECK))
    assert not session.spellcheck_enabled


def test_undo_with_empty_history_reports():
    session = create_session("abc")
    session.apply(Action(ActionKind.UNDO))
    assert session.status_message == "Nothing to undo"


def test_open_missing_file_starts_empty(tmpdir_path):
    session = EditorSession(Config(), clock=FakeClock())
    session.open(tmpdir_path / "new.txt")
    assert session.model.content() == ""
    assert not session.model.is_modified()


def test_save_and_saved_indicator(tmpdir_path):
    clock = FakeClock()
    target = tmpdir_path / "doc.txt"
    target.write_text("old\r\ntext", encoding="utf-8")
    session = EditorSession(Config(), clock=clock)
    session.open(target)
    assert session.model.content() == "old\ntext"
    type_keys(session, "X")
    session.handle_key(char("s", ctrl=True))
    assert target.read_text(encoding="utf-8") == "Xold\ntext"
    assert not session.model.is_modified()
    assert session.saved_indicator
    clock.advance(2)
    session.tick()
    assert not session.saved_indicator


def test_first_edit_writes_backup_once(tmpdir_path):
    target = tmpdir_path / "doc.txt"
    target.write_text("original", encoding="utf-8")
    session = EditorSession(Config(), clock=FakeClock())
    session.open(target)
    assert not backup_path(target).exists()
    session.set_mode(Mode.NAVIGATE)
    type_keys(session, "jk")
    assert not backup_path(target).exists()
    session.set_mode(Mode.WRITE)
    type_keys(session, "ab")
    assert backup_path(target).read_text(encoding="utf-8") == "original"


def test_save_without_file_name():
    session = create_session("abc")
    assert not session.save()
    assert session.status_message == "Error: No file name"


def test_save_failure_reports_error(tmpdir_path):
    blocker = tmpdir_path / "file"
    blocker.write_text("", encoding="utf-8")
    session = create_session("abc")
    # A path below a regular file cannot be created
    session.file_path = blocker / "doc.txt"
    type_keys(session, "x")
    assert not session.save()
    assert session.status_message.startswith("Error:")
    assert session.model.is_modified()


def test_auto_save(tmpdir_path):
    clock = FakeClock()
    config = Config()
    config.editor.auto_save_seconds = 30
    target = tmpdir_path / "doc.txt"
    session = EditorSession(config, clock=clock)
    session.open(target)
    type_keys(session, "a")
    clock.advance(29)
    session.tick()
    assert not target.exists()
    clock.advance(1)
    session.tick()
    assert target.read_text(encoding="utf-8") == "a"
    assert not session.model.is_modified()


def test_auto_save_disabled():
    clock = FakeClock()
    config = Config()
    config.editor.auto_save_seconds = 0
    session = create_session(clock=clock, config=config)
    session.file_path = Path("/nonexistent/never-written.txt")
    type_keys(session, "a")
    clock.advance(10000)
    session.tick()
    assert session.model.is_modified()


def test_status_text():
    session = create_session("one two")
    session.set_mode(Mode.NAVIGATE)
    assert session.status_text() == "Words: 2  |  0m  |  NAV"
    session.set_mode(Mode.WRITE)
    type_keys(session, "x")
    session.search.set_query("o")
    assert session.status_text() == "Words: 2  |  0m  |  WRITE [+]  |  2 matches"


def test_session_stats():
    clock = FakeClock()
    stats = SessionStats(100, clock)
    stats.update_word_count(150)
    assert stats.words_written == 50
    stats.update_word_count(50)
    assert stats.words_written == 0
    clock.advance(59)
    assert stats.elapsed_formatted() == "0m"
    clock.advance(3600 + 120 + 1)
    assert stats.elapsed_formatted() == "1h 3m"
