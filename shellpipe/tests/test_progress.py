"""Tests for stderr diagnostics and color output."""

import io

from shellpipe.progress import RED, RESET, Diagnostics, _color_enabled, colorize


class FakeTTY(io.StringIO):
    def isatty(self):
        return True


# ── colorize ────────────────────────────────────────────────

def test_colorize():
    result = colorize("hello", RED)
    assert result.startswith(RED)
    assert result.endswith(RESET)
    assert "hello" in result


# ── _color_enabled ──────────────────────────────────────────

def test_color_disabled_for_non_tty(monkeypatch):
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.delenv("SHELLPIPE_NO_COLOR", raising=False)
    assert _color_enabled(io.StringIO()) is False


def test_color_enabled_for_tty(monkeypatch):
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.delenv("SHELLPIPE_NO_COLOR", raising=False)
    assert _color_enabled(FakeTTY()) is True


def test_no_color_env(monkeypatch):
    monkeypatch.setenv("NO_COLOR", "1")
    assert _color_enabled(FakeTTY()) is False


def test_shellpipe_no_color_env(monkeypatch):
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.setenv("SHELLPIPE_NO_COLOR", "1")
    assert _color_enabled(FakeTTY()) is False


# ── Diagnostics ─────────────────────────────────────────────

def test_error_and_warning_plain(monkeypatch):
    monkeypatch.delenv("SHELLPIPE_DEBUG", raising=False)
    stream = io.StringIO()
    diag = Diagnostics(stream=stream)
    diag.error("boom")
    diag.warn("careful")
    assert stream.getvalue() == "pipe: error: boom\npipe: warning: careful\n"


def test_debug_hidden_by_default(monkeypatch):
    monkeypatch.delenv("SHELLPIPE_DEBUG", raising=False)
    stream = io.StringIO()
    Diagnostics(stream=stream).debug("details")
    assert stream.getvalue() == ""


def test_debug_flag(monkeypatch):
    monkeypatch.delenv("SHELLPIPE_DEBUG", raising=False)
    stream = io.StringIO()
    Diagnostics(debug=True, stream=stream).debug("details")
    assert stream.getvalue() == "pipe: debug: details\n"


def test_debug_env(monkeypatch):
    monkeypatch.setenv("SHELLPIPE_DEBUG", "1")
    stream = io.StringIO()
    Diagnostics(stream=stream).debug("details")
    assert "details" in stream.getvalue()


def test_colored_error(monkeypatch):
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.delenv("SHELLPIPE_NO_COLOR", raising=False)
    stream = FakeTTY()
    Diagnostics(stream=stream).error("boom")
    assert stream.getvalue() == f"{RED}pipe: error:{RESET} boom\n"
