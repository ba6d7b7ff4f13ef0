"""Tests for I/O redirection (>, 1>, >>, 1>>, 2>, 2>>).

Parsing is tested on token lists; opening is tested against real
files under ``tmp_path``.
"""

import io
from pathlib import Path

import pytest

from py_shell.errors import RedirectionError
from py_shell.execution.redirection import (
    RedirectionSpec,
    RedirectMode,
    RedirectStream,
    find_redirection,
    is_redirect_operator,
    redirected,
)
from py_shell.streams import Streams

# ---------------------------------------------------------------------------
# Cycle 1 — parsing
# ---------------------------------------------------------------------------


class TestFindRedirection:
    """Verify find_redirection() splits the operator off the command."""

    def test_no_redirection(self) -> None:
        """A plain command is returned unchanged with no spec."""
        words, spec = find_redirection(["echo", "hello", "world"])
        assert words == ["echo", "hello", "world"]
        assert spec is None

    @pytest.mark.parametrize(
        ("operator", "stream", "mode"),
        [
            (">", RedirectStream.STDOUT, RedirectMode.TRUNCATE),
            ("1>", RedirectStream.STDOUT, RedirectMode.TRUNCATE),
            (">>", RedirectStream.STDOUT, RedirectMode.APPEND),
            ("1>>", RedirectStream.STDOUT, RedirectMode.APPEND),
            ("2>", RedirectStream.STDERR, RedirectMode.TRUNCATE),
            ("2>>", RedirectStream.STDERR, RedirectMode.APPEND),
        ],
    )
    def test_operators(self, operator: str, stream: RedirectStream, mode: RedirectMode) -> None:
        """Each operator maps to its stream and mode."""
        words, spec = find_redirection(["echo", "hi", operator, "out.txt"])
        assert words == ["echo", "hi"]
        assert spec == RedirectionSpec(stream=stream, mode=mode, path="out.txt")

    def test_first_operator_wins(self) -> None:
        """Only the first operator counts; later ones are dropped with it."""
        words, spec = find_redirection(["ls", "2>", "err.txt", ">", "out.txt"])
        assert words == ["ls"]
        assert spec is not None
        assert spec.stream is RedirectStream.STDERR
        assert spec.path == "err.txt"

    def test_operator_without_target_is_ignored(self) -> None:
        """A trailing operator means no redirection at all."""
        words, spec = find_redirection(["echo", "hi", ">"])
        assert words == ["echo", "hi"]
        assert spec is None

    def test_operator_glued_to_word_is_not_an_operator(self) -> None:
        """``a>b`` is an ordinary word; operators stand alone."""
        words, spec = find_redirection(["echo", "a>b"])
        assert words == ["echo", "a>b"]
        assert spec is None

    def test_is_redirect_operator(self) -> None:
        """Only the six operators are recognised."""
        assert is_redirect_operator("2>>")
        assert not is_redirect_operator("<")
        assert not is_redirect_operator("|")


# ---------------------------------------------------------------------------
# Cycle 2 — opening targets
# ---------------------------------------------------------------------------


class TestOpening:
    """Verify opening targets in truncate and append mode."""

    def test_truncate_creates_file(self, tmp_path: Path) -> None:
        """Truncate mode creates a missing file."""
        target = tmp_path / "new.txt"
        spec = RedirectionSpec(RedirectStream.STDOUT, RedirectMode.TRUNCATE, str(target))
        spec.open().close()
        assert target.exists()

    def test_truncate_empties_existing_file(self, tmp_path: Path) -> None:
        """Truncate mode discards previous content."""
        target = tmp_path / "out.txt"
        target.write_text("old content\n")
        spec = RedirectionSpec(RedirectStream.STDOUT, RedirectMode.TRUNCATE, str(target))
        with spec.open() as handle:
            handle.write("new\n")
        assert target.read_text() == "new\n"

    def test_append_keeps_existing_content(self, tmp_path: Path) -> None:
        """Append mode writes after what is already there."""
        target = tmp_path / "out.txt"
        target.write_text("first\n")
        spec = RedirectionSpec(RedirectStream.STDOUT, RedirectMode.APPEND, str(target))
        with spec.open() as handle:
            handle.write("second\n")
        assert target.read_text() == "first\nsecond\n"

    def test_missing_directory_raises(self, tmp_path: Path) -> None:
        """A target in a missing directory raises RedirectionError."""
        target = tmp_path / "missing" / "out.txt"
        spec = RedirectionSpec(RedirectStream.STDOUT, RedirectMode.TRUNCATE, str(target))
        with pytest.raises(RedirectionError) as info:
            spec.open()
        assert info.value.path == str(target)
        assert str(info.value) == f"{target}: No such file or directory"

    def test_directory_target_raises(self, tmp_path: Path) -> None:
        """A directory cannot be a redirect target."""
        spec = RedirectionSpec(RedirectStream.STDOUT, RedirectMode.TRUNCATE, str(tmp_path))
        with pytest.raises(RedirectionError, match="Is a directory"):
            spec.open()


class TestRedirectedContext:
    """Verify the redirected() context manager."""

    def test_no_spec_yields_streams_unchanged(self) -> None:
        """Without a redirection the same bundle comes back."""
        streams = Streams(stdout=io.StringIO())
        with redirected(streams, None) as result:
            assert result is streams

    def test_stdout_slot_is_replaced(self, tmp_path: Path) -> None:
        """A stdout redirection swaps only the stdout slot."""
        err = io.StringIO()
        spec = RedirectionSpec(RedirectStream.STDOUT, RedirectMode.TRUNCATE, str(tmp_path / "o"))
        with redirected(Streams(stderr=err), spec) as result:
            assert result.stdout is not None
            assert result.stderr is err

    def test_stderr_slot_is_replaced(self, tmp_path: Path) -> None:
        """A stderr redirection swaps only the stderr slot."""
        out = io.StringIO()
        spec = RedirectionSpec(RedirectStream.STDERR, RedirectMode.TRUNCATE, str(tmp_path / "e"))
        with redirected(Streams(stdout=out), spec) as result:
            assert result.stdout is out
            assert result.stderr is not None

    def test_file_is_closed_on_exit(self, tmp_path: Path) -> None:
        """The target is closed when the block exits."""
        spec = RedirectionSpec(RedirectStream.STDOUT, RedirectMode.TRUNCATE, str(tmp_path / "o"))
        with redirected(Streams(), spec) as result:
            handle = result.stdout
        assert handle is not None
        assert handle.closed

    def test_file_is_closed_on_error(self, tmp_path: Path) -> None:
        """The target is closed even when the block raises."""
        spec = RedirectionSpec(RedirectStream.STDOUT, RedirectMode.TRUNCATE, str(tmp_path / "o"))
        handle = None
        with pytest.raises(ValueError, match="boom"), redirected(Streams(), spec) as result:
            handle = result.stdout
            msg = "boom"
            raise ValueError(msg)
        assert handle is not None
        assert handle.closed
