"""Tests for the REPL (Read-Eval-Print Loop).

The loop itself is driven by patching ``input`` with a scripted
sequence of lines and exceptions, and ``readline`` with a mock so no
terminal is needed.
"""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from py_shell.completer import Completer
from py_shell.config import ShellConfig
from py_shell.repl import STATUS_READ_ERROR, install_completer, read_line, run
from py_shell.shell import Shell


@pytest.fixture(autouse=True)
def _isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run every REPL test with an empty PATH inside tmp_path."""
    monkeypatch.setenv("PATH", str(tmp_path))
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)


def _run_with_input(*lines: str | BaseException) -> tuple[int | str | None, list[str]]:
    """Run the REPL on scripted input; return the exit code and prompts shown."""
    prompts: list[str] = []
    script = iter(lines)

    def fake_input(prompt: str) -> str:
        prompts.append(prompt)
        item = next(script)
        if isinstance(item, BaseException):
            raise item
        return item

    with (
        patch("py_shell.repl.readline", MagicMock()),
        patch("builtins.input", side_effect=fake_input),
        pytest.raises(SystemExit) as info,
    ):
        run()
    return info.value.code, prompts


class TestReadLine:
    """Verify reading a single line."""

    def test_strips_carriage_return(self) -> None:
        """Windows line endings are trimmed."""
        with patch("builtins.input", return_value="echo hi\r"):
            assert read_line("$ ") == "echo hi"

    def test_passes_prompt(self) -> None:
        """The prompt is handed to input()."""
        with patch("builtins.input", return_value="") as fake:
            read_line("$ ")
        fake.assert_called_once_with("$ ")


class TestInstallCompleter:
    """Verify readline wiring."""

    def test_wires_completer_and_disables_readline_bell(self, tmp_path: Path) -> None:
        """Tab is bound to the completer and readline's own bell is off."""
        shell = Shell(config=ShellConfig(search_path=str(tmp_path)), executables=frozenset())
        completer = Completer(shell)
        with patch("py_shell.repl.readline") as fake:
            install_completer(completer)
        fake.set_completer.assert_called_once_with(completer.complete)
        fake.set_completer_delims.assert_called_once_with(" \t")
        fake.parse_and_bind.assert_any_call("tab: complete")
        fake.parse_and_bind.assert_any_call("set bell-style none")


class TestRun:
    """Verify the interactive loop."""

    def test_runs_commands_until_end_of_input(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Each line is executed; end of input exits with status 0."""
        code, prompts = _run_with_input("echo one", "echo two", EOFError())
        assert code == 0
        assert prompts == ["$ ", "$ ", "$ "]
        assert capsys.readouterr().out == "one\ntwo\n\n"

    def test_exit_builtin_ends_session(self, capsys: pytest.CaptureFixture[str]) -> None:
        """``exit`` leaves with status 0 without reading further."""
        code, prompts = _run_with_input("exit", "echo never")
        assert code == 0
        assert prompts == ["$ "]
        assert "never" not in capsys.readouterr().out

    def test_errors_do_not_end_session(self, capsys: pytest.CaptureFixture[str]) -> None:
        """An unknown command is reported and the next prompt appears."""
        code, _prompts = _run_with_input("nosuchcommand", "echo after", EOFError())
        captured = capsys.readouterr()
        assert code == 0
        assert captured.err == "nosuchcommand: command not found\n"
        assert "after\n" in captured.out

    def test_interrupt_abandons_line(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Ctrl+C at the prompt shows a fresh prompt."""
        code, prompts = _run_with_input(KeyboardInterrupt(), "echo back", EOFError())
        assert code == 0
        assert len(prompts) == 3
        assert "back\n" in capsys.readouterr().out

    def test_read_error_is_fatal(self, capsys: pytest.CaptureFixture[str]) -> None:
        """A failing input stream exits with a non-zero status."""
        code, _prompts = _run_with_input(OSError("stream closed"))
        assert code == STATUS_READ_ERROR
        assert capsys.readouterr().err == "Error reading input: stream closed\n"

    def test_undecodable_input_is_reported(self, capsys: pytest.CaptureFixture[str]) -> None:
        """A line that is not valid UTF-8 ends the session cleanly."""
        bad = UnicodeDecodeError("utf-8", b"echo \xff", 5, 6, "invalid start byte")
        code, _prompts = _run_with_input("echo before", bad, "echo never")
        captured = capsys.readouterr()
        assert code == STATUS_READ_ERROR
        assert captured.out == "before\n"
        assert captured.err.startswith("Error reading input: 'utf-8' codec can't decode")
