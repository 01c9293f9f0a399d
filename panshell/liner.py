"""Line input with a persisted history file."""

from __future__ import annotations

import sys
from typing import Any, TextIO

try:
    import termios
except ImportError:  # pragma: no cover - not available on every platform
    termios = None  # type: ignore[assignment]

CLEAR_SEQUENCE = "\x1b[H\x1b[2J"


def clear_screen(out: TextIO | None = None) -> None:
    """Clear the terminal by writing the ANSI home and erase sequence."""
    stream = out if out is not None else sys.stdout
    stream.write(CLEAR_SEQUENCE)
    stream.flush()


def _terminal_mode(stream: Any) -> Any:
    if termios is None:
        return None
    try:
        if not stream.isatty():
            return None
        return termios.tcgetattr(stream.fileno())
    except (AttributeError, OSError, ValueError, termios.error):
        return None


def _apply_mode(stream: Any, mode: Any) -> None:
    if termios is None or mode is None:
        return
    termios.tcsetattr(stream.fileno(), termios.TCSANOW, mode)


class LineHistory:
    """A history file, opened for reading and writing and created if missing."""

    def __init__(self, file_path: str) -> None:
        self.file_path = file_path
        self._file = open(file_path, "a+", encoding="utf-8")

    def read(self) -> list[str]:
        """Return the non-empty lines stored in the file."""
        self._file.seek(0)
        return [line for line in self._file.read().splitlines() if line]

    def write(self, lines: list[str]) -> None:
        """Replace the file contents with ``lines``, one per line."""
        self._file.seek(0)
        self._file.truncate()
        self._file.writelines(f"{line}\n" for line in lines)
        self._file.flush()

    def close(self) -> None:
        if not self._file.closed:
            self._file.close()


class Liner:
    """Reads lines from a stream, keeping an in-memory history."""

    def __init__(
        self,
        history: LineHistory | None = None,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
    ) -> None:
        self.history = history
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout
        self.history_lines: list[str] = []
        self.paused = False
        self._terminal_mode = _terminal_mode(self.stdin)
        self._liner_mode = _terminal_mode(self.stdin)

    def prompt(self, text: str) -> str:
        """Show ``text`` and return the line typed, without its line ending.

        Raises EOFError at end of input.
        """
        self.stdout.write(text)
        self.stdout.flush()
        line = self.stdin.readline()
        if line == "":
            raise EOFError("end of input")
        line = line.rstrip("\r\n")
        if line.strip():
            self.history_lines.append(line)
        return line

    def _require_history(self) -> LineHistory:
        if self.history is None:
            raise RuntimeError("history not set")
        return self.history

    def read_history(self) -> None:
        """Load the history file into memory."""
        self.history_lines.extend(self._require_history().read())

    def write_history(self) -> None:
        """Write the in-memory history to the history file."""
        self._require_history().write(self.history_lines)

    def pause(self) -> None:
        """Save the history and restore the terminal mode found at start."""
        if self.paused:
            raise RuntimeError("Liner already paused")
        self.paused = True
        try:
            self.write_history()
        except (RuntimeError, OSError):
            pass
        _apply_mode(self.stdin, self._terminal_mode)

    def resume(self) -> None:
        """Return to the line-reading terminal mode."""
        if not self.paused:
            raise RuntimeError("Liner is not paused")
        self.paused = False
        _apply_mode(self.stdin, self._liner_mode)

    def close(self) -> None:
        if self.history is not None:
            self.history.close()