"""Borderless plain-text tables."""

from __future__ import annotations

import enum
import re
import unicodedata
from collections.abc import Iterable
from typing import TextIO

_DECIMAL = re.compile(r"^-?(?:\d{1,3}(?:,\d{3})*|\d+)(?:\.\d+)?$")


class Align(enum.IntEnum):
    """Column alignment."""

    DEFAULT = 0
    CENTER = 1
    RIGHT = 2
    LEFT = 3


def display_width(text: str) -> int:
    """Return the number of terminal columns ``text`` occupies."""
    width = 0
    for char in text:
        if unicodedata.combining(char):
            continue
        width += 2 if unicodedata.east_asian_width(char) in ("W", "F") else 1
    return width


def _title(name: str) -> str:
    def num_or_space(char: str) -> bool:
        return char == " " or "0" <= char <= "9"

    chars = list(name)
    for pos, char in enumerate(chars):
        if char == "_":
            chars[pos] = " "
        elif char == ".":
            before_bad = pos != 0 and not num_or_space(chars[pos - 1])
            after_bad = pos != len(chars) - 1 and not num_or_space(chars[pos + 1])
            if before_bad or after_bad:
                chars[pos] = " "
    titled = "".join(chars).strip()
    if not titled and name:
        titled = " "
    return titled.upper()


def _pad(text: str, width: int, align: Align) -> str:
    gap = max(width - display_width(text), 0)
    if align is Align.DEFAULT:
        align = Align.RIGHT if _DECIMAL.match(text.strip()) else Align.LEFT
    if align is Align.RIGHT:
        return " " * gap + text
    if align is Align.LEFT:
        return text + " " * gap
    left = gap // 2
    return " " * left + text + " " * (gap - left)


class Table:
    """A table without borders, column separators or a header rule."""

    def __init__(self, out: TextIO) -> None:
        self.out = out
        self._headers: list[str] = []
        self._alignments: list[Align] = []
        self._rows: list[list[str]] = []

    def set_header(self, headers: Iterable[str]) -> None:
        self._headers = [_title(str(h)) for h in headers]

    def set_column_alignment(self, alignments: Iterable[Align | int]) -> None:
        self._alignments = [Align(a) for a in alignments]

    def append(self, row: Iterable[object]) -> None:
        self._rows.append([str(cell) for cell in row])

    def append_bulk(self, rows: Iterable[Iterable[object]]) -> None:
        for row in rows:
            self.append(row)

    def _alignment(self, column: int) -> Align:
        if column < len(self._alignments):
            return self._alignments[column]
        return Align.DEFAULT

    def render(self) -> None:
        """Write the table to the output stream."""
        all_rows = ([self._headers] if self._headers else []) + self._rows
        columns = max((len(r) for r in all_rows), default=0)
        if columns == 0:
            return

        def split(row: list[str]) -> list[list[str]]:
            cells = row + [""] * (columns - len(row))
            return [cell.split("\n") for cell in cells]

        widths = [0] * columns
        for row in all_rows:
            for column, lines in enumerate(split(row)):
                widths[column] = max(widths[column], *(display_width(s) for s in lines))

        if self._headers:
            self._write_row(split(self._headers), widths, lambda _: Align.CENTER)
        for row in self._rows:
            self._write_row(split(row), widths, self._alignment)

    def _write_row(self, cells: list[list[str]], widths: list[int], align_of) -> None:
        height = max(len(lines) for lines in cells)
        for line_no in range(height):
            parts = [
                " " + _pad(lines[line_no] if line_no < len(lines) else "", width, align_of(column)) + " "
                for column, (lines, width) in enumerate(zip(cells, widths))
            ]
            self.out.write(" " + "".join(parts) + " \n")