"""Path matching, copy/move argument handling, tree listing and background tasks."""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import dataclass
from typing import Protocol, TextIO

from .table import Table

INDENT_PREFIX = "│   "
PATH_PREFIX = "├──"
LAST_FILE_PREFIX = "└──"

Matcher = Callable[[str], Sequence[str]]


class _PathJoiner(Protocol):
    def path_join(self, path: str) -> str: ...


class ShellPatternNoHitError(LookupError):
    """A shell pattern matched no remote path."""

    def __init__(self, message: str = "未匹配到路径, 请检测通配符") -> None:
        super().__init__(message)


class ShellPatternMultiResultError(ValueError):
    """A shell pattern that must name one path matched several."""

    def __init__(self, message: str = "多条通配符匹配结果") -> None:
        super().__init__(message)


@dataclass
class ListTask:
    """State shared by queued tasks: an id and a retry budget."""

    id: int
    max_retry: int = 0
    retry: int = 0


@dataclass(frozen=True)
class RemoteEntry:
    """A file or directory in a remote listing."""

    filename: str
    path: str
    isdir: bool = False


def match_path_once(matcher: Matcher, user: _PathJoiner, pattern: str) -> str:
    """Resolve ``pattern`` against the user's working directory to exactly one path."""
    paths = list(matcher(user.path_join(pattern)))
    if not paths:
        raise ShellPatternNoHitError()
    if len(paths) > 1:
        raise ShellPatternMultiResultError()
    return paths[0]


def match_paths(matcher: Matcher, user: _PathJoiner, patterns: Iterable[str]) -> list[str]:
    """Resolve every pattern and return all matched paths in order."""
    result: list[str] = []
    for pattern in patterns:
        result.extend(matcher(user.path_join(pattern)))
    return result


def split_copy_move_paths(paths: Sequence[str]) -> tuple[list[str], str]:
    """Split copy/move arguments into the sources and the destination."""
    if len(paths) <= 1:
        raise ValueError("参数不完整")
    return list(paths[:-1]), paths[-1]


def tree_lines(lister: Callable[[str], Sequence[RemoteEntry]], path: str) -> Iterator[str]:
    """Yield the lines of a tree drawing of the remote directory ``path``."""
    yield from _tree(lister, path, 0)


def _tree(lister: Callable[[str], Sequence[RemoteEntry]], path: str, depth: int) -> Iterator[str]:
    entries = list(lister(path))
    indent = INDENT_PREFIX * depth
    last = len(entries) - 1
    for index, entry in enumerate(entries):
        if entry.isdir:
            yield f"{indent}{PATH_PREFIX} {entry.filename}/"
            yield from _tree(lister, entry.path, depth + 1)
            continue
        prefix = LAST_FILE_PREFIX if index == last else PATH_PREFIX
        yield f"{indent}{prefix} {entry.filename}"


class BackgroundTasks:
    """Registry of running background downloads."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._last_id = 0
        self._tasks: dict[int, list[str]] = {}

    def new_id(self) -> int:
        """Return a fresh task id."""
        with self._lock:
            self._last_id += 1
            return self._last_id

    def add(self, paths: Iterable[str]) -> int:
        """Register a task downloading ``paths`` and return its id."""
        task_id = self.new_id()
        with self._lock:
            self._tasks[task_id] = list(paths)
        return task_id

    def finish(self, task_id: int) -> list[str]:
        """Remove a finished task and return its paths; KeyError if unknown."""
        with self._lock:
            return self._tasks.pop(task_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._tasks)

    def __contains__(self, task_id: object) -> bool:
        with self._lock:
            return task_id in self._tasks

    def render(self, out: TextIO) -> None:
        """Write the running tasks as a table."""
        with self._lock:
            items = sorted(self._tasks.items())
        table = Table(out)
        table.set_header(["task_id", "files"])
        for task_id, paths in items:
            table.append([str(task_id), ",".join(paths)])
        table.render()