"""Download options, per-file task state and progress helpers."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from typing import Any, TextIO

from .commands import ListTask
from .download_check import ChecksumNotSupportedError

STR_DOWNLOAD_INIT_ERROR = "初始化下载发生错误"
STR_DOWNLOAD_FAILED = "下载文件错误"
DEFAULT_DOWNLOAD_MAX_RETRY = 3


@dataclass
class DownloadOptions:
    """Options controlling a batch download."""

    is_test: bool = False
    is_print_status: bool = False
    is_executed_permission: bool = False
    is_overwrite: bool = False
    is_share_download: bool = False
    is_locate_download: bool = False
    is_locate_pan_api_download: bool = False
    is_streaming: bool = False
    save_to: str = ""
    parallel: int = 0
    load: int = 0
    max_retry: int = 0
    no_check: bool = False
    out: TextIO | None = None

    def apply_defaults(self, max_download_load: int, max_parallel: int) -> None:
        """Fill unset values from the configured limits."""
        if self.out is None:
            self.out = sys.stdout
        if self.load <= 0:
            self.load = max_download_load
        if self.max_retry < 0:
            self.max_retry = DEFAULT_DOWNLOAD_MAX_RETRY
        if self.parallel < 1:
            self.parallel = max_parallel


@dataclass
class DownloadTask(ListTask):
    """One remote path queued for download."""

    path: str = ""
    save_path: str = ""
    info: Any = field(default=None)

    def should_retry(self, error: BaseException | None, manifest: str) -> bool:
        """Count a failure and tell whether the task goes back on the queue."""
        if error is None:
            return False
        if isinstance(error, ChecksumNotSupportedError):
            return False
        if manifest == STR_DOWNLOAD_FAILED and STR_DOWNLOAD_INIT_ERROR in str(error):
            return False
        if self.retry < self.max_retry:
            self.retry += 1
            return True
        return False


def _format_seconds(seconds: int) -> str:
    if seconds == 0:
        return "0s"
    sign = "-" if seconds < 0 else ""
    seconds = abs(seconds)
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{sign}{hours}h{minutes}m{secs}s"
    if minutes:
        return f"{sign}{minutes}m{secs}s"
    return f"{sign}{secs}s"


def format_left_time(total_size: int, downloaded: int, speeds: int) -> str:
    """Return the estimated remaining time, or "-" when the speed is unknown."""
    if speeds <= 0:
        return "-"
    remaining = total_size - downloaded
    seconds = abs(remaining) // speeds
    if remaining < 0:
        seconds = -seconds
    return _format_seconds(seconds)


def task_save_path(save_to: str, parent_save_path: str | None, name: str) -> str | None:
    """Return the local path for a task when a save directory is given.

    Top-level tasks (no ``parent_save_path``) go under ``save_to`` by base
    name; children go under their parent's save path. Returns None when
    ``save_to`` is empty, leaving the choice to the account's save path.
    """
    if not save_to:
        return None
    if parent_save_path is None:
        return os.path.join(save_to, os.path.basename(name.rstrip("/")))
    return os.path.join(parent_save_path, name)