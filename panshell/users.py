"""Account records and their tabular listing."""

from __future__ import annotations

import io
import os
import posixpath
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from .table import Align, Table

_INVALID_PATH_CHARS = frozenset('\\/:*?"<>|')


def _clean(path: str) -> str:
    if not path:
        return ""
    cleaned = posixpath.normpath(path)
    if cleaned.startswith("//"):
        cleaned = "/" + cleaned.lstrip("/")
    return cleaned


def _safe_name(name: str) -> str:
    return "".join(c for c in name if c not in _INVALID_PATH_CHARS)


def _format_number(value: float) -> str:
    if float(value).is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(float(value))


@dataclass
class BaiduBase:
    """Identifies an account by uid and/or name."""

    uid: int = 0
    name: str = ""


@dataclass
class Baidu(BaiduBase):
    """A logged-in account."""

    sex: str = ""
    age: float = 0.0
    bduss: str = ""
    ptoken: str = ""
    stoken: str = ""
    workdir: str = ""

    def get_save_path(self, save_dir: str, pcspath: str) -> str:
        """Return the absolute local path where remote ``pcspath`` is stored."""
        user_dir = f"{self.uid}_{_safe_name(self.name)}"
        relative = pcspath.lstrip("/\\")
        return os.path.abspath(os.path.join(save_dir, user_dir, relative))

    def path_join(self, path: str) -> str:
        """Resolve ``path`` against the working directory unless it is absolute."""
        if posixpath.isabs(path):
            return path
        return _clean(posixpath.join(self.workdir, path) if self.workdir else path)

    def to_dict(self) -> dict[str, Any]:
        return {
            "uid": self.uid,
            "name": self.name,
            "sex": self.sex,
            "age": self.age,
            "bduss": self.bduss,
            "ptoken": self.ptoken,
            "stoken": self.stoken,
            "workdir": self.workdir,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Baidu:
        return cls(
            uid=int(data.get("uid", 0)),
            name=str(data.get("name", "")),
            sex=str(data.get("sex", "")),
            age=float(data.get("age", 0.0)),
            bduss=str(data.get("bduss", "")),
            ptoken=str(data.get("ptoken", "")),
            stoken=str(data.get("stoken", "")),
            workdir=str(data.get("workdir", "")),
        )


def format_user_list(users: Iterable[Baidu]) -> str:
    """Render the accounts as a table."""
    out = io.StringIO()
    table = Table(out)
    table.set_column_alignment([Align.DEFAULT, Align.RIGHT, Align.CENTER, Align.CENTER, Align.CENTER])
    table.set_header(["#", "uid", "用户名", "性别", "age"])
    for index, user in enumerate(users):
        table.append([str(index), str(user.uid), user.name, user.sex, _format_number(user.age)])
    table.render()
    return out.getvalue()