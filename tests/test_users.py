import os

import pytest

from panshell.users import Baidu, BaiduBase, format_user_list


def test_path_join_keeps_absolute_paths():
    user = Baidu(workdir="/home")
    assert user.path_join("/other/file") == "/other/file"


def test_path_join_relative_to_workdir():
    user = Baidu(workdir="/home")
    assert user.path_join("docs/a.txt") == "/home/docs/a.txt"


def test_path_join_cleans_dot_segments():
    user = Baidu(workdir="/home/sub")
    assert user.path_join("../x/./y") == "/home/x/y"


def test_path_join_current_directory():
    user = Baidu(workdir="/home/sub")
    assert user.path_join(".") == "/home/sub"


def test_get_save_path_layout(tmp_path):
    user = Baidu(uid=42, name="alice")
    result = user.get_save_path(str(tmp_path), "/docs/a.txt")
    assert result == os.path.join(str(tmp_path), "42_alice", "docs", "a.txt")
    assert os.path.isabs(result)


def test_get_save_path_strips_invalid_name_chars(tmp_path):
    user = Baidu(uid=7, name="a/b:c")
    result = user.get_save_path(str(tmp_path), "/f")
    relative = os.path.relpath(result, str(tmp_path))
    user_dir, filename = os.path.split(relative)
    assert filename == "f"
    assert user_dir.startswith("7_")
    assert os.sep not in user_dir and ":" not in user_dir


def test_dict_round_trip():
    user = Baidu(uid=5, name="bob", sex="m", age=2.5, bduss="token", ptoken="token", stoken="token", workdir="/w")
    assert Baidu.from_dict(user.to_dict()) == user


def test_to_dict_keys():
    assert set(Baidu().to_dict()) == {"uid", "name", "sex", "age", "bduss", "ptoken", "stoken", "workdir"}


def test_from_dict_defaults():
    user = Baidu.from_dict({"uid": 9})
    assert user.uid == 9
    assert user.name == ""
    assert user.workdir == ""


def test_baidu_is_a_base():
    user = Baidu(uid=1, name="n")
    assert isinstance(user, BaiduBase)
    assert (user.uid, user.name) == (1, "n")


def test_format_user_list_contains_users():
    users = [Baidu(uid=101, name="alice", sex="f", age=3.0), Baidu(uid=202, name="bob", sex="m", age=1.5)]
    text = format_user_list(users)
    lines = text.splitlines()
    assert len(lines) == 3
    assert "alice" in lines[1] and "101" in lines[1]
    assert "bob" in lines[2] and "202" in lines[2] and "1.5" in lines[2]


def test_format_user_list_integral_age_has_no_decimal_point():
    text = format_user_list([Baidu(uid=1, name="x", age=3.0)])
    assert "3.0" not in text.splitlines()[1]


@pytest.mark.parametrize("count", [0, 1, 4])
def test_format_user_list_line_count(count):
    users = [Baidu(uid=n + 1, name=f"u{n}") for n in range(count)]
    assert len(format_user_list(users).splitlines()) == count + 1