# panshell

`panshell` is a library of pieces for building an interactive shell for a
cloud drive. It needs only the Python standard library and runs on Python
3.10 and later.

## What is in it

- `panshell.args`: `parse(line)` splits a command line into arguments.
  It understands single, double and back quotes. A backslash escapes
  whitespace, quotes and itself, and any other backslash is kept as is.
  `is_quote(char)` tells whether a character is a quote.
- `panshell.table`: `Table` writes borderless plain-text tables to a stream.
  It has `set_header`, `set_column_alignment` (values from `Align`),
  `append`, `append_bulk` and `render`. Column widths take wide CJK
  characters into account.
- `panshell.users`: `BaiduBase` and `Baidu` are dataclasses that hold an
  account's uid, name, tokens and working directory. `Baidu.path_join`
  resolves a remote path against the working directory.
  `Baidu.get_save_path` gives the local path for a remote file.
  `to_dict` and `from_dict` convert to and from JSON-ready dicts.
  `format_user_list` renders a list of accounts as a table.
- `panshell.liner`: `Liner` reads prompted lines from a stream and keeps the
  lines in memory. `LineHistory` reads them from and writes them to a
  history file. `Liner.pause` and `Liner.resume` save and restore the
  terminal mode where `termios` is available. `clear_screen` writes the
  ANSI clear sequence.
- `panshell.download_check`: `check_file_valid` checks a downloaded file
  against its expected md5. It raises `ChecksumNotSupportedError`,
  `ChecksumMismatchError` or `FileBannedError`, all subclasses of
  `ChecksumError`. `file_exist` tells whether a finished download (with no
  resume file beside it) is present. `download_print_format` returns the
  progress line template.
- `panshell.download_queue`: `DownloadOptions` holds the options for a batch
  download and fills in defaults with `apply_defaults`. `DownloadTask`
  keeps the retry count for one queued file, and `should_retry` decides
  whether a failure goes back on the queue. `format_left_time` and
  `task_save_path` are small helpers.
- `panshell.commands`: `match_path_once` and `match_paths` resolve wildcard
  patterns through a matcher function that you supply. They raise
  `ShellPatternNoHitError` or `ShellPatternMultiResultError`.
  `split_copy_move_paths` splits copy/move arguments. `tree_lines` draws a
  directory tree from a listing function of `RemoteEntry` values.
  `BackgroundTasks` is a thread-safe registry of running background jobs.
- `panshell.export`: `mkdir_line` and `rapidupload_line` build replayable
  command lines. `change_root_path` rebases a path. `export_filename`
  names an export file with a Beijing-time timestamp.
- `panshell.upload_db`: `UploadingDatabase` is a JSON file of unfinished
  uploads, keyed by `LocalFileMeta`. It supports `update_uploading`,
  `search`, `delete`, `save` and `close`, and it can be used as a context
  manager. A search first drops entries whose files have been changed or
  removed.
- `panshell.update`: `ReleaseInfo` and `AssetInfo` describe a release.
  `is_newer_release`, `asset_pattern` and `select_assets` pick the archive
  for a platform. `install_from_zip` and `replace_file` install the files
  of a downloaded archive over the existing ones.

## Examples

```python
from panshell.args import parse

parse('cd "my dir"')           # ['cd', 'my dir']
parse(r"rm file\ name.txt")    # ['rm', 'file name.txt']
```

```python
import sys
from panshell.table import Table

table = Table(sys.stdout)
table.set_header(["#", "path"])
table.append(["0", "/photos"])
table.append(["1", "/music"])
table.render()
```

```python
from panshell.users import Baidu

user = Baidu.from_dict({"uid": 1, "name": "demo", "workdir": "/docs"})
user.path_join("notes.txt")    # '/docs/notes.txt'
user.path_join("/abs/path")    # '/abs/path'
```

```python
from panshell.export import change_root_path, mkdir_line

change_root_path("/a", "/a/b/c", "/x")   # '/x/b/c'
mkdir_line("/x/empty")                   # 'panshell mkdir "/x/empty"\n'
```

## What it does not do

- It has no command to run. It provides no shell, no command dispatcher
  and no entry point.
- It does not talk to any cloud-drive service. Listing, matching, copying,
  downloading and uploading all take functions or data that you supply.
  `update` does not fetch release information or archives itself either.
- It has no settings file and no login. Account records can be converted
  to and from dicts, but storing them, choosing an active account and
  getting tokens are left to the caller.

## Running the tests

Install the `test` extra, then run `pytest` from the project root.