"""File, process and string helpers used throughout the package."""

from __future__ import annotations

import os
import re
import shutil
import stat
import subprocess
import sys
import urllib.request
from datetime import datetime, timezone
from typing import BinaryIO, Iterable

DEFAULT_TIMEOUT = 30.0


class CommandError(Exception):
    """A command exited with a failure status or ran past its timeout."""

    def __init__(
        self, returncode: int | None, output: str = "", timed_out: bool = False
    ) -> None:
        self.returncode = returncode
        self.output = output
        self.timed_out = timed_out
        if timed_out:
            message = "command timed out"
        elif returncode is not None and returncode < 0:
            message = f"killed by signal {-returncode}"
        else:
            message = f"exit status {returncode}"
        super().__init__(message)


def get_file_size(file_path: str | os.PathLike) -> int:
    """Return the size of a file in bytes."""
    return os.stat(file_path).st_size


def current_time() -> datetime:
    """Return the current time in UTC."""
    return datetime.now(timezone.utc)


def contains_substring(needle: str, items: Iterable[str]) -> bool:
    """Return True if any item contains ``needle``."""
    return any(needle in item for item in items)


def unique(items: Iterable[str]) -> list[str]:
    """Return the items without duplicates, keeping first occurrences in order."""
    return list(dict.fromkeys(items))


def _decode(data: bytes | str | None) -> str:
    if data is None:
        return ""
    if isinstance(data, str):
        return data
    return data.decode("utf-8", errors="replace")


def exec_cmd(
    name: str,
    *args: str,
    timeout: float | None = DEFAULT_TIMEOUT,
    cwd: str | os.PathLike | None = None,
) -> str:
    """Run a command and return its combined stdout and stderr.

    Raises CommandError when the command fails or times out; the error
    carries whatever the command printed.
    """
    try:
        completed = subprocess.run(
            [name, *args],
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            timeout=timeout,
            cwd=cwd,
        )
    except subprocess.TimeoutExpired as exc:
        raise CommandError(None, _decode(exc.output), timed_out=True) from exc
    output = _decode(completed.stdout)
    if completed.returncode != 0:
        raise CommandError(completed.returncode, output)
    return output


def exec_background(name: str, *args: str) -> subprocess.Popen:
    """Start a command without waiting for it to finish."""
    return subprocess.Popen([name, *args])


def getwd() -> str:
    """Return the absolute directory holding the running program."""
    return os.path.abspath(os.path.dirname(sys.argv[0]))


def read_all(file_path: str | os.PathLike) -> bytes:
    """Read a whole file into memory."""
    with open(file_path, "rb") as fh:
        return fh.read()


def walk_all_files(directory: str | os.PathLike) -> list[str]:
    """Return the paths of all regular files under ``directory``, in lexical order."""
    files: list[str] = []

    def visit(path: str, mode: int) -> None:
        if stat.S_ISREG(mode):
            files.append(path)
        elif stat.S_ISDIR(mode):
            for name in sorted(os.listdir(path)):
                child = os.path.join(path, name)
                visit(child, os.lstat(child).st_mode)

    root = os.fspath(directory)
    visit(root, os.lstat(root).st_mode)
    return files


def write_bytes_file(filename: str | os.PathLike, reader: BinaryIO) -> int:
    """Write everything read from ``reader`` to ``filename``; return bytes written."""
    with open(filename, "wb") as fh:
        return fh.write(reader.read())


def chown_file_username(filename: str | os.PathLike, username: str) -> None:
    """Give ownership of a file to a user and that user's primary group."""
    import pwd

    entry = pwd.getpwnam(username)
    os.chown(filename, entry.pw_uid, entry.pw_gid)


def is_directory(path: str | os.PathLike) -> bool:
    """Return True if ``path`` is a directory; raise if it does not exist."""
    return stat.S_ISDIR(os.stat(path).st_mode)


def copy_file(src: str | os.PathLike, dst: str | os.PathLike) -> None:
    """Copy ``src`` to ``dst``.

    Nothing is done when both name the same file. Otherwise a hard link is
    tried first, and the contents are copied if linking fails.
    """
    src_stat = os.stat(src)
    if not stat.S_ISREG(src_stat.st_mode):
        raise ValueError(
            f"copy_file: non-regular source file {os.path.basename(src)} "
            f"({stat.filemode(src_stat.st_mode)!r})"
        )
    try:
        dst_stat = os.stat(dst)
    except FileNotFoundError:
        pass
    else:
        if not stat.S_ISREG(dst_stat.st_mode):
            raise ValueError(
                f"copy_file: non-regular destination file {os.path.basename(dst)} "
                f"({stat.filemode(dst_stat.st_mode)!r})"
            )
        if os.path.samestat(src_stat, dst_stat):
            return
    try:
        os.link(src, dst)
        return
    except OSError:
        pass
    with open(src, "rb") as fin, open(dst, "wb") as fout:
        shutil.copyfileobj(fin, fout)
        fout.flush()
        os.fsync(fout.fileno())


def get_root_project_dir() -> str:
    """Return the project source directory under the configured workspace."""
    workspace = os.environ.get("MULTISCAN_WORKSPACE", "")
    return os.path.join(workspace, "src", "multiscan")


def create_file(path: str | os.PathLike) -> None:
    """Create an empty file unless something already exists at ``path``."""
    if not os.path.exists(path):
        open(path, "wb").close()


def delete_file(path: str | os.PathLike) -> None:
    """Delete a file."""
    os.remove(path)


def delete_dir_content(directory: str | os.PathLike) -> None:
    """Remove everything inside ``directory`` but keep the directory itself."""
    with os.scandir(directory) as entries:
        children = list(entries)
    for entry in children:
        if entry.is_dir(follow_symlinks=False):
            shutil.rmtree(entry.path)
        else:
            os.remove(entry.path)


def exists(name: str | os.PathLike) -> bool:
    """Report whether a file or directory exists."""
    try:
        os.stat(name)
    except FileNotFoundError:
        return False
    except OSError:
        return True
    return True


def download_file(url: str, writer: BinaryIO) -> None:
    """Download ``url`` and write the body to ``writer``."""
    with urllib.request.urlopen(url) as response:
        shutil.copyfileobj(response, writer)


def resolve(s: str) -> str:
    """Expand a leading ``%NAME%`` path element from the environment.

    The path is returned unchanged unless it starts with ``%NAME%``, NAME is
    set in the environment, and the rest of the path starts with a backslash.
    """
    if not s.startswith("%"):
        return s
    trimmed = s[1:]
    end = trimmed.find("%")
    if end == -1:
        return s
    value = os.environ.get(trimmed[:end])
    if value is None:
        return s
    remainder = trimmed[end + 1 :]
    if os.sep != "/":
        remainder = remainder.replace("/", os.sep)
    if not remainder.startswith("\\"):
        return s
    return value + remainder


def regex_groups(pattern: str, s: str) -> dict[str, str]:
    """Map the group names of ``pattern`` to what they matched in ``s``.

    Unnamed groups share the empty-string key; the last one wins.
    Returns an empty dict when there is no match.
    """
    regex = re.compile(pattern)
    match = regex.search(s)
    if match is None:
        return {}
    names = {index: name for name, index in regex.groupindex.items()}
    groups: dict[str, str] = {}
    for index in range(1, regex.groups + 1):
        groups[names.get(index, "")] = match.group(index) or ""
    return groups