"""Files, directories and path helpers."""

import os
import shutil
import subprocess
import sys
import webbrowser
from enum import Enum
from pathlib import Path, PurePath
from typing import BinaryIO, List, Union

PathArg = Union[str, os.PathLike]


class FileMode(Enum):
    OPEN_READ = "rb"  # existing file, read only
    OPEN = "r+b"  # existing file, read and write
    CREATE_WRITE = "wb"  # new or truncated file, write only
    CREATE = "w+b"  # new or truncated file, read and write


class File:
    """An open binary file."""

    def __init__(self, handle: BinaryIO, mode: FileMode) -> None:
        self._handle = handle
        self.mode = mode

    @classmethod
    def open(cls, path: PathArg, mode: FileMode) -> "File":
        """Open the file at path; raises OSError on failure."""
        return cls(open(path, mode.value), mode)

    @staticmethod
    def exists(path: PathArg) -> bool:
        """Whether path names a regular file."""
        return os.path.isfile(path)

    @staticmethod
    def destroy(path: PathArg) -> bool:
        """Delete a file; False when there was nothing to delete."""
        try:
            os.remove(path)
        except FileNotFoundError:
            return False
        return True

    def length(self) -> int:
        current = self._handle.tell()
        end = self._handle.seek(0, os.SEEK_END)
        self._handle.seek(current)
        return end

    def position(self) -> int:
        return self._handle.tell()

    def seek(self, position: int) -> int:
        """Move to an absolute offset and return it."""
        return self._handle.seek(position, os.SEEK_SET)

    def read(self, length: int) -> bytes:
        if length <= 0:
            return b""
        return self._handle.read(length)

    def write(self, data: bytes) -> int:
        if not data:
            return 0
        return self._handle.write(data)

    def close(self) -> None:
        self._handle.close()

    def __enter__(self) -> "File":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


def directory_create(path: PathArg) -> bool:
    """Create a directory and its parents; False when it already existed."""
    if os.path.isdir(path):
        return False
    os.makedirs(path)
    return True


def directory_exists(path: PathArg) -> bool:
    return os.path.isdir(path)


def directory_destroy(path: PathArg) -> bool:
    """Delete a path and everything below it; False when nothing was there."""
    if os.path.isdir(path) and not os.path.islink(path):
        shutil.rmtree(path)
        return True
    try:
        os.remove(path)
    except FileNotFoundError:
        return False
    return True


def directory_enumerate(path: PathArg, recursive: bool = True) -> List[Path]:
    """Files and directories inside path; empty when path is not a directory."""
    root = Path(path)
    if not root.is_dir():
        return []
    return list(root.rglob("*") if recursive else root.iterdir())


def directory_explore(path: PathArg) -> None:
    """Open path in the system file browser."""
    target = os.fspath(path)
    if sys.platform == "win32":
        os.startfile(target)  # type: ignore[attr-defined]
    elif sys.platform.startswith("linux"):
        subprocess.Popen(["xdg-open", target])
    else:
        subprocess.Popen(["open", target])


def open_url(url: str) -> bool:
    """Try to open url in a web browser."""
    return webbrowser.open(url)


def get_file_name(path: PathArg) -> str:
    return os.path.basename(os.fspath(path))


def get_path_no_extension(path: PathArg) -> str:
    """The stem of the path's final component."""
    return os.path.splitext(get_file_name(path))[0]


def get_file_name_no_extension(path: PathArg) -> str:
    return get_path_no_extension(get_file_name(path))


def get_directory_name(path: PathArg) -> str:
    return os.path.dirname(os.fspath(path))


def get_path_after(path: PathArg, after: PathArg) -> str:
    """The part of path following the first occurrence of after, or ''."""
    path_str = PurePath(path).as_posix() if os.fspath(path) else ""
    after_str = PurePath(after).as_posix() if os.fspath(after) else ""
    pos = path_str.find(after_str)
    if pos == -1:
        return ""
    return path_str[pos + len(after_str):]


def normalize(path: PathArg) -> str:
    """Collapse '.', '..' and redundant separators; '' stays ''."""
    text = os.fspath(path)
    if not text:
        return ""
    return os.path.normpath(text)


def join(*args: PathArg) -> str:
    """Join paths and normalise the result; empty parts are skipped."""
    if not args:
        raise TypeError("join() needs at least one path")
    if len(args) == 1:
        return normalize(args[0])
    a = os.fspath(args[0])
    b = join(*args[1:]) if len(args) > 2 else os.fspath(args[1])
    if not a:
        return normalize(b)
    if not b:
        return normalize(a)
    return normalize(os.path.join(a, b))