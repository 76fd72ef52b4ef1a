"""Collecting, filtering, sorting and persisting the list of files to show."""

from __future__ import annotations

import contextlib
import enum
import errno
import logging
import os
import random
import shutil
import stat
import sys
import tempfile
from collections.abc import Callable, Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from typing import BinaryIO
from urllib.parse import unquote

from fehview.imaging import ImageLoadError, image_format, load_image
from fehview.lists import merge_sort, randomize

__all__ = [
    "PATH_MAX",
    "FileInfo",
    "FehFile",
    "SortMode",
    "RecurseLevel",
    "FileListOptions",
    "FileList",
    "load_file_info",
    "version_compare",
    "sort_files",
    "write_filelist",
    "read_filelist",
    "absolute_path",
    "http_unescape",
]

log = logging.getLogger(__name__)

PATH_MAX = 4096
_UINT_MAX = (1 << 32) - 1
_URL_PREFIXES = ("http://", "https://", "ftp://")
_ALPHA_MODES = frozenset({"RGBA", "RGBa", "LA", "La", "PA"})


class SortMode(enum.IntEnum):
    """Orderings the file list can be sorted in."""

    NONE = 0
    NAME = 1
    FILENAME = 2
    DIRNAME = 3
    MTIME = 4
    WIDTH = 5
    HEIGHT = 6
    PIXELS = 7
    SIZE = 8
    FORMAT = 9


class RecurseLevel(enum.Enum):
    """How deep a path being added may still descend into directories."""

    FIRST = 0
    CONTINUE = 1
    LAST = 2


@dataclass
class FileInfo:
    """Image properties gathered when a file is preloaded."""

    width: int = 0
    height: int = 0
    size: int = 0
    pixels: int = 0
    has_alpha: bool = False
    format: str | None = None
    extension: str | None = None


@dataclass(eq=False)
class FehFile:
    """A file in the list; ``name`` is the part after the last slash."""

    filename: str
    caption: str | None = None
    info: FileInfo | None = None
    name: str = field(init=False)

    def __post_init__(self) -> None:
        self.name = self.filename.rsplit("/", 1)[-1]

    def dirname(self, maxlen: int = PATH_MAX) -> str:
        """Return the directory part including its trailing slash.

        Returns an empty string when there is none or it is ``maxlen`` or longer.
        """
        n = len(self.filename) - len(self.name)
        if n <= 0 or n >= maxlen:
            return ""
        return self.filename[:n]


@dataclass
class FileListOptions:
    """Settings that control how files are gathered and ordered."""

    quiet: bool = False
    recursive: bool = False
    filelistfile: str | None = None
    version_sort: bool = False
    min_width: int = 0
    max_width: int = _UINT_MAX
    min_height: int = 0
    max_height: int = _UINT_MAX
    list: bool = False
    preload: bool = False
    customlist: bool = False
    sort: SortMode = SortMode.NONE
    filter_by_dimensions: bool = False
    index: bool = False
    thumbs: bool = False
    bgmode: bool = False
    randomize: bool = False
    reverse: bool = False
    rng: random.Random | None = None


def _is_url(path: str) -> bool:
    return path.startswith(_URL_PREFIXES)


def _warn_stat_error(path: str, exc: OSError, quiet: bool = False) -> None:
    if quiet:
        return
    code = exc.errno
    if code in (errno.ENOENT, errno.ENOTDIR):
        log.warning("%s does not exist - skipping", path)
    elif code == errno.ELOOP:
        log.warning("%s - too many levels of symbolic links - skipping", path)
    elif code == errno.EACCES:
        log.warning("you don't have permission to open %s - skipping", path)
    elif code == errno.EOVERFLOW:
        log.warning("Cannot open %s - EOVERFLOW.", path)
    else:
        log.warning("couldn't open %s", path)


def load_file_info(file: FehFile) -> FileInfo:
    """Load the image behind ``file``, store its properties on it and return them.

    Raises OSError when the file cannot be stat'ed and ImageLoadError when it
    cannot be decoded.
    """
    st = os.stat(file.filename)
    image = load_image(file.filename)
    try:
        width, height = image.size
        info = FileInfo(
            width=width,
            height=height,
            size=st.st_size,
            pixels=width * height,
            has_alpha=image.mode in _ALPHA_MODES or "transparency" in image.info,
            format=image_format(image),
        )
    finally:
        image.close()
    file.info = info
    return info


# State machine for version comparison of byte strings.
_S_N, _S_I, _S_F, _S_Z = 0, 3, 6, 9
_CMP, _LEN = 2, 3
_NEXT_STATE = (
    _S_N, _S_I, _S_Z,
    _S_N, _S_I, _S_I,
    _S_N, _S_F, _S_F,
    _S_N, _S_F, _S_Z,
)
_RESULT_TYPE = (
    _CMP, _CMP, _CMP, _CMP, _LEN, _CMP, _CMP, _CMP, _CMP,
    _CMP, -1, -1, 1, _LEN, _LEN, 1, _LEN, _LEN,
    _CMP, _CMP, _CMP, _CMP, _CMP, _CMP, _CMP, _CMP, _CMP,
    _CMP, 1, 1, -1, _CMP, _CMP, -1, _CMP, _CMP,
)


def _isdigit(c: int) -> bool:
    return 0x30 <= c <= 0x39


def _char_class(c: int) -> int:
    return (c == 0x30) + _isdigit(c)


def version_compare(a: str, b: str) -> int:
    """Compare two names so that embedded numbers order numerically.

    Returns a negative number, zero or a positive number. Runs of digits with
    leading zeros are treated as fractional parts.
    """
    p1 = os.fsencode(a) + b"\0"
    p2 = os.fsencode(b) + b"\0"
    c1, c2 = p1[0], p2[0]
    i = 1
    state = _S_N + _char_class(c1)
    while (diff := c1 - c2) == 0:
        if c1 == 0:
            return 0
        state = _NEXT_STATE[state]
        c1, c2 = p1[i], p2[i]
        i += 1
        state += _char_class(c1)

    result = _RESULT_TYPE[state * 3 + _char_class(c2)]
    if result == _CMP:
        return diff
    if result == _LEN:
        j1 = j2 = i
        while _isdigit(p1[j1]):
            j1 += 1
            if not _isdigit(p2[j2]):
                return 1
            j2 += 1
        return -1 if _isdigit(p2[j2]) else diff
    return result


def _strcmp(a: str, b: str) -> int:
    ba, bb = os.fsencode(a), os.fsencode(b)
    return (ba > bb) - (ba < bb)


def _cmp_mtime(f1: FehFile, f2: FehFile) -> int:
    # Newer files come first; equal times never compare as zero.
    try:
        s1 = os.stat(f1.filename)
    except OSError as exc:
        _warn_stat_error(f1.filename, exc)
        return -1
    try:
        s2 = os.stat(f2.filename)
    except OSError as exc:
        _warn_stat_error(f2.filename, exc)
        return -1
    return -1 if s1.st_mtime_ns // 10**9 >= s2.st_mtime_ns // 10**9 else 1


_INFO_MODES = frozenset(
    {SortMode.WIDTH, SortMode.HEIGHT, SortMode.PIXELS, SortMode.SIZE, SortMode.FORMAT}
)


def _comparator(
    mode: SortMode, version_sort: bool
) -> Callable[[FehFile, FehFile], int] | None:
    text_cmp = version_compare if version_sort else _strcmp

    def by_dirname(f1: FehFile, f2: FehFile) -> int:
        result = text_cmp(f1.dirname(PATH_MAX), f2.dirname(PATH_MAX))
        return result if result != 0 else text_cmp(f1.name, f2.name)

    comparators: dict[SortMode, Callable[[FehFile, FehFile], int]] = {
        SortMode.NAME: lambda f1, f2: text_cmp(f1.name, f2.name),
        SortMode.FILENAME: lambda f1, f2: text_cmp(f1.filename, f2.filename),
        SortMode.DIRNAME: by_dirname,
        SortMode.MTIME: _cmp_mtime,
        SortMode.WIDTH: lambda f1, f2: f1.info.width - f2.info.width,
        SortMode.HEIGHT: lambda f1, f2: f1.info.height - f2.info.height,
        SortMode.PIXELS: lambda f1, f2: f1.info.pixels - f2.info.pixels,
        SortMode.SIZE: lambda f1, f2: f1.info.size - f2.info.size,
        SortMode.FORMAT: lambda f1, f2: _strcmp(f1.info.format or "", f2.info.format or ""),
    }
    return comparators.get(mode)


def sort_files(
    files: Sequence[FehFile], mode: SortMode, version_sort: bool = False
) -> list[FehFile]:
    """Return ``files`` sorted by ``mode``; SortMode.NONE returns a copy.

    Modes that compare image properties need every file's info loaded and
    raise ValueError otherwise.
    """
    mode = SortMode(mode)
    cmp = _comparator(mode, version_sort)
    if cmp is None:
        return list(files)
    if mode in _INFO_MODES and any(f.info is None for f in files):
        raise ValueError(f"sorting by {mode.name.lower()} needs file info to be loaded")
    return merge_sort(files, cmp)


class FileList:
    """The ordered list of files to display, plus temporary files to clean up."""

    def __init__(self, options: FileListOptions | None = None) -> None:
        self.options = options if options is not None else FileListOptions()
        self.files: list[FehFile] = []
        self.rm_files: list[str] = []

    def __len__(self) -> int:
        return len(self.files)

    def __iter__(self) -> Iterator[FehFile]:
        return iter(self.files)

    def add_recursively(
        self, path: str | None, level: RecurseLevel = RecurseLevel.FIRST
    ) -> None:
        """Add a file, URL, ``-`` (standard input) or the contents of a directory.

        A directory given directly is always expanded one level; deeper
        levels are visited only with the ``recursive`` option.
        """
        if not path:
            return
        opts = self.options
        if level is RecurseLevel.FIRST:
            if path.endswith("/"):
                path = path[:-1]
            if _is_url(path):
                self.files.append(FehFile(path))
                return
            if path == "-":
                self.add_stdin(sys.stdin.buffer)
                return
            if opts.filelistfile:
                path = absolute_path(path)

        try:
            st = os.stat(path)
        except OSError as exc:
            _warn_stat_error(path, exc, opts.quiet)
            return

        if stat.S_ISDIR(st.st_mode) and level is not RecurseLevel.LAST:
            try:
                names = os.listdir(path)
            except OSError as exc:
                if not opts.quiet:
                    log.warning("couldn't open directory %s: %s", path, exc)
                return
            next_level = RecurseLevel.CONTINUE if opts.recursive else RecurseLevel.LAST
            for name in sorted(names, key=os.fsencode):
                self.add_recursively(f"{path}/{name}", next_level)
        elif stat.S_ISREG(st.st_mode):
            self.files.append(FehFile(path))

    def add_stdin(self, stream: BinaryIO) -> FehFile:
        """Copy ``stream`` to a temporary file, add it, and schedule it for removal."""
        fd, tmpname = tempfile.mkstemp(prefix="feh_stdin_")
        try:
            with os.fdopen(fd, "wb") as outfile:
                shutil.copyfileobj(stream, outfile)
        except OSError:
            with contextlib.suppress(OSError):
                os.unlink(tmpname)
            raise
        file = FehFile(tmpname)
        self.files.append(file)
        self.add_rm_file(tmpname)
        return file

    def add_rm_file(self, path: str) -> None:
        """Remember ``path`` to be deleted by delete_rm_files."""
        self.rm_files.append(path)

    def delete_rm_files(self) -> None:
        """Delete every file scheduled for removal, ignoring failures."""
        for path in self.rm_files:
            with contextlib.suppress(OSError):
                os.unlink(path)

    def remove(self, file: FehFile, delete: bool = False) -> None:
        """Drop ``file`` from the list, optionally deleting it from disk first."""
        if delete:
            with contextlib.suppress(OSError):
                os.unlink(file.filename)
        self.files.remove(file)

    def preload_info(self) -> list[FehFile]:
        """Load info for every file, dropping those that fail or fall outside the size limits."""
        opts = self.options
        kept: list[FehFile] = []
        for file in self.files:
            try:
                info = load_file_info(file)
            except OSError as exc:
                _warn_stat_error(file.filename, exc, opts.quiet)
                continue
            except ImageLoadError as exc:
                if not opts.quiet:
                    log.warning("%s", exc)
                continue
            if (
                opts.min_width <= info.width <= opts.max_width
                and opts.min_height <= info.height <= opts.max_height
            ):
                kept.append(file)
        self.files = kept
        return kept

    def prepare(self) -> None:
        """Preload where needed, then order the list as the options ask.

        Raises ValueError when preloading leaves no files.
        """
        opts = self.options
        if (
            opts.list
            or opts.preload
            or opts.customlist
            or opts.sort > SortMode.MTIME
            or (opts.filter_by_dimensions and (opts.index or opts.thumbs or opts.bgmode))
        ):
            self.preload_info()
            if not self.files:
                raise ValueError("no loadable images")

        if opts.sort == SortMode.NONE:
            if opts.randomize:
                self.files = randomize(self.files, opts.rng)
            elif opts.reverse:
                self.files.reverse()
            return

        # Sorting starts from the most recently added file, which decides
        # the order of files that compare equal.
        self.files = sort_files(self.files[::-1], opts.sort, opts.version_sort)
        if opts.reverse:
            self.files.reverse()


def write_filelist(files: Iterable[FehFile], path: str | os.PathLike | None) -> bool:
    """Write one filename per line to ``path``.

    Returns False without writing when there are no files, no path, or the
    path is standard input.
    """
    files = list(files)
    if not files or not path or os.fspath(path) == "/dev/stdin":
        return False
    with open(path, "wb") as fp:
        for file in files:
            fp.write(os.fsencode(file.filename) + b"\n")
    return True


def _parse_filelist(stream: BinaryIO) -> list[FehFile]:
    entries: list[FehFile] = []
    for line in stream:
        name = line.split(b"\n", 1)[0]
        if name:
            entries.append(FehFile(os.fsdecode(name)))
    return entries


def read_filelist(path: str | os.PathLike | None) -> list[FehFile]:
    """Read files listed one per line, in file order, skipping empty lines.

    A file that cannot be opened yields an empty list. Raises ValueError if
    ``path`` is itself an image.
    """
    if path is None:
        return []
    target = os.fspath(path)
    try:
        st = os.stat(target)
    except OSError:
        st = None
    if st is not None and stat.S_ISREG(st.st_mode):
        try:
            image = load_image(target)
        except ImageLoadError:
            pass
        else:
            image.close()
            raise ValueError(
                f"Filelist file {target} is an image, refusing to use it. "
                "Did you mix up -f and -F?"
            )

    if target == "/dev/stdin":
        return _parse_filelist(sys.stdin.buffer)
    try:
        fp = open(target, "rb")
    except OSError:
        return []
    with fp:
        return _parse_filelist(fp)


def absolute_path(path: str | None) -> str | None:
    """Turn a relative path into an absolute one; absolute paths and URLs pass through."""
    if path is None:
        return None
    if path.startswith("/") or _is_url(path):
        return path
    temp = f"{os.getcwd()}/{path}"
    if len(os.fsencode(temp)) >= PATH_MAX:
        raise ValueError("Absolute path for working directory was truncated")
    try:
        return os.path.realpath(temp, strict=True)
    except OSError:
        return temp


def http_unescape(url: str) -> str:
    """Decode %XX escapes in ``url``."""
    return unquote(url, errors="surrogateescape")