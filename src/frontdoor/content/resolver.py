"""Map request paths onto files under the content root."""

import os
import re
import stat
from dataclasses import dataclass
from pathlib import Path

from frontdoor.errors import FrontdoorError

H1_TITLE = re.compile(rb"<h1>([^<]+)</h1>")
INDEX_FILE = "index.html"


class ContentError(FrontdoorError):
    """A content path could not be resolved or read.

    Carries the relative path that failed and the underlying I/O error.
    """

    def __init__(self, relpath: str, cause: OSError) -> None:
        super().__init__(relpath, cause)
        self.relpath = relpath
        self.cause = cause

    def __str__(self) -> str:
        return str(self.cause)


class TraversalError(FrontdoorError):
    """The path tried to climb out of the content root."""

    def __init__(self, relpath: str) -> None:
        super().__init__(relpath)
        self.relpath = relpath


@dataclass(frozen=True, slots=True)
class ContentFile:
    """A resolved content file, read for exactly one request."""

    relpath: str
    path: Path
    data: bytes
    title: str = ""


def extract_title(data: bytes) -> str:
    """Inner text of the first ``<h1>...</h1>``, or ""."""
    m = H1_TITLE.search(data)
    if m is None:
        return ""
    return m.group(1).decode("utf-8", "replace")


class ContentResolver:
    """Resolve relative paths under ``<root>/content``.

    A directory resolves to its ``index.html``. Symlinks are not
    followed when deciding whether a path is a directory.
    """

    __slots__ = ("_root",)

    def __init__(self, content_dir: str | Path) -> None:
        self._root = Path(content_dir)

    @property
    def root(self) -> Path:
        return self._root

    def resolve(self, relpath: str) -> ContentFile:
        """Read the file for *relpath*.

        Raises TraversalError for any path containing ``..`` and
        ContentError when the file cannot be found or read.
        """
        if ".." in relpath:
            raise TraversalError(relpath)

        path = self._root / relpath
        try:
            st = os.lstat(path)
        except OSError as exc:
            raise ContentError(relpath, exc) from exc

        if _is_dir(st):
            relpath = f"{relpath.rstrip('/')}/{INDEX_FILE}" if relpath else INDEX_FILE
            path = self._root / relpath
            try:
                st = os.lstat(path)
            except OSError as exc:
                raise ContentError(relpath, exc) from exc
            if _is_dir(st):
                raise ContentError(relpath, IsADirectoryError(21, "is a directory", str(path)))

        try:
            data = path.read_bytes()
        except OSError as exc:
            raise ContentError(relpath, exc) from exc

        return ContentFile(relpath=relpath, path=path, data=data, title=extract_title(data))


def _is_dir(st: os.stat_result) -> bool:
    return stat.S_ISDIR(st.st_mode)
