"""
Path Utils
==========
Path normalisation and repo-relative conversion helpers.

Responsibilities:
    - Convert absolute paths to paths relative to the clone directory
    - Normalise path separators to forward slashes
    - Walk up the base directory with ".." when the target is not below it

Paths are treated as opaque strings split on "/".  Symlinks and
case-insensitive filesystems are not considered.  Two absolute POSIX paths
always share the root, so a target anywhere on the filesystem is reached
with ".." segments.  When no relative path exists (another drive letter, or
one path absolute and the other relative) the target is returned as-is
rather than raising.
"""
import re
from typing import List

_DRIVE_RE = re.compile(r"^[A-Za-z]:")


def _strip_scheme(path: str) -> str:
    scheme_position = path.find("://")
    if scheme_position != -1:
        return path[scheme_position + 3:]
    return path


def _split(path: str) -> List[str]:
    return [part for part in path.replace("\\", "/").split("/") if part]


def _root_of(path: str) -> str:
    """Root of a slash-converted path: "/", a drive such as "C:", or "" if relative."""
    path = path.replace("\\", "/")
    if path.startswith("/"):
        return "/"
    drive = _DRIVE_RE.match(path)
    return drive.group(0) if drive else ""


class RelativePathHelper:
    """
    Makes file paths relative to a fixed base directory (the clone root).

    Usage:
        helper = RelativePathHelper("/opt/atlassian/pipelines/agent/build")
        helper.get_relative_path("/opt/atlassian/pipelines/agent/build/src/A.php")
        # -> "src/A.php"
        helper.get_relative_path("/tmp/x.php")
        # -> "../../../../../tmp/x.php"
    """

    def __init__(self, base_path: str) -> None:
        self.base_path = base_path
        self._base_root = _root_of(base_path)
        self._base_parts = _split(base_path)

    def get_filename_parts(self, filename: str) -> List[str]:
        filename = _strip_scheme(filename).replace("\\", "/")
        filename_parts = _split(filename)

        if self._base_root != _root_of(filename):
            return [filename]

        common = 0
        for base_part, filename_part in zip(self._base_parts, filename_parts):
            if base_part != filename_part:
                break
            common += 1

        # Relative paths have no shared root to walk up to.
        if common == 0 and not self._base_root:
            return [filename]

        parents = [".."] * (len(self._base_parts) - common)
        return parents + filename_parts[common:]

    def get_relative_path(self, filename: str) -> str:
        return "/".join(self.get_filename_parts(filename))


def normalize_path(base_path: str, target_path: str) -> str:
    """Return target_path relative to base_path, forward slashes."""
    return RelativePathHelper(base_path).get_relative_path(target_path)
