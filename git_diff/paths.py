"""Path rewriting options for parsed patches."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path, PurePosixPath

DEV_NULL = "/dev/null"


@dataclass(frozen=True, slots=True)
class ParseOptions:
    """Optional base directories that preimage/postimage paths are made relative to."""

    relative_from: str | None = None
    relative_to: str | None = None


def relative_to_base(path: str, base: str | Path | None) -> str:
    """Rewrite ``path`` relative to ``base`` when it lies under it.

    Paths outside ``base`` (and every path when ``base`` is None) are
    returned unchanged.
    """
    if base is None:
        return path
    candidate = PurePosixPath(path)
    root = PurePosixPath(str(base))
    if not candidate.is_relative_to(root):
        return path
    return str(candidate.relative_to(root))


def relative_to_cwd(path: str) -> str:
    """Make an absolute path under the working directory relative to it."""
    if not PurePosixPath(path).is_absolute():
        return path
    return relative_to_base(path, Path.cwd().as_posix())
