"""Diff header processing: the lines between ``diff --git`` and the first hunk."""

from __future__ import annotations

from re import compile

from git_diff.errors import ErrorKind, ParseError
from git_diff.models import IndexHeader, PatchBuilder
from git_diff.paths import DEV_NULL, ParseOptions, relative_to_base, relative_to_cwd

DIFF_GIT_RE = compile(r"^diff --git a/(?P<file_a>.+) b/(?P<file_b>.+)$")
INDEX_RE = compile(r"^(?P<old_hash>[^.\s]+)\.\.(?P<new_hash>[^.\s]+)(?: (?P<mode>\S+))?$")
BINARY_RE = compile(r"^(?P<from_file>.+?) and (?P<to_file>.+?) differ$")

# Header lines that only record their value.
_PLAIN_KEYS = ("similarity index ", "dissimilarity index ")


def process_headers(lines: list[str], options: ParseOptions) -> PatchBuilder | ParseError:
    """Build a patch shell from one segment's header lines."""
    if not lines:
        return ParseError(ErrorKind.INVALID_DIFF_TYPE, "")

    intro = _split_intro(lines[0])
    if intro is None:
        return ParseError(ErrorKind.INVALID_DIFF_TYPE, lines[0])

    patch = PatchBuilder()
    patch.headers["file_a"], patch.headers["file_b"] = intro

    for line in lines[1:]:
        error = _apply_header(patch, line, options)
        if error is not None:
            return error
    return patch


def _split_intro(line: str) -> tuple[str, str] | None:
    """Split ``diff --git a/<a> b/<b>`` into its two paths.

    When both sides name the same path the line is cut at its midpoint, so
    paths containing `` b/`` survive; other lines fall back to the regex.
    """
    rest = line.removeprefix("diff --git ")
    if rest != line and rest.startswith("a/") and len(rest) % 2 == 1:
        middle = len(rest) // 2
        file_a, file_b = rest[2:middle], rest[middle + 3 :]
        if rest[middle : middle + 3] == " b/" and file_a == file_b and file_a:
            return file_a, file_b

    match = DIFF_GIT_RE.match(line)
    if match is None:
        return None
    return match.group("file_a"), match.group("file_b")


def _apply_header(patch: PatchBuilder, line: str, options: ParseOptions) -> ParseError | None:
    file_a = str(patch.headers["file_a"])
    file_b = str(patch.headers["file_b"])

    if line.startswith("old mode "):
        patch.headers["old mode"] = line.removeprefix("old mode ")
        patch.from_ = relative_to_base(file_a, options.relative_from)
    elif line.startswith("new mode "):
        patch.headers["new mode"] = line.removeprefix("new mode ")
        patch.to = relative_to_base(file_b, options.relative_to)
    elif line.startswith("deleted file mode "):
        patch.headers["deleted file mode"] = line.removeprefix("deleted file mode ")
        patch.from_ = relative_to_base(file_a, options.relative_from)
    elif line.startswith("new file mode "):
        patch.headers["new file mode"] = line.removeprefix("new file mode ")
        patch.to = relative_to_base(file_b, options.relative_to)
    elif line.startswith("copy from "):
        path = line.removeprefix("copy from ")
        patch.headers["copy from"] = path
        patch.from_ = relative_to_base(path, options.relative_from)
    elif line.startswith("copy to "):
        # Fills the preimage slot, not the postimage one.
        path = line.removeprefix("copy to ")
        patch.headers["copy to"] = path
        patch.from_ = relative_to_base(path, options.relative_from)
    elif line.startswith("rename from "):
        path = line.removeprefix("rename from ")
        patch.headers["rename from"] = path
        patch.from_ = relative_to_base(relative_to_cwd(path), options.relative_from)
    elif line.startswith("rename to "):
        path = line.removeprefix("rename to ")
        patch.headers["rename to"] = path
        patch.to = relative_to_base(relative_to_cwd(path), options.relative_to)
    elif line.startswith(_PLAIN_KEYS):
        key, _, value = line.partition(" index ")
        patch.headers[f"{key} index"] = value
    elif line.startswith("index "):
        match = INDEX_RE.match(line.removeprefix("index "))
        if match is None:
            return ParseError(ErrorKind.INVALID_INDEX_LINE, line)
        patch.headers["index"] = IndexHeader(
            match.group("old_hash"), match.group("new_hash"), match.group("mode")
        )
    elif line.startswith("--- "):
        resolved = _from_file(line.removeprefix("--- "), line, options)
        if isinstance(resolved, ParseError):
            return resolved
        patch.from_ = resolved
    elif line.startswith("+++ "):
        resolved = _to_file(line.removeprefix("+++ "), line, options)
        if isinstance(resolved, ParseError):
            return resolved
        patch.to = resolved
    elif line.startswith("Binary files "):
        match = BINARY_RE.match(line.removeprefix("Binary files "))
        if match is None:
            return ParseError(ErrorKind.INVALID_HEADER, line)
        from_file = _from_file(match.group("from_file"), line, options)
        if isinstance(from_file, ParseError):
            return from_file
        to_file = _to_file(match.group("to_file"), line, options)
        if isinstance(to_file, ParseError):
            return to_file
        patch.from_ = from_file
        patch.to = to_file
        patch.binary = True
    else:
        return ParseError(ErrorKind.INVALID_HEADER, line)
    return None


def _from_file(value: str, line: str, options: ParseOptions) -> str | None | ParseError:
    token = _strip_trailer(value)
    if token == DEV_NULL:
        return None
    if not token.startswith("a/"):
        return ParseError(ErrorKind.INVALID_FROM_FILENAME, line)
    return relative_to_base(token[2:], options.relative_from)


def _to_file(value: str, line: str, options: ParseOptions) -> str | None | ParseError:
    token = _strip_trailer(value)
    if token == DEV_NULL:
        return None
    if not token.startswith("b/"):
        return ParseError(ErrorKind.INVALID_TO_FILENAME, line)
    return relative_to_base(token[2:], options.relative_to)


def _strip_trailer(value: str) -> str:
    # git appends a tab after paths containing spaces.
    return value.split("\t", 1)[0]
