"""Entry points turning ``git diff`` output into patch records."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from git_diff.errors import ParseError, UnrecognizedFormatError
from git_diff.headers import process_headers
from git_diff.hunks import process_chunk
from git_diff.models import Patch
from git_diff.paths import ParseOptions
from git_diff.segment import split_diffs, split_hunks

logger = logging.getLogger(__name__)

_DEFAULT_OPTIONS = ParseOptions()


def parse(text: str, options: ParseOptions | None = None) -> list[Patch] | ParseError:
    """Parse a complete diff.

    Returns every patch in source order, or the first segment failure; no
    partial results are returned.
    """
    trimmed = text.strip()
    if not trimmed:
        return []

    patches: list[Patch] = []
    for result in stream(trimmed.split("\n"), options):
        if isinstance(result, ParseError):
            return result
        patches.append(result)
    logger.debug("parsed %d patches", len(patches))
    return patches


def parse_or_raise(text: str, options: ParseOptions | None = None) -> list[Patch]:
    """Like ``parse`` but raise ``UnrecognizedFormatError`` on failure."""
    result = parse(text, options)
    if isinstance(result, ParseError):
        raise UnrecognizedFormatError(result)
    return result


def stream(
    lines: Iterable[str], options: ParseOptions | None = None
) -> Iterator[Patch | ParseError]:
    """Lazily parse pre-split lines, one result per diff segment.

    A failing segment yields its ``ParseError`` and parsing continues with
    the next segment. A single trailing newline on each line is ignored;
    carriage returns are kept, so open CRLF files with ``newline=None``.
    """
    resolved = options or _DEFAULT_OPTIONS
    for index, diff in enumerate(split_diffs(_chomp(lines))):
        result = process_diff(diff, resolved)
        if isinstance(result, ParseError):
            result = ParseError(result.kind, result.line, segment=index)
            logger.debug("diff segment %d failed: %s", index, result)
        yield result


def process_diff(diff: list[str], options: ParseOptions) -> Patch | ParseError:
    """Process one diff segment into a finished patch."""
    groups = split_hunks(diff)
    patch = process_headers(next(groups, []), options)
    if isinstance(patch, ParseError):
        return patch

    for hunk in groups:
        chunk = process_chunk(hunk)
        if isinstance(chunk, ParseError):
            return chunk
        patch.chunks.append(chunk)
    return patch.build()


def _chomp(lines: Iterable[str]) -> Iterator[str]:
    for line in lines:
        yield line[:-1] if line.endswith("\n") else line
