"""Streaming line grouping."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator


def group_lines(
    lines: Iterable[str],
    starts_group: Callable[[str], bool],
    *,
    flush_empty: bool = False,
) -> Iterator[list[str]]:
    """Lazily split ``lines`` into groups, each opened by a boundary line.

    Only the current group is held in memory. With ``flush_empty`` a
    boundary on the very first line still closes an (empty) leading group.
    """
    group: list[str] = []
    for line in lines:
        if starts_group(line) and (group or flush_empty):
            yield group
            group = [line]
        else:
            group.append(line)
    if group:
        yield group


def split_diffs(lines: Iterable[str]) -> Iterator[list[str]]:
    """Group lines into per-file diff segments."""
    return group_lines(lines, _is_diff_start)


def split_hunks(diff: Iterable[str]) -> Iterator[list[str]]:
    """Group one diff segment into ``[headers, hunk, hunk, ...]``."""
    return group_lines(diff, _is_hunk_start, flush_empty=True)


def _is_diff_start(line: str) -> bool:
    return line.startswith("diff")


def _is_hunk_start(line: str) -> bool:
    return line.startswith("@@")
