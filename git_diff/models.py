"""Patch, chunk and line records produced by the parser."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Literal, NamedTuple

LineType = Literal["context", "add", "remove"]


class IndexHeader(NamedTuple):
    """Parsed ``index <old>..<new> <mode>`` header value."""

    old_hash: str
    new_hash: str
    mode: str | None


HeaderValue = str | IndexHeader


@dataclass(frozen=True, slots=True)
class Line:
    """A single body line within a chunk."""

    type: LineType
    text: str
    from_line_number: str | None = None
    to_line_number: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "text": self.text,
            "from_line_number": self.from_line_number,
            "to_line_number": self.to_line_number,
        }


@dataclass(frozen=True, slots=True)
class Chunk:
    """One ``@@ ... @@`` hunk.

    Start and count fields hold the literal substrings captured from the
    marker line; a count omitted in the source is ``""``.
    """

    header: str
    from_start_line: str
    from_num_lines: str
    to_start_line: str
    to_num_lines: str
    context: str = ""
    lines: tuple[Line, ...] = ()

    @property
    def added(self) -> int:
        return sum(1 for line in self.lines if line.type == "add")

    @property
    def removed(self) -> int:
        return sum(1 for line in self.lines if line.type == "remove")

    def to_dict(self) -> dict[str, Any]:
        return {
            "header": self.header,
            "context": self.context,
            "from_start_line": self.from_start_line,
            "from_num_lines": self.from_num_lines,
            "to_start_line": self.to_start_line,
            "to_num_lines": self.to_num_lines,
            "lines": [line.to_dict() for line in self.lines],
        }


@dataclass(frozen=True, slots=True)
class Patch:
    """The changes to one file within a diff."""

    from_: str | None
    to: str | None
    headers: Mapping[str, HeaderValue] = field(
        default_factory=lambda: MappingProxyType({}), hash=False
    )
    chunks: tuple[Chunk, ...] = ()
    binary: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.headers, MappingProxyType):
            object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    @property
    def path(self) -> str:
        """Best-effort canonical path for reporting."""
        if self.to is not None:
            return self.to
        if self.from_ is not None:
            return self.from_
        file_b = self.headers.get("file_b")
        if isinstance(file_b, str):
            return file_b
        return "<unknown>"

    @property
    def is_new_file(self) -> bool:
        return "new file mode" in self.headers or (self.from_ is None and self.to is not None)

    @property
    def is_deleted_file(self) -> bool:
        return "deleted file mode" in self.headers or (self.to is None and self.from_ is not None)

    @property
    def is_rename(self) -> bool:
        return "rename from" in self.headers or "rename to" in self.headers

    def to_dict(self) -> dict[str, Any]:
        headers: dict[str, Any] = {}
        for key, value in self.headers.items():
            headers[key] = list(value) if isinstance(value, IndexHeader) else value
        return {
            "from": self.from_,
            "to": self.to,
            "headers": headers,
            "chunks": [chunk.to_dict() for chunk in self.chunks],
            "binary": self.binary,
        }


@dataclass(slots=True)
class ChunkBuilder:
    """Mutable chunk under construction, local to one hunk."""

    header: str
    from_start_line: str
    from_num_lines: str
    to_start_line: str
    to_num_lines: str
    context: str
    from_cursor: int
    to_cursor: int
    lines: list[Line] = field(default_factory=list)

    def build(self) -> Chunk:
        return Chunk(
            header=self.header,
            from_start_line=self.from_start_line,
            from_num_lines=self.from_num_lines,
            to_start_line=self.to_start_line,
            to_num_lines=self.to_num_lines,
            context=self.context,
            lines=tuple(self.lines),
        )


@dataclass(slots=True)
class PatchBuilder:
    """Mutable patch under construction, local to one diff segment."""

    from_: str | None = None
    to: str | None = None
    headers: dict[str, HeaderValue] = field(default_factory=dict)
    chunks: list[Chunk] = field(default_factory=list)
    binary: bool = False

    def build(self) -> Patch:
        return Patch(
            from_=self.from_,
            to=self.to,
            headers=MappingProxyType(dict(self.headers)),
            chunks=tuple(self.chunks),
            binary=self.binary,
        )
