"""Parse failure values."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class ErrorKind(StrEnum):
    """Why a diff segment could not be parsed."""

    INVALID_DIFF_TYPE = "invalid_diff_type"
    INVALID_HEADER = "invalid_header"
    INVALID_INDEX_LINE = "invalid_index_line"
    INVALID_FROM_FILENAME = "invalid_from_filename"
    INVALID_TO_FILENAME = "invalid_to_filename"
    INVALID_HUNK_HEADER = "invalid_hunk_header"
    INVALID_CHUNK_LINE = "invalid_chunk_line"


@dataclass(frozen=True, slots=True)
class ParseError:
    """A terminal failure for one diff segment.

    Returned (never raised) by the processing steps; ``segment`` is the
    zero-based index of the failing diff segment once the orchestrator
    knows it.
    """

    kind: ErrorKind
    line: str
    segment: int | None = None

    def __str__(self) -> str:
        where = f" in diff {self.segment}" if self.segment is not None else ""
        return f"{self.kind}{where}: {self.line!r}"

    def to_dict(self) -> dict[str, Any]:
        return {"kind": str(self.kind), "line": self.line, "segment": self.segment}


class UnrecognizedFormatError(ValueError):
    """Raised by ``parse_or_raise`` when the input is not a valid git diff."""

    def __init__(self, error: ParseError) -> None:
        super().__init__(f"Unrecognized diff format: {error}")
        self.error = error
