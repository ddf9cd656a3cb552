"""Hunk processing: one ``@@`` marker line plus its body."""

from __future__ import annotations

from re import Match, compile

from git_diff.errors import ErrorKind, ParseError
from git_diff.models import Chunk, ChunkBuilder, Line

HUNK_HEADER_RE = compile(
    r"^@@ -(?P<from_start>\d+)(?:,(?P<from_count>\d+))? "
    r"\+(?P<to_start>\d+)(?:,(?P<to_count>\d+))? @@(?: (?P<context>.+))?"
)


def process_chunk(lines: list[str]) -> Chunk | ParseError:
    """Parse a hunk marker and classify its body lines with line numbers."""
    if not lines:
        return ParseError(ErrorKind.INVALID_HUNK_HEADER, "")

    header, *body = lines
    match: Match[str] | None = HUNK_HEADER_RE.match(header)
    if match is None:
        return ParseError(ErrorKind.INVALID_HUNK_HEADER, header)

    chunk = ChunkBuilder(
        header=header,
        from_start_line=match.group("from_start"),
        from_num_lines=match.group("from_count") or "",
        to_start_line=match.group("to_start"),
        to_num_lines=match.group("to_count") or "",
        context=match.group("context") or "",
        from_cursor=int(match.group("from_start")),
        to_cursor=int(match.group("to_start")),
    )

    for text in body:
        if not text:
            continue
        prefix = text[0]
        if prefix == " ":
            chunk.lines.append(
                Line(
                    type="context",
                    text=text,
                    from_line_number=str(chunk.from_cursor),
                    to_line_number=str(chunk.to_cursor),
                )
            )
            chunk.from_cursor += 1
            chunk.to_cursor += 1
        elif prefix == "+":
            chunk.lines.append(Line(type="add", text=text, to_line_number=str(chunk.to_cursor)))
            chunk.to_cursor += 1
        elif prefix == "-":
            chunk.lines.append(
                Line(type="remove", text=text, from_line_number=str(chunk.from_cursor))
            )
            chunk.from_cursor += 1
        elif prefix == "\\":
            chunk.lines.append(Line(type="context", text=text))
        else:
            return ParseError(ErrorKind.INVALID_CHUNK_LINE, text)

    return chunk.build()
