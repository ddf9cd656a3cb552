"""Tests for the eager and streaming parse entry points."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from git_diff import (
    ErrorKind,
    ParseError,
    ParseOptions,
    Patch,
    UnrecognizedFormatError,
    parse,
    parse_or_raise,
    stream,
)

FIXTURE_DIR = Path(__file__).parent / "fixtures" / "diffs"


def _load_fixture(name: str) -> str:
    return (FIXTURE_DIR / name).read_text(encoding="utf-8")


def _parse_ok(text: str, options: ParseOptions | None = None) -> list[Patch]:
    result = parse(text, options)
    assert not isinstance(result, ParseError), result
    return result


def test_parse_simple_diff() -> None:
    patches = _parse_ok(_load_fixture("simple.diff"))
    assert len(patches) == 1

    patch = patches[0]
    assert patch.from_ == "src/app.py"
    assert patch.to == "src/app.py"
    assert patch.headers["index"] == ("83db48f", "bf269f4", "100644")
    assert patch.headers["file_a"] == "src/app.py"
    assert len(patch.chunks) == 1

    chunk = patch.chunks[0]
    assert chunk.context == "def main():"
    assert [line.type for line in chunk.lines] == ["context", "remove", "add", "add", "context"]
    removed = chunk.lines[1]
    assert removed.text == '-print("old")'
    assert removed.from_line_number == "2"
    assert removed.to_line_number is None
    added = chunk.lines[2]
    assert added.from_line_number is None
    assert added.to_line_number == "2"


def test_parse_new_and_deleted_files() -> None:
    deleted, created = _parse_ok(_load_fixture("new_and_deleted.diff"))

    assert deleted.from_ == "tests/legacy.txt"
    assert deleted.to is None
    assert deleted.is_deleted_file is True
    assert [line.type for line in deleted.chunks[0].lines] == ["remove", "remove"]

    assert created.from_ is None
    assert created.to == "docs/new.md"
    assert created.is_new_file is True
    assert created.chunks[0].from_num_lines == "0"
    assert [line.to_line_number for line in created.chunks[0].lines] == ["1", "2", "3"]


def test_deleted_file_without_preimage_line() -> None:
    text = "\n".join(
        [
            "diff --git a/gone.txt b/gone.txt",
            "deleted file mode 100644",
            "+++ /dev/null",
        ]
    )
    (patch,) = _parse_ok(text)
    assert patch.to is None
    assert patch.from_ == "gone.txt"


def test_parse_no_newline_marker() -> None:
    (patch,) = _parse_ok(_load_fixture("no_newline_marker.diff"))
    lines = patch.chunks[0].lines
    assert [line.type for line in lines] == ["remove", "context", "add", "context"]
    assert lines[1].from_line_number is None
    assert lines[1].to_line_number is None
    assert patch.chunks[0].from_num_lines == ""


def test_parse_rename() -> None:
    (patch,) = _parse_ok(_load_fixture("rename.diff"))
    assert patch.from_ == "package-x/old.ico"
    assert patch.to == "package-y/new.ico"
    assert patch.headers["rename from"] == "package-x/old.ico"
    assert patch.headers["rename to"] == "package-y/new.ico"
    assert patch.headers["similarity index"] == "100%"
    assert patch.is_rename is True
    assert patch.chunks == ()


def test_parse_rename_with_relative_options() -> None:
    text = _load_fixture("rename.diff").replace("package-y", "package-x")
    (patch,) = _parse_ok(
        text, ParseOptions(relative_from="package-x", relative_to="package-x")
    )
    assert patch.from_ == "old.ico"
    assert patch.to == "new.ico"


def test_parse_binary() -> None:
    (patch,) = _parse_ok(_load_fixture("binary.diff"))
    assert patch.from_ == "x.png"
    assert patch.to == "x.png"
    assert patch.chunks == ()
    assert patch.binary is True


def test_parse_mode_change() -> None:
    (patch,) = _parse_ok(_load_fixture("mode_change.diff"))
    assert patch.headers["old mode"] == "100644"
    assert patch.headers["new mode"] == "100755"
    assert (patch.from_, patch.to) == ("bin/run.sh", "bin/run.sh")


def test_patch_count_and_order() -> None:
    patches = _parse_ok(_load_fixture("multi_hunk.diff"))
    assert [patch.to for patch in patches] == ["src/cursor.js", "src/model.js"]
    assert [len(patch.chunks) for patch in patches] == [2, 1]
    assert patches[0].chunks[1].header == "@@ -481,6 +482,5 @@ class Cursor extends Model {"


def test_line_numbers_are_monotonic_in_every_chunk() -> None:
    for patch in _parse_ok(_load_fixture("multi_hunk.diff")):
        for chunk in patch.chunks:
            to_numbers = [
                int(line.to_line_number)
                for line in chunk.lines
                if line.type in {"context", "add"} and line.to_line_number is not None
            ]
            from_numbers = [
                int(line.from_line_number)
                for line in chunk.lines
                if line.type in {"context", "remove"} and line.from_line_number is not None
            ]
            to_start = int(chunk.to_start_line)
            from_start = int(chunk.from_start_line)
            assert to_numbers == list(range(to_start, to_start + len(to_numbers)))
            assert from_numbers == list(range(from_start, from_start + len(from_numbers)))


def test_parse_trims_surrounding_whitespace() -> None:
    patches = _parse_ok("\n\n  " + _load_fixture("simple.diff") + "\n\n")
    assert len(patches) == 1


def test_parse_empty_input() -> None:
    assert parse("") == []
    assert parse(" \n\n") == []


def test_parse_fails_whole_input_on_one_bad_segment() -> None:
    result = parse(_load_fixture("mixed.diff"))
    assert isinstance(result, ParseError)
    assert result.kind is ErrorKind.INVALID_DIFF_TYPE
    assert result.line == "diff garbage"
    assert result.segment == 0


def test_parse_reports_hunk_errors() -> None:
    text = "\n".join(["diff --git a/a b/a", "@@ -x +1 @@", "+y"])
    result = parse(text)
    assert isinstance(result, ParseError)
    assert result.kind is ErrorKind.INVALID_HUNK_HEADER


def test_parse_or_raise() -> None:
    assert len(parse_or_raise(_load_fixture("simple.diff"))) == 1
    with pytest.raises(UnrecognizedFormatError, match="invalid_diff_type") as exc_info:
        parse_or_raise("not a diff")
    assert exc_info.value.error.kind is ErrorKind.INVALID_DIFF_TYPE
    assert isinstance(exc_info.value, ValueError)


def test_stream_scopes_failures_to_one_segment() -> None:
    results = list(stream(_load_fixture("mixed.diff").splitlines()))
    assert len(results) == 2

    failure, patch = results
    assert isinstance(failure, ParseError)
    assert failure.kind is ErrorKind.INVALID_DIFF_TYPE
    assert failure.segment == 0
    assert isinstance(patch, Patch)
    assert patch.from_ == "lib/ok.ex"
    assert [line.from_line_number for line in patch.chunks[0].lines] == ["10", "11", None, "12"]


def test_stream_accepts_file_objects() -> None:
    handle = io.StringIO(_load_fixture("multi_hunk.diff"))
    results = list(stream(handle))
    assert all(isinstance(result, Patch) for result in results)
    assert results == _parse_ok(_load_fixture("multi_hunk.diff"))


def test_stream_is_lazy() -> None:
    consumed: list[str] = []

    def lines():
        for line in _load_fixture("multi_hunk.diff").splitlines():
            consumed.append(line)
            yield line

    results = stream(lines())
    first = next(results)
    assert isinstance(first, Patch)
    assert first.to == "src/cursor.js"
    # Only the first segment plus the next segment's opening line were read.
    assert consumed[-1] == "diff --git a/src/model.js b/src/model.js"


def test_stream_threads_options() -> None:
    results = list(
        stream(
            _load_fixture("simple.diff").splitlines(),
            ParseOptions(relative_from="src", relative_to="src"),
        )
    )
    assert [(result.from_, result.to) for result in results] == [("app.py", "app.py")]


def test_to_dict_is_json_friendly() -> None:
    (patch,) = _parse_ok(_load_fixture("simple.diff"))
    payload = patch.to_dict()
    assert payload["from"] == "src/app.py"
    assert payload["headers"]["index"] == ["83db48f", "bf269f4", "100644"]
    assert payload["chunks"][0]["lines"][0] == {
        "type": "context",
        "text": " import sys",
        "from_line_number": "1",
        "to_line_number": "1",
    }


def test_finished_patches_are_immutable_and_hashable() -> None:
    (patch,) = _parse_ok(_load_fixture("simple.diff"))
    with pytest.raises(TypeError):
        patch.headers["index"] = "changed"  # type: ignore[index]
    assert patch.headers["index"] == ("83db48f", "bf269f4", "100644")

    (again,) = _parse_ok(_load_fixture("simple.diff"))
    assert patch == again
    assert len({patch, again}) == 1


def test_mode_change_on_path_containing_b_slash() -> None:
    (patch,) = _parse_ok("diff --git a/d b/e.txt b/d b/e.txt\nold mode 100644\nnew mode 100755")
    assert (patch.from_, patch.to) == ("d b/e.txt", "d b/e.txt")


def test_stream_crlf_file_opened_with_universal_newlines(tmp_path) -> None:
    diff_path = tmp_path / "crlf.diff"
    diff_path.write_bytes(_load_fixture("simple.diff").replace("\n", "\r\n").encode("utf-8"))
    with diff_path.open(encoding="utf-8") as handle:
        (patch,) = list(stream(handle))
    assert isinstance(patch, Patch)
    assert patch.to == "src/app.py"
    assert patch.headers["index"] == ("83db48f", "bf269f4", "100644")
