"""Output rendering."""

from __future__ import annotations

import json
from typing import Any

import click

from git_diff import __version__
from git_diff.errors import ParseError
from git_diff.models import Patch


def render_human(patches: list[Patch], errors: list[ParseError] | None = None) -> str:
    """Render a compact colorized per-file summary."""
    errors = errors or []
    added = sum(chunk.added for patch in patches for chunk in patch.chunks)
    removed = sum(chunk.removed for patch in patches for chunk in patch.chunks)
    lines: list[str] = [
        click.style(
            f"{len(patches)} files changed, {added} insertions(+), {removed} deletions(-)",
            bold=True,
        )
    ]

    lines.extend(render_patch_line(patch) for patch in patches)

    if errors:
        lines.append(click.style("Errors:", fg="red", bold=True))
        for error in errors:
            lines.append(click.style(f"- {error}", fg="red"))
    return "\n".join(lines)


def render_patch_line(patch: Patch) -> str:
    """Render one patch as a single summary line."""
    added = sum(chunk.added for chunk in patch.chunks)
    removed = sum(chunk.removed for chunk in patch.chunks)
    label, color = _change_kind(patch)
    return (
        f"- {click.style(label, fg=color)} {_describe_path(patch)}: "
        f"{len(patch.chunks)} chunks, +{added} -{removed}"
    )


def render_json(
    patches: list[Patch],
    errors: list[ParseError] | None = None,
    *,
    input_source: str,
) -> str:
    """Render stable JSON output for automation."""
    return json.dumps(
        build_json_payload(patches, errors, input_source=input_source), sort_keys=True
    )


def build_json_payload(
    patches: list[Patch],
    errors: list[ParseError] | None = None,
    *,
    input_source: str,
) -> dict[str, Any]:
    """Build the JSON-serializable payload used by ``render_json``."""
    return {
        "patches": [patch.to_dict() for patch in patches],
        "errors": [error.to_dict() for error in errors or []],
        "meta": {"input_source": input_source, "version": __version__},
    }


def _describe_path(patch: Patch) -> str:
    if patch.from_ is not None and patch.to is not None and patch.from_ != patch.to:
        return f"{patch.from_} -> {patch.to}"
    return patch.path


def _change_kind(patch: Patch) -> tuple[str, str]:
    if patch.is_new_file:
        return ("added", "green")
    if patch.is_deleted_file:
        return ("deleted", "red")
    if patch.is_rename:
        return ("renamed", "cyan")
    if patch.binary:
        return ("binary", "magenta")
    return ("modified", "yellow")
