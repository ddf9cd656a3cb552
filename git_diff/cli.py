"""CLI entrypoint for git-diff."""

from __future__ import annotations

import fnmatch
import json
import sys
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Annotated

import typer

from git_diff import __version__
from git_diff.config import AppConfig, default_config_template, load_app_config
from git_diff.errors import ParseError
from git_diff.git import GitError, get_diff_between, get_staged_diff, get_working_tree_diff
from git_diff.logging_setup import configure_logging
from git_diff.models import Patch
from git_diff.output import render_human, render_json, render_patch_line
from git_diff.parser import parse, stream

app = typer.Typer(
    name="git-diff",
    no_args_is_help=True,
    help="Parse git diff output into structured patches.",
)


def version_callback(value: bool) -> None:
    """Print version and exit when --version is provided."""
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.callback()
def main_callback(
    version: Annotated[
        bool,
        typer.Option("--version", help="Show version and exit.", callback=version_callback),
    ] = False,
    verbose: Annotated[bool, typer.Option("--verbose", help="Log parser details.")] = False,
) -> None:
    """Root command callback."""
    _ = version
    if verbose:
        configure_logging()


@app.command("parse")
def parse_command(
    diff_file: Annotated[Path | None, typer.Option(help="Path to unified diff file.")] = None,
    stdin: Annotated[bool, typer.Option(help="Read unified diff from stdin.")] = False,
    repo: Annotated[Path, typer.Option(help="Repository path.")] = Path("."),
    base: Annotated[str | None, typer.Option(help="Base git revision.")] = None,
    head: Annotated[str | None, typer.Option(help="Head git revision.")] = None,
    staged: Annotated[bool, typer.Option(help="Parse staged changes.")] = False,
    stream_mode: Annotated[
        bool | None,
        typer.Option(
            "--stream/--no-stream", help="Parse lazily, reporting failures per file."
        ),
    ] = None,
    relative_from: Annotated[
        str | None, typer.Option(help="Make preimage paths relative to this directory.")
    ] = None,
    relative_to: Annotated[
        str | None, typer.Option(help="Make postimage paths relative to this directory.")
    ] = None,
    format: Annotated[
        str | None, typer.Option(help="Output format: human|json.", show_default="human")
    ] = None,
    include: Annotated[list[str] | None, typer.Option(help="Include glob pattern.")] = None,
    exclude: Annotated[list[str] | None, typer.Option(help="Exclude glob pattern.")] = None,
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to config TOML file."),
    ] = None,
) -> None:
    """Parse a diff and print its patches."""
    app_config = _load_config_or_raise(repo, config_file)
    output_format = (format or app_config.format).lower()
    if output_format not in {"human", "json"}:
        raise typer.BadParameter("format must be one of: human, json", param_hint="--format")

    if diff_file and stdin:
        raise typer.BadParameter("Use either --diff-file or --stdin, not both.")

    if (base is None) ^ (head is None):
        raise typer.BadParameter("Provide both --base and --head together.")

    if relative_from is not None:
        app_config.relative_from = relative_from
    if relative_to is not None:
        app_config.relative_to = relative_to
    include_patterns = include if include is not None else app_config.include
    exclude_patterns = exclude if exclude is not None else app_config.exclude
    options = app_config.parse_options()
    use_stream = stream_mode if stream_mode is not None else app_config.stream

    with _open_diff_lines(
        diff_file=diff_file, stdin=stdin, repo=repo, base=base, head=head, staged=staged
    ) as (lines, input_source):
        if use_stream:
            failed = 0
            for result in stream(lines, options):
                if isinstance(result, ParseError):
                    failed += 1
                    _echo_stream_error(result, output_format)
                elif _is_selected(result, include_patterns, exclude_patterns):
                    _echo_stream_patch(result, output_format)
            if failed:
                raise typer.Exit(code=1)
            return

        parsed = parse("\n".join(line.removesuffix("\n") for line in lines), options)

    if isinstance(parsed, ParseError):
        if output_format == "json":
            typer.echo(render_json([], [parsed], input_source=input_source))
        else:
            typer.echo(f"Unrecognized diff format: {parsed}", err=True)
        raise typer.Exit(code=1)

    patches = [
        patch for patch in parsed if _is_selected(patch, include_patterns, exclude_patterns)
    ]
    if output_format == "json":
        typer.echo(render_json(patches, input_source=input_source))
    else:
        typer.echo(render_human(patches))


@app.command("config")
def config_command(
    repo: Annotated[Path, typer.Option(help="Repository path.")] = Path("."),
    format: Annotated[str, typer.Option(help="Output format: human|json.")] = "human",
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to config TOML file."),
    ] = None,
) -> None:
    """Show resolved configuration."""
    output_format = format.lower()
    if output_format not in {"human", "json"}:
        raise typer.BadParameter("format must be one of: human, json", param_hint="--format")

    payload = _load_config_or_raise(repo, config_file).to_dict()
    if output_format == "json":
        typer.echo(json.dumps(payload, sort_keys=True))
        return

    lines = [
        "Resolved configuration:",
        f"- source: {payload['source'] or 'defaults'}",
        f"- format: {payload['format']}",
        f"- stream: {payload['stream']}",
        f"- relative_from: {payload['relative_from']}",
        f"- relative_to: {payload['relative_to']}",
        f"- include: {payload['include']}",
        f"- exclude: {payload['exclude']}",
    ]
    typer.echo("\n".join(lines))


@app.command("config-init")
def config_init_command(
    out: Annotated[Path, typer.Option(help="Output path for starter config TOML.")] = Path(
        ".git-diff.toml"
    ),
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite if file already exists."),
    ] = False,
) -> None:
    """Create a starter repository config file."""
    out_path = out.resolve()
    if out_path.exists() and not force:
        raise typer.BadParameter(
            f"Refusing to overwrite existing file: {out_path}. Use --force to overwrite."
        )
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(default_config_template(), encoding="utf-8")
    typer.echo(f"Wrote starter config: {out_path}")


def main() -> None:
    """Console script entrypoint."""
    app()


@contextmanager
def _open_diff_lines(
    *,
    diff_file: Path | None,
    stdin: bool,
    repo: Path,
    base: str | None,
    head: str | None,
    staged: bool,
) -> Iterator[tuple[Iterable[str], str]]:
    if diff_file is not None:
        try:
            handle = diff_file.open(encoding="utf-8")
        except OSError as exc:
            raise typer.BadParameter(str(exc), param_hint="--diff-file") from exc
        with handle:
            yield (handle, f"diff_file:{diff_file}")
        return

    if stdin:
        yield (sys.stdin, "stdin")
        return

    try:
        if base is not None and head is not None:
            diff_text, input_source = get_diff_between(repo, base, head), "git_range"
        elif staged:
            diff_text, input_source = get_staged_diff(repo), "git_staged"
        else:
            diff_text, input_source = get_working_tree_diff(repo), "git_working_tree"
    except GitError as exc:
        raise typer.BadParameter(str(exc)) from exc
    yield (diff_text.splitlines(), input_source)


def _is_selected(patch: Patch, includes: list[str], excludes: list[str]) -> bool:
    path = patch.path
    if includes and not any(fnmatch.fnmatch(path, pattern) for pattern in includes):
        return False
    if excludes and any(fnmatch.fnmatch(path, pattern) for pattern in excludes):
        return False
    return True


def _echo_stream_patch(patch: Patch, output_format: str) -> None:
    if output_format == "json":
        typer.echo(json.dumps({"patch": patch.to_dict()}, sort_keys=True))
    else:
        typer.echo(render_patch_line(patch))


def _echo_stream_error(error: ParseError, output_format: str) -> None:
    if output_format == "json":
        typer.echo(json.dumps({"error": error.to_dict()}, sort_keys=True))
    else:
        typer.echo(f"error: {error}", err=True)


def _load_config_or_raise(repo: Path, config_file: Path | None = None) -> AppConfig:
    try:
        return load_app_config(repo, config_path=config_file)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="config") from exc
