#!/usr/bin/env python3
"""
scribo: render markdown with [[links]]

Usage:
    scribo render notes.md                    # Block view, one block per line
    scribo render notes.md --format html      # Standalone HTML document
    scribo links notes.md --project ./book    # List [[links]] and what they resolve to
    scribo export notes.md -o notes.html      # Write an HTML document
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, NoReturn

import click

from . import __version__ as SCRIBO_VERSION
from .errors import ErrorCode, InputError, ScriboError, format_error_json
from .models import Block, ProjectContext


def _json_dumps(data: Any) -> str:
    return json.dumps(data, indent=2, default=str, ensure_ascii=False)


def output(data, as_json: bool = False):
    """Output data as JSON or formatted text."""
    if as_json:
        click.echo(_json_dumps(data))
    else:
        click.echo(data)


def _handle_error(ctx: click.Context, error: Exception, exit_code: int = 1) -> NoReturn:
    """Report an error as text or, with --json-errors, as JSON on stderr."""
    json_errors = ctx.obj.get("json_errors", False) if ctx.obj else False

    if isinstance(error, ScriboError):
        if json_errors:
            click.echo(error.to_json(), err=True)
        else:
            click.echo(f"Error: {error.message}", err=True)
    else:
        if json_errors:
            click.echo(format_error_json(ErrorCode.INTERNAL_ERROR, str(error)), err=True)
        else:
            click.echo(f"Error: {error}", err=True)

    sys.exit(exit_code)


def _read_markdown(source: str) -> tuple[str, dict[str, Any]]:
    """Read a markdown file (or stdin for "-") and split off YAML frontmatter.

    Returns:
        Tuple of (body, frontmatter metadata).
    """
    import frontmatter

    if source == "-":
        raw = click.get_text_stream("stdin").read()
    else:
        path = Path(source)
        if not path.is_file():
            raise InputError(f"File not found: {source}", {"path": source}, code=ErrorCode.FILE_NOT_FOUND)
        try:
            raw = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise InputError(f"Cannot read {source}: {e}", {"path": source}) from e

    if not raw.lstrip().startswith("---"):
        return raw, {}

    try:
        post = frontmatter.loads(raw)
    except Exception as e:
        raise InputError(f"Invalid frontmatter in {source}: {e}", {"path": source}, code=ErrorCode.INVALID_INPUT) from e

    return post.content, dict(post.metadata)


def _load_project(project_dir: str | None) -> ProjectContext | None:
    if project_dir is None:
        return None

    from .project import load_project

    return load_project(Path(project_dir))


def _format_block(index: int, block: Block) -> str:
    lines = [f"[{index}] {block.kind.value}: {block.content}"]
    for link in block.links:
        status = "resolved" if link.resolved else "unresolved"
        lines.append(
            f"    [[{link.link_text}]] {link.start_index}+{link.length} -> {link.target_identifier} ({status})"
        )
    return "\n".join(lines)


# ─────────────────────────────────────────────────────────────────────────────
# Main CLI Group
# ─────────────────────────────────────────────────────────────────────────────


@click.group()
@click.version_option(version=SCRIBO_VERSION, prog_name="scribo")
@click.option(
    "--json-errors",
    "json_errors",
    is_flag=True,
    help="Output errors as JSON (for programmatic use)",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    envvar="SCRIBO_QUIET",
    help="Suppress warnings, show only errors and essential output",
)
@click.pass_context
def cli(ctx: click.Context, json_errors: bool, quiet: bool):
    """scribo: render markdown with [[links]] to blocks or HTML.

    \b
    Quick start:
      scribo render notes.md                   # Block view
      scribo render notes.md --format html     # HTML document on stdout
      scribo links notes.md --project ./book   # Resolve [[links]] against a project
      scribo export notes.md -o notes.html     # Write HTML to a file

    \b
    Environment:
      SCRIBO_LOG_LEVEL            DEBUG, INFO, WARNING, ERROR
      SCRIBO_STYLESHEET           CSS file replacing the built-in stylesheet
      SCRIBO_PARTIAL_TITLE_MATCH  0 to only resolve exact titles/aliases/paths
    """
    from ._logging import configure_logging, set_quiet_mode

    configure_logging()

    ctx.ensure_object(dict)
    ctx.obj["json_errors"] = json_errors
    ctx.obj["quiet"] = quiet

    if quiet:
        set_quiet_mode(True)


@cli.command()
@click.argument("source", type=click.Path(allow_dash=True))
@click.option("--format", "fmt", type=click.Choice(["blocks", "html"]), default="blocks", help="Output format")
@click.option("--project", "-p", "project_dir", type=click.Path(), help="Project directory to resolve [[links]] against")
@click.option("--title", help="HTML document title, --format html only (default: frontmatter title)")
@click.option("--json", "as_json", is_flag=True, help="Output blocks as JSON")
@click.pass_context
def render(ctx: click.Context, source: str, fmt: str, project_dir: str | None, title: str | None, as_json: bool):
    """Render a markdown file (or - for stdin).

    \b
    Examples:
      scribo render chapter.md
      scribo render chapter.md --json --project ./book
      cat chapter.md | scribo render - --format html
    """
    from .renderer import MarkdownRenderer

    if title is not None and fmt != "html":
        _handle_error(
            ctx,
            ScriboError("--title only applies to --format html", {"option": "title"}, code=ErrorCode.INVALID_INPUT),
        )

    try:
        markdown, metadata = _read_markdown(source)
        project = _load_project(project_dir)
    except ScriboError as e:
        _handle_error(ctx, e)

    renderer = MarkdownRenderer()

    if fmt == "html":
        click.echo(renderer.render_to_html(markdown, project, title=title or metadata.get("title")), nl=False)
        return

    blocks = renderer.render_to_blocks(markdown, project)
    if as_json:
        output([block.model_dump(mode="json") for block in blocks], as_json=True)
        return

    for index, block in enumerate(blocks):
        click.echo(_format_block(index, block))


@cli.command()
@click.argument("source", type=click.Path(allow_dash=True))
@click.option("--project", "-p", "project_dir", type=click.Path(), help="Project directory to resolve [[links]] against")
@click.option("--unresolved", is_flag=True, help="Only show links that do not resolve")
@click.option("--targets", is_flag=True, help="Only list the unique normalized link targets")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def links(
    ctx: click.Context, source: str, project_dir: str | None, unresolved: bool, targets: bool, as_json: bool
):
    """List the [[links]] of a markdown file.

    \b
    Examples:
      scribo links chapter.md --project ./book
      scribo links chapter.md --targets
      scribo links chapter.md --project ./book --unresolved --json
    """
    from .renderer import MarkdownRenderer

    try:
        markdown, _metadata = _read_markdown(source)
        project = _load_project(project_dir)
    except ScriboError as e:
        _handle_error(ctx, e)

    if targets:
        from .parser.links import extract_links
        from .parser.segmenter import SegmentKind, segment_markdown

        # Fenced code is not scanned, same as the block view
        prose = "\n".join(s.text for s in segment_markdown(markdown) if s.kind is not SegmentKind.CODE_BLOCK)
        unique_targets = extract_links(prose)
        if as_json:
            output(unique_targets, as_json=True)
        else:
            for target in unique_targets:
                click.echo(target)
        return

    rows: list[dict[str, Any]] = []
    for index, block in enumerate(MarkdownRenderer().render_to_blocks(markdown, project)):
        for link in block.links:
            if unresolved and link.resolved:
                continue
            document = project.get(link.target_identifier) if project and link.resolved else None
            rows.append(
                {
                    "block": index,
                    "link": link.link_text,
                    "display": link.display_text,
                    "target": link.target_identifier,
                    "title": document.title if document else None,
                    "resolved": link.resolved,
                }
            )

    if as_json:
        output(rows, as_json=True)
        return

    if not rows:
        click.echo("No links found.")
        return

    for row in rows:
        mark = "ok" if row["resolved"] else "??"
        target = f"{row['target']} ({row['title']})" if row["title"] else row["target"]
        click.echo(f"{mark}  [[{row['link']}]] -> {target}")


@cli.command()
@click.argument("source", type=click.Path(allow_dash=True))
@click.option("--output", "-o", "output_path", type=click.Path(), help="Output file (default: stdout)")
@click.option("--title", help="HTML document title (default: frontmatter title, then file name)")
@click.option("--project", "-p", "project_dir", type=click.Path(), help="Project directory to resolve [[links]] against")
@click.pass_context
def export(ctx: click.Context, source: str, output_path: str | None, title: str | None, project_dir: str | None):
    """Export a markdown file as a standalone HTML document.

    \b
    Examples:
      scribo export chapter.md -o chapter.html
      scribo export chapter.md --title "Chapter One" > chapter.html
    """
    from .renderer import MarkdownRenderer

    try:
        markdown, metadata = _read_markdown(source)
        project = _load_project(project_dir)
    except ScriboError as e:
        _handle_error(ctx, e)

    if not title:
        title = metadata.get("title") or (Path(source).stem if source != "-" else None)

    html = MarkdownRenderer().render_to_html(markdown, project, title=title)

    if output_path is None:
        click.echo(html, nl=False)
        return

    try:
        Path(output_path).write_text(html, encoding="utf-8")
    except OSError as e:
        _handle_error(
            ctx,
            ScriboError(f"Cannot write {output_path}: {e}", {"path": output_path}, code=ErrorCode.OUTPUT_UNWRITABLE),
        )

    if not ctx.obj.get("quiet"):
        click.echo(f"Wrote {output_path}", err=True)


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
