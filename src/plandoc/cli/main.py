"""CLI entry point for plandoc.

Invoked as::

    plandoc [--cwd DIR] COMMAND [ARGS]...

or, during development::

    python -m plandoc

Every command prints a single JSON document on stdout.  Lookup misses are
reported as ``{"error": ...}`` with exit code 0.  A file that exists but
cannot be read or written is reported the same way with exit code 1.
Invalid invocation exits non-zero with a usage message on stderr.

Commands
--------
frontmatter     get, set, merge and validate document frontmatter
verify          check a plan's artifacts and key links
roadmap         look up or analyze ROADMAP.md phases
phase           check off a roadmap phase
requirements    check off REQUIREMENTS.md entries
state           read and mutate STATE.md
resolve-model   show the model tier an agent runs on
version         show version information
"""
from __future__ import annotations

import json
import logging
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any, NoReturn

import click
from rich.console import Console
from rich.table import Table

from plandoc.errors import DocumentAccessError, InvalidInputError

console = Console()

_TEXT_FILE = click.Path(exists=True, dir_okay=False, path_type=Path)


def _emit(payload: Any) -> None:
    """Print ``payload`` as indented JSON on stdout."""
    click.echo(json.dumps(payload, indent=2, ensure_ascii=False))


def _access_failure(exc: DocumentAccessError) -> NoReturn:
    """Print the error payload for an unreadable or unwritable file and exit 1."""
    _emit({"error": f"Cannot {exc.action} file", "path": str(exc.path), "reason": exc.reason})
    raise click.exceptions.Exit(1)


def _run(command: Callable[..., dict[str, Any]], *args: Any, **kwargs: Any) -> None:
    """Run a command function, turning invalid input into a usage error."""
    try:
        payload = command(*args, **kwargs)
    except InvalidInputError as exc:
        raise click.UsageError(exc.message) from exc
    except DocumentAccessError as exc:
        _access_failure(exc)
    _emit(payload)


def _text_or_file(text: str | None, path: Path | None) -> str | None:
    """Return ``text``, or the stripped contents of ``path`` when given."""
    if path is None:
        return text
    from plandoc.documents import read_document

    try:
        return read_document(path).strip()
    except DocumentAccessError as exc:
        _access_failure(exc)


def _parse_field_args(args: list[str]) -> list[tuple[str, str]]:
    """Turn ``--Label value`` / ``--Label=value`` tokens into pairs."""
    pairs: list[tuple[str, str]] = []
    tokens = iter(args)
    for token in tokens:
        if not token.startswith("--") or len(token) == 2:
            raise click.UsageError(f"Expected --Field value, got {token!r}")
        label = token[2:]
        if "=" in label:
            label, value = label.split("=", 1)
        else:
            value = next(tokens, None)
            if value is None:
                raise click.UsageError(f"Missing value for --{label}")
        pairs.append((label, value))
    return pairs


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="plandoc")
@click.option(
    "--cwd",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
    help="Project root holding the .planning directory",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log debug output to stderr")
@click.pass_context
def cli(ctx: click.Context, cwd: Path, verbose: bool) -> None:
    """Round-trip editing of planning documents: frontmatter, fields, sections, phases."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            stream=sys.stderr,
            format="%(levelname)s %(name)s: %(message)s",
        )
    ctx.obj = cwd.resolve()


# ---------------------------------------------------------------------------
# version command
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from plandoc import __version__

    table = Table(show_header=False, box=None)
    table.add_row("[bold]plandoc[/bold]", f"v{__version__}")
    table.add_row("Python", f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}")
    table.add_row("Platform", sys.platform)
    console.print(table)


# ---------------------------------------------------------------------------
# frontmatter commands
# ---------------------------------------------------------------------------


@cli.group(name="frontmatter")
def frontmatter_group() -> None:
    """Read and edit the frontmatter block of a document."""


@frontmatter_group.command(name="get")
@click.argument("path", type=click.Path(path_type=Path))
@click.option("--field", default=None, help="Return only this top-level field")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "yaml"], case_sensitive=False),
    default="json",
    help="Output format",
)
@click.pass_obj
def frontmatter_get_command(root: Path, path: Path, field: str | None, output_format: str) -> None:
    """Print the frontmatter of PATH."""
    from plandoc.commands import frontmatter_get
    from plandoc.documents import resolve_path

    try:
        payload = frontmatter_get(resolve_path(root, path), field)
    except DocumentAccessError as exc:
        _access_failure(exc)
    if output_format.lower() == "yaml" and "error" not in payload:
        import yaml

        click.echo(yaml.safe_dump(payload, sort_keys=False, allow_unicode=True), nl=False)
        return
    _emit(payload)


@frontmatter_group.command(name="set")
@click.argument("path", type=click.Path(path_type=Path))
@click.option("--field", required=True, help="Top-level field to set")
@click.option("--value", required=True, help="New value; JSON is decoded when valid")
@click.pass_obj
def frontmatter_set_command(root: Path, path: Path, field: str, value: str) -> None:
    """Set one frontmatter field of PATH."""
    from plandoc.commands import frontmatter_set
    from plandoc.documents import resolve_path

    _run(frontmatter_set, resolve_path(root, path), field, value)


@frontmatter_group.command(name="merge")
@click.argument("path", type=click.Path(path_type=Path))
@click.option("--data", required=True, help="JSON object merged into the frontmatter")
@click.pass_obj
def frontmatter_merge_command(root: Path, path: Path, data: str) -> None:
    """Shallow-merge a JSON object into the frontmatter of PATH."""
    from plandoc.commands import frontmatter_merge
    from plandoc.documents import resolve_path

    _run(frontmatter_merge, resolve_path(root, path), data)


@frontmatter_group.command(name="validate")
@click.argument("path", type=click.Path(path_type=Path))
@click.option("--schema", required=True, help="Schema name: plan, summary or verification")
@click.pass_obj
def frontmatter_validate_command(root: Path, path: Path, schema: str) -> None:
    """Check the frontmatter of PATH for a schema's required fields."""
    from plandoc.commands import frontmatter_validate
    from plandoc.documents import resolve_path

    _run(frontmatter_validate, resolve_path(root, path), schema)


# ---------------------------------------------------------------------------
# verify commands
# ---------------------------------------------------------------------------


@cli.group(name="verify")
def verify_group() -> None:
    """Check a plan's must-haves against the working tree."""


@verify_group.command(name="artifacts")
@click.argument("plan", type=click.Path(path_type=Path))
@click.pass_obj
def verify_artifacts_command(root: Path, plan: Path) -> None:
    """Check the must_haves.artifacts of PLAN."""
    from plandoc.commands import verify_artifacts

    _run(verify_artifacts, root, plan)


@verify_group.command(name="key-links")
@click.argument("plan", type=click.Path(path_type=Path))
@click.pass_obj
def verify_key_links_command(root: Path, plan: Path) -> None:
    """Check the must_haves.key_links of PLAN."""
    from plandoc.commands import verify_key_links

    _run(verify_key_links, root, plan)


# ---------------------------------------------------------------------------
# roadmap / phase / requirements commands
# ---------------------------------------------------------------------------


@cli.group(name="roadmap")
def roadmap_group() -> None:
    """Query ROADMAP.md."""


@roadmap_group.command(name="get-phase")
@click.argument("number")
@click.pass_obj
def roadmap_get_phase_command(root: Path, number: str) -> None:
    """Print the detail section of phase NUMBER."""
    from plandoc.commands import roadmap_get_phase

    _run(roadmap_get_phase, root, number)


@roadmap_group.command(name="analyze")
@click.pass_obj
def roadmap_analyze_command(root: Path) -> None:
    """Summarize every phase with its progress on disk."""
    from plandoc.commands import roadmap_analyze

    _run(roadmap_analyze, root)


@cli.group(name="phase")
def phase_group() -> None:
    """Phase lifecycle operations."""


@phase_group.command(name="complete")
@click.argument("number")
@click.pass_obj
def phase_complete_command(root: Path, number: str) -> None:
    """Check off phase NUMBER in the roadmap checklist."""
    from plandoc.commands import phase_complete

    _run(phase_complete, root, number)


@cli.group(name="requirements")
def requirements_group() -> None:
    """Update REQUIREMENTS.md."""


@requirements_group.command(name="mark-complete")
@click.argument("ids", nargs=-1, required=True)
@click.pass_obj
def requirements_mark_complete_command(root: Path, ids: tuple[str, ...]) -> None:
    """Mark requirement IDS complete (comma or space separated)."""
    from plandoc.commands import mark_complete

    _run(mark_complete, root, ids)


# ---------------------------------------------------------------------------
# state commands
# ---------------------------------------------------------------------------


@cli.group(name="state")
def state_group() -> None:
    """Read and mutate STATE.md."""


@state_group.command(name="load")
@click.pass_obj
def state_load_command(root: Path) -> None:
    """Print the project config and raw STATE.md."""
    from plandoc.commands import state_load

    _run(state_load, root)


@state_group.command(name="get")
@click.argument("field", required=False)
@click.pass_obj
def state_get_command(root: Path, field: str | None) -> None:
    """Print STATE.md, or one FIELD or section of it."""
    from plandoc.commands import state_get

    _run(state_get, root, field)


@state_group.command(name="json")
@click.pass_obj
def state_json_command(root: Path) -> None:
    """Print the machine-readable STATE.md frontmatter."""
    from plandoc.commands import state_json

    _run(state_json, root)


@state_group.command(name="snapshot")
@click.pass_obj
def state_snapshot_command(root: Path) -> None:
    """Print the structured content of STATE.md."""
    from plandoc.commands import state_snapshot

    _run(state_snapshot, root)


@state_group.command(name="update")
@click.argument("field")
@click.argument("value")
@click.pass_obj
def state_update_command(root: Path, field: str, value: str) -> None:
    """Set FIELD of STATE.md to VALUE."""
    from plandoc.commands import state_update

    _run(state_update, root, field, value)


state_group.add_command(state_update_command, name="set")


@state_group.command(
    name="patch",
    context_settings={"ignore_unknown_options": True, "allow_extra_args": True},
)
@click.pass_context
def state_patch_command(ctx: click.Context) -> None:
    """Set several fields: plandoc state patch --Status Done --"Current Plan" 2."""
    from plandoc.commands import state_patch

    pairs = _parse_field_args(list(ctx.args))
    if not pairs:
        raise click.UsageError("No fields given; use --Field value")
    _run(state_patch, ctx.obj, pairs)


@state_group.command(name="advance-plan")
@click.pass_obj
def state_advance_plan_command(root: Path) -> None:
    """Move to the next plan of the current phase."""
    from plandoc.commands import state_advance_plan

    _run(state_advance_plan, root)


@state_group.command(name="update-progress")
@click.pass_obj
def state_update_progress_command(root: Path) -> None:
    """Recompute the Progress bar from plans and summaries on disk."""
    from plandoc.commands import state_update_progress

    _run(state_update_progress, root)


@state_group.command(name="record-session")
@click.option("--stopped-at", default=None, help="Where work stopped")
@click.option("--resume-file", default=None, help="File to resume from")
@click.pass_obj
def state_record_session_command(root: Path, stopped_at: str | None, resume_file: str | None) -> None:
    """Stamp the session continuity fields."""
    from plandoc.commands import state_record_session

    _run(state_record_session, root, stopped_at, resume_file)


@state_group.command(name="add-decision")
@click.option("--phase", default=None, help="Phase the decision belongs to")
@click.option("--summary", default=None, help="Decision summary")
@click.option("--summary-file", type=_TEXT_FILE, default=None, help="Read the summary from a file")
@click.option("--rationale", default=None, help="Why the decision was made")
@click.option("--rationale-file", type=_TEXT_FILE, default=None, help="Read the rationale from a file")
@click.pass_obj
def state_add_decision_command(
    root: Path,
    phase: str | None,
    summary: str | None,
    summary_file: Path | None,
    rationale: str | None,
    rationale_file: Path | None,
) -> None:
    """Append a decision to the Decisions section."""
    from plandoc.commands import state_add_decision

    _run(
        state_add_decision,
        root,
        phase,
        _text_or_file(summary, summary_file),
        _text_or_file(rationale, rationale_file),
    )


@state_group.command(name="add-blocker")
@click.option("--text", default=None, help="Blocker description")
@click.option("--text-file", type=_TEXT_FILE, default=None, help="Read the description from a file")
@click.pass_obj
def state_add_blocker_command(root: Path, text: str | None, text_file: Path | None) -> None:
    """Append a blocker to the Blockers section."""
    from plandoc.commands import state_add_blocker

    _run(state_add_blocker, root, _text_or_file(text, text_file))


@state_group.command(name="resolve-blocker")
@click.option("--text", default=None, help="Text identifying the blocker to remove")
@click.pass_obj
def state_resolve_blocker_command(root: Path, text: str | None) -> None:
    """Remove blockers containing TEXT."""
    from plandoc.commands import state_resolve_blocker

    _run(state_resolve_blocker, root, text)


@state_group.command(name="record-metric")
@click.option("--phase", default=None, help="Phase number")
@click.option("--plan", default=None, help="Plan number")
@click.option("--duration", default=None, help="Execution time, e.g. 5min")
@click.option("--tasks", default=None, help="Number of tasks")
@click.option("--files", default=None, help="Number of files touched")
@click.pass_obj
def state_record_metric_command(
    root: Path,
    phase: str | None,
    plan: str | None,
    duration: str | None,
    tasks: str | None,
    files: str | None,
) -> None:
    """Append a row to the Performance Metrics table."""
    from plandoc.commands import state_record_metric

    _run(state_record_metric, root, phase, plan, duration, tasks, files)


# ---------------------------------------------------------------------------
# resolve-model command
# ---------------------------------------------------------------------------


@cli.command(name="resolve-model")
@click.argument("agent")
@click.pass_obj
def resolve_model_command(root: Path, agent: str) -> None:
    """Show the model tier AGENT runs on under the project config."""
    from plandoc.commands import resolve_model_command as resolve

    _run(resolve, root, agent)


if __name__ == "__main__":
    cli()
