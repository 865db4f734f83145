"""DevLog CLI - sprint journal and report generator."""

import json
import logging
import sys
from datetime import date

import click

from .config import load_config
from .core.errors import DevlogError
from .core.sprints import sprint_label
from .core.timeline import TimelineDay, format_day, summarize_by_date
from .workflows import Devlog, open_devlog


def _open() -> Devlog:
    devlog = open_devlog(load_config())
    click.get_current_context().call_on_close(devlog.close)
    return devlog


def _fail(error: Exception) -> None:
    click.echo(f"Error: {error}", err=True)
    sys.exit(1)


def _parse_day(value: str | None) -> date:
    if not value:
        return date.today()
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise click.BadParameter(f"{value!r} is not a YYYY-MM-DD date")


@click.group()
@click.version_option()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool):
    """DevLog - sprint journal and report generator."""
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.DEBUG if debug else logging.WARNING,
    )


# ============== Categories ==============


@main.group()
def category():
    """Manage entry categories."""
    pass


@category.command("list")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def category_list(as_json: bool):
    """List categories."""
    categories = _open().categories.list_categories()

    if as_json:
        click.echo(
            json.dumps(
                [
                    {"id": c.id, "name": c.name, "created_at": c.created_at.isoformat()}
                    for c in categories
                ],
                indent=2,
            )
        )
        return

    if not categories:
        click.echo("No categories.")
        return
    for c in categories:
        click.echo(f"{c.name:20} {c.id}")


@category.command("add")
@click.argument("name")
def category_add(name: str):
    """Create a category."""
    try:
        created = _open().categories.create_category(name)
    except DevlogError as e:
        _fail(e)
    click.echo(f"Created category {created.name} ({created.id})")


@category.command("rename")
@click.argument("category_ref")
@click.argument("name")
def category_rename(category_ref: str, name: str):
    """Rename a category (by id or current name)."""
    devlog = _open()
    try:
        category_id = devlog.resolve_category(category_ref)
        renamed = devlog.categories.rename_category(category_id, name)
    except DevlogError as e:
        _fail(e)
    click.echo(f"Renamed {renamed.id} to {renamed.name}")


@category.command("delete")
@click.argument("category_ref")
@click.option("--replacement", "-r", default=None,
              help="Category (id or name) that takes over this category's entries")
def category_delete(category_ref: str, replacement: str | None):
    """Delete a category, moving its entries to a replacement."""
    devlog = _open()
    try:
        category_id = devlog.resolve_category(category_ref)
        replacement_id = devlog.resolve_category(replacement) if replacement else None
        devlog.categories.delete_category(category_id, replacement_id)
    except DevlogError as e:
        _fail(e)
    click.echo(f"Deleted category {category_id}")


# ============== Sprints ==============


@main.group()
def sprint():
    """Manage sprints."""
    pass


@sprint.command("list")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def sprint_list(as_json: bool):
    """List sprints, newest first. The active sprint is marked with '*'."""
    devlog = _open()
    sprints = devlog.sprints.list_sprints()
    active = devlog.sprints.active_sprint()

    if as_json:
        click.echo(
            json.dumps(
                [
                    {
                        "id": s.id,
                        "code": s.code,
                        "name": s.name,
                        "start_date": s.start_date.isoformat(),
                        "end_date": s.end_date.isoformat() if s.end_date else None,
                        "created_at": s.created_at.isoformat(),
                        "active": active is not None and s.id == active.id,
                    }
                    for s in sprints
                ],
                indent=2,
            )
        )
        return

    if not sprints:
        click.echo("No sprints yet.")
        return
    for s in sprints:
        marker = "*" if active and s.id == active.id else " "
        click.echo(f"{marker} {sprint_label(s):30} {s.window()}")


@sprint.command("new")
@click.option("--name", "-n", default=None, help="Display name (defaults to the code)")
@click.option("--start", "-s", "start_date", default=None,
              help="Start date (YYYY-MM-DD), defaults to today")
@click.option("--days", "duration_days", type=int, default=None,
              help="Length in days (7 or 14); omit for an open-ended sprint")
def sprint_new(name: str | None, start_date: str | None, duration_days: int | None):
    """Start a new sprint."""
    config = load_config()
    devlog = open_devlog(config)
    if duration_days is None:
        duration_days = config.default_duration_days
    try:
        created = devlog.sprints.create_sprint(
            start_date or date.today().isoformat(),
            name=name,
            duration_days=duration_days,
        )
    except DevlogError as e:
        _fail(e)
    click.echo(f"Created {sprint_label(created)} ({created.window()})")


@sprint.command("rename")
@click.argument("sprint_ref")
@click.argument("name")
def sprint_rename(sprint_ref: str, name: str):
    """Rename a sprint (by id, code or number). The code never changes."""
    devlog = _open()
    try:
        target = devlog.resolve_sprint(sprint_ref)
        renamed = devlog.sprints.rename_sprint(target.id, name)
    except DevlogError as e:
        _fail(e)
    click.echo(f"Renamed to {sprint_label(renamed)}")


@sprint.command("delete")
@click.argument("sprint_ref")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
def sprint_delete(sprint_ref: str, yes: bool):
    """Delete a sprint and all of its entries."""
    devlog = _open()
    try:
        target = devlog.resolve_sprint(sprint_ref)
        count = len(devlog.entries.list_entries_for_sprint(target.id))
        if not yes and not click.confirm(
            f"Delete {sprint_label(target)} and its {count} entries?"
        ):
            return
        devlog.sprints.delete_sprint(target.id)
    except DevlogError as e:
        _fail(e)
    click.echo(f"Deleted {sprint_label(target)}")


@sprint.command("active")
@click.option("--date", "-d", "target_date", default=None,
              help="Resolve as of this date (YYYY-MM-DD), defaults to today")
def sprint_active(target_date: str | None):
    """Show the sprint currently in effect."""
    today = _parse_day(target_date)
    active = _open().sprints.active_sprint(today)
    if active is None:
        click.echo("No sprints yet.")
        return
    click.echo(f"{sprint_label(active)} ({active.window()})")


# ============== Entries ==============


@main.command()
@click.argument("title")
@click.option("--details", default=None, help="Optional details")
@click.option("--category", "-c", "category_ref", default=None,
              help="Category id or name (defaults to the first category)")
@click.option("--date", "-d", "entry_date", default=None,
              help="Entry date (YYYY-MM-DD), defaults to today")
@click.option("--sprint", "sprint_ref", default=None,
              help="Sprint id, code or number (defaults to the active sprint)")
def add(title: str, details: str | None, category_ref: str | None,
        entry_date: str | None, sprint_ref: str | None):
    """Log a work item."""
    devlog = _open()
    try:
        target = devlog.resolve_sprint(sprint_ref)
        category_id = devlog.resolve_category(category_ref)
        entry = devlog.entries.add_entry(
            target.id,
            entry_date or date.today().isoformat(),
            category_id,
            title,
            details,
        )
    except DevlogError as e:
        _fail(e)
    click.echo(f"✓ Added to {sprint_label(target)} on {entry.date.isoformat()}")


@main.command()
@click.option("--sprint", "sprint_ref", default=None, help="Sprint id, code or number")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def entries(sprint_ref: str | None, as_json: bool):
    """List raw entries of a sprint."""
    devlog = _open()
    try:
        target = devlog.resolve_sprint(sprint_ref)
    except DevlogError as e:
        _fail(e)
    items = sorted(
        devlog.entries.list_entries_for_sprint(target.id),
        key=lambda e: (e.date, e.created_at),
    )

    if as_json:
        click.echo(
            json.dumps(
                [
                    {
                        "id": e.id,
                        "date": e.date.isoformat(),
                        "category_id": e.category_id,
                        "title": e.title,
                        "details": e.details,
                        "created_at": e.created_at.isoformat(),
                    }
                    for e in items
                ],
                indent=2,
            )
        )
        return

    if not items:
        click.echo("No entries in this sprint yet.")
        return
    for e in items:
        click.echo(f"{e.date.isoformat()}  [{e.category_id}] {e.display()}")


# ============== Views ==============


def _timeline_json(timeline: list[TimelineDay]) -> str:
    return json.dumps(
        [
            {
                "date": day.date.isoformat(),
                "categories": [
                    {
                        "category_id": group.category_id,
                        "category_name": group.category_name,
                        "items": group.items,
                    }
                    for group in day.categories
                ],
            }
            for day in timeline
        ],
        indent=2,
    )


@main.command()
@click.option("--sprint", "sprint_ref", default=None, help="Sprint id, code or number")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def timeline(sprint_ref: str | None, as_json: bool):
    """Show a sprint's entries grouped by day and category."""
    devlog = _open()
    try:
        target = devlog.resolve_sprint(sprint_ref)
        days = devlog.reports.build_timeline(target.id)
    except DevlogError as e:
        _fail(e)

    if as_json:
        click.echo(_timeline_json(days))
        return

    if not days:
        click.echo("No entries in this sprint yet.")
        return
    for day in days:
        click.echo(day.date.isoformat())
        for group in day.categories:
            click.echo(f"  {group.category_name}")
            for item in group.items:
                click.echo(f"  - {item}")
        click.echo()


@main.command()
@click.option("--sprint", "sprint_ref", default=None, help="Sprint id, code or number")
def summary(sprint_ref: str | None):
    """Item counts per day for a sprint."""
    devlog = _open()
    try:
        target = devlog.resolve_sprint(sprint_ref)
    except DevlogError as e:
        _fail(e)
    items = devlog.entries.list_entries_for_sprint(target.id)

    click.echo(f"Sprint: {sprint_label(target)}")
    click.echo(f"Window: {target.window()}")
    click.echo(f"Total items: {len(items)}\n")
    click.echo("Dates:")
    counts = summarize_by_date(items)
    if not counts:
        click.echo("- No entries yet")
    for day, count in counts:
        click.echo(f"- {day.isoformat()}: {count} items")


@main.command()
@click.argument("target_date")
@click.option("--sprint", "sprint_ref", default=None, help="Sprint id, code or number")
def day(target_date: str, sprint_ref: str | None):
    """Show one day's items, ready to paste into a stand-up."""
    target_day = _parse_day(target_date)
    devlog = _open()
    try:
        target = devlog.resolve_sprint(sprint_ref)
        days = devlog.reports.build_timeline(target.id)
    except DevlogError as e:
        _fail(e)

    match = next((d for d in days if d.date == target_day), None)
    if match is None:
        click.echo(f"{target_day.isoformat()}\n\nNo entries for this date.")
        return
    click.echo(format_day(match), nl=False)


@main.command()
@click.option("--sprint", "sprint_ref", default=None, help="Sprint id, code or number")
@click.option("--from", "from_date", default=None, help="First date to include (YYYY-MM-DD)")
@click.option("--to", "to_date", default=None, help="Last date to include (YYYY-MM-DD)")
@click.option("--category", "-c", "category_refs", multiple=True,
              help="Only include this category (id or name); repeatable")
@click.option("--print", "print_markdown", is_flag=True, help="Also print the markdown")
def report(sprint_ref: str | None, from_date: str | None, to_date: str | None,
           category_refs: tuple[str, ...], print_markdown: bool):
    """Generate a markdown report and save it to the reports directory."""
    devlog = _open()
    try:
        target = devlog.resolve_sprint(sprint_ref)
        categories = [devlog.resolve_category(ref) for ref in category_refs] or None
        output = devlog.reports.export_report(target.id, from_date, to_date, categories)
    except DevlogError as e:
        _fail(e)

    if print_markdown:
        click.echo(output.markdown)
    click.echo(f"Generated report for {sprint_label(target)}")
    click.echo(f"Included items: {output.total_items}")
    click.echo(f"File: {output.file_path}")


@main.command()
def path():
    """Print the database path."""
    click.echo(str(load_config().db_file))


if __name__ == "__main__":
    main()
