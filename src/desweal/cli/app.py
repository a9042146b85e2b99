from __future__ import annotations

"""
DESWEAL CLI Wrapper (Typer + Rich)

Local-only CLI for the DESWEAL ledger: record transactions, split income
across distribution schemes, and track savings goals.

All paths are resolved from a single workspace root:
  --data-dir / DESWEAL_DATA env var / current working directory
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import typer
from rich.logging import RichHandler

from desweal.workspace import Workspace

HELP_WRITE = "Persist changes (default: dry-run)"
HELP_TXID = "Transaction ID or unique prefix (min 8 chars)"
HELP_START = "Start date, inclusive (YYYY-MM-DD)"
HELP_END = "End date, inclusive (YYYY-MM-DD)"
DATE_FORMATS = ["%Y-%m-%d"]

APP_HELP = "DESWEAL ledger CLI (local-only)"

app = typer.Typer(no_args_is_help=True, add_completion=False, help=APP_HELP)


def _configure_logging(verbose: bool) -> None:
    from desweal.cli.command.util import console

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


@app.callback()
def main(
    ctx: typer.Context,
    data_dir: Optional[Path] = typer.Option(
        None,
        "--data-dir",
        envvar="DESWEAL_DATA",
        help="Workspace root directory (default: current directory)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log ledger operations"),
):
    """DESWEAL CLI: all paths resolved from a single workspace root."""
    _configure_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["workspace"] = Workspace.resolve(data_dir)


def _ws(ctx: typer.Context) -> Workspace:
    return ctx.obj["workspace"]


def _day(value: Optional[datetime]):
    return value.date() if value else None


@app.command()
def init(ctx: typer.Context):
    """Initialize a new workspace with required directories and starter config.

    Safe to run on an existing workspace; skips anything that already exists.
    """
    from desweal.cli.command import init as cmd_init

    code = cmd_init.run(workspace=_ws(ctx))
    raise typer.Exit(code=code)


@app.command()
def add(
    ctx: typer.Context,
    amount: str = typer.Option(..., "--amount", "-m", help="Signed amount: positive income, negative expense"),
    category: str = typer.Option(..., "--category", "-c", help="income, expense, savings, investment or debt"),
    description: str = typer.Option("", "--description", "-d", help="Free-text description"),
    on: Optional[datetime] = typer.Option(None, "--date", formats=DATE_FORMATS, help="Transaction date (default: now)"),
    recurring: bool = typer.Option(False, "--recurring", help="Mark as recurring"),
    goal: Optional[str] = typer.Option(None, "--goal", "-g", help="Savings goal ID to tag"),
    attachment: Optional[str] = typer.Option(None, "--attachment", help="Receipt or document reference"),
    write: bool = typer.Option(False, "--write", help=HELP_WRITE),
):
    """Record a transaction.

    Examples:
      desweal add --amount 2500 --category income --description "Salary" --write
      desweal add -m -84.20 -c expense -d "Groceries" --date 2026-03-02 --write
      desweal add -m 200 -c savings --goal emergency-fund --recurring --write

    Safety: dry-run by default. Use --write to persist changes.
    """
    from desweal.cli.command import add as cmd_add

    code = cmd_add.run(
        amount=amount,
        category=category,
        description=description,
        timestamp=on,
        recurring=recurring,
        goal=goal,
        attachment=attachment,
        workspace=_ws(ctx),
        write=write,
    )
    raise typer.Exit(code=code)


@app.command()
def amend(
    ctx: typer.Context,
    txid: str = typer.Option(..., "--txid", "-t", help=HELP_TXID),
    amount: Optional[str] = typer.Option(None, "--amount", "-m", help="Corrected amount"),
    category: Optional[str] = typer.Option(None, "--category", "-c", help="Corrected category"),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="Corrected description"),
    recurring: Optional[bool] = typer.Option(None, "--recurring/--one-off", help="Change recurring flag"),
    goal: Optional[str] = typer.Option(None, "--goal", "-g", help="Savings goal ID to tag"),
    attachment: Optional[str] = typer.Option(None, "--attachment", help="Receipt or document reference"),
    write: bool = typer.Option(False, "--write", help=HELP_WRITE),
):
    """Correct a transaction by recording a new version of it.

    Examples:
      desweal amend --txid a1b2c3d4 --amount -90.00 --write
      desweal amend -t a1b2c3d4 --category debt --write

    Safety: dry-run by default. Use --write to persist changes.
    """
    from desweal.cli.command import amend as cmd_amend

    code = cmd_amend.run(
        txid=txid,
        amount=amount,
        category=category,
        description=description,
        recurring=recurring,
        goal=goal,
        attachment=attachment,
        workspace=_ws(ctx),
        write=write,
    )
    raise typer.Exit(code=code)


@app.command()
def delete(
    ctx: typer.Context,
    txid: str = typer.Option(..., "--txid", "-t", help=HELP_TXID),
    write: bool = typer.Option(False, "--write", help=HELP_WRITE),
):
    """Soft-delete a transaction. It stays in history but leaves all totals.

    Safety: dry-run by default. Use --write to persist changes.
    """
    from desweal.cli.command import delete as cmd_delete

    code = cmd_delete.run(txid=txid, workspace=_ws(ctx), write=write)
    raise typer.Exit(code=code)


@app.command()
def transactions(
    ctx: typer.Context,
    category: Optional[str] = typer.Option(None, "--category", "-c", help="Only this category"),
    start: Optional[datetime] = typer.Option(None, "--start", formats=DATE_FORMATS, help=HELP_START),
    end: Optional[datetime] = typer.Option(None, "--end", formats=DATE_FORMATS, help=HELP_END),
    recurring: Optional[bool] = typer.Option(None, "--recurring/--one-off", help="Only recurring or only one-off"),
    goal: Optional[str] = typer.Option(None, "--goal", "-g", help="Only transactions tagged to this goal"),
    include_deleted: bool = typer.Option(False, "--include-deleted", help="Show soft-deleted transactions"),
    limit: Optional[int] = typer.Option(None, "--limit", "-n", min=1, help="Max number of rows to show"),
):
    """List transactions, newest first.

    Examples:
      desweal transactions --category expense --start 2026-01-01
      desweal transactions --recurring --limit 20
    """
    from desweal.cli.command import transactions as cmd_transactions

    code = cmd_transactions.run(
        workspace=_ws(ctx),
        category=category,
        start=_day(start),
        end=_day(end),
        recurring=recurring,
        goal=goal,
        include_deleted=include_deleted,
        limit=limit,
    )
    raise typer.Exit(code=code)


@app.command()
def totals(
    ctx: typer.Context,
    start: Optional[datetime] = typer.Option(None, "--start", formats=DATE_FORMATS, help=HELP_START),
    end: Optional[datetime] = typer.Option(None, "--end", formats=DATE_FORMATS, help=HELP_END),
):
    """Show summed amounts per category."""
    from desweal.cli.command import totals as cmd_totals

    code = cmd_totals.run(workspace=_ws(ctx), start=_day(start), end=_day(end))
    raise typer.Exit(code=code)


@app.command()
def schemes(ctx: typer.Context):
    """List preset and custom distribution schemes."""
    from desweal.cli.command import schemes as cmd_schemes

    code = cmd_schemes.run(workspace=_ws(ctx))
    raise typer.Exit(code=code)


@app.command()
def scheme(
    ctx: typer.Context,
    add: Optional[str] = typer.Option(None, "--add", help="Name of a custom scheme to add"),
    remove: Optional[str] = typer.Option(None, "--remove", help="Name of a custom scheme to remove"),
    bucket: Optional[List[str]] = typer.Option(None, "--bucket", "-b", help="Bucket as LABEL=PERCENT (repeatable)"),
    description: Optional[str] = typer.Option(None, "--description", help="Description for a new scheme"),
    write: bool = typer.Option(False, "--write", help=HELP_WRITE),
):
    """Manage custom distribution schemes.

    Examples:
      desweal scheme --add saver -b needs=50 -b savings=40 -b wants=10 --write
      desweal scheme --remove saver --write

    Safety: dry-run by default. Use --write to persist changes.
    """
    from desweal.cli.command import scheme as cmd_scheme

    code = cmd_scheme.run(
        add=add,
        remove=remove,
        buckets=bucket,
        description=description,
        workspace=_ws(ctx),
        write=write,
    )
    raise typer.Exit(code=code)


@app.command()
def allocate(
    ctx: typer.Context,
    scheme: str = typer.Option("50/30/20", "--scheme", "-s", help="Preset or custom scheme name"),
    income: Optional[str] = typer.Option(None, "--income", "-i", help="Income to split (default: ledger income for the period)"),
    start: Optional[datetime] = typer.Option(None, "--start", formats=DATE_FORMATS, help=HELP_START),
    end: Optional[datetime] = typer.Option(None, "--end", formats=DATE_FORMATS, help=HELP_END),
):
    """Split income across the buckets of a distribution scheme.

    Examples:
      desweal allocate --income 4200
      desweal allocate --scheme 70/20/10 --start 2026-03-01 --end 2026-03-31
    """
    from desweal.cli.command import allocate as cmd_allocate

    code = cmd_allocate.run(
        scheme=scheme,
        income=income,
        start=_day(start),
        end=_day(end),
        workspace=_ws(ctx),
    )
    raise typer.Exit(code=code)


@app.command()
def goal(
    ctx: typer.Context,
    add: Optional[str] = typer.Option(None, "--add", help="ID of a goal to add"),
    archive: Optional[str] = typer.Option(None, "--archive", help="ID of a goal to archive"),
    name: Optional[str] = typer.Option(None, "--name", help="Display name for a new goal"),
    target: Optional[str] = typer.Option(None, "--target", help="Target amount for a new goal"),
    start: Optional[datetime] = typer.Option(None, "--start", formats=DATE_FORMATS, help="Start of the goal window"),
    target_date: Optional[datetime] = typer.Option(None, "--target-date", formats=DATE_FORMATS, help="End of the goal window"),
    write: bool = typer.Option(False, "--write", help=HELP_WRITE),
):
    """Manage savings goals: add or archive.

    Examples:
      desweal goal --add emergency-fund --target 5000 --name "Emergency fund" --write
      desweal goal --archive emergency-fund --write

    Safety: dry-run by default. Use --write to persist changes.
    """
    from desweal.cli.command import goal as cmd_goal

    code = cmd_goal.run(
        add=add,
        archive=archive,
        name=name,
        target=target,
        start=_day(start),
        target_date=_day(target_date),
        workspace=_ws(ctx),
        write=write,
    )
    raise typer.Exit(code=code)


@app.command()
def goals(
    ctx: typer.Context,
    as_of: Optional[datetime] = typer.Option(None, "--as-of", formats=DATE_FORMATS, help="Projection reference date (default: today)"),
    include_archived: bool = typer.Option(False, "--include-archived", help="Show archived goals"),
    write: bool = typer.Option(False, "--write", help="Save goals that reached their target as completed"),
):
    """Show savings goal progress and projected completion dates."""
    from desweal.cli.command import goals as cmd_goals

    code = cmd_goals.run(
        workspace=_ws(ctx),
        as_of=_day(as_of),
        include_archived=include_archived,
        write=write,
    )
    raise typer.Exit(code=code)


if __name__ == "__main__":
    app()  # pragma: no cover
