from __future__ import annotations

import asyncio

import click

from pharmacy_worklist import __version__


@click.group()
@click.version_option(version=__version__, prog_name="pharmacy-worklist")
def main() -> None:
    """Pharmacy worklist: live dispensing queue with push reconciliation."""


@main.command()
def start() -> None:
    """Start the pharmacy worklist MCP server."""
    from pharmacy_worklist.server import mcp

    click.echo("Starting pharmacy worklist server...")
    mcp.run()


@main.command()
@click.option(
    "--api-base",
    default=None,
    help="Backend base URL (defaults to PHARMACY_WORKLIST_API_BASE).",
)
@click.option("--search", default="", help="Only show patients whose name contains this.")
def snapshot(api_base: str | None, search: str) -> None:
    """Load the worklist once and print it."""
    from dataclasses import replace

    from pharmacy_worklist.clients.backend import BackendClient
    from pharmacy_worklist.exceptions import WorklistLoadError
    from pharmacy_worklist.services.reconciler import EventReconciler
    from pharmacy_worklist.services.state_store import StateStore
    from pharmacy_worklist.services.view_projector import project
    from pharmacy_worklist.utils.config import get_config
    from pharmacy_worklist.utils.logger import setup_logging

    config = get_config()
    if api_base:
        config = replace(config, api_base=api_base.rstrip("/"))
    setup_logging(config.log_level)

    async def _load() -> StateStore:
        backend = BackendClient(config)
        store = StateStore()
        try:
            await EventReconciler(store, backend.fetch_items, config.stage_status).reload()
        finally:
            await backend.close()
        return store

    try:
        store = asyncio.run(_load())
    except WorklistLoadError as exc:
        raise click.ClickException(f"Load failed: {exc}") from exc

    view = project(store.all(), search)
    if view.is_empty:
        click.echo("No prescriptions found.")
    for item in view.items:
        click.echo(
            f"#{item.token}  {item.name} ({item.age} / {item.gender})  "
            f"{item.effective_state.value.upper()}  {item.prescription or '-'}"
        )
    counts = view.counts
    click.echo(
        f"Pending: {counts.pending}  Prepared: {counts.prepared}  Delivered: {counts.delivered}"
    )


@main.command()
def version() -> None:
    """Print the version and exit."""
    click.echo(f"pharmacy-worklist {__version__}")


if __name__ == "__main__":
    main()
