"""Course Catalog CLI — run the server and manage the store.

Usage:
    coursecatalog serve                      # Start the API (uvicorn)
    coursecatalog init-db                    # Create tables in the configured database
    coursecatalog seed seed/data.json        # Load users + courses into an empty store
    coursecatalog seed seed/data.json --force
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import sys

import click

from coursecatalog import __version__
from coursecatalog.config import settings
from coursecatalog.errors import CatalogError
from coursecatalog.logging_config import configure_logging
from coursecatalog.seed import seed_from_file
from coursecatalog.stores import SqlCatalogStore, build_store


def _run(coro):
    """Run an async coroutine from synchronous Click handler.

    Handles nested event loops (e.g. when invoked via Click CliRunner
    inside an existing async context like tests) by offloading to a thread.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        # No running loop: plain CLI invocation
        return asyncio.run(coro)
    else:
        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(asyncio.run, coro).result()


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(__version__, prog_name="coursecatalog")
def cli():
    """Course Catalog API — courses and the users who own them."""
    configure_logging(settings.log_level, settings.log_json)


@cli.command()
@click.option("--host", default=None, help="Bind address (default from settings).")
@click.option("--port", default=None, type=int, help="Port (default from settings).")
@click.option("--reload", is_flag=True, help="Reload on code changes (development).")
def serve(host: str | None, port: int | None, reload: bool):
    """Start the HTTP API."""
    import uvicorn

    uvicorn.run(
        "coursecatalog.main:run",
        factory=True,
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_config=None,
    )


@cli.command("init-db")
def init_db():
    """Create any missing tables in COURSECATALOG_DATABASE_URL."""
    if settings.store_backend != "sql":
        click.secho("init-db only applies to the sql store backend", fg="red", err=True)
        sys.exit(1)

    async def _init():
        store = SqlCatalogStore(settings.database_url, echo=settings.debug)
        await store.open()
        try:
            await store.create_all()
        finally:
            await store.close()

    _run(_init())
    click.secho("Tables created.", fg="green")


@cli.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--force", is_flag=True, help="Seed even if the store already has users.")
def seed(path: str, force: bool):
    """Load users and courses from a JSON seed document."""

    async def _seed():
        store = build_store(settings)
        await store.open()
        try:
            return await seed_from_file(store, path, force=force)
        finally:
            await store.close()

    try:
        result = _run(_seed())
    except CatalogError as e:
        click.secho(f"Seed rejected: {e}", fg="red", err=True)
        sys.exit(1)

    if result.skipped:
        click.secho("Store already has users — nothing loaded (use --force).", fg="yellow")
        return
    click.secho(
        f"Loaded {result.users} users and {result.courses} courses.", fg="green"
    )


if __name__ == "__main__":
    cli()
