"""Command-line interface for publishing documentation trees to Confluence."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.tree import Tree

from .config import PublisherConfig, ensure_config
from .confluence.models import RemotePage
from .errors import ConfigurationError, InvalidMetadataError, PublisherError, too_many_root_pages
from .publisher.listener import (
    CompositePublisherListener,
    LoggingPublisherListener,
    PublishSummary,
    describe_attachment,
    describe_page_added,
    describe_page_deleted,
    describe_page_updated,
)
from .publisher.metadata import load_metadata
from .publisher.models import PageNode, PublisherMetadata, PublishingStrategy
from .publisher.service import ConfluencePublisher, create_client

app = typer.Typer(help="Publish rendered documentation trees into a Confluence space.")
console = Console()
err_console = Console(stderr=True)

LOGGER_NAMESPACE = "confluence_publisher"


class ConsolePublisherListener:
    """Print one line per change made to Confluence."""

    def __init__(self, output: Console) -> None:
        self.output = output

    def page_added(self, page: RemotePage) -> None:
        self.output.print(describe_page_added(page))

    def page_updated(self, existing: RemotePage, updated: RemotePage) -> None:
        self.output.print(describe_page_updated(existing, updated))

    def page_deleted(self, page: RemotePage) -> None:
        self.output.print(describe_page_deleted(page))

    def attachment_added(self, file_name: str, content_id: str) -> None:
        self.output.print(describe_attachment("Added", file_name, content_id))

    def attachment_updated(self, file_name: str, content_id: str) -> None:
        self.output.print(describe_attachment("Updated", file_name, content_id))

    def attachment_deleted(self, file_name: str, content_id: str) -> None:
        self.output.print(describe_attachment("Deleted", file_name, content_id))

    def publish_completed(self) -> None:
        self.output.print("[green]Documentation successfully published to Confluence[/green]")


def _configure_logging(verbosity: int) -> None:
    """Configure the package logger (never the root logger) from ``-v`` count."""

    if verbosity <= 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    app_logger = logging.getLogger(LOGGER_NAMESPACE)
    app_logger.setLevel(level)
    if not any(isinstance(handler, RichHandler) for handler in app_logger.handlers):
        handler = RichHandler(console=err_console, show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s", datefmt="%Y-%m-%d %H:%M:%S"))
        app_logger.addHandler(handler)


def _format_result(summary: PublishSummary) -> None:
    table = Table(title="Confluence Publish Summary")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Added pages", str(summary.added_pages))
    table.add_row("Updated pages", str(summary.updated_pages))
    table.add_row("Deleted pages", str(summary.deleted_pages))
    table.add_row("Added attachments", str(summary.added_attachments))
    table.add_row("Updated attachments", str(summary.updated_attachments))
    table.add_row("Deleted attachments", str(summary.deleted_attachments))
    console.print(table)


def _add_to_tree(tree: Tree, page: PageNode) -> None:
    label = f"[bold]{page.title}[/bold] ({page.content_path.name})"
    if page.labels:
        label += " [dim]" + ", ".join(sorted(page.labels)) + "[/dim]"
    branch = tree.add(label)
    for file_name in page.attachments:
        branch.add(f"[cyan]{file_name}[/cyan]")
    for child in page.children:
        _add_to_tree(branch, child)


def _render_metadata(metadata: PublisherMetadata) -> None:
    tree = Tree(f"Space [bold]{metadata.space_key or '?'}[/bold], ancestor {metadata.ancestor_id or '?'}")
    for page in metadata.pages:
        _add_to_tree(tree, page)
    console.print(tree)


@app.callback()
def main(
    ctx: typer.Context,
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to a configuration TOML file",
    ),
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="Increase log output (-v, -vv)"),
) -> None:
    _configure_logging(verbose)
    ctx.obj = {"config_path": config_path, "verbose": verbose}


@app.command()
def publish(
    ctx: typer.Context,
    metadata_file: Path = typer.Argument(..., help="metadata.json written by the documentation renderer"),
    space_key: Optional[str] = typer.Option(None, "--space", "-s", help="Destination Confluence space key"),
    ancestor_id: Optional[str] = typer.Option(
        None,
        "--ancestor-id",
        "-a",
        help="Id of the Confluence page the documentation is attached to",
    ),
    strategy: Optional[PublishingStrategy] = typer.Option(
        None,
        "--strategy",
        case_sensitive=False,
        help="How the documentation attaches to the ancestor page",
    ),
    version_message: Optional[str] = typer.Option(None, help="Message stored with each new page version"),
    notify_watchers: Optional[bool] = typer.Option(
        None,
        "--notify-watchers/--no-notify-watchers",
        help="Notify page watchers about updates",
    ),
    root_url: Optional[str] = typer.Option(None, help="Root URL of the Confluence instance"),
    username: Optional[str] = typer.Option(None, help="User name used for authentication"),
    password: Optional[str] = typer.Option(None, help="Password, API token or personal access token"),
) -> None:
    """Publish a rendered documentation tree to Confluence."""

    try:
        config: PublisherConfig = ensure_config(
            root_url=root_url,
            username=username,
            password=password,
            space_key=space_key,
            ancestor_id=ancestor_id,
            publishing_strategy=strategy,
            version_message=version_message,
            notify_watchers=notify_watchers,
            config_path=ctx.obj.get("config_path"),
        )
        defaults = config.defaults
        metadata = load_metadata(metadata_file, space_key=defaults.space_key, ancestor_id=defaults.ancestor_id)
    except (ConfigurationError, InvalidMetadataError) as exc:
        raise typer.BadParameter(str(exc)) from exc

    summary = PublishSummary()
    listeners = [ConsolePublisherListener(console), summary]
    if ctx.obj.get("verbose"):
        listeners.append(LoggingPublisherListener())
    client = create_client(
        root_url=str(config.credentials.root_url),
        username=config.credentials.username,
        password=config.credentials.password,
        timeout=defaults.timeout,
        notify_watchers=defaults.notify_watchers,
    )
    publisher = ConfluencePublisher(
        metadata,
        client,
        strategy=defaults.publishing_strategy,
        listener=CompositePublisherListener(*listeners),
        version_message=defaults.version_message,
    )
    try:
        publisher.publish()
    except InvalidMetadataError as exc:
        raise typer.BadParameter(str(exc)) from exc
    except PublisherError as exc:
        err_console.print(f"[red]Publishing failed:[/red] {exc}")
        _format_result(summary)
        raise typer.Exit(code=1) from exc
    finally:
        client.close()

    _format_result(summary)


@app.command()
def validate(
    metadata_file: Path = typer.Argument(..., help="metadata.json written by the documentation renderer"),
    strategy: PublishingStrategy = typer.Option(
        PublishingStrategy.APPEND_TO_ANCESTOR,
        "--strategy",
        case_sensitive=False,
        help="Strategy the tree is checked against",
    ),
) -> None:
    """Check a metadata file and print its page tree without contacting Confluence."""

    try:
        metadata = load_metadata(metadata_file)
        if strategy is PublishingStrategy.REPLACE_ANCESTOR and len(metadata.pages) > 1:
            raise too_many_root_pages(page.title for page in metadata.pages)
    except InvalidMetadataError as exc:
        raise typer.BadParameter(str(exc)) from exc

    _render_metadata(metadata)
    missing = [
        str(path)
        for page in metadata.iter_pages()
        for path in (page.content_path, *page.attachments.values())
        if not path.exists()
    ]
    if missing:
        for path in missing:
            err_console.print(f"[red]Missing file:[/red] {path}")
        raise typer.Exit(code=1)
    console.print(f"{sum(1 for _ in metadata.iter_pages())} page(s) ready to publish.")


def run() -> None:
    """Entry point for console scripts."""

    app()


if __name__ == "__main__":  # pragma: no cover
    run()
