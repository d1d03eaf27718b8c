"""
CLI entry point for htmlsoups.

Usage:
    python -m htmlsoups https://www.ksl.com/article/123

    # Parse URLs from a file, one per line, keeping learned selectors in Redis:
    python -m htmlsoups --batch urls.txt --storage redis \
        --redis-url redis://localhost:6379/0

    # Show domains with learned selectors:
    python -m htmlsoups --list-domains
"""

import asyncio
import sys
import time
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from htmlsoups.config import SoupsSettings, StorageBackend, StorageConfig, load_config
from htmlsoups.core.adaptive_parser import AdaptiveParser
from htmlsoups.core.fetcher import Fetcher
from htmlsoups.exceptions import SoupsError, StorageError
from htmlsoups.learning.selector_learner import SelectorLearner
from htmlsoups.models import ArticleContent, ContentType
from htmlsoups.storage.base import LearningStorage
from htmlsoups.storage.factory import create_learning_storage
from htmlsoups.storage.redis_store import RedisLearningStorage
from htmlsoups.utils.logging import setup_logging

console = Console()


def read_batch_file(path: str) -> list[str]:
    """URLs from a batch file, skipping blank lines and # comments."""
    urls = []
    for line in Path(path).read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if line and not line.startswith("#"):
            urls.append(line)
    return urls


@click.command()
@click.argument("urls", nargs=-1)
@click.option(
    "--batch",
    "-b",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Parse URLs from a file (one per line).",
)
@click.option(
    "--storage",
    type=click.Choice([b.value for b in StorageBackend]),
    default=None,
    help="Where learned selectors are kept (default: HTMLSOUPS_STORAGE_BACKEND or file).",
)
@click.option(
    "--storage-path",
    type=click.Path(file_okay=False),
    default=None,
    help="Directory for the file backend.",
)
@click.option(
    "--redis-url",
    type=str,
    default=None,
    help="Redis connection URL for the redis backend.",
)
@click.option(
    "--known-title",
    type=str,
    default=None,
    help="Title text known to be on the page; enables selector discovery.",
)
@click.option(
    "--list-domains",
    is_flag=True,
    help="List domains with learned selectors and exit.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose logging.",
)
def main(
    urls: tuple[str, ...],
    batch: str | None,
    storage: str | None,
    storage_path: str | None,
    redis_url: str | None,
    known_title: str | None,
    list_domains: bool,
    verbose: bool,
) -> None:
    """
    HTMLSoups - adaptive article extraction that learns CSS selectors.

    Example:
        python -m htmlsoups https://www.deseret.com/example-article
    """
    settings = load_config()
    log_level = "DEBUG" if verbose else settings.log_level
    setup_logging(level=log_level, format_type=settings.log_format)

    storage_config = settings.storage_config()
    if storage:
        storage_config.backend = StorageBackend(storage)
    if storage_path:
        storage_config.path = storage_path
    if redis_url:
        storage_config.redis_url = redis_url

    if list_domains:
        sys.exit(asyncio.run(_list_domains(storage_config)))

    all_urls = list(urls)
    if batch:
        all_urls.extend(read_batch_file(batch))

    if not all_urls:
        console.print("[bold red]Error: No URL provided[/bold red]")
        console.print("Run 'htmlsoups --help' for usage information")
        sys.exit(1)

    known_content = {ContentType.TITLE: known_title} if known_title else None

    try:
        failures = asyncio.run(_parse_urls(all_urls, settings, storage_config, known_content))
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(0)

    if len(all_urls) > 1:
        console.print(
            f"\n[bold]Processed {len(all_urls)} URLs:[/bold] "
            f"{len(all_urls) - failures} succeeded, {failures} failed"
        )
    sys.exit(1 if failures else 0)


async def _parse_urls(
    urls: list[str],
    settings: SoupsSettings,
    storage_config: StorageConfig,
    known_content: dict[ContentType | str, str] | None,
) -> int:
    """Parse every URL and return the number of failures."""
    storage = create_learning_storage(storage_config)
    failures = 0
    try:
        learner = await SelectorLearner.create(storage, config=settings.learner_config())
        async with Fetcher(settings.fetcher_config()) as fetcher:
            parser = AdaptiveParser(learner, fetcher=fetcher)
            for url in urls:
                start_time = time.monotonic()
                try:
                    article = await parser.parse_and_learn(url, known_content)
                except SoupsError as e:
                    failures += 1
                    console.print(f"[red]Failed:[/red] {url}\n   {e.message}")
                    continue
                _print_article(article, time.monotonic() - start_time)
    finally:
        await _close_storage(storage)
    return failures


def _print_article(article: ArticleContent, duration: float) -> None:
    console.print(f"\n[bold green]Parsed[/bold green] {article.source_url}")
    console.print(f"Title: {article.title}")
    if article.author:
        console.print(f"Author: {article.author}")
    if article.publish_date:
        console.print(f"Published: {article.publish_date}")
    if article.images:
        console.print(f"Images: {len(article.images)}")
    if article.topics:
        console.print(f"Topics: {', '.join(article.topics)}")
    console.print(f"Selectors: {article.config_source}")
    console.print(f"Processing time: {duration:.2f}s")


async def _list_domains(storage_config: StorageConfig) -> int:
    storage = create_learning_storage(storage_config)
    try:
        domains = await storage.list_domains()
        state = await storage.load()
    except StorageError as e:
        console.print(f"[bold red]Error: {e.message}[/bold red]")
        return 1
    finally:
        await _close_storage(storage)

    if not domains:
        console.print("No learned domains yet.")
        return 0

    table = Table(title="Learned domains")
    table.add_column("Domain")
    table.add_column("Content types")
    table.add_column("Selectors", justify="right")
    for domain in domains:
        by_type = state.domain_patterns.get(domain, {})
        table.add_row(
            domain,
            ", ".join(sorted(by_type)),
            str(sum(len(s) for s in by_type.values())),
        )
    console.print(table)
    return 0


async def _close_storage(storage: LearningStorage) -> None:
    if isinstance(storage, RedisLearningStorage):
        await storage.redis.aclose()


if __name__ == "__main__":
    main()
