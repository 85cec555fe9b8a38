"""CLI entry point for the visual regression checker."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

import click
from playwright.async_api import async_playwright
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from visreg.capture.playwright_capture import PlaywrightCapturer
from visreg.comparison.comparator import compare as compare_screenshots
from visreg.errors import DecodeError, RegressionFailure
from visreg.imaging.screenshot import Screenshot
from visreg.models.config import DEFAULT_CONFIG_PATH, VisregConfig, VisualRegressionConfig
from visreg.models.outcome import RegressionOutcome
from visreg.workflow import run_visual_regression

console = Console()


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def _load_config(config: str) -> VisregConfig:
    try:
        return VisregConfig.load(config)
    except FileNotFoundError:
        console.print(f"[red]Config file not found: {config}[/red]")
        console.print("Run 'visreg init' to create a default config.")
        sys.exit(1)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """Screenshot-based visual regression checks"""
    setup_logging(verbose)


@cli.command()
@click.option("--screenshot-path", "-s", prompt="Screenshot directory", help="Root directory for screenshots")
@click.option("--config", "-c", default=DEFAULT_CONFIG_PATH, help="Config file path")
def init(screenshot_path: str, config: str) -> None:
    """Create a default configuration file."""
    config_path = Path(config)
    if config_path.exists():
        if not click.confirm(f"{config_path} already exists. Overwrite?"):
            return

    cfg = VisregConfig(screenshot_path=screenshot_path)
    cfg.save(config_path)
    console.print(f"[green]Created {config_path}[/green]")
    console.print("\nYou can now run a check with:")
    console.print("  [blue]visreg check https://example.com homepage[/blue]")


@cli.command()
@click.argument("base", type=click.Path(exists=True, dir_okay=False))
@click.argument("test", type=click.Path(exists=True, dir_okay=False))
@click.option("--config", "-c", default=None, help="Config file with threshold overrides")
def compare(base: str, test: str, config: str | None) -> None:
    """Compare two PNG files without touching either of them."""
    policy = _load_config(config).thresholds if config else None
    try:
        base_shot = Screenshot.from_path(base)
        test_shot = Screenshot.from_path(test)
    except DecodeError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)

    result = compare_screenshots(base_shot, test_shot, policy)

    table = Table(title="Screenshot Comparison")
    table.add_column("Metric", style="bold")
    table.add_column("Value")
    table.add_row("Base", f"{base} ({base_shot.width}x{base_shot.height})")
    table.add_row("Test", f"{test} ({test_shot.width}x{test_shot.height})")
    table.add_row("Area", str(base_shot.area))
    table.add_row("Same size", "yes" if result.same_size else "[red]no[/red]")
    table.add_row("Diff ratio", f"{result.diff_ratio:.5f}")
    table.add_row("Threshold", f"{result.threshold:.4f}")
    table.add_row("Result", "[green]PASS[/green]" if result.passed else "[red]FAIL[/red]")
    console.print(table)

    if not result.passed:
        sys.exit(1)


async def _check(
    cfg: VisregConfig, url: str, name: str, selector: str | None,
    options: VisualRegressionConfig, width: int, height: int,
) -> RegressionOutcome:
    async with async_playwright() as p:
        browser = await p.chromium.launch()
        try:
            context = await browser.new_context(viewport={"width": width, "height": height})
            page = await context.new_page()
            await page.goto(url, wait_until="networkidle")
            capturer = PlaywrightCapturer(page, cfg.screenshot_path)
            return await run_visual_regression(capturer, cfg, name, selector, options)
        finally:
            await browser.close()


@cli.command()
@click.argument("url")
@click.argument("name")
@click.option("--selector", "-s", default=None, help="Capture only this element (hovered first)")
@click.option("--prefix", "-p", default="", help="Sub-directory under the screenshot root")
@click.option("--width", default=1280, show_default=True, help="Viewport width")
@click.option("--height", default=720, show_default=True, help="Viewport height")
@click.option("--config", "-c", default=DEFAULT_CONFIG_PATH, help="Config file path")
def check(url: str, name: str, selector: str | None, prefix: str, width: int, height: int, config: str) -> None:
    """Capture URL and check it against the base screenshot NAME."""
    cfg = _load_config(config)
    options = VisualRegressionConfig(screenshot_path_prefix=prefix)
    try:
        outcome = asyncio.run(_check(cfg, url, name, selector, options, width, height))
    except RegressionFailure as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    console.print(f"[green]{outcome.message}[/green]")


if __name__ == "__main__":
    cli()
