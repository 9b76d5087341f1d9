"""CLI entry point for update feedback."""

import asyncio
from pathlib import Path
from typing import Optional

import typer

from update_feedback.adapters.bodhi import BodhiClient
from update_feedback.adapters.console import RichReviewConsole
from update_feedback.adapters.system import DnfInventory
from update_feedback.config import Settings, get_settings, resolve_username
from update_feedback.core import IgnoreListStore, UpdateFeedbackError
from update_feedback.use_cases import FeedbackService, IgnoreListService, RunOptions


def main(
    username: Optional[str] = typer.Option(None, "--username", "-u", help="Override or provide FAS username"),
    check_obsoleted: bool = typer.Option(False, "--check-obsoleted", "-O", help="Check for installed obsolete updates"),
    check_pending: bool = typer.Option(False, "--check-pending", "-P", help="Include updates in \"pending\" state"),
    check_commented: bool = typer.Option(False, "--check-commented", "-c", help="Include updates that were already commented on"),
    check_ignored: bool = typer.Option(False, "--check-ignored", "-I", help="Include updates that were previously ignored"),
    check_unpushed: bool = typer.Option(False, "--check-unpushed", "-U", help="Check for installed unpushed updates"),
    clear_ignored: bool = typer.Option(False, "--clear-ignored", "-i", help="Clear ignored updates"),
    add_ignored_package: Optional[str] = typer.Option(None, "--add-ignored-package", "-a", help="Add a package name to the list of ignored packages"),
    remove_ignored_package: Optional[str] = typer.Option(None, "--remove-ignored-package", "-r", help="Remove a package name from the list of ignored packages"),
    print_ignored: bool = typer.Option(False, "--print-ignored", "-p", help="Print the list of ignored packages and updates"),
    config: Optional[Path] = typer.Option(None, "--config", help="Path to the YAML config file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Print more progress information"),
) -> None:
    """Provide feedback for updates that are installed on this system."""
    settings = get_settings(config)
    ignore_service = IgnoreListService(
        IgnoreListStore(settings.ignore_file, legacy_path=settings.legacy_ignore_file)
    )
    
    # Administrative commands bypass the review loop
    if add_ignored_package:
        ignore_service.add_package(add_ignored_package)
        return
    
    if remove_ignored_package:
        ignore_service.remove_package(remove_ignored_package)
        return
    
    if print_ignored:
        ignore_service.print_ignored()
        return
    
    resolved = resolve_username(username, settings)
    if not resolved:
        print("❌ No username given and none found in the config file or ~/.fedora.upn")
        raise typer.Exit(1)
    
    options = RunOptions(
        check_pending=check_pending or settings.checks.check_pending,
        check_commented=check_commented,
        check_ignored=check_ignored,
        check_obsoleted=check_obsoleted or settings.checks.check_obsoleted,
        check_unpushed=check_unpushed or settings.checks.check_unpushed,
        clear_ignored=clear_ignored,
    )
    
    try:
        asyncio.run(async_run(settings, resolved, options, ignore_service, verbose))
    except UpdateFeedbackError as e:
        print(f"❌ {e}")
        raise typer.Exit(1)


def app() -> None:
    """CLI entry point."""
    typer.run(main)


async def async_run(
    settings: Settings,
    username: str,
    options: RunOptions,
    ignore_service: IgnoreListService,
    verbose: bool,
) -> None:
    """Async implementation of the feedback run."""
    print("\n" + "=" * 70)
    print("📦 UPDATE FEEDBACK")
    print("=" * 70)
    print(f"Username: {username}")
    
    if verbose:
        print(f"\n⚙️  Settings:")
        print(f"  • Bodhi: {settings.bodhi.url}")
        print(f"  • Ignore list: {settings.ignore_file}")
        print(f"  • Pending: {options.check_pending}, obsoleted: {options.check_obsoleted}, unpushed: {options.check_unpushed}")
    
    bodhi = BodhiClient(
        base_url=settings.bodhi.url,
        timeout=settings.bodhi.timeout,
        page_size=settings.bodhi.page_size,
    )
    
    service = FeedbackService(
        update_source=bodhi,
        inventory=DnfInventory(),
        submitter=bodhi,
        console=RichReviewConsole(editor=settings.editor.command),
        ignore_service=ignore_service,
        username=username,
        verbose=verbose,
    )
    
    result = await service.run(options)
    
    print("\n" + "=" * 70)
    print("✅ DONE!")
    print("=" * 70)
    if result.stats:
        for key, count in result.stats.items():
            print(f"  • {key.replace('_', ' ')}: {count}")
    print()


if __name__ == "__main__":
    app()
