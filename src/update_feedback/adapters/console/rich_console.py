"""Interactive review console built on rich."""

from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from update_feedback.adapters.console.editor import detect_editor, edit_text
from update_feedback.adapters.console.formatting import (
    duration_until_now,
    format_karma,
    pretty_duration,
)
from update_feedback.core import (
    Action,
    CandidateUpdate,
    Karma,
    ParseError,
    Progress,
    ReviewConsole,
    ReviewContext,
    parse_nevra,
)
from update_feedback.core.entities import NEVER
from update_feedback.core.prior_feedback import SYSTEM_USER

ACTION_HELP = r"""[bold]Actions:[/bold] \[s] skip this update (default)
       / \[i] ignore this update permanently
       / \[c] comment with feedback (opens an external editor)
       / \[b] block (ignore all packages from this update permanently)
       / \[a] abort (exit program)"""


class RichReviewConsole(ReviewConsole):
    """Present updates and collect decisions in the terminal."""
    
    def __init__(self, console: Optional[Console] = None, editor: Optional[str] = None) -> None:
        self.console = console or Console()
        self.editor = detect_editor(editor)
    
    def present(self, update: CandidateUpdate, progress: Progress, context: ReviewContext) -> None:
        """Print update details, installed packages and previous comments."""
        body = f"[bold]{escape(update.title)}[/bold]"
        if update.notes.strip():
            body += f"\n\n{escape(update.notes.strip())}"
        
        self.console.print()
        self.console.print(Panel(body, title=update.alias))
        
        details = Table(show_header=False, box=None)
        details.add_column("Field", style="cyan")
        details.add_column("Value")
        details.add_row("URL", update.url)
        details.add_row("Update type", update.update_type)
        details.add_row("Submitted", str(update.submitted_at or "(None)"))
        details.add_row("Pushed", str(update.pushed_at or "(not yet pushed)"))
        details.add_row("Submitter", update.user)
        details.add_row("Karma", format_karma(update.karma))
        details.add_row("Stable karma", format_karma(update.stable_karma, signed=True))
        details.add_row("Unstable karma", format_karma(update.unstable_karma))
        self.console.print(details)
        
        if update.bugs:
            self.console.print("\n[bold]Associated bugs:[/bold]")
            for bug in update.bugs:
                self.console.print(f"- {bug.url}")
                if bug.title:
                    self.console.print(f"  {escape(bug.title.strip())}")
        
        if update.test_cases:
            self.console.print("\n[bold]Associated test cases:[/bold]")
            for test_case in update.test_cases:
                self.console.print(f"- {test_case.url}")
        
        self._print_installed(context)
        self._print_comments(update)
        self._print_progress(progress)
    
    def _print_installed(self, context: ReviewContext) -> None:
        packages = context.binaries or context.builds
        if not packages:
            return
        
        self.console.print("\n[bold]Locally installed packages contained in this update:[/bold]")
        for package in packages:
            self.console.print(f"- {package}")
            
            try:
                name = parse_nevra(package).name
            except ParseError:
                name = package
            
            summary = context.summaries.get(name)
            if summary:
                self.console.print(f"  {escape(summary)}")
            
            installed_at = context.install_times.get(package)
            if installed_at:
                age = pretty_duration(duration_until_now(installed_at))
                self.console.print(f"  installed {age} ago")
    
    def _print_comments(self, update: CandidateUpdate) -> None:
        comments = sorted(
            (c for c in update.comments if c.user != SYSTEM_USER), key=lambda c: c.timestamp or NEVER
        )
        if not comments:
            return
        
        self.console.print("\n[bold]Previous comments:[/bold]")
        for comment in comments:
            self.console.print(f"- {comment.user} ({comment.timestamp or '(None)'}): {comment.karma}")
            if comment.text.strip():
                self.console.print(f"  {escape(comment.text.strip())}")
    
    def _print_progress(self, progress: Progress) -> None:
        self.console.print(
            f"\nUpdates considered: {progress.index}, Updates remaining: {progress.remaining}"
        )
        
        if progress.prior_commented:
            self.console.print("[yellow]A comment for this update has already been submitted.[/yellow]")
            self.console.print("Any feedback / karma that is provided now will overwrite previous values.")
        elif progress.karma_was_reset:
            self.console.print("[yellow]The update has been edited since, and karma has been reset.[/yellow]")
        
        if progress.priorly_ignored:
            self.console.print("[yellow]This update has been previously marked as ignored.[/yellow]")
    
    def prompt_action(self) -> Action:
        self.console.print(ACTION_HELP)
        choice = Prompt.ask(
            "Action",
            choices=[action.value for action in Action],
            default=Action.SKIP.value,
            case_sensitive=False,
            show_choices=False,
            console=self.console,
        )
        return Action(choice.lower())
    
    def prompt_comment(self) -> Optional[str]:
        try:
            return edit_text(self.editor)
        except OSError as e:
            self.notify(f"[red]Could not start editor {self.editor!r}: {e}[/red]")
            return None
    
    def prompt_karma(self, label: str) -> Optional[Karma]:
        value = Prompt.ask(f"{label} (+1, 0, -1)", default="", show_default=False, console=self.console)
        karma = Karma.parse(value)
        
        if value.strip() and karma is None:
            self.notify(f"Not a karma value: {value!r}, skipped.")
        
        return karma
    
    def notify(self, message: str) -> None:
        self.console.print(message)
