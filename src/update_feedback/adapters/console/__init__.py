"""Terminal console adapter."""

from update_feedback.adapters.console.rich_console import RichReviewConsole

__all__ = ["RichReviewConsole"]
