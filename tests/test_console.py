"""Tests for the terminal console adapter."""

import os
from datetime import datetime, timedelta, timezone
from io import StringIO
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest
from rich.console import Console

from update_feedback.adapters.console import RichReviewConsole
from update_feedback.adapters.console.editor import detect_editor, edit_text, scratch_file
from update_feedback.adapters.console.formatting import (
    duration_until_now,
    format_karma,
    pretty_duration,
    proper_plural,
)
from update_feedback.core import (
    Action,
    Bug,
    Comment,
    FeedbackLoop,
    IgnoreLists,
    Karma,
    Progress,
    ReviewContext,
    ReviewState,
    SubmissionResult,
)


def test_proper_plural() -> None:
    """Test naive pluralization."""
    assert proper_plural(1, "day") == "1 day"
    assert proper_plural(0, "day") == "0 days"
    assert proper_plural(3, "hour") == "3 hours"


def test_pretty_duration() -> None:
    """Test human-readable durations."""
    assert pretty_duration(timedelta(days=2, hours=3, minutes=5)) == "2 days and 3 hours"
    assert pretty_duration(timedelta(hours=1, minutes=1)) == "1 hour and 1 minute"
    assert pretty_duration(timedelta(minutes=42)) == "42 minutes"
    assert pretty_duration(timedelta(seconds=10)) == "less than a minute"


def test_duration_until_now_never_negative() -> None:
    """Test that moments in the future count as zero."""
    now = datetime(2020, 4, 10, tzinfo=timezone.utc)
    
    assert duration_until_now(now - timedelta(hours=5), now) == timedelta(hours=5)
    assert duration_until_now(now + timedelta(hours=5), now) == timedelta(0)


def test_format_karma() -> None:
    """Test karma formatting."""
    assert format_karma(None) == "?"
    assert format_karma(3, signed=True) == "+3"
    assert format_karma(-3, signed=True) == "-3"
    assert format_karma(3) == "3"


def test_detect_editor() -> None:
    """Test editor precedence."""
    with patch.dict(os.environ, {"EDITOR": "vim", "VISUAL": "code -w"}):
        assert detect_editor("emacs") == "emacs"
        assert detect_editor() == "vim"
    
    with patch.dict(os.environ, {"VISUAL": "code -w"}):
        os.environ.pop("EDITOR", None)
        assert detect_editor() == "code -w"
    
    with patch.dict(os.environ, {}, clear=True):
        assert detect_editor() == "nano"


def test_scratch_file_removed_on_error() -> None:
    """Test that the scratch file is removed when the body raises."""
    with pytest.raises(KeyboardInterrupt):
        with scratch_file() as path:
            created = path
            assert path.exists()
            raise KeyboardInterrupt
    
    assert not created.exists()


def test_edit_text() -> None:
    """Test reading the text written by the editor."""
    seen: list[Path] = []
    
    def fake_editor(args, check):
        path = Path(args[-1])
        seen.append(path)
        path.write_text("  Works fine.\n\n", encoding="utf-8")
    
    with patch("subprocess.run", side_effect=fake_editor) as mock_run:
        assert edit_text("code -w") == "Works fine."
    
    assert mock_run.call_args.args[0][:2] == ["code", "-w"]
    assert not seen[0].exists()


def test_edit_text_empty() -> None:
    """Test that an untouched scratch file means no comment."""
    with patch("subprocess.run"):
        assert edit_text("nano") is None


def test_present(make_update) -> None:
    """Test that update details are shown."""
    console = Console(record=True, width=120)
    review = RichReviewConsole(console=console, editor="nano")
    
    update = make_update(
        "FEDORA-2020-0123456789",
        notes="Fixes a crash.",
        bugs=[Bug(bug_id=1818181, title="dnf crashes")],
        comments=[
            Comment("bodhi", "This update has been submitted for testing.", Karma.NEUTRAL,
                    datetime(2020, 4, 1, 13, tzinfo=timezone.utc)),
            Comment("tester", "Works.", Karma.POSITIVE,
                    datetime(2020, 4, 2, tzinfo=timezone.utc)),
        ],
    )
    context = ReviewContext(
        builds=["dnf-4.2.18-2.fc32"],
        binaries=["dnf-4.2.18-2.fc32.noarch"],
        summaries={"dnf": "Package manager"},
    )
    
    review.present(update, Progress(index=1, total=4, prior_commented=True, priorly_ignored=True), context)
    output = console.export_text()
    
    assert "FEDORA-2020-0123456789" in output
    assert "Fixes a crash." in output
    assert "https://bugzilla.redhat.com/show_bug.cgi?id=1818181" in output
    assert "dnf-4.2.18-2.fc32.noarch" in output
    assert "Package manager" in output
    assert "tester" in output
    assert "submitted for testing" not in output
    assert "Updates considered: 1, Updates remaining: 2" in output
    assert "already been submitted" in output
    assert "previously marked as ignored" in output


def test_prompt_action() -> None:
    """Test reading an action."""
    review = RichReviewConsole(console=Console(record=True), editor="nano")
    
    with patch("update_feedback.adapters.console.rich_console.Prompt.ask", return_value="b"):
        assert review.prompt_action() == Action.BLOCK


def test_prompt_karma() -> None:
    """Test karma input handling."""
    console = Console(record=True)
    review = RichReviewConsole(console=console, editor="nano")
    
    with patch("update_feedback.adapters.console.rich_console.Prompt.ask", side_effect=["+1", "", "5"]):
        assert review.prompt_karma("Karma") == Karma.POSITIVE
        assert review.prompt_karma("Karma") is None
        assert review.prompt_karma("Karma") is None
    
    assert "Not a karma value: '5'" in console.export_text()


def test_prompt_comment_editor_missing() -> None:
    """Test that a missing editor means no comment."""
    console = Console(record=True)
    review = RichReviewConsole(console=console, editor="no-such-editor")
    
    with patch("subprocess.run", side_effect=FileNotFoundError("no-such-editor")):
        assert review.prompt_comment() is None
    
    assert "Could not start editor" in console.export_text()


def test_edit_text_invalid_utf8() -> None:
    """Test that text saved in another encoding is still read."""
    def fake_editor(args, check):
        Path(args[-1]).write_bytes(b"caf\xe9 works\n")
    
    with patch("subprocess.run", side_effect=fake_editor):
        assert edit_text("nano") == "caf\ufffd works"


@pytest.mark.asyncio
async def test_loop_with_invalid_utf8_comment(make_update) -> None:
    """Test that a comment in another encoding does not stop the review."""
    console = Console(file=StringIO())
    review = RichReviewConsole(console=console, editor="nano")
    submitter = AsyncMock()
    submitter.submit.return_value = SubmissionResult(alias="FEDORA-A")
    
    def fake_editor(args, check):
        Path(args[-1]).write_bytes(b"caf\xe9 works\n")
    
    updates = [make_update("FEDORA-A"), make_update("FEDORA-B", day=2)]
    loop = FeedbackLoop(review, submitter, acting_user="tester")
    
    with patch("subprocess.run", side_effect=fake_editor), \
            patch("update_feedback.adapters.console.rich_console.Prompt.ask", side_effect=["c", "+1", "i"]):
        state = await loop.run(updates, ReviewState(ignore_lists=IgnoreLists()))
    
    payload = submitter.submit.call_args.args[0]
    assert payload.text == "caf\ufffd works"
    assert payload.karma == Karma.POSITIVE
    assert state.ignore_lists.ignored_updates == ("FEDORA-B",)


def test_prompt_action_case_insensitive() -> None:
    """Test that upper case actions are accepted."""
    console = Console(file=StringIO())
    review = RichReviewConsole(console=console, editor="nano")
    
    with patch.object(console, "input", return_value="I"):
        assert review.prompt_action() == Action.IGNORE


def test_present_undated_comment(make_update) -> None:
    """Test showing a comment without a timestamp."""
    console = Console(record=True, width=120)
    review = RichReviewConsole(console=console, editor="nano")
    update = make_update("FEDORA-A", comments=[
        Comment("tester", "Works.", Karma.POSITIVE, datetime(2020, 4, 2, tzinfo=timezone.utc)),
        Comment("other", "Fine.", Karma.POSITIVE, None),
    ])
    
    review.present(update, Progress(index=0, total=1), ReviewContext())
    output = console.export_text()
    
    assert "other ((None)): +1" in output
    assert output.index("other") < output.index("tester")
