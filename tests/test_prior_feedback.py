"""Tests for prior feedback detection."""

from datetime import datetime, timezone

from update_feedback.core import Comment, Karma, detect_prior_feedback


def comment(user: str, karma: Karma, hour: int, text: str = "") -> Comment:
    return Comment(
        user=user,
        text=text,
        karma=karma,
        timestamp=datetime(2020, 4, 2, hour, tzinfo=timezone.utc),
    )


RESET = "New build(s) added. Karma has been reset."


def test_no_comments(make_update) -> None:
    """Test an update nobody commented on."""
    prior = detect_prior_feedback(make_update("FEDORA-A"), "tester")
    
    assert not prior.already_commented
    assert not prior.karma_was_reset


def test_commented_with_karma(make_update) -> None:
    """Test that karma from the acting user counts."""
    update = make_update("FEDORA-A", comments=[comment("tester", Karma.POSITIVE, 1)])
    
    prior = detect_prior_feedback(update, "tester")
    
    assert prior.already_commented
    assert not prior.karma_was_reset


def test_neutral_comment_does_not_count(make_update) -> None:
    """Test that a plain text comment without karma does not count."""
    update = make_update("FEDORA-A", comments=[comment("tester", Karma.NEUTRAL, 1, "question")])
    
    assert not detect_prior_feedback(update, "tester").already_commented


def test_other_users_do_not_count(make_update) -> None:
    """Test that karma from other users is ignored."""
    update = make_update("FEDORA-A", comments=[comment("someone", Karma.NEGATIVE, 1)])
    
    assert not detect_prior_feedback(update, "tester").already_commented


def test_karma_reset_after_comment(make_update) -> None:
    """Test that a later karma reset clears earlier feedback."""
    update = make_update(
        "FEDORA-A",
        comments=[comment("tester", Karma.POSITIVE, 1), comment("bodhi", Karma.NEUTRAL, 2, RESET)],
    )
    
    prior = detect_prior_feedback(update, "tester")
    
    assert not prior.already_commented
    assert prior.karma_was_reset


def test_comment_after_karma_reset(make_update) -> None:
    """Test that feedback given after a reset counts again."""
    update = make_update(
        "FEDORA-A",
        comments=[
            comment("tester", Karma.POSITIVE, 1),
            comment("bodhi", Karma.NEUTRAL, 2, RESET),
            comment("tester", Karma.NEGATIVE, 3),
        ],
    )
    
    prior = detect_prior_feedback(update, "tester")
    
    assert prior.already_commented
    assert not prior.karma_was_reset


def test_comments_sorted_before_scan(make_update) -> None:
    """Test that out-of-order comments are scanned chronologically."""
    update = make_update(
        "FEDORA-A",
        comments=[comment("bodhi", Karma.NEUTRAL, 5, RESET), comment("tester", Karma.POSITIVE, 1)],
    )
    
    prior = detect_prior_feedback(update, "tester")
    
    assert not prior.already_commented
    assert prior.karma_was_reset


def test_other_system_comments_ignored(make_update) -> None:
    """Test that unrelated system comments change nothing."""
    update = make_update(
        "FEDORA-A",
        comments=[
            comment("tester", Karma.POSITIVE, 1),
            comment("bodhi", Karma.NEUTRAL, 2, "This update has been pushed to testing."),
        ],
    )
    
    assert detect_prior_feedback(update, "tester").already_commented


def test_undated_comment(make_update) -> None:
    """Test that comments without a timestamp are scanned first."""
    undated = Comment(user="tester", text="", karma=Karma.POSITIVE, timestamp=None)
    update = make_update("FEDORA-A", comments=[comment("bodhi", Karma.NEUTRAL, 5, RESET), undated])
    
    prior = detect_prior_feedback(update, "tester")
    
    assert not prior.already_commented
    assert prior.karma_was_reset
