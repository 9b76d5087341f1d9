"""Detection of feedback the acting user already left on an update."""

from update_feedback.core.entities import NEVER, CandidateUpdate, Karma, PriorFeedback

# Account the update tracker posts automated comments as
SYSTEM_USER = "bodhi"
KARMA_RESET_MARKER = "karma has been reset"


def is_karma_reset(user: str, text: str) -> bool:
    """Check if a comment announces that the update's karma was reset."""
    return user == SYSTEM_USER and KARMA_RESET_MARKER in text.lower()


def detect_prior_feedback(update: CandidateUpdate, acting_user: str) -> PriorFeedback:
    """Determine whether the acting user's earlier karma still applies.
    
    Comments are sorted by timestamp before scanning, so the result does not
    depend on the order the tracker returned them in. The last qualifying
    comment wins: a karma-carrying comment by the acting user marks the update
    as commented, a later karma reset by the system clears that again.
    """
    result = PriorFeedback()
    
    # sorted() is stable, equal timestamps keep the supplied order; undated comments go first
    for comment in sorted(update.comments, key=lambda c: c.timestamp or NEVER):
        if comment.user == acting_user and comment.karma != Karma.NEUTRAL:
            result = PriorFeedback(already_commented=True, karma_was_reset=False)
        elif is_karma_reset(comment.user, comment.text):
            result = PriorFeedback(already_commented=False, karma_was_reset=True)
    
    return result
