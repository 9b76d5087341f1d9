"""Per-update review decisions and the loop that drives them."""

from dataclasses import dataclass, replace
from typing import Optional

from update_feedback.core.entities import (
    Action,
    CandidateUpdate,
    FeedbackPayload,
    Karma,
    Progress,
    ReviewContext,
)
from update_feedback.core.errors import SubmissionError
from update_feedback.core.ignore_store import IgnoreLists
from update_feedback.core.interfaces import FeedbackSubmitter, ReviewConsole
from update_feedback.core.matcher import package_names
from update_feedback.core.prior_feedback import detect_prior_feedback


@dataclass(frozen=True)
class ReviewState:
    """State threaded through the review loop."""
    
    ignore_lists: IgnoreLists
    aborted: bool = False


@dataclass(frozen=True)
class SubmitFeedback:
    """Effect: send this payload to the update tracker."""
    
    payload: FeedbackPayload


def step(
    state: ReviewState,
    update: CandidateUpdate,
    action: Action,
    payload: Optional[FeedbackPayload] = None,
) -> tuple[ReviewState, Optional[SubmitFeedback]]:
    """Apply one operator decision to the review state.
    
    Returns:
        Tuple of (new state, effect to perform or None)
    """
    if action == Action.IGNORE:
        return replace(state, ignore_lists=state.ignore_lists.with_ignored_update(update.alias)), None
    
    if action == Action.BLOCK:
        names = package_names(update)
        return replace(state, ignore_lists=state.ignore_lists.with_ignored_packages(names)), None
    
    if action == Action.ABORT:
        return replace(state, aborted=True), None
    
    if action == Action.COMMENT and payload is not None and not payload.is_empty:
        return state, SubmitFeedback(payload)
    
    # Skip, or a comment that carries nothing
    return state, None


class FeedbackLoop:
    """Drive one decision per update, oldest submission first."""
    
    def __init__(
        self,
        console: ReviewConsole,
        submitter: FeedbackSubmitter,
        acting_user: str,
        include_commented: bool = False,
    ) -> None:
        self.console = console
        self.submitter = submitter
        self.acting_user = acting_user
        self.include_commented = include_commented
        self.state: Optional[ReviewState] = None
        self.stats = {
            "already_commented": 0,
            "skipped": 0,
            "ignored": 0,
            "blocked": 0,
            "commented": 0,
            "failed": 0,
        }
    
    async def run(
        self,
        updates: list[CandidateUpdate],
        state: ReviewState,
        contexts: Optional[dict[str, ReviewContext]] = None,
    ) -> ReviewState:
        """Review updates until the list is exhausted or the operator aborts."""
        contexts = contexts or {}
        self.state = state
        total = len(updates)
        
        for index, update in enumerate(updates):
            prior = detect_prior_feedback(update, self.acting_user)
            progress = Progress(
                index=index,
                total=total,
                prior_commented=prior.already_commented,
                karma_was_reset=prior.karma_was_reset,
                priorly_ignored=update.alias in state.ignore_lists.ignored_updates,
            )
            
            if progress.prior_commented and not progress.karma_was_reset and not self.include_commented:
                self.stats["already_commented"] += 1
                continue
            
            self.console.present(update, progress, contexts.get(update.alias, ReviewContext()))
            
            try:
                action = self.console.prompt_action()
            except (KeyboardInterrupt, EOFError):
                action = Action.ABORT
            
            payload = None
            if action == Action.COMMENT:
                payload = self._collect_feedback(update)
            
            state, effect = step(state, update, action, payload)
            self.state = state
            
            if state.aborted:
                self.console.notify("Aborting, remaining updates are left untouched.")
                break
            
            if effect is not None:
                await self._submit(effect.payload)
            else:
                self._count(action, payload)
        
        return state
    
    def _count(self, action: Action, payload: Optional[FeedbackPayload]) -> None:
        if action == Action.IGNORE:
            self.stats["ignored"] += 1
            self.console.notify("Ignoring.")
        elif action == Action.BLOCK:
            self.stats["blocked"] += 1
            self.console.notify("Blocking all packages of this update.")
        else:
            self.stats["skipped"] += 1
            self.console.notify("Skipping.")
    
    def _collect_feedback(self, update: CandidateUpdate) -> Optional[FeedbackPayload]:
        """Run the comment sub-flow; None means nothing to submit.
        
        An interrupt cancels feedback for this update only.
        """
        try:
            text = self.console.prompt_comment()
            karma = self.console.prompt_karma("Karma")
            
            if not text and karma is None:
                self.console.notify("Provided neither comment nor karma, skipping this update.")
                return None
            
            bug_feedback: list[tuple[int, Karma]] = []
            for bug in update.bugs:
                bug_karma = self.console.prompt_karma(f"Bug {bug.bug_id}: {bug.title or '(None)'}")
                if bug_karma is not None:
                    bug_feedback.append((bug.bug_id, bug_karma))
            
            testcase_feedback: list[tuple[str, Karma]] = []
            for test_case in update.test_cases:
                case_karma = self.console.prompt_karma(f"Test case {test_case.name}")
                if case_karma is not None:
                    testcase_feedback.append((test_case.name, case_karma))
        except (KeyboardInterrupt, EOFError):
            self.console.notify("Feedback cancelled for this update.")
            return None
        
        payload = FeedbackPayload(
            alias=update.alias,
            karma=karma if karma is not None else Karma.NEUTRAL,
            text=text or None,
            bug_feedback=bug_feedback,
            testcase_feedback=testcase_feedback,
        )
        
        if payload.is_empty:
            self.console.notify("Provided neither comment nor karma, skipping this update.")
            return None
        
        return payload
    
    async def _submit(self, payload: FeedbackPayload) -> None:
        """Submit feedback; a failure is reported and the loop goes on."""
        try:
            result = await self.submitter.submit(payload)
        except SubmissionError as e:
            self.stats["failed"] += 1
            self.console.notify(f"Failed to create comment: {e}")
            return
        
        self.stats["commented"] += 1
        self.console.notify("Comment created.")
        
        if result.caveats:
            self.console.notify("Server messages:")
            for name, description in result.caveats:
                self.console.notify(f"- {name}: {description}")
