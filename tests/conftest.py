"""Shared fixtures for tests."""

from datetime import datetime, timezone
from typing import Callable, Optional

import pytest

from update_feedback.core import (
    Action,
    CandidateUpdate,
    Karma,
    Progress,
    ReviewConsole,
    ReviewContext,
)


class ScriptedConsole(ReviewConsole):
    """Review console that replays prepared answers."""
    
    def __init__(
        self,
        actions: list[Action],
        comments: Optional[list[Optional[str]]] = None,
        karmas: Optional[list[Optional[Karma]]] = None,
    ) -> None:
        self.actions = list(actions)
        self.comments = list(comments or [])
        self.karmas = list(karmas or [])
        self.presented: list[tuple[str, Progress]] = []
        self.messages: list[str] = []
    
    def present(self, update: CandidateUpdate, progress: Progress, context: ReviewContext) -> None:
        self.presented.append((update.alias, progress))
    
    def prompt_action(self) -> Action:
        return self.actions.pop(0) if self.actions else Action.SKIP
    
    def prompt_comment(self) -> Optional[str]:
        answer = self.comments.pop(0) if self.comments else None
        if isinstance(answer, BaseException):
            raise answer
        return answer
    
    def prompt_karma(self, label: str) -> Optional[Karma]:
        answer = self.karmas.pop(0) if self.karmas else None
        if isinstance(answer, BaseException):
            raise answer
        return answer
    
    def notify(self, message: str) -> None:
        self.messages.append(message)


@pytest.fixture
def make_update() -> Callable[..., CandidateUpdate]:
    """Factory for update records."""
    def factory(
        alias: str,
        builds: Optional[list[str]] = None,
        day: int = 1,
        user: str = "packager",
        **kwargs,
    ) -> CandidateUpdate:
        return CandidateUpdate(
            alias=alias,
            title=f"Update {alias}",
            builds=builds if builds is not None else ["dnf-4.2.18-2.fc32"],
            submitted_at=datetime(2020, 4, day, 12, 0, tzinfo=timezone.utc),
            user=user,
            **kwargs,
        )
    
    return factory


@pytest.fixture
def scripted_console() -> Callable[..., ScriptedConsole]:
    """Factory for consoles with scripted answers."""
    return ScriptedConsole
