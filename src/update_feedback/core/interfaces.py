"""Core interfaces for adapters."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from update_feedback.core.entities import (
    Action,
    CandidateUpdate,
    FeedbackPayload,
    Karma,
    PackageIdentity,
    Progress,
    ReviewContext,
    SubmissionResult,
    UpdateStatus,
)


class UpdateSource(ABC):
    """Interface for querying the update tracker."""
    
    @abstractmethod
    async def fetch_updates(self, release: str, status: UpdateStatus) -> list[CandidateUpdate]:
        """Fetch all updates for a release in the given status."""
        pass


class InventorySource(ABC):
    """Interface for querying the local package manager."""
    
    @abstractmethod
    async def get_release(self) -> str:
        """Get the release identifier of this system, e.g. ``F32``."""
        pass
    
    @abstractmethod
    async def get_installed(self) -> set[PackageIdentity]:
        """Get source package identities of everything installed."""
        pass
    
    @abstractmethod
    async def get_source_binary_map(self) -> dict[str, list[str]]:
        """Map installed source NVRs to the binary NEVRAs built from them."""
        pass
    
    @abstractmethod
    async def get_install_times(self) -> dict[str, datetime]:
        """Map installed binary NEVRAs to their installation time."""
        pass
    
    @abstractmethod
    async def get_summaries(self) -> dict[str, str]:
        """Map installed binary package names to their summary line."""
        pass


class FeedbackSubmitter(ABC):
    """Interface for submitting feedback to the update tracker."""
    
    @abstractmethod
    async def submit(self, payload: FeedbackPayload) -> SubmissionResult:
        """Create a comment; raises SubmissionError on failure."""
        pass


class ReviewConsole(ABC):
    """Interface for talking to the operator during review."""
    
    @abstractmethod
    def present(self, update: CandidateUpdate, progress: Progress, context: ReviewContext) -> None:
        """Show an update together with the review progress."""
        pass
    
    @abstractmethod
    def prompt_action(self) -> Action:
        """Ask what to do with the current update."""
        pass
    
    @abstractmethod
    def prompt_comment(self) -> Optional[str]:
        """Collect free-form comment text; None if nothing was written."""
        pass
    
    @abstractmethod
    def prompt_karma(self, label: str) -> Optional[Karma]:
        """Ask for a karma value; None if the operator gave none."""
        pass
    
    @abstractmethod
    def notify(self, message: str) -> None:
        """Show a short status message."""
        pass
