"""Core domain entities."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import NamedTuple, Optional


class PackageIdentity(NamedTuple):
    """Name, version and release of a package, independent of epoch and arch."""
    
    name: str
    version: str
    release: str
    
    def __str__(self) -> str:
        return f"{self.name}-{self.version}-{self.release}"


class NevraIdentity(NamedTuple):
    """Fully qualified identity of a single binary or source build."""
    
    name: str
    epoch: str
    version: str
    release: str
    arch: str
    
    @property
    def nvr(self) -> PackageIdentity:
        return PackageIdentity(self.name, self.version, self.release)
    
    def __str__(self) -> str:
        return f"{self.name}-{self.epoch}:{self.version}-{self.release}.{self.arch}"


class Karma(int, Enum):
    """Feedback value attached to an update, a bug or a test case."""
    
    POSITIVE = 1
    NEUTRAL = 0
    NEGATIVE = -1
    
    @classmethod
    def parse(cls, value: str) -> Optional["Karma"]:
        """Parse operator input like "+1", "0" or "-1"; anything else is None."""
        try:
            return cls(int(value.strip()))
        except ValueError:
            return None
    
    def __str__(self) -> str:
        return f"+{self.value}" if self.value > 0 else str(self.value)


class UpdateStatus(str, Enum):
    """Status categories an update can be queried by."""
    
    TESTING = "testing"
    PENDING = "pending"
    OBSOLETE = "obsolete"
    UNPUSHED = "unpushed"


class Action(str, Enum):
    """Operator decision for a single update."""
    
    SKIP = "s"
    IGNORE = "i"
    COMMENT = "c"
    BLOCK = "b"
    ABORT = "a"


@dataclass
class Comment:
    """Comment left on an update."""
    
    user: str
    text: str
    karma: Karma
    timestamp: Optional[datetime]


@dataclass
class Bug:
    """Bug referenced by an update."""
    
    bug_id: int
    title: Optional[str] = None
    
    @property
    def url(self) -> str:
        return f"https://bugzilla.redhat.com/show_bug.cgi?id={self.bug_id}"


@dataclass
class TestCase:
    """Test case associated with an update."""
    
    __test__ = False
    
    name: str
    
    @property
    def url(self) -> str:
        return f"https://fedoraproject.org/wiki/{self.name.replace(' ', '_')}"


@dataclass
class CandidateUpdate:
    """Pending release record as returned by the update tracker."""
    
    alias: str
    title: str
    builds: list[str]
    submitted_at: Optional[datetime]
    user: str
    comments: list[Comment] = field(default_factory=list)
    bugs: list[Bug] = field(default_factory=list)
    test_cases: list[TestCase] = field(default_factory=list)
    karma: Optional[int] = None
    stable_karma: Optional[int] = None
    unstable_karma: Optional[int] = None
    notes: str = ""
    update_type: str = "unspecified"
    status: UpdateStatus = UpdateStatus.TESTING
    pushed_at: Optional[datetime] = None
    url: str = ""
    
    def __post_init__(self) -> None:
        if not self.alias:
            raise ValueError("Alias cannot be empty")


# Sort key placeholder for updates that were never submitted
NEVER = datetime.min.replace(tzinfo=timezone.utc)

# Matched build strings per update alias
BuildIndex = dict[str, list[str]]


@dataclass
class PriorFeedback:
    """Whether the acting user already left feedback that still counts."""
    
    already_commented: bool = False
    karma_was_reset: bool = False


@dataclass
class Progress:
    """Position of the current update within the review queue."""
    
    index: int
    total: int
    prior_commented: bool = False
    karma_was_reset: bool = False
    priorly_ignored: bool = False
    
    @property
    def remaining(self) -> int:
        return max(self.total - self.index - 1, 0)


@dataclass
class ReviewContext:
    """Local inventory facts shown next to an update."""
    
    builds: list[str] = field(default_factory=list)
    binaries: list[str] = field(default_factory=list)
    summaries: dict[str, str] = field(default_factory=dict)
    install_times: dict[str, datetime] = field(default_factory=dict)


@dataclass
class FeedbackPayload:
    """Feedback to submit for a single update."""
    
    alias: str
    karma: Karma = Karma.NEUTRAL
    text: Optional[str] = None
    bug_feedback: list[tuple[int, Karma]] = field(default_factory=list)
    testcase_feedback: list[tuple[str, Karma]] = field(default_factory=list)
    
    @property
    def is_empty(self) -> bool:
        """True if submitting would not change anything."""
        return (
            not (self.text and self.text.strip())
            and self.karma == Karma.NEUTRAL
            and not self.bug_feedback
            and not self.testcase_feedback
        )


@dataclass
class SubmissionResult:
    """Confirmation returned by the update tracker after commenting."""
    
    alias: str
    caveats: list[tuple[str, str]] = field(default_factory=list)
