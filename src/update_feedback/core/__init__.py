"""Core domain layer."""

from update_feedback.core.entities import (
    Action,
    Bug,
    BuildIndex,
    CandidateUpdate,
    Comment,
    FeedbackPayload,
    Karma,
    NevraIdentity,
    PackageIdentity,
    PriorFeedback,
    Progress,
    ReviewContext,
    SubmissionResult,
    TestCase,
    UpdateStatus,
)
from update_feedback.core.errors import (
    ParseError,
    PersistenceError,
    QueryError,
    SubmissionError,
    UpdateFeedbackError,
)
from update_feedback.core.ignore_store import (
    IgnoreLists,
    IgnoreListStore,
    filter_blocked,
    filter_ignored,
    prune,
)
from update_feedback.core.interfaces import (
    FeedbackSubmitter,
    InventorySource,
    ReviewConsole,
    UpdateSource,
)
from update_feedback.core.matcher import finalize, match_installed, package_names
from update_feedback.core.parsing import parse_filename, parse_nevra, parse_nvr
from update_feedback.core.prior_feedback import detect_prior_feedback
from update_feedback.core.state_machine import FeedbackLoop, ReviewState, SubmitFeedback, step

__all__ = [
    "Action",
    "Bug",
    "BuildIndex",
    "CandidateUpdate",
    "Comment",
    "FeedbackPayload",
    "Karma",
    "NevraIdentity",
    "PackageIdentity",
    "PriorFeedback",
    "Progress",
    "ReviewContext",
    "SubmissionResult",
    "TestCase",
    "UpdateStatus",
    "UpdateFeedbackError",
    "ParseError",
    "QueryError",
    "PersistenceError",
    "SubmissionError",
    "IgnoreLists",
    "IgnoreListStore",
    "prune",
    "filter_blocked",
    "filter_ignored",
    "UpdateSource",
    "InventorySource",
    "FeedbackSubmitter",
    "ReviewConsole",
    "match_installed",
    "finalize",
    "package_names",
    "parse_nvr",
    "parse_nevra",
    "parse_filename",
    "detect_prior_feedback",
    "FeedbackLoop",
    "ReviewState",
    "SubmitFeedback",
    "step",
]
