"""Error taxonomy for the feedback pipeline."""


class UpdateFeedbackError(Exception):
    """Base class for all errors raised by update-feedback."""


class ParseError(UpdateFeedbackError):
    """A package identifier string could not be parsed."""
    
    def __init__(self, value: str, kind: str) -> None:
        self.value = value
        self.kind = kind
        super().__init__(f"Failed to parse {kind}: {value!r}")


class QueryError(UpdateFeedbackError):
    """The update tracker or the local package manager could not be queried."""


class PersistenceError(UpdateFeedbackError):
    """The ignore lists could not be read or written."""


class SubmissionError(UpdateFeedbackError):
    """A comment could not be created on the update tracker."""
