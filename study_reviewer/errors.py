"""Exception types raised across the synthesis and provider layers."""
from __future__ import annotations


class ReviewerError(Exception):
    """Base class for every error this package raises on purpose."""


class ConfigurationError(ReviewerError):
    """Missing credentials or an unknown provider; raised before any network call."""


class QuestionGenerationError(ReviewerError):
    """Question synthesis failed. Callers must assume no questions were produced."""


class RemoteCallError(QuestionGenerationError):
    """The completion service could not be reached or returned an error."""


class MalformedResponseError(QuestionGenerationError):
    """The completion response was not a JSON array of question objects."""

    def __init__(self, message: str, raw_response: str):
        super().__init__(message)
        self.raw_response = raw_response


class StorageError(ReviewerError):
    """A quiz could not be saved; nothing was written."""
