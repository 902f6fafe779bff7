"""Error taxonomy shared by the scoring, matching, submission and store layers.

Every error carries a human-readable message suitable for showing to the
user. Codec, quiz and ranking failures are fatal to the current flow;
network failures are recoverable by the submission guard.
"""

from __future__ import annotations


class PcbValuesError(Exception):
    """Base class for all domain errors."""

    default_message = "Something went wrong"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ScoringError(PcbValuesError, ValueError):
    """Bad input or state in the codec, quiz engine or ranking engine."""


class MissingInput(ScoringError):
    default_message = "No scores provided"


class ParseError(ScoringError):
    default_message = "Scores contain a value that is not a number"


class LengthMismatch(ScoringError):
    default_message = "Unexpected number of scores"


class RangeError(ScoringError):
    default_message = "Scores must lie between 0 and 100"


class InvalidScore(ScoringError):
    default_message = "Quiz data produced an invalid score"


class InvalidWeights(ScoringError):
    default_message = "Match weights must be non-negative and not all zero"


class OutOfRange(ScoringError):
    default_message = "No current question"


class InvalidFlags(PcbValuesError, ValueError):
    default_message = "Invalid flags provided"


class RecordNotFound(PcbValuesError, LookupError):
    default_message = "No score found with the provided name"


class SubmissionError(PcbValuesError):
    """Raised by the network layer of the submission guard."""


class NetworkTimeout(SubmissionError):
    default_message = "The score server did not answer in time"


class NetworkFailure(SubmissionError):
    default_message = "Failed to submit scores"


class SubmissionCancelled(PcbValuesError):
    default_message = "Username entering cancelled"


class StoreError(PcbValuesError):
    default_message = "The score database could not complete the request"


class CatalogError(PcbValuesError):
    default_message = "Quiz content could not be loaded"
