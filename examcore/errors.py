"""Error taxonomy for exam sessions.

Bank-level errors are fatal for the session being built. Record-level errors
are repaired or dropped during normalization and never reach the learner.
"""


class ExamEngineError(Exception):
    """Base class for exam engine errors."""


class ProviderError(ExamEngineError):
    """Fetching or parsing the question bank failed."""


class EmptyBankError(ExamEngineError):
    """The bank was fetched but holds no usable questions."""


class InvalidRecordError(ExamEngineError):
    """A single raw record could not be turned into a question."""
