"""
Error types for quiz-onboarding

Every failure the core surfaces is a QuizError. Flow transitions never raise;
these come from decoding, the quiz sources and the progress store.
"""


class QuizError(Exception):
    """Base exception for quiz errors."""
    pass


class NoQuizAvailable(QuizError):
    """Neither the remote nor the local source produced a quiz payload."""
    pass


class NotFound(NoQuizAvailable):
    """A quiz resource (bundled file, remote-config parameter) is missing."""
    pass


class NetworkFailure(NoQuizAvailable):
    """Transport-level failure talking to the remote source."""
    pass


class InvalidPayload(QuizError):
    """Quiz payload does not match the wire format."""
    pass


class StorageFailure(QuizError):
    """Progress could not be read, written or decoded."""
    pass


class UnknownQuizError(QuizError):
    """Catch-all for failures that fit no other category."""
    pass
