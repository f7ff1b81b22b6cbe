"""
quiz-onboarding: remote-configured onboarding quiz.

Fetches a quiz definition from remote config (falling back to a bundled
copy), walks the user through it question by question, and keeps resumable
progress between sessions.
"""

__version__ = "0.1.0"

from .errors import (
    QuizError,
    NoQuizAvailable,
    NotFound,
    NetworkFailure,
    InvalidPayload,
    StorageFailure,
    UnknownQuizError,
)
from .config import config
from .events import QuizLoaded, QuizLoadFailed, FlowFinished
from .quiz import (
    QuestionType,
    OptionKind,
    TextOption,
    ImageOption,
    ColorOption,
    Question,
    QuizDefinition,
    QuizFlow,
    decode_quiz,
    encode_quiz,
)
from .resolver import QuizResolver
from .storage import ProgressStore, ProgressCheckpoint, JsonFileStore, MemoryKeyValueStore
from .orchestrator import OnboardingOrchestrator, OnboardingPhase, build_orchestrator

__all__ = [
    # Errors
    "QuizError",
    "NoQuizAvailable",
    "NotFound",
    "NetworkFailure",
    "InvalidPayload",
    "StorageFailure",
    "UnknownQuizError",
    # Config
    "config",
    # Events
    "QuizLoaded",
    "QuizLoadFailed",
    "FlowFinished",
    # Quiz
    "QuestionType",
    "OptionKind",
    "TextOption",
    "ImageOption",
    "ColorOption",
    "Question",
    "QuizDefinition",
    "QuizFlow",
    "decode_quiz",
    "encode_quiz",
    # Resolver & storage
    "QuizResolver",
    "ProgressStore",
    "ProgressCheckpoint",
    "JsonFileStore",
    "MemoryKeyValueStore",
    # Orchestrator
    "OnboardingOrchestrator",
    "OnboardingPhase",
    "build_orchestrator",
]
