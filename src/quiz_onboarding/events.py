"""
Events the core hands to its owner.

The resolver reports QuizLoaded / QuizLoadFailed; the flow state machine
reports FlowFinished when the last question is confirmed.
"""

from dataclasses import dataclass, field
from typing import Optional, TYPE_CHECKING

from .errors import QuizError

if TYPE_CHECKING:
    from .quiz.schema import QuizDefinition


@dataclass(frozen=True)
class QuizLoaded:
    """A quiz definition was fetched and decoded."""
    quiz: "QuizDefinition"
    source: str  # "remote" or "local"


@dataclass(frozen=True)
class QuizLoadFailed:
    """No quiz could be loaded. `reason` is safe to show the user."""
    reason: str
    error: Optional[QuizError] = None


@dataclass(frozen=True)
class FlowFinished:
    """
    The user confirmed the last question.

    Answer lists follow set iteration order; callers must not depend on it.
    """
    answers: dict[str, list[str]] = field(default_factory=dict)
