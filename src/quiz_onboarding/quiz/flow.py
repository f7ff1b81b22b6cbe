"""
Quiz flow state machine

Walks a loaded quiz one question at a time, collecting multi-select answers.
Transitions are synchronous and never raise: a transition whose guard fails
is a no-op. Confirming the last question emits FlowFinished to the owner,
who is expected to drop the flow afterwards.
"""

import logging
from typing import Callable, Iterable, Mapping, Optional

from ..events import FlowFinished
from ..storage.progress import ProgressCheckpoint
from .schema import Question, QuizDefinition

logger = logging.getLogger(__name__)


class QuizFlow:
    """
    Live traversal of a quiz.

    Single owner, single writer. `index` always stays within
    [0, quiz.question_count).
    """

    def __init__(
        self,
        quiz: QuizDefinition,
        index: int = 0,
        answers: Optional[Mapping[str, Iterable[str]]] = None,
        on_finished: Optional[Callable[[FlowFinished], None]] = None,
    ):
        """
        Initialize a flow, optionally resuming saved progress.

        Args:
            quiz: The quiz to walk (must have at least one question)
            index: Resumed question index, clamped into range
            answers: Resumed answers per question id
            on_finished: Called with the FlowFinished event
        """
        if not quiz.questions:
            raise ValueError("Cannot start a flow for a quiz with no questions")

        self._quiz = quiz
        self._index = max(0, min(index, quiz.question_count - 1))
        self._answers: dict[str, set[str]] = {
            qid: set(ids) for qid, ids in (answers or {}).items()
        }
        self._finished = False
        self.on_finished = on_finished

        if self._index != index:
            logger.warning(f"Resumed index {index} out of range, using {self._index}")

    @classmethod
    def resume(
        cls,
        quiz: QuizDefinition,
        checkpoint: ProgressCheckpoint,
        on_finished: Optional[Callable[[FlowFinished], None]] = None,
    ) -> "QuizFlow":
        """Start a flow from a saved checkpoint."""
        return cls(quiz, checkpoint.index, checkpoint.answers, on_finished=on_finished)

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def quiz(self) -> QuizDefinition:
        return self._quiz

    @property
    def index(self) -> int:
        return self._index

    @property
    def answers(self) -> dict[str, set[str]]:
        """Copy of the answer set."""
        return {qid: set(ids) for qid, ids in self._answers.items()}

    @property
    def current(self) -> Question:
        return self._quiz.questions[self._index]

    @property
    def is_last(self) -> bool:
        return self._index >= self._quiz.question_count - 1

    @property
    def can_go_back(self) -> bool:
        return self._index > 0

    @property
    def is_current_valid(self) -> bool:
        # Only non-empty is enforced; min/max are not
        return bool(self._answers.get(self.current.id))

    @property
    def is_finished(self) -> bool:
        return self._finished

    def selected(self, question_id: Optional[str] = None) -> set[str]:
        """Selected option ids for a question (the current one by default)."""
        qid = question_id if question_id is not None else self.current.id
        return set(self._answers.get(qid, ()))

    def is_selected(self, option_id: str) -> bool:
        return option_id in self._answers.get(self.current.id, ())

    def checkpoint(self) -> ProgressCheckpoint:
        """Snapshot for the progress store."""
        return ProgressCheckpoint(
            index=self._index,
            answers={qid: list(ids) for qid, ids in self._answers.items()},
        )

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def toggle_option(self, option_id: str) -> None:
        """Select the option on the current question, or deselect it if selected."""
        if self._finished:
            return

        qid = self.current.id
        selected = self._answers.setdefault(qid, set())
        if option_id in selected:
            selected.remove(option_id)
        else:
            selected.add(option_id)
        logger.debug(f"{qid}: {sorted(selected)}")

    def continue_(self) -> Optional[FlowFinished]:
        """
        Advance to the next question, or finish on the last one.

        Returns:
            The FlowFinished event when the quiz completes, else None
        """
        if self._finished or not self.is_current_valid:
            return None

        if self.is_last:
            event = FlowFinished(answers={qid: list(ids) for qid, ids in self._answers.items()})
            self._finished = True
            logger.debug(f"Flow finished with {len(event.answers)} answered questions")
            if self.on_finished is not None:
                self.on_finished(event)
            return event

        self._index += 1
        return None

    def back(self) -> bool:
        """Go to the previous question. Returns whether the index moved."""
        if self._finished or not self.can_go_back:
            return False
        self._index -= 1
        return True

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(index={self._index}, "
            f"questions={self._quiz.question_count}, finished={self._finished})"
        )
