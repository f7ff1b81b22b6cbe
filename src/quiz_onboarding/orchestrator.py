"""
Onboarding orchestrator

Coordinates the intro screen and the quiz flow:
1. "Take a quiz" triggers a fetch through the resolver
2. A loaded quiz starts a flow, resuming saved progress when present
3. Progress is saved whenever the owner asks for it
4. When the flow finishes, saved progress is cleared

A failed load leaves the orchestrator in FAILED with a user-facing message;
calling take_quiz() again is the retry.
"""

import asyncio
import logging
from enum import Enum
from typing import Optional

from .config import Config, config as default_config
from .errors import StorageFailure
from .events import FlowFinished, QuizLoaded
from .quiz.flow import QuizFlow
from .quiz.schema import QuizDefinition
from .resolver import QuizResolver
from .sources.local import BundledQuizSource
from .sources.remote import RemoteConfigSource
from .storage.file import JsonFileStore
from .storage.progress import ProgressStore

logger = logging.getLogger(__name__)


class OnboardingPhase(str, Enum):
    """Where the onboarding currently is."""
    IDLE = "idle"
    LOADING = "loading"
    IN_FLOW = "in_flow"
    FINISHED = "finished"
    FAILED = "failed"


class OnboardingOrchestrator:
    """
    Owner of the resolver, the progress store and the live flow.
    """

    def __init__(self, resolver: QuizResolver, progress: ProgressStore):
        self.resolver = resolver
        self.progress = progress
        self.phase = OnboardingPhase.IDLE
        self.flow: Optional[QuizFlow] = None
        self.quiz: Optional[QuizDefinition] = None
        self.last_error: Optional[str] = None
        self.result: Optional[FlowFinished] = None

    async def take_quiz(self) -> Optional[QuizFlow]:
        """
        Fetch the quiz and start the flow.

        Returns:
            The started flow, or None if loading failed (see last_error)
        """
        self.phase = OnboardingPhase.LOADING
        self.last_error = None

        task = self.resolver.start_fetch()
        try:
            event = await task
        except asyncio.CancelledError:
            if self.resolver.current_task is task:
                raise
            logger.debug("Quiz fetch superseded by a newer request")
            return None

        if not isinstance(event, QuizLoaded):
            return self._fail(event.reason)

        if not event.quiz.questions:
            return self._fail("The quiz has no questions.")

        self.quiz = event.quiz
        self.result = None
        self.flow = self._start_flow(event.quiz)
        self.phase = OnboardingPhase.IN_FLOW
        return self.flow

    def _fail(self, reason: str) -> None:
        self.last_error = reason
        self.flow = None
        self.phase = OnboardingPhase.FAILED

    def _start_flow(self, quiz: QuizDefinition) -> QuizFlow:
        try:
            checkpoint = self.progress.load()
        except StorageFailure as e:
            logger.warning(f"Discarding unreadable progress: {e}")
            self._clear_progress()
            checkpoint = None

        if checkpoint is None:
            return QuizFlow(quiz, on_finished=self.handle_finished)

        logger.info(f"Resuming quiz at question {checkpoint.index + 1}")
        return QuizFlow.resume(quiz, checkpoint, on_finished=self.handle_finished)

    def save_progress(self) -> None:
        """
        Persist the live flow's position and answers.

        Raises:
            StorageFailure: If the checkpoint cannot be written
        """
        if self.phase is not OnboardingPhase.IN_FLOW or self.flow is None:
            return
        self.progress.save_checkpoint(self.flow.checkpoint())

    def handle_finished(self, event: FlowFinished) -> None:
        """Flow delegate: the user completed the quiz."""
        self._clear_progress()
        self.result = event
        self.flow = None
        self.phase = OnboardingPhase.FINISHED
        logger.info(f"Quiz finished with {len(event.answers)} answered questions")

    def _clear_progress(self) -> None:
        try:
            self.progress.clear()
        except StorageFailure as e:
            logger.warning(f"Could not clear saved progress: {e}")

    async def close(self) -> None:
        await self.resolver.close()


def build_orchestrator(cfg: Optional[Config] = None) -> OnboardingOrchestrator:
    """
    Wire the live collaborators from configuration.

    Args:
        cfg: Configuration (defaults to the module singleton)

    Returns:
        Orchestrator using remote config, the bundled quiz and a JSON progress file
    """
    cfg = cfg or default_config
    resolver = QuizResolver(
        remote=RemoteConfigSource(cfg.remote),
        local=BundledQuizSource(cfg.local.fallback_path or None),
    )
    progress = ProgressStore(
        JsonFileStore(cfg.storage.progress_path),
        index_key=cfg.storage.index_key,
        answers_key=cfg.storage.answers_key,
    )
    return OnboardingOrchestrator(resolver, progress)
