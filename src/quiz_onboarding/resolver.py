"""
Quiz source resolver

Fetches the quiz definition, preferring remote config and falling back once
to the bundled copy when the remote is unreachable:

1. Fetch from the remote source
2. On a transport-level failure, load the local source instead
3. Decode whichever payload arrived (decode errors are not retried)
4. Cache the decoded quiz in memory for the life of the resolver

Only one fetch runs at a time per resolver: start_fetch() cancels a
still-pending fetch before starting a new one.
"""

import asyncio
import logging
from typing import Optional, Union

import httpx

from .errors import InvalidPayload, NoQuizAvailable, NotFound, QuizError, UnknownQuizError
from .events import QuizLoaded, QuizLoadFailed
from .quiz.schema import QuizDefinition, decode_quiz
from .sources.base import LocalQuizSource, RemoteQuizSource

logger = logging.getLogger(__name__)

# Remote failures that trigger the local fallback
FALLBACK_ERRORS = (NoQuizAvailable, httpx.HTTPError, OSError)


class QuizResolver:
    """
    Resolves the quiz definition from remote config with a bundled fallback.

    Sources are injected; the resolver owns nothing global.
    """

    def __init__(self, remote: RemoteQuizSource, local: LocalQuizSource):
        """
        Initialize resolver.

        Args:
            remote: Remote-config source (may fail with NetworkFailure/NotFound)
            local: Bundled fallback source
        """
        self.remote = remote
        self.local = local
        self._cached: Optional[QuizDefinition] = None
        self._cached_source: Optional[str] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def cached(self) -> Optional[QuizDefinition]:
        """Last successfully decoded quiz, if any."""
        return self._cached

    @property
    def source_of_cached(self) -> Optional[str]:
        """"remote" or "local", whichever produced the cached quiz."""
        return self._cached_source

    @property
    def current_task(self) -> Optional[asyncio.Task]:
        """The most recent start_fetch() task."""
        return self._task

    @property
    def in_flight(self) -> bool:
        return self._task is not None and not self._task.done()

    async def _fetch_payload(self) -> tuple[bytes, str]:
        """Get raw bytes from the remote source, or the local one on failure."""
        try:
            return await self.remote.fetch(), "remote"
        except FALLBACK_ERRORS as e:
            logger.warning(f"Remote quiz fetch failed ({self.remote.name}): {e}; using local fallback")

        try:
            return self.local.load(), "local"
        except QuizError:
            raise
        except OSError as e:
            raise NotFound(f"Local quiz unavailable: {e}") from e

    async def _resolve(self) -> tuple[QuizDefinition, str]:
        payload, source = await self._fetch_payload()

        quiz = decode_quiz(payload)

        # Written only after a full decode; a cancelled fetch leaves the cache untouched
        self._cached = quiz
        self._cached_source = source
        logger.debug(f"Cached quiz v{quiz.version} from {source} ({quiz.question_count} questions)")
        return quiz, source

    async def fetch_quiz(self) -> QuizDefinition:
        """
        Fetch and decode the quiz.

        Returns:
            The decoded QuizDefinition

        Raises:
            NotFound: Remote failed and the bundled quiz is missing
            InvalidPayload: The payload that arrived does not decode
        """
        quiz, _ = await self._resolve()
        return quiz

    async def load(self) -> Union[QuizLoaded, QuizLoadFailed]:
        """
        Fetch the quiz and report the outcome as an event.

        Never raises a QuizError; cancellation still propagates.
        """
        try:
            quiz, source = await self._resolve()
        except InvalidPayload as e:
            logger.error(f"Quiz payload rejected: {e}")
            return QuizLoadFailed(reason="The quiz could not be read. Please try again later.", error=e)
        except NoQuizAvailable as e:
            logger.error(f"No quiz available: {e}")
            return QuizLoadFailed(reason="The quiz is not available right now. Please try again.", error=e)
        except QuizError as e:
            logger.error(f"Quiz load failed: {e}")
            return QuizLoadFailed(reason=str(e) or "Something went wrong.", error=e)
        except Exception as e:
            logger.exception("Unexpected error while loading quiz")
            return QuizLoadFailed(
                reason="Something went wrong. Please try again.",
                error=UnknownQuizError(str(e) or e.__class__.__name__),
            )

        logger.info(f"Loaded quiz v{quiz.version} from {source}")
        return QuizLoaded(quiz=quiz, source=source)

    def start_fetch(self) -> "asyncio.Task[Union[QuizLoaded, QuizLoadFailed]]":
        """
        Schedule load() on the running loop, cancelling any fetch in flight.

        Returns:
            The task; await it for the QuizLoaded/QuizLoadFailed event
        """
        if self.in_flight:
            logger.debug("Cancelling in-flight quiz fetch")
            self._task.cancel()

        self._task = asyncio.ensure_future(self.load())
        return self._task

    async def close(self) -> None:
        """Cancel any pending fetch and release the remote source."""
        if self.in_flight:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None
        await self.remote.close()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(remote={self.remote!r}, local={self.local!r})"

