"""
Tests for the quiz source resolver.
"""

import asyncio
import json

import httpx
import pytest

from quiz_onboarding.config import RemoteConfig
from quiz_onboarding.errors import InvalidPayload, NetworkFailure, NoQuizAvailable, NotFound
from quiz_onboarding.events import QuizLoaded, QuizLoadFailed
from quiz_onboarding.resolver import QuizResolver
from quiz_onboarding.sources.base import RemoteQuizSource
from quiz_onboarding.sources.mock import MockLocalSource, MockRemoteSource, sample_quiz_dict
from quiz_onboarding.sources.remote import RemoteConfigSource


def payload_with_title(title: str) -> bytes:
    data = sample_quiz_dict()
    data["title"] = title
    return json.dumps(data).encode("utf-8")


class LeakyRemote(RemoteQuizSource):
    """Remote source that lets a raw httpx error escape."""

    @property
    def name(self) -> str:
        return "leaky"

    async def fetch(self) -> bytes:
        raise httpx.ConnectTimeout("timed out")


class TestFetchQuiz:
    """Tests for QuizResolver.fetch_quiz()."""

    @pytest.mark.asyncio
    async def test_remote_success(self):
        """Test the remote payload wins when available."""
        remote = MockRemoteSource(payload=payload_with_title("Remote"))
        local = MockLocalSource(payload=payload_with_title("Local"))
        resolver = QuizResolver(remote, local)

        quiz = await resolver.fetch_quiz()

        assert quiz.title == "Remote"
        assert local.calls == 0
        assert resolver.source_of_cached == "remote"

    @pytest.mark.asyncio
    async def test_fallback_to_local(self):
        """Test a failing remote falls back to the local payload."""
        remote = MockRemoteSource(fail=True)
        local = MockLocalSource(payload=payload_with_title("Local"))
        resolver = QuizResolver(remote, local)

        quiz = await resolver.fetch_quiz()

        assert quiz.title == "Local"
        assert quiz.question_ids == ["q1", "q2"]
        assert remote.calls == 1
        assert local.calls == 1
        assert resolver.source_of_cached == "local"

    @pytest.mark.asyncio
    async def test_fallback_on_remote_not_found(self):
        """Test a missing remote parameter also falls back."""
        remote = MockRemoteSource(fail=True, error=NotFound("no parameter"))
        local = MockLocalSource(payload=payload_with_title("Local"))

        quiz = await QuizResolver(remote, local).fetch_quiz()

        assert quiz.title == "Local"

    @pytest.mark.asyncio
    async def test_fallback_on_raw_httpx_error(self):
        """Test transport errors that escape a source still fall back."""
        local = MockLocalSource(payload=payload_with_title("Local"))

        quiz = await QuizResolver(LeakyRemote(), local).fetch_quiz()

        assert quiz.title == "Local"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("parameter", ["oops", {"defaultValue": "oops"}])
    async def test_fallback_on_malformed_template(self, parameter):
        """Test a malformed remote-config template falls back to local."""
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"parameters": {"quiz_config": parameter}})

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        remote = RemoteConfigSource(RemoteConfig(url="https://config.example.com/quiz"), client=client)
        local = MockLocalSource(payload=payload_with_title("Local"))
        resolver = QuizResolver(remote, local)

        quiz = await resolver.fetch_quiz()
        await resolver.close()

        assert quiz.title == "Local"
        assert resolver.source_of_cached == "local"

    @pytest.mark.asyncio
    async def test_both_fail(self):
        """Test double failure raises, never returns a quiz."""
        resolver = QuizResolver(MockRemoteSource(fail=True), MockLocalSource(missing=True))

        with pytest.raises(NoQuizAvailable) as exc_info:
            await resolver.fetch_quiz()

        assert isinstance(exc_info.value, (NotFound, NetworkFailure))
        assert resolver.cached is None

    @pytest.mark.asyncio
    async def test_invalid_remote_payload_not_retried(self):
        """Test a decode failure on the remote payload does not try local."""
        remote = MockRemoteSource(payload=b'{"version": 1}')
        local = MockLocalSource()
        resolver = QuizResolver(remote, local)

        with pytest.raises(InvalidPayload):
            await resolver.fetch_quiz()

        assert local.calls == 0
        assert resolver.cached is None

    @pytest.mark.asyncio
    async def test_invalid_local_payload(self):
        """Test a broken fallback payload surfaces InvalidPayload."""
        resolver = QuizResolver(MockRemoteSource(fail=True), MockLocalSource(payload=b"nope"))

        with pytest.raises(InvalidPayload):
            await resolver.fetch_quiz()

    @pytest.mark.asyncio
    async def test_cache_keeps_last_success(self):
        """Test a later failure does not clear the cached quiz."""
        remote = MockRemoteSource(payload=payload_with_title("First"))
        local = MockLocalSource(missing=True)
        resolver = QuizResolver(remote, local)

        first = await resolver.fetch_quiz()
        remote.fail = True
        with pytest.raises(NotFound):
            await resolver.fetch_quiz()

        assert resolver.cached is first

    @pytest.mark.asyncio
    async def test_no_retry(self):
        """Test each fetch hits the remote exactly once."""
        remote = MockRemoteSource(fail=True)
        local = MockLocalSource()
        resolver = QuizResolver(remote, local)

        await resolver.fetch_quiz()

        assert remote.calls == 1
        assert local.calls == 1


class TestLoadEvents:
    """Tests for QuizResolver.load()."""

    @pytest.mark.asyncio
    async def test_loaded_event(self):
        """Test success produces QuizLoaded with its source."""
        event = await QuizResolver(MockRemoteSource(fail=True), MockLocalSource()).load()

        assert isinstance(event, QuizLoaded)
        assert event.source == "local"
        assert event.quiz.question_count == 2

    @pytest.mark.asyncio
    async def test_failed_event(self):
        """Test double failure produces QuizLoadFailed."""
        event = await QuizResolver(MockRemoteSource(fail=True), MockLocalSource(missing=True)).load()

        assert isinstance(event, QuizLoadFailed)
        assert isinstance(event.error, NotFound)
        assert event.reason

    @pytest.mark.asyncio
    async def test_invalid_payload_event(self):
        """Test decode failures are reported, not raised."""
        event = await QuizResolver(MockRemoteSource(payload=b"[]"), MockLocalSource()).load()

        assert isinstance(event, QuizLoadFailed)
        assert isinstance(event.error, InvalidPayload)


class TestCancelAndReplace:
    """Tests for single in-flight fetch."""

    @pytest.mark.asyncio
    async def test_new_fetch_cancels_pending(self):
        """Test start_fetch() cancels the previous pending fetch."""
        remote = MockRemoteSource(payload=payload_with_title("Slow"), delay_seconds=10)
        resolver = QuizResolver(remote, MockLocalSource())

        first = resolver.start_fetch()
        await asyncio.sleep(0)
        assert resolver.in_flight is True

        remote.delay_seconds = 0
        remote.payload = payload_with_title("Fast")
        second = resolver.start_fetch()
        event = await second

        assert first.cancelled()
        assert isinstance(event, QuizLoaded)
        assert event.quiz.title == "Fast"
        assert resolver.cached.title == "Fast"
        assert resolver.in_flight is False

    @pytest.mark.asyncio
    async def test_cancelled_fetch_leaves_cache(self):
        """Test cancellation mid-fetch never touches the cache."""
        remote = MockRemoteSource(payload=payload_with_title("First"))
        resolver = QuizResolver(remote, MockLocalSource())
        cached = await resolver.fetch_quiz()

        remote.delay_seconds = 10
        remote.payload = payload_with_title("Second")
        task = resolver.start_fetch()
        await asyncio.sleep(0)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert resolver.cached is cached

    @pytest.mark.asyncio
    async def test_close_cancels_pending(self):
        """Test close() cancels an outstanding fetch."""
        resolver = QuizResolver(MockRemoteSource(delay_seconds=10), MockLocalSource())
        task = resolver.start_fetch()
        await asyncio.sleep(0)

        await resolver.close()

        assert task.cancelled()
        assert resolver.in_flight is False
