"""
Tests for quiz sources.
"""

import json

import httpx
import pytest

from quiz_onboarding.config import RemoteConfig
from quiz_onboarding.errors import NetworkFailure, NotFound
from quiz_onboarding.sources.local import BUNDLED_QUIZ_PATH, BundledQuizSource
from quiz_onboarding.sources.mock import MockLocalSource, MockRemoteSource, sample_quiz_dict, sample_quiz_payload
from quiz_onboarding.sources.remote import RemoteConfigSource

URL = "https://config.example.com/quiz"


def make_remote(handler, **settings) -> RemoteConfigSource:
    """Remote source whose HTTP client is served by `handler`."""
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return RemoteConfigSource(RemoteConfig(url=URL, **settings), client=client)


class TestRemoteConfigSource:
    """Tests for RemoteConfigSource."""

    @pytest.mark.asyncio
    async def test_parameter_string(self):
        """Test the quiz is read from the quiz_config parameter."""
        quiz_text = json.dumps(sample_quiz_dict())

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"quiz_config": quiz_text})

        async with make_remote(handler) as source:
            payload = await source.fetch()

        assert json.loads(payload) == sample_quiz_dict()

    @pytest.mark.asyncio
    async def test_firebase_template(self):
        """Test Firebase-style parameters.<key>.defaultValue.value."""
        quiz_text = json.dumps(sample_quiz_dict())

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={
                "parameters": {"quiz_config": {"defaultValue": {"value": quiz_text}}},
            })

        async with make_remote(handler) as source:
            payload = await source.fetch()

        assert json.loads(payload) == sample_quiz_dict()

    @pytest.mark.asyncio
    async def test_custom_parameter_key(self):
        """Test a non-default parameter key."""
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"onboarding": json.dumps(sample_quiz_dict())})

        async with make_remote(handler, parameter_key="onboarding") as source:
            payload = await source.fetch()

        assert json.loads(payload)["version"] == 1

    @pytest.mark.asyncio
    async def test_quiz_served_directly(self):
        """Test an endpoint that returns the quiz JSON itself."""
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=sample_quiz_payload())

        async with make_remote(handler) as source:
            payload = await source.fetch()

        assert payload == sample_quiz_payload()

    @pytest.mark.asyncio
    async def test_missing_parameter(self):
        """Test a response without the quiz parameter is NotFound."""
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"other_flag": "true"})

        async with make_remote(handler) as source:
            with pytest.raises(NotFound, match="quiz_config"):
                await source.fetch()

    @pytest.mark.asyncio
    async def test_parameter_not_an_object(self):
        """Test a template parameter that is a bare string is NotFound."""
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"parameters": {"quiz_config": "oops"}})

        async with make_remote(handler) as source:
            with pytest.raises(NotFound, match="malformed"):
                await source.fetch()

    @pytest.mark.asyncio
    async def test_default_value_not_an_object(self):
        """Test a template defaultValue that is a bare string is NotFound."""
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={
                "parameters": {"quiz_config": {"defaultValue": "oops"}},
            })

        async with make_remote(handler) as source:
            with pytest.raises(NotFound, match="malformed"):
                await source.fetch()

    @pytest.mark.asyncio
    async def test_http_error(self):
        """Test HTTP errors map to NetworkFailure."""
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503)

        async with make_remote(handler) as source:
            with pytest.raises(NetworkFailure, match="503"):
                await source.fetch()

    @pytest.mark.asyncio
    async def test_transport_error(self):
        """Test connection errors map to NetworkFailure."""
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with make_remote(handler) as source:
            with pytest.raises(NetworkFailure, match="request failed"):
                await source.fetch()

    @pytest.mark.asyncio
    async def test_disabled_without_url(self):
        """Test an empty URL means no remote quiz."""
        source = RemoteConfigSource(RemoteConfig(url=""))

        with pytest.raises(NotFound):
            await source.fetch()

    @pytest.mark.asyncio
    async def test_api_key_header(self):
        """Test the lazily built client sends the API key."""
        source = RemoteConfigSource(RemoteConfig(url=URL, api_key="secret"))
        client = source._get_client()

        assert client.headers["Authorization"] == "Bearer secret"
        await source.close()
        assert source._client is None

    def test_name(self):
        """Test source name."""
        assert RemoteConfigSource(RemoteConfig(url=URL)).name == "remote-config"


class TestBundledQuizSource:
    """Tests for BundledQuizSource."""

    def test_default_path(self):
        """Test the packaged quiz is the default."""
        source = BundledQuizSource()

        assert source.path == BUNDLED_QUIZ_PATH
        assert json.loads(source.load())["version"] == 1

    def test_custom_path(self, tmp_path):
        """Test loading from a given file."""
        path = tmp_path / "quiz.json"
        path.write_bytes(sample_quiz_payload())

        assert BundledQuizSource(path).load() == sample_quiz_payload()

    def test_missing_file(self, tmp_path):
        """Test a missing file is NotFound."""
        with pytest.raises(NotFound):
            BundledQuizSource(tmp_path / "nope.json").load()


class TestMockSources:
    """Tests for the mock sources."""

    @pytest.mark.asyncio
    async def test_remote_default_payload(self):
        """Test the mock serves the sample quiz by default."""
        source = MockRemoteSource()

        assert await source.fetch() == sample_quiz_payload()
        assert source.calls == 1

    @pytest.mark.asyncio
    async def test_remote_failure(self):
        """Test the mock can simulate a transport failure."""
        source = MockRemoteSource(fail=True)

        with pytest.raises(NetworkFailure):
            await source.fetch()

    def test_local_missing(self):
        """Test the mock can simulate a missing bundle."""
        with pytest.raises(NotFound):
            MockLocalSource(missing=True).load()
