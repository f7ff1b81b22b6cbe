"""
Mock quiz sources for testing

Return configurable payloads without touching the network or the disk.
"""

import asyncio
import json
from dataclasses import dataclass, field
from typing import Optional

from ..errors import NetworkFailure, NotFound, QuizError
from .base import LocalQuizSource, RemoteQuizSource


def sample_quiz_dict() -> dict:
    """A small two-question quiz: a checklist followed by a color question."""
    return {
        "version": 1,
        "title": "Style quiz",
        "questions": [
            {
                "id": "q1",
                "type": "checkbox",
                "navTitle": "About you",
                "title": "What brings you here?",
                "options": [
                    {"type": "text", "id": "a", "title": "Work outfits"},
                    {"type": "text", "id": "b", "title": "Weekend looks", "subtitle": "Casual"},
                ],
            },
            {
                "id": "q2",
                "type": "color",
                "navTitle": "Colors",
                "title": "Pick your colors",
                "options": [
                    {"type": "color", "id": "red", "title": "Red", "hex": "#FF0000"},
                    {"type": "color", "id": "blue", "hex": "#0000FF"},
                ],
            },
        ],
    }


def sample_quiz_payload() -> bytes:
    return json.dumps(sample_quiz_dict()).encode("utf-8")


@dataclass
class MockRemoteSource(RemoteQuizSource):
    """
    Mock remote source.

    Returns `payload` (the sample quiz by default), or raises `error` when
    `fail` is set.
    """

    payload: Optional[bytes] = None
    fail: bool = False
    error: Optional[QuizError] = None
    delay_seconds: float = 0.0
    calls: int = field(default=0, init=False)

    @property
    def name(self) -> str:
        return "mock-remote"

    async def fetch(self) -> bytes:
        self.calls += 1

        if self.delay_seconds > 0:
            await asyncio.sleep(self.delay_seconds)

        if self.fail:
            raise self.error or NetworkFailure("Simulated remote failure")

        return self.payload if self.payload is not None else sample_quiz_payload()


@dataclass
class MockLocalSource(LocalQuizSource):
    """Mock bundled source. A missing payload behaves like a missing file."""

    payload: Optional[bytes] = None
    missing: bool = False
    calls: int = field(default=0, init=False)

    @property
    def name(self) -> str:
        return "mock-local"

    def load(self) -> bytes:
        self.calls += 1
        if self.missing:
            raise NotFound("Simulated missing bundled quiz")
        return self.payload if self.payload is not None else sample_quiz_payload()
