"""
Quiz sources

Remote-config and bundled collaborators that produce raw quiz payloads.
"""

from .base import RemoteQuizSource, LocalQuizSource
from .remote import RemoteConfigSource
from .local import BundledQuizSource, BUNDLED_QUIZ_PATH
from .mock import MockRemoteSource, MockLocalSource

__all__ = [
    "RemoteQuizSource",
    "LocalQuizSource",
    "RemoteConfigSource",
    "BundledQuizSource",
    "BUNDLED_QUIZ_PATH",
    "MockRemoteSource",
    "MockLocalSource",
]
