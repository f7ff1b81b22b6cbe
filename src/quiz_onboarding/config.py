"""
quiz-onboarding configuration

Remote-config endpoint, fallback resource and progress storage settings live
here. Environment variables override defaults for deployment flexibility.
"""

import os
from dataclasses import dataclass, field, replace
from typing import Optional

from .storage.progress import ANSWERS_KEY, INDEX_KEY


@dataclass
class RemoteConfig:
    """Where the quiz definition is fetched from"""
    url: str = os.getenv("QUIZ_REMOTE_URL", "")  # Empty = remote disabled
    parameter_key: str = os.getenv("QUIZ_REMOTE_KEY", "quiz_config")
    api_key: str = os.getenv("QUIZ_REMOTE_API_KEY", "")
    timeout_seconds: float = float(os.getenv("QUIZ_REMOTE_TIMEOUT", "10.0"))

    @property
    def enabled(self) -> bool:
        return bool(self.url)


@dataclass
class LocalConfig:
    """Bundled fallback quiz"""
    fallback_path: str = os.getenv("QUIZ_FALLBACK_PATH", "")  # Empty = packaged quiz_mock.json


@dataclass
class StorageConfig:
    """Resume checkpoint persistence"""
    progress_path: str = os.getenv("QUIZ_PROGRESS_PATH", "~/.quiz_onboarding/progress.json")
    index_key: str = INDEX_KEY
    answers_key: str = ANSWERS_KEY


@dataclass
class Config:
    """Master config: import this"""
    remote: RemoteConfig = field(default_factory=RemoteConfig)
    local: LocalConfig = field(default_factory=LocalConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)

    @classmethod
    def offline_mode(cls, base: Optional["Config"] = None) -> "Config":
        """Skip remote config entirely, always use the bundled quiz"""
        base = base or cls()
        return replace(base, remote=replace(base.remote, url=""))


# Singleton
config = Config()
