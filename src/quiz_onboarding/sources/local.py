"""
Bundled quiz source

Loads the quiz shipped with the package (or any JSON file on disk). Used as
the fallback when remote config cannot be reached.
"""

from pathlib import Path
from typing import Optional, Union

from ..errors import NotFound
from .base import LocalQuizSource

# Quiz shipped inside the package
BUNDLED_QUIZ_PATH = Path(__file__).resolve().parent.parent / "data" / "quiz_mock.json"


class BundledQuizSource(LocalQuizSource):
    """Reads the quiz payload from a JSON file."""

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self.path = Path(path).expanduser() if path else BUNDLED_QUIZ_PATH

    @property
    def name(self) -> str:
        return "bundled"

    def load(self) -> bytes:
        try:
            return self.path.read_bytes()
        except FileNotFoundError as e:
            raise NotFound(f"Bundled quiz not found at {self.path}") from e
        except OSError as e:
            raise NotFound(f"Could not read bundled quiz {self.path}: {e}") from e

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(path={str(self.path)!r})"
