"""
Progress store

Persists a resume checkpoint (current question index plus selected option
ids per question) so an unfinished quiz survives a restart.

The index and the answers live under two separate keys and are written one
after the other. A crash between the two writes can pair a new answers map
with an old index; the answers key is the "has progress" sentinel.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional

from ..errors import StorageFailure
from .base import KeyValueStore

logger = logging.getLogger(__name__)

INDEX_KEY = "progress.index"
ANSWERS_KEY = "progress.answers"


@dataclass(frozen=True)
class ProgressCheckpoint:
    """Persisted snapshot of a flow: where the user is and what they picked."""
    index: int
    answers: dict[str, list[str]] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {"index": self.index, "answers": self.answers}


def _answers_to_lists(answers: Mapping[str, Iterable[str]]) -> dict[str, list[str]]:
    # Sorted so the same answer set always serializes the same way
    return {qid: sorted(ids) for qid, ids in answers.items()}


def _parse_answers(raw) -> dict[str, list[str]]:
    if not isinstance(raw, str):
        raise StorageFailure(f"Stored answers must be a JSON string, got {type(raw).__name__}")

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise StorageFailure(f"Stored answers are corrupt: {e}") from e

    if not isinstance(data, dict):
        raise StorageFailure("Stored answers must be an object")

    for qid, ids in data.items():
        if not isinstance(ids, list) or not all(isinstance(i, str) for i in ids):
            raise StorageFailure(f"Stored answers for '{qid}' must be a list of strings")
    return data


class ProgressStore:
    """
    Saves, loads and clears the resume checkpoint.

    Single-writer: callers must not save/clear concurrently from several
    threads without their own serialization.
    """

    def __init__(
        self,
        store: KeyValueStore,
        index_key: str = INDEX_KEY,
        answers_key: str = ANSWERS_KEY,
    ):
        self.store = store
        self.index_key = index_key
        self.answers_key = answers_key

    def save(self, index: int, answers: Mapping[str, Iterable[str]]) -> None:
        """
        Persist the current position and answers.

        Raises:
            StorageFailure: If the answers cannot be serialized or written
        """
        try:
            encoded = json.dumps(_answers_to_lists(answers))
        except (TypeError, ValueError) as e:
            raise StorageFailure(f"Could not serialize answers: {e}") from e

        self.store.set(self.index_key, index)
        self.store.set(self.answers_key, encoded)
        logger.debug(f"Saved progress at index {index} ({len(answers)} answered)")

    def save_checkpoint(self, checkpoint: ProgressCheckpoint) -> None:
        self.save(checkpoint.index, checkpoint.answers)

    def load(self) -> Optional[ProgressCheckpoint]:
        """
        Load the saved checkpoint.

        Returns:
            The checkpoint, or None if nothing was saved

        Raises:
            StorageFailure: If stored data is corrupt
        """
        raw_answers = self.store.get(self.answers_key)
        if raw_answers is None:
            return None

        answers = _parse_answers(raw_answers)

        index = self.store.get(self.index_key)
        if index is None:
            index = 0
        elif isinstance(index, bool) or not isinstance(index, int):
            raise StorageFailure(f"Stored index must be an integer, got {index!r}")

        return ProgressCheckpoint(index=index, answers=answers)

    def clear(self) -> None:
        """Remove both keys; load() returns None afterwards."""
        self.store.remove(self.index_key)
        self.store.remove(self.answers_key)
        logger.debug("Cleared saved progress")
