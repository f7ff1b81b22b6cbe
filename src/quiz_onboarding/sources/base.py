"""
Base protocol for quiz sources

A remote source fetches the quiz payload over the network; a local source
loads the bundled copy used when the remote one is unreachable. Both return
raw bytes; decoding belongs to the resolver.
"""

from abc import ABC, abstractmethod


class RemoteQuizSource(ABC):
    """
    Abstract remote quiz source.

    fetch() may suspend and may be cancelled by the caller.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Source name (e.g., 'remote-config', 'mock')."""
        pass

    @abstractmethod
    async def fetch(self) -> bytes:
        """
        Fetch the quiz payload.

        Returns:
            UTF-8 JSON bytes in the quiz wire format

        Raises:
            NetworkFailure: On transport errors
            NotFound: When the remote holds no quiz
        """
        pass

    async def close(self) -> None:
        """Release any network resources."""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"


class LocalQuizSource(ABC):
    """Abstract local (bundled) quiz source."""

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    def load(self) -> bytes:
        """
        Load the bundled quiz payload.

        Raises:
            NotFound: If the bundled resource is missing
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"
