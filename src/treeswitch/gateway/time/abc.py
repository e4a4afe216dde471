"""Abstract time provider so polling loops can be tested without sleeping."""

from abc import ABC, abstractmethod


class Time(ABC):
    """Abstract interface for time operations."""

    @abstractmethod
    def sleep(self, seconds: float) -> None:
        """Block the calling thread for the given number of seconds."""
        ...
