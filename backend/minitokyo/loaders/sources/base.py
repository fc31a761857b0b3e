from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

R = TypeVar("R")


@dataclass(frozen=True)
class BaseFeed(ABC, Generic[R]):
    """
    One upstream locator with a known payload shape.
    Each feed type maps its own shape into one canonical record type.
    """

    source: str
    url: str

    @abstractmethod
    def normalize(self, payload: Any) -> list[R]:
        """Reshape the decoded payload of ``url`` into canonical records."""
        raise NotImplementedError
