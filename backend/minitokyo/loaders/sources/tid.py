from dataclasses import dataclass
from typing import Any

from minitokyo.loaders.sources.base import BaseFeed


@dataclass(frozen=True)
class TrainIdFeed(BaseFeed[dict]):
    """
    Train identification feed. Records already use the canonical short keys
    and are kept exactly as received (no defaults, no type coercion).
    """

    def normalize(self, payload: Any) -> list[dict]:
        return [dict(t) for t in payload or []]
