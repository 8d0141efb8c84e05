"""Ion chamber: average charge over the leading channels."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any


class IonChamberProcessor:
    """Averages channel charges up to the first one below ``drop_ratio`` times channel 0."""

    def __init__(self, num_channels: int = 6, drop_ratio: float = 0.0) -> None:
        self.num_channels = num_channels
        self.drop_ratio = drop_ratio

    def process(self, hits: Iterable[Any]) -> float | None:
        """Return the average charge, or ``None`` without hits or channels.

        The result is NaN when channel 0 itself falls below the cut.
        """
        hits = list(hits)
        if not hits:
            return None

        values = [0.0] * self.num_channels
        for hit in hits:
            if 0 <= hit.id < self.num_channels:
                values[hit.id] = hit.charge
        if not values:
            return None

        cut = values[0] * self.drop_ratio
        kept = []
        for value in values:
            if value < cut:
                break
            kept.append(value)
        if not kept:
            return float("nan")
        return sum(kept) / len(kept)