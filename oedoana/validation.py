"""Charge-based selection of detector hits."""

from __future__ import annotations

import copy
from collections.abc import Iterable, Sequence
from typing import Any


def _charge_of(hit: Any) -> float:
    try:
        return hit.charge
    except AttributeError:
        raise TypeError(f"hit of type {type(hit).__name__} has no charge") from None


def _copy_with_validity(hit: Any, valid: bool) -> Any:
    out = copy.copy(hit)
    out.valid = valid
    return out


class ChargeValidator:
    """Marks hits valid when their charge lies in [min, max].

    Hits outside the range are dropped, or kept and marked invalid when
    ``output_invalid`` is set. The result is ordered by descending charge.
    """

    def __init__(self, charge_range: Sequence[float], output_invalid: bool = False) -> None:
        if len(charge_range) != 2:
            raise ValueError(f"Invalid size of range : {len(charge_range)}")
        low, high = charge_range
        if low > high:
            raise ValueError(
                f"Invalid order of range : [0] {low:f} should be less than  [1] {high:f}"
            )
        self.low = low
        self.high = high
        self.output_invalid = output_invalid

    def process(self, hits: Iterable[Any]) -> list[Any]:
        """Return validated copies of the hits, sorted by descending charge."""
        output = []
        for hit in hits:
            charge = _charge_of(hit)
            if charge < self.low or self.high < charge:
                if not self.output_invalid:
                    continue
                output.append(_copy_with_validity(hit, False))
            else:
                output.append(_copy_with_validity(hit, True))
        output.sort(key=lambda hit: hit.charge, reverse=True)
        return output


class ThresholdValidator:
    """Keeps copies of the hits whose charge is not below a threshold."""

    def __init__(self, threshold: float = 0.0) -> None:
        self.threshold = threshold

    def process(self, hits: Iterable[Any]) -> list[Any]:
        """Return copies of the hits passing the threshold, in input order."""
        return [
            copy.copy(hit) for hit in hits if not _charge_of(hit) < self.threshold
        ]