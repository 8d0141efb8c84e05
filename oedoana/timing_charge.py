"""Timing/charge hits: TOT conversion, ordering and columnar export."""

from __future__ import annotations

import dataclasses
import struct
from collections.abc import Iterable
from dataclasses import dataclass

_TOT_THRESHOLD = 20.0
_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1


@dataclass
class TimingChargeData:
    """One detector hit with channel id, timing and charge."""

    id: int
    timing: float = 0.0
    charge: float = 0.0
    valid: bool = True


def tot_to_charge(tot: float) -> float:
    """Convert a time-over-threshold value into a charge."""
    if tot < _TOT_THRESHOLD:
        return 0.004667 * tot + 0.006667
    return 0.000469 * tot * tot - 0.01415 * tot + 0.19722


def convert_tot(hits: Iterable[TimingChargeData]) -> list[TimingChargeData]:
    """Return copies of the hits whose charge (holding TOT) is converted to charge."""
    return [dataclasses.replace(hit, charge=tot_to_charge(hit.charge)) for hit in hits]


def sort_by_charge(
    hits: Iterable[TimingChargeData], descending: bool = False
) -> list[TimingChargeData]:
    """Return the hits ordered by charge."""
    return sorted(hits, key=lambda hit: hit.charge, reverse=descending)


def charges(hits: Iterable[TimingChargeData]) -> list[float]:
    """Charges of the hits, in order."""
    return [float(hit.charge) for hit in hits]


def ids(hits: Iterable[TimingChargeData]) -> list[float]:
    """Channel ids of the hits, in order, as floating-point values."""
    return [float(hit.id) for hit in hits]


def _float32(value: float) -> float:
    return struct.unpack("f", struct.pack("f", value))[0]


def _int32(value: int) -> int:
    value = int(value)
    if not _INT32_MIN <= value <= _INT32_MAX:
        raise ValueError(f"id {value} does not fit in a 32-bit integer")
    return value


class TimingChargeColumns:
    """Collects per-event hit lists into list-valued columns.

    Columns are ``<name>_tot`` (float32), ``<name>_timing`` (float32) and
    ``<name>_id`` (int32); each event contributes one list to each column.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._tot: list[list[float]] = []
        self._timing: list[list[float]] = []
        self._id: list[list[int]] = []

    def append_event(self, hits: Iterable[TimingChargeData]) -> None:
        """Append one event; its hits become one list entry in every column."""
        tot_row: list[float] = []
        timing_row: list[float] = []
        id_row: list[int] = []
        for hit in hits:
            tot_row.append(_float32(hit.charge))
            timing_row.append(_float32(hit.timing))
            id_row.append(_int32(hit.id))
        self._tot.append(tot_row)
        self._timing.append(timing_row)
        self._id.append(id_row)

    def __len__(self) -> int:
        return len(self._tot)

    def finalize(self) -> dict[str, list[list]]:
        """Return the collected columns and start a fresh collection."""
        columns = {
            f"{self.name}_tot": self._tot,
            f"{self.name}_timing": self._timing,
            f"{self.name}_id": self._id,
        }
        self._tot, self._timing, self._id = [], [], []
        return columns