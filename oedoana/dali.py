"""DALI gamma-ray array: per-event energy ranking and add-back."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, fields
from typing import Any

NUM_CRYSTALS = 256

# Polar angle (degrees) for each of the 16 strips; only the first is used.
THETA_TABLE = (
    9.19, 10.18, 11.19, 12.21,
    13.26, 14.33, 15.42, 16.52,
    17.65, 18.79, 19.95, 21.13,
    22.32, 23.54, 24.77, 26.00,
)


@dataclass
class DaliData:
    """Summary of one DALI event; unset fields are ``None``."""

    id: int | None = None
    energy1: float | None = None
    energy2: float | None = None
    total_e: float | None = None
    theta: float | None = None
    pos1: int | None = None
    pos2: int | None = None

    def clear(self) -> None:
        """Reset every field to the unset state."""
        for field in fields(self):
            setattr(self, field.name, None)


def split_fields(text: str, delimiter: str) -> list[str]:
    """Split ``text`` on ``delimiter``; a single trailing empty field is dropped."""
    if not text:
        return []
    parts = text.split(delimiter)
    if len(parts) > 1 and parts[-1] == "":
        parts.pop()
    return parts


class DaliProcessor:
    """Ranks crystal energies of an event and sums them (add-back)."""

    def process(self, hits: Iterable[Any]) -> DaliData | None:
        """Return the event summary, or ``None`` when there are no hits."""
        hits = list(hits)
        if not hits:
            return None

        energies = [0.0] * NUM_CRYSTALS
        addback = 0.0
        for hit in hits:
            crystal = hit.id
            if 0 <= crystal < NUM_CRYSTALS:
                energies[crystal] = hit.charge
                addback += hit.charge

        ranked = sorted(enumerate(energies), key=lambda item: (-item[1], item[0]))
        (pos1, energy1), (pos2, energy2) = ranked[0], ranked[1]
        return DaliData(
            energy1=energy1,
            energy2=energy2,
            pos1=pos1,
            pos2=pos2,
            theta=THETA_TABLE[0],
            total_e=addback,
        )