"""Detector efficiency figures, missing-channel search and shift-report text."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

# (label, histogram name, title) for the SRPPAC multiplicity report.
_SRPPAC_PLANES = (
    ("ux", "srppacu_x_ent", "X upstream"),
    ("uy", "srppacu_y_ent", "Y upstream"),
    ("dx", "srppacd_x_ent", "X downstream"),
    ("dy", "srppacd_y_ent", "Y downstream"),
)

_COLUMN_WIDTH = 11
_MEAN_HEADERS = ("x_q0_mean", "y_q0_mean", "x_ent_mean", "x_ent_mean")


def multiplicity_efficiency(
    bin_contents: Sequence[float], entries: float, excluded_bins: int = 1
) -> float:
    """Fraction of entries outside the first ``excluded_bins`` bins.

    ``bin_contents[0]`` is the first (lowest-multiplicity) bin.
    """
    if entries <= 0:
        raise ValueError(f"histogram has no entries ({entries})")
    if not 0 <= excluded_bins <= len(bin_contents):
        raise ValueError(
            f"cannot exclude {excluded_bins} bins from {len(bin_contents)} bins"
        )
    return 1.0 - sum(bin_contents[:excluded_bins]) / entries


def srppac_efficiency_report(
    histograms: Mapping[str, tuple[Sequence[float], float]]
) -> str:
    """Report SRPPAC efficiencies excluding 1, 2 and 3 leading multiplicity bins.

    ``histograms`` maps histogram names (``srppacu_x_ent``, ``srppacu_y_ent``,
    ``srppacd_x_ent``, ``srppacd_y_ent``) to ``(bin_contents, entries)``.
    """
    lines = []
    for label, name, title in _SRPPAC_PLANES:
        try:
            contents, entries = histograms[name]
        except KeyError:
            raise KeyError(f"histogram {name} not found") from None
        effs = [multiplicity_efficiency(contents, entries, n) for n in (1, 2, 3)]
        lines.append(f"# -- Efficiency of {title} --")
        # The upstream X lines carry the historical "ux1" label for orders 1 and 2.
        names = (
            ("uxeff0", "ux1eff1", "ux1eff2")
            if label == "ux"
            else tuple(f"{label}eff{n}" for n in range(3))
        )
        for key, value in zip(names, effs):
            lines.append(f"{key}:  {value:g}")
    return "\n".join(lines) + "\n"


def mwdc_efficiency(zero_bin: float, entries: float) -> float:
    """Efficiency of an MWDC plane from the content of its no-hit bin."""
    return multiplicity_efficiency([zero_bin], entries, 1)


def missing_ids(present_ids: Iterable[int], count: int) -> list[int]:
    """Channel ids in ``range(count)`` that never appear in ``present_ids``."""
    if count < 0:
        raise ValueError(f"channel count must not be negative: {count}")
    seen = set(present_ids)
    return [channel for channel in range(count) if channel not in seen]


def format_mean_table(
    rows: Iterable[tuple[str, float, float, float, float]]
) -> str:
    """Format detector mean values as fixed-width columns with 3 decimals.

    Each row is ``(name, x_q0_mean, y_q0_mean, x_ent_mean, y_ent_mean)``.
    """
    width = _COLUMN_WIDTH
    lines = ["", "".rjust(width) + "".join(h.rjust(width) for h in _MEAN_HEADERS)]
    for name, *values in rows:
        if len(values) != 4:
            raise ValueError(f"row {name!r} needs 4 values, got {len(values)}")
        lines.append(
            str(name).rjust(width) + "".join(f"{v:{width}.3f}" for v in values)
        )
    return "\n".join(lines) + "\n"


def figure_file_name(
    prefix: str, run_name: str, run_number: str, counter: int
) -> str:
    """PNG file name for a shift figure; the counter is padded to two digits."""
    count = str(counter)
    return f"{prefix}_{run_name}{run_number}_{count.rjust(2, '0')}.png"