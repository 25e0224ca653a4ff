"""Band conversion and aggregation.

All arithmetic is done on `decimal.Decimal` so that table boundaries and the
half-band grid are exact.
"""

from __future__ import annotations

import decimal
import typing as t

from .config import BandStep, ScoringSettings

MIN_BAND = 0.0
MAX_BAND = 9.0

_DEFAULT_SETTINGS = ScoringSettings()


def percentage_to_band(
    correct: int,
    total: int,
    table: t.Sequence[BandStep] | None = None,
    floor: float | None = None,
) -> float | None:
    """Convert a raw objective tally into a band.

    Thresholds are inclusive; a module with no questions has no band.
    """
    if total <= 0:
        return None
    if table is None:
        table = _DEFAULT_SETTINGS.band_table
    if floor is None:
        floor = _DEFAULT_SETTINGS.floor_band

    # correct / total * 100 >= threshold, without dividing
    scaled = decimal.Decimal(correct) * 100
    for step in table:
        if scaled >= step.min_percent * total:
            return step.band
    return floor


def round_band(value: float | decimal.Decimal) -> float:
    """Round to the nearest half band, halves rounding up."""
    doubled = (decimal.Decimal(str(value)) * 2).quantize(decimal.Decimal(1), rounding=decimal.ROUND_HALF_UP)
    return float(doubled / 2)


def clamp_band(value: float) -> float:
    return min(max(value, MIN_BAND), MAX_BAND)


def snap_band(value: float) -> float:
    """Clamp to the band scale and round onto the half-band grid."""
    return round_band(clamp_band(value))


def overall_band(scores: t.Iterable[float | None]) -> float | None:
    """Mean of the present scores rounded half-up to the half band; None without scores."""
    present = [decimal.Decimal(str(s)) for s in scores if s is not None]
    if not present:
        return None
    return round_band(sum(present) / len(present))
