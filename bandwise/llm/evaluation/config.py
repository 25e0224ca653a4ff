"""Scoring configuration: band table, word-count policies and fixed fallback bands."""

from __future__ import annotations

import decimal
import typing as t

import pydantic as p
import pydantic_settings as ps

from bandwise.model import BandScore, BaseModel


class BandStep(BaseModel):
    """Minimum percentage correct that earns `band`."""

    min_percent: decimal.Decimal
    band: BandScore


class WordTier(BaseModel):
    """Band given to a response below the policy minimum with at least `min_words` words."""

    min_words: int
    band: BandScore


class WordCountPolicy(ps.BaseSettings):
    """Heuristic band estimate for an open-ended response."""

    min_words: int
    bonus_words: int
    base_band: BandScore = 6.0
    step: BandScore = 0.5
    # checked in order, highest first
    tiers: list[WordTier]
    punctuation_bonus: bool = True
    cohesion_bonus: bool = True
    conclusion_bonus: bool = False


DEFAULT_BAND_TABLE: list[tuple[int, float]] = [
    (90, 9.0),
    (86, 8.5),
    (82, 8.0),
    (78, 7.5),
    (72, 7.0),
    (66, 6.5),
    (58, 6.0),
    (48, 5.5),
    (38, 5.0),
    (32, 4.5),
    (25, 4.0),
    (20, 3.5),
    (15, 3.0),
    (10, 2.5),
]


def _tiers(*pairs: tuple[int, float]) -> list[WordTier]:
    return [WordTier(min_words=w, band=b) for w, b in pairs]


class ScoringSettings(ps.BaseSettings):
    band_table: list[BandStep] = p.Field(
        default_factory=lambda: [BandStep(min_percent=decimal.Decimal(pct), band=band) for pct, band in DEFAULT_BAND_TABLE]
    )
    # band below the lowest threshold
    floor_band: BandScore = 1.0

    task1: WordCountPolicy = WordCountPolicy(
        min_words=150,
        bonus_words=170,
        tiers=_tiers((100, 5.0), (50, 4.0), (1, 3.0)),
    )
    task2: WordCountPolicy = WordCountPolicy(
        min_words=250,
        bonus_words=280,
        tiers=_tiers((200, 5.0), (100, 4.0), (1, 3.0)),
        conclusion_bonus=True,
    )
    speaking: WordCountPolicy = WordCountPolicy(
        min_words=120,
        bonus_words=250,
        tiers=_tiers((80, 5.0), (40, 4.0), (1, 3.0)),
        punctuation_bonus=False,
    )

    cohesive_devices: list[str] = ["however", "therefore", "moreover", "furthermore", "in addition"]
    conclusion_phrases: list[str] = ["in conclusion", "to summarize", "in summary"]

    # speaking with no response at all
    neutral_speaking_band: BandScore = 5.0
    # speaking answered only with recordings when no estimate could be obtained
    recording_band: BandScore = 6.0
    recording_pattern: str = r"^(?:(?:https?|blob|gs|s3|file)://|recording:)"

    # feedback tiers: high at or above, low at or below
    high_band: BandScore = 7.0
    low_band: BandScore = 4.0

    @p.field_validator("band_table")
    @classmethod
    def check_band_table(cls, v: list[BandStep]) -> list[BandStep]:
        for higher, lower in zip(v, v[1:]):
            if not (higher.min_percent > lower.min_percent and higher.band > lower.band):
                raise ValueError("band table must be strictly descending")
        return v

    @p.model_validator(mode="after")
    def check_floor(self) -> t.Self:
        if self.band_table and self.floor_band >= self.band_table[-1].band:
            raise ValueError("floor band must be below the lowest table band")
        return self
