# src/habitui/tasks/difficulty.py

from __future__ import annotations

"""
Difficulty codec.

Habitica encodes task difficulty as a float ("priority" on the wire). Encoding
is exact; decoding is tolerant because the service may hand back slightly
perturbed floats. Anything that is not near one of the four anchors decodes
as HARD.
"""

from enum import Enum, IntEnum

from ..errors import Malformed

DECODE_EPSILON = 0.01


class Difficulty(IntEnum):
    TRIVIAL = 0
    EASY = 1
    MEDIUM = 2
    HARD = 3

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @classmethod
    def from_label(cls, raw: str) -> Difficulty:
        key = (raw or "").strip().upper()
        try:
            return cls[key]
        except KeyError:
            raise Malformed(f"Incorrect difficulty value: {raw!r}") from None

    def next(self) -> Difficulty:
        members = list(Difficulty)
        return members[(self.value + 1) % len(members)]

    def previous(self) -> Difficulty:
        members = list(Difficulty)
        return members[(self.value - 1) % len(members)]

    def __str__(self) -> str:
        return self.label


_WIRE: dict[Difficulty, float] = {
    Difficulty.TRIVIAL: 0.1,
    Difficulty.EASY: 1.0,
    Difficulty.MEDIUM: 1.5,
    Difficulty.HARD: 2.0,
}


def encode(difficulty: Difficulty) -> float:
    return _WIRE[difficulty]


def decode(value: float) -> Difficulty:
    # HARD's own anchor is covered by the fallback.
    for difficulty in (Difficulty.TRIVIAL, Difficulty.EASY, Difficulty.MEDIUM):
        if abs(_WIRE[difficulty] - value) < DECODE_EPSILON:
            return difficulty
    return Difficulty.HARD


class PriorityTier(str, Enum):
    LOW = "low"
    MID = "mid"
    HIGH = "high"


def tier_of(difficulty: Difficulty) -> PriorityTier:
    if difficulty == Difficulty.HARD:
        return PriorityTier.HIGH
    if difficulty == Difficulty.MEDIUM:
        return PriorityTier.MID
    return PriorityTier.LOW
