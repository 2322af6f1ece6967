"""Score, level and grade bookkeeping."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple

from .board import Board


MAX_LEVEL_GAIN = 999
BRAVO_MULTIPLIER = 4


class Grade(Enum):
    """Grades from lowest to highest."""

    N9 = 0
    N8 = 1
    N7 = 2
    N6 = 3
    N5 = 4
    N4 = 5
    N3 = 6
    N2 = 7
    N1 = 8
    S1 = 9
    S2 = 10
    S3 = 11
    S4 = 12
    S5 = 13
    S6 = 14
    S7 = 15
    S8 = 16
    S9 = 17
    GM = 18

    def __str__(self) -> str:
        return self.name


# Minimum score for each grade, highest first.  Anything lower is N9.
GRADE_THRESHOLDS: Tuple[Tuple[int, Grade], ...] = (
    (120_000, Grade.S9),
    (100_000, Grade.S8),
    (82_000, Grade.S7),
    (66_000, Grade.S6),
    (52_000, Grade.S5),
    (40_000, Grade.S4),
    (30_000, Grade.S3),
    (22_000, Grade.S2),
    (16_000, Grade.S1),
    (12_000, Grade.N1),
    (8_000, Grade.N2),
    (5_500, Grade.N3),
    (3_500, Grade.N4),
    (2_000, Grade.N5),
    (1_400, Grade.N6),
    (800, Grade.N7),
    (400, Grade.N8),
)


class Checkpoint(str, Enum):
    THREE_HUNDRED = "three_hundred"
    FIVE_HUNDRED = "five_hundred"
    GAME_END = "game_end"


@dataclass(frozen=True)
class GMCondition:
    """Score and elapsed time (seconds) captured at a checkpoint."""

    score: int
    time: float


# Minimum score and elapsed time at each checkpoint for the GM grade.  The
# score may equal the minimum; the time must exceed it.
GM_THRESHOLDS: Dict[Checkpoint, GMCondition] = {
    Checkpoint.THREE_HUNDRED: GMCondition(score=12_000, time=4 * 60 + 15),
    Checkpoint.FIVE_HUNDRED: GMCondition(score=40_000, time=7 * 60 + 30),
    Checkpoint.GAME_END: GMCondition(score=126_000, time=13 * 60 + 30),
}


@dataclass
class GMRequirements:
    three_hundred: Optional[GMCondition] = None
    five_hundred: Optional[GMCondition] = None
    game_end: Optional[GMCondition] = None

    def get(self, checkpoint: Checkpoint) -> Optional[GMCondition]:
        return getattr(self, checkpoint.value)

    def set(self, checkpoint: Checkpoint, condition: GMCondition) -> None:
        setattr(self, checkpoint.value, condition)


@dataclass
class PlayerRecord:
    score: int = 0
    grade: Grade = Grade.N9
    gm_requirements: GMRequirements = field(default_factory=GMRequirements)
    start_time: float = 0.0


def line_clear_score(
    level: int,
    lines_cleared: int,
    frames_down_held: int,
    combo: int,
    is_bravo: bool,
) -> int:
    """Return the points awarded for a lock.

    ``ceil((level + lines) / 4)`` plus the soft drop frames, times the lines,
    the combo and the bravo multiplier.
    """

    base = math.ceil((level + lines_cleared) / 4)
    bravo = BRAVO_MULTIPLIER if is_bravo else 1
    return (base + frames_down_held) * lines_cleared * combo * bravo


def next_level(level: int, lines_cleared: int) -> int:
    return level + min(lines_cleared, MAX_LEVEL_GAIN)


def is_gm(requirements: GMRequirements) -> bool:
    """Return ``True`` if all checkpoints are present and good enough."""

    for checkpoint, minimum in GM_THRESHOLDS.items():
        reached = requirements.get(checkpoint)
        if reached is None:
            return False
        if reached.score < minimum.score or reached.time <= minimum.time:
            return False
    return True


def grade_for_score(score: int) -> Grade:
    for threshold, grade in GRADE_THRESHOLDS:
        if score >= threshold:
            return grade
    return Grade.N9


def grade_for(record: PlayerRecord) -> Grade:
    if is_gm(record.gm_requirements):
        return Grade.GM
    return grade_for_score(record.score)


def update_record(
    record: PlayerRecord,
    board: Board,
    level: int,
    lines_cleared: int,
    frames_down_held: int,
    combo: int,
) -> int:
    """Add the score for a lock to ``record`` and return the delta.

    ``board`` must already have had its lines cleared; an empty board means a
    bravo.
    """

    delta = line_clear_score(level, lines_cleared, frames_down_held, combo, board.is_empty())
    record.score += delta
    record.grade = grade_for(record)
    return delta


def record_checkpoint(record: PlayerRecord, checkpoint: Checkpoint | str, now: float) -> GMCondition:
    """Store the current score and elapsed time under ``checkpoint``.

    Raises:
        ValueError: If ``checkpoint`` is not a known checkpoint name.
    """

    checkpoint = Checkpoint(checkpoint)
    condition = GMCondition(score=record.score, time=now - record.start_time)
    record.gm_requirements.set(checkpoint, condition)
    record.grade = grade_for(record)
    return condition
