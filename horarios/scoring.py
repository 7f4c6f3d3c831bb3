# horarios/scoring.py
"""
Puntuación y ranking de combinaciones de cursos.

score = créditos*10 + obligatorios*20 - conflictos*50 + equilibrio*10, con
mínimo 0. El equilibrio premia sesiones repartidas en los 6 días: menor
varianza del conteo diario implica mayor bonificación.
"""
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, TypeVar

import numpy as np

from .config import PlannerConfig, resolve_shift_for_hour
from .conflicts import detect_conflicts
from .model import N_DAYS, Course, Selection


@dataclass(frozen=True)
class ScoreBreakdown:
    credits_total: int
    mandatory_count: int
    conflict_count: int
    distribution_bonus: float
    score: int


def day_distribution(courses: Iterable[Course]) -> np.ndarray:
    """Conteo de sesiones semanales por día (índice 0=Lunes .. 5=Sábado)."""
    counts = np.zeros(N_DAYS, dtype=int)
    for course in courses:
        for block in course.time_blocks:
            counts[int(block.day)] += 1
    return counts


def shift_distribution(courses: Iterable[Course], cfg: Optional[PlannerConfig] = None) -> Dict[str, int]:
    bounds = cfg.shift_bounds if cfg else None
    counts = {"M": 0, "T": 0, "N": 0}
    for course in courses:
        for block in course.time_blocks:
            turn = resolve_shift_for_hour(block.start_hour, bounds)
            counts[turn] = counts.get(turn, 0) + 1
    return counts


def distribution_bonus(courses: Iterable[Course], ceiling: float = 10.0) -> float:
    variance = float(np.var(day_distribution(courses)))
    return max(0.0, ceiling - variance)


def score_breakdown(
    courses: Sequence[Course],
    cfg: Optional[PlannerConfig] = None,
    conflict_count: Optional[int] = None,
) -> ScoreBreakdown:
    cfg = cfg or PlannerConfig()
    courses = list(courses)
    if conflict_count is None:
        conflict_count = len(detect_conflicts(courses))

    credits_total = sum(c.credits for c in courses)
    mandatory_count = sum(1 for c in courses if c.is_mandatory)
    bonus = distribution_bonus(courses, cfg.distribution_ceiling)

    raw = (
        cfg.weight_credits * credits_total
        + cfg.weight_mandatory * mandatory_count
        - cfg.weight_conflict * conflict_count
        + cfg.weight_distribution * bonus
    )
    return ScoreBreakdown(
        credits_total=credits_total,
        mandatory_count=mandatory_count,
        conflict_count=conflict_count,
        distribution_bonus=bonus,
        score=max(0, int(round(raw))),
    )


def score_courses(courses: Sequence[Course], cfg: Optional[PlannerConfig] = None) -> int:
    return score_breakdown(courses, cfg).score


def score_selection(selection: Selection, cfg: Optional[PlannerConfig] = None) -> int:
    return score_courses(list(selection), cfg)


T = TypeVar("T")


def rank_combinations(combinations: Iterable[T]) -> List[T]:
    # sorted() es estable: a igual puntuación se conserva el orden del generador
    return sorted(combinations, key=lambda c: c.score, reverse=True)
