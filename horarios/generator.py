# horarios/generator.py
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from loguru import logger

from .config import PlannerConfig
from .conflicts import ConflictRecord, conflicts_with, detect_conflicts
from .model import Course
from .scoring import rank_combinations, score_breakdown


@dataclass(frozen=True)
class Combination:
    courses: Tuple[Course, ...]
    conflicts: Tuple[ConflictRecord, ...]
    total_credits: int
    total_weekly_hours: int
    score: int

    @property
    def is_valid(self) -> bool:
        return not self.conflicts

    @property
    def codes(self) -> Tuple[str, ...]:
        return tuple(c.code for c in self.courses)


def build_combination(courses: Sequence[Course], cfg: Optional[PlannerConfig] = None) -> Combination:
    """Calcula los atributos derivados de un subconjunto de cursos (válido o no)."""
    courses = tuple(courses)
    conflicts = tuple(detect_conflicts(courses))
    breakdown = score_breakdown(courses, cfg, conflict_count=len(conflicts))
    return Combination(
        courses=courses,
        conflicts=conflicts,
        total_credits=breakdown.credits_total,
        total_weekly_hours=sum(c.weekly_hours for c in courses),
        score=breakdown.score,
    )


def course_priority(course: Course, cfg: Optional[PlannerConfig] = None) -> int:
    """
    Prioridad 0..100 para ordenar la búsqueda: obligatorios, más créditos y
    menos bloques (menos opciones de horario) se exploran primero.
    """
    cfg = cfg or PlannerConfig()
    priority = cfg.priority_base
    if course.is_mandatory:
        priority += cfg.priority_mandatory_bonus
    priority += course.credits * cfg.priority_credit_weight
    n_blocks = len(course.time_blocks)
    if n_blocks > 0:
        priority += max(0, cfg.priority_block_bonus - n_blocks * cfg.priority_block_step)
    return min(100, max(0, priority))


@dataclass
class _SearchState:
    # Acumulador de una sola llamada a generate(); nunca compartido
    limit: int
    max_size: int
    found: List[Tuple[Course, ...]] = field(default_factory=list)
    nodes: int = 0

    @property
    def full(self) -> bool:
        return len(self.found) >= self.limit


class CombinationGenerator:
    def __init__(self, cfg: Optional[PlannerConfig] = None):
        self.cfg = cfg or PlannerConfig()

    def priority_of(self, course: Course) -> int:
        if course.priority is not None:
            return course.priority
        return course_priority(course, self.cfg)

    def sort_candidates(self, candidates: Sequence[Course]) -> List[Course]:
        # Orden estable: a igual prioridad se respeta el orden de entrada
        return sorted(candidates, key=self.priority_of, reverse=True)

    def generate(
        self,
        candidates: Sequence[Course],
        max_combinations: Optional[int] = None,
        max_courses_per_combination: Optional[int] = None,
    ) -> List[Combination]:
        """
        Enumera subconjuntos sin conflictos del pool de candidatos.

        Búsqueda binaria incluir/excluir sobre los candidatos ordenados por
        prioridad; la rama "excluir" va primero. No garantiza encontrar la
        mejor combinación, solo las primeras `max_combinations` hojas válidas.
        """
        limit = self.cfg.max_combinations if max_combinations is None else max_combinations
        max_size = (
            self.cfg.max_courses_per_combination
            if max_courses_per_combination is None
            else max_courses_per_combination
        )
        if not candidates or limit <= 0:
            return []

        ordered = self.sort_candidates(candidates)
        state = _SearchState(limit=limit, max_size=max_size)
        self._search(ordered, state)
        logger.debug(
            "Búsqueda de combinaciones: {} candidatos, {} nodos, {} hojas",
            len(ordered), state.nodes, len(state.found),
        )

        combinations = [build_combination(subset, self.cfg) for subset in state.found]
        return rank_combinations(combinations)

    def _search(self, ordered: List[Course], state: _SearchState) -> None:
        # Pila explícita de (idx, actual); la profundidad crece con el pool
        stack: List[Tuple[int, Tuple[Course, ...]]] = [(0, ())]
        while stack and not state.full:
            idx, current = stack.pop()
            state.nodes += 1

            if idx == len(ordered) or len(current) >= state.max_size:
                state.found.append(current)
                continue

            candidate = ordered[idx]
            if not conflicts_with(candidate, current):
                stack.append((idx + 1, current + (candidate,)))
            # Excluir se apila al final para salir primero
            stack.append((idx + 1, current))


def generate_combinations(
    candidates: Sequence[Course],
    max_combinations: Optional[int] = None,
    max_courses_per_combination: Optional[int] = None,
    cfg: Optional[PlannerConfig] = None,
) -> List[Combination]:
    return CombinationGenerator(cfg).generate(
        candidates, max_combinations, max_courses_per_combination
    )
