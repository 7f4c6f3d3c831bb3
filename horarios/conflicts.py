# horarios/conflicts.py
"""
Reporte de conflictos entre cursos distintos.

El orden de salida es reproducible: pares de cursos por índice de entrada y,
dentro de cada par, pares de bloques por índice en la lista de cada curso.
"""
from dataclasses import dataclass
from typing import Dict, Iterable, List, Sequence, Tuple

from .model import Course, Day, TimeBlock
from .overlap import overlap_window


@dataclass(frozen=True)
class ConflictRecord:
    course_id_a: str
    course_id_b: str
    day: Day
    overlap_start_hour: int
    overlap_end_hour: int
    block_a: TimeBlock
    block_b: TimeBlock
    block_index_a: int = 0
    block_index_b: int = 0

    @property
    def overlap_hours(self) -> int:
        return self.overlap_end_hour - self.overlap_start_hour


def conflicts_between(course_a: Course, course_b: Course) -> List[ConflictRecord]:
    """Un registro por cada par de bloques que solapan."""
    out: List[ConflictRecord] = []
    if course_a.id == course_b.id:
        return out
    for ia, block_a in enumerate(course_a.time_blocks):
        for ib, block_b in enumerate(course_b.time_blocks):
            window = overlap_window(block_a, block_b)
            if window is None:
                continue
            out.append(
                ConflictRecord(
                    course_id_a=course_a.id,
                    course_id_b=course_b.id,
                    day=block_a.day,
                    overlap_start_hour=window[0],
                    overlap_end_hour=window[1],
                    block_a=block_a,
                    block_b=block_b,
                    block_index_a=ia,
                    block_index_b=ib,
                )
            )
    return out


def detect_conflicts(courses: Sequence[Course]) -> List[ConflictRecord]:
    conflicts: List[ConflictRecord] = []
    for i in range(len(courses)):
        for j in range(i + 1, len(courses)):
            conflicts.extend(conflicts_between(courses[i], courses[j]))
    return conflicts


def conflicts_with(course: Course, others: Iterable[Course]) -> List[ConflictRecord]:
    """Conflictos de un curso contra un conjunto ya armado (sin revisar el conjunto entre sí)."""
    out: List[ConflictRecord] = []
    for other in others:
        out.extend(conflicts_between(other, course))
    return out


def has_conflicts(courses: Sequence[Course]) -> bool:
    for i in range(len(courses)):
        for j in range(i + 1, len(courses)):
            if conflicts_between(courses[i], courses[j]):
                return True
    return False


def group_conflicts_by_pair(records: Iterable[ConflictRecord]) -> Dict[Tuple[str, str], List[ConflictRecord]]:
    grouped: Dict[Tuple[str, str], List[ConflictRecord]] = {}
    for rec in records:
        grouped.setdefault((rec.course_id_a, rec.course_id_b), []).append(rec)
    return grouped
