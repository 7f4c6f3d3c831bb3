# horarios/model.py
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Iterator, Optional, Tuple

from .config import resolve_shift_for_hour
from .errors import InvalidHourError, InvalidRangeError


class Day(IntEnum):
    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5

    @property
    def code(self) -> str:
        return DAY_CODES[self]

    @property
    def label(self) -> str:
        return DAY_LABELS[self]


DAY_CODES = ("LU", "MA", "MI", "JU", "VI", "SA")
DAY_LABELS = ("Lunes", "Martes", "Miércoles", "Jueves", "Viernes", "Sábado")
N_DAYS = len(Day)


class SessionType(Enum):
    LECTURE = "T"
    PRACTICE = "P"
    LAB = "L"

    @property
    def label(self) -> str:
        return {"T": "Teoría", "P": "Práctica", "L": "Laboratorio"}[self.value]


class CourseCategory(Enum):
    MANDATORY = "obligatorio"
    ELECTIVE = "electivo"
    UNKNOWN = "desconocido"


@dataclass(frozen=True)
class TimeBlock:
    # Una sesión semanal recurrente de un curso
    day: Day
    start_hour: int
    end_hour: int
    room: Optional[str] = None
    instructor: Optional[str] = None
    group_label: Optional[str] = None
    session_type: Optional[SessionType] = None

    def __post_init__(self):
        if not isinstance(self.day, Day):
            object.__setattr__(self, "day", Day(self.day))
        for hour in (self.start_hour, self.end_hour):
            if isinstance(hour, bool) or not isinstance(hour, int) or not 0 <= hour <= 23:
                raise InvalidHourError(f"Hora fuera de rango 0..23: {hour!r}", raw=hour)
        if self.start_hour >= self.end_hour:
            raise InvalidRangeError(
                f"Rango inválido {self.start_hour}-{self.end_hour}: inicio >= fin",
                raw=(self.start_hour, self.end_hour),
            )

    @property
    def duration(self) -> int:
        return self.end_hour - self.start_hour

    @property
    def shift(self) -> str:
        return resolve_shift_for_hour(self.start_hour)

    @property
    def label(self) -> str:
        return f"{self.day.code}_{self.start_hour}_{self.end_hour}"


@dataclass(frozen=True)
class Course:
    id: str
    code: str
    name: str = ""
    credits: int = 0
    is_mandatory: bool = False
    category: CourseCategory = CourseCategory.UNKNOWN
    course_type: str = ""
    time_blocks: Tuple[TimeBlock, ...] = ()
    priority: Optional[int] = None   # pre-etiquetada; si es None se calcula

    def __post_init__(self):
        if isinstance(self.credits, bool) or not isinstance(self.credits, int):
            raise ValueError(f"Créditos no enteros para {self.code}: {self.credits!r}")
        if self.credits < 0:
            raise ValueError(f"Créditos negativos para {self.code}: {self.credits}")
        if not isinstance(self.time_blocks, tuple):
            object.__setattr__(self, "time_blocks", tuple(self.time_blocks))
        for block in self.time_blocks:
            if not isinstance(block, TimeBlock):
                raise TypeError(f"{self.code}: se esperaba TimeBlock, llegó {type(block).__name__}")

    @property
    def weekly_hours(self) -> int:
        return sum(b.duration for b in self.time_blocks)


@dataclass(frozen=True)
class Selection:
    """
    Conjunto ordenado de cursos elegidos por el estudiante.

    Inmutable: `add` y `remove` devuelven una nueva selección. El núcleo la
    recibe en cada llamada y no la retiene.
    """
    courses: Tuple[Course, ...] = field(default_factory=tuple)

    def __post_init__(self):
        courses = tuple(self.courses)
        ids = [c.id for c in courses]
        if len(ids) != len(set(ids)):
            raise ValueError("La selección no puede repetir cursos (id duplicado)")
        object.__setattr__(self, "courses", courses)

    def __iter__(self) -> Iterator[Course]:
        return iter(self.courses)

    def __len__(self) -> int:
        return len(self.courses)

    def __contains__(self, course_id) -> bool:
        if isinstance(course_id, Course):
            course_id = course_id.id
        return any(c.id == course_id for c in self.courses)

    def add(self, course: Course) -> "Selection":
        if course.id in self:
            return self
        return Selection(self.courses + (course,))

    def remove(self, course_id: str) -> "Selection":
        return Selection(tuple(c for c in self.courses if c.id != course_id))
