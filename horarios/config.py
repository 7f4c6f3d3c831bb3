"""
Configuración del planificador de horarios.

Incluye un cargador desde YAML (o JSON) para dejar reproducibles los límites
de búsqueda y los pesos de prioridad y puntuación.
"""
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Dict, List, Tuple
import json

import yaml


DEFAULT_SHIFT_BOUNDS: List[Tuple[Tuple[int, int], str]] = [
    # (hora_inicio_min, hora_inicio_max) -> turno
    ((0, 11), "M"),    # mañana: empieza antes de las 12
    ((12, 17), "T"),   # tarde: 12:00-17:59
    ((18, 23), "N"),   # noche: desde las 18
]

ON_INVALID_POLICIES = ("raise", "skip")


@dataclass
class PlannerConfig:
    # Búsqueda de combinaciones
    max_combinations: int = 100
    max_courses_per_combination: int = 8

    # Prioridad de cursos (orden de exploración)
    priority_base: int = 50
    priority_mandatory_bonus: int = 30
    priority_credit_weight: int = 5
    priority_block_bonus: int = 20
    priority_block_step: int = 2

    # Puntuación de combinaciones
    weight_credits: int = 10
    weight_mandatory: int = 20
    weight_conflict: int = 50
    weight_distribution: int = 10
    distribution_ceiling: float = 10.0

    # Dominio
    unknown_course_is_mandatory: bool = True
    on_invalid: str = "raise"
    shift_bounds: List[Tuple[Tuple[int, int], str]] = field(
        default_factory=lambda: DEFAULT_SHIFT_BOUNDS.copy()
    )
    grid_first_hour: int = 7
    grid_last_hour: int = 21

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlannerConfig":
        merged = asdict(cls())
        for k, v in data.items():
            if k in merged:
                merged[k] = v
        if "shift_bounds" in data:
            merged["shift_bounds"] = [
                ((int(lo), int(hi)), str(turn)) for (lo, hi), turn in data["shift_bounds"]
            ]
        return cls(**merged)

    def __post_init__(self):
        if self.max_combinations < 0:
            raise ValueError("max_combinations no puede ser negativo")
        if self.max_courses_per_combination < 0:
            raise ValueError("max_courses_per_combination no puede ser negativo")
        if self.on_invalid not in ON_INVALID_POLICIES:
            raise ValueError(f"on_invalid debe ser uno de {ON_INVALID_POLICIES}")
        if not 0 <= self.grid_first_hour < self.grid_last_hour <= 24:
            raise ValueError("Rango de horas de la grilla inválido")


def _load_yaml_or_json(path: Path) -> Any:
    if not path.exists():
        return {}
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        return json.loads(text)
    return yaml.safe_load(text) or {}


def load_config(path: str = "config.yaml") -> PlannerConfig:
    cfg_path = Path(path)
    data = _load_yaml_or_json(cfg_path)
    if not isinstance(data, dict):
        raise ValueError(f"{cfg_path.name} debe contener un objeto mapeo")
    return PlannerConfig.from_dict(data)


def resolve_shift_for_hour(hour: int, mapping: List[Tuple[Tuple[int, int], str]] = None) -> str:
    """
    Retorna el turno (M/T/N) para una hora de inicio usando el mapeo configurable.
    """
    for (start, end), turn in mapping or DEFAULT_SHIFT_BOUNDS:
        if start <= hour <= end:
            return turn
    return "M"
