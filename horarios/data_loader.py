# horarios/data_loader.py
"""
Carga del catálogo de cursos desde los JSON del scraping o desde CSV.

Formato JSON: {"informacionGeneral": {...}, "cursos": [...]} o una lista de
cursos. Cada curso trae "horarios" con "dia" y "horario" ("[HH-HH]") o
"horaInicio"/"horaFin".

Formato CSV: una fila por bloque horario; las filas se agrupan por código de
curso (y id si existe la columna).
"""
import json
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

import pandas as pd
from loguru import logger

from .classification import classify_course_type, is_mandatory_category
from .config import PlannerConfig
from .errors import ScheduleDataError
from .model import Course
from .timeblocks import build_time_block

COURSE_COLUMNS = ("id", "codigo", "nombre", "creditos", "tipo_curso", "prioridad")
BLOCK_COLUMNS = ("dia", "horario", "hora_inicio", "hora_fin", "aula", "docente", "grupo", "tipo")


@dataclass(frozen=True)
class CourseCatalog:
    courses: Tuple[Course, ...]
    rejected: List[Tuple[str, str]] = field(default_factory=list)
    source: Optional[str] = None

    def find(self, key: str) -> Optional[Course]:
        for c in self.courses:
            if c.id == key or c.code == key:
                return c
        return None

    def select(self, keys) -> List[Course]:
        out = []
        for k in keys:
            course = self.find(k)
            if course is None:
                raise KeyError(f"Curso no encontrado en el catálogo: {k}")
            if course not in out:
                out.append(course)
        return out


def _clean(value: Any) -> Any:
    # pandas deja NaN en celdas vacías
    if isinstance(value, float) and math.isnan(value):
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _parse_int(value: Any, default: int = 0) -> int:
    value = _clean(value)
    if value is None:
        return default
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return default


def course_from_record(raw: Mapping[str, Any], index: int, cfg: Optional[PlannerConfig] = None) -> Course:
    cfg = cfg or PlannerConfig()
    if not isinstance(raw, Mapping):
        raise ScheduleDataError(f"Registro de curso inválido: {raw!r}", raw=raw)
    horarios = raw.get("horarios") or []
    for horario in horarios:
        if not isinstance(horario, Mapping):
            raise ScheduleDataError(f"Bloque horario inválido: {horario!r}", raw=horario)

    codigo = " ".join(str(_clean(raw.get("codigo", raw.get("code"))) or "").split())
    nombre = " ".join(str(_clean(raw.get("nombre", raw.get("name"))) or "").split())
    tipo = " ".join(str(_clean(raw.get("tipo", raw.get("tipo_curso", raw.get("type")))) or "").split())

    blocks = tuple(
        build_time_block({k: _clean(v) for k, v in horario.items()})
        for horario in horarios
    )
    category = classify_course_type(tipo, nombre)
    prioridad = _clean(raw.get("prioridad", raw.get("priority")))

    return Course(
        id=str(_clean(raw.get("id")) or f"{codigo}_{index + 1}"),
        code=codigo,
        name=nombre,
        credits=_parse_int(raw.get("creditos", raw.get("credits"))),
        is_mandatory=is_mandatory_category(category, cfg.unknown_course_is_mandatory),
        category=category,
        course_type=tipo,
        time_blocks=blocks,
        priority=_parse_int(prioridad) if prioridad is not None else None,
    )


def build_catalog(
    records: List[Mapping[str, Any]],
    cfg: Optional[PlannerConfig] = None,
    source: Optional[str] = None,
) -> CourseCatalog:
    cfg = cfg or PlannerConfig()
    courses: List[Course] = []
    rejected: List[Tuple[str, str]] = []
    for i, raw in enumerate(records):
        try:
            courses.append(course_from_record(raw, i, cfg))
        except ValueError as e:  # ScheduleDataError o créditos negativos
            if cfg.on_invalid == "raise":
                raise
            ident = f"#{i + 1}"
            if isinstance(raw, Mapping):
                ident = str(raw.get("codigo", raw.get("code", ident)))
            logger.warning("Curso {} descartado: {}", ident, e)
            rejected.append((ident, str(e)))
    return CourseCatalog(courses=tuple(courses), rejected=rejected, source=source)


def _records_from_json(path: Path) -> List[Dict[str, Any]]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("cursos", data.get("courses"))
    if not isinstance(data, list):
        raise ValueError(f"{path.name}: se esperaba una lista de cursos")
    return data


def records_from_dataframe(df: pd.DataFrame) -> List[Dict[str, Any]]:
    """Agrupa filas bloque-por-fila en registros de curso con su lista de horarios."""
    if "codigo" not in df.columns:
        raise ValueError("El CSV debe tener la columna 'codigo'")
    keys = [c for c in ("id", "codigo") if c in df.columns]
    records: List[Dict[str, Any]] = []
    for _, group in df.groupby(keys, sort=False, dropna=False):
        first = group.iloc[0]
        rec = {c: first[c] for c in COURSE_COLUMNS if c in group.columns}
        horarios = []
        for _, row in group.iterrows():
            block = {c: row[c] for c in BLOCK_COLUMNS if c in group.columns}
            if _clean(block.get("dia")) is None:
                continue  # curso sin horario asignado
            horarios.append(block)
        rec["horarios"] = horarios
        records.append(rec)
    return records


def load_courses(path: str, cfg: Optional[PlannerConfig] = None) -> CourseCatalog:
    src = Path(path)
    if src.suffix.lower() == ".csv":
        df = pd.read_csv(src, dtype=str)
        records = records_from_dataframe(df)
    else:
        records = _records_from_json(src)
    catalog = build_catalog(records, cfg, source=str(src))
    logger.info("Catálogo {}: {} cursos, {} descartados", src.name, len(catalog.courses), len(catalog.rejected))
    return catalog
