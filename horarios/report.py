# horarios/report.py
import json
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

import pandas as pd

from .conflicts import ConflictRecord
from .generator import Combination
from .model import DAY_LABELS, Course


def _session_code(block) -> str:
    return block.session_type.value if block.session_type else "-"


def weekly_grid(courses: Iterable[Course], first_hour: int = 7, last_hour: int = 21) -> pd.DataFrame:
    """
    Tabla horas x días con "COD (T)" en cada celda ocupada. Si dos cursos
    comparten una hora, la celda los lista separados por " / ".
    """
    hours = list(range(first_hour, last_hour))
    grid = pd.DataFrame("", index=hours, columns=list(DAY_LABELS))
    for course in courses:
        for block in course.time_blocks:
            col = block.day.label
            for h in range(block.start_hour, block.end_hour):
                if h not in grid.index:
                    continue
                cell = f"{course.code} ({_session_code(block)})"
                prev = grid.at[h, col]
                grid.at[h, col] = f"{prev} / {cell}" if prev else cell
    grid.index = [f"{h:02d}:00-{h + 1:02d}:00" for h in hours]
    return grid


def combination_to_dataframe(combination: Combination) -> pd.DataFrame:
    data = []
    for course in combination.courses:
        for block in course.time_blocks:
            data.append(
                {
                    "Curso": course.code,
                    "Nombre": course.name,
                    "Creditos": course.credits,
                    "Dia": block.day.label,
                    "Hora_Inicio": f"{block.start_hour:02d}:00",
                    "Hora_Fin": f"{block.end_hour:02d}:00",
                    "Aula": block.room or "",
                    "Docente": block.instructor or "",
                    "Grupo": block.group_label or "",
                    "Tipo": _session_code(block),
                }
            )
    return pd.DataFrame(
        data,
        columns=["Curso", "Nombre", "Creditos", "Dia", "Hora_Inicio", "Hora_Fin", "Aula", "Docente", "Grupo", "Tipo"],
    )


def conflicts_to_dataframe(records: Sequence[ConflictRecord], courses: Optional[Sequence[Course]] = None) -> pd.DataFrame:
    codes = {c.id: c.code for c in courses or []}
    rows = [
        {
            "curso1": codes.get(r.course_id_a, r.course_id_a),
            "curso2": codes.get(r.course_id_b, r.course_id_b),
            "dia": r.day.label,
            "inicio": r.overlap_start_hour,
            "fin": r.overlap_end_hour,
            "horas": r.overlap_hours,
            "bloque1": r.block_a.label,
            "bloque2": r.block_b.label,
        }
        for r in records
    ]
    return pd.DataFrame(rows, columns=["curso1", "curso2", "dia", "inicio", "fin", "horas", "bloque1", "bloque2"])


def combinations_summary(combinations: Sequence[Combination]) -> pd.DataFrame:
    rows = [
        {
            "numero": i + 1,
            "puntuacion": c.score,
            "creditos": c.total_credits,
            "horas_semanales": c.total_weekly_hours,
            "n_cursos": len(c.courses),
            "conflictos": len(c.conflicts),
            "cursos": ", ".join(c.codes),
        }
        for i, c in enumerate(combinations)
    ]
    return pd.DataFrame(
        rows,
        columns=["numero", "puntuacion", "creditos", "horas_semanales", "n_cursos", "conflictos", "cursos"],
    )


def combination_to_dict(combination: Combination) -> dict:
    return {
        "cursos": [
            {
                "id": c.id,
                "codigo": c.code,
                "nombre": c.name,
                "creditos": c.credits,
                "esObligatorio": c.is_mandatory,
                "horarios": [
                    {
                        "dia": b.day.code,
                        "horaInicio": b.start_hour,
                        "horaFin": b.end_hour,
                        "aula": b.room,
                        "docente": b.instructor,
                        "grupo": b.group_label,
                        "tipo": _session_code(b),
                    }
                    for b in c.time_blocks
                ],
            }
            for c in combination.courses
        ],
        "creditosTotales": combination.total_credits,
        "duracionSemanal": combination.total_weekly_hours,
        "conflictos": len(combination.conflicts),
        "esValido": combination.is_valid,
        "puntuacion": combination.score,
    }


def export_outputs(
    combinations: Sequence[Combination],
    conflicts: Sequence[ConflictRecord],
    out_dir: Path,
    courses: Optional[Sequence[Course]] = None,
) -> List[Path]:
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    written = [
        out_dir / "combinations.csv",
        out_dir / "conflicts.csv",
        out_dir / "combinations.json",
    ]
    combinations_summary(combinations).to_csv(written[0], index=False)
    conflicts_to_dataframe(conflicts, courses).to_csv(written[1], index=False)
    written[2].write_text(
        json.dumps([combination_to_dict(c) for c in combinations], ensure_ascii=False, indent=2),
        encoding="utf-8",
    )
    return written
