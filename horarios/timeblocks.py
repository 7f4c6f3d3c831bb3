# horarios/timeblocks.py
"""
Normalización de días y horas hacia el modelo canónico de TimeBlock.

Es la única frontera por la que entran datos crudos (JSON del scraping, filas
de la BD, CSV): ningún mapeo sin tipar pasa más allá de `build_time_block`.
"""
import math
import re
import unicodedata
from numbers import Integral, Real
from typing import Any, Mapping, Optional, Tuple

from .errors import InvalidHourError, InvalidRangeError, UnrecognizedDayError
from .model import Day, SessionType, TimeBlock


# Tabla cerrada de días. Las claves se comparan en mayúsculas y sin tildes.
DAY_ALIASES = {
    "LU": Day.MONDAY, "LUNES": Day.MONDAY, "MONDAY": Day.MONDAY,
    "MA": Day.TUESDAY, "MARTES": Day.TUESDAY, "TUESDAY": Day.TUESDAY,
    "MI": Day.WEDNESDAY, "MIERCOLES": Day.WEDNESDAY, "WEDNESDAY": Day.WEDNESDAY,
    "JU": Day.THURSDAY, "JUEVES": Day.THURSDAY, "THURSDAY": Day.THURSDAY,
    "VI": Day.FRIDAY, "VIERNES": Day.FRIDAY, "FRIDAY": Day.FRIDAY,
    "SA": Day.SATURDAY, "SABADO": Day.SATURDAY, "SATURDAY": Day.SATURDAY,
}

SESSION_ALIASES = {
    "T": SessionType.LECTURE, "TEORIA": SessionType.LECTURE, "LECTURE": SessionType.LECTURE,
    "P": SessionType.PRACTICE, "PRACTICA": SessionType.PRACTICE, "PRACTICE": SessionType.PRACTICE,
    "L": SessionType.LAB, "LABORATORIO": SessionType.LAB, "LAB": SessionType.LAB,
}

_HOUR_RE = re.compile(r"^(\d{1,2})(?::(\d{2}))?(?::(\d{2}))?$")
_HHMM_RE = re.compile(r"^(\d{1,2})(\d{2})$")
_RANGE_RE = re.compile(r"^\[?\s*(\d{1,2}(?::\d{2}){0,2})\s*-\s*(\d{1,2}(?::\d{2}){0,2})\s*\]?$")


def fold_text(text: str) -> str:
    # "Miércoles" -> "MIERCOLES"
    decomposed = unicodedata.normalize("NFKD", text.strip())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch)).upper()


def normalize_day(raw: Any) -> Day:
    if isinstance(raw, Day):
        return raw
    if not isinstance(raw, str) or not raw.strip():
        raise UnrecognizedDayError(f"Día no reconocido: {raw!r}", raw=raw)
    day = DAY_ALIASES.get(fold_text(raw))
    if day is None:
        raise UnrecognizedDayError(f"Día no reconocido: {raw!r}", raw=raw)
    return day


def _check_hour(hour: int, raw: Any) -> int:
    if not 0 <= hour <= 23:
        raise InvalidHourError(f"Hora fuera de rango 0..23: {raw!r}", raw=raw)
    return hour


def normalize_hour(raw: Any) -> int:
    """
    Acepta "HH:MM", "HH:MM:SS", "H:MM", dígitos sueltos ("08"), "HHMM"
    ("0830") o enteros. Los minutos se truncan, nunca se redondean.
    """
    if isinstance(raw, bool):
        raise InvalidHourError(f"Hora inválida: {raw!r}", raw=raw)
    if isinstance(raw, Integral):
        return _check_hour(int(raw), raw)
    if isinstance(raw, Real):
        if math.isnan(raw) or math.isinf(raw) or raw < 0:
            raise InvalidHourError(f"Hora inválida: {raw!r}", raw=raw)
        return _check_hour(int(raw), raw)
    if not isinstance(raw, str):
        raise InvalidHourError(f"Hora inválida: {raw!r}", raw=raw)

    text = raw.strip()
    m = _HOUR_RE.match(text)
    if m:
        hour, minutes, seconds = m.groups()
        if (minutes and int(minutes) > 59) or (seconds and int(seconds) > 59):
            raise InvalidHourError(f"Minutos/segundos inválidos: {raw!r}", raw=raw)
        return _check_hour(int(hour), raw)
    m = _HHMM_RE.match(text)
    if m:
        hour, minutes = m.groups()
        if int(minutes) > 59:
            raise InvalidHourError(f"Minutos inválidos: {raw!r}", raw=raw)
        return _check_hour(int(hour), raw)
    raise InvalidHourError(f"Formato de hora no reconocido: {raw!r}", raw=raw)


def parse_hour_range(raw: Any) -> Tuple[int, int]:
    if not isinstance(raw, str):
        raise InvalidRangeError(f"Rango de horas no reconocido: {raw!r}", raw=raw)
    m = _RANGE_RE.match(raw.strip())
    if not m:
        raise InvalidRangeError(f"Rango de horas no reconocido: {raw!r}", raw=raw)
    try:
        start, end = normalize_hour(m.group(1)), normalize_hour(m.group(2))
    except InvalidHourError as e:
        raise InvalidRangeError(f"Rango de horas inválido {raw!r}: {e}", raw=raw) from e
    if start >= end:
        raise InvalidRangeError(f"Rango de horas inválido {raw!r}: inicio >= fin", raw=raw)
    return start, end


def normalize_session_type(raw: Any) -> Optional[SessionType]:
    if raw is None or isinstance(raw, SessionType):
        return raw
    text = fold_text(str(raw))
    if not text:
        return None
    return SESSION_ALIASES.get(text)


def _first(raw: Mapping[str, Any], *keys: str) -> Any:
    for k in keys:
        value = raw.get(k)
        if value is not None and value != "":
            return value
    return None


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, Mapping):
        # aulas anidadas de la BD: {"codigo": "A-101", ...}
        value = _first(value, "codigo", "code", "nombre", "name")
        if value is None:
            return None
    text = " ".join(str(value).split())
    return text or None


def build_time_block(raw: Mapping[str, Any]) -> TimeBlock:
    """
    Construye un TimeBlock desde un registro crudo.

    Claves reconocidas: dia/day, horario/range ("[HH-HH]") o
    horaInicio/hora_inicio/start + horaFin/hora_fin/end, aula/room,
    docente/instructor, grupo/group, tipo/session_type.
    """
    day = normalize_day(_first(raw, "dia", "day"))

    rango = _first(raw, "horario", "hora", "range")
    start_raw = _first(raw, "horaInicio", "hora_inicio", "start_hour", "start")
    end_raw = _first(raw, "horaFin", "hora_fin", "end_hour", "end")
    if start_raw is not None and end_raw is not None:
        start, end = normalize_hour(start_raw), normalize_hour(end_raw)
        if start >= end:
            raise InvalidRangeError(
                f"Rango de horas inválido {start_raw!r}-{end_raw!r}: inicio >= fin",
                raw=(start_raw, end_raw),
            )
    elif rango is not None:
        start, end = parse_hour_range(str(rango))
    else:
        raise InvalidRangeError(f"Bloque sin horas: {dict(raw)!r}", raw=dict(raw))

    return TimeBlock(
        day=day,
        start_hour=start,
        end_hour=end,
        room=_text(_first(raw, "aula", "room")),
        instructor=_text(_first(raw, "docente", "instructor")),
        group_label=_text(_first(raw, "grupo", "group", "group_label")),
        session_type=normalize_session_type(_first(raw, "tipo", "session_type")),
    )
