# horarios/overlap.py
from typing import Optional, Tuple

from .model import TimeBlock


def overlaps(a: TimeBlock, b: TimeBlock) -> bool:
    """Solape semiabierto: un bloque que termina a las 10 no choca con uno que empieza a las 10."""
    if a.day != b.day:
        return False
    # Bloques de duración cero nunca solapan (no deberían existir tras normalizar)
    if a.start_hour >= a.end_hour or b.start_hour >= b.end_hour:
        return False
    return a.start_hour < b.end_hour and b.start_hour < a.end_hour


def overlap_window(a: TimeBlock, b: TimeBlock) -> Optional[Tuple[int, int]]:
    if not overlaps(a, b):
        return None
    return max(a.start_hour, b.start_hour), min(a.end_hour, b.end_hour)
