# horarios/errors.py
"""
Errores de normalización de datos de horario.

Son los únicos errores que levanta el núcleo: detector de solapes, reporte de
conflictos, generador y puntuación operan sobre bloques ya normalizados.
"""


class ScheduleDataError(ValueError):
    """Base de los errores de ingesta de horarios."""

    def __init__(self, message: str, raw=None):
        super().__init__(message)
        self.raw = raw


class UnrecognizedDayError(ScheduleDataError):
    pass


class InvalidHourError(ScheduleDataError):
    pass


class InvalidRangeError(ScheduleDataError):
    pass
