# horarios/classification.py
"""
Clasificación obligatorio/electivo de un curso.

Primero se busca el código de tipo en una tabla cerrada; luego marcadores en el
texto del tipo; por último marcadores de electivo en el nombre. Lo que no
calza queda como UNKNOWN y se resuelve con `unknown_course_is_mandatory`.
"""
from typing import Optional

from .model import CourseCategory
from .timeblocks import fold_text

COURSE_TYPE_CODES = {
    "O": CourseCategory.MANDATORY,
    "OB": CourseCategory.MANDATORY,
    "OBL": CourseCategory.MANDATORY,
    "OBLIGATORIO": CourseCategory.MANDATORY,
    "OBLIGATORIA": CourseCategory.MANDATORY,
    "E": CourseCategory.ELECTIVE,
    "EL": CourseCategory.ELECTIVE,
    "ELECTIVO": CourseCategory.ELECTIVE,
    "ELECTIVA": CourseCategory.ELECTIVE,
}

MANDATORY_MARKERS = ("obligatori", "required", "mandatory")
ELECTIVE_MARKERS = ("electiv", "elective", "optativ", "opcional", "optional")


def classify_course_type(course_type: Optional[str], name: Optional[str] = None) -> CourseCategory:
    tipo = fold_text(course_type or "").lower()
    nombre = fold_text(name or "").lower()

    category = COURSE_TYPE_CODES.get(tipo.upper())
    if category is not None:
        return category
    if any(m in tipo for m in MANDATORY_MARKERS):
        return CourseCategory.MANDATORY
    if any(m in tipo for m in ELECTIVE_MARKERS):
        return CourseCategory.ELECTIVE
    if any(m in nombre for m in ELECTIVE_MARKERS):
        return CourseCategory.ELECTIVE
    return CourseCategory.UNKNOWN


def is_mandatory_category(category: CourseCategory, unknown_is_mandatory: bool = True) -> bool:
    if category is CourseCategory.UNKNOWN:
        return unknown_is_mandatory
    return category is CourseCategory.MANDATORY
