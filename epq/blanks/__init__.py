"""
epq.blanks - Blank notation and question text normalization

Used at authoring and import time. Nothing here runs while grading.
"""

from .normalizer import (
    BLANK_MARKER,
    BlankConfigurationReport,
    BlankFormat,
    NormalizationResult,
    count_blanks,
    detect_blank_format,
    extract_blank_positions,
    map_blank_ids_to_positions,
    normalize_multi_blank_answer,
    normalize_question_blanks,
    process_question_for_import,
    process_questions_for_import,
    validate_blank_configuration,
)
from .text import hash_question_text, normalize_question_text, question_texts_match

__all__ = [
    "BLANK_MARKER",
    "BlankFormat",
    "NormalizationResult",
    "BlankConfigurationReport",
    "normalize_question_blanks",
    "detect_blank_format",
    "count_blanks",
    "extract_blank_positions",
    "map_blank_ids_to_positions",
    "validate_blank_configuration",
    "normalize_multi_blank_answer",
    "process_question_for_import",
    "process_questions_for_import",
    "normalize_question_text",
    "question_texts_match",
    "hash_question_text",
]
