"""Helpers for reading quiz metadata out of ``lessons.content``."""

from __future__ import annotations

import math
from typing import Any, Dict, Iterable, List, Optional, Tuple

from app.features.lessons.models import AssessmentType

DEFAULT_MAX_MARKS = 1


def quiz_data(lesson: Dict[str, Any]) -> Dict[str, Any]:
    content = lesson.get("content") if isinstance(lesson, dict) else None
    qd = content.get("quiz_data") if isinstance(content, dict) else None
    return qd if isinstance(qd, dict) else {}


def quiz_questions(lesson: Dict[str, Any]) -> List[Dict[str, Any]]:
    questions = quiz_data(lesson).get("questions")
    return questions if isinstance(questions, list) else []


def is_quiz_lesson(lesson: Dict[str, Any]) -> bool:
    return isinstance(quiz_data(lesson).get("questions"), list)


def assessment_type(lesson: Dict[str, Any]) -> AssessmentType:
    raw = quiz_data(lesson).get("assessment_type")
    if not isinstance(raw, str):
        return AssessmentType.cat
    return AssessmentType(raw)


def partition_quiz_lessons(lessons: Iterable[Dict[str, Any]]) -> Tuple[List[str], List[str]]:
    """Split quiz lessons into (cat_ids, exam_ids); non-quiz lessons are skipped."""
    cat_ids: List[str] = []
    exam_ids: List[str] = []
    for lesson in lessons:
        if not is_quiz_lesson(lesson):
            continue
        lesson_id = str(lesson.get("id"))
        if assessment_type(lesson) is AssessmentType.final_exam:
            exam_ids.append(lesson_id)
        else:
            cat_ids.append(lesson_id)
    return cat_ids, exam_ids


def final_exam_lesson_ids(lessons: Iterable[Dict[str, Any]]) -> List[str]:
    return [str(l.get("id")) for l in lessons if assessment_type(l) is AssessmentType.final_exam]


def question_type(question: Optional[Dict[str, Any]]) -> str:
    qt = (question or {}).get("question_type")
    return qt if qt in ("multiple_choice", "free_text") else "multiple_choice"


def max_marks(question: Optional[Dict[str, Any]]) -> float:
    raw = (question or {}).get("max_marks")
    if isinstance(raw, (int, float)) and not isinstance(raw, bool) and math.isfinite(raw):
        return max(0, raw)
    return DEFAULT_MAX_MARKS


def correct_index(question: Optional[Dict[str, Any]]) -> Optional[int]:
    raw = (question or {}).get("correct_answer")
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float) and math.isfinite(raw):
        return int(raw)
    if isinstance(raw, str):
        try:
            return int(raw.strip())
        except ValueError:
            return None
    return None


__all__ = [
    "quiz_data",
    "quiz_questions",
    "is_quiz_lesson",
    "assessment_type",
    "partition_quiz_lessons",
    "final_exam_lesson_ids",
    "question_type",
    "max_marks",
    "correct_index",
]
