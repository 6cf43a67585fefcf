"""Course completion gate.

A learner is done once every published lesson is completed or awaiting
review and the course's final exam has been graded. A pending final exam
blocks completion even when everything else shows complete.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Optional

from app.features.grading.scoring import GradeSummary


@dataclass(frozen=True)
class CourseProgress:
    progress: int
    all_lessons_completed: bool
    eligible_to_complete: bool
    passed: bool


def evaluate_progress(
    lesson_ids: Iterable[str],
    completed_ids: Iterable[str],
    pending_ids: Iterable[str],
    grades: GradeSummary,
    recorded_is_passed: Optional[Any] = None,
) -> CourseProgress:
    lessons = {str(i) for i in lesson_ids}
    attempted = {str(i) for i in completed_ids} | {str(i) for i in pending_ids}
    # stray rows for unpublished lessons must not push progress past 100
    done = attempted & lessons

    progress = round(len(done) / len(lessons) * 100) if lessons else 0
    all_done = bool(lessons) and done == lessons
    eligible = all_done and grades.has_final_exam and grades.final_exam_graded

    if isinstance(recorded_is_passed, bool):
        passed = recorded_is_passed
    else:
        passed = eligible and grades.passed
    return CourseProgress(
        progress=progress,
        all_lessons_completed=all_done,
        eligible_to_complete=eligible,
        passed=passed,
    )


__all__ = ["CourseProgress", "evaluate_progress"]
