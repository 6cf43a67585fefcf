"""Quiz auto-grading rules.

A quiz submission is auto-gradable when every answer is multiple choice.
Auto-graded submissions are final at write time and carry a pass verdict;
anything with free text waits for a reviewer and never carries one.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from pydantic import ValidationError as PydanticValidationError

from app.common.errors import ValidationError
from app.common.utils import is_number
from app.features.lessons.assessment import correct_index, max_marks, question_type
from app.features.submissions.models import QuizSubmissionStatus
from app.features.submissions.schemas import QuizAnswer

PASS_RATIO = 0.70

# set only by a reviewer; stripped from learner submissions
REVIEW_FIELDS = frozenset({"awarded_marks", "reviewed_at", "reviewer_id"})


@dataclass(frozen=True)
class QuizVerdict:
    status: QuizSubmissionStatus
    is_passed: Optional[bool]

    @property
    def completes_lesson(self) -> bool:
        return self.status is QuizSubmissionStatus.graded


def parse_answers(raw: Optional[Sequence[Any]]) -> List[QuizAnswer]:
    if not isinstance(raw, (list, tuple)) or not raw:
        raise ValidationError("course_id, lesson_id, and answers are required")
    parsed: List[QuizAnswer] = []
    for idx, item in enumerate(raw):
        try:
            parsed.append(QuizAnswer.model_validate(item))
        except PydanticValidationError as exc:
            raise ValidationError(_answer_error(idx, exc)) from exc
    return parsed


def _answer_error(idx: int, exc: PydanticValidationError) -> str:
    errors = exc.errors()
    loc = errors[0].get("loc", ()) if errors else ()
    if not loc or loc[0] == "question_type":
        return f"answers[{idx}] must declare a question_type of multiple_choice or free_text"
    return f"answers[{idx}].{loc[0]} is invalid"


def stored_answer(answer: QuizAnswer) -> Dict[str, Any]:
    """Learner answer as persisted, without any reviewer-owned fields."""
    data = answer.model_dump(exclude_none=True)
    return {k: v for k, v in data.items() if k not in REVIEW_FIELDS}


def has_free_text(answers: Iterable[QuizAnswer]) -> bool:
    return any(a.question_type == "free_text" for a in answers)


def pass_verdict(score: Any, total: Any) -> Optional[bool]:
    """``score/total >= 0.70`` when both are numbers and total is positive, else None."""
    if not is_number(score) or not is_number(total) or total <= 0:
        return None
    return score / total >= PASS_RATIO


def classify(answers: Sequence[QuizAnswer], score: Any = None, total: Any = None) -> QuizVerdict:
    if has_free_text(answers):
        # client pass/fail is never trusted for mixed submissions
        return QuizVerdict(status=QuizSubmissionStatus.pending_review, is_passed=None)
    return QuizVerdict(status=QuizSubmissionStatus.graded, is_passed=pass_verdict(score, total))


def parse_free_text_grades(raw: Any) -> Dict[int, int]:
    """Map question_index -> awarded marks (floored, non-negative); bad entries skipped."""
    if not isinstance(raw, list):
        raise ValidationError("free_text_grades must be an array")
    grades: Dict[int, int] = {}
    for entry in raw:
        if not isinstance(entry, dict):
            continue
        index = entry.get("question_index")
        awarded = entry.get("awarded_marks")
        if not is_number(index) or not is_number(awarded):
            continue
        grades[int(index)] = max(0, math.floor(awarded))
    return grades


def apply_review_marks(
    questions: Sequence[Dict[str, Any]],
    answers: Sequence[Dict[str, Any]],
    grades: Dict[int, int],
    reviewer_id: str,
    reviewed_at: str,
) -> Tuple[List[Dict[str, Any]], float, float]:
    """Stamp awarded marks on free-text answers and total the quiz.

    Returns ``(next_answers, earned, possible)``. Multiple choice earns the
    question's ``max_marks`` on an exact index match; free text earns its
    awarded marks capped at ``max_marks``.
    """
    next_answers: List[Dict[str, Any]] = []
    for answer in answers:
        if not isinstance(answer, dict) or answer.get("question_type") != "free_text":
            next_answers.append(answer)
            continue
        index = answer.get("question_index")
        question = questions[index] if isinstance(index, int) and 0 <= index < len(questions) else None
        cap = max_marks(question)
        # only marks entered in this review count
        awarded = min(cap, grades[index]) if index in grades else None
        next_answers.append(
            {
                **answer,
                "awarded_marks": awarded,
                "reviewed_at": reviewed_at,
                "reviewer_id": reviewer_id,
            }
        )

    by_index = {a.get("question_index"): a for a in next_answers if isinstance(a, dict)}
    possible = 0
    earned = 0
    for idx, question in enumerate(questions):
        cap = max_marks(question)
        possible += cap
        answer = by_index.get(idx) or {}
        if question_type(question) == "multiple_choice":
            expected = correct_index(question)
            selected = answer.get("selected_option")
            if expected is not None and is_number(selected) and selected == expected:
                earned += cap
        else:
            awarded = answer.get("awarded_marks")
            earned += min(cap, max(0, awarded)) if is_number(awarded) else 0
    return next_answers, earned, possible


__all__ = [
    "PASS_RATIO",
    "REVIEW_FIELDS",
    "QuizVerdict",
    "parse_answers",
    "stored_answer",
    "has_free_text",
    "pass_verdict",
    "classify",
    "parse_free_text_grades",
    "apply_review_marks",
]
