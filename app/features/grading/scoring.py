from __future__ import annotations

"""
Course grade aggregation.

Composite rules:
	- Continuous assessment (CAT): every non-final-exam quiz, worth 30 points
	- Final exam: worth 70 points
	- Each band scales raw score/total of its graded submissions; a band with
	  nothing graded scores exactly 0
	- final_score_100 = clamp(cat_scaled_30 + exam_scaled_70, 0, 100)

Pending-review CAT submissions count toward neither numerator nor
denominator. A pending final exam only raises ``final_exam_pending_review``.
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable, Sequence

from app.common.utils import safe_number
from app.features.submissions.models import QuizSubmissionStatus

CAT_WEIGHT = 30.0
EXAM_WEIGHT = 70.0
PASS_MARK = 70.0


@dataclass(frozen=True)
class GradeSummary:
    cat_raw: float = 0
    cat_total_raw: float = 0
    cat_scaled_30: float = 0
    exam_raw: float = 0
    exam_total_raw: float = 0
    exam_scaled_70: float = 0
    final_score_100: float = 0
    has_final_exam: bool = False
    final_exam_pending_review: bool = False
    final_exam_graded: bool = False

    @property
    def passed(self) -> bool:
        return self.final_score_100 >= PASS_MARK


def clamp(value: float, lo: float, hi: float) -> float:
    return min(hi, max(lo, value))


def scale(raw: float, total: float, weight: float) -> float:
    return (raw / total) * weight if total > 0 else 0


def summarize_submissions(
    submissions: Iterable[Dict[str, Any]],
    cat_lesson_ids: Sequence[str],
    exam_lesson_ids: Sequence[str],
) -> GradeSummary:
    """Fold the user's quiz submissions for one course into a ``GradeSummary``."""
    cat_ids = {str(i) for i in cat_lesson_ids}
    exam_ids = {str(i) for i in exam_lesson_ids}

    cat_raw = cat_total = exam_raw = exam_total = 0
    exam_pending = exam_graded = False

    for s in submissions:
        lesson_id = str(s.get("lesson_id"))
        status = s.get("status") if isinstance(s.get("status"), str) else ""
        score = safe_number(s.get("score"))
        total = safe_number(s.get("total"))

        if lesson_id in exam_ids:
            if status == QuizSubmissionStatus.pending_review.value:
                exam_pending = True
            elif status == QuizSubmissionStatus.graded.value:
                exam_graded = True
                exam_raw += score
                exam_total += total
        elif lesson_id in cat_ids and status == QuizSubmissionStatus.graded.value:
            cat_raw += score
            cat_total += total

    cat_scaled = scale(cat_raw, cat_total, CAT_WEIGHT)
    exam_scaled = scale(exam_raw, exam_total, EXAM_WEIGHT)
    return GradeSummary(
        cat_raw=cat_raw,
        cat_total_raw=cat_total,
        cat_scaled_30=cat_scaled,
        exam_raw=exam_raw,
        exam_total_raw=exam_total,
        exam_scaled_70=exam_scaled,
        final_score_100=clamp(cat_scaled + exam_scaled, 0, 100),
        has_final_exam=len(exam_ids) > 0,
        final_exam_pending_review=exam_pending,
        final_exam_graded=exam_graded,
    )


def summarize(summary: GradeSummary) -> dict:
    return asdict(summary)
