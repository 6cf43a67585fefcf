from pydantic import BaseModel, ConfigDict


class GradeSummaryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    cat_raw: float
    cat_total_raw: float
    cat_scaled_30: float
    exam_raw: float
    exam_total_raw: float
    exam_scaled_70: float
    final_score_100: float
    has_final_exam: bool
    final_exam_pending_review: bool
    final_exam_graded: bool
