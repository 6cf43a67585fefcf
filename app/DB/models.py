# Import all models here so Alembic can discover them
from app.DB.base import Base

from app.features.lessons.models import Lesson
from app.features.submissions.models import QuizSubmission, ProjectSubmission
from app.features.completion.models import LessonCompletion
from app.features.enrollments.models import CourseEnrollment

__all__ = [
    "Base",
    "Lesson",
    "QuizSubmission",
    "ProjectSubmission",
    "LessonCompletion",
    "CourseEnrollment",
]
