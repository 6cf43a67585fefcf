from sqlalchemy import Column, String, Integer, Boolean, DateTime
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.sql import func
import uuid
import enum
from app.DB.base import Base


class LessonType(enum.Enum):
    content = "content"
    quiz = "quiz"
    project = "project"


class AssessmentType(str, enum.Enum):
    cat = "cat"
    final_exam = "final_exam"

    @classmethod
    def _missing_(cls, value):
        # Anything unrecognised counts toward continuous assessment
        return cls.cat


class Lesson(Base):
    """Authored elsewhere; the grading engine only reads it.

    ``content.quiz_data`` holds ``questions`` and ``assessment_type``.
    """
    __tablename__ = "lessons"
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    course_id = Column(UUID(as_uuid=True), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    lesson_type = Column(String(32), nullable=False, default=LessonType.content.value)
    step_number = Column(Integer, nullable=True)
    is_published = Column(Boolean, nullable=False, default=False)
    content = Column(JSONB, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<Lesson(id={self.id}, course_id={self.course_id}, type={self.lesson_type})>"
