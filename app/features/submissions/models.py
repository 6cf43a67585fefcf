from sqlalchemy import Column, String, Text, Float, DateTime, Boolean, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.sql import func
import uuid
import enum
from app.DB.base import Base


class QuizSubmissionStatus(str, enum.Enum):
    pending_review = "pending_review"
    graded = "graded"


class ProjectSubmissionStatus(str, enum.Enum):
    pending_review = "pending_review"
    approved = "approved"
    rejected = "rejected"


class QuizSubmission(Base):
    __tablename__ = "lesson_quiz_submissions"
    __table_args__ = (
        UniqueConstraint("user_id", "lesson_id", name="uq_quiz_submission_user_lesson"),
    )
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), nullable=False, index=True)
    course_id = Column(UUID(as_uuid=True), nullable=False, index=True)
    lesson_id = Column(UUID(as_uuid=True), nullable=False, index=True)
    answers = Column(JSONB, nullable=False, server_default="[]")
    attachment_urls = Column(JSONB, nullable=False, server_default="[]")
    score = Column(Float, nullable=True)
    total = Column(Float, nullable=True)
    status = Column(String(32), nullable=False, default=QuizSubmissionStatus.pending_review.value, index=True)
    is_passed = Column(Boolean, nullable=True)
    reviewer_id = Column(UUID(as_uuid=True), nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<QuizSubmission(id={self.id}, lesson_id={self.lesson_id}, user_id={self.user_id}, status={self.status})>"


class ProjectSubmission(Base):
    __tablename__ = "lesson_project_submissions"
    __table_args__ = (
        UniqueConstraint("user_id", "lesson_id", name="uq_project_submission_user_lesson"),
    )
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), nullable=False, index=True)
    course_id = Column(UUID(as_uuid=True), nullable=False, index=True)
    lesson_id = Column(UUID(as_uuid=True), nullable=False, index=True)
    submission_text = Column(Text, nullable=True)
    submission_url = Column(String(2048), nullable=True)
    attachment_urls = Column(JSONB, nullable=False, server_default="[]")
    status = Column(String(32), nullable=False, default=ProjectSubmissionStatus.pending_review.value, index=True)
    feedback = Column(Text, nullable=True)
    reviewer_id = Column(UUID(as_uuid=True), nullable=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<ProjectSubmission(id={self.id}, lesson_id={self.lesson_id}, user_id={self.user_id}, status={self.status})>"
