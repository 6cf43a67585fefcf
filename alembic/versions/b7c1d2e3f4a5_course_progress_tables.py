"""course progress and grading tables

Revision ID: b7c1d2e3f4a5
Revises:
Create Date: 2026-10-17 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "b7c1d2e3f4a5"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _has_table(name: str) -> bool:
    bind = op.get_bind()
    inspector = sa.inspect(bind)
    return name in inspector.get_table_names()


def _uuid(name: str, **kwargs) -> sa.Column:
    return sa.Column(name, postgresql.UUID(as_uuid=True), **kwargs)


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    ]


def upgrade() -> None:
    if not _has_table("lessons"):
        op.create_table(
            "lessons",
            _uuid("id", primary_key=True, server_default=sa.text("gen_random_uuid()")),
            _uuid("course_id", nullable=False),
            sa.Column("title", sa.String(length=255), nullable=False),
            sa.Column("lesson_type", sa.String(length=32), nullable=False, server_default="content"),
            sa.Column("step_number", sa.Integer(), nullable=True),
            sa.Column("is_published", sa.Boolean(), nullable=False, server_default=sa.text("false")),
            sa.Column("content", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
            *_timestamps(),
        )
        op.create_index("ix_lessons_course_id", "lessons", ["course_id"], unique=False)

    if not _has_table("lesson_quiz_submissions"):
        op.create_table(
            "lesson_quiz_submissions",
            _uuid("id", primary_key=True, server_default=sa.text("gen_random_uuid()")),
            _uuid("user_id", nullable=False),
            _uuid("course_id", nullable=False),
            _uuid("lesson_id", nullable=False),
            sa.Column(
                "answers",
                postgresql.JSONB(astext_type=sa.Text()),
                nullable=False,
                server_default=sa.text("'[]'::jsonb"),
            ),
            sa.Column(
                "attachment_urls",
                postgresql.JSONB(astext_type=sa.Text()),
                nullable=False,
                server_default=sa.text("'[]'::jsonb"),
            ),
            sa.Column("score", sa.Float(), nullable=True),
            sa.Column("total", sa.Float(), nullable=True),
            sa.Column("status", sa.String(length=32), nullable=False, server_default="pending_review"),
            sa.Column("is_passed", sa.Boolean(), nullable=True),
            _uuid("reviewer_id", nullable=True),
            sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
            *_timestamps(),
            sa.UniqueConstraint("user_id", "lesson_id", name="uq_quiz_submission_user_lesson"),
        )
        op.create_index("ix_lesson_quiz_submissions_user_id", "lesson_quiz_submissions", ["user_id"])
        op.create_index("ix_lesson_quiz_submissions_course_id", "lesson_quiz_submissions", ["course_id"])
        op.create_index("ix_lesson_quiz_submissions_lesson_id", "lesson_quiz_submissions", ["lesson_id"])
        op.create_index("ix_lesson_quiz_submissions_status", "lesson_quiz_submissions", ["status"])

    if not _has_table("lesson_project_submissions"):
        op.create_table(
            "lesson_project_submissions",
            _uuid("id", primary_key=True, server_default=sa.text("gen_random_uuid()")),
            _uuid("user_id", nullable=False),
            _uuid("course_id", nullable=False),
            _uuid("lesson_id", nullable=False),
            sa.Column("submission_text", sa.Text(), nullable=True),
            sa.Column("submission_url", sa.String(length=2048), nullable=True),
            sa.Column(
                "attachment_urls",
                postgresql.JSONB(astext_type=sa.Text()),
                nullable=False,
                server_default=sa.text("'[]'::jsonb"),
            ),
            sa.Column("status", sa.String(length=32), nullable=False, server_default="pending_review"),
            sa.Column("feedback", sa.Text(), nullable=True),
            _uuid("reviewer_id", nullable=True),
            sa.Column("reviewed_at", sa.DateTime(timezone=True), nullable=True),
            *_timestamps(),
            sa.UniqueConstraint("user_id", "lesson_id", name="uq_project_submission_user_lesson"),
        )
        op.create_index("ix_lesson_project_submissions_user_id", "lesson_project_submissions", ["user_id"])
        op.create_index("ix_lesson_project_submissions_course_id", "lesson_project_submissions", ["course_id"])
        op.create_index("ix_lesson_project_submissions_lesson_id", "lesson_project_submissions", ["lesson_id"])
        op.create_index("ix_lesson_project_submissions_status", "lesson_project_submissions", ["status"])

    if not _has_table("user_lesson_completion"):
        op.create_table(
            "user_lesson_completion",
            _uuid("id", primary_key=True, server_default=sa.text("gen_random_uuid()")),
            _uuid("user_id", nullable=False),
            _uuid("course_id", nullable=False),
            _uuid("lesson_id", nullable=False),
            sa.Column("completed_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
            sa.UniqueConstraint("user_id", "lesson_id", name="uq_lesson_completion_user_lesson"),
        )
        op.create_index("ix_user_lesson_completion_user_id", "user_lesson_completion", ["user_id"])
        op.create_index("ix_user_lesson_completion_course_id", "user_lesson_completion", ["course_id"])

    if not _has_table("user_course_enrollments"):
        op.create_table(
            "user_course_enrollments",
            _uuid("id", primary_key=True, server_default=sa.text("gen_random_uuid()")),
            _uuid("user_id", nullable=False),
            _uuid("course_id", nullable=False),
            sa.Column("enrolled_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
            sa.Column("is_completed", sa.Boolean(), nullable=False, server_default=sa.text("false")),
            sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
            sa.Column("final_score_100", sa.Float(), nullable=True),
            sa.Column("is_passed", sa.Boolean(), nullable=True),
            sa.UniqueConstraint("user_id", "course_id", name="uq_enrollment_user_course"),
        )
        op.create_index("ix_user_course_enrollments_user_id", "user_course_enrollments", ["user_id"])
        op.create_index("ix_user_course_enrollments_course_id", "user_course_enrollments", ["course_id"])


def downgrade() -> None:
    for table in (
        "user_course_enrollments",
        "user_lesson_completion",
        "lesson_project_submissions",
        "lesson_quiz_submissions",
        "lessons",
    ):
        if _has_table(table):
            op.drop_table(table)
