#app\features\notifications\service.py
import asyncio
import html
import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from typing import Any, Dict, Optional, Set

from app.Core.config import get_settings
from app.common.errors import NotificationError
from app.features.notifications.repository import NotificationRepository

logger = logging.getLogger(__name__)


@dataclass
class ReviewEmail:
    to: str
    subject: str
    text: str
    html: str


def _course_url(site_url: str, course: Optional[Dict[str, Any]]) -> str:
    slug = (course or {}).get("slug")
    if slug and site_url:
        return f"{site_url}/courses/{slug}/learn"
    return site_url


def build_review_email(
    to: str,
    kind: str,
    lesson_title: Optional[str],
    course: Optional[Dict[str, Any]],
    *,
    decision: Optional[str] = None,
    feedback: Optional[str] = None,
    score_line: Optional[str] = None,
) -> ReviewEmail:
    """Render the learner-facing summary of a project decision or a quiz grade."""
    settings = get_settings()
    course_title = (course or {}).get("title") or "Course"
    lesson_title = lesson_title or ("Project" if kind == "project" else "Quiz")
    course_url = _course_url(settings.site_url, course)

    heading = f"Your {kind} review is complete"
    lines = [heading, "", f"Course: {course_title}", f"Lesson: {lesson_title}"]
    parts = [
        f"<h2>{html.escape(heading)}</h2>",
        f"<p><strong>Course:</strong> {html.escape(course_title)}</p>",
        f"<p><strong>Lesson:</strong> {html.escape(lesson_title)}</p>",
    ]
    if decision:
        label = "Approved" if decision == "approved" else "Rejected"
        color = "#10b981" if decision == "approved" else "#ef4444"
        lines.append(f"Status: {label}")
        parts.append(f'<p><strong>Status:</strong> <span style="color: {color}; font-weight: 600;">{label}</span></p>')
    if score_line:
        lines.append(score_line)
        parts.append(f"<p><strong>{html.escape(score_line)}</strong></p>")
    if feedback:
        lines.append(f"Feedback: {feedback}")
        parts.append(f"<p><strong>Feedback:</strong><br/>{html.escape(feedback)}</p>")
    if course_url:
        lines.extend(["", f"Continue learning: {course_url}"])
        parts.append(f'<p>Continue learning: <a href="{html.escape(course_url)}">{html.escape(course_title)}</a></p>')

    return ReviewEmail(
        to=to,
        subject=f"{kind.capitalize()} review completed - CodeCraft Academy",
        text="\n".join(lines),
        html='<div style="font-family: Arial, sans-serif; max-width: 640px; margin: 0 auto; padding: 20px;">'
        + "".join(parts)
        + "</div>",
    )


class NotificationService:
    _pending: Set["asyncio.Task[bool]"] = set()

    @classmethod
    async def send_email(cls, email: ReviewEmail) -> None:
        """Send via SMTP in a worker thread. Raises ``NotificationError`` on failure."""
        settings = get_settings()
        if not settings.smtp_configured:
            raise NotificationError("SMTP_HOST not configured")
        loop = asyncio.get_running_loop()

        def _send():
            msg = EmailMessage()
            msg["Subject"] = email.subject
            msg["From"] = settings.from_email
            msg["To"] = email.to
            msg.set_content(email.text)
            msg.add_alternative(email.html, subtype="html")

            with smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=settings.smtp_timeout) as smtp:
                smtp.starttls()
                if settings.smtp_user:
                    smtp.login(settings.smtp_user, settings.smtp_pass)
                smtp.send_message(msg)

        try:
            await loop.run_in_executor(None, _send)
        except (OSError, smtplib.SMTPException) as exc:
            raise NotificationError(str(exc)) from exc
        logger.info("review email sent to=%s", email.to)

    @classmethod
    async def should_send_review_notification(cls) -> bool:
        # no review-specific toggle; the newsletter switch acts as the global email switch
        settings = await NotificationRepository.get_system_settings()
        return bool(settings.get("newsletter_enabled", True))

    @classmethod
    async def notify_review_decision(
        cls,
        submission: Dict[str, Any],
        kind: str,
        *,
        decision: Optional[str] = None,
        feedback: Optional[str] = None,
        score_line: Optional[str] = None,
    ) -> bool:
        """Best-effort email to the learner. Never raises; returns whether a mail went out."""
        try:
            if not await cls.should_send_review_notification():
                logger.info("review notification skipped (disabled) submission_id=%s", submission.get("id"))
                return False
            to = await NotificationRepository.get_user_email(str(submission.get("user_id")))
            if not to:
                logger.info("review notification skipped (no email) user_id=%s", submission.get("user_id"))
                return False
            lesson_title, course = await asyncio.gather(
                NotificationRepository.get_lesson_title(str(submission.get("lesson_id"))),
                NotificationRepository.get_course(str(submission.get("course_id"))),
            )
            email = build_review_email(
                to,
                kind,
                lesson_title,
                course,
                decision=decision,
                feedback=feedback,
                score_line=score_line,
            )
            await cls.send_email(email)
            return True
        except Exception as exc:  # noqa: BLE001
            logger.error("review notification failed submission_id=%s: %s", submission.get("id"), exc)
            return False

    @classmethod
    def schedule_review_decision(cls, submission: Dict[str, Any], kind: str, **details: Any) -> "asyncio.Task[bool]":
        """Send the review email in the background so the review never waits on SMTP."""
        task = asyncio.create_task(cls.notify_review_decision(submission, kind, **details))
        cls._pending.add(task)
        task.add_done_callback(cls._pending.discard)
        return task

    @classmethod
    async def drain(cls, timeout: Optional[float] = None) -> None:
        """Wait for scheduled review emails; used on shutdown and in tests."""
        loop = asyncio.get_running_loop()
        tasks = {t for t in cls._pending if t.get_loop() is loop}
        if tasks:
            await asyncio.wait(tasks, timeout=timeout)


notification_service = NotificationService()

__all__ = ["NotificationService", "notification_service", "build_review_email", "ReviewEmail"]
