"""
Outbound recruitment email.

Messages go out over SMTP with ``smtplib``; the blocking send runs in a worker
thread so request handlers stay async. Every attempt is written to the email
log, whether it succeeded or not.
"""

from __future__ import annotations

import asyncio
import re
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from abg_site.core.database.entities.applications import Application
from abg_site.core.database.entities.email_logs import EmailLog
from abg_site.core.database.repositories.email_logs import EmailLogRepository
from abg_site.core.logging_config import get_logger
from abg_site.core.models.domain.enums import EmailStatus, ReviewPhase
from abg_site.core.monitoring import log_email_sent
from abg_site.server.core.config import SMTPConfig, settings

logger = get_logger(__name__)

_PLACEHOLDER = re.compile(r"\{\{\s*(\w+)\s*\}\}")

PORTAL_URL = "https://abgumich.org/portal"


@dataclass(frozen=True)
class EmailTemplate:
    subject: str
    body: str


# Advance and reject notices sent when a phase cutoff is applied.
PHASE_EMAIL_TEMPLATES: Dict[str, Dict[str, EmailTemplate]] = {
    ReviewPhase.application.value: {
        "advance": EmailTemplate(
            subject="ABG Application Update - Interview Invitation",
            body=(
                "Congratulations, {{name}}!\n\n"
                "Your application to the AI Business Group ({{track}} track) has been selected to move "
                "forward to the interview stage.\n\n"
                f"Next steps: log in to the ABG Portal ({PORTAL_URL}), open the Schedule section and book "
                "your Round 1 interview slot within the next few days.\n\n"
                "AI Business Group"
            ),
        ),
        "reject": EmailTemplate(
            subject="ABG Application Update",
            body=(
                "Thank you for applying, {{name}}.\n\n"
                "After careful review we are unable to move forward with your application at this time. "
                "Due to the volume of applications we cannot provide individual feedback.\n\n"
                "We encourage you to attend our open events and to apply again in a future cycle.\n\n"
                "AI Business Group"
            ),
        ),
    },
    ReviewPhase.interview_round1.value: {
        "advance": EmailTemplate(
            subject="ABG Interview Update - Round 2 Invitation",
            body=(
                "Great news, {{name}}!\n\n"
                "You have advanced to Round 2 of the ABG interview process.\n\n"
                f"Next steps: log in to the ABG Portal ({PORTAL_URL}), open the Schedule section and book "
                "your Round 2 interview slot. Round 2 focuses on cultural fit, leadership and teamwork.\n\n"
                "AI Business Group"
            ),
        ),
        "reject": EmailTemplate(
            subject="ABG Interview Update",
            body=(
                "Thank you, {{name}}.\n\n"
                "Thank you for taking part in the Round 1 interview. After careful consideration we have "
                "decided not to move forward with your application at this time.\n\n"
                "We hope to see you at our events throughout the semester.\n\n"
                "AI Business Group"
            ),
        ),
    },
    ReviewPhase.interview_round2.value: {
        "advance": EmailTemplate(
            subject="Welcome to ABG!",
            body=(
                "Congratulations, {{name}}!\n\n"
                "You have been accepted into the AI Business Group ({{track}} track). Look out for our "
                "onboarding email with details about orientation and our welcome event.\n\n"
                "AI Business Group"
            ),
        ),
        "reject": EmailTemplate(
            subject="ABG Final Decision",
            body=(
                "Thank you, {{name}}.\n\n"
                "Thank you for going through the full ABG recruitment process. After much deliberation we "
                "are unable to offer you membership this cycle.\n\n"
                "We encourage you to stay involved through our open events and to apply again.\n\n"
                "AI Business Group"
            ),
        ),
    },
}


def render_template(text: str, context: Mapping[str, object]) -> str:
    """Replace ``{{key}}`` placeholders; unknown keys are left as written."""

    def _sub(match: re.Match) -> str:
        key = match.group(1)
        return str(context[key]) if key in context else match.group(0)

    return _PLACEHOLDER.sub(_sub, text)


def applicant_context(application: Application) -> Dict[str, str]:
    name = application.user_name or application.user_email.split("@")[0]
    return {"name": name, "track": application.track, "email": application.user_email}


class EmailSender:
    """Sends single messages over SMTP."""

    def __init__(self, config: Optional[SMTPConfig] = None):
        self.config = config or settings.smtp

    def _send_sync(self, message: EmailMessage) -> None:
        with smtplib.SMTP(self.config.host, self.config.port, timeout=30) as smtp:
            if self.config.use_tls:
                smtp.starttls()
            if self.config.user and self.config.password:
                smtp.login(self.config.user, self.config.password)
            smtp.send_message(message)

    async def send(self, to: str, subject: str, body: str) -> Tuple[bool, Optional[str]]:
        """
        Send one plain-text message.

        Returns:
            ``(True, None)`` on success, ``(False, error)`` otherwise.
        """
        if not self.config.is_configured:
            logger.warning(f"SMTP is not configured; email to {to} was not sent")
            return False, "SMTP is not configured"

        message = EmailMessage()
        message["From"] = self.config.from_email
        message["To"] = to
        message["Subject"] = subject
        message.set_content(body)
        try:
            await asyncio.to_thread(self._send_sync, message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email to {to}: {e}")
            return False, str(e)
        logger.info(f"Email '{subject}' sent to {to}")
        return True, None


class EmailService:
    """Renders, sends and logs applicant emails."""

    def __init__(self, session: AsyncSession, sender: Optional[EmailSender] = None):
        self.session = session
        self.sender = sender or EmailSender()
        self.logs = EmailLogRepository(session)

    async def send_to_application(
        self,
        application: Application,
        subject: str,
        body: str,
        template: str,
        sent_by: Optional[str] = None,
    ) -> bool:
        context = applicant_context(application)
        rendered_subject = render_template(subject, context)
        ok, error = await self.sender.send(application.user_email, rendered_subject, render_template(body, context))
        await self.logs.create(
            EmailLog(
                cycle_id=application.cycle_id,
                application_id=application.id,
                to_email=application.user_email,
                subject=rendered_subject,
                template=template,
                status=(EmailStatus.sent if ok else EmailStatus.failed).value,
                error=error,
                sent_by=sent_by,
            )
        )
        log_email_sent(application.user_email, template, ok)
        return ok

    async def send_bulk(
        self, applications: Iterable[Application], subject: str, body: str, template: str, sent_by: Optional[str] = None
    ) -> Tuple[int, int]:
        """Send the same templated message to each application. Returns ``(sent, failed)``."""
        sent = failed = 0
        for application in applications:
            if await self.send_to_application(application, subject, body, template, sent_by):
                sent += 1
            else:
                failed += 1
        logger.info(f"Bulk email '{template}': {sent} sent, {failed} failed")
        return sent, failed

    async def send_phase_results(
        self, phase: str, outcomes: List[Tuple[Application, bool]], sent_by: Optional[str] = None
    ) -> Tuple[int, int]:
        """Send each applicant the advance or reject notice for ``phase``."""
        templates = PHASE_EMAIL_TEMPLATES[phase]
        sent = failed = 0
        for application, advanced in outcomes:
            kind = "advance" if advanced else "reject"
            template = templates[kind]
            ok = await self.send_to_application(
                application, template.subject, template.body, f"{phase}_{kind}", sent_by
            )
            if ok:
                sent += 1
            else:
                failed += 1
        return sent, failed
