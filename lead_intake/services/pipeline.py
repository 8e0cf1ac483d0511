"""
Lead pipeline: analyze -> compose -> deliver -> archive.

Strictly sequential per request. Any stage failure aborts the rest, so a
lead is only archived after both AI stages and delivery have succeeded.
"""

import logging
from dataclasses import dataclass
from typing import Literal

from lead_intake.errors import DuplicateLeadError
from lead_intake.schemas.analysis import LeadAnalysis
from lead_intake.schemas.email import ComposedEmail
from lead_intake.schemas.lead import LeadSubmission
from lead_intake.services.analyzer import LeadAnalyzer
from lead_intake.services.archive import LeadArchive
from lead_intake.services.composer import EmailComposer
from lead_intake.services.mailer import GraphMailer

logger = logging.getLogger(__name__)

NotAFitPolicy = Literal["soft_touch", "suppress"]


@dataclass(frozen=True)
class PipelineResult:
    analysis: LeadAnalysis
    email: ComposedEmail | None
    delivered: bool


class LeadPipeline:
    def __init__(
        self,
        analyzer: LeadAnalyzer,
        composer: EmailComposer,
        mailer: GraphMailer,
        archive: LeadArchive,
        not_a_fit_policy: NotAFitPolicy = "soft_touch",
        reject_duplicate_leads: bool = False,
    ):
        self.analyzer = analyzer
        self.composer = composer
        self.mailer = mailer
        self.archive = archive
        self.not_a_fit_policy = not_a_fit_policy
        self.reject_duplicate_leads = reject_duplicate_leads

    async def run(self, lead: LeadSubmission) -> PipelineResult:
        """
        Process one validated lead end to end.

        - soft_touch: every lead gets an email; not_a_fit leads get the brief goodwill variant.
        - suppress: not_a_fit leads are archived without composing or sending anything.
        """
        if self.reject_duplicate_leads and await self.archive.exists(lead):
            logger.info(f"Duplicate lead rejected: {lead.email}")
            raise DuplicateLeadError("Lead already processed.")

        logger.info(f"Processing lead: {lead.name}")

        # ── 1. Analysis ──────────────────────────────────────────────────────
        analysis = await self.analyzer.analyze(lead)
        logger.info(f"Decision for {lead.name}: {analysis.decision} (confidence {analysis.confidence})")

        if analysis.decision == "not_a_fit" and self.not_a_fit_policy == "suppress":
            await self.archive.archive(lead, analysis, None)
            logger.info(f"Email suppressed for not_a_fit lead {lead.email}")
            return PipelineResult(analysis=analysis, email=None, delivered=False)

        # ── 2. Composition ───────────────────────────────────────────────────
        email = await self.composer.compose(lead, analysis)
        logger.info(f"Composed subject: {email.subject}")

        # ── 3. Delivery ──────────────────────────────────────────────────────
        await self.mailer.deliver(str(lead.email), email)
        logger.info(f"Email delivered to {lead.email}")

        # ── 4. Archival ──────────────────────────────────────────────────────
        await self.archive.archive(lead, analysis, email)
        logger.info(f"Lead archived: {lead.email}")

        return PipelineResult(analysis=analysis, email=email, delivered=True)
