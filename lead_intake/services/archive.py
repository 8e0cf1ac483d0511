"""Archival adapter: one flattened LeadRecord per processed lead."""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from lead_intake.db.repository import create_lead_record, lead_exists
from lead_intake.errors import ArchivalError
from lead_intake.schemas.analysis import LeadAnalysis
from lead_intake.schemas.email import ComposedEmail
from lead_intake.schemas.lead import LeadSubmission
from lead_intake.services.idempotency import compute_dedup_key

logger = logging.getLogger(__name__)


class LeadArchive:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def archive(
        self,
        lead: LeadSubmission,
        analysis: LeadAnalysis,
        email: ComposedEmail | None,
    ) -> None:
        """Write the lead summary. `email` is None when sending was suppressed."""
        try:
            async with self.session_factory() as session:
                await create_lead_record(
                    session,
                    name=lead.name,
                    email=str(lead.email),
                    language=lead.preferred_language,
                    industry=analysis.industry,
                    decision=analysis.decision,
                    confidence_score=analysis.confidence,
                    justification=analysis.justification,
                    email_subject=email.subject if email else None,
                    email_body=email.body if email else None,
                    dedup_key=compute_dedup_key(lead),
                )
                await session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Archive write failed for {lead.email}: {e}")
            raise ArchivalError(f"Archive write failed: {e}") from e

    async def exists(self, lead: LeadSubmission) -> bool:
        try:
            async with self.session_factory() as session:
                return await lead_exists(session, compute_dedup_key(lead))
        except SQLAlchemyError as e:
            raise ArchivalError(f"Archive lookup failed: {e}") from e
