from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from lead_intake.db.models import LeadRecord


async def lead_exists(session: AsyncSession, dedup_key: str) -> bool:
    """True if any lead with this dedup key has been archived."""
    stmt = select(LeadRecord.id).where(LeadRecord.dedup_key == dedup_key).limit(1)
    result = await session.execute(stmt)
    return result.scalar_one_or_none() is not None


async def create_lead_record(
    session: AsyncSession,
    *,
    name: str,
    email: str,
    language: str,
    industry: str,
    decision: str,
    confidence_score: int,
    justification: str,
    email_subject: str | None,
    email_body: str | None,
    dedup_key: str,
) -> LeadRecord:
    """Insert one archived lead. Records are never updated."""
    record = LeadRecord(
        name=name,
        email=email,
        language=language,
        industry=industry,
        decision=decision,
        confidence_score=confidence_score,
        justification=justification,
        email_subject=email_subject,
        email_body=email_body,
        dedup_key=dedup_key,
    )
    session.add(record)
    await session.flush()
    return record
