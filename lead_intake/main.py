"""
Lead Intake Webhook: FastAPI Service

Form submission in, AI-qualified sales email out, summary archived.
"""

import logging
from contextlib import asynccontextmanager

import httpx
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from openai import AsyncOpenAI
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from lead_intake.config import Settings, settings
from lead_intake.db.session import build_engine, build_session_factory, init_db
from lead_intake.prompts import analyst_instructions, composer_instructions, signature_html
from lead_intake.routes import leads
from lead_intake.services.analyzer import LeadAnalyzer
from lead_intake.services.archive import LeadArchive
from lead_intake.services.composer import EmailComposer
from lead_intake.services.llm import LLMClient, build_openai_client
from lead_intake.services.mailer import GraphMailer
from lead_intake.services.pipeline import LeadPipeline

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def build_pipeline(
    settings: Settings,
    openai_client: AsyncOpenAI,
    http: httpx.AsyncClient,
    session_factory: async_sessionmaker[AsyncSession],
) -> LeadPipeline:
    """Wire every stage from explicit handles; nothing here is a global."""
    llm = LLMClient(openai_client, settings.openai_model, settings.openai_temperature)
    return LeadPipeline(
        analyzer=LeadAnalyzer(llm, analyst_instructions(settings)),
        composer=EmailComposer(
            llm,
            composer_instructions(settings),
            signature=signature_html(settings),
            sender_name=settings.sender_name,
        ),
        mailer=GraphMailer.from_settings(http, settings),
        archive=LeadArchive(session_factory),
        not_a_fit_policy=settings.not_a_fit_policy,
        reject_duplicate_leads=settings.reject_duplicate_leads,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build client handles, create tables, and close everything on shutdown."""
    engine = build_engine(settings)
    await init_db(engine)
    openai_client = build_openai_client(settings)
    http = httpx.AsyncClient()
    app.state.pipeline = build_pipeline(settings, openai_client, http, build_session_factory(engine))
    logger.info(f"Lead pipeline ready (model={settings.openai_model}, not_a_fit_policy={settings.not_a_fit_policy})")
    try:
        yield
    finally:
        await http.aclose()
        await openai_client.close()
        await engine.dispose()


app = FastAPI(
    title="Lead Intake Webhook",
    description="Lead classification, AI-written outreach email, delivery and archival.",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(leads.router)


@app.get("/health", tags=["health"])
async def health():
    """Health check for load balancers and container orchestration."""
    return {"status": "ok"}


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
