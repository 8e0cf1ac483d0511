"""
POST /api/process-lead: validate, analyze, compose, deliver, archive.

POST /process is kept as an alias of the same handler.
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from lead_intake.errors import DuplicateLeadError, LeadIntakeError, ValidationError
from lead_intake.schemas.lead import ProcessLeadResponse
from lead_intake.services.intake import validate_lead
from lead_intake.services.pipeline import LeadPipeline

logger = logging.getLogger(__name__)

router = APIRouter(tags=["leads"])


def get_pipeline(request: Request) -> LeadPipeline:
    """Pipeline built at startup (see lifespan in lead_intake.main)."""
    return request.app.state.pipeline


@router.post("/api/process-lead", response_model=ProcessLeadResponse)
@router.post("/process", response_model=ProcessLeadResponse, include_in_schema=False)
async def process_lead(request: Request, pipeline: LeadPipeline = Depends(get_pipeline)):
    """
    Process one inbound lead.

    - 400 {error}: body is not JSON or fails intake validation (no external call is made).
    - 409 {error}: duplicate lead, only when duplicate rejection is enabled.
    - 500 {error: "Workflow Error", details}: any downstream stage failed.
    """
    # ── 1. Parse body ────────────────────────────────────────────────────────
    try:
        payload = await request.json()
    except (ValueError, RecursionError):
        return JSONResponse(status_code=400, content={"error": "Invalid JSON body."})

    # ── 2. Intake validation ─────────────────────────────────────────────────
    try:
        lead = validate_lead(payload)
    except ValidationError as e:
        logger.info(f"Lead rejected at intake: {e.message}")
        return JSONResponse(status_code=400, content={"error": e.message})

    # ── 3. Pipeline ──────────────────────────────────────────────────────────
    try:
        result = await pipeline.run(lead)
    except DuplicateLeadError as e:
        return JSONResponse(status_code=409, content={"error": e.message})
    except LeadIntakeError as e:
        logger.error(f"Workflow failed for {lead.email} ({type(e).__name__}): {e.message}")
        return _workflow_error(e.message)
    except Exception as e:
        logger.exception(f"Unexpected workflow failure for {lead.email}")
        return _workflow_error(str(e))

    return ProcessLeadResponse(
        analysis=result.analysis,
        metrics=result.email.estimated_performance if result.email else None,
    )


def _workflow_error(details: str) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": "Workflow Error", "details": details})
