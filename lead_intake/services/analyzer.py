"""
Lead Analyzer: fit classification and strategic signals.

One model call, JSON-only output, validated against LeadAnalysis.
"""

import json
import logging

from pydantic import ValidationError as PydanticValidationError

from lead_intake.errors import AIProcessingError
from lead_intake.schemas.analysis import LeadAnalysis
from lead_intake.schemas.lead import LeadSubmission
from lead_intake.services.llm import LLMClient

logger = logging.getLogger(__name__)

STAGE = "analysis"


class LeadAnalyzer:
    def __init__(self, llm: LLMClient, instructions: str):
        self.llm = llm
        self.instructions = instructions

    async def analyze(self, lead: LeadSubmission) -> LeadAnalysis:
        """
        Classify the lead. Raises AIProcessingError if the call fails or the
        response does not match the LeadAnalysis schema. No retries.
        """
        customer_data = lead.model_dump(
            mode="json",
            include={"name", "business_type", "description", "preferred_language"},
        )
        prompt = f"Analyze this provided customer data: {json.dumps(customer_data, ensure_ascii=False)}"

        data = await self.llm.generate_json(self.instructions, prompt, stage=STAGE)
        analysis = parse_model_output(LeadAnalysis, data, STAGE)

        if analysis.decision == "not_a_fit" and analysis.recommended_services:
            logger.warning(
                f"Analysis for {lead.name} is not_a_fit but recommends "
                f"{len(analysis.recommended_services)} service(s)"
            )

        # Pass-through fields always come from the lead, not the model's echo.
        passthrough = {"name": lead.name, "language": lead.preferred_language}
        mismatched = [field for field, value in passthrough.items() if getattr(analysis, field) != value]
        if mismatched:
            logger.warning(f"Analysis for {lead.name} echoed different {', '.join(mismatched)}; using lead values")
            analysis = analysis.model_copy(update=passthrough)
        return analysis


def parse_model_output(model, data: dict, stage: str):
    """Validate a parsed model response; the first schema violation becomes an AIProcessingError."""
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        error = e.errors()[0]
        field = ".".join(str(part) for part in error.get("loc", ())) or "response"
        raise AIProcessingError(
            f"AI {stage} response failed schema check at '{field}': {error.get('msg')}",
            stage=stage,
        ) from e
