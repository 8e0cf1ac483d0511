"""
Intake validation.

Runs before any external call; the first failing field is reported.
"""

from pydantic import ValidationError as PydanticValidationError

from lead_intake.errors import ValidationError
from lead_intake.schemas.lead import LeadSubmission


def validate_lead(payload: dict) -> LeadSubmission:
    """Build a LeadSubmission from a raw request body, or raise ValidationError."""
    if not isinstance(payload, dict):
        raise ValidationError("Payload must be a JSON object.")
    try:
        return LeadSubmission.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError(_first_error_message(e)) from e


def _first_error_message(exc: PydanticValidationError) -> str:
    """Format the first pydantic error as '"field" rule'."""
    error = exc.errors()[0]
    field = ".".join(str(part) for part in error.get("loc", ())) or "body"
    if error.get("type") == "missing":
        return f'"{field}" is required'
    if error.get("type") == "extra_forbidden":
        return f'"{field}" is not allowed'
    return f'"{field}" {_lowercase_first(error.get("msg", "is invalid"))}'


def _lowercase_first(text: str) -> str:
    return text[:1].lower() + text[1:]
