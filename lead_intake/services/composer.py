"""
Email Composer: persona-driven sales email for one analyzed lead.

The model writes the copy; the final body shape (RTL container, closing
signature) is enforced here rather than trusted to the model.
"""

import json
import logging
import re

from lead_intake.prompts import PSYCHOLOGY_BY_CONFIDENCE, confidence_band
from lead_intake.schemas.analysis import LeadAnalysis
from lead_intake.schemas.email import ComposedEmail
from lead_intake.schemas.lead import LeadSubmission
from lead_intake.services.analyzer import parse_model_output
from lead_intake.services.llm import LLMClient

logger = logging.getLogger(__name__)

STAGE = "composition"
SUBJECT_MIN, SUBJECT_MAX = 25, 45
RTL_OPEN = '<div dir="rtl">'
RTL_CLOSE = "</div>"

_RTL_OPEN_TAG = re.compile(r"<div\s+dir\s*=\s*[\"']rtl[\"']\s*>", re.IGNORECASE)
_DIV_TAG = re.compile(r"<div\b[^>]*>|</div\s*>", re.IGNORECASE)
_DOCUMENT_BODY = re.compile(r"<body\b[^>]*>(.*)</body\s*>", re.DOTALL | re.IGNORECASE)
_SHELL_TAGS = re.compile(
    r"<!DOCTYPE[^>]*>|<head\b[^>]*>.*?</head\s*>|</?html\b[^>]*>|</?body\b[^>]*>",
    re.DOTALL | re.IGNORECASE,
)


class EmailComposer:
    def __init__(self, llm: LLMClient, instructions: str, signature: str, sender_name: str):
        self.llm = llm
        self.instructions = instructions
        self.signature = signature
        # Trailing "--<br> <strong>Sender</strong> ..." block, however the model spaced it.
        # Closing container tags after it are kept.
        self._signature_tail = re.compile(
            r"(?:<br\s*/?>\s*)*--\s*<br\s*/?>\s*<strong>\s*"
            + re.escape(sender_name)
            + r"\s*</strong>.*?(?P<closers>(?:\s*</div\s*>)*\s*)$",
            re.DOTALL | re.IGNORECASE,
        )

    async def compose(self, lead: LeadSubmission, analysis: LeadAnalysis) -> ComposedEmail:
        """
        Draft the email. Raises AIProcessingError under the same conditions
        as the analyzer.
        """
        band = confidence_band(analysis.confidence)
        prompt = (
            f"Lead: {lead.name}. Description: {lead.description}. "
            f"Language: {lead.preferred_language}.\n"
            f"Confidence band: {band} (use {', '.join(PSYCHOLOGY_BY_CONFIDENCE[band])}).\n"
        )
        if analysis.decision == "not_a_fit":
            prompt += "Decision is not_a_fit: follow the not_a_fit_protocol, no sales pitch.\n"
        prompt += f"Analysis: {json.dumps(analysis.model_dump(mode='json'), ensure_ascii=False)}"

        data = await self.llm.generate_json(self.instructions, prompt, stage=STAGE)
        email = parse_model_output(ComposedEmail, data, STAGE)

        if not SUBJECT_MIN <= len(email.subject) <= SUBJECT_MAX:
            logger.info(f"Subject length {len(email.subject)} outside {SUBJECT_MIN}-{SUBJECT_MAX}: {email.subject!r}")

        return email.model_copy(update={"body": self.finalize_body(email.body, lead.preferred_language)})

    def finalize_body(self, body: str, language: str) -> str:
        """Rebuild the body: optional RTL container around the content, then the signature."""
        content = _strip_document_shell(body)
        # The model may put its signature inside or outside its own RTL container.
        content = self._strip_signature(content)
        inner = _unwrap_rtl(content)
        if inner is not None:
            content = self._strip_signature(inner)

        if language == "Arabic":
            content = f"{RTL_OPEN}{content}{RTL_CLOSE}"
        return f"{content}{self.signature}"

    def _strip_signature(self, content: str) -> str:
        content = content.strip()
        if content.endswith(self.signature):
            content = content[: -len(self.signature)]
        return self._signature_tail.sub(r"\g<closers>", content).strip()


def _strip_document_shell(body: str) -> str:
    """Reduce a full HTML document to its <body> content."""
    match = _DOCUMENT_BODY.search(body)
    if match:
        body = match.group(1)
    return _SHELL_TAGS.sub("", body).strip()


def _unwrap_rtl(content: str) -> str | None:
    """Inner HTML when `content` is exactly one balanced <div dir="rtl"> element, else None."""
    if not _RTL_OPEN_TAG.match(content):
        return None
    depth = 0
    for tag in _DIV_TAG.finditer(content):
        depth += -1 if tag.group(0).startswith("</") else 1
        if depth == 0:
            if tag.end() != len(content):
                return None
            opening = _RTL_OPEN_TAG.match(content)
            return content[opening.end() : tag.start()].strip()
    return None
