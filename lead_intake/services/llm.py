"""
Generative-text backend client.

JSON-object output only; anything else is an AIProcessingError.
"""

import json
import logging
import re

from openai import AsyncOpenAI, OpenAIError

from lead_intake.config import Settings
from lead_intake.errors import AIProcessingError

logger = logging.getLogger(__name__)


def build_openai_client(settings: Settings) -> AsyncOpenAI:
    """Build the AsyncOpenAI client, optionally with a custom base URL."""
    kwargs: dict = {"api_key": settings.openai_api_key}
    if settings.openai_base_url:
        kwargs["base_url"] = settings.openai_base_url
    return AsyncOpenAI(**kwargs)


class LLMClient:
    """Thin wrapper that turns one chat completion into one parsed JSON object."""

    def __init__(self, client: AsyncOpenAI, model: str, temperature: float = 0.2):
        self.client = client
        self.model = model
        self.temperature = temperature

    async def generate_json(self, instructions: str, prompt: str, stage: str) -> dict:
        """
        Send the instruction document and task prompt; return the parsed object.

        Raises AIProcessingError tagged with `stage` on API failure, empty
        output, or text that is not a single JSON object.
        """
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": instructions},
                    {"role": "user", "content": prompt},
                ],
                temperature=self.temperature,
                response_format={"type": "json_object"},
            )
        except OpenAIError as e:
            logger.error(f"AI backend call failed during {stage}: {e}")
            raise AIProcessingError(f"AI backend call failed: {e}", stage=stage) from e

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise AIProcessingError("AI backend returned an empty response", stage=stage)

        content = _strip_markdown_json(content)
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            logger.error(f"AI backend returned non-JSON text during {stage}")
            raise AIProcessingError(f"AI response is not valid JSON: {e}", stage=stage) from e

        if not isinstance(data, dict):
            raise AIProcessingError("AI response is not a JSON object", stage=stage)
        return data


def _strip_markdown_json(text: str) -> str:
    """Remove ```json ... ``` wrapper if present."""
    text = text.strip()
    if text.startswith("```"):
        text = re.sub(r"^```(?:json)?\s*", "", text)
        text = re.sub(r"\s*```$", "", text)
    return text
