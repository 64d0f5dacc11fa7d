"""Gemini client for structured meal plan and shopping list completions."""

import logging
from datetime import datetime, timezone
from typing import Optional, Type, TypeVar

from google import genai
from google.genai import types
from pydantic import BaseModel, ValidationError

from ..settings import settings

logger = logging.getLogger("mealweek.ai")

T = TypeVar("T", bound=BaseModel)


class AIClient:
    """One structured completion per call; never raises.

    Callers get ``None`` when Gemini is off (mock mode, no key) or the call
    fails. The last failure is kept for ``/api/ready``.
    """

    def __init__(self):
        self.mode = settings.ai_mode  # "mock" or "gemini"
        self.model_id = settings.gemini_text_model
        self.last_error: Optional[str] = None
        self.last_error_at: Optional[datetime] = None
        self._client: Optional[genai.Client] = None

        if self.mode == "gemini" and settings.gemini_api_key:
            self._client = genai.Client(api_key=settings.gemini_api_key)

    def is_available(self) -> bool:
        return self._client is not None

    def _record_failure(self, e: Exception) -> None:
        self.last_error = f"{e.__class__.__name__}: {e}"
        self.last_error_at = datetime.now(timezone.utc)
        logger.error(f"Gemini generation failed: {self.last_error}")

    async def generate_structured(self, prompt: str, response_model: Type[T]) -> Optional[T]:
        """Ask for JSON matching ``response_model`` and return it parsed."""
        if not self.is_available():
            logger.warning(f"Gemini unavailable (mode={self.mode}), skipping generation")
            return None

        config = types.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=response_model,
        )
        try:
            response = await self._client.aio.models.generate_content(
                model=self.model_id, contents=prompt, config=config
            )
        except Exception as e:
            # The SDK raises its own error types plus transport errors
            self._record_failure(e)
            return None

        if not response.text:
            logger.warning(f"Gemini returned an empty response for {response_model.__name__}")
            return None

        if isinstance(response.parsed, response_model):
            return response.parsed
        # SDK could not coerce it; validate the raw text ourselves
        try:
            return response_model.model_validate_json(response.text)
        except ValidationError as e:
            self._record_failure(e)
            return None


ai_client = AIClient()
