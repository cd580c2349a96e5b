"""
Search query normalization using the OpenAI Responses API.

The model corrects spelling, expands abbreviations and labels the query's
intent. Calls are not cached and may return different answers for the same
input.
"""

import json
import time
from typing import Any, Literal, Optional

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from tunely.core.config import AIConfig


class AIError(Exception):
    """Custom exception for AI-related errors."""

    pass


SearchIntent = Literal["artist", "album", "song", "general"]


class NormalizedQuery(BaseModel):
    """Model output: the improved query and what the user is looking for."""

    model_config = ConfigDict(populate_by_name=True)

    corrected_query: str = Field(alias="correctedQuery", min_length=1)
    search_intent: SearchIntent = Field(alias="searchIntent")


INSTRUCTIONS = """You are a music search assistant. Your task is to take a user's search query and improve it for a database search.

- Correct any spelling mistakes (e.g., "Chapell roan" becomes "Chappell Roan").
- Expand common abbreviations (e.g., "idk" becomes "i dont know").
- Determine if the user is likely searching for an 'artist', 'album', 'song', or if it's a 'general' query.

Return ONLY a JSON object of the form:
{"correctedQuery": "<corrected query>", "searchIntent": "artist" | "album" | "song" | "general"}"""


def parse_normalizer_output(output_text: str) -> NormalizedQuery:
    """Parse the model's JSON answer, tolerating a markdown code fence.

    Raises:
        AIError: If no valid JSON object with the expected fields is found
    """
    text = output_text.strip()
    try:
        payload = json.loads(text)
    except json.JSONDecodeError:
        json_start = text.find("{")
        json_end = text.rfind("}") + 1
        if json_start == -1 or json_end <= json_start:
            raise AIError(f"Failed to parse JSON from AI response: {output_text}")
        try:
            payload = json.loads(text[json_start:json_end])
        except json.JSONDecodeError as e:
            raise AIError(f"Failed to parse JSON from AI response: {output_text}") from e

    if not isinstance(payload, dict):
        raise AIError(f"Expected a JSON object from AI response: {output_text}")

    try:
        return NormalizedQuery.model_validate(payload)
    except ValidationError as e:
        raise AIError(f"Invalid normalizer payload: {e}") from e


class QueryNormalizer:
    """Client for the query-normalization prompt."""

    def __init__(self, api_key: str, model: str = "gpt-4o-mini", client: Any = None):
        self.model = model
        if client is None:
            import openai

            client = openai.OpenAI(api_key=api_key)
        self._client = client

    def normalize(self, query: str) -> NormalizedQuery:
        """Ask the model to correct ``query`` and classify its intent.

        Raises:
            AIError: On API errors or unusable output
        """
        import openai

        start_time = time.time()
        try:
            response = self._client.responses.create(
                model=self.model,
                instructions=INSTRUCTIONS,
                input=f"User query: {query}",
            )
        except openai.APIError as e:
            raise AIError(f"OpenAI API error: {str(e)}") from e

        response_time_ms = int((time.time() - start_time) * 1000)
        result = parse_normalizer_output(response.output_text or "")
        logger.debug(
            f"Normalized {query!r} -> {result.corrected_query!r} "
            f"({result.search_intent}, {response_time_ms}ms)"
        )
        return result


def create_normalizer(ai_config: AIConfig) -> Optional[QueryNormalizer]:
    """Build a normalizer from config, or None when AI search is unavailable."""
    if not ai_config.enabled:
        logger.info("AI search disabled, using basic search")
        return None
    if not ai_config.openai_api_key:
        logger.warning("No OpenAI API key configured, using basic search")
        return None
    return QueryNormalizer(api_key=ai_config.openai_api_key, model=ai_config.model)
