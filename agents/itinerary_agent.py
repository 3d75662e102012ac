# agents/itinerary_agent.py
"""ItineraryAgent: drives the generative model and the itinerary status machine.

A generation run has three stages:

1. Prompting – render one deterministic request from the stored preferences.
2. Generation – ask the model for a JSON object under a fixed system prompt.
3. Validation – parse the reply as ``GeneratedItinerary`` before it can be
   persisted; anything that does not fit is a ``MalformedResponseError``.

Only a fully validated payload moves a record to ``generated``. On any failure
the stored record is left exactly as it was.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional, Protocol

from pydantic import ValidationError

from errors import GenerationError, ItineraryNotFoundError, MalformedResponseError
from prompts import PromptTemplate, load_prompt_template
from workflows.schemas import GeneratedItinerary, ItineraryPreferences, ItineraryRecord
from workflows.storage import ItineraryStorage

logger = logging.getLogger(__name__)


class StructuredTextGenerator(Protocol):
    async def generate_structured_text(self, system_prompt: str, user_prompt: str) -> Dict[str, Any]:
        ...


class ItineraryAgent:
    """Generate itineraries for stored records and persist the outcome."""

    def __init__(
        self,
        generator: StructuredTextGenerator,
        storage: ItineraryStorage,
        *,
        system_prompt: Optional[PromptTemplate] = None,
        request_prompt: Optional[PromptTemplate] = None,
    ) -> None:
        self.generator = generator
        self.storage = storage
        self._system_prompt = system_prompt or load_prompt_template("itinerary_system")
        self._request_prompt = request_prompt or load_prompt_template("itinerary_request")

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def build_prompt(self, preferences: ItineraryPreferences) -> str:
        """Render the user prompt; identical preferences give identical text."""
        return self._request_prompt.format(**preferences.model_dump())

    async def generate_content(self, preferences: ItineraryPreferences) -> GeneratedItinerary:
        payload = await self.generator.generate_structured_text(
            self._system_prompt.format(),
            self.build_prompt(preferences),
        )
        try:
            return GeneratedItinerary.model_validate(payload)
        except ValidationError as exc:
            raise MalformedResponseError(
                f"Generated itinerary does not match the expected shape: {exc.error_count()} error(s)"
            ) from exc

    async def apply(self, record: ItineraryRecord) -> ItineraryRecord:
        """Return a copy of ``record`` carrying a freshly generated itinerary.

        Any prior payload is replaced; re-running on a ``generated`` record is
        allowed and keeps the status at ``generated``.
        """
        content = await self.generate_content(record.preferences)
        return record.model_copy(update={"generated_content": content, "status": "generated"})

    async def generate(self, itinerary_id: int) -> ItineraryRecord:
        """Generate and persist an itinerary for a stored record.

        Raises:
            ItineraryNotFoundError: no record with ``itinerary_id``.
            GenerationError: the model call failed or returned an unusable
                payload; nothing was written.
        """
        record = await asyncio.to_thread(self.storage.get, itinerary_id)
        if record is None:
            raise ItineraryNotFoundError(itinerary_id)

        try:
            generated = await self.apply(record)
        except GenerationError as exc:
            logger.error(f"Itinerary {itinerary_id} generation failed: {exc}")
            raise

        # No lock spans fetch -> generate -> persist; concurrent runs are last-write-wins.
        updated = await asyncio.to_thread(
            self.storage.update,
            itinerary_id,
            {"generated_content": generated.generated_content, "status": "generated"},
        )
        if updated is None:
            raise ItineraryNotFoundError(itinerary_id)

        logger.info(
            f"Itinerary {itinerary_id} generated: {len(updated.generated_content.days)} day(s), "
            f"previous status {record.status!r}"
        )
        return updated
