"""Chat surfaces: a transcript bound to one orchestrator and the shared engine."""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional
from uuid import uuid4

from agrobot.classification import ClassificationEngine, PlantClassificationResult
from agrobot.localization import (
    ANALYSIS_REPORT,
    APOLOGY,
    IMAGE_APOLOGY,
    IMAGE_RECEIVED,
    IMAGE_UPLOADED,
    TRAINING_NUDGE,
    WELCOME,
    normalize_language,
    pick,
)
from agrobot.message import ChatMessage, Transcript
from agrobot.orchestrator import SessionOrchestrator

logger = logging.getLogger("chat")


def format_classification(result: PlantClassificationResult, language: str = "en") -> str:
    """Render a classification result as the bot's analysis message."""
    report = pick(ANALYSIS_REPORT, language)
    text = report["intro"].format(plant=result.plant_type, confidence=round(result.confidence * 100))
    text += report["health"].format(health=result.health_status)
    if result.possible_diseases:
        text += report["diseases"].format(diseases=", ".join(result.possible_diseases))
    if result.recommendations:
        text += report["recommendations"]
        text += "".join(f"• {rec}\n" for rec in result.recommendations)
    return text


class ChatSurface:
    """One visible chat: welcome message, text turns, image turns, teardown."""

    def __init__(self, orchestrator: SessionOrchestrator, engine: ClassificationEngine,
                 language: str = "en", surface_id: Optional[str] = None) -> None:
        self.id = surface_id or uuid4().hex
        self.orchestrator = orchestrator
        self.engine = engine
        self.language = normalize_language(language)
        self.transcript = Transcript()
        self.transcript.add(pick(WELCOME, self.language), is_bot=True)

    @property
    def state(self):
        return self.orchestrator.state

    async def open(self) -> None:
        await self.orchestrator.open()

    async def send_text(self, text: str) -> List[ChatMessage]:
        user_message = self.transcript.add(text, is_bot=False)
        try:
            reply = await self.orchestrator.reply(text, self.language)
        except Exception:
            logger.error("Error processing message on surface %s", self.id, exc_info=True)
            reply = pick(APOLOGY, self.language)
        return [user_message, self.transcript.add(reply, is_bot=True)]

    async def send_image(self, image_ref: str):
        """Classify an uploaded photo; returns (new messages, result or None)."""
        new_messages = [
            self.transcript.add(pick(IMAGE_UPLOADED, self.language), is_bot=False, image=image_ref),
            self.transcript.add(pick(IMAGE_RECEIVED, self.language), is_bot=True),
        ]

        try:
            result = await self.engine.classify_plant_image(image_ref, self.language)
        except Exception:
            logger.error("Error processing image on surface %s", self.id, exc_info=True)
            new_messages.append(self.transcript.add(pick(IMAGE_APOLOGY, self.language), is_bot=True))
            return new_messages, None

        new_messages.append(self.transcript.add(format_classification(result, self.language), is_bot=True))
        if result.training_suggested:
            new_messages.append(self.transcript.add(pick(TRAINING_NUDGE, self.language), is_bot=True))
        return new_messages, result

    async def close(self) -> None:
        await self.orchestrator.close()


class ChatSurfaceStore:
    """In-memory registry of open chat surfaces."""

    def __init__(self, orchestrator_factory: Callable[[str], SessionOrchestrator],
                 engine: ClassificationEngine) -> None:
        self._surfaces: Dict[str, ChatSurface] = {}
        self._orchestrator_factory = orchestrator_factory
        self.engine = engine

    def create(self, language: str = "en") -> ChatSurface:
        language = normalize_language(language)
        surface = ChatSurface(self._orchestrator_factory(language), self.engine, language)
        self._surfaces[surface.id] = surface
        return surface

    def get(self, surface_id: str) -> ChatSurface:
        """Return a surface or raise KeyError if missing."""
        surface = self._surfaces.get(surface_id)
        if surface is None:
            raise KeyError(f"Chat session {surface_id} not found")
        return surface

    def remove(self, surface_id: str) -> ChatSurface:
        surface = self.get(surface_id)
        del self._surfaces[surface_id]
        return surface

    async def close_all(self) -> None:
        for surface_id in list(self._surfaces):
            await self.remove(surface_id).close()

    def __len__(self) -> int:
        return len(self._surfaces)
