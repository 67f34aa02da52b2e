import random

import pytest

from agrobot.chat import ChatSurface, ChatSurfaceStore, format_classification
from agrobot.classification import ClassificationEngine, PlantClassificationResult
from agrobot.localization import (
    APOLOGY,
    IMAGE_APOLOGY,
    IMAGE_RECEIVED,
    IMAGE_UPLOADED,
    REPLIES,
    TRAINING_NUDGE,
    WELCOME,
)
from agrobot.message import Transcript
from agrobot.orchestrator import SessionOrchestrator, SessionState

pytestmark = pytest.mark.anyio


@pytest.fixture
def engine():
    return ClassificationEngine(rng=random.Random(2), tick_seconds=0, analysis_delay=0)


@pytest.fixture
def surface(transport, resolver, engine):
    return ChatSurface(SessionOrchestrator(transport, resolver, "en"), engine, "en")


def test_new_surface_starts_with_welcome(transport, resolver, engine):
    surface = ChatSurface(SessionOrchestrator(transport, resolver, "hi"), engine, "hi")
    messages = surface.transcript.messages
    assert len(messages) == 1
    assert messages[0].is_bot
    assert messages[0].content == WELCOME["hi"]
    assert surface.state == SessionState.NO_SESSION


async def test_text_turn_appends_user_then_bot(surface, transport):
    await surface.open()
    user, bot = await surface.send_text("how is my crop?")

    assert (user.content, user.is_bot) == ("how is my crop?", False)
    assert (bot.content, bot.is_bot) == ("remote reply", True)
    assert [m.id for m in surface.transcript.messages] == [1, 2, 3]


async def test_text_turn_without_session_is_answered_locally(surface):
    _, bot = await surface.send_text("fertilizer dose")
    assert bot.content == REPLIES["fertilizer"]["en"]


async def test_unexpected_failure_becomes_apology(surface, monkeypatch):
    async def broken(text, language=None):
        raise RuntimeError("boom")

    monkeypatch.setattr(surface.orchestrator, "reply", broken)
    _, bot = await surface.send_text("hello")
    assert bot.content == APOLOGY["en"]


async def test_image_turn_with_untrained_engine(surface):
    messages, result = await surface.send_image("data:image/jpeg;base64,AAAA")

    assert messages[0].content == IMAGE_UPLOADED["en"]
    assert messages[0].image == "data:image/jpeg;base64,AAAA"
    assert not messages[0].is_bot
    assert messages[1].content == IMAGE_RECEIVED["en"]
    assert result.plant_type in messages[2].content
    assert "confidence" in messages[2].content
    assert messages[3].content == TRAINING_NUDGE["en"]
    assert len(surface.transcript) == 5


async def test_image_turn_with_trained_engine_skips_nudge(surface, engine):
    for i in range(5):
        engine.add_training_image("wheat", f"w{i}")
    await engine.train_model()

    messages, result = await surface.send_image("leaf.png")
    assert len(messages) == 3
    assert result.training_suggested is False


async def test_image_failure_becomes_apology(surface, monkeypatch):
    async def broken(image_ref=None, language="en"):
        raise RuntimeError("boom")

    monkeypatch.setattr(surface.engine, "classify_plant_image", broken)
    messages, result = await surface.send_image("leaf.png")
    assert result is None
    assert messages[-1].content == IMAGE_APOLOGY["en"]


async def test_close_tears_down_remote_session(surface, transport):
    await surface.open()
    await surface.close()
    assert transport.deleted == ["session-1"]
    assert surface.state == SessionState.CLOSED


def test_format_classification_lists_issues_and_tips():
    result = PlantClassificationResult(
        plant_type="sugarcane",
        confidence=0.824,
        health_status="possible disease",
        possible_diseases=["red rot", "smut"],
        recommendations=["Check irrigation levels"],
    )
    text = format_classification(result, "en")

    assert "sugarcane plant with 82% confidence" in text
    assert "Plant health: possible disease." in text
    assert "Possible issues detected: red rot, smut." in text
    assert "• Check irrigation levels" in text


def test_format_classification_omits_empty_disease_line():
    result = PlantClassificationResult(plant_type="wheat", confidence=0.9, health_status="healthy")
    assert "Possible issues" not in format_classification(result, "en")


def test_transcript_rejects_empty_image():
    transcript = Transcript()
    with pytest.raises(ValueError):
        transcript.add("photo", is_bot=False, image="")


async def test_store_lifecycle(transport, resolver, engine):
    store = ChatSurfaceStore(lambda language: SessionOrchestrator(transport, resolver, language), engine)
    first = store.create("hi")
    second = store.create("fr")

    assert len(store) == 2
    assert store.get(first.id) is first
    assert second.language == "en"

    await first.open()
    store.remove(second.id)
    with pytest.raises(KeyError):
        store.get(second.id)

    await store.close_all()
    assert len(store) == 0
    assert transport.deleted == ["session-1"]
