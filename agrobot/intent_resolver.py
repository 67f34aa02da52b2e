"""Rule-based local answers used when the remote assistant is unavailable."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from agrobot.config import Config
from agrobot.localization import (
    GENERIC_TERMS,
    GREETING_PATTERNS,
    REPLIES,
    TOPIC_KEYWORDS,
    normalize_language,
    pick,
)

logger = logging.getLogger("intent_resolver")


def _contains_any(text: str, keywords: Sequence[str]) -> bool:
    return any(keyword in text for keyword in keywords)


@dataclass(frozen=True)
class TopicRule:
    """A topic matched by keyword containment, with optional sub-topics.

    Sub-topics are tried in order once the topic matches; the first hit
    picks the reply, otherwise the topic's own reply is used.
    """

    name: str
    keywords: Sequence[str]
    subtopics: Sequence[str] = ()

    def match(self, text: str) -> Optional[str]:
        if not _contains_any(text, self.keywords):
            return None
        for subtopic in self.subtopics:
            if _contains_any(text, TOPIC_KEYWORDS[subtopic]):
                return subtopic
        return self.name


# Most specific first. The crop name comes after every topic so that
# "disease in my sugarcane crop" is answered as a disease question.
TOPIC_RULES = (
    TopicRule("recommendation", TOPIC_KEYWORDS["recommendation"],
              ("recommendation_clay", "recommendation_sandy")),
    TopicRule("disease", TOPIC_KEYWORDS["disease"], ("disease_red_rot", "disease_smut")),
    TopicRule("irrigation", TOPIC_KEYWORDS["irrigation"]),
    TopicRule("fertilizer", TOPIC_KEYWORDS["fertilizer"]),
    TopicRule("yield", TOPIC_KEYWORDS["yield"]),
    TopicRule("help", TOPIC_KEYWORDS["help"]),
    TopicRule("crop_name", TOPIC_KEYWORDS["crop_name"]),
)


class LocalIntentResolver:
    """Map an utterance to a localized reply through ordered predicates.

    `delay` stands in for network latency so local answers feel like remote
    ones; pass 0 to answer immediately.
    """

    def __init__(self, delay: Optional[float] = None, sleep: Callable = asyncio.sleep) -> None:
        self.delay = Config.local_reply_delay if delay is None else delay
        self._sleep = sleep

    def classify(self, utterance: str, language: str = "en") -> str:
        """Return the name of the reply bank entry that answers `utterance`."""
        language = normalize_language(language)
        text = (utterance or "").strip().lower()

        if GREETING_PATTERNS[language].match(text):
            return "greeting"

        for rule in TOPIC_RULES:
            topic = rule.match(text)
            if topic:
                return topic

        for index, term in enumerate(GENERIC_TERMS):
            if _contains_any(text, term[language]):
                return f"generic:{index}"

        return "default"

    def reply_for(self, topic: str, language: str = "en") -> str:
        if topic.startswith("generic:"):
            term = GENERIC_TERMS[int(topic.split(":", 1)[1])]
            return pick(term["response"], language)
        return pick(REPLIES[topic], language)

    async def resolve(self, utterance: str, language: str = "en") -> str:
        if self.delay > 0:
            await self._sleep(self.delay)

        topic = self.classify(utterance, language)
        logger.info("[local] topic=%s language=%s", topic, normalize_language(language))
        return self.reply_for(topic, language)
