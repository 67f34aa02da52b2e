"""Text commands received over WhatsApp."""

import logging

from agrobot.intent_resolver import LocalIntentResolver
from agrobot.localization import WHATSAPP_HELP, detect_language
from agrobot.yield_calculator import yield_command_reply

logger = logging.getLogger("commands")


async def handle_inbound_text(text, resolver: LocalIntentResolver):
    """Answer `yield ...` and `help`; anything else is a free-form farming question."""
    incoming = (text or "").strip().lower()

    if incoming.startswith("yield"):
        reply = yield_command_reply(incoming)
        logger.info("[command] kind=yield reply=%s", reply)
        return reply

    if "help" in incoming:
        logger.info("[command] kind=help")
        return WHATSAPP_HELP

    language = detect_language(incoming)
    logger.info("[command] kind=query language=%s", language)
    return await resolver.resolve(incoming, language)
