import pytest

from agrobot.commands import handle_inbound_text
from agrobot.localization import REPLIES, WHATSAPP_HELP, YIELD_USAGE_INVALID, YIELD_USAGE_MISSING
from agrobot.message import InboundMessage

pytestmark = pytest.mark.anyio


async def test_yield_command(resolver):
    assert await handle_inbound_text("Yield Lucknow 5 Alluvial", resolver) == "Predicted yield: 518 quintals"
    assert await handle_inbound_text("yield lucknow", resolver) == YIELD_USAGE_MISSING
    assert await handle_inbound_text("yield lucknow 5 granite", resolver) == YIELD_USAGE_INVALID


async def test_help_command(resolver):
    assert await handle_inbound_text("HELP", resolver) == WHATSAPP_HELP
    assert await handle_inbound_text("can you help me", resolver) == WHATSAPP_HELP


async def test_free_text_goes_to_local_resolver(resolver):
    assert await handle_inbound_text("sugarcane disease", resolver) == REPLIES["disease"]["en"]
    assert await handle_inbound_text("सिंचाई कब करें", resolver) == REPLIES["irrigation"]["hi"]
    assert await handle_inbound_text(None, resolver) == REPLIES["default"]["en"]


def test_inbound_message_parses_twilio_form():
    message = InboundMessage({
        "MessageSid": "SM1",
        "From": "whatsapp:+919999999999",
        "Body": "hi",
        "NumMedia": "1",
        "MediaUrl0": "https://api.twilio.com/media/1",
        "MediaContentType0": "image/jpeg",
    })
    assert message.id == "SM1"
    assert message.from_ == "+919999999999"
    assert message.has_image


def test_inbound_message_without_media():
    message = InboundMessage({"SmsMessageSid": "SM2", "From": "+91", "NumMedia": "x"})
    assert message.id == "SM2"
    assert message.body == ""
    assert not message.has_image
