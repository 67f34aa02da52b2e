from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from typing import List, Optional


@dataclass
class ChatMessage:
    """A single turn in a chat transcript."""

    id: int
    content: str
    is_bot: bool
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    image: Optional[str] = None

    def to_dict(self):
        data = asdict(self)
        data["timestamp"] = self.timestamp.isoformat()
        return data


class Transcript:
    """Ordered chat turns with monotonically increasing ids."""

    def __init__(self):
        self._messages: List[ChatMessage] = []
        self._next_id = 1

    def add(self, content, is_bot, image=None):
        if image is not None and not image:
            raise ValueError("Image messages need a non-empty image reference")
        message = ChatMessage(id=self._next_id, content=content, is_bot=is_bot, image=image)
        self._next_id += 1
        self._messages.append(message)
        return message

    @property
    def messages(self):
        return list(self._messages)

    def __len__(self):
        return len(self._messages)


class InboundMessage:
    """A WhatsApp message as posted by the Twilio webhook (form fields)."""

    def __init__(self, form):
        self.id = form.get("MessageSid") or form.get("SmsMessageSid")
        self.from_ = (form.get("From") or "").replace("whatsapp:", "")
        self.body = form.get("Body") or ""

        self.media_url = None
        self.media_type = None

        try:
            num_media = int(form.get("NumMedia") or 0)
        except ValueError:
            num_media = 0

        if num_media > 0:
            self.media_url = form.get("MediaUrl0")
            self.media_type = form.get("MediaContentType0")

    @property
    def has_image(self):
        return bool(self.media_url and (self.media_type or "").startswith("image/"))
