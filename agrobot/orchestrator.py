"""Remote-first dialogue with per-message local fallback."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from agrobot.errors import TransportError
from agrobot.intent_resolver import LocalIntentResolver
from agrobot.localization import normalize_language
from agrobot.utility import call_maybe_async

logger = logging.getLogger("orchestrator")


class SessionState(str, Enum):
    NO_SESSION = "no_session"
    CREATING = "creating"
    ACTIVE = "active"
    CLOSING = "closing"
    CLOSED = "closed"


@dataclass
class Session:
    """A remote dialogue context."""

    session_id: str
    language: str
    created_at: float = field(default_factory=time.time)


class SessionOrchestrator:
    """Owns one chat surface's remote session.

    The transport needs `create_session()`, `send_message(session_id, text,
    language)` and `delete_session(session_id)`; each may be sync or async.
    A failed send is answered locally without leaving the active state.
    """

    def __init__(self, transport, resolver: Optional[LocalIntentResolver] = None,
                 language: str = "en") -> None:
        self.transport = transport
        self.resolver = resolver or LocalIntentResolver()
        self.language = normalize_language(language)
        self.state = SessionState.NO_SESSION
        self.session: Optional[Session] = None

    async def open(self) -> Optional[Session]:
        """Create the remote session once; concurrent or repeated calls are no-ops."""
        if self.state != SessionState.NO_SESSION:
            return self.session

        self.state = SessionState.CREATING
        try:
            session_id = await call_maybe_async(self.transport.create_session)
        except Exception as exc:
            logger.error("Failed to create remote session: %s", exc,
                         exc_info=not isinstance(exc, TransportError))
            if self.state == SessionState.CREATING:
                self.state = SessionState.NO_SESSION
            return None

        if self.state != SessionState.CREATING:
            # Closed while the create was in flight; don't leak the session.
            logger.info("Surface closed during session creation, discarding %s", session_id)
            await self._delete_quietly(session_id)
            return None

        self.session = Session(session_id=session_id, language=self.language)
        self.state = SessionState.ACTIVE
        logger.info("Created remote session: %s", session_id)
        return self.session

    async def reply(self, text: str, language: Optional[str] = None) -> str:
        language = normalize_language(language or self.language)

        if self.state == SessionState.ACTIVE and self.session is not None:
            try:
                return await call_maybe_async(
                    self.transport.send_message, self.session.session_id, text, language
                )
            except Exception as exc:
                logger.warning("Remote assistant error, using local fallback: %s", exc,
                               exc_info=not isinstance(exc, TransportError))
        else:
            logger.info("No remote session (state=%s), using local processing", self.state.value)

        return await self.resolver.resolve(text, language)

    async def close(self) -> None:
        if self.state == SessionState.CLOSED:
            return

        if self.state == SessionState.ACTIVE and self.session is not None:
            self.state = SessionState.CLOSING
            await self._delete_quietly(self.session.session_id)

        self.state = SessionState.CLOSED
        self.session = None

    async def _delete_quietly(self, session_id: str) -> None:
        try:
            await call_maybe_async(self.transport.delete_session, session_id)
        except Exception as exc:
            logger.warning("Failed to delete remote session %s: %s", session_id, exc)
