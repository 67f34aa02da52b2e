import logging
import time

import requests

from agrobot.config import Config
from agrobot.errors import TransportError
from agrobot.localization import REMOTE_UNPROCESSED, normalize_language, pick

logger = logging.getLogger("watson")

IAM_GRANT_TYPE = "urn:ibm:params:oauth:grant-type:apikey"


class WatsonAssistantTransport:
    """Remote dialogue transport backed by IBM Watson Assistant v2.

    Every call fetches a fresh IAM bearer token first. All failures,
    including missing configuration, surface as TransportError.
    """

    def __init__(self, url=None, apikey=None, assistant_id=None, version=None,
                 iam_url=None, timeout=None, session=None):
        self.url = (url if url is not None else Config.assistant_url).rstrip("/")
        self.apikey = apikey if apikey is not None else Config.assistant_apikey
        self.assistant_id = assistant_id if assistant_id is not None else Config.assistant_id
        self.version = version or Config.assistant_version
        self.iam_url = iam_url or Config.iam_token_url
        self.timeout = timeout or Config.http_timeout
        self._http = session or requests

    def is_configured(self):
        return bool(self.url and self.apikey and self.assistant_id)

    def _sessions_url(self, session_id=None):
        base = f"{self.url}/v2/assistants/{self.assistant_id}/sessions"
        return f"{base}/{session_id}" if session_id else base

    def _get_token(self):
        response = self._http.post(
            self.iam_url,
            data={"grant_type": IAM_GRANT_TYPE, "apikey": self.apikey},
            headers={"Content-Type": "application/x-www-form-urlencoded"},
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.json()["access_token"]

    def _call(self, step, method, url, body=None):
        if not self.is_configured():
            raise TransportError("Watson Assistant is not configured")

        start = time.perf_counter()
        try:
            token = self._get_token()
            headers = {"Authorization": f"Bearer {token}"}
            if body is not None:
                headers["Content-Type"] = "application/json"
            response = self._http.request(
                method,
                url,
                params={"version": self.version},
                json=body,
                headers=headers,
                timeout=self.timeout,
            )
            if not response.ok:
                logger.warning("[watson] HTTP_ERROR status=%s url=%s body=%s",
                               response.status_code, url, response.text)
            response.raise_for_status()
            data = response.json() if response.content else {}
            if not isinstance(data, dict):
                raise TypeError(f"expected a JSON object, got {type(data).__name__}")
            return data
        except requests.RequestException as exc:
            raise TransportError(f"Watson {step} failed: {exc}") from exc
        except (KeyError, TypeError, ValueError) as exc:
            raise TransportError(f"Watson {step} returned an unexpected payload: {exc}") from exc
        finally:
            ms = (time.perf_counter() - start) * 1000.0
            logger.info("[timing] step=watson.%s ms=%.2f", step, ms)

    def create_session(self):
        data = self._call("create_session", "POST", self._sessions_url(), body={})
        session_id = data.get("session_id")
        if not session_id:
            raise TransportError("Watson create_session returned no session_id")
        return session_id

    def send_message(self, session_id, text, language="en"):
        language = normalize_language(language)
        context = (
            {"skills": {"main skill": {"user_defined": {"language": "hi"}}}}
            if language == "hi" else {}
        )
        data = self._call(
            "send_message",
            "POST",
            f"{self._sessions_url(session_id)}/message",
            body={"input": {"text": text}, "context": context},
        )
        return extract_reply_text(data, language)

    def delete_session(self, session_id):
        self._call("delete_session", "DELETE", self._sessions_url(session_id))


def extract_reply_text(data, language="en"):
    """Join the text items of a Watson v2 message response."""
    output = data.get("output") if isinstance(data, dict) else None
    generic = output.get("generic") if isinstance(output, dict) else None
    if not isinstance(generic, list):
        generic = []
    texts = [
        item["text"]
        for item in generic
        if isinstance(item, dict) and item.get("response_type") == "text" and item.get("text")
    ]
    if texts:
        return "\n\n".join(texts)
    return pick(REMOTE_UNPROCESSED, language)
