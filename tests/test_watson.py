import json

import pytest
import requests

from agrobot.errors import TransportError
from agrobot.localization import REMOTE_UNPROCESSED, REPLIES
from agrobot.orchestrator import SessionOrchestrator, SessionState
from agrobot.watson import WatsonAssistantTransport, extract_reply_text


class FakeResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self._payload = payload
        self.content = json.dumps(payload).encode() if payload is not None else b""
        self.text = self.content.decode()

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        return self._payload

    def raise_for_status(self):
        if not self.ok:
            raise requests.HTTPError(f"{self.status_code} error")


class FakeHttp:
    """Records requests and replays queued responses."""

    def __init__(self, responses=(), token_status=200):
        self.responses = list(responses)
        self.token_status = token_status
        self.token_calls = []
        self.calls = []

    def post(self, url, data=None, headers=None, timeout=None):
        self.token_calls.append((url, data))
        return FakeResponse(self.token_status, {"access_token": "tok"})

    def request(self, method, url, params=None, json=None, headers=None, timeout=None):
        self.calls.append({"method": method, "url": url, "params": params, "json": json, "headers": headers})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def make_transport(http):
    return WatsonAssistantTransport(
        url="https://api.example.test/",
        apikey="key",
        assistant_id="asst",
        iam_url="https://iam.example.test/token",
        session=http,
    )


def test_create_session_posts_to_sessions_endpoint():
    http = FakeHttp([FakeResponse(201, {"session_id": "abc"})])
    assert make_transport(http).create_session() == "abc"

    call = http.calls[0]
    assert call["method"] == "POST"
    assert call["url"] == "https://api.example.test/v2/assistants/asst/sessions"
    assert call["params"] == {"version": "2021-06-14"}
    assert call["headers"]["Authorization"] == "Bearer tok"
    assert http.token_calls[0][1]["apikey"] == "key"


def test_send_message_passes_hindi_context():
    payload = {"output": {"generic": [{"response_type": "text", "text": "नमस्ते"}]}}
    http = FakeHttp([FakeResponse(200, payload)])

    assert make_transport(http).send_message("abc", "hello", "hi") == "नमस्ते"
    body = http.calls[0]["json"]
    assert body["input"] == {"text": "hello"}
    assert body["context"]["skills"]["main skill"]["user_defined"]["language"] == "hi"
    assert http.calls[0]["url"].endswith("/sessions/abc/message")


def test_send_message_english_has_empty_context():
    http = FakeHttp([FakeResponse(200, {"output": {"generic": []}})])
    assert make_transport(http).send_message("abc", "hello", "en") == REMOTE_UNPROCESSED["en"]
    assert http.calls[0]["json"]["context"] == {}


def test_delete_session_uses_delete():
    http = FakeHttp([FakeResponse(204)])
    make_transport(http).delete_session("abc")
    assert http.calls[0]["method"] == "DELETE"
    assert http.calls[0]["url"].endswith("/sessions/abc")


def test_http_errors_become_transport_errors():
    http = FakeHttp([FakeResponse(500, {"error": "down"})])
    with pytest.raises(TransportError):
        make_transport(http).create_session()


def test_network_errors_become_transport_errors():
    http = FakeHttp([requests.ConnectionError("no route")])
    with pytest.raises(TransportError):
        make_transport(http).send_message("abc", "hello")


def test_token_failure_becomes_transport_error():
    http = FakeHttp(token_status=401)
    with pytest.raises(TransportError):
        make_transport(http).create_session()
    assert http.calls == []


def test_missing_session_id_is_an_error():
    http = FakeHttp([FakeResponse(201, {})])
    with pytest.raises(TransportError):
        make_transport(http).create_session()


def test_unconfigured_transport_never_calls_out():
    http = FakeHttp()
    transport = WatsonAssistantTransport(url="", apikey="", assistant_id="", session=http)
    assert not transport.is_configured()
    with pytest.raises(TransportError):
        transport.create_session()
    assert http.token_calls == []


def test_extract_reply_text_joins_text_items():
    data = {
        "output": {
            "generic": [
                {"response_type": "text", "text": "first"},
                {"response_type": "option", "title": "pick one"},
                {"response_type": "text", "text": "second"},
            ]
        }
    }
    assert extract_reply_text(data) == "first\n\nsecond"
    assert extract_reply_text(None, "hi") == REMOTE_UNPROCESSED["hi"]


@pytest.mark.parametrize("payload", [["oops"], "oops", 42])
def test_non_object_bodies_become_transport_errors(payload):
    http = FakeHttp([FakeResponse(201, payload)])
    with pytest.raises(TransportError):
        make_transport(http).create_session()

    http = FakeHttp([FakeResponse(200, payload)])
    with pytest.raises(TransportError):
        make_transport(http).send_message("abc", "hello")


def test_non_object_token_body_becomes_transport_error():
    class ListTokenHttp(FakeHttp):
        def post(self, url, data=None, headers=None, timeout=None):
            return FakeResponse(200, ["tok"])

    http = ListTokenHttp()
    with pytest.raises(TransportError):
        make_transport(http).create_session()
    assert http.calls == []


def test_extract_reply_text_tolerates_odd_shapes():
    fallback = REMOTE_UNPROCESSED["en"]
    assert extract_reply_text(["oops"]) == fallback
    assert extract_reply_text({"output": ["oops"]}) == fallback
    assert extract_reply_text({"output": {"generic": "oops"}}) == fallback
    assert extract_reply_text({"output": {"generic": ["oops", {"response_type": "text", "text": "ok"}]}}) == "ok"


@pytest.mark.anyio
async def test_malformed_replies_fall_back_to_local_answers(resolver):
    http = FakeHttp([FakeResponse(201, {"session_id": "abc"}), FakeResponse(200, ["oops"])])
    orchestrator = SessionOrchestrator(make_transport(http), resolver)
    await orchestrator.open()

    assert await orchestrator.reply("disease") == REPLIES["disease"]["en"]
    assert orchestrator.state == SessionState.ACTIVE


@pytest.mark.anyio
async def test_malformed_create_leaves_no_session(resolver):
    http = FakeHttp([FakeResponse(201, ["oops"])])
    orchestrator = SessionOrchestrator(make_transport(http), resolver)

    assert await orchestrator.open() is None
    assert orchestrator.state == SessionState.NO_SESSION
