import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, File, Request, HTTPException, UploadFile
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel
from twilio.request_validator import RequestValidator
from twilio.twiml.messaging_response import MessagingResponse

from agrobot import redis_store
from agrobot.chat import ChatSurfaceStore, format_classification
from agrobot.classification import ClassificationEngine
from agrobot.commands import handle_inbound_text
from agrobot.config import Config
from agrobot.errors import InvalidInput, TrainingPrecondition, TransportError
from agrobot.intent_resolver import LocalIntentResolver
from agrobot.localization import (
    UNSUPPORTED_PLANT,
    WHATSAPP_APOLOGY,
    detect_language,
    normalize_language,
    pick,
)
from agrobot.media_validation import read_image_data_url
from agrobot.message import InboundMessage
from agrobot.orchestrator import SessionOrchestrator
from agrobot.relay import TwilioRelay
from agrobot.utility import call_maybe_async
from agrobot.watson import WatsonAssistantTransport
from agrobot.yield_calculator import predict

logger = logging.getLogger("app")


class ChatbotPayload(BaseModel):
    message: str
    language: str = "en"


class YieldPayload(BaseModel):
    district: str
    area: float
    area_unit: str = "acre"
    soil_type: str
    irrigation_availability: str = "full"


class StartChatPayload(BaseModel):
    language: str = "en"


class ChatMessagePayload(BaseModel):
    text: str


class TrainingImagePayload(BaseModel):
    plant_type: str
    image_url: str


class WhatsAppConnectPayload(BaseModel):
    phone_number: str


def _surface_view(surface):
    return {
        "session_id": surface.id,
        "language": surface.language,
        "state": surface.state.value,
        "messages": [m.to_dict() for m in surface.transcript.messages],
    }


def _get_surface(request: Request, session_id: str):
    try:
        return request.app.state.surfaces.get(session_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


def _training_view(engine: ClassificationEngine):
    return {
        "progress": engine.get_training_progress(),
        "trained": engine.is_model_trained(),
        "in_progress": engine.is_training(),
    }


def verify_twilio_signature(url, params, signature_header):
    if not signature_header:
        logger.warning("Missing X-Twilio-Signature header")
        return
    if not Config.twilio_auth_token:
        logger.warning("TWILIO_AUTH_TOKEN not set, skipping signature check")
        return

    validator = RequestValidator(Config.twilio_auth_token)
    if not validator.validate(url, params, signature_header):
        raise ValueError("Signature mismatch")


def twiml_response(text):
    resp = MessagingResponse()
    resp.message(text)
    return Response(content=str(resp), media_type="application/xml; charset=utf-8")


def create_app(transport=None, relay=None, engine=None, resolver=None) -> FastAPI:
    """
    Create the FastAPI application. Collaborators default to the Watson
    transport, the Twilio relay and a fresh classification engine.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting initialization...")
        Config.check_env_variables()

        app.state.resolver = resolver or LocalIntentResolver()
        app.state.engine = engine or ClassificationEngine()
        app.state.transport = transport or WatsonAssistantTransport()
        app.state.relay = relay or TwilioRelay()
        app.state.surfaces = ChatSurfaceStore(
            lambda language: SessionOrchestrator(app.state.transport, app.state.resolver, language),
            app.state.engine,
        )
        try:
            yield
        finally:
            app.state.engine.cancel_training()
            await app.state.surfaces.close_all()

    app = FastAPI(lifespan=lifespan)

    @app.exception_handler(InvalidInput)
    async def invalid_input_handler(request: Request, exc: InvalidInput):
        return JSONResponse(status_code=400, content={"success": False, "message": str(exc)})

    @app.get("/health")
    async def health(request: Request):
        is_configured = getattr(request.app.state.transport, "is_configured", None)
        return {
            "status": "ok",
            "watson_configured": is_configured() if is_configured else True,
            "model_trained": request.app.state.engine.is_model_trained(),
        }

    @app.get("/")
    async def index():
        return JSONResponse({
            "message": "AgroBot server is running",
            "endpoints": [
                "POST /api/chat/sessions - open a chat",
                "POST /api/predict-yield - sugarcane yield prediction",
                "POST /api/whatsapp-webhook - Twilio WhatsApp webhook",
            ]
        })

    @app.post("/api/chatbot")
    async def chatbot(request: Request, payload: ChatbotPayload):
        if not payload.message.strip():
            raise HTTPException(status_code=400, detail="Message is required")
        reply = await request.app.state.resolver.resolve(payload.message, payload.language)
        return {"success": True, "response": reply}

    @app.post("/api/predict-yield")
    async def predict_yield(payload: YieldPayload):
        predicted = predict(
            payload.district,
            payload.area,
            payload.area_unit,
            payload.soil_type,
            payload.irrigation_availability,
        )
        return {"success": True, "predicted_yield": predicted, "unit": "quintals"}

    # ---------------- chat surfaces ----------------

    @app.post("/api/chat/sessions")
    async def start_chat(request: Request, payload: Optional[StartChatPayload] = None):
        payload = payload or StartChatPayload()
        surface = request.app.state.surfaces.create(payload.language)
        await surface.open()
        return _surface_view(surface)

    @app.get("/api/chat/sessions/{session_id}")
    async def get_chat(request: Request, session_id: str):
        return _surface_view(_get_surface(request, session_id))

    @app.post("/api/chat/sessions/{session_id}/messages")
    async def post_chat_message(request: Request, session_id: str, payload: ChatMessagePayload):
        if not payload.text.strip():
            raise HTTPException(status_code=400, detail="Message is required")
        surface = _get_surface(request, session_id)
        messages = await surface.send_text(payload.text)
        return {"session_id": surface.id, "messages": [m.to_dict() for m in messages]}

    @app.post("/api/chat/sessions/{session_id}/images")
    async def post_chat_image(request: Request, session_id: str, image: UploadFile = File(...)):
        surface = _get_surface(request, session_id)
        image_ref = await read_image_data_url(image, surface.language)
        messages, result = await surface.send_image(image_ref)
        classification = None
        if result is not None:
            classification = result.to_dict()
            # The data URL is already in the user's message; don't echo it twice.
            classification.pop("image_url", None)
        return {
            "session_id": surface.id,
            "messages": [m.to_dict() for m in messages],
            "classification": classification,
        }

    @app.delete("/api/chat/sessions/{session_id}")
    async def close_chat(request: Request, session_id: str):
        try:
            surface = request.app.state.surfaces.remove(session_id)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        await surface.close()
        return {"session_id": session_id, "state": surface.state.value}

    # ---------------- training ----------------

    @app.post("/api/training/images")
    async def add_training_image(request: Request, payload: TrainingImagePayload, language: str = "en"):
        engine: ClassificationEngine = request.app.state.engine
        if not engine.add_training_image(payload.plant_type, payload.image_url):
            raise HTTPException(
                status_code=400,
                detail=pick(UNSUPPORTED_PLANT, normalize_language(language)).format(plant=payload.plant_type),
            )
        return {"accepted": True, "stats": engine.get_training_stats()}

    @app.post("/api/training/train", status_code=202)
    async def train(request: Request, language: str = "en"):
        engine: ClassificationEngine = request.app.state.engine
        try:
            engine.check_training_preconditions(language)
        except TrainingPrecondition as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        engine.start_training()
        return {"started": True, **_training_view(engine)}

    @app.get("/api/training/progress")
    async def training_progress(request: Request):
        return _training_view(request.app.state.engine)

    @app.get("/api/training/stats")
    async def training_stats(request: Request):
        return request.app.state.engine.get_training_stats()

    # ---------------- WhatsApp ----------------

    @app.post("/api/whatsapp-connect")
    async def whatsapp_connect(request: Request, payload: WhatsAppConnectPayload):
        phone_number = payload.phone_number.strip()
        logger.info("Received phone number: %s", phone_number)

        if not await redis_store.mark_contact_seen(phone_number):
            return {"success": True, "message": "Already connected", "message_id": None}

        try:
            message_id = await call_maybe_async(request.app.state.relay.send_welcome, phone_number)
        except TransportError as exc:
            logger.error("Twilio error: %s", exc)
            await redis_store.forget_contact(phone_number)
            return JSONResponse(
                status_code=500,
                content={"success": False, "message": "Failed to connect to WhatsApp"},
            )

        return {"success": True, "message": "WhatsApp connection initiated", "message_id": message_id}

    @app.post("/api/whatsapp-webhook")
    async def whatsapp_webhook(request: Request):
        form = await request.form()
        params = {key: value for key, value in form.items()}

        try:
            verify_twilio_signature(str(request.url), params, request.headers.get("x-twilio-signature"))
        except ValueError:
            raise HTTPException(status_code=403, detail="Invalid signature")

        message = InboundMessage(params)
        if not await redis_store.mark_incoming_message_seen(message.id):
            logger.info("Duplicate webhook delivery %s ignored", message.id)
            return Response(content=str(MessagingResponse()), media_type="application/xml; charset=utf-8")

        logger.info("Webhook: message from %s: %s | media: %s", message.from_, message.body, message.media_type)
        try:
            if message.has_image:
                language = detect_language(message.body)
                result = await request.app.state.engine.classify_plant_image(message.media_url, language)
                reply = format_classification(result, language)
            else:
                reply = await handle_inbound_text(message.body, request.app.state.resolver)
        except Exception:
            logger.error("Webhook error", exc_info=True)
            reply = WHATSAPP_APOLOGY

        return twiml_response(reply)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app:app", host="0.0.0.0", port=Config.port, reload=False)
