from fastapi import APIRouter, BackgroundTasks, HTTPException, Query, Request, status
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError
from app.core.security import verify_signature
from app.models.message import WebhookPayload
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhook")

# ============================================================================
# ENDPOINTS PRINCIPALES
# ============================================================================

@router.get("")
async def verify_webhook(
    request: Request,
    hub_mode: str = Query("", alias="hub.mode"),
    hub_challenge: str = Query("", alias="hub.challenge"),
    hub_verify_token: str = Query("", alias="hub.verify_token"),
):
    """Verifica el webhook de Messenger (handshake de suscripción)."""
    settings = request.app.state.settings
    if hub_mode == "subscribe" and hub_verify_token == settings.VALIDATION_TOKEN:
        logger.info("[WEBHOOK] Webhook validado")
        return PlainTextResponse(content=hub_challenge, status_code=200)

    logger.warning("[WEBHOOK] Falló la validación; revisa que el token coincida")
    raise HTTPException(status_code=403, detail="Verification failed")


@router.post("")
async def receive_update(request: Request, background_tasks: BackgroundTasks):
    """
    Endpoint principal para recibir eventos de Messenger.
    Responsabilidad: verificar la firma, validar el cuerpo y confirmar de inmediato;
    los eventos se procesan en segundo plano.
    """
    settings = request.app.state.settings
    body = await request.body()

    if not verify_signature(request.headers, body, settings.APP_SECRET):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid signature")

    payload = _parse_payload(body)
    if payload.object != "page":
        logger.info(f"[WEBHOOK] Objeto ignorado: {payload.object}")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Unsupported object")

    conversation_manager = request.app.state.conversation_manager
    background_tasks.add_task(conversation_manager.process_payload, payload)

    # Hay que responder 200 pronto o la plataforma reintenta y termina desactivando el webhook
    return PlainTextResponse(content="EVENT_RECEIVED", status_code=200)

# ============================================================================
# FUNCIONES PRIVADAS
# ============================================================================

def _parse_payload(body: bytes) -> WebhookPayload:
    """Valida el cuerpo crudo; un cuerpo malformado es un 400."""
    try:
        return WebhookPayload.model_validate_json(body)
    except ValidationError as e:
        logger.warning(f"[WEBHOOK] Cuerpo malformado: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Malformed payload")
