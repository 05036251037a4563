import httpx, logging
from typing import Dict, Any, Optional
from app.core.config import get_settings
from app.models.outbound import Reply

logger = logging.getLogger(__name__)


class MessengerAPIError(Exception):
    """Error al llamar a la Send API o a la Messenger Profile API."""


class MessengerClient:
    """
    Encapsula las llamadas salientes a la plataforma de Messenger.
    Responsabilidad única: enviar mensajes y configurar el perfil de la página.
    """
    def __init__(self, settings=None, transport: Optional[httpx.AsyncBaseTransport] = None):
        settings = settings or get_settings()
        self.messages_url = f"{settings.GRAPH_BASE_URL}/me/messages"
        self.profile_url = f"{settings.GRAPH_BASE_URL}/me/messenger_profile"
        self.params = {"access_token": settings.PAGE_ACCESS_TOKEN}
        self.timeout = settings.HTTP_TIMEOUT
        self.transport = transport

    async def _post(self, url: str, payload: Dict[str, Any], method: str = "POST") -> Dict[str, Any]:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                r = await client.request(method, url, params=self.params, json=payload)
                r.raise_for_status()
            except httpx.HTTPStatusError as exc:
                logger.error("FB %s – %s", exc.response.status_code, exc.response.text)
                # Propaga un error de dominio, no el de httpx
                raise MessengerAPIError(exc.response.text) from exc
            except httpx.RequestError as exc:
                logger.error("FB sin respuesta en %s: %s", url, exc)
                raise MessengerAPIError(str(exc)) from exc
        try:
            return r.json()
        except ValueError as exc:
            logger.error("FB respuesta no JSON en %s: %s", url, r.text[:200])
            raise MessengerAPIError(f"Respuesta no JSON: {r.text[:200]}") from exc

    async def send(self, reply: Reply) -> Dict[str, Any]:
        """
        Envía un Reply (mensaje o sender action) por la Send API.

        Returns:
            Dict: Respuesta de la API; si tuvo éxito trae recipient_id y message_id
        """
        body = await self._post(self.messages_url, reply.to_payload())

        message_id = body.get("message_id")
        if message_id:
            logger.info(f"[FB] Mensaje {message_id} enviado a {body.get('recipient_id')}")
        else:
            logger.info(f"[FB] Send API llamada para {body.get('recipient_id', reply.recipient_id)}")
        return body

    async def set_persistent_menu(self, get_started_payload: str, menu: Dict[str, Any]) -> None:
        """Registra el botón 'Empezar' y el menú persistente de la página."""
        await self._post(self.profile_url, {"get_started": {"payload": get_started_payload}})
        await self._post(self.profile_url, {"persistent_menu": [menu]})
        logger.info("[FB] Menú persistente agregado")

    async def remove_persistent_menu(self) -> None:
        """Elimina el menú persistente de la página."""
        await self._post(self.profile_url, {"fields": ["persistent_menu"]}, method="DELETE")
        logger.info("[FB] Menú persistente eliminado")
