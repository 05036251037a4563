import asyncio
import logging
from typing import Dict
from app.services.external import ProfileApi, ExternalApiError
from app.services.conversation.session_store import SessionStore, Profile, UNKNOWN_NAME

logger = logging.getLogger(__name__)


class ProfileResolver:
    """
    Responsabilidad única: resolver y cachear el nombre de cada remitente.

    La primera consulta va a la Graph API; las siguientes salen de la sesión.
    Consultas simultáneas para el mismo remitente comparten una sola llamada.
    """

    def __init__(self, sessions: SessionStore, profile_api: ProfileApi):
        self.sessions = sessions
        self.profile_api = profile_api
        self._in_flight: Dict[str, asyncio.Task] = {}

    async def resolve(self, sender_id: str) -> Profile:
        """
        Devuelve el perfil del remitente, creando su sesión si no existe.

        Si la consulta falla no se cachea nada y se devuelve el perfil "undefined";
        el siguiente evento del remitente vuelve a intentarlo.
        """
        session = self.sessions.get_or_create(sender_id)
        if session.profile is not None:
            return session.profile

        task = self._in_flight.get(sender_id)
        if task is None:
            task = asyncio.ensure_future(self._fetch(sender_id))
            self._in_flight[sender_id] = task
            task.add_done_callback(lambda _: self._in_flight.pop(sender_id, None))

        return await asyncio.shield(task)

    async def _fetch(self, sender_id: str) -> Profile:
        try:
            user = await self.profile_api.get_user_profile(sender_id)
        except ExternalApiError as e:
            logger.warning(f"[PROFILE] No se pudo obtener el perfil de {sender_id}: {e}")
            return Profile()

        profile = Profile(
            first_name=user.first_name or UNKNOWN_NAME,
            last_name=user.last_name or UNKNOWN_NAME
        )
        self.sessions.get_or_create(sender_id).profile = profile
        logger.info(f"[PROFILE] Perfil cacheado para {sender_id}: {profile.display_name}")
        return profile
