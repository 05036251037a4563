import logging
from pydantic import ValidationError
from app.core.config import get_settings
from app.models.message import UserProfile
from .base_client import BaseClient, ExternalApiError

logger = logging.getLogger(__name__)

PROFILE_FIELDS = "first_name,last_name,profile_pic,locale,timezone,gender"


class ProfileApi(BaseClient):
    """
    Cliente para la User Profile API de la Graph API.
    Responsabilidad única: obtener el perfil público de un remitente.
    """

    def __init__(self, transport=None):
        settings = get_settings()
        super().__init__(
            base_url=settings.GRAPH_BASE_URL,
            params={"access_token": settings.PAGE_ACCESS_TOKEN},
            transport=transport
        )

    async def get_user_profile(self, sender_id: str) -> UserProfile:
        """
        Obtiene el perfil de un remitente.

        Args:
            sender_id: PSID del remitente

        Returns:
            UserProfile: Perfil con nombre y apellido

        Raises:
            ExternalApiError: Si la API falla o devuelve datos malformados
        """
        data = await self._get_json(sender_id, params={"fields": PROFILE_FIELDS})
        try:
            profile = UserProfile.model_validate(data)
        except ValidationError as e:
            raise ExternalApiError(f"Perfil malformado para {sender_id}") from e

        logger.debug(f"[PROFILE] Perfil obtenido para {sender_id}: {profile.first_name} {profile.last_name}")
        return profile
