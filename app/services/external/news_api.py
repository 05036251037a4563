import logging
from pydantic import ValidationError
from app.core.config import get_settings
from app.models.stats import NewsDigest
from .base_client import BaseClient, ExternalApiError

logger = logging.getLogger(__name__)


class NewsApi(BaseClient):
    """
    Cliente para el feed de noticias de salud.
    Responsabilidad única: obtener titulares, descripciones, imágenes y enlaces.
    """

    def __init__(self, transport=None):
        super().__init__(transport=transport)
        self.news_url = get_settings().NEWS_API_URL

    async def get_headlines(self) -> NewsDigest:
        """
        Obtiene el resumen de noticias.

        Raises:
            ExternalApiError: Si no hay feed configurado, la API falla o los datos están malformados
        """
        if not self.news_url:
            raise ExternalApiError("NEWS_API_URL no está configurada")

        body = await self._get_json(self.news_url)
        try:
            digest = NewsDigest.model_validate(body["data"]["output"])
        except (KeyError, TypeError, ValidationError) as e:
            logger.error(f"[NEWS] Feed malformado: {e}")
            raise ExternalApiError("Feed de noticias malformado") from e

        logger.debug(f"[NEWS] {len(digest.titles)} titulares obtenidos")
        return digest
