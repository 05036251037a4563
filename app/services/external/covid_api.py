import logging
from typing import List
from pydantic import ValidationError
from app.core.config import get_settings
from app.models.stats import RegionSummary, CountryStats
from .base_client import BaseClient, ExternalApiError

logger = logging.getLogger(__name__)


class CovidApi(BaseClient):
    """
    Cliente para las fuentes de estadísticas de COVID-19.
    Responsabilidad única: obtener y validar totales por región y por país.
    """

    REGIONS = ("vietnam", "global")

    def __init__(self, transport=None):
        super().__init__(transport=transport)
        settings = get_settings()
        self.region_url = settings.COVID_API_URL
        self.summary_url = settings.COVID_SUMMARY_URL

    async def get_region_summary(self, region: str) -> RegionSummary:
        """
        Obtiene los totales de una región.

        Args:
            region: "vietnam" o "global"

        Raises:
            ExternalApiError: Si la API falla o la forma de los datos no es la esperada
        """
        if region not in self.REGIONS:
            raise ValueError(f"Región no soportada: {region}")

        body = await self._get_json(self.region_url)
        try:
            summary = RegionSummary.model_validate(body["data"][region])
        except (KeyError, TypeError, ValidationError) as e:
            logger.error(f"[COVID] Datos malformados para {region}: {e}")
            raise ExternalApiError(f"Datos malformados para {region}") from e

        logger.debug(f"[COVID] {region}: {summary}")
        return summary

    async def get_countries(self) -> List[CountryStats]:
        """
        Obtiene la lista de países del resumen global, en el orden de la API.

        Raises:
            ExternalApiError: Si la API falla o la forma de los datos no es la esperada
        """
        body = await self._get_json(self.summary_url)
        try:
            countries = [CountryStats.model_validate(row) for row in body["Countries"]]
        except (KeyError, TypeError, ValidationError) as e:
            logger.error(f"[COVID] Resumen de países malformado: {e}")
            raise ExternalApiError("Resumen de países malformado") from e

        logger.debug(f"[COVID] {len(countries)} países obtenidos")
        return countries
