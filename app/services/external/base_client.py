import httpx
import logging
from typing import Any, Dict, Optional
from app.core.config import get_settings

logger = logging.getLogger(__name__)


class ExternalApiError(Exception):
    """Error al llamar a una API externa (timeout, conexión, status o datos malformados)."""
    pass


class BaseClient:
    """
    Cliente HTTP base para las APIs externas que consulta el bot.
    Responsabilidad única: configuración HTTP y manejo de errores.
    """

    def __init__(self, base_url: str = "", params: Optional[Dict[str, str]] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        settings = get_settings()
        self.base_url = base_url.rstrip("/")

        # Cliente HTTP reutilizable; el timeout convierte una API lenta en un fallo de consulta
        self.client = httpx.AsyncClient(
            timeout=httpx.Timeout(settings.HTTP_TIMEOUT, connect=min(settings.HTTP_TIMEOUT, 5.0)),
            params=params,
            transport=transport,
            limits=httpx.Limits(max_keepalive_connections=5, max_connections=10)
        )

    async def _make_request(self, method: str, url: str, **kwargs) -> httpx.Response:
        """
        Método centralizado para hacer requests con manejo de errores.

        Args:
            method: Método HTTP (GET, POST, PUT, DELETE)
            url: URL relativa o absoluta
            **kwargs: Argumentos adicionales para httpx

        Returns:
            httpx.Response: Respuesta del servidor

        Raises:
            ExternalApiError: Error de comunicación con la API
        """
        try:
            full_url = url if url.startswith('http') else f"{self.base_url}/{url.lstrip('/')}"
            logger.debug(f"[API] {method} {full_url}")

            response = await self.client.request(method, full_url, **kwargs)
            logger.debug(f"[API] {method} {full_url} -> {response.status_code}")

            if response.status_code >= 400:
                logger.error(f"[API] Error {response.status_code}: {response.text}")

            return response

        except httpx.TimeoutException:
            logger.error(f"[API] Timeout en {method} {url}")
            raise ExternalApiError("Timeout al comunicarse con la API")
        except httpx.RequestError as e:
            logger.error(f"[API] Error de conexión en {method} {url}: {e}")
            raise ExternalApiError(f"Error de conexión: {str(e)}")

    async def _get_json(self, url: str, **kwargs) -> Any:
        """
        GET que exige status 2xx y un cuerpo JSON válido.

        Raises:
            ExternalApiError: Si el status es de error o el cuerpo no es JSON
        """
        response = await self._make_request("GET", url, **kwargs)
        if response.status_code >= 400:
            raise ExternalApiError(f"Status {response.status_code} en {url}")
        try:
            return response.json()
        except ValueError as e:
            logger.error(f"[API] Respuesta no es JSON en {url}: {e}")
            raise ExternalApiError("Respuesta malformada") from e

    async def close(self):
        """Cierra el cliente HTTP."""
        try:
            await self.client.aclose()
            logger.debug("[API] Cliente HTTP cerrado")
        except Exception as e:
            logger.error(f"[API] Error cerrando cliente: {e}")
