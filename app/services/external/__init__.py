"""
Módulo de clientes externos que consulta el bot.
Proporciona una interfaz unificada sobre perfiles, estadísticas y noticias.
"""

from .base_client import ExternalApiError
from .profile_api import ProfileApi
from .covid_api import CovidApi
from .news_api import NewsApi


class ExternalApis:
    """
    Interfaz unificada para todos los clientes externos.
    Mantiene un único punto de creación y cierre de clientes HTTP.
    """

    def __init__(self, profiles: ProfileApi = None, covid: CovidApi = None, news: NewsApi = None):
        self.profiles = profiles or ProfileApi()
        self.covid = covid or CovidApi()
        self.news = news or NewsApi()

    # ==================== GESTIÓN DE RECURSOS ====================

    async def close(self):
        """Cierra todos los clientes HTTP."""
        await self.profiles.close()
        await self.covid.close()
        await self.news.close()


__all__ = ["ExternalApis", "ExternalApiError", "ProfileApi", "CovidApi", "NewsApi"]
