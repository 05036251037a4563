import logging
from functools import partial
from typing import Awaitable, Callable, Dict, List, Optional, Tuple
from app.models.outbound import Reply, ReplyAction, ReplySource
from app.services.external import ExternalApis, ExternalApiError
from app.services.conversation.content_store import ContentStore
from app.services.conversation.flows.add_keyword import AddKeywordFlow
from app.services.conversation.session_store import SenderSession
from app.services.conversation.stats_formatter import StatsFormatter, RankingMetric
from app.shared.messenger import (
    MessengerButtons, MessengerTemplates, create_text, create_text_response
)

logger = logging.getLogger(__name__)

HOME = ("Home", "HOME")

# Grafo de navegación: keyword externa -> respuestas rápidas (title, payload)
NAVIGATION: Dict[str, List[Tuple[str, str]]] = {
    "VN": [("Mundo", "GB"), ("Top", "CONTACT"), HOME],
    "GB": [("Vietnam", "VN"), ("Top", "CONTACT"), HOME],
    "TOP10_CASES": [("Top recuperados", "TOP10_RECOVERED"), ("Top fallecidos", "TOP10_DEATHS"), HOME],
    "TOP10_RECOVERED": [("Top casos", "TOP10_CASES"), ("Top fallecidos", "TOP10_DEATHS"), HOME],
    "TOP10_DEATHS": [("Letalidad 😔", "HIGHEST_DEATH_RATE"), HOME],
    "HIGHEST_DEATH_RATE": [("Más info", "MORE_INFO"), HOME],
    "NEWS_READ_1": [("Otras noticias", "NEWS"), HOME],
    "NEWS_READ_2": [("Otras noticias", "NEWS"), HOME],
    "NEWS_READ_3": [("Otras noticias", "NEWS"), HOME],
}

NEWS_CARDS = 3
NEWS_FALLBACK_IMAGE = "https://raw.githubusercontent.com/danh9a99/chat-bot-news/master/img/express_logo.png"

DATA_UNAVAILABLE_TEXT = "Los datos no están disponibles en este momento. Intenta de nuevo más tarde."
NO_CUSTOM_KEYWORDS_TEXT = "Aún no hay keywords personalizadas."

CommandHandler = Callable[[SenderSession], Awaitable[List[Reply]]]
ExternalHandler = Callable[[], Awaitable[Dict]]


class KeywordEngine:
    """
    Responsabilidad única: resolver una keyword a las respuestas que hay que enviar.

    Orden de precedencia (gana el primero que coincide):
        1. Comandos integrados (en minúsculas)
        2. Reglas integradas del catálogo
        3. Reglas personalizadas
        4. Keywords de datos externos (estadísticas y noticias)
        5. Respuesta explícita de keyword desconocida
    """

    def __init__(self, content: ContentStore, apis: ExternalApis, add_keyword_flow: AddKeywordFlow):
        self.content = content
        self.apis = apis
        self.flow = add_keyword_flow

        self.commands: Dict[str, CommandHandler] = {
            "add keyword": self.flow.start,
            "list keywords": self._list_keywords,
            "addkeyword_text": self.flow.choose_text_reply,
            "addkeyword_button": self.flow.choose_button_reply,
            "addkeyword_button1": partial(self.flow.choose_button_count, count=1),
            "addkeyword_button2": partial(self.flow.choose_button_count, count=2),
            "addkeyword_button3": partial(self.flow.choose_button_count, count=3),
        }

        self.external: Dict[str, ExternalHandler] = {
            "VN": partial(self._region_summary, "vietnam", "Vietnam", "VN"),
            "GB": partial(self._region_summary, "global", "Mundo", "GB"),
            "TOP10_CASES": partial(self._ranking, RankingMetric.CASES),
            "TOP10_RECOVERED": partial(self._ranking, RankingMetric.RECOVERED),
            "TOP10_DEATHS": partial(self._ranking, RankingMetric.DEATHS),
            "HIGHEST_DEATH_RATE": self._highest_death_rate,
            "NEWS": self._news,
            "NEWS_READ_1": partial(self._news_read, 0),
            "NEWS_READ_2": partial(self._news_read, 1),
            "NEWS_READ_3": partial(self._news_read, 2),
        }

    async def resolve(self, session: SenderSession, keyword: str) -> ReplyAction:
        """
        Resuelve la keyword y registra en la sesión la última keyword enviada.

        Args:
            session: Sesión del remitente
            keyword: Texto, payload o URL tal como llegó

        Returns:
            ReplyAction: Keyword normalizada, origen de la respuesta y mensajes
        """
        normalized = ContentStore.normalize(keyword)
        action = await self._dispatch(session, keyword, normalized)
        session.last_keyword_sent = normalized
        logger.info(f"[KEYWORDS] {session.sender_id}: '{normalized}' -> {action.source.name}")
        return action

    async def _dispatch(self, session: SenderSession, keyword: str, normalized: str) -> ReplyAction:
        command = self.commands.get(keyword.strip().lower())
        if command is not None:
            return ReplyAction(normalized, ReplySource.COMMAND, await command(session))

        template = self.content.get_builtin(normalized)
        if template is not None:
            return ReplyAction(normalized, ReplySource.CONTENT, [self._reply(session, template)])

        template = self.content.get_custom(normalized)
        if template is not None:
            return ReplyAction(normalized, ReplySource.CUSTOM, [self._reply(session, template)])

        fetch = self.external.get(normalized)
        if fetch is not None:
            try:
                message = await fetch()
            except ExternalApiError as e:
                logger.warning(f"[KEYWORDS] Datos externos no disponibles para {normalized}: {e}")
                message = create_text_response(DATA_UNAVAILABLE_TEXT, [HOME])
            return ReplyAction(normalized, ReplySource.EXTERNAL, [self._reply(session, message)])

        return self.unknown(session, normalized)

    def unknown(self, session: SenderSession, normalized: str) -> ReplyAction:
        """Respuesta terminal para keywords que nadie reconoce; siempre es la misma."""
        message = create_text_response(
            "No reconozco ese mensaje. Toca Home para ver lo que puedo hacer.", [HOME]
        )
        return ReplyAction(normalized, ReplySource.UNKNOWN, [self._reply(session, message)])

    @staticmethod
    def _reply(session: SenderSession, message: Dict) -> Reply:
        return Reply(recipient_id=session.sender_id, message=message)

    # ==================== COMANDOS ====================

    async def _list_keywords(self, session: SenderSession) -> List[Reply]:
        keywords = self.content.custom_keywords()
        if not keywords:
            return [self._reply(session, create_text(NO_CUSTOM_KEYWORDS_TEXT))]
        return [self._reply(session, create_text(keyword)) for keyword in keywords]

    # ==================== DATOS EXTERNOS ====================

    async def _region_summary(self, region: str, label: str, keyword: str) -> Dict:
        summary = await self.apis.covid.get_region_summary(region)
        return create_text_response(StatsFormatter.format_region_summary(label, summary), NAVIGATION[keyword])

    async def _ranking(self, metric: RankingMetric) -> Dict:
        countries = await self.apis.covid.get_countries()
        text = StatsFormatter.format_ranking(countries, metric)
        return create_text_response(text, NAVIGATION[f"TOP10_{metric.name}"])

    async def _highest_death_rate(self) -> Dict:
        countries = await self.apis.covid.get_countries()
        highest = StatsFormatter.highest_death_rate(countries)
        if highest is None:
            raise ExternalApiError("Ningún país tiene casos confirmados")
        country, rate = highest
        return create_text_response(StatsFormatter.format_death_rate(country, rate), NAVIGATION["HIGHEST_DEATH_RATE"])

    async def _news(self) -> Dict:
        """Titulares como carrusel de tarjetas con lectura rápida y enlace."""
        digest = await self.apis.news.get_headlines()
        if not digest.titles:
            raise ExternalApiError("El feed no trae titulares")

        elements = []
        for index, title in enumerate(digest.titles[:NEWS_CARDS]):
            link = self._at(digest.links, index)
            buttons = [MessengerButtons.postback("Lectura rápida", f"NEWS_READ_{index + 1}")]
            if link:
                buttons.append(MessengerButtons.web_url("Abrir", link))
            elements.append(MessengerTemplates.create_element(
                title=title,
                image_url=self._at(digest.images, index) or NEWS_FALLBACK_IMAGE,
                item_url=link,
                buttons=buttons
            ))
        return MessengerTemplates.create_generic_template(elements)

    async def _news_read(self, index: int) -> Dict:
        digest = await self.apis.news.get_headlines()
        description = self._at(digest.descriptions, index)
        if not description:
            raise ExternalApiError(f"El feed no trae la noticia {index + 1}")
        return create_text_response(description, NAVIGATION[f"NEWS_READ_{index + 1}"])

    @staticmethod
    def _at(values: List, index: int) -> Optional[str]:
        return values[index] if index < len(values) else None
