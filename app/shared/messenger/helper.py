from typing import List, Tuple, Dict
from .quick_replies import MessengerQuickReplies
from .templates import MessengerTemplates


class MessengerHelper:
    """
    Helper unificado para respuestas de texto.
    Responsabilidad única: decidir entre texto plano o texto con menú de navegación.
    """

    @staticmethod
    def create_text_response(text: str, navigation: List[Tuple[str, str]] = None) -> Dict:
        """
        Crea texto plano o, si hay opciones de navegación, texto con respuestas rápidas.

        Args:
            text: Texto del mensaje
            navigation: Lista de tuplas (title, payload) hacia otras keywords

        Returns:
            Dict: Objeto `message` para la Send API
        """
        if not navigation:
            return MessengerTemplates.create_text(text)

        return MessengerQuickReplies.create_simple_quick_replies(text, navigation)
