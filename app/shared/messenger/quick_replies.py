from typing import List, Dict, Tuple


class MessengerQuickReplies:
    """
    Factory para crear respuestas rápidas de Messenger.
    Responsabilidad única: generar estructuras de quick replies válidas para la Send API.
    """

    MAX_QUICK_REPLIES = 13  # Messenger limita a 13 respuestas rápidas
    MAX_TITLE_LENGTH = 20   # Máximo 20 caracteres para título

    @staticmethod
    def text_option(title: str, payload: str) -> Dict:
        return {
            "content_type": "text",
            "title": title[:MessengerQuickReplies.MAX_TITLE_LENGTH],
            "payload": payload
        }

    @staticmethod
    def location_option() -> Dict:
        return {"content_type": "location"}

    @staticmethod
    def create_quick_replies(text: str, options: List[Dict]) -> Dict:
        """
        Crea un mensaje de texto con respuestas rápidas.

        Args:
            text: Texto del mensaje
            options: Opciones creadas con text_option/location_option

        Returns:
            Dict: Objeto `message` con quick_replies

        Raises:
            ValueError: Si no hay opciones o hay más de 13
        """
        if not options:
            raise ValueError("Debe proporcionar al menos una respuesta rápida")

        if len(options) > MessengerQuickReplies.MAX_QUICK_REPLIES:
            raise ValueError(f"Messenger permite máximo {MessengerQuickReplies.MAX_QUICK_REPLIES} respuestas rápidas, recibidas: {len(options)}")

        return {"text": text, "quick_replies": list(options)}

    @staticmethod
    def create_simple_quick_replies(text: str, items: List[Tuple[str, str]]) -> Dict:
        """
        Versión simplificada usando tuplas (title, payload).

        Example:
            create_simple_quick_replies("¿Y ahora?", [("Home", "HOME"), ("Top", "CONTACT")])
        """
        options = [
            MessengerQuickReplies.text_option(title, payload)
            for title, payload in items
        ]
        return MessengerQuickReplies.create_quick_replies(text, options)
