from typing import List, Dict, Optional
from .buttons import MessengerButtons


class MessengerTemplates:
    """
    Factory para textos, adjuntos y plantillas genéricas (tarjetas).
    Responsabilidad única: generar objetos `message` válidos para la Send API.
    """

    MAX_ELEMENTS = 10          # Máximo 10 tarjetas por plantilla genérica
    MAX_TITLE_LENGTH = 80      # Máximo 80 caracteres para título de tarjeta
    MAX_SUBTITLE_LENGTH = 80   # Máximo 80 caracteres para subtítulo
    ATTACHMENT_TYPES = ("image", "audio", "video", "file")

    @staticmethod
    def create_text(text: str, metadata: Optional[str] = None) -> Dict:
        message = {"text": text}
        if metadata:
            message["metadata"] = metadata
        return message

    @staticmethod
    def create_attachment(attachment_type: str, url: str) -> Dict:
        """
        Crea un adjunto multimedia a partir de una URL.

        Raises:
            ValueError: Si el tipo no es image/audio/video/file
        """
        if attachment_type not in MessengerTemplates.ATTACHMENT_TYPES:
            raise ValueError(f"Tipo de adjunto no soportado: {attachment_type}")

        return {
            "attachment": {
                "type": attachment_type,
                "payload": {"url": url}
            }
        }

    @staticmethod
    def create_element(title: str, subtitle: str = "", image_url: Optional[str] = None, item_url: Optional[str] = None, buttons: Optional[List[Dict]] = None) -> Dict:
        """Crea una tarjeta para la plantilla genérica."""
        element = {
            "title": title[:MessengerTemplates.MAX_TITLE_LENGTH],
            "subtitle": subtitle[:MessengerTemplates.MAX_SUBTITLE_LENGTH],
        }
        if image_url:
            element["image_url"] = image_url
        if item_url:
            element["default_action"] = {"type": "web_url", "url": item_url}
        if buttons:
            element["buttons"] = MessengerButtons.validate_buttons(buttons)
        return element

    @staticmethod
    def create_generic_template(elements: List[Dict]) -> Dict:
        """
        Crea una plantilla genérica (carrusel de tarjetas).

        Raises:
            ValueError: Si no hay tarjetas o hay más de 10
        """
        if not elements:
            raise ValueError("Debe proporcionar al menos una tarjeta")

        if len(elements) > MessengerTemplates.MAX_ELEMENTS:
            raise ValueError(f"Messenger permite máximo {MessengerTemplates.MAX_ELEMENTS} tarjetas, recibidas: {len(elements)}")

        return {
            "attachment": {
                "type": "template",
                "payload": {
                    "template_type": "generic",
                    "elements": elements
                }
            }
        }
