from typing import List, Dict


class MessengerButtons:
    """
    Factory para crear plantillas de botones de Messenger.
    Responsabilidad única: generar estructuras de botones válidas para la Send API.
    """

    MAX_BUTTONS = 3  # Messenger limita a 3 botones por plantilla
    MAX_TITLE_LENGTH = 20  # Máximo 20 caracteres para título de botón
    MAX_TEXT_LENGTH = 640  # Máximo 640 caracteres para el texto de la plantilla

    @staticmethod
    def postback(title: str, payload: str) -> Dict:
        """Botón que devuelve `payload` como postback al pulsarlo."""
        return {"type": "postback", "title": title, "payload": payload}

    @staticmethod
    def web_url(title: str, url: str) -> Dict:
        """Botón que abre una URL."""
        return {"type": "web_url", "url": url, "title": title}

    @staticmethod
    def phone_number(title: str, phone: str) -> Dict:
        """Botón que inicia una llamada."""
        return {"type": "phone_number", "title": title, "payload": phone}

    @staticmethod
    def validate_buttons(buttons: List[Dict]) -> List[Dict]:
        """
        Valida la lista de botones y trunca los títulos.

        Raises:
            ValueError: Si no hay botones, hay más de 3 o falta el título
        """
        if not buttons:
            raise ValueError("Debe proporcionar al menos un botón")

        if len(buttons) > MessengerButtons.MAX_BUTTONS:
            raise ValueError(f"Messenger permite máximo {MessengerButtons.MAX_BUTTONS} botones, recibidos: {len(buttons)}")

        validated_buttons = []
        for btn in buttons:
            if not btn.get("type") or not btn.get("title"):
                raise ValueError("Cada botón debe tener 'type' y 'title'")
            validated_buttons.append({**btn, "title": btn["title"][:MessengerButtons.MAX_TITLE_LENGTH]})

        return validated_buttons

    @staticmethod
    def create_button_template(text: str, buttons: List[Dict]) -> Dict:
        """
        Crea un mensaje con plantilla de botones.

        Args:
            text: Texto del mensaje
            buttons: Botones creados con postback/web_url/phone_number

        Returns:
            Dict: Objeto `message` con la plantilla de botones
        """
        return {
            "attachment": {
                "type": "template",
                "payload": {
                    "template_type": "button",
                    "text": text[:MessengerButtons.MAX_TEXT_LENGTH],
                    "buttons": MessengerButtons.validate_buttons(buttons)
                }
            }
        }
