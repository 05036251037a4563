"""
Módulo para generar mensajes estructurados de Messenger.
Automatiza la creación de botones, tarjetas y respuestas rápidas respetando los límites de la API.
"""

from .buttons import MessengerButtons
from .quick_replies import MessengerQuickReplies
from .templates import MessengerTemplates
from .helper import MessengerHelper

# Exports principales para uso directo
__all__ = [
    'MessengerButtons',
    'MessengerQuickReplies',
    'MessengerTemplates',
    'MessengerHelper'
]

# Funciones de conveniencia para importación rápida
create_text = MessengerTemplates.create_text
create_text_response = MessengerHelper.create_text_response
create_quick_replies = MessengerQuickReplies.create_simple_quick_replies
