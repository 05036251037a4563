"""
Módulo de componentes compartidos para el bot de Messenger.
Contiene helpers reutilizables para diferentes partes de la aplicación.
"""

from .messenger import (
    MessengerButtons,
    MessengerQuickReplies,
    MessengerTemplates,
    MessengerHelper,
    create_text,
    create_text_response,
    create_quick_replies
)

__all__ = [
    'MessengerButtons',
    'MessengerQuickReplies',
    'MessengerTemplates',
    'MessengerHelper',
    'create_text',
    'create_text_response',
    'create_quick_replies'
]
