"""
Módulo de flujos de conversación del bot.

Uso:
    from app.services.conversation.flows import AddKeywordFlow
"""

from .base_flow import BaseFlow
from .add_keyword import AddKeywordFlow

__all__ = [
    "BaseFlow",
    "AddKeywordFlow",
]
