"""
Domínio de Notificações - entrega best-effort de mensagens a usuários.
"""

from .ports import NotificacaoService, InMemoryNotificacaoService
from .notificador import Notificador

__all__ = [
    "NotificacaoService",
    "InMemoryNotificacaoService",
    "Notificador",
]
