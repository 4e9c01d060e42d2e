"""
Ports do Domínio de Notificações.

O core apenas entrega mensagens tipadas a usuários; persistência e
envio em tempo real pertencem ao adapter.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Protocol, runtime_checkable


# Tipos de notificação emitidos pelo ciclo de vida de tickets
TICKET_CRIADO = "ticket_created"
TICKET_SUBMETIDO_VALIDACAO = "ticket_submitted_for_validation"
TICKET_INVALIDADO = "ticket_invalidated"
TICKET_VALIDADO = "ticket_validated"


@runtime_checkable
class NotificacaoService(Protocol):
    """
    Sink de notificações.

    Implementações podem falhar livremente: o core nunca propaga
    erros de entrega (ver Notificador).
    """

    def criar(
        self,
        usuario_id: str,
        tipo: str,
        titulo: str,
        mensagem: str,
        link_url: str = "",
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        ...


@dataclass
class NotificacaoEnviada:
    """Registro de notificação (usado pela implementação em memória)."""

    usuario_id: str
    tipo: str
    titulo: str
    mensagem: str
    link_url: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)
    criado_em: datetime = field(default_factory=datetime.now)


class InMemoryNotificacaoService:
    """
    Sink em memória para testes.

    Example:
        notificacoes = InMemoryNotificacaoService()
        ...
        assert notificacoes.por_tipo("ticket_created")
    """

    def __init__(self):
        self._enviadas: List[NotificacaoEnviada] = []

    def criar(
        self,
        usuario_id: str,
        tipo: str,
        titulo: str,
        mensagem: str,
        link_url: str = "",
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._enviadas.append(
            NotificacaoEnviada(
                usuario_id=usuario_id,
                tipo=tipo,
                titulo=titulo,
                mensagem=mensagem,
                link_url=link_url,
                metadata=dict(metadata or {}),
            )
        )

    @property
    def enviadas(self) -> List[NotificacaoEnviada]:
        return list(self._enviadas)

    def por_tipo(self, tipo: str) -> List[NotificacaoEnviada]:
        return [n for n in self._enviadas if n.tipo == tipo]

    def clear(self) -> None:
        self._enviadas.clear()
