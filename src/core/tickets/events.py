"""
Domain Events do Domínio de Tickets.

Este módulo define os eventos de domínio disparados quando algo
significativo acontece no ciclo de vida de um ticket.

Eventos:
- TicketCriadoEvent: Novo ticket foi criado
- TicketAtualizadoEvent: Campos do ticket foram alterados
- TicketAtribuidoEvent: Responsáveis do ticket foram (re)definidos
- TicketStatusAlteradoEvent: Status mudou
- TicketValidadoEvent: Resolução foi validada pelo solicitante
- TicketExcluidoEvent: Ticket foi excluído (lógico)
- TicketComentarioAdicionadoEvent: Comentário foi adicionado

Uso:
    Eventos são enfileirados no UnitOfWork e publicados após
    commit bem-sucedido.

    with uow:
        ticket = TicketEntity.criar(...)
        repo.save(ticket)
        uow.publish_event(TicketCriadoEvent(aggregate_id=ticket.id, ...))
"""

from dataclasses import dataclass, field
from typing import Dict, Any, Optional, List

from src.core.shared.events import DomainEvent


@dataclass
class TicketCriadoEvent(DomainEvent):
    """
    Evento: Ticket foi criado.

    Attributes:
        codigo: Código do ticket
        criador_id: ID do usuário que criou
        titulo: Título do ticket
        prioridade: Prioridade do ticket
        categoria: Slug da categoria
        filial_id: Filial do ticket
    """

    codigo: str = ""
    criador_id: str = ""
    titulo: str = ""
    prioridade: str = ""
    categoria: str = ""
    filial_id: Optional[str] = None

    @property
    def aggregate_type(self) -> str:
        return "Ticket"

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "codigo": self.codigo,
            "criador_id": self.criador_id,
            "titulo": self.titulo,
            "prioridade": self.prioridade,
            "categoria": self.categoria,
            "filial_id": self.filial_id,
        }


@dataclass
class TicketAtualizadoEvent(DomainEvent):
    """
    Evento: Ticket teve campos alterados.

    Attributes:
        campos: Nomes dos campos alterados
        atualizado_por_id: ID do ator
    """

    campos: List[str] = field(default_factory=list)
    atualizado_por_id: str = ""

    @property
    def aggregate_type(self) -> str:
        return "Ticket"

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "campos": list(self.campos),
            "atualizado_por_id": self.atualizado_por_id,
        }


@dataclass
class TicketAtribuidoEvent(DomainEvent):
    """
    Evento: Responsáveis do ticket foram definidos.

    Attributes:
        responsavel_id: Responsável principal (líder ou primeiro)
        responsaveis_ids: Conjunto completo de responsáveis
        atribuido_por_id: ID de quem fez a atribuição
    """

    responsavel_id: Optional[str] = None
    responsaveis_ids: List[str] = field(default_factory=list)
    atribuido_por_id: Optional[str] = None

    @property
    def aggregate_type(self) -> str:
        return "Ticket"

    def _get_event_data(self) -> Dict[str, Any]:
        data = {
            "responsavel_id": self.responsavel_id,
            "responsaveis_ids": list(self.responsaveis_ids),
        }
        if self.atribuido_por_id:
            data["atribuido_por_id"] = self.atribuido_por_id
        return data


@dataclass
class TicketStatusAlteradoEvent(DomainEvent):
    """
    Evento: Status do ticket mudou.

    Handlers típicos:
    - Atualizar painéis
    - Métricas de tempo de resolução

    Attributes:
        status_anterior: Status antes da mudança
        status_novo: Status após a mudança
        alterado_por_id: ID de quem alterou
    """

    status_anterior: str = ""
    status_novo: str = ""
    alterado_por_id: str = ""

    @property
    def aggregate_type(self) -> str:
        return "Ticket"

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "status_anterior": self.status_anterior,
            "status_novo": self.status_novo,
            "alterado_por_id": self.alterado_por_id,
        }


@dataclass
class TicketValidadoEvent(DomainEvent):
    """Evento: resolução validada (en_attente → resolu)."""

    validador_id: str = ""

    @property
    def aggregate_type(self) -> str:
        return "Ticket"

    def _get_event_data(self) -> Dict[str, Any]:
        return {"validador_id": self.validador_id}


@dataclass
class TicketExcluidoEvent(DomainEvent):
    """Evento: ticket excluído logicamente."""

    excluido_por_id: Optional[str] = None

    @property
    def aggregate_type(self) -> str:
        return "Ticket"

    def _get_event_data(self) -> Dict[str, Any]:
        return {"excluido_por_id": self.excluido_por_id}


@dataclass
class TicketComentarioAdicionadoEvent(DomainEvent):
    """
    Evento: Comentário foi adicionado ao ticket.

    Attributes:
        comentario_id: ID do comentário
        autor_id: ID do autor do comentário
        conteudo_preview: Preview do conteúdo (primeiros 100 chars)
        e_interno: Se é comentário interno
    """

    comentario_id: str = ""
    autor_id: str = ""
    conteudo_preview: str = ""
    e_interno: bool = False

    @property
    def aggregate_type(self) -> str:
        return "Ticket"

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "comentario_id": self.comentario_id,
            "autor_id": self.autor_id,
            "conteudo_preview": self.conteudo_preview,
            "e_interno": self.e_interno,
        }
