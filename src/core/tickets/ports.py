"""
Ports (Interfaces) do Domínio de Tickets.

Define os contratos que os Adapters de infraestrutura devem implementar
para persistência e consulta de tickets, responsáveis, comentários
e histórico.

Princípio:
    Core define interfaces → Adapters implementam
    Dependências sempre apontam para o Core

Example:
    # No Adapter (Django)
    class DjangoTicketRepository:
        def save(self, ticket: TicketEntity) -> None:
            model = TicketMapper.to_model(ticket)
            model.save()
"""

from typing import Dict, List, Optional, Protocol, Tuple, runtime_checkable
import re

from src.core.shared.escopo import EscopoConsulta, permite_ticket

from .entities import (
    TicketEntity,
    TicketStatus,
    ResponsavelTicket,
    ComentarioEntity,
    HistoricoTicketEntry,
)
from .dtos import ListarTicketsQueryDTO


CODIGO_PATTERN = re.compile(r"^TKT-(\d{4})-(\d+)$")


@runtime_checkable
class TicketRepository(Protocol):
    """
    Interface para persistência de Tickets.

    Tickets excluídos logicamente não são retornados por `get_by_id`,
    `get_by_codigo`, `listar` nem `listar_paginado`, mas continuam
    contando para `codigo_existe` e `proximo_numero_sequencia`.

    Implementações:
    - DjangoTicketRepository (PostgreSQL via ORM)
    - InMemoryTicketRepository (para testes)
    """

    def save(self, ticket: TicketEntity) -> None:
        """
        Persiste ticket no repositório (create ou update).

        Raises:
            RepositoryError: Se falha na persistência
        """
        ...

    def get_by_id(self, ticket_id: str) -> Optional[TicketEntity]:
        """Busca ticket não excluído por ID."""
        ...

    def get_by_codigo(self, codigo: str) -> Optional[TicketEntity]:
        """Busca ticket não excluído pelo código."""
        ...

    def exists(self, ticket_id: str) -> bool:
        ...

    def codigo_existe(self, codigo: str) -> bool:
        """Verifica se o código já foi usado (inclusive por excluídos)."""
        ...

    def proximo_numero_sequencia(self, ano: int) -> int:
        """
        Sugere o próximo número de sequência para o ano.

        Returns:
            Maior sequência usada no ano + 1 (1 se nenhuma)
        """
        ...

    def listar(
        self,
        query: ListarTicketsQueryDTO,
        escopo: Optional[EscopoConsulta] = None,
    ) -> Tuple[List[TicketEntity], int]:
        """
        Lista tickets filtrados e paginados.

        Args:
            query: Filtros e paginação
            escopo: Visibilidade (None = sem filtragem)

        Returns:
            (itens da página, total sem paginação)
        """
        ...

    def listar_paginado(self, offset: int, limite: int) -> List[TicketEntity]:
        """Página de tickets não excluídos, sem filtro de escopo."""
        ...


@runtime_checkable
class ResponsavelRepository(Protocol):
    """Interface para os vínculos de atribuição."""

    def substituir(self, ticket_id: str, responsaveis: List[ResponsavelTicket]) -> None:
        """Remove todos os vínculos do ticket e insere os novos."""
        ...

    def listar_por_ticket(self, ticket_id: str) -> List[ResponsavelTicket]:
        ...


@runtime_checkable
class ComentarioRepository(Protocol):
    """Interface para comentários de tickets."""

    def save(self, comentario: ComentarioEntity) -> None:
        ...

    def get_by_id(self, comentario_id: str) -> Optional[ComentarioEntity]:
        """Busca comentário não excluído."""
        ...

    def listar_por_ticket(self, ticket_id: str) -> List[ComentarioEntity]:
        """Comentários não excluídos, do mais antigo ao mais recente."""
        ...


@runtime_checkable
class HistoricoRepository(Protocol):
    """Interface para o histórico append-only."""

    def adicionar(self, entry: HistoricoTicketEntry) -> None:
        ...

    def listar_por_ticket(self, ticket_id: str) -> List[HistoricoTicketEntry]:
        """Entradas na ordem em que foram persistidas."""
        ...


# =============================================================================
# Implementações em memória (testes)
# =============================================================================

class InMemoryResponsavelRepository:
    """Implementação em memória do ResponsavelRepository."""

    def __init__(self):
        self._por_ticket: Dict[str, List[ResponsavelTicket]] = {}

    def substituir(self, ticket_id: str, responsaveis: List[ResponsavelTicket]) -> None:
        self._por_ticket[ticket_id] = list(responsaveis)

    def listar_por_ticket(self, ticket_id: str) -> List[ResponsavelTicket]:
        return list(self._por_ticket.get(ticket_id, []))

    def tickets_do_usuario(self, usuario_id: str) -> List[str]:
        return [
            ticket_id for ticket_id, responsaveis in self._por_ticket.items()
            if any(r.usuario_id == usuario_id for r in responsaveis)
        ]

    def clear(self) -> None:
        self._por_ticket.clear()


class InMemoryTicketRepository:
    """
    Implementação em memória do TicketRepository.

    Útil para:
    - Testes unitários
    - Desenvolvimento local

    Não usar em produção!

    Example:
        repo = InMemoryTicketRepository()
        repo.save(ticket)
        found = repo.get_by_id(ticket.id)
    """

    def __init__(self, responsavel_repo: Optional[InMemoryResponsavelRepository] = None):
        self._tickets: Dict[str, TicketEntity] = {}
        self.responsavel_repo = responsavel_repo

    def save(self, ticket: TicketEntity) -> None:
        """Salva ticket em memória."""
        self._tickets[ticket.id] = ticket

    def get_by_id(self, ticket_id: str) -> Optional[TicketEntity]:
        ticket = self._tickets.get(ticket_id)
        if ticket is None or ticket.esta_excluido:
            return None
        return ticket

    def get_by_codigo(self, codigo: str) -> Optional[TicketEntity]:
        for ticket in self._ativos():
            if ticket.codigo == codigo:
                return ticket
        return None

    def exists(self, ticket_id: str) -> bool:
        return self.get_by_id(ticket_id) is not None

    def codigo_existe(self, codigo: str) -> bool:
        return any(t.codigo == codigo for t in self._tickets.values())

    def proximo_numero_sequencia(self, ano: int) -> int:
        maior = 0
        for ticket in self._tickets.values():
            match = CODIGO_PATTERN.match(ticket.codigo or "")
            if match and int(match.group(1)) == ano:
                maior = max(maior, int(match.group(2)))
        return maior + 1

    def listar(
        self,
        query: ListarTicketsQueryDTO,
        escopo: Optional[EscopoConsulta] = None,
    ) -> Tuple[List[TicketEntity], int]:
        tickets = [
            t for t in self._ativos()
            if self._atende(t, query) and permite_ticket(escopo, t, self._responsaveis(t.id))
        ]
        tickets.sort(key=lambda t: t.criado_em, reverse=True)
        total = len(tickets)
        return tickets[query.offset:query.offset + query.por_pagina], total

    def listar_paginado(self, offset: int, limite: int) -> List[TicketEntity]:
        tickets = sorted(self._ativos(), key=lambda t: t.criado_em)
        return tickets[offset:offset + limite]

    def _ativos(self) -> List[TicketEntity]:
        return [t for t in self._tickets.values() if not t.esta_excluido]

    def _responsaveis(self, ticket_id: str) -> List[str]:
        if self.responsavel_repo is None:
            return []
        return [r.usuario_id for r in self.responsavel_repo.listar_por_ticket(ticket_id)]

    def _atende(self, ticket: TicketEntity, query: ListarTicketsQueryDTO) -> bool:
        if query.status and ticket.status != TicketStatus.from_string(query.status):
            return False
        if query.prioridade and ticket.prioridade.value != query.prioridade:
            return False
        if query.categoria and ticket.categoria != query.categoria:
            return False
        if query.origem and ticket.origem != query.origem:
            return False
        if query.filial_id and ticket.filial_id != query.filial_id:
            return False
        if query.criador_id and ticket.criador_id != query.criador_id:
            return False
        if query.responsavel_id:
            ids = set(self._responsaveis(ticket.id)) | {ticket.atribuido_a_id}
            if query.responsavel_id not in ids:
                return False
        return True

    def clear(self) -> None:
        """Limpa todos os dados (útil para testes)."""
        self._tickets.clear()


class InMemoryComentarioRepository:
    """Implementação em memória do ComentarioRepository."""

    def __init__(self):
        self._comentarios: Dict[str, ComentarioEntity] = {}

    def save(self, comentario: ComentarioEntity) -> None:
        self._comentarios[comentario.id] = comentario

    def get_by_id(self, comentario_id: str) -> Optional[ComentarioEntity]:
        comentario = self._comentarios.get(comentario_id)
        if comentario is None or comentario.excluido_em is not None:
            return None
        return comentario

    def listar_por_ticket(self, ticket_id: str) -> List[ComentarioEntity]:
        comentarios = [
            c for c in self._comentarios.values()
            if c.ticket_id == ticket_id and c.excluido_em is None
        ]
        return sorted(comentarios, key=lambda c: c.criado_em)

    def clear(self) -> None:
        self._comentarios.clear()


class InMemoryHistoricoRepository:
    """Implementação em memória do HistoricoRepository."""

    def __init__(self):
        self._entradas: List[HistoricoTicketEntry] = []

    def adicionar(self, entry: HistoricoTicketEntry) -> None:
        self._entradas.append(entry)

    def listar_por_ticket(self, ticket_id: str) -> List[HistoricoTicketEntry]:
        return [e for e in self._entradas if e.ticket_id == ticket_id]

    def clear(self) -> None:
        self._entradas.clear()
