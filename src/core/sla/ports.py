"""
Ports do Domínio de SLA.
"""

from typing import Dict, List, Optional, Protocol, runtime_checkable

from .entities import SLAEntity, TicketSLAEntity


@runtime_checkable
class SLARepository(Protocol):
    """Regras de SLA."""

    def buscar_ativo(self, categoria: str, prioridade: Optional[str]) -> Optional[SLAEntity]:
        """
        Busca regra ativa exata.

        Args:
            categoria: Slug da categoria
            prioridade: Prioridade exata, ou None para a regra genérica
        """
        ...


@runtime_checkable
class TicketSLARepository(Protocol):
    """SLA aplicado a tickets."""

    def get_by_ticket(self, ticket_id: str) -> Optional[TicketSLAEntity]:
        ...

    def save(self, ticket_sla: TicketSLAEntity) -> None:
        ...


class InMemorySLARepository:
    """Implementação em memória do SLARepository."""

    def __init__(self):
        self._regras: List[SLAEntity] = []

    def save(self, sla: SLAEntity) -> None:
        self._regras = [r for r in self._regras if r.id != sla.id] + [sla]

    def buscar_ativo(self, categoria: str, prioridade: Optional[str]) -> Optional[SLAEntity]:
        for regra in self._regras:
            if regra.ativo and regra.categoria == categoria and regra.prioridade == prioridade:
                return regra
        return None

    def clear(self) -> None:
        self._regras.clear()


class InMemoryTicketSLARepository:
    """Implementação em memória do TicketSLARepository."""

    def __init__(self):
        self._por_ticket: Dict[str, TicketSLAEntity] = {}

    def get_by_ticket(self, ticket_id: str) -> Optional[TicketSLAEntity]:
        return self._por_ticket.get(ticket_id)

    def save(self, ticket_sla: TicketSLAEntity) -> None:
        self._por_ticket[ticket_sla.ticket_id] = ticket_sla

    def clear(self) -> None:
        self._por_ticket.clear()
