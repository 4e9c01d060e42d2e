"""
Ports (Interfaces) do Domínio de Apontamentos.

Todas as consultas ignoram apontamentos excluídos logicamente.
"""

from datetime import date, datetime
from typing import Dict, List, Optional, Protocol

from src.core.shared.escopo import EscopoConsulta, permite_apontamento

from .entities import ApontamentoEntity


class ApontamentoRepository(Protocol):
    """Interface para persistência de apontamentos."""

    def save(self, apontamento: ApontamentoEntity) -> None:
        ...

    def get_by_id(self, apontamento_id: str) -> Optional[ApontamentoEntity]:
        ...

    def listar(self, escopo: Optional[EscopoConsulta] = None) -> List[ApontamentoEntity]:
        """Apontamentos visíveis, mais recentes (data) primeiro."""
        ...

    def listar_por_ticket(self, ticket_id: str) -> List[ApontamentoEntity]:
        ...

    def listar_por_usuario(self, usuario_id: str) -> List[ApontamentoEntity]:
        ...

    def listar_por_periodo(self, usuario_id: str, inicio: date, fim: date) -> List[ApontamentoEntity]:
        """Apontamentos do usuário com inicio <= data <= fim."""
        ...

    def listar_por_validacao(
        self,
        validado: bool,
        escopo: Optional[EscopoConsulta] = None,
    ) -> List[ApontamentoEntity]:
        ...

    def somar_por_ticket(self, ticket_id: str) -> int:
        """Soma de tempo_gasto dos apontamentos ativos do ticket."""
        ...

    def somar_por_usuario(self, usuario_id: str) -> int:
        ...

    def validar_por_ticket(self, ticket_id: str, validador_id: str, agora: datetime) -> int:
        """
        Marca como validados todos os apontamentos do ticket.

        Returns:
            Quantidade de apontamentos alterados
        """
        ...


class InMemoryApontamentoRepository:
    """
    Implementação em memória do ApontamentoRepository.

    Args:
        ticket_repo: Para resolver o ticket no filtro de escopo
    """

    def __init__(self, ticket_repo=None):
        self._apontamentos: Dict[str, ApontamentoEntity] = {}
        self.ticket_repo = ticket_repo

    def save(self, apontamento: ApontamentoEntity) -> None:
        self._apontamentos[apontamento.id] = apontamento

    def get_by_id(self, apontamento_id: str) -> Optional[ApontamentoEntity]:
        apontamento = self._apontamentos.get(apontamento_id)
        if apontamento is None or apontamento.esta_excluido:
            return None
        return apontamento

    def listar(self, escopo: Optional[EscopoConsulta] = None) -> List[ApontamentoEntity]:
        return self._filtrar(lambda a: True, escopo)

    def listar_por_ticket(self, ticket_id: str) -> List[ApontamentoEntity]:
        return self._filtrar(lambda a: a.ticket_id == ticket_id)

    def listar_por_usuario(self, usuario_id: str) -> List[ApontamentoEntity]:
        return self._filtrar(lambda a: a.usuario_id == usuario_id)

    def listar_por_periodo(self, usuario_id: str, inicio: date, fim: date) -> List[ApontamentoEntity]:
        return self._filtrar(lambda a: a.usuario_id == usuario_id and inicio <= a.data <= fim)

    def listar_por_validacao(
        self,
        validado: bool,
        escopo: Optional[EscopoConsulta] = None,
    ) -> List[ApontamentoEntity]:
        return self._filtrar(lambda a: a.validado == validado, escopo)

    def somar_por_ticket(self, ticket_id: str) -> int:
        return sum(a.tempo_gasto for a in self.listar_por_ticket(ticket_id))

    def somar_por_usuario(self, usuario_id: str) -> int:
        return sum(a.tempo_gasto for a in self.listar_por_usuario(usuario_id))

    def validar_por_ticket(self, ticket_id: str, validador_id: str, agora: datetime) -> int:
        alterados = 0
        for apontamento in self.listar_por_ticket(ticket_id):
            if not apontamento.validado:
                apontamento.definir_validacao(True, validador_id, agora)
                alterados += 1
        return alterados

    def _filtrar(self, criterio, escopo: Optional[EscopoConsulta] = None) -> List[ApontamentoEntity]:
        apontamentos = [
            a for a in self._apontamentos.values()
            if not a.esta_excluido and criterio(a) and self._visivel(a, escopo)
        ]
        return sorted(apontamentos, key=lambda a: (a.data, a.criado_em), reverse=True)

    def _visivel(self, apontamento: ApontamentoEntity, escopo: Optional[EscopoConsulta]) -> bool:
        if escopo is None:
            return True
        ticket = None
        if apontamento.ticket_id and self.ticket_repo is not None:
            ticket = self.ticket_repo.get_by_id(apontamento.ticket_id)
        return permite_apontamento(escopo, apontamento, ticket)

    def clear(self) -> None:
        self._apontamentos.clear()
