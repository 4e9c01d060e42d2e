"""
Ports (Interfaces) do Domínio de Atrasos.

Repositórios:
- AtrasoRepository: Atrasos (um por ticket)
- JustificativaRepository: Justificativas (uma por atraso)

As listagens recebem um `EscopoConsulta` opcional; o filtro precisa
da filial do ticket e do departamento do responsável pelo atraso.
"""

from typing import Dict, List, Optional, Protocol

from src.core.shared.escopo import EscopoConsulta, permite_atraso

from .entities import (
    AtrasoEntity,
    AtrasoStatus,
    JustificativaEntity,
    JustificativaStatus,
)


class AtrasoRepository(Protocol):
    """Interface para persistência de atrasos."""

    def save(self, atraso: AtrasoEntity) -> None:
        ...

    def get_by_id(self, atraso_id: str) -> Optional[AtrasoEntity]:
        ...

    def get_by_ticket(self, ticket_id: str) -> Optional[AtrasoEntity]:
        ...

    def delete(self, atraso_id: str) -> None:
        """Remove o atraso e, em cascata, sua justificativa."""
        ...

    def listar(self, escopo: Optional[EscopoConsulta] = None) -> List[AtrasoEntity]:
        """Atrasos visíveis, mais recentes primeiro."""
        ...

    def listar_por_usuario(
        self,
        usuario_id: str,
        escopo: Optional[EscopoConsulta] = None,
    ) -> List[AtrasoEntity]:
        ...

    def listar_por_status(
        self,
        status: AtrasoStatus,
        escopo: Optional[EscopoConsulta] = None,
    ) -> List[AtrasoEntity]:
        ...

    def contar_por_status(self) -> Dict[str, int]:
        ...


class JustificativaRepository(Protocol):
    """Interface para persistência de justificativas."""

    def save(self, justificativa: JustificativaEntity) -> None:
        ...

    def get_by_id(self, justificativa_id: str) -> Optional[JustificativaEntity]:
        ...

    def get_by_atraso(self, atraso_id: str) -> Optional[JustificativaEntity]:
        ...

    def delete(self, justificativa_id: str) -> None:
        ...

    def listar_por_usuario(self, usuario_id: str) -> List[JustificativaEntity]:
        ...

    def listar_por_status(self, status: JustificativaStatus) -> List[JustificativaEntity]:
        ...

    def listar_todas(self) -> List[JustificativaEntity]:
        """Todas as justificativas, mais recentes primeiro."""
        ...


# =============================================================================
# Implementações em memória (testes)
# =============================================================================

class InMemoryAtrasoRepository:
    """
    Implementação em memória do AtrasoRepository.

    Args:
        ticket_repo: Para resolver a filial do ticket no filtro de escopo
        usuario_repo: Para resolver o departamento do responsável
        justificativa_repo: Removida em cascata junto com o atraso
    """

    def __init__(self, ticket_repo=None, usuario_repo=None, justificativa_repo=None):
        self._atrasos: Dict[str, AtrasoEntity] = {}
        self.ticket_repo = ticket_repo
        self.usuario_repo = usuario_repo
        self.justificativa_repo = justificativa_repo

    def save(self, atraso: AtrasoEntity) -> None:
        self._atrasos[atraso.id] = atraso

    def get_by_id(self, atraso_id: str) -> Optional[AtrasoEntity]:
        return self._atrasos.get(atraso_id)

    def get_by_ticket(self, ticket_id: str) -> Optional[AtrasoEntity]:
        for atraso in self._atrasos.values():
            if atraso.ticket_id == ticket_id:
                return atraso
        return None

    def delete(self, atraso_id: str) -> None:
        self._atrasos.pop(atraso_id, None)
        if self.justificativa_repo is not None:
            justificativa = self.justificativa_repo.get_by_atraso(atraso_id)
            if justificativa is not None:
                self.justificativa_repo.delete(justificativa.id)

    def listar(self, escopo: Optional[EscopoConsulta] = None) -> List[AtrasoEntity]:
        return self._filtrar(lambda a: True, escopo)

    def listar_por_usuario(
        self,
        usuario_id: str,
        escopo: Optional[EscopoConsulta] = None,
    ) -> List[AtrasoEntity]:
        return self._filtrar(lambda a: a.usuario_id == usuario_id, escopo)

    def listar_por_status(
        self,
        status: AtrasoStatus,
        escopo: Optional[EscopoConsulta] = None,
    ) -> List[AtrasoEntity]:
        return self._filtrar(lambda a: a.status == status, escopo)

    def contar_por_status(self) -> Dict[str, int]:
        contagem = {status.value: 0 for status in AtrasoStatus}
        for atraso in self._atrasos.values():
            contagem[atraso.status.value] += 1
        return contagem

    def _filtrar(self, criterio, escopo: Optional[EscopoConsulta]) -> List[AtrasoEntity]:
        atrasos = [
            a for a in self._atrasos.values()
            if criterio(a) and self._visivel(a, escopo)
        ]
        return sorted(atrasos, key=lambda a: a.detectado_em, reverse=True)

    def _visivel(self, atraso: AtrasoEntity, escopo: Optional[EscopoConsulta]) -> bool:
        if escopo is None:
            return True

        filial_id = None
        if self.ticket_repo is not None:
            ticket = self.ticket_repo.get_by_id(atraso.ticket_id)
            filial_id = ticket.filial_id if ticket else None

        departamento_id = None
        if self.usuario_repo is not None:
            dono = self.usuario_repo.get_by_id(atraso.usuario_id)
            departamento_id = dono.departamento_id if dono else None

        return permite_atraso(escopo, atraso, filial_id, departamento_id)

    def clear(self) -> None:
        self._atrasos.clear()


class InMemoryJustificativaRepository:
    """Implementação em memória do JustificativaRepository."""

    def __init__(self):
        self._justificativas: Dict[str, JustificativaEntity] = {}

    def save(self, justificativa: JustificativaEntity) -> None:
        self._justificativas[justificativa.id] = justificativa

    def get_by_id(self, justificativa_id: str) -> Optional[JustificativaEntity]:
        return self._justificativas.get(justificativa_id)

    def get_by_atraso(self, atraso_id: str) -> Optional[JustificativaEntity]:
        for justificativa in self._justificativas.values():
            if justificativa.atraso_id == atraso_id:
                return justificativa
        return None

    def delete(self, justificativa_id: str) -> None:
        self._justificativas.pop(justificativa_id, None)

    def listar_por_usuario(self, usuario_id: str) -> List[JustificativaEntity]:
        return [j for j in self.listar_todas() if j.usuario_id == usuario_id]

    def listar_por_status(self, status: JustificativaStatus) -> List[JustificativaEntity]:
        return [j for j in self.listar_todas() if j.status == status]

    def listar_todas(self) -> List[JustificativaEntity]:
        return sorted(self._justificativas.values(), key=lambda j: j.criado_em, reverse=True)

    def clear(self) -> None:
        self._justificativas.clear()
