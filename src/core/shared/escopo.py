"""
Escopo de Consulta - Filtro de visibilidade tipado.

Um `EscopoConsulta` descreve QUEM está consultando (usuário,
departamento, filial, permissões) e é passado por valor às consultas
de listagem. Os repositórios aplicam as regras abaixo; o adapter
Django traduz as mesmas regras para filtros do ORM.

Convenção:
    escopo=None significa "sem filtragem". Só deve ser usado por
    contextos internos confiáveis (tarefas Celery, varredura de
    reconciliação, testes).

Permissões reconhecidas:
    Visão global:  reports.view_global, tickets.resolve_all
    Tickets:       tickets.view_all, tickets.view_filiale, tickets.view_own
    Atrasos:       delays.view_all, delays.view_department, delays.view_own
    Apontamentos:  timesheet.view_all, timesheet.view_own
"""

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Optional


PERMISSOES_VISAO_GLOBAL = ("reports.view_global", "tickets.resolve_all")


@dataclass(frozen=True)
class EscopoConsulta:
    """
    Contexto de visibilidade de uma consulta.

    Attributes:
        usuario_id: Usuário que consulta
        departamento_id: Departamento do usuário (opcional)
        filial_id: Filial resolvida do usuário (opcional)
        permissoes: Permissões do papel do usuário
        filtro_usuario_id: Restringe a um usuário (ex: atrasos de um membro)
    """

    usuario_id: str
    departamento_id: Optional[str] = None
    filial_id: Optional[str] = None
    permissoes: FrozenSet[str] = field(default_factory=frozenset)
    filtro_usuario_id: Optional[str] = None

    def tem_permissao(self, permissao: str) -> bool:
        return permissao in self.permissoes

    def tem_alguma(self, *permissoes: str) -> bool:
        return any(p in self.permissoes for p in permissoes)

    @property
    def visao_global(self) -> bool:
        """Usuário enxerga todas as filiais."""
        return self.tem_alguma(*PERMISSOES_VISAO_GLOBAL)

    def permite_filial(self, filial_id: Optional[str]) -> bool:
        """Barreira de filial comum a todas as regras."""
        if self.visao_global:
            return True
        return self.filial_id is not None and filial_id == self.filial_id


# =============================================================================
# Regras de visibilidade (predicados puros)
# =============================================================================

def permite_ticket(
    escopo: Optional[EscopoConsulta],
    ticket,
    responsaveis_ids: Iterable[str] = (),
) -> bool:
    """
    Verifica se o ticket é visível para o escopo.

    Args:
        escopo: Escopo da consulta (None = sem filtro)
        ticket: TicketEntity
        responsaveis_ids: IDs dos responsáveis do ticket
    """
    if escopo is None:
        return True

    if not escopo.permite_filial(ticket.filial_id):
        return False

    if escopo.tem_alguma("tickets.view_all", "tickets.view_filiale"):
        return True

    if escopo.tem_permissao("tickets.view_own"):
        uid = escopo.usuario_id
        return (
            ticket.criador_id == uid
            or ticket.solicitante_id == uid
            or ticket.atribuido_a_id == uid
            or uid in set(responsaveis_ids)
        )

    return False


def permite_atraso(
    escopo: Optional[EscopoConsulta],
    atraso,
    filial_ticket_id: Optional[str],
    departamento_dono_id: Optional[str],
) -> bool:
    """
    Verifica se o atraso é visível para o escopo.

    Três níveis: view_all (com filtro_usuario_id opcional),
    view_department (membros do mesmo departamento) e view_own.
    """
    if escopo is None:
        return True

    if not escopo.permite_filial(filial_ticket_id):
        return False

    filtro_ok = (
        escopo.filtro_usuario_id is None
        or atraso.usuario_id == escopo.filtro_usuario_id
    )

    if escopo.tem_permissao("delays.view_all"):
        return filtro_ok

    if escopo.tem_permissao("delays.view_department") and escopo.departamento_id:
        return departamento_dono_id == escopo.departamento_id and filtro_ok

    if escopo.tem_permissao("delays.view_own"):
        return atraso.usuario_id == escopo.usuario_id

    return False


def permite_apontamento(escopo: Optional[EscopoConsulta], apontamento, ticket=None) -> bool:
    """
    Verifica se o apontamento de tempo é visível para o escopo.

    Apontamentos em tarefas de projeto (sem ticket) passam pela barreira
    de filial apenas para o próprio autor ou para a visão global.
    """
    if escopo is None:
        return True

    if ticket is not None:
        if not escopo.permite_filial(ticket.filial_id):
            return False
    elif not (escopo.visao_global or apontamento.usuario_id == escopo.usuario_id):
        return False

    if escopo.tem_permissao("timesheet.view_all"):
        return True

    if escopo.tem_permissao("timesheet.view_own"):
        uid = escopo.usuario_id
        if apontamento.usuario_id == uid:
            return True
        return ticket is not None and uid in (ticket.criador_id, ticket.atribuido_a_id)

    return False
