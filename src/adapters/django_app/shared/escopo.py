"""
Escopo de Consulta → filtros do ORM.

Traduz as regras de visibilidade de src/core/shared/escopo.py para
objetos `Q`, permitindo filtrar e paginar no banco. As regras são as
mesmas dos predicados `permite_ticket`, `permite_atraso` e
`permite_apontamento`.

Referências entre contextos são IDs string, por isso filial do ticket
e departamento do usuário entram como subqueries.
"""

from typing import Optional

from django.db.models import Q

from src.core.shared.escopo import EscopoConsulta

# Q que não casa com nenhuma linha
NENHUM = Q(pk__in=[])


def _tickets_ativos():
    from ..tickets.models import TicketModel

    return TicketModel.objects.filter(excluido_em__isnull=True)


def _q_filial(escopo: EscopoConsulta, campo: str) -> Q:
    if escopo.visao_global:
        return Q()
    if escopo.filial_id is None:
        return NENHUM
    return Q(**{campo: escopo.filial_id})


def q_tickets(escopo: Optional[EscopoConsulta]) -> Q:
    """Filtro para TicketModel."""
    from ..tickets.models import TicketResponsavelModel

    if escopo is None:
        return Q()

    barreira = _q_filial(escopo, 'filial_id')

    if escopo.tem_alguma("tickets.view_all", "tickets.view_filiale"):
        return barreira

    if escopo.tem_permissao("tickets.view_own"):
        uid = escopo.usuario_id
        atribuidos = (
            TicketResponsavelModel.objects
            .filter(usuario_id=uid)
            .values('ticket_id')
        )
        return barreira & (
            Q(criador_id=uid)
            | Q(solicitante_id=uid)
            | Q(atribuido_a_id=uid)
            | Q(id__in=atribuidos)
        )

    return NENHUM


def q_atrasos(escopo: Optional[EscopoConsulta]) -> Q:
    """Filtro para AtrasoModel (filial do ticket, departamento do dono)."""
    from ..organizacao.models import UsuarioModel

    if escopo is None:
        return Q()

    if escopo.visao_global:
        barreira = Q()
    elif escopo.filial_id is None:
        return NENHUM
    else:
        tickets_da_filial = _tickets_ativos().filter(filial_id=escopo.filial_id).values('id')
        barreira = Q(ticket_id__in=tickets_da_filial)

    filtro = Q()
    if escopo.filtro_usuario_id is not None:
        filtro = Q(usuario_id=escopo.filtro_usuario_id)

    if escopo.tem_permissao("delays.view_all"):
        return barreira & filtro

    if escopo.tem_permissao("delays.view_department") and escopo.departamento_id:
        membros = (
            UsuarioModel.objects
            .filter(departamento_id=escopo.departamento_id)
            .values('id')
        )
        return barreira & Q(usuario_id__in=membros) & filtro

    if escopo.tem_permissao("delays.view_own"):
        return barreira & Q(usuario_id=escopo.usuario_id)

    return NENHUM


def q_apontamentos(escopo: Optional[EscopoConsulta]) -> Q:
    """
    Filtro para ApontamentoModel.

    Apontamentos sem ticket visível (tarefas de projeto) só passam
    para o próprio autor ou para a visão global.
    """
    if escopo is None:
        return Q()

    uid = escopo.usuario_id

    if escopo.visao_global:
        barreira = Q()
    else:
        sem_ticket = (
            Q(ticket_id__isnull=True)
            | ~Q(ticket_id__in=_tickets_ativos().values('id'))
        )
        barreira = sem_ticket & Q(usuario_id=uid)
        if escopo.filial_id is not None:
            tickets_da_filial = _tickets_ativos().filter(filial_id=escopo.filial_id).values('id')
            barreira = barreira | Q(ticket_id__in=tickets_da_filial)

    if escopo.tem_permissao("timesheet.view_all"):
        return barreira

    if escopo.tem_permissao("timesheet.view_own"):
        tickets_do_usuario = (
            _tickets_ativos()
            .filter(Q(criador_id=uid) | Q(atribuido_a_id=uid))
            .values('id')
        )
        return barreira & (Q(usuario_id=uid) | Q(ticket_id__in=tickets_do_usuario))

    return NENHUM
