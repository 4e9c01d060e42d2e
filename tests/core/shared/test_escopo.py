"""
Testes Unitários - Escopo de consulta.

Coverage:
- Barreira de filial e visão global
- permite_ticket / permite_atraso / permite_apontamento
"""

import pytest

from src.core.apontamentos.entities import ApontamentoEntity
from src.core.atrasos.entities import AtrasoEntity
from src.core.shared.escopo import (
    EscopoConsulta,
    permite_apontamento,
    permite_atraso,
    permite_ticket,
)
from src.core.tickets.entities import TicketEntity


def _escopo(*permissoes, usuario_id="u1", filial_id="f1", **kwargs):
    return EscopoConsulta(
        usuario_id=usuario_id, filial_id=filial_id, permissoes=frozenset(permissoes), **kwargs
    )


@pytest.fixture
def ticket():
    return TicketEntity(
        codigo="TKT-2025-0001", titulo="t", descricao="d",
        criador_id="criador", filial_id="f1", atribuido_a_id="tecnico",
    )


class TestEscopoConsulta:

    @pytest.mark.parametrize("permissao", ["reports.view_global", "tickets.resolve_all"])
    def test_visao_global(self, permissao):
        escopo = _escopo(permissao, filial_id=None)
        assert escopo.visao_global
        assert escopo.permite_filial("qualquer")

    def test_sem_filial_nao_passa_barreira(self):
        assert not _escopo(filial_id=None).permite_filial("f1")

    def test_filial_diferente(self):
        assert not _escopo().permite_filial("f2")
        assert _escopo().permite_filial("f1")


class TestPermiteTicket:

    def test_sem_escopo(self, ticket):
        assert permite_ticket(None, ticket)

    @pytest.mark.parametrize("permissao", ["tickets.view_all", "tickets.view_filiale"])
    def test_filial(self, ticket, permissao):
        assert permite_ticket(_escopo(permissao), ticket)
        assert not permite_ticket(_escopo(permissao, filial_id="f2"), ticket)

    @pytest.mark.parametrize("usuario_id,visivel", [
        ("criador", True), ("tecnico", True), ("co-responsavel", True), ("estranho", False),
    ])
    def test_view_own(self, ticket, usuario_id, visivel):
        escopo = _escopo("tickets.view_own", usuario_id=usuario_id)
        assert permite_ticket(escopo, ticket, ["co-responsavel"]) is visivel

    def test_view_own_solicitante(self, ticket):
        ticket.solicitante_id = "pedinte"
        assert permite_ticket(_escopo("tickets.view_own", usuario_id="pedinte"), ticket)

    def test_sem_permissao(self, ticket):
        assert not permite_ticket(_escopo(usuario_id="criador"), ticket)


class TestPermiteAtraso:

    @pytest.fixture
    def atraso(self):
        return AtrasoEntity.detectar("t1", "dono", 60, 90)

    def test_view_all_com_filtro(self, atraso):
        assert permite_atraso(_escopo("delays.view_all"), atraso, "f1", "d1")
        assert not permite_atraso(_escopo("delays.view_all", filtro_usuario_id="x"), atraso, "f1", "d1")
        assert permite_atraso(_escopo("delays.view_all", filtro_usuario_id="dono"), atraso, "f1", "d1")

    def test_view_department(self, atraso):
        escopo = _escopo("delays.view_department", departamento_id="d1")
        assert permite_atraso(escopo, atraso, "f1", "d1")
        assert not permite_atraso(escopo, atraso, "f1", "d2")

    def test_view_department_sem_departamento_cai_para_view_own(self, atraso):
        escopo = _escopo("delays.view_department", "delays.view_own", usuario_id="dono")
        assert permite_atraso(escopo, atraso, "f1", "d9")

    def test_view_own(self, atraso):
        assert permite_atraso(_escopo("delays.view_own", usuario_id="dono"), atraso, "f1", None)
        assert not permite_atraso(_escopo("delays.view_own"), atraso, "f1", None)

    def test_barreira_de_filial(self, atraso):
        assert not permite_atraso(_escopo("delays.view_all"), atraso, "f2", "d1")


class TestPermiteApontamento:

    def test_apontamento_em_ticket(self, ticket):
        apontamento = ApontamentoEntity.criar("autor", 10, "2025-03-10", ticket_id=ticket.id)

        assert permite_apontamento(_escopo("timesheet.view_all"), apontamento, ticket)
        assert permite_apontamento(_escopo("timesheet.view_own", usuario_id="autor"), apontamento, ticket)
        assert permite_apontamento(_escopo("timesheet.view_own", usuario_id="tecnico"), apontamento, ticket)
        assert not permite_apontamento(_escopo("timesheet.view_own"), apontamento, ticket)
        assert not permite_apontamento(
            _escopo("timesheet.view_all", filial_id="f2"), apontamento, ticket
        )

    def test_apontamento_em_tarefa(self):
        apontamento = ApontamentoEntity.criar("autor", 10, "2025-03-10", tarefa_projeto_id="p1")

        assert permite_apontamento(_escopo("timesheet.view_own", usuario_id="autor"), apontamento)
        assert not permite_apontamento(_escopo("timesheet.view_all"), apontamento)
        assert permite_apontamento(
            _escopo("timesheet.view_all", "reports.view_global"), apontamento
        )
