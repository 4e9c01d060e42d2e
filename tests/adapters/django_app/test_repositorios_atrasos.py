"""
Testes de Integração - Repositórios Django de Atrasos e Justificativas.

Coverage:
- AtrasoEntity ↔ AtrasoModel (percentual decimal)
- Escopo de atrasos no ORM: filial do ticket, departamento do dono
- Justificativa removida junto com o atraso
"""

from datetime import datetime

import pytest

from src.adapters.django_app.atrasos.models import JustificativaModel
from src.adapters.django_app.atrasos.repositories import (
    DjangoAtrasoRepository,
    DjangoJustificativaRepository,
)
from src.core.atrasos.entities import (
    AtrasoEntity,
    AtrasoStatus,
    JustificativaEntity,
    JustificativaStatus,
)
from src.core.shared.escopo import EscopoConsulta

pytestmark = pytest.mark.django_db


@pytest.fixture
def repo():
    return DjangoAtrasoRepository()


@pytest.fixture
def justificativas():
    return DjangoJustificativaRepository()


@pytest.fixture
def atrasos(organizacao, ticket_factory, repo):
    """Um atraso por ticket: loja/ti-1, loja/cli-1, matriz/ti-2."""
    loja = ticket_factory(filial_id="f-loja", tempo_estimado=60, tempo_real=75)
    outro_loja = ticket_factory(filial_id="f-loja", tempo_estimado=30, tempo_real=40)
    matriz = ticket_factory(filial_id="f-ti", tempo_estimado=90, tempo_real=120)

    criados = {
        "ti-1": AtrasoEntity.detectar(loja.id, "ti-1", 60, 75),
        "cli-1": AtrasoEntity.detectar(outro_loja.id, "cli-1", 30, 40),
        "ti-2": AtrasoEntity.detectar(matriz.id, "ti-2", 90, 120),
    }
    for atraso in criados.values():
        repo.save(atraso)
    return criados


def _escopo(*permissoes, **kwargs):
    dados = {"usuario_id": "ti-1", "filial_id": "f-loja"}
    dados.update(kwargs)
    return EscopoConsulta(permissoes=frozenset(permissoes), **dados)


class TestDjangoAtrasoRepository:

    def test_round_trip(self, repo, atrasos):
        salvo = repo.get_by_id(atrasos["ti-1"].id)

        assert salvo.tempo_atraso == 15
        assert salvo.percentual_atraso == 25.0
        assert salvo.status == AtrasoStatus.UNJUSTIFIED
        assert repo.get_by_ticket(atrasos["ti-1"].ticket_id) == salvo

    def test_percentual_no_limite(self, repo, ticket_factory):
        ticket = ticket_factory()
        atraso = AtrasoEntity.detectar(ticket.id, "ti-1", 1, 5000)
        repo.save(atraso)

        assert repo.get_by_id(atraso.id).percentual_atraso == 999.99

    def test_atualizar_medidas(self, repo, atrasos):
        atraso = atrasos["ti-1"]
        atraso.atualizar_medidas(60, 90)
        repo.save(atraso)

        salvo = repo.get_by_id(atraso.id)
        assert (salvo.tempo_atraso, salvo.percentual_atraso) == (30, 50.0)

    def test_listar_por_usuario_e_status(self, repo, atrasos):
        atraso = atrasos["ti-2"]
        atraso.marcar_pendente()
        repo.save(atraso)

        assert [a.id for a in repo.listar_por_usuario("ti-2")] == [atraso.id]
        assert [a.id for a in repo.listar_por_status(AtrasoStatus.PENDING)] == [atraso.id]

    def test_contar_por_status(self, repo, atrasos):
        atrasos["ti-2"].marcar_justificado()
        repo.save(atrasos["ti-2"])

        assert repo.contar_por_status() == {
            "unjustified": 2,
            "pending": 0,
            "justified": 1,
            "rejected": 0,
        }

    def test_delete_remove_justificativa(self, repo, justificativas, atrasos):
        atraso = atrasos["ti-1"]
        justificativas.save(JustificativaEntity.criar(atraso.id, "ti-1", "Fornecedor atrasou a peça"))

        repo.delete(atraso.id)

        assert repo.get_by_id(atraso.id) is None
        assert not JustificativaModel.objects.exists()


class TestEscopoAtrasos:

    def test_view_all_respeita_filial(self, repo, atrasos):
        visiveis = repo.listar(_escopo("delays.view_all"))
        assert {a.usuario_id for a in visiveis} == {"ti-1", "cli-1"}

    def test_view_all_com_filtro_de_usuario(self, repo, atrasos):
        visiveis = repo.listar(_escopo("delays.view_all", filtro_usuario_id="cli-1"))
        assert [a.usuario_id for a in visiveis] == ["cli-1"]

    def test_view_department(self, repo, atrasos):
        escopo = _escopo("delays.view_department", departamento_id="d-loja")
        assert [a.usuario_id for a in repo.listar(escopo)] == ["cli-1"]

    def test_view_own(self, repo, atrasos):
        assert [a.usuario_id for a in repo.listar(_escopo("delays.view_own"))] == ["ti-1"]

    def test_visao_global(self, repo, atrasos):
        escopo = _escopo("delays.view_all", "reports.view_global", filial_id=None)
        assert len(repo.listar(escopo)) == 3

    def test_sem_filial(self, repo, atrasos):
        assert repo.listar(_escopo("delays.view_all", filial_id=None)) == []

    def test_ticket_excluido_some_do_escopo(self, repo, atrasos):
        from src.adapters.django_app.tickets.models import TicketModel

        TicketModel.objects.filter(id=atrasos["cli-1"].ticket_id).update(excluido_em=datetime(2025, 3, 12, 10, 0))

        visiveis = repo.listar(_escopo("delays.view_all"))
        assert [a.usuario_id for a in visiveis] == ["ti-1"]


class TestDjangoJustificativaRepository:

    def test_round_trip_e_decisao(self, justificativas, atrasos):
        justificativa = JustificativaEntity.criar(atrasos["ti-1"].id, "ti-1", "Peça em falta")
        justificativas.save(justificativa)

        justificativa.decidir(False, "infra-1", "Sem evidência")
        justificativas.save(justificativa)

        salva = justificativas.get_by_atraso(atrasos["ti-1"].id)
        assert salva.status == JustificativaStatus.REJECTED
        assert salva.validado_por_id == "infra-1"
        assert salva.comentario_validacao == "Sem evidência"
        assert salva.validado_em is not None

    def test_listagens(self, justificativas, atrasos):
        primeira = JustificativaEntity.criar(atrasos["ti-1"].id, "ti-1", "a")
        segunda = JustificativaEntity.criar(atrasos["ti-2"].id, "ti-2", "b")
        justificativas.save(primeira)
        justificativas.save(segunda)

        assert [j.id for j in justificativas.listar_por_usuario("ti-2")] == [segunda.id]
        assert len(justificativas.listar_por_status(JustificativaStatus.PENDING)) == 2
        assert {j.id for j in justificativas.listar_todas()} == {primeira.id, segunda.id}
        assert justificativas.get_by_atraso("inexistente") is None
