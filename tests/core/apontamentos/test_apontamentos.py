"""
Testes Unitários - Apontamentos de tempo.

Coverage:
- ApontamentoEntity: vínculo, tempo, data, bloqueio após validação
- Recalculo do tempo real e derivação do atraso (60 estimado; 30+20+25)
- Validação / desfazer validação
- Consultas por período, por validação e com escopo
"""

from datetime import date

import pytest

from src.core.apontamentos.dtos import (
    AtualizarApontamentoInputDTO,
    CriarApontamentoInputDTO,
    ValidarApontamentoInputDTO,
)
from src.core.apontamentos.entities import ApontamentoEntity, parse_data
from src.core.atrasos.entities import AtrasoStatus
from src.core.shared.escopo import EscopoConsulta
from src.core.shared.exceptions import (
    BusinessRuleViolationError,
    EntityNotFoundError,
    ValidationError,
)
from src.core.tickets.entities import TicketEntity


class TestApontamentoEntity:

    def test_criar_em_ticket(self):
        apontamento = ApontamentoEntity.criar("ti-1", 30, "2025-03-10", ticket_id="t1")

        assert apontamento.data == date(2025, 3, 10)
        assert apontamento.tarefa_projeto_id is None
        assert not apontamento.validado

    def test_criar_em_tarefa(self):
        apontamento = ApontamentoEntity.criar("ti-1", 30, date(2025, 3, 10), tarefa_projeto_id="p1")
        assert apontamento.ticket_id is None

    @pytest.mark.parametrize("vinculo", [{}, {"ticket_id": "t1", "tarefa_projeto_id": "p1"}])
    def test_exatamente_um_vinculo(self, vinculo):
        with pytest.raises(ValidationError) as exc_info:
            ApontamentoEntity.criar("ti-1", 30, "2025-03-10", **vinculo)
        assert exc_info.value.field == "ticket_id"

    @pytest.mark.parametrize("tempo", [0, -10, None])
    def test_tempo_positivo(self, tempo):
        with pytest.raises(ValidationError):
            ApontamentoEntity.criar("ti-1", tempo, "2025-03-10", ticket_id="t1")

    @pytest.mark.parametrize("data", ["10/03/2025", "2025-13-01", ""])
    def test_data_invalida(self, data):
        with pytest.raises(ValidationError) as exc_info:
            parse_data(data)
        assert exc_info.value.field == "data"

    def test_atualizar_informa_mudanca_de_tempo(self):
        apontamento = ApontamentoEntity.criar("ti-1", 30, "2025-03-10", ticket_id="t1")

        assert not apontamento.atualizar(tempo_gasto=30, descricao="mesmo tempo")
        assert apontamento.atualizar(tempo_gasto=45)
        assert apontamento.descricao == "mesmo tempo"

    def test_validado_nao_altera_nem_exclui(self):
        apontamento = ApontamentoEntity.criar("ti-1", 30, "2025-03-10", ticket_id="t1")
        apontamento.definir_validacao(True, "ti-2")

        with pytest.raises(BusinessRuleViolationError) as exc_info:
            apontamento.atualizar(tempo_gasto=10)
        assert exc_info.value.rule == "apontamento_validado"
        with pytest.raises(BusinessRuleViolationError):
            apontamento.excluir()

    def test_desfazer_validacao(self):
        apontamento = ApontamentoEntity.criar("ti-1", 30, "2025-03-10", ticket_id="t1")
        apontamento.definir_validacao(True, "ti-2")
        apontamento.definir_validacao(False, "ti-2")

        assert apontamento.validado_por_id is None
        assert apontamento.validado_em is None
        apontamento.excluir()
        assert apontamento.esta_excluido


@pytest.fixture
def ticket(container):
    entidade = TicketEntity(
        codigo="TKT-2025-0001", titulo="t", descricao="d", criador_id="cli-1",
        filial_id="f-loja", atribuido_a_id="ti-2", tempo_estimado=60,
    )
    container.ticket_repository().save(entidade)
    return entidade


@pytest.fixture
def uow(container):
    return container.unit_of_work()


@pytest.fixture
def apontar(container, ticket, uow):
    def criar(tempo, usuario_id="ti-1", data="2025-03-10"):
        return container.criar_apontamento_service(uow=uow).execute(
            CriarApontamentoInputDTO(
                usuario_id=usuario_id, tempo_gasto=tempo, data=data, ticket_id=ticket.id,
            )
        )
    return criar


class TestTempoRealEAtraso:

    def test_soma_e_cria_atraso(self, container, apontar, ticket, uow):
        for tempo in (30, 20, 25):
            apontar(tempo)

        assert ticket.tempo_real == 75
        atraso = container.atraso_repository().get_by_ticket(ticket.id)
        assert atraso.tempo_atraso == 15
        assert atraso.percentual_atraso == 25.0
        assert atraso.status == AtrasoStatus.UNJUSTIFIED
        assert atraso.usuario_id == "ti-1"
        assert len(uow.eventos_do_tipo("ApontamentoRegistradoEvent")) == 3
        assert len(uow.eventos_do_tipo("AtrasoDetectadoEvent")) == 1

    def test_ajuste_para_baixo_remove_atraso(self, container, apontar, ticket, uow):
        apontar(30)
        apontar(20)
        ultimo = apontar(25)

        container.atualizar_apontamento_service(uow=uow).execute(
            AtualizarApontamentoInputDTO(apontamento_id=ultimo.id, ator_id="ti-1", tempo_gasto=5)
        )

        assert ticket.tempo_real == 55
        assert container.atraso_repository().get_by_ticket(ticket.id) is None
        assert uow.eventos_do_tipo("AtrasoRemovidoEvent")

    def test_exclusao_remove_atraso(self, container, apontar, ticket):
        apontar(30)
        apontar(20)
        ultimo = apontar(25)

        container.excluir_apontamento_service().execute(ultimo.id, "ti-1")

        assert ticket.tempo_real == 50
        assert container.atraso_repository().get_by_ticket(ticket.id) is None
        assert container.consulta_apontamentos_service().total_por_ticket(ticket.id) == 50

    def test_atraso_justificado_sobrevive_ao_ajuste(self, container, apontar, ticket):
        apontar(30)
        ultimo = apontar(45)
        container.atraso_repository().get_by_ticket(ticket.id).marcar_justificado()

        container.excluir_apontamento_service().execute(ultimo.id, "ti-1")

        assert ticket.tempo_real == 30
        assert container.atraso_repository().get_by_ticket(ticket.id).status == AtrasoStatus.JUSTIFIED

    def test_tarefa_de_projeto_nao_toca_tickets(self, container, ticket):
        container.criar_apontamento_service().execute(
            CriarApontamentoInputDTO(
                usuario_id="ti-1", tempo_gasto=500, data="2025-03-10", tarefa_projeto_id="p1",
            )
        )
        assert ticket.tempo_real is None

    def test_ticket_inexistente(self, container):
        with pytest.raises(EntityNotFoundError):
            container.criar_apontamento_service().execute(
                CriarApontamentoInputDTO(
                    usuario_id="ti-1", tempo_gasto=5, data="2025-03-10", ticket_id="fantasma",
                )
            )


class TestValidarApontamento:

    def test_validar(self, container, apontar, uow):
        apontamento = apontar(30)

        output = container.validar_apontamento_service(uow=uow).execute(
            ValidarApontamentoInputDTO(apontamento.id, "ti-2")
        )

        assert output.validado
        assert output.validado_por_id == "ti-2"
        assert uow.eventos_do_tipo("ApontamentoValidadoEvent")

    def test_validador_inexistente(self, container, apontar):
        apontamento = apontar(30)
        with pytest.raises(EntityNotFoundError):
            container.validar_apontamento_service().execute(
                ValidarApontamentoInputDTO(apontamento.id, "fantasma")
            )

    def test_atualizar_validado(self, container, apontar):
        apontamento = apontar(30)
        container.validar_apontamento_service().execute(
            ValidarApontamentoInputDTO(apontamento.id, "ti-2")
        )

        with pytest.raises(BusinessRuleViolationError):
            container.atualizar_apontamento_service().execute(
                AtualizarApontamentoInputDTO(apontamento_id=apontamento.id, ator_id="ti-1", tempo_gasto=1)
            )


class TestConsultaApontamentos:

    @pytest.fixture
    def consulta(self, container):
        return container.consulta_apontamentos_service()

    def test_periodo(self, consulta, apontar):
        apontar(10, data="2025-03-01")
        apontar(20, data="2025-03-15")
        apontar(30, data="2025-04-01")
        apontar(40, usuario_id="ti-2", data="2025-03-15")

        itens = consulta.listar_por_periodo("ti-1", "2025-03-01", "2025-03-31")

        assert [a.tempo_gasto for a in itens] == [20, 10]

    def test_periodo_invertido(self, consulta):
        with pytest.raises(ValidationError):
            consulta.listar_por_periodo("ti-1", "2025-03-31", "2025-03-01")

    def test_validados_e_pendentes(self, container, consulta, apontar):
        primeiro = apontar(10)
        apontar(20)
        container.validar_apontamento_service().execute(ValidarApontamentoInputDTO(primeiro.id, "ti-2"))

        assert [a.id for a in consulta.listar_validados()] == [primeiro.id]
        assert [a.tempo_gasto for a in consulta.listar_pendentes()] == [20]

    def test_totais(self, consulta, apontar):
        apontar(10)
        apontar(15, usuario_id="ti-2")

        assert consulta.total_por_usuario("ti-1") == 10
        assert consulta.listar_por_usuario("ti-2")[0].tempo_gasto == 15

    def test_obter_excluido(self, container, consulta, apontar):
        apontamento = apontar(10)
        container.excluir_apontamento_service().execute(apontamento.id, "ti-1")

        with pytest.raises(EntityNotFoundError):
            consulta.obter(apontamento.id)

    def test_escopo(self, container, consulta, apontar):
        apontar(10)
        container.criar_apontamento_service().execute(
            CriarApontamentoInputDTO(
                usuario_id="ti-2", tempo_gasto=5, data="2025-03-10", tarefa_projeto_id="p1",
            )
        )

        proprio = EscopoConsulta("ti-1", filial_id="f-loja", permissoes=frozenset({"timesheet.view_own"}))
        responsavel = EscopoConsulta("ti-2", filial_id="f-loja", permissoes=frozenset({"timesheet.view_own"}))
        global_ = EscopoConsulta("x", permissoes=frozenset({"timesheet.view_all", "reports.view_global"}))
        outra_filial = EscopoConsulta("x", filial_id="f-ti", permissoes=frozenset({"timesheet.view_all"}))

        assert [a.tempo_gasto for a in consulta.listar(proprio)] == [10]
        assert sorted(a.tempo_gasto for a in consulta.listar(responsavel)) == [5, 10]
        assert len(consulta.listar(global_)) == 2
        assert consulta.listar(outra_filial) == []
