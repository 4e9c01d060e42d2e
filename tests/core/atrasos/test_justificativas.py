"""
Testes Unitários - Justificativas de atraso.

Coverage:
- Criar: somente o responsável, uma por atraso, atraso → pending
- Editar: somente o autor, somente pendente
- Validar / Rejeitar: estados resultantes e evento de decisão
- Excluir justificativa e atraso
- Consultas com escopo
"""

import pytest

from src.core.atrasos.dtos import (
    AtualizarJustificativaInputDTO,
    CriarJustificativaInputDTO,
    ValidarJustificativaInputDTO,
)
from src.core.atrasos.entities import AtrasoEntity, AtrasoStatus
from src.core.shared.escopo import EscopoConsulta
from src.core.shared.exceptions import (
    AuthorizationError,
    BusinessRuleViolationError,
    EntityNotFoundError,
    ValidationError,
)
from src.core.tickets.entities import TicketEntity


@pytest.fixture
def ticket(container):
    entidade = TicketEntity(
        codigo="TKT-2025-0001", titulo="t", descricao="d", criador_id="cli-1",
        filial_id="f-loja", tempo_estimado=60, tempo_real=90,
    )
    container.ticket_repository().save(entidade)
    return entidade


@pytest.fixture
def atraso(container, ticket):
    entidade = AtrasoEntity.detectar(ticket.id, "ti-1", 60, 90)
    container.atraso_repository().save(entidade)
    return entidade


@pytest.fixture
def uow(container):
    return container.unit_of_work()


@pytest.fixture
def justificar(container, atraso, uow):
    def criar(usuario_id="ti-1", texto="Fornecedor atrasou a peça"):
        return container.criar_justificativa_service(uow=uow).execute(
            CriarJustificativaInputDTO(atraso_id=atraso.id, usuario_id=usuario_id, justificativa=texto)
        )
    return criar


def _decidir(container, justificativa_id, validado, uow=None, comentario=""):
    kwargs = {"uow": uow} if uow is not None else {}
    return container.validar_justificativa_service(**kwargs).execute(
        ValidarJustificativaInputDTO(
            justificativa_id=justificativa_id, validador_id="ti-2",
            validado=validado, comentario=comentario,
        )
    )


class TestCriarJustificativa:

    def test_responsavel_justifica(self, justificar, atraso, uow):
        output = justificar()

        assert output.status == "pending"
        assert output.justificativa == "Fornecedor atrasou a peça"
        assert atraso.status == AtrasoStatus.PENDING
        assert len(uow.eventos_do_tipo("JustificativaSubmetidaEvent")) == 1

    def test_outro_usuario_nao_justifica(self, justificar, atraso):
        with pytest.raises(AuthorizationError) as exc_info:
            justificar(usuario_id="ti-2")

        assert exc_info.value.rule == "atraso.justificar"
        assert atraso.status == AtrasoStatus.UNJUSTIFIED

    def test_uma_justificativa_por_atraso(self, justificar):
        justificar()
        with pytest.raises(BusinessRuleViolationError) as exc_info:
            justificar()
        assert exc_info.value.rule == "justificativa_unica"

    def test_texto_vazio(self, justificar):
        with pytest.raises(ValidationError):
            justificar(texto="   ")

    def test_atraso_inexistente(self, container):
        with pytest.raises(EntityNotFoundError):
            container.criar_justificativa_service().execute(
                CriarJustificativaInputDTO(atraso_id="x", usuario_id="ti-1", justificativa="y")
            )


class TestAtualizarJustificativa:

    def test_autor_edita_pendente(self, container, justificar):
        justificativa = justificar()

        output = container.atualizar_justificativa_service().execute(
            AtualizarJustificativaInputDTO(justificativa.id, "ti-1", " Peça chegou tarde ")
        )

        assert output.justificativa == "Peça chegou tarde"

    def test_outro_usuario_nao_edita(self, container, justificar):
        justificativa = justificar()
        with pytest.raises(AuthorizationError):
            container.atualizar_justificativa_service().execute(
                AtualizarJustificativaInputDTO(justificativa.id, "ti-2", "outra")
            )

    def test_nao_edita_decidida(self, container, justificar):
        justificativa = justificar()
        _decidir(container, justificativa.id, validado=True)

        with pytest.raises(BusinessRuleViolationError) as exc_info:
            container.atualizar_justificativa_service().execute(
                AtualizarJustificativaInputDTO(justificativa.id, "ti-1", "outra")
            )
        assert exc_info.value.rule == "justificativa_ja_processada"


class TestValidarJustificativa:

    def test_validar(self, container, justificar, atraso, uow):
        justificativa = justificar()

        output = _decidir(container, justificativa.id, validado=True, uow=uow, comentario="ok")

        assert output.status == "validated"
        assert output.validado_por_id == "ti-2"
        assert output.comentario_validacao == "ok"
        assert atraso.status == AtrasoStatus.JUSTIFIED
        eventos = uow.eventos_do_tipo("JustificativaDecididaEvent")
        assert eventos[0].validado
        assert eventos[0].aggregate_id == atraso.id

    def test_rejeitar(self, container, justificar, atraso):
        justificativa = justificar()

        output = _decidir(container, justificativa.id, validado=False)

        assert output.status == "rejected"
        assert atraso.status == AtrasoStatus.UNJUSTIFIED

    def test_decidir_duas_vezes(self, container, justificar, atraso):
        justificativa = justificar()
        _decidir(container, justificativa.id, validado=True)

        with pytest.raises(BusinessRuleViolationError):
            _decidir(container, justificativa.id, validado=False)
        assert atraso.status == AtrasoStatus.JUSTIFIED

    def test_rejeitar_pelo_atraso(self, container, justificar, atraso):
        justificar()

        output = container.rejeitar_justificativa_service().execute(atraso.id, "ti-2", "sem provas")

        assert output.status == "rejected"
        assert output.comentario_validacao == "sem provas"

    def test_rejeitar_sem_justificativa(self, container, atraso):
        with pytest.raises(EntityNotFoundError):
            container.rejeitar_justificativa_service().execute(atraso.id, "ti-2")

    def test_justificativa_inexistente(self, container):
        with pytest.raises(EntityNotFoundError):
            _decidir(container, "fantasma", validado=True)


class TestExcluir:

    def test_autor_exclui_pendente(self, container, justificar, atraso):
        justificar()

        container.excluir_justificativa_service().execute(atraso.id, "ti-1")

        assert container.justificativa_repository().get_by_atraso(atraso.id) is None
        assert atraso.status == AtrasoStatus.UNJUSTIFIED

    def test_nao_exclui_decidida(self, container, justificar, atraso):
        justificativa = justificar()
        _decidir(container, justificativa.id, validado=True)

        with pytest.raises(BusinessRuleViolationError):
            container.excluir_justificativa_service().execute(atraso.id, "ti-1")

    def test_outro_usuario_nao_exclui(self, container, justificar, atraso):
        justificar()
        with pytest.raises(AuthorizationError):
            container.excluir_justificativa_service().execute(atraso.id, "ti-2")

    def test_excluir_atraso_remove_justificativa(self, container, justificar, atraso, uow):
        justificar()

        container.excluir_atraso_service(uow=uow).execute(atraso.id)

        assert container.atraso_repository().get_by_id(atraso.id) is None
        assert container.justificativa_repository().get_by_atraso(atraso.id) is None
        assert uow.eventos_do_tipo("AtrasoRemovidoEvent")

    def test_excluir_atraso_inexistente(self, container):
        with pytest.raises(EntityNotFoundError):
            container.excluir_atraso_service().execute("fantasma")


class TestConsultas:

    def test_obter_por_ticket(self, container, atraso, ticket):
        consulta = container.consulta_atrasos_service()
        assert consulta.obter_por_ticket(ticket.id).id == atraso.id

        with pytest.raises(EntityNotFoundError):
            consulta.obter_por_ticket("outro")

    def test_listar_por_status(self, container, atraso):
        consulta = container.consulta_atrasos_service()

        assert [a.id for a in consulta.listar_nao_justificados()] == [atraso.id]
        assert consulta.listar_por_status("pending") == []
        with pytest.raises(ValidationError):
            consulta.listar_por_status("atrasado")

    @pytest.mark.usefixtures("atraso")
    def test_estatisticas(self, container):
        estatisticas = container.consulta_atrasos_service().estatisticas_status()

        assert estatisticas.por_status["unjustified"] == 1
        assert estatisticas.por_status["justified"] == 0
        assert estatisticas.total == 1

    @pytest.mark.parametrize("escopo,visivel", [
        (EscopoConsulta("ti-1", filial_id="f-loja", permissoes=frozenset({"delays.view_own"})), True),
        (EscopoConsulta("ti-2", filial_id="f-loja", permissoes=frozenset({"delays.view_own"})), False),
        (EscopoConsulta("ti-2", departamento_id="d-ti", filial_id="f-loja",
                        permissoes=frozenset({"delays.view_department"})), True),
        (EscopoConsulta("infra-1", departamento_id="d-infra", filial_id="f-loja",
                        permissoes=frozenset({"delays.view_department"})), False),
        (EscopoConsulta("ti-2", filial_id="f-ti", permissoes=frozenset({"delays.view_all"})), False),
        (EscopoConsulta("ti-2", permissoes=frozenset({"delays.view_all", "reports.view_global"})), True),
        (EscopoConsulta("ti-2", permissoes=frozenset({"delays.view_all", "reports.view_global"}),
                        filtro_usuario_id="ti-2"), False),
    ])
    @pytest.mark.usefixtures("atraso")
    def test_listar_com_escopo(self, container, escopo, visivel):
        atrasos = container.consulta_atrasos_service().listar(escopo)
        assert bool(atrasos) is visivel

    def test_consulta_justificativas(self, container, justificar, atraso, ticket):
        justificativa = justificar()
        consulta = container.consulta_justificativas_service()

        assert consulta.obter_por_ticket(ticket.id).id == justificativa.id
        assert [j.id for j in consulta.listar_pendentes()] == [justificativa.id]
        assert consulta.listar_validadas() == []
        assert [j.id for j in consulta.listar_por_usuario("ti-1")] == [justificativa.id]

        _decidir(container, justificativa.id, validado=False)
        assert [j.id for j in consulta.listar_rejeitadas()] == [justificativa.id]
        assert len(consulta.historico()) == 1
