"""
Testes Unitários - Política de acesso, exceções e eventos de domínio.
"""

from dataclasses import dataclass

import pytest

from src.core.shared.events import DomainEvent
from src.core.shared.exceptions import (
    AuthorizationError,
    BusinessRuleViolationError,
    CodeGenerationError,
    DomainException,
    EntityNotFoundError,
    RepositoryError,
    ValidationError,
)
from src.core.shared.politicas import Acao, Ator, PoliticaAcesso


@dataclass
class Recurso:
    usuario_id: str


class TestPoliticaAcesso:

    @pytest.fixture
    def politica(self):
        return PoliticaAcesso()

    @pytest.mark.parametrize("acao", [
        Acao.JUSTIFICAR_ATRASO,
        Acao.EDITAR_JUSTIFICATIVA,
        Acao.EXCLUIR_JUSTIFICATIVA,
        Acao.EDITAR_COMENTARIO,
        Acao.EXCLUIR_COMENTARIO,
    ])
    def test_somente_o_dono(self, politica, acao):
        recurso = Recurso("u1")

        assert politica.permite(Ator("u1"), recurso, acao)
        assert not politica.permite(Ator("u2"), recurso, acao)
        assert not politica.permite(Ator("u1"), None, acao)

    def test_permissoes_nao_substituem_autoria(self, politica):
        ator = Ator("u2", permissoes=frozenset({"tickets.view_internal_comments"}), departamento_eh_ti=True)
        assert not politica.permite(ator, Recurso("u1"), Acao.EDITAR_COMENTARIO)

    def test_ver_interno(self, politica):
        assert politica.permite(Ator("u1", departamento_eh_ti=True), None, Acao.VER_COMENTARIO_INTERNO)
        assert not politica.permite(Ator("u1"), None, Acao.VER_COMENTARIO_INTERNO)

    def test_exigir(self, politica):
        politica.exigir(Ator("u1"), Recurso("u1"), Acao.JUSTIFICAR_ATRASO)

        with pytest.raises(AuthorizationError) as exc_info:
            politica.exigir(Ator("u2"), Recurso("u1"), Acao.JUSTIFICAR_ATRASO)

        assert exc_info.value.rule == "atraso.justificar"
        assert exc_info.value.code == "AUTHORIZATION_FAILED"


class TestExcecoes:

    def test_validation_error(self):
        erro = ValidationError("Título é obrigatório", field="titulo")

        assert erro.code == "VALIDATION_ERROR_TITULO"
        assert str(erro) == "[VALIDATION_ERROR_TITULO] Título é obrigatório"
        assert erro.to_dict() == {
            "error": "VALIDATION_ERROR_TITULO",
            "message": "Título é obrigatório",
            "field": "titulo",
        }

    def test_validation_error_sem_campo(self):
        assert ValidationError("x").code == "VALIDATION_ERROR"

    def test_entity_not_found(self):
        erro = EntityNotFoundError("não achei", entity_type="Ticket", entity_id="t1")
        assert erro.to_dict()["entity_id"] == "t1"
        assert erro.code == "ENTITY_NOT_FOUND"

    def test_regra_no_dict(self):
        assert BusinessRuleViolationError("x", rule="r").to_dict()["rule"] == "r"
        assert AuthorizationError("x", rule="a").to_dict()["rule"] == "a"

    def test_hierarquia(self):
        erro = CodeGenerationError("esgotado")

        assert isinstance(erro, RepositoryError)
        assert isinstance(erro, DomainException)
        assert erro.code == "CODE_GENERATION_FAILED"


@dataclass
class ExemploEvent(DomainEvent):
    valor: int = 0

    @property
    def aggregate_type(self) -> str:
        return "Exemplo"


class TestDomainEvent:

    def test_aggregate_id_obrigatorio(self):
        with pytest.raises(ValueError):
            ExemploEvent()

    def test_to_dict(self):
        evento = ExemploEvent(aggregate_id="a1", valor=3)
        dados = evento.to_dict()

        assert dados["event_type"] == "ExemploEvent"
        assert dados["aggregate_type"] == "Exemplo"
        assert dados["data"] == {"valor": 3}
        assert evento.event_id != ExemploEvent(aggregate_id="a1").event_id
