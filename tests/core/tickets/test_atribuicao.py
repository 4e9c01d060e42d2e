"""
Testes Unitários - Atribuição de tickets.

Coverage:
- normalizar_responsaveis: deduplicação e regras do líder
- responsavel_principal / montar_vinculos
- ValidadorAtribuicao: restrição de departamento da TI fornecedora
"""

import pytest

from src.core.tickets.atribuicao import (
    REGRA_DEPARTAMENTO,
    ValidadorAtribuicao,
    montar_vinculos,
    normalizar_responsaveis,
    responsavel_principal,
)
from src.core.shared.exceptions import (
    AuthorizationError,
    EntityNotFoundError,
    ValidationError,
)


class TestNormalizarResponsaveis:

    def test_deduplica_preservando_ordem(self):
        ids, lider = normalizar_responsaveis(["b", "a", "b", "", "a"])
        assert ids == ["b", "a"]
        assert lider is None

    def test_lider_na_lista(self):
        ids, lider = normalizar_responsaveis(["a", "b"], "b")
        assert ids == ["a", "b"]
        assert lider == "b"

    def test_lider_com_lista_vazia(self):
        """Líder sem responsáveis vira o único responsável."""
        assert normalizar_responsaveis([], "a") == (["a"], "a")

    def test_lider_fora_da_lista(self):
        with pytest.raises(ValidationError) as exc_info:
            normalizar_responsaveis(["a", "b"], "c")
        assert exc_info.value.field == "lider_id"

    def test_lider_vazio(self):
        with pytest.raises(ValidationError):
            normalizar_responsaveis(["a"], "")

    def test_sem_responsaveis(self):
        assert normalizar_responsaveis(None) == ([], None)


class TestResponsavelPrincipal:

    def test_lider_tem_precedencia(self):
        assert responsavel_principal(["a", "b"], "b") == "b"

    def test_primeiro_da_lista(self):
        assert responsavel_principal(["a", "b"], None) == "a"

    def test_nenhum(self):
        assert responsavel_principal([], None) is None

    def test_montar_vinculos_marca_lider(self):
        vinculos = montar_vinculos("t1", ["a", "b"], "b")

        assert [(v.usuario_id, v.eh_lider) for v in vinculos] == [("a", False), ("b", True)]
        assert all(v.ticket_id == "t1" for v in vinculos)


class TestValidadorAtribuicao:
    """Usa o diretório da organização de referência (tests/core/conftest.py)."""

    @pytest.fixture
    def validador(self, diretorio):
        return ValidadorAtribuicao(diretorio)

    def test_ti_fornecedor_mesmo_departamento(self, validador):
        validador.validar(["ti-1", "ti-2"], atribuidor_id="ti-1")

    def test_ti_fornecedor_outro_departamento(self, validador):
        """TI fornecedora não atribui fora do próprio departamento."""
        with pytest.raises(AuthorizationError) as exc_info:
            validador.validar(["ti-2", "infra-1"], atribuidor_id="ti-1")

        assert exc_info.value.rule == REGRA_DEPARTAMENTO
        assert "infra-1" in exc_info.value.message

    def test_ti_fornecedor_responsavel_de_outra_filial(self, validador):
        with pytest.raises(AuthorizationError):
            validador.validar(["cli-1"], atribuidor_id="ti-1")

    def test_atribuidor_comum_sem_restricao_de_departamento(self, validador):
        validador.validar(["ti-1", "infra-1"], atribuidor_id="cli-1")

    def test_responsavel_inexistente(self, validador):
        with pytest.raises(EntityNotFoundError) as exc_info:
            validador.validar(["fantasma"], atribuidor_id="cli-1")
        assert exc_info.value.entity_id == "fantasma"

    def test_responsavel_inexistente_para_ti(self, validador):
        with pytest.raises(EntityNotFoundError):
            validador.validar(["fantasma"], atribuidor_id="ti-1")
