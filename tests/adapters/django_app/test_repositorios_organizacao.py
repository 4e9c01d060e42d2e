"""
Testes de Integração - Repositórios Django da Organização.

O DiretorioOrganizacional é exercitado sobre o banco com a
organização de referência (fixture `organizacao`).
"""

import pytest

from src.adapters.django_app.organizacao.models import UsuarioModel
from src.adapters.django_app.organizacao.repositories import (
    DjangoCategoriaRepository,
    DjangoDepartamentoRepository,
    DjangoFilialRepository,
    DjangoUsuarioRepository,
)
from src.core.organizacao.diretorio import DiretorioOrganizacional
from src.core.organizacao.entities import FilialEntity, UsuarioEntity
from src.core.shared.exceptions import ValidationError

pytestmark = pytest.mark.django_db


@pytest.fixture
def diretorio(organizacao):
    return DiretorioOrganizacional(
        usuario_repo=DjangoUsuarioRepository(),
        departamento_repo=DjangoDepartamentoRepository(),
        filial_repo=DjangoFilialRepository(),
        categoria_repo=DjangoCategoriaRepository(),
    )


class TestRepositorios:

    def test_usuario_round_trip(self, organizacao):
        usuario = DjangoUsuarioRepository().get_by_id("ti-1")

        assert usuario.username == "ana"
        assert usuario.nome_exibicao == "Ana Lima"
        assert usuario.departamento_id == "d-ti"
        assert usuario.papel_filial_id is None

    def test_save_atualiza_usuario(self, organizacao):
        repo = DjangoUsuarioRepository()
        repo.save(UsuarioEntity(id="cli-2", username="davi", papel_filial_id="f-loja", departamento_id="d-loja"))

        assert UsuarioModel.objects.filter(username="davi").count() == 1
        assert repo.get_by_id("cli-2").papel_filial_id == "f-loja"

    def test_usuarios_ativos_por_departamentos(self, organizacao):
        repo = DjangoUsuarioRepository()

        usuarios = repo.list_ativos_por_departamentos(["d-ti", "d-infra"])

        assert [u.id for u in usuarios] == ["ti-1", "ti-2", "infra-1"]
        assert repo.list_ativos_por_departamentos([]) == []

    def test_departamentos_ti_da_filial(self, organizacao):
        repo = DjangoDepartamentoRepository()

        assert [d.id for d in repo.list_ti_ativos_por_filial("f-ti")] == ["d-infra", "d-ti"]
        assert repo.list_ti_ativos_por_filial("f-loja") == []

    def test_filial_fornecedora(self, organizacao):
        repo = DjangoFilialRepository()
        assert repo.get_fornecedor_software().id == "f-ti"

        repo.save(FilialEntity(id="f-ti", nome="Matriz TI"))
        assert repo.get_fornecedor_software() is None

    def test_categoria_por_slug(self, organizacao):
        repo = DjangoCategoriaRepository()

        assert repo.get_by_slug("incident").nome == "Incidente"
        assert not repo.get_by_slug("legacy").ativo
        assert repo.get_by_slug("") is None
        assert repo.get_by_slug("inexistente") is None


class TestDiretorioSobreBanco:

    def test_grupo_ti_fornecedor(self, diretorio):
        assert sorted(diretorio.usuarios_ti_fornecedor()) == ["infra-1", "ti-1", "ti-2"]

    @pytest.mark.parametrize("usuario_id,esperado", [
        ("ti-2", True), ("cli-1", False), ("fantasma", False),
    ])
    def test_eh_ti_fornecedor(self, diretorio, usuario_id, esperado):
        assert diretorio.eh_ti_fornecedor(usuario_id) is esperado

    def test_resolver_filial_pelo_departamento(self, diretorio):
        assert diretorio.resolver_filial(diretorio.obter_usuario("cli-2")) == "f-loja"

    def test_categoria_inativa(self, diretorio):
        with pytest.raises(ValidationError):
            diretorio.validar_categoria("legacy")
