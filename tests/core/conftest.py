"""
Fixtures compartilhadas pelos testes do Core.

Monta um TestingContainer (ports em memória) com uma organização
mínima:

- f-ti: filial fornecedora de software
    - d-ti (TI): ti-1 (Ana Lima), ti-2 (Bruno Costa), ti-off (inativo)
    - d-infra (TI): infra-1
- f-loja: filial comum
    - d-loja (Vendas): cli-1 (Carla Souza), cli-2 (sem filial direta)
- Categorias: incident (ativa), legacy (inativa)
"""

import pytest

from src.config import container as di
from src.core.organizacao.entities import (
    CategoriaTicketEntity,
    DepartamentoEntity,
    FilialEntity,
    UsuarioEntity,
)


def _semear_organizacao(container) -> None:
    filiais = container.filial_repository()
    filiais.save(FilialEntity(id="f-ti", nome="Matriz TI", eh_fornecedor_software=True))
    filiais.save(FilialEntity(id="f-loja", nome="Loja Centro"))

    departamentos = container.departamento_repository()
    departamentos.save(DepartamentoEntity(id="d-ti", nome="TI", filial_id="f-ti", eh_ti=True))
    departamentos.save(DepartamentoEntity(id="d-infra", nome="Infra", filial_id="f-ti", eh_ti=True))
    departamentos.save(DepartamentoEntity(id="d-loja", nome="Vendas", filial_id="f-loja"))

    usuarios = container.usuario_repository()
    usuarios.save(UsuarioEntity(
        id="ti-1", username="ana", nome="Ana", sobrenome="Lima",
        filial_id="f-ti", departamento_id="d-ti",
    ))
    usuarios.save(UsuarioEntity(
        id="ti-2", username="bruno", nome="Bruno", sobrenome="Costa",
        filial_id="f-ti", departamento_id="d-ti",
    ))
    usuarios.save(UsuarioEntity(
        id="ti-off", username="antigo", filial_id="f-ti", departamento_id="d-ti", ativo=False,
    ))
    usuarios.save(UsuarioEntity(
        id="infra-1", username="igor", nome="Igor",
        filial_id="f-ti", departamento_id="d-infra",
    ))
    usuarios.save(UsuarioEntity(
        id="cli-1", username="carla", nome="Carla", sobrenome="Souza",
        filial_id="f-loja", departamento_id="d-loja",
    ))
    usuarios.save(UsuarioEntity(id="cli-2", username="davi", departamento_id="d-loja"))

    categorias = container.categoria_repository()
    categorias.save(CategoriaTicketEntity(slug="incident", nome="Incidente"))
    categorias.save(CategoriaTicketEntity(slug="legacy", nome="Legado", ativo=False))


@pytest.fixture
def container():
    """TestingContainer com a organização de referência."""
    c = di.TestingContainer()
    _semear_organizacao(c)
    yield c
    c.historico().fechar()


@pytest.fixture
def diretorio(container):
    return container.diretorio()


@pytest.fixture
def notificacoes(container):
    """Sink de notificações em memória."""
    return container.notificacao_service()


@pytest.fixture
def historico(container):
    """Lê o histórico persistido de um ticket (após flush do escritor)."""
    def ler(ticket_id):
        container.historico().flush()
        return container.historico_repository().listar_por_ticket(ticket_id)
    return ler
