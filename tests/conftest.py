"""
Configurações globais do Pytest para o ITSM Service Core.

Este arquivo é carregado automaticamente pelo pytest e:
- configura o Django (SQLite em memória) antes da coleta
- registra os markers slow e integration (--run-integration)
- fornece as fixtures de banco (organizacao, ticket_factory, django_container)
"""

import uuid
from datetime import datetime, timedelta

import pytest


def pytest_configure(config):
    """Configura Django e markers antes dos testes."""
    import django
    from django.conf import settings

    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )

    if not settings.configured:
        settings.configure(
            DEBUG=True,
            SECRET_KEY='test-secret-key',
            DATABASES={
                'default': {
                    'ENGINE': 'django.db.backends.sqlite3',
                    'NAME': ':memory:',
                }
            },
            INSTALLED_APPS=[
                'django.contrib.contenttypes',
                'src.adapters.django_app.organizacao',
                'src.adapters.django_app.tickets',
                'src.adapters.django_app.atrasos',
                'src.adapters.django_app.apontamentos',
                'src.adapters.django_app.sla',
                'src.adapters.django_app.notificacoes',
            ],
            DEFAULT_AUTO_FIELD='django.db.models.BigAutoField',
            USE_TZ=False,
            TIME_ZONE='America/Sao_Paulo',
            DELAY_SYNC_COOLDOWN_SECONDS=120,
            DELAY_SYNC_PAGE_SIZE=500,
            DELAY_SYNC_THREADED=False,
            HISTORY_QUEUE_SIZE=1000,
            TICKET_SOURCE_SENTINEL='kronos',
            NOTIFICATIONS_ASYNC=False,
            EVENT_PUBLISHER_MODE='memory',
        )
        django.setup()


def pytest_addoption(parser):
    """Adiciona opções de linha de comando."""
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="run integration tests",
    )


def pytest_collection_modifyitems(config, items):
    """Pula testes de integração sem --run-integration."""
    if config.getoption("--run-integration"):
        return

    skip_integration = pytest.mark.skip(reason="need --run-integration option to run")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


# =============================================================================
# Fixtures Django
# =============================================================================
#
# Compartilhadas pelos testes de adapters e de integração. Os imports ficam
# dentro das fixtures: este arquivo é carregado antes do settings.configure.

@pytest.fixture
def organizacao(db):
    """
    Mesma organização de referência dos testes do Core, gravada no banco.

    - f-ti (fornecedora): d-ti (ti-1, ti-2, ti-off inativo), d-infra (infra-1)
    - f-loja: d-loja (cli-1, cli-2 sem filial direta)
    """
    from src.adapters.django_app.organizacao.repositories import (
        DjangoCategoriaRepository,
        DjangoDepartamentoRepository,
        DjangoFilialRepository,
        DjangoUsuarioRepository,
    )
    from src.core.organizacao.entities import (
        CategoriaTicketEntity,
        DepartamentoEntity,
        FilialEntity,
        UsuarioEntity,
    )

    filiais = DjangoFilialRepository()
    filiais.save(FilialEntity(id="f-ti", nome="Matriz TI", eh_fornecedor_software=True))
    filiais.save(FilialEntity(id="f-loja", nome="Loja Centro"))

    departamentos = DjangoDepartamentoRepository()
    departamentos.save(DepartamentoEntity(id="d-ti", nome="TI", filial_id="f-ti", eh_ti=True))
    departamentos.save(DepartamentoEntity(id="d-infra", nome="Infra", filial_id="f-ti", eh_ti=True))
    departamentos.save(DepartamentoEntity(id="d-loja", nome="Vendas", filial_id="f-loja"))

    usuarios = DjangoUsuarioRepository()
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
        id="infra-1", username="igor", nome="Igor", filial_id="f-ti", departamento_id="d-infra",
    ))
    usuarios.save(UsuarioEntity(
        id="cli-1", username="carla", nome="Carla", sobrenome="Souza",
        filial_id="f-loja", departamento_id="d-loja",
    ))
    usuarios.save(UsuarioEntity(id="cli-2", username="davi", departamento_id="d-loja"))

    categorias = DjangoCategoriaRepository()
    categorias.save(CategoriaTicketEntity(id="cat-1", slug="incident", nome="Incidente"))
    categorias.save(CategoriaTicketEntity(id="cat-2", slug="legacy", nome="Legado", ativo=False))


@pytest.fixture
def ticket_factory(db):
    """Factory para criar TicketModel para testes."""
    from src.adapters.django_app.tickets.models import TicketModel

    sequencia = iter(range(1, 10000))

    def create_ticket(**kwargs):
        numero = next(sequencia)
        defaults = {
            'id': str(uuid.uuid4()),
            'codigo': f"TKT-2025-{numero:04d}",
            'titulo': 'Ticket de Teste',
            'descricao': 'Descrição do ticket de teste',
            'status': 'ouvert',
            'prioridade': 'medium',
            'origem': 'kronos',
            'criador_id': 'cli-1',
            'filial_id': 'f-loja',
            'criado_em': datetime(2025, 3, 10, 9, 0) + timedelta(minutes=numero),
        }
        defaults.update(kwargs)
        return TicketModel.objects.create(**defaults)

    return create_ticket


@pytest.fixture
def django_container(organizacao):
    """
    Container de produção (repositórios Django, notificação síncrona).

    O histórico usa o repositório em memória: o escritor persiste em
    uma thread própria, fora da transação do teste.
    """
    from src.config import container as di
    from src.core.tickets.ports import InMemoryHistoricoRepository

    c = di.Container()
    c.config.from_dict({'events': {'publisher_mode': 'memory'}})
    c.historico_repository.override(InMemoryHistoricoRepository())
    yield c
    c.historico().fechar()
