"""
Testes - Container de Dependency Injection.

Coverage:
- TestingContainer: ports em memória, singletons e factories
- config_from_settings / get_container / reset_container
"""

from datetime import timedelta

import pytest

from src.adapters.django_app.shared.unit_of_work import InMemoryUnitOfWork
from src.config import container as di
from src.core.atrasos.ports import InMemoryAtrasoRepository
from src.core.notificacoes.ports import InMemoryNotificacaoService
from src.core.tickets.ports import InMemoryTicketRepository


@pytest.fixture
def testing():
    container = di.TestingContainer()
    yield container
    container.historico().fechar()


class TestTestingContainer:

    def test_ports_em_memoria(self, testing):
        assert isinstance(testing.ticket_repository(), InMemoryTicketRepository)
        assert isinstance(testing.atraso_repository(), InMemoryAtrasoRepository)
        assert isinstance(testing.notificacao_service(), InMemoryNotificacaoService)

    def test_repositorios_sao_singletons(self, testing):
        assert testing.ticket_repository() is testing.ticket_repository()

    def test_unit_of_work_por_operacao(self, testing):
        assert testing.unit_of_work() is not testing.unit_of_work()

    def test_servicos_compartilham_repositorios(self, testing):
        service = testing.criar_ticket_service()

        assert service.ticket_repo is testing.ticket_repository()
        assert testing.atraso_repository().ticket_repo is testing.ticket_repository()
        assert testing.reconciliador().atraso_repo is testing.atraso_repository()

    def test_agendador_usa_configuracao(self, testing):
        agendador = testing.agendador()

        assert agendador.cooldown == timedelta(seconds=120)
        assert agendador.tamanho_pagina == 500
        assert not agendador.assincrono

    def test_agendador_cria_unit_of_work_por_ticket(self, testing):
        uow_factory = testing.agendador().uow_factory

        assert isinstance(uow_factory(), InMemoryUnitOfWork)
        assert uow_factory() is not uow_factory()

    def test_atraso_repository_remove_justificativa_em_cascata(self, testing):
        assert testing.atraso_repository().justificativa_repo is testing.justificativa_repository()

    def test_override_de_configuracao(self):
        container = di.TestingContainer()
        container.config.from_dict({'delay_sync': {'cooldown_seconds': 5, 'page_size': 10}})
        try:
            assert container.agendador().cooldown == timedelta(seconds=5)
            assert container.agendador().tamanho_pagina == 10
        finally:
            container.historico().fechar()

    def test_origem_sentinela(self, testing):
        assert testing.criar_ticket_service().origem_sentinela == "kronos"

    def test_instancias_independentes(self):
        um, outro = di.TestingContainer(), di.TestingContainer()
        try:
            assert um.ticket_repository() is not outro.ticket_repository()
        finally:
            um.historico().fechar()
            outro.historico().fechar()


class TestContainerGlobal:

    @pytest.fixture(autouse=True)
    def limpar(self):
        di.reset_container()
        yield
        di.reset_container()

    def test_config_from_settings(self, settings):
        settings.DELAY_SYNC_COOLDOWN_SECONDS = 30
        settings.NOTIFICATIONS_ASYNC = True

        config = di.config_from_settings()

        assert config['delay_sync']['cooldown_seconds'] == 30
        assert config['delay_sync']['threaded'] is False
        assert config['notifications']['mode'] == 'celery'
        assert config['tickets']['source_sentinel'] == 'kronos'
        assert config['events']['publisher_mode'] == 'memory'

    def test_get_container_reutiliza_instancia(self):
        container = di.get_container()

        assert di.get_container() is container
        assert container.config.history.queue_size() == 1000

    def test_reset_container(self):
        container = di.get_container()
        di.reset_container()

        assert di.get_container() is not container
