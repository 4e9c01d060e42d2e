"""
Testes de Integração - DjangoUnitOfWork.

Verifica persistência atômica e publicação de eventos somente após o
commit (callbacks on_commit capturados pelo pytest-django).
"""

import logging

import pytest

from src.adapters.django_app.events.publishers import InMemoryEventPublisher
from src.adapters.django_app.shared.unit_of_work import DjangoUnitOfWork
from src.adapters.django_app.tickets.models import TicketModel
from src.adapters.django_app.tickets.repositories import DjangoTicketRepository
from src.core.shared.exceptions import ValidationError
from src.core.shared.interfaces import EventPublisher
from src.core.tickets.entities import TicketEntity
from src.core.tickets.events import TicketCriadoEvent, TicketExcluidoEvent

pytestmark = pytest.mark.django_db


class PublisherQuebrado(EventPublisher):

    def publish(self, event):
        raise ConnectionError("broker fora do ar")


@pytest.fixture
def publisher():
    return InMemoryEventPublisher()


@pytest.fixture
def uow(publisher):
    return DjangoUnitOfWork(event_publisher=publisher)


def _ticket(codigo="TKT-2025-0001"):
    return TicketEntity.criar(codigo=codigo, titulo="Sem rede", descricao="Cabo rompido", criador_id="cli-1")


class TestDjangoUnitOfWork:

    def test_commit_persiste_e_publica(self, uow, publisher, django_capture_on_commit_callbacks):
        ticket = _ticket()

        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            with uow:
                DjangoTicketRepository().save(ticket)
                uow.publish_event(TicketCriadoEvent(aggregate_id=ticket.id, codigo=ticket.codigo))
                assert uow.em_transacao
                assert publisher.published_events == []

        assert len(callbacks) == 1
        assert uow.is_committed
        assert not uow.em_transacao
        assert TicketModel.objects.filter(id=ticket.id).exists()
        assert [e.event_type for e in publisher.published_events] == ["TicketCriadoEvent"]

    def test_excecao_desfaz_e_descarta_eventos(self, uow, publisher, django_capture_on_commit_callbacks):
        ticket = _ticket()

        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            with pytest.raises(ValidationError):
                with uow:
                    DjangoTicketRepository().save(ticket)
                    uow.publish_event(TicketCriadoEvent(aggregate_id=ticket.id))
                    raise ValidationError("falhou depois de salvar")

        assert callbacks == []
        assert uow.is_rolled_back
        assert not uow.is_committed
        assert not TicketModel.objects.filter(id=ticket.id).exists()
        assert uow.collect_events() == []
        assert publisher.published_events == []

    def test_aninhamento_publica_no_bloco_externo(self, uow, publisher, django_capture_on_commit_callbacks):
        externo, interno = _ticket("TKT-2025-0001"), _ticket("TKT-2025-0002")
        repo = DjangoTicketRepository()

        with django_capture_on_commit_callbacks(execute=True):
            with uow:
                repo.save(externo)
                uow.publish_event(TicketCriadoEvent(aggregate_id=externo.id))
                with uow:
                    repo.save(interno)
                    uow.publish_event(TicketCriadoEvent(aggregate_id=interno.id))
                assert not uow.is_committed
                assert publisher.published_events == []

        assert [e.aggregate_id for e in publisher.published_events] == [externo.id, interno.id]
        assert TicketModel.objects.count() == 2

    def test_rollback_interno_preserva_bloco_externo(self, uow, publisher, django_capture_on_commit_callbacks):
        externo, interno = _ticket("TKT-2025-0001"), _ticket("TKT-2025-0002")
        repo = DjangoTicketRepository()

        with django_capture_on_commit_callbacks(execute=True):
            with uow:
                repo.save(externo)
                with pytest.raises(ValidationError):
                    with uow:
                        repo.save(interno)
                        raise ValidationError("interno")

        assert list(TicketModel.objects.values_list('id', flat=True)) == [externo.id]

    def test_falha_do_publisher_nao_propaga(self, django_capture_on_commit_callbacks, caplog):
        uow = DjangoUnitOfWork(event_publisher=PublisherQuebrado())

        with caplog.at_level(logging.ERROR):
            with django_capture_on_commit_callbacks(execute=True):
                with uow:
                    uow.publish_event(TicketExcluidoEvent(aggregate_id="t1"))

        assert uow.is_committed
        assert "TicketExcluidoEvent" in caplog.text

    def test_commit_sem_transacao(self, uow):
        uow.commit()
        uow.rollback()

        assert not uow.is_committed
        assert not uow.is_rolled_back
