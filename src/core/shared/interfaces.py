"""
Interfaces (Ports) transversais do Core.

- UnitOfWork: delimita as escritas principais de um use case e segura
  os eventos até o commit
- EventPublisher: entrega eventos de domínio (Celery, logging, memória)

Repositórios ficam no ports.py de cada domínio.
"""

from abc import ABC, abstractmethod
from typing import List

from .events import DomainEvent


class UnitOfWork(ABC):
    """
    Unit of Work - escritas atômicas + eventos pós-commit.

    Uso nos use cases:
        with uow:
            apontamento_repo.save(apontamento)
            ticket_repo.save(ticket)
            for evento in reconciliador.reconciliar(ticket, ator_id):
                uow.publish_event(evento)
        # commit ao sair sem erro; rollback (e eventos descartados) se exceção

    Histórico, notificações e SLA são executados pelos use cases depois
    do bloco `with` e não participam da transação.
    """

    def __init__(self):
        self._events: List[DomainEvent] = []

    def __enter__(self) -> "UnitOfWork":
        self._begin_transaction()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if exc_type is not None:
            self.rollback()
        else:
            self.commit()
        return False

    @abstractmethod
    def _begin_transaction(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def commit(self) -> None:
        """Confirma as escritas e então publica os eventos enfileirados."""
        raise NotImplementedError

    @abstractmethod
    def rollback(self) -> None:
        """Desfaz as escritas e descarta os eventos."""
        raise NotImplementedError

    def publish_event(self, event: DomainEvent) -> None:
        """Enfileira evento; só é publicado se a transação for confirmada."""
        self._events.append(event)

    def collect_events(self) -> List[DomainEvent]:
        return list(self._events)

    def clear_events(self) -> None:
        self._events.clear()


class EventPublisher(ABC):
    """
    Destino dos eventos confirmados.

    Example:
        class CeleryEventPublisher(EventPublisher):
            def publish(self, event):
                dispatch_domain_event.delay(event.event_type, event.to_dict())
    """

    @abstractmethod
    def publish(self, event: DomainEvent) -> None:
        raise NotImplementedError

    def publish_batch(self, events: List[DomainEvent]) -> None:
        """Publica em sequência, na ordem recebida."""
        for event in events:
            self.publish(event)
