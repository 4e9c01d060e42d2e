"""
Event Publishers - Publicadores de Eventos de Domínio.

Responsável por publicar eventos para handlers assíncronos.
Implementações de src.core.shared.interfaces.EventPublisher:
- LoggingEventPublisher: Apenas loga (desenvolvimento)
- CeleryEventPublisher: Publica via Celery (produção)
- InMemoryEventPublisher: Para testes
- CompositeEventPublisher: Vários destinos

O DjangoUnitOfWork chama o publisher somente após o commit.
"""

from typing import Callable, Dict, List, Optional
import json
import logging

from src.core.shared.events import DomainEvent
from src.core.shared.interfaces import EventPublisher

logger = logging.getLogger(__name__)


class LoggingEventPublisher(EventPublisher):
    """
    Publisher que apenas loga eventos.

    Usado em desenvolvimento para visualizar eventos
    sem necessidade de infraestrutura de mensageria.
    """

    def __init__(self, log_level: int = logging.INFO):
        self._log_level = log_level

    def publish(self, event: DomainEvent) -> None:
        logger.log(
            self._log_level,
            f"[EVENT] {event.event_type} | "
            f"aggregate={event.aggregate_id} | "
            f"data={json.dumps(event._get_event_data(), default=str)}"
        )


class CeleryEventPublisher(EventPublisher):
    """
    Publisher que envia eventos para Celery.

    Falhas de broker são logadas e não quebram o fluxo principal:
    a transação já foi confirmada quando o evento é publicado.
    """

    def __init__(self, also_log: bool = True):
        self._also_log = also_log

    def publish(self, event: DomainEvent) -> None:
        if self._also_log:
            logger.info(
                f"[EVENT->CELERY] {event.event_type} | "
                f"aggregate={event.aggregate_id}"
            )

        try:
            from src.adapters.django_app.events.handlers import dispatch_domain_event
            dispatch_domain_event.delay(event.event_type, event.to_dict())
        except Exception as e:
            logger.error(f"Falha ao publicar evento no Celery: {e}", exc_info=True)


class InMemoryEventPublisher(EventPublisher):
    """
    Publisher em memória para testes.

    Armazena eventos publicados para verificação em testes.
    """

    def __init__(self):
        self._published_events: List[DomainEvent] = []
        self._handlers: Dict[str, List[Callable[[DomainEvent], None]]] = {}

    def publish(self, event: DomainEvent) -> None:
        self._published_events.append(event)
        for handler in self._handlers.get(event.event_type, []):
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Erro em handler de teste: {e}")

    @property
    def published_events(self) -> List[DomainEvent]:
        return self._published_events.copy()

    def get_events_by_type(self, event_type: str) -> List[DomainEvent]:
        return [e for e in self._published_events if e.event_type == event_type]

    def register_handler(self, event_type: str, handler: Callable[[DomainEvent], None]) -> None:
        self._handlers.setdefault(event_type, []).append(handler)

    def clear(self) -> None:
        self._published_events.clear()


class CompositeEventPublisher(EventPublisher):
    """
    Publisher que delega para múltiplos publishers.

    A falha de um destino não impede os demais.
    """

    def __init__(self, publishers: Optional[List[EventPublisher]] = None):
        self._publishers = list(publishers or [])

    def add_publisher(self, publisher: EventPublisher) -> None:
        self._publishers.append(publisher)

    def publish(self, event: DomainEvent) -> None:
        for publisher in self._publishers:
            try:
                publisher.publish(event)
            except Exception as e:
                logger.error(f"Erro ao publicar em {publisher.__class__.__name__}: {e}")


def get_event_publisher(mode: str = "logging") -> EventPublisher:
    """
    Factory para obter publisher apropriado.

    Args:
        mode: "celery", "memory" ou "logging" (settings.EVENT_PUBLISHER_MODE)
    """
    if mode == "celery":
        return CeleryEventPublisher()
    if mode == "memory":
        return InMemoryEventPublisher()
    return LoggingEventPublisher()
