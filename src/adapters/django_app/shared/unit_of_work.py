"""
Unit of Work - Implementação Django.

Gerencia transações atômicas entre múltiplos repositórios,
garantindo consistência das escritas principais de uma operação.

Responsabilidades:
- Iniciar/finalizar transações (transaction.atomic)
- Commit/Rollback coordenado
- Publicar eventos após commit bem-sucedido

Aninhamento:
    Cada `with uow:` abre um novo bloco atomic. Dentro de uma transação
    externa o bloco vira um savepoint, e os eventos só são publicados
    quando a transação mais externa é confirmada (on_commit).
"""

from typing import List, Optional
import logging

from django.db import DatabaseError, transaction

from src.core.shared.events import DomainEvent
from src.core.shared.exceptions import RepositoryError
from src.core.shared.interfaces import EventPublisher, UnitOfWork

logger = logging.getLogger(__name__)


class DjangoUnitOfWork(UnitOfWork):
    """
    Implementação Django do Unit of Work.

    Usa uma pilha de `transaction.atomic()` para suportar reentrada.
    Eventos são publicados apenas após commit bem-sucedido.

    Example:
        uow = DjangoUnitOfWork(event_publisher=CeleryEventPublisher())
        with uow:
            repo.save(entity1)
            repo.save(entity2)
            uow.publish_event(MyEvent(...))
        # Commit automático + eventos publicados

    Example com rollback:
        with uow:
            repo.save(entity)
            uow.publish_event(MyEvent(...))
            raise ValidationError("...")
        # Rollback automático, eventos descartados
    """

    def __init__(
        self,
        event_publisher: Optional[EventPublisher] = None,
        using: Optional[str] = None,
    ):
        """
        Args:
            event_publisher: Publicador de eventos (logging, Celery...)
            using: Alias do banco (default: "default")
        """
        super().__init__()
        self._event_publisher = event_publisher
        self._using = using
        self._atomics: List[transaction.Atomic] = []
        self._committed = False
        self._rolled_back = False

    def _begin_transaction(self) -> None:
        atomic = transaction.atomic(using=self._using)
        atomic.__enter__()
        self._atomics.append(atomic)
        self._committed = False
        self._rolled_back = False
        logger.debug(f"Transaction started (nível {len(self._atomics)})")

    def commit(self) -> None:
        """
        Confirma o bloco atual e agenda a publicação dos eventos.

        Raises:
            RepositoryError: Se o banco recusar o commit
        """
        if not self._atomics:
            logger.warning("Commit sem transação ativa")
            return

        atomic = self._atomics.pop()
        eventos = list(self._events) if not self._atomics else []
        if not self._atomics:
            self.clear_events()

        try:
            atomic.__exit__(None, None, None)
        except DatabaseError as e:
            logger.error(f"Commit failed: {e}")
            self._rolled_back = True
            self.clear_events()
            raise RepositoryError(f"Falha ao confirmar transação: {e}") from e

        self._committed = not self._atomics
        logger.debug("Transaction committed")

        if eventos:
            transaction.on_commit(
                lambda: self._publish_events(eventos), using=self._using
            )

    def rollback(self) -> None:
        """
        Desfaz o bloco atual e descarta eventos.

        Chamado automaticamente se exceção ocorrer dentro do contexto.
        """
        if not self._atomics:
            return

        atomic = self._atomics.pop()
        try:
            atomic.__exit__(RepositoryError, RepositoryError("rollback"), None)
            logger.debug("Transaction rolled back")
        except DatabaseError as e:
            logger.error(f"Rollback failed: {e}")
        finally:
            self._rolled_back = True
            if not self._atomics:
                self.clear_events()

    def _publish_events(self, eventos: List[DomainEvent]) -> None:
        """
        Publica eventos para handlers assíncronos.

        Falhas de publicação são logadas; a transação já foi confirmada.
        """
        for event in eventos:
            logger.info(
                f"Publishing event: {event.event_type} "
                f"for aggregate {event.aggregate_id}"
            )

            if self._event_publisher:
                try:
                    self._event_publisher.publish(event)
                except Exception as e:
                    logger.error(f"Failed to publish event {event.event_type}: {e}")

    @property
    def em_transacao(self) -> bool:
        return bool(self._atomics)

    @property
    def is_committed(self) -> bool:
        """Verifica se a transação mais externa foi comitada."""
        return self._committed

    @property
    def is_rolled_back(self) -> bool:
        """Verifica se a transação foi revertida."""
        return self._rolled_back


class InMemoryUnitOfWork(UnitOfWork):
    """
    Unit of Work em memória para testes.

    Não persiste nada - apenas simula comportamento
    para testes unitários sem banco de dados. Suporta reentrada:
    eventos de blocos internos só são "publicados" quando o bloco
    mais externo é confirmado.

    Example:
        uow = InMemoryUnitOfWork()
        with uow:
            # operações
            uow.publish_event(event)

        assert uow.committed
        assert len(uow.published_events) == 1
    """

    def __init__(self):
        super().__init__()
        self._nivel = 0
        self._committed = False
        self._rolled_back = False
        self._published_events: List[DomainEvent] = []

    def _begin_transaction(self) -> None:
        self._nivel += 1

    def commit(self) -> None:
        self._nivel = max(self._nivel - 1, 0)
        if self._nivel == 0:
            self._committed = True
            self._published_events.extend(self._events)
            self.clear_events()

    def rollback(self) -> None:
        self._nivel = max(self._nivel - 1, 0)
        self._rolled_back = True
        if self._nivel == 0:
            self.clear_events()

    @property
    def committed(self) -> bool:
        return self._committed

    @property
    def rolled_back(self) -> bool:
        return self._rolled_back

    @property
    def published_events(self) -> List[DomainEvent]:
        """Retorna eventos que foram 'publicados'."""
        return self._published_events

    def eventos_do_tipo(self, event_type: str) -> List[DomainEvent]:
        return [e for e in self._published_events if e.event_type == event_type]
