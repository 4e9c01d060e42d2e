"""
Domain Events - fatos publicados pelos use cases.

Ciclo de vida:
    1. O use case cria o evento dentro do bloco `with uow:`
    2. O UoW o mantém em fila até o commit
    3. O publisher configurado (Celery, logging ou memória) o entrega
    4. `dispatch_domain_event` roteia `to_dict()` para o handler do tipo

Eventos de tickets, atrasos e apontamentos derivam de DomainEvent e
declaram apenas seus campos específicos (com defaults).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict
import uuid


_CAMPOS_BASE = frozenset({"event_id", "aggregate_id", "occurred_at", "version"})


@dataclass
class DomainEvent(ABC):
    """
    Base dos eventos de domínio.

    Attributes:
        event_id: UUID gerado na criação
        aggregate_id: Ticket, atraso ou apontamento de origem (obrigatório)
        occurred_at: Momento da criação do evento
        version: Versão do formato serializado

    Example:
        @dataclass
        class AtrasoRemovidoEvent(DomainEvent):
            ticket_id: str = ""

            @property
            def aggregate_type(self) -> str:
                return "Atraso"
    """

    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    aggregate_id: str = ""
    occurred_at: datetime = field(default_factory=datetime.now)
    version: int = 1

    def __post_init__(self):
        if not self.aggregate_id:
            raise ValueError("aggregate_id é obrigatório")

    @property
    @abstractmethod
    def aggregate_type(self) -> str:
        """Ticket, Atraso, Justificativa ou Apontamento."""
        ...

    @property
    def event_type(self) -> str:
        return self.__class__.__name__

    def to_dict(self) -> Dict[str, Any]:
        """
        Envelope serializável em JSON (payload das tasks Celery).

        Campos específicos do evento ficam em "data".
        """
        return {
            "event_id": self.event_id,
            "event_type": self.event_type,
            "aggregate_id": self.aggregate_id,
            "aggregate_type": self.aggregate_type,
            "occurred_at": self.occurred_at.isoformat(),
            "version": self.version,
            "data": self._get_event_data(),
        }

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            key: value
            for key, value in self.__dict__.items()
            if key not in _CAMPOS_BASE and not key.startswith("_")
        }

    def __repr__(self) -> str:
        return f"{self.event_type}(aggregate_id={self.aggregate_id}, event_id={self.event_id[:8]}...)"
