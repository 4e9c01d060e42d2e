"""
Domain Events do Domínio de Atrasos.

Eventos:
- AtrasoDetectadoEvent: Atraso criado ou recalculado para um ticket
- AtrasoRemovidoEvent: Atraso deixou de existir (ou foi excluído)
- JustificativaSubmetidaEvent: Responsável justificou o atraso
- JustificativaDecididaEvent: Justificativa validada ou rejeitada
"""

from dataclasses import dataclass
from typing import Dict, Any

from src.core.shared.events import DomainEvent


@dataclass
class AtrasoDetectadoEvent(DomainEvent):
    """
    Evento: Atraso criado (novo=True) ou com medidas atualizadas.

    Attributes:
        ticket_id: Ticket de origem
        usuario_id: Responsável pelo atraso
        tempo_atraso: Minutos de atraso
        percentual_atraso: Percentual sobre o estimado
        novo: Se o atraso acabou de ser criado
    """

    ticket_id: str = ""
    usuario_id: str = ""
    tempo_atraso: int = 0
    percentual_atraso: float = 0.0
    novo: bool = True

    @property
    def aggregate_type(self) -> str:
        return "Atraso"


@dataclass
class AtrasoRemovidoEvent(DomainEvent):
    """Evento: Atraso removido."""

    ticket_id: str = ""

    @property
    def aggregate_type(self) -> str:
        return "Atraso"

    def _get_event_data(self) -> Dict[str, Any]:
        return {"ticket_id": self.ticket_id}


@dataclass
class JustificativaSubmetidaEvent(DomainEvent):
    """Evento: Justificativa criada (aggregate_id = atraso)."""

    justificativa_id: str = ""
    usuario_id: str = ""

    @property
    def aggregate_type(self) -> str:
        return "Atraso"


@dataclass
class JustificativaDecididaEvent(DomainEvent):
    """
    Evento: Justificativa validada ou rejeitada (aggregate_id = atraso).

    Attributes:
        justificativa_id: Justificativa decidida
        validador_id: Quem decidiu
        validado: True se validada, False se rejeitada
    """

    justificativa_id: str = ""
    validador_id: str = ""
    validado: bool = False

    @property
    def aggregate_type(self) -> str:
        return "Atraso"
