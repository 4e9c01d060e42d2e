"""
Domain Events do Domínio de Apontamentos.
"""

from dataclasses import dataclass
from typing import Optional

from src.core.shared.events import DomainEvent


@dataclass
class ApontamentoRegistradoEvent(DomainEvent):
    """
    Evento: Tempo apontado.

    Attributes:
        usuario_id: Quem apontou
        ticket_id: Ticket (ou None)
        tarefa_projeto_id: Tarefa de projeto (ou None)
        tempo_gasto: Minutos
    """

    usuario_id: str = ""
    ticket_id: Optional[str] = None
    tarefa_projeto_id: Optional[str] = None
    tempo_gasto: int = 0

    @property
    def aggregate_type(self) -> str:
        return "Apontamento"


@dataclass
class ApontamentoExcluidoEvent(DomainEvent):
    """Evento: Apontamento excluído (lógico)."""

    excluido_por_id: str = ""
    ticket_id: Optional[str] = None

    @property
    def aggregate_type(self) -> str:
        return "Apontamento"


@dataclass
class ApontamentoValidadoEvent(DomainEvent):
    """Evento: Validação de apontamento aplicada ou desfeita."""

    validador_id: str = ""
    validado: bool = True

    @property
    def aggregate_type(self) -> str:
        return "Apontamento"
