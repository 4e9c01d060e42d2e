"""
Entidades do Domínio de SLA.

- SLAEntity: Regra (categoria, prioridade) → duração alvo
- TicketSLAEntity: SLA aplicado a um ticket, com prazo e situação
- UnidadeSLA / StatusSLA: Vocabulários controlados

Regras de Negócio Encapsuladas:
- Prazo = criação do ticket + duração da regra
- Unidade desconhecida é tratada como minutos
- Situação inicial: violated / at_risk (< 25% da janela restante) / on_time
- Conclusão: violated com minutos de violação, senão on_time
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional
import uuid

from src.core.shared.exceptions import ValidationError


# Fração restante da janela abaixo da qual o SLA fica "at_risk"
LIMIAR_RISCO = 0.25


class UnidadeSLA(Enum):
    """Unidade de duração de uma regra de SLA."""

    MINUTES = "minutes"
    HOURS = "hours"
    DAYS = "days"

    @classmethod
    def from_string(cls, value: str) -> "UnidadeSLA":
        """Converte string; valores desconhecidos viram MINUTES."""
        for unidade in cls:
            if unidade.value == (value or "").lower():
                return unidade
        return cls.MINUTES


class StatusSLA(Enum):
    """Situação do SLA de um ticket."""

    ON_TIME = "on_time"
    AT_RISK = "at_risk"
    VIOLATED = "violated"


@dataclass
class SLAEntity:
    """
    Regra de SLA.

    Attributes:
        nome: Nome da regra
        descricao: Descrição livre
        categoria: Slug da categoria de ticket
        prioridade: Prioridade específica (None = qualquer prioridade)
        tempo_alvo: Duração alvo na unidade indicada
        unidade: minutes / hours / days
        ativo: Regras inativas nunca são aplicadas
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    nome: str = ""
    descricao: str = ""
    categoria: str = ""
    prioridade: Optional[str] = None
    tempo_alvo: int = 0
    unidade: str = UnidadeSLA.MINUTES.value
    ativo: bool = True

    def __post_init__(self):
        if self.tempo_alvo < 0:
            raise ValidationError(
                "Tempo alvo do SLA não pode ser negativo",
                field="tempo_alvo"
            )

    def duracao(self) -> timedelta:
        """Duração alvo convertida conforme a unidade."""
        unidade = UnidadeSLA.from_string(self.unidade)
        if unidade == UnidadeSLA.HOURS:
            return timedelta(hours=self.tempo_alvo)
        if unidade == UnidadeSLA.DAYS:
            return timedelta(days=self.tempo_alvo)
        return timedelta(minutes=self.tempo_alvo)

    def calcular_prazo(self, inicio: datetime) -> datetime:
        return inicio + self.duracao()


@dataclass
class TicketSLAEntity:
    """
    SLA aplicado a um ticket (no máximo um por ticket).

    Attributes:
        ticket_id: Ticket
        sla_id: Regra aplicada
        prazo_alvo: Data/hora limite
        status: on_time / at_risk / violated
        concluido_em: Quando o ticket foi validado/fechado
        minutos_violacao: Minutos além do prazo (apenas se violated)
    """

    ticket_id: str
    sla_id: str
    prazo_alvo: datetime
    status: StatusSLA = StatusSLA.ON_TIME
    concluido_em: Optional[datetime] = None
    minutos_violacao: Optional[int] = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    @classmethod
    def aplicar(
        cls,
        ticket_id: str,
        sla: SLAEntity,
        criado_em: datetime,
        agora: datetime,
    ) -> "TicketSLAEntity":
        """
        Cria o vínculo calculando prazo e situação inicial.

        Args:
            ticket_id: Ticket alvo
            sla: Regra encontrada
            criado_em: Criação do ticket (início da janela)
            agora: Momento da aplicação
        """
        prazo = sla.calcular_prazo(criado_em)
        return cls(
            ticket_id=ticket_id,
            sla_id=sla.id,
            prazo_alvo=prazo,
            status=cls._status_inicial(criado_em, prazo, agora),
        )

    @staticmethod
    def _status_inicial(criado_em: datetime, prazo: datetime, agora: datetime) -> StatusSLA:
        if agora > prazo:
            return StatusSLA.VIOLATED

        janela = (prazo - criado_em).total_seconds()
        if janela > 0:
            restante = (prazo - agora).total_seconds() / janela
            if restante < LIMIAR_RISCO:
                return StatusSLA.AT_RISK

        return StatusSLA.ON_TIME

    def concluir(self, agora: datetime) -> None:
        """Recalcula a situação na validação/fechamento do ticket."""
        self.concluido_em = agora
        if agora > self.prazo_alvo:
            self.status = StatusSLA.VIOLATED
            self.minutos_violacao = int((agora - self.prazo_alvo).total_seconds() // 60)
        else:
            self.status = StatusSLA.ON_TIME
            self.minutos_violacao = None
