"""
DTOs do Domínio de Apontamentos.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from .entities import ApontamentoEntity


@dataclass(frozen=True)
class CriarApontamentoInputDTO:
    """
    Attributes:
        usuario_id: Quem apontou
        tempo_gasto: Minutos (> 0)
        data: "YYYY-MM-DD"
        ticket_id: Ticket apontado (ou tarefa_projeto_id)
        tarefa_projeto_id: Tarefa de projeto apontada
        descricao: Texto livre
    """

    usuario_id: str
    tempo_gasto: int
    data: str
    ticket_id: Optional[str] = None
    tarefa_projeto_id: Optional[str] = None
    descricao: str = ""

    def to_dict(self) -> dict:
        return {
            "usuario_id": self.usuario_id,
            "tempo_gasto": self.tempo_gasto,
            "data": self.data,
            "ticket_id": self.ticket_id,
            "tarefa_projeto_id": self.tarefa_projeto_id,
            "descricao": self.descricao,
        }


@dataclass(frozen=True)
class AtualizarApontamentoInputDTO:
    """Campos vazios/None não são alterados."""

    apontamento_id: str
    ator_id: str
    tempo_gasto: Optional[int] = None
    descricao: str = ""
    data: str = ""

    def to_dict(self) -> dict:
        return {
            "apontamento_id": self.apontamento_id,
            "ator_id": self.ator_id,
            "tempo_gasto": self.tempo_gasto,
            "descricao": self.descricao,
            "data": self.data,
        }


@dataclass(frozen=True)
class ValidarApontamentoInputDTO:
    apontamento_id: str
    validador_id: str
    validado: bool = True

    def to_dict(self) -> dict:
        return {
            "apontamento_id": self.apontamento_id,
            "validador_id": self.validador_id,
            "validado": self.validado,
        }


@dataclass
class ApontamentoOutputDTO:
    """DTO de saída de apontamento."""

    id: str
    ticket_id: Optional[str]
    tarefa_projeto_id: Optional[str]
    usuario_id: str
    tempo_gasto: int
    data: date
    descricao: str
    validado: bool
    validado_por_id: Optional[str]
    validado_em: Optional[datetime]
    criado_em: datetime

    @classmethod
    def from_entity(cls, entity: ApontamentoEntity) -> "ApontamentoOutputDTO":
        return cls(
            id=entity.id,
            ticket_id=entity.ticket_id,
            tarefa_projeto_id=entity.tarefa_projeto_id,
            usuario_id=entity.usuario_id,
            tempo_gasto=entity.tempo_gasto,
            data=entity.data,
            descricao=entity.descricao,
            validado=entity.validado,
            validado_por_id=entity.validado_por_id,
            validado_em=entity.validado_em,
            criado_em=entity.criado_em,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "ticket_id": self.ticket_id,
            "tarefa_projeto_id": self.tarefa_projeto_id,
            "usuario_id": self.usuario_id,
            "tempo_gasto": self.tempo_gasto,
            "data": self.data.isoformat(),
            "descricao": self.descricao,
            "validado": self.validado,
            "validado_por_id": self.validado_por_id,
            "validado_em": self.validado_em.isoformat() if self.validado_em else None,
            "criado_em": self.criado_em.isoformat(),
        }
