"""
DTOs do Domínio de Atrasos.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Optional

from .entities import AtrasoEntity, JustificativaEntity


# =============================================================================
# INPUT DTOs
# =============================================================================

@dataclass(frozen=True)
class CriarJustificativaInputDTO:
    """
    Attributes:
        atraso_id: Atraso a justificar
        usuario_id: Autor (deve ser o responsável pelo atraso)
        justificativa: Texto
    """

    atraso_id: str
    usuario_id: str
    justificativa: str

    def to_dict(self) -> dict:
        return {
            "atraso_id": self.atraso_id,
            "usuario_id": self.usuario_id,
            "justificativa": self.justificativa,
        }


@dataclass(frozen=True)
class AtualizarJustificativaInputDTO:
    justificativa_id: str
    usuario_id: str
    justificativa: str

    def to_dict(self) -> dict:
        return {
            "justificativa_id": self.justificativa_id,
            "usuario_id": self.usuario_id,
            "justificativa": self.justificativa,
        }


@dataclass(frozen=True)
class ValidarJustificativaInputDTO:
    """
    Attributes:
        justificativa_id: Justificativa a decidir
        validador_id: Quem decide
        validado: True valida, False rejeita
        comentario: Comentário opcional da decisão
    """

    justificativa_id: str
    validador_id: str
    validado: bool
    comentario: str = ""

    def to_dict(self) -> dict:
        return {
            "justificativa_id": self.justificativa_id,
            "validador_id": self.validador_id,
            "validado": self.validado,
            "comentario": self.comentario,
        }


# =============================================================================
# OUTPUT DTOs
# =============================================================================

@dataclass
class AtrasoOutputDTO:
    """DTO de saída de atraso."""

    id: str
    ticket_id: str
    usuario_id: str
    tempo_estimado: int
    tempo_real: int
    tempo_atraso: int
    percentual_atraso: float
    status: str
    detectado_em: datetime

    @classmethod
    def from_entity(cls, entity: AtrasoEntity) -> "AtrasoOutputDTO":
        return cls(
            id=entity.id,
            ticket_id=entity.ticket_id,
            usuario_id=entity.usuario_id,
            tempo_estimado=entity.tempo_estimado,
            tempo_real=entity.tempo_real,
            tempo_atraso=entity.tempo_atraso,
            percentual_atraso=entity.percentual_atraso,
            status=entity.status.value,
            detectado_em=entity.detectado_em,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "ticket_id": self.ticket_id,
            "usuario_id": self.usuario_id,
            "tempo_estimado": self.tempo_estimado,
            "tempo_real": self.tempo_real,
            "tempo_atraso": self.tempo_atraso,
            "percentual_atraso": self.percentual_atraso,
            "status": self.status,
            "detectado_em": self.detectado_em.isoformat(),
        }


@dataclass
class JustificativaOutputDTO:
    """DTO de saída de justificativa."""

    id: str
    atraso_id: str
    usuario_id: str
    justificativa: str
    status: str
    validado_por_id: Optional[str]
    validado_em: Optional[datetime]
    comentario_validacao: str
    criado_em: datetime

    @classmethod
    def from_entity(cls, entity: JustificativaEntity) -> "JustificativaOutputDTO":
        return cls(
            id=entity.id,
            atraso_id=entity.atraso_id,
            usuario_id=entity.usuario_id,
            justificativa=entity.justificativa,
            status=entity.status.value,
            validado_por_id=entity.validado_por_id,
            validado_em=entity.validado_em,
            comentario_validacao=entity.comentario_validacao,
            criado_em=entity.criado_em,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "atraso_id": self.atraso_id,
            "usuario_id": self.usuario_id,
            "justificativa": self.justificativa,
            "status": self.status,
            "validado_por_id": self.validado_por_id,
            "validado_em": self.validado_em.isoformat() if self.validado_em else None,
            "comentario_validacao": self.comentario_validacao,
            "criado_em": self.criado_em.isoformat(),
        }


@dataclass
class EstatisticasAtrasoDTO:
    """Contagem de atrasos por status."""

    por_status: Dict[str, int]

    @property
    def total(self) -> int:
        return sum(self.por_status.values())

    def to_dict(self) -> dict:
        return {"por_status": dict(self.por_status), "total": self.total}
