"""
Entidades do Domínio de Atrasos.

Um Atraso é derivado de um ticket sempre que o tempo real ultrapassa
o tempo estimado. O responsável pelo atraso pode submeter uma
justificativa, que é então validada ou rejeitada.

Entidades:
- AtrasoEntity: Atraso de um ticket (no máximo um por ticket)
- JustificativaEntity: Justificativa de um atraso (no máximo uma)
- AtrasoStatus / JustificativaStatus: Estados

Ciclo de Vida do Atraso:
    unjustified → pending → justified
                      └──→ unjustified (justificativa rejeitada/excluída)
    rejected → unjustified (nova rodada de atraso ao recalcular)

Regras de Negócio Encapsuladas:
- Percentual limitado a 999.99 e arredondado a 2 casas
- Recalcular um atraso "rejected" o reabre como "unjustified"
- Somente atrasos "unjustified" podem ser removidos quando o atraso some
- Justificativa só é editada/decidida/excluída enquanto "pending"
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple
import uuid

from src.core.shared.exceptions import (
    ValidationError,
    BusinessRuleViolationError,
)


PERCENTUAL_MAXIMO = 999.99


class AtrasoStatus(Enum):
    """Estados de um atraso."""

    UNJUSTIFIED = "unjustified"
    PENDING = "pending"
    JUSTIFIED = "justified"
    REJECTED = "rejected"

    @classmethod
    def from_string(cls, value: str) -> "AtrasoStatus":
        """
        Raises:
            ValueError: Se valor inválido
        """
        for status in cls:
            if status.value == (value or "").lower():
                return status
        raise ValueError(f"Status de atraso inválido: {value}")


class JustificativaStatus(Enum):
    """Estados de uma justificativa."""

    PENDING = "pending"
    VALIDATED = "validated"
    REJECTED = "rejected"


def calcular_atraso(
    tempo_estimado: Optional[int],
    tempo_real: Optional[int],
) -> Optional[Tuple[int, float]]:
    """
    Calcula (minutos de atraso, percentual).

    Returns:
        None se não há base de cálculo (estimado ausente/≤ 0 ou real
        ausente); caso contrário a tupla, com atraso possivelmente ≤ 0
    """
    if tempo_estimado is None or tempo_estimado <= 0 or tempo_real is None:
        return None

    atraso = tempo_real - tempo_estimado
    percentual = min(PERCENTUAL_MAXIMO, round(atraso / tempo_estimado * 100, 2))
    return atraso, percentual


@dataclass
class AtrasoEntity:
    """
    Entidade de Domínio: Atraso de um ticket.

    Attributes:
        id: Identificador único (UUID)
        ticket_id: Ticket de origem (único)
        usuario_id: Responsável pelo atraso
        tempo_estimado: Estimativa do ticket (minutos)
        tempo_real: Tempo apontado (minutos)
        tempo_atraso: real - estimado (minutos)
        percentual_atraso: atraso / estimado * 100, limitado a 999.99
        status: Estado do atraso
        detectado_em: Primeira detecção
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    ticket_id: str = ""
    usuario_id: str = ""
    tempo_estimado: int = 0
    tempo_real: int = 0
    tempo_atraso: int = 0
    percentual_atraso: float = 0.0
    status: AtrasoStatus = AtrasoStatus.UNJUSTIFIED
    detectado_em: datetime = field(default_factory=datetime.now)
    criado_em: datetime = field(default_factory=datetime.now)
    atualizado_em: datetime = field(default_factory=datetime.now)

    @classmethod
    def detectar(
        cls,
        ticket_id: str,
        usuario_id: str,
        tempo_estimado: int,
        tempo_real: int,
        agora: Optional[datetime] = None,
    ) -> "AtrasoEntity":
        """
        Cria um atraso "unjustified".

        Raises:
            ValidationError: Se não há atraso positivo
        """
        medidas = calcular_atraso(tempo_estimado, tempo_real)
        if medidas is None or medidas[0] <= 0:
            raise ValidationError(
                "Atraso só existe quando o tempo real excede o estimado",
                field="tempo_real"
            )

        agora = agora or datetime.now()
        atraso, percentual = medidas
        return cls(
            ticket_id=ticket_id,
            usuario_id=usuario_id,
            tempo_estimado=tempo_estimado,
            tempo_real=tempo_real,
            tempo_atraso=atraso,
            percentual_atraso=percentual,
            status=AtrasoStatus.UNJUSTIFIED,
            detectado_em=agora,
            criado_em=agora,
            atualizado_em=agora,
        )

    def atualizar_medidas(
        self,
        tempo_estimado: int,
        tempo_real: int,
        agora: Optional[datetime] = None,
    ) -> bool:
        """
        Atualiza as medidas do atraso.

        Um atraso "rejected" volta a "unjustified"; os demais estados
        não são alterados.

        Returns:
            True se algo mudou
        """
        atraso, percentual = calcular_atraso(tempo_estimado, tempo_real)
        novo_status = (
            AtrasoStatus.UNJUSTIFIED if self.status == AtrasoStatus.REJECTED else self.status
        )

        mudou = (
            self.tempo_estimado != tempo_estimado
            or self.tempo_real != tempo_real
            or self.tempo_atraso != atraso
            or self.percentual_atraso != percentual
            or self.status != novo_status
        )
        if not mudou:
            return False

        self.tempo_estimado = tempo_estimado
        self.tempo_real = tempo_real
        self.tempo_atraso = atraso
        self.percentual_atraso = percentual
        self.status = novo_status
        self.atualizado_em = agora or datetime.now()
        return True

    @property
    def pode_ser_removido(self) -> bool:
        """Apenas atrasos sem justificativa em curso somem com o atraso."""
        return self.status == AtrasoStatus.UNJUSTIFIED

    def marcar_pendente(self) -> None:
        self.status = AtrasoStatus.PENDING
        self.atualizado_em = datetime.now()

    def marcar_justificado(self) -> None:
        self.status = AtrasoStatus.JUSTIFIED
        self.atualizado_em = datetime.now()

    def marcar_nao_justificado(self) -> None:
        self.status = AtrasoStatus.UNJUSTIFIED
        self.atualizado_em = datetime.now()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AtrasoEntity):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


@dataclass
class JustificativaEntity:
    """
    Entidade de Domínio: Justificativa de atraso.

    Attributes:
        atraso_id: Atraso justificado (único)
        usuario_id: Autor (responsável pelo atraso)
        justificativa: Texto
        status: pending / validated / rejected
        validado_por_id: Quem decidiu
        validado_em: Quando decidiu
        comentario_validacao: Comentário da decisão
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    atraso_id: str = ""
    usuario_id: str = ""
    justificativa: str = ""
    status: JustificativaStatus = JustificativaStatus.PENDING
    validado_por_id: Optional[str] = None
    validado_em: Optional[datetime] = None
    comentario_validacao: str = ""
    criado_em: datetime = field(default_factory=datetime.now)
    atualizado_em: datetime = field(default_factory=datetime.now)

    @classmethod
    def criar(cls, atraso_id: str, usuario_id: str, justificativa: str) -> "JustificativaEntity":
        """
        Raises:
            ValidationError: Texto vazio
        """
        return cls(
            atraso_id=atraso_id,
            usuario_id=usuario_id,
            justificativa=cls._validar_texto(justificativa),
            status=JustificativaStatus.PENDING,
        )

    @staticmethod
    def _validar_texto(justificativa: str) -> str:
        texto = (justificativa or "").strip()
        if not texto:
            raise ValidationError(
                "A justificativa não pode estar vazia",
                field="justificativa"
            )
        return texto

    def exigir_pendente(self, mensagem: str) -> None:
        """
        Raises:
            BusinessRuleViolationError: Se não está pendente
        """
        if self.status != JustificativaStatus.PENDING:
            raise BusinessRuleViolationError(
                mensagem,
                rule="justificativa_ja_processada"
            )

    def editar(self, justificativa: str) -> None:
        self.exigir_pendente("Impossível modificar uma justificativa já validada ou rejeitada")
        self.justificativa = self._validar_texto(justificativa)
        self.atualizado_em = datetime.now()

    def decidir(
        self,
        validado: bool,
        validador_id: str,
        comentario: str = "",
        agora: Optional[datetime] = None,
    ) -> None:
        """
        Valida ou rejeita a justificativa.

        Raises:
            BusinessRuleViolationError: Se já foi processada
        """
        self.exigir_pendente("A justificativa já foi processada")

        agora = agora or datetime.now()
        self.status = JustificativaStatus.VALIDATED if validado else JustificativaStatus.REJECTED
        self.validado_por_id = validador_id
        self.validado_em = agora
        self.comentario_validacao = comentario or ""
        self.atualizado_em = agora

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, JustificativaEntity):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
