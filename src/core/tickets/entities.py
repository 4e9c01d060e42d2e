"""
Entidades do Domínio de Tickets.

Este módulo define as entidades de domínio que encapsulam
regras de negócio relacionadas ao ciclo de vida de tickets.

Entidades:
- TicketEntity: Agregado principal do domínio
- TicketStatus: Estados possíveis de um ticket
- TicketPriority: Níveis de prioridade
- ResponsavelTicket: Vínculo ticket ↔ usuário atribuído (com líder)
- ComentarioEntity: Comentário (público ou interno) de um ticket
- HistoricoTicketEntry: Entrada append-only do histórico

Regras de Negócio Encapsuladas:
- Validação de dados na criação
- Data de fechamento registrada apenas na primeira entrada em "cloture"
- Validação apenas a partir de "en_attente"
- Atribuição avança "ouvert" para "en_cours"
- Exclusão lógica (soft delete)
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional
import uuid

from src.core.shared.exceptions import (
    ValidationError,
    BusinessRuleViolationError,
)


class TicketStatus(Enum):
    """
    Estados possíveis de um ticket.

    Os valores são persistidos e trocados com outros sistemas,
    por isso permanecem no vocabulário do negócio.

    Fluxo de Estados:
        OUVERT → EN_COURS → EN_ATTENTE → RESOLU → CLOTURE
                                 ↑          │
                                 └──────────┘ (invalidação)
    """

    OUVERT = "ouvert"
    EN_COURS = "en_cours"
    EN_ATTENTE = "en_attente"
    RESOLU = "resolu"
    CLOTURE = "cloture"

    @classmethod
    def from_string(cls, value: str) -> "TicketStatus":
        """
        Converte string para enum.

        Args:
            value: Valor string (nome ou valor do enum)

        Returns:
            TicketStatus correspondente

        Raises:
            ValueError: Se valor inválido
        """
        if value:
            for status in cls:
                if status.value == value.lower() or status.name == value.upper():
                    return status

        raise ValueError(f"Status inválido: {value}")


class TicketPriority(Enum):
    """Níveis de prioridade de um ticket."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @classmethod
    def from_string(cls, value: str) -> "TicketPriority":
        """
        Converte string para enum.

        Raises:
            ValueError: Se valor inválido
        """
        if value:
            for priority in cls:
                if priority.value == value.lower() or priority.name == value.upper():
                    return priority

        raise ValueError(f"Prioridade inválida: {value}")


# Origens aceitas para um ticket
ORIGENS_VALIDAS = ("mail", "appel", "direct", "whatsapp", "kronos")


@dataclass
class TicketEntity:
    """
    Entidade de Domínio: Ticket.

    Agregado principal do domínio de suporte técnico.

    Invariantes:
    - Título e descrição são obrigatórios
    - `atribuido_a_id` é o líder se definido, senão o primeiro
      responsável normalizado, senão permanece inalterado
    - `fechado_em` é definido uma única vez (primeira entrada em cloture)
    - Ticket só pode ser validado a partir de en_attente

    Attributes:
        id: Identificador único (UUID)
        codigo: Código legível (TKT-<ano>-<seq>)
        titulo: Título descritivo
        descricao: Descrição detalhada
        categoria: Slug da categoria ("" = sem categoria)
        origem: Canal de origem (mail, appel, direct, whatsapp, kronos)
        status: Estado atual
        prioridade: Nível de prioridade
        criador_id: Usuário que criou
        solicitante_id: Usuário solicitante (opcional)
        solicitante_nome: Nome livre do solicitante
        solicitante_departamento: Departamento livre do solicitante
        filial_id: Filial do ticket
        software_id: Software relacionado (opcional)
        pai_id: Ticket pai (um nível de sub-ticket)
        atribuido_a_id: Responsável principal
        tempo_estimado: Tempo estimado em minutos
        tempo_real: Soma dos apontamentos em minutos
        validado_por_id: Quem validou
        validado_em: Quando foi validado
        fechado_em: Quando foi clôturado pela primeira vez
        excluido_em: Exclusão lógica

    Example:
        ticket = TicketEntity.criar(
            codigo="TKT-2025-0007",
            titulo="Impressora parada",
            descricao="A impressora do 2º andar não imprime",
            criador_id="user123",
        )
    """

    # Identificação
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    codigo: str = ""

    # Dados principais
    titulo: str = ""
    descricao: str = ""
    categoria: str = ""
    origem: str = "kronos"

    # Estado
    status: TicketStatus = field(default=TicketStatus.OUVERT)
    prioridade: TicketPriority = field(default=TicketPriority.MEDIUM)

    # Relacionamentos
    criador_id: str = ""
    solicitante_id: Optional[str] = None
    solicitante_nome: str = ""
    solicitante_departamento: str = ""
    filial_id: Optional[str] = None
    software_id: Optional[str] = None
    pai_id: Optional[str] = None
    atribuido_a_id: Optional[str] = None

    # Tempo (minutos)
    tempo_estimado: Optional[int] = None
    tempo_real: Optional[int] = None

    # Validação
    validado_por_id: Optional[str] = None
    validado_em: Optional[datetime] = None

    # Timestamps
    criado_em: datetime = field(default_factory=datetime.now)
    atualizado_em: datetime = field(default_factory=datetime.now)
    fechado_em: Optional[datetime] = None
    excluido_em: Optional[datetime] = None

    # Constantes de validação
    TITULO_MAX_LENGTH: int = 200

    @classmethod
    def criar(
        cls,
        codigo: str,
        titulo: str,
        descricao: str,
        criador_id: str,
        prioridade: TicketPriority = TicketPriority.MEDIUM,
        categoria: str = "",
        origem: str = "kronos",
        criado_em: Optional[datetime] = None,
        **extras,
    ) -> "TicketEntity":
        """
        Factory method para criar ticket com validações.

        Args:
            codigo: Código único já gerado
            titulo: Título do ticket
            descricao: Descrição detalhada
            criador_id: ID do usuário criador
            prioridade: Nível de prioridade (default: MEDIUM)
            categoria: Slug de categoria já validado
            origem: Canal de origem
            criado_em: Momento de criação (default: agora)
            **extras: Demais campos opcionais (solicitante, filial, pai...)

        Returns:
            Nova instância de TicketEntity com status OUVERT

        Raises:
            ValidationError: Se dados de entrada inválidos
        """
        cls._validar_titulo(titulo)
        cls._validar_descricao(descricao)
        cls._validar_criador(criador_id)
        cls._validar_origem(origem)
        cls._validar_tempo_estimado(extras.get("tempo_estimado"))

        agora = criado_em or datetime.now()
        return cls(
            codigo=codigo,
            titulo=titulo.strip(),
            descricao=descricao.strip(),
            criador_id=criador_id,
            prioridade=prioridade,
            categoria=categoria or "",
            origem=origem,
            status=TicketStatus.OUVERT,
            criado_em=agora,
            atualizado_em=agora,
            **extras,
        )

    @classmethod
    def _validar_titulo(cls, titulo: str) -> None:
        """Valida título do ticket."""
        if not titulo or not titulo.strip():
            raise ValidationError("Título é obrigatório", field="titulo")

        if len(titulo.strip()) > cls.TITULO_MAX_LENGTH:
            raise ValidationError(
                f"Título deve ter no máximo {cls.TITULO_MAX_LENGTH} caracteres",
                field="titulo"
            )

    @classmethod
    def _validar_descricao(cls, descricao: str) -> None:
        """Valida descrição do ticket."""
        if not descricao or not descricao.strip():
            raise ValidationError("Descrição é obrigatória", field="descricao")

    @classmethod
    def _validar_criador(cls, criador_id: str) -> None:
        if not criador_id:
            raise ValidationError("Criador é obrigatório", field="criador_id")

    @classmethod
    def _validar_origem(cls, origem: str) -> None:
        if origem not in ORIGENS_VALIDAS:
            raise ValidationError(
                f"Origem inválida: {origem!r} (use {', '.join(ORIGENS_VALIDAS)})",
                field="origem"
            )

    @classmethod
    def _validar_tempo_estimado(cls, tempo_estimado: Optional[int]) -> None:
        if tempo_estimado is not None and tempo_estimado < 0:
            raise ValidationError(
                "Tempo estimado não pode ser negativo",
                field="tempo_estimado"
            )

    def definir_tempo_estimado(self, minutos: Optional[int]) -> Optional[int]:
        """
        Define o tempo estimado.

        Returns:
            Valor anterior
        """
        self._validar_tempo_estimado(minutos)
        anterior = self.tempo_estimado
        self.tempo_estimado = minutos
        self._atualizar_timestamp()
        return anterior

    def definir_pai(self, pai_id: str) -> None:
        """
        Define o ticket pai.

        Raises:
            ValidationError: Se vazio ou o próprio ticket
        """
        if not pai_id:
            raise ValidationError("Ticket pai inválido", field="pai_id")

        if pai_id == self.id:
            raise ValidationError(
                "Um ticket não pode ser seu próprio pai",
                field="pai_id"
            )

        self.pai_id = pai_id
        self._atualizar_timestamp()

    def atribuir(self, responsavel_principal_id: Optional[str]) -> TicketStatus:
        """
        Define o responsável principal.

        Um ticket "ouvert" avança automaticamente para "en_cours".

        Returns:
            Status anterior
        """
        if responsavel_principal_id:
            self.atribuido_a_id = responsavel_principal_id

        anterior = self.status
        if self.status == TicketStatus.OUVERT:
            self.status = TicketStatus.EN_COURS

        self._atualizar_timestamp()
        return anterior

    def alterar_status(
        self,
        novo_status: TicketStatus,
        agora: Optional[datetime] = None,
    ) -> TicketStatus:
        """
        Altera status do ticket.

        Qualquer um dos cinco status é aceito. A primeira entrada em
        CLOTURE registra `fechado_em`.

        Args:
            novo_status: Novo status
            agora: Momento da alteração

        Returns:
            Status anterior
        """
        agora = agora or datetime.now()
        anterior = self.status
        self.status = novo_status

        if novo_status == TicketStatus.CLOTURE and self.fechado_em is None:
            self.fechado_em = agora

        self._atualizar_timestamp(agora)
        return anterior

    def validar(self, validador_id: str, agora: Optional[datetime] = None) -> TicketStatus:
        """
        Valida a resolução proposta (en_attente → resolu).

        Raises:
            BusinessRuleViolationError: Se ticket não está em en_attente

        Returns:
            Status anterior
        """
        self.exigir_aguardando_validacao()

        agora = agora or datetime.now()
        anterior = self.status
        self.validado_por_id = validador_id
        self.validado_em = agora
        self.status = TicketStatus.RESOLU
        self._atualizar_timestamp(agora)
        return anterior

    def exigir_aguardando_validacao(self) -> None:
        if self.status != TicketStatus.EN_ATTENTE:
            raise BusinessRuleViolationError(
                "Apenas tickets aguardando validação podem ser validados",
                rule="validacao_requer_en_attente"
            )

    def excluir(self, agora: Optional[datetime] = None) -> None:
        """Exclusão lógica."""
        self.excluido_em = agora or datetime.now()
        self._atualizar_timestamp(self.excluido_em)

    def _atualizar_timestamp(self, agora: Optional[datetime] = None) -> None:
        """Atualiza timestamp de modificação."""
        self.atualizado_em = agora or datetime.now()

    @property
    def esta_excluido(self) -> bool:
        return self.excluido_em is not None

    @property
    def esta_atribuido(self) -> bool:
        """Verifica se ticket está atribuído a alguém."""
        return self.atribuido_a_id is not None

    @property
    def esta_atrasado(self) -> bool:
        """Se o tempo real ultrapassa o tempo estimado."""
        if not self.tempo_estimado or self.tempo_estimado <= 0:
            return False
        return self.tempo_real is not None and self.tempo_real > self.tempo_estimado

    def __repr__(self) -> str:
        """Representação string para debugging."""
        return (
            f"TicketEntity("
            f"id={self.id[:8]}..., "
            f"codigo={self.codigo}, "
            f"titulo='{self.titulo[:20]}...', "
            f"status={self.status.value}, "
            f"prioridade={self.prioridade.value}"
            f")"
        )

    def __eq__(self, other: object) -> bool:
        """Comparação por ID (identidade de entidade)."""
        if not isinstance(other, TicketEntity):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        """Hash baseado em ID."""
        return hash(self.id)


@dataclass
class ResponsavelTicket:
    """
    Vínculo de atribuição (ticket, usuário, líder).

    O conjunto de responsáveis de um ticket é sempre substituído
    por inteiro a cada alteração.
    """

    ticket_id: str
    usuario_id: str
    eh_lider: bool = False


@dataclass
class ComentarioEntity:
    """
    Comentário de um ticket.

    Comentários internos só são listados para quem tem a capacidade
    `comentario.ver_interno`.

    Attributes:
        ticket_id: Ticket comentado
        usuario_id: Autor
        comentario: Texto
        interno: Visível apenas para a equipe de TI
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    ticket_id: str = ""
    usuario_id: str = ""
    comentario: str = ""
    interno: bool = False
    criado_em: datetime = field(default_factory=datetime.now)
    atualizado_em: datetime = field(default_factory=datetime.now)
    excluido_em: Optional[datetime] = None

    @classmethod
    def criar(
        cls,
        ticket_id: str,
        usuario_id: str,
        comentario: str,
        interno: bool = False,
    ) -> "ComentarioEntity":
        """
        Cria comentário validado.

        Raises:
            ValidationError: Se o texto está vazio
        """
        texto = cls._validar_texto(comentario)
        return cls(
            ticket_id=ticket_id,
            usuario_id=usuario_id,
            comentario=texto,
            interno=interno,
        )

    @staticmethod
    def _validar_texto(comentario: str) -> str:
        texto = (comentario or "").strip()
        if not texto:
            raise ValidationError(
                "O comentário não pode estar vazio",
                field="comentario"
            )
        return texto

    def editar(self, comentario: str) -> None:
        """Substitui o texto (sem espaços nas pontas)."""
        self.comentario = self._validar_texto(comentario)
        self.atualizado_em = datetime.now()

    def excluir(self) -> None:
        self.excluido_em = datetime.now()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ComentarioEntity):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


class AcaoHistorico(Enum):
    """Ações registradas no histórico de um ticket."""

    CREATED = "created"
    UPDATED = "updated"
    ASSIGNED = "assigned"
    STATUS_CHANGED = "status_changed"
    VALIDATED = "validated"
    COMMENT_ADDED = "comment_added"
    DELETED = "deleted"
    ESTIMATED_TIME_SET = "estimated_time_set"


@dataclass
class HistoricoTicketEntry:
    """
    Entrada append-only do histórico de um ticket.

    Attributes:
        ticket_id: Ticket afetado
        usuario_id: Ator
        acao: Valor de AcaoHistorico
        campo: Campo alterado ("" quando não se aplica)
        valor_antigo: Valor anterior (texto)
        valor_novo: Novo valor (texto)
        descricao: Texto livre
    """

    ticket_id: str
    usuario_id: str
    acao: str
    campo: str = ""
    valor_antigo: str = ""
    valor_novo: str = ""
    descricao: str = ""
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    criado_em: datetime = field(default_factory=datetime.now)
