"""
Data Transfer Objects (DTOs) do Domínio de Tickets.

DTOs são estruturas simples para transportar dados entre camadas,
evitando vazamento de entidades para camadas externas.

Tipos de DTOs:
- Input DTOs: Dados de entrada dos comandos
- Output DTOs: Formatam dados para resposta
- Query DTOs: Filtros e paginação de listagens

Convenções:
- IDs opcionais usam None para "não informado"; "" é um ID inválido
- Listas de IDs são tuplas (DTOs de entrada são imutáveis)
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List, Sequence

from .entities import (
    TicketEntity,
    ComentarioEntity,
    HistoricoTicketEntry,
    ResponsavelTicket,
)


# =============================================================================
# INPUT DTOs (Entrada)
# =============================================================================

@dataclass(frozen=True)
class CriarTicketInputDTO:
    """
    DTO de entrada para criar ticket.

    Attributes:
        titulo: Título do ticket
        descricao: Descrição detalhada
        criador_id: ID do usuário criador
        categoria: Slug da categoria ("" = sem categoria)
        origem: Canal informado (mantido apenas para TI fornecedora)
        prioridade: low/medium/high/critical ("" = medium)
        tempo_estimado: Minutos estimados (opcional)
        solicitante_id: Usuário solicitante (opcional)
        solicitante_nome: Nome livre do solicitante
        solicitante_departamento: Departamento livre do solicitante
        filial_id: Filial explícita (opcional)
        software_id: Software relacionado (opcional)
        pai_id: Ticket pai (opcional)
        responsaveis_ids: IDs dos responsáveis
        lider_id: Líder entre os responsáveis (opcional)
    """

    titulo: str
    descricao: str
    criador_id: str
    categoria: str = ""
    origem: str = ""
    prioridade: str = ""
    tempo_estimado: Optional[int] = None
    solicitante_id: Optional[str] = None
    solicitante_nome: str = ""
    solicitante_departamento: str = ""
    filial_id: Optional[str] = None
    software_id: Optional[str] = None
    pai_id: Optional[str] = None
    responsaveis_ids: tuple = field(default_factory=tuple)
    lider_id: Optional[str] = None

    def to_dict(self) -> dict:
        """Converte para dicionário."""
        return {
            "titulo": self.titulo,
            "descricao": self.descricao,
            "criador_id": self.criador_id,
            "categoria": self.categoria,
            "origem": self.origem,
            "prioridade": self.prioridade,
            "tempo_estimado": self.tempo_estimado,
            "solicitante_id": self.solicitante_id,
            "solicitante_nome": self.solicitante_nome,
            "solicitante_departamento": self.solicitante_departamento,
            "filial_id": self.filial_id,
            "software_id": self.software_id,
            "pai_id": self.pai_id,
            "responsaveis_ids": list(self.responsaveis_ids),
            "lider_id": self.lider_id,
        }


@dataclass(frozen=True)
class AtualizarTicketInputDTO:
    """
    DTO de entrada para atualização parcial.

    Campos texto vazios e campos None não são alterados.
    `solicitante_id` tem precedência sobre `solicitante_nome`.
    Responsáveis/líder informados substituem o conjunto atual.
    """

    ticket_id: str
    ator_id: str
    titulo: str = ""
    descricao: str = ""
    categoria: str = ""
    status: str = ""
    prioridade: str = ""
    solicitante_id: Optional[str] = None
    solicitante_nome: str = ""
    solicitante_departamento: str = ""
    software_id: Optional[str] = None
    pai_id: Optional[str] = None
    responsaveis_ids: tuple = field(default_factory=tuple)
    lider_id: Optional[str] = None
    tempo_estimado: Optional[int] = None

    @property
    def altera_responsaveis(self) -> bool:
        return bool(self.responsaveis_ids) or self.lider_id is not None

    def to_dict(self) -> dict:
        return {
            "ticket_id": self.ticket_id,
            "ator_id": self.ator_id,
            "titulo": self.titulo,
            "descricao": self.descricao,
            "categoria": self.categoria,
            "status": self.status,
            "prioridade": self.prioridade,
            "solicitante_id": self.solicitante_id,
            "solicitante_nome": self.solicitante_nome,
            "solicitante_departamento": self.solicitante_departamento,
            "software_id": self.software_id,
            "pai_id": self.pai_id,
            "responsaveis_ids": list(self.responsaveis_ids),
            "lider_id": self.lider_id,
            "tempo_estimado": self.tempo_estimado,
        }


@dataclass(frozen=True)
class AtribuirTicketInputDTO:
    """
    DTO de entrada para atribuir ticket.

    Attributes:
        ticket_id: ID do ticket
        atribuido_por_id: ID de quem está fazendo a atribuição
        usuarios_ids: Lista de responsáveis
        usuario_id: Responsável único (usado se a lista estiver vazia)
        lider_id: Líder (opcional)
        tempo_estimado: Minutos estimados (opcional)
    """

    ticket_id: str
    atribuido_por_id: str
    usuarios_ids: tuple = field(default_factory=tuple)
    usuario_id: str = ""
    lider_id: Optional[str] = None
    tempo_estimado: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "ticket_id": self.ticket_id,
            "atribuido_por_id": self.atribuido_por_id,
            "usuarios_ids": list(self.usuarios_ids),
            "usuario_id": self.usuario_id,
            "lider_id": self.lider_id,
            "tempo_estimado": self.tempo_estimado,
        }


@dataclass(frozen=True)
class AlterarStatusInputDTO:
    """
    DTO de entrada para alterar status.

    Attributes:
        ticket_id: ID do ticket
        status: Novo status (ouvert, en_cours, en_attente, resolu, cloture)
        alterado_por_id: ID de quem está alterando
    """

    ticket_id: str
    status: str
    alterado_por_id: str

    def to_dict(self) -> dict:
        return {
            "ticket_id": self.ticket_id,
            "status": self.status,
            "alterado_por_id": self.alterado_por_id,
        }


@dataclass(frozen=True)
class ValidarTicketInputDTO:
    """DTO de entrada para validar a resolução de um ticket."""

    ticket_id: str
    validador_id: str

    def to_dict(self) -> dict:
        return {"ticket_id": self.ticket_id, "validador_id": self.validador_id}


@dataclass(frozen=True)
class FecharTicketInputDTO:
    """
    DTO de entrada para fechar ticket.

    Attributes:
        ticket_id: ID do ticket
        fechado_por_id: ID de quem está fechando
    """

    ticket_id: str
    fechado_por_id: str

    def to_dict(self) -> dict:
        return {
            "ticket_id": self.ticket_id,
            "fechado_por_id": self.fechado_por_id,
        }


@dataclass(frozen=True)
class AdicionarComentarioInputDTO:
    """DTO de entrada para adicionar comentário."""

    ticket_id: str
    usuario_id: str
    comentario: str
    interno: bool = False

    def to_dict(self) -> dict:
        return {
            "ticket_id": self.ticket_id,
            "usuario_id": self.usuario_id,
            "comentario": self.comentario,
            "interno": self.interno,
        }


@dataclass(frozen=True)
class AtualizarComentarioInputDTO:
    """DTO de entrada para editar comentário."""

    ticket_id: str
    comentario_id: str
    usuario_id: str
    comentario: str

    def to_dict(self) -> dict:
        return {
            "ticket_id": self.ticket_id,
            "comentario_id": self.comentario_id,
            "usuario_id": self.usuario_id,
            "comentario": self.comentario,
        }


# =============================================================================
# OUTPUT DTOs (Saída)
# =============================================================================

@dataclass
class TicketOutputDTO:
    """
    DTO de saída completo com dados do ticket.

    Usado para resposta detalhada de um único ticket, incluindo o
    conjunto de responsáveis e o líder.
    """

    id: str
    codigo: str
    titulo: str
    descricao: str
    categoria: str
    origem: str
    status: str
    prioridade: str
    criador_id: str
    solicitante_id: Optional[str]
    solicitante_nome: str
    solicitante_departamento: str
    filial_id: Optional[str]
    software_id: Optional[str]
    pai_id: Optional[str]
    atribuido_a_id: Optional[str]
    tempo_estimado: Optional[int]
    tempo_real: Optional[int]
    validado_por_id: Optional[str]
    validado_em: Optional[datetime]
    criado_em: datetime
    atualizado_em: datetime
    fechado_em: Optional[datetime]
    esta_atrasado: bool
    responsaveis_ids: List[str] = field(default_factory=list)
    lider_id: Optional[str] = None

    @classmethod
    def from_entity(
        cls,
        entity: TicketEntity,
        responsaveis: Sequence[ResponsavelTicket] = (),
    ) -> "TicketOutputDTO":
        """
        Factory method para converter entidade em DTO.

        Args:
            entity: Entidade TicketEntity
            responsaveis: Vínculos de atribuição do ticket

        Returns:
            DTO com dados da entidade
        """
        lider = next((r.usuario_id for r in responsaveis if r.eh_lider), None)
        return cls(
            id=entity.id,
            codigo=entity.codigo,
            titulo=entity.titulo,
            descricao=entity.descricao,
            categoria=entity.categoria,
            origem=entity.origem,
            status=entity.status.value,
            prioridade=entity.prioridade.value,
            criador_id=entity.criador_id,
            solicitante_id=entity.solicitante_id,
            solicitante_nome=entity.solicitante_nome,
            solicitante_departamento=entity.solicitante_departamento,
            filial_id=entity.filial_id,
            software_id=entity.software_id,
            pai_id=entity.pai_id,
            atribuido_a_id=entity.atribuido_a_id,
            tempo_estimado=entity.tempo_estimado,
            tempo_real=entity.tempo_real,
            validado_por_id=entity.validado_por_id,
            validado_em=entity.validado_em,
            criado_em=entity.criado_em,
            atualizado_em=entity.atualizado_em,
            fechado_em=entity.fechado_em,
            esta_atrasado=entity.esta_atrasado,
            responsaveis_ids=[r.usuario_id for r in responsaveis],
            lider_id=lider,
        )

    def to_dict(self) -> dict:
        """Converte para dicionário (serialização JSON)."""
        def _iso(valor: Optional[datetime]) -> Optional[str]:
            return valor.isoformat() if valor else None

        return {
            "id": self.id,
            "codigo": self.codigo,
            "titulo": self.titulo,
            "descricao": self.descricao,
            "categoria": self.categoria,
            "origem": self.origem,
            "status": self.status,
            "prioridade": self.prioridade,
            "criador_id": self.criador_id,
            "solicitante_id": self.solicitante_id,
            "solicitante_nome": self.solicitante_nome,
            "solicitante_departamento": self.solicitante_departamento,
            "filial_id": self.filial_id,
            "software_id": self.software_id,
            "pai_id": self.pai_id,
            "atribuido_a_id": self.atribuido_a_id,
            "tempo_estimado": self.tempo_estimado,
            "tempo_real": self.tempo_real,
            "validado_por_id": self.validado_por_id,
            "validado_em": _iso(self.validado_em),
            "criado_em": self.criado_em.isoformat(),
            "atualizado_em": self.atualizado_em.isoformat(),
            "fechado_em": _iso(self.fechado_em),
            "esta_atrasado": self.esta_atrasado,
            "responsaveis_ids": list(self.responsaveis_ids),
            "lider_id": self.lider_id,
        }


@dataclass
class TicketListItemDTO:
    """
    DTO otimizado para listagens de tickets.

    Contém apenas campos necessários para exibição em lista.
    """

    id: str
    codigo: str
    titulo: str
    status: str
    prioridade: str
    categoria: str
    criado_em: datetime
    atribuido_a_id: Optional[str] = None

    @classmethod
    def from_entity(cls, entity: TicketEntity) -> "TicketListItemDTO":
        return cls(
            id=entity.id,
            codigo=entity.codigo,
            titulo=entity.titulo,
            status=entity.status.value,
            prioridade=entity.prioridade.value,
            categoria=entity.categoria,
            criado_em=entity.criado_em,
            atribuido_a_id=entity.atribuido_a_id,
        )

    def to_dict(self) -> dict:
        """Converte para dicionário."""
        return {
            "id": self.id,
            "codigo": self.codigo,
            "titulo": self.titulo,
            "status": self.status,
            "prioridade": self.prioridade,
            "categoria": self.categoria,
            "criado_em": self.criado_em.isoformat(),
            "atribuido_a_id": self.atribuido_a_id,
        }


@dataclass
class ComentarioOutputDTO:
    """DTO de saída de comentário."""

    id: str
    ticket_id: str
    usuario_id: str
    comentario: str
    interno: bool
    criado_em: datetime
    atualizado_em: datetime

    @classmethod
    def from_entity(cls, entity: ComentarioEntity) -> "ComentarioOutputDTO":
        return cls(
            id=entity.id,
            ticket_id=entity.ticket_id,
            usuario_id=entity.usuario_id,
            comentario=entity.comentario,
            interno=entity.interno,
            criado_em=entity.criado_em,
            atualizado_em=entity.atualizado_em,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "ticket_id": self.ticket_id,
            "usuario_id": self.usuario_id,
            "comentario": self.comentario,
            "interno": self.interno,
            "criado_em": self.criado_em.isoformat(),
            "atualizado_em": self.atualizado_em.isoformat(),
        }


@dataclass
class HistoricoOutputDTO:
    """DTO de saída de entrada de histórico."""

    id: str
    ticket_id: str
    usuario_id: str
    acao: str
    campo: str
    valor_antigo: str
    valor_novo: str
    descricao: str
    criado_em: datetime

    @classmethod
    def from_entity(cls, entry: HistoricoTicketEntry) -> "HistoricoOutputDTO":
        return cls(
            id=entry.id,
            ticket_id=entry.ticket_id,
            usuario_id=entry.usuario_id,
            acao=entry.acao,
            campo=entry.campo,
            valor_antigo=entry.valor_antigo,
            valor_novo=entry.valor_novo,
            descricao=entry.descricao,
            criado_em=entry.criado_em,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "ticket_id": self.ticket_id,
            "usuario_id": self.usuario_id,
            "acao": self.acao,
            "campo": self.campo,
            "valor_antigo": self.valor_antigo,
            "valor_novo": self.valor_novo,
            "descricao": self.descricao,
            "criado_em": self.criado_em.isoformat(),
        }


# =============================================================================
# QUERY DTOs (Filtros de Busca)
# =============================================================================

@dataclass(frozen=True)
class ListarTicketsQueryDTO:
    """
    DTO para parâmetros de busca/filtro de tickets.

    Attributes:
        status: Filtrar por status (opcional)
        prioridade: Filtrar por prioridade (opcional)
        categoria: Filtrar por slug de categoria (opcional)
        origem: Filtrar por origem (opcional)
        filial_id: Filtrar por filial (opcional)
        responsavel_id: Filtrar por responsável (opcional)
        criador_id: Filtrar por criador (opcional)
        pagina: Número da página (1-indexed)
        por_pagina: Itens por página
    """

    status: Optional[str] = None
    prioridade: Optional[str] = None
    categoria: Optional[str] = None
    origem: Optional[str] = None
    filial_id: Optional[str] = None
    responsavel_id: Optional[str] = None
    criador_id: Optional[str] = None
    pagina: int = 1
    por_pagina: int = 20

    @property
    def offset(self) -> int:
        return (max(self.pagina, 1) - 1) * self.por_pagina

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "prioridade": self.prioridade,
            "categoria": self.categoria,
            "origem": self.origem,
            "filial_id": self.filial_id,
            "responsavel_id": self.responsavel_id,
            "criador_id": self.criador_id,
            "pagina": self.pagina,
            "por_pagina": self.por_pagina,
        }


@dataclass
class PaginatedResultDTO:
    """
    DTO para resultados paginados.

    Attributes:
        items: Lista de itens da página atual
        total: Total de itens (sem paginação)
        pagina: Página atual
        por_pagina: Itens por página
    """

    items: list
    total: int
    pagina: int
    por_pagina: int

    @property
    def total_paginas(self) -> int:
        """Calcula total de páginas."""
        if self.por_pagina <= 0 or self.total == 0:
            return 0
        return (self.total + self.por_pagina - 1) // self.por_pagina

    @property
    def tem_proxima(self) -> bool:
        return self.pagina < self.total_paginas

    @property
    def tem_anterior(self) -> bool:
        return self.pagina > 1

    def to_dict(self) -> dict:
        return {
            "items": [item.to_dict() for item in self.items],
            "total": self.total,
            "pagina": self.pagina,
            "por_pagina": self.por_pagina,
            "total_paginas": self.total_paginas,
            "tem_proxima": self.tem_proxima,
            "tem_anterior": self.tem_anterior,
        }
