"""
Domínio de Tickets - Gerenciamento de Incidentes.

Este módulo contém toda a lógica de negócio relacionada a tickets
de suporte técnico, incluindo:
- Entidades (TicketEntity, TicketStatus, TicketPriority, ComentarioEntity)
- Use Cases (ciclo de vida, comentários, consultas)
- Domain Events (TicketCriado, TicketAtribuido, TicketStatusAlterado...)
- DTOs (Input/Output Data Transfer Objects)
- Ports (Interfaces para repositórios)

Características do Domínio:
- Código TKT-<ano>-<seq> gerado com tolerância a colisões
- Responsáveis múltiplos com líder opcional
- Histórico append-only gravado fora da transação
- SLA e notificações como efeitos colaterais pós-commit
"""

from .entities import (
    TicketEntity,
    TicketStatus,
    TicketPriority,
    ComentarioEntity,
    ResponsavelTicket,
    AcaoHistorico,
    HistoricoTicketEntry,
)
from .events import (
    TicketCriadoEvent,
    TicketAtualizadoEvent,
    TicketAtribuidoEvent,
    TicketStatusAlteradoEvent,
    TicketValidadoEvent,
    TicketExcluidoEvent,
    TicketComentarioAdicionadoEvent,
)
from .dtos import (
    CriarTicketInputDTO,
    AtualizarTicketInputDTO,
    AtribuirTicketInputDTO,
    AlterarStatusInputDTO,
    ValidarTicketInputDTO,
    FecharTicketInputDTO,
    AdicionarComentarioInputDTO,
    AtualizarComentarioInputDTO,
    TicketOutputDTO,
    TicketListItemDTO,
    ComentarioOutputDTO,
    HistoricoOutputDTO,
    ListarTicketsQueryDTO,
    PaginatedResultDTO,
)
from .ports import (
    TicketRepository,
    ResponsavelRepository,
    ComentarioRepository,
    HistoricoRepository,
)
from .codigo import GeradorCodigoTicket
from .historico import EscritorHistorico
from .use_cases import (
    CriarTicketService,
    AtualizarTicketService,
    AtribuirTicketService,
    AlterarStatusTicketService,
    ValidarTicketService,
    FecharTicketService,
    ExcluirTicketService,
    AdicionarComentarioService,
    AtualizarComentarioService,
    ExcluirComentarioService,
    ListarComentariosService,
    ConsultaTicketsService,
)

__all__ = [
    # Entities
    "TicketEntity",
    "TicketStatus",
    "TicketPriority",
    "ComentarioEntity",
    "ResponsavelTicket",
    "AcaoHistorico",
    "HistoricoTicketEntry",
    # Events
    "TicketCriadoEvent",
    "TicketAtualizadoEvent",
    "TicketAtribuidoEvent",
    "TicketStatusAlteradoEvent",
    "TicketValidadoEvent",
    "TicketExcluidoEvent",
    "TicketComentarioAdicionadoEvent",
    # DTOs
    "CriarTicketInputDTO",
    "AtualizarTicketInputDTO",
    "AtribuirTicketInputDTO",
    "AlterarStatusInputDTO",
    "ValidarTicketInputDTO",
    "FecharTicketInputDTO",
    "AdicionarComentarioInputDTO",
    "AtualizarComentarioInputDTO",
    "TicketOutputDTO",
    "TicketListItemDTO",
    "ComentarioOutputDTO",
    "HistoricoOutputDTO",
    "ListarTicketsQueryDTO",
    "PaginatedResultDTO",
    # Ports
    "TicketRepository",
    "ResponsavelRepository",
    "ComentarioRepository",
    "HistoricoRepository",
    # Services
    "GeradorCodigoTicket",
    "EscritorHistorico",
    # Use Cases
    "CriarTicketService",
    "AtualizarTicketService",
    "AtribuirTicketService",
    "AlterarStatusTicketService",
    "ValidarTicketService",
    "FecharTicketService",
    "ExcluirTicketService",
    "AdicionarComentarioService",
    "AtualizarComentarioService",
    "ExcluirComentarioService",
    "ListarComentariosService",
    "ConsultaTicketsService",
]
