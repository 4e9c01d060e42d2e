"""
Repositórios Django para persistência de Tickets.

Implementam as interfaces (Ports) definidas no Core.
São DRIVEN ADAPTERS - acionados pelo Core em resposta a operações.

Responsabilidades:
- Implementar os protocols de src/core/tickets/ports.py
- Mapear entities para models e vice-versa
- Executar queries no banco via ORM (filtros de escopo inclusive)

Princípios:
- Repository não contém lógica de negócio
- Usa Mapper para conversões
- Trata apenas persistência
"""

from typing import List, Optional, Tuple
import logging

from django.db.models import Q, QuerySet

from src.core.shared.escopo import EscopoConsulta
from src.core.tickets.dtos import ListarTicketsQueryDTO
from src.core.tickets.entities import (
    ComentarioEntity,
    HistoricoTicketEntry,
    ResponsavelTicket,
    TicketEntity,
    TicketStatus,
)
from src.core.tickets.ports import CODIGO_PATTERN

from ..shared.escopo import q_tickets
from ..shared.repository import BaseRepository, erros_de_banco
from .mappers import ComentarioMapper, HistoricoMapper, ResponsavelMapper, TicketMapper
from .models import (
    TicketComentarioModel,
    TicketHistoricoModel,
    TicketModel,
    TicketResponsavelModel,
)

logger = logging.getLogger(__name__)


class DjangoTicketRepository(BaseRepository[TicketEntity, TicketModel]):
    """
    Implementação Django do TicketRepository.

    Tickets excluídos logicamente ficam fora das buscas e listagens,
    mas continuam reservando o código.

    Example:
        repo = DjangoTicketRepository()
        repo.save(ticket_entity)
        ticket = repo.get_by_codigo("TKT-2025-0007")
    """

    model_class = TicketModel

    def to_entity(self, model):
        return TicketMapper.to_entity(model)

    def to_model(self, entity):
        return TicketMapper.to_model(entity)

    def _get_base_queryset(self) -> QuerySet:
        return super()._get_base_queryset().filter(excluido_em__isnull=True)

    def get_by_codigo(self, codigo: str) -> Optional[TicketEntity]:
        if not codigo:
            return None
        with erros_de_banco("buscar ticket por código"):
            model = self._get_base_queryset().filter(codigo=codigo).first()
        return self.to_entity(model) if model else None

    def codigo_existe(self, codigo: str) -> bool:
        with erros_de_banco("verificar código de ticket"):
            return TicketModel.objects.filter(codigo=codigo).exists()

    def proximo_numero_sequencia(self, ano: int) -> int:
        """
        Maior sequência usada no ano + 1.

        Considera também tickets excluídos.
        """
        with erros_de_banco("calcular sequência de ticket"):
            codigos = list(
                TicketModel.objects
                .filter(codigo__startswith=f"TKT-{ano}-")
                .values_list('codigo', flat=True)
            )

        maior = 0
        for codigo in codigos:
            match = CODIGO_PATTERN.match(codigo)
            if match and int(match.group(1)) == ano:
                maior = max(maior, int(match.group(2)))
        return maior + 1

    def listar(
        self,
        query: ListarTicketsQueryDTO,
        escopo: Optional[EscopoConsulta] = None,
    ) -> Tuple[List[TicketEntity], int]:
        queryset = self._get_base_queryset().filter(q_tickets(escopo))
        queryset = self._aplicar_filtros(queryset, query)

        with erros_de_banco("listar tickets"):
            total = queryset.count()
            models_ = list(
                queryset.order_by('-criado_em')[query.offset:query.offset + query.por_pagina]
            )

        return TicketMapper.to_entity_list(models_), total

    def listar_paginado(self, offset: int, limite: int) -> List[TicketEntity]:
        with erros_de_banco("paginar tickets"):
            models_ = list(self._get_base_queryset().order_by('criado_em', 'id')[offset:offset + limite])
        return TicketMapper.to_entity_list(models_)

    @staticmethod
    def _aplicar_filtros(queryset: QuerySet, query: ListarTicketsQueryDTO) -> QuerySet:
        if query.status:
            queryset = queryset.filter(status=TicketStatus.from_string(query.status).value)

        if query.prioridade:
            queryset = queryset.filter(prioridade=query.prioridade)

        if query.categoria:
            queryset = queryset.filter(categoria=query.categoria)

        if query.origem:
            queryset = queryset.filter(origem=query.origem)

        if query.filial_id:
            queryset = queryset.filter(filial_id=query.filial_id)

        if query.criador_id:
            queryset = queryset.filter(criador_id=query.criador_id)

        if query.responsavel_id:
            vinculados = (
                TicketResponsavelModel.objects
                .filter(usuario_id=query.responsavel_id)
                .values('ticket_id')
            )
            queryset = queryset.filter(
                Q(atribuido_a_id=query.responsavel_id) | Q(id__in=vinculados)
            )

        return queryset


class DjangoResponsavelRepository:
    """Vínculos de atribuição (substituição integral por ticket)."""

    def substituir(self, ticket_id: str, responsaveis: List[ResponsavelTicket]) -> None:
        with erros_de_banco("substituir responsáveis"):
            TicketResponsavelModel.objects.filter(ticket_id=ticket_id).delete()
            TicketResponsavelModel.objects.bulk_create(
                [ResponsavelMapper.to_model(r) for r in responsaveis]
            )
        logger.debug(f"Responsáveis do ticket {ticket_id}: {len(responsaveis)}")

    def listar_por_ticket(self, ticket_id: str) -> List[ResponsavelTicket]:
        with erros_de_banco("listar responsáveis"):
            models_ = list(TicketResponsavelModel.objects.filter(ticket_id=ticket_id).order_by('id'))
        return [ResponsavelMapper.to_entity(m) for m in models_]


class DjangoComentarioRepository(BaseRepository[ComentarioEntity, TicketComentarioModel]):
    model_class = TicketComentarioModel
    default_order_field = 'criado_em'

    def to_entity(self, model):
        return ComentarioMapper.to_entity(model)

    def to_model(self, entity):
        return ComentarioMapper.to_model(entity)

    def _get_base_queryset(self) -> QuerySet:
        return super()._get_base_queryset().filter(excluido_em__isnull=True)

    def listar_por_ticket(self, ticket_id: str) -> List[ComentarioEntity]:
        return self._listar(self._get_base_queryset().filter(ticket_id=ticket_id))


class DjangoHistoricoRepository:
    """Histórico append-only (ordem de inserção pela PK)."""

    def adicionar(self, entry: HistoricoTicketEntry) -> None:
        with erros_de_banco("registrar histórico"):
            HistoricoMapper.to_model(entry).save(force_insert=True)

    def listar_por_ticket(self, ticket_id: str) -> List[HistoricoTicketEntry]:
        with erros_de_banco("listar histórico"):
            models_ = list(TicketHistoricoModel.objects.filter(ticket_id=ticket_id).order_by('id'))
        return [HistoricoMapper.to_entity(m) for m in models_]
