"""
Repositórios Django de SLA.
"""

from typing import Optional
import logging

from django.db.models import Q

from src.core.sla.entities import SLAEntity, TicketSLAEntity

from ..shared.repository import BaseRepository, erros_de_banco
from .mappers import SLAMapper, TicketSLAMapper
from .models import SLAModel, TicketSLAModel

logger = logging.getLogger(__name__)


class DjangoSLARepository(BaseRepository[SLAEntity, SLAModel]):
    model_class = SLAModel
    default_order_field = 'nome'

    def to_entity(self, model):
        return SLAMapper.to_entity(model)

    def to_model(self, entity):
        return SLAMapper.to_model(entity)

    def buscar_ativo(self, categoria: str, prioridade: Optional[str]) -> Optional[SLAEntity]:
        """
        Busca regra ativa exata.

        prioridade=None busca a regra genérica (coluna nula ou vazia).
        """
        qs = SLAModel.objects.filter(ativo=True, categoria=categoria)
        if prioridade is None:
            qs = qs.filter(Q(prioridade__isnull=True) | Q(prioridade=''))
        else:
            qs = qs.filter(prioridade=prioridade)

        with erros_de_banco("buscar SLA"):
            model = qs.order_by('nome', 'id').first()
        return self.to_entity(model) if model else None


class DjangoTicketSLARepository(BaseRepository[TicketSLAEntity, TicketSLAModel]):
    """SLA por ticket (upsert pela chave ticket_id)."""

    model_class = TicketSLAModel
    default_order_field = 'prazo_alvo'

    def to_entity(self, model):
        return TicketSLAMapper.to_entity(model)

    def to_model(self, entity):
        return TicketSLAMapper.to_model(entity)

    def get_by_ticket(self, ticket_id: str) -> Optional[TicketSLAEntity]:
        with erros_de_banco("buscar SLA do ticket"):
            model = TicketSLAModel.objects.filter(ticket_id=ticket_id).first()
        return self.to_entity(model) if model else None

    def save(self, ticket_sla: TicketSLAEntity) -> None:
        model = self.to_model(ticket_sla)
        campos = self._campos(model)
        campos.pop('ticket_id')

        with erros_de_banco("salvar SLA do ticket"):
            atualizados = TicketSLAModel.objects.filter(ticket_id=model.ticket_id).update(**campos)
            if not atualizados:
                model.save(force_insert=True)

        logger.debug(f"SLA do ticket {ticket_sla.ticket_id}: {ticket_sla.status.value}")
