"""
Repositório Django de Apontamentos.

Somas e validação em massa são feitas no banco (aggregate/update).
Apontamentos excluídos logicamente nunca são retornados.
"""

from datetime import date, datetime
from typing import List, Optional
import logging

from django.db.models import QuerySet, Sum

from src.core.apontamentos.entities import ApontamentoEntity
from src.core.shared.escopo import EscopoConsulta

from ..shared.escopo import q_apontamentos
from ..shared.repository import BaseRepository, erros_de_banco
from .mappers import ApontamentoMapper
from .models import ApontamentoModel

logger = logging.getLogger(__name__)

ORDEM_PADRAO = ['-data', '-criado_em']


class DjangoApontamentoRepository(BaseRepository[ApontamentoEntity, ApontamentoModel]):
    model_class = ApontamentoModel

    def to_entity(self, model):
        return ApontamentoMapper.to_entity(model)

    def to_model(self, entity):
        return ApontamentoMapper.to_model(entity)

    def _get_base_queryset(self) -> QuerySet:
        return super()._get_base_queryset().filter(excluido_em__isnull=True)

    def listar(self, escopo: Optional[EscopoConsulta] = None) -> List[ApontamentoEntity]:
        qs = self._get_base_queryset().filter(q_apontamentos(escopo))
        return self._listar(qs, ORDEM_PADRAO)

    def listar_por_ticket(self, ticket_id: str) -> List[ApontamentoEntity]:
        return self._listar(self._get_base_queryset().filter(ticket_id=ticket_id), ORDEM_PADRAO)

    def listar_por_usuario(self, usuario_id: str) -> List[ApontamentoEntity]:
        return self._listar(self._get_base_queryset().filter(usuario_id=usuario_id), ORDEM_PADRAO)

    def listar_por_periodo(self, usuario_id: str, inicio: date, fim: date) -> List[ApontamentoEntity]:
        qs = self._get_base_queryset().filter(usuario_id=usuario_id, data__range=(inicio, fim))
        return self._listar(qs, ORDEM_PADRAO)

    def listar_por_validacao(
        self,
        validado: bool,
        escopo: Optional[EscopoConsulta] = None,
    ) -> List[ApontamentoEntity]:
        qs = self._get_base_queryset().filter(q_apontamentos(escopo), validado=validado)
        return self._listar(qs, ORDEM_PADRAO)

    def _somar(self, **filtros) -> int:
        with erros_de_banco("somar apontamentos"):
            total = self._get_base_queryset().filter(**filtros).aggregate(total=Sum('tempo_gasto'))['total']
        return total or 0

    def somar_por_ticket(self, ticket_id: str) -> int:
        return self._somar(ticket_id=ticket_id)

    def somar_por_usuario(self, usuario_id: str) -> int:
        return self._somar(usuario_id=usuario_id)

    def validar_por_ticket(self, ticket_id: str, validador_id: str, agora: datetime) -> int:
        with erros_de_banco("validar apontamentos do ticket"):
            alterados = (
                self._get_base_queryset()
                .filter(ticket_id=ticket_id, validado=False)
                .update(
                    validado=True,
                    validado_por_id=validador_id,
                    validado_em=agora,
                    atualizado_em=agora,
                )
            )
        logger.info(f"Apontamentos validados no ticket {ticket_id}: {alterados}")
        return alterados
