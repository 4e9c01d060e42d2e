"""
Repositórios Django de Atrasos e Justificativas.

Listagens de atrasos aplicam o `EscopoConsulta` como filtro do ORM
(ver ..shared.escopo).
"""

from typing import Dict, List, Optional
import logging

from django.db.models import Count, QuerySet

from src.core.atrasos.entities import (
    AtrasoEntity,
    AtrasoStatus,
    JustificativaEntity,
    JustificativaStatus,
)
from src.core.shared.escopo import EscopoConsulta

from ..shared.escopo import q_atrasos
from ..shared.repository import BaseRepository, erros_de_banco
from .mappers import AtrasoMapper, JustificativaMapper
from .models import AtrasoModel, JustificativaModel

logger = logging.getLogger(__name__)


class DjangoAtrasoRepository(BaseRepository[AtrasoEntity, AtrasoModel]):
    model_class = AtrasoModel
    default_order_field = '-detectado_em'

    def to_entity(self, model):
        return AtrasoMapper.to_entity(model)

    def to_model(self, entity):
        return AtrasoMapper.to_model(entity)

    def get_by_ticket(self, ticket_id: str) -> Optional[AtrasoEntity]:
        with erros_de_banco("buscar atraso por ticket"):
            model = AtrasoModel.objects.filter(ticket_id=ticket_id).first()
        return self.to_entity(model) if model else None

    def _visiveis(self, escopo: Optional[EscopoConsulta]) -> QuerySet:
        return self._get_base_queryset().filter(q_atrasos(escopo))

    def listar(self, escopo: Optional[EscopoConsulta] = None) -> List[AtrasoEntity]:
        return self._listar(self._visiveis(escopo))

    def listar_por_usuario(
        self,
        usuario_id: str,
        escopo: Optional[EscopoConsulta] = None,
    ) -> List[AtrasoEntity]:
        return self._listar(self._visiveis(escopo).filter(usuario_id=usuario_id))

    def listar_por_status(
        self,
        status: AtrasoStatus,
        escopo: Optional[EscopoConsulta] = None,
    ) -> List[AtrasoEntity]:
        return self._listar(self._visiveis(escopo).filter(status=status.value))

    def contar_por_status(self) -> Dict[str, int]:
        contagem = {status.value: 0 for status in AtrasoStatus}
        with erros_de_banco("contar atrasos"):
            linhas = AtrasoModel.objects.values('status').annotate(total=Count('id')).order_by()
            for linha in linhas:
                contagem[linha['status']] = linha['total']
        return contagem


class DjangoJustificativaRepository(BaseRepository[JustificativaEntity, JustificativaModel]):
    model_class = JustificativaModel

    def to_entity(self, model):
        return JustificativaMapper.to_entity(model)

    def to_model(self, entity):
        return JustificativaMapper.to_model(entity)

    def get_by_atraso(self, atraso_id: str) -> Optional[JustificativaEntity]:
        with erros_de_banco("buscar justificativa por atraso"):
            model = JustificativaModel.objects.filter(atraso_id=atraso_id).first()
        return self.to_entity(model) if model else None

    def listar_por_usuario(self, usuario_id: str) -> List[JustificativaEntity]:
        return self._listar(JustificativaModel.objects.filter(usuario_id=usuario_id))

    def listar_por_status(self, status: JustificativaStatus) -> List[JustificativaEntity]:
        return self._listar(JustificativaModel.objects.filter(status=status.value))

    def listar_todas(self) -> List[JustificativaEntity]:
        return self._listar(JustificativaModel.objects.all())
