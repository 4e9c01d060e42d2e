"""
Repositórios Django da Estrutura Organizacional.

Implementam os ports somente-leitura de src/core/organizacao/ports.py.
O `save` herdado da base é usado por scripts de carga e testes.
"""

from typing import List, Optional
import logging

from src.core.organizacao.entities import (
    CategoriaTicketEntity,
    DepartamentoEntity,
    FilialEntity,
    UsuarioEntity,
)

from ..shared.repository import BaseRepository, erros_de_banco
from .mappers import CategoriaMapper, DepartamentoMapper, FilialMapper, UsuarioMapper
from .models import CategoriaTicketModel, DepartamentoModel, FilialModel, UsuarioModel

logger = logging.getLogger(__name__)


class DjangoUsuarioRepository(BaseRepository[UsuarioEntity, UsuarioModel]):
    model_class = UsuarioModel
    default_order_field = 'username'

    def to_entity(self, model):
        return UsuarioMapper.to_entity(model)

    def to_model(self, entity):
        return UsuarioMapper.to_model(entity)

    def list_ativos_por_departamentos(self, departamentos_ids: List[str]) -> List[UsuarioEntity]:
        if not departamentos_ids:
            return []
        qs = UsuarioModel.objects.filter(ativo=True, departamento_id__in=departamentos_ids)
        return self._listar(qs)


class DjangoDepartamentoRepository(BaseRepository[DepartamentoEntity, DepartamentoModel]):
    model_class = DepartamentoModel
    default_order_field = 'nome'

    def to_entity(self, model):
        return DepartamentoMapper.to_entity(model)

    def to_model(self, entity):
        return DepartamentoMapper.to_model(entity)

    def list_ti_ativos_por_filial(self, filial_id: str) -> List[DepartamentoEntity]:
        qs = DepartamentoModel.objects.filter(filial_id=filial_id, eh_ti=True, ativo=True)
        return self._listar(qs)


class DjangoFilialRepository(BaseRepository[FilialEntity, FilialModel]):
    model_class = FilialModel
    default_order_field = 'nome'

    def to_entity(self, model):
        return FilialMapper.to_entity(model)

    def to_model(self, entity):
        return FilialMapper.to_model(entity)

    def get_fornecedor_software(self) -> Optional[FilialEntity]:
        with erros_de_banco("buscar filial fornecedora"):
            model = FilialModel.objects.filter(eh_fornecedor_software=True).order_by('nome').first()
        return self.to_entity(model) if model else None


class DjangoCategoriaRepository(BaseRepository[CategoriaTicketEntity, CategoriaTicketModel]):
    model_class = CategoriaTicketModel
    default_order_field = 'nome'

    def to_entity(self, model):
        return CategoriaMapper.to_entity(model)

    def to_model(self, entity):
        return CategoriaMapper.to_model(entity)

    def get_by_slug(self, slug: str) -> Optional[CategoriaTicketEntity]:
        if not slug:
            return None
        with erros_de_banco("buscar categoria"):
            model = CategoriaTicketModel.objects.filter(slug=slug).first()
        return self.to_entity(model) if model else None
