"""
Repository Base - Implementação base de repositórios com Django ORM.

Fornece funcionalidades comuns para todos os repositórios:
- CRUD básico (upsert por id)
- Tradução de erros de banco para RepositoryError
- Ordenação padrão
- Otimização de queries (select_related)

Princípios:
- Repositórios são stateless
- Não contêm lógica de negócio
- Apenas persistência e queries
"""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar
import logging

from django.db import DatabaseError, models
from django.db.models import QuerySet

from src.core.shared.exceptions import RepositoryError

logger = logging.getLogger(__name__)

# Type variables
T = TypeVar("T")  # Entity type
M = TypeVar("M", bound=models.Model)  # Model type


@contextmanager
def erros_de_banco(operacao: str):
    """
    Converte DatabaseError em RepositoryError.

    Example:
        with erros_de_banco("salvar ticket"):
            TicketModel.objects.update_or_create(...)
    """
    try:
        yield
    except DatabaseError as e:
        logger.error(f"Erro de banco ao {operacao}: {e}")
        raise RepositoryError(f"Erro de banco ao {operacao}: {e}") from e


class BaseRepository(ABC, Generic[T, M]):
    """
    Classe base abstrata para repositórios Django.

    Fornece implementação padrão para operações comuns,
    permitindo que repositórios específicos sobrescrevam
    apenas o necessário.

    Type Parameters:
        T: Tipo da entidade de domínio
        M: Tipo do Model Django

    Example:
        class DjangoAtrasoRepository(BaseRepository[AtrasoEntity, AtrasoModel]):
            model_class = AtrasoModel

            def to_entity(self, model):
                return AtrasoMapper.to_entity(model)

            def to_model(self, entity):
                return AtrasoMapper.to_model(entity)
    """

    # Classe do model Django (definir na subclasse)
    model_class: Type[M]

    # Campos para select_related (otimização N+1)
    select_related_fields: List[str] = []

    # Campo padrão de ordenação
    default_order_field: str = "-criado_em"

    @abstractmethod
    def to_entity(self, model: M) -> T:
        """Converte Model Django para Entity de domínio."""
        raise NotImplementedError

    @abstractmethod
    def to_model(self, entity: T) -> M:
        """Converte Entity de domínio para Model Django (não salvo)."""
        raise NotImplementedError

    @property
    def _nome(self) -> str:
        return self.model_class.__name__

    def _get_base_queryset(self) -> QuerySet:
        """
        Retorna queryset base com otimizações.

        Subclasses com exclusão lógica sobrescrevem para filtrar
        registros excluídos.
        """
        qs = self.model_class.objects.all()

        if self.select_related_fields:
            qs = qs.select_related(*self.select_related_fields)

        return qs

    def _campos(self, model: M) -> Dict[str, Any]:
        return {
            f.attname: getattr(model, f.attname)
            for f in model._meta.concrete_fields
            if not f.primary_key
        }

    def save(self, entity: T) -> None:
        """
        Persiste entidade (create ou update).

        Usa update_or_create para atomicidade.
        """
        model = self.to_model(entity)
        with erros_de_banco(f"salvar {self._nome}"):
            self.model_class.objects.update_or_create(
                pk=model.pk,
                defaults=self._campos(model),
            )

        logger.debug(f"{self._nome} saved: {model.pk}")

    def get_by_id(self, entity_id: str) -> Optional[T]:
        """
        Busca entidade por ID.

        Returns:
            Entidade encontrada ou None
        """
        if not entity_id:
            return None
        with erros_de_banco(f"buscar {self._nome}"):
            model = self._get_base_queryset().filter(pk=entity_id).first()
        return self.to_entity(model) if model else None

    def delete(self, entity_id: str) -> None:
        """Remove entidade (não lança erro se não existir)."""
        with erros_de_banco(f"excluir {self._nome}"):
            deleted_count, _ = self.model_class.objects.filter(pk=entity_id).delete()

        if deleted_count:
            logger.info(f"{self._nome} deleted: {entity_id}")

    def exists(self, entity_id: str) -> bool:
        if not entity_id:
            return False
        with erros_de_banco(f"verificar {self._nome}"):
            return self._get_base_queryset().filter(pk=entity_id).exists()

    def _listar(self, qs: QuerySet, order_by: Optional[List[str]] = None) -> List[T]:
        """Materializa queryset como entidades na ordem indicada."""
        with erros_de_banco(f"listar {self._nome}"):
            models_ = list(qs.order_by(*(order_by or [self.default_order_field])))
        return [self.to_entity(m) for m in models_]
