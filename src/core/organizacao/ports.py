"""
Ports (Interfaces) da Estrutura Organizacional.

Repositórios somente-leitura de usuários, departamentos, filiais e
categorias, com implementações em memória para testes.
"""

from typing import Dict, List, Optional, Protocol, runtime_checkable

from .entities import (
    CategoriaTicketEntity,
    DepartamentoEntity,
    FilialEntity,
    UsuarioEntity,
)


@runtime_checkable
class UsuarioRepository(Protocol):
    """Consulta de usuários."""

    def get_by_id(self, usuario_id: str) -> Optional[UsuarioEntity]:
        ...

    def list_ativos_por_departamentos(self, departamentos_ids: List[str]) -> List[UsuarioEntity]:
        """Usuários ativos pertencentes a qualquer dos departamentos."""
        ...


@runtime_checkable
class DepartamentoRepository(Protocol):
    """Consulta de departamentos."""

    def get_by_id(self, departamento_id: str) -> Optional[DepartamentoEntity]:
        ...

    def list_ti_ativos_por_filial(self, filial_id: str) -> List[DepartamentoEntity]:
        """Departamentos de TI ativos de uma filial."""
        ...


@runtime_checkable
class FilialRepository(Protocol):
    """Consulta de filiais."""

    def get_by_id(self, filial_id: str) -> Optional[FilialEntity]:
        ...

    def get_fornecedor_software(self) -> Optional[FilialEntity]:
        """Retorna a filial fornecedora de software, se existir."""
        ...


@runtime_checkable
class CategoriaRepository(Protocol):
    """Consulta de categorias de ticket."""

    def get_by_slug(self, slug: str) -> Optional[CategoriaTicketEntity]:
        ...


# =============================================================================
# Implementações em memória (testes)
# =============================================================================

class InMemoryUsuarioRepository:
    """Repositório de usuários em memória."""

    def __init__(self):
        self._usuarios: Dict[str, UsuarioEntity] = {}

    def save(self, usuario: UsuarioEntity) -> None:
        self._usuarios[usuario.id] = usuario

    def get_by_id(self, usuario_id: str) -> Optional[UsuarioEntity]:
        return self._usuarios.get(usuario_id)

    def list_ativos_por_departamentos(self, departamentos_ids: List[str]) -> List[UsuarioEntity]:
        alvo = set(departamentos_ids)
        return [
            u for u in self._usuarios.values()
            if u.ativo and u.departamento_id in alvo
        ]

    def clear(self) -> None:
        self._usuarios.clear()


class InMemoryDepartamentoRepository:
    """Repositório de departamentos em memória."""

    def __init__(self):
        self._departamentos: Dict[str, DepartamentoEntity] = {}

    def save(self, departamento: DepartamentoEntity) -> None:
        self._departamentos[departamento.id] = departamento

    def get_by_id(self, departamento_id: str) -> Optional[DepartamentoEntity]:
        return self._departamentos.get(departamento_id)

    def list_ti_ativos_por_filial(self, filial_id: str) -> List[DepartamentoEntity]:
        return [
            d for d in self._departamentos.values()
            if d.filial_id == filial_id and d.eh_ti and d.ativo
        ]


class InMemoryFilialRepository:
    """Repositório de filiais em memória."""

    def __init__(self):
        self._filiais: Dict[str, FilialEntity] = {}

    def save(self, filial: FilialEntity) -> None:
        self._filiais[filial.id] = filial

    def get_by_id(self, filial_id: str) -> Optional[FilialEntity]:
        return self._filiais.get(filial_id)

    def get_fornecedor_software(self) -> Optional[FilialEntity]:
        for filial in self._filiais.values():
            if filial.eh_fornecedor_software:
                return filial
        return None


class InMemoryCategoriaRepository:
    """Repositório de categorias em memória."""

    def __init__(self):
        self._categorias: Dict[str, CategoriaTicketEntity] = {}

    def save(self, categoria: CategoriaTicketEntity) -> None:
        self._categorias[categoria.slug] = categoria

    def get_by_slug(self, slug: str) -> Optional[CategoriaTicketEntity]:
        return self._categorias.get(slug)
