"""
Estrutura Organizacional - dados de referência (somente leitura).

Usuários, departamentos, filiais e categorias de ticket consultados
pelo ciclo de vida de tickets.
"""

from .entities import (
    CategoriaTicketEntity,
    DepartamentoEntity,
    FilialEntity,
    UsuarioEntity,
)
from .diretorio import DiretorioOrganizacional

__all__ = [
    "CategoriaTicketEntity",
    "DepartamentoEntity",
    "FilialEntity",
    "UsuarioEntity",
    "DiretorioOrganizacional",
]
