"""
Entidades da Estrutura Organizacional.

Dados de referência consumidos pelo ciclo de vida de tickets:
usuários, departamentos, filiais e categorias de ticket. O core
apenas lê estas entidades; o cadastro pertence a outros serviços.
"""

from dataclasses import dataclass, field
from typing import Optional
import uuid


@dataclass
class FilialEntity:
    """
    Filial (unidade organizacional de topo).

    Attributes:
        eh_fornecedor_software: Filial fornecedora de software/TI.
            Apenas seus departamentos de TI têm privilégios de resolução.
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    nome: str = ""
    eh_fornecedor_software: bool = False
    ativo: bool = True


@dataclass
class DepartamentoEntity:
    """Departamento de uma filial, opcionalmente marcado como TI."""

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    nome: str = ""
    filial_id: Optional[str] = None
    eh_ti: bool = False
    ativo: bool = True


@dataclass
class UsuarioEntity:
    """
    Usuário do sistema.

    Attributes:
        filial_id: Filial direta do usuário
        departamento_id: Departamento do usuário
        papel_filial_id: Filial associada ao papel (role) do usuário
    """

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    username: str = ""
    nome: str = ""
    sobrenome: str = ""
    email: str = ""
    filial_id: Optional[str] = None
    departamento_id: Optional[str] = None
    papel_filial_id: Optional[str] = None
    ativo: bool = True

    @property
    def nome_exibicao(self) -> str:
        """Nome completo, ou username quando nome e sobrenome estão vazios."""
        completo = f"{self.nome} {self.sobrenome}".strip()
        return completo or self.username


@dataclass
class CategoriaTicketEntity:
    """Categoria de ticket identificada por slug (ex: incident, demande)."""

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    slug: str = ""
    nome: str = ""
    ativo: bool = True
