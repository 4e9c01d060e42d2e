"""
Shared Domain Components.

Contém componentes compartilhados entre todos os domínios:
- Exceções de domínio
- Interfaces (Ports) transversais
- Base classes para Domain Events
- Escopo de consulta e política de acesso
"""

from .exceptions import (
    DomainException,
    ValidationError,
    EntityNotFoundError,
    AuthorizationError,
    BusinessRuleViolationError,
    RepositoryError,
    CodeGenerationError,
)
from .events import DomainEvent
from .interfaces import UnitOfWork, EventPublisher
from .escopo import EscopoConsulta
from .politicas import Acao, Ator, PoliticaAcesso

__all__ = [
    "DomainException",
    "ValidationError",
    "EntityNotFoundError",
    "AuthorizationError",
    "BusinessRuleViolationError",
    "RepositoryError",
    "CodeGenerationError",
    "DomainEvent",
    "UnitOfWork",
    "EventPublisher",
    "EscopoConsulta",
    "Acao",
    "Ator",
    "PoliticaAcesso",
]
