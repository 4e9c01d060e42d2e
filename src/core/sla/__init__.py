"""
Domínio de SLA - prazos de atendimento aplicados a tickets.
"""

from .entities import SLAEntity, TicketSLAEntity, StatusSLA, UnidadeSLA
from .service import GestorSLA

__all__ = [
    "SLAEntity",
    "TicketSLAEntity",
    "StatusSLA",
    "UnidadeSLA",
    "GestorSLA",
]
