"""
Domínio de Atrasos - derivação, justificativa e reconciliação.
"""

from .entities import (
    AtrasoEntity,
    AtrasoStatus,
    JustificativaEntity,
    JustificativaStatus,
    calcular_atraso,
)
from .derivacao import ReconciliadorAtrasos
from .agendador import AgendadorReconciliacao
from .use_cases import (
    CriarJustificativaService,
    AtualizarJustificativaService,
    ValidarJustificativaService,
    RejeitarJustificativaService,
    ExcluirJustificativaService,
    ExcluirAtrasoService,
    ConsultaAtrasosService,
    ConsultaJustificativasService,
)

__all__ = [
    "AtrasoEntity",
    "AtrasoStatus",
    "JustificativaEntity",
    "JustificativaStatus",
    "calcular_atraso",
    "ReconciliadorAtrasos",
    "AgendadorReconciliacao",
    "CriarJustificativaService",
    "AtualizarJustificativaService",
    "ValidarJustificativaService",
    "RejeitarJustificativaService",
    "ExcluirJustificativaService",
    "ExcluirAtrasoService",
    "ConsultaAtrasosService",
    "ConsultaJustificativasService",
]
