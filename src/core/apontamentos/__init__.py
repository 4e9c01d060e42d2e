"""
Domínio de Apontamentos - tempo trabalhado em tickets e tarefas de projeto.
"""

from .entities import ApontamentoEntity, parse_data
from .use_cases import (
    RecalculoTempoReal,
    CriarApontamentoService,
    AtualizarApontamentoService,
    ExcluirApontamentoService,
    ValidarApontamentoService,
    ConsultaApontamentosService,
)

__all__ = [
    "ApontamentoEntity",
    "parse_data",
    "RecalculoTempoReal",
    "CriarApontamentoService",
    "AtualizarApontamentoService",
    "ExcluirApontamentoService",
    "ValidarApontamentoService",
    "ConsultaApontamentosService",
]
