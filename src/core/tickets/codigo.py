"""
Geração de código de ticket (TKT-<ano>-<seq4>).

Parte da sequência sugerida pelo repositório e incrementa a cada
colisão. Colisões além do limite são um erro fatal explícito.
"""

import logging

from src.core.shared.exceptions import CodeGenerationError

from .ports import TicketRepository

logger = logging.getLogger(__name__)


MAX_COLISOES = 50


def formatar_codigo(ano: int, sequencia: int) -> str:
    return f"TKT-{ano}-{sequencia:04d}"


class GeradorCodigoTicket:
    """
    Gera códigos únicos de ticket.

    Attributes:
        ticket_repo: Repositório (sequência sugerida e verificação de existência)
        max_colisoes: Colisões toleradas antes de falhar

    Example:
        gerador = GeradorCodigoTicket(ticket_repo)
        codigo = gerador.gerar(2025)  # "TKT-2025-0007"
    """

    def __init__(self, ticket_repo: TicketRepository, max_colisoes: int = MAX_COLISOES):
        self.ticket_repo = ticket_repo
        self.max_colisoes = max_colisoes

    def gerar(self, ano: int) -> str:
        """
        Raises:
            CodeGenerationError: Limite de colisões excedido
        """
        sequencia = self.ticket_repo.proximo_numero_sequencia(ano)
        sugerida = sequencia

        for _ in range(self.max_colisoes + 1):
            codigo = formatar_codigo(ano, sequencia)
            if not self.ticket_repo.codigo_existe(codigo):
                if sequencia != sugerida:
                    logger.info(f"Código {codigo} gerado após {sequencia - sugerida} colisão(ões)")
                return codigo
            sequencia += 1

        raise CodeGenerationError(
            f"Impossível gerar código único após {self.max_colisoes} colisões "
            f"(último testado: {codigo}, sequência sugerida: {sugerida})"
        )
