"""
Gestor de SLA - aplicação automática e atualização no fechamento.

Efeito colateral das operações de ticket: toda falha é registrada em
log e nunca interrompe a operação que disparou o cálculo.
"""

from datetime import datetime
from typing import Callable, Optional
import logging

from .entities import TicketSLAEntity
from .ports import SLARepository, TicketSLARepository

logger = logging.getLogger(__name__)


class GestorSLA:
    """
    Aplica e atualiza o SLA de tickets.

    Attributes:
        sla_repo: Regras de SLA
        ticket_sla_repo: SLAs aplicados
        relogio: Fonte de "agora" (injetável em testes)

    Example:
        gestor = GestorSLA(sla_repo, ticket_sla_repo)
        gestor.aplicar(ticket)
        ...
        gestor.registrar_conclusao(ticket.id)
    """

    def __init__(
        self,
        sla_repo: SLARepository,
        ticket_sla_repo: TicketSLARepository,
        relogio: Callable[[], datetime] = datetime.now,
    ):
        self.sla_repo = sla_repo
        self.ticket_sla_repo = ticket_sla_repo
        self.relogio = relogio

    def aplicar(self, ticket) -> Optional[TicketSLAEntity]:
        """
        Aplica a regra correspondente ao ticket, se houver.

        Busca primeiro por (categoria, prioridade) e depois por
        (categoria, qualquer prioridade). Não faz nada se o ticket já
        tem SLA.

        Returns:
            SLA aplicado, ou None
        """
        try:
            if self.ticket_sla_repo.get_by_ticket(ticket.id):
                return None

            prioridade = ticket.prioridade.value if ticket.prioridade else None
            sla = None
            if prioridade:
                sla = self.sla_repo.buscar_ativo(ticket.categoria, prioridade)
            if sla is None:
                sla = self.sla_repo.buscar_ativo(ticket.categoria, None)

            if sla is None:
                logger.info(
                    f"Nenhum SLA para ticket {ticket.id}: "
                    f"categoria={ticket.categoria}, prioridade={prioridade}"
                )
                return None

            ticket_sla = TicketSLAEntity.aplicar(
                ticket_id=ticket.id,
                sla=sla,
                criado_em=ticket.criado_em,
                agora=self.relogio(),
            )
            self.ticket_sla_repo.save(ticket_sla)

            logger.info(
                f"SLA '{sla.nome}' aplicado ao ticket {ticket.id} "
                f"(prazo: {ticket_sla.prazo_alvo.isoformat()}, status: {ticket_sla.status.value})"
            )
            return ticket_sla

        except Exception as e:
            logger.error(f"Erro ao aplicar SLA ao ticket {ticket.id}: {e}")
            return None

    def registrar_conclusao(self, ticket_id: str) -> Optional[TicketSLAEntity]:
        """
        Recalcula a situação do SLA na validação/fechamento.

        Returns:
            SLA atualizado, ou None se o ticket não tem SLA
        """
        try:
            ticket_sla = self.ticket_sla_repo.get_by_ticket(ticket_id)
            if ticket_sla is None:
                return None

            ticket_sla.concluir(self.relogio())
            self.ticket_sla_repo.save(ticket_sla)

            logger.info(f"SLA atualizado para ticket {ticket_id}: status={ticket_sla.status.value}")
            return ticket_sla

        except Exception as e:
            logger.error(f"Erro ao atualizar SLA do ticket {ticket_id}: {e}")
            return None

    def obter(self, ticket_id: str) -> Optional[TicketSLAEntity]:
        return self.ticket_sla_repo.get_by_ticket(ticket_id)
