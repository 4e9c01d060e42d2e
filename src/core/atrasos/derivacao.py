"""
Derivação de atrasos a partir do estado do ticket.

Regra aplicada a um único ticket:

1. Sem base de cálculo (estimado ausente/≤ 0 ou real ausente): nada muda
2. Atraso ≤ 0: remove o registro existente apenas se "unjustified";
   atrasos pending/justified/rejected são preservados
3. Atraso > 0 sem registro: cria "unjustified"; responsável = ator,
   senão o responsável principal do ticket, senão o criador
4. Atraso > 0 com registro: atualiza as medidas; "rejected" volta a
   "unjustified"

A regra é idempotente: reaplicá-la sem mudança no ticket não altera
nada nem gera eventos.
"""

from datetime import datetime
from typing import Callable, List, Optional
import logging

from src.core.shared.events import DomainEvent

from .entities import AtrasoEntity, calcular_atraso
from .events import AtrasoDetectadoEvent, AtrasoRemovidoEvent
from .ports import AtrasoRepository

logger = logging.getLogger(__name__)


class ReconciliadorAtrasos:
    """
    Aplica a regra de derivação de atraso a um ticket.

    Example:
        reconciliador = ReconciliadorAtrasos(atraso_repo)
        with uow:
            ticket_repo.save(ticket)
            for evento in reconciliador.reconciliar(ticket, ator_id="u1"):
                uow.publish_event(evento)
    """

    def __init__(
        self,
        atraso_repo: AtrasoRepository,
        relogio: Callable[[], datetime] = datetime.now,
    ):
        self.atraso_repo = atraso_repo
        self.relogio = relogio

    def reconciliar(self, ticket, ator_id: Optional[str] = None) -> List[DomainEvent]:
        """
        Reconcilia o atraso do ticket.

        Args:
            ticket: TicketEntity já com tempo_real/tempo_estimado atuais
            ator_id: Usuário que provocou a mudança (opcional)

        Returns:
            Eventos gerados (vazio se nada mudou)
        """
        medidas = calcular_atraso(ticket.tempo_estimado, ticket.tempo_real)
        if medidas is None:
            return []

        tempo_atraso, _ = medidas
        existente = self.atraso_repo.get_by_ticket(ticket.id)

        if tempo_atraso <= 0:
            if existente is None or not existente.pode_ser_removido:
                return []
            self.atraso_repo.delete(existente.id)
            logger.info(f"Atraso removido do ticket {ticket.codigo or ticket.id}")
            return [AtrasoRemovidoEvent(aggregate_id=existente.id, ticket_id=ticket.id)]

        agora = self.relogio()

        if existente is None:
            dono = ator_id or ticket.atribuido_a_id or ticket.criador_id
            atraso = AtrasoEntity.detectar(
                ticket_id=ticket.id,
                usuario_id=dono,
                tempo_estimado=ticket.tempo_estimado,
                tempo_real=ticket.tempo_real,
                agora=agora,
            )
            self.atraso_repo.save(atraso)
            logger.info(
                f"Atraso detectado no ticket {ticket.codigo or ticket.id}: "
                f"{atraso.tempo_atraso} min ({atraso.percentual_atraso}%)"
            )
            return [self._evento_detectado(atraso, novo=True)]

        if not existente.atualizar_medidas(ticket.tempo_estimado, ticket.tempo_real, agora):
            return []

        self.atraso_repo.save(existente)
        logger.debug(f"Atraso do ticket {ticket.codigo or ticket.id} atualizado")
        return [self._evento_detectado(existente, novo=False)]

    @staticmethod
    def _evento_detectado(atraso: AtrasoEntity, novo: bool) -> AtrasoDetectadoEvent:
        return AtrasoDetectadoEvent(
            aggregate_id=atraso.id,
            ticket_id=atraso.ticket_id,
            usuario_id=atraso.usuario_id,
            tempo_atraso=atraso.tempo_atraso,
            percentual_atraso=atraso.percentual_atraso,
            novo=novo,
        )
