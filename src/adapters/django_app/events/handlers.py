"""
Event Handlers - Processadores de Eventos de Domínio.

Handlers são executados de forma assíncrona via Celery quando
Domain Events são publicados (após o commit da transação).

Tipos de tarefas:
- Handlers de eventos (auditoria em log, roteados por dispatch_domain_event)
- entregar_notificacao: persistência de notificações (fila notifications)
- sincronizar_atrasos: varredura de reconciliação (Celery beat)

Padrão:
    @shared_task(bind=True, ...)
    def handle_<evento>(self, event_data: dict) -> None:
        # Processar evento

`event_data` é o resultado de DomainEvent.to_dict(): os campos
específicos do evento ficam em event_data["data"].
"""

from typing import Any, Dict, Optional
import logging

from celery import shared_task

logger = logging.getLogger(__name__)


# =============================================================================
# Event Handlers - Tickets
# =============================================================================

@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    acks_late=True,
)
def handle_ticket_evento(self, event_data: Dict[str, Any]) -> None:
    """
    Registro de auditoria para eventos do agregado Ticket.

    Args:
        event_data: Dados do evento serializado
    """
    dados = event_data.get('data', {})
    logger.info(
        f"[HANDLER] {event_data.get('event_type')}: {event_data.get('aggregate_id')} | "
        f"dados={dados}"
    )


@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    acks_late=True,
)
def handle_ticket_status_alterado(self, event_data: Dict[str, Any]) -> None:
    """Registra transições de status (origem → destino)."""
    dados = event_data.get('data', {})
    logger.info(
        f"[HANDLER] TicketStatusAlterado: {event_data.get('aggregate_id')} | "
        f"{dados.get('status_anterior')} -> {dados.get('status_novo')} | "
        f"por {dados.get('alterado_por_id')}"
    )


# =============================================================================
# Event Handlers - Atrasos e Apontamentos
# =============================================================================

@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    acks_late=True,
)
def handle_atraso_detectado(self, event_data: Dict[str, Any]) -> None:
    """
    Handler para AtrasoDetectadoEvent.

    Atrasos novos são logados como warning para acompanhamento.
    """
    dados = event_data.get('data', {})
    mensagem = (
        f"[HANDLER] AtrasoDetectado: ticket {dados.get('ticket_id')} | "
        f"responsável {dados.get('usuario_id')} | "
        f"{dados.get('tempo_atraso')} min ({dados.get('percentual_atraso')}%)"
    )
    if dados.get('novo'):
        logger.warning(mensagem)
    else:
        logger.info(mensagem)


@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    acks_late=True,
)
def handle_atraso_evento(self, event_data: Dict[str, Any]) -> None:
    """Auditoria de remoção de atraso e do ciclo das justificativas."""
    logger.info(
        f"[HANDLER] {event_data.get('event_type')}: {event_data.get('aggregate_id')} | "
        f"dados={event_data.get('data', {})}"
    )


@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    acks_late=True,
)
def handle_apontamento_evento(self, event_data: Dict[str, Any]) -> None:
    logger.info(
        f"[HANDLER] {event_data.get('event_type')}: {event_data.get('aggregate_id')} | "
        f"dados={event_data.get('data', {})}"
    )


# =============================================================================
# Event Dispatcher (Router)
# =============================================================================

HANDLERS = {
    'TicketCriadoEvent': handle_ticket_evento,
    'TicketAtualizadoEvent': handle_ticket_evento,
    'TicketAtribuidoEvent': handle_ticket_evento,
    'TicketStatusAlteradoEvent': handle_ticket_status_alterado,
    'TicketValidadoEvent': handle_ticket_evento,
    'TicketExcluidoEvent': handle_ticket_evento,
    'TicketComentarioAdicionadoEvent': handle_ticket_evento,
    'AtrasoDetectadoEvent': handle_atraso_detectado,
    'AtrasoRemovidoEvent': handle_atraso_evento,
    'JustificativaSubmetidaEvent': handle_atraso_evento,
    'JustificativaDecididaEvent': handle_atraso_evento,
    'ApontamentoRegistradoEvent': handle_apontamento_evento,
    'ApontamentoExcluidoEvent': handle_apontamento_evento,
    'ApontamentoValidadoEvent': handle_apontamento_evento,
}


@shared_task(bind=True, max_retries=5, default_retry_delay=30)
def dispatch_domain_event(self, event_type: str, event_data: Dict[str, Any]) -> bool:
    """
    Dispatcher central para Domain Events.

    Roteia eventos para os handlers apropriados.

    Returns:
        True se havia handler para o tipo
    """
    handler = HANDLERS.get(event_type)

    if handler is None:
        logger.warning(f"[DISPATCHER] Handler não encontrado para {event_type}")
        return False

    logger.debug(f"[DISPATCHER] Roteando {event_type} para {handler.name}")
    handler.delay(event_data)
    return True


# =============================================================================
# Notification Tasks
# =============================================================================

@shared_task(bind=True, max_retries=3, default_retry_delay=120, acks_late=True)
def entregar_notificacao(
    self,
    usuario_id: str,
    tipo: str,
    titulo: str,
    mensagem: str,
    link_url: str = '',
    metadata: Optional[Dict[str, Any]] = None,
) -> None:
    """
    Persiste uma notificação in-app.

    Erros de banco disparam retry; esgotadas as tentativas a
    notificação é descartada com log de erro.
    """
    from src.adapters.django_app.notificacoes.services import DjangoNotificacaoService
    from src.core.shared.exceptions import RepositoryError

    try:
        DjangoNotificacaoService().criar(usuario_id, tipo, titulo, mensagem, link_url, metadata)
        logger.info(f"[NOTIFICATION] {tipo} para {usuario_id}")
    except RepositoryError as e:
        if self.request.retries >= self.max_retries:
            logger.error(f"[NOTIFICATION] Descartada {tipo} para {usuario_id}: {e}")
            return
        raise self.retry(exc=e)


# =============================================================================
# Scheduled Tasks (Beat)
# =============================================================================

@shared_task(bind=True, ignore_result=True)
def sincronizar_atrasos(self) -> bool:
    """
    Varredura de reconciliação de atrasos.

    Executada periodicamente pelo Celery Beat. O agendador ignora o
    disparo se houver varredura em curso ou cooldown ativo.
    Em segundo plano, as contagens são registradas pela própria varredura
    ao terminar.

    Returns:
        True se a varredura foi iniciada
    """
    from src.config.container import get_container

    agendador = get_container().agendador()
    disparado = agendador.disparar()

    if not disparado:
        logger.info("[SCHEDULED] Varredura de atrasos ignorada")
    elif agendador.assincrono:
        logger.info("[SCHEDULED] Varredura de atrasos iniciada em segundo plano")
    else:
        logger.info(
            f"[SCHEDULED] Varredura de atrasos: {agendador.processados} ticket(s), "
            f"{agendador.falhas} falha(s)"
        )

    return disparado
