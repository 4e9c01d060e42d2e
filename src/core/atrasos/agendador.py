"""
Agendador de Reconciliação - varredura periódica de atrasos.

Percorre todos os tickets não excluídos, em páginas, aplicando a regra
de derivação a cada um. Serve como reparo de consistência (disparado
pelo Celery beat); o caminho normal recalcula atrasos de forma síncrona
a cada apontamento ou mudança de estimativa.

Eventos:
    Cada ticket é reconciliado em sua própria unidade de trabalho
    (`uow_factory`); os eventos retornados pela regra são publicados no
    commit dessa unidade. Falha em um ticket descarta apenas os eventos dele.

Concorrência:
    - Um único `threading.Lock` protege `em_execucao` e `ultima_execucao`
    - `disparar()` recusa se já há varredura em curso ou se a última
      terminou há menos que o cooldown
    - O flag é limpo e o horário de término gravado num `finally`
"""

from datetime import datetime, timedelta
from typing import Callable, Optional
import logging
import threading

from src.core.shared.interfaces import UnitOfWork

from .derivacao import ReconciliadorAtrasos

logger = logging.getLogger(__name__)


COOLDOWN_PADRAO = timedelta(minutes=2)
TAMANHO_PAGINA_PADRAO = 500


class AgendadorReconciliacao:
    """
    Dispara varreduras de reconciliação com limitação de frequência.

    Attributes:
        ticket_repo: Fonte paginada de tickets (`listar_paginado`)
        reconciliador: Regra de derivação
        uow_factory: Cria a unidade de trabalho de cada ticket
        cooldown: Intervalo mínimo entre varreduras
        tamanho_pagina: Tickets por página
        assincrono: Executa a varredura em thread própria

    Example:
        agendador = AgendadorReconciliacao(ticket_repo, reconciliador, container.unit_of_work)
        if agendador.disparar():
            agendador.aguardar()
    """

    def __init__(
        self,
        ticket_repo,
        reconciliador: ReconciliadorAtrasos,
        uow_factory: Callable[[], UnitOfWork],
        cooldown: timedelta = COOLDOWN_PADRAO,
        tamanho_pagina: int = TAMANHO_PAGINA_PADRAO,
        assincrono: bool = True,
        relogio: Callable[[], datetime] = datetime.now,
    ):
        self.ticket_repo = ticket_repo
        self.reconciliador = reconciliador
        self.uow_factory = uow_factory
        self.cooldown = cooldown
        self.tamanho_pagina = tamanho_pagina
        self.assincrono = assincrono
        self.relogio = relogio

        self._lock = threading.Lock()
        self._em_execucao = False
        self._ultima_execucao: Optional[datetime] = None
        self._thread: Optional[threading.Thread] = None
        self.processados = 0
        self.falhas = 0

    @property
    def em_execucao(self) -> bool:
        with self._lock:
            return self._em_execucao

    @property
    def ultima_execucao(self) -> Optional[datetime]:
        with self._lock:
            return self._ultima_execucao

    def disparar(self) -> bool:
        """
        Inicia uma varredura se permitido.

        Returns:
            True se a varredura foi iniciada (ou executada, se síncrono)
        """
        with self._lock:
            if self._em_execucao:
                logger.debug("Varredura de atrasos já em execução")
                return False

            agora = self.relogio()
            if self._ultima_execucao and agora - self._ultima_execucao < self.cooldown:
                logger.debug("Varredura de atrasos ignorada: cooldown ativo")
                return False

            self._em_execucao = True

        if self.assincrono:
            self._thread = threading.Thread(
                target=self._executar,
                name="reconciliacao-atrasos",
                daemon=True,
            )
            self._thread.start()
        else:
            self._executar()

        return True

    def aguardar(self, timeout: Optional[float] = None) -> bool:
        """
        Espera o término da varredura em thread.

        Returns:
            True se não há varredura em curso ao retornar
        """
        thread = self._thread
        if thread is not None:
            thread.join(timeout)
        return not self.em_execucao

    def _executar(self) -> None:
        try:
            self._varrer()
        except Exception as e:
            logger.error(f"Varredura de atrasos interrompida: {e}", exc_info=True)
        finally:
            with self._lock:
                self._em_execucao = False
                self._ultima_execucao = self.relogio()

    def _varrer(self) -> None:
        self.processados = 0
        self.falhas = 0
        offset = 0

        while True:
            pagina = self.ticket_repo.listar_paginado(offset, self.tamanho_pagina)
            for ticket in pagina:
                try:
                    self._reconciliar(ticket)
                    self.processados += 1
                except Exception as e:
                    self.falhas += 1
                    logger.error(f"Falha ao reconciliar atraso do ticket {ticket.id}: {e}")

            if len(pagina) < self.tamanho_pagina:
                break
            offset += self.tamanho_pagina

        logger.info(
            f"Varredura de atrasos concluída: {self.processados} ticket(s), "
            f"{self.falhas} falha(s)"
        )

    def _reconciliar(self, ticket) -> None:
        uow = self.uow_factory()
        with uow:
            for evento in self.reconciliador.reconciliar(ticket):
                uow.publish_event(evento)
