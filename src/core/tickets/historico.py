"""
Escritor de Histórico - log append-only com fila limitada.

As operações de ticket apenas enfileiram entradas; uma única thread
consumidora as persiste na ordem de submissão. A escrita nunca bloqueia
nem falha a operação que a originou:

- fila cheia: a entrada é descartada, registrada em log e contada
- falha de persistência: registrada em log e contada

Contrato de consistência:
    Uma leitura logo após a mutação pode não ver a entrada mais recente.
    `flush()` espera até que tudo o que foi submetido esteja persistido
    (usado em testes e no desligamento).
"""

from typing import Optional, Union
import logging
import queue
import threading
import time

from .entities import AcaoHistorico, HistoricoTicketEntry
from .ports import HistoricoRepository

logger = logging.getLogger(__name__)


TAMANHO_FILA_PADRAO = 1000


class EscritorHistorico:
    """
    Escritor assíncrono de histórico (fila limitada + consumidor dedicado).

    Attributes:
        historico_repo: Destino das entradas
        descartados: Entradas descartadas por fila cheia
        falhas: Entradas cuja persistência falhou

    Example:
        escritor = EscritorHistorico(historico_repo, tamanho_fila=1000)
        escritor.registrar(ticket.id, ator_id, AcaoHistorico.CREATED)
        escritor.flush()
    """

    _PARAR = object()

    def __init__(
        self,
        historico_repo: HistoricoRepository,
        tamanho_fila: int = TAMANHO_FILA_PADRAO,
        iniciar: bool = True,
    ):
        self.historico_repo = historico_repo
        self._fila: queue.Queue = queue.Queue(maxsize=tamanho_fila)
        self._lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None
        self.descartados = 0
        self.falhas = 0

        if iniciar:
            self.iniciar()

    def iniciar(self) -> None:
        """Inicia a thread consumidora (idempotente)."""
        with self._lock:
            if self._thread is not None and self._thread.is_alive():
                return
            self._thread = threading.Thread(
                target=self._consumir,
                name="escritor-historico",
                daemon=True,
            )
            self._thread.start()

    @property
    def ativo(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def pendentes(self) -> int:
        return self._fila.unfinished_tasks

    def registrar(
        self,
        ticket_id: str,
        usuario_id: str,
        acao: Union[AcaoHistorico, str],
        campo: str = "",
        valor_antigo: str = "",
        valor_novo: str = "",
        descricao: str = "",
    ) -> bool:
        """
        Enfileira uma entrada sem bloquear.

        Returns:
            True se enfileirada, False se descartada (fila cheia)
        """
        entry = HistoricoTicketEntry(
            ticket_id=ticket_id,
            usuario_id=usuario_id,
            acao=acao.value if isinstance(acao, AcaoHistorico) else acao,
            campo=campo,
            valor_antigo=valor_antigo,
            valor_novo=valor_novo,
            descricao=descricao,
        )

        try:
            self._fila.put_nowait(entry)
        except queue.Full:
            with self._lock:
                self.descartados += 1
            logger.warning(
                f"Fila de histórico cheia: entrada descartada "
                f"(ticket={ticket_id}, acao={entry.acao})"
            )
            return False

        return True

    def _consumir(self) -> None:
        while True:
            item = self._fila.get()
            try:
                if item is self._PARAR:
                    return
                self._persistir(item)
            finally:
                self._fila.task_done()

    def _persistir(self, entry: HistoricoTicketEntry) -> None:
        try:
            self.historico_repo.adicionar(entry)
        except Exception as e:
            with self._lock:
                self.falhas += 1
            logger.error(
                f"Falha ao gravar histórico (ticket={entry.ticket_id}, "
                f"acao={entry.acao}): {e}"
            )

    def flush(self, timeout: float = 5.0) -> bool:
        """
        Espera a persistência de tudo o que foi submetido até agora.

        Returns:
            True se a fila esvaziou dentro do prazo
        """
        limite = time.monotonic() + timeout
        with self._fila.all_tasks_done:
            while self._fila.unfinished_tasks:
                restante = limite - time.monotonic()
                if restante <= 0:
                    return False
                self._fila.all_tasks_done.wait(restante)
        return True

    def fechar(self, timeout: float = 5.0) -> None:
        """Persiste o que está na fila e encerra o consumidor."""
        if not self.ativo:
            return
        try:
            self._fila.put(self._PARAR, timeout=timeout)
        except queue.Full:
            logger.error("Não foi possível encerrar o escritor de histórico: fila cheia")
            return
        self._thread.join(timeout)
