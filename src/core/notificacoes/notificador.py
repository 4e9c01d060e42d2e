"""
Notificador - entrega best-effort de notificações.

Falhas de entrega são registradas em log e nunca chegam ao chamador
da operação de ticket que as disparou.
"""

from typing import Any, Dict, Iterable, Optional
import logging

from src.core.organizacao.diretorio import DiretorioOrganizacional

from .ports import NotificacaoService

logger = logging.getLogger(__name__)


class Notificador:
    """
    Envolve o NotificacaoService com tratamento de falhas.

    Attributes:
        servico: Sink de notificações
        diretorio: Diretório para resolver o grupo de TI fornecedor
    """

    def __init__(self, servico: NotificacaoService, diretorio: DiretorioOrganizacional):
        self.servico = servico
        self.diretorio = diretorio

    def notificar(
        self,
        usuario_id: str,
        tipo: str,
        titulo: str,
        mensagem: str,
        link_url: str = "",
        metadata: Optional[Dict[str, Any]] = None,
    ) -> bool:
        """
        Entrega uma notificação.

        Returns:
            True se entregue, False se falhou (falha apenas logada)
        """
        if not usuario_id:
            return False
        try:
            self.servico.criar(usuario_id, tipo, titulo, mensagem, link_url, metadata)
            return True
        except Exception as e:
            logger.error(f"Falha ao notificar usuário {usuario_id} ({tipo}): {e}")
            return False

    def notificar_varios(
        self,
        usuarios_ids: Iterable[str],
        tipo: str,
        titulo: str,
        mensagem: str,
        link_url: str = "",
        metadata: Optional[Dict[str, Any]] = None,
    ) -> int:
        """Entrega a vários usuários; retorna quantas entregas funcionaram."""
        return sum(
            1 for uid in usuarios_ids
            if self.notificar(uid, tipo, titulo, mensagem, link_url, metadata)
        )

    def notificar_ti_fornecedor(
        self,
        tipo: str,
        titulo: str,
        mensagem: str,
        link_url: str = "",
        metadata: Optional[Dict[str, Any]] = None,
    ) -> int:
        """Notifica todos os usuários ativos da TI da filial fornecedora."""
        try:
            destinatarios = self.diretorio.usuarios_ti_fornecedor()
        except Exception as e:
            logger.error(f"Erro ao buscar usuários de TI da filial fornecedora: {e}")
            return 0

        if not destinatarios:
            logger.warning(f"Nenhum usuário de TI para notificação do tipo {tipo}")
            return 0

        logger.info(f"Enviando notificação '{tipo}' para {len(destinatarios)} usuário(s) de TI")
        return self.notificar_varios(destinatarios, tipo, titulo, mensagem, link_url, metadata)
