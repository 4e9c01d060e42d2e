"""
Implementações do NotificacaoService.

- DjangoNotificacaoService: grava a notificação no banco (síncrono)
- CeleryNotificacaoService: enfileira a entrega na fila "notifications"

A escolha é feita no container (settings.NOTIFICATIONS_ASYNC).
"""

from typing import Any, Dict, List, Optional
import logging

from src.core.shared.exceptions import RepositoryError

from ..shared.repository import erros_de_banco
from .models import NotificacaoModel

logger = logging.getLogger(__name__)


class DjangoNotificacaoService:
    """Persiste notificações in-app."""

    def criar(
        self,
        usuario_id: str,
        tipo: str,
        titulo: str,
        mensagem: str,
        link_url: str = "",
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        with erros_de_banco("criar notificação"):
            NotificacaoModel.objects.create(
                usuario_id=usuario_id,
                tipo=tipo,
                titulo=titulo,
                mensagem=mensagem,
                link_url=link_url or '',
                metadata=dict(metadata or {}),
            )
        logger.debug(f"Notificação {tipo} criada para {usuario_id}")

    def listar_por_usuario(self, usuario_id: str, apenas_nao_lidas: bool = False) -> List[NotificacaoModel]:
        qs = NotificacaoModel.objects.filter(usuario_id=usuario_id)
        if apenas_nao_lidas:
            qs = qs.filter(lida=False)
        return list(qs.order_by('-criado_em'))


class CeleryNotificacaoService:
    """
    Entrega assíncrona via Celery.

    Erros de broker viram RepositoryError; o Notificador do core
    apenas registra a falha.
    """

    def criar(
        self,
        usuario_id: str,
        tipo: str,
        titulo: str,
        mensagem: str,
        link_url: str = "",
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        from ..events.handlers import entregar_notificacao

        try:
            entregar_notificacao.delay(
                usuario_id=usuario_id,
                tipo=tipo,
                titulo=titulo,
                mensagem=mensagem,
                link_url=link_url,
                metadata=dict(metadata or {}),
            )
        except Exception as e:
            logger.error(f"Falha ao enfileirar notificação {tipo} para {usuario_id}: {e}")
            raise RepositoryError(f"Falha ao enfileirar notificação: {e}", code="BROKER_ERROR") from e
