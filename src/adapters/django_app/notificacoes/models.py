"""
Django Model de Notificações in-app.
"""

import uuid

from django.db import models
from django.utils import timezone


def gerar_id() -> str:
    return str(uuid.uuid4())


class NotificacaoModel(models.Model):
    """Notificação entregue a um usuário."""

    id = models.CharField(
        max_length=36,
        primary_key=True,
        default=gerar_id,
        editable=False,
    )

    usuario_id = models.CharField(max_length=36, db_index=True)

    tipo = models.CharField(
        max_length=50,
        db_index=True,
        help_text="Tipo (ex: ticket_created, ticket_validated)"
    )

    titulo = models.CharField(max_length=255)
    mensagem = models.TextField()
    link_url = models.CharField(max_length=255, blank=True, default='')

    metadata = models.JSONField(
        default=dict,
        blank=True,
        help_text="Dados adicionais (ticket_id, ticket_code...)"
    )

    lida = models.BooleanField(default=False)
    criado_em = models.DateTimeField(default=timezone.now, db_index=True)

    class Meta:
        db_table = 'notificacoes'
        verbose_name = 'Notificação'
        verbose_name_plural = 'Notificações'
        ordering = ['-criado_em']
        indexes = [
            models.Index(fields=['usuario_id', 'lida', 'criado_em']),
        ]

    def __str__(self):
        return f"{self.tipo} → {self.usuario_id}"
