"""
Django Models de Apontamentos de Tempo.
"""

from django.db import models
from django.utils import timezone


class ApontamentoModel(models.Model):
    """
    Apontamento de tempo em um ticket ou em uma tarefa de projeto.

    Exatamente um dos dois vínculos é preenchido.
    """

    id = models.CharField(max_length=36, primary_key=True, editable=False)

    ticket_id = models.CharField(max_length=36, null=True, blank=True, db_index=True)
    tarefa_projeto_id = models.CharField(max_length=36, null=True, blank=True, db_index=True)

    usuario_id = models.CharField(
        max_length=36,
        db_index=True,
        help_text="Quem trabalhou"
    )

    tempo_gasto = models.PositiveIntegerField(help_text="Minutos trabalhados")
    data = models.DateField(db_index=True)
    descricao = models.TextField(blank=True, default='')

    validado = models.BooleanField(default=False, db_index=True)
    validado_por_id = models.CharField(max_length=36, null=True, blank=True)
    validado_em = models.DateTimeField(null=True, blank=True)

    criado_em = models.DateTimeField(default=timezone.now)
    atualizado_em = models.DateTimeField(default=timezone.now)
    excluido_em = models.DateTimeField(null=True, blank=True, db_index=True)

    class Meta:
        db_table = 'apontamentos'
        verbose_name = 'Apontamento'
        verbose_name_plural = 'Apontamentos'
        ordering = ['-data', '-criado_em']
        indexes = [
            models.Index(fields=['usuario_id', 'data']),
            models.Index(fields=['ticket_id', 'excluido_em']),
        ]

    def __str__(self):
        alvo = self.ticket_id or self.tarefa_projeto_id or '-'
        return f"{self.tempo_gasto}min em {alvo[:8]} ({self.data})"
