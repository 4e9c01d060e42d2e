"""
Django Models do domínio de Atrasos.

- AtrasoModel: no máximo um por ticket (ticket_id único)
- JustificativaModel: no máximo uma por atraso, removida em cascata
"""

from django.db import models
from django.utils import timezone


class AtrasoStatusChoices(models.TextChoices):
    UNJUSTIFIED = 'unjustified', 'Não justificado'
    PENDING = 'pending', 'Justificativa pendente'
    JUSTIFIED = 'justified', 'Justificado'
    REJECTED = 'rejected', 'Justificativa rejeitada'


class JustificativaStatusChoices(models.TextChoices):
    PENDING = 'pending', 'Pendente'
    VALIDATED = 'validated', 'Validada'
    REJECTED = 'rejected', 'Rejeitada'


class AtrasoModel(models.Model):
    """Atraso derivado de um ticket (tempo real > tempo estimado)."""

    id = models.CharField(max_length=36, primary_key=True, editable=False)

    ticket_id = models.CharField(
        max_length=36,
        unique=True,
        help_text="Ticket de origem (um atraso por ticket)"
    )

    usuario_id = models.CharField(
        max_length=36,
        db_index=True,
        help_text="Responsável pelo atraso"
    )

    tempo_estimado = models.PositiveIntegerField(default=0)
    tempo_real = models.PositiveIntegerField(default=0)
    tempo_atraso = models.IntegerField(default=0)
    percentual_atraso = models.DecimalField(max_digits=5, decimal_places=2, default=0)

    status = models.CharField(
        max_length=20,
        choices=AtrasoStatusChoices.choices,
        default=AtrasoStatusChoices.UNJUSTIFIED,
        db_index=True,
    )

    detectado_em = models.DateTimeField(default=timezone.now, db_index=True)
    criado_em = models.DateTimeField(default=timezone.now)
    atualizado_em = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'atrasos'
        verbose_name = 'Atraso'
        verbose_name_plural = 'Atrasos'
        ordering = ['-detectado_em']
        indexes = [
            models.Index(fields=['usuario_id', 'status']),
        ]

    def __str__(self):
        return f"Atraso {self.ticket_id[:8]} ({self.status})"


class JustificativaModel(models.Model):
    """Justificativa submetida pelo responsável do atraso."""

    id = models.CharField(max_length=36, primary_key=True, editable=False)

    atraso = models.OneToOneField(
        AtrasoModel,
        on_delete=models.CASCADE,
        related_name='justificativa',
        help_text="Atraso justificado"
    )

    usuario_id = models.CharField(max_length=36, db_index=True)
    justificativa = models.TextField()

    status = models.CharField(
        max_length=20,
        choices=JustificativaStatusChoices.choices,
        default=JustificativaStatusChoices.PENDING,
        db_index=True,
    )

    validado_por_id = models.CharField(max_length=36, null=True, blank=True)
    validado_em = models.DateTimeField(null=True, blank=True)
    comentario_validacao = models.TextField(blank=True, default='')

    criado_em = models.DateTimeField(default=timezone.now)
    atualizado_em = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'atraso_justificativas'
        verbose_name = 'Justificativa de Atraso'
        verbose_name_plural = 'Justificativas de Atraso'
        ordering = ['-criado_em']

    def __str__(self):
        return f"Justificativa {self.id[:8]} ({self.status})"
