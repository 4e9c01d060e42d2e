"""
Django Models de SLA.

- SLAModel: regra (categoria, prioridade) → duração alvo
- TicketSLAModel: SLA aplicado a um ticket (no máximo um)
"""

from django.db import models


class UnidadeSLAChoices(models.TextChoices):
    MINUTES = 'minutes', 'Minutos'
    HOURS = 'hours', 'Horas'
    DAYS = 'days', 'Dias'


class StatusSLAChoices(models.TextChoices):
    ON_TIME = 'on_time', 'No prazo'
    AT_RISK = 'at_risk', 'Em risco'
    VIOLATED = 'violated', 'Violado'


class SLAModel(models.Model):
    """Regra de SLA."""

    id = models.CharField(max_length=36, primary_key=True, editable=False)

    nome = models.CharField(max_length=150)
    descricao = models.TextField(blank=True, default='')

    categoria = models.CharField(
        max_length=50,
        db_index=True,
        help_text="Slug da categoria de ticket"
    )

    prioridade = models.CharField(
        max_length=20,
        null=True,
        blank=True,
        help_text="Prioridade específica (vazio = qualquer prioridade)"
    )

    tempo_alvo = models.PositiveIntegerField()
    unidade = models.CharField(
        max_length=10,
        choices=UnidadeSLAChoices.choices,
        default=UnidadeSLAChoices.MINUTES,
    )

    ativo = models.BooleanField(default=True)

    class Meta:
        db_table = 'slas'
        verbose_name = 'SLA'
        verbose_name_plural = 'SLAs'
        ordering = ['nome']
        indexes = [
            models.Index(fields=['categoria', 'prioridade', 'ativo']),
        ]

    def __str__(self):
        return f"{self.nome} ({self.tempo_alvo} {self.unidade})"


class TicketSLAModel(models.Model):
    """SLA aplicado a um ticket."""

    id = models.CharField(max_length=36, primary_key=True, editable=False)

    ticket_id = models.CharField(max_length=36, unique=True)
    sla_id = models.CharField(max_length=36, db_index=True)

    prazo_alvo = models.DateTimeField(db_index=True)
    status = models.CharField(
        max_length=10,
        choices=StatusSLAChoices.choices,
        default=StatusSLAChoices.ON_TIME,
        db_index=True,
    )

    concluido_em = models.DateTimeField(null=True, blank=True)
    minutos_violacao = models.PositiveIntegerField(null=True, blank=True)

    class Meta:
        db_table = 'ticket_slas'
        verbose_name = 'SLA de Ticket'
        verbose_name_plural = 'SLAs de Tickets'

    def __str__(self):
        return f"SLA {self.ticket_id[:8]} ({self.status})"
