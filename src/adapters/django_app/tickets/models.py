"""
Django Models para o domínio de Tickets.

Estes models são ADAPTERS - implementam a persistência para as
entidades de domínio definidas em src/core/tickets/entities.py.

IMPORTANTE:
- Models NÃO contêm lógica de negócio
- Lógica de negócio fica nas Entities do Core
- Models são mapeados para/de Entities via Mappers

Relacionamentos:
- TicketModel: Tabela principal de tickets
- TicketResponsavelModel: Vínculos de atribuição (com líder)
- TicketComentarioModel: Comentários públicos e internos
- TicketHistoricoModel: Histórico append-only de alterações

Referências a outros contextos (usuários, filiais) são IDs string,
não ForeignKeys.
"""

from django.db import models
from django.utils import timezone


class TicketStatusChoices(models.TextChoices):
    """Choices para status de ticket (espelha TicketStatus do Core)."""
    OUVERT = 'ouvert', 'Ouvert'
    EN_COURS = 'en_cours', 'En cours'
    EN_ATTENTE = 'en_attente', 'En attente'
    RESOLU = 'resolu', 'Résolu'
    CLOTURE = 'cloture', 'Clôturé'


class TicketPriorityChoices(models.TextChoices):
    """Choices para prioridade de ticket (espelha TicketPriority do Core)."""
    LOW = 'low', 'Baixa'
    MEDIUM = 'medium', 'Média'
    HIGH = 'high', 'Alta'
    CRITICAL = 'critical', 'Crítica'


class TicketOrigemChoices(models.TextChoices):
    MAIL = 'mail', 'E-mail'
    APPEL = 'appel', 'Telefone'
    DIRECT = 'direct', 'Presencial'
    WHATSAPP = 'whatsapp', 'WhatsApp'
    KRONOS = 'kronos', 'Sistema'


class TicketModel(models.Model):
    """
    Model Django para persistência de Tickets.

    Este model é um ADAPTER que persiste dados do TicketEntity.
    NÃO contém lógica de negócio - apenas estrutura de dados.

    Tickets excluídos logicamente permanecem na tabela com
    `excluido_em` preenchido (o código continua reservado).
    """

    # Primary Key - UUID gerado pela Entity
    id = models.CharField(
        max_length=36,
        primary_key=True,
        editable=False,
        help_text="UUID único do ticket"
    )

    codigo = models.CharField(
        max_length=30,
        unique=True,
        help_text="Código legível (TKT-<ano>-<seq>)"
    )

    # Dados principais
    titulo = models.CharField(
        max_length=200,
        db_index=True,
        help_text="Título descritivo do ticket"
    )

    descricao = models.TextField(
        help_text="Descrição detalhada do problema"
    )

    categoria = models.CharField(
        max_length=50,
        blank=True,
        default='',
        db_index=True,
        help_text="Slug da categoria (vazio = sem categoria)"
    )

    origem = models.CharField(
        max_length=20,
        choices=TicketOrigemChoices.choices,
        default=TicketOrigemChoices.KRONOS,
        help_text="Canal de origem do ticket"
    )

    # Estado
    status = models.CharField(
        max_length=20,
        choices=TicketStatusChoices.choices,
        default=TicketStatusChoices.OUVERT,
        db_index=True,
        help_text="Estado atual do ticket"
    )

    prioridade = models.CharField(
        max_length=20,
        choices=TicketPriorityChoices.choices,
        default=TicketPriorityChoices.MEDIUM,
        db_index=True,
        help_text="Nível de prioridade"
    )

    # Relacionamentos (IDs string entre contextos)
    criador_id = models.CharField(
        max_length=36,
        db_index=True,
        help_text="ID do usuário criador"
    )

    solicitante_id = models.CharField(max_length=36, null=True, blank=True, db_index=True)
    solicitante_nome = models.CharField(max_length=200, blank=True, default='')
    solicitante_departamento = models.CharField(max_length=200, blank=True, default='')

    filial_id = models.CharField(max_length=36, null=True, blank=True, db_index=True)
    software_id = models.CharField(max_length=36, null=True, blank=True)
    pai_id = models.CharField(
        max_length=36,
        null=True,
        blank=True,
        help_text="Ticket pai (um nível de sub-ticket)"
    )

    atribuido_a_id = models.CharField(
        max_length=36,
        null=True,
        blank=True,
        db_index=True,
        help_text="ID do responsável principal"
    )

    # Tempo (minutos)
    tempo_estimado = models.PositiveIntegerField(null=True, blank=True)
    tempo_real = models.PositiveIntegerField(null=True, blank=True)

    # Validação
    validado_por_id = models.CharField(max_length=36, null=True, blank=True)
    validado_em = models.DateTimeField(null=True, blank=True)

    # Timestamps
    criado_em = models.DateTimeField(
        default=timezone.now,
        db_index=True,
        help_text="Data/hora de criação"
    )

    atualizado_em = models.DateTimeField(
        default=timezone.now,
        help_text="Data/hora da última atualização"
    )

    fechado_em = models.DateTimeField(
        null=True,
        blank=True,
        help_text="Primeira entrada em cloture"
    )

    excluido_em = models.DateTimeField(
        null=True,
        blank=True,
        db_index=True,
        help_text="Exclusão lógica"
    )

    class Meta:
        db_table = 'tickets'
        verbose_name = 'Ticket'
        verbose_name_plural = 'Tickets'
        ordering = ['-criado_em']
        indexes = [
            # Índices compostos para queries frequentes
            models.Index(fields=['status', 'criado_em']),
            models.Index(fields=['atribuido_a_id', 'status']),
            models.Index(fields=['filial_id', 'criado_em']),
            models.Index(fields=['criador_id', 'criado_em']),
        ]

    def __str__(self):
        return f"[{self.codigo}] {self.titulo}"

    def __repr__(self):
        return f"<TicketModel codigo={self.codigo} status={self.status}>"


class TicketResponsavelModel(models.Model):
    """Vínculo ticket ↔ usuário atribuído."""

    id = models.BigAutoField(primary_key=True)

    ticket_id = models.CharField(max_length=36, db_index=True)
    usuario_id = models.CharField(max_length=36, db_index=True)
    eh_lider = models.BooleanField(default=False, help_text="Líder da equipe atribuída")

    class Meta:
        db_table = 'ticket_responsaveis'
        verbose_name = 'Responsável de Ticket'
        verbose_name_plural = 'Responsáveis de Ticket'
        ordering = ['id']
        constraints = [
            models.UniqueConstraint(
                fields=['ticket_id', 'usuario_id'],
                name='uniq_responsavel_por_ticket',
            ),
        ]

    def __str__(self):
        return f"{self.ticket_id[:8]} → {self.usuario_id}"


class TicketComentarioModel(models.Model):
    """Comentário de ticket (público ou interno)."""

    id = models.CharField(max_length=36, primary_key=True, editable=False)

    ticket_id = models.CharField(max_length=36, db_index=True)
    usuario_id = models.CharField(max_length=36)
    comentario = models.TextField()
    interno = models.BooleanField(default=False, help_text="Visível apenas para a equipe de TI")

    criado_em = models.DateTimeField(default=timezone.now)
    atualizado_em = models.DateTimeField(default=timezone.now)
    excluido_em = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'ticket_comentarios'
        verbose_name = 'Comentário de Ticket'
        verbose_name_plural = 'Comentários de Ticket'
        ordering = ['criado_em']
        indexes = [
            models.Index(fields=['ticket_id', 'criado_em']),
        ]

    def __str__(self):
        return f"Comentário {self.id[:8]} em {self.ticket_id[:8]}"


class TicketHistoricoModel(models.Model):
    """
    Histórico append-only de tickets.

    Registra todas as alterações em tickets para auditoria.
    A PK auto-incremental preserva a ordem de inserção.
    """

    id = models.BigAutoField(primary_key=True)

    uuid = models.CharField(max_length=36, unique=True, editable=False)

    ticket_id = models.CharField(
        max_length=36,
        db_index=True,
        help_text="Ticket relacionado"
    )

    usuario_id = models.CharField(
        max_length=36,
        blank=True,
        default='',
        help_text="Usuário que causou a alteração"
    )

    acao = models.CharField(
        max_length=30,
        db_index=True,
        help_text="Valor de AcaoHistorico"
    )

    campo = models.CharField(max_length=50, blank=True, default='')
    valor_antigo = models.TextField(blank=True, default='')
    valor_novo = models.TextField(blank=True, default='')
    descricao = models.TextField(blank=True, default='')

    criado_em = models.DateTimeField(
        default=timezone.now,
        db_index=True,
        help_text="Timestamp da alteração"
    )

    class Meta:
        db_table = 'ticket_historico'
        verbose_name = 'Histórico de Ticket'
        verbose_name_plural = 'Histórico de Tickets'
        ordering = ['id']
        indexes = [
            models.Index(fields=['ticket_id', 'id']),
        ]

    def __str__(self):
        return f"{self.acao} - {self.ticket_id[:8]} @ {self.criado_em}"
