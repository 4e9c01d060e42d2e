"""
Django Models da Estrutura Organizacional.

Dados de referência lidos pelo ciclo de vida de tickets: filiais,
departamentos, usuários e categorias de ticket. IDs são strings UUID,
como nos demais contextos.
"""

from django.db import models


class FilialModel(models.Model):
    """Filial (unidade organizacional de topo)."""

    id = models.CharField(max_length=36, primary_key=True, editable=False)

    nome = models.CharField(max_length=150)

    eh_fornecedor_software = models.BooleanField(
        default=False,
        db_index=True,
        help_text="Filial fornecedora de software/TI"
    )

    ativo = models.BooleanField(default=True)

    class Meta:
        db_table = 'filiais'
        verbose_name = 'Filial'
        verbose_name_plural = 'Filiais'
        ordering = ['nome']

    def __str__(self):
        return self.nome


class DepartamentoModel(models.Model):
    """Departamento de uma filial."""

    id = models.CharField(max_length=36, primary_key=True, editable=False)

    nome = models.CharField(max_length=150)

    filial_id = models.CharField(max_length=36, null=True, blank=True, db_index=True)

    eh_ti = models.BooleanField(default=False, help_text="Departamento de TI")

    ativo = models.BooleanField(default=True)

    class Meta:
        db_table = 'departamentos'
        verbose_name = 'Departamento'
        verbose_name_plural = 'Departamentos'
        ordering = ['nome']
        indexes = [
            models.Index(fields=['filial_id', 'eh_ti', 'ativo']),
        ]

    def __str__(self):
        return self.nome


class UsuarioModel(models.Model):
    """Usuário do sistema (projeção usada pelo domínio)."""

    id = models.CharField(max_length=36, primary_key=True, editable=False)

    username = models.CharField(max_length=150, unique=True)
    nome = models.CharField(max_length=150, blank=True, default='')
    sobrenome = models.CharField(max_length=150, blank=True, default='')
    email = models.EmailField(blank=True, default='')

    filial_id = models.CharField(max_length=36, null=True, blank=True)
    departamento_id = models.CharField(max_length=36, null=True, blank=True, db_index=True)
    papel_filial_id = models.CharField(
        max_length=36,
        null=True,
        blank=True,
        help_text="Filial associada ao papel do usuário"
    )

    ativo = models.BooleanField(default=True)

    class Meta:
        db_table = 'usuarios'
        verbose_name = 'Usuário'
        verbose_name_plural = 'Usuários'
        ordering = ['username']

    def __str__(self):
        return self.username


class CategoriaTicketModel(models.Model):
    """Categoria de ticket identificada por slug."""

    id = models.CharField(max_length=36, primary_key=True, editable=False)

    slug = models.SlugField(max_length=50, unique=True)
    nome = models.CharField(max_length=100)
    ativo = models.BooleanField(default=True)

    class Meta:
        db_table = 'categorias_ticket'
        verbose_name = 'Categoria de Ticket'
        verbose_name_plural = 'Categorias de Ticket'
        ordering = ['nome']

    def __str__(self):
        return self.slug
