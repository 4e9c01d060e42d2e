"""
Configuração do Django App da Estrutura Organizacional.
"""

from django.apps import AppConfig


class OrganizacaoConfig(AppConfig):
    """Configuração do app Organização."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'src.adapters.django_app.organizacao'
    label = 'organizacao'
    verbose_name = 'Estrutura Organizacional'
