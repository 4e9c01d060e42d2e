"""
Configuração do Django App de Apontamentos de Tempo.
"""

from django.apps import AppConfig


class ApontamentosConfig(AppConfig):
    """Configuração do app Apontamentos."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'src.adapters.django_app.apontamentos'
    label = 'apontamentos'
    verbose_name = 'Apontamentos de Tempo'
