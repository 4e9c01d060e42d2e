"""
Configuração do Django App de Atrasos.
"""

from django.apps import AppConfig


class AtrasosConfig(AppConfig):
    """Configuração do app Atrasos."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'src.adapters.django_app.atrasos'
    label = 'atrasos'
    verbose_name = 'Atrasos e Justificativas'
