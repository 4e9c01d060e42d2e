"""
Configuração do Django App de SLA.
"""

from django.apps import AppConfig


class SLAConfig(AppConfig):
    """Configuração do app SLA."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'src.adapters.django_app.sla'
    label = 'sla'
    verbose_name = 'Acordos de Nível de Serviço'
