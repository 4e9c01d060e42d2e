"""
Configuração do Django App para Tickets.
"""

from django.apps import AppConfig


class TicketsConfig(AppConfig):
    """Configuração do app Tickets."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'src.adapters.django_app.tickets'
    label = 'tickets'
    verbose_name = 'Gestão de Tickets'
