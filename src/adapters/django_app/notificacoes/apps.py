"""
Configuração do Django App de Notificações.
"""

from django.apps import AppConfig


class NotificacoesConfig(AppConfig):
    """Configuração do app Notificações."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'src.adapters.django_app.notificacoes'
    label = 'notificacoes'
    verbose_name = 'Notificações'
