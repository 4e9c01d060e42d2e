"""
Configuração do Celery para processamento assíncrono.

O Celery é usado para:
- Processar Domain Events de forma assíncrona
- Entregar notificações in-app
- Varredura periódica de reconciliação de atrasos (beat)

Arquitetura:
- Broker: RabbitMQ (mensagens entre Django e Workers)
- Backend: Redis (resultados de tarefas)

Uso:
    # Iniciar worker
    celery -A src.config.celery worker -l INFO -Q default,events,notifications,maintenance

    # Iniciar beat (tarefas agendadas)
    celery -A src.config.celery beat -l INFO
"""

import os
from celery import Celery
from kombu import Queue, Exchange

# Definir módulo de settings do Django
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'src.config.settings')

app = Celery('itsm')

# Carregar configurações do Django (prefixo CELERY_)
app.config_from_object('django.conf:settings', namespace='CELERY')

app.conf.task_default_queue = 'default'

# Definir filas
app.conf.task_queues = (
    Queue('default', Exchange('default'), routing_key='default'),
    Queue('events', Exchange('events'), routing_key='events.#'),
    Queue('notifications', Exchange('notifications'), routing_key='notifications.#'),
    Queue('maintenance', Exchange('maintenance'), routing_key='maintenance.#'),
)

_HANDLERS = 'src.adapters.django_app.events.handlers'

# Roteamento de tarefas para filas
app.conf.task_routes = {
    f'{_HANDLERS}.entregar_notificacao': {'queue': 'notifications'},
    f'{_HANDLERS}.sincronizar_atrasos': {'queue': 'maintenance'},
    f'{_HANDLERS}.*': {'queue': 'events'},
}

# Auto-descoberta: o módulo de tarefas é `handlers`, não `tasks`
app.autodiscover_tasks(['src.adapters.django_app.events'], related_name='handlers')

# Tarefas agendadas (beat)
app.conf.beat_schedule = {
    'sincronizar-atrasos': {
        'task': f'{_HANDLERS}.sincronizar_atrasos',
        'schedule': float(os.environ.get('DELAY_SYNC_INTERVAL_SECONDS', 900)),
    },
}
