"""
Configuração do Celery para processamento assíncrono.

O Celery é usado para:
- Processar Domain Events de usuários (modos async e hybrid)
- Notificações (boas-vindas, alteração de dados de acesso)
- Relatório diário de cadastros (beat)

Arquitetura:
- Broker: RabbitMQ (mensagens entre Django e Workers)
- Backend: Redis (resultados de tarefas)

Uso:
    celery -A src.config.celery worker -l INFO
    celery -A src.config.celery beat -l INFO
"""

import os

from celery import Celery
from celery.schedules import crontab
from kombu import Queue, Exchange

# Definir módulo de settings do Django
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'src.config.settings')

app = Celery('usuarios')

# Broker, backend, serialização e retry vêm das settings CELERY_*
app.config_from_object('django.conf:settings', namespace='CELERY')

app.conf.update(
    worker_send_task_events=True,
    task_send_sent_event=True,
)

HANDLERS = 'src.adapters.django_app.events.handlers'

app.conf.task_default_queue = 'default'

app.conf.task_queues = (
    Queue('default', Exchange('default'), routing_key='default'),
    Queue('events', Exchange('events'), routing_key='events.#'),
    Queue('notifications', Exchange('notifications'), routing_key='notifications.#'),
)

# Rotas exatas têm precedência sobre os padrões glob
app.conf.task_routes = {
    f'{HANDLERS}.notify_user': {'queue': 'notifications'},
    f'{HANDLERS}.gerar_relatorio_diario': {'queue': 'default'},
    f'{HANDLERS}.*': {'queue': 'events'},
}

app.autodiscover_tasks(
    ['src.adapters.django_app.events'],
    related_name='handlers',
)

app.conf.beat_schedule = {
    # Relatório diário às 8h
    'relatorio-diario': {
        'task': f'{HANDLERS}.gerar_relatorio_diario',
        'schedule': crontab(hour=8, minute=0),
    },
}
