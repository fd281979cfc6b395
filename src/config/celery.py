"""
Configuração do Celery para processamento assíncrono.

O Celery é usado para:
- Processar Domain Events de tickets fora do request/response
- Notificações a colaboradores e à equipa de suporte
- Tarefas agendadas (tickets urgentes em espera, relatório diário)

Arquitetura:
- Broker: RabbitMQ (mensagens entre Django e Workers)
- Backend: RPC (resultados devolvidos pelo broker)
- Workers: Processos que executam as tarefas

Uso:
    # Iniciar worker
    celery -A src.config.celery worker -l INFO

    # Iniciar beat (tarefas agendadas)
    celery -A src.config.celery beat -l INFO
"""

import os
from celery import Celery
from celery.schedules import crontab
from kombu import Queue, Exchange

# Definir módulo de settings do Django
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'src.config.settings')

HANDLERS = 'src.adapters.django_app.events.handlers'

# Criar aplicação Celery
app = Celery('helpdesk')

# Carregar configurações do Django (CELERY_*)
app.config_from_object('django.conf:settings', namespace='CELERY')

app.conf.update(
    # Monitorização
    worker_send_task_events=True,
    task_send_sent_event=True,
)

# Definir filas
app.conf.task_default_queue = 'default'
app.conf.task_queues = (
    Queue('default', Exchange('default'), routing_key='default'),
    Queue('events', Exchange('events'), routing_key='events.#'),
    Queue('notifications', Exchange('notifications'), routing_key='notifications.#'),
    Queue('reports', Exchange('reports'), routing_key='reports.#'),
)

# Roteamento de tarefas para filas
app.conf.task_routes = {
    f'{HANDLERS}.dispatch_domain_event': {'queue': 'events'},
    f'{HANDLERS}.handle_*': {'queue': 'events'},
    f'{HANDLERS}.notify_*': {'queue': 'notifications'},
    f'{HANDLERS}.record_metric': {'queue': 'reports'},
    f'{HANDLERS}.generate_daily_report': {'queue': 'reports'},
    f'{HANDLERS}.check_pending_urgent_tickets': {'queue': 'reports'},
}

# Auto-descoberta de tarefas
app.autodiscover_tasks([
    'src.adapters.django_app.events',
], related_name='handlers')

# Tarefas agendadas (beat)
app.conf.beat_schedule = {
    # Tickets urgentes por atender, a cada hora
    'check-pending-urgent-tickets': {
        'task': f'{HANDLERS}.check_pending_urgent_tickets',
        'schedule': 3600.0,
        'kwargs': {'horas': 4},
    },

    # Relatório diário às 8h
    'daily-report': {
        'task': f'{HANDLERS}.generate_daily_report',
        'schedule': crontab(hour=8, minute=0),
    },
}
