"""
URL Configuration do Helpdesk de Tickets.

Estrutura:
- /api/tickets/ - API JSON de Tickets
- /health/ - Health check (base de dados)
"""

from django.http import JsonResponse
from django.urls import path, include

from src.adapters.django_app.shared.database import check_database_connection


def health(request):
    database = check_database_connection()
    return JsonResponse(
        {'status': 'ok' if database['healthy'] else 'degraded', 'database': database},
        status=200 if database['healthy'] else 503,
    )


urlpatterns = [
    # Tickets API
    path('api/tickets/', include('src.adapters.django_app.tickets.urls')),

    # Health check
    path('health/', health, name='health'),
]
