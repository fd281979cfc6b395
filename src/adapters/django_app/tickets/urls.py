"""
URL patterns da API JSON de Tickets (montada em /api/tickets/).

- GET/POST /               - Listar / criar
- GET      /proximo/       - Próximo ticket
- GET/POST /estrategias/   - Estratégias de atendimento
- GET      /estatisticas/  - Dashboard (+ comparacao/, tecnicos/, relatorio/)
- GET      /<id>/          - Detalhes
- POST     /<id>/atender/  - Iniciar atendimento
- POST     /<id>/concluir/ - Concluir atendimento
"""

from django.urls import path
from . import api_views

app_name = 'tickets'

urlpatterns = [
    # Listagem e criação
    path('', api_views.TicketAPIListView.as_view(), name='api_list'),

    # Atendimento (antes do <pk> para não conflitar)
    path('proximo/', api_views.TicketAPIProximoView.as_view(), name='api_proximo'),
    path('estrategias/', api_views.TicketAPIEstrategiasView.as_view(), name='api_estrategias'),

    # Estatísticas
    path('estatisticas/', api_views.TicketAPIEstatisticasView.as_view(), name='api_estatisticas'),
    path('estatisticas/comparacao/', api_views.TicketAPIComparacaoView.as_view(), name='api_comparacao'),
    path('estatisticas/tecnicos/', api_views.TicketAPITecnicosView.as_view(), name='api_tecnicos'),
    path('estatisticas/relatorio/', api_views.TicketAPIRelatorioView.as_view(), name='api_relatorio'),

    # Detalhes e ações
    path('<int:pk>/', api_views.TicketAPIDetailView.as_view(), name='api_detail'),
    path('<int:pk>/atender/', api_views.TicketAPIAtenderView.as_view(), name='api_atender'),
    path('<int:pk>/concluir/', api_views.TicketAPIConcluirView.as_view(), name='api_concluir'),
]
