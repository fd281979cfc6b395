"""
Configurações globais do Pytest para o Helpdesk de Tickets.

Este ficheiro é carregado automaticamente pelo pytest e fornece:
- Configuração mínima do Django (SQLite em memória) para todos os testes
- Fixtures partilhadas (utilizadores, repositórios, unit of work)
"""

from datetime import datetime, timedelta
from pathlib import Path

import pytest


def pytest_configure(config):
    """Configura Django antes dos testes."""
    import django
    from django.conf import settings

    if not settings.configured:
        settings.configure(
            DEBUG=True,
            SECRET_KEY='test-secret-key',
            DATABASES={
                'default': {
                    'ENGINE': 'django.db.backends.sqlite3',
                    'NAME': ':memory:',
                }
            },
            INSTALLED_APPS=[
                'django.contrib.contenttypes',
                'src.adapters.django_app.users',
                'src.adapters.django_app.tickets',
            ],
            ROOT_URLCONF='src.config.urls',
            DEFAULT_AUTO_FIELD='django.db.models.BigAutoField',
            USE_TZ=False,
            TIME_ZONE='Europe/Lisbon',
            EVENT_PUBLISHER_MODE='memory',
            ESTRATEGIA_ATENDIMENTO_PADRAO='fifo',
            ESTATISTICAS_DIAS_PADRAO=30,
            CELERY_BROKER_URL='memory://',
            CELERY_RESULT_BACKEND='cache+memory://',
            CELERY_TASK_ALWAYS_EAGER=True,
        )
        django.setup()

    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


@pytest.fixture(scope="session")
def project_root():
    """Retorna o caminho raiz do projeto."""
    return Path(__file__).parent.parent


# =============================================================================
# Utilizadores
# =============================================================================

@pytest.fixture
def utilizadores():
    """Colaboradores, técnicos e administrador usados nos testes."""
    from src.core.users.entities import UserEntity, PerfilUtilizador

    return [
        UserEntity(id="colab-1", username="joana", nome_completo="Joana Silva"),
        UserEntity(id="colab-2", username="rui"),
        UserEntity(id="colab-inativo", username="velho", ativo=False),
        UserEntity(
            id="tec-1", username="ana", nome_completo="Ana Pereira",
            perfil=PerfilUtilizador.TECNICO,
        ),
        UserEntity(
            id="tec-2", username="miguel", nome_completo="Miguel Santos",
            perfil=PerfilUtilizador.TECNICO,
        ),
        UserEntity(
            id="tec-inativo", username="bruno",
            perfil=PerfilUtilizador.TECNICO, ativo=False,
        ),
        UserEntity(id="admin-1", username="admin", perfil=PerfilUtilizador.ADMINISTRADOR),
    ]


@pytest.fixture
def user_directory(utilizadores):
    """Diretório em memória com os utilizadores de teste."""
    from src.core.users.ports import InMemoryUserDirectory
    return InMemoryUserDirectory(utilizadores)


# =============================================================================
# Tickets
# =============================================================================

@pytest.fixture
def inmemory_ticket_repo():
    """Repositório em memória para testes unitários."""
    from src.core.tickets.ports import InMemoryTicketRepository
    return InMemoryTicketRepository()


@pytest.fixture
def inmemory_publisher():
    from src.adapters.django_app.events.publishers import InMemoryEventPublisher
    return InMemoryEventPublisher()


@pytest.fixture
def inmemory_uow(inmemory_publisher):
    """Unit of Work em memória para testes unitários."""
    from src.adapters.django_app.shared.unit_of_work import InMemoryUnitOfWork
    return InMemoryUnitOfWork(event_publisher=inmemory_publisher)


@pytest.fixture
def make_ticket():
    """
    Factory de entidades com data de criação controlada.

    Example:
        t = make_ticket("Hardware", id=1, horas_atras=5)
    """
    from src.core.tickets.entities import TicketEntity, TipoTicket

    base = datetime(2024, 3, 15, 12, 0, 0)

    def _make(tipo="Hardware", id=None, horas_atras=0, urgente=False, criado_em=None, **kwargs):
        criado = criado_em or base - timedelta(hours=horas_atras)
        if TipoTicket.from_string(tipo) == TipoTicket.HARDWARE:
            dados = {
                "equipamento": kwargs.pop("equipamento", "Portátil"),
                "avaria": kwargs.pop("avaria", "Servidor não liga" if urgente else "Ecrã riscado"),
            }
        else:
            dados = {
                "software": kwargs.pop("software", "ERP"),
                "descricao_necessidade": kwargs.pop(
                    "descricao_necessidade",
                    "Erro crítico na faturação" if urgente else "Instalar suplemento",
                ),
            }

        ticket = TicketEntity(
            id=id,
            tipo=TipoTicket.from_string(tipo),
            submetido_por_id=kwargs.pop("submetido_por_id", "colab-1"),
            criado_em=criado,
            atualizado_em=criado,
            **dados,
            **kwargs,
        )
        return ticket

    return _make
