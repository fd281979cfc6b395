"""
Dependency Injection Container.

Configura e gere todas as dependências da aplicação.
Usa dependency-injector para lazy-loading e injeção automática.

Padrões:
- Singleton: Uma instância para toda a app (repositórios, publisher,
  contexto de atendimento, fachada)
- Factory: Nova instância por operação (UoW)
- Configuration: Valores lidos de django.conf.settings

A fachada GestaoTicketsService recebe a *factory* da Unit of Work
(`unit_of_work.provider`) e abre uma transação nova por operação.
"""

from dependency_injector import containers, providers
from typing import Optional


class Container(containers.DeclarativeContainer):
    """
    Container principal de Dependency Injection.

    Organização:
    - Configuration: settings do Django
    - Infrastructure: Event publisher
    - Repositories: Tickets e diretório de utilizadores
    - Unit of Work: Transações
    - Fachada: GestaoTicketsService (cria os use cases por operação)

    Example:
        from src.config.container import get_container

        gestao = get_container().gestao_tickets_service()
        resultado = gestao.criar_ticket_hardware("user-1", "Servidor", "Não liga")
    """

    # =========================================================================
    # Configuration
    # =========================================================================

    config = providers.Configuration()

    # =========================================================================
    # Infrastructure
    # =========================================================================

    event_publisher = providers.Singleton(
        lambda mode: __import__(
            'src.adapters.django_app.events.publishers',
            fromlist=['get_event_publisher']
        ).get_event_publisher(mode or 'logging'),
        mode=config.event_publisher_mode,
    )

    # =========================================================================
    # Repositories (Singleton - uma instância por app)
    # =========================================================================

    ticket_repository = providers.Singleton(
        # Lazy import para evitar carregar models antes do setup do Django
        lambda: __import__(
            'src.adapters.django_app.tickets.repositories',
            fromlist=['DjangoTicketRepository']
        ).DjangoTicketRepository()
    )

    user_directory = providers.Singleton(
        lambda: __import__(
            'src.adapters.django_app.users.repositories',
            fromlist=['DjangoUserDirectory']
        ).DjangoUserDirectory()
    )

    # =========================================================================
    # Unit of Work (Factory - nova instância por operação)
    # =========================================================================

    unit_of_work = providers.Factory(
        lambda event_publisher: __import__(
            'src.adapters.django_app.shared.unit_of_work',
            fromlist=['DjangoUnitOfWork']
        ).DjangoUnitOfWork(
            event_publisher=event_publisher,
        ),
        event_publisher=event_publisher,
    )

    # =========================================================================
    # Atendimento (estado partilhado: estratégia ativa)
    # =========================================================================

    contexto_atendimento = providers.Singleton(
        lambda codigo: __import__(
            'src.core.tickets.strategies',
            fromlist=['ContextoAtendimento']
        ).ContextoAtendimento.com_codigo(codigo or 'fifo'),
        codigo=config.estrategia_atendimento,
    )

    # =========================================================================
    # Fachada
    # =========================================================================

    gestao_tickets_service = providers.Singleton(
        lambda ticket_repo, user_directory, uow_factory, contexto, dias: __import__(
            'src.core.tickets.use_cases',
            fromlist=['GestaoTicketsService']
        ).GestaoTicketsService(
            ticket_repo=ticket_repo,
            user_directory=user_directory,
            uow_factory=uow_factory,
            contexto=contexto,
            dias_estatisticas=dias or 30,
        ),
        ticket_repo=ticket_repository,
        user_directory=user_directory,
        uow_factory=unit_of_work.provider,
        contexto=contexto_atendimento,
        dias=config.estatisticas_dias,
    )


# =============================================================================
# Container Global (Singleton)
# =============================================================================

_container: Optional[Container] = None


def _configurar(container: Container) -> None:
    """Copia as opções do domínio de django.conf.settings para o container."""
    from django.conf import settings

    container.config.from_dict({
        'event_publisher_mode': getattr(settings, 'EVENT_PUBLISHER_MODE', 'logging'),
        'estrategia_atendimento': getattr(settings, 'ESTRATEGIA_ATENDIMENTO_PADRAO', 'fifo'),
        'estatisticas_dias': getattr(settings, 'ESTATISTICAS_DIAS_PADRAO', 30),
    })


def get_container() -> Container:
    """
    Retorna instância global do container.

    Cria se não existir (lazy initialization).

    Returns:
        Container configurado
    """
    global _container

    if _container is None:
        _container = Container()
        _configurar(_container)

    return _container


def reset_container() -> None:
    """
    Reset do container (para testes).

    Permite criar novo container limpo.
    """
    global _container
    _container = None


# =============================================================================
# Testing Container
# =============================================================================

class TestingContainer(containers.DeclarativeContainer):
    """
    Container para testes.

    Usa as implementações InMemory: não precisa de base de dados
    nem de broker.

    Example:
        container = TestingContainer()
        container.user_directory().add(UserEntity(id="tec-1", ...))
        gestao = container.gestao_tickets_service()
    """

    config = providers.Configuration()

    event_publisher = providers.Singleton(
        lambda: __import__(
            'src.adapters.django_app.events.publishers',
            fromlist=['InMemoryEventPublisher']
        ).InMemoryEventPublisher()
    )

    ticket_repository = providers.Singleton(
        lambda: __import__(
            'src.core.tickets.ports',
            fromlist=['InMemoryTicketRepository']
        ).InMemoryTicketRepository()
    )

    user_directory = providers.Singleton(
        lambda: __import__(
            'src.core.users.ports',
            fromlist=['InMemoryUserDirectory']
        ).InMemoryUserDirectory()
    )

    unit_of_work = providers.Factory(
        lambda event_publisher: __import__(
            'src.adapters.django_app.shared.unit_of_work',
            fromlist=['InMemoryUnitOfWork']
        ).InMemoryUnitOfWork(event_publisher=event_publisher),
        event_publisher=event_publisher,
    )

    contexto_atendimento = providers.Singleton(
        lambda: __import__(
            'src.core.tickets.strategies',
            fromlist=['ContextoAtendimento']
        ).ContextoAtendimento()
    )

    gestao_tickets_service = providers.Singleton(
        lambda ticket_repo, user_directory, uow_factory, contexto: __import__(
            'src.core.tickets.use_cases',
            fromlist=['GestaoTicketsService']
        ).GestaoTicketsService(
            ticket_repo=ticket_repo,
            user_directory=user_directory,
            uow_factory=uow_factory,
            contexto=contexto,
        ),
        ticket_repo=ticket_repository,
        user_directory=user_directory,
        uow_factory=unit_of_work.provider,
        contexto=contexto_atendimento,
    )
