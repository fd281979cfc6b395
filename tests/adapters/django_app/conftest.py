"""
Configuração pytest para testes com Django.

A configuração do Django (SQLite em memória) é feita no conftest
da raiz. Este ficheiro fornece:
- Repositórios Django e utilizadores gravados na base de dados
- Container de testes (InMemory) com os utilizadores carregados
"""

import pytest


@pytest.fixture
def django_ticket_repo():
    """Repositório sobre o ORM (requer marcador django_db)."""
    from src.adapters.django_app.tickets.repositories import DjangoTicketRepository
    return DjangoTicketRepository()


@pytest.fixture
def django_user_directory(db, utilizadores):
    """Diretório sobre o ORM, já com os utilizadores de teste gravados."""
    from src.adapters.django_app.users.repositories import DjangoUserDirectory

    directory = DjangoUserDirectory()
    for user in utilizadores:
        directory.save(user)
    return directory


@pytest.fixture
def ticket_model_factory(db):
    """Factory para criar TicketModel diretamente na base de dados."""
    from datetime import datetime
    from src.adapters.django_app.tickets.models import TicketModel

    def create_ticket(**kwargs):
        agora = datetime.now()
        defaults = {
            'tipo': 'Hardware',
            'submetido_por_id': 'colab-1',
            'equipamento': 'Portátil',
            'avaria': 'Ecrã riscado',
            'criado_em': agora,
            'atualizado_em': agora,
        }
        defaults.update(kwargs)
        return TicketModel.objects.create(**defaults)

    return create_ticket


@pytest.fixture
def testing_container(utilizadores):
    """TestingContainer com os utilizadores de teste no diretório."""
    from src.config.container import TestingContainer

    container = TestingContainer()
    directory = container.user_directory()
    for user in utilizadores:
        directory.add(user)
    return container
