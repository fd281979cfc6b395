"""
Interfaces (Ports) partilhadas - contratos entre Core e Adapters.

Driven Ports usados por todos os domínios:
- UnitOfWork: transação atómica + eventos pós-commit
- EventPublisher: entrega de eventos a consumidores

Os ports específicos de cada domínio ficam em <dominio>/ports.py.
"""

from abc import ABC, abstractmethod
from typing import List

from .events import DomainEvent


class UnitOfWork(ABC):
    """
    Unit of Work - Coordena transações atómicas.

    Garante que a escrita do ticket (campos base e campos da variante)
    é persistida como uma única unidade e que os eventos só saem
    depois do commit.

    Pattern: Context Manager
        with uow:
            repo.update(ticket, estado_esperado=TicketEstado.POR_ATENDER)
            uow.publish_event(event)
        # Commit automático ao sair sem erro
        # Rollback automático se exceção
    """

    def __init__(self):
        self._events: List[DomainEvent] = []

    def __enter__(self) -> "UnitOfWork":
        self._begin_transaction()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        """
        Finaliza contexto de transação.

        Returns:
            False para propagar exceções
        """
        if exc_type is not None:
            self.rollback()
        else:
            self.commit()
        return False

    @abstractmethod
    def _begin_transaction(self) -> None:
        """Inicia uma nova transação no adapter."""
        raise NotImplementedError

    @abstractmethod
    def commit(self) -> None:
        """
        Persiste as mudanças e publica eventos.

        Note:
            Eventos só são publicados após commit bem-sucedido.
            Se o commit falhar, são descartados.
        """
        raise NotImplementedError

    @abstractmethod
    def rollback(self) -> None:
        """Desfaz as mudanças e descarta eventos."""
        raise NotImplementedError

    def publish_event(self, event: DomainEvent) -> None:
        """
        Enfileira evento para publicação após commit.

        Args:
            event: Evento de domínio a ser publicado
        """
        self._events.append(event)

    def collect_events(self) -> List[DomainEvent]:
        """Eventos pendentes (para testes/debugging)."""
        return list(self._events)

    def clear_events(self) -> None:
        self._events.clear()


class EventPublisher(ABC):
    """
    Interface para publicação de eventos.

    Implementações em src/adapters/django_app/events/publishers.py
    (Logging, Celery, InMemory, Composite).
    """

    @abstractmethod
    def publish(self, event: DomainEvent) -> None:
        """Publica evento para consumidores."""
        raise NotImplementedError

    def publish_batch(self, events: List[DomainEvent]) -> None:
        """Publica múltiplos eventos, pela ordem recebida."""
        for event in events:
            self.publish(event)
