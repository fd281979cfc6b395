"""
Unit of Work - Implementação Django.

Garante que cada transição de ticket é gravada numa única transação
e que os eventos de domínio só são publicados depois do commit.

Responsabilidades:
- Abrir/fechar um bloco transaction.atomic
- Commit/Rollback coordenado
- Publicar eventos após commit bem-sucedido

O bloco atomic é conduzido manualmente (__enter__/__exit__) para que
a UoW funcione tanto em autocommit como dentro de uma transação já
aberta (por exemplo, a transação de teste do pytest-django), caso em
que se torna um savepoint.
"""

from typing import List, Optional
import logging

from django.db import DatabaseError, transaction

from src.core.shared.interfaces import UnitOfWork, EventPublisher
from src.core.shared.events import DomainEvent
from src.core.shared.exceptions import StorageError

logger = logging.getLogger(__name__)


def _publicar(event_publisher: Optional[EventPublisher], events: List[DomainEvent]) -> None:
    for event in events:
        logger.info(
            f"Publishing event: {event.event_type} "
            f"for aggregate {event.aggregate_id}"
        )

        if event_publisher:
            try:
                event_publisher.publish(event)
            except Exception as e:
                # O commit já aconteceu; o evento fica apenas registado no log
                logger.error(f"Failed to publish event {event.event_type}: {e}", exc_info=True)


class DjangoUnitOfWork(UnitOfWork):
    """
    Implementação Django do Unit of Work.

    Features:
    - Context manager (with statement)
    - Auto-commit/rollback
    - Event buffering
    - Event Publisher integration (opcional)

    Example:
        uow = DjangoUnitOfWork(event_publisher=publisher)
        with uow:
            repo.update(ticket, TicketEstado.POR_ATENDER)
            uow.publish_event(TicketAtendidoEvent(...))
        # Commit automático + eventos publicados

    Example com rollback:
        with uow:
            repo.update(ticket, TicketEstado.POR_ATENDER)
            raise ConcurrencyError("...")
        # Rollback automático, eventos descartados
    """

    def __init__(self, event_publisher: Optional[EventPublisher] = None, using: Optional[str] = None):
        """
        Inicializa Unit of Work.

        Args:
            event_publisher: Publicador de eventos (Logging, Celery, ...)
            using: Alias da base de dados (None = default)
        """
        super().__init__()
        self._event_publisher = event_publisher
        self._using = using
        self._atomic = None
        self._committed = False
        self._rolled_back = False

    def _begin_transaction(self) -> None:
        """Abre o bloco atomic."""
        self._committed = False
        self._rolled_back = False
        self._atomic = transaction.atomic(using=self._using)
        try:
            self._atomic.__enter__()
        except DatabaseError as e:
            self._atomic = None
            raise StorageError("Não foi possível iniciar a transação", operation="begin") from e
        logger.debug("Transaction started")

    def commit(self) -> None:
        """
        Fecha o bloco atomic e publica eventos.

        Raises:
            StorageError: Se o commit falhar (eventos descartados)
        """
        if self._atomic is None:
            logger.warning("Transaction already finalized")
            return

        atomic, self._atomic = self._atomic, None
        try:
            atomic.__exit__(None, None, None)
        except DatabaseError as e:
            self._rolled_back = True
            self.clear_events()
            logger.error(f"Commit failed: {e}", exc_info=True)
            raise StorageError("Falha ao gravar alterações", operation="commit") from e

        self._committed = True
        logger.debug("Transaction committed")

        events = self.collect_events()
        self.clear_events()
        _publicar(self._event_publisher, events)

    def rollback(self) -> None:
        """
        Desfaz as mudanças e descarta eventos.

        Chamado automaticamente se exceção ocorrer dentro do contexto.
        """
        if self._atomic is None:
            return

        atomic, self._atomic = self._atomic, None
        try:
            transaction.set_rollback(True, using=self._using)
            atomic.__exit__(None, None, None)
            logger.debug("Transaction rolled back")
        finally:
            self._rolled_back = True
            self.clear_events()

    @property
    def is_committed(self) -> bool:
        """Verifica se transação foi comitada."""
        return self._committed

    @property
    def is_rolled_back(self) -> bool:
        """Verifica se transação foi revertida."""
        return self._rolled_back


class InMemoryUnitOfWork(UnitOfWork):
    """
    Unit of Work em memória para testes.

    Não persiste nada; regista os eventos confirmados e, se houver
    publicador, entrega-os após o "commit".

    Example:
        uow = InMemoryUnitOfWork()
        with uow:
            uow.publish_event(event)

        assert uow.committed
        assert len(uow.published_events) == 1
    """

    def __init__(self, event_publisher: Optional[EventPublisher] = None):
        super().__init__()
        self._event_publisher = event_publisher
        self._committed = False
        self._rolled_back = False
        self._published_events: List[DomainEvent] = []

    def _begin_transaction(self) -> None:
        self._committed = False
        self._rolled_back = False

    def commit(self) -> None:
        self._committed = True
        events = self.collect_events()
        self.clear_events()
        self._published_events.extend(events)
        _publicar(self._event_publisher, events)

    def rollback(self) -> None:
        self._rolled_back = True
        self.clear_events()

    @property
    def committed(self) -> bool:
        return self._committed

    @property
    def rolled_back(self) -> bool:
        return self._rolled_back

    @property
    def published_events(self) -> List[DomainEvent]:
        """Eventos confirmados desde a criação (ou último reset)."""
        return self._published_events

    def reset(self) -> None:
        """Reset para próximo teste."""
        self._committed = False
        self._rolled_back = False
        self._published_events.clear()
        self.clear_events()
