"""
Event Publishers - Publicadores de Eventos de Domínio.

Entregam os eventos confirmados pela Unit of Work aos consumidores.
Implementações:
- LoggingEventPublisher: Regista no log (desenvolvimento)
- CeleryEventPublisher: Envia para o dispatcher Celery (produção)
- InMemoryEventPublisher: Guarda em memória (testes)
- CompositeEventPublisher: Delega para vários publishers

O modo é escolhido por EVENT_PUBLISHER_MODE (ver settings.py).
"""

from typing import List, Callable, Dict, Optional
import logging
import json

from src.core.shared.events import DomainEvent
from src.core.shared.interfaces import EventPublisher

logger = logging.getLogger(__name__)

EventHandler = Callable[[DomainEvent], None]


class _HandlerRegistry:
    """Handlers síncronos locais, indexados pelo tipo de evento."""

    def __init__(self):
        self._handlers: Dict[str, List[EventHandler]] = {}

    def register_handler(self, event_type: str, handler: EventHandler) -> None:
        self._handlers.setdefault(event_type, []).append(handler)

    def _dispatch_to_handlers(self, event: DomainEvent) -> None:
        for handler in self._handlers.get(event.event_type, []):
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Erro em handler para {event.event_type}: {e}", exc_info=True)


def _enviar_para_celery(event: DomainEvent) -> None:
    from src.adapters.django_app.events.handlers import dispatch_domain_event
    dispatch_domain_event.delay(event.event_type, event.to_dict())


class LoggingEventPublisher(_HandlerRegistry, EventPublisher):
    """
    Publisher que regista os eventos no log.

    Usado em desenvolvimento para visualizar eventos sem
    infraestrutura de mensageria.
    """

    def __init__(self, log_level: int = logging.INFO, dispatch_to_celery: bool = False):
        """
        Args:
            log_level: Nível de log para eventos
            dispatch_to_celery: Se deve também despachar para Celery
        """
        super().__init__()
        self._log_level = log_level
        self._dispatch_to_celery = dispatch_to_celery

    def publish(self, event: DomainEvent) -> None:
        logger.log(
            self._log_level,
            f"[EVENT] {event.event_type} | "
            f"aggregate={event.aggregate_id} | "
            f"data={json.dumps(event.to_dict()['data'], default=str)}"
        )

        if self._dispatch_to_celery:
            try:
                _enviar_para_celery(event)
            except Exception as e:
                logger.warning(f"Falha ao despachar para Celery: {e}")

        self._dispatch_to_handlers(event)


class CeleryEventPublisher(EventPublisher):
    """
    Publisher que envia eventos para o dispatcher Celery.

    Falhas do broker não interrompem o fluxo: a transação já foi
    confirmada quando o evento é publicado.
    """

    def __init__(self, also_log: bool = True):
        self._also_log = also_log

    def publish(self, event: DomainEvent) -> None:
        if self._also_log:
            logger.info(
                f"[EVENT->CELERY] {event.event_type} | "
                f"aggregate={event.aggregate_id}"
            )

        try:
            _enviar_para_celery(event)
        except Exception as e:
            logger.error(f"Falha ao publicar evento no Celery: {e}", exc_info=True)


class InMemoryEventPublisher(_HandlerRegistry, EventPublisher):
    """
    Publisher em memória para testes.

    Example:
        publisher = InMemoryEventPublisher()
        uow = InMemoryUnitOfWork(event_publisher=publisher)
        ...
        assert publisher.get_events_by_type("TicketCriadoEvent")
    """

    def __init__(self):
        super().__init__()
        self._published_events: List[DomainEvent] = []

    def publish(self, event: DomainEvent) -> None:
        self._published_events.append(event)
        self._dispatch_to_handlers(event)

    @property
    def published_events(self) -> List[DomainEvent]:
        return self._published_events.copy()

    def get_events_by_type(self, event_type: str) -> List[DomainEvent]:
        return [e for e in self._published_events if e.event_type == event_type]

    def clear(self) -> None:
        self._published_events.clear()


class CompositeEventPublisher(EventPublisher):
    """
    Publisher que delega para múltiplos publishers.

    A falha de um publisher não impede os restantes.
    """

    def __init__(self, publishers: Optional[List[EventPublisher]] = None):
        self._publishers = list(publishers or [])

    def add_publisher(self, publisher: EventPublisher) -> None:
        self._publishers.append(publisher)

    def publish(self, event: DomainEvent) -> None:
        for publisher in self._publishers:
            try:
                publisher.publish(event)
            except Exception as e:
                logger.error(
                    f"Erro ao publicar em {publisher.__class__.__name__}: {e}"
                )


PUBLISHER_MODES = ("logging", "celery", "memory", "composite")


def get_event_publisher(mode: str = "logging") -> EventPublisher:
    """
    Factory para obter publisher apropriado.

    Args:
        mode: "logging", "celery", "memory" ou "composite"
              (logging + celery)

    Returns:
        Publisher configurado
    """
    mode = (mode or "logging").lower()
    if mode == "celery":
        return CeleryEventPublisher()
    if mode == "memory":
        return InMemoryEventPublisher()
    if mode == "composite":
        return CompositeEventPublisher([
            LoggingEventPublisher(),
            CeleryEventPublisher(also_log=False),
        ])
    if mode != "logging":
        logger.warning(f"EVENT_PUBLISHER_MODE desconhecido '{mode}', a usar logging")
    return LoggingEventPublisher()
