"""
Shared Domain Components.

Contém componentes partilhados entre todos os domínios:
- Exceções de domínio
- Resultado uniforme das operações
- Interfaces (Ports)
- Base classes para Domain Events
"""

from .exceptions import (
    DomainException,
    ValidationError,
    PermissionDeniedError,
    EntityNotFoundError,
    InvalidStateError,
    ConcurrencyError,
    StorageError,
)
from .events import DomainEvent
from .interfaces import UnitOfWork, EventPublisher
from .result import OperationResult

__all__ = [
    "DomainException",
    "ValidationError",
    "PermissionDeniedError",
    "EntityNotFoundError",
    "InvalidStateError",
    "ConcurrencyError",
    "StorageError",
    "DomainEvent",
    "UnitOfWork",
    "EventPublisher",
    "OperationResult",
]
