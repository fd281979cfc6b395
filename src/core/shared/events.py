"""
Domain Events - base para eventos do domínio.

Eventos são criados pelos use cases, enfileirados no UnitOfWork e
publicados apenas depois do commit. Handlers Celery consomem a forma
serializada (to_dict) para notificações e métricas.

Características:
- Auto-geração de ID e timestamp
- Serializáveis para transporte (JSON)
- Rastreáveis via aggregate_id
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Any, Dict
import uuid


@dataclass
class DomainEvent(ABC):
    """
    Classe base abstrata para Domain Events.

    Um Domain Event regista algo que já aconteceu no domínio
    (TicketCriado, TicketAtendido), por isso o nome é sempre no passado.

    Attributes:
        aggregate_id: ID do agregado que gerou o evento (obrigatório)
        event_id: Identificador único do evento
        occurred_at: Momento em que o evento ocorreu
        version: Versão do schema do evento

    Example:
        @dataclass
        class TicketAtendidoEvent(DomainEvent):
            tecnico_id: str = ""

            @property
            def aggregate_type(self) -> str:
                return "Ticket"
    """

    aggregate_id: str = ""
    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    occurred_at: datetime = field(default_factory=datetime.now)
    version: int = 1

    def __post_init__(self):
        if not self.aggregate_id:
            raise ValueError("aggregate_id é obrigatório")
        self.aggregate_id = str(self.aggregate_id)

    @property
    @abstractmethod
    def aggregate_type(self) -> str:
        """Nome do tipo do agregado (ex: "Ticket")."""
        ...

    @property
    def event_type(self) -> str:
        return self.__class__.__name__

    def to_dict(self) -> Dict[str, Any]:
        """
        Serializa evento para dicionário.

        Os dados específicos do evento são também expostos no nível
        superior para que os handlers os leiam diretamente.

        Returns:
            Dicionário com dados do evento
        """
        data = self._get_event_data()
        return {
            "event_id": self.event_id,
            "event_type": self.event_type,
            "aggregate_id": self.aggregate_id,
            "aggregate_type": self.aggregate_type,
            "occurred_at": self.occurred_at.isoformat(),
            "version": self.version,
            "data": data,
            **data,
        }

    def _get_event_data(self) -> Dict[str, Any]:
        """Campos declarados pela subclasse (exclui os da base)."""
        base_fields = {"event_id", "aggregate_id", "occurred_at", "version"}
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name not in base_fields
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DomainEvent":
        """
        Reconstrói evento a partir da forma serializada.

        Args:
            data: Dicionário produzido por to_dict()

        Returns:
            Instância do evento
        """
        return cls(
            aggregate_id=data["aggregate_id"],
            event_id=data.get("event_id", str(uuid.uuid4())),
            occurred_at=datetime.fromisoformat(data["occurred_at"]),
            version=data.get("version", 1),
            **data.get("data", {}),
        )

    def __repr__(self) -> str:
        return (
            f"{self.event_type}("
            f"event_id={self.event_id[:8]}..., "
            f"aggregate_id={self.aggregate_id}, "
            f"occurred_at={self.occurred_at.isoformat()}"
            f")"
        )
