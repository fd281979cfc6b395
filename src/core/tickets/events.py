"""
Domain Events do Domínio de Tickets.

Eventos:
- TicketCriadoEvent: Novo ticket foi submetido
- TicketAtendidoEvent: Técnico iniciou o atendimento
- AtendimentoConcluidoEvent: Atendimento foi concluído

Uso:
    Eventos são criados nos use cases e publicados através do
    UnitOfWork após commit bem-sucedido.

    with uow:
        ticket_id = repo.add(ticket)
        uow.publish_event(TicketCriadoEvent(aggregate_id=ticket_id, ...))
"""

from dataclasses import dataclass
from typing import Optional

from src.core.shared.events import DomainEvent


@dataclass
class TicketCriadoEvent(DomainEvent):
    """
    Evento: Ticket foi submetido.

    Handlers típicos:
    - Notificar a equipa de suporte se o ticket for urgente
    - Registar métrica de volume por tipo

    Attributes:
        tipo: "Hardware" ou "Software"
        submetido_por_id: ID do colaborador
        urgente: Se a descrição contém palavras urgentes
    """

    tipo: str = ""
    submetido_por_id: str = ""
    urgente: bool = False

    @property
    def aggregate_type(self) -> str:
        return "Ticket"


@dataclass
class TicketAtendidoEvent(DomainEvent):
    """
    Evento: Técnico iniciou o atendimento.

    Handlers típicos:
    - Notificar o colaborador de que o pedido está a ser tratado
    """

    tecnico_id: str = ""
    submetido_por_id: str = ""

    @property
    def aggregate_type(self) -> str:
        return "Ticket"


@dataclass
class AtendimentoConcluidoEvent(DomainEvent):
    """
    Evento: Atendimento foi concluído.

    Attributes:
        tecnico_id: ID do técnico
        estado_atendimento: "Resolvido" ou "Não Resolvido"
        tempo_atendimento_horas: Horas entre criação e atendimento
        submetido_por_id: ID do colaborador a notificar
    """

    tecnico_id: str = ""
    estado_atendimento: str = ""
    tempo_atendimento_horas: Optional[float] = None
    submetido_por_id: str = ""

    @property
    def aggregate_type(self) -> str:
        return "Ticket"
