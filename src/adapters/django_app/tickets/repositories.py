"""
Repositórios Django para persistência de Tickets.

Implementam as interfaces (Ports) definidas no Core.
São DRIVEN ADAPTERS - acionados pelo Core em resposta a operações.

Responsabilidades:
- Implementar TicketRepository protocol
- Mapear entities para models e vice-versa
- Executar queries no banco via ORM
- Converter erros do ORM em StorageError

Escrita condicionada:
    update() executa um único
        UPDATE tickets SET ... WHERE id = ? AND estado = ?
    e devolve True apenas se uma linha foi afetada.
"""

from datetime import datetime
from typing import List, Optional
import logging

from src.core.tickets.entities import TicketEntity, TicketEstado
from ..shared.database import storage_operation

from .models import TicketModel
from .mappers import TicketMapper

logger = logging.getLogger(__name__)


class DjangoTicketRepository:
    """
    Implementação Django do TicketRepository.

    Implementa a interface definida em src/core/tickets/ports.py
    usando o Django ORM.

    Example:
        repo = DjangoTicketRepository()
        ticket_id = repo.add(ticket)
        ticket = repo.get_by_id(ticket_id)
        ticket.atender("tec-1")
        repo.update(ticket, estado_esperado=TicketEstado.POR_ATENDER)
    """

    def __init__(self):
        self._mapper = TicketMapper()

    @storage_operation("add", "tickets")
    def add(self, ticket: TicketEntity) -> int:
        """
        Insere ticket novo e escreve o ID atribuído na entidade.

        Returns:
            ID atribuído pela base de dados
        """
        model = self._mapper.to_model(ticket)
        model.save(force_insert=True)
        ticket.id = model.id

        logger.info(f"Ticket inserted: {ticket.id}")
        return ticket.id

    @storage_operation("get_by_id", "tickets")
    def get_by_id(self, ticket_id: int) -> Optional[TicketEntity]:
        try:
            model = TicketModel.objects.get(id=ticket_id)
        except TicketModel.DoesNotExist:
            logger.debug(f"Ticket not found: {ticket_id}")
            return None
        return self._mapper.to_entity(model)

    @storage_operation("list_by_estado", "tickets")
    def list_by_estado(self, estado: TicketEstado) -> List[TicketEntity]:
        return self._mapper.to_entity_list(TicketModel.objects.filter(estado=estado.value))

    @storage_operation("list_by_submetedor", "tickets")
    def list_by_submetedor(self, submetido_por_id: str) -> List[TicketEntity]:
        return self._mapper.to_entity_list(
            TicketModel.objects.filter(submetido_por_id=submetido_por_id)
        )

    @storage_operation("list_by_tecnico", "tickets")
    def list_by_tecnico(self, tecnico_id: str) -> List[TicketEntity]:
        return self._mapper.to_entity_list(TicketModel.objects.filter(tecnico_id=tecnico_id))

    @storage_operation("list_by_periodo", "tickets")
    def list_by_periodo(self, inicio: datetime, fim: datetime) -> List[TicketEntity]:
        """Tickets criados entre inicio e fim (inclusive)."""
        return self._mapper.to_entity_list(
            TicketModel.objects.filter(criado_em__gte=inicio, criado_em__lte=fim)
        )

    @storage_operation("list_all", "tickets")
    def list_all(self) -> List[TicketEntity]:
        return self._mapper.to_entity_list(TicketModel.objects.all())

    @storage_operation("update", "tickets")
    def update(self, ticket: TicketEntity, estado_esperado: TicketEstado) -> bool:
        """
        Grava a transição se o estado guardado for `estado_esperado`.

        Returns:
            True se uma linha foi atualizada
        """
        rows = TicketModel.objects.filter(
            id=ticket.id,
            estado=estado_esperado.value,
        ).update(**self._mapper.to_update_fields(ticket))

        if rows != 1:
            logger.warning(
                f"Guarded update rejected for ticket {ticket.id} "
                f"(expected estado '{estado_esperado.value}')"
            )
            return False

        logger.debug(f"Ticket updated: {ticket.id} -> {ticket.estado.value}")
        return True

    @storage_operation("count", "tickets")
    def count(self) -> int:
        return TicketModel.objects.count()
