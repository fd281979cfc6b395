"""
Ports (Interfaces) do Domínio de Tickets.

Define os contratos que os Adapters de infraestrutura devem implementar
para persistência e consulta de tickets.

Princípio:
    Core define interfaces → Adapters implementam
    Dependências sempre apontam para o Core

Escrita concorrente:
    `update` é uma escrita condicionada ao estado esperado
    (UPDATE ... WHERE id = ? AND estado = ?). Se outro técnico já
    tiver atuado sobre o ticket, nenhuma linha é afetada e `update`
    devolve False.
"""

import copy
import itertools
from datetime import datetime
from typing import Dict, List, Optional, Protocol, runtime_checkable

from src.core.shared.exceptions import EntityNotFoundError
from .entities import TicketEntity, TicketEstado


@runtime_checkable
class TicketRepository(Protocol):
    """
    Interface para persistência de Tickets.

    Implementações:
    - DjangoTicketRepository (ORM, src/adapters/django_app/tickets/repositories.py)
    - InMemoryTicketRepository (para testes)

    Falhas de infraestrutura são reportadas como StorageError.

    Methods:
        add: Insere ticket novo e devolve o ID atribuído
        get_by_id: Busca por ID
        list_by_estado: Filtra por estado
        list_by_submetedor: Filtra por colaborador que submeteu
        list_by_tecnico: Filtra por técnico
        list_by_periodo: Filtra por data de criação
        list_all: Lista todos
        update: Escrita condicionada ao estado esperado
    """

    def add(self, ticket: TicketEntity) -> int:
        """
        Insere ticket e atribui-lhe um ID.

        Args:
            ticket: Entidade sem ID

        Returns:
            ID atribuído (também escrito em ticket.id)
        """
        ...

    def get_by_id(self, ticket_id: int) -> Optional[TicketEntity]:
        ...

    def list_by_estado(self, estado: TicketEstado) -> List[TicketEntity]:
        ...

    def list_by_submetedor(self, submetido_por_id: str) -> List[TicketEntity]:
        ...

    def list_by_tecnico(self, tecnico_id: str) -> List[TicketEntity]:
        ...

    def list_by_periodo(self, inicio: datetime, fim: datetime) -> List[TicketEntity]:
        """Tickets com criado_em entre inicio e fim (inclusive)."""
        ...

    def list_all(self) -> List[TicketEntity]:
        ...

    def update(self, ticket: TicketEntity, estado_esperado: TicketEstado) -> bool:
        """
        Persiste o ticket se o estado guardado for `estado_esperado`.

        Args:
            ticket: Entidade já transitada
            estado_esperado: Estado que o ticket tinha antes da transição

        Returns:
            True se uma linha foi atualizada, False se o estado guardado
            era outro (ou o ticket não existe)
        """
        ...


class InMemoryTicketRepository:
    """
    Implementação em memória do TicketRepository.

    Guarda cópias das entidades para que alterações feitas por quem
    chama não cheguem ao "armazenamento" sem passar por update().

    Example:
        repo = InMemoryTicketRepository()
        ticket_id = repo.add(ticket)
        found = repo.get_by_id(ticket_id)
    """

    def __init__(self):
        self._tickets: Dict[int, TicketEntity] = {}
        self._sequencia = itertools.count(1)

    def add(self, ticket: TicketEntity) -> int:
        ticket.id = next(self._sequencia)
        self._tickets[ticket.id] = copy.deepcopy(ticket)
        return ticket.id

    def get_by_id(self, ticket_id: int) -> Optional[TicketEntity]:
        ticket = self._tickets.get(ticket_id)
        return copy.deepcopy(ticket) if ticket else None

    def list_by_estado(self, estado: TicketEstado) -> List[TicketEntity]:
        return self._filtrar(lambda t: t.estado == estado)

    def list_by_submetedor(self, submetido_por_id: str) -> List[TicketEntity]:
        return self._filtrar(lambda t: t.submetido_por_id == submetido_por_id)

    def list_by_tecnico(self, tecnico_id: str) -> List[TicketEntity]:
        return self._filtrar(lambda t: t.tecnico_id == tecnico_id)

    def list_by_periodo(self, inicio: datetime, fim: datetime) -> List[TicketEntity]:
        return self._filtrar(lambda t: inicio <= t.criado_em <= fim)

    def list_all(self) -> List[TicketEntity]:
        return self._filtrar(lambda t: True)

    def update(self, ticket: TicketEntity, estado_esperado: TicketEstado) -> bool:
        guardado = self._tickets.get(ticket.id)
        if guardado is None or guardado.estado != estado_esperado:
            return False
        self._tickets[ticket.id] = copy.deepcopy(ticket)
        return True

    def get_or_raise(self, ticket_id: int) -> TicketEntity:
        ticket = self.get_by_id(ticket_id)
        if ticket is None:
            raise EntityNotFoundError(
                f"Ticket {ticket_id} não encontrado",
                entity_type="Ticket",
                entity_id=str(ticket_id)
            )
        return ticket

    def count(self) -> int:
        return len(self._tickets)

    def clear(self) -> None:
        """Limpa todos os dados (útil para testes)."""
        self._tickets.clear()
        self._sequencia = itertools.count(1)

    def _filtrar(self, criterio) -> List[TicketEntity]:
        return [
            copy.deepcopy(t)
            for t in sorted(self._tickets.values(), key=lambda t: t.id)
            if criterio(t)
        ]
