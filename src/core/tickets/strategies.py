"""
Estratégias de Atendimento.

Cada estratégia escolhe, de um conjunto de tickets, o próximo a ser
atendido. Apenas tickets POR_ATENDER são considerados e nenhum ticket
é alterado.

Estratégias:
- EstrategiaFIFO: mais antigo primeiro
- EstrategiaLIFO: mais recente primeiro
- EstrategiaPrioridade: urgentes primeiro, depois FIFO
- EstrategiaPorTipo: tipo preferido primeiro, depois FIFO
- EstrategiaRoundRobin: alterna entre Hardware e Software

Empates em criado_em são resolvidos por id ascendente.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional

from src.core.shared.exceptions import ValidationError
from .entities import TicketEntity, TicketEstado, TipoTicket

logger = logging.getLogger(__name__)


def _ordenar(tickets: Iterable[TicketEntity], mais_recente_primeiro: bool = False) -> List[TicketEntity]:
    # id ascendente é o desempate em ambas as direções
    por_id = sorted(tickets, key=lambda t: t.id if t.id is not None else 0)
    return sorted(por_id, key=lambda t: t.criado_em, reverse=mais_recente_primeiro)


def _pendentes(tickets: Iterable[TicketEntity]) -> List[TicketEntity]:
    return [t for t in tickets if t.estado == TicketEstado.POR_ATENDER]


def _primeiro(tickets: List[TicketEntity]) -> Optional[TicketEntity]:
    if not tickets:
        return None
    return _ordenar(tickets)[0]


class EstrategiaAtendimento(ABC):
    """
    Interface das estratégias de seleção.

    Subclasses definem `nome`, `descricao` e `selecionar_proximo`.
    """

    nome: str = ""
    descricao: str = ""

    @abstractmethod
    def selecionar_proximo(self, tickets: List[TicketEntity]) -> Optional[TicketEntity]:
        """
        Seleciona o próximo ticket a atender.

        Args:
            tickets: Conjunto de tickets (não pendentes são ignorados)

        Returns:
            Ticket escolhido ou None se não houver pendentes
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(nome={self.nome!r})"


class EstrategiaFIFO(EstrategiaAtendimento):
    nome = "FIFO"
    descricao = "Primeiro a entrar, primeiro a ser atendido"

    def selecionar_proximo(self, tickets: List[TicketEntity]) -> Optional[TicketEntity]:
        return _primeiro(_pendentes(tickets))


class EstrategiaLIFO(EstrategiaAtendimento):
    nome = "LIFO"
    descricao = "Último a entrar, primeiro a ser atendido"

    def selecionar_proximo(self, tickets: List[TicketEntity]) -> Optional[TicketEntity]:
        pendentes = _pendentes(tickets)
        if not pendentes:
            return None
        return _ordenar(pendentes, mais_recente_primeiro=True)[0]


class EstrategiaPrioridade(EstrategiaAtendimento):
    """Tickets urgentes (ver TicketEntity.e_urgente) são atendidos primeiro."""

    nome = "Prioridade"
    descricao = "Tickets urgentes primeiro, restantes por ordem de chegada"

    def selecionar_proximo(self, tickets: List[TicketEntity]) -> Optional[TicketEntity]:
        pendentes = _pendentes(tickets)
        urgentes = [t for t in pendentes if t.e_urgente]
        return _primeiro(urgentes) or _primeiro(pendentes)


class EstrategiaPorTipo(EstrategiaAtendimento):
    """Dá preferência a um tipo de ticket, recorrendo a FIFO quando não há."""

    def __init__(self, tipo_preferido: TipoTicket):
        self.tipo_preferido = tipo_preferido
        self.nome = f"Prioridade {tipo_preferido.value}"
        self.descricao = f"Tickets de {tipo_preferido.value} primeiro"

    def selecionar_proximo(self, tickets: List[TicketEntity]) -> Optional[TicketEntity]:
        pendentes = _pendentes(tickets)
        preferidos = [t for t in pendentes if t.tipo == self.tipo_preferido]
        return _primeiro(preferidos) or _primeiro(pendentes)


class EstrategiaRoundRobin(EstrategiaAtendimento):
    """
    Alterna entre Hardware e Software.

    `ultimo_tipo` só muda quando a alternância acontece de facto; se
    apenas existir o mesmo tipo da última vez, o estado mantém-se.
    """

    nome = "Round Robin"
    descricao = "Alterna entre tickets de Hardware e Software"

    def __init__(self, ultimo_tipo: TipoTicket = TipoTicket.SOFTWARE):
        self.ultimo_tipo = ultimo_tipo

    def selecionar_proximo(self, tickets: List[TicketEntity]) -> Optional[TicketEntity]:
        pendentes = _pendentes(tickets)
        if not pendentes:
            return None

        proximo_tipo = self.ultimo_tipo.outro
        escolhido = _primeiro([t for t in pendentes if t.tipo == proximo_tipo])
        if escolhido is not None:
            self.ultimo_tipo = proximo_tipo
            return escolhido

        return _primeiro([t for t in pendentes if t.tipo == self.ultimo_tipo]) or _primeiro(pendentes)


# =============================================================================
# Contexto
# =============================================================================

CODIGOS_ESTRATEGIA = ("fifo", "lifo", "prioridade", "hardware", "software", "round_robin")


class ContextoAtendimento:
    """
    Mantém a estratégia ativa e permite trocá-la em tempo de execução.

    Example:
        contexto = ContextoAtendimento()
        contexto.definir_estrategia(ContextoAtendimento.criar_estrategia("prioridade"))
        ticket = contexto.selecionar_proximo(pendentes)
    """

    def __init__(self, estrategia: Optional[EstrategiaAtendimento] = None):
        self._estrategia = estrategia or EstrategiaFIFO()

    @property
    def estrategia(self) -> EstrategiaAtendimento:
        return self._estrategia

    def definir_estrategia(self, estrategia: EstrategiaAtendimento) -> None:
        logger.info(f"Estratégia de atendimento alterada: {self._estrategia.nome} -> {estrategia.nome}")
        self._estrategia = estrategia

    def selecionar_proximo(self, tickets: List[TicketEntity]) -> Optional[TicketEntity]:
        return self._estrategia.selecionar_proximo(tickets)

    @staticmethod
    def criar_estrategia(codigo: str) -> EstrategiaAtendimento:
        """
        Cria estratégia a partir do código.

        Raises:
            ValidationError: Se código desconhecido
        """
        codigo = codigo.strip().lower() if isinstance(codigo, str) else ""
        if codigo == "fifo":
            return EstrategiaFIFO()
        if codigo == "lifo":
            return EstrategiaLIFO()
        if codigo == "prioridade":
            return EstrategiaPrioridade()
        if codigo == "hardware":
            return EstrategiaPorTipo(TipoTicket.HARDWARE)
        if codigo == "software":
            return EstrategiaPorTipo(TipoTicket.SOFTWARE)
        if codigo == "round_robin":
            return EstrategiaRoundRobin()

        raise ValidationError(f"Estratégia desconhecida: {codigo}", field="estrategia")

    @classmethod
    def com_codigo(cls, codigo: str) -> "ContextoAtendimento":
        """Contexto iniciado com a estratégia de `codigo`."""
        return cls(cls.criar_estrategia(codigo))

    @classmethod
    def estrategias_disponiveis(cls) -> List[Dict[str, str]]:
        """Lista código, nome e descrição de cada estratégia."""
        disponiveis = []
        for codigo in CODIGOS_ESTRATEGIA:
            estrategia = cls.criar_estrategia(codigo)
            disponiveis.append({
                "codigo": codigo,
                "nome": estrategia.nome,
                "descricao": estrategia.descricao,
            })
        return disponiveis
