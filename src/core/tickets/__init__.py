"""
Domínio de Tickets - Ciclo de vida e atendimento.

Este módulo contém toda a lógica de negócio relacionada com os
pedidos de suporte de Hardware e Software, incluindo:
- Entidades (TicketEntity, TicketEstado, EstadoAtendimento, TipoTicket)
- Estratégias de atendimento (FIFO, LIFO, Prioridade, Por Tipo, Round Robin)
- Estatísticas (funções puras sobre uma fatia de tickets)
- Use Cases e a fachada GestaoTicketsService
- Domain Events (TicketCriado, TicketAtendido, AtendimentoConcluido)
- DTOs e Ports
"""

from .entities import TicketEntity, TicketEstado, EstadoAtendimento, TipoTicket
from .events import (
    TicketCriadoEvent,
    TicketAtendidoEvent,
    AtendimentoConcluidoEvent,
)
from .dtos import (
    CriarTicketInputDTO,
    AtenderTicketInputDTO,
    ConcluirAtendimentoInputDTO,
    TicketOutputDTO,
)
from .ports import TicketRepository, InMemoryTicketRepository
from .strategies import (
    EstrategiaAtendimento,
    EstrategiaFIFO,
    EstrategiaLIFO,
    EstrategiaPrioridade,
    EstrategiaPorTipo,
    EstrategiaRoundRobin,
    ContextoAtendimento,
)
from .statistics import (
    PeriodoAnalise,
    EstatisticasDashboard,
    EstatisticasTecnico,
    ComparacaoPeriodos,
    DirecaoTendencia,
)
from .use_cases import (
    CriarTicketService,
    AtenderTicketService,
    ConcluirAtendimentoService,
    ObterTicketService,
    ListarTicketsService,
    ProximoTicketService,
    EstatisticasService,
    GestaoTicketsService,
)

__all__ = [
    # Entities
    "TicketEntity",
    "TicketEstado",
    "EstadoAtendimento",
    "TipoTicket",
    # Events
    "TicketCriadoEvent",
    "TicketAtendidoEvent",
    "AtendimentoConcluidoEvent",
    # DTOs
    "CriarTicketInputDTO",
    "AtenderTicketInputDTO",
    "ConcluirAtendimentoInputDTO",
    "TicketOutputDTO",
    # Ports
    "TicketRepository",
    "InMemoryTicketRepository",
    # Strategies
    "EstrategiaAtendimento",
    "EstrategiaFIFO",
    "EstrategiaLIFO",
    "EstrategiaPrioridade",
    "EstrategiaPorTipo",
    "EstrategiaRoundRobin",
    "ContextoAtendimento",
    # Statistics
    "PeriodoAnalise",
    "EstatisticasDashboard",
    "EstatisticasTecnico",
    "ComparacaoPeriodos",
    "DirecaoTendencia",
    # Use Cases
    "CriarTicketService",
    "AtenderTicketService",
    "ConcluirAtendimentoService",
    "ObterTicketService",
    "ListarTicketsService",
    "ProximoTicketService",
    "EstatisticasService",
    "GestaoTicketsService",
]
